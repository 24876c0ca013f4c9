"""
`treespec` command line runner.

Loads test files, collects the specs they declare and runs them:

    treespec tests/calculator_spec.py -e "multiplication" -j 4
"""

import logging
import runpy
from pathlib import Path

import typer
from rich.console import Console

from treespec.dsl import Spec, default_spec, reset_default_spec
from treespec.schedulers import Filter, Threaded

logger = logging.getLogger(__name__)

app = typer.Typer(help="Run treespec test files", add_completion=False)
err_console = Console(stderr=True, highlight=False)


def load_specs(files: list[Path]) -> list[Spec]:
    """
    Execute test files and collect the specs they declare.

    Specs bound to module-level names are collected in file order, followed
    by the default spec when any file declared tests on it.

    Params:
        files: Python files declaring tests

    Returns:
        Specs with at least one test
    """
    reset_default_spec()
    specs: list[Spec] = []
    for path in files:
        logger.debug("Loading %s", path)
        namespace = runpy.run_path(str(path), run_name="__treespec__")
        for value in namespace.values():
            if isinstance(value, Spec) and all(value is not spec for spec in specs):
                specs.append(value)

    default = default_spec()
    if all(default is not spec for spec in specs):
        specs.append(default)
    return [spec for spec in specs if not spec.is_empty]


def build_scheduler(spec: Spec, example: str | None, ids: list[str], jobs: int):
    """Apply the command line execution options on top of the spec's own scheduler."""
    scheduler = Threaded(workers=jobs) if jobs > 1 else spec.config.scheduler
    if example:
        scheduler = Filter.by_name(example, scheduler=scheduler)
    if ids:
        scheduler = Filter.by_short_ids(ids, short_id=spec.config.short_id, scheduler=scheduler)
    return scheduler


@app.command()
def main(
    files: list[Path] = typer.Argument(..., exists=True, dir_okay=False, help="Test files to run"),
    example: str | None = typer.Option(
        None, "-e", "--example", help="Only run tests whose full name matches this regex"
    ),
    filter_ids: list[str] | None = typer.Option(
        None, "-f", "--filter", help="Only run the test with this short id, repeatable"
    ),
    jobs: int = typer.Option(1, "-j", "--jobs", min=1, help="Run tests on this many threads"),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Enable debug logging"),
):
    """Run the tests declared in FILES. Exits with 1 when any test fails."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG, format="%(asctime)s %(name)s %(levelname)s %(message)s"
        )

    try:
        specs = load_specs(files)
    except Exception as exc:
        err_console.print(f"Error loading tests: {type(exc).__name__}: {exc}", style="red")
        raise typer.Exit(code=2) from exc

    if not specs:
        err_console.print("No tests found", style="yellow")
        raise typer.Exit(code=0)

    results = [
        spec.run(scheduler=build_scheduler(spec, example, filter_ids or [], jobs))
        for spec in specs
    ]
    raise typer.Exit(code=0 if all(results) else 1)


if __name__ == "__main__":
    app()
