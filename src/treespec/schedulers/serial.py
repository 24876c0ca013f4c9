from treespec.schedulers.base import Scheduler


class Serial(Scheduler):
    """Runs every unit of work in declaration order on the calling thread."""

    def _run(self, context, config) -> bool:
        notifier = config.notifier
        notifier.run_start(config)
        for nested_unit_of_work in context.flatten():
            self.evaluate(nested_unit_of_work, notifier)
        return notifier.run_finish()
