from treespec.cli import app

app(prog_name="treespec")
