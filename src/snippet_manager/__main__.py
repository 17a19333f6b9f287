from snippet_manager.cli.main import cli

cli(prog_name="snippet")
