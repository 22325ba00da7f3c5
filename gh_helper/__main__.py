from gh_helper.cli.main import run

run()
