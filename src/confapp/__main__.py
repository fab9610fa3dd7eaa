from confapp.cli.main import run

run()
