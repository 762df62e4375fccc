from contractrest.cli.app import app

app()
