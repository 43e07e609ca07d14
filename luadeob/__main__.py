from luadeob.cli import app

app()
