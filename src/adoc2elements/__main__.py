from adoc2elements.cli import app

app()
