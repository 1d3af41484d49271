"""Allow ``python -m glossary``."""

from glossary.cli.main import app

app(prog_name="glossary")
