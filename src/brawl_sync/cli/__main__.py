"""Allow ``python -m brawl_sync.cli``."""

from brawl_sync.cli.main import app

app()
