"""Command-line interface for brawl_sync."""
