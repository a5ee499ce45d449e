"""brawl_sync: keep a relational copy of the game-data API up to date.

The pipeline runs API client -> DTO validation -> repository upsert, with
:class:`brawl_sync.parser.Parser` orchestrating each round trip.
"""

__version__ = "0.1.0"
