"""Unit tests for brawl_sync.storage.database (transaction scope and schema)."""

from __future__ import annotations

import pytest
from sqlalchemy import inspect, select
from sqlalchemy.exc import IntegrityError

from brawl_sync.storage.database import Database
from brawl_sync.storage.models import Accessory, PlayerBrawler


def _accessory_names(database: Database) -> list[str]:
    return list(database.session.scalars(select(Accessory.name).order_by(Accessory.id)))


@pytest.mark.smoke
class TestSchema:
    def test_create_schema_creates_every_table(self, database: Database) -> None:
        tables = set(inspect(database.engine).get_table_names())
        assert {
            "brawlers",
            "accessories",
            "gears",
            "star_powers",
            "brawler_accessory",
            "brawler_gear",
            "brawler_star_power",
            "event_maps",
            "event_modes",
            "event_modifiers",
            "events",
            "event_event_modifier",
            "event_rotation_slots",
            "event_rotations",
            "clubs",
            "players",
            "player_brawlers",
            "player_brawler_accessory",
            "player_brawler_gear",
            "player_brawler_star_power",
        } <= tables

    def test_create_schema_is_idempotent(self, database: Database) -> None:
        database.create_schema()

    def test_foreign_keys_enforced_on_sqlite(self, database: Database) -> None:
        with pytest.raises(IntegrityError), database.transaction() as session:
            session.add(PlayerBrawler(player_id=999, brawler_id=999, power=1, rank=1, trophies=0, highest_trophies=0))
            session.flush()


class TestTransaction:
    """Outermost scope commits, nested scopes join, any error rolls back everything."""

    @pytest.mark.smoke
    def test_commit_on_success(self, database: Database) -> None:
        with database.transaction() as session:
            session.add(Accessory(ext_id=1, name="A"))
        assert not database.in_transaction
        database.session.rollback()
        assert _accessory_names(database) == ["A"]

    def test_error_rolls_back_and_propagates(self, database: Database) -> None:
        with pytest.raises(RuntimeError), database.transaction() as session:
            session.add(Accessory(ext_id=1, name="A"))
            session.flush()
            raise RuntimeError("boom")
        assert _accessory_names(database) == []

    def test_nested_scope_joins_outer(self, database: Database) -> None:
        with pytest.raises(RuntimeError), database.transaction() as session:
            with database.transaction() as inner:
                assert inner is session
                inner.add(Accessory(ext_id=1, name="inner"))
            assert database.in_transaction
            raise RuntimeError("outer fails after inner finished")
        assert _accessory_names(database) == []

    def test_audit_timestamps_set(self, database: Database) -> None:
        with database.transaction() as session:
            accessory = Accessory(ext_id=1, name="A")
            session.add(accessory)
        assert accessory.created_at is not None
        assert accessory.updated_at is not None
