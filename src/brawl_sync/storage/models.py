"""SQLAlchemy 2.0 ORM entities for the synchronized game data.

Tables:
- brawlers, accessories, gears, star_powers    brawler catalog
- brawler_accessory / brawler_gear / brawler_star_power    catalog pivots
- event_maps, event_modes, event_modifiers, events, event_event_modifier
- event_rotation_slots, event_rotations
- clubs, players
- player_brawlers    a player's roster (association object)
- player_brawler_accessory / player_brawler_star_power    equipped items
- player_brawler_gear    equipped gears, carrying the gear level

Every entity has a surrogate integer ``id`` plus ``created_at`` /
``updated_at`` audit columns (naive UTC).  Upstream identities (``ext_id``,
``name``, ``position``, ``tag``) are unique columns.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Table,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


def utcnow() -> datetime:
    """Current time as a naive UTC datetime (the storage convention)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


# ---------------------------------------------------------------------------
# Base
# ---------------------------------------------------------------------------


class Base(DeclarativeBase):
    """Shared base for all brawl_sync ORM models."""


class Audited:
    """Surrogate key and audit timestamps shared by every entity."""

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)


def _pivot(name: str, left: tuple[str, str], right: tuple[str, str]) -> Table:
    """Many-to-many link table; *left*/*right* are ``(table, key column)`` pairs."""
    (left_table, left_column), (right_table, right_column) = left, right
    return Table(
        name,
        Base.metadata,
        Column("id", Integer, primary_key=True),
        Column(left_column, ForeignKey(f"{left_table}.id", ondelete="CASCADE"), nullable=False),
        Column(right_column, ForeignKey(f"{right_table}.id", ondelete="CASCADE"), nullable=False),
        Column("created_at", DateTime, default=utcnow),
        UniqueConstraint(left_column, right_column),
    )


_BRAWLER = ("brawlers", "brawler_id")
_PLAYER_BRAWLER = ("player_brawlers", "player_brawler_id")

brawler_accessory = _pivot("brawler_accessory", _BRAWLER, ("accessories", "accessory_id"))
brawler_gear = _pivot("brawler_gear", _BRAWLER, ("gears", "gear_id"))
brawler_star_power = _pivot("brawler_star_power", _BRAWLER, ("star_powers", "star_power_id"))
event_event_modifier = _pivot(
    "event_event_modifier", ("events", "event_id"), ("event_modifiers", "event_modifier_id")
)
player_brawler_accessory = _pivot(
    "player_brawler_accessory", _PLAYER_BRAWLER, ("accessories", "accessory_id")
)
player_brawler_star_power = _pivot(
    "player_brawler_star_power", _PLAYER_BRAWLER, ("star_powers", "star_power_id")
)


# ---------------------------------------------------------------------------
# Brawler catalog
# ---------------------------------------------------------------------------


class Accessory(Audited, Base):
    __tablename__ = "accessories"

    ext_id: Mapped[int] = mapped_column(Integer, unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)


class Gear(Audited, Base):
    __tablename__ = "gears"

    ext_id: Mapped[int] = mapped_column(Integer, unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)


class StarPower(Audited, Base):
    __tablename__ = "star_powers"

    ext_id: Mapped[int] = mapped_column(Integer, unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)


class Brawler(Audited, Base):
    __tablename__ = "brawlers"

    ext_id: Mapped[int] = mapped_column(Integer, unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)

    accessories: Mapped[list[Accessory]] = relationship(
        secondary=brawler_accessory, order_by=Accessory.id
    )
    gears: Mapped[list[Gear]] = relationship(secondary=brawler_gear, order_by=Gear.id)
    star_powers: Mapped[list[StarPower]] = relationship(
        secondary=brawler_star_power, order_by=StarPower.id
    )


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------


class EventMap(Audited, Base):
    __tablename__ = "event_maps"

    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)


class EventMode(Audited, Base):
    __tablename__ = "event_modes"

    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)


class EventModifier(Audited, Base):
    __tablename__ = "event_modifiers"

    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)


class Event(Audited, Base):
    __tablename__ = "events"

    ext_id: Mapped[int] = mapped_column(Integer, unique=True, nullable=False)
    map_id: Mapped[int] = mapped_column(ForeignKey("event_maps.id"), nullable=False)
    mode_id: Mapped[int] = mapped_column(ForeignKey("event_modes.id"), nullable=False)

    map: Mapped[EventMap] = relationship()
    mode: Mapped[EventMode] = relationship()
    modifiers: Mapped[list[EventModifier]] = relationship(
        secondary=event_event_modifier, order_by=EventModifier.id
    )


class EventRotationSlot(Audited, Base):
    __tablename__ = "event_rotation_slots"

    position: Mapped[int] = mapped_column(Integer, unique=True, nullable=False)


class EventRotation(Audited, Base):
    __tablename__ = "event_rotations"
    __table_args__ = (UniqueConstraint("start_time", "end_time", "slot_id"),)

    start_time: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    end_time: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    slot_id: Mapped[int] = mapped_column(ForeignKey("event_rotation_slots.id"), nullable=False)
    event_id: Mapped[int] = mapped_column(ForeignKey("events.id"), nullable=False)

    slot: Mapped[EventRotationSlot] = relationship()
    event: Mapped[Event] = relationship()


# ---------------------------------------------------------------------------
# Clubs and players
# ---------------------------------------------------------------------------


class Club(Audited, Base):
    __tablename__ = "clubs"

    tag: Mapped[str] = mapped_column(String(20), unique=True, nullable=False)
    # Clubs first seen as a player's reference carry only tag and name.
    name: Mapped[str | None] = mapped_column(String(100), default=None)
    description: Mapped[str | None] = mapped_column(Text, default=None)
    type: Mapped[str | None] = mapped_column(String(20), default=None)
    badge_id: Mapped[int | None] = mapped_column(Integer, default=None)
    required_trophies: Mapped[int | None] = mapped_column(Integer, default=None)
    trophies: Mapped[int | None] = mapped_column(Integer, default=None)

    members: Mapped[list[Player]] = relationship(back_populates="club", order_by="Player.id")


class Player(Audited, Base):
    __tablename__ = "players"

    tag: Mapped[str] = mapped_column(String(20), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    name_color: Mapped[str] = mapped_column(String(20), nullable=False)
    icon_id: Mapped[int] = mapped_column(Integer, nullable=False)
    trophies: Mapped[int] = mapped_column(Integer, nullable=False)
    highest_trophies: Mapped[int | None] = mapped_column(Integer, default=None)
    exp_level: Mapped[int | None] = mapped_column(Integer, default=None)
    exp_points: Mapped[int | None] = mapped_column(Integer, default=None)
    is_qualified_from_championship_challenge: Mapped[bool | None] = mapped_column(
        Boolean, default=None
    )
    solo_victories: Mapped[int | None] = mapped_column(Integer, default=None)
    duo_victories: Mapped[int | None] = mapped_column(Integer, default=None)
    trio_victories: Mapped[int | None] = mapped_column(Integer, default=None)
    best_robo_rumble_time: Mapped[int | None] = mapped_column(Integer, default=None)
    best_time_as_big_brawler: Mapped[int | None] = mapped_column(Integer, default=None)
    club_id: Mapped[int | None] = mapped_column(
        ForeignKey("clubs.id", ondelete="SET NULL"), default=None
    )
    club_role: Mapped[str | None] = mapped_column(String(30), default=None)

    club: Mapped[Club | None] = relationship(back_populates="members")
    brawlers: Mapped[list[PlayerBrawler]] = relationship(
        back_populates="player", cascade="all, delete-orphan", order_by="PlayerBrawler.id"
    )


class PlayerBrawler(Audited, Base):
    __tablename__ = "player_brawlers"
    __table_args__ = (UniqueConstraint("player_id", "brawler_id"),)

    player_id: Mapped[int] = mapped_column(
        ForeignKey("players.id", ondelete="CASCADE"), nullable=False
    )
    brawler_id: Mapped[int] = mapped_column(ForeignKey("brawlers.id"), nullable=False)
    power: Mapped[int] = mapped_column(Integer, nullable=False)
    rank: Mapped[int] = mapped_column(Integer, nullable=False)
    trophies: Mapped[int] = mapped_column(Integer, nullable=False)
    highest_trophies: Mapped[int] = mapped_column(Integer, nullable=False)

    player: Mapped[Player] = relationship(back_populates="brawlers")
    brawler: Mapped[Brawler] = relationship()
    accessories: Mapped[list[Accessory]] = relationship(
        secondary=player_brawler_accessory, order_by=Accessory.id
    )
    star_powers: Mapped[list[StarPower]] = relationship(
        secondary=player_brawler_star_power, order_by=StarPower.id
    )
    gear_links: Mapped[list[PlayerBrawlerGear]] = relationship(
        back_populates="player_brawler",
        cascade="all, delete-orphan",
        order_by="PlayerBrawlerGear.id",
    )


class PlayerBrawlerGear(Audited, Base):
    """A gear equipped on a player's brawler, at a given upgrade level."""

    __tablename__ = "player_brawler_gear"
    __table_args__ = (UniqueConstraint("player_brawler_id", "gear_id"),)

    player_brawler_id: Mapped[int] = mapped_column(
        ForeignKey("player_brawlers.id", ondelete="CASCADE"), nullable=False
    )
    gear_id: Mapped[int] = mapped_column(ForeignKey("gears.id"), nullable=False)
    level: Mapped[int] = mapped_column(Integer, nullable=False)

    player_brawler: Mapped[PlayerBrawler] = relationship(back_populates="gear_links")
    gear: Mapped[Gear] = relationship()
