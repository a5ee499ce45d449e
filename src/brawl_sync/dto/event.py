"""Event and event-rotation DTOs.

Rotation timestamps are compact ISO-8601 strings with microseconds, such as
``20251225T133000.000000Z``.  Shorter fractions (``.000Z``) are accepted and
normalized to six digits, so a timestamp read back from storage equals the
one that was written.  ``start_at`` / ``end_at`` expose the parsed (naive,
UTC) datetime.
"""

from __future__ import annotations

import datetime
from typing import TYPE_CHECKING, Annotated, Self

from pydantic import AfterValidator, Field, StrictStr, field_validator

from brawl_sync.dto.base import DTO, NonEmptyStr, Numeric, unique_by

if TYPE_CHECKING:
    from brawl_sync.storage.models import Event, EventRotation

TIMESTAMP_FORMAT = "%Y%m%dT%H%M%S.%fZ"


def parse_timestamp(value: str) -> datetime.datetime:
    """Parse an upstream rotation timestamp into a naive UTC datetime."""
    return datetime.datetime.strptime(value, TIMESTAMP_FORMAT)


def format_timestamp(value: datetime.datetime) -> str:
    """Inverse of :func:`parse_timestamp`; always six fractional digits."""
    return value.strftime(TIMESTAMP_FORMAT)


def _normalize_timestamp(value: str) -> str:
    return format_timestamp(parse_timestamp(value))


Timestamp = Annotated[StrictStr, AfterValidator(_normalize_timestamp)]


class EventDTO(DTO):
    """A game event: one map played in one mode, with optional modifiers."""

    entity_label = "Event"
    unordered_fields = ("modifiers",)

    id: Numeric
    map: NonEmptyStr
    mode: NonEmptyStr
    modifiers: tuple[NonEmptyStr, ...] = ()

    @field_validator("modifiers", mode="before")
    @classmethod
    def _absent_modifiers(cls, value: object) -> object:
        return () if value is None else value

    @field_validator("modifiers")
    @classmethod
    def _drop_duplicates(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        return unique_by(value, lambda name: name)

    @classmethod
    def from_entity(cls, event: Event) -> Self:
        """Build from a stored event; ``map``, ``mode`` and ``modifiers`` must be loaded."""
        return cls.from_record({
            "id": event.ext_id,
            "map": event.map.name,
            "mode": event.mode.name,
            "modifiers": [modifier.name for modifier in event.modifiers],
        })


class EventRotationDTO(DTO):
    """One event scheduled into a rotation slot for a time window."""

    entity_label = "EventRotation"

    start_time: Timestamp = Field(alias="startTime")
    end_time: Timestamp = Field(alias="endTime")
    slot: Numeric = Field(alias="slotId")
    event: EventDTO

    @property
    def start_at(self) -> datetime.datetime:
        return parse_timestamp(self.start_time)

    @property
    def end_at(self) -> datetime.datetime:
        return parse_timestamp(self.end_time)

    @classmethod
    def from_entity(cls, rotation: EventRotation) -> Self:
        """Build from a stored rotation; ``slot`` and the full ``event`` must be loaded."""
        return cls.from_record({
            "startTime": format_timestamp(rotation.start_time),
            "endTime": format_timestamp(rotation.end_time),
            "slotId": rotation.slot.position,
            "event": EventDTO.from_entity(rotation.event).to_record(),
        })
