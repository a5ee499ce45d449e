"""Repositories for events, their lookup tables and the event rotation."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TypeVar

from sqlalchemy.orm import selectinload

from brawl_sync.dto.event import EventDTO, EventRotationDTO
from brawl_sync.repositories.base import Filter, Repository, equals
from brawl_sync.storage.database import Database
from brawl_sync.storage.models import (
    Event,
    EventMap,
    EventMode,
    EventModifier,
    EventRotation,
    EventRotationSlot,
)
from brawl_sync.utils.logger import VERBOSE

logger = logging.getLogger(__name__)

Named = TypeVar("Named", EventMap, EventMode, EventModifier)

_EVENT_RELATIONS = (
    selectinload(Event.map),
    selectinload(Event.mode),
    selectinload(Event.modifiers),
)

# ---------------------------------------------------------------------------
# Lookup tables
# ---------------------------------------------------------------------------


class _NamedRepository(Repository[Named]):
    """Lookup rows identified solely by their unique ``name``."""

    def filters(self) -> dict[str, Filter]:
        return {
            "id": equals(self.model.id),  # type: ignore[attr-defined]
            "name": equals(self.model.name),  # type: ignore[attr-defined]
        }

    def create_or_update(self, name: str) -> Named:
        with self.database.transaction():
            return self._upsert({"name": name}, {})


class EventMapRepository(_NamedRepository[EventMap]):
    model = EventMap


class EventModeRepository(_NamedRepository[EventMode]):
    model = EventMode


class EventModifierRepository(_NamedRepository[EventModifier]):
    model = EventModifier


class EventRotationSlotRepository(Repository[EventRotationSlot]):
    model = EventRotationSlot

    def filters(self) -> dict[str, Filter]:
        return {"id": equals(EventRotationSlot.id), "position": equals(EventRotationSlot.position)}

    def create_or_update(self, position: int) -> EventRotationSlot:
        with self.database.transaction():
            return self._upsert({"position": position}, {})


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------


class EventRepository(Repository[Event]):
    """Events with their map, mode and modifier set."""

    model = Event

    def __init__(
        self,
        database: Database,
        maps: EventMapRepository,
        modes: EventModeRepository,
        modifiers: EventModifierRepository,
    ) -> None:
        super().__init__(database)
        self.maps = maps
        self.modes = modes
        self.modifiers = modifiers

    def filters(self) -> dict[str, Filter]:
        return {
            "id": equals(Event.id),
            "ext_id": equals(Event.ext_id),
            "map_id": equals(Event.map_id),
            "mode_id": equals(Event.mode_id),
        }

    def create_or_update(self, dto: EventDTO) -> Event:
        """Upsert the event, resolving map and mode by name and reconciling modifiers."""
        with self.database.transaction():
            event_map = self.maps.create_or_update(dto.map)
            mode = self.modes.create_or_update(dto.mode)
            event = self._upsert({"ext_id": dto.id}, {"map": event_map, "mode": mode})
            modifiers = [self.modifiers.create_or_update(name) for name in dto.modifiers]
            self._reconcile(event.modifiers, modifiers)
        return self._reload(event.id, *_EVENT_RELATIONS)


class EventRotationRepository(Repository[EventRotation]):
    """Rotation entries, unique per (start time, end time, slot)."""

    model = EventRotation

    def __init__(
        self,
        database: Database,
        events: EventRepository,
        slots: EventRotationSlotRepository,
    ) -> None:
        super().__init__(database)
        self.events = events
        self.slots = slots

    def filters(self) -> dict[str, Filter]:
        return {
            "id": equals(EventRotation.id),
            "start_time": equals(EventRotation.start_time),
            "end_time": equals(EventRotation.end_time),
            "slot_id": equals(EventRotation.slot_id),
            "event_id": equals(EventRotation.event_id),
        }

    def create_or_update(self, dto: EventRotationDTO) -> EventRotation:
        with self.database.transaction():
            event = self.events.create_or_update(dto.event)
            slot = self.slots.create_or_update(dto.slot)
            rotation = self._upsert(
                {"start_time": dto.start_at, "end_time": dto.end_at, "slot_id": slot.id},
                {"event_id": event.id},
            )
        logger.log(VERBOSE, "rotation slot %d: event %d from %s", dto.slot, dto.event.id, dto.start_time)
        return self._reload(
            rotation.id,
            selectinload(EventRotation.slot),
            selectinload(EventRotation.event).options(*_EVENT_RELATIONS),
        )

    def create_or_update_many(self, dtos: Iterable[EventRotationDTO]) -> list[EventRotation]:
        """Upsert each rotation entry in its own transaction (no batch atomicity)."""
        return [self.create_or_update(dto) for dto in dtos]
