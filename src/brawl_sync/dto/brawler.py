"""Brawler DTOs and their accessory, gear and star-power children."""

from __future__ import annotations

from typing import TYPE_CHECKING, Self

from pydantic import Field, field_validator

from brawl_sync.dto.base import DTO, NonEmptyStr, Numeric, unique_by

if TYPE_CHECKING:
    from brawl_sync.storage.models import Accessory, Brawler, Gear, StarPower


class AccessoryDTO(DTO):
    """A gadget (called *accessory* in storage)."""

    entity_label = "Accessory"

    ext_id: Numeric = Field(alias="id")
    name: NonEmptyStr

    @classmethod
    def from_entity(cls, accessory: Accessory) -> Self:
        return cls.from_record({"id": accessory.ext_id, "name": accessory.name})


class StarPowerDTO(DTO):
    """A brawler star power."""

    entity_label = "StarPower"

    ext_id: Numeric = Field(alias="id")
    name: NonEmptyStr

    @classmethod
    def from_entity(cls, star_power: StarPower) -> Self:
        return cls.from_record({"id": star_power.ext_id, "name": star_power.name})


class GearDTO(DTO):
    """A gear as owned by a player's brawler, including its upgrade level."""

    entity_label = "Gear"

    ext_id: Numeric = Field(alias="id")
    name: NonEmptyStr
    level: Numeric

    @classmethod
    def from_entity(cls, gear: Gear, level: int) -> Self:
        return cls.from_record({"id": gear.ext_id, "name": gear.name, "level": level})


class BrawlerDTO(DTO):
    """A playable character with its catalog of accessories and star powers."""

    entity_label = "Brawler"
    unordered_fields = ("accessories", "star_powers")

    ext_id: Numeric = Field(alias="id")
    name: NonEmptyStr
    accessories: tuple[AccessoryDTO, ...] = Field(alias="gadgets")
    star_powers: tuple[StarPowerDTO, ...] = Field(alias="starPowers")

    @field_validator("accessories", "star_powers")
    @classmethod
    def _drop_duplicates(
        cls, value: tuple[AccessoryDTO | StarPowerDTO, ...]
    ) -> tuple[AccessoryDTO | StarPowerDTO, ...]:
        return unique_by(value, lambda item: item.ext_id)

    @classmethod
    def from_entity(cls, brawler: Brawler) -> Self:
        """Build from a stored brawler; ``accessories`` and ``star_powers`` must be loaded."""
        return cls.from_record({
            "id": brawler.ext_id,
            "name": brawler.name,
            "gadgets": [AccessoryDTO.from_entity(a).to_record() for a in brawler.accessories],
            "starPowers": [StarPowerDTO.from_entity(s).to_record() for s in brawler.star_powers],
        })
