"""Repositories for the brawler catalog: accessories, gears, star powers, brawlers."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from typing import TypeVar

from sqlalchemy.orm import selectinload

from brawl_sync.dto.brawler import AccessoryDTO, BrawlerDTO, GearDTO, StarPowerDTO
from brawl_sync.repositories.base import Filter, Repository, contains, equals
from brawl_sync.storage.database import Database
from brawl_sync.storage.models import Accessory, Brawler, Gear, StarPower
from brawl_sync.utils.logger import VERBOSE

logger = logging.getLogger(__name__)

Item = TypeVar("Item", Accessory, Gear, StarPower)


class _CatalogItemRepository(Repository[Item]):
    """Items identified by ``ext_id`` whose only mutable attribute is ``name``."""

    def filters(self) -> dict[str, Filter]:
        return {
            "id": equals(self.model.id),  # type: ignore[attr-defined]
            "ext_id": equals(self.model.ext_id),  # type: ignore[attr-defined]
            "name": contains(self.model.name),  # type: ignore[attr-defined]
        }

    def create_or_update(self, dto: AccessoryDTO | GearDTO | StarPowerDTO) -> Item:
        with self.database.transaction():
            return self._upsert({"ext_id": dto.ext_id}, {"name": dto.name})


class AccessoryRepository(_CatalogItemRepository[Accessory]):
    model = Accessory


class GearRepository(_CatalogItemRepository[Gear]):
    """Canonical gears; the per-player ``level`` lives on the player's roster."""

    model = Gear


class StarPowerRepository(_CatalogItemRepository[StarPower]):
    model = StarPower


class BrawlerRepository(Repository[Brawler]):
    """Brawlers together with their accessory and star-power sets."""

    model = Brawler

    def __init__(
        self,
        database: Database,
        accessories: AccessoryRepository,
        star_powers: StarPowerRepository,
    ) -> None:
        super().__init__(database)
        self.accessories = accessories
        self.star_powers = star_powers

    def filters(self) -> dict[str, Filter]:
        return {
            "id": equals(Brawler.id),
            "ext_id": equals(Brawler.ext_id),
            "name": contains(Brawler.name),
        }

    def create_or_update(self, dto: BrawlerDTO) -> Brawler:
        """Upsert the brawler and make its accessory and star-power sets match *dto*.

        Accessories and star powers no longer listed are detached from the
        brawler but stay in storage.
        """
        with self.database.transaction():
            brawler = self._upsert({"ext_id": dto.ext_id}, {"name": dto.name})
            accessories = [self.accessories.create_or_update(item) for item in dto.accessories]
            star_powers = [self.star_powers.create_or_update(item) for item in dto.star_powers]
            self._reconcile(brawler.accessories, accessories)
            self._reconcile(brawler.star_powers, star_powers)
        logger.log(VERBOSE, "brawler %d (%s) synced", dto.ext_id, dto.name)
        return self.reload(brawler.id)

    def create_or_update_many(self, dtos: Iterable[BrawlerDTO]) -> list[Brawler]:
        """Upsert each brawler in its own transaction (no batch atomicity)."""
        return [self.create_or_update(dto) for dto in dtos]

    def attach_items(
        self,
        brawler: Brawler,
        accessories: Sequence[Accessory] = (),
        gears: Sequence[Gear] = (),
        star_powers: Sequence[StarPower] = (),
    ) -> None:
        """Add items to the brawler's catalog sets without detaching any."""
        with self.database.transaction():
            for current, items in (
                (brawler.accessories, accessories),
                (brawler.gears, gears),
                (brawler.star_powers, star_powers),
            ):
                for item in items:
                    if item not in current:
                        current.append(item)
            self.session.flush()

    def reload(self, brawler_id: int) -> Brawler:
        return self._reload(
            brawler_id,
            selectinload(Brawler.accessories),
            selectinload(Brawler.gears),
            selectinload(Brawler.star_powers),
        )
