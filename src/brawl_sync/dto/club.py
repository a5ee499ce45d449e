"""Club and club-member DTOs."""

from __future__ import annotations

from typing import TYPE_CHECKING, Literal, Self

from pydantic import Field, field_validator

from brawl_sync.dto.base import DTO, NonEmptyStr, Numeric, unique_by
from brawl_sync.dto.player import IconDTO

if TYPE_CHECKING:
    from brawl_sync.storage.models import Club, Player

ClubType = Literal["social", "competitive", "casual"]


class ClubMemberDTO(DTO):
    """A player as listed in a club's member roster."""

    entity_label = "ClubMember"

    tag: NonEmptyStr
    name: NonEmptyStr
    name_color: NonEmptyStr = Field(alias="nameColor")
    role: NonEmptyStr
    trophies: Numeric
    icon: IconDTO

    @classmethod
    def from_entity(cls, player: Player) -> Self:
        return cls.from_record({
            "tag": player.tag,
            "name": player.name,
            "nameColor": player.name_color,
            "role": player.club_role,
            "trophies": player.trophies,
            "icon": {"id": player.icon_id},
        })


class ClubDTO(DTO):
    """A club with its member roster."""

    entity_label = "Club"
    unordered_fields = ("members",)

    tag: NonEmptyStr
    name: NonEmptyStr
    description: NonEmptyStr
    type: ClubType
    badge_id: Numeric = Field(alias="badgeId")
    required_trophies: Numeric = Field(alias="requiredTrophies")
    trophies: Numeric
    members: tuple[ClubMemberDTO, ...]

    @field_validator("members")
    @classmethod
    def _drop_duplicates(cls, value: tuple[ClubMemberDTO, ...]) -> tuple[ClubMemberDTO, ...]:
        return unique_by(value, lambda member: member.tag)

    @classmethod
    def from_entity(cls, club: Club) -> Self:
        """Build from a stored club; ``members`` must be loaded."""
        return cls.from_record({
            "tag": club.tag,
            "name": club.name,
            "description": club.description,
            "type": club.type,
            "badgeId": club.badge_id,
            "requiredTrophies": club.required_trophies,
            "trophies": club.trophies,
            "members": [ClubMemberDTO.from_entity(member).to_record() for member in club.members],
        })
