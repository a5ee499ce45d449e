"""Shared machinery for the immutable data-transfer objects.

Every DTO is a frozen pydantic model whose field aliases are the upstream
API's key names.  Validation failures are translated into a single
:class:`~brawl_sync.api.errors.InvalidDTOError` that names the FIRST
offending field (nested children included, e.g. ``gadgets.0.name``), so the
caller always sees one precise reason instead of pydantic's full report.
"""

from __future__ import annotations

import json
import math
import re
from collections.abc import Callable, Hashable, Iterable
from typing import Annotated, Any, ClassVar, Self, TypeVar

from pydantic import (
    AfterValidator,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    StrictStr,
    ValidationError,
)

from brawl_sync.api.errors import InvalidDTOError

T = TypeVar("T")

_NUMERIC_TEXT = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")

# ---------------------------------------------------------------------------
# Field types
# ---------------------------------------------------------------------------


def _coerce_numeric(value: object) -> object:
    """Accept ints, finite floats and numeric strings; truncate to ``int``."""
    if isinstance(value, bool):
        raise ValueError("expected a number, got a boolean")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ValueError("expected a finite number")
        return int(value)
    if isinstance(value, str):
        text = value.strip()
        if not _NUMERIC_TEXT.fullmatch(text):
            raise ValueError(f"expected a number, got {value!r}")
        if text.lstrip("+-").isdigit():
            return int(text)
        number = float(text)
        if not math.isfinite(number):
            raise ValueError("expected a finite number")
        return int(number)
    raise ValueError(f"expected a number, got {type(value).__name__}")


def _require_text(value: str) -> str:
    if not value.strip():
        raise ValueError("must not be blank")
    return value


Numeric = Annotated[int, BeforeValidator(_coerce_numeric)]
"""Integer field fed by any numeric representation (booleans excluded)."""

NonEmptyStr = Annotated[StrictStr, AfterValidator(_require_text)]
"""A real, non-blank string."""


def unique_by(items: Iterable[T], key: Callable[[T], Hashable]) -> tuple[T, ...]:
    """Drop items whose *key* was already seen; the first occurrence wins."""
    seen: set[Hashable] = set()
    kept: list[T] = []
    for item in items:
        identity = key(item)
        if identity in seen:
            continue
        seen.add(identity)
        kept.append(item)
    return tuple(kept)


def _first_error(exc: ValidationError, label: str) -> InvalidDTOError:
    """Translate the first pydantic error into an :class:`InvalidDTOError`.

    A failure inside a child object (``gadgets.0.name``, ``icon.id``) is an
    inner validation failure and gets wrapped (code 422); anything else is a
    structural error of the record itself (code 400).
    """
    error = exc.errors(include_url=False)[0]
    loc = error["loc"]
    location = ".".join(str(part) for part in loc)
    if not location:
        return InvalidDTOError(f"Invalid structure of {label} data: {error['msg']}", original=exc)
    inner = InvalidDTOError(
        f"Invalid or missing '{location}' field in {label} data: {error['msg']}", original=exc
    )
    if any(isinstance(part, str) for part in loc[1:]):
        return InvalidDTOError.from_exception(inner)
    return inner


# ---------------------------------------------------------------------------
# DTO base
# ---------------------------------------------------------------------------


class DTO(BaseModel):
    """Base class for all data-transfer objects.

    Subclasses set ``entity_label`` (used in error messages) and list their
    set-valued collections in ``unordered_fields``; equality and hashing
    ignore the order of those collections.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    entity_label: ClassVar[str] = "DTO"
    unordered_fields: ClassVar[tuple[str, ...]] = ()

    @classmethod
    def from_record(cls, raw: object) -> Self:
        """Validate a decoded JSON mapping.

        Raises:
            InvalidDTOError: Naming the first missing or invalid field.
        """
        try:
            return cls.model_validate(raw)
        except ValidationError as exc:
            raise _first_error(exc, cls.entity_label) from exc

    @classmethod
    def from_list(cls, raw: object) -> list[Self]:
        """Validate every element of a decoded JSON list; one failure aborts all."""
        if not isinstance(raw, list):
            raise InvalidDTOError(f"Invalid {cls.entity_label} list data: expected a list")
        return [cls.from_record(item) for item in raw]

    def to_record(self) -> dict[str, Any]:
        """Dump to a JSON-compatible dict keyed by upstream names, omitting absent optionals."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    def to_json(self) -> str:
        return json.dumps(self.to_record())

    def _comparable(self) -> tuple[object, ...]:
        values: list[object] = []
        for name in type(self).model_fields:
            value = getattr(self, name)
            if name in self.unordered_fields and value is not None:
                value = frozenset(value)
            values.append(value)
        return tuple(values)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DTO) or type(other) is not type(self):
            return NotImplemented
        return self._comparable() == other._comparable()

    def __hash__(self) -> int:
        return hash((type(self).__name__, self._comparable()))
