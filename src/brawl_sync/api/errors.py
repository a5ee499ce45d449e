"""Exception hierarchy shared by the API client, DTO factories and parser.

Every error carries a human-readable ``message``, an HTTP-style ``code`` and
the ``original`` exception it wraps (if any), so callers can report failures
without coupling to the layer that raised them.
"""

from __future__ import annotations


class BrawlSyncError(Exception):
    """Base exception for all sync pipeline errors."""

    default_code: int = 500

    def __init__(
        self,
        message: str,
        code: int | None = None,
        original: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code if code is not None else self.default_code
        self.original = original

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r}, code={self.code})"


class InvalidDTOError(BrawlSyncError):
    """A raw record (API payload or persisted entity) does not fit the DTO shape."""

    default_code = 400

    @classmethod
    def from_exception(cls, exc: BaseException) -> InvalidDTOError:
        """Wrap an inner validation failure, e.g. a bad child object, with code 422."""
        return cls(str(exc), code=422, original=exc)


class ResponseError(BrawlSyncError):
    """The upstream API could not be reached or answered with an unusable body."""

    @classmethod
    def from_exception(cls, exc: BaseException) -> ResponseError:
        """Wrap a transport-layer failure (code 500)."""
        return cls(f"API Request Error: {exc}", code=500, original=exc)


class ConfigurationError(BrawlSyncError):
    """Settings are missing or invalid."""

    default_code = 400
