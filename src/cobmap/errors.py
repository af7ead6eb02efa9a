"""Error taxonomy for copybook mapping."""

from __future__ import annotations


class MapperError(Exception):
    """Base class for every failure raised while mapping a copybook."""


class UnknownVariantError(MapperError, ValueError):
    """A record or option kind outside the recognized set."""


class UnsupportedFeatureError(MapperError, NotImplementedError):
    """A recognized clause or record kind that the mapper does not handle."""

    def __init__(self, feature: str, context: str | None = None) -> None:
        self.feature = feature
        self.context = context
        message = f"{feature} are not yet supported."
        if context:
            message += f" (from {context})"
        super().__init__(message)


class MalformedInputError(MapperError, ValueError):
    """A level number or numeric literal that is not an integer."""


class CopybookSyntaxError(MapperError, ValueError):
    def __init__(self, message: str, entry: str) -> None:
        self.entry = entry
        super().__init__(f"{message}: {entry!r}")


class NoInputError(MapperError):
    pass
