from __future__ import annotations

from dataclasses import dataclass


@dataclass(eq=False)
class StatsDecodeError(ValueError):
    """Decoding failed because the response does not have the expected shape.

    Decode errors reflect response shape, not transient failure; callers should
    not retry on them.
    """

    message: str
    context: dict[str, object] | None = None

    def __str__(self) -> str:
        if not self.context:
            return self.message
        return f"{self.message} | context={self.context}"


class DiscriminatorMismatch(StatsDecodeError):
    """A `type` tag is unknown, or known but wrong for the requested aggregation."""


class MissingRequiredData(StatsDecodeError):
    """A team role list required by the requested aggregation is empty."""


class MalformedValue(StatsDecodeError):
    """A field could not be read as its expected scalar/array/object shape."""
