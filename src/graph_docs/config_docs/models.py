"""Setting metadata as read from a host registry and as documented."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable


class MissingValueError(LookupError):
    """A setting has no value the registry can report."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"No value available for setting {name!r}")


@dataclass(frozen=True)
class ConfigValue:
    """Raw metadata for one configuration key, as exposed by a registry."""

    name: str
    description: str | None = None
    value: Any = None
    documented_default: str | None = None
    value_description: str = ""
    deprecated: bool = False
    internal: bool = False
    dynamic: bool = False
    replacement: str | None = None

    def require_value(self) -> Any:
        """Return the current value, raising ``MissingValueError`` when there is none."""
        if self.value is None:
            raise MissingValueError(self.name)
        return self.value


@dataclass(frozen=True)
class SettingDescription:
    """Documentation view of one setting; one instance per key per run."""

    id: str
    name: str
    description: str | None
    validation_message: str
    default_value: str | None = None
    deprecated: bool = False
    internal: bool = False
    dynamic: bool = False
    replaced_by: str | None = None

    @property
    def has_default(self) -> bool:
        return self.default_value is not None

    @property
    def has_replacement(self) -> bool:
        return bool(self.replaced_by)

    @property
    def deprecation_message(self) -> str:
        return f"The `{self.name}` configuration setting has been deprecated."

    def formatted(self, fmt: Callable[[str], str]) -> SettingDescription:
        """Return a copy with *fmt* applied to the free-text description."""
        if self.description is None:
            return self
        return replace(self, description=fmt(self.description))
