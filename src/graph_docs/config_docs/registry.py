"""Sources of configuration metadata.

Three registries feed the config reference generator:

* ``load_json_registry``: a metadata file exported from the server build,
* ``fetch_server_registry``: ``SHOW SETTINGS`` on a running server,
* ``settings_model_registry``: a pydantic-settings class (graph-docs uses it
  to document its own configuration).
"""

from __future__ import annotations

import importlib
import json
from datetime import timedelta
from pathlib import Path
from typing import TYPE_CHECKING, Any, get_args, get_origin

from loguru import logger
from pydantic import BaseModel, ValidationError
from pydantic_settings import BaseSettings

from graph_docs.config_docs.models import ConfigValue

if TYPE_CHECKING:
    from pydantic.fields import FieldInfo

    from graph_docs.graph.client import GraphClient


class RegistryError(Exception):
    """Configuration metadata could not be loaded."""


# ---------------------------------------------------------------------------
# JSON metadata files
# ---------------------------------------------------------------------------


class _SettingRecord(BaseModel):
    """Schema of one entry in a JSON metadata file."""

    name: str
    description: str | None = None
    value: Any = None
    default: Any = None
    documented_default: str | None = None
    value_description: str = ""
    deprecated: bool = False
    internal: bool = False
    dynamic: bool = False
    replacement: str | None = None

    def to_config_value(self) -> ConfigValue:
        return ConfigValue(
            name=self.name,
            description=self.description,
            value=self.value if self.value is not None else self.default,
            documented_default=self.documented_default,
            value_description=self.value_description,
            deprecated=self.deprecated,
            internal=self.internal,
            dynamic=self.dynamic,
            replacement=self.replacement,
        )


def parse_registry(payload: Any) -> list[ConfigValue]:
    """Convert a decoded JSON document into config values."""
    if isinstance(payload, dict):
        payload = payload.get("settings")
    if not isinstance(payload, list):
        msg = "Expected a list of settings or an object with a 'settings' list"
        raise RegistryError(msg)
    try:
        records = [_SettingRecord.model_validate(item) for item in payload]
    except ValidationError as exc:
        msg = f"Invalid setting metadata: {exc}"
        raise RegistryError(msg) from exc
    return [r.to_config_value() for r in records]


def load_json_registry(path: Path) -> list[ConfigValue]:
    """Load config values from a JSON metadata file."""
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        msg = f"Cannot read settings metadata from {path}: {exc}"
        raise RegistryError(msg) from exc
    values = parse_registry(payload)
    logger.debug("Loaded {} settings from {}", len(values), path)
    return values


# ---------------------------------------------------------------------------
# Running server
# ---------------------------------------------------------------------------


def _first(row: dict[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        if row.get(key) is not None:
            return row[key]
    return default


def config_value_from_row(row: dict[str, Any]) -> ConfigValue:
    """Map a ``SHOW SETTINGS`` (or legacy ``dbms.listConfig``) row."""
    return ConfigValue(
        name=row["name"],
        description=row.get("description"),
        value=_first(row, "defaultValue", "value"),
        value_description=_first(row, "validValues", "valueDescription", default=""),
        deprecated=bool(_first(row, "isDeprecated", "deprecated", default=False)),
        internal=bool(_first(row, "isInternal", "internal", default=False)),
        dynamic=bool(_first(row, "isDynamic", "dynamic", default=False)),
        replacement=_first(row, "replacement", "replacedBy"),
    )


async def fetch_server_registry(graph: GraphClient, query: str = "SHOW SETTINGS YIELD *") -> list[ConfigValue]:
    """Read setting metadata from a running server."""
    records = await graph.execute(query)
    values = [config_value_from_row(r) for r in records]
    logger.debug("Fetched {} settings from {}", len(values), graph.uri)
    return values


# ---------------------------------------------------------------------------
# pydantic-settings models
# ---------------------------------------------------------------------------

_TYPE_DESCRIPTIONS: dict[type, str] = {
    bool: "a boolean",
    int: "an integer",
    float: "a float",
    str: "a string",
    Path: "a path",
    timedelta: "a duration (Valid units are: `ms`, `s`, `m` and `h`; default unit is `s`)",
}


def _unwrap_optional(annotation: Any) -> Any:
    args = get_args(annotation)
    if type(None) in args:
        rest = [a for a in args if a is not type(None)]
        if len(rest) == 1:
            return rest[0]
    return annotation


def describe_type(annotation: Any) -> str:
    """Human description of the values a field accepts."""
    annotation = _unwrap_optional(annotation)
    origin = get_origin(annotation)
    if origin in (list, tuple, set, frozenset):
        (item, *_rest) = get_args(annotation) or (str,)
        return f"a comma-separated list where each element is {describe_type(item)}"
    if origin is dict:
        return "a mapping"
    if isinstance(annotation, type):
        for base, text in _TYPE_DESCRIPTIONS.items():
            if issubclass(annotation, base):
                return text
        return f"a {annotation.__name__}"
    return str(annotation)


def _field_default(info: FieldInfo) -> Any:
    if info.default_factory is not None:
        return info.default_factory()  # type: ignore[call-arg]
    if info.is_required():
        return None
    return info.default


def _is_model(annotation: Any) -> bool:
    return isinstance(annotation, type) and issubclass(annotation, BaseModel)


def _nested_defaults(name: str, field_name: str, info: FieldInfo, defaults: BaseModel | None) -> BaseModel | None:
    if defaults is not None:
        value = vars(defaults).get(field_name)
    else:
        try:
            value = _field_default(info)
        except ValidationError as exc:
            msg = f"Cannot build the default of {name}: {exc}"
            raise RegistryError(msg) from exc
    return value if isinstance(value, BaseModel) else None


def settings_model_registry(
    model: type[BaseModel], prefix: str = "", defaults: BaseModel | None = None
) -> list[ConfigValue]:
    """Flatten a pydantic settings class into dotted config values.

    Nested models become dotted prefixes.  When a nested model is built by a
    default factory, its fields are documented with the factory's values.
    Nested ``BaseSettings`` sections are never instantiated, since that reads
    the process environment; their declared field defaults are documented.
    """
    values: list[ConfigValue] = []
    for field_name, info in model.model_fields.items():
        name = f"{prefix}{field_name}"
        annotation = _unwrap_optional(info.annotation)
        if _is_model(annotation):
            nested = None
            if not issubclass(annotation, BaseSettings):
                nested = _nested_defaults(name, field_name, info, defaults)
            values.extend(settings_model_registry(annotation, prefix=f"{name}.", defaults=nested))
            continue
        default = vars(defaults).get(field_name) if defaults is not None else _field_default(info)
        extra = info.json_schema_extra if isinstance(info.json_schema_extra, dict) else {}
        values.append(
            ConfigValue(
                name=name,
                description=info.description,
                value=default,
                value_description=describe_type(info.annotation),
                deprecated=bool(info.deprecated),
                internal=bool(extra.get("internal", False)),
                dynamic=bool(extra.get("dynamic", False)),
                replacement=extra.get("replaced_by"),  # type: ignore[arg-type]
            )
        )
    return values


def import_settings_model(spec: str) -> type[BaseModel]:
    """Import a settings class from a ``module:Class`` string."""
    module_name, _, attr = spec.partition(":")
    if not module_name or not attr:
        msg = f"Expected module:Class, got {spec!r}"
        raise RegistryError(msg)
    try:
        model = getattr(importlib.import_module(module_name), attr)
    except (ImportError, AttributeError) as exc:
        msg = f"Cannot import settings model {spec!r}: {exc}"
        raise RegistryError(msg) from exc
    if not _is_model(model):
        msg = f"{spec!r} is not a pydantic model"
        raise RegistryError(msg)
    return model
