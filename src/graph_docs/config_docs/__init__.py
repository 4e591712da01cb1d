"""Config docs package: configuration reference generator."""

from __future__ import annotations

from graph_docs.config_docs.generator import ConfigDocsGenerator, SettingFilter, format_duration, value_as_string
from graph_docs.config_docs.models import ConfigValue, MissingValueError, SettingDescription
from graph_docs.config_docs.registry import (
    RegistryError,
    fetch_server_registry,
    import_settings_model,
    load_json_registry,
    settings_model_registry,
)
from graph_docs.config_docs.summary import AsciiDocListGenerator
from graph_docs.config_docs.xref import (
    ensure_ends_with_period,
    format_paragraph,
    html_reference,
    pdf_reference,
    transform_setting_names,
)

__all__ = [
    "AsciiDocListGenerator",
    "ConfigDocsGenerator",
    "ConfigValue",
    "MissingValueError",
    "RegistryError",
    "SettingDescription",
    "SettingFilter",
    "ensure_ends_with_period",
    "fetch_server_registry",
    "format_duration",
    "format_paragraph",
    "html_reference",
    "import_settings_model",
    "load_json_registry",
    "pdf_reference",
    "settings_model_registry",
    "transform_setting_names",
    "value_as_string",
]
