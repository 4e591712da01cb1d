"""AsciiDoc reference for configuration settings.

Fetches config values from a registry, filters and sorts them, then renders a
summary followed by one table per setting.  Descriptions get their mentions of
other settings turned into cross-references.
"""

from __future__ import annotations

import io
from datetime import timedelta
from enum import StrEnum
from functools import partial
from pathlib import PurePath
from typing import TYPE_CHECKING, Any

from loguru import logger

from graph_docs.config_docs.models import ConfigValue, MissingValueError, SettingDescription
from graph_docs.config_docs.summary import ENDIF, IFDEF_NONHTMLOUTPUT, IFNDEF_NONHTMLOUTPUT, AsciiDocListGenerator
from graph_docs.config_docs.xref import DEFAULT_FILE_SUFFIXES, format_paragraph, html_reference, pdf_reference

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

NO_DESCRIPTION = "No description available."


# ---------------------------------------------------------------------------
# Filters
# ---------------------------------------------------------------------------


class SettingFilter(StrEnum):
    ALL = "all"
    PUBLIC = "public"
    DYNAMIC = "dynamic"
    DEPRECATED = "deprecated"
    INTERNAL = "internal"

    def predicate(self) -> Callable[[ConfigValue], bool]:
        return _FILTERS[self]


_FILTERS: dict[SettingFilter, Callable[[ConfigValue], bool]] = {
    SettingFilter.ALL: lambda cv: True,
    SettingFilter.PUBLIC: lambda cv: not cv.internal,
    SettingFilter.DYNAMIC: lambda cv: cv.dynamic and not cv.internal,
    SettingFilter.DEPRECATED: lambda cv: cv.deprecated,
    SettingFilter.INTERNAL: lambda cv: cv.internal,
}


# ---------------------------------------------------------------------------
# Value rendering
# ---------------------------------------------------------------------------


def format_duration(value: timedelta) -> str:
    """``30s`` for whole seconds, ``1500ms`` otherwise."""
    ms = value // timedelta(milliseconds=1)
    if ms % 1000 == 0:
        return f"{ms // 1000}s"
    return f"{ms}ms"


def render_value(value: Any) -> str:
    if isinstance(value, timedelta):
        return format_duration(value)
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple, set, frozenset)):
        return ",".join(render_value(v) for v in value)
    if isinstance(value, PurePath):
        return value.as_posix()
    return str(value)


def value_as_string(config_value: ConfigValue) -> str | None:
    """Render the current value, or ``None`` (logged) when the registry has none."""
    try:
        value = config_value.require_value()
    except MissingValueError:
        logger.warning("Failed to get value for setting `{}`", config_value.name)
        return None
    return render_value(value)


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------


class ConfigDocsGenerator:
    """Render the configuration reference for the values of one registry."""

    def __init__(
        self,
        config_values: Iterable[ConfigValue],
        *,
        split_outputs: bool = False,
        file_suffixes: Iterable[str] = DEFAULT_FILE_SUFFIXES,
    ) -> None:
        self._config_values = list(config_values)
        self._split_outputs = split_outputs
        self._file_suffixes = tuple(file_suffixes)
        self._id_prefix = "config_"
        self._known_names: frozenset[str] = frozenset()
        self._out = io.StringIO()

    def document(
        self,
        predicate: Callable[[ConfigValue], bool],
        list_id: str,
        title: str,
        id_prefix: str = "config_",
    ) -> str:
        """Return the AsciiDoc reference for every config value matching *predicate*."""
        self._out = io.StringIO()
        self._id_prefix = id_prefix
        selected = sorted((cv for cv in self._config_values if predicate(cv)), key=lambda cv: cv.name)
        descriptions = [self._describe(cv, id_prefix) for cv in selected]
        self._known_names = frozenset(d.name for d in descriptions)
        logger.debug("Documenting {} of {} settings", len(descriptions), len(self._config_values))

        generator = AsciiDocListGenerator(list_id, title, id_prefix=id_prefix)
        self._out.write(generator.generate_list_and_table_combo(descriptions))
        for item in descriptions:
            if self._split_outputs:
                self._document_for_html(item)
                self._document_for_pdf(item)
            else:
                self._document_for_all_outputs(item)
        return self._out.getvalue()

    @staticmethod
    def _describe(cv: ConfigValue, id_prefix: str) -> SettingDescription:
        default = cv.documented_default if cv.documented_default is not None else value_as_string(cv)
        return SettingDescription(
            id=f"{id_prefix}{cv.name}",
            name=cv.name,
            description=cv.description,
            validation_message=cv.value_description,
            default_value=default,
            deprecated=cv.deprecated,
            internal=cv.internal,
            dynamic=cv.dynamic,
            replaced_by=cv.replacement,
        )

    def reference_for_html(self, setting_name: str) -> str:
        return html_reference(setting_name, self._id_prefix)

    def _formatter(self, item: SettingDescription, render: Callable[[str], str]) -> Callable[[str], str]:
        return partial(
            format_paragraph,
            item.name,
            known_names=self._known_names,
            render=render,
            file_suffixes=self._file_suffixes,
        )

    def _document_for_all_outputs(self, item: SettingDescription) -> None:
        self._document(item.formatted(self._formatter(item, self.reference_for_html)), self.reference_for_html)

    def _document_for_html(self, item: SettingDescription) -> None:
        self._out.write(IFNDEF_NONHTMLOUTPUT)
        self._document(item.formatted(self._formatter(item, self.reference_for_html)), self.reference_for_html)
        self._out.write(ENDIF)

    def _document_for_pdf(self, item: SettingDescription) -> None:
        self._out.write(IFDEF_NONHTMLOUTPUT)
        self._document(item.formatted(self._formatter(item, pdf_reference)), pdf_reference)
        self._out.write(ENDIF)

    def _document(self, item: SettingDescription, render: Callable[[str], str]) -> None:
        out = self._out
        out.write(
            f"[[{item.id}]]\n"
            f".{item.name}\n"
            '[cols="<1h,<4"]\n'
            "|===\n"
            "|Description\n"
            f"a|{item.description or NO_DESCRIPTION}\n"
            "|Valid values\n"
            f"a|{item.validation_message}\n"
        )
        if item.dynamic:
            out.write("|Dynamic a|true\n")
        if item.has_default:
            out.write(f"|Default value\nm|{item.default_value}\n")
        if item.deprecated:
            out.write(f"|Deprecated\na|{item.deprecation_message}\n")
            if item.has_replacement:
                out.write(f"|Replaced by\na|{render(item.replaced_by)}\n")
        if item.internal:
            out.write(f"|Internal\na|{item.name} is an internal, unsupported setting.\n")
        out.write("|===\n\n")
