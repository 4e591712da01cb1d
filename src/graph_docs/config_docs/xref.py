"""Cross-references between settings in free-text descriptions.

Any token shaped like a setting name (lowercase words joined by ``.`` or
``_``, optionally wrapped in ``+`` passthrough markers) is classified and
rewritten:

* names ending in a file suffix become emphasized file names,
* ``+passthrough+`` tokens lose their markers and are otherwise left alone,
* the setting being documented becomes inline code, never a self-link,
* unknown names are left untouched,
* every other name is handed to the caller's ``render`` function.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable, Collection, Iterable

SETTING_NAME_PATTERN = re.compile(r"\+?[a-z0-9]+(?:[._][a-z0-9]+)+\+?")
_ENDS_WITH_WORD_CHAR = re.compile(r"\w$", re.ASCII)

DEFAULT_FILE_SUFFIXES: tuple[str, ...] = (".log",)


def transform_setting_names(
    text: str,
    setting_being_rendered: str,
    known_names: Collection[str],
    render: Callable[[str], str],
    *,
    file_suffixes: Iterable[str] = DEFAULT_FILE_SUFFIXES,
) -> str:
    """Rewrite every setting-name-shaped token in *text*."""
    suffixes = tuple(file_suffixes)

    def _replace(match: re.Match[str]) -> str:
        token = match.group()
        if suffixes and token.endswith(suffixes):
            return f"_{token}_"
        if token.startswith("+") and token.endswith("+"):
            return token[1:-1]
        if token == setting_being_rendered:
            return f"`{token}`"
        if token not in known_names:
            return token
        return render(token)

    return SETTING_NAME_PATTERN.sub(_replace, text)


def ensure_ends_with_period(message: str) -> str:
    """Append a period when *message* ends in a word character."""
    if _ENDS_WITH_WORD_CHAR.search(message):
        return message + "."
    return message


def format_paragraph(
    setting_name: str,
    paragraph: str,
    known_names: Collection[str],
    render: Callable[[str], str],
    *,
    file_suffixes: Iterable[str] = DEFAULT_FILE_SUFFIXES,
) -> str:
    """Resolve cross-references in *paragraph* and terminate it with a period."""
    resolved = transform_setting_names(paragraph, setting_name, known_names, render, file_suffixes=file_suffixes)
    return ensure_ends_with_period(resolved)


def html_reference(setting_name: str, id_prefix: str = "config_") -> str:
    """Anchor cross-reference for HTML output."""
    return f"<<{id_prefix}{setting_name},{setting_name}>>"


def pdf_reference(setting_name: str) -> str:
    """Plain code span for output formats without working anchors."""
    return f"`{setting_name}`"
