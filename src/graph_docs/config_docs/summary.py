"""Summary list and table emitted ahead of the per-setting blocks."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from graph_docs.config_docs.xref import html_reference

if TYPE_CHECKING:
    from collections.abc import Sequence

    from graph_docs.config_docs.models import SettingDescription

IFNDEF_NONHTMLOUTPUT = "ifndef::nonhtmloutput[]\n"
IFDEF_NONHTMLOUTPUT = "ifdef::nonhtmloutput[]\n"
ENDIF = "endif::nonhtmloutput[]\n\n"

_SENTENCE_END = re.compile(r"(?<=[.!?])\s")


def first_sentence(text: str | None) -> str:
    """First sentence of *text*, with line breaks folded to spaces."""
    if not text:
        return ""
    flat = " ".join(text.split())
    return _SENTENCE_END.split(flat, maxsplit=1)[0]


class AsciiDocListGenerator:
    """Render a settings summary as an HTML table and a non-HTML bullet list."""

    def __init__(self, list_id: str, title: str, *, id_prefix: str = "config_") -> None:
        self.list_id = list_id
        self.title = title
        self.id_prefix = id_prefix

    def _summary(self, item: SettingDescription) -> str:
        text = first_sentence(item.description).replace("|", "\\|")
        if item.deprecated:
            text = f"{text} (deprecated)" if text else "(deprecated)"
        return text

    def generate_list_and_table_combo(self, items: Sequence[SettingDescription]) -> str:
        parts = [f"[[{self.list_id}]]\n", f".{self.title}\n", IFNDEF_NONHTMLOUTPUT]
        parts.append('[options="header"]\n|===\n|Name|Description\n')
        for item in items:
            parts.append(f"|{html_reference(item.name, self.id_prefix)}|{self._summary(item)}\n")
        parts.append("|===\n")
        parts.append(ENDIF)
        parts.append(IFDEF_NONHTMLOUTPUT)
        for item in items:
            parts.append(f"* {html_reference(item.name, self.id_prefix)}: {self._summary(item)}\n")
        parts.append(ENDIF)
        return "".join(parts)
