"""Tests for the settings summary list/table combo."""

from __future__ import annotations

import pytest

from graph_docs.config_docs.models import SettingDescription
from graph_docs.config_docs.summary import AsciiDocListGenerator, first_sentence


def _item(name: str, description: str | None, *, deprecated: bool = False) -> SettingDescription:
    return SettingDescription(
        id=f"config_{name}",
        name=name,
        description=description,
        validation_message="",
        deprecated=deprecated,
    )


def test_list_and_table_combo() -> None:
    items = [_item("a.b", "Does A. And more."), _item("c.d", "Old knob", deprecated=True)]
    out = AsciiDocListGenerator("settings", "Settings").generate_list_and_table_combo(items)
    assert out == (
        "[[settings]]\n"
        ".Settings\n"
        "ifndef::nonhtmloutput[]\n"
        '[options="header"]\n'
        "|===\n"
        "|Name|Description\n"
        "|<<config_a.b,a.b>>|Does A.\n"
        "|<<config_c.d,c.d>>|Old knob (deprecated)\n"
        "|===\n"
        "endif::nonhtmloutput[]\n"
        "\n"
        "ifdef::nonhtmloutput[]\n"
        "* <<config_a.b,a.b>>: Does A.\n"
        "* <<config_c.d,c.d>>: Old knob (deprecated)\n"
        "endif::nonhtmloutput[]\n"
        "\n"
    )


def test_id_prefix_and_pipe_escaping() -> None:
    out = AsciiDocListGenerator("s", "S", id_prefix="setting_").generate_list_and_table_combo(
        [_item("a.b", "Either x|y")]
    )
    assert "|<<setting_a.b,a.b>>|Either x\\|y\n" in out


def test_deprecated_without_description() -> None:
    out = AsciiDocListGenerator("s", "S").generate_list_and_table_combo([_item("a.b", None, deprecated=True)])
    assert "|<<config_a.b,a.b>>|(deprecated)\n" in out


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("One. Two.", "One."),
        ("Wrapped\nline only", "Wrapped line only"),
        ("Question? Answer.", "Question?"),
        ("Version 4.0 is fine. Next.", "Version 4.0 is fine."),
        (None, ""),
        ("", ""),
    ],
)
def test_first_sentence(text: str | None, expected: str) -> None:
    assert first_sentence(text) == expected
