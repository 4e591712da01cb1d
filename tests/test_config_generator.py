"""Tests for the configuration reference generator."""

from __future__ import annotations

from datetime import timedelta
from pathlib import Path

import pytest
from loguru import logger

from graph_docs.config_docs import ConfigDocsGenerator, ConfigValue, SettingFilter, format_duration, value_as_string
from graph_docs.config_docs.generator import NO_DESCRIPTION, render_value

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _values() -> list[ConfigValue]:
    return [
        ConfigValue(
            name="c.d",
            value=timedelta(seconds=30),
            value_description="a duration",
        ),
        ConfigValue(
            name="a.b",
            description="Refers to c.d",
            value=True,
            value_description="a boolean",
            dynamic=True,
        ),
        ConfigValue(
            name="old.x",
            description="Replaced by new.x, see also i.x",
            value=1,
            value_description="an integer",
            deprecated=True,
            replacement="new.x",
        ),
        ConfigValue(name="new.x", description="The new one", value=2, value_description="an integer"),
        ConfigValue(name="i.x", description="Tuning knob", value="fast", value_description="a string", internal=True),
    ]


def _document(values=None, setting_filter: SettingFilter = SettingFilter.ALL, **kwargs) -> str:
    generator = ConfigDocsGenerator(values if values is not None else _values(), **kwargs)
    return generator.document(setting_filter.predicate(), "settings", "Settings")


@pytest.fixture
def warnings_log():
    messages: list[str] = []
    handler_id = logger.add(lambda m: messages.append(m.record["message"]), level="WARNING")
    yield messages
    logger.remove(handler_id)


# ---------------------------------------------------------------------------
# Setting blocks
# ---------------------------------------------------------------------------


class TestSettingBlock:
    def test_dynamic_setting_block(self) -> None:
        expected = (
            "[[config_a.b]]\n"
            ".a.b\n"
            '[cols="<1h,<4"]\n'
            "|===\n"
            "|Description\n"
            "a|Refers to <<config_c.d,c.d>>\n"
            "|Valid values\n"
            "a|a boolean\n"
            "|Dynamic a|true\n"
            "|Default value\n"
            "m|true\n"
            "|===\n\n"
        )
        assert expected in _document()

    def test_missing_description_and_duration_default(self) -> None:
        out = _document()
        block = out[out.index("[[config_c.d]]") :]
        assert f"a|{NO_DESCRIPTION}\n" in block
        assert "|Default value\nm|30s\n" in block
        assert "|Dynamic" not in block.split("|===\n\n")[0]

    def test_deprecated_with_replacement(self) -> None:
        out = _document()
        assert "|Deprecated\na|The `old.x` configuration setting has been deprecated.\n" in out
        assert "|Replaced by\na|<<config_new.x,new.x>>\n" in out

    def test_internal_setting(self) -> None:
        assert "|Internal\na|i.x is an internal, unsupported setting.\n" in _document()

    def test_description_links_other_settings(self) -> None:
        out = _document()
        assert "a|Replaced by <<config_new.x,new.x>>, see also <<config_i.x,i.x>>\n" in out

    def test_documented_default_wins(self) -> None:
        values = [ConfigValue(name="a.b", value=512, documented_default="512MiB")]
        assert "m|512MiB\n" in _document(values)

    def test_missing_value_logged_and_no_default(self, warnings_log) -> None:
        values = [ConfigValue(name="a.b", description="Something")]
        out = _document(values)
        assert "|Default value" not in out
        assert any("a.b" in m for m in warnings_log)

    def test_settings_sorted_by_name(self) -> None:
        out = _document()
        positions = [out.index(f"[[config_{n}]]") for n in ("a.b", "c.d", "i.x", "new.x", "old.x")]
        assert positions == sorted(positions)


# ---------------------------------------------------------------------------
# Filters and known names
# ---------------------------------------------------------------------------


class TestFilters:
    def test_public_excludes_internal_and_does_not_link_it(self) -> None:
        out = _document(setting_filter=SettingFilter.PUBLIC)
        assert "[[config_i.x]]" not in out
        assert "see also i.x.\n" in out

    def test_dynamic(self) -> None:
        out = _document(setting_filter=SettingFilter.DYNAMIC)
        assert "[[config_a.b]]" in out
        assert "[[config_c.d]]" not in out

    def test_deprecated(self) -> None:
        out = _document(setting_filter=SettingFilter.DEPRECATED)
        assert "[[config_old.x]]" in out
        assert "[[config_new.x]]" not in out
        # replacement is outside the filtered set but is still rendered as a reference
        assert "|Replaced by\na|<<config_new.x,new.x>>\n" in out

    def test_internal(self) -> None:
        out = _document(setting_filter=SettingFilter.INTERNAL)
        assert "[[config_i.x]]" in out
        assert "[[config_a.b]]" not in out

    def test_unknown_filter_name(self) -> None:
        with pytest.raises(ValueError):
            SettingFilter("bogus")


# ---------------------------------------------------------------------------
# Output modes
# ---------------------------------------------------------------------------


class TestOutputModes:
    def test_split_outputs_wraps_both_renderings(self) -> None:
        values = [
            ConfigValue(name="a.b", description="Refers to c.d", value=1),
            ConfigValue(name="c.d", description="Target", value=2),
        ]
        out = _document(values, split_outputs=True)
        html = "ifndef::nonhtmloutput[]\n[[config_a.b]]"
        pdf = "ifdef::nonhtmloutput[]\n[[config_a.b]]"
        assert html in out
        assert pdf in out
        pdf_block = out[out.index(pdf) :]
        assert "a|Refers to `c.d`\n" in pdf_block
        html_block = out[out.index(html) : out.index(pdf)]
        assert "a|Refers to <<config_c.d,c.d>>\n" in html_block
        assert html_block.endswith("|===\n\nendif::nonhtmloutput[]\n\n")

    def test_all_outputs_has_no_conditionals_around_blocks(self) -> None:
        out = _document([ConfigValue(name="a.b", value=1)])
        assert "ifndef::nonhtmloutput[]\n[[config_a.b]]" not in out

    def test_id_prefix(self) -> None:
        values = [
            ConfigValue(name="a.b", description="Refers to c.d", value=1),
            ConfigValue(name="c.d", value=2),
        ]
        out = ConfigDocsGenerator(values).document(SettingFilter.ALL.predicate(), "s", "S", id_prefix="setting_")
        assert "[[setting_a.b]]" in out
        assert "a|Refers to <<setting_c.d,c.d>>\n" in out
        assert "|<<setting_c.d,c.d>>|" in out

    def test_summary_comes_first(self) -> None:
        out = _document()
        assert out.startswith("[[settings]]\n.Settings\nifndef::nonhtmloutput[]\n")
        assert out.index("endif::nonhtmloutput[]") < out.index("[[config_a.b]]")

    def test_document_can_be_called_twice(self) -> None:
        generator = ConfigDocsGenerator(_values())
        first = generator.document(SettingFilter.ALL.predicate(), "settings", "Settings")
        second = generator.document(SettingFilter.ALL.predicate(), "settings", "Settings")
        assert first == second


# ---------------------------------------------------------------------------
# Value rendering
# ---------------------------------------------------------------------------


class TestValueRendering:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (timedelta(seconds=30), "30s"),
            (timedelta(minutes=2), "120s"),
            (timedelta(milliseconds=1500), "1500ms"),
            (timedelta(0), "0s"),
        ],
    )
    def test_format_duration(self, value: timedelta, expected: str) -> None:
        assert format_duration(value) == expected

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (False, "false"),
            ([".log", ".txt"], ".log,.txt"),
            (Path("target/docs"), "target/docs"),
            (7687, "7687"),
        ],
    )
    def test_render_value(self, value, expected: str) -> None:
        assert render_value(value) == expected

    def test_value_as_string_missing(self, warnings_log) -> None:
        assert value_as_string(ConfigValue(name="a.b")) is None
        assert warnings_log
