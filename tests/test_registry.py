"""Tests for configuration metadata registries."""

from __future__ import annotations

import json
from datetime import timedelta
from pathlib import Path

import pytest
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings

from graph_docs.config_docs import ConfigDocsGenerator, SettingFilter
from graph_docs.config_docs.registry import (
    RegistryError,
    config_value_from_row,
    describe_type,
    fetch_server_registry,
    import_settings_model,
    load_json_registry,
    parse_registry,
    settings_model_registry,
)
from graph_docs.settings import DocsSettings

# ---------------------------------------------------------------------------
# JSON files
# ---------------------------------------------------------------------------


class TestJsonRegistry:
    def test_list_payload(self) -> None:
        values = parse_registry([{"name": "a.b", "description": "A", "default": "1", "dynamic": True}])
        assert len(values) == 1
        assert values[0].name == "a.b"
        assert values[0].value == "1"
        assert values[0].dynamic is True

    def test_settings_object_payload(self) -> None:
        values = parse_registry({"settings": [{"name": "a.b"}, {"name": "c.d", "internal": True}]})
        assert [v.name for v in values] == ["a.b", "c.d"]
        assert values[1].internal is True

    def test_value_preferred_over_default(self) -> None:
        (value,) = parse_registry([{"name": "a.b", "value": 2, "default": 1}])
        assert value.value == 2

    @pytest.mark.parametrize("payload", [{"nope": []}, "text", [{"description": "no name"}]])
    def test_invalid_payload(self, payload) -> None:
        with pytest.raises(RegistryError):
            parse_registry(payload)

    def test_load_file(self, tmp_path: Path) -> None:
        path = tmp_path / "settings.json"
        path.write_text(json.dumps([{"name": "a.b", "replacement": "c.d", "deprecated": True}]), encoding="utf-8")
        (value,) = load_json_registry(path)
        assert value.deprecated is True
        assert value.replacement == "c.d"

    def test_load_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(RegistryError, match="Cannot read"):
            load_json_registry(tmp_path / "absent.json")

    def test_load_malformed_file(self, tmp_path: Path) -> None:
        path = tmp_path / "broken.json"
        path.write_text("{", encoding="utf-8")
        with pytest.raises(RegistryError):
            load_json_registry(path)


# ---------------------------------------------------------------------------
# Server rows
# ---------------------------------------------------------------------------


class TestServerRegistry:
    def test_show_settings_row(self) -> None:
        value = config_value_from_row(
            {
                "name": "db.logs.query.enabled",
                "description": "Log executed queries.",
                "value": "VERBOSE",
                "defaultValue": "VERBOSE",
                "validValues": "One of [OFF, INFO, VERBOSE]",
                "isDynamic": True,
                "isDeprecated": False,
            }
        )
        assert value.value == "VERBOSE"
        assert value.value_description == "One of [OFF, INFO, VERBOSE]"
        assert value.dynamic is True
        assert value.deprecated is False

    def test_legacy_row(self) -> None:
        value = config_value_from_row({"name": "a.b", "value": "1", "dynamic": True})
        assert value.value == "1"
        assert value.dynamic is True
        assert value.value_description == ""

    async def test_fetch(self, mock_graph) -> None:
        mock_graph.execute.return_value = [{"name": "a.b", "value": "1"}, {"name": "c.d", "value": None}]
        values = await fetch_server_registry(mock_graph, "SHOW SETTINGS YIELD *")
        mock_graph.execute.assert_awaited_once_with("SHOW SETTINGS YIELD *")
        assert [v.name for v in values] == ["a.b", "c.d"]
        assert values[1].value is None


# ---------------------------------------------------------------------------
# Settings models
# ---------------------------------------------------------------------------


class _Inner(BaseModel):
    timeout: timedelta = Field(default=timedelta(seconds=5), description="How long to wait.")
    hosts: list[str] = Field(default_factory=lambda: ["a", "b"], description="Hosts to try.")


class _Outer(BaseModel):
    name: str = Field(default="x", description="The name.", json_schema_extra={"dynamic": True})
    secret: str | None = Field(default=None, description="Internal knob.", json_schema_extra={"internal": True})
    old: int = Field(
        default=1, description="Old knob.", deprecated="Use name.", json_schema_extra={"replaced_by": "name"}
    )
    required: int = Field(description="No default at all.")
    inner: _Inner = Field(default_factory=lambda: _Inner(timeout=timedelta(milliseconds=250)))


class _EnvSection(BaseSettings):
    host: str = Field(default="localhost", description="Host.")
    port: int = Field(default=1234, description="Port.")


class _EnvRoot(BaseModel):
    section: _EnvSection = Field(default_factory=_EnvSection)


class _Strict(BaseModel):
    port: int


class _BrokenRoot(BaseModel):
    broken: _Strict = Field(default_factory=lambda: _Strict(port="http"))


class TestSettingsModelRegistry:
    def test_flattens_nested_models(self) -> None:
        values = {v.name: v for v in settings_model_registry(_Outer)}
        assert set(values) == {"name", "secret", "old", "required", "inner.timeout", "inner.hosts"}

    def test_flags(self) -> None:
        values = {v.name: v for v in settings_model_registry(_Outer)}
        assert values["name"].dynamic is True
        assert values["secret"].internal is True
        assert values["old"].deprecated is True
        assert values["old"].replacement == "name"

    def test_defaults_and_factory_values(self) -> None:
        values = {v.name: v for v in settings_model_registry(_Outer)}
        assert values["required"].value is None
        assert values["inner.timeout"].value == timedelta(milliseconds=250)
        assert values["inner.hosts"].value == ["a", "b"]

    def test_value_descriptions(self) -> None:
        values = {v.name: v for v in settings_model_registry(_Outer)}
        assert values["name"].value_description == "a string"
        assert values["secret"].value_description == "a string"
        assert values["inner.hosts"].value_description == "a comma-separated list where each element is a string"
        assert values["inner.timeout"].value_description.startswith("a duration")

    def test_documents_own_settings(self, isolated_env) -> None:
        values = {v.name: v for v in settings_model_registry(DocsSettings)}
        assert values["neo4j.port"].value == 7687
        assert values["procedures.enterprise.port"].value == 7688
        assert values["neo4j.query_timeout_s"].dynamic is True
        assert values["output.legacy_output_dir"].deprecated is True
        assert values["output.legacy_output_dir"].replacement == "output.output_dir"

    def test_environment_stays_out_of_the_docs(self, isolated_env) -> None:
        isolated_env.setenv("PASSWORD", "hunter2")
        isolated_env.setenv("HOST", "build-box-17")
        isolated_env.setenv("PORT", "http")
        config_values = settings_model_registry(DocsSettings)
        values = {v.name: v for v in config_values}
        assert values["neo4j.host"].value == "localhost"
        assert values["neo4j.password"].value == ""
        assert values["procedures.community.port"].value == 7687
        assert values["procedures.enterprise.port"].value == 7688

        text = ConfigDocsGenerator(config_values).document(SettingFilter.ALL.predicate(), "settings", "Settings")
        assert "hunter2" not in text
        assert "build-box-17" not in text

    def test_nested_settings_sections_use_declared_defaults(self, isolated_env) -> None:
        isolated_env.setenv("HOST", "build-box-17")
        values = {v.name: v for v in settings_model_registry(_EnvRoot)}
        assert values["section.host"].value == "localhost"
        assert values["section.port"].value == 1234

    def test_invalid_factory_default(self) -> None:
        with pytest.raises(RegistryError, match="Cannot build the default of broken"):
            settings_model_registry(_BrokenRoot)


@pytest.mark.parametrize(
    ("annotation", "expected"),
    [
        (bool, "a boolean"),
        (int, "an integer"),
        (float, "a float"),
        (Path, "a path"),
        (int | None, "an integer"),
        (dict[str, int], "a mapping"),
        (list[int], "a comma-separated list where each element is an integer"),
    ],
)
def test_describe_type(annotation, expected: str) -> None:
    assert describe_type(annotation) == expected


class TestImportSettingsModel:
    def test_imports(self) -> None:
        assert import_settings_model("graph_docs.settings:DocsSettings") is DocsSettings

    @pytest.mark.parametrize(
        "spec",
        ["graph_docs.settings", "no_such_module_xyz:Thing", "graph_docs.settings:Missing", "graph_docs.settings:Path"],
    )
    def test_rejects(self, spec: str) -> None:
        with pytest.raises(RegistryError):
            import_settings_model(spec)
