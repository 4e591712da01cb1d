"""Configuration management for graph-docs."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict, TomlConfigSettingsSource

# ---------------------------------------------------------------------------
# Path helpers
# ---------------------------------------------------------------------------


def _find_graphdocs_toml() -> Path | None:
    """Walk up from cwd looking for ``graphdocs.toml``."""
    current = Path.cwd().resolve()
    while True:
        candidate = current / "graphdocs.toml"
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            return None
        current = parent


class Neo4jSettings(BaseModel):
    """Bolt connection settings for one server."""

    scheme: str = Field(default="bolt", description="URI scheme: bolt, bolt+s, neo4j or neo4j+s.")
    host: str = Field(default="localhost", description="Server host.")
    port: int = Field(default=7687, description="Server Bolt port.")
    username: str = Field(default="neo4j", description="Username. Leave empty to connect without auth.")
    password: str = Field(default="", description="Password.")
    database: str | None = Field(
        default=None, description="Default database for queries. The server default is used when unset."
    )
    query_timeout_s: float = Field(
        default=30.0, description="Timeout in seconds for read queries.", json_schema_extra={"dynamic": True}
    )
    write_timeout_s: float = Field(
        default=60.0, description="Timeout in seconds for write queries, see neo4j.query_timeout_s."
    )

    @property
    def uri(self) -> str:
        return f"{self.scheme}://{self.host}:{self.port}"


def _enterprise_connection() -> Neo4jSettings:
    return Neo4jSettings(port=7688)


class ProcedureSettings(BaseModel):
    """Procedure reference generator settings."""

    query: str = Field(default="CALL dbms.procedures()", description="Query listing procedures on a server.")
    table_id: str = Field(default="procedure-reference", description="Anchor id of the procedure table.")
    title: str = Field(default="Procedures", description="Title of the procedure table.")
    community: Neo4jSettings = Field(default_factory=Neo4jSettings)
    enterprise: Neo4jSettings = Field(default_factory=_enterprise_connection)


class ConfigDocsSettings(BaseModel):
    """Configuration reference generator settings."""

    id_prefix: str = Field(default="config_", description="Prefix for generated setting anchors.")
    list_id: str = Field(default="config-settings", description="Anchor id of the settings summary.")
    title: str = Field(default="Configuration settings", description="Title of the settings summary.")
    filter: str = Field(
        default="public", description="Named filter: public, all, dynamic, deprecated or internal."
    )
    split_outputs: bool = Field(
        default=False, description="Emit separate HTML and PDF blocks per setting instead of one shared block."
    )
    file_suffixes: list[str] = Field(
        default_factory=lambda: [".log"], description="Suffixes marking a name as a file rather than a setting."
    )
    server_query: str = Field(default="SHOW SETTINGS YIELD *", description="Query listing settings on a server.")
    settings_model: str = Field(
        default="graph_docs.settings:DocsSettings",
        description="Settings class documented by the settings source, as module:Class.",
    )


class OutputSettings(BaseModel):
    """Rendered documentation output settings."""

    output_dir: Path = Field(default=Path("target/docs"), description="Directory receiving rendered documents.")
    reset_graph: bool = Field(
        default=False, description="Delete all nodes in the default database before each document."
    )
    legacy_output_dir: Path | None = Field(
        default=None,
        description="Former output directory, use output.output_dir instead.",
        deprecated="Use output.output_dir.",
        json_schema_extra={"replaced_by": "output.output_dir"},
    )


class DocsSettings(BaseSettings):
    """Root configuration for graph-docs."""

    model_config = SettingsConfigDict(
        toml_file="graphdocs.toml",
        env_prefix="GRAPHDOCS_",
        env_nested_delimiter="__",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        toml_path = _find_graphdocs_toml()
        sources: list[PydanticBaseSettingsSource] = [init_settings, env_settings]
        if toml_path:
            sources.append(TomlConfigSettingsSource(settings_cls, toml_file=toml_path))
        sources.append(file_secret_settings)
        return tuple(sources)

    neo4j: Neo4jSettings = Field(default_factory=Neo4jSettings)
    procedures: ProcedureSettings = Field(default_factory=ProcedureSettings)
    config_docs: ConfigDocsSettings = Field(default_factory=ConfigDocsSettings)
    output: OutputSettings = Field(default_factory=OutputSettings)
