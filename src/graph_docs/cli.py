"""CLI entrypoint for graph-docs."""

from __future__ import annotations

import asyncio
import sys
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path
from typing import TYPE_CHECKING

import typer
from loguru import logger

if TYPE_CHECKING:
    from graph_docs.config_docs import ConfigValue
    from graph_docs.graph import GraphClient
    from graph_docs.settings import DocsSettings, Neo4jSettings

app = typer.Typer(
    name="graphdocs",
    help="graph-docs: generate AsciiDoc reference pages for a graph database.",
    no_args_is_help=True,
)


# ---------------------------------------------------------------------------
# Output mode
# ---------------------------------------------------------------------------


@dataclass
class OutputMode:
    quiet: bool = False
    verbose: int = 0
    no_color: bool = False

    @property
    def level(self) -> str:
        if self.quiet:
            return "WARNING"
        if self.verbose >= 2:  # noqa: PLR2004
            return "TRACE"
        if self.verbose == 1:
            return "DEBUG"
        return "INFO"


def _configure_logging(mode: OutputMode) -> None:
    logger.remove()
    logger.add(sys.stderr, level=mode.level, colorize=not mode.no_color)


@app.callback()
def main(
    quiet: bool = typer.Option(False, "--quiet", "-q", envvar="GRAPHDOCS_QUIET", help="Only log warnings and errors."),
    verbose: int = typer.Option(0, "--verbose", "-v", count=True, help="More logging (-v debug, -vv trace)."),
    no_color: bool = typer.Option(False, "--no-color", envvar="NO_COLOR", help="Disable colored log output."),
) -> None:
    """Generate configuration, procedure and Cypher reference documentation."""
    _configure_logging(OutputMode(quiet=quiet, verbose=verbose, no_color=no_color))


class ConfigSource(StrEnum):
    FILE = "file"
    SERVER = "server"
    SETTINGS = "settings"


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@app.command()
def config(
    source: ConfigSource = typer.Option(ConfigSource.SETTINGS, "--source", "-s", help="Where settings come from."),
    input_: Path | None = typer.Option(None, "--input", "-i", help="JSON registry file (with --source file)."),
    model: str | None = typer.Option(None, "--model", help="Settings class as module:Class (with --source settings)."),
    filter_: str | None = typer.Option(None, "--filter", "-f", help="public, all, dynamic, deprecated or internal."),
    split: bool | None = typer.Option(None, "--split/--no-split", help="Separate HTML and PDF blocks per setting."),
    id_: str | None = typer.Option(None, "--id", help="Anchor id of the settings summary."),
    title: str | None = typer.Option(None, "--title", help="Title of the settings summary."),
    id_prefix: str | None = typer.Option(None, "--id-prefix", help="Prefix for setting anchors."),
    output: Path | None = typer.Option(None, "--output", "-o", help="Write to this file instead of stdout."),
) -> None:
    """Generate the configuration settings reference."""
    asyncio.run(
        _run_config(
            source,
            input_=input_,
            model=model,
            filter_=filter_,
            split=split,
            list_id=id_,
            title=title,
            id_prefix=id_prefix,
            output=output,
        )
    )


@app.command()
def procedures(
    community: Path | None = typer.Option(None, "--community", help="Community procedure listing (JSON)."),
    enterprise: Path | None = typer.Option(None, "--enterprise", help="Enterprise procedure listing (JSON)."),
    id_: str | None = typer.Option(None, "--id", help="Anchor id of the procedure table."),
    title: str | None = typer.Option(None, "--title", help="Title of the procedure table."),
    output: Path | None = typer.Option(None, "--output", "-o", help="Write to this file instead of stdout."),
) -> None:
    """Generate the procedure reference table."""
    asyncio.run(_run_procedures(community, enterprise, table_id=id_, title=title, output=output))


@app.command()
def build(
    doc_ids: list[str] | None = typer.Argument(None, help="Document or refcard ids to build (default: all)."),
    output_dir: Path | None = typer.Option(None, "--output-dir", "-o", help="Directory for rendered pages."),
    reset: bool | None = typer.Option(None, "--reset/--no-reset", help="Clear the default database first."),
) -> None:
    """Run documentation queries against a server and render the pages."""
    asyncio.run(_run_build(doc_ids or [], output_dir=output_dir, reset=reset))


@app.command(name="list")
def list_documents() -> None:
    """List the documents and refcards that can be built."""
    from graph_docs.docs import DOCUMENTS, REFCARDS

    for doc_id, factory in DOCUMENTS.items():
        typer.echo(f"{doc_id}\t{factory().title}")
    for card_id, factory in REFCARDS.items():
        typer.echo(f"{card_id}\t{factory().title}")


# ---------------------------------------------------------------------------
# Async helpers
# ---------------------------------------------------------------------------


def _emit(text: str, output: Path | None) -> None:
    if output is None:
        typer.echo(text, nl=False)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text, encoding="utf-8")
    logger.info("Wrote {}", output)


async def _connect(neo4j: Neo4jSettings) -> GraphClient:
    from graph_docs.graph import GraphClient

    graph = GraphClient(neo4j)
    try:
        await graph.ping()
    except Exception as exc:
        logger.error("Cannot reach Neo4j at {}: {}", graph.uri, exc)
        await graph.close()
        raise typer.Exit(code=1) from exc
    logger.info("Connected to Neo4j at {}", graph.uri)
    return graph


async def _load_config_values(
    source: ConfigSource, settings: DocsSettings, *, input_: Path | None, model: str | None
) -> list[ConfigValue]:
    from graph_docs.config_docs import (
        fetch_server_registry,
        import_settings_model,
        load_json_registry,
        settings_model_registry,
    )

    if source is ConfigSource.FILE:
        if input_ is None:
            logger.error("--source file needs --input")
            raise typer.Exit(code=1)
        return load_json_registry(input_)
    if source is ConfigSource.SERVER:
        graph = await _connect(settings.neo4j)
        try:
            return await fetch_server_registry(graph, settings.config_docs.server_query)
        finally:
            await graph.close()
    return settings_model_registry(import_settings_model(model or settings.config_docs.settings_model))


async def _run_config(
    source: ConfigSource,
    *,
    input_: Path | None,
    model: str | None,
    filter_: str | None,
    split: bool | None,
    list_id: str | None,
    title: str | None,
    id_prefix: str | None,
    output: Path | None,
) -> None:
    """Async implementation of the ``graphdocs config`` command."""
    from graph_docs.config_docs import ConfigDocsGenerator, RegistryError, SettingFilter
    from graph_docs.settings import DocsSettings

    settings = DocsSettings()
    options = settings.config_docs
    filter_name = filter_ or options.filter
    try:
        setting_filter = SettingFilter(filter_name)
    except ValueError as exc:
        logger.error("Unknown filter '{}': use one of {}", filter_name, ", ".join(f.value for f in SettingFilter))
        raise typer.Exit(code=1) from exc

    try:
        values = await _load_config_values(source, settings, input_=input_, model=model)
    except RegistryError as exc:
        logger.error("{}", exc)
        raise typer.Exit(code=1) from exc
    logger.info("Loaded {} settings from {}", len(values), source.value)

    generator = ConfigDocsGenerator(
        values,
        split_outputs=options.split_outputs if split is None else split,
        file_suffixes=options.file_suffixes,
    )
    text = generator.document(
        setting_filter.predicate(),
        list_id or options.list_id,
        title or options.title,
        id_prefix=id_prefix or options.id_prefix,
    )
    _emit(text, output)


async def _run_procedures(
    community: Path | None,
    enterprise: Path | None,
    *,
    table_id: str | None,
    title: str | None,
    output: Path | None,
) -> None:
    """Async implementation of the ``graphdocs procedures`` command."""
    from graph_docs.procedures import (
        ProcedureListingError,
        ProcedureReferenceGenerator,
        fetch_procedures,
        load_procedures,
    )
    from graph_docs.settings import DocsSettings

    settings = DocsSettings().procedures
    if (community is None) != (enterprise is None):
        logger.error("--community and --enterprise must be given together")
        raise typer.Exit(code=1)

    try:
        if community is not None and enterprise is not None:
            community_procs = load_procedures(community)
            enterprise_procs = load_procedures(enterprise)
        else:
            graph = await _connect(settings.community)
            try:
                community_procs = await fetch_procedures(graph, settings.query)
            finally:
                await graph.close()
            graph = await _connect(settings.enterprise)
            try:
                enterprise_procs = await fetch_procedures(graph, settings.query)
            finally:
                await graph.close()
    except ProcedureListingError as exc:
        logger.error("{}", exc)
        raise typer.Exit(code=1) from exc
    logger.info("Listing {} community and {} enterprise procedures", len(community_procs), len(enterprise_procs))

    text = ProcedureReferenceGenerator(community_procs, enterprise_procs).document(
        table_id or settings.table_id, title or settings.title
    )
    _emit(text, output)


async def _run_build(doc_ids: list[str], *, output_dir: Path | None, reset: bool | None) -> None:
    """Async implementation of the ``graphdocs build`` command."""
    from graph_docs.docgen import DocumentationError, DocumentRunner, render_document, render_refcard, run_refcard
    from graph_docs.docs import DOCUMENTS, REFCARDS
    from graph_docs.settings import DocsSettings

    unknown = [d for d in doc_ids if d not in DOCUMENTS and d not in REFCARDS]
    if unknown:
        logger.error("Unknown document id(s): {} (see 'graphdocs list')", ", ".join(unknown))
        raise typer.Exit(code=1)
    selected = doc_ids or [*DOCUMENTS, *REFCARDS]

    settings = DocsSettings()
    target = output_dir or settings.output.output_dir
    runner_reset = settings.output.reset_graph if reset is None else reset

    graph = await _connect(settings.neo4j)
    runner = DocumentRunner(graph, reset=runner_reset)
    built = 0
    try:
        for doc_id in selected:
            if doc_id in DOCUMENTS:
                document = DOCUMENTS[doc_id]()
                outcome = await runner.run(document)
                path = target / document.output_path / f"{document.id}.asciidoc"
                text = render_document(outcome)
            else:
                section = REFCARDS[doc_id]()
                await run_refcard(section, graph)
                path = target / "refcard" / f"{doc_id}.asciidoc"
                text = render_refcard(section)
            _emit(text, path)
            built += 1
    except DocumentationError as exc:
        logger.error("{}", exc)
        raise typer.Exit(code=1) from exc
    finally:
        await graph.close()
    logger.info("Built {} page(s) into {}", built, target)
