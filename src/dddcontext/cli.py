"""Command-line interface for dddcontext."""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click
from pydantic import ValidationError

from dddcontext import __version__
from dddcontext.config import (
    ProjectConfig,
    find_project_root,
    get_catalog_path,
    get_config_value,
    get_project_dir,
    load_config,
    save_config,
    set_config_value,
)
from dddcontext.exceptions import ConfigError, DddContextError
from dddcontext.ui.console import Console, setup_logging

console = Console()
err_console = Console(stderr=True)


def _get_project_root(path: str | None = None) -> Path:
    """Find the project root or error."""
    if path:
        root = Path(path).resolve()
        if not root.exists():
            console.error(f"Path does not exist: {path}")
            sys.exit(1)
        if not get_project_dir(root).is_dir():
            console.error(f"No dddcontext project at {root}. Run 'dddcontext init' first.")
            sys.exit(1)
        return root

    root = find_project_root()
    if root is None:
        console.error(
            "No dddcontext project found. Run 'dddcontext init' first, "
            "or specify a path with --path."
        )
        sys.exit(1)
    return root


def _load_config(root: Path) -> ProjectConfig:
    """Load the project config or error."""
    try:
        return load_config(root)
    except ConfigError as e:
        console.error(str(e))
        sys.exit(1)


def _load_catalog(root: Path, config: ProjectConfig):
    """Load the frozen artifact catalog."""
    from dddcontext.catalog.store import CatalogStore

    store = CatalogStore(get_catalog_path(root, config))
    try:
        catalog = store.load()
    finally:
        store.close()
    if catalog is None:
        console.error("No catalog found. Run 'dddcontext ingest <records.json>' first.")
        sys.exit(1)
    return catalog


@click.group()
@click.version_option(version=__version__, prog_name="dddcontext")
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging.")
def main(verbose: bool):
    """dddcontext - budgeted, DDD-aware context selection for LLM prompts."""
    setup_logging(verbose)


@main.command()
@click.option("--path", "-p", default=None, help="Path to the project root.")
def init(path: str | None):
    """Initialize a dddcontext project with the default selection policy."""
    root = Path(path or ".").resolve()
    if not root.exists():
        console.error(f"Path does not exist: {root}")
        sys.exit(1)

    console.banner()
    console.info(f"Initializing dddcontext for: {root}")

    config = _load_config(root)
    if not config.name:
        config.name = root.name
    save_config(root, config)
    console.success(f"Created {get_project_dir(root)}")


@main.command()
@click.argument("records", type=click.Path(exists=True, dir_okay=False))
@click.option("--path", "-p", default=None, help="Path to the project root.")
def ingest(records: str, path: str | None):
    """Load pre-classified artifact records into the catalog.

    RECORDS is a JSON file holding a list of artifact records (or an object
    with an "artifacts" list). The stored catalog is replaced as a whole.
    """
    from dddcontext.catalog.catalog import ArtifactCatalog
    from dddcontext.catalog.store import CatalogStore, load_records

    root = _get_project_root(path)
    config = _load_config(root)

    try:
        catalog = ArtifactCatalog.build(load_records(records))
    except DddContextError as e:
        console.error(str(e))
        sys.exit(1)

    store = CatalogStore(get_catalog_path(root, config))
    try:
        store.save(catalog, metadata={"source": str(Path(records).resolve())})
    finally:
        store.close()

    console.success(
        f"Ingested {len(catalog)} artifacts in "
        f"{len(catalog.bounded_contexts())} bounded contexts"
    )
    console.show_stats(catalog.stats())


@main.command()
@click.option("--path", "-p", default=None, help="Path to the project root.")
def status(path: str | None):
    """Show the catalog's bounded contexts and artifact counts."""
    root = _get_project_root(path)
    config = _load_config(root)
    catalog = _load_catalog(root, config)
    console.show_stats(catalog.stats())


@main.command()
@click.argument("story_id")
@click.option("--context", "-c", "bounded_context", required=True,
              help="Target bounded context.")
@click.option("--path", "-p", default=None, help="Path to the project root.")
@click.option("--budget", "-b", default=None, type=click.IntRange(min=0),
              help="Cost budget (default: selection.default_budget).")
@click.option("--enhancer", "-e", "enhancers", multiple=True,
              help="Optional kind to add if budget remains (can specify multiple).")
@click.option("--format", "output_format", type=click.Choice(["text", "json"]),
              default="text", help="Bundle format (default: text).")
@click.option("--no-metadata", is_flag=True, help="Omit bundle headers.")
@click.option("--summary", is_flag=True, help="Show a selection table on stderr.")
def select(
    story_id: str, bounded_context: str, path: str | None, budget: int | None,
    enhancers: tuple[str, ...], output_format: str, no_metadata: bool, summary: bool,
):
    """Select and assemble context for a user story.

    Examples:

        dddcontext select US-101 --context Ordering

        dddcontext select US-101 -c Ordering --budget 2000 -e Test -e DomainEvent
    """
    from dddcontext.context.assembler import ContextAssembler
    from dddcontext.context.models import SelectionRequest
    from dddcontext.context.selector import ContextSelector

    root = _get_project_root(path)
    config = _load_config(root)
    catalog = _load_catalog(root, config)

    try:
        selector = ContextSelector.from_config(catalog, config.selection)
        request = SelectionRequest(
            target_bounded_context=bounded_context,
            user_story_id=story_id,
            budget=config.selection.default_budget if budget is None else budget,
            enhancers=enhancers or config.selection.default_enhancers,
        )
        result = selector.select(request)
    except DddContextError as e:
        console.error(str(e))
        sys.exit(1)
    except ValidationError as e:
        console.error(f"Invalid selection request: {e.errors()[0]['msg']}")
        sys.exit(1)

    # The bundle owns stdout so it can be piped
    if summary:
        err_console.show_selection(result)
        err_console.console.print()

    assembler = ContextAssembler(include_metadata=not no_metadata)
    if output_format == "json":
        click.echo(assembler.assemble_json(result))
    else:
        click.echo(assembler.assemble(result))


# =========================================================================
# Config Management
# =========================================================================

@main.command("config")
@click.argument("action", type=click.Choice(["set", "get", "show"]))
@click.argument("key", required=False)
@click.argument("value", required=False)
@click.option("--path", "-p", default=None, help="Path to the project root.")
def config_cmd(action: str, key: str | None, value: str | None, path: str | None):
    """Manage dddcontext configuration.

    Keys use dot notation, e.g. selection.default_budget or
    selection.policy.Entity. Values are parsed as JSON when possible, so
    lists and numbers can be set directly.
    """
    root = _get_project_root(path)
    config = _load_config(root)

    if action == "show":
        console.console.print_json(config.model_dump_json())
        return

    if not key or (action == "set" and value is None):
        usage = "<key>" if action == "get" else "<key> <value>"
        console.error(f"Usage: dddcontext config {action} {usage}")
        sys.exit(1)

    try:
        if action == "get":
            console.console.print(f"{key} = {get_config_value(config, key)!r}")
        else:
            parsed_value = _parse_config_value(value)
            save_config(root, set_config_value(config, key, parsed_value))
            console.success(f"Set {key} = {parsed_value!r}")
    except KeyError:
        console.error(f"Unknown config key: {key}")
        sys.exit(1)
    except ConfigError as e:
        console.error(str(e))
        sys.exit(1)


def _parse_config_value(value: str):
    try:
        return json.loads(value)
    except json.JSONDecodeError:
        return value



if __name__ == "__main__":
    main()
