"""CLI for OntoFacet - explore an ontology and filter reports by its terms."""

import json
import logging
import os
import sys
from pathlib import Path
from typing import Annotated, Optional

from dotenv import load_dotenv
import structlog
import typer

# Load .env file if present
load_dotenv()

from ontofacet.build import OntologyBuild, build_from_file
from ontofacet.config import OntologyConfig, load_config
from ontofacet.documents import load_documents
from ontofacet.models import Entity, EntityType
from ontofacet.query import parse_term
from ontofacet.registry import Registry
from ontofacet.vocab import RELATION_LABELS, RELATION_TARGET_TYPES, REVERSE_RELATION_LABELS

app = typer.Typer(
    name="facet",
    help="Explore an ontology hierarchy and filter reports by ontology terms.",
    no_args_is_help=True,
    rich_markup_mode=None,
)

ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-C", help="Ontology config YAML (default: $ONTOFACET_CONFIG)"),
]
VerboseOption = Annotated[
    bool,
    typer.Option("--verbose", "-v", help="Show progress info"),
]


def _configure_logging(verbose: bool) -> None:
    # Diagnostics go to stderr so command output stays parseable
    structlog.configure(
        logger_factory=structlog.PrintLoggerFactory(sys.stderr),
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.INFO if verbose else logging.WARNING
        ),
    )


def _load_config(config: Optional[Path]) -> OntologyConfig:
    if config is None and os.environ.get("ONTOFACET_CONFIG"):
        config = Path(os.environ["ONTOFACET_CONFIG"])
    if config is None:
        return OntologyConfig()
    try:
        return load_config(config)
    except Exception as e:
        typer.echo(f"Error parsing config: {e}", err=True)
        raise typer.Exit(1)


def _load(ontology: Path, config: Optional[Path], verbose: bool = False) -> OntologyBuild:
    _configure_logging(verbose)
    if not ontology.exists():
        typer.echo(f"Error: Ontology file not found: {ontology}", err=True)
        raise typer.Exit(1)

    ontology_config = _load_config(config)
    if verbose:
        typer.echo(f"Loading ontology: {ontology}")

    try:
        result = build_from_file(ontology, ontology_config)
    except ValueError as e:
        typer.echo(f"Error loading ontology: {e}", err=True)
        raise typer.Exit(1)

    if verbose:
        typer.echo(f"  {len(result.registry)} entities, {len(result.relations)} diseases with relation records")
    return result


def _parse_type(value: str) -> EntityType:
    for entity_type in EntityType:
        if value.lower() in (entity_type.value.lower(), entity_type.name.lower()):
            return entity_type
    typer.echo(f"Error: Unknown entity type: {value}", err=True)
    typer.echo(f"  Valid types: {', '.join(t.value for t in EntityType)}", err=True)
    raise typer.Exit(1)


def _format_entity(entity: Entity) -> str:
    marker = "[+]" if entity.is_category else " - "
    return f"{marker} {entity.label} ({entity.id})"


@app.command()
def build(
    ontology: Annotated[
        Path,
        typer.Argument(help="Path to JSON-LD ontology file (compact or expanded)"),
    ],
    config: ConfigOption = None,
    verbose: VerboseOption = False,
):
    """Build the hierarchy and report partition sizes and diagnostics."""
    result = _load(ontology, config, verbose)

    typer.echo("OntoFacet Build Summary")
    typer.echo("=" * 40)
    for type_name, counts in result.registry.stats().items():
        if counts["categories"] or counts["individuals"]:
            typer.echo(
                f"{type_name:<22} {counts['categories']:>4} categories  "
                f"{counts['individuals']:>5} individuals"
            )
    typer.echo(f"Diseases with relations: {len(result.relations)}")

    if result.unresolved_classes:
        typer.echo(f"\nUnresolved root classes ({len(result.unresolved_classes)}):")
        for class_id in result.unresolved_classes:
            typer.echo(f"  - {class_id}")

    if result.missing_references:
        typer.echo(f"\nMissing referenced entities ({result.missing_count}):")
        for namespace, refs in result.missing_references.items():
            typer.echo(f"  {namespace or '(no namespace)'} ({len(refs)} missing):")
            for ref in refs:
                shown = ", ".join(ref.referenced_by[:3])
                more = f" +{len(ref.referenced_by) - 3} more" if len(ref.referenced_by) > 3 else ""
                typer.echo(f"    {ref.id} -> \"{ref.label}\" (referenced by: {shown}{more})")
    else:
        typer.echo("\nNo missing referenced entities.")


def _echo_tree(registry: Registry, entity: Entity, depth: int, visited: set[str]) -> None:
    typer.echo("  " * depth + _format_entity(entity))
    if not entity.is_category or entity.id in visited:
        return
    visited.add(entity.id)
    for child in registry.children(entity.id, entity.type):
        _echo_tree(registry, child, depth + 1, visited)


@app.command()
def tree(
    ontology: Annotated[
        Path,
        typer.Argument(help="Path to JSON-LD ontology file (compact or expanded)"),
    ],
    entity_type: Annotated[
        str,
        typer.Option("--type", "-t", help="Entity type to print (e.g. Disease, Pathogen)"),
    ] = "Disease",
    config: ConfigOption = None,
    verbose: VerboseOption = False,
):
    """Print the materialized hierarchy of one entity type."""
    selected_type = _parse_type(entity_type)
    result = _load(ontology, config, verbose)
    registry = result.registry

    visited: set[str] = set()
    for entity in registry.top_level(selected_type):
        _echo_tree(registry, entity, 0, visited)


@app.command()
def search(
    ontology: Annotated[
        Path,
        typer.Argument(help="Path to JSON-LD ontology file (compact or expanded)"),
    ],
    text: Annotated[
        str,
        typer.Argument(help="Text to search in labels and alternate labels"),
    ],
    limit: Annotated[
        int,
        typer.Option("--limit", "-n", help="Maximum number of results"),
    ] = 20,
    config: ConfigOption = None,
):
    """Search entities by label."""
    result = _load(ontology, config)
    matches = result.registry.search(text, limit=limit)
    if not matches:
        typer.echo("No matching entities.")
        return
    for entity in matches:
        typer.echo(f"{_format_entity(entity)} [{entity.type.value}]")


@app.command()
def query(
    ontology: Annotated[
        Path,
        typer.Argument(help="Path to JSON-LD ontology file (compact or expanded)"),
    ],
    corpus: Annotated[
        Path,
        typer.Argument(help="Path to corpus JSON file"),
    ],
    terms: Annotated[
        list[str],
        typer.Argument(help="Query terms as <id or label>[=any|all|none], folded left to right"),
    ],
    config: ConfigOption = None,
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Output matching documents as JSON"),
    ] = False,
    verbose: VerboseOption = False,
):
    """Filter a corpus with a boolean query over ontology terms.

    Terms are applied strictly left to right: the first term seeds the
    result, then ANY ors, ALL ands and NONE and-nots each following term.

    Example:

        facet query ecmo.jsonld reports.json ph:VHF=all core:Pandemic=none
    """
    result = _load(ontology, config, verbose)

    if not corpus.exists():
        typer.echo(f"Error: Corpus file not found: {corpus}", err=True)
        raise typer.Exit(1)

    try:
        documents = load_documents(corpus)
        parsed = [parse_term(t, result.registry) for t in terms]
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    engine = result.engine()
    matches = engine.evaluate(parsed, documents)

    if as_json:
        typer.echo(json.dumps(
            [{"id": d.id, **d.metadata, "tags": sorted(d.tags)} for d in matches],
            indent=2,
        ))
        return

    typer.echo(f"Query: {engine.describe_query(parsed)}")
    typer.echo(f"Matched {len(matches)}/{len(documents)} documents")
    for document in matches:
        title = document.metadata.get("title", "")
        typer.echo(f"  {document.id}: {title}".rstrip(": "))


@app.command()
def related(
    ontology: Annotated[
        Path,
        typer.Argument(help="Path to JSON-LD ontology file (compact or expanded)"),
    ],
    entity: Annotated[
        str,
        typer.Argument(help="Entity identifier or label"),
    ],
    config: ConfigOption = None,
):
    """Show entities related to a term, grouped by type."""
    result = _load(ontology, config)
    try:
        selected = parse_term(entity, result.registry).entity
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    engine = result.engine()
    related_entities = engine.related_to(selected)

    typer.echo(f"{selected.label} ({selected.type.value}): {engine.describe_term(selected)}")
    if not related_entities:
        typer.echo("No related entities.")
        return

    grouped: dict[EntityType, list[Entity]] = {}
    for e in related_entities:
        grouped.setdefault(e.type, []).append(e)

    kind_by_type = {t: k for k, t in RELATION_TARGET_TYPES.items()}
    for entity_type, entities in grouped.items():
        if selected.type == EntityType.DISEASE and entity_type in kind_by_type:
            heading = RELATION_LABELS[kind_by_type[entity_type]]
        elif entity_type == EntityType.DISEASE:
            heading = REVERSE_RELATION_LABELS.get(selected.type, "is related to")
        else:
            heading = "includes"
        typer.echo(f"\n{heading} ({entity_type.value}):")
        for e in entities:
            typer.echo(f"  {_format_entity(e)}")


if __name__ == "__main__":
    app()
