#!/usr/bin/env python3
"""Resolve chemical identifiers from the command line.

Single lookups print every equivalent identifier found for one input. Batch
mode reads a TSV of (kind, value) rows, resolves them in parallel, and writes
one output row per input with the resolved identifiers, source and confidence.

Remote source settings can be overridden through CHEMRESOLVE_* environment
variables or a .env file (see chemresolve.config).
"""

import csv
import json
import logging
import sys
from pathlib import Path

import click
from dotenv import load_dotenv
from tqdm import tqdm

from chemresolve.config import cache_ttl_from_env
from chemresolve.identifiers import IdentifierKind
from chemresolve.resolution.models import ResolutionRequest, ResolutionResult
from chemresolve.resolution.orchestrator import ResolutionOrchestrator
from chemresolve.store.identifier_cache import IdentifierCache
from chemresolve.validation import FORMAT_EXAMPLES, FORMAT_PATTERNS

logger = logging.getLogger(__name__)

KIND_CHOICE = click.Choice([kind.value for kind in IdentifierKind], case_sensitive=False)
RESULT_COLUMNS = ["success", "source", "confidence", "error_kind", "error"]


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
    )


def build_orchestrator(offline: bool) -> ResolutionOrchestrator:
    """Create an orchestrator; offline mode uses only the local table."""
    cache = IdentifierCache(ttl=cache_ttl_from_env())
    if offline:
        return ResolutionOrchestrator(sources=[], cache=cache)
    return ResolutionOrchestrator(cache=cache)


def format_result(result: ResolutionResult) -> str:
    """Human-readable summary of a result."""
    if not result.success:
        kind = result.error_kind.value if result.error_kind else "error"
        return f"[{kind}] {result.error}"

    lines = [f"Source: {result.source}", f"Confidence: {result.confidence:.2f}"]
    for key, value in result.identifiers.to_dict().items():
        lines.append(f"  {key}: {value}")
    render = result.render_value()
    if render:
        lines.append(f"Render from {render[0].value}: {render[1]}")
    return "\n".join(lines)


def result_row(request: ResolutionRequest, result: ResolutionResult) -> dict[str, str]:
    """Flatten a result into a TSV row."""
    row = {
        "kind": request.kind.value,
        "value": request.raw_value,
        "success": str(result.success).lower(),
        "source": result.source or "",
        "confidence": f"{result.confidence:.2f}",
        "error_kind": result.error_kind.value if result.error_kind else "",
        "error": result.error or "",
    }
    for kind in IdentifierKind:
        row[kind.value] = result.identifiers.get(kind) or ""
    return row


@click.group()
def main() -> None:
    """Resolve chemical identifiers across local and remote sources."""
    load_dotenv()


@main.command()
@click.argument("kind", type=KIND_CHOICE)
@click.argument("value")
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON")
@click.option("--offline", is_flag=True, help="Only use the built-in compound table")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
def resolve(kind: str, value: str, as_json: bool, offline: bool, verbose: bool) -> None:
    """Resolve VALUE, an identifier of type KIND."""
    setup_logging(verbose)
    orchestrator = build_orchestrator(offline)
    result = orchestrator.resolve(IdentifierKind.parse(kind), value)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
    else:
        click.echo(format_result(result))

    if not result.success:
        sys.exit(1)


@main.command()
@click.argument("input_file", type=click.Path(exists=True, path_type=Path))
@click.option(
    "--output",
    "-o",
    "output_file",
    type=click.Path(path_type=Path),
    default=None,
    help="Output TSV file (default: stdout)",
)
@click.option("--kind-column", default="kind", show_default=True, help="Column holding the identifier kind")
@click.option("--value-column", default="value", show_default=True, help="Column holding the identifier value")
@click.option("--workers", "-w", type=click.IntRange(min=1), default=4, show_default=True, help="Parallel resolutions")
@click.option("--offline", is_flag=True, help="Only use the built-in compound table")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
def batch(
    input_file: Path,
    output_file: Path | None,
    kind_column: str,
    value_column: str,
    workers: int,
    offline: bool,
    verbose: bool,
) -> None:
    """Resolve every (kind, value) row of a TSV file."""
    setup_logging(verbose)
    with input_file.open(newline="", encoding="utf-8") as f:
        reader = csv.DictReader(f, delimiter="\t")
        rows = list(reader)

    requests: list[ResolutionRequest] = []
    for line_number, row in enumerate(rows, start=2):
        try:
            kind = IdentifierKind.parse(row.get(kind_column) or "")
        except ValueError as e:
            raise click.ClickException(f"{input_file}:{line_number}: {e}") from e
        requests.append(ResolutionRequest(kind=kind, raw_value=row.get(value_column) or ""))

    click.echo(f"Resolving {len(requests)} identifiers", err=True)
    orchestrator = build_orchestrator(offline)
    results: list[ResolutionResult] = []
    with tqdm(total=len(requests), desc="Resolving", file=sys.stderr) as progress:
        # Chunk so the progress bar moves while workers stay busy
        for start in range(0, len(requests), workers):
            chunk = requests[start : start + workers]
            results.extend(orchestrator.resolve_many(chunk, max_workers=workers))
            progress.update(len(chunk))

    fieldnames = ["kind", "value", *RESULT_COLUMNS, *(kind.value for kind in IdentifierKind)]
    out = output_file.open("w", newline="", encoding="utf-8") if output_file else sys.stdout
    try:
        writer = csv.DictWriter(out, fieldnames=fieldnames, delimiter="\t")
        writer.writeheader()
        for request, result in zip(requests, results, strict=True):
            writer.writerow(result_row(request, result))
    finally:
        if output_file:
            out.close()
            logger.info(f"Wrote {len(results)} rows to {output_file}")

    resolved = sum(1 for r in results if r.success)
    click.echo(f"Resolved {resolved}/{len(results)}", err=True)


@main.command()
def kinds() -> None:
    """List supported identifier kinds with an example of each."""
    for kind in IdentifierKind:
        pattern = FORMAT_PATTERNS.get(kind)
        pattern_text = pattern.pattern if pattern else "(any)"
        click.echo(f"{kind.value:<18} {FORMAT_EXAMPLES[kind]:<20} {pattern_text}")


if __name__ == "__main__":
    main()
