"""
protodecode command line.

Decodes protobuf payloads given as hex/base64 text, a file or a URL and
shows them as a tree, JSON or raw debug text.

Usage:
    protodecode decode "08 96 01 12 07 74 65 73 74 69 6e 67"
    protodecode decode --file capture.bin --format json
    protodecode decode --url https://example.com/payload.pb
    protodecode stats --file capture.bin.gz
"""

import json
import logging
from enum import Enum
from pathlib import Path
from typing import List, Optional

import httpx
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from protodecode.config import HTTP_TIMEOUT, MAX_DEPTH, MAX_DEPTH_LIMIT
from protodecode.decoder import decode as decode_buffer
from protodecode.decoder import pretty_print
from protodecode.display import DisplayNode, create_error, from_nodes
from protodecode.errors import DecodeError, UnrecognizedInputFormat
from protodecode.inputs import load_payload, maybe_gunzip, parse_input
from protodecode.stats import analyze_nodes

app = typer.Typer(help="Schema-less Protobuf decoder")
console = Console()
err_console = Console(stderr=True)

logger = logging.getLogger("protodecode")


class OutputFormat(str, Enum):
    tree = "tree"
    json = "json"
    raw = "raw"


def setup_logging(verbose: bool):
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def fetch_payload(url: str) -> bytes:
    """Download a payload body."""
    logger.debug("Fetching %s", url)
    with httpx.Client(timeout=HTTP_TIMEOUT, follow_redirects=True) as client:
        response = client.get(url)
        response.raise_for_status()
        return response.content


def read_source(text: Optional[str], file: Optional[Path], url: Optional[str]) -> bytes:
    """Resolve exactly one input source to protobuf bytes."""
    given = [s for s in (text, file, url) if s is not None]
    if len(given) != 1:
        raise typer.BadParameter("Provide exactly one of TEXT, --file or --url")

    if file is not None:
        return load_payload(file.read_bytes())
    if url is not None:
        return load_payload(fetch_payload(url))
    return maybe_gunzip(parse_input(text))


def build_tree(nodes: List[DisplayNode], title: str) -> Tree:
    """Render display nodes as a rich Tree."""
    root = Tree(Text(title, style="bold"))
    _add_branches(root, nodes)
    return root


def _add_branches(parent: Tree, nodes: List[DisplayNode]):
    for node in nodes:
        if node.is_error:
            parent.add(Text(node.label, style="red"))
            continue

        line = Text()
        line.append(node.path, style="cyan")
        line.append("  ")
        if node.is_array_group:
            line.append(node.label, style="magenta")
        else:
            line.append(node.label)
        line.append(f"  ({node.summary})", style="dim")
        if node.raw_preview and not node.children:
            line.append(f"\n{node.raw_preview}", style="dim")

        branch = parent.add(line)
        _add_branches(branch, node.children)


def _fail(message: str):
    err_console.print(f"[red]Error:[/red] {escape(message)}", highlight=False)
    raise typer.Exit(code=1)


@app.command()
def decode(
    text: Optional[str] = typer.Argument(None, help="Hex or base64 payload"),
    file: Optional[Path] = typer.Option(None, "--file", "-f", exists=True, dir_okay=False, help="Payload file (binary or text dump)"),
    url: Optional[str] = typer.Option(None, "--url", "-u", help="URL to fetch the payload from"),
    output: OutputFormat = typer.Option(OutputFormat.tree, "--format", "-o", help="Output format"),
    max_depth: int = typer.Option(MAX_DEPTH, "--max-depth", min=0, max=MAX_DEPTH_LIMIT, help="Nested message depth limit"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
):
    """Decode a payload and show its field tree."""
    setup_logging(verbose)

    try:
        data = read_source(text, file, url)
    except (DecodeError, UnrecognizedInputFormat) as e:
        _show_error(str(e), output)
    except httpx.HTTPError as e:
        _fail(f"Could not fetch payload: {e}")
    except (OSError, EOFError) as e:
        _fail(f"Could not read payload: {e}")

    try:
        nodes = decode_buffer(data, max_depth=max_depth)
    except DecodeError as e:
        _show_error(str(e), output)

    if output == OutputFormat.raw:
        typer.echo(pretty_print(nodes), nl=False)
        return

    display = from_nodes(nodes)
    if output == OutputFormat.json:
        typer.echo(json.dumps([n.to_dict() for n in display], indent=2, ensure_ascii=False))
    else:
        console.print(build_tree(display, f"{len(data)} bytes, {len(nodes)} top-level fields"))


def _show_error(message: str, output: OutputFormat):
    error = create_error(message)
    if output == OutputFormat.json:
        typer.echo(json.dumps([error.to_dict()], ensure_ascii=False))
    elif output == OutputFormat.raw:
        err_console.print(message, markup=False, highlight=False)
    else:
        console.print(build_tree([error], "Decode failed"))
    raise typer.Exit(code=1)


@app.command()
def stats(
    text: Optional[str] = typer.Argument(None, help="Hex or base64 payload"),
    file: Optional[Path] = typer.Option(None, "--file", "-f", exists=True, dir_okay=False, help="Payload file (binary or text dump)"),
    url: Optional[str] = typer.Option(None, "--url", "-u", help="URL to fetch the payload from"),
    max_depth: int = typer.Option(MAX_DEPTH, "--max-depth", min=0, max=MAX_DEPTH_LIMIT, help="Nested message depth limit"),
    as_json: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
):
    """Summarize the structure of a payload."""
    setup_logging(verbose)

    try:
        data = read_source(text, file, url)
        nodes = decode_buffer(data, max_depth=max_depth)
    except (DecodeError, UnrecognizedInputFormat) as e:
        _fail(str(e))
    except httpx.HTTPError as e:
        _fail(f"Could not fetch payload: {e}")
    except (OSError, EOFError) as e:
        _fail(f"Could not read payload: {e}")

    result = analyze_nodes(nodes)
    if as_json:
        typer.echo(json.dumps({"size": len(data), **result.to_dict()}, indent=2))
        return

    table = Table(title=f"{len(data)} bytes")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    table.add_row("Total nodes", str(result.total_nodes))
    table.add_row("Nested nodes", str(result.nested_nodes))
    table.add_row("Max depth", str(result.max_depth))
    table.add_row("Field numbers", f"{result.min_field_number} - {result.max_field_number}")
    for wire_type, count in sorted(result.wire_type_counts.items()):
        table.add_row(wire_type.label, str(count))
    console.print(table)


def main():
    app()


if __name__ == "__main__":
    main()
