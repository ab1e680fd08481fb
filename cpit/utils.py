"""
Utility functions for the cpit command line tool.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import click


class OutputFormat(Enum):
    """Output format options."""
    TABLE = "table"
    JSON = "json"


def setup_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Configure logging based on verbosity level."""
    if quiet:
        level = logging.WARNING
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s" if verbose else "%(message)s",
        stream=sys.stderr,
        force=True,
    )

    # urllib3 connection chatter drowns the request records
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def print_success(message: str) -> None:
    """Print a success message."""
    click.secho(f"✓ {message}", fg="green")


def print_error(message: str, details: Optional[str] = None) -> None:
    """Print an error message."""
    click.secho(f"✗ Error: {message}", fg="red", err=True)
    if details:
        click.secho(f"  {details}", fg="red", err=True)


def print_info(message: str) -> None:
    """Print an info message."""
    click.secho(f"ℹ {message}", fg="blue")


def print_json(data: Any) -> None:
    """Print data as formatted JSON."""
    click.echo(json.dumps(data, indent=2, ensure_ascii=False, default=str))


def print_table(headers: List[str], rows: List[List[Any]]) -> None:
    """Print rows as a plain text table."""
    if not rows:
        click.echo("No results.")
        return

    cells = [[str(c) for c in row] for row in rows]
    widths = [len(h) for h in headers]
    for row in cells:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(cell))

    click.echo("  ".join(h.ljust(widths[i]) for i, h in enumerate(headers)))
    click.echo("  ".join("-" * w for w in widths))
    for row in cells:
        click.echo("  ".join(cell.ljust(widths[i]) for i, cell in enumerate(row)))


def format_timestamp(value: Optional[Union[int, float]]) -> str:
    """Format a Cockpit epoch timestamp (seconds)."""
    if not value:
        return "-"
    return datetime.fromtimestamp(value, tz=timezone.utc).strftime("%Y-%m-%d %H:%M:%S")


def format_file_size(size: Optional[int]) -> str:
    """Format file size in human-readable format."""
    if size is None:
        return "-"

    value = float(size)
    for unit in ["B", "KB", "MB", "GB"]:
        if value < 1024:
            return f"{value:.1f} {unit}"
        value /= 1024
    return f"{value:.1f} TB"


def truncate_string(text: str, max_length: int = 50) -> str:
    """Truncate string to max length with ellipsis."""
    if len(text) <= max_length:
        return text
    return text[:max_length - 3] + "..."


def load_json_file(file_path: Path) -> Any:
    """Load JSON from a file."""
    try:
        with open(file_path, "r", encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {file_path}: {e}")
    except OSError as e:
        raise ValueError(f"Cannot read {file_path}: {e}")


def parse_json_option(value: Optional[str], name: str) -> Any:
    """Parse a JSON command line value."""
    if value is None:
        return None
    try:
        return json.loads(value)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON for {name}: {e}")


def confirm_action(message: str, default: bool = False) -> bool:
    """Ask for confirmation."""
    return click.confirm(message, default=default)


def _item_title(item: Dict[str, Any]) -> str:
    for key in ("title", "name", "label", "slug"):
        value = item.get(key)
        if isinstance(value, str) and value:
            return value
    return "-"


def format_item_list(items: List[Dict[str, Any]], fmt: OutputFormat) -> None:
    """Format and print a list of content items."""
    if fmt == OutputFormat.JSON:
        print_json(items)
        return

    headers = ["ID", "Title", "State", "Modified"]
    states = {-1: "archived", 0: "draft", 1: "published"}
    rows = [
        [
            item.get("_id", "-"),
            truncate_string(_item_title(item), 40),
            states.get(item.get("_state"), "-"),
            format_timestamp(item.get("_modified")),
        ]
        for item in items
    ]
    print_table(headers, rows)


def format_item(item: Any, fmt: OutputFormat) -> None:
    """Format and print a single item."""
    if fmt == OutputFormat.JSON or not isinstance(item, dict):
        print_json(item)
        return

    for key, value in item.items():
        if key in ("_created", "_modified"):
            value = format_timestamp(value)
        elif isinstance(value, (dict, list)):
            value = truncate_string(json.dumps(value, ensure_ascii=False), 60)
        click.echo(f"  {key + ':':<14} {value}")


def format_asset(asset: Dict[str, Any], fmt: OutputFormat) -> None:
    """Format and print asset metadata."""
    if fmt == OutputFormat.JSON:
        print_json(asset)
        return

    click.echo(f"\nAsset: {asset.get('title') or asset.get('_id', '-')}")
    click.echo(f"  ID:          {asset.get('_id', '-')}")
    click.echo(f"  Path:        {asset.get('path', '-')}")
    click.echo(f"  Type:        {asset.get('mime') or asset.get('type') or '-'}")
    click.echo(f"  Size:        {format_file_size(asset.get('size'))}")
    if asset.get("width") and asset.get("height"):
        click.echo(f"  Dimensions:  {asset['width']}x{asset['height']}")
    click.echo(f"  Created:     {format_timestamp(asset.get('_created'))}")
