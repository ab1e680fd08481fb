"""
cpit CLI - Command line interface for the Cockpit CMS API.

This module provides the main CLI entry point and all commands for:
- Configuration management
- Content operations (list, get, upsert, delete)
- Assets (metadata, images, links)
"""

import sys
import logging
from dataclasses import replace
from functools import wraps
from pathlib import Path
from typing import Any, List, Optional

import click

from . import __version__, __prog_name__
from .config import ConfigManager, CockpitConfig, get_config_manager
from .api import (
    CockpitClient,
    Option,
    with_fields,
    with_filter,
    with_height,
    with_limit,
    with_locale,
    with_mime,
    with_populate,
    with_quality,
    with_resize_mode,
    with_skip,
    with_sort,
    with_width,
)
from .api.options import RESIZE_MODES, MIME_TYPES
from .exceptions import CockpitError, NotFoundError, ValidationError
from .utils import (
    OutputFormat,
    setup_logging,
    print_success,
    print_error,
    print_info,
    print_json,
    format_item_list,
    format_item,
    format_asset,
    load_json_file,
    parse_json_option,
    confirm_action,
)

logger = logging.getLogger(__name__)


# ============================================================================
# CLI Context and Common Options
# ============================================================================

class CpitContext:
    """CLI context object for sharing state between commands."""

    def __init__(self):
        self.config_manager: ConfigManager = None  # type: ignore[assignment]

    def get_client(self, verbose: bool = False) -> CockpitClient:
        """Create a client from the stored configuration."""
        config = self.config_manager.get()
        if verbose:
            config = replace(config, debug=True)
        return CockpitClient(config)


pass_context = click.make_pass_decorator(CpitContext, ensure=True)


def common_options(f):
    """Common options for all commands."""
    f = click.option(
        '-v', '--verbose',
        is_flag=True,
        help='Enable verbose output (logs every request)'
    )(f)
    f = click.option(
        '-q', '--quiet',
        is_flag=True,
        help='Suppress non-essential output'
    )(f)
    f = click.option(
        '-f', '--format',
        'output_format',
        type=click.Choice(['table', 'json']),
        default='table',
        help='Output format'
    )(f)
    return f


def require_config(f):
    """Decorator to require base URL and API key."""
    @click.pass_context
    @wraps(f)
    def wrapper(click_ctx, *args, **kwargs):
        ctx = click_ctx.ensure_object(CpitContext)
        config = ctx.config_manager.get()

        if not config.is_configured():
            print_error(
                "cpit is not configured.",
                "Run 'cpit configure --base-url URL --api-key KEY' or set "
                "CPIT_BASEURL and CPIT_APIKEY."
            )
            sys.exit(1)

        return click_ctx.invoke(f, *args, **kwargs)

    return wrapper


def _fail(e: CockpitError) -> None:
    print_error(str(e), e.details)
    sys.exit(1)


# ============================================================================
# Main CLI Group
# ============================================================================

@click.group()
@click.version_option(version=__version__, prog_name=__prog_name__)
@click.option(
    '--config-dir',
    type=click.Path(path_type=Path),
    envvar='CPIT_CONFIG_DIR',
    help='Custom configuration directory'
)
@click.pass_context
def cli(ctx, config_dir: Optional[Path]):
    """
    cpit - Cockpit CMS command line client.

    \b
    Quick Start:
      1. Configure:     cpit configure --base-url https://cms.example.com/api --api-key API-...
      2. List items:    cpit items posts --limit 10
      3. Get an item:   cpit item posts 6501f3b2...
      4. Image URL:     cpit image ASSET_ID --mode thumbnail --width 300

    \b
    Environment Variables:
      CPIT_BASEURL      - API base URL
      CPIT_APIKEY       - API key
      CPIT_DEBUG        - Log every request (1/0)
      CPIT_TIMEOUT      - Request timeout in seconds
      CPIT_CONFIG_DIR   - Custom configuration directory
    """
    ctx.ensure_object(CpitContext)
    ctx.obj.config_manager = get_config_manager(config_dir)


# ============================================================================
# Configuration Commands
# ============================================================================

@cli.command('configure')
@click.option('--base-url', '-u', help='API base URL, e.g. https://cms.example.com/api')
@click.option('--api-key', '-k', help='API key')
@click.option('--timeout', '-t', type=float, help='Request timeout in seconds')
@click.option('--show', is_flag=True, help='Show current configuration')
@pass_context
def configure(
    ctx: CpitContext,
    base_url: Optional[str],
    api_key: Optional[str],
    timeout: Optional[float],
    show: bool
):
    """
    Configure cpit settings.

    \b
    Examples:
      cpit configure --base-url https://cms.example.com/api --api-key API-abc
      cpit configure --show
    """
    config_manager = ctx.config_manager

    if show:
        config = config_manager.get()
        click.echo("\nCurrent Configuration:")
        click.echo(f"  Base URL:     {config.base_url or '(not set)'}")
        click.echo(f"  API Key:      {'*' * 20 if config.api_key else '(not set)'}")
        click.echo(f"  Timeout:      {config.timeout}s")
        click.echo(f"  Debug:        {config.debug}")
        click.echo(f"  Config Path:  {config_manager.get_config_path()}")
        return

    updates = {}
    if base_url:
        updates['base_url'] = base_url
    if api_key:
        updates['api_key'] = api_key
    if timeout is not None:
        if timeout <= 0:
            print_error("Timeout must be greater than 0.")
            sys.exit(1)
        updates['timeout'] = timeout

    if updates:
        config_manager.update(**updates)
        print_success("Configuration saved successfully.")
    else:
        print_info("No changes made.")


# ============================================================================
# Content Commands
# ============================================================================

@cli.command('items')
@common_options
@click.argument('model')
@click.option('--limit', '-n', type=int, help='Maximum number of items')
@click.option('--skip', '-s', type=int, help='Number of items to skip (with --limit)')
@click.option('--sort', help='Sort document, e.g. \'{"_created": -1}\'')
@click.option('--filter', 'filter_', help='Filter document, e.g. \'{"published": true}\'')
@click.option('--fields', help='Projection, e.g. \'{"title": 1}\'')
@click.option('--locale', '-l', help='Locale of localized fields')
@click.option('--populate', is_flag=True, help='Resolve linked items')
@pass_context
@require_config
def list_items(
    ctx: CpitContext,
    verbose: bool,
    quiet: bool,
    output_format: str,
    model: str,
    limit: Optional[int],
    skip: Optional[int],
    sort: Optional[str],
    filter_: Optional[str],
    fields: Optional[str],
    locale: Optional[str],
    populate: bool
):
    """
    List items of a collection model.

    \b
    Examples:
      cpit items posts
      cpit items posts --limit 10 --skip 20 --sort '{"_created": -1}'
      cpit items posts --filter '{"title": {"$regex": "/cat/i"}}' -f json
    """
    setup_logging(verbose, quiet)
    fmt = OutputFormat(output_format)

    options: List[Option] = []
    if limit is not None:
        options.append(with_limit(limit))
    if skip is not None:
        options.append(with_skip(skip))
    if sort:
        options.append(with_sort(sort))
    if filter_:
        options.append(with_filter(filter_))
    if fields:
        options.append(with_fields(fields))
    if locale:
        options.append(with_locale(locale))
    if populate:
        options.append(with_populate(True))

    try:
        with ctx.get_client(verbose) as client:
            page = client.list_items(model, *options)

            if fmt == OutputFormat.JSON:
                print_json(page.model_dump())
                return

            if not quiet:
                total = f", {page.total} total" if page.total is not None else ""
                click.echo(f"\nItems of '{model}' ({len(page.data)} shown{total}):\n")
            format_item_list(page.data, fmt)

    except CockpitError as e:
        _fail(e)


@cli.command('item')
@common_options
@click.argument('model')
@click.argument('item_id', required=False)
@click.option('--locale', '-l', help='Locale of localized fields')
@click.option('--populate', is_flag=True, help='Resolve linked items')
@pass_context
@require_config
def get_item(
    ctx: CpitContext,
    verbose: bool,
    quiet: bool,
    output_format: str,
    model: str,
    item_id: Optional[str],
    locale: Optional[str],
    populate: bool
):
    """
    Get an item, or the singleton MODEL when no ID is given.

    \b
    Examples:
      cpit item posts 6501f3b2c1d2
      cpit item settings --locale de
    """
    setup_logging(verbose, quiet)
    fmt = OutputFormat(output_format)

    options: List[Option] = []
    if locale:
        options.append(with_locale(locale))
    if populate:
        options.append(with_populate(True))

    try:
        with ctx.get_client(verbose) as client:
            if item_id:
                item = client.get_item(model, item_id, *options)
            else:
                item = client.get_singleton(model, *options)
            format_item(item, fmt)

    except NotFoundError:
        print_error(f"Not found: {model}" + (f"/{item_id}" if item_id else ""))
        sys.exit(1)
    except CockpitError as e:
        _fail(e)


@cli.command('upsert')
@common_options
@click.argument('model')
@click.option('--data', '-d', 'data_json', help='Item fields as JSON')
@click.option(
    '--file', '-F', 'data_file',
    type=click.Path(exists=True, path_type=Path),
    help='JSON file with the item fields'
)
@pass_context
@require_config
def upsert_item(
    ctx: CpitContext,
    verbose: bool,
    quiet: bool,
    output_format: str,
    model: str,
    data_json: Optional[str],
    data_file: Optional[Path]
):
    """
    Create or update an item. Include "_id" in the data to update.

    \b
    Examples:
      cpit upsert posts --data '{"title": "Hello"}'
      cpit upsert posts --file post.json
    """
    setup_logging(verbose, quiet)
    fmt = OutputFormat(output_format)

    if bool(data_json) == bool(data_file):
        print_error("Provide exactly one of --data or --file.")
        sys.exit(1)

    try:
        data: Any = load_json_file(data_file) if data_file else parse_json_option(data_json, "--data")
    except ValueError as e:
        print_error(str(e))
        sys.exit(1)

    try:
        with ctx.get_client(verbose) as client:
            item = client.upsert_item(model, data)

            if fmt == OutputFormat.JSON:
                print_json(item)
            else:
                print_success(f"Item saved in '{model}'.")
                if isinstance(item, dict):
                    click.echo(f"  ID: {item.get('_id', '-')}")

    except ValidationError as e:
        print_error(f"Validation error: {e}", e.details)
        sys.exit(1)
    except CockpitError as e:
        _fail(e)


@cli.command('delete')
@common_options
@click.argument('model')
@click.argument('item_id')
@click.option('--yes', '-y', is_flag=True, help='Skip confirmation')
@pass_context
@require_config
def delete_item(
    ctx: CpitContext,
    verbose: bool,
    quiet: bool,
    output_format: str,
    model: str,
    item_id: str,
    yes: bool
):
    """
    Delete an item.

    \b
    Examples:
      cpit delete posts 6501f3b2c1d2
      cpit delete posts 6501f3b2c1d2 --yes
    """
    setup_logging(verbose, quiet)

    if not yes and not confirm_action(f"Delete item {item_id} of '{model}'?"):
        print_info("Cancelled.")
        return

    try:
        with ctx.get_client(verbose) as client:
            client.delete_item(model, item_id)
            print_success(f"Item deleted: {item_id}")

    except NotFoundError:
        print_error(f"Item not found: {model}/{item_id}")
        sys.exit(1)
    except CockpitError as e:
        _fail(e)


# ============================================================================
# Asset Commands
# ============================================================================

@cli.command('asset')
@common_options
@click.argument('asset_id')
@pass_context
@require_config
def get_asset(
    ctx: CpitContext,
    verbose: bool,
    quiet: bool,
    output_format: str,
    asset_id: str
):
    """
    Show asset metadata.

    \b
    Examples:
      cpit asset 6502a1...
    """
    setup_logging(verbose, quiet)
    fmt = OutputFormat(output_format)

    try:
        with ctx.get_client(verbose) as client:
            asset = client.get_asset(asset_id)
            format_asset(asset.model_dump(by_alias=True), fmt)

    except NotFoundError:
        print_error(f"Asset not found: {asset_id}")
        sys.exit(1)
    except CockpitError as e:
        _fail(e)


@cli.command('image')
@common_options
@click.argument('asset_id')
@click.option('--mode', '-m', type=click.Choice(RESIZE_MODES), help='Resize mode')
@click.option('--width', '-w', type=int, help='Width in pixels')
@click.option('--height', '-h', type=int, help='Height in pixels')
@click.option('--quality', type=int, help='Quality (1-100)')
@click.option('--mime', type=click.Choice(MIME_TYPES), help='Output format')
@pass_context
@require_config
def get_image(
    ctx: CpitContext,
    verbose: bool,
    quiet: bool,
    output_format: str,
    asset_id: str,
    mode: Optional[str],
    width: Optional[int],
    height: Optional[int],
    quality: Optional[int],
    mime: Optional[str]
):
    """
    Get the URL of a resized/converted image.

    \b
    Examples:
      cpit image 6502a1... --mode thumbnail --width 300 --height 200
      cpit image 6502a1... --mime webp --quality 80
    """
    setup_logging(verbose, quiet)

    options: List[Option] = []
    if mode:
        options.append(with_resize_mode(mode))
    if width is not None:
        options.append(with_width(width))
    if height is not None:
        options.append(with_height(height))
    if quality is not None:
        options.append(with_quality(quality))
    if mime:
        options.append(with_mime(mime))

    try:
        with ctx.get_client(verbose) as client:
            click.echo(client.get_image(asset_id, *options))

    except NotFoundError:
        print_error(f"Image not found: {asset_id}")
        sys.exit(1)
    except CockpitError as e:
        _fail(e)


@cli.command('link')
@click.argument('target')
@click.option('--upload', is_flag=True, help='TARGET is a storage path, not an asset id')
@pass_context
def asset_link(ctx: CpitContext, target: str, upload: bool):
    """
    Print the public link of an asset (no request is made).

    \b
    Examples:
      cpit link 6502a1...
      cpit link --upload 2024/01/photo.jpg
    """
    config: CockpitConfig = ctx.config_manager.get()
    try:
        client = CockpitClient(config)
        if upload:
            click.echo(client.upload_link(target))
        else:
            click.echo(client.asset_link(target))
    except CockpitError as e:
        _fail(e)


# ============================================================================
# Entry Point
# ============================================================================

def main():
    """Main entry point for the CLI."""
    try:
        cli(auto_envvar_prefix='CPIT')
    except KeyboardInterrupt:
        click.echo("\nAborted.")
        sys.exit(130)
    except Exception as e:
        logger.exception("Unexpected error")
        print_error(f"Unexpected error: {e}")
        sys.exit(1)


if __name__ == '__main__':
    main()
