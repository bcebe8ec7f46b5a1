"""CLI interface for content-viewer.

Commands:
    setup      - Configure the proxy URL and favorites storage
    query      - Fetch a transcript or scraped page, filter it, save favorites
    favorites  - List, copy, open or remove saved favorites
    serve      - Run the Supadata proxy server
    status     - Show configuration and favorites summary
"""

import sys
from pathlib import Path

import click

from .config import (
    CONFIG_FILE,
    DEFAULT_SERVER_URL,
    DEFAULT_STORAGE_FILE,
    AppConfig,
    config_exists,
    resolve_config,
    save_config,
)
from .logging_config import setup_logging
from .models import FavoriteKind, Mode


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.option("--config", type=click.Path(), default=None, help="Config file path")
@click.pass_context
def main(ctx, verbose, config):
    """Content Viewer — Transcripts and web pages, filtered, with favorites."""
    handler = setup_logging(debug=verbose)
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = Path(config) if config else CONFIG_FILE
    ctx.obj["log_handler"] = handler
    ctx.obj["verbose"] = verbose


def _load_app_config(ctx) -> AppConfig:
    try:
        return resolve_config(ctx.obj["config_path"])
    except (ValueError, OSError) as e:
        click.echo(f"Error: Invalid config: {e}", err=True)
        sys.exit(1)


def _open_store(config: AppConfig):
    from .favorites import FavoritesStore
    from .storage import LocalStorage

    return FavoritesStore(LocalStorage(config.storage_file))


@main.command()
@click.pass_context
def setup(ctx):
    """Configure the proxy URL and where favorites are stored."""
    config_path = ctx.obj["config_path"]

    click.echo("Content Viewer — Setup")
    click.echo("=" * 40)
    click.echo()
    click.echo("The viewer talks to a proxy that holds your Supadata API key.")
    click.echo("Start one locally with 'content-viewer serve' (SUPADATA_API_KEY must be set).")
    click.echo()

    server_url = click.prompt("Proxy URL", default=DEFAULT_SERVER_URL)
    if not server_url.startswith(("http://", "https://")):
        click.echo("Error: Proxy URL must start with http:// or https://", err=True)
        sys.exit(1)
    storage_file = click.prompt("Favorites storage file", default=str(DEFAULT_STORAGE_FILE))

    config = AppConfig(server_url=server_url, storage_file=Path(storage_file))
    save_config(config, config_path)
    click.echo(f"\nConfig saved to {config_path}")
    click.echo("Run 'content-viewer query URL' to fetch content.")


@main.command()
@click.argument("url", default="")
@click.option(
    "--mode",
    type=click.Choice([m.value for m in Mode]),
    default=Mode.TRANSCRIPT.value,
    show_default=True,
    help="transcript (video to text) or scrape (web page to markdown)",
)
@click.option("-f", "--filter", "keyword", default="", help="Keyword to filter lines by")
@click.option("--all", "show_all", is_flag=True, help="Show all lines (matches are still counted)")
@click.option(
    "--markdown/--no-markdown",
    default=True,
    help="Show the rendered markdown panel (scrape mode)",
)
@click.option(
    "--save-lines",
    default=None,
    help="Save lines of a panel as a text favorite, e.g. 3 or 2-5",
)
@click.option(
    "--panel",
    type=click.Choice(["raw", "markdown"]),
    default="raw",
    show_default=True,
    help="Panel that --save-lines numbers refer to",
)
@click.option("--save-image", type=int, default=None, help="Save image N as a favorite")
@click.pass_context
def query(ctx, url, mode, keyword, show_all, markdown, save_lines, panel, save_image):
    """Fetch URL and show its content, optionally saving favorites."""
    # Lazy imports so --help stays fast
    from .client import ProxyClient
    from .favorites import EmptySelectionError
    from .renderer import format_view, render_content
    from .selection import LineRangeSelectionReader, Region, save_selection
    from .session import QuerySession, QueryState
    from .urls import parse_base

    config = _load_app_config(ctx)
    store = _open_store(config)

    with ProxyClient(config.server_url, timeout=config.timeout) as client:
        session = QuerySession(client)
        result = session.run(url, Mode(mode))

    if session.state is QueryState.ERROR or result is None:
        click.echo(f"Error: {session.error}", err=True)
        sys.exit(1)

    base = parse_base(result.url)
    only_matches = not show_all

    def _render():
        return render_content(result, keyword, only_matches, store.image_urls, base)

    view = _render()
    notes: list[str] = []

    if save_image is not None:
        slot = view.image(save_image)
        if slot is None:
            click.echo(
                f"Error: No image #{save_image} (found {len(view.images)}).",
                err=True,
            )
            sys.exit(1)
        item = store.add_image(slot.src, slot.alt, result.url, result.mode)
        if item:
            notes.append(f"Saved image {slot.src} as favorite {item.id[:8]}.")
            view = _render()
        else:
            notes.append(f"Image {slot.src} is already a favorite.")

    if save_lines is not None:
        reader = LineRangeSelectionReader(view.panels, save_lines, Region(panel))
        try:
            item = save_selection(reader, store, result.url, result.mode)
        except EmptySelectionError as e:
            notes.append(f"Notice: {e}")
        else:
            notes.append(f"Saved text as favorite {item.id[:8]}.")

    click.echo(format_view(view, show_markdown=markdown))
    for note in notes:
        click.echo(note, err=True)


@main.group()
def favorites():
    """Manage saved favorites."""


@favorites.command("list")
@click.pass_context
def list_favorites(ctx):
    """List favorites, newest first."""
    store = _open_store(_load_app_config(ctx))

    click.echo(f"Favorites ({len(store)})")
    click.echo("=" * 40)
    if not len(store):
        click.echo(
            "No favorites yet. Save text with 'query --save-lines' "
            "or images with 'query --save-image'."
        )
        return

    for item in store:
        created = item.created_at.astimezone().strftime("%Y-%m-%d %H:%M")
        click.echo(f"{item.id[:8]}  {created} — {item.source_mode.value} — {item.source_url}")
        if item.kind is FavoriteKind.IMAGE:
            if item.alt:
                click.echo(f"    alt: {item.alt}")
            click.echo(f"    image: {item.image_url}")
        else:
            for line in item.text.split("\n"):
                click.echo(f"    > {line}")
        click.echo()


def _find_or_exit(store, favorite_id: str):
    item = store.find(favorite_id)
    if item is None:
        click.echo(f"Error: No favorite matches '{favorite_id}'.", err=True)
        sys.exit(1)
    return item


@favorites.command("copy")
@click.argument("favorite_id")
@click.pass_context
def copy_favorite(ctx, favorite_id):
    """Copy a favorite's text or image URL to the clipboard."""
    store = _open_store(_load_app_config(ctx))
    item = _find_or_exit(store, favorite_id)

    if store.copy_to_clipboard(item):
        what = "image URL" if item.kind is FavoriteKind.IMAGE else "text"
        click.echo(f"Copied {what} to clipboard.")
    else:
        # No clipboard available: print it so it can be copied by hand
        click.echo(item.payload)


@favorites.command("open")
@click.argument("favorite_id")
@click.pass_context
def open_favorite(ctx, favorite_id):
    """Open an image favorite, or a text favorite's source page."""
    store = _open_store(_load_app_config(ctx))
    item = _find_or_exit(store, favorite_id)

    target = item.image_url if item.kind is FavoriteKind.IMAGE else item.source_url
    click.echo(f"Opening {target}")
    click.launch(target)


@favorites.command("remove")
@click.argument("favorite_id")
@click.pass_context
def remove_favorite(ctx, favorite_id):
    """Remove a favorite."""
    store = _open_store(_load_app_config(ctx))
    item = store.find(favorite_id)
    if item is None:
        click.echo(f"Nothing removed: no favorite matches '{favorite_id}'.")
        return
    store.remove(item.id)
    click.echo(f"Removed favorite {item.id[:8]}.")


@main.command()
@click.option("--host", default=None, help="Interface to bind (default from HOST or 127.0.0.1)")
@click.option("--port", type=int, default=None, help="Port to listen on (default from PORT or 3000)")
@click.pass_context
def serve(ctx, host, port):
    """Run the Supadata proxy server."""
    import uvicorn

    from .logging_config import route_uvicorn_logs
    from .proxy import ProxySettings, create_app

    settings = ProxySettings()
    if host:
        settings.host = host
    if port:
        settings.port = port

    route_uvicorn_logs(ctx.obj["log_handler"])
    click.echo(f"Proxy listening on http://{settings.host}:{settings.port}")
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_config=None,
        log_level="debug" if ctx.obj["verbose"] else settings.log_level.lower(),
    )


@main.command()
@click.pass_context
def status(ctx):
    """Show configuration and favorites summary."""
    config_path = ctx.obj["config_path"]
    has_config = config_exists(config_path)

    click.echo("Content Viewer — Status")
    click.echo("=" * 40)
    click.echo(f"Config: {'Found' if has_config else 'Not configured (using defaults)'} ({config_path})")

    config = _load_app_config(ctx)
    click.echo(f"Proxy URL: {config.server_url}")
    click.echo(f"Storage file: {config.storage_file}")

    store = _open_store(config)
    images = sum(1 for f in store if f.kind is FavoriteKind.IMAGE)
    click.echo(f"Favorites: {len(store)} ({len(store) - images} text, {images} images)")
