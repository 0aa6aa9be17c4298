"""CLI commands for markdowngit."""

from __future__ import annotations

import logging
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from markdowngit.models.config import MarkdownGitConfig
from markdowngit.providers.base import SHORTCODE_ACTIONS
from markdowngit.providers.registry import ProviderRegistry

console = Console()


def get_registry(config_path: str | None) -> ProviderRegistry:
    return ProviderRegistry(MarkdownGitConfig.load(Path(config_path) if config_path else None))


@click.group()
@click.option("--config", "config_path", default=None, help="Path to markdowngit YAML config")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    help="Logging verbosity",
)
@click.pass_context
def main(ctx: click.Context, config_path: str | None, log_level: str) -> None:
    """markdowngit - Render files from Git hosting providers as HTML."""
    logging.basicConfig(
        level=log_level.upper(),
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["registry"] = get_registry(config_path)


@main.command()
@click.pass_context
def providers(ctx: click.Context) -> None:
    """List providers and their shortcodes."""
    registry: ProviderRegistry = ctx.obj["registry"]

    table = Table(title="Providers")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Auth")
    table.add_column("Notebooks", justify="center")
    table.add_column("Shortcodes", style="green")

    for config in registry.js_configs():
        table.add_row(
            config["id"],
            config["name"],
            config["authType"],
            "yes" if config["supportsNotebooks"] else "no",
            ", ".join(config["shortcodes"]),
        )

    console.print(table)


@main.command()
@click.argument("shortcode")
@click.argument("url")
@click.option("--user", "-u", default="", help="Override the configured user")
@click.option("--token", "-t", default="", help="Override the configured token")
@click.option("--limit", "-n", default="", help="History entries to show")
@click.pass_context
def render(ctx: click.Context, shortcode: str, url: str, user: str, token: str, limit: str) -> None:
    """Expand SHORTCODE (e.g. git-github-markdown) for URL and print the HTML."""
    registry: ProviderRegistry = ctx.obj["registry"]

    try:
        html = registry.render(shortcode, {"url": url, "user": user, "token": token, "limit": limit})
    except KeyError:
        console.print(f"[red]Unknown shortcode: {shortcode}[/red]")
        console.print(f"[dim]Available: {', '.join(registry.list_shortcodes())}[/dim]")
        raise SystemExit(1)
    finally:
        registry.close()

    click.echo(html)


@main.command("render-url")
@click.argument("action", type=click.Choice(list(SHORTCODE_ACTIONS)))
@click.argument("url")
@click.option("--user", "-u", default="", help="Override the configured user")
@click.option("--token", "-t", default="", help="Override the configured token")
@click.option("--limit", "-n", default="", help="History entries to show")
@click.pass_context
def render_url(ctx: click.Context, action: str, url: str, user: str, token: str, limit: str) -> None:
    """Render URL with ACTION, picking the provider from the URL host."""
    registry: ProviderRegistry = ctx.obj["registry"]

    provider = registry.for_url(url)
    if provider is None:
        console.print(f"[red]No provider handles {url}[/red]")
        registry.close()
        raise SystemExit(1)

    try:
        html = registry.render(
            provider.shortcode(action),
            {"url": url, "user": user, "token": token, "limit": limit},
        )
    finally:
        registry.close()

    click.echo(html)


@main.command()
@click.option("--host", default="127.0.0.1", help="Host to bind")
@click.option("--port", "-p", default=8000, help="Port to bind")
@click.option("--prefix", default="/shortcodes", help="API prefix")
@click.pass_context
def serve(ctx: click.Context, host: str, port: int, prefix: str) -> None:
    """Start the shortcode API server."""
    import uvicorn

    from markdowngit.api import create_app

    registry: ProviderRegistry = ctx.obj["registry"]
    registry.close()

    app = create_app(registry.config, prefix=prefix)

    console.print(f"[green]Starting server at http://{host}:{port}{prefix}[/green]")
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    main()
