"""
aurkit CLI — Query the AUR and inspect PKGBUILDs.

Usage:
    aurkit search '^python-'
    aurkit info yay --json
    aurkit msearch someone
    aurkit pkgbuild yay
    aurkit pkgbuild --file ./PKGBUILD
"""

import asyncio
import json
import logging

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table


def _run(coro):
    """Run a coroutine, turning aurkit errors into CLI errors."""
    from aurkit.core.errors import AURError

    try:
        return asyncio.run(coro)
    except AURError as e:
        raise click.ClickException(str(e)) from e


def _print_results(results: dict, as_json: bool) -> None:
    if as_json:
        click.echo(json.dumps(results, indent=2, default=str))
        return

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Name")
    table.add_column("Version")
    table.add_column("Votes", justify="right")
    table.add_column("Description")
    for name in sorted(results):
        record = results[name]
        version = escape(str(record.get("version", "")))
        if record.get("outdated"):
            version = f"[red]{version}[/red]"
        table.add_row(
            escape(name),
            version,
            str(record.get("votes", "")),
            escape(str(record.get("desc") or "")),
        )

    console = Console()
    console.print(table)
    console.print(f"[cyan]{len(results)} packages[/cyan]")


@click.group()
@click.version_option(package_name="aurkit")
@click.option("--base-url", envvar="AURKIT_BASE_URL", default=None, help="AUR base URL.")
@click.option("--user-agent", envvar="AURKIT_USER_AGENT", default=None, help="HTTP User-Agent.")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging.")
@click.pass_context
def cli(ctx, base_url, user_agent, verbose):
    """aurkit — Arch User Repository query and PKGBUILD inspection tool."""
    from aurkit.core.config import ClientConfig
    from aurkit.core.errors import ConfigError

    # Configure logging
    log_level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    if not verbose:
        logging.getLogger("httpx").setLevel(logging.WARNING)

    try:
        config = ClientConfig.from_env()
    except ConfigError as e:
        raise click.UsageError(str(e)) from e
    ctx.obj = config.with_overrides(base_url=base_url, user_agent=user_agent)


@cli.command()
@click.argument("query")
@click.option("--json", "as_json", is_flag=True, help="Print results as JSON.")
@click.pass_obj
def search(config, query, as_json):
    """Search packages. QUERY may be anchored with ^ and/or $."""
    from aurkit.core.client import AURClient

    async def _search():
        async with AURClient(config) as aur:
            return await aur.search(query)

    _print_results(_run(_search()), as_json)


@cli.command()
@click.argument("maintainer")
@click.option("--json", "as_json", is_flag=True, help="Print results as JSON.")
@click.pass_obj
def msearch(config, maintainer, as_json):
    """List the packages maintained by MAINTAINER."""
    from aurkit.core.client import AURClient

    async def _msearch():
        async with AURClient(config) as aur:
            return await aur.msearch(maintainer)

    _print_results(_run(_msearch()), as_json)


@cli.command()
@click.argument("name")
@click.option("--json", "as_json", is_flag=True, help="Print the record as JSON.")
@click.pass_obj
def info(config, name, as_json):
    """Show the RPC record of package NAME."""
    from aurkit.core.client import AURClient

    async def _info():
        async with AURClient(config) as aur:
            return await aur.info(name)

    record = _run(_info())
    if record is None:
        raise click.ClickException(f"No such package: {name}")

    if as_json:
        click.echo(json.dumps(record, indent=2, default=str))
        return

    table = Table(show_header=False)
    table.add_column("Field", style="bold cyan")
    table.add_column("Value")
    for key, value in record.items():
        if isinstance(value, list):
            value = " ".join(str(v) for v in value)
        table.add_row(key, escape(str(value)))
    Console().print(table)


@cli.command()
@click.argument("name", required=False)
@click.option(
    "--file",
    "-f",
    "path",
    type=click.Path(exists=True),
    default=None,
    help="Parse a local PKGBUILD (or directory) instead of downloading.",
)
@click.option("--json", "as_json", is_flag=True, help="Print the parsed fields as JSON.")
@click.option("--lenient", is_flag=True, help="Skip malformed depends entries instead of failing.")
@click.pass_obj
def pkgbuild(config, name, path, as_json, lenient):
    """Parse the PKGBUILD of package NAME."""
    from pathlib import Path

    from aurkit.core.client import AURClient
    from aurkit.core.package import AURPackage

    if not name and not path:
        raise click.UsageError("Give a package NAME or --file.")

    async def _pkgbuild():
        if path:
            return await AURPackage.from_path(Path(path), name=name, strict=not lenient).get_pkgbuild()
        async with AURClient(config) as aur:
            pkg = await aur.get(name, strict=not lenient)
            if pkg is None:
                raise click.ClickException(f"No such package: {name}")
            return await pkg.get_pkgbuild()

    parsed = _run(_pkgbuild())

    if as_json:
        click.echo(json.dumps(parsed.to_dict(), indent=2))
        return

    console = Console()
    table = Table(show_header=False)
    table.add_column("Field", style="bold cyan")
    table.add_column("Value")
    for key, value in parsed.fields.items():
        if key == "depends":
            continue
        if isinstance(value, list):
            value = "\n".join(value)
        table.add_row(key, escape(value))
    table.add_row("depends", escape("\n".join(str(spec) for spec in parsed.depends)))
    console.print(table)


if __name__ == "__main__":
    cli()
