"""Click CLI for printing provider webhook IP ranges."""

from __future__ import annotations

import json

import click

from src.ipranges.fetchers import IPRangeFetcher, IPRangeFetchError


@click.group()
@click.option(
    "--timeout",
    type=float,
    default=None,
    help="HTTP timeout in seconds (default: IP_RANGES_TIMEOUT_SECONDS or 30).",
)
@click.pass_context
def cli(ctx: click.Context, timeout: float | None) -> None:
    """Fetch published IP ranges of code-hosting providers."""
    ctx.ensure_object(dict)
    try:
        ctx.obj["fetcher"] = IPRangeFetcher.from_env(timeout=timeout)
    except ValueError as exc:
        raise click.ClickException(str(exc)) from exc


def _emit(ranges: list[str]) -> None:
    click.echo(json.dumps(ranges, indent=2))


@cli.command()
@click.pass_context
def github(ctx: click.Context) -> None:
    """Print the ranges GitHub delivers webhooks from."""
    fetcher: IPRangeFetcher = ctx.obj["fetcher"]
    try:
        _emit(fetcher.github_hook_ranges())
    except IPRangeFetchError as exc:
        raise click.ClickException(str(exc)) from exc


@cli.command()
@click.pass_context
def bitbucket(ctx: click.Context) -> None:
    """Print the IPv4 ranges published for Bitbucket Cloud."""
    fetcher: IPRangeFetcher = ctx.obj["fetcher"]
    try:
        _emit(fetcher.bitbucket_ip_ranges())
    except IPRangeFetchError as exc:
        raise click.ClickException(str(exc)) from exc
