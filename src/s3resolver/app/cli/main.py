"""CLI main entry point."""

import json
import sys

import click

from ...client import create_engine
from ...core import INVALID_TIME, MalformedPathError, ResolutionEngine, ResolverConfig, parse


def _entry_output(engine: ResolutionEngine, s3_url: str, resolved: str) -> dict[str, object]:
    output: dict[str, object] = {"path": s3_url, "resolved": resolved}
    info = engine.entry_info(s3_url)
    if info is not None:
        output.update(info.to_dict())
    return output


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, debug: bool) -> None:
    """s3resolver - resolve s3:// asset identifiers to a local cache."""
    config = ResolverConfig.from_env()
    if debug:
        config.log_level = "DEBUG"
    ctx.obj = create_engine(config)


@cli.command(name="parse")
@click.argument("s3_url")
def parse_command(s3_url: str) -> None:
    """Split an S3 URL into bucket, key and version."""
    try:
        s3_path = parse(s3_url)
    except MalformedPathError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    output = {
        "bucket": s3_path.bucket,
        "key": s3_path.key,
        "version_id": s3_path.version_id,
        "is_versioned": s3_path.is_versioned,
        "normalized": s3_path.normalized,
    }
    click.echo(json.dumps(output, indent=2))


@cli.command()
@click.argument("s3_url")
@click.pass_obj
def resolve(engine: ResolutionEngine, s3_url: str) -> None:
    """Resolve a path without downloading it."""
    resolved = engine.resolve(s3_url)
    if not resolved:
        click.echo(f"Error: Cannot resolve {s3_url}", err=True)
        sys.exit(1)
    click.echo(json.dumps(_entry_output(engine, s3_url, resolved), indent=2))


@cli.command()
@click.argument("s3_url")
@click.pass_obj
def fetch(engine: ResolutionEngine, s3_url: str) -> None:
    """Resolve and download an S3 object into the local cache."""
    if not engine.matches_schema(s3_url):
        click.echo(f"Error: Invalid S3 URL: {s3_url}", err=True)
        sys.exit(1)

    resolved = engine.resolve(s3_url)
    if not resolved or not engine.fetch_asset(s3_url, resolved):
        click.echo(f"Error: Failed to fetch {s3_url}", err=True)
        sys.exit(1)

    # A second resolve returns the local path now that the entry is fetched
    resolved = engine.resolve(s3_url)
    output = _entry_output(engine, s3_url, resolved)
    timestamp = engine.get_timestamp(s3_url)
    output["timestamp"] = timestamp if timestamp != INVALID_TIME else None
    click.echo(json.dumps(output, indent=2))


def main() -> None:
    """Main entry point."""
    cli()
