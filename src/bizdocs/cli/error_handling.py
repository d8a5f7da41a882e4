"""CLI error handling helpers."""

import json
from dataclasses import asdict
from datetime import datetime
from decimal import Decimal
from enum import Enum

import click

from bizdocs.domain.errors import DomainError


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)


def _json_default(value):
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    raise TypeError(f"Cannot serialize {type(value).__name__}")


def echo_json(data) -> None:
    """Print entities (or dicts of them) as JSON with money as numbers."""
    if hasattr(data, "__dataclass_fields__"):
        data = asdict(data)
    click.echo(json.dumps(data, default=_json_default, indent=2))
