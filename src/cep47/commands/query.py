"""
Query - Read CEP-47 contract state.

Commands:
- info:            collection name, symbol, metadata and total supply
- balance:         token count of an account
- owner:           owner of a token
- token-meta:      metadata of a token
- token-by-index:  token id at an owner's index
- index-by-token:  owner's index of a token id
- allowance:       approved spender of an owner's token
"""

from __future__ import annotations

import sys
from typing import Any, Callable

import click

from ..client import EntryNotFoundError
from ._common import make_client


def _read(fn: Callable[[], Any]) -> Any:
    try:
        return fn()
    except EntryNotFoundError as exc:
        click.secho(f"Not found: {exc}", fg="yellow")
        sys.exit(1)
    except Exception as exc:
        click.secho(f"ERROR: Failed to read on-chain data: {exc}", fg="red")
        sys.exit(1)


@click.command()
@click.pass_context
def info(ctx: click.Context) -> None:
    """Show collection name, symbol, metadata and supply."""
    client = make_client(ctx)
    name = _read(client.name)
    symbol = _read(client.symbol)
    meta = _read(client.meta)
    supply = _read(client.total_supply)

    click.echo(f"  Contract:      hash-{client.contract_hash}")
    click.echo(f"  Name:          {name}")
    click.echo(f"  Symbol:        {symbol}")
    click.echo(f"  Total supply:  {supply}")
    for k, v in meta.items():
        click.echo(f"  meta.{k}: {v}")


@click.command()
@click.argument("account")
@click.pass_context
def balance(ctx: click.Context, account: str) -> None:
    """Token count of ACCOUNT (account key hex or account-hash-…)."""
    client = make_client(ctx)
    click.echo(_read(lambda: client.balance_of(account)))


@click.command()
@click.argument("token_id")
@click.pass_context
def owner(ctx: click.Context, token_id: str) -> None:
    """Owner of TOKEN_ID."""
    client = make_client(ctx)
    click.echo(_read(lambda: client.get_owner_of(token_id)))


@click.command("token-meta")
@click.argument("token_id")
@click.pass_context
def token_meta(ctx: click.Context, token_id: str) -> None:
    """Metadata of TOKEN_ID."""
    client = make_client(ctx)
    meta = _read(lambda: client.get_token_meta(token_id))
    for k, v in meta.items():
        click.echo(f"{k}={v}")


@click.command("token-by-index")
@click.argument("owner_key", metavar="OWNER")
@click.argument("index")
@click.pass_context
def token_by_index(ctx: click.Context, owner_key: str, index: str) -> None:
    """Token id at INDEX of OWNER's tokens."""
    client = make_client(ctx)
    click.echo(_read(lambda: client.get_token_by_index(owner_key, index)))


@click.command("index-by-token")
@click.argument("owner_key", metavar="OWNER")
@click.argument("token_id")
@click.pass_context
def index_by_token(ctx: click.Context, owner_key: str, token_id: str) -> None:
    """Index of TOKEN_ID among OWNER's tokens."""
    client = make_client(ctx)
    click.echo(_read(lambda: client.get_index_by_token(owner_key, token_id)))


@click.command()
@click.argument("owner_key", metavar="OWNER")
@click.argument("token_id")
@click.pass_context
def allowance(ctx: click.Context, owner_key: str, token_id: str) -> None:
    """Spender approved for OWNER's TOKEN_ID."""
    client = make_client(ctx)
    click.echo(_read(lambda: client.get_allowance(owner_key, token_id)))
