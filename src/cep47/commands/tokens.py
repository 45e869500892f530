"""
Tokens - Mutating CEP-47 entry points.

Each command sends one deploy signed by the configured secret key:
- mint:    mint token ids (with metadata) to a recipient
- burn:    burn an owner's token ids
- approve: approve a spender for token ids
"""

from __future__ import annotations

import sys
from typing import Callable, Optional

import click

from ._common import load_signer, make_client, parse_meta, report_deploy, resolve_payment

_payment_option = click.option("--payment", type=int, default=None, help="Payment in motes")
_wait_option = click.option("--wait/--no-wait", default=False, help="Wait for execution")
_ids_option = click.option("--id", "ids", multiple=True, required=True, help="Token id (repeatable)")


def _send(fn: Callable[[], dict]) -> None:
    try:
        result = fn()
    except click.ClickException:
        raise
    except Exception as exc:
        click.secho(f"Deploy failed: {exc}", fg="red")
        sys.exit(1)
    report_deploy(result)


@click.command()
@click.argument("recipient")
@_ids_option
@click.option(
    "--meta",
    "meta_pairs",
    multiple=True,
    help="Token metadata KEY=VALUE, applied to every minted id",
)
@_payment_option
@_wait_option
@click.pass_context
def mint(
    ctx: click.Context,
    recipient: str,
    ids: tuple[str, ...],
    meta_pairs: tuple[str, ...],
    payment: Optional[int],
    wait: bool,
) -> None:
    """Mint token ids to RECIPIENT."""
    client = make_client(ctx)
    signer = load_signer()
    meta = parse_meta(meta_pairs)
    amount = resolve_payment(payment)
    click.echo(f"  Minting {', '.join(ids)} to {recipient}")
    _send(
        lambda: client.mint(
            recipient, list(ids), [dict(meta) for _ in ids], amount, signer, keys=[signer], wait=wait
        )
    )


@click.command()
@click.argument("owner_key", metavar="OWNER")
@_ids_option
@_payment_option
@_wait_option
@click.pass_context
def burn(
    ctx: click.Context,
    owner_key: str,
    ids: tuple[str, ...],
    payment: Optional[int],
    wait: bool,
) -> None:
    """Burn OWNER's token ids."""
    client = make_client(ctx)
    signer = load_signer()
    amount = resolve_payment(payment)
    click.echo(f"  Burning {', '.join(ids)} of {owner_key}")
    _send(lambda: client.burn(owner_key, list(ids), amount, signer, keys=[signer], wait=wait))


@click.command()
@click.argument("spender")
@_ids_option
@_payment_option
@_wait_option
@click.pass_context
def approve(
    ctx: click.Context,
    spender: str,
    ids: tuple[str, ...],
    payment: Optional[int],
    wait: bool,
) -> None:
    """Approve SPENDER for token ids."""
    client = make_client(ctx)
    signer = load_signer()
    amount = resolve_payment(payment)
    click.echo(f"  Approving {spender} for {', '.join(ids)}")
    _send(lambda: client.approve(spender, list(ids), amount, signer, keys=[signer], wait=wait))
