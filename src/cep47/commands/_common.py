from __future__ import annotations

import os
import sys
from typing import Any, Optional

import click

from ..client import CEP47Client
from ..keys import get_contract_hash, load_signing_key


def make_client(ctx: click.Context, attach: bool = True) -> CEP47Client:
    """Build a client from the group options, attached to the configured contract."""
    obj = ctx.find_root().obj or {}
    client = CEP47Client(obj["node_address"], obj["network_name"])
    if attach:
        try:
            contract_hash, package_hash = get_contract_hash()
        except ValueError as exc:
            click.secho(f"ERROR: {exc}", fg="red")
            sys.exit(1)
        client.set_contract_hash(contract_hash, package_hash)
    return client


def load_signer() -> Any:
    try:
        return load_signing_key()
    except (ValueError, FileNotFoundError) as exc:
        click.secho(f"ERROR: {exc}", fg="red")
        sys.exit(1)


def resolve_payment(payment: Optional[int]) -> int:
    """Payment in motes: --payment flag > CEP47_PAYMENT_AMOUNT."""
    if payment is not None:
        return payment
    configured = os.environ.get("CEP47_PAYMENT_AMOUNT")
    if configured:
        return int(configured)
    raise click.ClickException("Payment not specified. Use --payment or set CEP47_PAYMENT_AMOUNT.")


def parse_meta(pairs: tuple[str, ...]) -> dict[str, str]:
    """Parse repeated KEY=VALUE options into a metadata map."""
    meta = {}
    for pair in pairs:
        if "=" not in pair:
            raise click.BadParameter(f"Expected KEY=VALUE, got {pair!r}", param_hint="--meta")
        k, v = pair.split("=", 1)
        meta[k] = v
    return meta


def report_deploy(result: dict) -> None:
    click.secho("SUCCESS: Deploy submitted", fg="green")
    click.echo(f"  Deploy: {result['deploy_hash']}")
    for execution in result.get("execution_results") or []:
        outcome = execution.get("result", {})
        if "Failure" in outcome:
            click.secho(f"  FAILED: {outcome['Failure'].get('error_message', 'unknown')}", fg="red")
            sys.exit(1)
        click.echo(f"  Executed in block {execution.get('block_hash', '?')}")
