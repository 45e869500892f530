"""
Install - Deploy a CEP-47 contract wasm.

Sends the install deploy signed by the configured secret key and
optionally records the resulting contract hash with ``cep47 attach``.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

import click

from ..client import CEP47InstallArgs
from ..keys import account_key_hex
from ._common import load_signer, make_client, parse_meta, report_deploy, resolve_payment


@click.command()
@click.option(
    "--wasm",
    "wasm_path",
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to the contract wasm",
)
@click.option("--name", required=True, help="Collection name")
@click.option("--contract-name", required=True, help="Named key prefix for the contract")
@click.option("--symbol", required=True, help="Collection symbol")
@click.option("--meta", "meta_pairs", multiple=True, help="Collection metadata KEY=VALUE")
@click.option("--payment", type=int, default=None, help="Payment in motes")
@click.option("--wait/--no-wait", default=False, help="Wait for execution")
@click.pass_context
def install(
    ctx: click.Context,
    wasm_path: Path,
    name: str,
    contract_name: str,
    symbol: str,
    meta_pairs: tuple[str, ...],
    payment: Optional[int],
    wait: bool,
) -> None:
    """Install the CEP-47 contract."""
    client = make_client(ctx, attach=False)
    signer = load_signer()
    args = CEP47InstallArgs(
        name=name,
        contract_name=contract_name,
        symbol=symbol,
        meta=parse_meta(meta_pairs),
    )

    click.echo(f"  Sender: {account_key_hex(signer)}")
    click.echo(f"  Network: {client.network_name}")
    click.echo(f"  Contract: {contract_name} ({symbol})")

    try:
        result = client.install(
            wasm_path.read_bytes(),
            args,
            resolve_payment(payment),
            signer,
            keys=[signer],
            wait=wait,
        )
    except click.ClickException:
        raise
    except Exception as exc:
        click.secho(f"Install failed: {exc}", fg="red")
        sys.exit(1)

    report_deploy(result)
