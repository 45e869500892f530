"""
CEP-47 CLI

Command-line interface for a CEP-47 NFT contract on a Casper network.

Commands:
  install         - Deploy the contract wasm
  attach          - Record the contract hash to use
  whoami          - Show the configured signer
  info            - Collection name, symbol, metadata, supply
  balance         - Token count of an account
  owner           - Owner of a token
  token-meta      - Metadata of a token
  token-by-index  - Token id at an owner's index
  index-by-token  - Owner's index of a token
  allowance       - Approved spender of a token
  mint / burn / approve - Mutating entry points
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

import click

from .chain.rpc import get_network_name, get_node_address
from .keys import CEP47_ENV, account_key_hex, load_env, load_signing_key, save_env_values
from .utils import normalize_contract_hash


# ============ Constants ============

VERSION = "1.0.0"


# ============ Main CLI Group ============


@click.group()
@click.version_option(version=VERSION, prog_name="cep47")
@click.option(
    "--node-address",
    default=get_node_address,
    help="Casper node JSON-RPC URL (env: CASPER_NODE_ADDRESS)",
)
@click.option(
    "--network-name",
    default=get_network_name,
    help="Casper chain name (env: CASPER_NETWORK_NAME)",
)
@click.option("--verbose", "-v", is_flag=True, help="Log RPC calls and deploys")
@click.pass_context
def cli(ctx: click.Context, node_address: str, network_name: str, verbose: bool) -> None:
    """CEP-47 NFT contract client."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    ctx.obj = {"node_address": node_address, "network_name": network_name}


# ============ Top-level Commands ============

from .commands.install import install
from .commands.query import allowance, balance, index_by_token, info, owner, token_by_index, token_meta
from .commands.tokens import approve, burn, mint

cli.add_command(install)
cli.add_command(info)
cli.add_command(balance)
cli.add_command(owner)
cli.add_command(token_meta)
cli.add_command(token_by_index)
cli.add_command(index_by_token)
cli.add_command(allowance)
cli.add_command(mint)
cli.add_command(burn)
cli.add_command(approve)


# ============ Identity ============


@cli.command()
def whoami() -> None:
    """Show the configured signer's account key."""
    try:
        key = load_signing_key()
    except (ValueError, FileNotFoundError) as exc:
        click.echo(f"No signing key: {exc}")
        sys.exit(1)
    click.echo(f"Account key:  {account_key_hex(key)}")
    click.echo(f"Account hash: account-hash-{bytes(key.account_hash).hex()}")


# ============ Contract ============


@cli.command()
@click.argument("contract_hash")
@click.option("--package-hash", default=None, help="Contract package hash")
def attach(contract_hash: str, package_hash: Optional[str]) -> None:
    """Record CONTRACT_HASH as the contract to operate on."""
    try:
        values = {"CEP47_CONTRACT_HASH": normalize_contract_hash(contract_hash)}
        if package_hash:
            values["CEP47_CONTRACT_PACKAGE_HASH"] = normalize_contract_hash(package_hash, package=True)
    except ValueError as exc:
        raise click.BadParameter(str(exc)) from exc

    path = save_env_values(values)
    click.echo(f"Attached hash-{values['CEP47_CONTRACT_HASH']}")
    click.echo(f"  Saved to {path}")


# ============ Entry Points ============


def main() -> None:
    """CEP-47 CLI entry point."""
    load_env(CEP47_ENV)
    cli()


if __name__ == "__main__":
    main()
