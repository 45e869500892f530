"""
Deploy Builder - Build, approve, and submit Casper deploys.

Uses pycspr for deploy construction and signing, and the httpx-based
JSON-RPC client for submission. Payment is a standard payment in motes
from the sender's main purse.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Iterable, Optional

import pycspr
from pycspr import types

from . import rpc
from .args import encode_args
from ..utils import hex_to_bytes

logger = logging.getLogger(__name__)


def _build_deploy(
    session: Any,
    payment_amount: int,
    sender: Any,
    network_name: str,
) -> Any:
    params = pycspr.create_deploy_parameters(account=sender, chain_name=network_name)
    payment = pycspr.create_standard_payment(int(payment_amount))
    return pycspr.create_deploy(params, payment, session)


def sign_and_send(
    deploy: Any,
    keys: Optional[Iterable[Any]] = None,
    node_address: Optional[str] = None,
    wait: bool = False,
    timeout: int = 180,
) -> dict:
    """
    Approve a deploy with each key and submit it.

    Args:
        deploy: Unsigned pycspr deploy
        keys: Private keys to approve with
        node_address: JSON-RPC endpoint URL
        wait: Whether to wait for execution
        timeout: Execution wait timeout

    Returns:
        Dict with deploy_hash and optionally execution_results
    """
    for key in keys or []:
        deploy.approve(key)

    deploy_json = pycspr.to_json(deploy)
    if isinstance(deploy_json, str):
        deploy_json = json.loads(deploy_json)

    deploy_hash = rpc.put_deploy(deploy_json, node_address=node_address)
    result: dict[str, Any] = {"deploy_hash": deploy_hash}

    if wait:
        result["execution_results"] = rpc.wait_for_deploy(
            deploy_hash, timeout=timeout, node_address=node_address
        )

    return result


def install_contract(
    wasm: bytes,
    args: dict[str, Any],
    payment_amount: int,
    sender: Any,
    network_name: str,
    keys: Optional[Iterable[Any]] = None,
    node_address: Optional[str] = None,
    wait: bool = False,
) -> dict:
    """
    Install a contract from wasm bytes.

    Args:
        wasm: Contract wasm module
        args: Plain install arguments (see ENTRY_POINTS["install"])
        payment_amount: Payment in motes
        sender: Public (or private) key of the deploy's account
        network_name: Chain name
        keys: Private keys to approve with
        node_address: JSON-RPC endpoint URL
        wait: Whether to wait for execution

    Returns:
        Dict with deploy_hash and optionally execution_results
    """
    session = types.ModuleBytes(
        module_bytes=bytes(wasm),
        args=encode_args("install", args),
    )
    deploy = _build_deploy(session, payment_amount, sender, network_name)
    logger.debug("install deploy: %d wasm bytes, payment %s", len(wasm), payment_amount)
    return sign_and_send(deploy, keys=keys, node_address=node_address, wait=wait)


def call_entry_point(
    contract_hash: str,
    entry_point: str,
    args: dict[str, Any],
    payment_amount: int,
    sender: Any,
    network_name: str,
    keys: Optional[Iterable[Any]] = None,
    node_address: Optional[str] = None,
    wait: bool = False,
) -> dict:
    """
    Call an entry point of a stored contract by hash.

    Args:
        contract_hash: Bare hex contract hash
        entry_point: Entry point name (e.g. "mint")
        args: Plain runtime arguments (see ENTRY_POINTS)
        payment_amount: Payment in motes
        sender: Public (or private) key of the deploy's account
        network_name: Chain name
        keys: Private keys to approve with
        node_address: JSON-RPC endpoint URL
        wait: Whether to wait for execution

    Returns:
        Dict with deploy_hash and optionally execution_results
    """
    session = types.StoredContractByHash(
        entry_point=entry_point,
        hash=hex_to_bytes(contract_hash),
        args=encode_args(entry_point, args),
    )
    deploy = _build_deploy(session, payment_amount, sender, network_name)
    logger.debug("call %s on hash-%s", entry_point, contract_hash)
    return sign_and_send(deploy, keys=keys, node_address=node_address, wait=wait)
