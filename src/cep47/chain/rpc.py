"""
JSON-RPC client for a Casper node.

Thin layer over httpx: every public function performs one JSON-RPC 2.0
request (plus a state root hash lookup for global state queries) and
returns the ``result`` member unchanged, or the stored CLValue JSON for
state queries.
"""

from __future__ import annotations

import logging
import os
import time
from typing import Any, Optional

import httpx

from ..utils import HASH_PREFIX

logger = logging.getLogger(__name__)

DEFAULT_NODE_ADDRESS = "http://localhost:11101/rpc"
DEFAULT_NETWORK_NAME = "casper-net-1"
DEFAULT_TIMEOUT = 30


class RpcError(RuntimeError):
    """Error member of a JSON-RPC response."""

    def __init__(self, code: Optional[int], message: str, data: Any = None) -> None:
        super().__init__(f"RPC error {code}: {message}")
        self.code = code
        self.message = message
        self.data = data


def get_node_address() -> str:
    """Get the node JSON-RPC URL from environment or default."""
    return os.environ.get("CASPER_NODE_ADDRESS", DEFAULT_NODE_ADDRESS)


def get_network_name() -> str:
    """Get the chain name from environment or default."""
    return os.environ.get("CASPER_NETWORK_NAME", DEFAULT_NETWORK_NAME)


def rpc_call(method: str, params: Any, node_address: Optional[str] = None) -> Any:
    """
    Make a JSON-RPC call.

    Args:
        method: RPC method name (e.g., "state_get_dictionary_item")
        params: RPC parameters (list or named object)
        node_address: JSON-RPC endpoint URL

    Returns:
        Result field from the RPC response

    Raises:
        RpcError: If the node answers with an error member
        httpx.HTTPError: On transport or HTTP status failures
    """
    url = node_address or get_node_address()
    payload = {
        "jsonrpc": "2.0",
        "method": method,
        "params": params,
        "id": 1,
    }
    logger.debug("rpc %s -> %s", method, url)

    with httpx.Client(timeout=DEFAULT_TIMEOUT) as client:
        response = client.post(url, json=payload)
        response.raise_for_status()
        data = response.json()

    if "error" in data:
        error = data["error"] or {}
        raise RpcError(error.get("code"), error.get("message", ""), error.get("data"))

    return data.get("result")


def get_state_root_hash(node_address: Optional[str] = None) -> str:
    """Get the state root hash of the latest block."""
    result = rpc_call("chain_get_state_root_hash", [], node_address=node_address)
    return result["state_root_hash"]


def _stored_cl_value(result: dict) -> dict:
    stored = result.get("stored_value") or {}
    if "CLValue" not in stored:
        raise ValueError(f"Stored value is not a CLValue: {sorted(stored)}")
    return stored["CLValue"]


def query_contract_data(
    contract_hash: str,
    path: list[str],
    node_address: Optional[str] = None,
    state_root_hash: Optional[str] = None,
) -> dict:
    """
    Read a named key stored under a contract.

    Args:
        contract_hash: Bare hex contract hash
        path: Named-key path below the contract (e.g. ["total_supply"])
        node_address: JSON-RPC endpoint URL
        state_root_hash: State to query (default: latest)

    Returns:
        CLValue JSON with ``cl_type``, ``bytes`` and ``parsed``
    """
    srh = state_root_hash or get_state_root_hash(node_address)
    result = rpc_call(
        "state_get_item",
        {
            "state_root_hash": srh,
            "key": f"{HASH_PREFIX}{contract_hash}",
            "path": list(path),
        },
        node_address=node_address,
    )
    return _stored_cl_value(result)


def query_contract_dictionary(
    contract_hash: str,
    dictionary_name: str,
    item_key: str,
    node_address: Optional[str] = None,
    state_root_hash: Optional[str] = None,
) -> dict:
    """
    Read one item from a dictionary named under a contract.

    Args:
        contract_hash: Bare hex contract hash
        dictionary_name: Named key of the dictionary (e.g. "owners")
        item_key: Dictionary item key
        node_address: JSON-RPC endpoint URL
        state_root_hash: State to query (default: latest)

    Returns:
        CLValue JSON with ``cl_type``, ``bytes`` and ``parsed``
    """
    srh = state_root_hash or get_state_root_hash(node_address)
    result = rpc_call(
        "state_get_dictionary_item",
        {
            "state_root_hash": srh,
            "dictionary_identifier": {
                "ContractNamedKey": {
                    "key": f"{HASH_PREFIX}{contract_hash}",
                    "dictionary_name": dictionary_name,
                    "dictionary_item_key": item_key,
                }
            },
        },
        node_address=node_address,
    )
    return _stored_cl_value(result)


def put_deploy(deploy_json: dict, node_address: Optional[str] = None) -> str:
    """
    Submit a signed deploy.

    Returns:
        Deploy hash (hex)
    """
    result = rpc_call("account_put_deploy", {"deploy": deploy_json}, node_address=node_address)
    deploy_hash = result["deploy_hash"]
    logger.info("deploy submitted: %s", deploy_hash)
    return deploy_hash


def get_deploy(deploy_hash: str, node_address: Optional[str] = None) -> dict:
    """Fetch a deploy and its execution results."""
    return rpc_call("info_get_deploy", {"deploy_hash": deploy_hash}, node_address=node_address)


def wait_for_deploy(
    deploy_hash: str,
    timeout: int = 180,
    poll_interval: float = 5.0,
    node_address: Optional[str] = None,
) -> list[dict]:
    """
    Wait until a deploy has been executed in a block.

    Args:
        deploy_hash: Deploy hash
        timeout: Maximum wait time in seconds
        poll_interval: Polling interval in seconds
        node_address: JSON-RPC endpoint URL

    Returns:
        The deploy's execution results

    Raises:
        TimeoutError: If the deploy is not executed within timeout
    """
    start = time.time()
    while time.time() - start < timeout:
        result = get_deploy(deploy_hash, node_address=node_address)
        if result and result.get("execution_results"):
            return result["execution_results"]
        time.sleep(poll_interval)

    raise TimeoutError(f"Deploy {deploy_hash} not executed within {timeout}s")
