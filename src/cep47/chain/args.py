"""
Runtime arguments of the CEP-47 contract.

Entry-point argument schema plus encoding of plain Python values into
pycspr CLValues. Also derives the hashed dictionary item keys the
contract uses for per-owner records.
"""

from __future__ import annotations

from typing import Any

import pycspr
from pycspr import crypto, types

from ..utils import (
    ACCOUNT_HASH_PREFIX,
    HASH_PREFIX,
    blake2b256_hex,
    hex_to_bytes,
)

# Argument names and CL types, in the order the contract declares them.
ENTRY_POINTS: dict[str, list[tuple[str, str]]] = {
    "install": [
        ("name", "String"),
        ("contract_name", "String"),
        ("symbol", "String"),
        ("meta", "Map(String,String)"),
    ],
    "approve": [
        ("spender", "Key"),
        ("token_ids", "List(U256)"),
    ],
    "mint": [
        ("recipient", "Key"),
        ("token_ids", "List(U256)"),
        ("token_metas", "List(Map(String,String))"),
    ],
    "burn": [
        ("owner", "Key"),
        ("token_ids", "List(U256)"),
    ],
}

U256_MAX = 2**256 - 1


def _split_params(inner: str) -> list[str]:
    """Split ``A,B`` at the top-level comma of a generic type's parameters."""
    depth = 0
    for i, c in enumerate(inner):
        if c == "(":
            depth += 1
        elif c == ")":
            depth -= 1
        elif c == "," and depth == 0:
            return [inner[:i].strip(), inner[i + 1:].strip()]
    return [inner.strip()]


def _key_parts(value: Any) -> tuple[bytes, Any]:
    """Resolve a key-like value to (identifier, CL_KeyType)."""
    # pycspr PublicKey / PrivateKey
    if hasattr(value, "account_hash"):
        return bytes(value.account_hash), types.CL_KeyType.ACCOUNT

    if not isinstance(value, str):
        raise ValueError(f"Unsupported key value: {value!r}")

    if value.startswith(ACCOUNT_HASH_PREFIX):
        identifier = hex_to_bytes(value[len(ACCOUNT_HASH_PREFIX):])
        key_type = types.CL_KeyType.ACCOUNT
    elif value.startswith(HASH_PREFIX):
        identifier = hex_to_bytes(value[len(HASH_PREFIX):])
        key_type = types.CL_KeyType.HASH
    else:
        identifier = crypto.get_account_hash(hex_to_bytes(value))
        key_type = types.CL_KeyType.ACCOUNT

    if len(identifier) != 32:
        raise ValueError(f"Key identifier must be 32 bytes: {value}")
    return identifier, key_type


def account_hash_hex(account: Any) -> str:
    """
    Account hash of a key-like value as bare hex.

    Accepts ``account-hash-…`` strings, hex account keys (public keys with
    algorithm prefix) and pycspr key objects.
    """
    if isinstance(account, str) and account.startswith(ACCOUNT_HASH_PREFIX):
        identifier = hex_to_bytes(account[len(ACCOUNT_HASH_PREFIX):])
        if len(identifier) != 32:
            raise ValueError(f"Account hash must be 32 bytes: {account}")
        return identifier.hex()
    if isinstance(account, str) and account.startswith(HASH_PREFIX):
        raise ValueError(f"Not an account: {account}")
    identifier, _ = _key_parts(account)
    return identifier.hex()


def to_cl_key(value: Any) -> Any:
    identifier, key_type = _key_parts(value)
    return types.CL_Key(identifier, key_type)


def to_cl_value(cl_type: str, value: Any) -> Any:
    """
    Encode a Python value as a pycspr CLValue of the given CL type.

    Args:
        cl_type: Type name, e.g. "String", "U256", "Key", "List(U256)",
            "Map(String,String)"
        value: Plain Python value (str / int / list / dict / key-like)

    Raises:
        ValueError: For unknown types or out-of-range values
    """
    cl_type = cl_type.strip()

    if cl_type.startswith("List(") and cl_type.endswith(")"):
        item_type = cl_type[5:-1]
        return types.CL_List([to_cl_value(item_type, item) for item in value])

    if cl_type.startswith("Map(") and cl_type.endswith(")"):
        params = _split_params(cl_type[4:-1])
        if len(params) != 2:
            raise ValueError(f"Map type needs key and value types: {cl_type}")
        key_type, value_type = params
        return types.CL_Map(
            [
                (to_cl_value(key_type, k), to_cl_value(value_type, v))
                for k, v in dict(value).items()
            ]
        )

    if cl_type == "String":
        return types.CL_String(str(value))

    if cl_type == "U256":
        number = int(value)
        if not 0 <= number <= U256_MAX:
            raise ValueError(f"U256 out of range: {value}")
        return types.CL_U256(number)

    if cl_type == "Key":
        return to_cl_key(value)

    raise ValueError(f"Unsupported CL type: {cl_type}")


def to_bytes(cl_value: Any) -> bytes:
    """Serialise a CLValue to its on-chain byte representation."""
    return bytes(pycspr.to_bytes(cl_value))


def encode_args(entry_point: str, values: dict[str, Any]) -> dict[str, Any]:
    """
    Encode runtime arguments for a CEP-47 entry point.

    Args:
        entry_point: One of ENTRY_POINTS
        values: Plain values keyed by argument name

    Returns:
        Mapping of argument name to CLValue, in declaration order
    """
    schema = ENTRY_POINTS.get(entry_point)
    if schema is None:
        raise ValueError(f"Entry point {entry_point} not in CEP-47 schema")

    missing = [name for name, _ in schema if name not in values]
    if missing:
        raise ValueError(f"Missing arguments for {entry_point}: {', '.join(missing)}")

    return {name: to_cl_value(cl_type, values[name]) for name, cl_type in schema}


def dictionary_key(owner: Any, value: Any, value_type: str = "U256") -> str:
    """
    Derive a hashed dictionary item key.

    blake2b-256 over the bytes of Key(owner) followed by the bytes of
    ``value`` encoded as ``value_type``, hex encoded.
    """
    owner_bytes = to_bytes(to_cl_key(owner))
    value_bytes = to_bytes(to_cl_value(value_type, value))
    return blake2b256_hex(owner_bytes + value_bytes)
