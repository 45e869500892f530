from __future__ import annotations

import hashlib

ACCOUNT_HASH_PREFIX = "account-hash-"
HASH_PREFIX = "hash-"


def blake2b256(data: bytes) -> bytes:
    return hashlib.blake2b(data, digest_size=32).digest()


def blake2b256_hex(data: bytes) -> str:
    return blake2b256(data).hex()


def strip_prefix(value: str, prefix: str) -> str:
    return value[len(prefix):] if value.startswith(prefix) else value


def hex_to_bytes(value: str) -> bytes:
    """Decode a hex string, tolerating an optional 0x prefix."""
    value = value.removeprefix("0x")
    try:
        return bytes.fromhex(value)
    except ValueError as exc:
        raise ValueError(f"Invalid hex string: {value!r}") from exc


CONTRACT_PREFIXES = ("contract-", HASH_PREFIX)
PACKAGE_PREFIXES = ("contract-package-wasm", "contract-package-", HASH_PREFIX)


def normalize_contract_hash(value: str, package: bool = False) -> str:
    """Return a contract (or, with ``package``, package) hash as bare lowercase hex."""
    raw = value.strip()
    for prefix in PACKAGE_PREFIXES if package else CONTRACT_PREFIXES:
        if raw.startswith(prefix):
            raw = raw[len(prefix):]
            break
    digest = hex_to_bytes(raw)
    if len(digest) != 32:
        raise ValueError(f"Contract hash must be 32 bytes, got {len(digest)}: {value}")
    return digest.hex()


def format_account_hash(identifier: bytes) -> str:
    return f"{ACCOUNT_HASH_PREFIX}{identifier.hex()}"
