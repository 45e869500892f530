"""
Signing keys and local configuration for the CEP-47 client.

Keys are Casper secret-key PEM files (ED25519 or SECP256K1), referenced by
CASPER_SECRET_KEY. Settings live in ~/.cep47/.env and are overridden by
the process environment.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Optional

import pycspr
from dotenv import load_dotenv
from pycspr.crypto import KeyAlgorithm

from .utils import normalize_contract_hash

# Default config directory
CEP47_DIR = Path.home() / ".cep47"
CEP47_ENV = CEP47_DIR / ".env"

DEFAULT_KEY_ALGO = "ED25519"


def load_env(env_path: Optional[Path] = None) -> None:
    """Load ~/.cep47/.env (or env_path) without overriding the environment."""
    env_path = env_path or CEP47_ENV
    if env_path.exists():
        load_dotenv(env_path, override=False)


def save_env_values(values: dict[str, str], env_path: Optional[Path] = None) -> Path:
    """
    Merge settings into the .env file.

    Args:
        values: Variables to set
        env_path: Path to .env file (default: ~/.cep47/.env)

    Returns:
        Path to the saved .env file
    """
    env_path = env_path or CEP47_ENV
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing = {}
    if env_path.exists():
        for line in env_path.read_text(encoding="utf-8").splitlines():
            line = line.strip()
            if line and not line.startswith("#") and "=" in line:
                k, v = line.split("=", 1)
                existing[k.strip()] = v.strip()

    existing.update(values)

    lines = [f"{k}={v}" for k, v in existing.items()]
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")

    if os.name != "nt":
        env_path.chmod(0o600)

    return env_path


def get_key_algo(name: Optional[str] = None) -> KeyAlgorithm:
    name = (name or os.environ.get("CASPER_KEY_ALGO") or DEFAULT_KEY_ALGO).upper()
    try:
        return KeyAlgorithm[name]
    except KeyError:
        raise ValueError(f"Unknown key algorithm: {name}. Use ED25519 or SECP256K1.") from None


def get_secret_key_path(env_path: Optional[Path] = None) -> Path:
    """
    Resolve the signer's secret key PEM path.

    Raises:
        ValueError: If CASPER_SECRET_KEY is not configured
        FileNotFoundError: If the PEM file does not exist
    """
    load_env(env_path)
    value = os.environ.get("CASPER_SECRET_KEY")
    if not value:
        raise ValueError(
            f"CASPER_SECRET_KEY not set. Point it at a secret_key.pem in "
            f"{env_path or CEP47_ENV} or the environment."
        )
    path = Path(value).expanduser()
    if not path.exists():
        raise FileNotFoundError(f"Secret key not found: {path}")
    return path


def load_signing_key(
    path: Optional[Path] = None,
    algo: Optional[str] = None,
) -> Any:
    """
    Load a pycspr private key from a PEM file.

    Args:
        path: PEM path (default: CASPER_SECRET_KEY)
        algo: "ED25519" or "SECP256K1" (default: CASPER_KEY_ALGO)

    Returns:
        pycspr PrivateKey
    """
    path = path or get_secret_key_path()
    return pycspr.parse_private_key(str(path), get_key_algo(algo))


def account_key_hex(key: Any) -> str:
    """Hex account key (algorithm prefix + public key) of a pycspr key."""
    return bytes(key.account_key).hex()


def get_contract_hash(env_path: Optional[Path] = None) -> tuple[str, Optional[str]]:
    """
    Read the attached contract from configuration.

    Returns:
        (contract_hash, contract_package_hash or None), bare hex

    Raises:
        ValueError: If CEP47_CONTRACT_HASH is not configured
    """
    load_env(env_path)
    contract_hash = os.environ.get("CEP47_CONTRACT_HASH")
    if not contract_hash:
        raise ValueError(
            "CEP47_CONTRACT_HASH not set. Run 'cep47 attach <hash>' or set it "
            f"in {env_path or CEP47_ENV}."
        )
    package_hash = os.environ.get("CEP47_CONTRACT_PACKAGE_HASH") or None
    return (
        normalize_contract_hash(contract_hash),
        normalize_contract_hash(package_hash, package=True) if package_hash else None,
    )
