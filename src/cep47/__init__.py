__all__ = [
    # Client
    "CEP47Client",
    "CEP47InstallArgs",
    # Errors
    "Cep47Error",
    "ContractNotSetError",
    "EntryNotFoundError",
    "RpcError",
    # Encoding
    "ENTRY_POINTS",
    "account_hash_hex",
    "dictionary_key",
    "encode_args",
    # Keys
    "load_signing_key",
]

from .chain.args import ENTRY_POINTS, account_hash_hex, dictionary_key, encode_args
from .chain.rpc import RpcError
from .client import (
    CEP47Client,
    CEP47InstallArgs,
    Cep47Error,
    ContractNotSetError,
    EntryNotFoundError,
)
from .keys import load_signing_key
