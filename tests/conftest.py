"""
Shared fixtures: an in-memory CEP-47 contract standing in for a node.

FakeCep47Node patches the chain layer (state queries and deploy
submission) and applies mint / burn / approve the way the CEP-47
contract does, storing values as the node's parsed CLValue JSON.
"""

from __future__ import annotations

from typing import Any, Optional
from unittest.mock import patch

import pytest

from cep47.chain.args import account_hash_hex, dictionary_key
from cep47.chain.rpc import RpcError

CONTRACT_HASH = "ab" * 32
ALICE = "account-hash-" + "11" * 32
BOB = "account-hash-" + "22" * 32
CAROL = "account-hash-" + "33" * 32


def _option(inner: Any, parsed: Any) -> dict:
    return {"cl_type": {"Option": inner}, "bytes": "", "parsed": parsed}


class FakeCep47Node:
    def __init__(self, name: str = "Art", symbol: str = "ART", meta: Optional[dict] = None) -> None:
        self.named: dict[str, dict] = {
            "name": {"cl_type": "String", "parsed": name},
            "symbol": {"cl_type": "String", "parsed": symbol},
            "meta": {
                "cl_type": {"Map": {"key": "String", "value": "String"}},
                "parsed": [{"key": k, "value": v} for k, v in (meta or {"origin": "fake"}).items()],
            },
            "total_supply": {"cl_type": "U256", "parsed": "0"},
        }
        self.dictionaries: dict[str, dict[str, dict]] = {
            "balances": {},
            "owners": {},
            "metadata": {},
            "owned_tokens_by_index": {},
            "owned_indexes_by_token": {},
            "allowances": {},
        }
        self.calls: list[dict] = []
        self.installs: list[dict] = []

    # ---- contract storage helpers ----

    def _get(self, dictionary: str, key: str) -> Any:
        entry = self.dictionaries[dictionary].get(key)
        return None if entry is None else entry["parsed"]

    def _set(self, dictionary: str, key: str, inner: Any, parsed: Any) -> None:
        self.dictionaries[dictionary][key] = _option(inner, parsed)

    def _balance(self, owner: str) -> int:
        return int(self._get("balances", account_hash_hex(owner)) or 0)

    def _supply_add(self, delta: int) -> None:
        supply = int(self.named["total_supply"]["parsed"]) + delta
        self.named["total_supply"]["parsed"] = str(supply)

    # ---- entry points ----

    def _mint(self, recipient: str, token_ids: list, token_metas: list) -> None:
        for token_id, meta in zip(token_ids, token_metas):
            token_id = str(token_id)
            balance = self._balance(recipient)
            self._set("owners", token_id, "Key", recipient)
            self._set(
                "metadata",
                token_id,
                {"Map": {"key": "String", "value": "String"}},
                [{"key": k, "value": v} for k, v in meta.items()],
            )
            self._set("owned_tokens_by_index", dictionary_key(recipient, balance), "U256", token_id)
            self._set("owned_indexes_by_token", dictionary_key(recipient, token_id), "U256", str(balance))
            self._set("balances", account_hash_hex(recipient), "U256", str(balance + 1))
            self._supply_add(1)

    def _burn(self, owner: str, token_ids: list) -> None:
        for token_id in token_ids:
            token_id = str(token_id)
            last = self._balance(owner) - 1
            index = int(self._get("owned_indexes_by_token", dictionary_key(owner, token_id)))
            last_token = self._get("owned_tokens_by_index", dictionary_key(owner, last))

            self._set("owned_tokens_by_index", dictionary_key(owner, index), "U256", last_token)
            self._set("owned_indexes_by_token", dictionary_key(owner, last_token), "U256", str(index))
            self._set("owned_tokens_by_index", dictionary_key(owner, last), "U256", None)
            self._set("owned_indexes_by_token", dictionary_key(owner, token_id), "U256", None)

            self._set("owners", token_id, "Key", None)
            self._set("metadata", token_id, {"Map": {"key": "String", "value": "String"}}, None)
            self._set("balances", account_hash_hex(owner), "U256", str(last))
            self._supply_add(-1)

    def _approve(self, spender: str, token_ids: list) -> None:
        for token_id in token_ids:
            token_id = str(token_id)
            owner = self._get("owners", token_id)
            self._set("allowances", dictionary_key(owner, token_id, "String"), "Key", spender)

    # ---- patched chain layer ----

    def query_contract_data(self, contract_hash: str, path: list, node_address=None, state_root_hash=None) -> dict:
        assert contract_hash == CONTRACT_HASH
        return self.named[path[0]]

    def query_contract_dictionary(
        self, contract_hash: str, dictionary_name: str, item_key: str, node_address=None, state_root_hash=None
    ) -> dict:
        assert contract_hash == CONTRACT_HASH
        entry = self.dictionaries[dictionary_name].get(item_key)
        if entry is None:
            raise RpcError(-32003, "state query failed: ValueNotFound")
        return entry

    def call_entry_point(self, contract_hash: str, entry_point: str, args: dict, **kwargs: Any) -> dict:
        assert contract_hash == CONTRACT_HASH
        self.calls.append({"entry_point": entry_point, "args": args, **kwargs})
        if entry_point == "mint":
            self._mint(args["recipient"], args["token_ids"], args["token_metas"])
        elif entry_point == "burn":
            self._burn(args["owner"], args["token_ids"])
        elif entry_point == "approve":
            self._approve(args["spender"], args["token_ids"])
        return {"deploy_hash": f"{len(self.calls):064x}"}

    def install_contract(self, wasm: bytes, args: dict, **kwargs: Any) -> dict:
        self.installs.append({"wasm": wasm, "args": args, **kwargs})
        return {"deploy_hash": "ee" * 32}


@pytest.fixture()
def fake_node() -> FakeCep47Node:
    node = FakeCep47Node()
    with patch("cep47.chain.rpc.query_contract_data", node.query_contract_data), patch(
        "cep47.chain.rpc.query_contract_dictionary", node.query_contract_dictionary
    ), patch("cep47.chain.deploy.call_entry_point", node.call_entry_point), patch(
        "cep47.chain.deploy.install_contract", node.install_contract
    ):
        yield node
