"""Tests for deploy construction, approval and submission."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from cep47.chain import deploy
from cep47.keys import load_signing_key

CONTRACT = "ab" * 32


@pytest.fixture()
def sdk():
    """Mock pycspr and the SDK session types used by the deploy module."""
    with patch("cep47.chain.deploy.pycspr") as pycspr, patch("cep47.chain.deploy.types") as types, patch(
        "cep47.chain.deploy.encode_args", side_effect=lambda ep, values: {"encoded": ep, **values}
    ), patch("cep47.chain.deploy.rpc") as rpc:
        pycspr.to_json.return_value = {"hash": "d" * 64}
        rpc.put_deploy.return_value = "d" * 64
        yield MagicMock(pycspr=pycspr, types=types, rpc=rpc)


class TestCallEntryPoint:
    def test_builds_stored_contract_session(self, sdk: MagicMock) -> None:
        sender = object()
        deploy.call_entry_point(
            CONTRACT,
            "burn",
            {"owner": "account-hash-" + "11" * 32, "token_ids": ["1"]},
            payment_amount=2_500_000_000,
            sender=sender,
            network_name="casper-test",
        )

        session_kwargs = sdk.types.StoredContractByHash.call_args.kwargs
        assert session_kwargs["entry_point"] == "burn"
        assert session_kwargs["hash"] == bytes.fromhex(CONTRACT)
        assert session_kwargs["args"]["encoded"] == "burn"

        sdk.pycspr.create_deploy_parameters.assert_called_once_with(account=sender, chain_name="casper-test")
        sdk.pycspr.create_standard_payment.assert_called_once_with(2_500_000_000)
        sdk.pycspr.create_deploy.assert_called_once_with(
            sdk.pycspr.create_deploy_parameters.return_value,
            sdk.pycspr.create_standard_payment.return_value,
            sdk.types.StoredContractByHash.return_value,
        )

    def test_approves_with_each_key_and_submits(self, sdk: MagicMock) -> None:
        keys = [object(), object()]
        result = deploy.call_entry_point(
            CONTRACT,
            "approve",
            {"spender": "account-hash-" + "22" * 32, "token_ids": ["1"]},
            payment_amount=1,
            sender=keys[0],
            network_name="casper-test",
            keys=keys,
            node_address="http://node/rpc",
        )

        built = sdk.pycspr.create_deploy.return_value
        assert [c.args[0] for c in built.approve.call_args_list] == keys
        sdk.rpc.put_deploy.assert_called_once_with({"hash": "d" * 64}, node_address="http://node/rpc")
        sdk.rpc.wait_for_deploy.assert_not_called()
        assert result == {"deploy_hash": "d" * 64}

    def test_wait_collects_execution_results(self, sdk: MagicMock) -> None:
        sdk.rpc.wait_for_deploy.return_value = [{"result": {"Success": {}}}]
        result = deploy.call_entry_point(
            CONTRACT,
            "mint",
            {"recipient": "x", "token_ids": [], "token_metas": []},
            payment_amount=1,
            sender=object(),
            network_name="casper-test",
            wait=True,
        )
        assert result["execution_results"] == [{"result": {"Success": {}}}]

    def test_json_string_is_decoded(self, sdk: MagicMock) -> None:
        sdk.pycspr.to_json.return_value = '{"hash": "e"}'
        deploy.sign_and_send(MagicMock())
        sdk.rpc.put_deploy.assert_called_once_with({"hash": "e"}, node_address=None)


class TestInstall:
    def test_module_bytes_session(self, sdk: MagicMock) -> None:
        deploy.install_contract(
            b"\x00asm",
            {"name": "Art", "contract_name": "art", "symbol": "ART", "meta": {}},
            payment_amount=100,
            sender=object(),
            network_name="casper-test",
        )
        session_kwargs = sdk.types.ModuleBytes.call_args.kwargs
        assert session_kwargs["module_bytes"] == b"\x00asm"
        assert session_kwargs["args"]["encoded"] == "install"
        assert session_kwargs["args"]["symbol"] == "ART"


class TestSignedDeploy:
    """Deploys built and approved by pycspr; only submission is mocked."""

    @pytest.fixture()
    def signer(self, tmp_path: Path):
        from cryptography.hazmat.primitives import serialization
        from cryptography.hazmat.primitives.asymmetric import ed25519

        private = ed25519.Ed25519PrivateKey.generate()
        pem = tmp_path / "secret_key.pem"
        pem.write_bytes(
            private.private_bytes(
                serialization.Encoding.PEM,
                serialization.PrivateFormat.PKCS8,
                serialization.NoEncryption(),
            )
        )
        public = private.public_key().public_bytes(
            serialization.Encoding.Raw, serialization.PublicFormat.Raw
        )
        return load_signing_key(pem, "ED25519"), "01" + public.hex()

    def test_mint_session_args(self, signer) -> None:
        key, account_key = signer
        recipient = "account-hash-" + "11" * 32
        with patch("cep47.chain.deploy.rpc.put_deploy", return_value="d" * 64) as put_deploy:
            result = deploy.call_entry_point(
                "cd" * 32,
                "mint",
                {"recipient": recipient, "token_ids": ["1"], "token_metas": [{"a": "b"}]},
                payment_amount=1_000_000_000,
                sender=key,
                network_name="casper-test",
                keys=[key],
            )

        assert result == {"deploy_hash": "d" * 64}
        submitted = put_deploy.call_args.args[0]
        session = submitted["session"]["StoredContractByHash"]
        assert session["entry_point"] == "mint"
        assert session["hash"].lower() == "cd" * 32

        names = [name for name, _ in session["args"]]
        assert names == ["recipient", "token_ids", "token_metas"]
        arg_bytes = {name: value["bytes"].lower() for name, value in session["args"]}
        assert arg_bytes["recipient"] == "00" + "11" * 32
        assert arg_bytes["token_ids"] == "010000000101"
        assert arg_bytes["token_metas"] == "010000000100000001000000610100000062"

        assert submitted["header"]["chain_name"] == "casper-test"
        assert len(submitted["approvals"]) == 1
        assert submitted["approvals"][0]["signer"].lower() == account_key
