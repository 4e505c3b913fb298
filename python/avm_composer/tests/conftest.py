"""Shared fixtures for composer tests.

Everything here is offline: suggested params are fixed and accounts are
generated locally.
"""

import pytest
from algosdk import abi, account, transaction

from avm_composer.constants import TESTNET_GENESIS_HASH
from avm_composer.signers import AddressWithSigner, SignerRegistry
from avm_composer.composer import TransactionComposer

FIRST_VALID = 1000

# Any non-empty bytes will do; nothing is evaluated offline
APPROVAL_BYTES = b"\x0a\x81\x01"
CLEAR_BYTES = b"\x0a\x81\x01"


def make_suggested_params(
    first: int = FIRST_VALID,
    fee: int = 0,
    genesis_id: str = "testnet-v1.0",
) -> transaction.SuggestedParams:
    """Build suggested params like algod would return them."""
    return transaction.SuggestedParams(
        fee=fee,
        first=first,
        last=first + 1000,
        gh=TESTNET_GENESIS_HASH,
        gen=genesis_id,
        flat_fee=False,
        min_fee=1000,
    )


class ParamsSource:
    """Suggested params source that counts calls."""

    def __init__(self, sp: transaction.SuggestedParams):
        self.sp = sp
        self.calls = 0

    def __call__(self) -> transaction.SuggestedParams:
        self.calls += 1
        return self.sp


@pytest.fixture
def suggested_params():
    return make_suggested_params()


@pytest.fixture
def params_source(suggested_params):
    return ParamsSource(suggested_params)


@pytest.fixture
def alice():
    private_key, _ = account.generate_account()
    return AddressWithSigner.from_private_key(private_key)


@pytest.fixture
def bob():
    private_key, _ = account.generate_account()
    return AddressWithSigner.from_private_key(private_key)


@pytest.fixture
def registry(alice, bob):
    return SignerRegistry().set_signer(alice.address, alice.signer).set_signer(bob.address, bob.signer)


@pytest.fixture
def composer(registry, params_source):
    return TransactionComposer(get_signer=registry.get_signer, get_suggested_params=params_source)


@pytest.fixture
def add_method():
    return abi.Method.from_signature("add(uint64,uint64)uint64")


@pytest.fixture
def deposit_method():
    return abi.Method.from_signature("deposit(pay)uint64")


@pytest.fixture
def wrap_method():
    return abi.Method.from_signature("wrap(appl)uint64")
