import pytest

from cosmwallet.constants import COSMOS_DERIVATION_PATH, DESMOS_DERIVATION_PATH
from cosmwallet.modules.wallet import MnemonicWallet

from .vectors import OTHER_PHRASE, PHRASE


@pytest.fixture
def desmos_wallet():
    wallet = MnemonicWallet(PHRASE, DESMOS_DERIVATION_PATH)
    yield wallet
    wallet.close()


@pytest.fixture
def cosmos_wallet():
    wallet = MnemonicWallet(PHRASE, COSMOS_DERIVATION_PATH)
    yield wallet
    wallet.close()


@pytest.fixture
def other_wallet():
    wallet = MnemonicWallet(OTHER_PHRASE, DESMOS_DERIVATION_PATH)
    yield wallet
    wallet.close()
