import pytest

from cosmwallet.crypto.bip39 import (
    generate_mnemonic, is_valid_mnemonic, mnemonic_to_seed, normalize_mnemonic, validate_mnemonic,
)
from cosmwallet.exceptions import ErrorCode, MnemonicInvalid

from .vectors import PHRASE, OTHER_PHRASE

ABANDON = " ".join(["abandon"] * 11 + ["about"])


def test_reference_seeds():
    assert mnemonic_to_seed(ABANDON).hex() == (
        "5eb00bbddcf069084889a8ab9155568165f5c453ccb85e70811aaed6f6da5fc1"
        "9a5ac40b389cd370d086206dec8aa6c43daea6690f20ad3d8d48b2d2ce9e38e4"
    )
    assert mnemonic_to_seed(ABANDON, "TREZOR").hex() == (
        "c55257c360c07c72029aebc1b53c05ed0362ada38ead3e3e9efa3708e5349553"
        "1f09a6987599d18264c1e1c92f2cf141630c7a3c4ab7c81b2f001698e7463b04"
    )


def test_seed_is_64_bytes_and_deterministic():
    seed = mnemonic_to_seed(PHRASE)
    assert len(seed) == 64
    assert mnemonic_to_seed(PHRASE) == seed
    assert mnemonic_to_seed(OTHER_PHRASE) != seed


def test_whitespace_is_normalized():
    messy = "  " + PHRASE.replace(" ", "   ", 3) + "\n"
    assert normalize_mnemonic(messy) == PHRASE
    assert mnemonic_to_seed(messy) == mnemonic_to_seed(PHRASE)


@pytest.mark.parametrize("strength,words", [(128, 12), (160, 15), (192, 18), (224, 21), (256, 24)])
def test_generate_mnemonic(strength, words):
    phrase = generate_mnemonic(strength)
    assert len(phrase.split()) == words
    assert is_valid_mnemonic(phrase)


def test_generate_defaults_to_24_words():
    assert len(generate_mnemonic().split()) == 24
    assert generate_mnemonic() != generate_mnemonic()
    with pytest.raises(ValueError):
        generate_mnemonic(100)


@pytest.mark.parametrize("phrase", [
    "",
    " ".join(["abandon"] * 11),
    " ".join(["abandon"] * 12),
    ABANDON.replace("about", "xyzzy"),
])
def test_invalid_mnemonics(phrase):
    assert not is_valid_mnemonic(phrase)
    with pytest.raises(MnemonicInvalid) as excinfo:
        validate_mnemonic(phrase)
    assert excinfo.value.code == ErrorCode.MNEMONIC_INVALID


def test_error_never_echoes_phrase():
    phrase = ABANDON.replace("about", "xyzzy")
    with pytest.raises(MnemonicInvalid) as excinfo:
        mnemonic_to_seed(phrase)
    assert "xyzzy" not in str(excinfo.value)
    assert "abandon" not in str(excinfo.value)
    assert "12" in str(excinfo.value)
