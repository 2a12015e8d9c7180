import pytest

from cosmwallet.exceptions import AddressEncodingFailed
from cosmwallet.utils.encoding import encode_bech32
from cosmwallet.utils.validation import (
    is_valid_address, validate_address, is_valid_private_key, is_valid_public_key,
    validate_amount, validate_denom, validate_uint64,
)

from .vectors import COSMOS_ADDRESS, DESMOS_ADDRESS, DESMOS_PUBLIC_KEY


def test_address_validation():
    assert is_valid_address(DESMOS_ADDRESS)
    assert is_valid_address(COSMOS_ADDRESS, "cosmos")
    assert not is_valid_address(COSMOS_ADDRESS, "desmos")
    assert validate_address(DESMOS_ADDRESS.upper()) == DESMOS_ADDRESS
    assert not is_valid_address(encode_bech32("cosmos", bytes(32)))
    with pytest.raises(AddressEncodingFailed):
        validate_address(None)


def test_key_validation():
    assert is_valid_private_key("01" * 32)
    assert not is_valid_private_key("00" * 32)
    assert not is_valid_private_key("ff" * 32)
    assert is_valid_public_key(DESMOS_PUBLIC_KEY)
    assert not is_valid_public_key("04" + DESMOS_PUBLIC_KEY[2:])
    assert not is_valid_public_key("not hex")


def test_numeric_validation():
    assert validate_uint64(0, "value") == 0
    assert validate_uint64((1 << 64) - 1, "value") == (1 << 64) - 1
    for invalid in (-1, 1 << 64, True, "1", None):
        with pytest.raises(ValueError):
            validate_uint64(invalid, "value")

    assert validate_amount(0) == "0"
    assert validate_amount("0010") == "0010"
    for invalid in (-5, "", "1e5", "-1", None, 1.5):
        with pytest.raises(ValueError):
            validate_amount(invalid)


def test_denom_validation():
    for denom in ("stake", "uatom", "ibc/27394FB092D2ECCD56123C74F36E4C1F926001CEADA9CA97EA622B25F41E5EB2", "factory/addr/sub"):
        assert validate_denom(denom) == denom
    for invalid in ("", "ab", "1stake", "st ake", None):
        with pytest.raises(ValueError):
            validate_denom(invalid)
