import pytest

from cosmwallet.constants import SECP256K1_ORDER
from cosmwallet.crypto.keys import PrivateKey, PublicKey
from cosmwallet.crypto.signature import (
    compact_to_der, der_to_compact, encode_der_signature, is_low_s, parse_der_signature,
)
from cosmwallet.exceptions import KeyDerivationFailed, SignatureFailed

KEY = bytes.fromhex("01" * 32)


def test_private_key_public_key():
    key = PrivateKey(KEY)
    pub = key.public_key()
    assert len(pub.point) == 33
    assert pub.point[0] in (2, 3)
    assert PrivateKey(KEY.hex()).public_key() == pub
    assert repr(key) == "PrivateKey(<redacted>)"
    assert KEY.hex() not in repr(key)


@pytest.mark.parametrize("invalid", [b"", b"\x00" * 32, SECP256K1_ORDER.to_bytes(32, "big"), b"\x01" * 31, "zz" * 32])
def test_invalid_private_keys(invalid):
    with pytest.raises(KeyDerivationFailed):
        PrivateKey(invalid)


def test_sign_and_verify():
    key = PrivateKey(KEY)
    signature = key.sign(b"hello")
    assert len(signature) == 64
    assert is_low_s(signature)
    assert key.sign(b"hello") == signature
    assert key.sign(b"hello!") != signature

    pub = key.public_key()
    assert pub.verify(signature, b"hello")
    assert not pub.verify(signature, b"hello!")
    assert not pub.verify(signature[:63], b"hello")
    assert not PrivateKey(b"\x02" * 32).public_key().verify(signature, b"hello")


def test_public_key_validation():
    pub = PrivateKey(KEY).public_key()
    assert PublicKey(pub.hex()) == pub
    assert PublicKey(pub) == pub
    assert hash(PublicKey(pub.point)) == hash(pub)
    with pytest.raises(KeyDerivationFailed):
        PublicKey(b"\x04" + pub.point[1:])
    with pytest.raises(KeyDerivationFailed):
        PublicKey(pub.point[:32])


def test_public_key_address():
    pub = PrivateKey(KEY).public_key()
    assert pub.address("cosmos").startswith("cosmos1")
    assert len(pub.hash160()) == 20


def test_der_signature_roundtrip():
    sig = encode_der_signature(1, 2)
    assert sig == bytes.fromhex("3006020101020102")
    assert parse_der_signature(sig) == (1, 2)

    high = encode_der_signature(0x80, 0x7F)
    assert high == bytes.fromhex("30070202008002017f")
    assert parse_der_signature(high) == (0x80, 0x7F)


def test_compact_conversion():
    compact = (5).to_bytes(32, "big") + (7).to_bytes(32, "big")
    der = compact_to_der(compact)
    assert parse_der_signature(der) == (5, 7)
    assert der_to_compact(der) == compact
    with pytest.raises(SignatureFailed):
        compact_to_der(compact[:-1])


@pytest.mark.parametrize("invalid", [
    b"",
    bytes.fromhex("3106020101020102"),
    bytes.fromhex("3007020101020102"),
    bytes.fromhex("300602010103010102"),
    bytes.fromhex("300602010102010200"),
])
def test_parse_der_rejects_malformed(invalid):
    with pytest.raises(SignatureFailed):
        parse_der_signature(invalid)


def test_low_s():
    half = SECP256K1_ORDER // 2
    r = (1).to_bytes(32, "big")
    assert is_low_s(r + half.to_bytes(32, "big"))
    assert not is_low_s(r + (half + 1).to_bytes(32, "big"))
