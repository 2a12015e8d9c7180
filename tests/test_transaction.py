import pytest

from cosmwallet.constants import SignMode
from cosmwallet.crypto.transaction_signing import (
    build_sign_doc, decode_public_key, encode_public_key, verify_direct,
)
from cosmwallet.exceptions import EncodingFailed, ErrorCode, MissingAccountContext, MissingFee
from cosmwallet.modules.bank import MsgSend
from cosmwallet.types.transaction import (
    AccountContext, AuthInfo, BuilderState, Coin, Fee, Message, ModeInfo, SignDoc,
    SignedTransaction, TxBody, TxBuilder,
)
from cosmwallet.utils.protobuf import ProtoWriter, encode_varint

CHAIN_ID = "testchain"


@pytest.fixture
def send_message(desmos_wallet, other_wallet):
    msg = MsgSend(desmos_wallet.address("desmos"), other_wallet.address("desmos"), [Coin("udsm", "10000")])
    return msg.to_any()


def build(send_message):
    return (
        TxBuilder(CHAIN_ID)
        .set_memo("Test memo")
        .set_account_info(sequence=1, account_number=5)
        .set_fee(Fee.single("stake", "10", 300000))
        .set_timeout_height(1000)
        .add_any(send_message)
    )


def test_sign_transaction(desmos_wallet, send_message):
    tx = build(send_message).sign(desmos_wallet)

    assert len(tx.signatures) == 1
    assert len(tx.signatures[0]) == 64

    body = tx.body
    assert body.memo == "Test memo"
    assert body.timeout_height == 1000
    assert body.messages == [send_message]

    auth_info = tx.auth_info
    assert len(auth_info.signer_infos) == 1
    signer = auth_info.signer_infos[0]
    assert signer.sequence == 1
    assert signer.mode_info.mode is SignMode.DIRECT
    assert decode_public_key(signer.public_key) == desmos_wallet.public_key()
    assert auth_info.fee == Fee.single("stake", "10", 300000)


def test_signature_covers_sign_doc(desmos_wallet, send_message):
    tx = build(send_message).sign(desmos_wallet)
    sign_doc = SignDoc(tx.body_bytes, tx.auth_info_bytes, CHAIN_ID, 5).encode()

    assert tx.signatures[0] == desmos_wallet.sign(sign_doc)
    assert desmos_wallet.verify(sign_doc, tx.signatures[0])
    assert verify_direct(tx, CHAIN_ID, 5)
    assert not verify_direct(tx, CHAIN_ID, 6)
    assert not verify_direct(tx, "otherchain", 5)


def test_signature_depends_on_chain_and_account(desmos_wallet, send_message):
    base = build(send_message).sign(desmos_wallet)
    other_chain = build(send_message).set_chain_id("otherchain").sign(desmos_wallet)
    other_account = build(send_message).set_account_info(sequence=1, account_number=6).sign(desmos_wallet)

    assert other_chain.body_bytes == base.body_bytes
    assert other_chain.auth_info_bytes == base.auth_info_bytes
    assert other_chain.signatures != base.signatures
    assert other_account.signatures != base.signatures


def test_signing_is_deterministic(desmos_wallet, send_message):
    first = build(send_message).sign(desmos_wallet)
    second = build(send_message).sign(desmos_wallet)
    assert first.to_bytes() == second.to_bytes()
    assert first.tx_hash == second.tx_hash


def test_canonical_auth_info_bytes(desmos_wallet, send_message):
    tx = build(send_message).sign(desmos_wallet)

    type_url = b"/cosmos.crypto.secp256k1.PubKey".hex()
    public_key_any = "0a1f" + type_url + "1223" + "0a21" + desmos_wallet.public_key_hex()
    signer_info = "0a46" + public_key_any + "12040a020801" + "1801"
    fee = "0a0b0a057374616b651202" + b"10".hex() + "10e0a712"
    expected = "0a50" + signer_info + "1211" + fee

    assert tx.auth_info_bytes.hex() == expected


def test_canonical_body_bytes(desmos_wallet, send_message):
    tx = build(send_message).sign(desmos_wallet)
    message = send_message.encode()
    expected = (
        b"\x0a" + encode_varint(len(message)) + message
        + b"\x12\x09Test memo"
        + bytes.fromhex("18e807")
    )
    assert tx.body_bytes == expected


def test_wire_round_trip(desmos_wallet, send_message):
    tx = build(send_message).sign(desmos_wallet)
    wire = tx.to_bytes()

    manual = (
        ProtoWriter()
        .bytes_field(1, tx.body_bytes)
        .bytes_field(2, tx.auth_info_bytes)
        .repeated_bytes_field(3, tx.signatures)
        .to_bytes()
    )
    assert wire == manual
    assert SignedTransaction.from_bytes(wire) == tx
    assert SignedTransaction.from_bytes(wire).to_bytes() == wire
    assert tx.body.encode() == tx.body_bytes
    assert tx.auth_info.encode() == tx.auth_info_bytes
    assert tx.tx_hash == tx.tx_hash.upper()
    assert len(tx.tx_hash) == 64


def test_to_dict(desmos_wallet, send_message):
    view = build(send_message).sign(desmos_wallet).to_dict()
    assert view["body"]["memo"] == "Test memo"
    assert view["auth_info"]["fee"]["amount"] == ["10stake"]
    assert view["auth_info"]["signer_infos"][0]["mode"] == "DIRECT"


def test_missing_account_context(desmos_wallet, send_message):
    builder = TxBuilder(CHAIN_ID).add_any(send_message).add_any(send_message)
    with pytest.raises(MissingAccountContext) as excinfo:
        builder.sign(desmos_wallet)
    assert excinfo.value.code == ErrorCode.MISSING_ACCOUNT_CONTEXT
    assert excinfo.value.message == "Missing account information"
    assert builder.state is BuilderState.ERROR

    builder.set_fee(Fee.single("stake", 10, 200000))
    with pytest.raises(MissingAccountContext):
        builder.sign(desmos_wallet)


def test_missing_fee(desmos_wallet, send_message):
    builder = TxBuilder(CHAIN_ID).set_account_info(sequence=0, account_number=0)
    with pytest.raises(MissingFee) as excinfo:
        builder.sign(desmos_wallet)
    assert excinfo.value.message == "Missing transaction fee"

    builder.add_any(send_message)
    with pytest.raises(MissingFee):
        builder.sign(desmos_wallet)

    builder.set_fee(Fee.single("stake", "0", 200000))
    assert builder.state is BuilderState.CONFIGURED
    tx = builder.sign(desmos_wallet)
    assert builder.state is BuilderState.SIGNED
    assert tx.auth_info.signer_infos[0].sequence == 0


def test_builder_is_single_use(desmos_wallet, send_message):
    builder = build(send_message)
    builder.sign(desmos_wallet)
    with pytest.raises(RuntimeError):
        builder.sign(desmos_wallet)
    with pytest.raises(RuntimeError):
        builder.set_memo("again")


def test_builder_states_and_accessors(send_message):
    builder = TxBuilder()
    assert builder.state is BuilderState.EMPTY
    builder.set_chain_id(CHAIN_ID).add_message(send_message.type_url, send_message.value)
    assert builder.state is BuilderState.CONFIGURED
    assert builder.chain_id == CHAIN_ID
    assert builder.messages == [send_message]
    assert builder.fee is None
    assert builder.account is None
    builder.set_account(AccountContext(account_number=3, sequence=4))
    assert builder.account == AccountContext(account_number=3, sequence=4)


def test_builder_rejects_bad_values():
    with pytest.raises(ValueError):
        TxBuilder().set_timeout_height(-1)
    with pytest.raises(ValueError):
        TxBuilder().set_account_info(sequence=-1, account_number=0)
    with pytest.raises(ValueError):
        Fee.single("stake", "10", 1 << 64)


def test_coin_validation():
    assert Coin("stake", 10).amount == "10"
    assert str(Coin("udsm", "5")) == "5udsm"
    with pytest.raises(ValueError):
        Coin("stake", -1)
    with pytest.raises(ValueError):
        Coin("stake", "1.5")
    with pytest.raises(ValueError):
        Coin("1x", "1")


def test_large_amount_is_kept_as_text():
    amount = "123456789012345678901234567890"
    coin = Coin.decode(Coin("stake", amount).encode())
    assert coin.amount == amount


def test_fee_payer_and_granter():
    fee = Fee.single("stake", "1", 10, payer="payer", granter="granter")
    assert Fee.decode(fee.encode()) == fee
    assert fee.encode().endswith(b"\x1a\x05payer\x22\x07granter")


def test_mode_info_encoding():
    assert ModeInfo(SignMode.DIRECT).encode() == bytes.fromhex("0a020801")
    assert ModeInfo(SignMode.LEGACY_AMINO_JSON).encode() == bytes.fromhex("0a02087f")
    assert ModeInfo.decode(bytes.fromhex("0a020801")).mode is SignMode.DIRECT
    with pytest.raises(EncodingFailed):
        ModeInfo.decode(b"")
    with pytest.raises(EncodingFailed):
        ModeInfo.decode(bytes.fromhex("0a020805"))


def test_public_key_any():
    key = bytes.fromhex("02" + "11" * 32)
    any_key = encode_public_key(key)
    assert any_key.type_url == "/cosmos.crypto.secp256k1.PubKey"
    assert any_key.value == b"\x0a\x21" + key
    assert decode_public_key(any_key) == key
    with pytest.raises(EncodingFailed):
        decode_public_key(Message("/cosmos.crypto.ed25519.PubKey", any_key.value))


def test_sign_doc_round_trip():
    doc = build_sign_doc(b"body", b"auth", CHAIN_ID, 5)
    assert SignDoc.decode(doc.encode()) == doc
    assert doc.encode() == b"\x0a\x04body\x12\x04auth\x1a\x09testchain\x20\x05"


def test_empty_values_are_omitted():
    assert TxBody().encode() == b""
    assert AuthInfo().encode() == b""
    assert SignedTransaction(b"", b"", [b""]).to_bytes() == b"\x1a\x00"


def test_decode_rejects_malformed():
    with pytest.raises(EncodingFailed):
        SignedTransaction.from_bytes(b"\x0b")
    with pytest.raises(EncodingFailed):
        Coin.decode(b"\x0a\x011\x12\x011")
    with pytest.raises(EncodingFailed):
        TxBody.decode(b"\x0a\x05\x0a")
