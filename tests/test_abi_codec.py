"""
Tests for the strict execute/transfer call codec.
"""

import pytest

from services.errors import MalformedPayload
from utils.abi_codec import (
    EXECUTE_CALL_MIN_SIZE,
    EXECUTE_SELECTOR,
    TRANSFER_CALL_SIZE,
    WORD,
    decode_execute_call,
    decode_transfer_call,
    encode_execute_call,
    encode_transfer_call,
    normalize_address,
)

RECIPIENT = "0x" + "3c" * 20
ASSET = "0x" + "a0" * 20


def test_transfer_call_layout():
    payload = encode_transfer_call("0x" + "00" * 19 + "01", 1)
    assert payload.hex() == "a9059cbb" + "00" * 31 + "01" + "00" * 31 + "01"
    assert len(payload) == TRANSFER_CALL_SIZE


def test_execute_call_layout():
    inner = encode_transfer_call(RECIPIENT, 5)
    payload = encode_execute_call(ASSET, 0, inner)

    assert payload[:4] == EXECUTE_SELECTOR
    args = payload[4:]
    assert int.from_bytes(args[2 * WORD:3 * WORD], "big") == 3 * WORD   # offset of the bytes tail
    assert int.from_bytes(args[3 * WORD:4 * WORD], "big") == len(inner)
    # 68 bytes of data padded to 96
    assert len(payload) == 4 + 4 * WORD + 3 * WORD


def test_decode_execute_and_transfer():
    payload = encode_execute_call(ASSET.upper().replace("0X", "0x"), 7, encode_transfer_call(RECIPIENT, 2_345_678))

    outer = decode_execute_call(payload)
    assert outer.target == ASSET
    assert outer.value == 7

    inner = decode_transfer_call(outer.data)
    assert inner.recipient == RECIPIENT
    assert inner.amount == 2_345_678


def test_empty_inner_data_round_trips():
    outer = decode_execute_call(encode_execute_call(ASSET, 0, b""))
    assert outer.data == b""


@pytest.mark.parametrize("size", [0, 3, 4, TRANSFER_CALL_SIZE - 1])
def test_short_transfer_call_is_rejected(size):
    payload = encode_transfer_call(RECIPIENT, 1)[:size]
    with pytest.raises(MalformedPayload):
        decode_transfer_call(payload)


def test_transfer_call_with_other_selector_is_rejected():
    payload = bytes.fromhex("095ea7b3") + encode_transfer_call(RECIPIENT, 1)[4:]   # approve(address,uint256)
    with pytest.raises(MalformedPayload):
        decode_transfer_call(payload)


def test_dirty_address_padding_is_rejected():
    payload = bytearray(encode_transfer_call(RECIPIENT, 1))
    payload[4] = 0xFF
    with pytest.raises(MalformedPayload):
        decode_transfer_call(bytes(payload))


def test_short_execute_call_is_rejected():
    payload = encode_execute_call(ASSET, 0, encode_transfer_call(RECIPIENT, 1))
    with pytest.raises(MalformedPayload):
        decode_execute_call(payload[:EXECUTE_CALL_MIN_SIZE - 1])


def test_execute_call_with_truncated_bytes_is_rejected():
    payload = encode_execute_call(ASSET, 0, encode_transfer_call(RECIPIENT, 1))
    # Length word still claims 68 bytes of data
    with pytest.raises(MalformedPayload):
        decode_execute_call(payload[:EXECUTE_CALL_MIN_SIZE + 10])


def test_execute_call_with_out_of_range_offset_is_rejected():
    payload = bytearray(encode_execute_call(ASSET, 0, encode_transfer_call(RECIPIENT, 1)))
    offset_word = 4 + 2 * WORD
    payload[offset_word:offset_word + WORD] = (10_000 * WORD).to_bytes(WORD, "big")
    with pytest.raises(MalformedPayload):
        decode_execute_call(bytes(payload))


def test_normalize_address():
    assert normalize_address("0x" + "AB" * 20) == "0x" + "ab" * 20
    with pytest.raises(ValueError):
        normalize_address("0x1234")
