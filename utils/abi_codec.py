# utils/abi_codec.py
"""
Strict, length-checked codec for the two call shapes the autopilot handles:

    execute(address,uint256,bytes)   outer instruction: "call this asset"
    transfer(address,uint256)        inner asset call

Layouts follow the Solidity ABI: a 4-byte selector, then 32-byte words.
Decoders raise MalformedPayload instead of reading past the buffer.
"""

import re
from typing import NamedTuple

from db.enums import UINT256_MAX
from services.errors import MalformedPayload

WORD = 32
SELECTOR_SIZE = 4

EXECUTE_SELECTOR = bytes.fromhex("b61d27f6")   # execute(address,uint256,bytes)
TRANSFER_SELECTOR = bytes.fromhex("a9059cbb")  # transfer(address,uint256)

# selector + address word + amount word
TRANSFER_CALL_SIZE = SELECTOR_SIZE + 2 * WORD
# selector + address word + value word + offset word + length word
EXECUTE_CALL_MIN_SIZE = SELECTOR_SIZE + 4 * WORD

_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")


class ExecuteCall(NamedTuple):
    selector: bytes
    target: str
    value: int
    data: bytes


class TransferCall(NamedTuple):
    selector: bytes
    recipient: str
    amount: int


def normalize_address(address: str) -> str:
    if not isinstance(address, str) or not _ADDRESS_RE.match(address):
        raise ValueError(f"not a 20-byte hex address: {address!r}")
    return address.lower()


def is_address(value: str) -> bool:
    return isinstance(value, str) and bool(_ADDRESS_RE.match(value))


# --- Encoding ---

def _uint_word(value: int) -> bytes:
    if value < 0 or value > UINT256_MAX:
        raise ValueError(f"{value} does not fit in uint256")
    return value.to_bytes(WORD, "big")


def _address_word(address: str) -> bytes:
    return bytes(12) + bytes.fromhex(normalize_address(address)[2:])


def _pad(data: bytes) -> bytes:
    remainder = len(data) % WORD
    return data + bytes(WORD - remainder) if remainder else data


def encode_transfer_call(recipient: str, amount: int) -> bytes:
    return TRANSFER_SELECTOR + _address_word(recipient) + _uint_word(amount)


def encode_execute_call(target: str, value: int, data: bytes) -> bytes:
    head = _address_word(target) + _uint_word(value) + _uint_word(3 * WORD)
    tail = _uint_word(len(data)) + _pad(data)
    return EXECUTE_SELECTOR + head + tail


# --- Decoding ---

def _read_word(payload: bytes, offset: int) -> bytes:
    end = offset + WORD
    if offset < 0 or end > len(payload):
        raise MalformedPayload(f"word at {offset} runs past {len(payload)} bytes")
    return payload[offset:end]


def _read_uint(payload: bytes, offset: int) -> int:
    return int.from_bytes(_read_word(payload, offset), "big")


def _read_address(payload: bytes, offset: int) -> str:
    word = _read_word(payload, offset)
    if any(word[:12]):
        raise MalformedPayload(f"address word at {offset} has dirty high bytes")
    return "0x" + word[12:].hex()


def decode_transfer_call(payload: bytes) -> TransferCall:
    """Decodes transfer(address,uint256). Trailing bytes are tolerated."""
    if len(payload) < TRANSFER_CALL_SIZE:
        raise MalformedPayload(
            f"transfer call needs {TRANSFER_CALL_SIZE} bytes, got {len(payload)}"
        )
    selector = bytes(payload[:SELECTOR_SIZE])
    if selector != TRANSFER_SELECTOR:
        raise MalformedPayload(f"selector 0x{selector.hex()} is not transfer(address,uint256)")
    args = payload[SELECTOR_SIZE:]
    return TransferCall(
        selector=selector,
        recipient=_read_address(args, 0),
        amount=_read_uint(args, WORD),
    )


def decode_execute_call(payload: bytes) -> ExecuteCall:
    """
    Decodes selector + abi(address target, uint256 value, bytes data).
    The selector itself is returned, not checked: the host decides what the
    outer instruction means.
    """
    if len(payload) < EXECUTE_CALL_MIN_SIZE:
        raise MalformedPayload(
            f"execute call needs at least {EXECUTE_CALL_MIN_SIZE} bytes, got {len(payload)}"
        )
    selector = bytes(payload[:SELECTOR_SIZE])
    args = payload[SELECTOR_SIZE:]

    target = _read_address(args, 0)
    value = _read_uint(args, WORD)

    data_offset = _read_uint(args, 2 * WORD)
    if data_offset % WORD or data_offset < 3 * WORD:
        raise MalformedPayload(f"bytes offset {data_offset} is not a valid tail position")
    data_length = _read_uint(args, data_offset)
    data_start = data_offset + WORD
    if data_length > len(args) - data_start:
        raise MalformedPayload(
            f"bytes length {data_length} runs past {len(args)} bytes of arguments"
        )
    data = bytes(args[data_start:data_start + data_length])
    return ExecuteCall(selector=selector, target=target, value=value, data=data)
