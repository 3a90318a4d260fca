# schemas/common.py

from typing import Annotated

from pydantic import BeforeValidator, Field, PlainSerializer

from db.enums import UINT256_MAX


def _parse_uint256(value):
    """Accepts ints, decimal strings and 0x-prefixed hex strings."""
    if isinstance(value, bool):
        raise ValueError("booleans are not amounts")
    if isinstance(value, str):
        text = value.strip()
        value = int(text, 16) if text.lower().startswith("0x") else int(text)
    if not isinstance(value, int):
        raise ValueError("expected an integer amount")
    if value < 0 or value > UINT256_MAX:
        raise ValueError("amount outside the uint256 range")
    return value


# 256-bit integers go out as decimal strings so JSON clients never lose precision
Uint256 = Annotated[
    int,
    BeforeValidator(_parse_uint256),
    PlainSerializer(str, return_type=str, when_used="json"),
]

# 20-byte account / asset identifier
Address = Annotated[str, Field(pattern=r"^0x[0-9a-fA-F]{40}$")]
