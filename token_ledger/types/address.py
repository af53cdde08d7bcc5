"""
token_ledger.types.address — account identity helpers.

Accounts are opaque fixed-size `bytes`. Hosts may hand us raw bytes or hex
strings (with or without 0x); both are normalized to bytes here. The all-zero
value is reserved as "no account" and only appears as the `from` side of a
mint or the conceptual sink of a burn.

Width is configurable (see `token_ledger.config.AccountRules`); a width of 0
accepts any non-empty value.
"""

from __future__ import annotations

from typing import Final, Union

from ..errors import InvalidAccount

AddressLike = Union[str, bytes, bytearray, memoryview]

DEFAULT_ADDRESS_BYTES: Final[int] = 20
ZERO_ADDRESS: Final[bytes] = b"\x00" * DEFAULT_ADDRESS_BYTES


def _hex_to_bytes(v: str) -> bytes:
    if any(c.isspace() for c in v):
        raise InvalidAccount("account hex must not contain whitespace", value=v)
    s = v
    if s.startswith(("0x", "0X")):
        s = s[2:]
    if len(s) % 2:
        # tolerate odd-length hex by prefixing a zero nibble
        s = "0" + s
    try:
        return bytes.fromhex(s)
    except ValueError as e:
        raise InvalidAccount("account is not valid hex", value=v) from e


def to_address(value: AddressLike, *, width: int = DEFAULT_ADDRESS_BYTES) -> bytes:
    """
    Normalize `value` to account bytes.

    Raises InvalidAccount for non bytes-like/hex input, empty values, or a
    width mismatch when `width` > 0. The zero account is *accepted* here;
    use `require_account` where a real account is required.
    """
    if isinstance(value, (bytes, bytearray, memoryview)):
        b = bytes(value)
    elif isinstance(value, str):
        b = _hex_to_bytes(value)
    else:
        raise InvalidAccount(
            f"expected bytes or hex string, got {type(value).__name__}"
        )
    if len(b) == 0:
        raise InvalidAccount("account must not be empty")
    if width and len(b) != width:
        raise InvalidAccount(
            f"account must be {width} bytes", length=len(b)
        )
    return b


def is_zero(addr: bytes) -> bool:
    """True iff every byte of `addr` is zero."""
    return not any(addr)


def require_account(
    value: AddressLike, *, role: str, width: int = DEFAULT_ADDRESS_BYTES
) -> bytes:
    """
    Normalize `value` and reject the reserved zero account.

    `role` names the parameter ("caller", "recipient", ...) for error payloads.
    """
    addr = to_address(value, width=width)
    if is_zero(addr):
        raise InvalidAccount(f"{role} must not be the zero account", role=role)
    return addr


def zero_address(width: int = DEFAULT_ADDRESS_BYTES) -> bytes:
    """Zero account of the given width (a single zero byte when width is 0)."""
    return b"\x00" * (width or 1)


def to_hex(addr: bytes) -> str:
    return "0x" + addr.hex()


__all__ = [
    "AddressLike",
    "DEFAULT_ADDRESS_BYTES",
    "ZERO_ADDRESS",
    "to_address",
    "is_zero",
    "require_account",
    "zero_address",
    "to_hex",
]
