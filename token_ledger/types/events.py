"""
token_ledger.types.events — structured notifications emitted by the ledger.

Every successful mutating call produces exactly one of these records:

  Transfer(from, to, amount)          transfer / transfer_from / mint (from = zero)
  Approval(owner, spender, amount)    approve / increase_allowance / decrease_allowance
  Burned(account, amount)             burn / burn_from
  OwnershipChange(previous, new)      transfer_ownership
  Paused(status)                      pause (True) / unpause (False)

Records are frozen dataclasses. `to_dict()` renders accounts as 0x-hex and keeps
amounts as ints so the output is JSON-safe; `event_from_dict()` is its inverse.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Dict, Mapping, Tuple, Type, Union

from .address import to_hex


def _h2b(v: Union[str, bytes]) -> bytes:
    if isinstance(v, (bytes, bytearray)):
        return bytes(v)
    s = v[2:] if v.startswith(("0x", "0X")) else v
    return bytes.fromhex(s)


@dataclass(frozen=True)
class Transfer:
    sender: bytes
    recipient: bytes
    amount: int

    name: ClassVar[str] = "Transfer"

    @property
    def accounts(self) -> Tuple[bytes, ...]:
        return (self.sender, self.recipient)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event": self.name,
            "from": to_hex(self.sender),
            "to": to_hex(self.recipient),
            "amount": self.amount,
        }


@dataclass(frozen=True)
class Approval:
    owner: bytes
    spender: bytes
    amount: int

    name: ClassVar[str] = "Approval"

    @property
    def accounts(self) -> Tuple[bytes, ...]:
        return (self.owner, self.spender)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event": self.name,
            "owner": to_hex(self.owner),
            "spender": to_hex(self.spender),
            "amount": self.amount,
        }


@dataclass(frozen=True)
class Burned:
    account: bytes
    amount: int

    name: ClassVar[str] = "Burned"

    @property
    def accounts(self) -> Tuple[bytes, ...]:
        return (self.account,)

    def to_dict(self) -> Dict[str, Any]:
        return {"event": self.name, "account": to_hex(self.account), "amount": self.amount}


@dataclass(frozen=True)
class OwnershipChange:
    previous: bytes
    new: bytes

    name: ClassVar[str] = "OwnershipChange"

    @property
    def accounts(self) -> Tuple[bytes, ...]:
        return (self.previous, self.new)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event": self.name,
            "previous": to_hex(self.previous),
            "new": to_hex(self.new),
        }


@dataclass(frozen=True)
class Paused:
    status: bool

    name: ClassVar[str] = "Paused"

    @property
    def accounts(self) -> Tuple[bytes, ...]:
        return ()

    def to_dict(self) -> Dict[str, Any]:
        return {"event": self.name, "status": self.status}


LedgerEvent = Union[Transfer, Approval, Burned, OwnershipChange, Paused]

EVENT_TYPES: Dict[str, Type[Any]] = {
    cls.name: cls for cls in (Transfer, Approval, Burned, OwnershipChange, Paused)
}


def event_from_dict(d: Mapping[str, Any]) -> LedgerEvent:
    """
    Parse the mapping produced by `to_dict()` back into an event record.
    """
    kind = d.get("event")
    if kind == "Transfer":
        return Transfer(_h2b(d["from"]), _h2b(d["to"]), int(d["amount"]))
    if kind == "Approval":
        return Approval(_h2b(d["owner"]), _h2b(d["spender"]), int(d["amount"]))
    if kind == "Burned":
        return Burned(_h2b(d["account"]), int(d["amount"]))
    if kind == "OwnershipChange":
        return OwnershipChange(_h2b(d["previous"]), _h2b(d["new"]))
    if kind == "Paused":
        return Paused(bool(d["status"]))
    raise ValueError(f"unknown event kind: {kind!r}")


__all__ = [
    "Transfer",
    "Approval",
    "Burned",
    "OwnershipChange",
    "Paused",
    "LedgerEvent",
    "EVENT_TYPES",
    "event_from_dict",
]
