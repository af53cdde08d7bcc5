"""
token_ledger.state.access — the Access Controller (owner + pause flag).

A focused owner/pause surface:
- read the current owner (`owner`) and pause flag (`paused`)
- check that a caller is the owner (`require_owner`)
- check the pause flag in either direction (`require_unpaused`, `require_paused`)
- transfer ownership to a new, non-zero account (`transfer_ownership`)
- flip the pause flag (`set_paused`)

Notes
-----
- There is no renounce: the owner is never the zero account after construction.
- `set_paused` is *not* idempotent. Pausing an already-paused ledger fails with
  ContractPaused; unpausing an unpaused one fails with ContractNotPaused.
- Event emission is the engine's job; transitions return what changed.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Tuple

from ..errors import ContractNotPaused, ContractPaused, InvalidAccount, NotOwner
from ..types.address import is_zero

SLOT_OWNER = "owner"
SLOT_PAUSED = "paused"


@dataclass
class AccessState:
    owner: bytes
    paused: bool = False


class AccessController:
    def __init__(self, owner: bytes) -> None:
        if not owner or is_zero(owner):
            raise InvalidAccount("owner must not be the zero account", role="owner")
        self._state = AccessState(owner=owner)
        self._hook: Optional[Any] = None

    # --- journal wiring --------------------------------------------------------

    def attach(self, hook: Optional[Any]) -> None:
        self._hook = hook

    def _record(self, slot: Tuple[Any, ...], previous: Any) -> None:
        if self._hook is not None:
            self._hook.record(slot, previous)

    def restore(self, slot: Tuple[Any, ...], previous: Any) -> None:
        if slot[0] == SLOT_OWNER:
            self._state.owner = previous
        elif slot[0] == SLOT_PAUSED:
            self._state.paused = previous
        else:
            raise ValueError(f"unknown access slot: {slot!r}")

    # --- reads -----------------------------------------------------------------

    @property
    def owner(self) -> bytes:
        return self._state.owner

    @property
    def paused(self) -> bool:
        return self._state.paused

    # --- guards ----------------------------------------------------------------

    def require_owner(self, caller: bytes) -> None:
        """
        Raise NotOwner unless `caller` equals the current owner.
        """
        if caller != self._state.owner:
            raise NotOwner(caller=caller)

    def require_unpaused(self) -> None:
        if self._state.paused:
            raise ContractPaused()

    def require_paused(self) -> None:
        if not self._state.paused:
            raise ContractNotPaused()

    # --- transitions -------------------------------------------------------------

    def transfer_ownership(self, caller: bytes, new_owner: bytes) -> Tuple[bytes, bytes]:
        """
        Owner-only: hand ownership to `new_owner` (must be non-zero).

        Returns (previous, new) for the OwnershipChange notification.
        """
        self.require_owner(caller)
        if not new_owner or is_zero(new_owner):
            raise InvalidAccount("new owner must not be the zero account", role="new_owner")
        previous = self._state.owner
        self._record((SLOT_OWNER,), previous)
        self._state.owner = new_owner
        return previous, new_owner

    def set_paused(self, caller: bytes, value: bool) -> bool:
        """
        Owner-only: pause (`value=True`) or unpause (`value=False`).

        Returns the new flag value for the Paused notification.
        """
        self.require_owner(caller)
        if value:
            self.require_unpaused()
        else:
            self.require_paused()
        self._record((SLOT_PAUSED,), self._state.paused)
        self._state.paused = bool(value)
        return self._state.paused


__all__ = ["AccessState", "AccessController", "SLOT_OWNER", "SLOT_PAUSED"]
