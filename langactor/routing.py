"""Address book that maps actor addresses to the actors that answer them."""

from __future__ import annotations

import threading
from typing import Any

from langactor.framework import ActorError, Address, parse_address


class ActorAlreadyRegisteredError(ActorError):
    """An actor is already registered under the same address."""

    default_message = "actor already registered"

    def __init__(self, address: Address) -> None:
        self.address = address
        super().__init__()
        self.args = (
            f"{self.default_message}: actor [{address.netloc}] already registered "
            f"for scheme [{address.scheme}]",
        )


class ActorNotFoundError(ActorError, LookupError):
    """No actor is registered under the address."""

    default_message = "actor not found"

    def __init__(self, address: Address) -> None:
        self.address = address
        super().__init__()
        self.args = (
            f"{self.default_message}: actor [{address.netloc}] not found "
            f"for scheme [{address.scheme}]",
        )


class AddressBook:
    """Thread-safe registry of addressable actors keyed by their address."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._actors: dict[Address, Any] = {}

    def register(self, actor: Any) -> None:
        """Register an actor under its address; raise if the address is taken."""
        address = parse_address(actor.address)
        with self._lock:
            if address in self._actors:
                raise ActorAlreadyRegisteredError(address)
            self._actors[address] = actor

    def lookup(self, address: str | Address) -> Any:
        """Return the actor registered under the address."""
        key = parse_address(address)
        with self._lock:
            try:
                return self._actors[key]
            except KeyError:
                raise ActorNotFoundError(key) from None

    def tear_down(self) -> None:
        """Forget every registered actor."""
        with self._lock:
            self._actors.clear()