"""Two actors bounce a message between each other, found through an address book."""

from __future__ import annotations

import argparse
import sys
import threading
from dataclasses import dataclass
from typing import Callable

from langactor.actor import Actor, ProcessingFn, new_actor
from langactor.framework import Address, parse_address
from langactor.routing import AddressBook

PING_ADDRESS = "actor://ping"
PONG_ADDRESS = "actor://pong"
DEFAULT_STOP_AFTER = 5


@dataclass(frozen=True)
class ActorState:
    """Number of messages an actor has bounced back."""

    processed_messages: int = 0


@dataclass(frozen=True)
class ChatMessage:
    """The ball: who threw it, when to stop, and how to signal the end."""

    sender: Address
    stop_after: int
    cancel: Callable[[], None]

    @property
    def mutation(self) -> bool:
        """Every bounce updates the counter."""
        return True


def make_ping_pong_fn(address_book: AddressBook) -> ProcessingFn:
    """Processing function that replies to the sender found in the address book."""

    def ping_pong_fn(msg: ChatMessage, actor: Actor[ActorState]) -> ActorState:
        state = actor.state
        print("-----------------------------------", flush=True)
        print(
            f"I'm [{actor.address.netloc}] and I'm processing message "
            f"from [{msg.sender.netloc}]",
            flush=True,
        )

        if msg.stop_after < state.processed_messages:
            print("Current state:", state.processed_messages, flush=True)
            print("Stopping after:", msg.stop_after, flush=True)
            print("Cancelling the actor", flush=True)
            msg.cancel()
            print("====================================", flush=True)
            return state

        content = ChatMessage(sender=actor.address, stop_after=msg.stop_after, cancel=msg.cancel)
        print("Sending message to:", msg.sender.netloc, flush=True)
        actor.send(content, address_book.lookup(msg.sender))
        print("-----------------------------------", flush=True)
        return ActorState(processed_messages=state.processed_messages + 1)

    return ping_pong_fn


def main(argv: list[str] | None = None) -> int:
    """Wait for enter, then play ping-pong until one side has bounced enough."""
    argparse.ArgumentParser(description="Ping-pong between two actors.").parse_args(argv)

    address_book = AddressBook()
    ping_pong_fn = make_ping_pong_fn(address_book)
    done = threading.Event()
    pong_address = parse_address(PONG_ADDRESS)

    ping_actor = new_actor(PING_ADDRESS, ping_pong_fn, ActorState())
    pong_actor = new_actor(pong_address, ping_pong_fn, ActorState())
    try:
        address_book.register(ping_actor)
        address_book.register(pong_actor)

        print("Press a enter to start", flush=True)
        sys.stdin.readline()
        ping_actor.deliver(
            ChatMessage(sender=pong_address, stop_after=DEFAULT_STOP_AFTER, cancel=done.set)
        )
        done.wait()
    finally:
        pong_actor.stop().wait()
        ping_actor.stop().wait()
        address_book.tear_down()
    return 0