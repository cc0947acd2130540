"""A single actor that keeps bouncing a message back to itself."""

from __future__ import annotations

import argparse
import sys
import threading
from dataclasses import dataclass
from typing import Callable

from langactor.actor import Actor, new_actor
from langactor.framework import Address, parse_address

PING_ADDRESS = "actor://ping"
DEFAULT_STOP_AFTER = 5


@dataclass(frozen=True)
class ActorState:
    """Number of messages the actor has bounced."""

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


def ping_pong_fn(msg: ChatMessage, actor: Actor[ActorState]) -> ActorState:
    """Send the message back to the same actor until the limit is exceeded."""
    state = actor.state
    print("-----------------------------------", flush=True)
    print(
        f"I'm [{actor.address.netloc}] and I'm processing message from [{msg.sender.netloc}]",
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
    actor.send(content, actor)
    print("-----------------------------------", flush=True)
    return ActorState(processed_messages=state.processed_messages + 1)


def main(argv: list[str] | None = None) -> int:
    """Wait for enter, then let the actor play with itself until done."""
    argparse.ArgumentParser(description="Ping-pong of an actor with itself.").parse_args(argv)

    done = threading.Event()
    address = parse_address(PING_ADDRESS)
    ping_actor = new_actor(address, ping_pong_fn, ActorState())
    try:
        print("Press a enter to start", flush=True)
        sys.stdin.readline()
        ping_actor.deliver(
            ChatMessage(sender=address, stop_after=DEFAULT_STOP_AFTER, cancel=done.set)
        )
        done.wait()
    finally:
        ping_actor.stop().wait()
    return 0