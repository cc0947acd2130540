"""Echo actor: prints every line it receives together with a running count."""

from __future__ import annotations

import argparse
import sys
from dataclasses import dataclass

from langactor.actor import Actor, new_actor
from langactor.framework import Address, parse_address

ECHO_ADDRESS = "actor://echo"


@dataclass(frozen=True)
class ActorState:
    """Number of messages the echo actor has processed."""

    processed_messages: int = 0


@dataclass(frozen=True)
class ChatMessage:
    """A line of text to echo."""

    sender: Address
    message: str

    @property
    def mutation(self) -> bool:
        """Every chat message updates the counter."""
        return True


def echo_fn(msg: ChatMessage, actor: Actor[ActorState]) -> ActorState:
    """Print the message and count it."""
    processed = actor.state.processed_messages
    print(f"Echo [{msg.message}] after [{processed}] messages", flush=True)
    return ActorState(processed_messages=processed + 1)


def main(argv: list[str] | None = None) -> int:
    """Echo lines read from standard input until 'exit'."""
    argparse.ArgumentParser(description="Echo lines through an actor.").parse_args(argv)

    address = parse_address(ECHO_ADDRESS)
    echo_actor = new_actor(address, echo_fn, ActorState())
    try:
        print("Send messages to get an echo, send 'exit' to quit.", flush=True)
        for line in sys.stdin:
            text = line.strip()
            if text == "exit":
                break
            echo_actor.deliver(ChatMessage(sender=address, message=text))
    finally:
        echo_actor.stop().wait()
    return 0