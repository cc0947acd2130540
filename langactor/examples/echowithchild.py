"""Echo where a child actor prepares the reply and the parent prints it."""

from __future__ import annotations

import argparse
import sys
from dataclasses import dataclass
from enum import IntEnum

from langactor.actor import Actor, new_actor, spawn_child
from langactor.framework import ActorError, Address, parse_address

ECHO_ADDRESS = "actor://echo"


@dataclass(frozen=True)
class MainActorState:
    """Number of replies the main actor has printed."""

    processed_messages: int = 0


@dataclass(frozen=True)
class ChildActorState:
    """Number of requests a child actor has handled."""

    processed_requests: int = 0


class MessageType(IntEnum):
    """Request sent down to a child, or reply sent back up."""

    REQUEST = 0
    REPLY = 1


@dataclass(frozen=True)
class EchoMessage:
    """Message used both for requests and for decorated replies."""

    sender: Address
    mex_type: MessageType
    content: str = ""
    decorated: str = ""

    @property
    def mutation(self) -> bool:
        """Every echo message replaces the receiver's state."""
        return True


def decorate(content: str) -> str:
    """Upper-case the content and surround it with sparkles."""
    return f"✨ {content.upper()} ✨"


def main_actor_fn(msg: EchoMessage, actor: Actor[MainActorState]) -> MainActorState:
    """Hand requests to a fresh child and print the replies it sends back."""
    if not isinstance(msg, EchoMessage):
        raise TypeError("unexpected message type")

    if msg.mex_type == MessageType.REQUEST:
        try:
            child = spawn_child(actor, child_actor_fn, ChildActorState())
        except ActorError as exc:
            raise RuntimeError(f"error creating child actor: {exc}") from exc
        request = EchoMessage(
            sender=actor.address, mex_type=MessageType.REQUEST, content=msg.content
        )
        try:
            actor.send(request, child)
        except ActorError as exc:
            raise RuntimeError(f"error sending message to child: {exc}") from exc
        return actor.state

    if msg.mex_type == MessageType.REPLY:
        processed = actor.state.processed_messages
        print(f"Echo: [{msg.decorated}] (processed {processed} messages)", flush=True)
        return MainActorState(processed_messages=processed + 1)

    return actor.state


def child_actor_fn(msg: EchoMessage, actor: Actor[ChildActorState]) -> ChildActorState:
    """Decorate a request and reply to the parent."""
    if not isinstance(msg, EchoMessage):
        raise TypeError("unexpected message type")

    if msg.mex_type == MessageType.REQUEST:
        reply = EchoMessage(
            sender=actor.address,
            mex_type=MessageType.REPLY,
            content=msg.content,
            decorated=decorate(msg.content),
        )
        parent = actor.parent
        if parent is not None:
            try:
                actor.send(reply, parent)
            except ActorError as exc:
                raise RuntimeError(f"error sending reply to parent: {exc}") from exc

    return ChildActorState(processed_requests=actor.state.processed_requests + 1)


def main(argv: list[str] | None = None) -> int:
    """Echo lines read from standard input, prepared by child actors, until 'exit'."""
    argparse.ArgumentParser(
        description="Echo lines through an actor that delegates to children."
    ).parse_args(argv)

    address = parse_address(ECHO_ADDRESS)
    main_actor = new_actor(address, main_actor_fn, MainActorState())
    try:
        print("Send messages for echo with child preparation, send 'exit' to quit.", flush=True)
        while True:
            print("> ", end="", flush=True)
            line = sys.stdin.readline()
            text = line.strip()
            if not line or text == "exit":
                break
            main_actor.deliver(
                EchoMessage(sender=address, mex_type=MessageType.REQUEST, content=text)
            )
    finally:
        main_actor.stop().wait()
    return 0