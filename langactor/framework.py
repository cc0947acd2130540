"""Core types of the actor framework: statuses, errors, messages and mailbox settings."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Protocol, runtime_checkable
from urllib.parse import SplitResult, urlsplit

Address = SplitResult

ACTOR_SCHEME = "actor"
DEFAULT_MAILBOX_CAPACITY = 100
UNBOUNDED_MAILBOX_CAPACITY = 1_000_000


class ActorError(Exception):
    """Base class of every error raised by the actor framework."""

    default_message = "actor error"

    def __init__(self, context: str | None = None) -> None:
        message = self.default_message if not context else f"{context}: {self.default_message}"
        super().__init__(message)


class InvalidActorAddressError(ActorError, ValueError):
    """The address does not use a supported scheme."""

    default_message = "invalid actor address"


class ActorNotRunningError(ActorError):
    """The actor has been stopped and accepts no more work."""

    default_message = "actor not running"


class InvalidChildURLError(ActorError, ValueError):
    """The address cannot name a direct child of the actor."""

    default_message = "invalid child URL"


class MailboxFullError(ActorError):
    """The mailbox is full and its policy rejects new messages."""

    default_message = "mailbox full: message rejected"


class ActorStatus(IntEnum):
    """Lifecycle status of an actor."""

    IDLE = 0
    RUNNING = 1


class BackpressurePolicy(IntEnum):
    """How a mailbox behaves once it reaches its capacity."""

    BLOCK = 0
    FAIL = 1
    UNBOUNDED = 2
    DROP_NEWEST = 3
    DROP_OLDEST = 4


@dataclass(frozen=True)
class MailboxConfig:
    """Capacity and backpressure policy of an actor's mailbox.

    The capacity is ignored by the unbounded policy.
    """

    capacity: int = DEFAULT_MAILBOX_CAPACITY
    policy: BackpressurePolicy = BackpressurePolicy.BLOCK


@runtime_checkable
class Message(Protocol):
    """Anything delivered to an actor: it names its sender and whether it mutates state."""

    @property
    def sender(self) -> Address:
        """Address of the actor that sent the message."""
        ...

    @property
    def mutation(self) -> bool:
        """True when the processing result replaces the actor's state."""
        ...


def parse_address(text: str | Address) -> Address:
    """Parse an actor address such as ``actor://host/path``."""
    if isinstance(text, SplitResult):
        return text
    return urlsplit(text)


def block_policy(capacity: int) -> MailboxConfig:
    """Mailbox whose senders wait while it is full."""
    return MailboxConfig(capacity=capacity, policy=BackpressurePolicy.BLOCK)


def fail_policy(capacity: int) -> MailboxConfig:
    """Mailbox that rejects messages while it is full."""
    return MailboxConfig(capacity=capacity, policy=BackpressurePolicy.FAIL)


def unbounded_policy() -> MailboxConfig:
    """Very large mailbox that rejects messages only once its huge capacity is reached."""
    return MailboxConfig(capacity=UNBOUNDED_MAILBOX_CAPACITY, policy=BackpressurePolicy.FAIL)


def drop_newest_policy(capacity: int) -> MailboxConfig:
    """Mailbox that silently discards new messages while it is full."""
    return MailboxConfig(capacity=capacity, policy=BackpressurePolicy.DROP_NEWEST)


def drop_oldest_policy(capacity: int) -> MailboxConfig:
    """Mailbox that discards its oldest message to make room for a new one."""
    return MailboxConfig(capacity=capacity, policy=BackpressurePolicy.DROP_OLDEST)