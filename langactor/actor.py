"""Actors: a mailbox, a processing thread, a state and a tree of children."""

from __future__ import annotations

import logging
import threading
import time
import uuid
from collections import deque
from typing import Any, Callable, Generic, TypeVar

from langactor.framework import (
    ACTOR_SCHEME,
    DEFAULT_MAILBOX_CAPACITY,
    UNBOUNDED_MAILBOX_CAPACITY,
    ActorError,
    ActorNotRunningError,
    ActorStatus,
    Address,
    BackpressurePolicy,
    InvalidActorAddressError,
    InvalidChildURLError,
    MailboxConfig,
    MailboxFullError,
    Message,
    parse_address,
)

T = TypeVar("T")

ProcessingFn = Callable[[Message, "Actor[T]"], T]

DRAIN_TIMEOUT = 5.0

_logger = logging.getLogger(__name__)


class _MailboxChangedError(ActorError):
    default_message = "mailbox state changed unexpectedly"


class _Mailbox:
    """Bounded FIFO of messages shared by senders and the actor's thread."""

    def __init__(self, capacity: int) -> None:
        self._items: deque[Message] = deque()
        self._capacity = capacity
        self._cond = threading.Condition()
        self._deadline: float | None = None
        self._finished = False

    def _full(self) -> bool:
        return len(self._items) >= self._capacity

    def put(self, msg: Message) -> None:
        """Append a message, waiting while the mailbox is full."""
        with self._cond:
            while self._full():
                if self._finished:
                    raise ActorNotRunningError("failed to deliver message")
                self._cond.wait()
            self._items.append(msg)
            self._cond.notify_all()

    def offer(self, msg: Message) -> bool:
        """Append a message if there is room; report whether it was taken."""
        with self._cond:
            if self._full():
                return False
            self._items.append(msg)
            self._cond.notify_all()
            return True

    def replace_oldest(self, msg: Message) -> bool:
        """Append a message, discarding the oldest one when the mailbox is full."""
        with self._cond:
            if self._full() and self._capacity > 0 and self._items:
                self._items.popleft()
            if self._full():
                return False
            self._items.append(msg)
            self._cond.notify_all()
            return True

    def take(self) -> Message | None:
        """Next message, or None once closed and drained (or out of drain time)."""
        with self._cond:
            while True:
                if self._deadline is not None:
                    if not self._items or time.monotonic() > self._deadline:
                        return None
                if self._items:
                    msg = self._items.popleft()
                    self._cond.notify_all()
                    return msg
                self._cond.wait()

    def close(self) -> None:
        """Stop waiting for new messages; what is queued is still handed out."""
        with self._cond:
            if self._deadline is None:
                self._deadline = time.monotonic() + DRAIN_TIMEOUT
            self._cond.notify_all()

    def finish(self) -> None:
        """Mark that nobody will take messages any more."""
        with self._cond:
            self._finished = True
            self._cond.notify_all()


def _resolve_config(config: MailboxConfig | None) -> tuple[MailboxConfig, int]:
    config = config if config is not None else MailboxConfig()
    if config.policy is BackpressurePolicy.UNBOUNDED:
        return config, UNBOUNDED_MAILBOX_CAPACITY
    capacity = config.capacity if config.capacity > 0 else DEFAULT_MAILBOX_CAPACITY
    return config, capacity


class Actor(Generic[T]):
    """An actor that processes its messages one at a time on its own thread."""

    def __init__(
        self,
        address: Address,
        processing_fn: ProcessingFn,
        initial_state: T,
        mailbox_config: MailboxConfig | None = None,
        parent: Actor[Any] | None = None,
    ) -> None:
        config, capacity = _resolve_config(mailbox_config)
        self._lock = threading.Lock()
        self._status = ActorStatus.RUNNING
        self._stopped = threading.Event()
        self._address = address
        self._mailbox = _Mailbox(capacity)
        self._config = config
        self._processing_fn = processing_fn
        self._parent = parent
        self._children: dict[Address, Actor[Any]] = {}
        self._state = initial_state
        self._thread = threading.Thread(
            target=self._consume, name=f"actor {address.geturl()}", daemon=True
        )
        self._thread.start()

    def __repr__(self) -> str:
        return f"Actor({self._address.geturl()!r}, status={self._status.name})"

    @property
    def address(self) -> Address:
        """The actor's address."""
        return self._address

    @property
    def state(self) -> T:
        """The actor's current state."""
        with self._lock:
            return self._state

    @property
    def status(self) -> ActorStatus:
        """The actor's lifecycle status."""
        return self._status

    @property
    def parent(self) -> Actor[Any] | None:
        """The parent actor, or None for a root actor."""
        return self._parent

    def stop(self) -> threading.Event:
        """Stop the children, then the actor; the returned event is set once it is idle."""
        for child_address in list(self._children):
            try:
                self.crop(child_address)
            except InvalidChildURLError:
                pass
        with self._lock:
            if self._status is not ActorStatus.RUNNING:
                raise ActorNotRunningError("cannot stop actor")
            self._mailbox.close()
            return self._stopped

    def deliver(self, msg: Message) -> None:
        """Put a message in the mailbox according to the backpressure policy."""
        if self._status is not ActorStatus.RUNNING:
            raise ActorNotRunningError("failed to deliver message")
        policy = self._config.policy
        if policy is BackpressurePolicy.FAIL:
            if not self._mailbox.offer(msg):
                raise MailboxFullError()
        elif policy is BackpressurePolicy.DROP_NEWEST:
            self._mailbox.offer(msg)
        elif policy is BackpressurePolicy.DROP_OLDEST:
            if not self._mailbox.replace_oldest(msg):
                raise _MailboxChangedError("failed to deliver message")
        else:
            self._mailbox.put(msg)

    def send(self, msg: Message, addressable: Any) -> None:
        """Deliver a message to another addressable actor."""
        addressable.deliver(msg)

    def append(self, child: Actor[Any]) -> None:
        """Register a child actor whose address lies below this actor's address."""
        child_address = parse_address(child.address)
        if not self._is_child_address(child_address):
            raise InvalidChildURLError()
        with self._lock:
            if child_address in self._children:
                raise InvalidChildURLError("child already exists")
            self._children[child_address] = child

    def crop(self, address: str | Address) -> Actor[Any]:
        """Stop a child, wait for it to finish and remove it; return the child."""
        key = parse_address(address)
        with self._lock:
            child = self._children.get(key)
            if child is None:
                raise InvalidChildURLError()
            try:
                done = child.stop()
            except ActorNotRunningError:
                pass
            else:
                done.wait()
            del self._children[key]
            return child

    def _is_child_address(self, candidate: Address) -> bool:
        if candidate.scheme != self._address.scheme or candidate.netloc != self._address.netloc:
            return False
        parent_path = self._address.path
        child_path = candidate.path
        if len(child_path) <= len(parent_path) or not child_path.startswith(parent_path):
            return False
        remaining = child_path[len(parent_path):]
        if not remaining.startswith("/"):
            return False
        remaining = remaining[1:]
        return bool(remaining) and not remaining.startswith("/")

    def _consume(self) -> None:
        try:
            while (msg := self._mailbox.take()) is not None:
                self._process(msg)
        finally:
            self._mailbox.finish()
            self._status = ActorStatus.IDLE
            self._stopped.set()

    def _process(self, msg: Message) -> None:
        try:
            new_state = self._processing_fn(msg, self)
        except Exception as exc:  # a failing message must not kill the actor
            _logger.error("message processing failed in %s: %s", self._address.geturl(), exc)
            return
        if msg.mutation:
            with self._lock:
                self._state = new_state


def new_actor(
    address: str | Address,
    processing_fn: ProcessingFn,
    initial_state: T,
    mailbox_config: MailboxConfig | None = None,
) -> Actor[T]:
    """Create and start a root actor at an ``actor://`` address."""
    parsed = parse_address(address)
    if parsed.scheme != ACTOR_SCHEME:
        raise InvalidActorAddressError()
    return Actor(parsed, processing_fn, initial_state, mailbox_config)


def spawn_child(
    parent: Actor[Any],
    processing_fn: ProcessingFn,
    initial_state: T,
    mailbox_config: MailboxConfig | None = None,
) -> Actor[T]:
    """Create and start a child actor under a fresh address below the parent's."""
    parent_address = parse_address(parent.address)
    address = parse_address(
        f"{ACTOR_SCHEME}://{parent_address.netloc}{parent_address.path}/{uuid.uuid4()}"
    )
    child: Actor[T] = Actor(address, processing_fn, initial_state, mailbox_config, parent=parent)
    try:
        parent.append(child)
    except ActorError:
        child.stop().wait()
        raise
    return child