"""Merge sort where every split is handed to a pair of child actors.

Each actor splits its list in two and gives each half to a new child. Sorted
halves travel back up as merge messages. Once the root actor holds the whole
sorted list it prints it and signals that the program may leave.
"""

from __future__ import annotations

import argparse
import re
import sys
import threading
from dataclasses import dataclass
from enum import IntEnum
from heapq import merge
from typing import Iterable

from langactor.actor import Actor, ProcessingFn, new_actor, spawn_child
from langactor.framework import ActorError, Address, parse_address

SORTER_ADDRESS = "actor://sorter"

_INTEGER_PREFIX = re.compile(r"\s*([+-]?\d+)")
_INT_MIN = -(2**63)
_INT_MAX = 2**63 - 1


@dataclass(frozen=True)
class SorterState:
    """The sorted integers an actor has collected; None until a first merge arrives."""

    sorted_ints: tuple[int, ...] | None = None


class InputMessageType(IntEnum):
    """Kinds of messages exchanged between sorter actors."""

    SORT = 0
    MERGE = 1
    END = 2
    LEAVE = 3


@dataclass(frozen=True)
class InputMessage:
    """A list of integers to sort or merge, or a signal to finish."""

    ints: tuple[int, ...] = ()
    mex_type: InputMessageType = InputMessageType.SORT

    @property
    def sender(self) -> Address:
        """Sorter messages carry no sender."""
        return parse_address("")

    @property
    def mutation(self) -> bool:
        """Only merges replace the receiving actor's state."""
        return self.mex_type == InputMessageType.MERGE


def _format_ints(ints: Iterable[int]) -> str:
    return "[" + " ".join(str(value) for value in ints) + "]"


def _pass_up(actor: Actor[SorterState], ints: tuple[int, ...]) -> None:
    """Send a sorted list to the parent, or end the sort when the actor is the root."""
    parent = actor.parent
    if parent is not None:
        try:
            actor.send(InputMessage(ints=ints, mex_type=InputMessageType.MERGE), parent)
        except ActorError as exc:
            print("Error sending merge upstream", exc, flush=True)
    else:
        try:
            actor.deliver(InputMessage(ints=ints, mex_type=InputMessageType.END))
        except ActorError as exc:
            print("Error sending end to me", exc, flush=True)


def _leave(actor: Actor[SorterState]) -> None:
    try:
        actor.deliver(InputMessage(mex_type=InputMessageType.LEAVE))
    except ActorError as exc:
        print("Error sending leave to me", exc, flush=True)


def _sort(
    sort_fn: ProcessingFn, msg: InputMessage, actor: Actor[SorterState]
) -> SorterState:
    ints = tuple(msg.ints)
    if len(ints) < 2:
        _pass_up(actor, ints)
        return SorterState()
    if len(ints) == 2:
        first, second = ints
        _pass_up(actor, (first, second) if first <= second else (second, first))
        return SorterState()

    mid = len(ints) // 2
    print("Splitting", _format_ints(ints), "at", mid, flush=True)

    for side, half in (("left", ints[:mid]), ("right", ints[mid:])):
        try:
            child = spawn_child(actor, sort_fn, SorterState())
        except ActorError as exc:
            print(f"Error creating {side} actor:", exc, flush=True)
            _leave(actor)
            return SorterState()
        try:
            child.deliver(InputMessage(ints=half, mex_type=InputMessageType.SORT))
        except ActorError as exc:
            print(f"Error sending sort {side} downstream", exc, flush=True)
            _leave(actor)
            return SorterState()

    return SorterState()


def _merge(msg: InputMessage, actor: Actor[SorterState]) -> SorterState:
    held = actor.state.sorted_ints
    if held is None:
        return SorterState(sorted_ints=tuple(msg.ints))
    merged = tuple(merge(held, msg.ints))
    _pass_up(actor, merged)
    return SorterState(sorted_ints=merged)


def make_sort_fn(leave_event: threading.Event) -> ProcessingFn:
    """Processing function for sorter actors; sets the event once the sort is over."""

    def sort_fn(msg: InputMessage, actor: Actor[SorterState]) -> SorterState:
        if msg.mex_type == InputMessageType.SORT:
            return _sort(sort_fn, msg, actor)
        if msg.mex_type == InputMessageType.MERGE:
            return _merge(msg, actor)
        if msg.mex_type == InputMessageType.END:
            print("Sort completed:", _format_ints(msg.ints), flush=True)
            _leave(actor)
            return SorterState()
        if msg.mex_type == InputMessageType.LEAVE:
            print("Exiting...", flush=True)
            leave_event.set()
            return SorterState()
        raise ValueError("unknown message type")

    return sort_fn


def convert_elements_to_integers(parts: Iterable[str]) -> list[int]:
    """Read the leading integer of every part; a part without one counts as 0."""
    integers = []
    for part in parts:
        match = _INTEGER_PREFIX.match(part)
        value = int(match.group(1)) if match else 0
        integers.append(value if _INT_MIN <= value <= _INT_MAX else 0)
    return integers


def main(argv: list[str] | None = None) -> int:
    """Read a line of space-separated numbers and print them sorted."""
    argparse.ArgumentParser(description="Sort numbers with a tree of actors.").parse_args(argv)

    leave_event = threading.Event()
    sorter = new_actor(SORTER_ADDRESS, make_sort_fn(leave_event), SorterState())
    try:
        print("Type a list of numbers and press enter to sort them.", flush=True)
        text = sys.stdin.readline().strip()
        integers = convert_elements_to_integers(text.split(" "))
        print("partsAsIntegers", _format_ints(integers), flush=True)
        sorter.deliver(InputMessage(ints=tuple(integers), mex_type=InputMessageType.SORT))
        leave_event.wait()
    finally:
        sorter.stop().wait()
    return 0