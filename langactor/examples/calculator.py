"""Calculator for parentheses, addition and multiplication built from cooperating actors.

Every sub-expression that needs its own evaluation is handed to a freshly
spawned child actor; results bubble back up with request/reply messages and
the root actor prints the final value.
"""

from __future__ import annotations

import argparse
import math
import sys
import threading
from contextlib import suppress
from dataclasses import dataclass, replace
from decimal import Decimal
from enum import IntEnum
from typing import Any

from langactor.actor import Actor, new_actor, spawn_child
from langactor.framework import ActorError, Address, parse_address

CALCULATOR_ADDRESS = "actor://calculator"


@dataclass(frozen=True)
class CalcState:
    """State of one calculator actor."""

    expression: str = ""
    result: float = 0.0
    is_parenthesis: bool = False
    containing_expr: str = ""
    open_pos: int = 0
    close_pos: int = 0


class MessageType(IntEnum):
    """Kinds of messages exchanged between calculator actors."""

    EVALUATE = 0
    RESULT = 1
    EXIT = 2


@dataclass(frozen=True)
class CalcMessage:
    """Request to evaluate an expression, a result travelling back, or a shutdown."""

    sender: Address
    mex_type: MessageType
    expression: str = ""
    result: float = 0.0
    exit_event: threading.Event | None = None
    is_parenthesis: bool = False
    containing_expr: str = ""
    open_pos: int = 0
    close_pos: int = 0

    @property
    def mutation(self) -> bool:
        """Only results replace the receiving actor's state."""
        return self.mex_type == MessageType.RESULT


def _parse_float(text: str) -> float | None:
    """Parse a number the way a strict float parser would; None when it is not one."""
    if not text or "_" in text or text != text.strip():
        return None
    try:
        value = float(text)
    except ValueError:
        lowered = text.lower()
        if "0x" not in lowered or "p" not in lowered:
            return None
        try:
            value = float.fromhex(text)
        except (ValueError, OverflowError):
            return None
    if math.isinf(value) and "inf" not in text.lower():
        return None
    return value


def _format_g(value: float) -> str:
    """Shortest representation, switching to an exponent from 1e+06 or below 1e-04."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    if value == 0:
        return "-0" if math.copysign(1.0, value) < 0 else "0"
    sign, digit_tuple, exponent = Decimal(repr(value)).as_tuple()
    digits = "".join(str(d) for d in digit_tuple)
    point = len(digits) + exponent
    digits = digits.rstrip("0")
    prefix = "-" if sign else ""
    exp = point - 1
    if exp < -4 or exp >= 6:
        mantissa = digits[0] + (f".{digits[1:]}" if len(digits) > 1 else "")
        return f"{prefix}{mantissa}e{'+' if exp >= 0 else '-'}{abs(exp):02d}"
    if point <= 0:
        return f"{prefix}0.{'0' * -point}{digits}"
    if point >= len(digits):
        return f"{prefix}{digits}{'0' * (point - len(digits))}"
    return f"{prefix}{digits[:point]}.{digits[point:]}"


def _report(actor: Actor[CalcState], state: CalcState, result: float) -> None:
    """Send a result to the parent, or print it when the actor is the root."""
    parent = actor.parent
    if parent is None:
        print(f"Result: {_format_g(result)}", flush=True)
        return
    with suppress(ActorError):
        actor.send(
            CalcMessage(
                sender=actor.address,
                mex_type=MessageType.RESULT,
                result=result,
                is_parenthesis=state.is_parenthesis,
                containing_expr=state.containing_expr,
                open_pos=state.open_pos,
                close_pos=state.close_pos,
            ),
            parent,
        )


def _delegate(actor: Actor[CalcState], expression: str, **parenthesis: Any) -> None:
    """Spawn a child actor and ask it to evaluate an expression."""
    try:
        child = spawn_child(actor, calculator_fn, CalcState())
    except ActorError as exc:
        raise RuntimeError(f"failed to create child actor: {exc}") from exc
    try:
        child.deliver(
            CalcMessage(
                sender=actor.address,
                mex_type=MessageType.EVALUATE,
                expression=expression,
                **parenthesis,
            )
        )
    except ActorError as exc:
        raise RuntimeError(f"failed to deliver message: {exc}") from exc


def _evaluate(msg: CalcMessage, actor: Actor[CalcState]) -> CalcState:
    expression = msg.expression.strip()
    state = CalcState(
        expression=expression,
        is_parenthesis=msg.is_parenthesis,
        containing_expr=msg.containing_expr,
        open_pos=msg.open_pos,
        close_pos=msg.close_pos,
    )

    if not expression:
        _report(actor, state, 0.0)
        return state

    value = _parse_float(expression)
    if value is not None:
        state = replace(state, result=value)
        _report(actor, state, value)
        return state

    open_idx = expression.rfind("(")
    if open_idx >= 0:
        depth = 1
        close_idx = -1
        for idx, char in enumerate(expression[open_idx + 1:], start=open_idx + 1):
            if char == "(":
                depth += 1
            elif char == ")":
                depth -= 1
                if depth == 0:
                    close_idx = idx
                    break
        if close_idx == -1:
            raise ValueError(f"unbalanced parentheses in expression: {expression}")
        _delegate(
            actor,
            expression[open_idx + 1:close_idx],
            is_parenthesis=True,
            containing_expr=expression,
            open_pos=open_idx,
            close_pos=close_idx,
        )
        return state

    if "*" in expression:
        return _combine(expression, actor, state, "*", "+", "multiplication")
    if "+" in expression:
        return _combine(expression, actor, state, "+", "*", "addition")

    raise ValueError(f"invalid expression: {expression}")


def _combine(
    expression: str,
    actor: Actor[CalcState],
    state: CalcState,
    operator: str,
    other: str,
    name: str,
) -> CalcState:
    """Apply one operator to simple terms, delegating a compound term to a child."""
    values: list[float] = []
    for raw_part in expression.split(operator):
        part = raw_part.strip()
        value = _parse_float(part)
        if value is not None:
            values.append(value)
        elif other in part:
            _delegate(actor, part)
            return state
        else:
            raise ValueError(f"invalid term in {name}: {part}")

    result = math.prod(values, start=1.0) if operator == "*" else sum(values, 0.0)
    state = replace(state, result=result)
    _report(actor, state, result)
    return state


def _handle_result(msg: CalcMessage, actor: Actor[CalcState]) -> CalcState:
    current = actor.state
    state = replace(current, result=msg.result)

    if msg.is_parenthesis and msg.containing_expr:
        substituted = (
            msg.containing_expr[:msg.open_pos]
            + _format_g(msg.result)
            + msg.containing_expr[msg.close_pos + 1:]
        )
        actor.deliver(
            CalcMessage(
                sender=actor.address,
                mex_type=MessageType.EVALUATE,
                expression=substituted,
                is_parenthesis=current.is_parenthesis,
                containing_expr=current.containing_expr,
                open_pos=current.open_pos,
                close_pos=current.close_pos,
            )
        )
        return state

    _report(actor, state, state.result)
    return state


def calculator_fn(msg: CalcMessage, actor: Actor[CalcState]) -> CalcState:
    """Processing function shared by every calculator actor."""
    if msg.mex_type == MessageType.EVALUATE:
        return _evaluate(msg, actor)
    if msg.mex_type == MessageType.RESULT:
        return _handle_result(msg, actor)
    if msg.mex_type == MessageType.EXIT:
        print("Shutting down calculator...", flush=True)
        if msg.exit_event is not None:
            msg.exit_event.set()
        return actor.state
    raise ValueError("unknown message type")


def main(argv: list[str] | None = None) -> int:
    """Read expressions from standard input until 'exit' and print their values."""
    argparse.ArgumentParser(
        description="Evaluate expressions with parentheses, + and * using actors."
    ).parse_args(argv)

    exit_event = threading.Event()
    address = parse_address(CALCULATOR_ADDRESS)
    calc_actor = new_actor(address, calculator_fn, CalcState())
    try:
        print("Simple Calculator with Actors")
        print("Supported operations: parentheses (), addition +, multiplication *")
        print("Enter 'exit' to quit.")
        print("-----------------------------------------")

        while True:
            print("Enter expression: ", end="", flush=True)
            line = sys.stdin.readline()
            text = line.strip()
            if not line or text == "exit":
                calc_actor.deliver(
                    CalcMessage(sender=address, mex_type=MessageType.EXIT, exit_event=exit_event)
                )
                break
            calc_actor.deliver(
                CalcMessage(
                    sender=address,
                    mex_type=MessageType.EVALUATE,
                    expression=text,
                    exit_event=exit_event,
                )
            )

        exit_event.wait()
        print("Calculator stopped.", flush=True)
    finally:
        calc_actor.stop().wait()
    return 0