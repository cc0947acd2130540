import io
import threading
import time

import pytest

from langactor.actor import new_actor, spawn_child
from langactor.examples.calculator import (
    CalcMessage,
    CalcState,
    MessageType,
    calculator_fn,
    main,
)

TIMEOUT = 5.0


@pytest.fixture
def root():
    actor = new_actor("actor://calculator", calculator_fn, CalcState())
    yield actor
    actor.stop().wait(TIMEOUT)


def _evaluate_msg(actor, expression):
    return CalcMessage(sender=actor.address, mex_type=MessageType.EVALUATE, expression=expression)


def _wait_for_output(capsys, marker):
    collected = ""
    deadline = time.monotonic() + TIMEOUT
    while True:
        collected += capsys.readouterr().out
        if marker in collected or time.monotonic() > deadline:
            return collected
        time.sleep(0.01)


def _result_text(output):
    line = next(line for line in output.splitlines() if line.startswith("Result: "))
    return line[len("Result: "):]


def test_result_message_is_mutation(root):
    msg = CalcMessage(sender=root.address, mex_type=MessageType.RESULT, result=1.0)
    assert msg.mutation is True


def test_evaluate_and_exit_messages_are_not_mutations(root):
    assert _evaluate_msg(root, "1").mutation is False
    assert CalcMessage(sender=root.address, mex_type=MessageType.EXIT).mutation is False


def test_number_evaluated_directly_on_root(root, capsys):
    state = calculator_fn(_evaluate_msg(root, "  7 "), root)
    assert state.result == 7.0
    assert state.expression == "7"
    assert "Result: 7\n" in capsys.readouterr().out


def test_empty_expression_prints_zero(root, capsys):
    state = calculator_fn(_evaluate_msg(root, "   "), root)
    assert state.result == 0.0
    assert "Result: 0\n" in capsys.readouterr().out


def test_result_on_root_is_printed(root, capsys):
    msg = CalcMessage(sender=root.address, mex_type=MessageType.RESULT, result=5.0)
    state = calculator_fn(msg, root)
    assert state.result == 5.0
    assert "Result: 5\n" in capsys.readouterr().out


def test_unbalanced_parentheses_raise(root):
    with pytest.raises(ValueError, match="unbalanced parentheses in expression: \\(1\\+2"):
        calculator_fn(_evaluate_msg(root, "(1+2"), root)


def test_invalid_expression_raises(root):
    with pytest.raises(ValueError, match="invalid expression: abc"):
        calculator_fn(_evaluate_msg(root, "abc"), root)


def test_invalid_multiplication_term_raises(root):
    with pytest.raises(ValueError, match="invalid term in multiplication: x"):
        calculator_fn(_evaluate_msg(root, "2*x"), root)


def test_invalid_addition_term_raises(root):
    with pytest.raises(ValueError, match="invalid term in addition: y"):
        calculator_fn(_evaluate_msg(root, "1+y"), root)


def test_underscored_number_is_not_a_number(root):
    with pytest.raises(ValueError, match="invalid expression: 1_000"):
        calculator_fn(_evaluate_msg(root, "1_000"), root)


def test_unknown_message_type_raises(root):
    msg = CalcMessage(sender=root.address, mex_type=99)
    with pytest.raises(ValueError, match="unknown message type"):
        calculator_fn(msg, root)


def test_multiplication_of_simple_terms(root, capsys):
    root.deliver(_evaluate_msg(root, "2 * 3"))
    out = _wait_for_output(capsys, "Result:")
    assert _result_text(out) == "6"


def test_addition_of_simple_terms(root, capsys):
    root.deliver(_evaluate_msg(root, "1 + 2 + 3"))
    out = _wait_for_output(capsys, "Result:")
    assert _result_text(out) == "6"


def test_parentheses_are_evaluated_by_children(root, capsys):
    root.deliver(_evaluate_msg(root, "(1+2)*3"))
    out = _wait_for_output(capsys, "Result:")
    assert _result_text(out) == "9"


def test_nested_parentheses_around_number(root, capsys):
    root.deliver(_evaluate_msg(root, "((42))"))
    out = _wait_for_output(capsys, "Result:")
    assert _result_text(out) == "42"


def test_large_result_uses_exponent_notation(root, capsys):
    root.deliver(_evaluate_msg(root, "1000000"))
    text = _result_text(_wait_for_output(capsys, "Result:"))
    assert "e+" in text
    assert float(text) == 1000000.0


def test_small_result_uses_exponent_notation(root, capsys):
    root.deliver(_evaluate_msg(root, "0.00001"))
    text = _result_text(_wait_for_output(capsys, "Result:"))
    assert "e-" in text
    assert float(text) == 0.00001


def test_fraction_round_trips(root, capsys):
    root.deliver(_evaluate_msg(root, "2.5"))
    text = _result_text(_wait_for_output(capsys, "Result:"))
    assert text == "2.5"


def test_child_result_bubbles_up_to_parent_state(root, capsys):
    child = spawn_child(root, calculator_fn, CalcState())
    child.deliver(_evaluate_msg(child, "4"))
    out = _wait_for_output(capsys, "Result:")
    assert _result_text(out) == "4"
    deadline = time.monotonic() + TIMEOUT
    while root.state.result != 4.0 and time.monotonic() < deadline:
        time.sleep(0.01)
    assert root.state.result == 4.0


def test_exit_message_sets_event(root, capsys):
    event = threading.Event()
    root.deliver(CalcMessage(sender=root.address, mex_type=MessageType.EXIT, exit_event=event))
    assert event.wait(TIMEOUT) is True
    assert "Shutting down calculator..." in _wait_for_output(capsys, "Shutting down")


def test_main_evaluates_then_stops(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("5\nexit\n"))
    assert main([]) == 0
    out = capsys.readouterr().out
    assert "Simple Calculator with Actors" in out
    assert out.index("Result: 5") < out.index("Shutting down calculator...")
    assert out.index("Shutting down calculator...") < out.index("Calculator stopped.")


def test_main_stops_at_end_of_input(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO(""))
    assert main([]) == 0
    out = capsys.readouterr().out
    assert out.rstrip().endswith("Calculator stopped.")