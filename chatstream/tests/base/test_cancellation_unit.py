"""Unit tests for cooperative cancellation primitives.

Covers idempotent cancel, cascade to children, late link of child after
parent cancel, ``on_cancel`` hooks and ``raise_if_cancelled`` behavior.
"""
from __future__ import annotations

import pytest

from chatstream.base.cancellation import CancellationToken, CancelledError


def test_cancel_cascades_to_children_and_is_idempotent():
    parent = CancellationToken()
    child1 = parent.child()
    child2 = parent.child()

    parent.cancel(reason="stop")
    parent.cancel(reason="ignored")

    assert parent.cancelled is True and parent.reason == "stop"
    assert child1.cancelled is True and child1.reason == "stop"
    assert child2.cancelled is True and child2.reason == "stop"


def test_child_cancel_does_not_cancel_parent():
    parent = CancellationToken()
    child = parent.child()
    child.cancel("only me")
    assert child.cancelled and not parent.cancelled


def test_link_child_after_parent_cancel_immediately_cancels_child():
    parent = CancellationToken()
    parent.cancel("done")
    late_child = CancellationToken(parent=parent)
    assert late_child.cancelled is True and late_child.reason == "done"


def test_raise_if_cancelled_raises_with_reason():
    token = CancellationToken()
    token.raise_if_cancelled()
    token.cancel("terminate")
    with pytest.raises(CancelledError, match="terminate"):
        token.raise_if_cancelled()


def test_on_cancel_hooks_run_once_and_can_unregister():
    token = CancellationToken()
    calls = []
    token.on_cancel(lambda reason: calls.append(("a", reason)))
    unregister = token.on_cancel(lambda reason: calls.append(("b", reason)))
    unregister()
    token.cancel("bye")
    token.cancel("again")
    assert calls == [("a", "bye")]


def test_on_cancel_after_cancel_runs_immediately():
    token = CancellationToken()
    token.cancel("late")
    calls = []
    token.on_cancel(calls.append)
    assert calls == ["late"]


def test_failing_hook_does_not_block_others():
    token = CancellationToken()
    calls = []

    def bad(_reason):
        raise RuntimeError("hook failed")

    token.on_cancel(bad)
    token.on_cancel(calls.append)
    token.cancel("x")
    assert calls == ["x"]
