"""Tests for pure state transitions."""
from qr_tech.state import (
    LOADING_MESSAGE,
    GeneratorState,
    Status,
    finish_error,
    finish_ready,
    is_stale,
    start_loading,
)
from tests.conftest import make_artifact


def test_initial_state_is_idle_and_not_exportable():
    state = GeneratorState()
    assert state.status is Status.IDLE
    assert state.artifact is None
    assert not state.can_export


def test_start_loading_issues_new_request_id():
    state = start_loading(GeneratorState())
    assert state.status is Status.LOADING
    assert state.message == LOADING_MESSAGE
    assert state.request_seq == 1
    assert start_loading(state).request_seq == 2


def test_transitions_do_not_mutate_input():
    original = GeneratorState()
    start_loading(original)
    assert original.status is Status.IDLE
    assert original.request_seq == 0


def test_ready_stores_artifact_and_enables_export():
    artifact = make_artifact()
    state = finish_ready(start_loading(GeneratorState()), artifact)
    assert state.status is Status.READY
    assert state.artifact is artifact
    assert state.message == ""
    assert state.can_export


def test_error_keeps_artifact_but_disables_export():
    artifact = make_artifact()
    ready = finish_ready(start_loading(GeneratorState()), artifact)
    state = finish_error(start_loading(ready), "boom")
    assert state.status is Status.ERROR
    assert state.message == "boom"
    assert state.artifact is artifact
    assert not state.can_export


def test_loading_after_ready_is_not_exportable():
    ready = finish_ready(start_loading(GeneratorState()), make_artifact())
    assert not start_loading(ready).can_export


def test_is_stale():
    first = start_loading(GeneratorState())
    second = start_loading(first)
    assert not is_stale(first, 1)
    assert is_stale(second, 1)
    assert not is_stale(second, 2)
