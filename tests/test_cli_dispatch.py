from __future__ import annotations

import pytest

from bosh_cli.cli.dispatch import ArgumentError, Command, CommandDispatcher, UnknownCommand


def _dispatcher(calls: list[tuple]) -> CommandDispatcher:
    def record(name):  # noqa: ANN001
        def handler(*args):  # noqa: ANN002
            calls.append((name, args))
            return name

        return handler

    return CommandDispatcher(
        {
            "status": Command("status", 0, record("status")),
            "login": Command("login", 2, record("login")),
            "echo": Command("echo", None, record("echo")),
        }
    )


def test_dispatch_invokes_matching_handler_once() -> None:
    calls: list[tuple] = []
    dispatcher = _dispatcher(calls)

    assert dispatcher.dispatch("login", ["alice", "secret"]) == "login"
    assert calls == [("login", ("alice", "secret"))]


def test_unknown_command_carries_name() -> None:
    calls: list[tuple] = []
    dispatcher = _dispatcher(calls)

    with pytest.raises(UnknownCommand) as info:
        dispatcher.dispatch("frobnicate", [])

    assert info.value.command == "frobnicate"
    assert "unknown command 'frobnicate'" in str(info.value)
    assert calls == []


def test_resolution_is_exact_and_case_sensitive() -> None:
    dispatcher = _dispatcher([])
    for name in ("Status", "stat", "status ", "log-in"):
        with pytest.raises(UnknownCommand):
            dispatcher.resolve(name)


def test_arity_mismatch_raises_before_invocation() -> None:
    calls: list[tuple] = []
    dispatcher = _dispatcher(calls)

    with pytest.raises(ArgumentError) as info:
        dispatcher.dispatch("login", ["alice"])

    assert info.value.expected == 2
    assert info.value.actual == 1
    assert "(1 for 2)" in str(info.value)
    assert calls == []


def test_variable_arity_skips_count_check() -> None:
    calls: list[tuple] = []
    dispatcher = _dispatcher(calls)

    dispatcher.dispatch("echo", [])
    dispatcher.dispatch("echo", ["a", "b", "c"])

    assert calls == [("echo", ()), ("echo", ("a", "b", "c"))]


def test_names_are_sorted() -> None:
    assert _dispatcher([]).names() == ["echo", "login", "status"]
