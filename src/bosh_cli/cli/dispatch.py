"""Static command registry and dispatch."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Sequence

logger = logging.getLogger(__name__)


class UnknownCommand(LookupError):
    """Raised when no handler is registered under a command name."""

    def __init__(self, command: str) -> None:
        super().__init__(f"unknown command '{command}'")
        self.command = command


class ArgumentError(TypeError):
    """Raised when a command is called with the wrong number of arguments."""

    def __init__(self, command: str, *, expected: int, actual: int) -> None:
        super().__init__(
            f"wrong number of arguments for '{command}' ({actual} for {expected})"
        )
        self.command = command
        self.expected = expected
        self.actual = actual


@dataclass(frozen=True)
class Command:
    name: str
    arity: int | None
    handler: Callable[..., Any]
    summary: str = ""


class CommandDispatcher:
    def __init__(self, commands: Mapping[str, Command]) -> None:
        self._commands = dict(commands)

    def names(self) -> list[str]:
        return sorted(self._commands)

    def resolve(self, name: str) -> Command:
        command = self._commands.get(name)
        if command is None:
            raise UnknownCommand(name)
        return command

    def invoke(self, command: Command, args: Sequence[str]) -> Any:
        if command.arity is not None and len(args) != command.arity:
            raise ArgumentError(command.name, expected=command.arity, actual=len(args))
        logger.debug("invoking %s with %d argument(s)", command.name, len(args))
        return command.handler(*args)

    def dispatch(self, name: str, args: Sequence[str]) -> Any:
        return self.invoke(self.resolve(name), args)
