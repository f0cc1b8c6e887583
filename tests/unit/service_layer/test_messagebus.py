"""Unit tests for the MessageBus."""

from dataclasses import dataclass
from functools import partial

import pytest

from periodica.service_layer.commands import Command
from periodica.service_layer.messagebus import MessageBus, NoHandlerForCommand

# pylint: disable=unused-argument, too-few-public-methods


@dataclass(frozen=True)
class CommandA(Command):
    """A simple fake command for testing purposes."""

    x: int = 0


@dataclass(frozen=True)
class CommandB(Command):
    """Another fake command."""

    msg: str = "hi"


def log_messages(records, level: str) -> list[str]:
    """Messages of the captured records at `level`."""
    return [rec.getMessage() for rec in records if rec.levelname == level]


def test_dispatches_to_handler_and_returns_its_result(repository, caplog):
    """The bus calls the matching handler once and hands back its return value."""
    calls: list[Command] = []

    def handle_a(cmd: CommandA) -> int:
        calls.append(cmd)
        return cmd.x * 2

    def handle_b(cmd: CommandB) -> None:
        calls.append(cmd)

    bus = MessageBus(repository, {CommandA: handle_a, CommandB: handle_b})
    with caplog.at_level("DEBUG"):
        result = bus.handle(CommandA(21))

    assert result == 42
    assert calls == [CommandA(21)]
    assert "Handling CommandA with handle_a" in log_messages(caplog.records, "DEBUG")


def test_no_handler_logs_error_and_raises(repository, caplog):
    """Unknown command types are an error."""
    bus = MessageBus(repository, {})
    with caplog.at_level("ERROR"):
        with pytest.raises(NoHandlerForCommand, match="No handler found for command CommandA"):
            bus.handle(CommandA())
    assert "No handler found for command CommandA" in log_messages(caplog.records, "ERROR")


def test_handler_exception_is_logged_and_reraised(repository, caplog):
    """Handler failures are logged with the traceback and propagate unchanged."""

    def faulty(cmd: CommandA) -> None:
        raise RuntimeError("boom")

    bus = MessageBus(repository, {CommandA: faulty})
    with caplog.at_level("ERROR"):
        with pytest.raises(RuntimeError, match="boom"):
            bus.handle(CommandA())

    (record,) = [r for r in caplog.records if r.levelname == "ERROR"]
    assert record.getMessage() == "Exception handling command CommandA with handler faulty"
    assert record.exc_info is not None


def test_handler_name_of_partial(repository, caplog):
    """Partially applied handlers are reported by their wrapped function's name."""

    def record_handler(cmd: CommandA, sink: list[CommandA]) -> None:
        sink.append(cmd)

    sink: list[CommandA] = []
    bus = MessageBus(repository, {CommandA: partial(record_handler, sink=sink)})
    with caplog.at_level("DEBUG"):
        bus.handle(CommandA(1))
    assert sink == [CommandA(1)]
    assert "Handling CommandA with record_handler" in log_messages(caplog.records, "DEBUG")


def test_handler_name_falls_back_to_repr(repository, caplog):
    """Callables without a name are reported by their repr."""

    class CallableObj:
        """A callable object without a __name__ attribute."""

        def __call__(self, cmd):
            return None

        def __repr__(self) -> str:
            return "<CallableObj>"

    bus = MessageBus(repository, {CommandA: CallableObj()})
    with caplog.at_level("DEBUG"):
        bus.handle(CommandA())
    assert "Handling CommandA with <CallableObj>" in log_messages(caplog.records, "DEBUG")


def test_exposes_repository(repository):
    """The bus keeps the repository its handlers were wired with."""
    assert MessageBus(repository, {}).repository is repository
