from dataclasses import dataclass
from unittest.mock import Mock

import pytest

from futura.errors import ProgrammerError
from futura.event_bus import EventBus


@dataclass
class Event:
    name: str
    payload: int = 0


def test_emit():
    bus = EventBus()
    first, second, other = Mock(), Mock(), Mock()
    bus.on("saved", first).on("saved", second).on("deleted", other)

    event = Event("saved", 1)
    assert bus.emit(event) is True
    first.assert_called_once_with(event)
    second.assert_called_once_with(event)
    other.assert_not_called()

    assert bus.emit({"name": "deleted"}) is True
    other.assert_called_once_with({"name": "deleted"})

    assert bus.emit(Event("unheard")) is False


def test_off():
    bus = EventBus()
    listener = Mock()
    bus.on("saved", listener).off("saved", listener).off("never", listener)
    bus.emit(Event("saved"))
    listener.assert_not_called()


@pytest.mark.parametrize("event", [None, {}, {"name": ""}, Event(""), {"name": 3}, object()])
def test_emit_without_name(event):
    with pytest.raises(ProgrammerError) as info:
        EventBus().emit(event)
    assert "without a String `name` property" in str(info.value)
    assert info.value.info == {"event": event}
