import pytest

from palette_events import EventBus, PALETTE_GENERATED, PALETTE_SAVED, PALETTE_UPDATED


def test_handlers_run_in_subscription_order(bus):
    calls = []
    bus.subscribe(PALETTE_SAVED, lambda payload: calls.append(('first', payload)))
    bus.subscribe(PALETTE_SAVED, lambda payload: calls.append(('second', payload)))

    bus.publish(PALETTE_SAVED, 3)

    assert calls == [('first', 3), ('second', 3)]


def test_signals_are_independent(bus):
    calls = []
    bus.subscribe(PALETTE_UPDATED, calls.append)

    bus.publish(PALETTE_GENERATED, 'ignored')

    assert calls == []


def test_unsubscribe_stops_delivery(bus):
    calls = []
    unsubscribe = bus.subscribe(PALETTE_UPDATED, calls.append)
    unsubscribe()
    unsubscribe()

    bus.publish(PALETTE_UPDATED, 'x')

    assert calls == []


def test_unknown_signal_is_rejected():
    bus = EventBus()
    with pytest.raises(ValueError):
        bus.subscribe('paletteExploded', print)
    with pytest.raises(ValueError):
        bus.publish('paletteExploded')
