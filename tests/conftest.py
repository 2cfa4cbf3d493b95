import pytest

from palette_events import EventBus, PALETTE_UPDATED
from palette_model import Color, Group, Palette
from persistence import MemoryStore, PersistenceGateway
from workspace import Workspace


@pytest.fixture
def bus():
    return EventBus()


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def gateway(store):
    return PersistenceGateway(store)


@pytest.fixture
def ocean():
    """Palette 'Ocean' with a filled Main group and a one-color Accent group."""
    return Palette(
        name='Ocean',
        groups=[
            Group('Main', [Color('#112233'), Color('#445566'), Color('#778899')]),
            Group('Accent', [Color('#abcdef')]),
        ],
    )


@pytest.fixture
def workspace(bus, ocean):
    ws = Workspace(bus)
    ws.replace(ocean)
    return ws


@pytest.fixture
def updates(bus):
    """Records every PALETTE_UPDATED payload published on the bus."""
    seen = []
    bus.subscribe(PALETTE_UPDATED, seen.append)
    return seen
