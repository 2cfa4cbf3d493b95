import json

import pytest

from palette_model import Palette
from persistence import STORAGE_KEY, JsonFileStore, MemoryStore, PersistenceGateway


def test_empty_store_lists_nothing(gateway):
    assert gateway.list() == []
    assert len(gateway) == 0


def test_append_keeps_insertion_order(gateway, ocean):
    forest = Palette.from_colors('Forest', ['#224422'])

    assert gateway.append(ocean) == 0
    assert gateway.append(forest) == 1

    assert [p['name'] for p in gateway.list()] == ['Ocean', 'Forest']


def test_append_never_deduplicates(gateway, ocean):
    gateway.append(ocean)
    gateway.append(ocean)
    assert len(gateway) == 2


def test_entries_use_the_serialized_form_under_fixed_key(store, gateway, ocean):
    gateway.append(ocean)
    stored = json.loads(store.get(STORAGE_KEY))
    assert stored == [{
        'name': 'Ocean',
        'groups': [
            {'name': 'Main', 'colors': [{'hex': '#112233'}, {'hex': '#445566'}, {'hex': '#778899'}]},
            {'name': 'Accent', 'colors': [{'hex': '#abcdef'}]},
        ],
    }]


def test_delete_at_removes_one_entry(gateway, ocean):
    gateway.append(ocean)
    gateway.append(Palette.from_colors('Forest', ['#224422']))

    removed = gateway.delete_at(0)

    assert removed['name'] == 'Ocean'
    assert [p['name'] for p in gateway.list()] == ['Forest']


@pytest.mark.parametrize('index', [-1, 1, 5])
def test_delete_at_out_of_range(gateway, ocean, index):
    gateway.append(ocean)
    with pytest.raises(IndexError):
        gateway.delete_at(index)
    assert len(gateway) == 1


def test_load_rebuilds_palette_with_fresh_ids(gateway, ocean):
    gateway.append(ocean)
    loaded = gateway.load(0)
    assert loaded.to_dict() == ocean.to_dict()
    assert loaded.groups[0].id != ocean.groups[0].id


def test_load_out_of_range(gateway):
    with pytest.raises(IndexError):
        gateway.load(0)


@pytest.mark.parametrize('raw', ['{broken', '{"name": "x"}'])
def test_corrupt_storage_reads_as_empty(raw):
    gateway = PersistenceGateway(MemoryStore({STORAGE_KEY: raw}))
    assert gateway.list() == []


def test_legacy_entries_with_ids_load():
    legacy = [{'name': 'Old', 'groups': [{'id': 1.5, 'name': 'Main', 'colors': [{'id': 2.5, 'hex': '#abcdef'}]}]}]
    gateway = PersistenceGateway(MemoryStore({STORAGE_KEY: json.dumps(legacy)}))
    assert gateway.load(0).groups[0].colors[0].hex == '#abcdef'


def test_json_file_store_persists_across_instances(tmp_path, ocean):
    path = tmp_path / 'nested' / 'palettes.json'
    PersistenceGateway(JsonFileStore(path)).append(ocean)

    reopened = PersistenceGateway(JsonFileStore(path))

    assert [p['name'] for p in reopened.list()] == ['Ocean']


def test_json_file_store_keeps_other_keys(tmp_path):
    store = JsonFileStore(tmp_path / 'store.json')
    store.set('theme', 'dark')
    store.set(STORAGE_KEY, '[]')
    assert store.get('theme') == 'dark'
    assert store.get('missing') is None


def test_unreadable_json_file_store_reads_as_empty(tmp_path):
    path = tmp_path / 'store.json'
    path.write_text('not json')
    assert JsonFileStore(path).get(STORAGE_KEY) is None


def test_non_object_entries_are_skipped(ocean):
    stored = json.dumps(['junk', ocean.to_dict(), 7])
    gateway = PersistenceGateway(MemoryStore({STORAGE_KEY: stored}))

    assert [p['name'] for p in gateway.list()] == ['Ocean']
    assert gateway.load(0).to_dict() == ocean.to_dict()


def test_non_utf8_json_file_store_reads_as_empty(tmp_path):
    path = tmp_path / 'store.json'
    path.write_bytes(b'\xff\xfe\x00garbage')
    assert PersistenceGateway(JsonFileStore(path)).list() == []
