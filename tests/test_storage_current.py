import json
import pytest
from pathlib import Path
from secretvault.lib.crypto import VaultCrypto
from secretvault.lib.errors import StorageError
from secretvault.lib.store import VaultStore, VaultContainer

def make_store(tmp_path: Path):
    return VaultStore(tmp_path / 'secrets.encrypted.json')

def test_read_missing_returns_none(tmp_path: Path):
    assert make_store(tmp_path).read() is None

def test_init_if_missing_creates_empty_container(tmp_path: Path):
    store = make_store(tmp_path)
    c = store.init_if_missing()
    assert store.exists()
    assert c.version == 1 and c.secrets == {}
    raw = json.loads(store.path.read_text())
    assert set(raw) == {'version', 'createdAt', 'updatedAt', 'secrets'}
    assert raw['createdAt'].endswith('Z')

def test_init_if_missing_keeps_existing(tmp_path: Path):
    store = make_store(tmp_path)
    c = store.init_if_missing()
    c.secrets['A'] = VaultCrypto().encrypt('1', 'pw')
    store.write(c)
    assert list(store.init_if_missing().secrets) == ['A']

def test_write_and_read_preserves_order(tmp_path: Path):
    store = make_store(tmp_path); crypto = VaultCrypto()
    c = VaultContainer()
    for name in ['ZED', 'ALPHA', 'MID']:
        c.secrets[name] = crypto.encrypt(name.lower(), 'pw')
    store.write(c)
    again = store.read()
    assert list(again.secrets) == ['ZED', 'ALPHA', 'MID']
    assert crypto.decrypt(again.secrets['MID'], 'pw') == 'mid'

def test_write_updates_timestamp_and_leaves_no_temp(tmp_path: Path):
    store = make_store(tmp_path)
    c = VaultContainer(created_at='2020-01-01T00:00:00.000Z', updated_at='2020-01-01T00:00:00.000Z')
    store.write(c)
    again = store.read()
    assert again.created_at == '2020-01-01T00:00:00.000Z'
    assert again.updated_at != '2020-01-01T00:00:00.000Z'
    assert [p.name for p in tmp_path.iterdir()] == ['secrets.encrypted.json']

@pytest.mark.parametrize('content', ['{not json', '[]', '{"secrets": []}', '{"secrets": null}', '{"secrets": {"A": {"salt": "x"}}}'])
def test_unreadable_file_returns_none(tmp_path: Path, content):
    store = make_store(tmp_path)
    store.path.write_text(content)
    assert store.read() is None

def test_write_failure_raises_storage_error(tmp_path: Path):
    blocker = tmp_path / 'not-a-dir'
    blocker.write_text('')
    store = VaultStore(blocker / 'secrets.encrypted.json')
    with pytest.raises(StorageError):
        store.write(VaultContainer())

def test_backup_copies_file(tmp_path: Path):
    store = make_store(tmp_path)
    store.init_if_missing()
    dest = store.backup()
    assert dest.name == 'secrets.encrypted.json.backup'
    assert dest.read_bytes() == store.path.read_bytes()
