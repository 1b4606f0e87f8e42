import logging

import pytest

from jsonstore import JsonStore, Response, errors

API_URL = 'https://www.jsonstore.io'


def test_sync_roundtrip(store):
    content = {'level': 4, 'items': ['a']}
    assert store.put('/save', content) == content
    assert store.get('/save') == content
    assert store.post('/save', {'level': 5}) == {'level': 5}
    assert store.get('/save') == {'level': 5}
    assert store.delete('/save') is True
    assert store.get('/save') == {}
    assert store.ping() is True


def test_sync_get_default(store, dict_transport):
    assert store.get_default('/profile', {'name': 'new'}) == {'name': 'new'}
    assert store.get_default('/profile', {'name': 'other'}) == {'name': 'new'}
    assert dict_transport.count('PUT') == 1


def test_sync_failure_returns_false(failing_store, caplog):
    caplog.set_level(logging.WARNING, logger='JsonStore')
    assert failing_store.get('/x') is False
    assert failing_store.put('/x', {'a': 1}) is False
    assert failing_store.post('/x', {'a': 1}) is False
    assert failing_store.delete('/x') is False
    assert failing_store.get_default('/x', {'a': 1}) is False
    assert failing_store.ping() is False
    assert 'Function JsonStore.get failed to execute, got error Couldn\'t reach JsonStore!' in caplog.text
    assert 'Function JsonStore.ping failed' in caplog.text


def test_sync_invalid_arguments(store, dict_transport, caplog):
    assert store.put('/x', 12) is False
    assert store.get(None) is False
    assert store.get_default('/x', 'nope') is False
    assert dict_transport.count() == 0
    assert 'invalidArguments' not in caplog.text
    assert 'table expected for content, got int' in caplog.text


def test_sync_constructor_provisions(dict_transport, caplog):
    store = JsonStore(transport=dict_transport)
    assert store.get_token() in dict_transport
    assert store.get_url() == f'{API_URL}/{store.get_token()}'
    assert "data will never be saved properly" in caplog.text


def test_sync_constructor_provision_failure(failing_transport):
    with pytest.raises(errors.tokenProvisionFailed):
        JsonStore(transport=failing_transport)


def test_sync_after_destroy_raises(store, dict_transport):
    store.destroy()
    with pytest.raises(errors.storeDestroyed):
        store.get('/x')
    with pytest.raises(errors.storeDestroyed):
        store.ping()
    assert dict_transport.count() == 0


def test_sync_undecodable_body_returns_false(token, make_transport, caplog):
    transport = make_transport(Response(True, 200, 'OK', b'\xff\xfe{"ok": true}'))
    store = JsonStore(token, transport=transport)
    assert store.get('/x') is False
    assert store.put('/x', {'a': 1}) is False
    assert 'Function JsonStore.get failed to execute, got error Cannot decode JSON' in caplog.text
