"""Tests for the sidecar HTTP routes."""

import httpx
import pytest
from fastapi.testclient import TestClient

from conftest import candidates_json, openai_body
from synonym_bar.core.config import DEFAULT_SETTINGS_FILE
from synonym_bar.main import create_app
from synonym_bar.services.settings_manager import SettingsManager


@pytest.fixture
def upstream(recorder_factory, respond_json):
    return recorder_factory(respond_json(openai_body(candidates_json(('宏大', '规模大'), ('壮观', '景象'), ('雄伟', '气势')))))


@pytest.fixture
def manager(tmp_path):
    return SettingsManager(
        default_path=DEFAULT_SETTINGS_FILE,
        user_path=tmp_path / 'settings.json',
        force_override=False,
    )


@pytest.fixture
def client(manager, upstream):
    app = create_app(settings_manager=manager, transport=upstream.transport, configure_logging=False)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def configured(client):
    resp = client.put('/settings/providers/openai', json={'apiKey': 'sk-test'})
    assert resp.status_code == 200
    return client


class TestHealth:
    def test_health(self, client):
        data = client.get('/health').json()
        assert data['status'] == 'ok'
        assert 'rewrite:word' in data['capabilities']
        assert data['providers'] == ['openai', 'openai_compatible', 'anthropic', 'gemini']


class TestSettingsRoutes:
    def test_read_defaults(self, client):
        data = client.get('/settings').json()
        assert data['provider'] == 'openai'
        assert data['providers']['gemini']['model'] == 'gemini-1.5-flash'

    def test_partial_update(self, client):
        resp = client.put('/settings', json={'temperature': 0.5, 'providers': {'gemini': {'model': 'gemini-2.0-flash'}}})
        assert resp.status_code == 200
        data = resp.json()
        assert data['temperature'] == 0.5
        assert data['providers']['gemini']['model'] == 'gemini-2.0-flash'
        assert data['providers']['gemini']['baseUrl'].startswith('https://generativelanguage')

    def test_out_of_range_rejected(self, client):
        assert client.put('/settings', json={'temperature': 3}).status_code == 422
        assert client.get('/settings').json()['temperature'] == 0.35

    def test_provider_profile_update(self, client):
        resp = client.put('/settings/providers/openai_compatible', json={'requestStyle': 'completion'})
        assert resp.status_code == 200
        assert resp.json()['requestStyle'] == 'completion'

    def test_request_style_rejected_for_openai(self, client):
        resp = client.put('/settings/providers/openai', json={'requestStyle': 'completion', 'model': 'gpt-4o'})
        assert resp.status_code == 400
        assert client.get('/settings').json()['providers']['openai']['model'] == 'gpt-4o-mini'
        resp = client.put('/settings', json={'providers': {'anthropic': {'requestStyle': 'chat'}}})
        assert resp.status_code == 400

    def test_unknown_provider(self, client):
        assert client.put('/settings/providers/mistral', json={'apiKey': 'x'}).status_code == 404
        assert client.put('/settings/active/mistral').status_code == 404

    def test_switch_active_provider(self, client):
        assert client.put('/settings/active/anthropic').json()['provider'] == 'anthropic'

    def test_reset(self, configured):
        data = configured.post('/settings/reset').json()
        assert data['providers']['openai']['apiKey'] == ''


class TestRewriteRoutes:
    def test_word_query(self, configured, upstream):
        resp = configured.post('/rewrite', json={'text': '宏伟', 'mode': 'word', 'count': 2})
        assert resp.status_code == 200
        assert resp.json() == {
            'mode': 'word',
            'candidates': [{'word': '宏大', 'note': '规模大'}, {'word': '壮观', 'note': '景象'}],
        }
        assert upstream.requests[0].headers['Authorization'] == 'Bearer sk-test'

    def test_missing_key_is_bad_request(self, client, upstream):
        resp = client.post('/rewrite', json={'text': '宏伟'})
        assert resp.status_code == 400
        assert resp.json()['detail'] == {'kind': 'configuration', 'message': '请在设置中填写 OpenAI API Key'}
        assert upstream.calls == 0

    def test_blank_text_is_bad_request(self, configured):
        resp = configured.post('/rewrite', json={'text': '  ', 'mode': 'sentence'})
        assert resp.status_code == 400
        assert resp.json()['detail']['kind'] == 'invalid_input'

    def test_upstream_failure_is_bad_gateway(self, manager, recorder_factory):
        def handler(request):
            raise httpx.ConnectError('refused', request=request)

        manager.update_provider_profile('openai', {'apiKey': 'sk-test'})
        app = create_app(settings_manager=manager, transport=recorder_factory(handler).transport, configure_logging=False)
        with TestClient(app) as client:
            resp = client.post('/rewrite', json={'text': '宏伟'})
        assert resp.status_code == 502
        assert resp.json()['detail']['kind'] == 'provider'

    def test_count_out_of_range(self, configured):
        assert configured.post('/rewrite', json={'text': '宏伟', 'count': 20}).status_code == 422

    def test_self_test(self, configured):
        data = configured.post('/rewrite/self-test').json()
        assert data == {'ok': True, 'message': '连接成功，可以开始使用。', 'provider': 'OpenAI'}

    def test_self_test_failure_is_reported(self, client):
        data = client.post('/rewrite/self-test').json()
        assert data['ok'] is False
        assert data['message'] == '请在设置中填写 OpenAI API Key'

    def test_panel_self_test_with_non_ascii_key(self, client, upstream):
        assert client.put('/settings/providers/openai', json={'apiKey': 'sk-密钥'}).status_code == 200
        resp = client.post('/panel/self-test')
        assert resp.status_code == 200
        assert resp.json()['testMessage'] == 'OpenAI API Key 无效'
        assert upstream.calls == 0


class TestPanelRoutes:
    def test_initial_state(self, client):
        assert client.get('/panel').json() == {
            'candidates': [],
            'isLoading': False,
            'errorMessage': None,
            'isTesting': False,
            'testMessage': None,
        }

    def test_query_then_clear(self, configured):
        data = configured.post('/panel/query', json={'text': '宏伟', 'count': 3}).json()
        assert [c['word'] for c in data['candidates']] == ['宏大', '壮观', '雄伟']
        assert data['isLoading'] is False
        assert configured.get('/panel').json()['candidates'] == data['candidates']
        cleared = configured.delete('/panel').json()
        assert cleared['candidates'] == []

    def test_query_failure_lands_in_error_message(self, client):
        resp = client.post('/panel/query', json={'text': '宏伟'})
        assert resp.status_code == 200
        assert resp.json()['errorMessage'] == '请在设置中填写 OpenAI API Key'

    def test_panel_self_test(self, configured):
        data = configured.post('/panel/self-test').json()
        assert data['testMessage'] == '连接成功，可以开始使用。'
        assert data['isTesting'] is False
