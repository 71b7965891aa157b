"""Tests for settings persistence and provider profile updates."""

import json

import pytest
from pydantic import ValidationError

from synonym_bar.core.config import DEFAULT_SETTINGS_FILE
from synonym_bar.services.settings_manager import SettingsManager


@pytest.fixture
def user_path(tmp_path):
    return tmp_path / 'settings.json'


@pytest.fixture
def manager(user_path):
    return SettingsManager(default_path=DEFAULT_SETTINGS_FILE, user_path=user_path, force_override=False)


def _write_user(path, **changes):
    data = json.loads(DEFAULT_SETTINGS_FILE.read_text(encoding='utf-8'))
    data.update(changes)
    path.write_text(json.dumps(data), encoding='utf-8')


class TestLoading:
    def test_defaults_written_on_first_run(self, manager, user_path):
        settings = manager.get_settings()
        assert settings.provider == 'openai'
        assert settings.wordCount == 6
        assert user_path.exists()

    def test_existing_user_file_is_used(self, user_path):
        _write_user(user_path, provider='gemini', temperature=0.8)
        manager = SettingsManager(default_path=DEFAULT_SETTINGS_FILE, user_path=user_path, force_override=False)
        settings = manager.get_settings()
        assert settings.provider == 'gemini'
        assert settings.temperature == 0.8

    def test_invalid_user_file_falls_back(self, user_path):
        _write_user(user_path, temperature=7)
        manager = SettingsManager(default_path=DEFAULT_SETTINGS_FILE, user_path=user_path, force_override=False)
        assert manager.get_settings().temperature == 0.35

    def test_old_version_is_migrated(self, user_path):
        _write_user(user_path, settingsVersion='0.9.0', provider='anthropic')
        manager = SettingsManager(
            default_path=DEFAULT_SETTINGS_FILE,
            user_path=user_path,
            force_override=False,
            migrate_if_old=True,
        )
        assert manager.get_settings().provider == 'openai'

    def test_old_version_kept_without_migration(self, user_path):
        _write_user(user_path, settingsVersion='0.9.0', provider='anthropic')
        manager = SettingsManager(
            default_path=DEFAULT_SETTINGS_FILE,
            user_path=user_path,
            force_override=False,
            migrate_if_old=False,
        )
        assert manager.get_settings().provider == 'anthropic'

    def test_force_override(self, user_path):
        _write_user(user_path, provider='gemini')
        manager = SettingsManager(default_path=DEFAULT_SETTINGS_FILE, user_path=user_path, force_override=True)
        assert manager.get_settings().provider == 'openai'


class TestUpdates:
    def test_get_settings_returns_copy(self, manager):
        snapshot = manager.get_settings()
        snapshot.providers.openai.apiKey = 'mutated'
        assert manager.get_settings().providers.openai.apiKey == ''

    def test_save_partial_settings(self, manager, user_path):
        updated = manager.save_settings({'temperature': 0.6, 'wordCount': 8})
        assert updated.temperature == 0.6
        assert updated.wordCount == 8
        assert updated.sentenceCount == 3
        stored = json.loads(user_path.read_text(encoding='utf-8'))
        assert stored['wordCount'] == 8

    def test_out_of_range_rejected(self, manager):
        with pytest.raises(ValidationError):
            manager.save_settings({'temperature': 1.5})
        assert manager.get_settings().temperature == 0.35

    def test_update_provider_profile_merges(self, manager, user_path):
        profile = manager.update_provider_profile('anthropic', {'apiKey': 'sk-ant'})
        assert profile.apiKey == 'sk-ant'
        assert profile.baseUrl == 'https://api.anthropic.com/v1/messages'
        settings = manager.get_settings()
        assert settings.providers.openai.apiKey == ''
        reloaded = SettingsManager(default_path=DEFAULT_SETTINGS_FILE, user_path=user_path, force_override=False)
        assert reloaded.get_settings().providers.anthropic.apiKey == 'sk-ant'

    def test_request_style_update(self, manager):
        profile = manager.update_provider_profile('openai_compatible', {'requestStyle': 'completion'})
        assert profile.requestStyle == 'completion'

    def test_request_style_rejected_for_other_providers(self, manager):
        with pytest.raises(ValueError, match='requestStyle'):
            manager.update_provider_profile('openai', {'requestStyle': 'completion'})
        with pytest.raises(ValueError):
            manager.save_settings({'providers': {'gemini': {'requestStyle': 'chat'}}})
        assert manager.get_settings().providers.openai.model == 'gpt-4o-mini'

    def test_unknown_provider(self, manager):
        with pytest.raises(KeyError):
            manager.update_provider_profile('mistral', {'apiKey': 'x'})
        with pytest.raises(KeyError):
            manager.set_active_provider('mistral')

    def test_set_active_provider(self, manager):
        assert manager.set_active_provider('gemini').provider == 'gemini'
        assert manager.get_settings().provider == 'gemini'

    def test_reset_to_default(self, manager):
        manager.update_provider_profile('openai', {'apiKey': 'sk-test'})
        settings = manager.reset_to_default()
        assert settings.providers.openai.apiKey == ''
