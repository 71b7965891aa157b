"""Shared test fixtures."""

from __future__ import annotations

import json
import os
import tempfile

# Redirect settings and logs before any synonym_bar module resolves its paths.
os.environ['SYNONYM_BAR_HOME'] = tempfile.mkdtemp(prefix='synonym-bar-tests-')

from typing import Any, Callable, Dict, List  # noqa: E402

import httpx  # noqa: E402
import pytest  # noqa: E402

from synonym_bar.core.config import DEFAULT_SETTINGS_FILE  # noqa: E402
from synonym_bar.core.settings import Settings  # noqa: E402

Handler = Callable[[httpx.Request], Any]


class RecordingTransport:
    """MockTransport wrapper that remembers every request it served."""

    def __init__(self, handler: Handler) -> None:
        self.requests: List[httpx.Request] = []
        self._handler = handler
        self.transport = httpx.MockTransport(self._dispatch)

    def _dispatch(self, request: httpx.Request):
        self.requests.append(request)
        return self._handler(request)

    @property
    def calls(self) -> int:
        return len(self.requests)

    def last_json(self) -> Dict[str, Any]:
        return json.loads(self.requests[-1].content)


def candidates_json(*pairs: tuple[str, str]) -> str:
    return json.dumps(
        {'candidates': [{'word': word, 'note': note} for word, note in pairs]},
        ensure_ascii=False,
    )


def openai_body(text: str) -> Dict[str, Any]:
    return {
        'id': 'resp_1',
        'output': [
            {
                'type': 'message',
                'content': [{'type': 'output_text', 'text': text}],
            }
        ],
    }


def compatible_body(text: str) -> Dict[str, Any]:
    return {'choices': [{'index': 0, 'message': {'role': 'assistant', 'content': text}}]}


def anthropic_body(text: str) -> Dict[str, Any]:
    return {'content': [{'type': 'text', 'text': text}], 'stop_reason': 'end_turn'}


def gemini_body(text: str) -> Dict[str, Any]:
    return {'candidates': [{'content': {'parts': [{'text': text}], 'role': 'model'}}]}


@pytest.fixture
def default_settings() -> Settings:
    return Settings.from_file(DEFAULT_SETTINGS_FILE)


@pytest.fixture
def make_settings(default_settings):
    """Build settings for one provider with usable key and URL."""

    def _make(provider: str = 'openai', **overrides: Any) -> Settings:
        data = default_settings.model_dump()
        data['provider'] = provider
        for provider_id, profile in data['providers'].items():
            profile['apiKey'] = f'test-key-{provider_id}'
        data['providers']['openai_compatible']['baseUrl'] = 'https://llm.example.com/v1/chat/completions'
        profile_patch = overrides.pop('profile', None)
        if profile_patch:
            data['providers'][provider].update(profile_patch)
        data.update(overrides)
        return Settings.model_validate(data)

    return _make


@pytest.fixture
def recorder_factory():
    def _factory(handler: Handler) -> RecordingTransport:
        return RecordingTransport(handler)

    return _factory


@pytest.fixture
def respond_json():
    """Handler factory returning a fixed JSON body and status."""

    def _respond(body: Any, status_code: int = 200) -> Handler:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(status_code, json=body)

        return handler

    return _respond
