# File: python/synonym_bar/services/providers.py
# Project: SynonymBar Desktop Assistant
# Description: Per-provider request encoders and response decoders for OpenAI Responses,
# OpenAI-compatible chat/completion, Anthropic Messages and Gemini generateContent.

# Copyright (C) 2025 Tencent. All rights reserved.
# License: Licensed under the License Terms of Youtu-Tip (see license at repository root).
# Warranty: Provided on an "AS IS" basis, without warranties or conditions of any kind.
# Modifications must retain this notice.

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol, Union

import httpx
import structlog

from ..core.config import REQUEST_TIMEOUT_SECONDS
from ..core.settings import ProviderProfile, provider_label
from .errors import ConfigurationError, EmptyContentError, ProviderError
from .prompts import RequestSpec

logger = structlog.get_logger(__name__)

ANTHROPIC_API_VERSION = '2023-06-01'
RAW_PREVIEW_LIMIT = 600

# Responses API 的结构化输出约束，数量上限与设置中的最大候选数一致。
CANDIDATES_JSON_SCHEMA: Dict[str, Any] = {
    'type': 'object',
    'properties': {
        'candidates': {
            'type': 'array',
            'minItems': 1,
            'maxItems': 12,
            'items': {
                'type': 'object',
                'properties': {
                    'word': {'type': 'string'},
                    'note': {'type': 'string'},
                },
                'required': ['word', 'note'],
                'additionalProperties': False,
            },
        },
    },
    'required': ['candidates'],
    'additionalProperties': False,
}

RawBody = Union[bytes, str]


@dataclass(frozen=True)
class ProviderRequest:
    """Fully formed HTTP request produced by an encoder; nothing is sent yet."""
    method: str
    url: str
    headers: Dict[str, str]
    json: Dict[str, Any]
    timeout: float = REQUEST_TIMEOUT_SECONDS
    # 日志里展示的地址，Gemini 需去掉带 key 的 query。
    log_url: str = field(default='', compare=False)


class ProviderAdapter(Protocol):
    provider_id: str
    label: str

    def encode(self, spec: RequestSpec, profile: ProviderProfile) -> ProviderRequest:
        ...

    def decode(self, body: RawBody, status: int) -> str:
        ...


def _body_text(body: RawBody) -> str:
    if isinstance(body, bytes):
        return body.decode('utf-8', errors='replace')
    return body or ''


def _require_api_key(profile: ProviderProfile, label: str) -> str:
    api_key = (profile.apiKey or '').strip()
    if not api_key:
        raise ConfigurationError(f'请在设置中填写 {label} API Key')
    # 请求头只能携带可打印 ASCII。
    if not (api_key.isascii() and api_key.isprintable()):
        raise ConfigurationError(f'{label} API Key 无效')
    return api_key


def _require_url(raw: str, label: str) -> str:
    # 只接受带 host 的 http(s) 绝对地址，其余一律视为配置错误。
    candidate = (raw or '').strip()
    if candidate:
        try:
            url: Optional[httpx.URL] = httpx.URL(candidate)
        except httpx.InvalidURL:
            url = None
        if url is not None and url.scheme in ('http', 'https') and url.host:
            return candidate
    raise ConfigurationError(f'{label} 接口地址无效')


def _json_headers(extra: Dict[str, str]) -> Dict[str, str]:
    headers = {'Content-Type': 'application/json'}
    headers.update(extra)
    return headers


def _load_envelope(body: RawBody, status: int, label: str, *, top_level_message: bool = False) -> Dict[str, Any]:
    # 先透传服务端的 error.message，再按状态码兜底，最后才解析正文。
    text = _body_text(body)
    try:
        payload = json.loads(text)
    except ValueError:
        payload = None
    if not isinstance(payload, dict):
        logger.debug('provider.body_not_object', provider=label, status=status, preview=text[:120])
        if status >= 400:
            raise ProviderError(f'{label} 请求失败：HTTP {status}')
        raise ProviderError(f'{label} 返回格式不正确')
    error = payload.get('error')
    if isinstance(error, dict):
        message = error.get('message')
        if isinstance(message, str) and message:
            raise ProviderError(message)
    if top_level_message and status >= 400:
        message = payload.get('message')
        if isinstance(message, str) and message:
            raise ProviderError(message)
    if status >= 400:
        raise ProviderError(f'{label} 请求失败：HTTP {status}')
    return payload


def _first_dict(value: Any) -> Dict[str, Any]:
    if isinstance(value, list) and value and isinstance(value[0], dict):
        return value[0]
    return {}


def _container_text(container: Any) -> str:
    # content 可能是字符串，也可能是带 text 的分段列表。
    if not isinstance(container, dict):
        return ''
    content = container.get('content')
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = [part.get('text') for part in content if isinstance(part, dict)]
        return ''.join(part for part in parts if isinstance(part, str))
    text = container.get('text')
    if isinstance(text, str):
        return text
    return ''


class OpenAIResponsesAdapter:
    """Responses API with a strict JSON schema for the candidate list."""

    provider_id = 'openai'

    def __init__(self) -> None:
        self.label = provider_label(self.provider_id)

    def encode(self, spec: RequestSpec, profile: ProviderProfile) -> ProviderRequest:
        api_key = _require_api_key(profile, self.label)
        url = _require_url(profile.baseUrl, self.label)
        body = {
            'model': profile.model,
            'instructions': spec.system_prompt,
            'input': spec.user_prompt,
            'text': {
                'format': {
                    'type': 'json_schema',
                    'name': 'synonyms',
                    'schema': CANDIDATES_JSON_SCHEMA,
                    'strict': True,
                },
            },
            'temperature': spec.temperature,
            'max_output_tokens': spec.max_output_tokens,
        }
        headers = _json_headers({'Authorization': f'Bearer {api_key}'})
        return ProviderRequest(method='POST', url=url, headers=headers, json=body, log_url=url)

    def decode(self, body: RawBody, status: int) -> str:
        payload = _load_envelope(body, status, self.label)
        output = payload.get('output')
        buffer: List[str] = []
        for item in output if isinstance(output, list) else []:
            if not isinstance(item, dict) or item.get('type') != 'message':
                continue
            contents = item.get('content')
            for content in contents if isinstance(contents, list) else []:
                if not isinstance(content, dict) or content.get('type') != 'output_text':
                    continue
                snippet = content.get('text')
                if isinstance(snippet, str):
                    buffer.append(snippet)
        text = ''.join(buffer)
        if not text.strip():
            raise EmptyContentError(f'{self.label} 返回内容为空')
        return text


class OpenAICompatibleAdapter:
    """Third-party endpoints that speak either chat-completions or legacy completions."""

    provider_id = 'openai_compatible'

    def __init__(self) -> None:
        self.label = provider_label(self.provider_id)

    def encode(self, spec: RequestSpec, profile: ProviderProfile) -> ProviderRequest:
        api_key = _require_api_key(profile, self.label)
        url = _require_url(profile.baseUrl, self.label)
        request_style = getattr(profile, 'requestStyle', 'chat')
        body: Dict[str, Any] = {'model': profile.model}
        if request_style == 'completion':
            # 旧式 /v1/completions 只认 prompt 字段。
            body['prompt'] = f'{spec.system_prompt}\n\n{spec.user_prompt}'
        else:
            body['messages'] = [
                {'role': 'system', 'content': spec.system_prompt},
                {'role': 'user', 'content': spec.user_prompt},
            ]
        body.update(
            {
                'temperature': spec.temperature,
                'max_tokens': spec.max_output_tokens,
                'stream': False,
            }
        )
        headers = _json_headers({'Authorization': f'Bearer {api_key}'})
        return ProviderRequest(method='POST', url=url, headers=headers, json=body, log_url=url)

    def decode(self, body: RawBody, status: int) -> str:
        payload = _load_envelope(body, status, self.label, top_level_message=True)
        # 部分网关把真正的响应包在 data 字段里。
        data = payload.get('data')
        root = data if isinstance(data, dict) else payload
        first_choice = _first_dict(root.get('choices'))
        text = _container_text(first_choice.get('message'))
        if not text:
            text = _container_text(first_choice.get('delta'))
        if not text:
            completion_text = first_choice.get('text')
            text = completion_text if isinstance(completion_text, str) else ''
        if not text.strip():
            preview = _body_text(body)[:RAW_PREVIEW_LIMIT]
            raise EmptyContentError(f'{self.label} 返回内容为空。原始响应: {preview}')
        return text


class AnthropicMessagesAdapter:
    """Messages API: system prompt is a top-level field, auth via x-api-key."""

    provider_id = 'anthropic'

    def __init__(self) -> None:
        self.label = provider_label(self.provider_id)

    def encode(self, spec: RequestSpec, profile: ProviderProfile) -> ProviderRequest:
        api_key = _require_api_key(profile, self.label)
        url = _require_url(profile.baseUrl, self.label)
        body = {
            'model': profile.model,
            'max_tokens': spec.max_output_tokens,
            'system': spec.system_prompt,
            'messages': [{'role': 'user', 'content': spec.user_prompt}],
            'temperature': spec.temperature,
        }
        headers = _json_headers({'x-api-key': api_key, 'anthropic-version': ANTHROPIC_API_VERSION})
        return ProviderRequest(method='POST', url=url, headers=headers, json=body, log_url=url)

    def decode(self, body: RawBody, status: int) -> str:
        payload = _load_envelope(body, status, self.label)
        content = payload.get('content')
        text = ''
        for item in content if isinstance(content, list) else []:
            if isinstance(item, dict) and item.get('type') == 'text':
                value = item.get('text')
                text = value if isinstance(value, str) else ''
                break
        if not text.strip():
            raise EmptyContentError(f'{self.label} 返回内容为空')
        return text


class GeminiGenerateContentAdapter:
    """generateContent: model and key live in the URL, no auth header."""

    provider_id = 'gemini'

    def __init__(self) -> None:
        self.label = provider_label(self.provider_id)

    def encode(self, spec: RequestSpec, profile: ProviderProfile) -> ProviderRequest:
        api_key = _require_api_key(profile, self.label)
        base = (profile.baseUrl or '').strip().rstrip('/')
        if not base:
            raise ConfigurationError(f'{self.label} 接口地址无效')
        endpoint = _require_url(f'{base}/{profile.model}:generateContent', self.label)
        url = str(httpx.URL(endpoint, params={'key': api_key}))
        body = {
            'systemInstruction': {'parts': [{'text': spec.system_prompt}]},
            'contents': [
                {'role': 'user', 'parts': [{'text': spec.user_prompt}]},
            ],
            'generationConfig': {
                'maxOutputTokens': spec.max_output_tokens,
                'temperature': spec.temperature,
            },
        }
        return ProviderRequest(method='POST', url=url, headers=_json_headers({}), json=body, log_url=endpoint)

    def decode(self, body: RawBody, status: int) -> str:
        payload = _load_envelope(body, status, self.label)
        content = _first_dict(payload.get('candidates')).get('content')
        parts = content.get('parts') if isinstance(content, dict) else None
        value = _first_dict(parts).get('text')
        text = value if isinstance(value, str) else ''
        if not text.strip():
            raise EmptyContentError(f'{self.label} 返回内容为空')
        return text


PROVIDER_ADAPTERS: Dict[str, ProviderAdapter] = {
    adapter.provider_id: adapter
    for adapter in (
        OpenAIResponsesAdapter(),
        OpenAICompatibleAdapter(),
        AnthropicMessagesAdapter(),
        GeminiGenerateContentAdapter(),
    )
}


def get_adapter(provider_id: str) -> ProviderAdapter:
    try:
        return PROVIDER_ADAPTERS[provider_id]
    except KeyError:
        raise ConfigurationError(f'不支持的接口：{provider_id}') from None
