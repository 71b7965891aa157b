# File: python/synonym_bar/services/llm.py
# Project: SynonymBar Desktop Assistant
# Description: RewriteService wiring prompt building, provider encode/decode, the single httpx call,
# candidate extraction and truncation; also the connection self-test.

# Copyright (C) 2025 Tencent. All rights reserved.
# License: Licensed under the License Terms of Youtu-Tip (see license at repository root).
# Warranty: Provided on an "AS IS" basis, without warranties or conditions of any kind.
# Modifications must retain this notice.

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

import httpx
import structlog

from ..core.settings import Settings, provider_label
from ..schemas.rewrite import Candidate, Mode, Tone
from .candidates import extract_candidates
from .errors import EmptyResultError, InvalidInputError, ProviderError, RewriteError
from .prompts import build_request_spec
from .providers import ProviderRequest, get_adapter

logger = structlog.get_logger(__name__)

SELF_TEST_PROBE = '测试'
SELF_TEST_SUCCESS_MESSAGE = '连接成功，可以开始使用。'
EMPTY_RESULT_MESSAGE = '模型未返回结果，请调整提示或灵活程度。'
EMPTY_INPUT_MESSAGES = {
    'word': '请输入一个中文词语',
    'sentence': '请输入一个中文句子',
}


@dataclass
# 一次查询的结果，候选按模型返回顺序排列且已截断。
class ResultSet:
    mode: Mode
    candidates: List[Candidate]
    provider: str
    raw_response: str


@dataclass
# 自测只关心成功与否和一行提示，不向调用方暴露候选。
class SelfTestResult:
    ok: bool
    message: str
    provider: str


class RewriteService:
    # 查询流水线：prompt -> encoder -> HTTP -> decoder -> extractor -> 截断。
    # 除网络调用外的每一步都是同步的。
    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None) -> None:
        # transport 可注入，测试时替换为 MockTransport。
        self._transport = transport

    def _resolve_count(self, settings: Settings, mode: Mode, count: Optional[int]) -> int:
        if count is not None:
            return count
        return settings.wordCount if mode == 'word' else settings.sentenceCount

    async def _send(self, request: ProviderRequest, label: str) -> httpx.Response:
        # 整条流水线唯一的挂起点。
        try:
            async with httpx.AsyncClient(timeout=request.timeout, transport=self._transport) as client:
                return await client.request(
                    request.method,
                    request.url,
                    headers=request.headers,
                    json=request.json,
                )
        except httpx.TimeoutException as exc:
            raise ProviderError(f'{label} 请求超时') from exc
        except httpx.HTTPError as exc:
            raise ProviderError(f'{label} 网络请求失败：{exc}') from exc

    async def run_query(
        self,
        settings: Settings,
        text: str,
        mode: Mode,
        tone: Tone = 'casual',
        count: Optional[int] = None,
    ) -> ResultSet:
        trimmed = (text or '').strip()
        if not trimmed:
            raise InvalidInputError(EMPTY_INPUT_MESSAGES[mode])
        limit = self._resolve_count(settings, mode, count)
        spec = build_request_spec(trimmed, mode, tone, limit, settings.temperature)
        adapter = get_adapter(settings.provider)
        # encode 在配置不完整时直接抛错，不会发出任何请求。
        request = adapter.encode(spec, settings.get_active_profile())
        logger.info(
            'rewrite.request',
            provider=settings.provider,
            url=request.log_url,
            mode=mode,
            count=limit,
            max_output_tokens=spec.max_output_tokens,
        )
        response = await self._send(request, adapter.label)
        raw_body = response.content
        try:
            answer = adapter.decode(raw_body, response.status_code)
        except RewriteError as exc:
            logger.warning(
                'rewrite.provider_error',
                provider=settings.provider,
                status_code=response.status_code,
                error=str(exc)[:200],
            )
            raise
        candidates = extract_candidates(answer)
        limited = candidates[:limit]
        if not limited:
            raise EmptyResultError(EMPTY_RESULT_MESSAGE)
        logger.info('rewrite.completed', provider=settings.provider, extracted=len(candidates), returned=len(limited))
        return ResultSet(mode=mode, candidates=limited, provider=settings.provider, raw_response=answer)

    async def self_test(self, settings: Settings) -> SelfTestResult:
        # 用固定探测词走完整流水线，只回报成功或失败。
        label = provider_label(settings.provider)
        try:
            await self.run_query(settings, SELF_TEST_PROBE, 'word')
        except RewriteError as exc:
            logger.warning('rewrite.self_test_failed', provider=settings.provider, error=str(exc)[:200])
            return SelfTestResult(ok=False, message=str(exc), provider=label)
        return SelfTestResult(ok=True, message=SELF_TEST_SUCCESS_MESSAGE, provider=label)
