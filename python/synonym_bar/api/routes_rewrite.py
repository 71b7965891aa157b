# File: python/synonym_bar/api/routes_rewrite.py
# Project: SynonymBar Desktop Assistant
# Description: Stateless query and self-test endpoints over RewriteService.

# Copyright (C) 2025 Tencent. All rights reserved.
# License: Licensed under the License Terms of Youtu-Tip (see license at repository root).
# Warranty: Provided on an "AS IS" basis, without warranties or conditions of any kind.
# Modifications must retain this notice.

from fastapi import APIRouter, Depends, HTTPException

from ..core.deps import get_rewrite_service, get_settings_manager
from ..schemas.rewrite import RewriteRequest, RewriteResponse, SelfTestResponse
from ..services.errors import ConfigurationError, InvalidInputError, RewriteError
from ..services.llm import RewriteService
from ..services.settings_manager import SettingsManager

router = APIRouter(prefix='/rewrite', tags=['rewrite'])


def _error_status(exc: RewriteError) -> int:
    # 本地可修正的问题返回 400，上游模型/网关的问题返回 502。
    if isinstance(exc, (InvalidInputError, ConfigurationError)):
        return 400
    return 502


@router.post('', response_model=RewriteResponse)
async def rewrite(
    payload: RewriteRequest,
    service: RewriteService = Depends(get_rewrite_service),
    manager: SettingsManager = Depends(get_settings_manager),
) -> RewriteResponse:
    settings = manager.get_settings()
    try:
        result = await service.run_query(settings, payload.text, payload.mode, payload.tone, payload.count)
    except RewriteError as exc:
        raise HTTPException(
            status_code=_error_status(exc),
            detail={'kind': exc.kind, 'message': str(exc)},
        ) from exc
    return RewriteResponse(mode=result.mode, candidates=result.candidates)


@router.post('/self-test', response_model=SelfTestResponse)
async def self_test(
    service: RewriteService = Depends(get_rewrite_service),
    manager: SettingsManager = Depends(get_settings_manager),
) -> SelfTestResponse:
    result = await service.self_test(manager.get_settings())
    return SelfTestResponse(ok=result.ok, message=result.message, provider=result.provider)
