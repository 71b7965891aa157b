# File: python/synonym_bar/api/routes_health.py
# Project: SynonymBar Desktop Assistant
# Description: Health endpoint exposing status, version, and the supported provider list.

# Copyright (C) 2025 Tencent. All rights reserved.
# License: Licensed under the License Terms of Youtu-Tip (see license at repository root).
# Warranty: Provided on an "AS IS" basis, without warranties or conditions of any kind.
# Modifications must retain this notice.

from fastapi import APIRouter

from ..core.settings import PROVIDER_IDS
from ..version import SIDECAR_VERSION

router = APIRouter(prefix='/health', tags=['health'])

CAPABILITIES = ('rewrite:word', 'rewrite:sentence', 'self-test')


@router.get('', summary='Health check')
async def health_check():
    return {
        'status': 'ok',
        'version': SIDECAR_VERSION,
        'capabilities': list(CAPABILITIES),
        'providers': list(PROVIDER_IDS),
    }
