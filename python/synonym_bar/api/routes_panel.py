# File: python/synonym_bar/api/routes_panel.py
# Project: SynonymBar Desktop Assistant
# Description: Panel state endpoints: read the current snapshot, run a query or self-test, clear results.

# Copyright (C) 2025 Tencent. All rights reserved.
# License: Licensed under the License Terms of Youtu-Tip (see license at repository root).
# Warranty: Provided on an "AS IS" basis, without warranties or conditions of any kind.
# Modifications must retain this notice.

from fastapi import APIRouter, Depends

from ..core.deps import get_panel_state, get_settings_manager
from ..schemas.rewrite import PanelStateResponse, RewriteRequest
from ..services.panel_state import PanelStateManager
from ..services.settings_manager import SettingsManager

router = APIRouter(prefix='/panel', tags=['panel'])


@router.get('', response_model=PanelStateResponse)
def read_panel(panel: PanelStateManager = Depends(get_panel_state)) -> PanelStateResponse:
    return panel.snapshot()


@router.post('/query', response_model=PanelStateResponse)
async def query_panel(
    payload: RewriteRequest,
    panel: PanelStateManager = Depends(get_panel_state),
    manager: SettingsManager = Depends(get_settings_manager),
) -> PanelStateResponse:
    # Failures land in errorMessage; the HTTP call itself succeeds.
    return await panel.query(manager.get_settings(), payload.text, payload.mode, payload.tone, payload.count)


@router.post('/self-test', response_model=PanelStateResponse)
async def self_test_panel(
    panel: PanelStateManager = Depends(get_panel_state),
    manager: SettingsManager = Depends(get_settings_manager),
) -> PanelStateResponse:
    return await panel.self_test(manager.get_settings())


@router.delete('', response_model=PanelStateResponse)
def clear_panel(panel: PanelStateManager = Depends(get_panel_state)) -> PanelStateResponse:
    return panel.clear()
