# File: python/synonym_bar/core/deps.py
# Project: SynonymBar Desktop Assistant
# Description: FastAPI dependency providers exposing shared services from application state.

# Copyright (C) 2025 Tencent. All rights reserved.
# License: Licensed under the License Terms of Youtu-Tip (see license at repository root).
# Warranty: Provided on an "AS IS" basis, without warranties or conditions of any kind.
# Modifications must retain this notice.

from fastapi import Request

from ..services.llm import RewriteService
from ..services.panel_state import PanelStateManager
from ..services.settings_manager import SettingsManager


def get_settings_manager(request: Request) -> SettingsManager:
    return request.app.state.settings_manager


def get_rewrite_service(request: Request) -> RewriteService:
    return request.app.state.rewrite_service


def get_panel_state(request: Request) -> PanelStateManager:
    return request.app.state.panel_state
