# File: python/synonym_bar/main.py
# Project: SynonymBar Desktop Assistant
# Description: FastAPI application factory wiring settings, the rewrite service and panel state into routers.

# Copyright (C) 2025 Tencent. All rights reserved.
# License: Licensed under the License Terms of Youtu-Tip (see license at repository root).
# Warranty: Provided on an "AS IS" basis, without warranties or conditions of any kind.
# Modifications must retain this notice.

from __future__ import annotations

from typing import Optional

import httpx
import structlog
from fastapi import FastAPI

from .api import routes_health, routes_panel, routes_rewrite, routes_settings
from .core.logging import setup_logging
from .services.llm import RewriteService
from .services.panel_state import PanelStateManager
from .services.settings_manager import SettingsManager
from .version import SIDECAR_VERSION

logger = structlog.get_logger(__name__)


def create_app(
    settings_manager: Optional[SettingsManager] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    configure_logging: bool = True,
) -> FastAPI:
    if configure_logging:
        setup_logging()
    manager = settings_manager or SettingsManager()
    service = RewriteService(transport=transport)

    app = FastAPI(title='SynonymBar Sidecar', version=SIDECAR_VERSION)
    app.state.settings_manager = manager
    app.state.rewrite_service = service
    app.state.panel_state = PanelStateManager(service)

    app.include_router(routes_health.router)
    app.include_router(routes_settings.router)
    app.include_router(routes_rewrite.router)
    app.include_router(routes_panel.router)

    logger.info('sidecar.app_created', version=SIDECAR_VERSION, provider=manager.get_settings().provider)
    return app


app = create_app()
