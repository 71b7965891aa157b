# File: python/synonym_bar/core/config.py
# Project: SynonymBar Desktop Assistant
# Description: Filesystem layout and environment switches shared by the sidecar modules.

# Copyright (C) 2025 Tencent. All rights reserved.
# License: Licensed under the License Terms of Youtu-Tip (see license at repository root).
# Warranty: Provided on an "AS IS" basis, without warranties or conditions of any kind.
# Modifications must retain this notice.

from __future__ import annotations

import os
from pathlib import Path

PACKAGE_DIR = Path(__file__).resolve().parents[1]
RESOURCES_DIR = PACKAGE_DIR / 'resources'


def _get_env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in {'1', 'true', 'yes', 'on'}


def _resolve_app_home() -> Path:
    # 桌面端默认写入 Application Support，可用环境变量改到临时目录。
    override = os.environ.get('SYNONYM_BAR_HOME', '').strip()
    if override:
        return Path(override).expanduser()
    return Path.home() / 'Library' / 'Application Support' / 'SynonymBar'


APP_HOME = _resolve_app_home()
CACHE_DIR = APP_HOME / 'cache'
LOG_DIR = APP_HOME / 'logs'
USER_SETTINGS_FILE = APP_HOME / 'settings.json'
DEFAULT_SETTINGS_FILE = RESOURCES_DIR / 'default_settings.json'

# 每次 HTTP 调用的超时（秒），不是整条流水线的超时。
REQUEST_TIMEOUT_SECONDS = 30.0
