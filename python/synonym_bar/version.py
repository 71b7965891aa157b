# File: python/synonym_bar/version.py
# Project: SynonymBar Desktop Assistant
# Description: Resolves the sidecar version from the environment or the repository pyproject.

# Copyright (C) 2025 Tencent. All rights reserved.
# License: Licensed under the License Terms of Youtu-Tip (see license at repository root).
# Warranty: Provided on an "AS IS" basis, without warranties or conditions of any kind.
# Modifications must retain this notice.

from __future__ import annotations

import os
import tomllib
from functools import lru_cache
from pathlib import Path

PYPROJECT_PATH = Path(__file__).resolve().parents[2] / 'pyproject.toml'


@lru_cache(maxsize=1)
def _read_pyproject_version(path: Path = PYPROJECT_PATH) -> str | None:
    # 安装为 wheel 后仓库根目录的 pyproject 不存在，此时返回 None
    if not path.exists():
        return None
    try:
        with path.open('rb') as fp:
            data = tomllib.load(fp)
    except (OSError, tomllib.TOMLDecodeError):
        return None
    version = data.get('tool', {}).get('poetry', {}).get('version')
    if isinstance(version, str) and version.strip():
        return version.strip()
    return None


def resolve_version() -> str:
    env_version = os.environ.get('SYNONYM_BAR_VERSION')
    if env_version:
        return env_version
    return _read_pyproject_version() or '0.0.0'


SIDECAR_VERSION = resolve_version()
