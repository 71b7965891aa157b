# File: python/synonym_bar/services/settings_manager.py
# Project: SynonymBar Desktop Assistant
# Description: Thread-safe settings loader/writer that merges defaults, migrates outdated files,
# and patches per-provider profiles.

# Copyright (C) 2025 Tencent. All rights reserved.
# License: Licensed under the License Terms of Youtu-Tip (see license at repository root).
# Warranty: Provided on an "AS IS" basis, without warranties or conditions of any kind.
# Modifications must retain this notice.

from __future__ import annotations

from pathlib import Path
from threading import RLock
from typing import Any, Dict

import structlog
from pydantic import ValidationError

from ..core.config import DEFAULT_SETTINGS_FILE, USER_SETTINGS_FILE, _get_env_bool
from ..core.settings import PROVIDER_IDS, DEFAULT_SETTINGS, ProviderProfile, Settings

logger = structlog.get_logger(__name__)


class SettingsManager:
    def __init__(
        self,
        default_path: Path | None = None,
        user_path: Path | None = None,
        force_override: bool | None = None,
        migrate_if_old: bool | None = None,
    ) -> None:
        self._default_path = default_path or DEFAULT_SETTINGS_FILE
        self._user_path = user_path or USER_SETTINGS_FILE
        # SYNONYM_BAR_SETTINGS_OVERWRITE=1 时，强制使用默认配置覆盖用户文件
        self._force_override = (
            force_override
            if force_override is not None
            else _get_env_bool('SYNONYM_BAR_SETTINGS_OVERWRITE', False)
        )
        # 默认开启：用户配置版本缺失或落后时，使用默认配置覆盖
        self._migrate_if_old = (
            migrate_if_old
            if migrate_if_old is not None
            else _get_env_bool('SYNONYM_BAR_SETTINGS_MIGRATE_IF_OLD', True)
        )
        # RLock 确保 FastAPI 请求线程与后台任务并发读写安全
        self._lock = RLock()
        self._settings = self._load_settings()

    def _load_settings(self) -> Settings:
        # 优先读取用户文件，只有版本过旧或校验失败时回落到默认并覆盖写回
        if not self._force_override and self._user_path.exists():
            try:
                settings = Settings.from_file(self._user_path)
                if not self._should_override_for_version(settings):
                    return settings
                logger.info(
                    'settings.load.override_old_version',
                    user_version=settings.settingsVersion,
                    default_version=DEFAULT_SETTINGS.settingsVersion,
                )
            except ValidationError as exc:
                logger.warning(
                    'settings.load.user_failed',
                    error=str(exc),
                    path=str(self._user_path),
                )
        if self._force_override:
            logger.info('settings.load.force_override', path=str(self._user_path))
        settings = Settings.from_file(self._default_path)
        self._write_settings_file(settings)
        return settings

    def _parse_version(self, value: str | None) -> tuple[int, ...] | None:
        if not value:
            return None
        parts: list[int] = []
        for part in value.strip().split('.'):
            try:
                parts.append(int(part))
            except ValueError:
                return None
        if not parts:
            return None
        return tuple(parts)

    def _should_override_for_version(self, user_settings: Settings) -> bool:
        # 仅当开启迁移且用户版本落后或缺失时才触发覆盖
        if not self._migrate_if_old:
            return False
        default_version = self._parse_version(DEFAULT_SETTINGS.settingsVersion)
        if default_version is None:
            return False
        user_version = self._parse_version(user_settings.settingsVersion)
        return user_version is None or user_version < default_version

    def get_settings(self) -> Settings:
        # 返回副本，每次查询拿到的都是独立的配置值
        with self._lock:
            return self._settings.model_copy(deep=True)

    def save_settings(self, payload: Dict[str, Any]) -> Settings:
        with self._lock:
            # 先合并再整体校验，非法取值（如温度越界）直接抛 ValidationError
            merged = self._settings.model_dump(mode='python')
            merged.update(self._normalize_payload(payload))
            updated = Settings.model_validate(merged)
            self._settings = updated
            self._write_settings_file(updated)
            return updated.model_copy(deep=True)

    def reset_to_default(self) -> Settings:
        # 强制回滚到默认配置并写盘
        with self._lock:
            self._settings = Settings.from_file(self._default_path)
            self._write_settings_file(self._settings)
            return self._settings.model_copy(deep=True)

    def update_provider_profile(self, provider_id: str, patch: Dict[str, Any]) -> ProviderProfile:
        if provider_id not in PROVIDER_IDS:
            raise KeyError(provider_id)
        with self._lock:
            updated = self.save_settings({'providers': {provider_id: patch}})
            return updated.get_profile(provider_id).model_copy(deep=True)

    def set_active_provider(self, provider_id: str) -> Settings:
        if provider_id not in PROVIDER_IDS:
            raise KeyError(provider_id)
        return self.save_settings({'provider': provider_id})

    def _normalize_payload(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        normalized = dict(payload)
        # providers 只做局部合并，未提到的 provider 与字段保持不变
        providers_patch = normalized.get('providers')
        if isinstance(providers_patch, dict):
            current = self._settings.providers.model_dump(mode='python')
            for provider_id, profile_patch in providers_patch.items():
                if provider_id not in current:
                    raise KeyError(provider_id)
                if not isinstance(profile_patch, dict):
                    continue
                if provider_id != 'openai_compatible' and profile_patch.get('requestStyle') is not None:
                    raise ValueError(f'requestStyle 仅适用于 openai_compatible，不能用于 {provider_id}')
                current[provider_id].update(profile_patch)
            normalized['providers'] = current
        return normalized

    def _write_settings_file(self, settings: Settings) -> None:
        try:
            self._user_path.parent.mkdir(parents=True, exist_ok=True)
            self._user_path.write_text(settings.model_dump_json(indent=2), encoding='utf-8')
        except Exception as exc:  # pragma: no cover - best effort
            # 写入失败仅记录日志，不抛异常以避免中断主流程
            logger.warning('settings.write_failed', error=str(exc), path=str(self._user_path))
