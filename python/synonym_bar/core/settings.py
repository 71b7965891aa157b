# File: python/synonym_bar/core/settings.py
# Project: SynonymBar Desktop Assistant
# Description: Settings models, provider profile defaults, and active provider resolution.

# Copyright (C) 2025 Tencent. All rights reserved.
# License: Licensed under the License Terms of Youtu-Tip (see license at repository root).
# Warranty: Provided on an "AS IS" basis, without warranties or conditions of any kind.
# Modifications must retain this notice.

from __future__ import annotations

from pathlib import Path
from typing import Dict, Literal

from pydantic import BaseModel, ConfigDict, Field

from .config import DEFAULT_SETTINGS_FILE

ProviderId = Literal['openai', 'openai_compatible', 'anthropic', 'gemini']
RequestStyle = Literal['chat', 'completion']

PROVIDER_IDS: tuple[ProviderId, ...] = ('openai', 'openai_compatible', 'anthropic', 'gemini')

# Display names double as the provider prefix in user-facing error messages.
PROVIDER_LABELS: Dict[str, str] = {
    'openai': 'OpenAI',
    'openai_compatible': 'OpenAI Compatible',
    'anthropic': 'Anthropic',
    'gemini': 'Gemini',
}

WORD_COUNT_OPTIONS = (3, 5, 8, 10)
SENTENCE_COUNT_OPTIONS = (2, 3, 4, 5)
MAX_CANDIDATES = 12


class ProviderProfile(BaseModel):
    """Endpoint, credential and model for one provider family."""
    baseUrl: str = Field(default='', alias='baseUrl')
    apiKey: str = Field(default='', alias='apiKey')
    model: str = ''

    model_config = ConfigDict(populate_by_name=True)


class CompatibleProfile(ProviderProfile):
    """OpenAI-compatible endpoints differ in chat vs. legacy completion contracts."""
    requestStyle: RequestStyle = Field(default='chat', alias='requestStyle')


class ProviderProfiles(BaseModel):
    """One profile per supported provider; all are kept so switching is lossless."""
    openai: ProviderProfile = Field(default_factory=ProviderProfile)
    openai_compatible: CompatibleProfile = Field(default_factory=CompatibleProfile)
    anthropic: ProviderProfile = Field(default_factory=ProviderProfile)
    gemini: ProviderProfile = Field(default_factory=ProviderProfile)


class Settings(BaseModel):
    """Top-level settings container persisted on disk."""
    settingsVersion: str = ''
    provider: ProviderId = 'openai'
    providers: ProviderProfiles = Field(default_factory=ProviderProfiles)
    temperature: float = Field(default=0.35, ge=0.0, le=1.0)
    wordCount: int = Field(default=6, ge=1, le=MAX_CANDIDATES, alias='wordCount')
    sentenceCount: int = Field(default=3, ge=1, le=MAX_CANDIDATES, alias='sentenceCount')

    model_config = ConfigDict(populate_by_name=True)

    def get_profile(self, provider_id: str) -> ProviderProfile:
        """Return the stored profile for ``provider_id``; raise KeyError for unknown ids."""
        if provider_id not in PROVIDER_IDS:
            raise KeyError(provider_id)
        return getattr(self.providers, provider_id)

    def get_active_profile(self) -> ProviderProfile:
        return self.get_profile(self.provider)

    @classmethod
    def from_file(cls, path: Path) -> "Settings":
        """Load settings from JSON text file with UTF-8 encoding."""
        data = path.read_text(encoding='utf-8')
        return cls.model_validate_json(data)


def provider_label(provider_id: str) -> str:
    return PROVIDER_LABELS.get(provider_id, provider_id)


DEFAULT_SETTINGS = Settings.from_file(DEFAULT_SETTINGS_FILE)
