# File: python/synonym_bar/schemas/settings.py
# Project: SynonymBar Desktop Assistant
# Description: Pydantic schemas for settings reads, partial updates and provider profile patches.

# Copyright (C) 2025 Tencent. All rights reserved.
# License: Licensed under the License Terms of Youtu-Tip (see license at repository root).
# Warranty: Provided on an "AS IS" basis, without warranties or conditions of any kind.
# Modifications must retain this notice.

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from ..core.settings import MAX_CANDIDATES, ProviderId, ProviderProfile, RequestStyle, Settings


class SettingsResponse(Settings):
    """Public-facing settings payload returned by the API layer."""
    pass


class ProviderProfileUpdate(BaseModel):
    """Patch payload for one provider profile; unspecified fields stay intact."""
    baseUrl: Optional[str] = None
    apiKey: Optional[str] = None
    model: Optional[str] = None
    requestStyle: Optional[RequestStyle] = None


class ProviderProfilesUpdate(BaseModel):
    openai: Optional[ProviderProfileUpdate] = None
    openai_compatible: Optional[ProviderProfileUpdate] = None
    anthropic: Optional[ProviderProfileUpdate] = None
    gemini: Optional[ProviderProfileUpdate] = None


class SettingsUpdate(BaseModel):
    """Partial update payload used to patch existing settings."""
    provider: Optional[ProviderId] = None
    providers: Optional[ProviderProfilesUpdate] = None
    temperature: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    wordCount: Optional[int] = Field(default=None, ge=1, le=MAX_CANDIDATES)
    sentenceCount: Optional[int] = Field(default=None, ge=1, le=MAX_CANDIDATES)


class ProviderProfileResponse(ProviderProfile):
    requestStyle: Optional[RequestStyle] = None
