# File: python/synonym_bar/api/routes_settings.py
# Project: SynonymBar Desktop Assistant
# Description: Settings endpoints for reading/updating settings, patching provider profiles
# and switching the active provider.

# Copyright (C) 2025 Tencent. All rights reserved.
# License: Licensed under the License Terms of Youtu-Tip (see license at repository root).
# Warranty: Provided on an "AS IS" basis, without warranties or conditions of any kind.
# Modifications must retain this notice.

from fastapi import APIRouter, Depends, HTTPException

from ..core.deps import get_settings_manager
from ..schemas.settings import (
    ProviderProfileResponse,
    ProviderProfileUpdate,
    SettingsResponse,
    SettingsUpdate,
)
from ..services.settings_manager import SettingsManager

router = APIRouter(prefix='/settings', tags=['settings'])


@router.get('', response_model=SettingsResponse)
def read_settings(manager: SettingsManager = Depends(get_settings_manager)) -> SettingsResponse:
    """Return the current settings payload."""
    return manager.get_settings()


@router.put('', response_model=SettingsResponse)
def update_settings(
    payload: SettingsUpdate,
    manager: SettingsManager = Depends(get_settings_manager),
) -> SettingsResponse:
    """Persist partial settings update and return latest snapshot."""
    # exclude_unset keeps stored values untouched when the panel sends a patch.
    data = payload.model_dump(exclude_unset=True)
    try:
        return manager.save_settings(data)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@router.post('/reset', response_model=SettingsResponse)
def reset_settings(manager: SettingsManager = Depends(get_settings_manager)) -> SettingsResponse:
    """Restore shipped defaults, discarding stored keys."""
    return manager.reset_to_default()


@router.put('/providers/{provider_id}', response_model=ProviderProfileResponse)
def update_provider_profile(
    provider_id: str,
    payload: ProviderProfileUpdate,
    manager: SettingsManager = Depends(get_settings_manager),
) -> ProviderProfileResponse:
    """Update endpoint, key, model (and request style) of one provider."""
    try:
        data = payload.model_dump(exclude_unset=True)
        return manager.update_provider_profile(provider_id, data)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail='Provider not found') from exc
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@router.put('/active/{provider_id}', response_model=SettingsResponse)
def set_active_provider(
    provider_id: str,
    manager: SettingsManager = Depends(get_settings_manager),
) -> SettingsResponse:
    """Switch the provider used by subsequent queries."""
    try:
        return manager.set_active_provider(provider_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail='Provider not found') from exc
