# File: python/synonym_bar/schemas/rewrite.py
# Project: SynonymBar Desktop Assistant
# Description: Candidate, query request/response and panel state contracts for the rewrite flow.

# Copyright (C) 2025 Tencent. All rights reserved.
# License: Licensed under the License Terms of Youtu-Tip (see license at repository root).
# Warranty: Provided on an "AS IS" basis, without warranties or conditions of any kind.
# Modifications must retain this notice.

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

Mode = Literal['word', 'sentence']
Tone = Literal['casual', 'formal']

MODE_LABELS = {'word': '词语', 'sentence': '句子'}
TONE_LABELS = {'casual': '口语', 'formal': '书面'}


class Candidate(BaseModel):
    """One replacement word or rewritten sentence plus an optional usage note."""
    word: str
    note: str = ''

    model_config = ConfigDict(frozen=True)


class RewriteRequest(BaseModel):
    text: str
    mode: Mode = 'word'
    tone: Tone = 'casual'
    count: Optional[int] = Field(default=None, ge=1, le=12)


class RewriteResponse(BaseModel):
    mode: Mode
    candidates: List[Candidate]


class SelfTestResponse(BaseModel):
    ok: bool
    message: str
    provider: str


class PanelStateResponse(BaseModel):
    """Snapshot of what the menu-bar panel should render."""
    candidates: List[Candidate] = Field(default_factory=list)
    isLoading: bool = False
    errorMessage: Optional[str] = None
    isTesting: bool = False
    testMessage: Optional[str] = None
