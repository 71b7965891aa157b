# File: python/synonym_bar/services/panel_state.py
# Project: SynonymBar Desktop Assistant
# Description: Panel state owner tracking candidates, loading flag, current error and self-test status,
# mutated only from the event loop around the single awaited network call.

# Copyright (C) 2025 Tencent. All rights reserved.
# License: Licensed under the License Terms of Youtu-Tip (see license at repository root).
# Warranty: Provided on an "AS IS" basis, without warranties or conditions of any kind.
# Modifications must retain this notice.

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

import structlog

from ..core.settings import Settings
from ..schemas.rewrite import Candidate, Mode, PanelStateResponse, Tone
from .errors import RewriteError
from .llm import EMPTY_INPUT_MESSAGES, RewriteService

logger = structlog.get_logger(__name__)


@dataclass
class PanelState:
    candidates: List[Candidate] = field(default_factory=list)
    is_loading: bool = False
    error_message: Optional[str] = None
    is_testing: bool = False
    test_message: Optional[str] = None


class PanelStateManager:
    def __init__(self, service: RewriteService) -> None:
        # Overlapping queries are not rejected; only the most recent one may publish its outcome.
        self._service = service
        self._state = PanelState()
        self._query_generation = 0
        self._test_generation = 0

    @property
    def state(self) -> PanelState:
        return self._state

    def snapshot(self) -> PanelStateResponse:
        state = self._state
        return PanelStateResponse(
            candidates=list(state.candidates),
            isLoading=state.is_loading,
            errorMessage=state.error_message,
            isTesting=state.is_testing,
            testMessage=state.test_message,
        )

    async def query(
        self,
        settings: Settings,
        text: str,
        mode: Mode,
        tone: Tone = 'casual',
        count: Optional[int] = None,
    ) -> PanelStateResponse:
        state = self._state
        if not (text or '').strip():
            # Empty input only replaces the error line; existing results stay visible.
            state.error_message = EMPTY_INPUT_MESSAGES[mode]
            return self.snapshot()

        self._query_generation += 1
        generation = self._query_generation
        state.is_loading = True
        state.error_message = None
        state.candidates = []
        try:
            result = await self._service.run_query(settings, text, mode, tone, count)
        except RewriteError as exc:
            self._publish_query(generation, error_message=str(exc))
            return self.snapshot()
        except BaseException:
            if generation == self._query_generation:
                state.is_loading = False
            raise
        self._publish_query(generation, candidates=result.candidates)
        return self.snapshot()

    def _publish_query(
        self,
        generation: int,
        *,
        candidates: Optional[List[Candidate]] = None,
        error_message: Optional[str] = None,
    ) -> None:
        if generation != self._query_generation:
            logger.info('panel.stale_query_dropped', generation=generation, failed=error_message is not None)
            return
        state = self._state
        state.is_loading = False
        state.candidates = list(candidates or [])
        state.error_message = error_message

    async def self_test(self, settings: Settings) -> PanelStateResponse:
        state = self._state
        self._test_generation += 1
        generation = self._test_generation
        state.is_testing = True
        state.test_message = None
        try:
            result = await self._service.self_test(settings)
        except BaseException:
            if generation == self._test_generation:
                state.is_testing = False
            raise
        if generation == self._test_generation:
            state.is_testing = False
            state.test_message = result.message
        return self.snapshot()

    def clear(self) -> PanelStateResponse:
        # Bumping the generation discards whatever query is still in flight.
        self._query_generation += 1
        state = self._state
        state.candidates = []
        state.error_message = None
        state.is_loading = False
        return self.snapshot()
