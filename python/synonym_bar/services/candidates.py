# File: python/synonym_bar/services/candidates.py
# Project: SynonymBar Desktop Assistant
# Description: Extracts ordered {word, note} candidates from free-form model output with a
# strict JSON -> lenient JSON -> line heuristic cascade.

# Copyright (C) 2025 Tencent. All rights reserved.
# License: Licensed under the License Terms of Youtu-Tip (see license at repository root).
# Warranty: Provided on an "AS IS" basis, without warranties or conditions of any kind.
# Modifications must retain this notice.

from __future__ import annotations

import json
import re
from typing import Any, Callable, List, Optional, Sequence

import structlog
from pydantic import BaseModel, StrictStr, ValidationError

from ..schemas.rewrite import Candidate
from .errors import ParseError

logger = structlog.get_logger(__name__)

PARSE_ERROR_MESSAGE = '模型返回格式无法解析'

_ORDINAL_PREFIX = re.compile(r'^\d+[\.\)、]\s*')
_BULLET_PREFIX = re.compile(r'^[\-•]\s*')
_DASH_SEPARATORS = (' - ', ' — ', ' – ')
_WORD_KEYS = ('word', 'text', 'sentence')
_NOTE_KEYS = ('note', 'style')


class _WireCandidate(BaseModel):
    word: StrictStr
    note: StrictStr


class _WirePayload(BaseModel):
    candidates: List[_WireCandidate]


def _extract_json_text(text: str) -> Optional[str]:
    """Strip code fences and cut the outermost JSON object (or wrap a bare array)."""
    trimmed = text.strip()
    if trimmed.startswith('```'):
        newline = trimmed.find('\n')
        if newline != -1:
            trimmed = trimmed[newline + 1:]
        last_fence = trimmed.rfind('```')
        if last_fence != -1:
            trimmed = trimmed[:last_fence]
        trimmed = trimmed.strip()

    start = trimmed.find('{')
    end = trimmed.rfind('}')
    if start != -1 and end > start:
        return trimmed[start:end + 1]

    start = trimmed.find('[')
    end = trimmed.rfind(']')
    if start != -1 and end > start:
        return '{"candidates":' + trimmed[start:end + 1] + '}'
    return None


def _strict_decode(text: str) -> Optional[List[Candidate]]:
    json_text = _extract_json_text(text)
    if json_text is None:
        return None
    try:
        payload = _WirePayload.model_validate_json(json_text)
    except ValidationError:
        return None
    # 严格解析成功即直接返回，哪怕列表为空。
    return [Candidate(word=item.word, note=item.note) for item in payload.candidates]


def _first_string(obj: dict, keys: Sequence[str]) -> str:
    for key in keys:
        value = obj.get(key)
        if isinstance(value, str):
            return value
    return ''


def _map_loose_item(item: Any) -> Optional[Candidate]:
    if isinstance(item, str):
        return Candidate(word=item, note='') if item else None
    if not isinstance(item, dict):
        return None
    word = _first_string(item, _WORD_KEYS)
    if not word:
        return None
    return Candidate(word=word, note=_first_string(item, _NOTE_KEYS))


def _lenient_decode(text: str) -> Optional[List[Candidate]]:
    json_text = _extract_json_text(text)
    if json_text is None:
        return None
    try:
        data = json.loads(json_text)
    except ValueError:
        return None
    if not isinstance(data, dict):
        return None
    raw_candidates = data.get('candidates')
    if not isinstance(raw_candidates, list):
        return None
    mapped = [candidate for candidate in map(_map_loose_item, raw_candidates) if candidate is not None]
    return mapped or None


def _split_line(content: str) -> Optional[Candidate]:
    # 全角冒号优先，其次半角冒号，再次是两侧带空格的破折号。
    for colon in ('：', ':'):
        index = content.find(colon)
        if index != -1:
            word = content[:index].strip()
            note = content[index + len(colon):].strip()
            return Candidate(word=word, note=note) if word else None
    for separator in _DASH_SEPARATORS:
        index = content.find(separator)
        if index != -1:
            word = content[:index].strip()
            note = content[index + len(separator):].strip()
            return Candidate(word=word, note=note) if word else None
    return Candidate(word=content, note='')


def _line_fallback(text: str) -> Optional[List[Candidate]]:
    cleaned = text.replace('```json', '').replace('```', '').strip()
    results: List[Candidate] = []
    for raw_line in cleaned.splitlines():
        line = raw_line.strip()
        if not line:
            continue
        content = _ORDINAL_PREFIX.sub('', line, count=1)
        content = _BULLET_PREFIX.sub('', content, count=1)
        if not content:
            continue
        candidate = _split_line(content)
        if candidate is not None:
            results.append(candidate)
    return results or None


EXTRACTION_STAGES: tuple[tuple[str, Callable[[str], Optional[List[Candidate]]]], ...] = (
    ('strict', _strict_decode),
    ('lenient', _lenient_decode),
    ('lines', _line_fallback),
)


def extract_candidates(text: str) -> List[Candidate]:
    """Return candidates in model order; the first stage yielding a result wins."""
    for stage, attempt in EXTRACTION_STAGES:
        result = attempt(text)
        if result is not None:
            if stage != 'strict':
                logger.info('candidates.degraded_parse', stage=stage, count=len(result))
            return result
    logger.warning('candidates.parse_failed', preview=text[:120])
    raise ParseError(PARSE_ERROR_MESSAGE)
