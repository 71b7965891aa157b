# File: python/synonym_bar/services/prompts.py
# Project: SynonymBar Desktop Assistant
# Description: Builds provider-agnostic system/user prompts and the output token budget per query.

# Copyright (C) 2025 Tencent. All rights reserved.
# License: Licensed under the License Terms of Youtu-Tip (see license at repository root).
# Warranty: Provided on an "AS IS" basis, without warranties or conditions of any kind.
# Modifications must retain this notice.

from __future__ import annotations

from dataclasses import dataclass

from ..schemas.rewrite import TONE_LABELS, Mode, Tone

JSON_FORMAT_EXAMPLE = '{"candidates":[{"word":"...","note":"..."}]}'

# 输出长度预算 = 基数 + 数量 * 单条，句子每条需要的 token 明显多于词语。
WORD_BUDGET_BASE = 120
WORD_BUDGET_PER_ITEM = 24
SENTENCE_BUDGET_BASE = 180
SENTENCE_BUDGET_PER_ITEM = 40


@dataclass(frozen=True)
# 单次请求的 prompt 与生成参数，只属于构建它的那次调用。
class RequestSpec:
    system_prompt: str
    user_prompt: str
    max_output_tokens: int
    temperature: float


def output_budget(mode: Mode, count: int) -> int:
    if mode == 'word':
        return WORD_BUDGET_BASE + count * WORD_BUDGET_PER_ITEM
    return SENTENCE_BUDGET_BASE + count * SENTENCE_BUDGET_PER_ITEM


def _word_prompts(text: str, count: int) -> tuple[str, str]:
    system_prompt = (
        '你是中文写作助手。根据给定词语，提供可替换的词语。\n'
        '输出必须是 JSON 对象，格式为：\n'
        f'{JSON_FORMAT_EXAMPLE}\n'
        f'输出数量必须严格等于 {count}。\n'
        '每个候选词给出简短用法说明，词语之间差异明显，避免重复。\n'
        '不得输出代码块或额外说明文字。'
    )
    user_prompt = f'词语：{text}\n请给出可替换词语，并简述语境差异。'
    return system_prompt, user_prompt


def _sentence_prompts(text: str, tone: Tone, count: int) -> tuple[str, str]:
    system_prompt = (
        '你是中文改写助手。根据给定句子进行改写。\n'
        '输出必须是 JSON 对象，格式为：\n'
        f'{JSON_FORMAT_EXAMPLE}\n'
        f'输出数量必须严格等于 {count}。\n'
        '要求改写幅度明显，允许调整句式、拆分或合并短语，但保持原意。\n'
        '不得输出代码块或额外说明文字。\n'
        '口语：更简洁、更自然、更生活化。\n'
        '书面：更正式、更严谨、更书面化。'
    )
    tone_label = TONE_LABELS[tone]
    user_prompt = (
        f'原句：{text}\n'
        f'请改写为更{tone_label}的表达，只返回该风格，避免与原句措辞过于接近，并做适度优化。'
    )
    return system_prompt, user_prompt


def build_request_spec(text: str, mode: Mode, tone: Tone, count: int, temperature: float) -> RequestSpec:
    """Build the prompts and token budget shared by every provider encoder."""
    if count < 1:
        raise ValueError('count must be positive')
    if mode == 'word':
        system_prompt, user_prompt = _word_prompts(text, count)
    else:
        system_prompt, user_prompt = _sentence_prompts(text, tone, count)
    return RequestSpec(
        system_prompt=system_prompt,
        user_prompt=user_prompt,
        max_output_tokens=output_budget(mode, count),
        temperature=temperature,
    )
