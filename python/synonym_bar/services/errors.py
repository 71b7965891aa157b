# File: python/synonym_bar/services/errors.py
# Project: SynonymBar Desktop Assistant
# Description: Error taxonomy raised by the rewrite pipeline; str(exc) is the user-facing message.

# Copyright (C) 2025 Tencent. All rights reserved.
# License: Licensed under the License Terms of Youtu-Tip (see license at repository root).
# Warranty: Provided on an "AS IS" basis, without warranties or conditions of any kind.
# Modifications must retain this notice.

from __future__ import annotations


class RewriteError(RuntimeError):
    """Base class for every terminal failure of a query or self-test."""

    kind = 'rewrite_error'


class InvalidInputError(RewriteError):
    """Raised when the trimmed input text is empty."""

    kind = 'invalid_input'


class ConfigurationError(RewriteError):
    """Raised before any network call when key or URL of the active provider is unusable."""

    kind = 'configuration'


class ProviderError(RewriteError):
    """Raised for HTTP >= 400, explicit error bodies, malformed envelopes and transport failures."""

    kind = 'provider'


class EmptyContentError(RewriteError):
    """Raised when the provider answered successfully but no text could be extracted."""

    kind = 'empty_content'


class ParseError(RewriteError):
    """Raised when no candidate could be recovered from the model's text."""

    kind = 'parse'


class EmptyResultError(RewriteError):
    """Raised when extraction succeeded but nothing survived truncation."""

    kind = 'empty_result'
