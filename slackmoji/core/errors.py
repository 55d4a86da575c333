# -----------------------------------------------------------------------------
# emoji sync failure taxonomy
# 2022 A. Shavykin <0.delameter@gmail.com>
# -----------------------------------------------------------------------------
from __future__ import annotations

from typing import Any


class SlackmojiError(RuntimeError):
    pass


class ConfigurationFatal(SlackmojiError):
    """Precondition of the whole run is not met (missing archive dir, no credentials)."""


class FetchError(SlackmojiError):
    """Emoji list page could not be fetched or parsed; cursor is lost."""

    def __init__(self, page: int, reason: str):
        super().__init__(f'Failed to fetch emoji list page #{page} or parse response: {reason}')
        self.page = page
        self.reason = reason


class DownloadError(SlackmojiError):
    def __init__(self, name: str, reason: str):
        super().__init__(f'Failed to download emoji {name}: {reason}')
        self.name = name
        self.reason = reason


class ScanError(SlackmojiError):
    pass


class TransportError(SlackmojiError):
    def __init__(self, operation: str, key: str, reason: str):
        super().__init__(f'Failed to {operation} {key}: {reason}')
        self.operation = operation
        self.key = key
        self.reason = reason


class RetryExhausted(SlackmojiError):
    def __init__(self, operation: str, key: str, attempts: int, payload: Any = None):
        super().__init__(f'Could not {operation} {key} within {attempts} tries, skipping: {payload!r}')
        self.operation = operation
        self.key = key
        self.attempts = attempts
        self.payload = payload


class OperationRejected(SlackmojiError):
    def __init__(self, operation: str, key: str, remote_error: str):
        super().__init__(f'Failed to {operation} {key} for reason: {remote_error}')
        self.operation = operation
        self.key = key
        self.remote_error = remote_error


class ConflictSkipped(SlackmojiError):
    def __init__(self, name: str):
        super().__init__(f'Cannot import due to conflicting Slack short code name '
                         f'(Unicode emoji standard): {name}')
        self.name = name
