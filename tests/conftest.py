"""
Pytest configuration and shared fakes.
"""
from __future__ import annotations

from typing import Dict, List

import pytest

from slackmoji.core.errors import DownloadError, FetchError
from slackmoji.core.logger import Logger
from slackmoji.core.request_flow_interface import RequestFlowInterface
from slackmoji.emoji import EmojiRegular, EmojiAlias
from slackmoji.emoji_paginator import EmojiPage


@pytest.fixture(autouse=True)
def logger(tmp_path_factory):
    """Route log file output of every test into its own temp file."""
    instance = Logger.get_instance(True, filename=str(tmp_path_factory.mktemp('log') / 'test.log'))
    yield instance
    instance.close_io()


@pytest.fixture(autouse=True)
def sleeps(monkeypatch) -> List[float]:
    """Replace real sleeping in request retry loop, record requested durations."""
    recorded = []
    monkeypatch.setattr('slackmoji.core.rate_limited_requester.sleep', recorded.append)
    return recorded


class FakeResponse:
    def __init__(self, status_code: int = 200, json_data=None, headers: Dict[str, str] = None,
                 content: bytes = b''):
        self.status_code = status_code
        self._json_data = json_data
        self.headers = headers or {}
        self.content = content

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    def json(self):
        if self._json_data is None:
            raise ValueError('No JSON object could be decoded')
        return self._json_data

    def raise_for_status(self):
        import requests
        if not self.ok:
            raise requests.HTTPError(f'{self.status_code} Error')

    def iter_content(self, chunk_size: int):
        for idx in range(0, len(self.content), chunk_size):
            yield self.content[idx:idx + chunk_size]

    def __enter__(self):
        return self

    def __exit__(self, *args):
        return False


def throttled(retry_after: str = '2') -> FakeResponse:
    return FakeResponse(429, {'ok': False, 'error': 'ratelimited'}, {'Retry-After': retry_after})


def accepted() -> FakeResponse:
    return FakeResponse(200, {'ok': True})


class RecordingFlow(RequestFlowInterface):
    def __init__(self):
        self.events = []

    def before_paginated_batch(self, url: str):
        self.events.append(('batch_start', url))

    def after_paginated_batch(self):
        self.events.append(('batch_end',))

    def on_rate_limited(self, attempt_num: int, retry_after_sec: float):
        self.events.append(('rate_limited', attempt_num, retry_after_sec))

    def on_request_completion(self, request_ok: bool, status_code: str, size_b: int = 0):
        self.events.append(('completed', request_ok, status_code))

    def count(self, event_name: str) -> int:
        return len([e for e in self.events if e[0] == event_name])


def make_emojis(count: int, prefix: str = 'emoji') -> List[EmojiRegular]:
    return [EmojiRegular(f'{prefix}_{idx:04d}', f'https://emoji.slack-edge.com/T0/{prefix}_{idx:04d}/abc.png')
            for idx in range(count)]


class FakeSlackClient:
    """In-memory stand-in for SlackClient: serves pages of a fixed emoji list."""

    def __init__(self, emojis=None, fail_on_page: int|None = None, broken_downloads=()):
        self.emojis = list(emojis or [])
        self.fail_on_page = fail_on_page
        self.broken_downloads = set(broken_downloads)

        self.page_requests = []
        self.uploaded = []
        self.aliased = []
        self.upload_errors = {}

    def fetch_emoji_page(self, page: int, count: int) -> EmojiPage:
        self.page_requests.append((page, count))
        if page == self.fail_on_page:
            raise FetchError(page, 'connection reset')
        pages = max(1, -(-len(self.emojis) // count))
        batch = self.emojis[(page - 1) * count:page * count]
        return EmojiPage(batch, page=page, pages=pages, total=len(self.emojis))

    def download(self, emoji: EmojiRegular):
        if emoji.name in self.broken_downloads:
            raise DownloadError(emoji.name, '404 Client Error')
        yield f'image of {emoji.name}'.encode()

    def upload_emoji(self, entry):
        if entry.name in self.upload_errors:
            raise self.upload_errors[entry.name]
        self.uploaded.append(entry.name)
        return {'ok': True}

    def add_alias(self, name: str, alias_for: str):
        self.aliased.append((name, alias_for))
        return {'ok': True}


@pytest.fixture
def fake_client():
    return FakeSlackClient(make_emojis(3) + [EmojiAlias('parrot_alias', 'emoji_0000')])
