# -----------------------------------------------------------------------------
# page-by-page emoji listing flattened into a single forward-only sequence
# 2022 A. Shavykin <0.delameter@gmail.com>
# -----------------------------------------------------------------------------
from __future__ import annotations

from collections import deque
from typing import Deque, List

from slackmoji.core.errors import FetchError
from slackmoji.core.logger import Logger
from slackmoji.core.request_flow_interface import RequestFlowInterface, SilentRequestFlow
from slackmoji.emoji import AbstractEmoji


class EmojiPage:
    def __init__(self, emojis: List[AbstractEmoji], page: int, pages: int, total: int|None = None):
        self.emojis = emojis
        self.page = page
        self.pages = pages
        self.total = total

    @property
    def next_page(self) -> int|None:
        if not self.emojis or self.page >= self.pages:
            return None
        return self.page + 1


class EmojiPaginator:
    """
    Single-pass iterator over the whole custom emoji list.

    ``client`` must provide ``fetch_emoji_page(page, count) -> EmojiPage``.
    A page that can't be fetched makes the iterator raise ``FetchError`` once;
    after that it is exhausted, since the cursor to continue from is lost.
    """

    DEFAULT_PAGE_SIZE = 100

    STATE_PENDING = 'pending'
    STATE_EXHAUSTED = 'exhausted'
    STATE_ERRORED = 'errored'

    def __init__(self, client, page_size: int = DEFAULT_PAGE_SIZE, flow: RequestFlowInterface|None = None):
        if not isinstance(page_size, int) or page_size < 1:
            raise ValueError(f'Page size should be a positive integer, got: {page_size!r}')

        self._logger = Logger.get_instance()
        self._client = client
        self._page_size = page_size
        self._flow = flow or SilentRequestFlow()

        self._state = self.STATE_PENDING
        self._next_page: int|None = 1
        self._buffer: Deque[AbstractEmoji] = deque()
        self._requests_made = 0
        self._records_yielded = 0
        self._total: int|None = None

    def __iter__(self) -> EmojiPaginator:
        return self

    def __next__(self) -> AbstractEmoji:
        while not self._buffer:
            if self._state != self.STATE_PENDING:
                raise StopIteration
            if self._next_page is None:
                self._finish(self.STATE_EXHAUSTED)
                raise StopIteration
            self._fetch_next_page()

        self._records_yielded += 1
        return self._buffer.popleft()

    @property
    def state(self) -> str:
        return self._state

    @property
    def requests_made(self) -> int:
        return self._requests_made

    @property
    def records_yielded(self) -> int:
        return self._records_yielded

    @property
    def total(self) -> int|None:
        return self._total

    def _fetch_next_page(self):
        page = self._next_page
        if self._requests_made == 0:
            self._flow.before_paginated_batch(f'emoji list, {self._page_size:d} per page')

        self._requests_made += 1
        self._flow.before_request(self._requests_made)
        self._flow.before_request_attempt(1)
        try:
            emoji_page = self._client.fetch_emoji_page(page, self._page_size)
        except FetchError as e:
            self._flow.on_request_failure(1, f'{e!s}')
            self._finish(self.STATE_ERRORED)
            raise

        self._flow.on_request_completion(True, 'ok')
        if emoji_page.total is not None and self._total is None:
            self._total = emoji_page.total
            self._logger.info(f'Remote workspace reports {self._total:n} custom emojis')

        self._logger.debug(f'Fetched page {page}/{emoji_page.pages}: {len(emoji_page.emojis)} emojis')
        self._buffer.extend(emoji_page.emojis)
        self._next_page = emoji_page.next_page

    def _finish(self, state: str):
        self._state = state
        self._next_page = None
        self._flow.after_paginated_batch()
