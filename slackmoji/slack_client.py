# -----------------------------------------------------------------------------
# slack web api transport for emoji endpoints
# 2022 A. Shavykin <0.delameter@gmail.com>
# -----------------------------------------------------------------------------
from __future__ import annotations

from typing import Iterator

import requests
from requests import Response, RequestException

from slackmoji.archive import ArchiveEntry
from slackmoji.core.errors import DownloadError, FetchError
from slackmoji.core.logger import Logger
from slackmoji.core.rate_limited_requester import RateLimitedRequester
from slackmoji.emoji import EmojiFactory, EmojiRegular
from slackmoji.emoji_paginator import EmojiPage


class SlackClient:
    BASE_URL_TPL = 'https://{}.slack.com/api'
    ENDPOINT_LIST = 'emoji.adminList'
    ENDPOINT_ADD = 'emoji.add'

    TIMEOUT = (10, 30)
    DOWNLOAD_CHUNK_SIZE = 1024 * 1024

    def __init__(self,
                 token: str,
                 workspace: str,
                 cookie: str|None = None,
                 session: requests.Session|None = None,
                 requester: RateLimitedRequester|None = None):
        self._logger = Logger.get_instance()
        self._emoji_factory = EmojiFactory()

        self.token = token
        self.base_url = self.BASE_URL_TPL.format(workspace)
        self.session = session or requests.Session()
        if cookie:
            self.session.headers.update({'cookie': cookie})
        self.requester = requester or RateLimitedRequester()

    def generate_url(self, endpoint: str) -> str:
        return f'{self.base_url}/{endpoint}'

    # -----------------------------------------------------------------------------
    # listing

    def fetch_emoji_page(self, page: int, count: int) -> EmojiPage:
        url = self.generate_url(self.ENDPOINT_LIST)
        self._logger.debug(f'Fetching: {url} (page {page}, count {count})')
        try:
            response: Response = self.session.post(
                url,
                data={'token': self.token, 'page': page, 'count': count},
                timeout=self.TIMEOUT,
            )
            d = response.json()
        except RequestException as e:
            raise FetchError(page, f'{e!s}') from e
        except ValueError as e:
            raise FetchError(page, f'Unparseable response (HTTP {response.status_code})') from e

        if not isinstance(d, dict):
            raise FetchError(page, f'Unexpected response: {d!r}')
        if not d.get('ok'):
            raise FetchError(page, f'API error encountered: {d.get("error", d)!s}')

        try:
            emojis = [self._emoji_factory.from_api_entry(entry) for entry in d['emoji']]
            paging = d.get('paging') or {}
            return EmojiPage(
                emojis,
                page=int(paging.get('page', page)),
                pages=int(paging.get('pages', page)),
                total=paging.get('total'),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise FetchError(page, f'Response processing error: {e!r}') from e

    # -----------------------------------------------------------------------------
    # images

    def download(self, emoji: EmojiRegular) -> Iterator[bytes]:
        self._logger.debug(f'Fetching: {emoji.url}')
        try:
            with self.session.get(emoji.url, timeout=self.TIMEOUT, stream=True) as response:
                response.raise_for_status()
                yield from response.iter_content(self.DOWNLOAD_CHUNK_SIZE)
        except RequestException as e:
            raise DownloadError(emoji.name, f'{e!s}') from e

    def upload_emoji(self, entry: ArchiveEntry) -> dict:
        def request_fn() -> Response:
            return self.session.post(
                self.generate_url(self.ENDPOINT_ADD),
                data={'mode': 'data', 'name': entry.name, 'token': self.token},
                files={'image': (entry.filename, entry.read_bytes())},
                timeout=self.TIMEOUT,
            )

        result = self.requester.submit(request_fn, lambda: f'emoji {entry.name}', 'upload', entry)
        self._logger.info(f'Uploaded emoji: {entry.name} ({entry.filename})')
        return result

    def add_alias(self, name: str, alias_for: str) -> dict:
        def request_fn() -> Response:
            return self.session.post(
                self.generate_url(self.ENDPOINT_ADD),
                data={'mode': 'alias', 'name': name, 'alias_for': alias_for, 'token': self.token},
                timeout=self.TIMEOUT,
            )

        result = self.requester.submit(request_fn, lambda: f"alias '{name}' for '{alias_for}'", 'add',
                                       {'name': name, 'alias_for': alias_for})
        self._logger.info(f"Added alias '{name}' for '{alias_for}'")
        return result
