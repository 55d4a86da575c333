# -----------------------------------------------------------------------------
# bounded retry of rate-limited slack write requests
# 2022 A. Shavykin <0.delameter@gmail.com>
# -----------------------------------------------------------------------------
from __future__ import annotations

from time import sleep
from typing import Any, Callable

from requests import Response, RequestException

from slackmoji.core.errors import OperationRejected, RetryExhausted, TransportError
from slackmoji.core.logger import Logger
from slackmoji.core.request_flow_interface import RequestFlowInterface, SilentRequestFlow


class RateLimitedRequester:
    """
    Submits one logical write operation (emoji upload, alias creation) and
    keeps retrying while the server answers with a ``Retry-After`` header.

    ``request_fn`` is invoked once per attempt and must build the request from
    scratch every time: multipart bodies backed by a file stream can't be
    reused. ``describe_fn`` returns the operation key (emoji name or alias
    pair) used in the messages and errors.
    """

    MAX_RETRIES = 3
    COOLDOWN_SEC = 1
    RETRY_AFTER_HEADER = 'Retry-After'
    RETRY_AFTER_DEFAULT_SEC = 1
    HTTP_TOO_MANY_REQUESTS = 429

    def __init__(self, flow: RequestFlowInterface|None = None):
        self._logger = Logger.get_instance()
        self._flow = flow or SilentRequestFlow()
        self._req_num = 0

    def submit(self,
               request_fn: Callable[[], Response],
               describe_fn: Callable[[], str],
               operation: str,
               payload: Any = None) -> dict:
        self._req_num += 1
        self._flow.before_request(self._req_num)
        key = describe_fn()

        attempt_num = 0
        while True:
            self._flow.before_request_attempt(attempt_num + 1)
            try:
                response = request_fn()
            except (RequestException, OSError) as e:
                self._flow.on_request_failure(attempt_num + 1, f'{e!s}')
                raise TransportError(operation, key, f'{e!s}') from e
            self._flow.on_request_completion(response.ok, str(response.status_code))

            retry_after_sec = self._get_retry_after(response, operation, key)
            if retry_after_sec is None:
                break
            if attempt_num >= self.MAX_RETRIES:
                raise RetryExhausted(operation, key, attempt_num + 1, payload)

            attempt_num += 1
            self._logger.debug(f'[ReqManager] Hit rate-limit on {operation} {key}; '
                               f'retrying in {retry_after_sec} seconds')
            self._flow.on_rate_limited(attempt_num, retry_after_sec)
            self._sleep(retry_after_sec)

        result = self._parse_result(response, operation, key)
        self._sleep(self.COOLDOWN_SEC)

        if not result.get('ok') or result.get('error'):
            raise OperationRejected(operation, key, str(result.get('error') or 'unknown_error'))
        return result

    @property
    def requests_submitted(self) -> int:
        return self._req_num

    def _get_retry_after(self, response: Response, operation: str, key: str) -> int|None:
        header = response.headers.get(self.RETRY_AFTER_HEADER)
        if header is None:
            if response.status_code == self.HTTP_TOO_MANY_REQUESTS:
                return self.RETRY_AFTER_DEFAULT_SEC
            return None
        try:
            return max(0, int(str(header).strip()))
        except ValueError as e:
            raise TransportError(operation, key, f'Invalid {self.RETRY_AFTER_HEADER} header: {header!r}') from e

    def _parse_result(self, response: Response, operation: str, key: str) -> dict:
        try:
            result = response.json()
        except ValueError as e:
            raise TransportError(operation, key,
                                 f'Unparseable response (HTTP {response.status_code})') from e
        if not isinstance(result, dict):
            raise TransportError(operation, key, f'Unexpected response: {result!r}')
        return result

    def _sleep(self, seconds: float):
        self._flow.before_sleeping(seconds)
        while seconds > 1:
            self._flow.sleep_iterator(seconds)
            seconds -= 1
            sleep(1)
        sleep(seconds)
        self._flow.after_sleeping()
