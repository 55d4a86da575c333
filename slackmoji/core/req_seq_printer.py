# -----------------------------------------------------------------------------
# compact line-by-line output of repetitive network requests
# 2022 A. Shavykin <0.delameter@gmail.com>
# -----------------------------------------------------------------------------
from __future__ import annotations

import sys
from math import trunc

from slackmoji.core.logger import Logger
from slackmoji.core.request_flow_interface import RequestFlowInterface
from slackmoji.util.io import fmt_sizeof, get_terminal_width, AutoFloat
from slackmoji.util.sgr import SGRRegistry, SGRSequence


# noinspection PyAttributeOutsideInit
class RequestSequencePrinter(RequestFlowInterface):
    INDENT = 3 * ' '

    def __init__(self, stream=None):
        self._logger = Logger.get_instance()
        self._stream = stream or sys.stdout
        self.reinit()

    def reinit(self, requests_estimated: int = None):
        self._requests_estimated: int|None = requests_estimated
        self._requests_successful = 0
        self._request_num = 0
        self._attempt_num = 0
        self._response_size_sum = 0
        self._waiting_line = False

    # -----------------------------------------------------------------------------
    # event handlers

    def before_paginated_batch(self, url: str):
        self._print('Data provider: ' + SGRRegistry.FMT_BLUE.wrap(url))
        self.print_separator()

    def after_paginated_batch(self):
        self.print_separator()
        self._logger.debug(f'[ReqPrinter] Batch done: {self._requests_successful:n} ok of '
                           f'{self._request_num:n} requests, {fmt_sizeof(self._response_size_sum).strip()}',
                           silent=True)

    def before_request(self, request_num: int):
        self._request_num = request_num

    def before_request_attempt(self, attempt_num: int):
        self._attempt_num = attempt_num

    def on_request_failure(self, attempt_num: int, msg: str):
        self.print_event(SGRRegistry.FMT_RED.wrap(f'Error: {msg}'), persist=True)

    def on_request_completion(self, request_ok: bool, status_code: str, size_b: int = 0):
        if request_ok:
            self._requests_successful += 1
            self._response_size_sum += size_b
        self._render(request_ok, status_code)

    def on_rate_limited(self, attempt_num: int, retry_after_sec: float):
        self.print_event(f'{SGRRegistry.FMT_YELLOW}Rate limited (retry {attempt_num}), '
                         f'server asks to wait {retry_after_sec:.0f}s{SGRRegistry.FMT_RESET}', persist=True)

    def before_sleeping(self, delay_sec: float):
        self._logger.debug(f'[ReqPrinter] Waiting for {delay_sec:.2f}s', silent=True)

    def sleep_iterator(self, seconds_left: float):
        self._print('\r' + SGRSequence(36, 1).wrap('W') + f' {trunc(seconds_left):>3d}s left', end='')
        self._waiting_line = True

    def after_sleeping(self):
        if self._waiting_line:
            self._print('\r' + ' ' * min(40, get_terminal_width()) + '\r', end='')
            self._waiting_line = False

    def print_event(self, event_msg: str, persist: bool = False):
        self._logger.debug('[ReqPrinter] ' + SGRRegistry.remove_sgr_seqs(event_msg), silent=True)
        if persist:
            self._print(f'{self.INDENT}{event_msg}')

    def print_separator(self):
        self._print('─' * min(80, get_terminal_width()))

    # -----------------------------------------------------------------------------

    def _render(self, request_ok: bool, status_code: str):
        attempt_marker = ' '
        if self._attempt_num > 1:
            attempt_marker = SGRRegistry.FMT_BOLD.wrap(SGRRegistry.FMT_RED.wrap('R'))
        status_fmt = SGRRegistry.FMT_GREEN if request_ok else SGRRegistry.FMT_RED

        self._print(f'{SGRSequence(1, 97)}#{self._request_num:<4d}{SGRRegistry.FMT_RESET}'
                    f'{attempt_marker}{self.INDENT}'
                    f'{status_fmt}{status_code:>3s}{SGRRegistry.FMT_RESET}{self.INDENT}'
                    f'{self._format_progress()}{self.INDENT}'
                    f'{fmt_sizeof(self._response_size_sum):>8s}')

    def _format_progress(self) -> str:
        if not self._requests_estimated:
            return SGRRegistry.FMT_GRAY.wrap('--- %')
        perc = 100.0 * min(1.0, self._requests_successful / self._requests_estimated)
        return f'{AutoFloat(perc):>4f}%'

    def _print(self, s: str, end: str = '\n'):
        print(s, end=end, file=self._stream, flush=True)
