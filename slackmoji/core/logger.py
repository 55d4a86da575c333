# 2022 A. Shavykin <0.delameter@gmail.com>
# ----------------------------------------
from __future__ import annotations

import os
import sys
import time
from datetime import datetime
from typing import Optional, TextIO

from slackmoji.util.sgr import SGRRegistry


class Logger:
    PREFIX = 'SLACKMOJI'
    ENV_LOG_FILE = 'SLACKMOJI_LOG_FILE'

    _instance: Logger = None

    @classmethod
    def get_instance(cls, require_new: bool = False, *args, **kwargs) -> Logger:
        if cls._instance and not require_new:
            return cls._instance
        if cls._instance:
            cls._instance.close_io()
        cls._instance = cls(*args, **kwargs)
        return cls._instance

    def __init__(self, filename: str|None = None, verbose: bool = False):
        self.verbose = verbose

        self._buf = ''
        self._fileio: Optional[TextIO] = None

        self._open_io(filename)
        self.debug(f'Created logger instance')

    def log(self, text: str, level: str = 'info', buffered: bool = False):
        if buffered:
            self._buf += text
            return
        if not self._fileio or self._fileio.closed:
            return

        dt, micro = datetime.now().strftime("%Y-%m-%d %H:%M:%S.%f").rsplit('.', 1)
        print(f'{dt}.{micro:.3s} {self.PREFIX} {level.upper()}: {self._buf + text}',
              file=self._fileio, end='\n', flush=True)
        self._buf = ''

    def debug(self, text: str, silent: bool|None = None):
        if silent is None:
            silent = not self.verbose
        if not silent:
            print(SGRRegistry.FMT_CYAN.wrap(text), file=sys.stdout)
        self.log(text, 'debug')

    def info(self, text: str, silent: bool = False):
        if not silent:
            print(text, file=sys.stdout)
        self.log(text, 'info')

    def warn(self, text: str, silent: bool = False):
        if not silent:
            print(SGRRegistry.FMT_YELLOW.wrap(text), file=sys.stdout)
        self.log(text, 'warn')

    def error(self, text: str, silent: bool = False):
        if not silent:
            print(SGRRegistry.FMT_RED.wrap(text), file=sys.stderr)
        self.log(text, 'error')

    def _get_default_filename(self) -> str:
        return os.environ.get(self.ENV_LOG_FILE) or time.strftime("./log/log.%Y-%m-%d.log", time.gmtime())

    def _open_io(self, filename: str|None):
        log_filename = filename or self._get_default_filename()
        try:
            log_dir = os.path.dirname(log_filename)
            if log_dir:
                os.makedirs(log_dir, exist_ok=True)
            self._fileio = open(log_filename, 'a', encoding='utf-8')
        except OSError as e:
            print('WARNING: Opening log file {} failed: {}'.format(log_filename, e), file=sys.stderr)
            return
        self.debug(f'Opened log file for appending: {log_filename}')

    def close_io(self):
        if not self._fileio:
            return
        self._fileio.flush()
        self._fileio.close()
        self._fileio = None
