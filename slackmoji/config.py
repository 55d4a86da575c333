# -----------------------------------------------------------------------------
# credentials and workspace settings from environment / .env file
# 2022 A. Shavykin <0.delameter@gmail.com>
# -----------------------------------------------------------------------------
from __future__ import annotations

import os

from dotenv import load_dotenv

from slackmoji.core.errors import ConfigurationFatal
from slackmoji.emoji_paginator import EmojiPaginator


class Config:
    ENV_TOKEN = 'SLACK_USER_TOKEN'
    ENV_WORKSPACE = 'SLACK_WORKSPACE'
    ENV_COOKIE = 'SLACK_COOKIE'
    ENV_PAGE_SIZE = 'SLACKMOJI_PAGE_SIZE'
    DEFAULT_ENV_FILE = '.env'

    def __init__(self, token: str, workspace: str, cookie: str|None = None,
                 page_size: int = EmojiPaginator.DEFAULT_PAGE_SIZE):
        self.token = token
        self.workspace = workspace
        self.cookie = cookie
        self.page_size = page_size

    @classmethod
    def load(cls, env_file: str|None = None, workspace: str|None = None, page_size: int|None = None) -> Config:
        if env_file:
            if not os.path.isfile(env_file):
                raise ConfigurationFatal(f'Env file not found: {env_file}')
            load_dotenv(env_file)
        elif os.path.isfile(cls.DEFAULT_ENV_FILE):
            load_dotenv(cls.DEFAULT_ENV_FILE)

        try:
            token = os.environ[cls.ENV_TOKEN]
        except KeyError:
            raise ConfigurationFatal(f'Missing {cls.ENV_TOKEN} in environment variables')

        workspace = workspace or os.environ.get(cls.ENV_WORKSPACE)
        if not workspace:
            raise ConfigurationFatal(f'Workspace is not set; use --workspace or {cls.ENV_WORKSPACE}')

        if page_size is None:
            page_size = cls._parse_page_size(os.environ.get(cls.ENV_PAGE_SIZE))
        if page_size < 1:
            raise ConfigurationFatal(f'Page size should be a positive integer, got: {page_size}')

        return cls(token, workspace, os.environ.get(cls.ENV_COOKIE) or None, page_size)

    @classmethod
    def _parse_page_size(cls, value: str|None) -> int:
        if not value:
            return EmojiPaginator.DEFAULT_PAGE_SIZE
        try:
            return int(value)
        except ValueError:
            raise ConfigurationFatal(f'Invalid {cls.ENV_PAGE_SIZE} value: {value!r}')

    def __repr__(self) -> str:
        return f'Config(workspace={self.workspace!r}, page_size={self.page_size}, cookie={"set" if self.cookie else None})'
