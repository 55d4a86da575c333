# -----------------------------------------------------------------------------
# standard (unicode) emoji short codes, which can't be reused by custom emojis
# 2022 A. Shavykin <0.delameter@gmail.com>
# -----------------------------------------------------------------------------
from __future__ import annotations

import os
from typing import FrozenSet, Iterable

from slackmoji.core.logger import Logger


class ReservedNameSet:
    DEFAULT_SOURCE = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'emoji_standard_shortcodes.txt')
    COMMENT_CHAR = '#'

    _instance: ReservedNameSet = None

    @classmethod
    def get_instance(cls) -> ReservedNameSet:
        if cls._instance is None:
            cls._instance = cls.from_file(cls.DEFAULT_SOURCE)
        return cls._instance

    @classmethod
    def from_file(cls, filepath: str) -> ReservedNameSet:
        try:
            with open(filepath, 'r', encoding='utf-8') as fp:
                names = [line.split(cls.COMMENT_CHAR, 1)[0].strip() for line in fp]
        except OSError as e:
            raise RuntimeError(f'Reading failed: {filepath}') from e

        instance = cls(name for name in names if name)
        Logger.get_instance().debug(f'Loaded {len(instance):n} standard emoji short codes from {filepath}')
        return instance

    def __init__(self, names: Iterable[str]):
        self._names: FrozenSet[str] = frozenset(name.strip(':') for name in names)

    def __contains__(self, name: str) -> bool:
        return name in self._names

    def __len__(self) -> int:
        return len(self._names)
