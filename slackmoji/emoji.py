# -----------------------------------------------------------------------------
# slack custom emoji definitions
# 2022 A. Shavykin <0.delameter@gmail.com>
# -----------------------------------------------------------------------------
from __future__ import annotations

import abc
from os.path import splitext
from urllib.parse import urlparse


# noinspection PyMethodMayBeStatic
class EmojiFactory:
    def from_api_entry(self, entry: dict) -> AbstractEmoji:
        name = entry['name']
        if entry.get('is_alias'):
            alias_for = entry.get('alias_for')
            if not alias_for:
                raise ValueError(f'Alias without target: {name}')
            return EmojiAlias(name, alias_for)

        url = entry.get('url')
        if not url or not str(url).startswith('http'):
            raise ValueError(f'Invalid/unknown URL type: {url} for {name}')
        return EmojiRegular(name, url)


class AbstractEmoji(metaclass=abc.ABCMeta):
    def __init__(self, name: str):
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    @property
    def is_regular(self) -> bool:
        return isinstance(self, EmojiRegular)

    @property
    def is_alias(self) -> bool:
        return isinstance(self, EmojiAlias)

    def __eq__(self, other) -> bool:
        return type(self) is type(other) and self.__dict__ == other.__dict__

    def __hash__(self) -> int:
        return hash((type(self), self._name))


class EmojiRegular(AbstractEmoji):
    def __init__(self, name: str, url: str|None = None):
        super(EmojiRegular, self).__init__(name)
        self._url: str|None = url

    @property
    def url(self) -> str|None:
        return self._url

    @property
    def extension(self) -> str:
        if not self._url:
            return ''
        return splitext(urlparse(self._url).path)[1]

    def __repr__(self) -> str:
        return f'EmojiRegular(name={self._name!r}, url={self._url!r})'


class EmojiAlias(AbstractEmoji):
    def __init__(self, name: str, alias_for_name: str):
        super(EmojiAlias, self).__init__(name)
        self._alias_for_name: str = alias_for_name

    @property
    def alias_for_name(self) -> str:
        return self._alias_for_name

    def __repr__(self) -> str:
        return f'EmojiAlias(name={self._name!r}, alias_for={self._alias_for_name!r})'
