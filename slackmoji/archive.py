# -----------------------------------------------------------------------------
# on-disk emoji archive: one flat directory, one file per emoji
# 2022 A. Shavykin <0.delameter@gmail.com>
# -----------------------------------------------------------------------------
from __future__ import annotations

import os
from os.path import splitext
from typing import Dict, Iterable, Iterator, List, Tuple

from slackmoji.core.errors import ScanError
from slackmoji.core.logger import Logger
from slackmoji.emoji import AbstractEmoji, EmojiAlias, EmojiRegular


class ArchiveEntry:
    def __init__(self, emoji: AbstractEmoji, filename: str, filepath: str):
        self._emoji = emoji
        self._filename = filename
        self._filepath = filepath

    @property
    def emoji(self) -> AbstractEmoji:
        return self._emoji

    @property
    def name(self) -> str:
        return self._emoji.name

    @property
    def is_alias(self) -> bool:
        return self._emoji.is_alias

    @property
    def alias_for(self) -> str|None:
        if isinstance(self._emoji, EmojiAlias):
            return self._emoji.alias_for_name
        return None

    @property
    def filename(self) -> str:
        return self._filename

    @property
    def filepath(self) -> str:
        return self._filepath

    def read_bytes(self) -> bytes:
        with open(self._filepath, 'rb') as fp:
            return fp.read()

    def __repr__(self) -> str:
        return f'ArchiveEntry(name={self.name!r}, filename={self._filename!r})'


class EmojiArchive:
    """
    Emoji name is recoverable from the file name alone: ``<name><ext>``, where
    ext is taken from the image URL path. Aliases are stored as
    ``<name>.alias`` files holding the target emoji name.
    """

    ALIAS_EXTENSION = '.alias'
    DEFAULT_EXTENSION = '.png'
    ALIAS_ENCODING = 'utf-8'
    PARTIAL_SUFFIX = '.part'  # hidden, skipped by scan

    def __init__(self, directory: str):
        self._logger = Logger.get_instance()
        self._directory = os.path.abspath(os.path.expanduser(directory))
        self._index: Dict[str, List[str]]|None = None  # name -> filenames

    @property
    def directory(self) -> str:
        return self._directory

    def exists(self) -> bool:
        try:
            os.stat(self._directory)
        except FileNotFoundError:
            return False
        return os.path.isdir(self._directory)

    def ensure_exists(self):
        os.makedirs(self._directory, exist_ok=True)

    def filename_for(self, emoji: AbstractEmoji) -> str:
        self._validate_name(emoji.name)
        if isinstance(emoji, EmojiAlias):
            return emoji.name + self.ALIAS_EXTENSION

        emoji_regular: EmojiRegular = emoji
        extension = emoji_regular.extension
        if not extension or extension == self.ALIAS_EXTENSION:
            extension = self.DEFAULT_EXTENSION
        return emoji.name + extension

    def filepath_for(self, emoji: AbstractEmoji) -> str:
        return os.path.join(self._directory, self.filename_for(emoji))

    def write(self, emoji: AbstractEmoji, chunks: Iterable[bytes]) -> Tuple[ArchiveEntry, int]:
        filename = self.filename_for(emoji)
        filepath = os.path.join(self._directory, filename)
        self._load_index()

        partial_filepath = os.path.join(self._directory, f'.{filename}{self.PARTIAL_SUFFIX}')

        self._logger.debug(f'Writing: {filepath}')
        content_size = 0
        try:
            with open(partial_filepath, 'wb') as fp:
                for chunk in chunks:
                    if not chunk:
                        continue
                    fp.write(chunk)
                    content_size += len(chunk)
                fp.flush()
                os.fsync(fp.fileno())
            os.replace(partial_filepath, filepath)
        except BaseException:
            self._remove_quietly(partial_filepath)
            raise

        self._replace_in_index(emoji.name, filename)
        return ArchiveEntry(emoji, filename, filepath), content_size

    def write_alias(self, emoji: EmojiAlias) -> ArchiveEntry:
        entry, _ = self.write(emoji, [emoji.alias_for_name.encode(self.ALIAS_ENCODING)])
        return entry

    def scan(self) -> Iterator[ArchiveEntry]:
        try:
            dir_entries = sorted(os.scandir(self._directory), key=lambda e: e.name)
        except OSError as e:
            raise ScanError(f'Failed to read directory "{self._directory}": {e!s}') from e

        seen_names = set()
        for dir_entry in dir_entries:
            try:
                if not dir_entry.is_file():
                    continue
            except OSError as e:
                self._logger.warn(f'Skipping unreadable archive entry: {dir_entry.name} ({e!s})')
                continue

            entry = self._parse_entry(dir_entry.name, dir_entry.path)
            if entry is None:
                continue
            if entry.name in seen_names:
                self._logger.warn(f'Skipping duplicate file for emoji "{entry.name}": {entry.filename}')
                continue
            seen_names.add(entry.name)
            yield entry

    def _parse_entry(self, filename: str, filepath: str) -> ArchiveEntry|None:
        name, extension = splitext(filename)
        if filename.startswith('.') or not extension:
            self._logger.warn(f'Skipping file not matching emoji naming scheme: {filename}')
            return None
        try:
            self._validate_name(name)
        except ValueError as e:
            self._logger.warn(f'Skipping file: {e!s}')
            return None

        if extension != self.ALIAS_EXTENSION:
            return ArchiveEntry(EmojiRegular(name), filename, filepath)

        try:
            with open(filepath, 'r', encoding=self.ALIAS_ENCODING) as fp:
                alias_for = fp.read().strip()
        except (OSError, UnicodeDecodeError) as e:
            self._logger.warn(f'Skipping unreadable alias file {filename}: {e!s}')
            return None
        if not alias_for:
            self._logger.warn(f'Skipping alias file without target: {filename}')
            return None
        return ArchiveEntry(EmojiAlias(name, alias_for), filename, filepath)

    def _load_index(self):
        if self._index is not None:
            return
        self._index = {}
        with os.scandir(self._directory) as it:
            for dir_entry in it:
                if dir_entry.is_file() and not dir_entry.name.startswith('.'):
                    self._index.setdefault(splitext(dir_entry.name)[0], []).append(dir_entry.name)

    def _replace_in_index(self, name: str, filename: str):
        for stale_filename in self._index.get(name, []):
            if stale_filename == filename:
                continue
            self._logger.debug(f'Removing stale file: {stale_filename}')
            self._remove_quietly(os.path.join(self._directory, stale_filename))
        self._index[name] = [filename]

    def _remove_quietly(self, filepath: str):
        try:
            os.remove(filepath)
        except FileNotFoundError:
            pass

    @staticmethod
    def _validate_name(name: str):
        if not name or name.startswith('.') or '/' in name or '\\' in name or '\0' in name:
            raise ValueError(f'Invalid emoji name for archive file: {name!r}')
