# -----------------------------------------------------------------------------
# emoji export (slack -> archive dir) and import (archive dir -> slack) flows
# 2022 A. Shavykin <0.delameter@gmail.com>
# -----------------------------------------------------------------------------
from __future__ import annotations

from typing import List

from slackmoji.archive import ArchiveEntry, EmojiArchive
from slackmoji.core.errors import (ConfigurationFatal, ConflictSkipped, DownloadError, FetchError,
                                   OperationRejected, RetryExhausted, ScanError, TransportError)
from slackmoji.core.logger import Logger
from slackmoji.core.request_flow_interface import RequestFlowInterface, SilentRequestFlow
from slackmoji.emoji import AbstractEmoji, EmojiAlias, EmojiRegular
from slackmoji.emoji_paginator import EmojiPaginator
from slackmoji.reserved_names import ReservedNameSet
from slackmoji.util.io import fmt_sizeof

PER_ITEM_ERRORS = (RetryExhausted, OperationRejected, TransportError)


class SyncReport:
    def __init__(self, action: str):
        self.action = action
        self.processed = 0
        self.aliases = 0
        self.conflicts = 0
        self.failed = 0
        self.size = 0
        self.fatal: Exception|None = None

    @property
    def ok(self) -> bool:
        return self.fatal is None

    def summary(self) -> str:
        parts = [f'{self.action}: {self.processed:n}', f'aliases: {self.aliases:n}']
        if self.size:
            parts.append(f'size: {fmt_sizeof(self.size).strip()}')
        if self.conflicts:
            parts.append(f'conflicts: {self.conflicts:n}')
        parts.append(f'failed: {self.failed:n}')
        if self.fatal:
            parts.append('aborted')
        return ', '.join(parts)


class EmojiSync:
    def __init__(self,
                 client,
                 reserved_names: ReservedNameSet|None = None,
                 page_size: int = EmojiPaginator.DEFAULT_PAGE_SIZE,
                 flow: RequestFlowInterface|None = None):
        self._logger = Logger.get_instance()
        self._client = client
        self._reserved_names = reserved_names
        self._page_size = page_size
        self._flow = flow or SilentRequestFlow()

    # -----------------------------------------------------------------------------
    # export

    def export_emojis(self, directory: str) -> SyncReport:
        report = SyncReport('exported')
        archive = EmojiArchive(directory)
        archive.ensure_exists()
        self._logger.info(f'Exporting emojis to {archive.directory}')

        paginator = EmojiPaginator(self._client, self._page_size, self._flow)
        try:
            for emoji in paginator:
                try:
                    self._export_one(emoji, archive, report)
                except DownloadError as e:
                    report.failed += 1
                    self._logger.error(str(e))
        except FetchError as e:
            report.fatal = e
            self._logger.error(str(e))

        self._logger.info(f'Export finished ({paginator.requests_made:n} list requests): {report.summary()}')
        return report

    def _export_one(self, emoji: AbstractEmoji, archive: EmojiArchive, report: SyncReport):
        try:
            if isinstance(emoji, EmojiAlias):
                entry = archive.write_alias(emoji)
                report.aliases += 1
                self._logger.debug(f'Saved alias: {entry.filename} -> {emoji.alias_for_name}')
                return

            emoji_regular: EmojiRegular = emoji
            entry, content_size = archive.write(emoji_regular, self._client.download(emoji_regular))
        except (OSError, ValueError) as e:
            raise DownloadError(emoji.name, f'{e!s}') from e

        report.processed += 1
        report.size += content_size
        self._logger.debug(f'Writing done: {entry.filename} ({fmt_sizeof(content_size).strip()})')

    # -----------------------------------------------------------------------------
    # import

    def import_emojis(self, directory: str) -> SyncReport:
        report = SyncReport('uploaded')
        archive = EmojiArchive(directory)
        try:
            if not archive.exists():
                raise ConfigurationFatal(f'"{directory}" is not a directory')
        except OSError as e:
            raise ConfigurationFatal(f'Failed to check existence of directory "{directory}": {e!s}') from e

        reserved_names = self._reserved_names
        if reserved_names is None:
            reserved_names = ReservedNameSet.get_instance()
        self._logger.info(f'Importing emojis from {archive.directory}')

        aliases: List[ArchiveEntry] = []
        try:
            for entry in archive.scan():
                try:
                    self._check_conflict(entry, reserved_names)
                except ConflictSkipped as e:
                    report.conflicts += 1
                    self._logger.warn(str(e))
                    continue

                # aliases go last, their targets must be uploaded first
                if entry.is_alias:
                    aliases.append(entry)
                    continue
                self._import_one(entry, report)
        except ScanError as e:
            report.fatal = e
            self._logger.error(str(e))
            return report

        for entry in aliases:
            self._import_one(entry, report)

        self._logger.info(f'Import finished: {report.summary()}')
        return report

    def _check_conflict(self, entry: ArchiveEntry, reserved_names: ReservedNameSet):
        if entry.name in reserved_names:
            raise ConflictSkipped(entry.name)

    def _import_one(self, entry: ArchiveEntry, report: SyncReport):
        try:
            if entry.is_alias:
                self._client.add_alias(entry.name, entry.alias_for)
                report.aliases += 1
            else:
                self._client.upload_emoji(entry)
                report.processed += 1
        except PER_ITEM_ERRORS as e:
            report.failed += 1
            self._logger.error(str(e))
