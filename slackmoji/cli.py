#!/usr/bin/env python3
# -----------------------------------------------------------------------------
# slack workspace custom emoji backup/restore tool
# 2022 A. Shavykin <0.delameter@gmail.com>
# -----------------------------------------------------------------------------
# Export all custom emojis of a workspace into a directory:
#    slackmoji -w myteam export ./.slack-backup/emoji/
# Upload them back (to the same or another workspace):
#    slackmoji -w otherteam import ./.slack-backup/emoji/
# SLACK_USER_TOKEN (and optionally SLACK_COOKIE, SLACK_WORKSPACE) are read
# from environment or .env file.
# -----------------------------------------------------------------------------
from __future__ import annotations

import locale
import sys
from argparse import ArgumentParser, Namespace, RawDescriptionHelpFormatter
from typing import List

from slackmoji.config import Config
from slackmoji.core.exception_handler import ExceptionHandler
from slackmoji.core.logger import Logger
from slackmoji.core.rate_limited_requester import RateLimitedRequester
from slackmoji.core.req_seq_printer import RequestSequencePrinter
from slackmoji.emoji_sync import EmojiSync, SyncReport
from slackmoji.slack_client import SlackClient


# noinspection PyMethodMayBeStatic
class SlackmojiCli:
    ACTION_EXPORT = 'export'
    ACTION_IMPORT = 'import'

    def __init__(self, argv: List[str]|None = None):
        locale.setlocale(locale.LC_ALL, '')

        self.argv = argv
        self.args: Namespace
        self.logger = Logger.get_instance()

    def run(self):
        _handler = ExceptionHandler(self.logger)
        try:
            exit_code = self._invoke()
        except Exception as e:
            _handler.handle(e)
            return
        print()
        sys.exit(exit_code)

    def _parse_args(self) -> Namespace:
        parser = ArgumentParser(
            prog='slackmoji',
            description='Backup and restore Slack workspace custom emojis',
            formatter_class=RawDescriptionHelpFormatter,
            epilog='\n'.join([
                'RATE LIMITING',
                'Uploads are retried up to 3 times when Slack responds with "Retry-After" header, waiting for '
                'the amount of seconds dictated by the server. Each upload is followed by 1 second pause.',
            ]),
        )
        parser.add_argument('-w', '--workspace', metavar='<NAME>',
                            help='workspace subdomain (<NAME>.slack.com), overrides SLACK_WORKSPACE')
        parser.add_argument('--page-size', metavar='<N>', type=int,
                            help='emojis per list request (default 100), overrides SLACKMOJI_PAGE_SIZE')
        parser.add_argument('--env-file', metavar='<FILE>', help='file to load environment variables from')
        parser.add_argument('-v', '--verbose', action='store_true', help='provide detailed output')

        subparsers = parser.add_subparsers(dest='action', metavar='<action>', required=True)
        export_parser = subparsers.add_parser(self.ACTION_EXPORT, help='download all custom emojis into <dir>')
        export_parser.add_argument('directory', metavar='<dir>', help='directory where images will be saved')
        import_parser = subparsers.add_parser(self.ACTION_IMPORT, help='upload all emojis from <dir>')
        import_parser.add_argument('directory', metavar='<dir>', help='directory to read images from')

        return parser.parse_args(self.argv)

    def _invoke(self) -> int:
        self.args = self._parse_args()
        self.logger.verbose = self.args.verbose

        config = Config.load(self.args.env_file, self.args.workspace, self.args.page_size)
        self.logger.debug(f'Loaded configuration: {config!r}')

        printer = RequestSequencePrinter()
        client = SlackClient(config.token, config.workspace, config.cookie,
                             requester=RateLimitedRequester(printer))
        emoji_sync = EmojiSync(client, page_size=config.page_size, flow=printer)

        report: SyncReport
        if self.args.action == self.ACTION_EXPORT:
            report = emoji_sync.export_emojis(self.args.directory)
        else:
            report = emoji_sync.import_emojis(self.args.directory)

        return 0 if report.ok else ExceptionHandler.EXIT_CODE_FAILURE


def main():
    SlackmojiCli().run()


if __name__ == '__main__':
    main()
