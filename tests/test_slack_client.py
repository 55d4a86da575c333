"""
SlackClient tests: request shapes and response handling against a fake session.
"""
import pytest
import requests

from conftest import FakeResponse, accepted, throttled
from slackmoji.archive import EmojiArchive
from slackmoji.core.errors import DownloadError, FetchError, RetryExhausted
from slackmoji.emoji import EmojiAlias, EmojiRegular
from slackmoji.slack_client import SlackClient


class FakeSession:
    def __init__(self, responses=()):
        self.headers = {}
        self.responses = list(responses)
        self.calls = []

    def _next(self):
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    def post(self, url, **kwargs):
        self.calls.append(('POST', url, kwargs))
        return self._next()

    def get(self, url, **kwargs):
        self.calls.append(('GET', url, kwargs))
        return self._next()


def list_response(entries, page=1, pages=1, total=None):
    return FakeResponse(200, {
        'ok': True,
        'emoji': entries,
        'paging': {'count': 100, 'total': total or len(entries), 'page': page, 'pages': pages},
    })


@pytest.fixture
def archive_entry(tmp_path):
    archive = EmojiArchive(str(tmp_path))
    entry, _ = archive.write(EmojiRegular('team_mascot', 'https://x/team_mascot/a.png'), [b'PNGDATA'])
    return entry


class TestListing:

    def test_fetch_page(self):
        session = FakeSession([list_response([
            {'name': 'parrot', 'is_alias': 0, 'alias_for': '', 'url': 'https://emoji.slack-edge.com/T0/parrot/1.gif'},
            {'name': 'pp', 'is_alias': 1, 'alias_for': 'parrot', 'url': 'https://emoji.slack-edge.com/T0/pp/1.gif'},
        ], page=1, pages=3, total=250)])
        client = SlackClient('xoxp-1', 'myteam', session=session)

        page = client.fetch_emoji_page(1, 100)

        assert page.emojis == [EmojiRegular('parrot', 'https://emoji.slack-edge.com/T0/parrot/1.gif'),
                               EmojiAlias('pp', 'parrot')]
        assert page.next_page == 2
        assert page.total == 250
        method, url, kwargs = session.calls[0]
        assert url == 'https://myteam.slack.com/api/emoji.adminList'
        assert kwargs['data'] == {'token': 'xoxp-1', 'page': 1, 'count': 100}

    def test_last_page(self):
        client = SlackClient('t', 'w', session=FakeSession([list_response([], page=3, pages=3)]))
        assert client.fetch_emoji_page(3, 100).next_page is None

    @pytest.mark.parametrize('response', [
        FakeResponse(200, {'ok': False, 'error': 'invalid_auth'}),
        FakeResponse(502, None),
        FakeResponse(200, {'ok': True}),
        FakeResponse(200, {'ok': True, 'emoji': [{'name': 'x', 'url': 'ftp://nope'}]}),
        requests.ConnectionError('connection reset'),
    ])
    def test_fetch_failures(self, response):
        client = SlackClient('t', 'w', session=FakeSession([response]))
        with pytest.raises(FetchError):
            client.fetch_emoji_page(2, 100)

    def test_cookie_header(self):
        session = FakeSession()
        SlackClient('xoxc-1', 'w', cookie='d=abc', session=session)
        assert session.headers['cookie'] == 'd=abc'


class TestDownload:

    def test_download_streams_content(self):
        session = FakeSession([FakeResponse(200, content=b'x' * 10)])
        client = SlackClient('t', 'w', session=session)

        chunks = list(client.download(EmojiRegular('a', 'https://emoji.slack-edge.com/a.png')))

        assert b''.join(chunks) == b'x' * 10
        assert session.calls[0][2]['stream'] is True

    def test_download_http_error(self):
        client = SlackClient('t', 'w', session=FakeSession([FakeResponse(404)]))
        with pytest.raises(DownloadError, match='404'):
            list(client.download(EmojiRegular('a', 'https://emoji.slack-edge.com/a.png')))


class TestUpload:

    def test_upload_form(self, archive_entry):
        session = FakeSession([accepted()])
        client = SlackClient('xoxp-1', 'myteam', session=session)

        client.upload_emoji(archive_entry)

        method, url, kwargs = session.calls[0]
        assert url == 'https://myteam.slack.com/api/emoji.add'
        assert kwargs['data'] == {'mode': 'data', 'name': 'team_mascot', 'token': 'xoxp-1'}
        assert kwargs['files'] == {'image': ('team_mascot.png', b'PNGDATA')}

    def test_upload_retries_with_fresh_form(self, archive_entry):
        session = FakeSession([throttled('1'), accepted()])
        client = SlackClient('t', 'w', session=session)

        client.upload_emoji(archive_entry)

        assert len(session.calls) == 2
        assert session.calls[0][2]['files'] == session.calls[1][2]['files']

    def test_upload_retry_exhausted(self, archive_entry):
        session = FakeSession([throttled('1')] * 4)
        client = SlackClient('t', 'w', session=session)

        with pytest.raises(RetryExhausted):
            client.upload_emoji(archive_entry)
        assert len(session.calls) == 4

    def test_add_alias_form(self):
        session = FakeSession([accepted()])
        client = SlackClient('xoxp-1', 'myteam', session=session)

        client.add_alias('pp', 'parrot')

        assert session.calls[0][2]['data'] == {
            'mode': 'alias', 'name': 'pp', 'alias_for': 'parrot', 'token': 'xoxp-1'}
