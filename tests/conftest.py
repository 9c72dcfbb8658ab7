"""Test configuration and fixtures"""

import tempfile
from pathlib import Path
from unittest.mock import Mock

import pytest

from ytmweb.config.auth import AuthSignature, Cookie, MemoryCookieProvider
from ytmweb.ytmusic.cache import ResponseCache
from ytmweb.ytmusic.executor import RequestExecutor
from ytmweb.ytmusic.retry import RetryPolicy

ORIGIN = "https://music.youtube.com"
NOW = 1700000000.0


@pytest.fixture
def temp_dir():
    """Create temporary directory for tests"""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)


@pytest.fixture
def clock():
    """Settable clock: call it for the time, assign .now to move it"""
    class Clock:
        now = NOW

        def __call__(self):
            return self.now

    return Clock()


@pytest.fixture
def cookie_provider():
    """In-memory provider holding a valid session"""
    return MemoryCookieProvider([
        Cookie(name="SAPISID", value="secret123", domain=".youtube.com", expires=NOW + 3600),
        Cookie(name="HSID", value="hsid", domain=".youtube.com", expires=NOW + 3600),
        Cookie(name="OTHER", value="x", domain=".example.com", expires=NOW + 3600),
    ])


@pytest.fixture
def signature(cookie_provider):
    return AuthSignature(cookie_provider, origin=ORIGIN, clock=lambda: NOW, domain="youtube.com")


def make_response(status_code=200, json_data=None, json_error=False):
    """Fake requests.Response"""
    response = Mock()
    response.status_code = status_code
    if json_error:
        response.json.side_effect = ValueError("Expecting value")
    else:
        response.json.return_value = {} if json_data is None else json_data
    return response


@pytest.fixture
def response_factory():
    return make_response


@pytest.fixture
def fake_session():
    """Fake requests.Session answering 200 {} unless told otherwise"""
    session = Mock()
    session.headers = {}
    session.post.return_value = make_response(200, {})
    return session


@pytest.fixture
def no_sleep_policy():
    return RetryPolicy(max_attempts=3, base_delay=1.0, backoff=2.0, max_delay=8.0, sleep=Mock())


@pytest.fixture
def executor(signature, fake_session, no_sleep_policy):
    """Executor over the fake session with an empty cache"""
    return RequestExecutor(
        signature,
        session_owner=Mock(),
        cache=ResponseCache(50),
        retry_policy=no_sleep_policy,
        session=fake_session,
    )


class Docs:
    """Builders for the JSON shapes the API returns"""

    @staticmethod
    def run(text, browse_id=None, page_type=None):
        run = {"text": text}
        if browse_id:
            endpoint = {"browseId": browse_id}
            if page_type:
                endpoint["browseEndpointContextSupportedConfigs"] = {
                    "browseEndpointContextMusicConfig": {"pageType": page_type}
                }
            run["navigationEndpoint"] = {"browseEndpoint": endpoint}
        return run

    @staticmethod
    def thumbnail(*urls):
        return {"musicThumbnailRenderer": {"thumbnail": {"thumbnails": [{"url": url} for url in urls]}}}

    @staticmethod
    def flex_column(runs):
        return {"musicResponsiveListItemFlexColumnRenderer": {"text": {"runs": runs}}}

    @classmethod
    def song_row(cls, video_id, title, artist_runs=None, duration=None, album=None, thumbnails=None,
                 menu=None):
        """musicResponsiveListItemRenderer for a playable track"""
        flex = [cls.flex_column([{"text": title}]), cls.flex_column(artist_runs or [])]
        if album:
            flex.append(cls.flex_column([cls.run(album[1], album[0])]))
        renderer = {"flexColumns": flex}
        if video_id:
            renderer["playlistItemData"] = {"videoId": video_id}
        if duration:
            renderer["fixedColumns"] = [
                {"musicResponsiveListItemFixedColumnRenderer": {"text": {"runs": [{"text": duration}]}}}
            ]
        if thumbnails:
            renderer["thumbnail"] = cls.thumbnail(*thumbnails)
        if menu:
            renderer["menu"] = menu
        return {"musicResponsiveListItemRenderer": renderer}

    @classmethod
    def list_row(cls, browse_id, title, subtitle_runs, page_type=None):
        """Non-playable row linking to a browse page"""
        endpoint = {"browseId": browse_id}
        if page_type:
            endpoint["browseEndpointContextSupportedConfigs"] = {
                "browseEndpointContextMusicConfig": {"pageType": page_type}
            }
        return {"musicResponsiveListItemRenderer": {
            "flexColumns": [cls.flex_column([{"text": title}]), cls.flex_column(subtitle_runs)],
            "navigationEndpoint": {"browseEndpoint": endpoint},
        }}

    @classmethod
    def card(cls, title, browse_id=None, subtitle_runs=None, video_id=None, thumbnails=None):
        """musicTwoRowItemRenderer"""
        renderer = {"title": {"runs": [{"text": title}]}, "subtitle": {"runs": subtitle_runs or []}}
        if browse_id:
            renderer["navigationEndpoint"] = {"browseEndpoint": {"browseId": browse_id}}
        elif video_id:
            renderer["navigationEndpoint"] = {"watchEndpoint": {"videoId": video_id}}
        if thumbnails:
            renderer["thumbnailRenderer"] = cls.thumbnail(*thumbnails)
        return {"musicTwoRowItemRenderer": renderer}

    @staticmethod
    def carousel(title, contents):
        return {"musicCarouselShelfRenderer": {
            "header": {"musicCarouselShelfBasicHeaderRenderer": {"title": {"runs": [{"text": title}]}}},
            "contents": contents,
        }}

    @staticmethod
    def shelf(title, contents, continuation=None, title_run=None):
        renderer = {"title": {"runs": [title_run or {"text": title}]}, "contents": contents}
        if continuation:
            renderer["continuations"] = [{"nextContinuationData": {"continuation": continuation}}]
        return {"musicShelfRenderer": renderer}

    @staticmethod
    def single_column(sections, continuation=None, header=None):
        section_list = {"contents": sections}
        if continuation:
            section_list["continuations"] = [{"nextContinuationData": {"continuation": continuation}}]
        doc = {"contents": {"singleColumnBrowseResultsRenderer": {"tabs": [
            {"tabRenderer": {"content": {"sectionListRenderer": section_list}}}
        ]}}}
        if header:
            doc["header"] = header
        return doc

    @staticmethod
    def section_continuation(sections, continuation=None):
        body = {"contents": sections}
        if continuation:
            body["continuations"] = [{"nextContinuationData": {"continuation": continuation}}]
        return {"continuationContents": {"sectionListContinuation": body}}

    @staticmethod
    def search_results(sections):
        return {"contents": {"tabbedSearchResultsRenderer": {"tabs": [
            {"tabRenderer": {"content": {"sectionListRenderer": {"contents": sections}}}}
        ]}}}


@pytest.fixture
def docs():
    return Docs
