"""
YouTube Music web API integration package

This package talks to the same internal JSON API the YouTube Music web
player uses, authenticated with the browser session cookies of a signed-in
user. It is layered bottom-up:

1. **Request layer**
   - executor.py: RequestExecutor signs, sends and decodes one API call
   - retry.py: RetryPolicy with capped exponential backoff for transient errors
   - cache.py: ResponseCache, TTL + LRU bounded store of decoded responses

2. **Pagination**
   - paginator.py: ContinuationPaginator follows continuation tokens

3. **Parsing**
   - parsers/: pure functions from raw documents to domain models

4. **Client**
   - client.py: YTMusicClient, the high-level operations

The data model (models.py) and the error taxonomy (exceptions.py) are
exported here. The client lives in `ytmweb.ytmusic.client` and is imported
from there, since it depends on the config package which in turn uses the
exceptions defined here.

Usage:

    from ytmweb.ytmusic.client import get_ytmusic_client

    client = get_ytmusic_client()
    home = client.get_home()
    for section in home.sections:
        print(section.title, len(section.items))
"""

from .exceptions import (
    YTMusicError,
    NotAuthenticated,
    AuthExpired,
    NetworkError,
    ApiError,
    ParseError,
    UnknownError,
    RequestCancelled,
)
from .models import (
    ItemKind,
    LikeStatus,
    Artist,
    Album,
    FeedbackTokens,
    Song,
    Playlist,
    PlaylistDetail,
    ArtistDetail,
    HomeSectionItem,
    HomeSection,
    HomeResponse,
    SearchResponse,
    SearchSuggestion,
    Lyrics,
)

__all__ = [
    # === ERRORS ===
    'YTMusicError',
    'NotAuthenticated',
    'AuthExpired',
    'NetworkError',
    'ApiError',
    'ParseError',
    'UnknownError',
    'RequestCancelled',

    # === MODELS ===
    'ItemKind',
    'LikeStatus',
    'Artist',
    'Album',
    'FeedbackTokens',
    'Song',
    'Playlist',
    'PlaylistDetail',
    'ArtistDetail',
    'HomeSectionItem',
    'HomeSection',
    'HomeResponse',
    'SearchResponse',
    'SearchSuggestion',
    'Lyrics',
]
