"""
Response parsers for YouTube Music browse, search and next documents

Every parser is a pure function from a decoded JSON document to domain
models. Parsers never raise on unexpected shapes: missing fields fall
back to defaults and unparseable items are skipped, so a layout change
upstream degrades output instead of failing the call.

Modules:
- helpers: safe navigation and ordered extractor tuples per field
- items: single rows and cards, classified by browse id
- home: home and explore feeds with section continuations
- search: search results and suggestions
- playlist: playlist/album pages, track continuations, library grid
- artist: artist pages and the full songs list
- lyrics: lyrics tab discovery and lyrics text
"""

from .artist import parse_artist, parse_artist_songs
from .home import (
    extract_continuation_from_continuation, extract_home_continuation,
    parse_home, parse_home_continuation,
)
from .lyrics import extract_lyrics_browse_id, parse_lyrics
from .playlist import (
    extract_playlist_continuation, extract_playlist_continuation_from_continuation,
    parse_library_playlists, parse_playlist, parse_playlist_continuation,
)
from .search import parse_search, parse_suggestions

__all__ = [
    # Feeds
    'parse_home',
    'parse_home_continuation',
    'extract_home_continuation',
    'extract_continuation_from_continuation',

    # Search
    'parse_search',
    'parse_suggestions',

    # Playlists and albums
    'parse_playlist',
    'parse_playlist_continuation',
    'extract_playlist_continuation',
    'extract_playlist_continuation_from_continuation',
    'parse_library_playlists',

    # Artists
    'parse_artist',
    'parse_artist_songs',

    # Lyrics
    'extract_lyrics_browse_id',
    'parse_lyrics',
]
