"""
YouTube Music client

High-level operations over the internal API. Each operation builds its
request body, runs it through the RequestExecutor (signing, caching,
retries) and hands the document to the matching parser. Feed-like pages
follow their continuation tokens through a ContinuationPaginator.

Mutations (ratings, library edits, subscriptions) are never cached and
drop every cached browse response on success, since library and liked
pages would otherwise show stale state.
"""

import threading
from typing import List, Optional

from ..config.auth import AuthService, get_auth
from ..config.settings import get_settings, Settings
from ..utils.logger import get_logger
from . import parsers
from .cache import CacheTTL, ResponseCache
from .executor import RequestExecutor
from .models import (
    Album, ArtistDetail, HomeResponse, LikeStatus, Lyrics, Playlist, PlaylistDetail,
    SearchResponse, SearchSuggestion, Song, is_placeholder_id,
)
from .paginator import ContinuationPaginator
from .retry import RetryPolicy

HOME_BROWSE_ID = "FEmusic_home"
EXPLORE_BROWSE_ID = "FEmusic_explore"
LIBRARY_PLAYLISTS_BROWSE_ID = "FEmusic_liked_playlists"
LIKED_SONGS_PLAYLIST_ID = "LM"

# Browse ids used as-is; anything else is a bare playlist id that needs "VL"
PASSTHROUGH_PREFIXES = ("VL", "RD", "OLAK", "MPRE", "UC")

RATING_ENDPOINTS = {
    LikeStatus.LIKE: "like/like",
    LikeStatus.DISLIKE: "like/dislike",
    LikeStatus.INDIFFERENT: "like/removelike",
}

BROWSE_CACHE_PREFIX = "browse:"


def playlist_browse_id(playlist_id: str) -> str:
    """Map a playlist, album or mix id to the browse id of its page"""
    if playlist_id.startswith(PASSTHROUGH_PREFIXES):
        return playlist_id
    return f"VL{playlist_id}"


def strip_vl_prefix(playlist_id: str) -> str:
    return playlist_id[2:] if playlist_id.startswith("VL") else playlist_id


class YTMusicClient:
    """
    Client for the YouTube Music web API

    Args:
        executor: RequestExecutor performing the calls
        paginator: Paginator for continuation pages (built from settings if None)
        ttl: Cache lifetimes per operation class (read from settings if None)
    """

    def __init__(self, executor: RequestExecutor, paginator: Optional[ContinuationPaginator] = None,
                 ttl: Optional[CacheTTL] = None):
        self.settings = get_settings()
        self.logger = get_logger(__name__)
        self.executor = executor
        self.paginator = paginator or ContinuationPaginator(
            executor, max_continuations=self.settings.pagination.max_continuations
        )
        self.ttl = ttl or CacheTTL.from_settings()

    @property
    def cache(self) -> Optional[ResponseCache]:
        return self.executor.cache

    # --- feeds --------------------------------------------------------------

    def get_home(self, cancel_event: Optional[threading.Event] = None) -> HomeResponse:
        """Home feed with all continuation sections"""
        return self._get_feed(HOME_BROWSE_ID, "home", cancel_event)

    def get_explore(self, cancel_event: Optional[threading.Event] = None) -> HomeResponse:
        """Explore feed with all continuation sections"""
        return self._get_feed(EXPLORE_BROWSE_ID, "explore", cancel_event)

    def _get_feed(self, browse_id: str, name: str, cancel_event: Optional[threading.Event]) -> HomeResponse:
        self.logger.info(f"Fetching {name} page")
        data = self.executor.execute("browse", {"browseId": browse_id}, ttl=self.ttl.home,
                                     cancel_event=cancel_event)
        sections = self.paginator.collect(
            data,
            parsers.parse_home,
            parsers.extract_home_continuation,
            parsers.parse_home_continuation,
            parsers.extract_continuation_from_continuation,
            cancel_event=cancel_event,
        )
        self.logger.info(f"Total {name} sections after continuations: {len(sections)}")
        return HomeResponse(sections=sections)

    # --- search -------------------------------------------------------------

    def search(self, query: str, cancel_event: Optional[threading.Event] = None) -> SearchResponse:
        """
        Search songs, albums, artists and playlists

        Args:
            query: Search text; blank queries return an empty response without a request
            cancel_event: Optional event to abandon the call

        Returns:
            SearchResponse
        """
        if not query or not query.strip():
            return SearchResponse.empty()

        self.logger.info(f"Searching for: {query}")
        data = self.executor.execute("search", {"query": query}, ttl=self.ttl.search,
                                     cancel_event=cancel_event)
        response = parsers.parse_search(data)
        self.logger.info(
            f"Search found {len(response.songs)} songs, {len(response.albums)} albums, "
            f"{len(response.artists)} artists, {len(response.playlists)} playlists"
        )
        return response

    def get_search_suggestions(self, query: str,
                               cancel_event: Optional[threading.Event] = None) -> List[SearchSuggestion]:
        if not query or not query.strip():
            return []
        data = self.executor.execute("music/get_search_suggestions", {"input": query},
                                     ttl=self.ttl.search, cancel_event=cancel_event)
        return parsers.parse_suggestions(data)

    # --- library ------------------------------------------------------------

    def get_library_playlists(self, cancel_event: Optional[threading.Event] = None) -> List[Playlist]:
        """Playlists saved in the user's library"""
        self.logger.info("Fetching library playlists")
        data = self.executor.execute("browse", {"browseId": LIBRARY_PLAYLISTS_BROWSE_ID},
                                     cancel_event=cancel_event)
        playlists = parsers.parse_library_playlists(data)
        self.logger.info(f"Parsed {len(playlists)} library playlists")
        return playlists

    def get_liked_songs(self, cancel_event: Optional[threading.Event] = None) -> PlaylistDetail:
        """The auto-generated liked songs playlist"""
        return self.get_playlist(LIKED_SONGS_PLAYLIST_ID, cancel_event=cancel_event)

    # --- playlists ----------------------------------------------------------

    def get_playlist(self, playlist_id: str,
                     cancel_event: Optional[threading.Event] = None) -> PlaylistDetail:
        """
        Playlist or album page with all tracks

        Args:
            playlist_id: Playlist id (with or without VL), album id (MPRE/OLAK) or mix id (RD)
            cancel_event: Optional event to abandon the call

        Returns:
            PlaylistDetail; the playlist id is the one passed in
        """
        self.logger.info(f"Fetching playlist: {playlist_id}")
        browse_id = playlist_browse_id(playlist_id)
        data = self.executor.execute("browse", {"browseId": browse_id}, ttl=self.ttl.playlist,
                                     cancel_event=cancel_event)
        self.logger.debug(f"Playlist response top-level keys: {sorted(data)}")

        detail = parsers.parse_playlist(data, playlist_id)
        album = None
        if detail.is_album:
            album = Album(id=playlist_id, title=detail.title, thumbnail_url=detail.playlist.thumbnail_url)

        detail.tracks = self.paginator.collect(
            data,
            lambda page: detail.tracks,
            parsers.extract_playlist_continuation,
            lambda page: parsers.parse_playlist_continuation(page, detail.playlist.thumbnail_url, album),
            parsers.extract_playlist_continuation_from_continuation,
            cancel_event=cancel_event,
        )
        self.logger.info(f"Parsed playlist '{detail.title}' with {len(detail.tracks)} tracks")
        return detail

    # --- artists ------------------------------------------------------------

    def get_artist(self, artist_id: str, cancel_event: Optional[threading.Event] = None) -> ArtistDetail:
        """
        Artist page with top songs and albums

        Raises:
            ValueError: If artist_id is a locally generated placeholder
        """
        if is_placeholder_id(artist_id):
            raise ValueError(f"Artist has no channel to browse: {artist_id}")

        self.logger.info(f"Fetching artist: {artist_id}")
        data = self.executor.execute("browse", {"browseId": artist_id}, ttl=self.ttl.artist,
                                     cancel_event=cancel_event)
        detail = parsers.parse_artist(data, artist_id)
        self.logger.info(
            f"Parsed artist '{detail.artist.name}' with {len(detail.songs)} songs "
            f"and {len(detail.albums)} albums"
        )
        return detail

    def get_artist_songs(self, browse_id: str, params: Optional[str] = None,
                         cancel_event: Optional[threading.Event] = None) -> List[Song]:
        """All songs behind an artist page's songs shelf link"""
        body = {"browseId": browse_id}
        if params:
            body["params"] = params
        data = self.executor.execute("browse", body, ttl=self.ttl.artist, cancel_event=cancel_event)
        return parsers.parse_artist_songs(data)

    # --- lyrics -------------------------------------------------------------

    def get_lyrics(self, video_id: str, cancel_event: Optional[threading.Event] = None) -> Lyrics:
        """Lyrics of a song, Lyrics.unavailable() when it has none"""
        next_data = self.executor.execute("next", {"videoId": video_id}, cancel_event=cancel_event)
        browse_id = parsers.extract_lyrics_browse_id(next_data)
        if browse_id is None:
            self.logger.debug(f"No lyrics tab for {video_id}")
            return Lyrics.unavailable()

        data = self.executor.execute("browse", {"browseId": browse_id}, ttl=self.ttl.playlist,
                                     cancel_event=cancel_event)
        return parsers.parse_lyrics(data)

    # --- mutations ----------------------------------------------------------

    def rate_song(self, video_id: str, rating: LikeStatus,
                  cancel_event: Optional[threading.Event] = None) -> None:
        """Like, dislike or clear the rating of a song"""
        self.logger.info(f"Rating song {video_id} with {rating.value}")
        self.executor.execute(RATING_ENDPOINTS[rating], {"target": {"videoId": video_id}},
                              cancel_event=cancel_event)
        self.logger.info(f"Successfully rated song {video_id}")
        self._invalidate_browse_cache()

    def edit_song_library_status(self, feedback_tokens: List[str],
                                 cancel_event: Optional[threading.Event] = None) -> None:
        """
        Add songs to or remove them from the library

        Args:
            feedback_tokens: Add or remove tokens taken from song rows
        """
        if not feedback_tokens:
            self.logger.warning("No feedback tokens provided for library edit")
            return

        self.logger.info(f"Editing song library status with {len(feedback_tokens)} tokens")
        self.executor.execute("feedback", {"feedbackTokens": list(feedback_tokens)},
                              cancel_event=cancel_event)
        self.logger.info("Successfully edited library status")
        self._invalidate_browse_cache()

    def subscribe_to_playlist(self, playlist_id: str,
                              cancel_event: Optional[threading.Event] = None) -> None:
        """Add a playlist to the library"""
        self.logger.info(f"Adding playlist to library: {playlist_id}")
        self.executor.execute("like/like", {"target": {"playlistId": strip_vl_prefix(playlist_id)}},
                              cancel_event=cancel_event)
        self._invalidate_browse_cache()

    def unsubscribe_from_playlist(self, playlist_id: str,
                                  cancel_event: Optional[threading.Event] = None) -> None:
        """Remove a playlist from the library"""
        self.logger.info(f"Removing playlist from library: {playlist_id}")
        self.executor.execute("like/removelike", {"target": {"playlistId": strip_vl_prefix(playlist_id)}},
                              cancel_event=cancel_event)
        self._invalidate_browse_cache()

    def subscribe_to_artist(self, channel_id: str,
                            cancel_event: Optional[threading.Event] = None) -> None:
        self.logger.info(f"Subscribing to artist: {channel_id}")
        self.executor.execute("subscription/subscribe", {"channelIds": [channel_id]},
                              cancel_event=cancel_event)
        self._invalidate_browse_cache()

    def unsubscribe_from_artist(self, channel_id: str,
                                cancel_event: Optional[threading.Event] = None) -> None:
        self.logger.info(f"Unsubscribing from artist: {channel_id}")
        self.executor.execute("subscription/unsubscribe", {"channelIds": [channel_id]},
                              cancel_event=cancel_event)
        self._invalidate_browse_cache()

    def _invalidate_browse_cache(self) -> None:
        if self.cache is not None:
            removed = self.cache.invalidate(BROWSE_CACHE_PREFIX)
            self.logger.debug(f"Invalidated {removed} cached browse responses")


def build_client(auth: Optional[AuthService] = None, settings: Optional[Settings] = None) -> YTMusicClient:
    """
    Wire a client from settings

    Args:
        auth: Session owner and signer (global instance if None)
        settings: Settings to read from (global instance if None)

    Returns:
        YTMusicClient with cache, retry policy and paginator per settings
    """
    settings = settings or get_settings()
    auth = auth or get_auth()

    cache = ResponseCache(settings.cache.max_entries) if settings.cache.enabled else None
    executor = RequestExecutor(
        auth.signature,
        session_owner=auth,
        cache=cache,
        retry_policy=RetryPolicy.default(),
        settings=settings,
    )
    return YTMusicClient(executor)


# Global client instance
_client_instance: Optional[YTMusicClient] = None


def get_ytmusic_client() -> YTMusicClient:
    """
    Get the global YouTube Music client instance (singleton pattern)

    Returns:
        Global YTMusicClient signed with the global AuthService
    """
    global _client_instance
    if not _client_instance:
        _client_instance = build_client()
    return _client_instance


def reset_ytmusic_client() -> None:
    """
    Reset the global client instance

    Drops the client together with its response cache; the next access
    builds a fresh one from the current settings.
    """
    global _client_instance
    _client_instance = None
