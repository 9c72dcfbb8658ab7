"""
Data models for YouTube Music entities

This module defines the typed domain model produced by the parsers. Every
value here is a plain data container built from loosely-shaped API JSON; the
models carry no reference back to the document they were parsed from, so
they can be cached, compared and serialized freely.

Model Overview:

1. **Enums**
   - ItemKind: tag of a heterogeneous home-section item
   - LikeStatus: rating state of a song (like/dislike/none)

2. **Core entities**
   - Artist, Album, Song, Playlist

3. **Page-level aggregates**
   - PlaylistDetail, ArtistDetail, HomeSection, HomeResponse,
     SearchResponse, SearchSuggestion, Lyrics

Identity rules:

- A Song is identified by its video id alone. The same track parsed from a
  playlist row and from a search result compares equal even when the other
  fields differ.
- An Artist without a browsable channel id receives a locally generated
  placeholder id. Placeholder ids are unique per instance and must never be
  used to navigate.

All models provide `to_dict()` for JSON output.
"""

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Dict, Any

from ..utils.helpers import format_duration


PLACEHOLDER_PREFIX = "local-"

CHART_KEYWORDS = ("chart", "charts", "top 100", "top 50", "trending", "daily top", "weekly top")


class ItemKind(Enum):
    """Kind tag for a HomeSectionItem"""
    SONG = "song"
    ALBUM = "album"
    ARTIST = "artist"
    PLAYLIST = "playlist"


class LikeStatus(Enum):
    """
    Rating state of a song

    Values mirror the strings the API uses in likeButtonRenderer.likeStatus.
    """
    LIKE = "LIKE"
    DISLIKE = "DISLIKE"
    INDIFFERENT = "INDIFFERENT"

    @classmethod
    def from_api(cls, value: Optional[str]) -> Optional['LikeStatus']:
        """Map an API like status string, returning None for unknown values"""
        try:
            return cls(value) if value else None
        except ValueError:
            return None


@dataclass
class Artist:
    """
    Artist reference as it appears in song rows, cards and headers

    Attributes:
        id: Channel browse id (UC...), or a placeholder when none was present
        name: Display name
        thumbnail_url: Optional avatar URL
    """
    id: str
    name: str
    thumbnail_url: Optional[str] = None

    @classmethod
    def placeholder(cls, name: str) -> 'Artist':
        """Create an artist with a fresh, never reused, non-browsable id"""
        return cls(id=f"{PLACEHOLDER_PREFIX}{uuid.uuid4().hex}", name=name)

    @property
    def is_browsable(self) -> bool:
        return bool(self.id) and not is_placeholder_id(self.id)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'thumbnail_url': self.thumbnail_url,
            'browsable': self.is_browsable,
        }


def is_placeholder_id(browse_id: str) -> bool:
    """Return True for locally generated artist ids"""
    return browse_id.startswith(PLACEHOLDER_PREFIX)


@dataclass
class Album:
    """
    Album reference

    Attributes:
        id: Album browse id, always prefixed MPRE or OLAK
        title: Album title
        artists: Credited artists, in display order
        thumbnail_url: Cover art URL (largest available)
        year: Release year as displayed
        track_count: Number of tracks if known
    """
    id: str
    title: str
    artists: List[Artist] = field(default_factory=list)
    thumbnail_url: Optional[str] = None
    year: Optional[str] = None
    track_count: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'title': self.title,
            'artists': [artist.to_dict() for artist in self.artists],
            'thumbnail_url': self.thumbnail_url,
            'year': self.year,
            'track_count': self.track_count,
        }


@dataclass
class FeedbackTokens:
    """Opaque tokens for adding a song to / removing it from the library"""
    add: Optional[str] = None
    remove: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {'add': self.add, 'remove': self.remove}


@dataclass(eq=False)
class Song:
    """
    Playable track

    Attributes:
        id: Video id, the identity of the song
        title: Track title
        artists: Credited artists in display order (never re-sorted)
        album: Album reference if the row carried one
        duration: Length in seconds
        thumbnail_url: Largest thumbnail URL
        feedback_tokens: Library add/remove tokens
        like_status: Current rating if the row carried one
    """
    id: str
    title: str
    artists: List[Artist] = field(default_factory=list)
    album: Optional[Album] = None
    duration: Optional[int] = None
    thumbnail_url: Optional[str] = None
    feedback_tokens: Optional[FeedbackTokens] = None
    like_status: Optional[LikeStatus] = None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Song):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    @property
    def artists_display(self) -> str:
        """Artist names joined for display"""
        return ", ".join(artist.name for artist in self.artists)

    @property
    def duration_display(self) -> str:
        return format_duration(self.duration) if self.duration is not None else "--:--"

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'title': self.title,
            'artists': [artist.to_dict() for artist in self.artists],
            'album': self.album.to_dict() if self.album else None,
            'duration': self.duration,
            'thumbnail_url': self.thumbnail_url,
            'feedback_tokens': self.feedback_tokens.to_dict() if self.feedback_tokens else None,
            'like_status': self.like_status.value if self.like_status else None,
        }


@dataclass
class Playlist:
    """
    Playlist summary as shown in shelves, search results and the library

    Attributes:
        id: Browse id (user playlists conventionally prefixed VL)
        title: Playlist title
        description: Free-form description
        thumbnail_url: Cover URL
        track_count: Number of tracks if shown
        author: Owner display name
    """
    id: str
    title: str
    description: Optional[str] = None
    thumbnail_url: Optional[str] = None
    track_count: Optional[int] = None
    author: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'title': self.title,
            'description': self.description,
            'thumbnail_url': self.thumbnail_url,
            'track_count': self.track_count,
            'author': self.author,
        }


@dataclass
class PlaylistDetail:
    """
    Full playlist or album page

    The is_album flag separates album-shaped pages (shared cover art, no
    per-track thumbnails) from user playlists.
    """
    playlist: Playlist
    tracks: List[Song] = field(default_factory=list)
    is_album: bool = False
    duration: Optional[str] = None

    @property
    def id(self) -> str:
        return self.playlist.id

    @property
    def title(self) -> str:
        return self.playlist.title

    @property
    def total_duration(self) -> int:
        """Sum of known track durations in seconds"""
        return sum(track.duration or 0 for track in self.tracks)

    def to_dict(self) -> Dict[str, Any]:
        data = self.playlist.to_dict()
        data.update({
            'is_album': self.is_album,
            'duration': self.duration,
            'total_duration': self.total_duration,
            'tracks': [track.to_dict() for track in self.tracks],
        })
        return data


@dataclass
class ArtistDetail:
    """
    Artist page

    songs_browse_id/songs_params address the artist's full song list when
    the top-songs shelf links to one.
    """
    artist: Artist
    description: Optional[str] = None
    songs: List[Song] = field(default_factory=list)
    albums: List[Album] = field(default_factory=list)
    thumbnail_url: Optional[str] = None
    channel_id: Optional[str] = None
    is_subscribed: bool = False
    subscriber_count: Optional[str] = None
    songs_browse_id: Optional[str] = None
    songs_params: Optional[str] = None

    @property
    def has_more_songs(self) -> bool:
        return self.songs_browse_id is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'artist': self.artist.to_dict(),
            'description': self.description,
            'thumbnail_url': self.thumbnail_url,
            'channel_id': self.channel_id,
            'is_subscribed': self.is_subscribed,
            'subscriber_count': self.subscriber_count,
            'songs': [song.to_dict() for song in self.songs],
            'albums': [album.to_dict() for album in self.albums],
            'songs_browse_id': self.songs_browse_id,
            'songs_params': self.songs_params,
        }


@dataclass
class HomeSectionItem:
    """Tagged item of a home section: kind plus the matching entity"""
    kind: ItemKind
    value: Any

    @property
    def title(self) -> str:
        if self.kind == ItemKind.ARTIST:
            return self.value.name
        return self.value.title

    def to_dict(self) -> Dict[str, Any]:
        return {'kind': self.kind.value, 'value': self.value.to_dict()}


@dataclass
class HomeSection:
    """Titled shelf of heterogeneous items"""
    id: str
    title: str
    items: List[HomeSectionItem] = field(default_factory=list)

    @property
    def is_chart(self) -> bool:
        """True when the title looks like a chart or ranking shelf"""
        lowered = self.title.lower()
        return any(keyword in lowered for keyword in CHART_KEYWORDS)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'title': self.title,
            'is_chart': self.is_chart,
            'items': [item.to_dict() for item in self.items],
        }


@dataclass
class HomeResponse:
    sections: List[HomeSection] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.sections

    def to_dict(self) -> Dict[str, Any]:
        return {'sections': [section.to_dict() for section in self.sections]}


@dataclass
class SearchResponse:
    """Search results split into four independent ordered lists"""
    songs: List[Song] = field(default_factory=list)
    albums: List[Album] = field(default_factory=list)
    artists: List[Artist] = field(default_factory=list)
    playlists: List[Playlist] = field(default_factory=list)

    @classmethod
    def empty(cls) -> 'SearchResponse':
        return cls()

    @property
    def is_empty(self) -> bool:
        return not (self.songs or self.albums or self.artists or self.playlists)

    @property
    def all_items(self) -> List[HomeSectionItem]:
        """All results as tagged items, songs first"""
        return (
            [HomeSectionItem(ItemKind.SONG, song) for song in self.songs]
            + [HomeSectionItem(ItemKind.ALBUM, album) for album in self.albums]
            + [HomeSectionItem(ItemKind.ARTIST, artist) for artist in self.artists]
            + [HomeSectionItem(ItemKind.PLAYLIST, playlist) for playlist in self.playlists]
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'songs': [song.to_dict() for song in self.songs],
            'albums': [album.to_dict() for album in self.albums],
            'artists': [artist.to_dict() for artist in self.artists],
            'playlists': [playlist.to_dict() for playlist in self.playlists],
        }


@dataclass
class SearchSuggestion:
    """Autocomplete entry: display text and the query it runs"""
    text: str
    query: str

    def to_dict(self) -> Dict[str, Any]:
        return {'text': self.text, 'query': self.query}


@dataclass
class Lyrics:
    text: str = ""
    source: Optional[str] = None

    @classmethod
    def unavailable(cls) -> 'Lyrics':
        return cls()

    @property
    def is_available(self) -> bool:
        return bool(self.text.strip())

    def to_dict(self) -> Dict[str, Any]:
        return {'text': self.text, 'source': self.source, 'available': self.is_available}
