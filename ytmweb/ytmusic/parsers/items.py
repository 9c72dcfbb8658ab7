"""
Parsers for single items: list rows and two-row cards

Rows (musicResponsiveListItemRenderer) appear in shelves, playlists and
search results; cards (musicTwoRowItemRenderer) appear in carousels. Both
can stand for any entity kind, told apart by the browse id prefix and,
failing that, the page type of the navigation endpoint.
"""

from typing import Any, Optional

from ..models import Album, Artist, HomeSectionItem, ItemKind, Playlist, Song
from .helpers import (
    PAGE_TYPE_ALBUM, PAGE_TYPE_ARTIST, PAGE_TYPE_PLAYLIST, PAGE_TYPE_USER_CHANNEL,
    best_thumbnail, extract_artists, extract_browse_id, extract_duration, extract_feedback_tokens,
    extract_like_status, extract_page_type, extract_title, extract_video_id,
    flex_column_runs, is_album_id, is_artist_id, is_playlist_id, meaningful_runs, nav_dict,
    run_browse_id, subtitle_runs,
)
from ...utils.helpers import parse_count


def classify_browse_id(browse_id: Optional[str], page_type: Optional[str] = None) -> Optional[ItemKind]:
    """Entity kind addressed by a browse id, None when it is not browsable content"""
    if is_artist_id(browse_id):
        return ItemKind.ARTIST
    if is_album_id(browse_id):
        return ItemKind.ALBUM
    if is_playlist_id(browse_id):
        return ItemKind.PLAYLIST
    if page_type in (PAGE_TYPE_ARTIST, PAGE_TYPE_USER_CHANNEL):
        return ItemKind.ARTIST
    if page_type == PAGE_TYPE_ALBUM:
        return ItemKind.ALBUM
    if page_type == PAGE_TYPE_PLAYLIST:
        return ItemKind.PLAYLIST
    return None


def album_from_row(renderer: Any) -> Optional[Album]:
    """Album reference from the third flex column of a song row"""
    for column in (2, 3):
        for run in meaningful_runs(flex_column_runs(renderer, column) or []):
            browse_id = run_browse_id(run)
            if is_album_id(browse_id):
                return Album(id=browse_id, title=run["text"])
    return None


def parse_song_row(renderer: Any, fallback_thumbnail: Optional[str] = None) -> Optional[Song]:
    """
    Build a Song from a list row

    Rows without a video id are not playable tracks and yield None.
    """
    if not isinstance(renderer, dict):
        return None
    video_id = extract_video_id(renderer)
    if not video_id:
        return None

    return Song(
        id=video_id,
        title=extract_title(renderer, "Unknown"),
        artists=extract_artists(renderer),
        album=album_from_row(renderer),
        duration=extract_duration(renderer),
        thumbnail_url=best_thumbnail(renderer) or fallback_thumbnail,
        feedback_tokens=extract_feedback_tokens(renderer),
        like_status=extract_like_status(renderer),
    )


def album_year(renderer: Any) -> Optional[str]:
    """Release year, conventionally the last subtitle run of an album card"""
    runs = meaningful_runs(subtitle_runs(renderer) or [])
    return runs[-1]["text"] if runs else None


def parse_album_card(renderer: Any) -> Optional[Album]:
    """
    Build an Album from a two-row card

    Only MPRE/OLAK browse ids are albums; any other target yields None.
    """
    browse_id = extract_browse_id(renderer)
    if not is_album_id(browse_id):
        return None

    return Album(
        id=browse_id,
        title=extract_title(renderer, "Unknown Album"),
        artists=[artist for artist in extract_artists(renderer) if artist.is_browsable],
        thumbnail_url=best_thumbnail(renderer),
        year=album_year(renderer),
    )


def parse_artist_card(renderer: Any, browse_id: str) -> Artist:
    return Artist(
        id=browse_id,
        name=extract_title(renderer, "Unknown Artist"),
        thumbnail_url=best_thumbnail(renderer),
    )


def parse_playlist_card(renderer: Any, browse_id: str) -> Playlist:
    """
    Playlist summary from a card or row

    The subtitle reads like "Playlist • Author • 25 songs"; the author is
    the run linking to a channel, else the second plain run.
    """
    runs = meaningful_runs(subtitle_runs(renderer) or flex_column_runs(renderer, 1) or [])
    track_count = None
    labels = []
    for run in runs:
        lowered = run["text"].lower()
        if "song" in lowered or "track" in lowered:
            track_count = parse_count(run["text"])
        else:
            labels.append(run)

    linked = [run["text"] for run in labels if run_browse_id(run)]
    if linked:
        author = linked[0]
    elif len(labels) > 1:
        author = labels[1]["text"]
    else:
        author = None

    return Playlist(
        id=browse_id,
        title=extract_title(renderer, "Unknown Playlist"),
        thumbnail_url=best_thumbnail(renderer),
        track_count=track_count,
        author=author,
    )


def parse_two_row_item(renderer: Any) -> Optional[HomeSectionItem]:
    """Classify and build a carousel card, None for unknown targets"""
    if not isinstance(renderer, dict):
        return None

    browse_id = extract_browse_id(renderer)
    if browse_id is None:
        video_id = extract_video_id(renderer)
        if not video_id:
            return None
        song = Song(
            id=video_id,
            title=extract_title(renderer, "Unknown"),
            artists=extract_artists(renderer),
            thumbnail_url=best_thumbnail(renderer),
        )
        return HomeSectionItem(ItemKind.SONG, song)

    kind = classify_browse_id(browse_id, extract_page_type(renderer))
    if kind == ItemKind.ALBUM:
        album = parse_album_card(renderer)
        return HomeSectionItem(kind, album) if album else None
    if kind == ItemKind.ARTIST:
        return HomeSectionItem(kind, parse_artist_card(renderer, browse_id))
    if kind == ItemKind.PLAYLIST:
        return HomeSectionItem(kind, parse_playlist_card(renderer, browse_id))
    return None


def parse_list_item(renderer: Any, fallback_thumbnail: Optional[str] = None) -> Optional[HomeSectionItem]:
    """Classify and build a list row: a song when playable, else by browse id"""
    if not isinstance(renderer, dict):
        return None

    song = parse_song_row(renderer, fallback_thumbnail)
    if song is not None:
        return HomeSectionItem(ItemKind.SONG, song)

    browse_id = extract_browse_id(renderer)
    kind = classify_browse_id(browse_id, extract_page_type(renderer))
    if kind == ItemKind.ARTIST:
        return HomeSectionItem(kind, parse_artist_card(renderer, browse_id))
    if kind == ItemKind.ALBUM and is_album_id(browse_id):
        album = Album(
            id=browse_id,
            title=extract_title(renderer, "Unknown Album"),
            artists=[artist for artist in extract_artists(renderer) if artist.is_browsable],
            thumbnail_url=best_thumbnail(renderer),
        )
        return HomeSectionItem(kind, album)
    if kind == ItemKind.PLAYLIST:
        return HomeSectionItem(kind, parse_playlist_card(renderer, browse_id))
    return None


def parse_content_item(item: Any) -> Optional[HomeSectionItem]:
    """Dispatch a shelf entry on its renderer key"""
    card = nav_dict(item, "musicTwoRowItemRenderer")
    if card is not None:
        return parse_two_row_item(card)
    row = nav_dict(item, "musicResponsiveListItemRenderer")
    if row is not None:
        return parse_list_item(row)
    return None

