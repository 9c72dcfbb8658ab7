"""
Playlist and album page parsing

Playlists and albums share one page layout with a header and a track
shelf. The header exists in several generations (classic detail header,
the editable header of owned playlists, and the responsive header inside
a two-column layout), tried in that order.
"""

from typing import Any, List, Optional, Tuple

from ...utils.helpers import parse_count
from ...utils.logger import get_logger, log_performance
from ..models import Album, Playlist, PlaylistDetail, Song
from .helpers import (
    appended_continuation_items, best_thumbnail, continuation_item_token, extract_browse_id,
    extract_section_list, first_of, is_album_id, meaningful_runs, nav, nav_dict, nav_list, next_continuation_token,
    run_browse_id, section_contents, subtitle_runs, text_of,
)
from .items import parse_playlist_card, parse_song_row

logger = get_logger(__name__)

ALBUM_TYPE_LABELS = ("album", "single", "ep")
TRACK_SHELF_KEYS = ("musicPlaylistShelfRenderer", "musicShelfRenderer")


# --- header -----------------------------------------------------------------

def header_from_detail(data: Any) -> Optional[dict]:
    return nav_dict(data, "header", "musicDetailHeaderRenderer")


def header_from_editable(data: Any) -> Optional[dict]:
    editable = nav_dict(data, "header", "musicEditablePlaylistDetailHeaderRenderer", "header")
    return nav_dict(editable, "musicDetailHeaderRenderer") or nav_dict(editable, "musicResponsiveHeaderRenderer")


def header_from_two_column(data: Any) -> Optional[dict]:
    primary = nav(data, "contents", "twoColumnBrowseResultsRenderer", "tabs", 0, "tabRenderer",
                  "content", "sectionListRenderer", "contents", 0)
    return nav_dict(primary, "musicResponsiveHeaderRenderer") or nav_dict(
        primary, "musicEditablePlaylistDetailHeaderRenderer", "header", "musicResponsiveHeaderRenderer"
    )


HEADER_EXTRACTORS = (header_from_detail, header_from_editable, header_from_two_column)


def extract_header(data: Any) -> Optional[dict]:
    return first_of(HEADER_EXTRACTORS, data)


def header_description(header: dict) -> Optional[str]:
    description = text_of(header, "description")
    if description:
        return description
    return text_of(header, "description", "musicDescriptionShelfRenderer", "description") or None


def header_author(header: dict) -> Optional[str]:
    """Owner name: the strapline of responsive headers, else a linked subtitle run"""
    strapline = text_of(header, "straplineTextOne")
    if strapline:
        return strapline
    for run in meaningful_runs(subtitle_runs(header) or []):
        if run_browse_id(run):
            return run["text"]
    return None


def header_counts(header: dict) -> Tuple[Optional[int], Optional[str]]:
    """Track count and total duration text from the second subtitle"""
    runs = meaningful_runs(nav_list(header, "secondSubtitle", "runs"))
    track_count = None
    duration = None
    for run in runs:
        lowered = run["text"].lower()
        if "song" in lowered or "track" in lowered:
            track_count = parse_count(run["text"])
        elif any(unit in lowered for unit in ("hour", "minute", "second")):
            duration = run["text"]
    return track_count, duration


def looks_like_album(header: Optional[dict], browse_id: str) -> bool:
    if is_album_id(browse_id):
        return True
    runs = meaningful_runs(subtitle_runs(header) or [])
    return bool(runs) and runs[0]["text"].lower() in ALBUM_TYPE_LABELS


# --- tracks -----------------------------------------------------------------

def track_shelf(data: Any) -> Optional[dict]:
    """The shelf holding tracks, in either layout"""
    for section in section_contents(data):
        for key in TRACK_SHELF_KEYS:
            shelf = nav_dict(section, key)
            if shelf is not None:
                return shelf
    return None


def parse_track_rows(rows: List[Any], fallback_thumbnail: Optional[str] = None,
                     album: Optional[Album] = None) -> List[Song]:
    """
    Parse track rows, skipping rows that are not playable

    Args:
        rows: Shelf contents
        fallback_thumbnail: Cover to use for rows without their own art
        album: Album to attach when the rows come from an album page
    """
    tracks = []
    for row in rows:
        song = parse_song_row(nav_dict(row, "musicResponsiveListItemRenderer"), fallback_thumbnail)
        if song is None:
            continue
        if album is not None and song.album is None:
            song.album = album
        tracks.append(song)
    return tracks


@log_performance
def parse_playlist(data: Any, browse_id: str) -> PlaylistDetail:
    """
    Parse a playlist or album page

    Args:
        data: Browse response
        browse_id: The id the page was requested with

    Returns:
        PlaylistDetail with the first page of tracks
    """
    header = extract_header(data) or {}
    thumbnail = best_thumbnail(header)
    track_count, duration = header_counts(header)
    is_album = looks_like_album(header, browse_id)

    playlist = Playlist(
        id=browse_id,
        title=text_of(header, "title") or "Unknown Playlist",
        description=header_description(header),
        thumbnail_url=thumbnail,
        track_count=track_count,
        author=header_author(header),
    )

    album = None
    if is_album:
        album = Album(id=browse_id, title=playlist.title, thumbnail_url=thumbnail, track_count=track_count)

    shelf = track_shelf(data)
    tracks = parse_track_rows(nav_list(shelf, "contents"), thumbnail, album)
    logger.debug(f"Playlist {browse_id}: {len(tracks)} tracks on first page")

    return PlaylistDetail(playlist=playlist, tracks=tracks, is_album=is_album, duration=duration)


def extract_playlist_continuation(data: Any) -> Optional[str]:
    """Continuation token of the track shelf on a first page"""
    shelf = track_shelf(data)
    return next_continuation_token(shelf) or continuation_item_token(nav_list(shelf, "contents"))


def continuation_rows(data: Any) -> List[Any]:
    shelf = nav_dict(data, "continuationContents", "musicPlaylistShelfContinuation") or nav_dict(
        data, "continuationContents", "musicShelfContinuation"
    )
    if shelf is not None:
        return nav_list(shelf, "contents")
    return appended_continuation_items(data) or []


def parse_playlist_continuation(data: Any, fallback_thumbnail: Optional[str] = None,
                                album: Optional[Album] = None) -> List[Song]:
    return parse_track_rows(continuation_rows(data), fallback_thumbnail, album)


def extract_playlist_continuation_from_continuation(data: Any) -> Optional[str]:
    shelf = nav_dict(data, "continuationContents", "musicPlaylistShelfContinuation") or nav_dict(
        data, "continuationContents", "musicShelfContinuation"
    )
    return next_continuation_token(shelf) or continuation_item_token(continuation_rows(data))


# --- library ----------------------------------------------------------------

def library_playlist_renderers(data: Any) -> List[dict]:
    """Cards of the library grid, or rows when the library renders as a list"""
    renderers = []
    for section in nav_list(extract_section_list(data), "contents"):
        for item in nav_list(section, "gridRenderer", "items"):
            card = nav_dict(item, "musicTwoRowItemRenderer")
            if card is not None:
                renderers.append(card)
        for row in nav_list(section, "musicShelfRenderer", "contents"):
            renderer = nav_dict(row, "musicResponsiveListItemRenderer")
            if renderer is not None:
                renderers.append(renderer)
    return renderers


def parse_library_playlists(data: Any) -> List[Playlist]:
    """Saved playlists; entries that are not VL playlists (e.g. "New playlist") are dropped"""
    playlists = []
    for renderer in library_playlist_renderers(data):
        browse_id = extract_browse_id(renderer)
        if not browse_id or not browse_id.startswith("VL"):
            continue
        playlists.append(parse_playlist_card(renderer, browse_id))
    return playlists
