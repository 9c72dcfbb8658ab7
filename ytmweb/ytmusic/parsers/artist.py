"""
Artist page parsing
"""

from typing import Any, List, Optional, Tuple

from ...utils.logger import get_logger, log_performance
from ..models import Album, Artist, ArtistDetail, Song
from .helpers import (
    best_thumbnail, extract_title, nav, nav_dict, nav_list, nav_str, section_contents, text_of,
)
from .items import parse_album_card, parse_song_row

logger = get_logger(__name__)

UNKNOWN_ARTIST = "Unknown Artist"


def parse_header(data: Any) -> Tuple[str, Optional[str], Optional[str], Optional[dict]]:
    """
    Name, description and thumbnail from the page header

    The immersive header is the usual one; the visual header is consulted
    only when the immersive one did not yield a name.

    Returns:
        (name, description, thumbnail_url, header renderer used)
    """
    name = UNKNOWN_ARTIST
    description = None
    thumbnail_url = None
    used = None

    immersive = nav_dict(data, "header", "musicImmersiveHeaderRenderer")
    if immersive is not None:
        name = extract_title(immersive, UNKNOWN_ARTIST)
        description = text_of(immersive, "description")
        thumbnail_url = best_thumbnail(immersive)
        used = immersive

    visual = nav_dict(data, "header", "musicVisualHeaderRenderer")
    if name == UNKNOWN_ARTIST and visual is not None:
        name = extract_title(visual, UNKNOWN_ARTIST)
        thumbnail_url = best_thumbnail(visual)
        used = visual

    return name, description, thumbnail_url, used


def parse_subscription(header: Optional[dict]) -> Tuple[Optional[str], bool, Optional[str]]:
    """Channel id, subscribed flag and subscriber count text of the header button"""
    button = nav_dict(header, "subscriptionButton", "subscribeButtonRenderer")
    if button is None:
        return None, False, None
    return (
        nav_str(button, "channelId"),
        bool(button.get("subscribed", False)),
        text_of(button, "subscriberCountText") or None,
    )


def songs_shelf_link(shelf: dict) -> Tuple[Optional[str], Optional[str]]:
    """Browse id and params behind the songs shelf title ("See all")"""
    endpoint = nav(shelf, "title", "runs", 0, "navigationEndpoint", "browseEndpoint")
    return nav_str(endpoint, "browseId"), nav_str(endpoint, "params")


def parse_song_rows(rows: List[Any]) -> List[Song]:
    songs = []
    for row in rows:
        song = parse_song_row(nav_dict(row, "musicResponsiveListItemRenderer"))
        if song is not None:
            songs.append(song)
    return songs


def parse_album_cards(cards: List[Any]) -> List[Album]:
    albums = []
    for card in cards:
        album = parse_album_card(nav_dict(card, "musicTwoRowItemRenderer"))
        if album is not None:
            albums.append(album)
    return albums


@log_performance
def parse_artist(data: Any, artist_id: str) -> ArtistDetail:
    """
    Parse an artist page

    Args:
        data: Browse response for the channel
        artist_id: Channel id the page was requested with

    Returns:
        ArtistDetail; carousel cards that are not albums are left out
    """
    name, description, thumbnail_url, header = parse_header(data)
    channel_id, is_subscribed, subscriber_count = parse_subscription(header)

    songs: List[Song] = []
    albums: List[Album] = []
    songs_browse_id = None
    songs_params = None

    for section in section_contents(data):
        shelf = nav_dict(section, "musicShelfRenderer")
        if shelf is not None:
            songs.extend(parse_song_rows(nav_list(shelf, "contents")))
            if songs_browse_id is None:
                songs_browse_id, songs_params = songs_shelf_link(shelf)

        carousel = nav_dict(section, "musicCarouselShelfRenderer")
        if carousel is not None:
            albums.extend(parse_album_cards(nav_list(carousel, "contents")))

    logger.debug(f"Artist {artist_id}: {len(songs)} songs, {len(albums)} albums")

    return ArtistDetail(
        artist=Artist(id=artist_id, name=name, thumbnail_url=thumbnail_url),
        description=description,
        songs=songs,
        albums=albums,
        thumbnail_url=thumbnail_url,
        channel_id=channel_id or artist_id,
        is_subscribed=is_subscribed,
        subscriber_count=subscriber_count,
        songs_browse_id=songs_browse_id,
        songs_params=songs_params,
    )


def parse_artist_songs(data: Any) -> List[Song]:
    """All songs of the artist's "See all" playlist page"""
    songs = []
    for section in section_contents(data):
        for key in ("musicPlaylistShelfRenderer", "musicShelfRenderer"):
            songs.extend(parse_song_rows(nav_list(section, key, "contents")))
    return songs
