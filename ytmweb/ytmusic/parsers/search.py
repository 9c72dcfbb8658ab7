"""
Search results and search suggestions parsing

Results come as a tabbed section list: an optional top-result card
(musicCardShelfRenderer) followed by shelves of rows. Song rows in search
pack type label, artists, album and duration into the second flex column,
e.g. "Song • Artist • Album • 3:45", so artists are picked out of that
column by their link targets rather than taken wholesale.
"""

from typing import Any, List, Optional

from ...utils.helpers import parse_duration_string
from ...utils.logger import get_logger, log_performance
from ..models import Album, Artist, ItemKind, SearchResponse, SearchSuggestion, Song
from .helpers import (
    flex_column_runs, is_album_id, is_artist_id,
    meaningful_runs, nav, nav_dict, nav_list, nav_str, run_browse_id, run_page_type,
    runs_text, section_contents, PAGE_TYPE_ARTIST,
)
from .items import parse_list_item, parse_two_row_item

logger = get_logger(__name__)

# Leading labels of the second flex column that name the result type
TYPE_LABELS = ("song", "video", "album", "single", "ep", "playlist", "artist", "episode", "podcast")


def search_row_artists(renderer: Any) -> List[Artist]:
    """
    Artists of a search row

    Linked artist runs win. Without any, the first plain run that is not a
    type label or a duration becomes a placeholder artist.
    """
    runs = meaningful_runs(flex_column_runs(renderer, 1) or [])
    linked = [
        Artist(id=run_browse_id(run), name=run["text"])
        for run in runs
        if is_artist_id(run_browse_id(run)) or run_page_type(run) == PAGE_TYPE_ARTIST
    ]
    if linked:
        return linked

    for run in runs:
        text = run["text"]
        if run_browse_id(run) or text.lower() in TYPE_LABELS or parse_duration_string(text) is not None:
            continue
        return [Artist.placeholder(text)]
    return []


def search_row_album(renderer: Any) -> Optional[Album]:
    for run in meaningful_runs(flex_column_runs(renderer, 1) or []):
        browse_id = run_browse_id(run)
        if is_album_id(browse_id):
            return Album(id=browse_id, title=run["text"])
    return None


def search_row_year(renderer: Any) -> Optional[str]:
    for run in meaningful_runs(flex_column_runs(renderer, 1) or []):
        if len(run["text"]) == 4 and run["text"].isdigit():
            return run["text"]
    return None


def refine_search_row(item, renderer: Any):
    """Replace generic row parsing with search-specific columns"""
    if item.kind == ItemKind.SONG:
        song: Song = item.value
        song.artists = search_row_artists(renderer)
        song.album = song.album or search_row_album(renderer)
    elif item.kind == ItemKind.ALBUM:
        album: Album = item.value
        album.artists = [artist for artist in search_row_artists(renderer) if artist.is_browsable]
        album.year = search_row_year(renderer)
    return item


def top_result_item(card: dict):
    """Top result card: the title run links to the entity"""
    title_run = nav(card, "title", "runs", 0)
    renderer = {
        "title": card.get("title"),
        "subtitle": card.get("subtitle"),
        "thumbnail": card.get("thumbnail"),
        "navigationEndpoint": nav(title_run, "navigationEndpoint"),
    }
    return parse_two_row_item(renderer)


def add_item(response: SearchResponse, item) -> None:
    """Append to the matching list, skipping duplicates"""
    target = {
        ItemKind.SONG: response.songs,
        ItemKind.ALBUM: response.albums,
        ItemKind.ARTIST: response.artists,
        ItemKind.PLAYLIST: response.playlists,
    }[item.kind]
    if item.kind == ItemKind.SONG:
        if item.value not in target:
            target.append(item.value)
    elif all(existing.id != item.value.id for existing in target):
        target.append(item.value)


@log_performance
def parse_search(data: Any) -> SearchResponse:
    """Split search results into songs, albums, artists and playlists"""
    response = SearchResponse.empty()

    for section in section_contents(data):
        card = nav_dict(section, "musicCardShelfRenderer")
        if card is not None:
            item = top_result_item(card)
            if item is not None:
                add_item(response, item)
            rows = nav_list(card, "contents")
        else:
            rows = nav_list(section, "musicShelfRenderer", "contents")

        for row in rows:
            renderer = nav_dict(row, "musicResponsiveListItemRenderer")
            item = parse_list_item(renderer) if renderer is not None else None
            if item is not None:
                add_item(response, refine_search_row(item, renderer))

    logger.debug(
        f"Search parsed: {len(response.songs)} songs, {len(response.albums)} albums, "
        f"{len(response.artists)} artists, {len(response.playlists)} playlists"
    )
    return response


def parse_suggestions(data: Any) -> List[SearchSuggestion]:
    """Autocomplete suggestions in display order"""
    suggestions = []
    for section in nav_list(data, "contents"):
        for entry in nav_list(section, "searchSuggestionsSectionRenderer", "contents"):
            renderer = nav_dict(entry, "searchSuggestionRenderer")
            if renderer is None:
                continue
            text = runs_text(nav_list(renderer, "suggestion", "runs"))
            query = nav_str(renderer, "navigationEndpoint", "searchEndpoint", "query") or text
            if text:
                suggestions.append(SearchSuggestion(text=text, query=query))
    return suggestions
