"""
Safe JSON navigation and field extractors shared by all parsers

API documents have no fixed schema: keys go missing, lists come back
empty and the same logical field is rendered through different shapes
depending on the page. Nothing here raises on a bad shape; every accessor
returns None (or an empty list) instead.

Each multi-shape field has a module-level tuple of extractor functions
tried in order by `first_of()`. Supporting a newly discovered shape means
adding a function to the relevant tuple; call sites stay untouched.
"""

from typing import Any, Callable, Iterable, List, Optional

from ...utils.helpers import normalize_thumbnail_url, parse_duration_string
from ..models import Artist, FeedbackTokens, LikeStatus


# Run texts that only separate other runs in subtitles
SEPARATORS = (" • ", " & ", ", ")

ALBUM_PREFIXES = ("MPRE", "OLAK")
PLAYLIST_PREFIXES = ("VL", "PL", "RD")
ARTIST_PREFIXES = ("UC",)

PAGE_TYPE_ARTIST = "MUSIC_PAGE_TYPE_ARTIST"
PAGE_TYPE_ALBUM = "MUSIC_PAGE_TYPE_ALBUM"
PAGE_TYPE_PLAYLIST = "MUSIC_PAGE_TYPE_PLAYLIST"
PAGE_TYPE_USER_CHANNEL = "MUSIC_PAGE_TYPE_USER_CHANNEL"


# --- navigation -------------------------------------------------------------

def nav(data: Any, *path: Any) -> Any:
    """
    Walk a path of dict keys and list indices

    Args:
        data: Document or sub-tree
        path: Keys (str) and indices (int, negative allowed)

    Returns:
        The value at the end of the path, or None if any step is missing
        or has the wrong type
    """
    current = data
    for step in path:
        if isinstance(step, int):
            if not isinstance(current, list) or not -len(current) <= step < len(current):
                return None
        elif not isinstance(current, dict):
            return None
        else:
            if step not in current:
                return None
        current = current[step]
    return current


def nav_dict(data: Any, *path: Any) -> Optional[dict]:
    value = nav(data, *path)
    return value if isinstance(value, dict) else None


def nav_list(data: Any, *path: Any) -> List[Any]:
    value = nav(data, *path)
    return value if isinstance(value, list) else []


def nav_str(data: Any, *path: Any) -> Optional[str]:
    value = nav(data, *path)
    return value if isinstance(value, str) else None


def first_of(extractors: Iterable[Callable[[Any], Any]], data: Any, default: Any = None) -> Any:
    """Return the first extractor result that is not None"""
    for extractor in extractors:
        value = extractor(data)
        if value is not None:
            return value
    return default


def runs_text(runs: List[Any]) -> str:
    """Concatenate the text of a runs list"""
    return "".join(run["text"] for run in runs if isinstance(run, dict) and isinstance(run.get("text"), str))


def text_of(data: Any, *path: Any) -> Optional[str]:
    """Joined text of a {runs: [...]} node, None if the node has no runs"""
    runs = nav(data, *path, "runs")
    if not isinstance(runs, list):
        return None
    return runs_text(runs)


# --- titles -----------------------------------------------------------------

def title_from_runs(data: Any, key: str = "title") -> Optional[str]:
    return nav_str(data, key, "runs", 0, "text")


def flex_column_runs(data: Any, index: int) -> Optional[List[Any]]:
    runs = nav(data, "flexColumns", index, "musicResponsiveListItemFlexColumnRenderer", "text", "runs")
    return runs if isinstance(runs, list) else None


def title_from_flex_columns(data: Any) -> Optional[str]:
    return nav_str(flex_column_runs(data, 0), 0, "text")


TITLE_EXTRACTORS = (title_from_runs, title_from_flex_columns)


def extract_title(data: Any, default: Optional[str] = None) -> Optional[str]:
    return first_of(TITLE_EXTRACTORS, data, default)


def extract_subtitle(data: Any) -> Optional[str]:
    """Subtitle text of a card, or the second flex column of a row"""
    subtitle = text_of(data, "subtitle")
    if subtitle is not None:
        return subtitle
    runs = flex_column_runs(data, 1)
    return runs_text(runs) if runs is not None else None


# --- artists ----------------------------------------------------------------

def run_browse_id(run: Any) -> Optional[str]:
    return nav_str(run, "navigationEndpoint", "browseEndpoint", "browseId")


def run_page_type(run: Any) -> Optional[str]:
    return nav_str(run, "navigationEndpoint", "browseEndpoint", "browseEndpointContextSupportedConfigs",
                   "browseEndpointContextMusicConfig", "pageType")


def meaningful_runs(runs: List[Any]) -> List[dict]:
    """Runs with non-empty text that is not a separator"""
    return [
        run for run in runs
        if isinstance(run, dict) and isinstance(run.get("text"), str)
        and run["text"] and run["text"] not in SEPARATORS
    ]


def artists_from_runs(runs: List[Any]) -> List[Artist]:
    """
    Build artists from a runs list in display order

    Separator runs are dropped. A run with a browse endpoint keeps its
    channel id; any other run gets a fresh placeholder id.
    """
    artists = []
    for run in meaningful_runs(runs):
        browse_id = run_browse_id(run)
        if browse_id:
            artists.append(Artist(id=browse_id, name=run["text"]))
        else:
            artists.append(Artist.placeholder(run["text"]))
    return artists


def subtitle_runs(data: Any) -> Optional[List[Any]]:
    runs = nav(data, "subtitle", "runs")
    return runs if isinstance(runs, list) else None


def second_flex_column_runs(data: Any) -> Optional[List[Any]]:
    return flex_column_runs(data, 1)


ARTIST_RUN_EXTRACTORS = (subtitle_runs, second_flex_column_runs)


def extract_artists(data: Any) -> List[Artist]:
    return artists_from_runs(first_of(ARTIST_RUN_EXTRACTORS, data, []))


# --- thumbnails -------------------------------------------------------------

def _thumbnail_urls(thumbnails: Any) -> Optional[List[str]]:
    if not isinstance(thumbnails, list):
        return None
    urls = [normalize_thumbnail_url(nav_str(thumb, "url")) for thumb in thumbnails]
    return [url for url in urls if url]


def thumbnails_from_music_renderer(data: Any) -> Optional[List[str]]:
    return _thumbnail_urls(nav(data, "thumbnail", "musicThumbnailRenderer", "thumbnail", "thumbnails"))


def thumbnails_from_cropped_square(data: Any) -> Optional[List[str]]:
    return _thumbnail_urls(nav(data, "thumbnail", "croppedSquareThumbnailRenderer", "thumbnail", "thumbnails"))


def thumbnails_from_bare_list(data: Any) -> Optional[List[str]]:
    return _thumbnail_urls(nav(data, "thumbnail", "thumbnails"))


def thumbnails_from_wrapped_music_renderer(data: Any) -> Optional[List[str]]:
    return _thumbnail_urls(nav(data, "thumbnailRenderer", "musicThumbnailRenderer", "thumbnail", "thumbnails"))


def thumbnails_from_wrapped_cropped_square(data: Any) -> Optional[List[str]]:
    return _thumbnail_urls(
        nav(data, "thumbnailRenderer", "croppedSquareThumbnailRenderer", "thumbnail", "thumbnails")
    )


THUMBNAIL_EXTRACTORS = (
    thumbnails_from_music_renderer,
    thumbnails_from_cropped_square,
    thumbnails_from_bare_list,
    thumbnails_from_wrapped_music_renderer,
    thumbnails_from_wrapped_cropped_square,
)


def extract_thumbnails(data: Any) -> List[str]:
    """All thumbnail URLs of the first matching shape, smallest first"""
    return first_of(THUMBNAIL_EXTRACTORS, data, [])


def best_thumbnail(data: Any) -> Optional[str]:
    """The largest (last) thumbnail URL"""
    thumbnails = extract_thumbnails(data)
    return thumbnails[-1] if thumbnails else None


# --- identifiers ------------------------------------------------------------

def video_id_from_playlist_item_data(data: Any) -> Optional[str]:
    return nav_str(data, "playlistItemData", "videoId")


def video_id_from_watch_endpoint(data: Any) -> Optional[str]:
    return nav_str(data, "navigationEndpoint", "watchEndpoint", "videoId")


def video_id_from_play_button(data: Any) -> Optional[str]:
    return nav_str(data, "overlay", "musicItemThumbnailOverlayRenderer", "content",
                   "musicPlayButtonRenderer", "playNavigationEndpoint", "watchEndpoint", "videoId")


VIDEO_ID_EXTRACTORS = (
    video_id_from_playlist_item_data,
    video_id_from_watch_endpoint,
    video_id_from_play_button,
)


def extract_video_id(data: Any) -> Optional[str]:
    return first_of(VIDEO_ID_EXTRACTORS, data) or None


def browse_id_from_navigation(data: Any) -> Optional[str]:
    return nav_str(data, "navigationEndpoint", "browseEndpoint", "browseId")


def browse_id_from_title_run(data: Any) -> Optional[str]:
    return run_browse_id(nav(data, "title", "runs", 0))


BROWSE_ID_EXTRACTORS = (browse_id_from_navigation, browse_id_from_title_run)


def extract_browse_id(data: Any) -> Optional[str]:
    return first_of(BROWSE_ID_EXTRACTORS, data) or None


def extract_page_type(data: Any) -> Optional[str]:
    return run_page_type(data) or run_page_type(nav(data, "title", "runs", 0))


def is_album_id(browse_id: Optional[str]) -> bool:
    return bool(browse_id) and browse_id.startswith(ALBUM_PREFIXES)


def is_artist_id(browse_id: Optional[str]) -> bool:
    return bool(browse_id) and browse_id.startswith(ARTIST_PREFIXES)


def is_playlist_id(browse_id: Optional[str]) -> bool:
    return bool(browse_id) and browse_id.startswith(PLAYLIST_PREFIXES)


# --- durations --------------------------------------------------------------

def duration_from_fixed_columns(data: Any) -> Optional[int]:
    for column in nav_list(data, "fixedColumns"):
        text = nav_str(column, "musicResponsiveListItemFixedColumnRenderer", "text", "runs", 0, "text")
        if text is not None:
            return parse_duration_string(text)
    return None


def duration_from_flex_runs(data: Any) -> Optional[int]:
    """Search rows put the duration as the last run of the second column"""
    runs = meaningful_runs(flex_column_runs(data, 1) or [])
    return parse_duration_string(runs[-1]["text"]) if runs else None


DURATION_EXTRACTORS = (duration_from_fixed_columns, duration_from_flex_runs)


def extract_duration(data: Any) -> Optional[int]:
    return first_of(DURATION_EXTRACTORS, data)


# --- menus ------------------------------------------------------------------

def extract_feedback_tokens(data: Any) -> Optional[FeedbackTokens]:
    """
    Library add/remove tokens from a row's menu

    The toggle item's default action depends on the current state: a
    LIBRARY_ADD icon means the default token adds, LIBRARY_SAVED means it
    removes.
    """
    for item in nav_list(data, "menu", "menuRenderer", "items"):
        toggle = nav_dict(item, "toggleMenuServiceItemRenderer")
        if toggle is None:
            continue
        icon = nav_str(toggle, "defaultIcon", "iconType")
        default_token = nav_str(toggle, "defaultServiceEndpoint", "feedbackEndpoint", "feedbackToken")
        toggled_token = nav_str(toggle, "toggledServiceEndpoint", "feedbackEndpoint", "feedbackToken")
        if icon == "LIBRARY_ADD":
            return FeedbackTokens(add=default_token, remove=toggled_token)
        if icon == "LIBRARY_SAVED":
            return FeedbackTokens(add=toggled_token, remove=default_token)
    return None


def extract_like_status(data: Any) -> Optional[LikeStatus]:
    for button in nav_list(data, "menu", "menuRenderer", "topLevelButtons"):
        status = nav_str(button, "likeButtonRenderer", "likeStatus")
        if status is not None:
            return LikeStatus.from_api(status)
    return None


# --- page structure ---------------------------------------------------------

def section_list_from_single_column(data: Any) -> Optional[dict]:
    return nav_dict(data, "contents", "singleColumnBrowseResultsRenderer", "tabs", 0,
                    "tabRenderer", "content", "sectionListRenderer")


def section_list_from_two_column(data: Any) -> Optional[dict]:
    return nav_dict(data, "contents", "twoColumnBrowseResultsRenderer", "secondaryContents",
                    "sectionListRenderer")


def section_list_from_search_tabs(data: Any) -> Optional[dict]:
    return nav_dict(data, "contents", "tabbedSearchResultsRenderer", "tabs", 0,
                    "tabRenderer", "content", "sectionListRenderer")


def section_list_bare(data: Any) -> Optional[dict]:
    return nav_dict(data, "contents", "sectionListRenderer")


SECTION_LIST_EXTRACTORS = (
    section_list_from_single_column,
    section_list_from_two_column,
    section_list_from_search_tabs,
    section_list_bare,
)


def extract_section_list(data: Any) -> Optional[dict]:
    return first_of(SECTION_LIST_EXTRACTORS, data)


def section_contents(data: Any) -> List[Any]:
    """Sections of a page's section list"""
    return nav_list(extract_section_list(data), "contents")


def next_continuation_token(container: Any) -> Optional[str]:
    """Token in the classic continuations[0].nextContinuationData shape"""
    return nav_str(container, "continuations", 0, "nextContinuationData", "continuation")


def continuation_item_token(items: List[Any]) -> Optional[str]:
    """Token of a trailing continuationItemRenderer in a contents list"""
    if not items:
        return None
    return nav_str(items[-1], "continuationItemRenderer", "continuationEndpoint",
                   "continuationCommand", "token")


def appended_continuation_items(data: Any) -> Optional[List[Any]]:
    """Items of an appendContinuationItemsAction response, None if absent"""
    for action in nav_list(data, "onResponseReceivedActions"):
        items = nav(action, "appendContinuationItemsAction", "continuationItems")
        if isinstance(items, list):
            return items
    return None
