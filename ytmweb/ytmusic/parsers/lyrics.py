"""
Lyrics parsing

Lyrics take two calls: the watch-next response of a video names a
lyrics tab by browse id (MPLY...), and browsing that id returns a
description shelf with the text and a footer naming the source.
"""

from typing import Any, Optional

from ..models import Lyrics
from .helpers import nav_dict, nav_list, nav_str, section_contents, text_of

LYRICS_BROWSE_PREFIX = "MPLY"


def extract_lyrics_browse_id(data: Any) -> Optional[str]:
    """Browse id of the lyrics tab in a watch-next response, None when the video has no lyrics"""
    tabs = nav_list(data, "contents", "singleColumnMusicWatchNextResultsRenderer", "tabbedRenderer",
                    "watchNextTabbedResultsRenderer", "tabs")
    for tab in tabs:
        browse_id = nav_str(tab, "tabRenderer", "endpoint", "browseEndpoint", "browseId")
        if browse_id and browse_id.startswith(LYRICS_BROWSE_PREFIX):
            return browse_id
    return None


def parse_lyrics(data: Any) -> Lyrics:
    for section in section_contents(data):
        shelf = nav_dict(section, "musicDescriptionShelfRenderer")
        if shelf is None:
            continue
        text = text_of(shelf, "description")
        if text:
            return Lyrics(text=text, source=text_of(shelf, "footer") or None)
    return Lyrics.unavailable()
