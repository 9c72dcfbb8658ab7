"""
Home and explore feed parsing

A feed page is a section list of shelves. Carousels
(musicCarouselShelfRenderer, musicImmersiveCarouselShelfRenderer) hold
cards, flat shelves (musicShelfRenderer) hold rows; any other section kind
is skipped. The first page and continuation pages keep their sections and
their next token in different places, hence the separate functions.
"""

import uuid
from typing import Any, List, Optional

from ...utils.logger import get_logger, log_performance
from ..models import HomeSection
from .helpers import (
    appended_continuation_items, continuation_item_token, extract_section_list, nav,
    nav_dict, nav_list, nav_str, next_continuation_token, text_of,
)
from .items import parse_content_item

logger = get_logger(__name__)

CAROUSEL_KEYS = ("musicCarouselShelfRenderer", "musicImmersiveCarouselShelfRenderer")
SHELF_KEYS = ("musicShelfRenderer",)


def carousel_title(renderer: dict) -> Optional[str]:
    for header_key in ("musicCarouselShelfBasicHeaderRenderer", "musicImmersiveCarouselShelfBasicHeaderRenderer"):
        title = text_of(renderer, "header", header_key, "title")
        if title:
            return title
    return None


def shelf_title(renderer: dict) -> Optional[str]:
    return text_of(renderer, "title") or text_of(renderer, "header", "musicShelfHeaderRenderer", "title")


def parse_section(section: Any) -> Optional[HomeSection]:
    """
    Parse one section, None for unknown kinds and sections without items

    Items that fail to parse are dropped individually.
    """
    for key in CAROUSEL_KEYS:
        renderer = nav_dict(section, key)
        if renderer is not None:
            title = carousel_title(renderer)
            break
    else:
        for key in SHELF_KEYS:
            renderer = nav_dict(section, key)
            if renderer is not None:
                title = shelf_title(renderer)
                break
        else:
            return None

    items = [item for item in map(parse_content_item, nav_list(renderer, "contents")) if item is not None]
    if not items:
        return None

    return HomeSection(id=uuid.uuid4().hex, title=title or "", items=items)


def parse_sections(sections: List[Any]) -> List[HomeSection]:
    parsed = [parse_section(section) for section in sections]
    return [section for section in parsed if section is not None]


@log_performance
def parse_home(data: Any) -> List[HomeSection]:
    """Sections of a feed's first page"""
    sections = parse_sections(nav_list(extract_section_list(data), "contents"))
    logger.debug(f"Parsed {len(sections)} sections from first page")
    return sections


def extract_home_continuation(data: Any) -> Optional[str]:
    """Continuation token of a feed's first page"""
    section_list = extract_section_list(data)
    return (
        next_continuation_token(section_list)
        or continuation_item_token(nav_list(section_list, "contents"))
    )


def continuation_sections(data: Any) -> List[Any]:
    contents = nav(data, "continuationContents", "sectionListContinuation", "contents")
    if isinstance(contents, list):
        return contents
    return appended_continuation_items(data) or []


def parse_home_continuation(data: Any) -> List[HomeSection]:
    """Sections of a continuation page"""
    return parse_sections(continuation_sections(data))


def extract_continuation_from_continuation(data: Any) -> Optional[str]:
    """Next token of a continuation page"""
    token = nav_str(data, "continuationContents", "sectionListContinuation",
                    "continuations", 0, "nextContinuationData", "continuation")
    return token or continuation_item_token(continuation_sections(data))
