"""
Small text helpers shared by the parsers and the CLI

Durations are displayed as "m:ss" or "h:mm:ss", the same shape the API
uses in track rows, so parsing and formatting are inverse operations.
"""

import re
from typing import Optional, List, Union

NUMBER_PATTERN = re.compile(r'\d[\d,]*')


def format_duration(seconds: Union[int, float]) -> str:
    """
    Render seconds as "m:ss", or "h:mm:ss" from one hour up

    Negative values render as "0:00".
    """
    total = max(int(seconds), 0)
    hours, rest = divmod(total, 3600)
    minutes, secs = divmod(rest, 60)

    if hours:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


def parse_duration_string(duration_str: Optional[str]) -> Optional[int]:
    """
    Seconds in a track-row duration

    Args:
        duration_str: "mm:ss" or "hh:mm:ss", surrounding whitespace allowed

    Returns:
        Total seconds, None for any other text
    """
    if not duration_str:
        return None

    parts = duration_str.strip().split(':')
    if len(parts) not in (2, 3) or not all(part.isdecimal() for part in parts):
        return None

    total = 0
    for part in parts:
        total = total * 60 + int(part)
    return total


def normalize_thumbnail_url(url: Optional[str]) -> Optional[str]:
    """
    Turn protocol-relative thumbnail URLs into absolute https URLs

    Args:
        url: URL as found in the API response

    Returns:
        Absolute URL, the input unchanged when already absolute, or None
    """
    if not url:
        return None
    if url.startswith('//'):
        return f"https:{url}"
    return url


def extract_numbers(text: str) -> List[int]:
    """All integers in text; "1,234" counts as one number"""
    return [int(match.replace(',', '')) for match in NUMBER_PATTERN.findall(text)]


def parse_count(text: Optional[str]) -> Optional[int]:
    """
    Parse the first count from a label like "25 songs" or "1,204 tracks"

    Args:
        text: Label text

    Returns:
        The count, or None when the label carries no number
    """
    if not text:
        return None
    numbers = extract_numbers(text)
    return numbers[0] if numbers else None


def truncate_string(text: str, max_length: int, suffix: str = "...") -> str:
    """Cut text to max_length characters, suffix included, for column output"""
    if len(text) <= max_length:
        return text

    keep = max_length - len(suffix)
    if keep <= 0:
        return suffix[:max_length]
    return text[:keep] + suffix
