"""
Continuation-token pagination for feed-like pages

The home and explore feeds (and long playlists) arrive as a first page
plus an opaque continuation token. Each follow-up request carries only
`{"continuation": token}` and its response is shaped differently from the
first page, so the first page and continuation pages each get their own
parse and token-extraction functions.

Guarantees:
- at most `max_continuations` follow-up requests per collect() call
- a failing or unparseable continuation ends the loop; pages already
  parsed are kept
- cancellation raises RequestCancelled and never appends a partial page
- requests are strictly sequential, one token at a time
"""

import threading
from typing import Any, Callable, Dict, List, Optional, TypeVar

from ..utils.logger import get_logger
from .exceptions import RequestCancelled, YTMusicError

T = TypeVar('T')

Document = Dict[str, Any]

# Raised by parse functions on a page shaped in an unexpected way
PARSE_FAILURES = (LookupError, TypeError, ValueError, AttributeError)


class ContinuationPaginator:
    """
    Follows continuation tokens and accumulates parsed pages

    Args:
        executor: RequestExecutor (anything with a compatible execute())
        max_continuations: Ceiling on follow-up requests
        endpoint: Endpoint the continuation requests are sent to
    """

    DEFAULT_MAX_CONTINUATIONS = 10

    def __init__(self, executor, max_continuations: int = DEFAULT_MAX_CONTINUATIONS,
                 endpoint: str = "browse"):
        self.executor = executor
        self.max_continuations = max_continuations
        self.endpoint = endpoint
        self.logger = get_logger(__name__)

    def collect(self,
                initial: Document,
                parse_initial: Callable[[Document], List[T]],
                extract_initial_token: Callable[[Document], Optional[str]],
                parse_continuation: Callable[[Document], List[T]],
                extract_continuation_token: Callable[[Document], Optional[str]],
                cancel_event: Optional[threading.Event] = None) -> List[T]:
        """
        Parse the first page and follow its continuations

        Args:
            initial: First page document, already fetched
            parse_initial: Items from the first page
            extract_initial_token: Continuation token of the first page
            parse_continuation: Items from a continuation page
            extract_continuation_token: Next token from a continuation page
            cancel_event: Optional event to abandon pagination

        Returns:
            Items of all pages in order

        Raises:
            RequestCancelled: If cancel_event is set while paginating
        """
        items = list(parse_initial(initial))
        token = extract_initial_token(initial)
        fetched = 0

        while token and fetched < self.max_continuations:
            self._check_cancelled(cancel_event)
            number = fetched + 1

            try:
                page = self.executor.execute(
                    self.endpoint, {'continuation': token}, cancel_event=cancel_event
                )
                fetched += 1
                page_items = parse_continuation(page)
                next_token = extract_continuation_token(page)
            except RequestCancelled:
                raise
            except YTMusicError as e:
                self.logger.warning(f"Continuation {number} failed, keeping {len(items)} items: {e}")
                break
            except PARSE_FAILURES as e:
                self.logger.warning(f"Continuation {number} unreadable, keeping {len(items)} items: {e}")
                break

            self._check_cancelled(cancel_event)
            items.extend(page_items)
            token = next_token

        self.logger.debug(f"Collected {len(items)} items with {fetched} continuations")
        return items

    def _check_cancelled(self, cancel_event: Optional[threading.Event]) -> None:
        if cancel_event is not None and cancel_event.is_set():
            raise RequestCancelled()
