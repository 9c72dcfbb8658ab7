"""
Authenticated request execution against the YouTube Music internal API

One `execute()` call is one logical API call: cache lookup, then a signed
POST run under the retry policy, then a cache store. Every request body is
the caller's logical fields plus the fixed client context block the web
player sends; the upstream service rejects calls without it.

HTTP status handling:
- 401/403: AuthExpired, never retried; the session owner is told once
- other non-2xx: ApiError(code) (429/5xx retried by the policy)
- 2xx with a body that is not a JSON object: ParseError
- transport failures and timeouts: NetworkError (retried)
"""

import threading
from datetime import datetime
from typing import Any, Dict, Optional

import requests

from ..config.auth import AuthSignature, SessionOwner
from ..config.settings import get_settings, Settings
from ..utils.logger import get_logger
from .cache import ResponseCache, stable_cache_key
from .exceptions import (
    ApiError, AuthExpired, NetworkError, ParseError, RequestCancelled
)
from .retry import RetryPolicy


def utc_offset_minutes() -> int:
    """Local UTC offset with the sign convention of JavaScript's getTimezoneOffset()"""
    offset = datetime.now().astimezone().utcoffset()
    return -int(offset.total_seconds() // 60) if offset else 0


class RequestExecutor:
    """
    Performs signed, cached, retried calls to the internal API

    Args:
        signature: Request signer reading the session cookies
        session_owner: Notified once per call that ends in AuthExpired
        cache: Response cache, None disables caching
        retry_policy: Retry policy, defaults to the configured one
        session: requests.Session to send requests with
        settings: Settings to read API identity and timeouts from
    """

    def __init__(self, signature: AuthSignature, session_owner: Optional[SessionOwner] = None,
                 cache: Optional[ResponseCache] = None, retry_policy: Optional[RetryPolicy] = None,
                 session: Optional[requests.Session] = None, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.logger = get_logger(__name__)
        self.signature = signature
        self.session_owner = session_owner
        self.cache = cache
        self.retry_policy = retry_policy or RetryPolicy.default()

        self.session = session or requests.Session()
        self.session.headers.update({'User-Agent': self.settings.api.user_agent})

    def build_context(self) -> Dict[str, Any]:
        """Client context block attached to every request body"""
        api = self.settings.api
        return {
            'client': {
                'clientName': api.client_name,
                'clientVersion': api.client_version,
                'hl': api.language,
                'gl': api.region,
                'experimentIds': [],
                'experimentsToken': '',
                'browserName': 'Safari',
                'browserVersion': '17.0',
                'osName': 'Macintosh',
                'osVersion': '10_15_7',
                'platform': 'DESKTOP',
                'userAgent': api.user_agent,
                'utcOffsetMinutes': utc_offset_minutes(),
            },
            'user': {
                'lockedSafetyMode': False,
            },
        }

    def build_headers(self) -> Dict[str, str]:
        """
        Build the per-request headers

        Raises:
            NotAuthenticated: If no session cookie exists
            AuthExpired: If the session cookie is expired
        """
        api = self.settings.api
        return {
            'Cookie': self.signature.cookie_header(),
            'Authorization': self.signature.authorization_header(),
            'Origin': api.origin,
            'Referer': f"{api.origin}/",
            'X-Origin': api.origin,
            'Content-Type': 'application/json',
            'X-Goog-AuthUser': api.auth_user,
            'User-Agent': api.user_agent,
        }

    def execute(self, endpoint: str, body: Dict[str, Any], ttl: Optional[float] = None,
                cancel_event: Optional[threading.Event] = None) -> Dict[str, Any]:
        """
        Perform one logical API call

        Args:
            endpoint: Endpoint path below the API base URL, e.g. "browse"
            body: Logical request fields (the client context is added here)
            ttl: Cache lifetime in seconds; None or 0 bypasses the cache
            cancel_event: Optional event to abandon the call

        Returns:
            The decoded JSON object; a cached document is shared and must not
            be modified

        Raises:
            YTMusicError: One of the error kinds described in the module docstring
        """
        cacheable = bool(ttl) and self.cache is not None
        cache_key = stable_cache_key(endpoint, body)

        if cacheable:
            cached = self.cache.get(cache_key)
            if cached is not None:
                self.logger.debug(f"Cache hit: {cache_key}")
                return cached

        try:
            data = self.retry_policy.execute(lambda: self._send(endpoint, body), cancel_event)
        except AuthExpired:
            self._notify_session_expired()
            raise

        if cancel_event is not None and cancel_event.is_set():
            raise RequestCancelled(details={'endpoint': endpoint})

        if cacheable:
            self.cache.set(cache_key, data, ttl)
        return data

    def _send(self, endpoint: str, body: Dict[str, Any]) -> Dict[str, Any]:
        """One network attempt"""
        api = self.settings.api
        url = f"{api.base_url}/{endpoint}"
        params = {'key': api.api_key, 'prettyPrint': 'false'}
        headers = self.build_headers()
        payload = dict(body)
        payload['context'] = self.build_context()

        self.logger.debug(f"POST {endpoint} {sorted(body)}")
        try:
            response = self.session.post(
                url,
                params=params,
                json=payload,
                headers=headers,
                timeout=self.settings.network.request_timeout,
            )
        except requests.RequestException as e:
            raise NetworkError(e, details={'endpoint': endpoint})

        status = response.status_code
        if status in (401, 403):
            raise AuthExpired(details={'endpoint': endpoint, 'status': status})
        if not 200 <= status < 300:
            raise ApiError(status, self._error_message(response), details={'endpoint': endpoint})

        try:
            data = response.json()
        except ValueError as e:
            raise ParseError(f"Invalid JSON from {endpoint}: {e}", details={'endpoint': endpoint})

        if not isinstance(data, dict):
            raise ParseError(f"Expected a JSON object from {endpoint}", details={'endpoint': endpoint})
        return data

    def _error_message(self, response: requests.Response) -> str:
        """Pull the API's error message out of an error response if it has one"""
        try:
            error = response.json().get('error', {})
            if isinstance(error, dict) and error.get('message'):
                return f"HTTP {response.status_code}: {error['message']}"
        except (ValueError, AttributeError):
            pass
        return f"HTTP {response.status_code}"

    def _notify_session_expired(self) -> None:
        if self.session_owner is not None:
            self.session_owner.session_expired()
