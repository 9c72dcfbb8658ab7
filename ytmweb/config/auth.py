"""
Session cookies and request signing for the YouTube Music web API

The web API authenticates requests with the browser's session cookies plus
an `Authorization: SAPISIDHASH ...` header derived from the SAPISID cookie.
This module never performs a login itself: cookies come from a
CookieProvider (an exported cookies.txt file, or memory for tests and
embedding applications), and the AuthService only tracks whether a usable
session is present.

Key pieces:
- Cookie / CookieProvider: minimal cookie source interface with change listeners
- MemoryCookieProvider, FileCookieProvider: concrete cookie sources
- compute_sapisidhash / AuthSignature: per-request signature, recomputed every call
- SessionOwner / AuthService: session state and the "session expired" callback

Signature scheme:
    SAPISIDHASH {ts}_{sha1("{ts} {secret} {origin}")}
where ts is the current Unix time in whole seconds and secret is the value
of the __Secure-3PAPISID cookie, or SAPISID when the former is absent.
"""

import hashlib
import threading
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from http.cookiejar import LoadError, MozillaCookieJar
from pathlib import Path
from typing import Callable, List, Optional, Union

from .settings import get_settings
from ..utils.logger import get_logger
from ..ytmusic.exceptions import AuthExpired, NotAuthenticated


# Cookie names holding the SAPISID secret, in order of preference
SAPISID_COOKIE_NAMES = ("__Secure-3PAPISID", "SAPISID")


@dataclass
class Cookie:
    """
    A browser cookie as far as request signing is concerned

    Attributes:
        name: Cookie name
        value: Cookie value
        domain: Cookie domain, possibly with a leading dot
        expires: Expiry as Unix time in seconds, None if unknown
        session_only: Session cookies never expire from our point of view
    """
    name: str
    value: str
    domain: str
    expires: Optional[float] = None
    session_only: bool = False

    def is_expired(self, now: Optional[float] = None) -> bool:
        if self.session_only or self.expires is None:
            return False
        return (now if now is not None else time.time()) >= self.expires

    def matches_domain(self, domain: str) -> bool:
        """Suffix match in either direction, ignoring a leading dot"""
        own = self.domain.lstrip('.').lower()
        other = domain.lstrip('.').lower()
        return own == other or own.endswith('.' + other) or other.endswith('.' + own)


class CookieProvider(ABC):
    """
    Source of session cookies

    Subclasses implement all_cookies(). Domain filtering and the Cookie
    header are derived from it. Listeners are called without arguments
    whenever the provider's cookies change.
    """

    def __init__(self):
        self._listeners: List[Callable[[], None]] = []
        self._listeners_lock = threading.Lock()

    @abstractmethod
    def all_cookies(self) -> List[Cookie]:
        """Return every cookie known to the provider"""

    def cookies_for_domain(self, domain: str) -> List[Cookie]:
        return [cookie for cookie in self.all_cookies() if cookie.matches_domain(domain)]

    def cookie_header(self, domain: str) -> str:
        """Build a Cookie header value from the domain's cookies"""
        return "; ".join(f"{cookie.name}={cookie.value}" for cookie in self.cookies_for_domain(domain))

    def add_listener(self, callback: Callable[[], None]) -> None:
        with self._listeners_lock:
            if callback not in self._listeners:
                self._listeners.append(callback)

    def remove_listener(self, callback: Callable[[], None]) -> None:
        with self._listeners_lock:
            if callback in self._listeners:
                self._listeners.remove(callback)

    def _notify_changed(self) -> None:
        with self._listeners_lock:
            listeners = list(self._listeners)
        for callback in listeners:
            callback()


class MemoryCookieProvider(CookieProvider):
    """Cookie provider backed by a plain list, used by tests and embedding code"""

    def __init__(self, cookies: Optional[List[Cookie]] = None):
        super().__init__()
        self._cookies: List[Cookie] = list(cookies or [])
        self._lock = threading.Lock()

    def all_cookies(self) -> List[Cookie]:
        with self._lock:
            return list(self._cookies)

    def set_cookie(self, cookie: Cookie) -> None:
        """Add a cookie, replacing any cookie with the same name and domain"""
        with self._lock:
            self._cookies = [
                c for c in self._cookies
                if not (c.name == cookie.name and c.domain == cookie.domain)
            ]
            self._cookies.append(cookie)
        self._notify_changed()

    def clear(self) -> None:
        with self._lock:
            self._cookies = []
        self._notify_changed()


class FileCookieProvider(CookieProvider):
    """
    Cookie provider reading a Netscape cookies.txt export

    The file is parsed with http.cookiejar.MozillaCookieJar and reloaded
    whenever its modification time changes, which also notifies listeners.
    A missing or unreadable file yields no cookies.
    """

    def __init__(self, path: Union[str, Path]):
        super().__init__()
        self.path = Path(path).expanduser()
        self.logger = get_logger(__name__)
        self._lock = threading.Lock()
        self._cookies: List[Cookie] = []
        self._mtime: Optional[float] = None

    def all_cookies(self) -> List[Cookie]:
        changed = self._reload_if_changed()
        if changed:
            self._notify_changed()
        with self._lock:
            return list(self._cookies)

    def _reload_if_changed(self) -> bool:
        try:
            mtime = self.path.stat().st_mtime
        except OSError:
            mtime = None

        with self._lock:
            if mtime == self._mtime:
                return False
            self._mtime = mtime
            self._cookies = self._load() if mtime is not None else []
            return True

    def _load(self) -> List[Cookie]:
        jar = MozillaCookieJar(str(self.path))
        try:
            jar.load(ignore_discard=True, ignore_expires=True)
        except (LoadError, OSError) as e:
            self.logger.warning(f"Failed to load cookies from {self.path}: {e}")
            return []

        cookies = [
            Cookie(
                name=c.name,
                value=c.value or "",
                domain=c.domain,
                expires=float(c.expires) if c.expires else None,
                session_only=bool(c.discard) or not c.expires,
            )
            for c in jar
        ]
        self.logger.debug(f"Loaded {len(cookies)} cookies from {self.path}")
        return cookies

    def clear(self) -> None:
        """Forget the session by deleting the cookie file"""
        try:
            self.path.unlink()
        except FileNotFoundError:
            pass
        with self._lock:
            self._cookies = []
            self._mtime = None
        self._notify_changed()


def compute_sapisidhash(secret: str, timestamp: int, origin: str) -> str:
    """
    Compute the SAPISIDHASH token

    Args:
        secret: SAPISID cookie value
        timestamp: Unix time in whole seconds
        origin: Web origin the request claims, e.g. https://music.youtube.com

    Returns:
        "{timestamp}_{hex sha1 digest}"
    """
    digest = hashlib.sha1(f"{timestamp} {secret} {origin}".encode("utf-8")).hexdigest()
    return f"{timestamp}_{digest}"


class AuthSignature:
    """
    Signs requests from the provider's SAPISID cookie

    Args:
        cookie_provider: Cookie source
        origin: Origin embedded in the hash, defaults to the configured API origin
        clock: Time source returning Unix seconds
        domain: Cookie domain to read, defaults to the configured one
    """

    def __init__(self, cookie_provider: CookieProvider, origin: Optional[str] = None,
                 clock: Callable[[], float] = time.time, domain: Optional[str] = None):
        settings = get_settings()
        self.cookie_provider = cookie_provider
        self.origin = origin or settings.api.origin
        self.domain = domain or settings.auth.cookie_domain
        self._clock = clock

    def find_session_cookie(self) -> Optional[Cookie]:
        cookies = {cookie.name: cookie for cookie in self.cookie_provider.cookies_for_domain(self.domain)}
        for name in SAPISID_COOKIE_NAMES:
            if name in cookies and cookies[name].value:
                return cookies[name]
        return None

    def resolve_secret(self) -> str:
        """
        Return the SAPISID secret

        Raises:
            NotAuthenticated: If no session cookie exists
            AuthExpired: If the session cookie is past its expiry
        """
        cookie = self.find_session_cookie()
        if cookie is None:
            raise NotAuthenticated()
        if cookie.is_expired(self._clock()):
            raise AuthExpired(details={'cookie': cookie.name, 'expires': cookie.expires})
        return cookie.value

    def authorization_header(self) -> str:
        """Build a fresh Authorization header value for one request"""
        secret = self.resolve_secret()
        return f"SAPISIDHASH {compute_sapisidhash(secret, int(self._clock()), self.origin)}"

    def cookie_header(self) -> str:
        return self.cookie_provider.cookie_header(self.domain)


class SessionOwner(ABC):
    """Receives the one notification sent when the server rejects the session"""

    @abstractmethod
    def session_expired(self) -> None:
        """Called once per failing request that ended in AuthExpired"""


class AuthState(Enum):
    """
    Session state

    Values:
        INITIALIZING: Cookies not inspected yet
        LOGGED_OUT: No usable session
        LOGGING_IN: Waiting for the user to provide fresh cookies
        LOGGED_IN: A session cookie is available
    """
    INITIALIZING = "initializing"
    LOGGED_OUT = "logged_out"
    LOGGING_IN = "logging_in"
    LOGGED_IN = "logged_in"


class AuthService(SessionOwner):
    """
    Tracks whether a usable session exists

    The service watches its cookie provider: any cookie change re-checks the
    login status, so dropping a fresh cookies.txt in place completes a
    pending login. When the server rejects the session, `session_expired()`
    flips the state to LOGGED_OUT and raises `needs_reauth` for the caller
    to prompt the user.
    """

    def __init__(self, cookie_provider: Optional[CookieProvider] = None):
        self.settings = get_settings()
        self.logger = get_logger(__name__)
        self.cookie_provider = cookie_provider or FileCookieProvider(self.settings.get_cookie_file())
        self.signature = AuthSignature(self.cookie_provider)

        self.state = AuthState.INITIALIZING
        self.sapisid: Optional[str] = None
        self.needs_reauth = False

        self.cookie_provider.add_listener(self._on_cookies_changed)

    @property
    def is_logged_in(self) -> bool:
        return self.state == AuthState.LOGGED_IN

    @property
    def is_initializing(self) -> bool:
        return self.state == AuthState.INITIALIZING

    def check_login_status(self) -> AuthState:
        """Inspect the cookies and update the state accordingly"""
        try:
            secret = self.signature.resolve_secret()
        except NotAuthenticated:
            self.logger.debug("No session cookie found")
            self._set_logged_out()
        except AuthExpired:
            self.logger.debug("Session cookie expired")
            self._set_logged_out()
            self.needs_reauth = True
        else:
            self.complete_login(secret)
        return self.state

    def start_login(self) -> None:
        self.state = AuthState.LOGGING_IN
        self.logger.info("Waiting for session cookies", extra={'console_output': True})

    def complete_login(self, sapisid: str) -> None:
        self.state = AuthState.LOGGED_IN
        self.sapisid = sapisid
        self.needs_reauth = False

    def session_expired(self) -> None:
        self.logger.warning("Session expired, sign in again to continue")
        self._set_logged_out()
        self.needs_reauth = True

    def sign_out(self) -> None:
        """Drop the session, clearing the provider's cookies when it supports that"""
        clear = getattr(self.cookie_provider, 'clear', None)
        if callable(clear):
            self.cookie_provider.remove_listener(self._on_cookies_changed)
            try:
                clear()
            finally:
                self.cookie_provider.add_listener(self._on_cookies_changed)
        self._set_logged_out()
        self.needs_reauth = False
        self.logger.info("Signed out")

    def _set_logged_out(self) -> None:
        self.state = AuthState.LOGGED_OUT
        self.sapisid = None

    def _on_cookies_changed(self) -> None:
        if self.state != AuthState.INITIALIZING:
            self.check_login_status()


# Global authentication instance
_auth_instance: Optional[AuthService] = None


def get_auth() -> AuthService:
    """
    Get the global authentication instance (singleton pattern)

    Returns:
        Global AuthService reading the configured cookie file
    """
    global _auth_instance
    if not _auth_instance:
        _auth_instance = AuthService()
    return _auth_instance


def reset_auth() -> None:
    """
    Reset the global authentication instance

    Forces a new instance, reading the current settings, on next access.
    """
    global _auth_instance
    _auth_instance = None
