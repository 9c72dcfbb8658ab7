"""
ytmweb: YouTube Music web API client and command-line browser

ytmweb reads YouTube Music through the internal JSON API of the web
player, signed with the session cookies of a signed-in browser. It returns
typed models for the home and explore feeds, search, playlists and albums,
artist pages, the user's library and lyrics, and performs ratings, library
edits and subscriptions.

## Architecture

**Configuration (`ytmweb/config/`)**
- settings.py: YAML + environment variable settings, shared as a singleton
- auth.py: cookie providers, SAPISIDHASH request signing, session state

**YouTube Music integration (`ytmweb/ytmusic/`)**
- executor, retry and cache: one signed, retried, cached API call
- paginator: continuation-token following for long pages
- parsers: pure functions from raw documents to models
- client: the high-level operations

**Utilities (`ytmweb/utils/`)**
- logger.py: colored console + rotating file logging
- helpers.py: duration, count and URL helpers

**Command line (`ytmweb/main.py`)**
- `ytmweb home`, `ytmweb search QUERY`, `ytmweb playlist ID`, ...

## Quick Start

```bash
# Export cookies.txt from a signed-in browser session
cp ~/Downloads/cookies.txt ~/.ytmweb/cookies.txt

ytmweb auth status
ytmweb home
ytmweb search "daft punk"
```
"""

# Version information for the ytmweb package
__version__ = "0.9.0"

__author__ = "ytmweb contributors"

__description__ = "YouTube Music web API client with cookie authentication, caching and pagination"

# The client is imported before anything that pulls in ytmweb.config.auth,
# which needs ytmweb.ytmusic.exceptions to be importable
from .ytmusic.client import YTMusicClient, get_ytmusic_client, reset_ytmusic_client
from .ytmusic import exceptions, models

__all__ = [
    "__version__",
    "__author__",
    "__description__",
    "YTMusicClient",
    "get_ytmusic_client",
    "reset_ytmusic_client",
    "exceptions",
    "models",
]
