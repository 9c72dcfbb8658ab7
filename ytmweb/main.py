"""
Main CLI interface for ytmweb

Command-line browser for YouTube Music built on the web API client. Every
command builds one client for the invocation (settings, cookie provider,
cache and retry policy wired together) and prints either a readable
listing or, with --json, the models serialized as JSON.

Command groups:
- Browsing (home, explore, search, suggest, playlist, artist, library, liked, lyrics)
- Actions (rate)
- Session handling (auth status, auth logout)
- Diagnostics (cache)
"""

import functools
import json
import sys

import click

from .config.auth import AuthService, FileCookieProvider, get_auth, reset_auth
from .config.settings import get_settings, reload_settings
from .utils.helpers import format_duration, truncate_string
from .utils.logger import configure_from_settings, get_current_log_file, get_logger
from .ytmusic.client import build_client
from .ytmusic.exceptions import (
    ApiError, AuthExpired, NetworkError, NotAuthenticated, ParseError,
    RequestCancelled, YTMusicError,
)
from .ytmusic.models import HomeSectionItem, ItemKind, LikeStatus

logger = get_logger(__name__)

# Exit codes per error kind; anything else exits with 1
EXIT_CODES = {
    NotAuthenticated: 2,
    AuthExpired: 2,
    NetworkError: 3,
    ApiError: 4,
    ParseError: 5,
    RequestCancelled: 130,
}


def exit_code_for(error: YTMusicError) -> int:
    for error_type, code in EXIT_CODES.items():
        if isinstance(error, error_type):
            return code
    return 1


def handle_error(func):
    """
    Decorator to handle CLI errors gracefully

    API errors print their title and message and exit with the code of
    their kind; sign-in problems add a hint about the cookies file.

    Args:
        func: The CLI command function to wrap

    Returns:
        Wrapped function with error handling
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except KeyboardInterrupt:
            click.echo(click.style("\n\nOperation cancelled by user", fg='yellow'))
            sys.exit(130)
        except YTMusicError as e:
            logger.debug(f"Command failed: {e!r} {e.details}")
            click.echo(click.style(f"{e.title}: {e.message}", fg='red'), err=True)
            if isinstance(e, (NotAuthenticated, AuthExpired)):
                click.echo(f"   Export cookies from a signed-in browser to {get_settings().get_cookie_file()}",
                           err=True)
            sys.exit(exit_code_for(e))
        except ValueError as e:
            click.echo(click.style(f"Error: {e}", fg='red'), err=True)
            sys.exit(1)
    return wrapper


def get_client(ctx):
    """Client for this invocation, built on first use"""
    if 'client' not in ctx.obj:
        ctx.obj['client'] = build_client(auth=get_auth())
    return ctx.obj['client']


def emit_json(value) -> None:
    click.echo(json.dumps(value, indent=2, ensure_ascii=False))


def format_item(item: HomeSectionItem) -> str:
    """One line describing a section item"""
    value = item.value
    if item.kind == ItemKind.SONG:
        return f"{value.title} - {value.artists_display}   [{value.id}]"
    if item.kind == ItemKind.ALBUM:
        artists = ", ".join(artist.name for artist in value.artists)
        year = f" ({value.year})" if value.year else ""
        return f"{value.title}{year}{' - ' + artists if artists else ''}   [{value.id}]"
    if item.kind == ItemKind.ARTIST:
        return f"{value.name}   [{value.id}]"
    return f"{value.title}{' - ' + value.author if value.author else ''}   [{value.id}]"


def echo_songs(songs, numbered: bool = True) -> None:
    for index, song in enumerate(songs, 1):
        prefix = f"{index:3d}. " if numbered else "   "
        click.echo(f"{prefix}{truncate_string(song.title, 50)} - {song.artists_display}"
                   f"   {song.duration_display}   [{song.id}]")


def echo_sections(response) -> None:
    if response.is_empty:
        click.echo("Nothing to show")
        return
    for section in response.sections:
        click.echo(click.style(section.title or "(untitled)", bold=True))
        for item in section.items:
            click.echo(f"   {click.style(item.kind.value, fg='cyan')}  {format_item(item)}")
        click.echo()


# Main CLI group - root command that all subcommands attach to
@click.group(invoke_without_command=True)
@click.option('--version', is_flag=True, help='Show version information')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose output')
@click.option('--config', type=click.Path(), help='Path to config file')
@click.option('--cookies', type=click.Path(), help='Path to a Netscape cookies.txt file')
@click.option('--json', 'as_json', is_flag=True, help='Print results as JSON')
@click.pass_context
def cli(ctx, version, verbose, config, cookies, as_json):
    """
    ytmweb - Browse YouTube Music from the command line

    Uses the session cookies of a signed-in browser to read your home feed,
    search, playlists, artists and library, and to rate songs.
    """
    ctx.ensure_object(dict)
    ctx.obj['json'] = as_json

    if version:
        from . import __version__
        click.echo(f"ytmweb v{__version__}")
        return

    if config:
        reload_settings(config)
        logger.debug(f"Loaded config: {config}")

    if cookies:
        get_settings().auth.cookie_file = cookies
        reset_auth()

    configure_from_settings(verbose=verbose)
    if verbose:
        ctx.obj['verbose'] = True
        logger.debug(f"Verbose mode enabled, log file: {get_current_log_file() or 'none'}")

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


# Browsing commands
@cli.command()
@click.pass_context
@handle_error
def home(ctx):
    """Show the home feed"""
    response = get_client(ctx).get_home()
    if ctx.obj['json']:
        emit_json(response.to_dict())
    else:
        echo_sections(response)


@cli.command()
@click.pass_context
@handle_error
def explore(ctx):
    """Show the explore feed (new releases, charts, moods)"""
    response = get_client(ctx).get_explore()
    if ctx.obj['json']:
        emit_json(response.to_dict())
    else:
        echo_sections(response)


@cli.command()
@click.argument('query')
@click.option('--limit', '-n', type=int, default=10, help='Results shown per category')
@click.pass_context
@handle_error
def search(ctx, query, limit):
    """Search songs, albums, artists and playlists"""
    response = get_client(ctx).search(query)
    if ctx.obj['json']:
        emit_json(response.to_dict())
        return

    if response.is_empty:
        click.echo(f"No results for: {query}")
        return

    categories = (
        ("Songs", ItemKind.SONG, response.songs),
        ("Albums", ItemKind.ALBUM, response.albums),
        ("Artists", ItemKind.ARTIST, response.artists),
        ("Playlists", ItemKind.PLAYLIST, response.playlists),
    )
    for heading, kind, values in categories:
        if not values:
            continue
        click.echo(click.style(f"{heading} ({len(values)})", bold=True))
        for value in values[:limit]:
            click.echo(f"   {format_item(HomeSectionItem(kind, value))}")
        click.echo()


@cli.command()
@click.argument('query')
@click.pass_context
@handle_error
def suggest(ctx, query):
    """Show search suggestions for a partial query"""
    suggestions = get_client(ctx).get_search_suggestions(query)
    if ctx.obj['json']:
        emit_json([suggestion.to_dict() for suggestion in suggestions])
        return
    for suggestion in suggestions:
        click.echo(suggestion.text)


@cli.command()
@click.argument('playlist_id')
@click.pass_context
@handle_error
def playlist(ctx, playlist_id):
    """Show a playlist or album with all of its tracks"""
    detail = get_client(ctx).get_playlist(playlist_id)
    if ctx.obj['json']:
        emit_json(detail.to_dict())
        return

    kind = "Album" if detail.is_album else "Playlist"
    click.echo(click.style(f"{kind}: {detail.title}", bold=True))
    if detail.playlist.author:
        click.echo(f"   By: {detail.playlist.author}")
    duration = detail.duration or format_duration(detail.total_duration)
    click.echo(f"   Tracks: {len(detail.tracks)}   Duration: {duration}")
    click.echo()
    echo_songs(detail.tracks)


@cli.command()
@click.argument('artist_id')
@click.option('--all-songs', is_flag=True, help="Fetch the artist's full songs list")
@click.pass_context
@handle_error
def artist(ctx, artist_id, all_songs):
    """Show an artist's top songs and albums"""
    client = get_client(ctx)
    detail = client.get_artist(artist_id)
    if all_songs and detail.has_more_songs:
        detail.songs = client.get_artist_songs(detail.songs_browse_id, detail.songs_params)

    if ctx.obj['json']:
        emit_json(detail.to_dict())
        return

    click.echo(click.style(detail.artist.name, bold=True))
    if detail.subscriber_count:
        subscribed = " (subscribed)" if detail.is_subscribed else ""
        click.echo(f"   {detail.subscriber_count}{subscribed}")
    if detail.description:
        click.echo(f"   {truncate_string(detail.description, 200)}")

    if detail.songs:
        click.echo(click.style("\nSongs", bold=True))
        echo_songs(detail.songs)
    if detail.albums:
        click.echo(click.style("\nAlbums", bold=True))
        for album in detail.albums:
            click.echo(f"   {format_item(HomeSectionItem(ItemKind.ALBUM, album))}")


@cli.command()
@click.pass_context
@handle_error
def library(ctx):
    """List the playlists saved in your library"""
    playlists = get_client(ctx).get_library_playlists()
    if ctx.obj['json']:
        emit_json([item.to_dict() for item in playlists])
        return
    if not playlists:
        click.echo("No playlists in library")
        return
    for item in playlists:
        count = f"   {item.track_count} tracks" if item.track_count is not None else ""
        click.echo(f"{item.title}{count}   [{item.id}]")


@cli.command()
@click.pass_context
@handle_error
def liked(ctx):
    """List your liked songs"""
    detail = get_client(ctx).get_liked_songs()
    if ctx.obj['json']:
        emit_json(detail.to_dict())
        return
    click.echo(click.style(f"Liked songs ({len(detail.tracks)})", bold=True))
    echo_songs(detail.tracks)


@cli.command()
@click.argument('video_id')
@click.pass_context
@handle_error
def lyrics(ctx, video_id):
    """Show the lyrics of a song"""
    result = get_client(ctx).get_lyrics(video_id)
    if ctx.obj['json']:
        emit_json(result.to_dict())
        return
    if not result.is_available:
        click.echo("No lyrics available")
        return
    click.echo(result.text)
    if result.source:
        click.echo(click.style(f"\n{result.source}", dim=True))


# Action commands
@cli.command()
@click.argument('video_id')
@click.option('--like', 'rating', flag_value='like', help='Like the song')
@click.option('--dislike', 'rating', flag_value='dislike', help='Dislike the song')
@click.option('--clear', 'rating', flag_value='clear', help='Remove the rating')
@click.pass_context
@handle_error
def rate(ctx, video_id, rating):
    """Rate a song"""
    if rating is None:
        raise click.UsageError("Choose one of --like, --dislike or --clear")

    status = {
        'like': LikeStatus.LIKE,
        'dislike': LikeStatus.DISLIKE,
        'clear': LikeStatus.INDIFFERENT,
    }[rating]
    get_client(ctx).rate_song(video_id, status)
    click.echo(f"Rated {video_id}: {rating}")


# Authentication commands group
@cli.group()
def auth():
    """
    Session management

    ytmweb signs requests with the cookies of a signed-in browser, read
    from a Netscape cookies.txt file.
    """
    pass


@auth.command()
@click.pass_context
@handle_error
def status(ctx):
    """Check whether usable session cookies are present"""
    auth_service: AuthService = get_auth()
    state = auth_service.check_login_status()
    cookie_file = get_settings().get_cookie_file()

    if ctx.obj.get('json'):
        emit_json({
            'state': state.value,
            'cookie_file': str(cookie_file),
            'needs_reauth': auth_service.needs_reauth,
        })
        return

    if auth_service.is_logged_in:
        click.echo(click.style("Authentication Status: Signed in", fg='green'))
    elif auth_service.needs_reauth:
        click.echo(click.style("Authentication Status: Session expired", fg='yellow'))
    else:
        click.echo(click.style("Authentication Status: Not signed in", fg='yellow'))
    click.echo(f"   Cookie file: {cookie_file}")


@auth.command()
@handle_error
def logout():
    """Delete the stored cookies file"""
    auth_service = get_auth()
    if not isinstance(auth_service.cookie_provider, FileCookieProvider):
        click.echo("Nothing to remove")
        return
    auth_service.sign_out()
    reset_auth()
    click.echo("Signed out")


# Diagnostics
@cli.command()
@click.pass_context
@handle_error
def cache(ctx):
    """
    Show response cache configuration

    The cache lives in memory for a single run, so only capacity and
    lifetimes are reported.
    """
    settings = get_settings()
    client = get_client(ctx)

    if client.cache is None:
        click.echo("Response cache: disabled")
        return

    config = {
        'max_entries': client.cache.max_entries,
        'ttl': {
            'home': settings.cache.home_ttl,
            'playlist': settings.cache.playlist_ttl,
            'artist': settings.cache.artist_ttl,
            'search': settings.cache.search_ttl,
        },
    }
    if ctx.obj['json']:
        emit_json(config)
        return

    click.echo("Response cache (in memory, per run):")
    click.echo(f"   Capacity: {config['max_entries']} entries")
    click.echo(f"   TTL home: {settings.cache.home_ttl}s   playlist: {settings.cache.playlist_ttl}s   "
               f"artist: {settings.cache.artist_ttl}s   search: {settings.cache.search_ttl}s")


# Entry point for module execution
if __name__ == '__main__':
    cli()
