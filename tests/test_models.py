# tests/test_models.py
"""Test domain model behaviour"""

import json

from ytmweb.ytmusic.models import (
    Album, Artist, ArtistDetail, HomeResponse, HomeSection, HomeSectionItem, ItemKind,
    LikeStatus, Lyrics, Playlist, PlaylistDetail, SearchResponse, Song, is_placeholder_id,
)


class TestSong:
    """Test song identity"""

    def test_equality_by_video_id(self):
        from_playlist = Song(id="v1", title="Title", duration=200)
        from_search = Song(id="v1", title="Title (Remastered)", artists=[Artist("UC1", "Someone")])
        assert from_playlist == from_search
        assert hash(from_playlist) == hash(from_search)
        assert len({from_playlist, from_search}) == 1

    def test_different_ids_differ(self):
        assert Song(id="v1", title="Same") != Song(id="v2", title="Same")

    def test_display_helpers(self):
        song = Song(id="v1", title="T", artists=[Artist("UC1", "A"), Artist.placeholder("B")], duration=225)
        assert song.artists_display == "A, B"
        assert song.duration_display == "3:45"
        assert Song(id="v2", title="T").duration_display == "--:--"

    def test_to_dict_is_json_serializable(self):
        song = Song(id="v1", title="T", album=Album("MPRE1", "A"), like_status=LikeStatus.LIKE)
        data = json.loads(json.dumps(song.to_dict()))
        assert data["album"]["id"] == "MPRE1"
        assert data["like_status"] == "LIKE"


class TestArtist:

    def test_placeholder_is_not_browsable(self):
        artist = Artist.placeholder("Nobody")
        assert not artist.is_browsable
        assert is_placeholder_id(artist.id)
        assert Artist("UC1", "Somebody").is_browsable

    def test_placeholders_never_repeat(self):
        ids = {Artist.placeholder("Same").id for _ in range(100)}
        assert len(ids) == 100


class TestLikeStatus:

    def test_from_api(self):
        assert LikeStatus.from_api("LIKE") == LikeStatus.LIKE
        assert LikeStatus.from_api("INDIFFERENT") == LikeStatus.INDIFFERENT
        assert LikeStatus.from_api("SOMETHING_NEW") is None
        assert LikeStatus.from_api(None) is None


class TestAggregates:
    """Test page-level models"""

    def test_playlist_detail_delegates(self):
        detail = PlaylistDetail(
            playlist=Playlist(id="PL1", title="Mix"),
            tracks=[Song(id="a", title="A", duration=60), Song(id="b", title="B")],
        )
        assert detail.id == "PL1"
        assert detail.title == "Mix"
        assert detail.total_duration == 60
        assert len(detail.to_dict()["tracks"]) == 2

    def test_artist_detail_more_songs(self):
        artist = Artist("UC1", "A")
        assert not ArtistDetail(artist=artist).has_more_songs
        assert ArtistDetail(artist=artist, songs_browse_id="VLOLAK1").has_more_songs

    def test_home_section_chart_detection(self):
        assert HomeSection(id="1", title="Top 100 Songs Global").is_chart
        assert HomeSection(id="2", title="Trending").is_chart
        assert not HomeSection(id="3", title="Quick picks").is_chart

    def test_item_title(self):
        assert HomeSectionItem(ItemKind.ARTIST, Artist("UC1", "Name")).title == "Name"
        assert HomeSectionItem(ItemKind.ALBUM, Album("MPRE1", "Record")).title == "Record"

    def test_empty_responses(self):
        assert HomeResponse().is_empty
        assert SearchResponse.empty().is_empty
        assert not SearchResponse(artists=[Artist("UC1", "A")]).is_empty

    def test_search_all_items_order(self):
        response = SearchResponse(
            songs=[Song(id="v1", title="S")],
            albums=[Album("MPRE1", "Al")],
            artists=[Artist("UC1", "Ar")],
            playlists=[Playlist("VL1", "P")],
        )
        assert [item.kind for item in response.all_items] == [
            ItemKind.SONG, ItemKind.ALBUM, ItemKind.ARTIST, ItemKind.PLAYLIST
        ]

    def test_lyrics_availability(self):
        assert not Lyrics.unavailable().is_available
        assert not Lyrics(text="   ").is_available
        assert Lyrics(text="la la").is_available
