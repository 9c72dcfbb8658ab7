# tests/test_parsers.py
"""Test response parsing against representative document shapes"""

from ytmweb.ytmusic.models import ItemKind, LikeStatus
from ytmweb.ytmusic.parsers import (
    extract_continuation_from_continuation, extract_home_continuation, extract_lyrics_browse_id,
    extract_playlist_continuation, parse_artist, parse_artist_songs, parse_home,
    parse_home_continuation, parse_library_playlists, parse_lyrics, parse_playlist,
    parse_playlist_continuation, parse_search, parse_suggestions,
)
from ytmweb.ytmusic.parsers.helpers import (
    PAGE_TYPE_ARTIST, best_thumbnail, extract_artists, extract_duration, extract_title,
    extract_video_id, nav, nav_list, nav_str,
)
from ytmweb.ytmusic.parsers.items import parse_album_card, parse_content_item


MENU = {"menuRenderer": {
    "items": [{"toggleMenuServiceItemRenderer": {
        "defaultIcon": {"iconType": "LIBRARY_ADD"},
        "defaultServiceEndpoint": {"feedbackEndpoint": {"feedbackToken": "ADD_TOKEN"}},
        "toggledServiceEndpoint": {"feedbackEndpoint": {"feedbackToken": "REMOVE_TOKEN"}},
    }}],
    "topLevelButtons": [{"likeButtonRenderer": {"likeStatus": "LIKE"}}],
}}


class TestNavigation:
    """Test safe navigation helpers"""

    def test_nav_walks_keys_and_indices(self):
        data = {"a": [{"b": "x"}, {"b": "y"}]}
        assert nav(data, "a", 1, "b") == "y"
        assert nav(data, "a", -1, "b") == "y"

    def test_nav_returns_none_on_bad_shape(self):
        data = {"a": [{"b": "x"}]}
        assert nav(data, "a", 5, "b") is None
        assert nav(data, "a", "b") is None
        assert nav(data, "missing") is None
        assert nav(None, "a") is None
        assert nav("text", 0) is None

    def test_typed_accessors(self):
        data = {"s": "x", "l": [1], "n": 3}
        assert nav_str(data, "s") == "x"
        assert nav_str(data, "n") is None
        assert nav_list(data, "l") == [1]
        assert nav_list(data, "s") == []


class TestFieldExtractors:
    """Test layered field extraction"""

    def test_title_falls_back_to_flex_column(self, docs):
        row = docs.song_row("v1", "Row Title")["musicResponsiveListItemRenderer"]
        assert extract_title(row) == "Row Title"
        assert extract_title({}, "Unknown") == "Unknown"

    def test_separators_removed_from_artists(self, docs):
        runs = [
            docs.run("Alpha", "UCalpha"), docs.run(" & "), docs.run("Beta", "UCbeta"),
            docs.run(", "), docs.run("Gamma"), docs.run(" • "), docs.run(""),
        ]
        row = docs.song_row("v1", "Song", runs)["musicResponsiveListItemRenderer"]
        artists = extract_artists(row)

        assert [artist.name for artist in artists] == ["Alpha", "Beta", "Gamma"]
        assert artists[0].id == "UCalpha"
        assert artists[1].id == "UCbeta"
        assert not artists[2].is_browsable

    def test_placeholder_ids_are_unique(self, docs):
        row = docs.song_row("v1", "Song", [docs.run("Same")])["musicResponsiveListItemRenderer"]
        first = extract_artists(row)[0]
        second = extract_artists(row)[0]
        assert first.id != second.id
        assert first.name == second.name == "Same"

    def test_thumbnail_largest_and_https(self, docs):
        data = {"thumbnail": docs.thumbnail("//img/small", "//img/large")}
        assert best_thumbnail(data) == "https://img/large"

    def test_thumbnail_shapes(self):
        cropped = {"thumbnail": {"croppedSquareThumbnailRenderer": {"thumbnail": {"thumbnails": [{"url": "https://c"}]}}}}
        bare = {"thumbnail": {"thumbnails": [{"url": "https://b"}]}}
        wrapped = {"thumbnailRenderer": {"musicThumbnailRenderer": {"thumbnail": {"thumbnails": [{"url": "https://w"}]}}}}
        assert best_thumbnail(cropped) == "https://c"
        assert best_thumbnail(bare) == "https://b"
        assert best_thumbnail(wrapped) == "https://w"
        assert best_thumbnail({}) is None

    def test_video_id_shapes(self):
        assert extract_video_id({"playlistItemData": {"videoId": "a"}}) == "a"
        assert extract_video_id({"navigationEndpoint": {"watchEndpoint": {"videoId": "b"}}}) == "b"
        overlay = {"overlay": {"musicItemThumbnailOverlayRenderer": {"content": {"musicPlayButtonRenderer": {
            "playNavigationEndpoint": {"watchEndpoint": {"videoId": "c"}}}}}}}
        assert extract_video_id(overlay) == "c"
        assert extract_video_id({}) is None

    def test_duration(self, docs):
        assert extract_duration(docs.song_row("v", "t", duration="1:02:03")["musicResponsiveListItemRenderer"]) == 3723
        assert extract_duration(docs.song_row("v", "t", duration="bad")["musicResponsiveListItemRenderer"]) is None
        assert extract_duration(docs.song_row("v", "t", duration="3:4²")["musicResponsiveListItemRenderer"]) is None
        assert extract_duration(docs.song_row("v", "t")["musicResponsiveListItemRenderer"]) is None


class TestItems:
    """Test row and card classification"""

    def test_album_card_requires_album_id(self, docs):
        album = parse_album_card(docs.card("LP", "MPREabc", [docs.run("Album"), docs.run(" • "),
                                                            docs.run("2020")])["musicTwoRowItemRenderer"])
        assert album.id == "MPREabc"
        assert album.year == "2020"

        assert parse_album_card(docs.card("Not an album", "UCxyz")["musicTwoRowItemRenderer"]) is None

    def test_song_row_menu(self, docs):
        item = parse_content_item(docs.song_row("v1", "Song", [docs.run("A", "UCa")], "3:00", menu=MENU))
        song = item.value
        assert item.kind == ItemKind.SONG
        assert song.feedback_tokens.add == "ADD_TOKEN"
        assert song.feedback_tokens.remove == "REMOVE_TOKEN"
        assert song.like_status == LikeStatus.LIKE
        assert song.duration == 180

    def test_saved_song_tokens_swap(self, docs):
        menu = {"menuRenderer": {"items": [{"toggleMenuServiceItemRenderer": {
            "defaultIcon": {"iconType": "LIBRARY_SAVED"},
            "defaultServiceEndpoint": {"feedbackEndpoint": {"feedbackToken": "REMOVE_TOKEN"}},
            "toggledServiceEndpoint": {"feedbackEndpoint": {"feedbackToken": "ADD_TOKEN"}},
        }}]}}
        song = parse_content_item(docs.song_row("v1", "Song", menu=menu)).value
        assert song.feedback_tokens.add == "ADD_TOKEN"
        assert song.feedback_tokens.remove == "REMOVE_TOKEN"

    def test_row_without_video_or_browse_id_is_skipped(self, docs):
        assert parse_content_item(docs.song_row(None, "Header row")) is None
        assert parse_content_item({"musicMultiRowListItemRenderer": {}}) is None

    def test_card_classified_by_page_type(self, docs):
        card = docs.card("Someone", "channel-without-prefix")
        card["musicTwoRowItemRenderer"]["navigationEndpoint"]["browseEndpoint"][
            "browseEndpointContextSupportedConfigs"] = {
            "browseEndpointContextMusicConfig": {"pageType": PAGE_TYPE_ARTIST}}
        item = parse_content_item(card)
        assert item.kind == ItemKind.ARTIST
        assert item.value.name == "Someone"


class TestHomeParser:
    """Test home feed parsing"""

    def home_document(self, docs):
        return docs.single_column([
            docs.carousel("Quick picks", [
                docs.card("Song A", video_id="v1", subtitle_runs=[docs.run("Artist", "UCa")]),
                docs.card("Album B", "MPREabc", [docs.run("Album"), docs.run(" • "),
                                                 docs.run("Artist", "UCa"), docs.run(" • "), docs.run("2020")]),
                docs.card("Unknown", "FEmusic_something"),
            ]),
            docs.shelf("Listen again", [docs.song_row("v2", "Row song", [docs.run("X", "UCx")], "3:00")]),
            {"musicTastebuilderShelfRenderer": {"contents": []}},
            docs.carousel("Empty", []),
        ], continuation="tok1")

    def test_sections_and_items(self, docs):
        sections = parse_home(self.home_document(docs))

        assert [section.title for section in sections] == ["Quick picks", "Listen again"]
        quick = sections[0]
        assert [item.kind for item in quick.items] == [ItemKind.SONG, ItemKind.ALBUM]
        assert quick.items[0].value.id == "v1"
        assert quick.items[0].value.artists[0].id == "UCa"

        album = quick.items[1].value
        assert [artist.id for artist in album.artists] == ["UCa"]
        assert album.year == "2020"

        assert sections[1].items[0].value.duration == 180

    def test_section_ids_are_unique(self, docs):
        first = parse_home(self.home_document(docs))
        second = parse_home(self.home_document(docs))
        assert first[0].id != second[0].id

    def test_initial_continuation(self, docs):
        assert extract_home_continuation(self.home_document(docs)) == "tok1"
        assert extract_home_continuation(docs.single_column([])) is None

    def test_continuation_page(self, docs):
        page = docs.section_continuation([
            docs.carousel("More", [docs.card("Mix", "VLPL1", [
                docs.run("Playlist"), docs.run(" • "), docs.run("Someone"), docs.run(" • "), docs.run("20 songs"),
            ])]),
        ], continuation="tok2")

        sections = parse_home_continuation(page)
        playlist = sections[0].items[0].value
        assert sections[0].title == "More"
        assert playlist.id == "VLPL1"
        assert playlist.track_count == 20
        assert playlist.author == "Someone"
        assert extract_continuation_from_continuation(page) == "tok2"

    def test_appended_continuation_items(self, docs):
        page = {"onResponseReceivedActions": [{"appendContinuationItemsAction": {"continuationItems": [
            docs.carousel("Appended", [docs.card("A", "UCa")]),
            {"continuationItemRenderer": {"continuationEndpoint": {"continuationCommand": {"token": "tok3"}}}},
        ]}}]}
        sections = parse_home_continuation(page)
        assert [section.title for section in sections] == ["Appended"]
        assert extract_continuation_from_continuation(page) == "tok3"

    def test_garbage_document(self):
        assert parse_home({}) == []
        assert parse_home({"contents": "nope"}) == []
        assert extract_home_continuation({}) is None


class TestSearchParser:
    """Test search result parsing"""

    def search_document(self, docs):
        song_one = docs.song_row("s1", "Song 1", [
            docs.run("Song"), docs.run(" • "), docs.run("Artist One", "UC1"), docs.run(" • "),
            docs.run("Album X", "MPREx"), docs.run(" • "), docs.run("3:45"),
        ])
        song_two = docs.song_row("s2", "Song 2", [
            docs.run("Song"), docs.run(" • "), docs.run("Plain Artist"), docs.run(" • "), docs.run("2:10"),
        ])
        top_card = {"musicCardShelfRenderer": {
            "title": {"runs": [docs.run("Top Artist", "UCtop", PAGE_TYPE_ARTIST)]},
            "subtitle": {"runs": [docs.run("Artist")]},
            "contents": [song_one],
        }}
        return docs.search_results([
            top_card,
            docs.shelf("Songs", [song_one, song_two, docs.song_row(None, "No video")]),
            docs.shelf("More", [
                docs.list_row("MPREalb", "Album T", [docs.run("Album"), docs.run(" • "),
                                                     docs.run("Artist One", "UC1"), docs.run(" • "), docs.run("2019")]),
                docs.list_row("UCart", "Artist Row", [docs.run("Artist")]),
                docs.list_row("VLPLx", "Playlist Row", [docs.run("Playlist"), docs.run(" • "),
                                                        docs.run("Owner"), docs.run(" • "), docs.run("10 songs")]),
                docs.list_row("FEsomething", "Nothing", []),
            ]),
        ])

    def test_songs(self, docs):
        response = parse_search(self.search_document(docs))

        assert [song.id for song in response.songs] == ["s1", "s2"]
        first, second = response.songs
        assert [artist.name for artist in first.artists] == ["Artist One"]
        assert first.album.id == "MPREx"
        assert first.duration == 225

        assert second.artists[0].name == "Plain Artist"
        assert not second.artists[0].is_browsable
        assert second.duration == 130

    def test_other_kinds(self, docs):
        response = parse_search(self.search_document(docs))

        assert [artist.id for artist in response.artists] == ["UCtop", "UCart"]
        assert response.albums[0].id == "MPREalb"
        assert response.albums[0].year == "2019"
        assert [artist.id for artist in response.albums[0].artists] == ["UC1"]
        assert response.playlists[0].id == "VLPLx"
        assert response.playlists[0].track_count == 10
        assert response.playlists[0].author == "Owner"

    def test_empty_document(self):
        assert parse_search({}).is_empty

    def test_suggestions(self):
        data = {"contents": [{"searchSuggestionsSectionRenderer": {"contents": [
            {"searchSuggestionRenderer": {
                "suggestion": {"runs": [{"text": "daft"}, {"text": " punk", "bold": True}]},
                "navigationEndpoint": {"searchEndpoint": {"query": "daft punk"}},
            }},
            {"historySuggestionRenderer": {}},
        ]}}]}
        suggestions = parse_suggestions(data)
        assert len(suggestions) == 1
        assert suggestions[0].text == "daft punk"
        assert suggestions[0].query == "daft punk"
        assert parse_suggestions({}) == []


class TestPlaylistParser:
    """Test playlist and album pages"""

    def playlist_document(self, docs):
        header = {"musicDetailHeaderRenderer": {
            "title": {"runs": [{"text": "My Mix"}]},
            "subtitle": {"runs": [docs.run("Playlist"), docs.run(" • "), docs.run("Owner Name", "UCowner"),
                                  docs.run(" • "), docs.run("2024")]},
            "secondSubtitle": {"runs": [{"text": "2 songs"}, {"text": " • "}, {"text": "4 minutes"}]},
            "description": {"runs": [{"text": "desc"}]},
            "thumbnail": {"croppedSquareThumbnailRenderer": {"thumbnail": {"thumbnails": [
                {"url": "https://img/small"}, {"url": "https://img/large"}]}}},
        }}
        shelf = {"musicPlaylistShelfRenderer": {
            "contents": [
                docs.song_row("t1", "Track 1", [docs.run("A", "UCa")], "3:00"),
                docs.song_row("t2", "Track 2", [docs.run("B")], "1:00", thumbnails=["//img/t2"]),
            ],
            "continuations": [{"nextContinuationData": {"continuation": "ptok"}}],
        }}
        return docs.single_column([shelf], header=header)

    def test_header_and_tracks(self, docs):
        detail = parse_playlist(self.playlist_document(docs), "PL123")

        assert detail.id == "PL123"
        assert detail.title == "My Mix"
        assert detail.playlist.description == "desc"
        assert detail.playlist.author == "Owner Name"
        assert detail.playlist.track_count == 2
        assert detail.duration == "4 minutes"
        assert detail.is_album is False
        assert [track.id for track in detail.tracks] == ["t1", "t2"]
        assert detail.tracks[0].thumbnail_url == "https://img/large"
        assert detail.tracks[1].thumbnail_url == "https://img/t2"
        assert detail.total_duration == 240

    def test_continuation(self, docs):
        assert extract_playlist_continuation(self.playlist_document(docs)) == "ptok"
        page = {"continuationContents": {"musicPlaylistShelfContinuation": {
            "contents": [docs.song_row("t3", "Track 3")]}}}
        assert [track.id for track in parse_playlist_continuation(page)] == ["t3"]

    def test_album_page_detected_by_subtitle(self, docs):
        doc = self.playlist_document(docs)
        doc["header"]["musicDetailHeaderRenderer"]["subtitle"]["runs"][0]["text"] = "Album"
        detail = parse_playlist(doc, "VLsomething")

        assert detail.is_album
        assert detail.tracks[0].album.title == "My Mix"

    def test_two_column_responsive_header(self, docs):
        doc = {"contents": {"twoColumnBrowseResultsRenderer": {
            "tabs": [{"tabRenderer": {"content": {"sectionListRenderer": {"contents": [
                {"musicResponsiveHeaderRenderer": {
                    "title": {"runs": [{"text": "Album Title"}]},
                    "subtitle": {"runs": [{"text": "EP"}, {"text": " • "}, {"text": "2021"}]},
                    "straplineTextOne": {"runs": [docs.run("Band", "UCband")]},
                    "description": {"musicDescriptionShelfRenderer": {"description": {"runs": [{"text": "About"}]}}},
                    "secondSubtitle": {"runs": [{"text": "5 songs"}, {"text": " • "}, {"text": "20 minutes"}]},
                }},
            ]}}}}],
            "secondaryContents": {"sectionListRenderer": {"contents": [
                {"musicShelfRenderer": {"contents": [docs.song_row("e1", "One", [docs.run("Band", "UCband")])]}},
            ]}},
        }}}
        detail = parse_playlist(doc, "OLAKxyz")

        assert detail.title == "Album Title"
        assert detail.playlist.author == "Band"
        assert detail.playlist.description == "About"
        assert detail.playlist.track_count == 5
        assert detail.is_album
        assert [track.id for track in detail.tracks] == ["e1"]
        assert detail.tracks[0].album.id == "OLAKxyz"

    def test_missing_header(self, docs):
        detail = parse_playlist(docs.single_column([]), "PLempty")
        assert detail.title == "Unknown Playlist"
        assert detail.tracks == []

    def test_library_playlists(self, docs):
        new_playlist = {"musicTwoRowItemRenderer": {"title": {"runs": [{"text": "New playlist"}]}}}
        doc = docs.single_column([{"gridRenderer": {"items": [
            new_playlist,
            docs.card("Liked Music", "VLLM"),
            docs.card("Mine", "VLPLmine", [docs.run("Me"), docs.run(" • "), docs.run("12 songs")]),
            docs.card("An album", "MPREx"),
        ]}}])

        playlists = parse_library_playlists(doc)
        assert [playlist.id for playlist in playlists] == ["VLLM", "VLPLmine"]
        assert playlists[1].track_count == 12


class TestArtistParser:
    """Test artist pages"""

    def artist_document(self, docs):
        header = {"musicImmersiveHeaderRenderer": {
            "title": {"runs": [{"text": "The Artist"}]},
            "description": {"runs": [{"text": "Bio"}]},
            "thumbnail": docs.thumbnail("//a/small", "//a/big"),
            "subscriptionButton": {"subscribeButtonRenderer": {
                "channelId": "UCart", "subscribed": True,
                "subscriberCountText": {"runs": [{"text": "1.2M"}]},
            }},
        }}
        songs_title = {"text": "Songs", "navigationEndpoint": {"browseEndpoint": {
            "browseId": "VLOLAKsongs", "params": "ggMC"}}}
        return docs.single_column([
            docs.shelf("Songs", [docs.song_row("a1", "Hit", [docs.run("The Artist", "UCart")], "3:30")],
                       title_run=songs_title),
            docs.carousel("Albums", [
                docs.card("LP", "MPRElp", [docs.run("Album"), docs.run(" • "), docs.run("2018")]),
                docs.card("Related", "UCxyz", [docs.run("Artist")]),
            ]),
        ], header=header)

    def test_artist_detail(self, docs):
        detail = parse_artist(self.artist_document(docs), "UCart")

        assert detail.artist.id == "UCart"
        assert detail.artist.name == "The Artist"
        assert detail.description == "Bio"
        assert detail.thumbnail_url == "https://a/big"
        assert detail.is_subscribed
        assert detail.subscriber_count == "1.2M"
        assert detail.channel_id == "UCart"
        assert [song.id for song in detail.songs] == ["a1"]
        assert detail.songs_browse_id == "VLOLAKsongs"
        assert detail.songs_params == "ggMC"
        assert detail.has_more_songs

    def test_only_album_ids_become_albums(self, docs):
        detail = parse_artist(self.artist_document(docs), "UCart")
        assert [album.id for album in detail.albums] == ["MPRElp"]
        assert detail.albums[0].year == "2018"

    def test_visual_header_fallback(self, docs):
        doc = docs.single_column([], header={"musicVisualHeaderRenderer": {
            "title": {"runs": [{"text": "Visual Name"}]},
            "thumbnail": docs.thumbnail("//v/img"),
        }})
        detail = parse_artist(doc, "UCv")
        assert detail.artist.name == "Visual Name"
        assert detail.thumbnail_url == "https://v/img"
        assert not detail.is_subscribed

    def test_immersive_name_wins_over_visual(self, docs):
        doc = docs.single_column([], header={
            "musicImmersiveHeaderRenderer": {"title": {"runs": [{"text": "Immersive"}]}},
            "musicVisualHeaderRenderer": {"title": {"runs": [{"text": "Visual"}]}},
        })
        assert parse_artist(doc, "UCx").artist.name == "Immersive"

    def test_missing_header(self, docs):
        detail = parse_artist(docs.single_column([]), "UCnone")
        assert detail.artist.name == "Unknown Artist"
        assert detail.songs == []
        assert not detail.has_more_songs

    def test_artist_songs_page(self, docs):
        doc = docs.single_column([{"musicPlaylistShelfRenderer": {"contents": [
            docs.song_row("x1", "One"), docs.song_row("x2", "Two"),
        ]}}])
        assert [song.id for song in parse_artist_songs(doc)] == ["x1", "x2"]


class TestLyricsParser:

    def test_lyrics_tab_browse_id(self):
        data = {"contents": {"singleColumnMusicWatchNextResultsRenderer": {"tabbedRenderer": {
            "watchNextTabbedResultsRenderer": {"tabs": [
                {"tabRenderer": {"endpoint": {"browseEndpoint": {"browseId": "MPTRt_up_next"}}}},
                {"tabRenderer": {"endpoint": {"browseEndpoint": {"browseId": "MPLYt_abc"}}}},
            ]}}}}}
        assert extract_lyrics_browse_id(data) == "MPLYt_abc"
        assert extract_lyrics_browse_id({}) is None

    def test_lyrics_text(self):
        data = {"contents": {"sectionListRenderer": {"contents": [{"musicDescriptionShelfRenderer": {
            "description": {"runs": [{"text": "line one\nline two"}]},
            "footer": {"runs": [{"text": "Source: LyricFind"}]},
        }}]}}}
        lyrics = parse_lyrics(data)
        assert lyrics.is_available
        assert lyrics.text == "line one\nline two"
        assert lyrics.source == "Source: LyricFind"

    def test_no_lyrics(self):
        assert not parse_lyrics({}).is_available
