"""Tests for MusicBrainz payload normalization."""

import pytest

from recordstore.domain.entities import Track
from recordstore.domain.exceptions import ParseFailureError
from recordstore.infrastructure.connectors.musicbrainz_parser import (
    as_list,
    parse_artist_releases,
    parse_artist_search,
    parse_release_xml,
)


class TestAsList:
    def test_shapes(self):
        assert as_list(None) == []
        assert as_list({"a": 1}) == [{"a": 1}]
        assert as_list([1, 2]) == [1, 2]


class TestParseReleaseXml:
    def test_singleton_track_without_wrapper(self, single_track_xml):
        metadata = parse_release_xml(single_track_xml)

        assert metadata.artist == "The Beatles"
        assert metadata.album == "Abbey Road"
        assert metadata.track_list == [
            Track(title="Come Together", position="1", duration=259000)
        ]

    def test_two_tracks_in_document_order(self, two_track_xml):
        metadata = parse_release_xml(two_track_xml)

        assert metadata.artist == "Miles Davis"
        assert metadata.track_list == [
            Track(title="So What", position="A1", duration=562000),
            Track(title="Freddie Freeloader", position="A2", duration=0),
        ]

    def test_tracks_across_media_are_concatenated(self):
        xml = """<metadata><release><title>Double</title><medium-list>
            <medium><track-list><track><position>1</position><title>One</title></track></track-list></medium>
            <medium><track-list><track><position>1</position><title>Two</title></track></track-list></medium>
        </medium-list></release></metadata>"""

        titles = [t.title for t in parse_release_xml(xml).track_list]

        assert titles == ["One", "Two"]

    def test_empty_strings_are_absent_and_empty_track_list_is_kept(self):
        xml = (
            "<metadata><release><title></title><artist-credit></artist-credit>"
            "<track-list></track-list></release></metadata>"
        )

        metadata = parse_release_xml(xml)

        assert metadata.artist is None
        assert metadata.album is None
        assert metadata.track_list == []
        assert metadata.to_dict() == {"trackList": []}

    def test_no_media_omits_track_list(self):
        metadata = parse_release_xml("<metadata><release><title>Solo</title></release></metadata>")

        assert metadata.track_list is None
        assert metadata.to_dict() == {"album": "Solo"}

    def test_track_without_any_title(self):
        xml = "<metadata><release><track-list><track><length>10</length></track></track-list></release></metadata>"

        assert parse_release_xml(xml).track_list == [Track(title="", position="", duration=10)]

    def test_name_credit_name_preferred(self):
        xml = """<metadata><release><artist-credit>
            <name-credit><name>Prince &amp; The Revolution</name><artist><name>Prince</name></artist></name-credit>
            <name-credit><artist><name>Second</name></artist></name-credit>
        </artist-credit></release></metadata>"""

        assert parse_release_xml(xml).artist == "Prince & The Revolution"

    @pytest.mark.parametrize(
        "payload",
        ["<metadata><release><title>Unclosed", "", "not xml at all", "<metadata></metadata>"],
    )
    def test_unusable_payloads_return_none(self, payload):
        assert parse_release_xml(payload) is None


class TestJsonMappers:
    def test_artist_search(self):
        payload = (
            '{"artists": [{"id": "a1", "name": "Nirvana", "sort-name": "Nirvana", '
            '"country": "US", "disambiguation": "90s US grunge band", "score": 100}, '
            '{"name": "no id"}]}'
        )

        artists = parse_artist_search(payload)

        assert len(artists) == 1
        assert artists[0].to_dict() == {
            "id": "a1",
            "name": "Nirvana",
            "sortName": "Nirvana",
            "country": "US",
            "disambiguation": "90s US grunge band",
            "score": 100,
        }

    def test_singleton_release_object(self):
        payload = '{"releases": {"id": "r1", "title": "Nevermind", "date": "1991-09-24"}}'

        releases = parse_artist_releases(payload)

        assert [(r.id, r.title, r.date) for r in releases] == [("r1", "Nevermind", "1991-09-24")]

    def test_malformed_json_raises(self):
        with pytest.raises(ParseFailureError):
            parse_artist_search("{not json")

    def test_missing_root_key_is_empty(self):
        assert parse_artist_releases("{}") == []
