"""Tests for record, query and order entities."""

from datetime import UTC, datetime

import pytest

from recordstore.domain.entities import (
    Order,
    Record,
    RecordCategory,
    RecordFields,
    RecordFilter,
    RecordFormat,
    RecordPage,
    RecordQuery,
    Track,
    clamp_limit,
    clamp_page,
    parse_fields,
)


class TestRecord:
    """Record validation and serialization."""

    def test_enum_values_are_converted(self, record):
        assert record.format is RecordFormat.VINYL
        assert record.category is RecordCategory.ROCK
        assert record.is_user_created is True

    @pytest.mark.parametrize(
        "overrides",
        [
            {"price": -1},
            {"price": 10001},
            {"qty": -1},
            {"qty": 101},
            {"qty": 1.5},
            {"artist": ""},
        ],
    )
    def test_out_of_range_values_rejected(self, overrides):
        data = {
            "artist": "Artist",
            "album": "Album",
            "price": 10,
            "qty": 1,
            "format": "CD",
            "category": "Jazz",
            **overrides,
        }
        with pytest.raises((TypeError, ValueError)):
            Record(**data)

    def test_unknown_format_rejected(self):
        with pytest.raises(ValueError):
            Record(artist="A", album="B", price=1, qty=1, format="8-Track", category="Rock")

    def test_boundary_values_accepted(self):
        record = Record(
            artist="A", album="B", price=10000, qty=100, format="Digital", category="Indie"
        )
        assert record.price == 10000
        assert record.qty == 100

    def test_with_id_leaves_original_unchanged(self, record):
        copy = Record.from_dict({**record.to_dict(), "id": None})
        assert copy.with_id(7).id == 7
        assert copy.id is None

    def test_to_dict_uses_api_keys(self, record):
        data = record.to_dict()

        assert data["trackList"] == [
            {"title": "Come Together", "position": "1", "duration": 259000}
        ]
        assert data["isUserCreated"] is True
        assert data["lastModified"] == record.last_modified.isoformat()

    def test_from_dict_restores_record(self, record):
        assert Record.from_dict(record.to_dict()) == record

    def test_naive_timestamps_become_utc(self):
        record = Record(
            artist="A",
            album="B",
            price=1,
            qty=1,
            format="CD",
            category="Pop",
            created=datetime(2024, 1, 1),
        )
        assert record.created.tzinfo is UTC


class TestTrack:
    def test_defaults_for_missing_values(self):
        track = Track.from_dict({"title": "Intro"})
        assert track.position == ""
        assert track.duration == 0

    def test_none_values_become_defaults(self):
        track = Track(title="Intro", position=None, duration=None)
        assert (track.position, track.duration) == ("", 0)


class TestRecordFields:
    def test_present_skips_unsupplied(self):
        fields = RecordFields(price=12, mbid="abc")
        assert fields.present() == {"price": 12, "mbid": "abc"}

    def test_missing_required(self):
        fields = RecordFields(artist="A", price=3)
        assert fields.missing_required() == ["album", "qty", "format", "category"]


class TestRecordFilter:
    def test_blank_strings_are_absent(self):
        record_filter = RecordFilter(q="", artist="  ", album=None, format="", category="")
        assert record_filter.is_empty()

    def test_empty_and_missing_are_equal(self):
        assert RecordFilter(q="", artist="x") == RecordFilter(artist="x")

    def test_invalid_category_rejected(self):
        with pytest.raises(ValueError):
            RecordFilter(category="Polka")


class TestPagination:
    @pytest.mark.parametrize(
        ("page", "expected"), [(None, 1), (0, 1), (-3, 1), (1, 1), (4, 4)]
    )
    def test_clamp_page(self, page, expected):
        assert clamp_page(page) == expected

    @pytest.mark.parametrize(
        ("limit", "expected"), [(None, 20), (0, 1), (-5, 1), (50, 50), (500, 100)]
    )
    def test_clamp_limit(self, limit, expected):
        assert clamp_limit(limit) == expected

    def test_query_skip(self):
        assert RecordQuery(page=3, limit=20).skip == 40
        assert RecordQuery(page=0, limit=20).skip == 0

    def test_page_count(self):
        page = RecordPage.build(records=[], total=41, page=1, limit=20)
        assert page.total_pages == 3
        assert page.to_dict()["totalPages"] == 3

    def test_empty_result_has_no_pages(self):
        assert RecordPage.build(records=[], total=0, page=1, limit=20).total_pages == 0


class TestFieldProjection:
    def test_unknown_fields_dropped(self):
        assert parse_fields("artist,bogus,price") == ("artist", "price")

    def test_duplicates_and_whitespace(self):
        assert parse_fields(" album , album,trackList") == ("album", "trackList")

    def test_empty_means_all(self):
        assert parse_fields("") == ()
        assert parse_fields(None) == ()


class TestOrder:
    def test_quantity_must_be_positive(self):
        with pytest.raises(ValueError):
            Order(record_id=1, quantity=0)

    def test_to_dict(self, now):
        order = Order(record_id=3, quantity=2, created=now, id=9)
        assert order.to_dict() == {
            "id": 9,
            "recordId": 3,
            "quantity": 2,
            "created": now.isoformat(),
        }
