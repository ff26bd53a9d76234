"""Tests for overlaying release metadata onto caller-supplied fields."""

from recordstore.domain.entities import (
    RecordFields,
    ReleaseMetadata,
    Track,
    merge_enrichment,
)


class TestMergeEnrichment:
    def test_present_metadata_wins_absent_keeps_caller_value(self, create_fields):
        metadata = ReleaseMetadata(
            artist="X", track_list=[Track(title="One", position="1", duration=1000)]
        )

        merged = merge_enrichment(create_fields, metadata)

        assert merged.artist == "X"
        assert merged.album == "Abbey Road (Remaster)"
        assert merged.track_list == [Track(title="One", position="1", duration=1000)]

    def test_non_metadata_fields_untouched(self, create_fields):
        merged = merge_enrichment(create_fields, ReleaseMetadata(album="Other"))

        assert (merged.price, merged.qty, merged.format) == (
            create_fields.price,
            create_fields.qty,
            create_fields.format,
        )

    def test_no_metadata_returns_fields_unchanged(self, create_fields):
        assert merge_enrichment(create_fields, None) is create_fields

    def test_explicitly_empty_track_list_replaces_tracks(self):
        fields = RecordFields(track_list=[Track(title="Old")])

        merged = merge_enrichment(fields, ReleaseMetadata(track_list=[]))

        assert merged.track_list == []

    def test_missing_track_list_keeps_tracks(self):
        fields = RecordFields(track_list=[Track(title="Old")])

        merged = merge_enrichment(fields, ReleaseMetadata(artist="A"))

        assert merged.track_list == [Track(title="Old")]


class TestReleaseMetadata:
    def test_to_dict_omits_absent_keys(self):
        assert ReleaseMetadata(track_list=[]).to_dict() == {"trackList": []}

    def test_from_dict_keeps_absent_distinct_from_empty(self):
        assert ReleaseMetadata.from_dict({}).track_list is None
        assert ReleaseMetadata.from_dict({"trackList": []}).track_list == []
