"""
Tests for the filename grammar and entry filtering.
"""

import pytest

from scrawl.types import Entry, EntryFilter, decode_filename, encode_filename, normalize_tags


class TestEncodeFilename:

    def test_id_only(self):
        assert encode_filename(1700000000) == "1700000000"

    def test_tags_in_order_lowercased(self):
        assert encode_filename(42, ["Foo", "bar"]) == "42_foo_bar"

    def test_duplicates_kept(self):
        assert encode_filename(1, ["a", "a"]) == "1_a_a"

    def test_encrypted_suffix(self):
        assert encode_filename(7, ["x"], encrypted=True) == "7_x.asc"

    def test_negative_id_rejected(self):
        with pytest.raises(ValueError):
            encode_filename(-1)

    @pytest.mark.parametrize("tag", ["foo_bar", "foo-bar", "", "naïve", "a.b"])
    def test_non_alphanumeric_tag_rejected(self, tag):
        with pytest.raises(ValueError):
            encode_filename(1, [tag])


class TestDecodeFilename:

    def test_round_trip_with_tags(self):
        entry = decode_filename(encode_filename(42, ["Foo", "bar"]))
        assert entry.id == 42
        assert entry.tags == ("foo", "bar")
        assert entry.encrypted is False

    def test_encrypted(self):
        entry = decode_filename("1700000000_secret.asc")
        assert entry.id == 1700000000
        assert entry.tags == ("secret",)
        assert entry.encrypted is True

    def test_upper_case_tags_lowered(self):
        assert decode_filename("5_Work_TODO").tags == ("work", "todo")

    @pytest.mark.parametrize("name", [
        ".hidden",
        ".scrawl-abc.tmp",
        "notes.txt",
        "abc",
        "123_",
        "123__x",
        "123_foo-bar",
        "123.txt",
        "123.asc.bak",
        "_123",
        "-5",
        "123\n",
        "scrawl.toml",
        "scrawl-ops.log",
    ])
    def test_non_members_rejected(self, name):
        assert decode_filename(name) is None


class TestNormalizeTags:

    def test_none_is_empty(self):
        assert normalize_tags(None) == ()

    def test_lowercases(self):
        assert normalize_tags(["A", "b1"]) == ("a", "b1")


class TestEntryFilter:

    def _entry(self, id, *tags):
        return Entry(id=id, tags=tuple(tags))

    def test_empty_filter_matches_all(self):
        assert EntryFilter().matches(self._entry(1))
        assert EntryFilter().matches(self._entry(2, "x"))

    def test_exact_id(self):
        flt = EntryFilter(id=5)
        assert flt.matches(self._entry(5))
        assert not flt.matches(self._entry(6))

    def test_bounds_inclusive(self):
        flt = EntryFilter(after=10, before=20)
        assert flt.matches(self._entry(10))
        assert flt.matches(self._entry(20))
        assert not flt.matches(self._entry(9))
        assert not flt.matches(self._entry(21))

    def test_tags_any_of_case_insensitive(self):
        flt = EntryFilter(tags=("WORK", "home"))
        assert flt.matches(self._entry(1, "work"))
        assert flt.matches(self._entry(1, "misc", "home"))
        assert not flt.matches(self._entry(1, "misc"))
        assert not flt.matches(self._entry(1))
