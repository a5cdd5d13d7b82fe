"""Tests for walk log entries."""

import pytest
from datetime import datetime, timezone

from conftest import BASE_TIME, make_log
from dogwalk.logs import BathroomActivity, WalkLog, WalkQuality


class TestWalkLogCreation:
    """Tests for building WalkLog entries."""

    def test_create_assigns_id_and_date(self):
        """Test create() generates an id and a current UTC timestamp."""
        before = datetime.now(timezone.utc)
        log = WalkLog.create(WalkQuality.GOOD, BathroomActivity.PEE)
        after = datetime.now(timezone.utc)

        assert log.id
        assert before <= log.date <= after
        assert log.user_name == "User"
        assert log.notes is None

    def test_create_generates_unique_ids(self):
        log1 = WalkLog.create(WalkQuality.GOOD, BathroomActivity.PEE)
        log2 = WalkLog.create(WalkQuality.GOOD, BathroomActivity.PEE)

        assert log1.id != log2.id

    def test_empty_notes_become_none(self):
        """Test "" is normalized to absent notes."""
        log = WalkLog.create(WalkQuality.OKAY, BathroomActivity.NONE, notes="")

        assert log.notes is None

    def test_notes_kept(self):
        log = WalkLog.create(WalkQuality.OKAY, BathroomActivity.NONE, notes="Met a cat")

        assert log.notes == "Met a cat"

    def test_with_changes_keeps_identity(self):
        """Test edits keep id and date."""
        log = make_log("abc")

        edited = log.with_changes(quality=WalkQuality.BAD, notes="")

        assert edited.id == "abc"
        assert edited.date == log.date
        assert edited.quality == WalkQuality.BAD
        assert edited.notes is None
        assert log.quality == WalkQuality.GOOD

    def test_with_changes_rejects_id(self):
        with pytest.raises(ValueError):
            make_log("abc").with_changes(id="other")

    def test_require_id(self):
        assert make_log("abc").require_id() == "abc"

        orphan = WalkLog(
            id=None,
            date=BASE_TIME,
            quality=WalkQuality.GOOD,
            bathroom=BathroomActivity.NONE,
        )
        with pytest.raises(ValueError):
            orphan.require_id()


class TestSerialization:
    """Tests for the wire format."""

    def test_to_dict(self):
        log = make_log("abc", WalkQuality.BAD, bathroom=BathroomActivity.BOTH, notes="Rain")

        d = log.to_dict()

        assert d == {
            "id": "abc",
            "date": "2025-07-12T09:30:00+00:00",
            "walkQuality": "bad",
            "bathroom": "both",
            "userName": "Sam",
            "notes": "Rain",
        }

    def test_roundtrip(self):
        original = WalkLog.create(WalkQuality.OKAY, BathroomActivity.POOP, notes="Long one")

        assert WalkLog.from_dict(original.to_dict()) == original

    def test_from_dict_naive_timestamp_is_utc(self):
        data = make_log("abc").to_dict()
        data["date"] = "2025-07-12T09:30:00"

        log = WalkLog.from_dict(data)

        assert log.date == BASE_TIME

    def test_from_dict_fractional_seconds(self):
        data = make_log("abc").to_dict()
        data["date"] = "2025-07-12T09:30:00.250+00:00"

        log = WalkLog.from_dict(data)

        assert log.date.microsecond == 250000

    def test_from_dict_missing_user_name_uses_default(self):
        data = make_log("abc").to_dict()
        del data["userName"]

        assert WalkLog.from_dict(data).user_name == "User"

    def test_from_dict_unknown_quality(self):
        data = make_log("abc").to_dict()
        data["walkQuality"] = "amazing"

        with pytest.raises(ValueError):
            WalkLog.from_dict(data)

    def test_from_dict_missing_field(self):
        data = make_log("abc").to_dict()
        del data["bathroom"]

        with pytest.raises(KeyError):
            WalkLog.from_dict(data)

    def test_from_dict_non_string_date(self):
        data = make_log("abc").to_dict()
        data["date"] = 1752312600

        with pytest.raises(ValueError):
            WalkLog.from_dict(data)


class TestDisplay:
    """Tests for display metadata."""

    def test_quality_labels(self):
        assert WalkQuality.GOOD.label == "Great Walk"
        assert WalkQuality.OKAY.label == "Okay Walk"
        assert WalkQuality.BAD.label == "Poor Walk"

    def test_quality_colors(self):
        assert [q.color for q in WalkQuality] == ["green", "orange", "red"]

    def test_bathroom_labels(self):
        assert [b.label for b in BathroomActivity] == ["Nothing", "Pee", "Poop", "Both"]

    def test_every_value_has_emoji(self):
        assert all(q.emoji for q in WalkQuality)
        assert all(b.emoji for b in BathroomActivity)

    def test_summary(self):
        log = make_log("abc", WalkQuality.OKAY, notes="Chased a leaf")

        text = log.summary()

        assert "Sam - Okay Walk" in text
        assert "Chased a leaf" in text
        assert "2025" in text

    def test_summary_without_notes(self):
        text = make_log("abc").summary()

        assert len(text.splitlines()) == 3
