"""Tests for yt2lp.parsing module."""

from __future__ import annotations

from pathlib import Path

import pytest

from yt2lp.exceptions import InputError, TimecodeError
from yt2lp.parsing import (
    PATTERNS,
    TimestampEntry,
    find_first_productive,
    normalize_title,
    parse_timestamps,
    read_timestamp_source,
    split_match,
)


def summary(entries: list[TimestampEntry]) -> list[tuple[str, int]]:
    return [(e.title, e.start) for e in entries]


class TestParseTimestamps:
    def test_title_dash_time(self, sample_description: str) -> None:
        entries = parse_timestamps(sample_description)
        assert summary(entries) == [("Intro", 0), ("Song One", 84), ("Song Two", 332)]

    def test_keeps_original_token(self, sample_description: str) -> None:
        entries = parse_timestamps(sample_description)
        assert [e.token for e in entries] == ["0:00", "1:24", "5:32"]

    def test_sorted_by_start(self) -> None:
        text = "Song Two - 5:32\nIntro - 0:00\nSong One - 1:24"
        entries = parse_timestamps(text)
        assert summary(entries) == [("Intro", 0), ("Song One", 84), ("Song Two", 332)]

    def test_time_first(self) -> None:
        text = "0:00 Small Worlds\n4:12 What's The Use?\n9:05 2009"
        entries = parse_timestamps(text)
        assert summary(entries) == [
            ("Small Worlds", 0),
            ("What's The Use?", 252),
            ("2009", 545),
        ]

    def test_time_first_on_one_line(self) -> None:
        entries = parse_timestamps("0:00 Intro 0:16 Small Worlds")
        assert summary(entries) == [("Intro", 0), ("Small Worlds", 16)]

    def test_time_first_comma_separated(self) -> None:
        entries = parse_timestamps("0:00 Song1, 1:24 Song2, 5:32 Song3")
        assert summary(entries) == [("Song1", 0), ("Song2", 84), ("Song3", 332)]

    def test_time_inside_title_kept(self) -> None:
        entries = parse_timestamps("0:00 Live at 9:30 Club\n5:00 Encore")
        assert summary(entries) == [("Live at 9:30 Club", 0), ("Encore", 300)]

    def test_time_dash_title_on_one_line(self) -> None:
        entries = parse_timestamps("0:00-Intro 1:24-Song One")
        assert summary(entries) == [("Intro", 0), ("Song One", 84)]

    def test_time_dash_title_with_spaces(self) -> None:
        entries = parse_timestamps("0:00 - Intro\n1:24 - Song One")
        assert summary(entries) == [("Intro", 0), ("Song One", 84)]

    def test_time_dash_title_without_spaces(self) -> None:
        entries = parse_timestamps("0:00-Intro\n1:24-Song One")
        assert summary(entries) == [("Intro", 0), ("Song One", 84)]

    def test_hours(self) -> None:
        entries = parse_timestamps("Opener - 0:00\nFinale - 1:02:03")
        assert summary(entries) == [("Opener", 0), ("Finale", 3723)]

    def test_first_productive_shape_wins(self) -> None:
        text = "Tracklist:\nIntro - 0:00\n0:45 Not counted"
        entries = parse_timestamps(text)
        assert summary(entries) == [("Intro", 0)]

    def test_surrounding_prose_ignored(self) -> None:
        text = (
            "Recorded live at the office.\n\n"
            "Intro - 0:00\n"
            "Song One - 1:24\n\n"
            "Follow us on social media!"
        )
        entries = parse_timestamps(text)
        assert summary(entries) == [("Intro", 0), ("Song One", 84)]

    @pytest.mark.parametrize("text", [None, "", "   \n  "])
    def test_empty_text(self, text: str | None) -> None:
        assert parse_timestamps(text) == []

    def test_no_timestamps(self) -> None:
        assert parse_timestamps("Just a long jam session, enjoy.") == []

    def test_invalid_timecode_skipped(self) -> None:
        text = "Intro - 0:00\nBroken - 1:75\nOutro - 3:00"
        entries = parse_timestamps(text, on_invalid="skip")
        assert summary(entries) == [("Intro", 0), ("Outro", 180)]

    def test_invalid_timecode_aborts(self) -> None:
        text = "Intro - 0:00\nBroken - 1:75\nOutro - 3:00"
        with pytest.raises(TimecodeError):
            parse_timestamps(text, on_invalid="abort")

    def test_unknown_policy(self) -> None:
        with pytest.raises(ValueError):
            parse_timestamps("Intro - 0:00", on_invalid="ignore")


class TestFindFirstProductive:
    def test_pattern_priority_order(self) -> None:
        assert [p.name for p in PATTERNS] == [
            "title-dash-time",
            "time-space-title",
            "time-dash-title",
        ]

    def test_reports_winning_pattern(self) -> None:
        pattern, matches = find_first_productive("0:00 Intro\n1:00 Outro")
        assert pattern is not None
        assert pattern.name == "time-space-title"
        assert len(matches) == 2

    def test_nothing_found(self) -> None:
        pattern, matches = find_first_productive("no times here")
        assert pattern is None
        assert matches == []


class TestSplitMatch:
    def test_time_first(self) -> None:
        assert split_match("0:00", "Intro") == ("Intro", "0:00")

    def test_title_first(self) -> None:
        assert split_match("Intro ", "0:00") == ("Intro ", "0:00")


class TestNormalizeTitle:
    def test_strips_whitespace(self) -> None:
        assert normalize_title("  Intro  ") == "Intro"

    def test_strips_leading_dash(self) -> None:
        assert normalize_title("- Intro") == "Intro"

    def test_strips_trailing_comma(self) -> None:
        assert normalize_title("Song1,") == "Song1"

    def test_keeps_inner_punctuation(self) -> None:
        assert normalize_title("Song: Part 1!") == "Song: Part 1!"


class TestReadTimestampSource:
    def test_literal_text(self) -> None:
        assert read_timestamp_source("0:00 Intro") == "0:00 Intro"

    def test_txt_file(self, tmp_path: Path) -> None:
        path = tmp_path / "timestamps.txt"
        path.write_text("Intro - 0:00\n", encoding="utf-8")
        assert read_timestamp_source(str(path)) == "Intro - 0:00\n"

    def test_missing_txt_file(self, tmp_path: Path) -> None:
        with pytest.raises(InputError):
            read_timestamp_source(str(tmp_path / "missing.txt"))
