"""Tests for yt2lp.genres module."""

from __future__ import annotations

import pytest

from yt2lp.genres import GENRE_CODES, get_genre_code, normalize_genre


class TestGetGenreCode:
    @pytest.mark.parametrize(
        ("name", "code"),
        [
            ("Blues", 0),
            ("rock", 17),
            ("Hip-Hop", 7),
            ("hip_hop", 7),
            ("R&B", 14),
            ("Rock & Roll", 78),
            ("Alternative", 20),
            ("Folk", 80),
            ("Synthpop", 147),
        ],
    )
    def test_known_genres(self, name: str, code: int) -> None:
        assert get_genre_code(name) == code

    def test_case_and_whitespace(self) -> None:
        assert get_genre_code("  JAZZ ") == 8

    def test_aliases(self) -> None:
        assert get_genre_code("hiphop") == 7
        assert get_genre_code("lofi") == get_genre_code("Lo-Fi")

    def test_unknown_genre(self) -> None:
        assert get_genre_code("Vaporwave Polka Fusion") is None

    @pytest.mark.parametrize("name", [None, ""])
    def test_empty(self, name: str | None) -> None:
        assert get_genre_code(name) is None


class TestNormalizeGenre:
    def test_separators(self) -> None:
        assert normalize_genre("Drum-_-Bass") == "drum bass"

    def test_ampersand(self) -> None:
        assert normalize_genre("Drum & Bass") == "drum and bass"


def test_table_has_every_code() -> None:
    assert sorted(GENRE_CODES.values()) == list(range(148))
