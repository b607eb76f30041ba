"""Tests for type conversion helpers."""

from __future__ import annotations

import pytest

from trawlarr.infrastructure.common.converters import to_count, to_imdb_id, to_int


class TestToInt:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            (None, None),
            (42, 42),
            (12.9, 12),
            ("123", 123),
            ("1,234", 1234),
            ("1 234", 1234),
            ("12.0", 12),
            ("-5", -5),
            ("12 seeders", 12),
            ("", None),
            ("n/a", None),
        ],
    )
    def test_conversions(self, raw: object, expected: int | None) -> None:
        assert to_int(raw) == expected  # type: ignore[arg-type]

    def test_bool_is_not_a_number(self) -> None:
        assert to_int(True) is None  # type: ignore[arg-type]


class TestToCount:
    def test_missing_defaults_to_zero(self) -> None:
        assert to_count(None) == 0
        assert to_count("-") == 0

    def test_negative_clamped(self) -> None:
        assert to_count("-3") == 0

    def test_thousands(self) -> None:
        assert to_count("1,024") == 1024


class TestToImdbId:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("tt0111161", "tt0111161"),
            ("TT0111161", "tt0111161"),
            ("111161", "tt0111161"),
            (111161, "tt0111161"),
            ("tt12345678", "tt12345678"),
            ("", None),
            (None, None),
            ("imdb", None),
        ],
    )
    def test_normalization(self, raw: object, expected: str | None) -> None:
        assert to_imdb_id(raw) == expected  # type: ignore[arg-type]
