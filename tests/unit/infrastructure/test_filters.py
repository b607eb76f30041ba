"""Tests for the field filter chain."""

from __future__ import annotations

import pytest

from trawlarr.domain.definitions import FilterSpec
from trawlarr.infrastructure.common.filters import apply_filters


def _f(name: str, *args: str) -> FilterSpec:
    return FilterSpec(name=name, args=args)


class TestIdentity:
    def test_empty_chain_returns_value(self) -> None:
        assert apply_filters("  Some Value ", []) == "  Some Value "

    def test_trim_is_idempotent(self) -> None:
        once = apply_filters("  x  ", [_f("trim")])
        twice = apply_filters("  x  ", [_f("trim"), _f("trim")])
        assert once == twice == "x"


class TestBuiltins:
    def test_replace_all_occurrences(self) -> None:
        assert apply_filters("a.b.c", [_f("replace", ".", " ")]) == "a b c"

    def test_replace_is_literal(self) -> None:
        assert apply_filters("a.*b", [_f("replace", ".*", "-")]) == "a-b"

    def test_re_replace(self) -> None:
        assert apply_filters("Seeds: 1,234", [_f("re_replace", r"[^0-9]", "")]) == "1234"

    def test_re_replace_go_group_reference(self) -> None:
        value = "https://imdb.com/title/tt0111161/?ref=x"
        chain = [_f("re_replace", r".*/title/(tt\d+).*", "$1")]
        assert apply_filters(value, chain) == "tt0111161"

    def test_re_replace_braced_group_reference(self) -> None:
        date_filter = _f("re_replace", r"(\d+)-(\d+)-(\d+)", "${3}.${2}.${1}")
        assert apply_filters("2024-01-15", [date_filter]) == "15.01.2024"

    def test_re_replace_keeps_literal_backslash(self) -> None:
        assert apply_filters("a", [_f("re_replace", "a", r"\n")]) == r"\n"

    def test_append_and_prepend(self) -> None:
        chain = [_f("prepend", "magnet:?xt="), _f("append", "&dn=x")]
        assert apply_filters("urn:btih:abc", chain) == "magnet:?xt=urn:btih:abc&dn=x"

    def test_trim_with_cutset(self) -> None:
        assert apply_filters("[x]", [_f("trim", "[]")]) == "x"

    def test_case_filters(self) -> None:
        assert apply_filters("MiXeD", [_f("lowercase")]) == "mixed"
        assert apply_filters("MiXeD", [_f("uppercase")]) == "MIXED"

    def test_order_matters(self) -> None:
        a = apply_filters(" x ", [_f("append", "!"), _f("trim")])
        b = apply_filters(" x ", [_f("trim"), _f("append", "!")])
        assert a == "x !"
        assert b == "x!"


class TestNeverRaises:
    def test_unknown_filter_is_noop(self) -> None:
        assert apply_filters("value", [_f("dateparse", "2006-01-02")]) == "value"

    @pytest.mark.parametrize(
        "spec",
        [
            FilterSpec(name="replace", args=("only-one",)),
            FilterSpec(name="append"),
            FilterSpec(name="re_replace", args=("(unclosed", "x")),
            FilterSpec(name="re_replace", args=("a", "$9")),
        ],
    )
    def test_bad_arguments_are_noop(self, spec: FilterSpec) -> None:
        assert apply_filters("abc", [spec]) == "abc"

    def test_chain_continues_after_bad_filter(self) -> None:
        chain = [_f("replace", "x"), _f("uppercase")]
        assert apply_filters("abc", chain) == "ABC"
