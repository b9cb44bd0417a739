"""Tests for IndexRange and cartesian index expansion."""

import pytest

from numpart.errors import DeclarationError
from numpart.model import index as index_mod
from numpart.model.index import IndexRange, expand_indices, expansion_size


class TestIndexRange:
    """Tests for the IndexRange dataclass."""

    def test_of_builds_one_based_range(self) -> None:
        r = IndexRange.of("element", 3)
        assert (r.start, r.stop) == (1, 3)
        assert list(r) == [1, 2, 3]
        assert len(r) == 3

    def test_custom_bounds_are_inclusive(self) -> None:
        r = IndexRange("t", 0, 2)
        assert list(r) == [0, 1, 2]

    def test_empty_range(self) -> None:
        r = IndexRange.of("element", 0)
        assert r.is_empty()
        assert len(r) == 0
        assert list(r) == []

    def test_membership_rejects_out_of_range_and_non_int(self) -> None:
        r = IndexRange.of("group", 2)
        assert 1 in r and 2 in r
        assert 0 not in r
        assert 3 not in r
        assert 1.0 not in r
        assert True not in r

    def test_position(self) -> None:
        assert IndexRange("t", 5, 9).position(7) == 2

    def test_rejects_non_int_bounds(self) -> None:
        with pytest.raises(TypeError):
            IndexRange("i", 1, 2.5)  # type: ignore[arg-type]

    def test_rejects_empty_name(self) -> None:
        with pytest.raises(TypeError):
            IndexRange("", 1, 2)

    def test_str(self) -> None:
        assert str(IndexRange.of("k", 4)) == "k[1..4]"


class TestExpandIndices:
    """Tests for expand_indices."""

    def test_row_major_order(self) -> None:
        keys = list(expand_indices([IndexRange.of("i", 2), IndexRange.of("k", 3)]))
        assert keys == [(1, 1), (1, 2), (1, 3), (2, 1), (2, 2), (2, 3)]

    def test_no_ranges_yields_scalar_key(self) -> None:
        assert list(expand_indices([])) == [()]

    def test_single_range(self) -> None:
        assert list(expand_indices([IndexRange("t", 3, 4)])) == [(3,), (4,)]

    def test_empty_range_raises_immediately(self) -> None:
        with pytest.raises(DeclarationError, match="empty"):
            expand_indices([IndexRange.of("i", 2), IndexRange.of("k", 0)])

    def test_duplicate_names_raise(self) -> None:
        with pytest.raises(DeclarationError, match="distinct"):
            expand_indices([IndexRange.of("i", 2), IndexRange.of("i", 3)])

    def test_expansion_limit(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(index_mod, "MAX_INDEX_EXPANSIONS", 5)
        with pytest.raises(DeclarationError, match="limit"):
            expand_indices([IndexRange.of("i", 2), IndexRange.of("k", 3)])

    def test_expansion_size(self) -> None:
        assert expansion_size([IndexRange.of("i", 4), IndexRange.of("k", 3)]) == 12
        assert expansion_size([]) == 1
