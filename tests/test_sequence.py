"""Tests for the seeded permutation generator."""

import pytest

from splitcraft import ConfigurationError, LCGSequence, lcg_next, permute


class TestLcgNext:
    def test_reference_vector(self) -> None:
        value, state = lcg_next(42)
        assert state == 1083814273
        assert value == pytest.approx(1083814273 / 4294967296)
        assert 0.2523 < value < 0.2524

    def test_second_draw_advances_from_new_state(self) -> None:
        _, s1 = lcg_next(42)
        _, s2 = lcg_next(s1)
        assert s2 == (1083814273 * 1664525 + 1013904223) % 2**32
        assert s2 != s1

    def test_values_in_unit_interval(self) -> None:
        seq = LCGSequence(0)
        vals = seq.draw(1000)
        assert (vals >= 0).all() and (vals < 1).all()


class TestLCGSequence:
    def test_matches_repeated_lcg_next(self) -> None:
        seq = LCGSequence(7)
        state = 7
        for _ in range(5):
            expected, state = lcg_next(state)
            assert seq.next_value() == expected
        assert seq.state == state

    @pytest.mark.parametrize("seed", [-1, 2**32])
    def test_rejects_out_of_range_seed(self, seed: int) -> None:
        with pytest.raises(ConfigurationError):
            LCGSequence(seed)


class TestPermute:
    def test_is_permutation(self) -> None:
        items = list(range(50))
        out = permute(items, 123)
        assert sorted(out) == items
        assert out != items

    def test_same_seed_same_order(self) -> None:
        items = ["a", "b", "c", "d", "e", "f"]
        assert permute(items, 99) == permute(items, 99)

    def test_order_depends_only_on_length_and_seed(self) -> None:
        a = permute([0, 1, 2, 3], 42)
        b = permute([10, 11, 12, 13], 42)
        assert [x + 10 for x in a] == b

    def test_first_key_orders_elements(self) -> None:
        seq = LCGSequence(5)
        keys = [seq.next_value() for _ in range(3)]
        expected = [x for _, x in sorted(zip(keys, ["x", "y", "z"]))]
        assert permute(["x", "y", "z"], 5) == expected

    def test_empty(self) -> None:
        assert permute([], 1) == []
