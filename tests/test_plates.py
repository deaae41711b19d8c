"""Unit tests for plate math."""
import pytest

from workout_prefill_api.services.plates import BAR_TYPES, bar_weight, calculate_plates


class TestPlates:
    """Greedy per-side plate breakdown."""

    def test_225_standard_bar(self):
        breakdown = calculate_plates(225)
        assert [(p.weight, p.count) for p in breakdown.per_side] == [(45, 2)]
        assert breakdown.possible is True
        assert breakdown.bar_weight == 45

    def test_mixed_plates(self):
        breakdown = calculate_plates(185)
        # 70 per side
        assert [(p.weight, p.count) for p in breakdown.per_side] == [(45, 1), (25, 1)]

    def test_fractional_plates(self):
        breakdown = calculate_plates(50)
        assert [(p.weight, p.count) for p in breakdown.per_side] == [(2.5, 1)]
        assert breakdown.possible is True

    def test_not_loadable(self):
        breakdown = calculate_plates(226)
        assert breakdown.possible is False
        assert breakdown.remainder_per_side == pytest.approx(0.5)

    def test_plate_inventory_limits(self):
        breakdown = calculate_plates(1000)
        assert breakdown.possible is False
        assert breakdown.per_side[0].count == 4

    @pytest.mark.parametrize("weight", [0, 45, 30])
    def test_at_or_below_bar(self, weight):
        breakdown = calculate_plates(weight)
        assert breakdown.per_side == []
        assert breakdown.possible is False

    def test_bar_types(self):
        breakdown = calculate_plates(95, "ez")
        assert breakdown.bar_weight == 25
        assert [(p.weight, p.count) for p in breakdown.per_side] == [(35, 1)]

    def test_unknown_bar_falls_back_to_standard(self):
        assert calculate_plates(135, "mystery").bar_type == "standard"
        assert bar_weight("mystery") == 45

    def test_all_bar_types_have_weights(self):
        assert {k: v[0] for k, v in BAR_TYPES.items()} == {
            "standard": 45,
            "womens": 33,
            "safety": 45,
            "ez": 25,
            "trap": 60,
            "cambered": 55,
            "swiss": 35,
            "technique": 15,
        }
