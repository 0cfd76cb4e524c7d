import pytest

from snake_engine.scoring import bump_combo, calculate_score, decay_combo, format_time


@pytest.mark.parametrize(
    "base,multiplier,combo,expected",
    [
        (10, 1, 1, 10),
        (10, 2, 2.0, 40),
        (10, 1, 1.15, 11),
        (10, 2, 1.99, 39),
        (10, 1, 5, 50),
    ],
)
def test_calculate_score_floors_product(base, multiplier, combo, expected):
    assert calculate_score(base, multiplier, combo) == expected


def test_combo_after_n_apples():
    combo = 1.0
    for n in range(1, 60):
        combo = bump_combo(combo)
        assert combo == pytest.approx(min(1 + 0.1 * n, 5))


def test_decay_combo_is_proportional_and_floored_at_one():
    assert decay_combo(2.0, 1000) == pytest.approx(1.9)
    assert decay_combo(1.2, 5000) == 1
    assert decay_combo(1.0, 5000) == 1.0


def test_format_time():
    assert format_time(0) == "00:00"
    assert format_time(61_500) == "01:01"
    assert format_time(3_600_000) == "60:00"
