from decimal import Decimal

import pytest

from itrend.utils.rounding import round_half_even, round_half_even_decimal


@pytest.mark.parametrize(
    "x, expected",
    [
        (100.015, 100.02),
        (100.025, 100.02),
        (100.085, 100.08),
        (44.444444, 44.44),
        (37.5, 37.5),
        (-1.005, -1.0),
    ],
)
def test_round_half_even_two_decimals(x, expected) -> None:
    assert round_half_even(x, 2) == expected


def test_decimal_input_kept_exact() -> None:
    assert round_half_even_decimal(Decimal("2.345"), 2) == Decimal("2.34")
    assert round_half_even_decimal(Decimal("2.355"), 2) == Decimal("2.36")


def test_invalid_inputs() -> None:
    with pytest.raises(ValueError):
        round_half_even(1.0, -1)
    with pytest.raises(ValueError):
        round_half_even(float("nan"), 2)
