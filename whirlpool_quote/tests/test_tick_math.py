"""
Tick Math 테스트

tick_math.py의 함수들을 테스트합니다.
온체인 값과 비교하여 정확도를 검증합니다.
"""

import pytest

from ..constants import Q64, MIN_TICK_INDEX, MAX_TICK_INDEX, MIN_SQRT_PRICE, MAX_SQRT_PRICE
from ..errors import OutOfRangeError
from ..math.tick_math import (
    get_sqrt_price_at_tick,
    get_tick_at_sqrt_price,
    sqrt_price_to_price,
    price_to_sqrt_price,
    tick_to_price,
    price_to_tick,
    round_tick_to_spacing,
    get_fee_rate_for_tick_spacing,
)

SAMPLE_TICKS = sorted(set(
    list(range(MIN_TICK_INDEX, MIN_TICK_INDEX + 50))
    + list(range(-300, 301))
    + list(range(MIN_TICK_INDEX, MAX_TICK_INDEX + 1, 7919))
    + list(range(MAX_TICK_INDEX - 50, MAX_TICK_INDEX + 1))
    + [-443635, -221818, -1, 1, 58628, 58770, 221818, 443635]
))


class TestGetSqrtPriceAtTick:
    """get_sqrt_price_at_tick 테스트"""

    def test_tick_0(self):
        """틱 0에서의 sqrtPrice (price = 1)"""
        assert get_sqrt_price_at_tick(0) == Q64

    def test_min_tick(self):
        """최소 틱에서의 sqrtPrice"""
        assert get_sqrt_price_at_tick(MIN_TICK_INDEX) == MIN_SQRT_PRICE

    def test_max_tick(self):
        """최대 틱에서의 sqrtPrice"""
        assert get_sqrt_price_at_tick(MAX_TICK_INDEX) == MAX_SQRT_PRICE

    def test_positive_and_negative_tick(self):
        assert get_sqrt_price_at_tick(100) > Q64
        assert get_sqrt_price_at_tick(-100) < Q64

    def test_strictly_increasing(self):
        """틱이 커지면 sqrtPrice도 반드시 커짐"""
        prices = [get_sqrt_price_at_tick(t) for t in SAMPLE_TICKS]
        assert all(a < b for a, b in zip(prices, prices[1:]))

    def test_approximates_power_formula(self):
        """sqrt(1.0001)^tick 근사"""
        for tick in (-50000, -1000, 1000, 50000):
            expected = 1.0001 ** (tick / 2) * Q64
            assert abs(get_sqrt_price_at_tick(tick) / expected - 1) < 1e-9

    def test_invalid_tick_too_low(self):
        """유효 범위를 벗어난 틱 (너무 낮음)"""
        with pytest.raises(OutOfRangeError):
            get_sqrt_price_at_tick(MIN_TICK_INDEX - 1)

    def test_invalid_tick_too_high(self):
        """유효 범위를 벗어난 틱 (너무 높음)"""
        with pytest.raises(ValueError):
            get_sqrt_price_at_tick(MAX_TICK_INDEX + 1)


class TestGetTickAtSqrtPrice:
    """get_tick_at_sqrt_price 테스트"""

    def test_round_trip(self):
        """get_tick_at_sqrt_price(get_sqrt_price_at_tick(t)) == t"""
        for tick in SAMPLE_TICKS:
            assert get_tick_at_sqrt_price(get_sqrt_price_at_tick(tick)) == tick

    def test_floor_rounding(self):
        """틱 경계 바로 아래 가격은 한 틱 아래로 내림"""
        for tick in SAMPLE_TICKS:
            if tick == MIN_TICK_INDEX:
                continue
            assert get_tick_at_sqrt_price(get_sqrt_price_at_tick(tick) - 1) == tick - 1

    def test_between_ticks(self):
        """다음 틱 경계 직전까지는 같은 틱"""
        for tick in (-443000, -5, 0, 5, 443000):
            upper = get_sqrt_price_at_tick(tick + 1) - 1
            assert get_tick_at_sqrt_price(upper) == tick

    def test_bounds(self):
        assert get_tick_at_sqrt_price(MIN_SQRT_PRICE) == MIN_TICK_INDEX
        assert get_tick_at_sqrt_price(MAX_SQRT_PRICE) == MAX_TICK_INDEX

    def test_out_of_range(self):
        with pytest.raises(OutOfRangeError):
            get_tick_at_sqrt_price(MIN_SQRT_PRICE - 1)
        with pytest.raises(OutOfRangeError):
            get_tick_at_sqrt_price(MAX_SQRT_PRICE + 1)


class TestPriceConversion:
    """human-readable 가격 변환 테스트"""

    def test_tick_0_same_decimals(self):
        assert tick_to_price(0, 6, 6) == pytest.approx(1.0)

    def test_decimals_adjustment(self):
        """SOL(9)/USDC(6): 원시 가격 × 10^3"""
        assert sqrt_price_to_price(Q64, 9, 6) == pytest.approx(1000.0)

    def test_price_to_sqrt_price_inverse(self):
        sqrt_price = price_to_sqrt_price(150.0, 9, 6)
        assert sqrt_price_to_price(sqrt_price, 9, 6) == pytest.approx(150.0, rel=1e-12)

    def test_price_to_tick(self):
        tick = price_to_tick(150.0, 9, 6)
        assert tick_to_price(tick, 9, 6) <= 150.0 < tick_to_price(tick + 1, 9, 6)

    def test_invalid_price(self):
        """가격은 양수여야 함"""
        with pytest.raises(ValueError):
            price_to_tick(0, 9, 6)


class TestRoundTickToSpacing:
    """round_tick_to_spacing 테스트"""

    def test_already_aligned(self):
        assert round_tick_to_spacing(128, 64) == 128

    def test_round_nearest(self):
        assert round_tick_to_spacing(100, 64) == 128
        assert round_tick_to_spacing(90, 64) == 64
        assert round_tick_to_spacing(-90, 64) == -64

    def test_clamped_to_valid_range(self):
        assert round_tick_to_spacing(MAX_TICK_INDEX, 64) == 443584
        assert round_tick_to_spacing(MIN_TICK_INDEX, 64) == -443584

    def test_fee_rate_for_tick_spacing(self):
        assert get_fee_rate_for_tick_spacing(64) == 3000
        with pytest.raises(ValueError):
            get_fee_rate_for_tick_spacing(3)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
