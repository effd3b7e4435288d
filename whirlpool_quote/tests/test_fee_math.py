"""
Fee Math 테스트

fee/reward growth 정산과 수령 견적을 테스트합니다.
"""

from dataclasses import replace

import pytest

from ..constants import Q64, Q128
from ..data.types import PositionRewardInfo, PositionSnapshot, Tick
from ..errors import ArithmeticOverflowError
from ..math.fee_math import (
    fee_growth_above,
    fee_growth_below,
    fee_growth_inside,
    growth_inside,
    calculate_owed,
    next_reward_growth_global,
)
from ..quotes.collect_fees import get_collect_fees_quote
from ..quotes.collect_rewards import get_collect_rewards_quote, get_reward_growths_global
from .fixtures import make_pool, reward

LOWER, UPPER = -640, 640


def lower_tick(**kwargs) -> Tick:
    return Tick(initialized=True, liquidity_net=10 ** 6, liquidity_gross=10 ** 6, **kwargs)


def upper_tick(**kwargs) -> Tick:
    return Tick(initialized=True, liquidity_net=-10 ** 6, liquidity_gross=10 ** 6, **kwargs)


class TestFeeGrowthBelowAbove:
    """f_b, f_a 테스트"""

    def test_below_when_current_above_tick(self):
        """i_c >= i 이면 f_b = f_o"""
        assert fee_growth_below(100, 150, 1000, 300) == 300

    def test_below_when_current_below_tick(self):
        """i_c < i 이면 f_b = f_g - f_o"""
        assert fee_growth_below(100, 50, 1000, 300) == 700

    def test_above_when_current_below_tick(self):
        """i_c < i 이면 f_a = f_o"""
        assert fee_growth_above(100, 50, 1000, 300) == 300

    def test_above_when_current_at_tick(self):
        """i_c == i 이면 f_a = f_g - f_o"""
        assert fee_growth_above(100, 100, 1000, 300) == 700

    def test_uninitialized_ticks(self):
        """미초기화 하한은 f_g, 상한은 0"""
        assert fee_growth_below(100, 150, 1000, 300, initialized=False) == 1000
        assert fee_growth_above(100, 50, 1000, 300, initialized=False) == 0

    def test_wrapping(self):
        """f_g < f_o 이면 2^128에서 wrap"""
        assert fee_growth_below(100, 50, 100, 300) == Q128 - 200


class TestFeeGrowthInside:
    """f_r 테스트"""

    def test_in_range(self):
        inside = fee_growth_inside(
            0, LOWER, lower_tick(fee_growth_outside_a=2 * Q64), UPPER, upper_tick(fee_growth_outside_a=3 * Q64),
            10 * Q64, 0,
        )
        assert inside.fee_growth_inside_a == 5 * Q64
        assert inside.fee_growth_inside_b == 0

    def test_below_range(self):
        """현재 틱이 범위 아래면 f_r = f_o(l) - f_o(u)"""
        inside = growth_inside(-1000, LOWER, 7 * Q64, True, UPPER, 3 * Q64, True, 10 * Q64)
        assert inside == 4 * Q64

    def test_wrapped_result_is_modular(self):
        """wrap된 outside 값에서도 모듈러 차이가 같음"""
        inside = growth_inside(0, LOWER, Q128 - Q64, True, UPPER, 0, True, Q64)
        assert inside == 2 * Q64


class TestCalculateOwed:
    """calculate_owed 테스트"""

    def test_owed(self):
        assert calculate_owed(10 ** 6, 5 * Q64, Q64, 7) == 4 * 10 ** 6 + 7

    def test_checkpoint_wrap(self):
        """체크포인트가 wrap 직전 값이어도 차이는 양수"""
        assert calculate_owed(1000, Q64, Q128 - Q64, 0) == 2000

    def test_overflow(self):
        with pytest.raises(ArithmeticOverflowError):
            calculate_owed(2 ** 64, Q128 - 1, 0, 0)


class TestCollectFeesQuote:
    """get_collect_fees_quote 테스트"""

    def setup_method(self):
        self.pool = make_pool(tick_current_index=0, fee_growth_global_a=10 * Q64, fee_growth_global_b=4 * Q64)
        self.position = PositionSnapshot(
            LOWER, UPPER, 10 ** 6,
            fee_growth_checkpoint_a=Q64,
            fee_owed_a=7,
            fee_owed_b=11,
        )
        self.tick_lower = lower_tick(fee_growth_outside_a=2 * Q64, fee_growth_outside_b=Q64)
        self.tick_upper = upper_tick(fee_growth_outside_a=3 * Q64)

    def test_quote(self):
        quote = get_collect_fees_quote(self.pool, self.position, self.tick_lower, self.tick_upper)
        assert quote.fee_owed_a == 4 * 10 ** 6 + 7
        assert quote.fee_owed_b == 3 * 10 ** 6 + 11

    def test_idempotent(self):
        """같은 입력이면 항상 같은 결과, 입력은 변하지 않음"""
        first = get_collect_fees_quote(self.pool, self.position, self.tick_lower, self.tick_upper)
        second = get_collect_fees_quote(self.pool, self.position, self.tick_lower, self.tick_upper)
        assert first == second
        assert self.position.fee_owed_a == 7

    def test_zero_liquidity_keeps_owed(self):
        position = replace(self.position, liquidity=0)
        quote = get_collect_fees_quote(self.pool, position, self.tick_lower, self.tick_upper)
        assert (quote.fee_owed_a, quote.fee_owed_b) == (7, 11)


class TestCollectRewardsQuote:
    """get_collect_rewards_quote 테스트"""

    def setup_method(self):
        self.pool = make_pool(
            tick_current_index=0,
            liquidity=1000,
            reward_infos=(
                reward("RewardMint1", growth_global_x64=3 * Q64, emissions_per_second_x64=2 * Q64),
                reward(None),
                reward("RewardMint3"),
            ),
            reward_last_updated_timestamp=1_700_000_000,
        )
        self.position = PositionSnapshot(
            LOWER, UPPER, 1000,
            reward_infos=(PositionRewardInfo(0, 5), PositionRewardInfo(), PositionRewardInfo()),
        )

    def test_absent_slot_is_none(self):
        quote = get_collect_rewards_quote(self.pool, self.position, lower_tick(), upper_tick())
        assert quote.reward_owed_a == 3000 + 5
        assert quote.reward_owed_b is None
        assert quote.reward_owed_c == 0
        assert quote.rewards_owed == (3005, None, 0)

    def test_projection_to_timestamp(self):
        """배출량 × 경과 시간 / 유동성만큼 전역 growth 전진"""
        quote = get_collect_rewards_quote(
            self.pool, self.position, lower_tick(), upper_tick(), current_timestamp=1_700_000_010
        )
        growth = 3 * Q64 + 10 * 2 * Q64 // 1000
        assert quote.reward_owed_a == (1000 * growth >> 64) + 5
        assert quote.reward_owed_b is None

    def test_projection_skips_uninitialized(self):
        growths = get_reward_growths_global(self.pool, 1_700_000_010)
        assert growths[1] == 0

    def test_next_reward_growth_zero_liquidity(self):
        assert next_reward_growth_global(Q64, 2 * Q64, 0, 10) == Q64


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
