"""
데이터 타입 / 설정 / 유동성 분포 테스트
"""

import pytest

from ..config import _parse_fraction
from ..constants import DEFAULT_PUBKEY, TICK_ARRAY_SIZE
from ..data.distribution import get_liquidity_distribution
from ..data.types import PoolSnapshot, PositionSnapshot, RewardInfo, TickArray, TokenType
from ..math.percentage import Percentage, adjust_for_slippage
from .fixtures import initialized_tick, make_pool, make_tick_array

POOL_JSON = {
    "sqrtPrice": "18446744073709551616",
    "liquidity": "32523523532",
    "tickCurrentIndex": 0,
    "tickSpacing": 64,
    "feeRate": 3000,
    "protocolFeeRate": 300,
    "feeGrowthGlobalA": "1000",
    "feeGrowthGlobalB": "2000",
    "tokenMintA": "So11111111111111111111111111111111111111112",
    "tokenMintB": "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v",
    "rewardLastUpdatedTimestamp": "1700000000",
    "rewardInfos": [
        {"mint": "orcaEKTdK7LKz57vaAYr9QeNsVEPfiu6QeMU1kektZE", "growthGlobalX64": "5", "emissionsPerSecondX64": "7"},
        {"mint": DEFAULT_PUBKEY, "growthGlobalX64": "0", "emissionsPerSecondX64": "0"},
        {"mint": DEFAULT_PUBKEY, "growthGlobalX64": "0", "emissionsPerSecondX64": "0"},
    ],
}


class TestPoolSnapshot:
    """PoolSnapshot.from_dict 테스트"""

    def test_from_dict(self):
        pool = PoolSnapshot.from_dict(POOL_JSON)
        assert pool.sqrt_price == 2 ** 64
        assert pool.liquidity == 32523523532
        assert pool.fee_rate == 3000
        assert pool.reward_last_updated_timestamp == 1700000000

    def test_default_pubkey_reward_is_unset(self):
        pool = PoolSnapshot.from_dict(POOL_JSON)
        assert [r.initialized for r in pool.reward_infos] == [True, False, False]
        assert pool.reward_infos[0].emissions_per_second_x64 == 7

    def test_token_type(self):
        pool = PoolSnapshot.from_dict(POOL_JSON)
        assert pool.token_type("So11111111111111111111111111111111111111112") is TokenType.TOKEN_A
        with pytest.raises(ValueError):
            pool.token_type("unknown")

    def test_reward_slot_count(self):
        with pytest.raises(ValueError):
            make_pool(reward_infos=(RewardInfo(mint=None),))

    def test_frozen(self):
        pool = make_pool()
        with pytest.raises(AttributeError):
            pool.liquidity = 0


class TestPositionAndTickArray:
    """PositionSnapshot / TickArray 테스트"""

    def test_position_from_dict(self):
        position = PositionSnapshot.from_dict({
            "tickLowerIndex": -128,
            "tickUpperIndex": 128,
            "liquidity": "1000",
            "feeOwedA": "3",
            "rewardInfos": [{"growthInsideCheckpoint": "9", "amountOwed": "1"}] * 3,
        })
        assert position.liquidity == 1000
        assert position.fee_owed_a == 3
        assert position.reward_infos[2].growth_inside_checkpoint == 9

    def test_tick_array_from_dict(self):
        ticks = [{"initialized": False}] * TICK_ARRAY_SIZE
        ticks[3] = {"initialized": True, "liquidityNet": "-50", "liquidityGross": "50"}
        tick_array = TickArray.from_dict({"startTickIndex": -5632, "ticks": ticks})
        assert tick_array.get_tick(-5632 + 3 * 64, 64).liquidity_net == -50

    def test_tick_array_size(self):
        with pytest.raises(ValueError):
            TickArray(0, ())

    def test_get_tick_outside_array(self):
        with pytest.raises(ValueError):
            TickArray.empty(0).get_tick(88, 1)


class TestPercentage:
    """Percentage / 슬리피지 테스트"""

    def test_parse_fraction(self):
        assert _parse_fraction("1/1000") == (1, 1000)
        assert _parse_fraction("0") == (0, 1)

    def test_invalid(self):
        with pytest.raises(ValueError):
            Percentage(1, 0)
        with pytest.raises(ValueError):
            Percentage(2, 1)

    def test_adjust_for_slippage(self):
        assert adjust_for_slippage(1000, Percentage(1, 100), round_up=False) == 990
        assert adjust_for_slippage(1001, Percentage(1, 100), round_up=True) == 1012


class TestLiquidityDistribution:
    """get_liquidity_distribution 테스트"""

    def test_cumulative_liquidity(self):
        pool = make_pool(tick_current_index=10, tick_spacing=1)
        arrays = [
            make_tick_array(88, 1, {100: initialized_tick(-300)}),
            make_tick_array(0, 1, {5: initialized_tick(500), 50: initialized_tick(-200)}),
        ]
        distribution = get_liquidity_distribution(pool, arrays, 6, 6)
        assert [(p.tick_index, p.liquidity) for p in distribution.datapoints] == [(5, 500), (50, 300), (100, 0)]
        assert distribution.current_tick_index == 10
        assert distribution.datapoints[0].price == pytest.approx(1.0001 ** 5)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
