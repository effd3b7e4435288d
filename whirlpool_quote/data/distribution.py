"""
유동성 분포 (Liquidity Distribution)

틱 배열의 초기화 틱을 오름차순으로 훑으며 liquidity_net을 누적해
각 틱 이후 구간의 활성 유동성을 구합니다. 차트/분석용 보조 기능입니다.
"""

from dataclasses import dataclass
from typing import Iterable, List, Tuple

from ..math.tick_math import sqrt_price_to_price, tick_to_price
from .types import PoolSnapshot, TickArray


@dataclass(frozen=True)
class LiquidityDataPoint:
    """tick_index 이상 구간의 활성 유동성"""
    tick_index: int
    price: float
    liquidity: int


@dataclass(frozen=True)
class LiquidityDistribution:
    current_tick_index: int
    current_price: float
    datapoints: Tuple[LiquidityDataPoint, ...]


def get_liquidity_distribution(
    pool: PoolSnapshot,
    tick_arrays: Iterable[TickArray],
    decimals_a: int = 9,
    decimals_b: int = 6
) -> LiquidityDistribution:
    """틱 배열 범위의 유동성 분포 계산

    주어진 배열 중 가장 낮은 틱부터 누적하므로, 그 아래에 포지션이 있으면
    누적 유동성은 실제보다 작을 수 있습니다.

    Args:
        pool: 풀 스냅샷
        tick_arrays: 틱 배열 목록 (순서 무관)
        decimals_a: token A 소수점 자릿수
        decimals_b: token B 소수점 자릿수

    Returns:
        LiquidityDistribution
    """
    datapoints: List[LiquidityDataPoint] = []
    liquidity = 0

    for tick_array in sorted(tick_arrays, key=lambda array: array.start_tick_index):
        for offset, tick in enumerate(tick_array.ticks):
            if not tick.initialized:
                continue
            tick_index = tick_array.start_tick_index + offset * pool.tick_spacing
            liquidity += tick.liquidity_net
            datapoints.append(LiquidityDataPoint(
                tick_index=tick_index,
                price=tick_to_price(tick_index, decimals_a, decimals_b),
                liquidity=liquidity,
            ))

    return LiquidityDistribution(
        current_tick_index=pool.tick_current_index,
        current_price=sqrt_price_to_price(pool.sqrt_price, decimals_a, decimals_b),
        datapoints=tuple(datapoints),
    )
