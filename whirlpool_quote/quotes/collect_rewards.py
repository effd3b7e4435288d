"""
Collect Rewards Quote - 리워드 수령 견적

리워드 슬롯 3개 각각에 대해 수수료와 같은 방식으로 미수령 리워드를 계산합니다.
설정되지 않은 슬롯은 None 입니다.

References:
- Whirlpool program: manager/whirlpool_manager.rs (next_whirlpool_reward_infos)
- Whirlpool program: manager/position_manager.rs (next_position_reward_infos)
"""

from typing import List, Optional

from ..data.types import PoolSnapshot, PositionSnapshot, Tick
from ..math.fee_math import calculate_owed, next_reward_growth_global, reward_growths_inside
from .types import CollectRewardsQuote


def get_reward_growths_global(pool: PoolSnapshot, current_timestamp: Optional[int] = None) -> List[int]:
    """풀의 전역 reward growth (current_timestamp가 있으면 그 시점까지 전진)"""
    growths = [reward.growth_global_x64 for reward in pool.reward_infos]
    if current_timestamp is None:
        return growths

    elapsed = current_timestamp - pool.reward_last_updated_timestamp
    return [
        next_reward_growth_global(growth, reward.emissions_per_second_x64, pool.liquidity, elapsed)
        if reward.initialized else growth
        for growth, reward in zip(growths, pool.reward_infos)
    ]


def get_collect_rewards_quote(
    pool: PoolSnapshot,
    position: PositionSnapshot,
    tick_lower: Tick,
    tick_upper: Tick,
    current_timestamp: Optional[int] = None
) -> CollectRewardsQuote:
    """리워드 수령 견적

    Args:
        pool: 풀 스냅샷
        position: 포지션 스냅샷
        tick_lower: 포지션 하한 틱 스냅샷
        tick_upper: 포지션 상한 틱 스냅샷
        current_timestamp: 주어지면 풀의 마지막 갱신 이후 배출량을 반영 (초 단위)

    Returns:
        CollectRewardsQuote (미설정 슬롯은 None)
    """
    growths_inside = reward_growths_inside(
        pool.tick_current_index,
        position.tick_lower_index,
        tick_lower,
        position.tick_upper_index,
        tick_upper,
        get_reward_growths_global(pool, current_timestamp),
        [reward.initialized for reward in pool.reward_infos],
    )

    owed = []
    for growth_inside, position_reward in zip(growths_inside, position.reward_infos):
        if growth_inside is None:
            owed.append(None)
            continue
        owed.append(calculate_owed(
            position.liquidity,
            growth_inside,
            position_reward.growth_inside_checkpoint,
            position_reward.amount_owed,
        ))

    return CollectRewardsQuote(*owed)
