"""
Collect Fees Quote - 수수료 수령 견적

References:
- Whirlpool program: manager/position_manager.rs (next_position_modify_liquidity_update)

핵심 공식:
    f_r = f_g - f_b(i_l) - f_a(i_u)
    fee_owed = fee_owed + (L × (f_r - checkpoint)) >> 64
"""

from ..data.types import PoolSnapshot, PositionSnapshot, Tick
from ..math.fee_math import fee_growth_inside, calculate_owed
from .types import CollectFeesQuote


def get_collect_fees_quote(
    pool: PoolSnapshot,
    position: PositionSnapshot,
    tick_lower: Tick,
    tick_upper: Tick
) -> CollectFeesQuote:
    """수수료 수령 견적

    같은 입력에 대해 항상 같은 결과를 돌려주며 입력을 변경하지 않습니다.

    Args:
        pool: 풀 스냅샷
        position: 포지션 스냅샷
        tick_lower: 포지션 하한 틱 스냅샷
        tick_upper: 포지션 상한 틱 스냅샷

    Returns:
        CollectFeesQuote

    Raises:
        ArithmeticOverflowError: 미수령 수수료가 u64를 초과하는 경우
    """
    inside = fee_growth_inside(
        pool.tick_current_index,
        position.tick_lower_index,
        tick_lower,
        position.tick_upper_index,
        tick_upper,
        pool.fee_growth_global_a,
        pool.fee_growth_global_b,
    )

    return CollectFeesQuote(
        fee_owed_a=calculate_owed(
            position.liquidity, inside.fee_growth_inside_a, position.fee_growth_checkpoint_a, position.fee_owed_a
        ),
        fee_owed_b=calculate_owed(
            position.liquidity, inside.fee_growth_inside_b, position.fee_growth_checkpoint_b, position.fee_owed_b
        ),
    )
