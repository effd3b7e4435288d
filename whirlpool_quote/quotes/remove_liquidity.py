"""
Remove Liquidity Quote - 유동성 제거 견적

제거할 유동성에 해당하는 토큰 수량(내림)과 슬리피지를 반영한 최소 수령 수량.
"""

from typing import Optional

from ..data.types import PoolSnapshot, PositionSnapshot
from ..errors import ArithmeticUnderflowError
from ..math.liquidity_math import get_amounts_for_liquidity
from ..math.percentage import Percentage, adjust_for_slippage, resolve_slippage
from .add_liquidity import validate_tick_range
from .types import RemoveLiquidityQuote


def get_remove_liquidity_quote(
    pool: PoolSnapshot,
    position: PositionSnapshot,
    liquidity: int,
    slippage_tolerance: Optional[Percentage] = None
) -> RemoveLiquidityQuote:
    """유동성 제거 견적

    Args:
        pool: 풀 스냅샷
        position: 포지션 스냅샷
        liquidity: 제거할 유동성
        slippage_tolerance: 슬리피지 (None이면 설정값)

    Returns:
        RemoveLiquidityQuote

    Raises:
        InvalidRangeError: 포지션 틱 범위가 잘못된 경우
        ArithmeticUnderflowError: 포지션 유동성보다 많이 제거하는 경우
    """
    validate_tick_range(position.tick_lower_index, position.tick_upper_index)
    if liquidity > position.liquidity:
        raise ArithmeticUnderflowError(
            f"포지션 유동성({position.liquidity})보다 많이 제거할 수 없습니다: {liquidity}"
        )
    slippage_tolerance = resolve_slippage(slippage_tolerance)

    est_token_a, est_token_b = get_amounts_for_liquidity(
        pool.tick_current_index,
        pool.sqrt_price,
        position.tick_lower_index,
        position.tick_upper_index,
        liquidity,
        round_up=False,
    )

    return RemoveLiquidityQuote(
        min_token_a=adjust_for_slippage(est_token_a, slippage_tolerance, round_up=False),
        min_token_b=adjust_for_slippage(est_token_b, slippage_tolerance, round_up=False),
        liquidity=liquidity,
        est_token_a=est_token_a,
        est_token_b=est_token_b,
    )
