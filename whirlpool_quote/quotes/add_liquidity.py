"""
Add Liquidity Quote - 유동성 추가 견적

한쪽 토큰 수량을 입력받아 얻을 수 있는 유동성과 필요한 양쪽 토큰 수량을 계산합니다.

References:
- Whirlpool program: math/liquidity_math.rs (calculate_liquidity_token_deltas)

포지션 상태별 규칙:
    BELOW_RANGE: token A만 예치 가능, token B 입력은 0 견적
    ABOVE_RANGE: token B만 예치 가능, token A 입력은 0 견적
    IN_RANGE: 입력 토큰으로 유동성 결정 후 반대쪽 토큰 계산
"""

from typing import Optional

from ..data.types import PoolSnapshot, TokenType
from ..errors import InvalidRangeError
from ..math.liquidity_math import (
    PositionStatus,
    get_position_status,
    get_liquidity_from_token_a,
    get_liquidity_from_token_b,
    get_amounts_for_liquidity,
)
from ..math.percentage import Percentage, adjust_for_slippage, resolve_slippage
from ..math.tick_math import get_sqrt_price_at_tick, price_to_tick, round_tick_to_spacing
from .types import AddLiquidityQuote


def validate_tick_range(tick_lower_index: int, tick_upper_index: int) -> None:
    """tick_lower < tick_upper 검사 (범위 밖 틱은 get_sqrt_price_at_tick에서 검사)"""
    if tick_lower_index >= tick_upper_index:
        raise InvalidRangeError(
            f"하한 틱은 상한 틱보다 작아야 합니다: {tick_lower_index} >= {tick_upper_index}"
        )


def get_add_liquidity_quote(
    pool: PoolSnapshot,
    tick_lower_index: int,
    tick_upper_index: int,
    input_token: TokenType,
    input_amount: int,
    slippage_tolerance: Optional[Percentage] = None
) -> AddLiquidityQuote:
    """유동성 추가 견적

    Args:
        pool: 풀 스냅샷
        tick_lower_index: 하한 틱
        tick_upper_index: 상한 틱
        input_token: 입력 토큰 (TOKEN_A / TOKEN_B)
        input_amount: 입력 토큰 수량
        slippage_tolerance: 슬리피지 (None이면 설정값)

    Returns:
        AddLiquidityQuote. 포지션 상태와 맞지 않는 토큰이면 모두 0

    Raises:
        InvalidRangeError: tick_lower >= tick_upper
        OutOfRangeError: 틱이 유효 범위를 벗어난 경우
    """
    validate_tick_range(tick_lower_index, tick_upper_index)
    slippage_tolerance = resolve_slippage(slippage_tolerance)

    sqrt_price_lower = get_sqrt_price_at_tick(tick_lower_index)
    sqrt_price_upper = get_sqrt_price_at_tick(tick_upper_index)
    status = get_position_status(pool.tick_current_index, tick_lower_index, tick_upper_index)

    if status is PositionStatus.BELOW_RANGE:
        if input_token is not TokenType.TOKEN_A:
            return AddLiquidityQuote.zero()
        liquidity = get_liquidity_from_token_a(input_amount, sqrt_price_lower, sqrt_price_upper)
    elif status is PositionStatus.ABOVE_RANGE:
        if input_token is not TokenType.TOKEN_B:
            return AddLiquidityQuote.zero()
        liquidity = get_liquidity_from_token_b(input_amount, sqrt_price_lower, sqrt_price_upper)
    elif input_token is TokenType.TOKEN_A:
        liquidity = get_liquidity_from_token_a(input_amount, pool.sqrt_price, sqrt_price_upper)
    else:
        # 가격이 정확히 하한 틱이면 token B 구간의 폭이 0
        if pool.sqrt_price == sqrt_price_lower:
            return AddLiquidityQuote.zero()
        liquidity = get_liquidity_from_token_b(input_amount, sqrt_price_lower, pool.sqrt_price)

    est_token_a, est_token_b = get_amounts_for_liquidity(
        pool.tick_current_index,
        pool.sqrt_price,
        tick_lower_index,
        tick_upper_index,
        liquidity,
        round_up=True,
    )

    return AddLiquidityQuote(
        max_token_a=est_token_a,
        max_token_b=est_token_b,
        liquidity=adjust_for_slippage(liquidity, slippage_tolerance, round_up=False),
        est_token_a=est_token_a,
        est_token_b=est_token_b,
    )


def get_add_liquidity_quote_by_price(
    pool: PoolSnapshot,
    price_lower: float,
    price_upper: float,
    input_token: TokenType,
    input_amount: int,
    decimals_a: int,
    decimals_b: int,
    slippage_tolerance: Optional[Percentage] = None
) -> AddLiquidityQuote:
    """가격 범위로 유동성 추가 견적

    가격을 가장 가까운 유효 틱으로 바꾼 뒤 get_add_liquidity_quote를 호출합니다.

    Example:
        >>> get_add_liquidity_quote_by_price(pool, 90.0, 110.0, TokenType.TOKEN_B, 1_000_000, 9, 6)
    """
    tick_lower_index = round_tick_to_spacing(price_to_tick(price_lower, decimals_a, decimals_b), pool.tick_spacing)
    tick_upper_index = round_tick_to_spacing(price_to_tick(price_upper, decimals_a, decimals_b), pool.tick_spacing)
    return get_add_liquidity_quote(
        pool, tick_lower_index, tick_upper_index, input_token, input_amount, slippage_tolerance
    )
