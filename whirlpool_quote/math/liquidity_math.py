"""
Liquidity Math - 유동성 계산

Whirlpool의 집중화된 유동성(Concentrated Liquidity) 계산.
특정 가격 범위에서의 토큰 수량과 유동성 간의 변환.

References:
- Whirlpool program: math/token_math.rs, math/liquidity_math.rs
- 백서 Section 6.2.1: Concentrated Liquidity

핵심 공식 (sqrt price는 Q64.64):
    Δa = L × (√P_u - √P_l) × 2^64 / (√P_u × √P_l)
    Δb = L × (√P_u - √P_l) / 2^64
    L = Δa × √P_l × √P_u / ((√P_u - √P_l) × 2^64)
    L = Δb × 2^64 / (√P_u - √P_l)

반올림 규칙:
    유동성은 항상 내림, 사용자가 지불하는 토큰은 올림, 받는 토큰은 내림.
"""

from enum import Enum
from typing import Tuple

from .fixed_point import Rounding, div_round, mul_div, mul_shift_right, check_u64, check_u128
from .tick_math import get_sqrt_price_at_tick


class PositionStatus(Enum):
    """현재 틱 기준 포지션 상태"""
    BELOW_RANGE = "below_range"  # current < lower: token A만 보유
    IN_RANGE = "in_range"        # lower <= current < upper: 양쪽 보유
    ABOVE_RANGE = "above_range"  # current >= upper: token B만 보유


def get_position_status(tick_current_index: int, tick_lower_index: int, tick_upper_index: int) -> PositionStatus:
    """현재 틱으로 포지션 상태 판정 (상한 틱은 범위 밖)"""
    if tick_current_index < tick_lower_index:
        return PositionStatus.BELOW_RANGE
    if tick_current_index < tick_upper_index:
        return PositionStatus.IN_RANGE
    return PositionStatus.ABOVE_RANGE


def _ordered(sqrt_price_0: int, sqrt_price_1: int) -> Tuple[int, int]:
    return (sqrt_price_0, sqrt_price_1) if sqrt_price_0 <= sqrt_price_1 else (sqrt_price_1, sqrt_price_0)


def get_token_a_from_liquidity(
    liquidity: int,
    sqrt_price_0: int,
    sqrt_price_1: int,
    round_up: bool
) -> int:
    """유동성에서 token A 수량 계산

    공식: Δa = L × (√P_u - √P_l) × 2^64 / (√P_u × √P_l)

    Args:
        liquidity: 유동성
        sqrt_price_0: 가격 범위 한쪽 끝 sqrtPriceX64
        sqrt_price_1: 가격 범위 다른 쪽 끝 sqrtPriceX64
        round_up: True면 올림, False면 내림

    Returns:
        token A 수량 (u64)

    Raises:
        ArithmeticOverflowError: 결과가 u64를 초과하는 경우
    """
    sqrt_lower, sqrt_upper = _ordered(sqrt_price_0, sqrt_price_1)
    numerator = (liquidity * (sqrt_upper - sqrt_lower)) << 64
    denominator = sqrt_upper * sqrt_lower
    rounding = Rounding.UP if round_up else Rounding.DOWN
    return check_u64(div_round(numerator, denominator, rounding), "token A 수량")


def get_token_b_from_liquidity(
    liquidity: int,
    sqrt_price_0: int,
    sqrt_price_1: int,
    round_up: bool
) -> int:
    """유동성에서 token B 수량 계산

    공식: Δb = L × (√P_u - √P_l) / 2^64

    Raises:
        ArithmeticOverflowError: 결과가 u64를 초과하는 경우
    """
    sqrt_lower, sqrt_upper = _ordered(sqrt_price_0, sqrt_price_1)
    rounding = Rounding.UP if round_up else Rounding.DOWN
    return mul_shift_right(liquidity, sqrt_upper - sqrt_lower, 64, rounding, bits=64)


def get_liquidity_from_token_a(amount: int, sqrt_price_0: int, sqrt_price_1: int) -> int:
    """token A 수량으로 얻을 수 있는 유동성 (내림)

    공식: L = Δa × √P_l × √P_u / ((√P_u - √P_l) × 2^64)
    """
    sqrt_lower, sqrt_upper = _ordered(sqrt_price_0, sqrt_price_1)
    return mul_div(amount * sqrt_lower, sqrt_upper, (sqrt_upper - sqrt_lower) << 64, Rounding.DOWN)


def get_liquidity_from_token_b(amount: int, sqrt_price_0: int, sqrt_price_1: int) -> int:
    """token B 수량으로 얻을 수 있는 유동성 (내림)

    공식: L = Δb × 2^64 / (√P_u - √P_l)
    """
    sqrt_lower, sqrt_upper = _ordered(sqrt_price_0, sqrt_price_1)
    return check_u128(div_round(amount << 64, sqrt_upper - sqrt_lower, Rounding.DOWN), "유동성")


def get_amounts_for_liquidity(
    tick_current_index: int,
    sqrt_price: int,
    tick_lower_index: int,
    tick_upper_index: int,
    liquidity: int,
    round_up: bool
) -> Tuple[int, int]:
    """유동성에 해당하는 토큰 수량 계산

    포지션 상태는 현재 틱으로 판정합니다 (온체인 calculate_liquidity_token_deltas와 동일).

    Args:
        tick_current_index: 현재 틱
        sqrt_price: 현재 sqrtPriceX64
        tick_lower_index: 하한 틱
        tick_upper_index: 상한 틱
        liquidity: 유동성
        round_up: True면 올림 (예치), False면 내림 (인출)

    Returns:
        (token A 수량, token B 수량)
    """
    sqrt_price_lower = get_sqrt_price_at_tick(tick_lower_index)
    sqrt_price_upper = get_sqrt_price_at_tick(tick_upper_index)
    status = get_position_status(tick_current_index, tick_lower_index, tick_upper_index)

    if status is PositionStatus.BELOW_RANGE:
        return get_token_a_from_liquidity(liquidity, sqrt_price_lower, sqrt_price_upper, round_up), 0
    if status is PositionStatus.ABOVE_RANGE:
        return 0, get_token_b_from_liquidity(liquidity, sqrt_price_lower, sqrt_price_upper, round_up)

    amount_a = get_token_a_from_liquidity(liquidity, sqrt_price, sqrt_price_upper, round_up)
    amount_b = get_token_b_from_liquidity(liquidity, sqrt_price_lower, sqrt_price, round_up)
    return amount_a, amount_b
