"""
Fee Math - 수수료 / 리워드 정산 계산

포지션 범위 안에서 누적된 fee growth, reward growth를 계산하고
체크포인트 이후 발생한 미수령 금액을 구합니다.

References:
- Whirlpool program: manager/position_manager.rs, manager/tick_manager.rs
- 백서 Section 6.3: Tick-Indexed State (feeGrowthOutside)
- 백서 Section 6.4.1: Position-Indexed State (uncollected fees)

핵심 공식 (growth는 Q64.64, 2^128 modulo wrapping):
    f_b(i) = f_o(i)        if i_c >= i else f_g - f_o(i)   # 틱 i 아래
    f_a(i) = f_o(i)        if i_c < i  else f_g - f_o(i)   # 틱 i 위
    f_r = f_g - f_b(i_l) - f_a(i_u)                        # 범위 내
    owed = owed + (L × (f_r - checkpoint)) >> 64
"""

from typing import Optional, Sequence, Tuple, NamedTuple

from .fixed_point import Rounding, wrapping_add, wrapping_sub, mul_div, mul_shift_right, checked_add


class FeeGrowthInside(NamedTuple):
    """범위 내 fee growth (Q64.64)"""
    fee_growth_inside_a: int
    fee_growth_inside_b: int


def fee_growth_below(
    tick_idx: int,
    current_tick: int,
    fee_growth_global: int,
    fee_growth_outside: int,
    initialized: bool = True
) -> int:
    """틱 아래에서 발생한 growth (f_b)

    초기화되지 않은 하한 틱은 온체인과 동일하게 전역 growth 전체로 취급합니다.
    """
    if not initialized:
        return fee_growth_global
    if current_tick < tick_idx:
        return wrapping_sub(fee_growth_global, fee_growth_outside)
    return fee_growth_outside


def fee_growth_above(
    tick_idx: int,
    current_tick: int,
    fee_growth_global: int,
    fee_growth_outside: int,
    initialized: bool = True
) -> int:
    """틱 위에서 발생한 growth (f_a)

    초기화되지 않은 상한 틱은 0으로 취급합니다.
    """
    if not initialized:
        return 0
    if current_tick < tick_idx:
        return fee_growth_outside
    return wrapping_sub(fee_growth_global, fee_growth_outside)


def growth_inside(
    current_tick: int,
    tick_lower_idx: int,
    lower_outside: int,
    lower_initialized: bool,
    tick_upper_idx: int,
    upper_outside: int,
    upper_initialized: bool,
    growth_global: int
) -> int:
    """범위 내 growth (f_r = f_g - f_b - f_a, wrapping)

    fee growth와 reward growth 모두 같은 규칙을 따릅니다.
    """
    below = fee_growth_below(tick_lower_idx, current_tick, growth_global, lower_outside, lower_initialized)
    above = fee_growth_above(tick_upper_idx, current_tick, growth_global, upper_outside, upper_initialized)
    return wrapping_sub(wrapping_sub(growth_global, below), above)


def fee_growth_inside(
    current_tick: int,
    tick_lower_index: int,
    tick_lower,
    tick_upper_index: int,
    tick_upper,
    fee_growth_global_a: int,
    fee_growth_global_b: int
) -> FeeGrowthInside:
    """두 토큰의 범위 내 fee growth

    Args:
        current_tick: 현재 틱
        tick_lower_index: 하한 틱
        tick_lower: 하한 Tick 스냅샷
        tick_upper_index: 상한 틱
        tick_upper: 상한 Tick 스냅샷
        fee_growth_global_a: 전역 fee growth token A
        fee_growth_global_b: 전역 fee growth token B

    Returns:
        FeeGrowthInside
    """
    inside_a = growth_inside(
        current_tick,
        tick_lower_index, tick_lower.fee_growth_outside_a, tick_lower.initialized,
        tick_upper_index, tick_upper.fee_growth_outside_a, tick_upper.initialized,
        fee_growth_global_a,
    )
    inside_b = growth_inside(
        current_tick,
        tick_lower_index, tick_lower.fee_growth_outside_b, tick_lower.initialized,
        tick_upper_index, tick_upper.fee_growth_outside_b, tick_upper.initialized,
        fee_growth_global_b,
    )
    return FeeGrowthInside(inside_a, inside_b)


def calculate_owed(liquidity: int, growth_inside_now: int, growth_checkpoint: int, amount_owed: int) -> int:
    """체크포인트 이후 미수령 금액을 더한 총 미수령 금액

    공식: owed + (L × (f_r - checkpoint)) >> 64

    Raises:
        ArithmeticOverflowError: 증가분 또는 합계가 u64를 초과하는 경우
    """
    growth_delta = wrapping_sub(growth_inside_now, growth_checkpoint)
    owed_delta = mul_shift_right(liquidity, growth_delta, 64, Rounding.DOWN, bits=64)
    return checked_add(amount_owed, owed_delta, bits=64)


def reward_growths_inside(
    current_tick: int,
    tick_lower_index: int,
    tick_lower,
    tick_upper_index: int,
    tick_upper,
    reward_growths_global: Sequence[int],
    reward_initialized: Sequence[bool]
) -> Tuple[Optional[int], ...]:
    """리워드 슬롯별 범위 내 growth (미설정 슬롯은 None)"""
    result = []
    for i, growth_global in enumerate(reward_growths_global):
        if not reward_initialized[i]:
            result.append(None)
            continue
        result.append(growth_inside(
            current_tick,
            tick_lower_index, tick_lower.reward_growths_outside[i], tick_lower.initialized,
            tick_upper_index, tick_upper.reward_growths_outside[i], tick_upper.initialized,
            growth_global,
        ))
    return tuple(result)


def next_reward_growth_global(
    growth_global: int,
    emissions_per_second_x64: int,
    liquidity: int,
    elapsed_seconds: int
) -> int:
    """경과 시간만큼 전진시킨 전역 reward growth

    공식: f_g + elapsed × emissions_x64 / L  (유동성이 0이면 그대로)
    """
    if liquidity == 0 or elapsed_seconds <= 0:
        return growth_global
    growth_delta = mul_div(elapsed_seconds, emissions_per_second_x64, liquidity, Rounding.DOWN, bits=256)
    return wrapping_add(growth_global, growth_delta)
