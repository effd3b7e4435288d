"""
Swap Math - 스왑 한 단계(step) 계산

현재 가격에서 목표 가격(다음 초기화 틱 또는 가격 한도)까지 일정한 유동성으로
스왑했을 때의 입력/출력/수수료를 계산합니다.

References:
- Whirlpool program: math/swap_math.rs, math/token_math.rs
- Uniswap V3 Core: contracts/libraries/SwapMath.sol, SqrtPriceMath.sol

핵심 공식:
    A 입력(가격 하락): √P' = L × √P × 2^64 / (L × 2^64 + Δa × √P)   (올림)
    B 입력(가격 상승): √P' = √P + Δb × 2^64 / L                    (내림)

방향 × 지정 금액 조합:
    a_to_b == is_input 이면 지정 금액은 token A (fixed), 나머지는 token B (unfixed)
    그 외에는 지정 금액이 token B, 나머지가 token A
"""

from enum import Enum
from typing import NamedTuple

from ..constants import FEE_RATE_DENOMINATOR, MIN_SQRT_PRICE, MAX_SQRT_PRICE
from ..errors import DivideByZeroError, OutOfRangeError
from .fixed_point import Rounding, div_round, check_u64


class SwapDirection(Enum):
    """스왑 방향"""
    A_TO_B = "a_to_b"  # token A 입력, 가격 하락
    B_TO_A = "b_to_a"  # token B 입력, 가격 상승


class AmountSpecified(Enum):
    """지정 금액이 입력인지 출력인지"""
    INPUT = "input"
    OUTPUT = "output"


class SwapStep(NamedTuple):
    """스왑 한 단계 결과"""
    amount_in: int  # 입력 토큰 (수수료 제외)
    amount_out: int  # 출력 토큰
    next_sqrt_price: int  # 단계 종료 후 sqrtPriceX64
    fee_amount: int  # 입력 토큰으로 지불한 수수료


def get_amount_delta_a(sqrt_price_0: int, sqrt_price_1: int, liquidity: int, round_up: bool) -> int:
    """두 가격 사이의 token A 변화량

    u64 검사를 하지 않으므로 목표 가격까지의 최대 변화량처럼
    u64를 넘을 수 있는 비교용 값에도 사용할 수 있습니다.
    """
    sqrt_lower, sqrt_upper = sorted((sqrt_price_0, sqrt_price_1))
    numerator = (liquidity * (sqrt_upper - sqrt_lower)) << 64
    denominator = sqrt_upper * sqrt_lower
    return div_round(numerator, denominator, Rounding.UP if round_up else Rounding.DOWN)


def get_amount_delta_b(sqrt_price_0: int, sqrt_price_1: int, liquidity: int, round_up: bool) -> int:
    """두 가격 사이의 token B 변화량 (u64 검사 없음)"""
    sqrt_lower, sqrt_upper = sorted((sqrt_price_0, sqrt_price_1))
    return div_round(liquidity * (sqrt_upper - sqrt_lower), 1 << 64, Rounding.UP if round_up else Rounding.DOWN)


def _check_sqrt_price_bounds(sqrt_price: int) -> int:
    if sqrt_price < MIN_SQRT_PRICE or sqrt_price > MAX_SQRT_PRICE:
        raise OutOfRangeError(f"스왑 결과 sqrt price가 범위를 벗어납니다: {sqrt_price}")
    return sqrt_price


def get_next_sqrt_price_from_a_round_up(
    sqrt_price: int,
    liquidity: int,
    amount: int,
    amount_specified_is_input: bool
) -> int:
    """token A 수량만큼 이동한 sqrt price (올림)

    입력이면 가격이 내려가고, 출력이면 가격이 올라갑니다.

    Raises:
        DivideByZeroError: 유동성이 0인 경우
        OutOfRangeError: 결과가 sqrt price 범위를 벗어나는 경우
    """
    if amount == 0:
        return sqrt_price
    if liquidity == 0:
        raise DivideByZeroError("유동성이 0인 구간에서 가격을 계산할 수 없습니다")

    product = amount * sqrt_price
    liquidity_x64 = liquidity << 64
    numerator = liquidity_x64 * sqrt_price

    if amount_specified_is_input:
        denominator = liquidity_x64 + product
    else:
        denominator = liquidity_x64 - product
        if denominator <= 0:
            raise OutOfRangeError("출력 수량이 가격 범위 안의 token A 유동성을 초과합니다")

    return _check_sqrt_price_bounds(div_round(numerator, denominator, Rounding.UP))


def get_next_sqrt_price_from_b_round_down(
    sqrt_price: int,
    liquidity: int,
    amount: int,
    amount_specified_is_input: bool
) -> int:
    """token B 수량만큼 이동한 sqrt price (내림)

    입력이면 가격이 올라가고, 출력이면 가격이 내려갑니다.
    """
    if liquidity == 0:
        raise DivideByZeroError("유동성이 0인 구간에서 가격을 계산할 수 없습니다")

    amount_x64 = amount << 64
    if amount_specified_is_input:
        return _check_sqrt_price_bounds(sqrt_price + div_round(amount_x64, liquidity, Rounding.DOWN))

    delta = div_round(amount_x64, liquidity, Rounding.UP)
    if delta >= sqrt_price:
        raise OutOfRangeError("출력 수량이 가격 범위 안의 token B 유동성을 초과합니다")
    return _check_sqrt_price_bounds(sqrt_price - delta)


def get_next_sqrt_price(
    sqrt_price: int,
    liquidity: int,
    amount: int,
    amount_specified_is_input: bool,
    a_to_b: bool
) -> int:
    """지정 금액 토큰에 맞는 가격 계산 함수 선택"""
    if amount_specified_is_input == a_to_b:
        return get_next_sqrt_price_from_a_round_up(sqrt_price, liquidity, amount, amount_specified_is_input)
    return get_next_sqrt_price_from_b_round_down(sqrt_price, liquidity, amount, amount_specified_is_input)


def get_amount_fixed_delta(
    sqrt_price_current: int,
    sqrt_price_target: int,
    liquidity: int,
    amount_specified_is_input: bool,
    a_to_b: bool
) -> int:
    """지정 금액 쪽 토큰의 변화량 (입력이면 올림, 출력이면 내림)"""
    if a_to_b == amount_specified_is_input:
        return get_amount_delta_a(sqrt_price_current, sqrt_price_target, liquidity, amount_specified_is_input)
    return get_amount_delta_b(sqrt_price_current, sqrt_price_target, liquidity, amount_specified_is_input)


def get_amount_unfixed_delta(
    sqrt_price_current: int,
    sqrt_price_target: int,
    liquidity: int,
    amount_specified_is_input: bool,
    a_to_b: bool
) -> int:
    """반대쪽 토큰의 변화량 (fixed delta와 반대 방향 반올림)"""
    if a_to_b == amount_specified_is_input:
        return get_amount_delta_b(sqrt_price_current, sqrt_price_target, liquidity, not amount_specified_is_input)
    return get_amount_delta_a(sqrt_price_current, sqrt_price_target, liquidity, not amount_specified_is_input)


def compute_swap_step(
    amount_remaining: int,
    fee_rate: int,
    liquidity: int,
    sqrt_price_current: int,
    sqrt_price_target: int,
    amount_specified_is_input: bool,
    a_to_b: bool
) -> SwapStep:
    """스왑 한 단계 계산

    1. 목표 가격까지의 fixed delta 계산
    2. 입력 지정이면 수수료를 뺀 가용 금액으로 목표 도달 여부 판정
    3. 도달하지 못하면 가용 금액으로 중간 가격 계산
    4. 반대쪽 토큰 변화량과 수수료 계산

    Args:
        amount_remaining: 남은 지정 금액
        fee_rate: 수수료율 (1/100 bps, 분모 1,000,000)
        liquidity: 현재 구간 유동성
        sqrt_price_current: 현재 sqrtPriceX64
        sqrt_price_target: 목표 sqrtPriceX64
        amount_specified_is_input: 지정 금액이 입력이면 True
        a_to_b: token A → token B 방향이면 True

    Returns:
        SwapStep (amount_in, amount_out, next_sqrt_price, fee_amount)

    Raises:
        ArithmeticOverflowError: 단계 결과 금액이 u64를 초과하는 경우
    """
    amount_fixed_delta = get_amount_fixed_delta(
        sqrt_price_current, sqrt_price_target, liquidity, amount_specified_is_input, a_to_b
    )

    if amount_specified_is_input:
        amount_calc = div_round(
            amount_remaining * (FEE_RATE_DENOMINATOR - fee_rate), FEE_RATE_DENOMINATOR, Rounding.DOWN
        )
    else:
        amount_calc = amount_remaining

    if amount_calc >= amount_fixed_delta:
        next_sqrt_price = sqrt_price_target
    else:
        next_sqrt_price = get_next_sqrt_price(
            sqrt_price_current, liquidity, amount_calc, amount_specified_is_input, a_to_b
        )

    is_max_swap = next_sqrt_price == sqrt_price_target

    amount_unfixed_delta = get_amount_unfixed_delta(
        sqrt_price_current, next_sqrt_price, liquidity, amount_specified_is_input, a_to_b
    )

    # 목표에 도달하지 못한 경우 실제 이동분만큼 fixed delta 재계산
    if not is_max_swap:
        amount_fixed_delta = get_amount_fixed_delta(
            sqrt_price_current, next_sqrt_price, liquidity, amount_specified_is_input, a_to_b
        )

    if amount_specified_is_input:
        amount_in, amount_out = amount_fixed_delta, amount_unfixed_delta
    else:
        amount_in, amount_out = amount_unfixed_delta, amount_fixed_delta
        amount_out = min(amount_out, amount_remaining)

    amount_in = check_u64(amount_in, "스왑 입력 수량")
    amount_out = check_u64(amount_out, "스왑 출력 수량")

    if amount_specified_is_input and not is_max_swap:
        fee_amount = amount_remaining - amount_in
    else:
        fee_amount = div_round(amount_in * fee_rate, FEE_RATE_DENOMINATOR - fee_rate, Rounding.UP)

    return SwapStep(
        amount_in=amount_in,
        amount_out=amount_out,
        next_sqrt_price=next_sqrt_price,
        fee_amount=fee_amount,
    )
