"""
Tick Math - Tick ↔ Sqrt Price 변환

Whirlpool 프로그램의 틱 수학 함수들. 온체인 프로그램과 동일한 정밀도로 구현.
sqrt price는 Q64.64 형식이며 틱 범위는 ±443636 입니다.

References:
- Whirlpool program: math/tick_math.rs
- Uniswap V3 Core: contracts/libraries/TickMath.sol (Q128 매직 넘버 출처)

핵심 공식:
    price = 1.0001^tick
    sqrtPriceX64 = sqrt(price) * 2^64
    tick = floor(log_sqrt(1.0001)(sqrtPriceX64 / 2^64))
"""

import math

from ..constants import (
    Q64,
    U128_MAX,
    U256_MAX,
    MIN_TICK_INDEX,
    MAX_TICK_INDEX,
    MIN_SQRT_PRICE,
    MAX_SQRT_PRICE,
    FEE_TIERS,
)
from ..errors import OutOfRangeError


# sqrt(1.0001)^-(2^i) (Q128.128), i = 1..18
_TICK_RATIO_CONSTANTS = (
    (0x2, 0xfff97272373d413259a46990580e213a),
    (0x4, 0xfff2e50f5f656932ef12357cf3c7fdcc),
    (0x8, 0xffe5caca7e10e4e61c3624eaa0941cd0),
    (0x10, 0xffcb9843d60f6159c9db58835c926644),
    (0x20, 0xff973b41fa98c081472e6896dfb254c0),
    (0x40, 0xff2ea16466c96a3843ec78b326b52861),
    (0x80, 0xfe5dee046a99a2a811c461f1969c3053),
    (0x100, 0xfcbe86c7900a88aedcffc83b479aa3a4),
    (0x200, 0xf987a7253ac413176f2b074cf7815e54),
    (0x400, 0xf3392b0822b70005940c7a398e4b70f3),
    (0x800, 0xe7159475a2c29b7443b29c7fa6e889d9),
    (0x1000, 0xd097f3bdfd2022b8845ad8f792aa5825),
    (0x2000, 0xa9f746462d870fdf8a65dc1f90e061e5),
    (0x4000, 0x70d869a156d2a1b890bb3df62baf32f7),
    (0x8000, 0x31be135f97d08fd981231505542fcfa6),
    (0x10000, 0x9aa508b5b7a84e1c677de54f3e99bc9),
    (0x20000, 0x5d6af8dedb81196699c329225ee604),
    (0x40000, 0x2216e584f5fa1ea926041bedfe98),
)

# log_sqrt(1.0001)(2) (Q64)
LOG_B_2_X64: int = 255738958999603826347141

# 2^-14 정밀도의 log2 근사로 생기는 오차 범위 (Q128)
LOG_B_P_ERR_MARGIN_LOWER_X64: int = 3402823669209384634633746074317682114
LOG_B_P_ERR_MARGIN_UPPER_X64: int = 291339293782892971344202069882609108985


def get_sqrt_price_at_tick(tick: int) -> int:
    """틱에서 sqrtPriceX64 계산

    |tick|의 각 비트에 대응하는 sqrt(1.0001)^-(2^i) 상수를 Q128.128 누산기에
    곱해 나갑니다. 양수 틱은 마지막에 역수를 취합니다.

    Args:
        tick: 틱 인덱스 (-443636 ~ 443636)

    Returns:
        sqrtPriceX64 (Q64.64 형식)

    Raises:
        OutOfRangeError: 틱이 유효 범위를 벗어난 경우
    """
    if tick < MIN_TICK_INDEX or tick > MAX_TICK_INDEX:
        raise OutOfRangeError(
            f"틱이 유효 범위를 벗어났습니다: {tick} (범위: {MIN_TICK_INDEX} ~ {MAX_TICK_INDEX})"
        )

    abs_tick = abs(tick)

    ratio = 0xfffcb933bd6fad37aa2d162d1a594001 if abs_tick & 0x1 \
        else 0x100000000000000000000000000000000

    for mask, constant in _TICK_RATIO_CONSTANTS:
        if abs_tick & mask:
            ratio = (ratio * constant) >> 128

    if tick > 0:
        ratio = U256_MAX // ratio

    # Q128.128 -> Q64.64 (내림)
    return ratio >> 64


def get_tick_at_sqrt_price(sqrt_price: int) -> int:
    """sqrtPriceX64에서 틱 계산 (내림)

    1.0 미만의 가격은 역수를 취해 양의 로그로 계산한 뒤 부호를 뒤집습니다.
    log2의 정수부는 최상위 비트에서, 소수부는 14번의 제곱으로 구하고
    오차 범위로 틱 후보 두 개를 얻은 뒤 get_sqrt_price_at_tick으로 확정합니다.

    Args:
        sqrt_price: sqrtPriceX64 (Q64.64 형식)

    Returns:
        get_sqrt_price_at_tick(tick) <= sqrt_price를 만족하는 가장 큰 틱

    Raises:
        OutOfRangeError: sqrt price가 유효 범위를 벗어난 경우
    """
    if sqrt_price < MIN_SQRT_PRICE or sqrt_price > MAX_SQRT_PRICE:
        raise OutOfRangeError(
            f"sqrt price가 유효 범위를 벗어났습니다: {sqrt_price} "
            f"(범위: {MIN_SQRT_PRICE} ~ {MAX_SQRT_PRICE})"
        )

    inverted = sqrt_price < Q64
    ratio = U128_MAX // sqrt_price if inverted else sqrt_price

    # Q64.64 -> Q128.128
    ratio_x128 = ratio << 64
    msb = ratio_x128.bit_length() - 1

    log2_x64 = (msb - 128) << 64

    # 소수부: r을 [1, 2) 구간 (Q1.127)으로 정규화한 뒤 제곱 반복
    r = ratio_x128 >> (msb - 127)
    bit = 1 << 63
    for _ in range(14):
        r = (r * r) >> 127
        if r >> 128:
            log2_x64 |= bit
            r >>= 1
        bit >>= 1

    log_b_p_x128 = log2_x64 * LOG_B_2_X64

    if inverted:
        log_b_p_x128 = -log_b_p_x128
        margin_low = LOG_B_P_ERR_MARGIN_UPPER_X64
        margin_high = LOG_B_P_ERR_MARGIN_LOWER_X64
    else:
        margin_low = LOG_B_P_ERR_MARGIN_LOWER_X64
        margin_high = LOG_B_P_ERR_MARGIN_UPPER_X64

    tick_low = (log_b_p_x128 - margin_low) >> 128
    tick_high = (log_b_p_x128 + margin_high) >> 128

    if tick_low == tick_high:
        return tick_low

    if get_sqrt_price_at_tick(tick_high) <= sqrt_price:
        return tick_high
    return tick_low


def sqrt_price_to_price(sqrt_price: int, decimals_a: int = 9, decimals_b: int = 6) -> float:
    """sqrtPriceX64를 human-readable 가격으로 변환

    price = (sqrtPriceX64 / 2^64)^2 × 10^(decimals_a - decimals_b)

    Args:
        sqrt_price: sqrtPriceX64 값
        decimals_a: token A 소수점 자릿수 (예: SOL = 9)
        decimals_b: token B 소수점 자릿수 (예: USDC = 6)

    Returns:
        가격 (token B / token A)
    """
    return (sqrt_price / Q64) ** 2 * (10 ** (decimals_a - decimals_b))


def price_to_sqrt_price(price: float, decimals_a: int = 9, decimals_b: int = 6) -> int:
    """Human-readable 가격을 sqrtPriceX64로 변환

    Raises:
        OutOfRangeError: 가격이 양수가 아닌 경우
    """
    if price <= 0:
        raise OutOfRangeError("가격은 양수여야 합니다")

    ratio = price * (10 ** (decimals_b - decimals_a))
    return int(math.sqrt(ratio) * Q64)


def tick_to_price(tick: int, decimals_a: int = 9, decimals_b: int = 6) -> float:
    """틱을 human-readable 가격으로 변환

    Example:
        >>> round(tick_to_price(0, 6, 6), 6)
        1.0
    """
    return sqrt_price_to_price(get_sqrt_price_at_tick(tick), decimals_a, decimals_b)


def price_to_tick(price: float, decimals_a: int = 9, decimals_b: int = 6) -> int:
    """Human-readable 가격을 틱으로 변환 (내림)

    sqrt price를 프로토콜 범위로 제한한 뒤 get_tick_at_sqrt_price를 사용합니다.
    """
    sqrt_price = price_to_sqrt_price(price, decimals_a, decimals_b)
    sqrt_price = min(max(sqrt_price, MIN_SQRT_PRICE), MAX_SQRT_PRICE)
    return get_tick_at_sqrt_price(sqrt_price)


def round_tick_to_spacing(tick: int, tick_spacing: int) -> int:
    """틱을 가장 가까운 유효 틱(tick_spacing의 배수)으로 반올림

    결과는 틱 범위 안의 유효 틱으로 제한됩니다.

    Args:
        tick: 반올림할 틱
        tick_spacing: 틱 간격 (예: 64 for 0.3% fee)

    Returns:
        반올림된 틱
    """
    lower = (tick // tick_spacing) * tick_spacing
    upper = lower + tick_spacing

    # 같은 거리일 때는 upper
    rounded = lower if tick - lower < upper - tick else upper

    min_valid = -(-MIN_TICK_INDEX // tick_spacing) * tick_spacing
    max_valid = (MAX_TICK_INDEX // tick_spacing) * tick_spacing
    return min(max(rounded, min_valid), max_valid)


def get_fee_rate_for_tick_spacing(tick_spacing: int) -> int:
    """틱 간격에 해당하는 기본 수수료율 반환

    Args:
        tick_spacing: 틱 간격 (1, 8, 64, 128)

    Returns:
        수수료율 (1/100 bps 단위)
    """
    if tick_spacing not in FEE_TIERS:
        raise ValueError(f"지원하지 않는 틱 간격: {tick_spacing}")
    return FEE_TIERS[tick_spacing]
