"""
Fixed Point - Q64.64 고정소수점 및 고정 폭 정수 연산

온체인 프로그램은 u64 / u128 / u256 정수와 Q64.64 고정소수점을 사용합니다.
Python 정수는 폭 제한이 없으므로, 모든 연산 결과를 명시적으로 검사하여
온체인과 동일하게 overflow / underflow 시 예외를 발생시킵니다.

핵심 규칙:
    Q64.64 값 = 실수값 * 2^64 (u128에 저장)
    모든 나눗셈은 반올림 방향(Rounding.UP / Rounding.DOWN)을 명시
    fee/reward growth 누적값만 2^128 modulo로 wrapping
"""

from enum import Enum

from ..constants import Q64, U64_MAX, U128_MAX, U256_MAX, I128_MIN, I128_MAX
from ..errors import ArithmeticOverflowError, ArithmeticUnderflowError, DivideByZeroError


class Rounding(Enum):
    """나눗셈 반올림 방향"""
    UP = "up"
    DOWN = "down"


_MAX_BY_BITS = {64: U64_MAX, 128: U128_MAX, 256: U256_MAX}


def _check_unsigned(value: int, bits: int, name: str) -> int:
    if value < 0:
        raise ArithmeticUnderflowError(f"{name}가 음수입니다: {value}")
    if value > _MAX_BY_BITS[bits]:
        raise ArithmeticOverflowError(f"{name}가 u{bits} 범위를 초과했습니다: {value}")
    return value


def check_u64(value: int, name: str = "value") -> int:
    return _check_unsigned(value, 64, name)


def check_u128(value: int, name: str = "value") -> int:
    return _check_unsigned(value, 128, name)


def check_u256(value: int, name: str = "value") -> int:
    return _check_unsigned(value, 256, name)


def check_i128(value: int, name: str = "value") -> int:
    if value < I128_MIN or value > I128_MAX:
        raise ArithmeticOverflowError(f"{name}가 i128 범위를 초과했습니다: {value}")
    return value


def checked_add(a: int, b: int, bits: int = 128) -> int:
    """a + b (overflow 시 예외)"""
    return _check_unsigned(a + b, bits, "덧셈 결과")


def checked_sub(a: int, b: int, bits: int = 128) -> int:
    """a - b (underflow 시 예외)"""
    return _check_unsigned(a - b, bits, "뺄셈 결과")


def checked_mul(a: int, b: int, bits: int = 128) -> int:
    """a * b (overflow 시 예외)"""
    return _check_unsigned(a * b, bits, "곱셈 결과")


def wrapping_add(a: int, b: int, bits: int = 128) -> int:
    """a + b mod 2^bits (growth 누적값 전용)"""
    return (a + b) & _MAX_BY_BITS[bits]


def wrapping_sub(a: int, b: int, bits: int = 128) -> int:
    """a - b mod 2^bits (growth 누적값 전용)

    fee growth 누적값은 온체인에서 wrapping 연산으로 정의되므로
    global이 outside보다 작아도 올바른 차이를 얻습니다.
    """
    return (a - b) & _MAX_BY_BITS[bits]


def div_round(numerator: int, denominator: int, rounding: Rounding) -> int:
    """반올림 방향을 지정한 정수 나눗셈

    Args:
        numerator: 분자 (0 이상)
        denominator: 분모
        rounding: Rounding.UP이면 올림, Rounding.DOWN이면 내림

    Returns:
        몫

    Raises:
        DivideByZeroError: 분모가 0인 경우
    """
    if denominator == 0:
        raise DivideByZeroError("0으로 나눌 수 없습니다")
    quotient, remainder = divmod(numerator, denominator)
    if rounding is Rounding.UP and remainder != 0:
        quotient += 1
    return quotient


def mul_div(a: int, b: int, denominator: int, rounding: Rounding, bits: int = 128) -> int:
    """(a * b) / denominator, 결과를 bits 폭으로 검사

    중간 곱은 u256보다 넓어도 되지만 (Python 정수), 결과는 bits 폭 안에 있어야 합니다.
    """
    return _check_unsigned(div_round(a * b, denominator, rounding), bits, "mul_div 결과")


def mul_shift_right(a: int, b: int, shift: int, rounding: Rounding, bits: int = 64) -> int:
    """(a * b) >> shift, 올림 시 버려진 비트가 있으면 +1"""
    product = a * b
    result = product >> shift
    if rounding is Rounding.UP and product & ((1 << shift) - 1):
        result += 1
    return _check_unsigned(result, bits, "mul_shift_right 결과")


def u64_to_q64(value: int) -> int:
    """u64 정수를 Q64.64로 변환"""
    check_u64(value, "u64 값")
    return value << 64


def q64_to_u64(value: int, rounding: Rounding = Rounding.DOWN) -> int:
    """Q64.64를 u64 정수로 변환 (floor 또는 ceil)

    Raises:
        ArithmeticOverflowError: 정수부가 u64를 초과하는 경우
    """
    check_u128(value, "Q64.64 값")
    result = value >> 64
    if rounding is Rounding.UP and value & (Q64 - 1):
        result += 1
    return check_u64(result, "u64 변환 결과")


def q64_to_u256(value: int) -> int:
    """Q64.64(u128)를 u256 연산용 값으로 확장"""
    return check_u128(value, "Q64.64 값")


def u256_to_q64(value: int) -> int:
    """u256 연산 결과를 Q64.64(u128)로 축소"""
    check_u256(value, "u256 값")
    return check_u128(value, "Q64.64 변환 결과")


def q64_to_float(value: int) -> float:
    """Q64.64를 float으로 변환 (표시용)"""
    return value / Q64
