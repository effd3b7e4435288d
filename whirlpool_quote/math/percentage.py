"""
Percentage - 유리수 비율과 슬리피지 조정

슬리피지 허용치는 float 대신 (분자, 분모) 정수 쌍으로 표현하여
정수 연산만으로 최소/최대 금액을 계산합니다.
"""

from dataclasses import dataclass
from typing import Optional

from ..config import settings
from .fixed_point import Rounding, div_round


@dataclass(frozen=True)
class Percentage:
    """numerator / denominator 비율 (예: 1/1000 = 0.1%)"""
    numerator: int
    denominator: int

    def __post_init__(self):
        if self.denominator <= 0:
            raise ValueError(f"분모는 양수여야 합니다: {self.denominator}")
        if self.numerator < 0 or self.numerator > self.denominator:
            raise ValueError(
                f"비율은 0 ~ 1 사이여야 합니다: {self.numerator}/{self.denominator}"
            )

    @classmethod
    def zero(cls) -> "Percentage":
        return cls(0, 1)

    @classmethod
    def default(cls) -> "Percentage":
        """설정 파일의 기본 슬리피지 (미설정 시 0.1%)"""
        numerator, denominator = settings.SLIPPAGE_TOLERANCE
        return cls(numerator, denominator)

    def __str__(self) -> str:
        return f"{self.numerator}/{self.denominator}"


def resolve_slippage(slippage_tolerance: Optional[Percentage]) -> Percentage:
    """None이면 설정의 기본 슬리피지를 반환"""
    return Percentage.default() if slippage_tolerance is None else slippage_tolerance


def adjust_for_slippage(amount: int, slippage_tolerance: Percentage, round_up: bool) -> int:
    """슬리피지를 반영한 금액

    round_up=True: 최대 지불 금액 ceil(amount * (1 + s))
    round_up=False: 최소 수령 금액 floor(amount * (1 - s))
    """
    numerator = slippage_tolerance.numerator
    denominator = slippage_tolerance.denominator
    if round_up:
        return div_round(amount * (denominator + numerator), denominator, Rounding.UP)
    return div_round(amount * (denominator - numerator), denominator, Rounding.DOWN)
