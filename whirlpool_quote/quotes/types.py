"""
견적 결과 타입 정의

모든 금액은 토큰 최소 단위 정수입니다.
"""

from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class AddLiquidityQuote:
    """유동성 추가 견적

    - liquidity: 슬리피지를 반영해 보장되는 유동성
    - max_token_a/b: 지불할 수 있는 최대 토큰 수량 (올림)
    - est_token_a/b: 슬리피지 없는 예상 수량
    """
    max_token_a: int
    max_token_b: int
    liquidity: int
    est_token_a: int = 0
    est_token_b: int = 0

    @classmethod
    def zero(cls) -> "AddLiquidityQuote":
        return cls(max_token_a=0, max_token_b=0, liquidity=0)


@dataclass(frozen=True)
class RemoveLiquidityQuote:
    """유동성 제거 견적

    - min_token_a/b: 슬리피지를 반영해 최소로 받을 수량 (내림)
    - est_token_a/b: 슬리피지 없는 예상 수량
    """
    min_token_a: int
    min_token_b: int
    liquidity: int
    est_token_a: int = 0
    est_token_b: int = 0


@dataclass(frozen=True)
class SwapQuote:
    """스왑 견적

    - amount_in / amount_out: 입력(수수료 포함) / 출력 토큰 수량
    - amount_a / amount_b: 같은 금액을 토큰 A/B 기준으로 재배치
    - other_amount_threshold: 지정하지 않은 쪽의 슬리피지 한도
      (입력 지정이면 최소 출력, 출력 지정이면 최대 입력)
    - amount_remaining: 채워지지 않은 지정 금액 (partial fill)
    """
    amount_in: int
    amount_out: int
    sqrt_price_limit: int
    other_amount_threshold: int
    a_to_b: bool
    amount_specified_is_input: bool
    amount_a: int = 0
    amount_b: int = 0
    end_sqrt_price: int = 0
    end_tick_index: int = 0
    fee_amount: int = 0
    protocol_fee_amount: int = 0
    amount_remaining: int = 0
    tick_arrays_crossed: int = 0

    @property
    def is_partial_fill(self) -> bool:
        return self.amount_remaining > 0


@dataclass(frozen=True)
class CollectFeesQuote:
    """수수료 수령 견적"""
    fee_owed_a: int
    fee_owed_b: int


@dataclass(frozen=True)
class CollectRewardsQuote:
    """리워드 수령 견적 (미설정 슬롯은 None)"""
    reward_owed_a: Optional[int]
    reward_owed_b: Optional[int]
    reward_owed_c: Optional[int]

    @property
    def rewards_owed(self) -> Tuple[Optional[int], Optional[int], Optional[int]]:
        return self.reward_owed_a, self.reward_owed_b, self.reward_owed_c
