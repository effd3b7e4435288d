"""
Math layer for Whirlpool Quote Engine

온체인 수준 정밀도의 수학 함수들:
- fixed_point: Q64.64 고정소수점, 폭 검사, 반올림 지정 나눗셈
- tick_math: Tick ↔ Sqrt Price 변환
- liquidity_math: 유동성 ↔ 토큰 수량
- swap_math: 스왑 한 단계 계산
- fee_math: 수수료/리워드 growth 정산
"""

from .fixed_point import Rounding, mul_div, div_round
from .tick_math import (
    get_sqrt_price_at_tick,
    get_tick_at_sqrt_price,
    tick_to_price,
    price_to_tick,
    round_tick_to_spacing,
)
from .liquidity_math import (
    PositionStatus,
    get_position_status,
    get_token_a_from_liquidity,
    get_token_b_from_liquidity,
    get_liquidity_from_token_a,
    get_liquidity_from_token_b,
)
from .swap_math import SwapDirection, AmountSpecified, compute_swap_step
from .fee_math import fee_growth_inside, calculate_owed
