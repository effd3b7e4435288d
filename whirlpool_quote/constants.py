"""
Whirlpool 상수 정의

온체인 프로그램과 동일한 정밀도를 위한 상수들:
- Q64: sqrt price / fee growth 인코딩에 사용 (2^64, Q64.64)
- 틱 범위 및 sqrt price 범위
- TICK_ARRAY_SIZE: 틱 배열 하나에 들어가는 틱 개수
- FEE_TIERS: 틱 간격별 기본 수수료율
"""

from typing import Dict

# Fixed-point 인코딩 상수
Q64: int = 2 ** 64
Q128: int = 2 ** 128

# 정수 폭 (온체인 u64 / u128 / u256 / i128)
U64_MAX: int = 2 ** 64 - 1
U128_MAX: int = 2 ** 128 - 1
U256_MAX: int = 2 ** 256 - 1
I128_MIN: int = -(2 ** 127)
I128_MAX: int = 2 ** 127 - 1

# 틱 범위 상수
MIN_TICK_INDEX: int = -443636
MAX_TICK_INDEX: int = 443636

# 틱 범위 경계에서의 sqrt price (Q64.64)
MIN_SQRT_PRICE: int = 4295048016
MAX_SQRT_PRICE: int = 79226673515401279992447579061

# 틱 배열
TICK_ARRAY_SIZE: int = 88
NUM_REWARDS: int = 3

# 수수료율 분모
# fee_rate: 1/100 bps 단위 (3000 = 0.30%)
# protocol_fee_rate: 수수료 대비 bps 단위 (300 = 수수료의 3%)
FEE_RATE_DENOMINATOR: int = 1_000_000
PROTOCOL_FEE_RATE_DENOMINATOR: int = 10_000

# 스왑 한 번에 허용되는 틱 배열 교차 횟수 (3개 배열)
MAX_TICK_ARRAY_CROSSINGS: int = 2

# 기본 슬리피지 (0.1%)
DEFAULT_SLIPPAGE_NUMERATOR: int = 1
DEFAULT_SLIPPAGE_DENOMINATOR: int = 1000

# 틱 간격별 기본 수수료율
FEE_TIERS: Dict[int, int] = {
    1: 100,      # 0.01%
    8: 500,      # 0.05%
    64: 3000,    # 0.30%
    128: 10000,  # 1.00%
}

# 미설정 리워드 mint (system program 주소)
DEFAULT_PUBKEY: str = "11111111111111111111111111111111"
