"""
Whirlpool Quote Engine

집중화된 유동성 AMM(Whirlpool) 풀의 오프체인 견적 엔진.
트랜잭션을 보내지 않고 온체인 프로그램과 비트 단위로 동일한 토큰 수량,
스왑 결과, 수수료/리워드 정산 금액을 계산합니다.
"""

import logging

__version__ = "0.1.0"

from .constants import (
    Q64,
    MIN_TICK_INDEX,
    MAX_TICK_INDEX,
    MIN_SQRT_PRICE,
    MAX_SQRT_PRICE,
    TICK_ARRAY_SIZE,
    FEE_TIERS,
)
from .errors import (
    QuoteError,
    ArithmeticOverflowError,
    ArithmeticUnderflowError,
    DivideByZeroError,
    OutOfRangeError,
    InvalidRangeError,
    StaleTickArrayError,
    TickArrayBudgetExceededError,
)
from .math.percentage import Percentage
from .data.types import (
    TokenType,
    RewardInfo,
    PoolSnapshot,
    PositionRewardInfo,
    PositionSnapshot,
    Tick,
    TickArray,
)
from .data.tick_array import TickArraySequence, get_start_tick_index
from .quotes import (
    get_add_liquidity_quote,
    get_add_liquidity_quote_by_price,
    get_remove_liquidity_quote,
    get_swap_quote,
    get_swap_quote_async,
    get_collect_fees_quote,
    get_collect_rewards_quote,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())
