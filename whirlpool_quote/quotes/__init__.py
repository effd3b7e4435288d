"""
Quote layer for Whirlpool Quote Engine

견적 함수들:
- add_liquidity / remove_liquidity: 유동성 추가/제거 견적
- swap_quoter: 틱 교차 스왑 시뮬레이션
- collect_fees / collect_rewards: 수수료/리워드 수령 견적
"""

from .types import (
    AddLiquidityQuote,
    RemoveLiquidityQuote,
    SwapQuote,
    CollectFeesQuote,
    CollectRewardsQuote,
)
from .add_liquidity import get_add_liquidity_quote, get_add_liquidity_quote_by_price
from .remove_liquidity import get_remove_liquidity_quote
from .swap_quoter import (
    SwapSimulator,
    SwapSimulatorConfig,
    get_swap_quote,
    get_swap_quote_async,
)
from .collect_fees import get_collect_fees_quote
from .collect_rewards import get_collect_rewards_quote
