"""
Data layer for Whirlpool Quote Engine

- types: 풀/포지션/틱 배열 스냅샷
- tick_array: 틱 배열 접근자
- distribution: 유동성 분포
"""

from .types import TokenType, RewardInfo, PoolSnapshot, PositionRewardInfo, PositionSnapshot, Tick, TickArray
from .tick_array import TickArraySequence, get_start_tick_index, load_swap_tick_arrays
from .distribution import get_liquidity_distribution
