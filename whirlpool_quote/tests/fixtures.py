"""
테스트용 스냅샷 생성 헬퍼
"""

from typing import Dict, Iterable, Optional

from ..constants import TICK_ARRAY_SIZE
from ..data.tick_array import TickArraySequence
from ..data.types import PoolSnapshot, RewardInfo, Tick, TickArray
from ..math.tick_math import get_sqrt_price_at_tick


def make_pool(
    tick_current_index: int = 0,
    sqrt_price: Optional[int] = None,
    liquidity: int = 10 ** 12,
    tick_spacing: int = 64,
    fee_rate: int = 3000,
    **kwargs
) -> PoolSnapshot:
    """현재 틱의 sqrt price로 풀 스냅샷 생성"""
    if sqrt_price is None:
        sqrt_price = get_sqrt_price_at_tick(tick_current_index)
    return PoolSnapshot(
        sqrt_price=sqrt_price,
        liquidity=liquidity,
        tick_current_index=tick_current_index,
        tick_spacing=tick_spacing,
        fee_rate=fee_rate,
        token_mint_a=kwargs.pop("token_mint_a", "MintA"),
        token_mint_b=kwargs.pop("token_mint_b", "MintB"),
        **kwargs
    )


def make_tick_array(start_tick_index: int, tick_spacing: int, ticks: Optional[Dict[int, Tick]] = None) -> TickArray:
    """{틱 인덱스: Tick}으로 틱 배열 생성 (나머지는 미초기화)"""
    ticks = ticks or {}
    return TickArray(
        start_tick_index=start_tick_index,
        ticks=tuple(
            ticks.get(start_tick_index + i * tick_spacing, Tick())
            for i in range(TICK_ARRAY_SIZE)
        ),
    )


def make_sequence(
    starts: Iterable[int],
    tick_spacing: int,
    ticks: Optional[Dict[int, Tick]] = None
) -> TickArraySequence:
    """시작 틱 목록과 초기화 틱으로 접근자 생성"""
    ticks = ticks or {}
    arrays = []
    for start in starts:
        end = start + TICK_ARRAY_SIZE * tick_spacing
        arrays.append(make_tick_array(
            start, tick_spacing, {k: v for k, v in ticks.items() if start <= k < end}
        ))
    return TickArraySequence(arrays, tick_spacing)


def initialized_tick(liquidity_net: int, **kwargs) -> Tick:
    return Tick(
        initialized=True,
        liquidity_net=liquidity_net,
        liquidity_gross=abs(liquidity_net),
        **kwargs
    )


def reward(mint: Optional[str], growth_global_x64: int = 0, emissions_per_second_x64: int = 0) -> RewardInfo:
    return RewardInfo(
        mint=mint,
        growth_global_x64=growth_global_x64,
        emissions_per_second_x64=emissions_per_second_x64,
    )
