"""
틱 배열 접근 계층

스왑 시뮬레이터는 틱 배열을 직접 들고 있지 않고 접근자(accessor)를 통해
조회합니다. 계정 조회는 외부 협력자의 책임이며, 이 모듈은 다음을 제공합니다.

- TickArrayAccessor: 동기 접근자 프로토콜
- TickArraySequence: 이미 받아둔 틱 배열로 만든 메모리 접근자
- AsyncTickArrayFetcher / load_swap_tick_arrays: 비동기 조회 후 검증

초기화 틱 탐색은 틱 하나가 속한 배열 안에서만 이루어지며,
배열 안에 더 이상 후보가 없으면 None을 반환합니다.
"""

import asyncio
import logging
from typing import Dict, Iterable, List, Optional, Protocol

from ..constants import TICK_ARRAY_SIZE, MIN_TICK_INDEX, MAX_TICK_INDEX
from ..errors import StaleTickArrayError
from .types import Tick, TickArray

logger = logging.getLogger(__name__)


def get_start_tick_index(tick_index: int, tick_spacing: int, offset: int = 0) -> int:
    """틱이 속한 틱 배열의 시작 틱

    공식: floor(tick / (spacing × 88)) × spacing × 88 (+ offset 배열)

    Args:
        tick_index: 틱 인덱스
        tick_spacing: 틱 간격
        offset: 이동할 배열 수 (음수면 가격 하락 방향)

    Returns:
        시작 틱 인덱스
    """
    ticks_in_array = TICK_ARRAY_SIZE * tick_spacing
    return (tick_index // ticks_in_array + offset) * ticks_in_array


def is_min_tick_array(start_tick_index: int) -> bool:
    return start_tick_index <= MIN_TICK_INDEX


def is_max_tick_array(start_tick_index: int, tick_spacing: int) -> bool:
    return start_tick_index + TICK_ARRAY_SIZE * tick_spacing > MAX_TICK_INDEX


def next_search_anchor(tick_index: int, tick_spacing: int) -> int:
    """tick_index보다 큰 첫 유효 틱 (가격 상승 방향 탐색 시작점)"""
    return (tick_index // tick_spacing + 1) * tick_spacing


def prev_search_anchor(tick_index: int, tick_spacing: int) -> int:
    """tick_index 이하의 첫 유효 틱 (가격 하락 방향 탐색 시작점)"""
    return (tick_index // tick_spacing) * tick_spacing


class TickArrayAccessor(Protocol):
    """스왑 시뮬레이터가 사용하는 틱 배열 접근자"""

    tick_spacing: int

    def fetch_tick_array(self, tick_index: int) -> Optional[TickArray]:
        """tick_index를 포함하는 틱 배열 (없으면 None)"""
        ...

    def get_next_initialized_tick_index(self, tick_index: int) -> Optional[int]:
        """tick_index보다 큰 초기화 틱 (해당 배열 안에서 없으면 None)"""
        ...

    def get_prev_initialized_tick_index(self, tick_index: int) -> Optional[int]:
        """tick_index 이하의 초기화 틱 (해당 배열 안에서 없으면 None)"""
        ...


class TickArraySequence:
    """메모리에 있는 틱 배열 목록으로 만든 접근자

    Example:
        >>> accessor = TickArraySequence([TickArray.empty(0)], tick_spacing=1)
        >>> accessor.get_next_initialized_tick_index(0) is None
        True
    """

    def __init__(self, tick_arrays: Iterable[TickArray], tick_spacing: int):
        self.tick_spacing = tick_spacing
        self._arrays: Dict[int, TickArray] = {}
        for tick_array in tick_arrays:
            if get_start_tick_index(tick_array.start_tick_index, tick_spacing) != tick_array.start_tick_index:
                raise StaleTickArrayError(
                    f"틱 간격 {tick_spacing}에 맞지 않는 시작 틱: {tick_array.start_tick_index}"
                )
            self._arrays[tick_array.start_tick_index] = tick_array

    def __len__(self) -> int:
        return len(self._arrays)

    @property
    def tick_arrays(self) -> List[TickArray]:
        """시작 틱 오름차순 배열 목록"""
        return [self._arrays[start] for start in sorted(self._arrays)]

    def fetch_tick_array(self, tick_index: int) -> Optional[TickArray]:
        return self._arrays.get(get_start_tick_index(tick_index, self.tick_spacing))

    def _require_tick_array(self, tick_index: int) -> TickArray:
        tick_array = self.fetch_tick_array(tick_index)
        if tick_array is None:
            raise StaleTickArrayError(f"틱 {tick_index}를 포함하는 틱 배열이 없습니다")
        return tick_array

    def get_tick(self, tick_index: int) -> Tick:
        return self._require_tick_array(tick_index).get_tick(tick_index, self.tick_spacing)

    def get_next_initialized_tick_index(self, tick_index: int) -> Optional[int]:
        anchor = next_search_anchor(tick_index, self.tick_spacing)
        tick_array = self._require_tick_array(anchor)
        for offset in range(tick_array.tick_offset(anchor, self.tick_spacing), TICK_ARRAY_SIZE):
            if tick_array.ticks[offset].initialized:
                return tick_array.start_tick_index + offset * self.tick_spacing
        return None

    def get_prev_initialized_tick_index(self, tick_index: int) -> Optional[int]:
        anchor = prev_search_anchor(tick_index, self.tick_spacing)
        tick_array = self._require_tick_array(anchor)
        for offset in range(tick_array.tick_offset(anchor, self.tick_spacing), -1, -1):
            if tick_array.ticks[offset].initialized:
                return tick_array.start_tick_index + offset * self.tick_spacing
        return None


class AsyncTickArrayFetcher(Protocol):
    """비동기 틱 배열 조회 (RPC 등 외부 협력자)"""

    async def fetch_tick_array(self, start_tick_index: int) -> Optional[TickArray]:
        ...


def get_swap_tick_array_starts(
    tick_current_index: int,
    tick_spacing: int,
    a_to_b: bool,
    max_tick_array_crossings: int
) -> List[int]:
    """스왑 방향으로 필요한 틱 배열 시작 틱 목록 (최대 crossings + 1개)"""
    if a_to_b:
        first = get_start_tick_index(prev_search_anchor(tick_current_index, tick_spacing), tick_spacing)
        step = -1
    else:
        first = get_start_tick_index(next_search_anchor(tick_current_index, tick_spacing), tick_spacing)
        step = 1

    starts = []
    for i in range(max_tick_array_crossings + 1):
        start = get_start_tick_index(first, tick_spacing, i * step)
        starts.append(start)
        if (a_to_b and is_min_tick_array(start)) or (not a_to_b and is_max_tick_array(start, tick_spacing)):
            break
    return starts


async def load_swap_tick_arrays(
    fetcher: AsyncTickArrayFetcher,
    tick_current_index: int,
    tick_spacing: int,
    a_to_b: bool,
    max_tick_array_crossings: int
) -> TickArraySequence:
    """스왑에 필요한 틱 배열을 동시에 조회하고 시작 틱을 재검증

    첫 배열이 없으면 오류이고, 이후 배열이 없으면 그 앞까지만 사용합니다.

    Raises:
        StaleTickArrayError: 첫 배열이 없거나 응답의 시작 틱이 요청과 다른 경우
    """
    starts = get_swap_tick_array_starts(tick_current_index, tick_spacing, a_to_b, max_tick_array_crossings)
    results = await asyncio.gather(*(fetcher.fetch_tick_array(start) for start in starts))

    tick_arrays = []
    for start, tick_array in zip(starts, results):
        if tick_array is None:
            logger.debug("Tick array %d not found, truncating sequence at %d arrays", start, len(tick_arrays))
            break
        if tick_array.start_tick_index != start:
            raise StaleTickArrayError(
                f"요청한 시작 틱 {start}와 다른 틱 배열을 받았습니다: {tick_array.start_tick_index}"
            )
        tick_arrays.append(tick_array)

    if not tick_arrays:
        raise StaleTickArrayError(f"현재 틱 {tick_current_index}의 틱 배열이 없습니다")

    logger.debug("Loaded %d tick arrays for swap (a_to_b=%s): %s", len(tick_arrays), a_to_b, starts)
    return TickArraySequence(tick_arrays, tick_spacing)
