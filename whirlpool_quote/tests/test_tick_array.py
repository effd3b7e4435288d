"""
틱 배열 접근자 테스트
"""

import asyncio

import pytest

from ..data.tick_array import (
    TickArraySequence,
    get_start_tick_index,
    get_swap_tick_array_starts,
    load_swap_tick_arrays,
)
from ..data.types import TickArray
from ..errors import StaleTickArrayError
from .fixtures import initialized_tick, make_sequence, make_tick_array


class TestStartTickIndex:
    """get_start_tick_index 테스트"""

    def test_positive(self):
        assert get_start_tick_index(0, 64) == 0
        assert get_start_tick_index(5631, 64) == 0
        assert get_start_tick_index(5632, 64) == 5632

    def test_negative_rounds_down(self):
        assert get_start_tick_index(-1, 1) == -88
        assert get_start_tick_index(-88, 1) == -88
        assert get_start_tick_index(-89, 1) == -176

    def test_offset(self):
        assert get_start_tick_index(100, 1, offset=1) == 176
        assert get_start_tick_index(100, 1, offset=-2) == -88


class TestInitializedTickSearch:
    """초기화 틱 탐색 테스트"""

    def setup_method(self):
        self.sequence = make_sequence((0, 88), 1, {
            10: initialized_tick(1),
            40: initialized_tick(-1),
            100: initialized_tick(5),
        })

    def test_next_is_exclusive(self):
        assert self.sequence.get_next_initialized_tick_index(0) == 10
        assert self.sequence.get_next_initialized_tick_index(10) == 40

    def test_prev_is_inclusive(self):
        assert self.sequence.get_prev_initialized_tick_index(40) == 40
        assert self.sequence.get_prev_initialized_tick_index(39) == 10

    def test_exhausted_array_returns_none(self):
        """배열 안에 후보가 없으면 None (다음 배열로 넘어가지 않음)"""
        assert self.sequence.get_next_initialized_tick_index(40) is None
        assert self.sequence.get_prev_initialized_tick_index(9) is None

    def test_last_tick_searches_next_array(self):
        """배열 마지막 틱에서 위로 탐색하면 다음 배열"""
        assert self.sequence.get_next_initialized_tick_index(87) == 100

    def test_missing_array(self):
        with pytest.raises(StaleTickArrayError):
            self.sequence.get_prev_initialized_tick_index(-1)

    def test_spacing_search(self):
        sequence = make_sequence((0,), 64, {128: initialized_tick(1)})
        assert sequence.get_next_initialized_tick_index(70) == 128
        assert sequence.get_prev_initialized_tick_index(191) == 128

    def test_get_tick(self):
        assert self.sequence.get_tick(100).liquidity_net == 5
        assert not self.sequence.get_tick(101).initialized

    def test_misaligned_start_rejected(self):
        with pytest.raises(StaleTickArrayError):
            TickArraySequence([TickArray.empty(10)], 1)


class TestSwapTickArrays:
    """스왑용 틱 배열 목록 / 비동기 조회"""

    def test_starts_a_to_b(self):
        assert get_swap_tick_array_starts(5, 1, True, 2) == [0, -88, -176]

    def test_starts_b_to_a_at_array_edge(self):
        """현재 틱이 배열 마지막 유효 틱이면 다음 배열부터"""
        assert get_swap_tick_array_starts(87, 1, False, 2) == [88, 176, 264]

    def test_starts_stop_at_min_array(self):
        starts = get_swap_tick_array_starts(-443620, 1, True, 2)
        assert len(starts) == 1

    def test_load(self):
        arrays = {start: make_tick_array(start, 1) for start in (0, 88, 176)}

        class Fetcher:
            async def fetch_tick_array(self, start_tick_index):
                return arrays.get(start_tick_index)

        sequence = asyncio.run(load_swap_tick_arrays(Fetcher(), 0, 1, False, 2))
        assert [array.start_tick_index for array in sequence.tick_arrays] == [0, 88, 176]

    def test_load_missing_first(self):
        class Fetcher:
            async def fetch_tick_array(self, start_tick_index):
                return None

        with pytest.raises(StaleTickArrayError):
            asyncio.run(load_swap_tick_arrays(Fetcher(), 0, 1, True, 2))


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
