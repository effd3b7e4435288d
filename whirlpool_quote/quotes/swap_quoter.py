"""
Swap Quoter - 틱 교차 스왑 시뮬레이션

온체인 swap 명령과 같은 상태 기계를 오프체인에서 실행합니다.
틱 배열은 접근자를 통해 조회하며, 허용된 교차 횟수를 다 쓰면
마지막 배열 경계에서 멈추고 partial fill 결과를 돌려줍니다.

References:
- Whirlpool program: manager/swap_manager.rs, state/tick_array.rs

상태 전이:
    while 남은 금액 > 0 and 가격 != 한도:
        목표 = 한도와 다음 초기화 틱 중 가까운 쪽
        compute_swap_step → 금액/수수료 갱신
        초기화 틱에 정확히 도달하면 liquidity_net 적용 후 틱 교차
        아니면 틱 = get_tick_at_sqrt_price(새 가격)
"""

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from ..config import settings
from ..constants import (
    MIN_SQRT_PRICE,
    MAX_SQRT_PRICE,
    MIN_TICK_INDEX,
    MAX_TICK_INDEX,
    MAX_TICK_ARRAY_CROSSINGS,
    TICK_ARRAY_SIZE,
    PROTOCOL_FEE_RATE_DENOMINATOR,
)
from ..data.tick_array import (
    AsyncTickArrayFetcher,
    TickArrayAccessor,
    get_start_tick_index,
    is_max_tick_array,
    is_min_tick_array,
    load_swap_tick_arrays,
    next_search_anchor,
    prev_search_anchor,
)
from ..data.types import PoolSnapshot, TokenType
from ..errors import OutOfRangeError, StaleTickArrayError, TickArrayBudgetExceededError
from ..math.fixed_point import Rounding, check_u64, check_u128, mul_div
from ..math.percentage import Percentage, adjust_for_slippage, resolve_slippage
from ..math.swap_math import AmountSpecified, SwapDirection, compute_swap_step
from ..math.tick_math import get_sqrt_price_at_tick, get_tick_at_sqrt_price
from .types import SwapQuote

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SwapSimulatorConfig:
    """스왑 시뮬레이션 설정"""
    direction: SwapDirection
    amount_specified: AmountSpecified
    fee_rate: int
    protocol_fee_rate: int = 0
    max_tick_array_crossings: int = MAX_TICK_ARRAY_CROSSINGS
    allow_partial_fill: bool = True

    @property
    def a_to_b(self) -> bool:
        return self.direction is SwapDirection.A_TO_B

    @property
    def amount_specified_is_input(self) -> bool:
        return self.amount_specified is AmountSpecified.INPUT


@dataclass
class SwapState:
    """호출 단위로 생성되는 시뮬레이션 상태"""
    sqrt_price: int
    tick_index: int
    liquidity: int
    amount_remaining: int
    amount_calculated: int = 0
    fee_amount: int = 0
    protocol_fee_amount: int = 0
    tick_array_start: Optional[int] = None
    tick_arrays_crossed: int = 0


@dataclass(frozen=True)
class SwapSimulationResult:
    """시뮬레이션 결과 (슬리피지 적용 전)"""
    amount_in: int
    amount_out: int
    end_sqrt_price: int
    end_tick_index: int
    end_liquidity: int
    fee_amount: int
    protocol_fee_amount: int
    amount_remaining: int
    tick_arrays_crossed: int


class SwapSimulator:
    """틱 교차 스왑 시뮬레이터

    Example:
        >>> config = SwapSimulatorConfig(SwapDirection.A_TO_B, AmountSpecified.INPUT, fee_rate=3000)
        >>> result = SwapSimulator(config).simulate_swap(pool, accessor, 1_000_000, sqrt_price_limit)
    """

    def __init__(self, config: SwapSimulatorConfig):
        self.config = config

    def simulate_swap(
        self,
        pool: PoolSnapshot,
        accessor: TickArrayAccessor,
        amount: int,
        sqrt_price_limit: int
    ) -> SwapSimulationResult:
        """스왑 시뮬레이션 실행

        Args:
            pool: 풀 스냅샷
            accessor: 틱 배열 접근자
            amount: 지정 금액 (u64)
            sqrt_price_limit: 가격 한도 (sqrtPriceX64)

        Returns:
            SwapSimulationResult

        Raises:
            StaleTickArrayError: 필요한 틱 배열이 없거나 시작 틱이 맞지 않는 경우
            TickArrayBudgetExceededError: partial fill이 허용되지 않는데 교차 한도를 넘는 경우
            DivideByZeroError: 유동성 0에서 가격 계산이 필요한 경우
            OutOfRangeError: 가격이 프로토콜 범위를 벗어나는 경우
        """
        config = self.config
        a_to_b = config.a_to_b
        is_input = config.amount_specified_is_input

        state = SwapState(
            sqrt_price=pool.sqrt_price,
            tick_index=pool.tick_current_index,
            liquidity=pool.liquidity,
            amount_remaining=check_u64(amount, "스왑 지정 금액"),
        )

        while state.amount_remaining > 0 and state.sqrt_price != sqrt_price_limit:
            target = self._next_target_tick(accessor, state)
            if target is None:
                logger.debug(
                    "Tick array budget exhausted after %d crossings, %d unfilled",
                    state.tick_arrays_crossed, state.amount_remaining,
                )
                if not config.allow_partial_fill:
                    raise TickArrayBudgetExceededError(
                        f"틱 배열 교차 한도({config.max_tick_array_crossings})를 넘는 스왑입니다 "
                        f"(미체결 {state.amount_remaining})"
                    )
                break

            next_tick_index, next_tick_initialized = target
            next_tick_sqrt_price = get_sqrt_price_at_tick(next_tick_index)
            if a_to_b:
                target_sqrt_price = max(next_tick_sqrt_price, sqrt_price_limit)
            else:
                target_sqrt_price = min(next_tick_sqrt_price, sqrt_price_limit)

            step = compute_swap_step(
                state.amount_remaining,
                config.fee_rate,
                state.liquidity,
                state.sqrt_price,
                target_sqrt_price,
                is_input,
                a_to_b,
            )

            if is_input:
                state.amount_remaining -= step.amount_in + step.fee_amount
                state.amount_calculated += step.amount_out
            else:
                state.amount_remaining -= step.amount_out
                state.amount_calculated += step.amount_in + step.fee_amount

            state.fee_amount += step.fee_amount
            state.protocol_fee_amount += step.fee_amount * config.protocol_fee_rate // PROTOCOL_FEE_RATE_DENOMINATOR

            if step.next_sqrt_price == next_tick_sqrt_price:
                if next_tick_initialized:
                    self._cross_tick(accessor, state, next_tick_index)
                state.tick_index = next_tick_index - 1 if a_to_b else next_tick_index
            elif step.next_sqrt_price != state.sqrt_price:
                state.tick_index = get_tick_at_sqrt_price(step.next_sqrt_price)
            elif step.amount_in == 0 and step.amount_out == 0 and step.fee_amount == 0:
                # 남은 금액으로는 가격을 움직일 수 없음
                break

            state.sqrt_price = step.next_sqrt_price

        if is_input:
            amount_in = amount - state.amount_remaining
            amount_out = state.amount_calculated
        else:
            amount_in = state.amount_calculated
            amount_out = amount - state.amount_remaining

        return SwapSimulationResult(
            amount_in=amount_in,
            amount_out=amount_out,
            end_sqrt_price=state.sqrt_price,
            end_tick_index=state.tick_index,
            end_liquidity=state.liquidity,
            fee_amount=state.fee_amount,
            protocol_fee_amount=state.protocol_fee_amount,
            amount_remaining=state.amount_remaining,
            tick_arrays_crossed=state.tick_arrays_crossed,
        )

    def _cross_tick(self, accessor: TickArrayAccessor, state: SwapState, tick_index: int) -> None:
        tick_array = accessor.fetch_tick_array(tick_index)
        if tick_array is None:
            raise StaleTickArrayError(f"교차할 틱 {tick_index}의 틱 배열이 없습니다")
        start = get_start_tick_index(tick_index, accessor.tick_spacing)
        if tick_array.start_tick_index != start:
            raise StaleTickArrayError(
                f"교차할 틱 {tick_index}에 대해 시작 틱 {start} 대신 {tick_array.start_tick_index} 배열을 받았습니다"
            )
        tick = tick_array.get_tick(tick_index, accessor.tick_spacing)

        liquidity_net = -tick.liquidity_net if self.config.a_to_b else tick.liquidity_net
        state.liquidity = check_u128(state.liquidity + liquidity_net, "교차 후 유동성")

    def _enter_tick_array(self, accessor: TickArrayAccessor, state: SwapState, anchor: int, start: int) -> None:
        tick_array = accessor.fetch_tick_array(anchor)
        if tick_array is None:
            raise StaleTickArrayError(f"틱 {anchor}를 포함하는 틱 배열이 없습니다")
        if tick_array.start_tick_index != start:
            raise StaleTickArrayError(
                f"틱 {anchor}에 대해 시작 틱 {start} 대신 {tick_array.start_tick_index} 배열을 받았습니다"
            )
        if state.tick_array_start is not None:
            state.tick_arrays_crossed += 1
        state.tick_array_start = start

    def _next_target_tick(self, accessor: TickArrayAccessor, state: SwapState) -> Optional[Tuple[int, bool]]:
        """다음 목표 틱과 초기화 여부

        배열 안에 초기화 틱이 없으면 다음 배열로 넘어가 계속 탐색합니다.
        교차 한도를 다 쓰면 마지막 배열의 경계 틱을 목표로 하고,
        이미 경계에 도달했다면 None을 반환합니다.
        """
        a_to_b = self.config.a_to_b
        tick_spacing = accessor.tick_spacing
        search_index = state.tick_index

        while True:
            if a_to_b:
                anchor = prev_search_anchor(search_index, tick_spacing)
            else:
                anchor = next_search_anchor(search_index, tick_spacing)
            start = get_start_tick_index(anchor, tick_spacing)

            if start != state.tick_array_start:
                if (state.tick_array_start is not None
                        and state.tick_arrays_crossed >= self.config.max_tick_array_crossings):
                    return self._budget_boundary(state, tick_spacing)
                self._enter_tick_array(accessor, state, anchor, start)

            if a_to_b:
                found = accessor.get_prev_initialized_tick_index(search_index)
            else:
                found = accessor.get_next_initialized_tick_index(search_index)
            if found is not None:
                return found, True

            if a_to_b:
                if is_min_tick_array(start):
                    return MIN_TICK_INDEX, False
                search_index = start - 1
            else:
                if is_max_tick_array(start, tick_spacing):
                    return MAX_TICK_INDEX, False
                search_index = start + TICK_ARRAY_SIZE * tick_spacing - 1

    def _budget_boundary(self, state: SwapState, tick_spacing: int) -> Optional[Tuple[int, bool]]:
        if self.config.a_to_b:
            boundary = max(state.tick_array_start, MIN_TICK_INDEX)
            if state.sqrt_price <= get_sqrt_price_at_tick(boundary):
                return None
        else:
            boundary = min(state.tick_array_start + TICK_ARRAY_SIZE * tick_spacing - 1, MAX_TICK_INDEX)
            if state.sqrt_price >= get_sqrt_price_at_tick(boundary):
                return None
        return boundary, False


def get_default_sqrt_price_limit(sqrt_price: int, a_to_b: bool, slippage_tolerance: Percentage) -> int:
    """슬리피지로 정한 가격 한도 √P × (1 ∓ s), 프로토콜 범위로 제한"""
    numerator = slippage_tolerance.numerator
    denominator = slippage_tolerance.denominator
    if a_to_b:
        limit = mul_div(sqrt_price, denominator - numerator, denominator, Rounding.UP, bits=256)
        return max(limit, MIN_SQRT_PRICE)
    limit = mul_div(sqrt_price, denominator + numerator, denominator, Rounding.DOWN, bits=256)
    return min(limit, MAX_SQRT_PRICE)


def _validate_sqrt_price_limit(sqrt_price: int, sqrt_price_limit: int, a_to_b: bool) -> int:
    if sqrt_price_limit < MIN_SQRT_PRICE or sqrt_price_limit > MAX_SQRT_PRICE:
        raise OutOfRangeError(
            f"가격 한도가 범위를 벗어났습니다: {sqrt_price_limit} (범위: {MIN_SQRT_PRICE} ~ {MAX_SQRT_PRICE})"
        )
    if a_to_b and sqrt_price_limit > sqrt_price:
        raise OutOfRangeError(f"A→B 스왑의 가격 한도는 현재 가격 이하여야 합니다: {sqrt_price_limit}")
    if not a_to_b and sqrt_price_limit < sqrt_price:
        raise OutOfRangeError(f"B→A 스왑의 가격 한도는 현재 가격 이상이어야 합니다: {sqrt_price_limit}")
    return sqrt_price_limit


def get_swap_direction(swap_token: TokenType, amount_specified: AmountSpecified) -> SwapDirection:
    """지정 토큰과 입력/출력 여부로 스왑 방향 결정"""
    token_is_input = amount_specified is AmountSpecified.INPUT
    if (swap_token is TokenType.TOKEN_A) == token_is_input:
        return SwapDirection.A_TO_B
    return SwapDirection.B_TO_A


def get_swap_quote(
    pool: PoolSnapshot,
    tick_arrays: TickArrayAccessor,
    amount: int,
    swap_token: TokenType,
    amount_specified: AmountSpecified = AmountSpecified.INPUT,
    slippage_tolerance: Optional[Percentage] = None,
    sqrt_price_limit: Optional[int] = None,
    max_tick_array_crossings: Optional[int] = None,
    allow_partial_fill: Optional[bool] = None
) -> SwapQuote:
    """스왑 견적 계산

    Args:
        pool: 풀 스냅샷
        tick_arrays: 틱 배열 접근자
        amount: 지정 금액
        swap_token: 지정 금액의 토큰
        amount_specified: 지정 금액이 입력인지 출력인지
        slippage_tolerance: 슬리피지 (None이면 설정값)
        sqrt_price_limit: 가격 한도 (None이면 슬리피지로 계산)
        max_tick_array_crossings: 틱 배열 교차 한도 (None이면 설정값)
        allow_partial_fill: 교차 한도 초과 시 partial fill 허용 여부 (None이면 설정값)

    Returns:
        SwapQuote

    Raises:
        ValueError: 지정 금액이 0인 경우
        OutOfRangeError: 가격 한도가 범위를 벗어나거나 방향과 맞지 않는 경우
    """
    if amount <= 0:
        raise ValueError(f"스왑 수량은 0보다 커야 합니다: {amount}")

    slippage_tolerance = resolve_slippage(slippage_tolerance)
    direction = get_swap_direction(swap_token, amount_specified)
    a_to_b = direction is SwapDirection.A_TO_B

    if sqrt_price_limit is None:
        sqrt_price_limit = get_default_sqrt_price_limit(pool.sqrt_price, a_to_b, slippage_tolerance)
    else:
        sqrt_price_limit = _validate_sqrt_price_limit(pool.sqrt_price, sqrt_price_limit, a_to_b)

    config = SwapSimulatorConfig(
        direction=direction,
        amount_specified=amount_specified,
        fee_rate=pool.fee_rate,
        protocol_fee_rate=pool.protocol_fee_rate,
        max_tick_array_crossings=settings.MAX_TICK_ARRAY_CROSSINGS
        if max_tick_array_crossings is None else max_tick_array_crossings,
        allow_partial_fill=settings.ALLOW_PARTIAL_FILL if allow_partial_fill is None else allow_partial_fill,
    )
    result = SwapSimulator(config).simulate_swap(pool, tick_arrays, amount, sqrt_price_limit)

    is_input = config.amount_specified_is_input
    if is_input:
        other_amount_threshold = adjust_for_slippage(result.amount_out, slippage_tolerance, round_up=False)
    else:
        other_amount_threshold = adjust_for_slippage(result.amount_in, slippage_tolerance, round_up=True)

    amount_a, amount_b = (
        (result.amount_in, result.amount_out) if a_to_b else (result.amount_out, result.amount_in)
    )

    return SwapQuote(
        amount_in=result.amount_in,
        amount_out=result.amount_out,
        sqrt_price_limit=sqrt_price_limit,
        other_amount_threshold=other_amount_threshold,
        a_to_b=a_to_b,
        amount_specified_is_input=is_input,
        amount_a=amount_a,
        amount_b=amount_b,
        end_sqrt_price=result.end_sqrt_price,
        end_tick_index=result.end_tick_index,
        fee_amount=result.fee_amount,
        protocol_fee_amount=result.protocol_fee_amount,
        amount_remaining=result.amount_remaining,
        tick_arrays_crossed=result.tick_arrays_crossed,
    )


async def get_swap_quote_async(
    pool: PoolSnapshot,
    fetcher: AsyncTickArrayFetcher,
    amount: int,
    swap_token: TokenType,
    amount_specified: AmountSpecified = AmountSpecified.INPUT,
    slippage_tolerance: Optional[Percentage] = None,
    sqrt_price_limit: Optional[int] = None,
    max_tick_array_crossings: Optional[int] = None,
    allow_partial_fill: Optional[bool] = None
) -> SwapQuote:
    """비동기 조회자로 틱 배열을 받아 스왑 견적 계산

    스왑 방향의 틱 배열을 동시에 조회하고 시작 틱을 검증한 뒤
    get_swap_quote와 같은 시뮬레이터를 실행합니다. 조회되지 않은 배열이 있으면
    받은 배열 수만큼으로 교차 한도를 줄입니다.
    """
    if max_tick_array_crossings is None:
        max_tick_array_crossings = settings.MAX_TICK_ARRAY_CROSSINGS
    a_to_b = get_swap_direction(swap_token, amount_specified) is SwapDirection.A_TO_B

    tick_arrays = await load_swap_tick_arrays(
        fetcher, pool.tick_current_index, pool.tick_spacing, a_to_b, max_tick_array_crossings
    )
    return get_swap_quote(
        pool,
        tick_arrays,
        amount,
        swap_token,
        amount_specified=amount_specified,
        slippage_tolerance=slippage_tolerance,
        sqrt_price_limit=sqrt_price_limit,
        max_tick_array_crossings=min(max_tick_array_crossings, len(tick_arrays) - 1),
        allow_partial_fill=allow_partial_fill,
    )
