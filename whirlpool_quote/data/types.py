"""
Whirlpool 데이터 타입 정의

계정 조회 계층(외부 협력자)이 넘겨주는 풀/포지션/틱 배열 스냅샷을
Python dataclass로 정의. 모든 숫자 필드는 온체인 정밀도를 위해 int 타입 사용.

스냅샷은 frozen dataclass이며 견적 엔진은 입력을 변경하지 않습니다.
from_dict()는 camelCase 계정 JSON (큰 정수는 10진 문자열)을 받습니다.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

from ..constants import DEFAULT_PUBKEY, NUM_REWARDS, TICK_ARRAY_SIZE


class TokenType(Enum):
    """풀의 토큰 구분"""
    TOKEN_A = "token_a"
    TOKEN_B = "token_b"


def _parse_mint(value: Optional[str]) -> Optional[str]:
    if not value or value == DEFAULT_PUBKEY:
        return None
    return value


@dataclass(frozen=True)
class RewardInfo:
    """풀의 리워드 슬롯

    mint가 None이면 설정되지 않은 슬롯입니다.
    """
    mint: Optional[str]
    growth_global_x64: int = 0
    emissions_per_second_x64: int = 0

    @property
    def initialized(self) -> bool:
        return self.mint is not None

    @classmethod
    def from_dict(cls, data: dict) -> "RewardInfo":
        return cls(
            mint=_parse_mint(data.get("mint")),
            growth_global_x64=int(data.get("growthGlobalX64", 0)),
            emissions_per_second_x64=int(data.get("emissionsPerSecondX64", 0)),
        )


def _empty_reward_infos() -> Tuple[RewardInfo, ...]:
    return tuple(RewardInfo(mint=None) for _ in range(NUM_REWARDS))


@dataclass(frozen=True)
class PoolSnapshot:
    """Whirlpool 풀 상태

    Global State:
    - sqrt_price: 현재 √가격 (Q64.64)
    - liquidity: 현재 가격에서 활성화된 총 유동성
    - tick_current_index: 현재 틱 (get_sqrt_price_at_tick(tick) <= sqrt_price)
    - fee_growth_global_a/b: 단위유동성당 누적수수료 (Q64.64)
    - fee_rate: 1/100 bps 단위 (분모 1,000,000)
    - protocol_fee_rate: 수수료 대비 bps (분모 10,000)
    """
    sqrt_price: int
    liquidity: int
    tick_current_index: int
    tick_spacing: int
    fee_rate: int
    protocol_fee_rate: int = 0
    fee_growth_global_a: int = 0
    fee_growth_global_b: int = 0
    reward_infos: Tuple[RewardInfo, ...] = field(default_factory=_empty_reward_infos)
    token_mint_a: Optional[str] = None
    token_mint_b: Optional[str] = None
    reward_last_updated_timestamp: int = 0

    def __post_init__(self):
        if len(self.reward_infos) != NUM_REWARDS:
            raise ValueError(f"리워드 슬롯은 {NUM_REWARDS}개여야 합니다: {len(self.reward_infos)}")

    def token_type(self, mint: str) -> TokenType:
        """mint 주소로 토큰 구분 조회"""
        if mint == self.token_mint_a:
            return TokenType.TOKEN_A
        if mint == self.token_mint_b:
            return TokenType.TOKEN_B
        raise ValueError(f"풀에 없는 토큰입니다: {mint}")

    @classmethod
    def from_dict(cls, data: dict) -> "PoolSnapshot":
        return cls(
            sqrt_price=int(data["sqrtPrice"]),
            liquidity=int(data["liquidity"]),
            tick_current_index=int(data["tickCurrentIndex"]),
            tick_spacing=int(data["tickSpacing"]),
            fee_rate=int(data["feeRate"]),
            protocol_fee_rate=int(data.get("protocolFeeRate", 0)),
            fee_growth_global_a=int(data.get("feeGrowthGlobalA", 0)),
            fee_growth_global_b=int(data.get("feeGrowthGlobalB", 0)),
            reward_infos=tuple(RewardInfo.from_dict(r) for r in data["rewardInfos"])
            if "rewardInfos" in data else _empty_reward_infos(),
            token_mint_a=data.get("tokenMintA"),
            token_mint_b=data.get("tokenMintB"),
            reward_last_updated_timestamp=int(data.get("rewardLastUpdatedTimestamp", 0)),
        )


@dataclass(frozen=True)
class PositionRewardInfo:
    """포지션의 리워드 슬롯 체크포인트"""
    growth_inside_checkpoint: int = 0
    amount_owed: int = 0

    @classmethod
    def from_dict(cls, data: dict) -> "PositionRewardInfo":
        return cls(
            growth_inside_checkpoint=int(data.get("growthInsideCheckpoint", 0)),
            amount_owed=int(data.get("amountOwed", 0)),
        )


def _empty_position_rewards() -> Tuple[PositionRewardInfo, ...]:
    return tuple(PositionRewardInfo() for _ in range(NUM_REWARDS))


@dataclass(frozen=True)
class PositionSnapshot:
    """유동성 포지션 상태

    틱 정렬(tick_spacing 배수) 여부는 호출자가 보장합니다.
    """
    tick_lower_index: int
    tick_upper_index: int
    liquidity: int
    fee_growth_checkpoint_a: int = 0
    fee_growth_checkpoint_b: int = 0
    fee_owed_a: int = 0
    fee_owed_b: int = 0
    reward_infos: Tuple[PositionRewardInfo, ...] = field(default_factory=_empty_position_rewards)

    @classmethod
    def from_dict(cls, data: dict) -> "PositionSnapshot":
        return cls(
            tick_lower_index=int(data["tickLowerIndex"]),
            tick_upper_index=int(data["tickUpperIndex"]),
            liquidity=int(data["liquidity"]),
            fee_growth_checkpoint_a=int(data.get("feeGrowthCheckpointA", 0)),
            fee_growth_checkpoint_b=int(data.get("feeGrowthCheckpointB", 0)),
            fee_owed_a=int(data.get("feeOwedA", 0)),
            fee_owed_b=int(data.get("feeOwedB", 0)),
            reward_infos=tuple(PositionRewardInfo.from_dict(r) for r in data["rewardInfos"])
            if "rewardInfos" in data else _empty_position_rewards(),
        )


@dataclass(frozen=True)
class Tick:
    """틱 상태

    Tick-Indexed State:
    - liquidity_net: 좌→우로 틱을 지날 때 더해지는 유동성 (i128)
    - liquidity_gross: 틱을 참조하는 포지션 유동성 합
    - fee_growth_outside_a/b: 현재 틱 반대편 누적수수료 (Q64.64)
    - reward_growths_outside: 리워드 슬롯별 반대편 누적 growth
    """
    initialized: bool = False
    liquidity_net: int = 0
    liquidity_gross: int = 0
    fee_growth_outside_a: int = 0
    fee_growth_outside_b: int = 0
    reward_growths_outside: Tuple[int, ...] = (0, 0, 0)

    @classmethod
    def from_dict(cls, data: dict) -> "Tick":
        return cls(
            initialized=bool(data.get("initialized", False)),
            liquidity_net=int(data.get("liquidityNet", 0)),
            liquidity_gross=int(data.get("liquidityGross", 0)),
            fee_growth_outside_a=int(data.get("feeGrowthOutsideA", 0)),
            fee_growth_outside_b=int(data.get("feeGrowthOutsideB", 0)),
            reward_growths_outside=tuple(int(g) for g in data.get("rewardGrowthsOutside", (0, 0, 0))),
        )


@dataclass(frozen=True)
class TickArray:
    """틱 배열 (연속된 TICK_ARRAY_SIZE개의 틱)

    ticks[i]는 start_tick_index + i × tick_spacing 틱입니다.
    """
    start_tick_index: int
    ticks: Tuple[Tick, ...]

    def __post_init__(self):
        if len(self.ticks) != TICK_ARRAY_SIZE:
            raise ValueError(f"틱 배열은 {TICK_ARRAY_SIZE}개의 틱이어야 합니다: {len(self.ticks)}")

    def end_tick_index(self, tick_spacing: int) -> int:
        """이 배열이 덮는 마지막 틱 (다음 배열 시작 - 1)"""
        return self.start_tick_index + TICK_ARRAY_SIZE * tick_spacing - 1

    def contains(self, tick_index: int, tick_spacing: int) -> bool:
        return self.start_tick_index <= tick_index <= self.end_tick_index(tick_spacing)

    def tick_offset(self, tick_index: int, tick_spacing: int) -> int:
        """배열 안에서의 틱 위치 (내림)"""
        return (tick_index - self.start_tick_index) // tick_spacing

    def get_tick(self, tick_index: int, tick_spacing: int) -> Tick:
        """틱 스냅샷 조회

        Raises:
            ValueError: 배열 밖이거나 tick_spacing 배수가 아닌 틱
        """
        if not self.contains(tick_index, tick_spacing) or tick_index % tick_spacing != 0:
            raise ValueError(
                f"틱 {tick_index}는 시작 틱 {self.start_tick_index} 배열의 유효 틱이 아닙니다"
            )
        return self.ticks[self.tick_offset(tick_index, tick_spacing)]

    @classmethod
    def empty(cls, start_tick_index: int) -> "TickArray":
        return cls(start_tick_index, tuple(Tick() for _ in range(TICK_ARRAY_SIZE)))

    @classmethod
    def from_dict(cls, data: dict) -> "TickArray":
        return cls(
            start_tick_index=int(data["startTickIndex"]),
            ticks=tuple(Tick.from_dict(t) for t in data["ticks"]),
        )
