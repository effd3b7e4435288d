"""
Configuration settings for the quote engine

Loads environment variables and provides default quote parameters.
"""
import os
from typing import Tuple

from dotenv import load_dotenv

from .constants import DEFAULT_SLIPPAGE_DENOMINATOR, DEFAULT_SLIPPAGE_NUMERATOR
from .constants import MAX_TICK_ARRAY_CROSSINGS as DEFAULT_MAX_TICK_ARRAY_CROSSINGS

# Load environment variables from .env file
load_dotenv()


def _parse_fraction(value: str) -> Tuple[int, int]:
    """ "1/1000" 형식의 문자열을 (분자, 분모)로 변환"""
    numerator, _, denominator = value.partition("/")
    return int(numerator), int(denominator or 1)


class Settings:
    """Quote engine settings"""

    # Slippage ("numerator/denominator")
    SLIPPAGE_TOLERANCE: Tuple[int, int] = _parse_fraction(
        os.getenv("WHIRLPOOL_QUOTE_SLIPPAGE", f"{DEFAULT_SLIPPAGE_NUMERATOR}/{DEFAULT_SLIPPAGE_DENOMINATOR}")
    )

    # Swap simulation
    MAX_TICK_ARRAY_CROSSINGS: int = int(os.getenv("WHIRLPOOL_QUOTE_MAX_TICK_ARRAY_CROSSINGS", DEFAULT_MAX_TICK_ARRAY_CROSSINGS))
    ALLOW_PARTIAL_FILL: bool = os.getenv("WHIRLPOOL_QUOTE_ALLOW_PARTIAL_FILL", "True").lower() == "true"


settings = Settings()
