"""
견적 엔진 예외 정의

모든 예외는 QuoteError를 상속합니다. 범위/입력 오류는 ValueError도 함께
상속하므로 ValueError를 잡는 기존 호출 코드와 호환됩니다.
"""


class QuoteError(Exception):
    """견적 계산 실패의 기본 예외"""
    pass


class ArithmeticOverflowError(QuoteError):
    """고정 폭 정수(u64/u128/u256) 범위 초과"""
    pass


class ArithmeticUnderflowError(QuoteError):
    """부호 없는 정수 연산 결과가 음수"""
    pass


class DivideByZeroError(QuoteError, ZeroDivisionError):
    """0으로 나누기 (예: 유동성 0에서 가격 이동 계산)"""
    pass


class OutOfRangeError(QuoteError, ValueError):
    """틱 또는 sqrt price가 프로토콜 범위를 벗어남"""
    pass


class InvalidRangeError(QuoteError, ValueError):
    """잘못된 포지션 범위 (tick_lower >= tick_upper)"""
    pass


class StaleTickArrayError(QuoteError):
    """틱 배열이 없거나 요청한 틱을 포함하지 않음"""
    pass


class TickArrayBudgetExceededError(QuoteError):
    """스왑이 허용된 틱 배열 교차 횟수보다 많이 필요함"""
    pass
