"""
설정(Settings) 테스트

WHIRLPOOL_QUOTE_* 환경 변수를 설정한 뒤 config 모듈을 다시 읽어 확인합니다.
"""

import importlib

import pytest

from .. import config


@pytest.fixture
def reload_config(monkeypatch):
    """환경 변수 적용 후 config 재로딩, 테스트 후 원래 환경으로 복원"""
    def _reload(**env):
        for key, value in env.items():
            monkeypatch.setenv(key, value)
        return importlib.reload(config).settings

    yield _reload
    monkeypatch.undo()
    importlib.reload(config)


class TestSettings:
    """Settings 환경 변수 로딩"""

    def test_defaults(self, reload_config, monkeypatch):
        for key in (
            "WHIRLPOOL_QUOTE_SLIPPAGE",
            "WHIRLPOOL_QUOTE_MAX_TICK_ARRAY_CROSSINGS",
            "WHIRLPOOL_QUOTE_ALLOW_PARTIAL_FILL",
        ):
            monkeypatch.delenv(key, raising=False)
        settings = reload_config()
        assert settings.SLIPPAGE_TOLERANCE == (1, 1000)
        assert settings.MAX_TICK_ARRAY_CROSSINGS == 2
        assert settings.ALLOW_PARTIAL_FILL is True

    def test_reads_environment(self, reload_config):
        settings = reload_config(
            WHIRLPOOL_QUOTE_SLIPPAGE="5/100",
            WHIRLPOOL_QUOTE_MAX_TICK_ARRAY_CROSSINGS="4",
            WHIRLPOOL_QUOTE_ALLOW_PARTIAL_FILL="false",
        )
        assert settings.SLIPPAGE_TOLERANCE == (5, 100)
        assert settings.MAX_TICK_ARRAY_CROSSINGS == 4
        assert settings.ALLOW_PARTIAL_FILL is False

    def test_partial_fill_flag_is_case_insensitive(self, reload_config):
        assert reload_config(WHIRLPOOL_QUOTE_ALLOW_PARTIAL_FILL="TRUE").ALLOW_PARTIAL_FILL is True
        assert reload_config(WHIRLPOOL_QUOTE_ALLOW_PARTIAL_FILL="False").ALLOW_PARTIAL_FILL is False


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
