from __future__ import annotations

import pytest

from signalk_windy.__main__ import build_parser, config_from_args, main


def test_config_from_args_merges_flags(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SIGNALK_WINDY_API_KEY", "env-key")
    args = build_parser().parse_args(
        ["--station-id", "9", "--submit-interval", "2", "--path", "windSpeed=environment.wind.speedTrue"]
    )

    config = config_from_args(args)

    assert config.api_key == "env-key"
    assert config.station_id == 9
    assert config.submit_interval == 2.0
    assert config.paths.wind_speed == "environment.wind.speedTrue"


def test_invalid_path_flag_is_rejected() -> None:
    with pytest.raises(SystemExit):
        build_parser().parse_args(["--path", "rain=environment.outside.rain"])


def test_main_without_api_key_exits_with_error(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.delenv("SIGNALK_WINDY_API_KEY", raising=False)

    assert main([]) == 2
    assert "API Key is required" in capsys.readouterr().err
