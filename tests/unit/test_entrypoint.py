"""CLIのテスト"""

import json

import pytest

from locability.entrypoint import build_parser, main, parse_center
from locability.shared.exceptions.errors import ValidationError


@pytest.fixture
def isolated_env(tmp_path, monkeypatch) -> str:
    """ローカル保存先を一時ディレクトリに向け、.env を読まない"""
    # ログは標準出力に出るため、JSON出力と混ざらないようにする
    monkeypatch.setattr("locability.entrypoint.setup_logging", lambda **kwargs: None)
    monkeypatch.setenv("LOCAL_STORAGE_DIR", str(tmp_path))
    monkeypatch.setenv("REMOTE_SYNC_ENABLED", "false")
    return str(tmp_path / "missing.env")


def test_parser_requires_command() -> None:
    """サブコマンドは必須"""
    with pytest.raises(SystemExit):
        build_parser().parse_args([])


def test_parser_reads_center_arguments() -> None:
    """中心座標と半径の引数"""
    args = build_parser().parse_args(
        ["near", "--lat", "37.9", "--lon", "23.7", "--radius", "250", "--filter", "Ramps"]
    )

    assert (args.command, args.lat, args.lon, args.radius, args.filter) == (
        "near",
        37.9,
        23.7,
        250.0,
        "Ramps",
    )


def test_parse_center_rejects_out_of_range() -> None:
    """値域外の座標はValidationError"""
    with pytest.raises(ValidationError):
        parse_center(95.0, 0.0)


def test_score_on_empty_store(isolated_env, capsys) -> None:
    """スポットがない場合のスコアは0"""
    exit_code = main(["--env-file", isolated_env, "score", "--lat", "37.9755", "--lon", "23.7348"])

    assert exit_code == 0
    output = json.loads(capsys.readouterr().out)
    assert output["score"] == 0
    assert output["band"] == "No data available"


def test_invalid_coordinate_exit_code(isolated_env) -> None:
    """値域外の座標は終了コード2"""
    assert main(["--env-file", isolated_env, "near", "--lat", "120", "--lon", "0"]) == 2


def test_near_with_zero_radius_is_not_defaulted(isolated_env, capsys, monkeypatch) -> None:
    """--radius 0 は既定の半径に置き換えない"""
    received = []

    def spots_near(self, center, radius, spot_filter=None):
        received.append(radius)
        return []

    monkeypatch.setattr("locability.entrypoint.AppOrchestrator.spots_near", spots_near)

    exit_code = main(
        ["--env-file", isolated_env, "near", "--lat", "37.9755", "--lon", "23.7348", "--radius", "0"]
    )

    assert exit_code == 0
    assert received == [0.0]
    assert json.loads(capsys.readouterr().out) == []
