"""CLIエントリーポイント"""
import argparse
import json
import sys
from typing import Optional

from .features.app.orchestrator import AppOrchestrator
from .features.geo.domain.models import Coordinate
from .features.importing.domain.models import ImportStatus
from .features.spots.domain.enums import AccessibilityFilter
from .infrastructure.config.settings import Settings
from .shared.exceptions.errors import ValidationError
from .shared.logging.config import get_logger, setup_logging

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """コマンドライン引数のパーサーを作成"""
    parser = argparse.ArgumentParser(
        description="アクセシビリティ設備の近傍検索・エリアスコア・外部データ取り込みツール"
    )

    parser.add_argument(
        "--env-file",
        type=str,
        default=".env",
        help="環境変数ファイルのパス（デフォルト: .env）",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="ログレベル",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    def add_center_args(sub: argparse.ArgumentParser, radius_help: str) -> None:
        sub.add_argument("--lat", type=float, required=True, help="中心の緯度")
        sub.add_argument("--lon", type=float, required=True, help="中心の経度")
        sub.add_argument("--radius", type=float, help=radius_help)

    near_parser = subparsers.add_parser("near", help="中心から半径内のスポットを近い順に表示")
    add_center_args(near_parser, "半径（メートル、デフォルト: スコア計算半径）")
    near_parser.add_argument(
        "--filter",
        type=str,
        default=AccessibilityFilter.ALL.value,
        choices=[f.value for f in AccessibilityFilter],
        help="フィルター",
    )

    score_parser = subparsers.add_parser("score", help="エリアのアクセシビリティスコアを計算")
    add_center_args(score_parser, "半径（メートル、デフォルト: スコア計算半径）")

    import_parser = subparsers.add_parser("import", help="OpenStreetMapからスポットを取り込む")
    add_center_args(import_parser, "半径（メートル、デフォルト: 取り込み半径）")

    subparsers.add_parser("list", help="保存済みのスポットを表示")

    return parser


def parse_center(lat: float, lon: float) -> Coordinate:
    """
    コマンドライン引数から中心座標を生成

    Raises:
        ValidationError: 値域外の座標の場合
    """
    center = Coordinate(lat, lon)
    if not center.is_valid():
        raise ValidationError(f"Coordinate out of range: ({lat}, {lon})")
    return center


def main(argv: Optional[list[str]] = None) -> int:
    """
    メインエントリーポイント

    Returns:
        int: 終了コード（0: 成功, 1: 失敗）
    """
    args = build_parser().parse_args(argv)

    try:
        settings = Settings(_env_file=args.env_file)

        if args.log_level:
            settings.log_level = args.log_level

        setup_logging(
            level=settings.log_level,
            enable_cloud_logging=settings.gcp_logging_enabled,
            project_id=settings.gcp_project_id,
        )

        orchestrator = AppOrchestrator(settings)

        try:
            return run_command(args, orchestrator, settings)
        finally:
            orchestrator.close()

    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        return 130  # SIGINT
    except ValidationError as e:
        logger.error(f"Invalid input: {e}")
        return 2
    except Exception as e:
        logger.error(f"Application failed: {e}", exc_info=True)
        return 1


def run_command(
    args: argparse.Namespace, orchestrator: AppOrchestrator, settings: Settings
) -> int:
    """サブコマンドを実行し、結果をJSONで標準出力に書き出す"""
    if args.command == "list":
        output = [spot.to_dict() for spot in orchestrator.store.all()]
        print(json.dumps(output, ensure_ascii=False, indent=2))
        return 0

    center = parse_center(args.lat, args.lon)

    if args.command == "near":
        radius = args.radius if args.radius is not None else settings.score_radius_meters
        nearby = orchestrator.spots_near(center, radius, AccessibilityFilter(args.filter))
        print(json.dumps([item.to_dict() for item in nearby], ensure_ascii=False, indent=2))
        return 0

    if args.command == "score":
        breakdown = orchestrator.area_score(center, args.radius)
        print(json.dumps(breakdown.to_dict(), ensure_ascii=False, indent=2))
        return 0

    if args.command == "import":
        result = orchestrator.import_around(center, args.radius)
        print(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
        return 0 if result.status == ImportStatus.SUCCESS else 1

    raise ValueError(f"Unknown command: {args.command}")


if __name__ == "__main__":
    sys.exit(main())
