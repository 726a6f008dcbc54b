"""Overpass API（OpenStreetMap）クライアント"""

from typing import Any, Optional

from ....shared.exceptions.errors import GeodataImportError, HTTPError, ParsingError
from ....shared.http.client import HTTPClient
from ....shared.http.rate_limiter import RateLimiter
from ....shared.logging.config import get_logger
from ...geo.domain.models import Coordinate
from ..domain.models import RawElement

logger = get_logger(__name__)

DEFAULT_ENDPOINT = "https://overpass-api.de/api/interpreter"

# Overpass QL のサーバー側タイムアウト（秒）
QUERY_TIMEOUT_SECONDS = 25

# (要素種別, タグ条件) の組。クエリはこの順に組み立てる
FEATURE_SELECTORS: list[tuple[str, str]] = [
    ("node", '["entrance"="yes"]["wheelchair"="yes"]'),
    ("node", '["highway"="steps"]["ramp:wheelchair"="yes"]'),
    ("way", '["highway"="steps"]["ramp:wheelchair"="yes"]'),
    ("node", '["highway"="elevator"]'),
    ("node", '["amenity"="parking"]["wheelchair"="yes"]'),
    ("way", '["amenity"="parking"]["wheelchair"="yes"]'),
    ("node", '["amenity"="toilets"]["wheelchair"="yes"]'),
    ("node", '["tactile_paving"="yes"]'),
]


def build_overpass_query(center: Coordinate, radius_meters: float) -> str:
    """
    アクセシビリティ設備を検索する Overpass QL を組み立てる

    Args:
        center: 検索中心
        radius_meters: 半径（メートル）

    Returns:
        str: Overpass QL クエリ
    """
    around = f"(around:{radius_meters:g},{center.latitude},{center.longitude})"
    statements = "\n".join(
        f"  {element}{selector}{around};" for element, selector in FEATURE_SELECTORS
    )

    # way は center で代表点を返させる
    return (
        f"[out:json][timeout:{QUERY_TIMEOUT_SECONDS}];\n"
        f"(\n{statements}\n);\n"
        "out center body;"
    )


class OverpassClient:
    """Overpass API から半径内のタグ付き要素を取得するクライアント"""

    def __init__(
        self,
        http_client: Optional[HTTPClient] = None,
        endpoint: str = DEFAULT_ENDPOINT,
        rate_limiter: Optional[RateLimiter] = None,
    ) -> None:
        """
        Args:
            http_client: HTTPクライアント（Noneの場合は新規作成）
            endpoint: Overpass APIのエンドポイント
            rate_limiter: レート制限（Noneの場合は1リクエスト/秒）
        """
        self.http_client = http_client or HTTPClient()
        self.endpoint = endpoint
        self.rate_limiter = rate_limiter or RateLimiter(requests_per_second=1.0)

        logger.info(f"OverpassClient initialized: {self.endpoint}")

    def fetch_elements(self, center: Coordinate, radius_meters: float) -> list[RawElement]:
        """
        半径内のアクセシビリティ関連要素を取得

        Args:
            center: 検索中心
            radius_meters: 半径（メートル）

        Returns:
            list[RawElement]: タグ付き要素のリスト

        Raises:
            GeodataImportError: 通信・応答の解析に失敗した場合
        """
        query = build_overpass_query(center, radius_meters)

        self.rate_limiter.wait()

        try:
            logger.info(f"Querying Overpass around {center} r={radius_meters}m")
            payload: Any = self.http_client.post_json(self.endpoint, data={"data": query})
        except HTTPError as e:
            raise GeodataImportError(f"Overpass request failed: {e}") from e
        except ParsingError as e:
            raise GeodataImportError(f"Overpass returned invalid JSON: {e}") from e

        if not isinstance(payload, dict) or not isinstance(payload.get("elements"), list):
            raise GeodataImportError("Overpass response has no 'elements' list")

        elements = [
            RawElement.from_overpass(self._with_center(element))
            for element in payload["elements"]
            if isinstance(element, dict)
        ]

        logger.info(f"Overpass returned {len(elements)} elements")

        return elements

    @staticmethod
    def _with_center(element: dict[str, Any]) -> dict[str, Any]:
        """way の代表点（center）を lat/lon として扱う"""
        center = element.get("center")
        if "lat" not in element and isinstance(center, dict):
            return {**element, "lat": center.get("lat"), "lon": center.get("lon")}
        return element

    def close(self) -> None:
        """リソースをクリーンアップ"""
        self.http_client.close()
