"""外部ジオデータ取り込みのドメインモデル"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from ...geo.domain.models import Coordinate


class ImportStatus(str, Enum):
    """取り込みのステータス"""

    PENDING = "pending"  # 実行待ち
    RUNNING = "running"  # 実行中
    SUCCESS = "success"  # 成功
    FAILED = "failed"  # 失敗（ストアは変更なし）
    CANCELLED = "cancelled"  # 後続の取り込みに置き換えられた


@dataclass
class RawElement:
    """外部サービスが返すタグ付き要素"""

    element_id: Optional[str]
    latitude: Optional[float]
    longitude: Optional[float]
    tags: Optional[dict[str, str]]

    @classmethod
    def from_overpass(cls, data: dict[str, Any]) -> "RawElement":
        """Overpass APIの要素から生成（欠落フィールドはNoneのまま）"""
        element_type = data.get("type", "node")
        element_id = data.get("id")
        tags = data.get("tags")

        return cls(
            element_id=f"{element_type}/{element_id}" if element_id is not None else None,
            latitude=data.get("lat"),
            longitude=data.get("lon"),
            tags=tags if isinstance(tags, dict) else None,
        )


@dataclass
class ImportResult:
    """取り込み実行結果"""

    run_id: str
    center: Coordinate
    radius_meters: float
    started_at: datetime
    completed_at: Optional[datetime] = None
    status: ImportStatus = ImportStatus.PENDING
    fetched: int = 0  # 外部サービスから取得した要素数
    added: int = 0  # ストアに追加したスポット数
    duplicates_skipped: int = 0  # 既存スポットと近接していたため除外した数
    malformed_skipped: int = 0  # 解析できずに除外した要素数
    errors: list[str] = field(default_factory=list)
    duration_seconds: Optional[float] = None

    def to_dict(self) -> dict[str, Any]:
        """APIレスポンス用の辞書に変換"""
        return {
            "run_id": self.run_id,
            "latitude": self.center.latitude,
            "longitude": self.center.longitude,
            "radius_meters": self.radius_meters,
            "started_at": self.started_at.isoformat(),
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "status": self.status.value,
            "fetched": self.fetched,
            "added": self.added,
            "duplicates_skipped": self.duplicates_skipped,
            "malformed_skipped": self.malformed_skipped,
            "errors": self.errors,
            "duration_seconds": self.duration_seconds,
        }
