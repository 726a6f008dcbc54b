"""アクセシビリティスポットのドメインモデル"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from ....shared.exceptions.errors import ParsingError
from ....shared.utils.datetime_utils import now_utc, parse_datetime, to_iso
from ...geo.domain.models import Coordinate
from .enums import AccessibilityFilter, SpotStatus, SpotType

# 永続化レコードの必須フィールド
REQUIRED_FIELDS = ("id", "title", "description", "type", "status", "latitude", "longitude")


def generate_spot_id() -> str:
    """スポットIDを生成（UUID文字列）"""
    return str(uuid.uuid4()).upper()


@dataclass(eq=False)
class AccessibilitySpot:
    """
    アクセシビリティスポット

    同一性は id のみで判定する（座標やタイトルは比較しない）。
    クエリ中心からの距離は持たず、近傍検索の結果は NearbySpot で包む。
    """

    title: str
    description: str
    type: SpotType
    status: SpotStatus
    coordinate: Coordinate
    id: str = field(default_factory=generate_spot_id)
    created_at: datetime = field(default_factory=now_utc)
    photo_url: Optional[str] = None  # 外部に保存された写真への参照

    # リモート同期の投票数
    upvotes: int = 0
    downvotes: int = 0

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AccessibilitySpot):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    @property
    def latitude(self) -> float:
        return self.coordinate.latitude

    @property
    def longitude(self) -> float:
        return self.coordinate.longitude

    def matches_filter(self, spot_filter: AccessibilityFilter) -> bool:
        """フィルターバーの条件に一致するか"""
        return self.type in spot_filter.spot_types

    def to_dict(self) -> dict[str, Any]:
        """ローカル保存用の辞書に変換（写真参照・投票数は含めない）"""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "type": self.type.value,
            "status": self.status.value,
            "latitude": self.coordinate.latitude,
            "longitude": self.coordinate.longitude,
            "created_at": to_iso(self.created_at),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AccessibilitySpot":
        """
        ローカル保存データからスポットを生成

        Raises:
            ParsingError: 必須フィールド欠落・未知の列挙値の場合
        """
        _require_fields(data, REQUIRED_FIELDS + ("created_at",))

        return cls(
            id=str(data["id"]),
            title=data["title"],
            description=data["description"],
            type=SpotType.from_label(data["type"]),
            status=SpotStatus.from_label(data["status"]),
            coordinate=_parse_coordinate(data),
            created_at=_parse_created_at(data["created_at"]),
        )

    def to_firestore_dict(self) -> dict[str, Any]:
        """Firestore保存用の辞書に変換"""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "type": self.type.value,
            "status": self.status.value,
            "latitude": self.coordinate.latitude,
            "longitude": self.coordinate.longitude,
            "createdAt": self.created_at,
            "photoURL": self.photo_url or "",
            "upvotes": self.upvotes,
            "downvotes": self.downvotes,
        }

    @classmethod
    def from_firestore_dict(cls, data: dict[str, Any]) -> "AccessibilitySpot":
        """
        Firestoreのデータからスポットを生成

        Raises:
            ParsingError: 必須フィールド欠落・未知の列挙値の場合
        """
        _require_fields(data, REQUIRED_FIELDS)

        created_at = data.get("createdAt")

        return cls(
            id=str(data["id"]),
            title=data["title"],
            description=data["description"],
            type=SpotType.from_label(data["type"]),
            status=SpotStatus.from_label(data["status"]),
            coordinate=_parse_coordinate(data),
            created_at=_parse_created_at(created_at) if created_at is not None else now_utc(),
            photo_url=data.get("photoURL") or None,
            upvotes=_parse_vote_count(data, "upvotes"),
            downvotes=_parse_vote_count(data, "downvotes"),
        )


@dataclass(frozen=True)
class NearbySpot:
    """近傍検索の結果（スポットとクエリ中心からの距離）"""

    spot: AccessibilitySpot
    distance_meters: float

    def to_dict(self) -> dict[str, Any]:
        """APIレスポンス用の辞書に変換"""
        data = self.spot.to_dict()
        data["photo_url"] = self.spot.photo_url
        data["distance_meters"] = round(self.distance_meters, 1)
        return data


def _require_fields(data: dict[str, Any], fields: tuple[str, ...]) -> None:
    missing = [name for name in fields if data.get(name) is None]
    if missing:
        raise ParsingError(f"Missing required fields: {', '.join(missing)}")


def _parse_coordinate(data: dict[str, Any]) -> Coordinate:
    try:
        return Coordinate(
            latitude=float(data["latitude"]),
            longitude=float(data["longitude"]),
        )
    except (TypeError, ValueError) as e:
        raise ParsingError(f"Invalid coordinate: {e}") from e


def _parse_vote_count(data: dict[str, Any], name: str) -> int:
    value = data.get(name)
    if value is None:
        return 0
    # bool は int のサブクラスなので除外
    if isinstance(value, bool):
        raise ParsingError(f"Invalid {name}: {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ParsingError(f"Invalid {name}: {value!r}") from e


def _parse_created_at(value: Any) -> datetime:
    try:
        return parse_datetime(value)
    except ValueError as e:
        raise ParsingError(f"Invalid created_at: {e}") from e
