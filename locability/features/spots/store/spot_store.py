"""スポットストア"""

import dataclasses
import threading
from typing import Iterable, Optional

from ....shared.logging.config import get_logger
from ....shared.utils.text import truncate_text
from ..domain.models import AccessibilitySpot
from .persistence import NullSpotPersistence, SpotPersistence

logger = get_logger(__name__)


class SpotStore:
    """
    セッション中のスポット一覧を保持するストア

    - 変更操作（追加・削除・更新）はロックで直列化する
    - 変更のたびに一覧全体を永続化する（失敗はログのみで呼び出し元には伝えない）
    - 重複チェックは行わない（取り込み側・投稿側の責務）
    """

    def __init__(
        self,
        persistence: Optional[SpotPersistence] = None,
        spots: Optional[Iterable[AccessibilitySpot]] = None,
    ) -> None:
        """
        Args:
            persistence: 永続化ポート（Noneの場合は保存しない）
            spots: 初期スポット
        """
        self.persistence = persistence or NullSpotPersistence()
        self._spots: list[AccessibilitySpot] = list(spots or [])
        self._lock = threading.RLock()

        logger.info(
            f"SpotStore initialized: {len(self._spots)} spots, "
            f"persistence={self.persistence.__class__.__name__}"
        )

    def add(self, spot: AccessibilitySpot) -> None:
        """
        スポットを追加

        Args:
            spot: 追加するスポット
        """
        with self._lock:
            self._spots.append(spot)
            self._persist()

        logger.info(f"Spot added: {spot.id} - {truncate_text(spot.title, 40)}")

    def remove(self, spot_id: str) -> bool:
        """
        IDが一致するスポットを削除

        Args:
            spot_id: スポットID

        Returns:
            bool: 削除した場合True、該当なしの場合False（何もしない）
        """
        with self._lock:
            remaining = [spot for spot in self._spots if spot.id != spot_id]
            if len(remaining) == len(self._spots):
                logger.debug(f"Remove ignored, spot not found: {spot_id}")
                return False

            self._spots = remaining
            self._persist()

        logger.info(f"Spot removed: {spot_id}")
        return True

    def update(self, spot: AccessibilitySpot) -> bool:
        """
        IDが一致するスポットを置き換える

        id・created_at・投票数は保存済みの値を維持する。

        Args:
            spot: 更新後のスポット

        Returns:
            bool: 更新した場合True、該当なしの場合False（何もしない）
        """
        with self._lock:
            for index, existing in enumerate(self._spots):
                if existing.id == spot.id:
                    self._spots[index] = dataclasses.replace(
                        spot,
                        id=existing.id,
                        created_at=existing.created_at,
                        upvotes=existing.upvotes,
                        downvotes=existing.downvotes,
                    )
                    self._persist()
                    break
            else:
                logger.debug(f"Update ignored, spot not found: {spot.id}")
                return False

        logger.info(f"Spot updated: {spot.id} - {spot.status.value}")
        return True

    def get(self, spot_id: str) -> Optional[AccessibilitySpot]:
        """
        IDでスポットを取得

        Returns:
            Optional[AccessibilitySpot]: スポット（存在しない場合はNone）
        """
        with self._lock:
            for spot in self._spots:
                if spot.id == spot_id:
                    return spot
        return None

    def all(self) -> list[AccessibilitySpot]:
        """現在のスポット一覧のスナップショットを返す（追加順）"""
        with self._lock:
            return list(self._spots)

    def replace_all(self, spots: Iterable[AccessibilitySpot]) -> None:
        """
        スポット一覧全体を置き換える（リモート同期時）

        Args:
            spots: 新しいスポット一覧
        """
        with self._lock:
            self._spots = list(spots)
            self._persist()
            count = len(self._spots)

        logger.info(f"Spot collection replaced: {count} spots")

    def load(self) -> int:
        """
        永続化済みのスポット一覧を読み込む

        読み込みに失敗した場合は現在の一覧を維持する。

        Returns:
            int: 読み込んだスポット数
        """
        try:
            spots = self.persistence.load()
        except Exception as e:
            logger.error(f"Failed to load persisted spots: {e}")
            return 0

        with self._lock:
            self._spots = spots

        logger.info(f"Loaded {len(spots)} persisted spots")
        return len(spots)

    def _persist(self) -> None:
        """一覧全体を保存（失敗してもログのみ）"""
        try:
            self.persistence.save(list(self._spots))
        except Exception as e:
            logger.error(f"Failed to persist spots: {e}")

    def __len__(self) -> int:
        with self._lock:
            return len(self._spots)

    def __contains__(self, spot_id: object) -> bool:
        return isinstance(spot_id, str) and self.get(spot_id) is not None
