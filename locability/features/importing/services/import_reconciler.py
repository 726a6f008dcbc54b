"""取り込みデータの重複排除とマージ"""

from typing import Iterable

from ....shared.logging.config import get_logger
from ...geo.services.distance import distance_meters
from ...spots.domain.models import AccessibilitySpot
from ...spots.store.spot_store import SpotStore

logger = get_logger(__name__)

DEFAULT_THRESHOLD_METERS = 10.0


class ImportReconciler:
    """
    外部データの候補を既存スポットと照合してストアに追加する

    照合は座標のみで行う（タイトル・種別は比較しない）。
    そのため閾値より近い別々の設備は1件にまとめられる。
    """

    def __init__(self, threshold_meters: float = DEFAULT_THRESHOLD_METERS) -> None:
        """
        Args:
            threshold_meters: 重複とみなす距離（メートル未満）
        """
        self.threshold_meters = threshold_meters
        self.last_duplicates_skipped = 0

    def is_duplicate(
        self, candidate: AccessibilitySpot, existing: Iterable[AccessibilitySpot]
    ) -> bool:
        """既存スポットのいずれかが閾値未満の距離にあるか"""
        return any(
            distance_meters(candidate.coordinate, spot.coordinate) < self.threshold_meters
            for spot in existing
        )

    def reconcile(
        self, incoming: Iterable[AccessibilitySpot], store: SpotStore
    ) -> list[AccessibilitySpot]:
        """
        重複しない候補だけをストアに追加

        同じ取り込みで先に追加した候補も照合対象になる。

        Args:
            incoming: 取り込み候補（この順で追加する）
            store: スポットストア

        Returns:
            list[AccessibilitySpot]: 実際に追加したスポット
        """
        added: list[AccessibilitySpot] = []
        self.last_duplicates_skipped = 0

        for candidate in incoming:
            if self.is_duplicate(candidate, store.all()):
                self.last_duplicates_skipped += 1
                logger.debug(f"Skipping near-duplicate import at {candidate.coordinate}")
                continue

            store.add(candidate)
            added.append(candidate)

        logger.info(
            f"Reconciled import: {len(added)} added, "
            f"{self.last_duplicates_skipped} near-duplicates skipped"
        )

        return added
