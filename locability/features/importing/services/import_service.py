"""外部ジオデータ取り込みサービス"""

import threading
import time
import uuid
from typing import Optional

from ....shared.exceptions.errors import GeodataImportError
from ....shared.logging.config import get_logger
from ....shared.utils.datetime_utils import format_duration, now_utc
from ...geo.domain.models import Coordinate
from ...spots.store.spot_store import SpotStore
from ..domain.models import ImportResult, ImportStatus
from ..parsers.overpass_parser import OverpassParser
from ..providers.overpass_client import OverpassClient
from .import_reconciler import ImportReconciler

logger = get_logger(__name__)


class ImportService:
    """
    取得 → 変換 → 重複排除 → ストア追加 を行うサービス

    取得中に新しい取り込みが開始された場合、古い取り込みは
    取り消し扱いとなり、取得結果をストアに反映しない。
    """

    def __init__(
        self,
        overpass_client: OverpassClient,
        store: SpotStore,
        reconciler: Optional[ImportReconciler] = None,
        parser: Optional[OverpassParser] = None,
        default_radius_meters: float = 1000.0,
    ) -> None:
        """
        Args:
            overpass_client: Overpassクライアント
            store: スポットストア
            reconciler: 重複排除（Noneの場合は10メートル閾値）
            parser: 要素パーサー（Noneの場合は既定ルール）
            default_radius_meters: 半径省略時の取り込み半径（メートル）
        """
        self.overpass_client = overpass_client
        self.store = store
        self.reconciler = reconciler or ImportReconciler()
        self.parser = parser or OverpassParser()
        self.default_radius_meters = default_radius_meters

        self._generation = 0
        self._generation_lock = threading.Lock()
        # 変換・照合・追加は1件ずつ直列に行う
        self._merge_lock = threading.Lock()

        logger.info(f"ImportService initialized: default_radius={default_radius_meters}m")

    def cancel_pending(self) -> None:
        """実行中の取り込みを取り消す（結果をストアに反映させない）"""
        with self._generation_lock:
            self._generation += 1
        logger.info("Pending imports cancelled")

    def import_around(
        self,
        center: Coordinate,
        radius_meters: Optional[float] = None,
        raise_on_error: bool = False,
    ) -> ImportResult:
        """
        中心周辺の外部データを取り込む

        Args:
            center: 取り込み中心
            radius_meters: 半径（Noneの場合はデフォルト半径）
            raise_on_error: 取得失敗時に例外を送出するか

        Returns:
            ImportResult: 取り込み結果

        Raises:
            GeodataImportError: raise_on_error=True で取得に失敗した場合
        """
        radius = self.default_radius_meters if radius_meters is None else radius_meters
        generation = self._next_generation()
        started = time.monotonic()

        result = ImportResult(
            run_id=f"import_{uuid.uuid4().hex[:8]}",
            center=center,
            radius_meters=radius,
            started_at=now_utc(),
            status=ImportStatus.RUNNING,
        )

        logger.info(f"Starting import {result.run_id} around {center} r={radius}m")

        try:
            elements = self.overpass_client.fetch_elements(center, radius)
        except GeodataImportError as e:
            result.status = ImportStatus.FAILED
            result.errors.append(str(e))
            self._finish(result, started)
            logger.error(f"Import {result.run_id} failed, store unchanged: {e}")
            if raise_on_error:
                raise
            return result

        result.fetched = len(elements)

        with self._merge_lock:
            if self._is_superseded(generation):
                result.status = ImportStatus.CANCELLED
                self._finish(result, started)
                logger.info(f"Import {result.run_id} superseded by a newer import, discarded")
                return result

            candidates = self.parser.parse(elements)
            result.malformed_skipped = self.parser.malformed_count

            added = self.reconciler.reconcile(candidates, self.store)
            result.added = len(added)
            result.duplicates_skipped = self.reconciler.last_duplicates_skipped

        result.status = ImportStatus.SUCCESS
        self._finish(result, started)

        logger.info(
            f"Import {result.run_id} completed in {format_duration(result.duration_seconds or 0)}: "
            f"fetched={result.fetched}, added={result.added}, "
            f"duplicates={result.duplicates_skipped}, malformed={result.malformed_skipped}"
        )

        return result

    def _next_generation(self) -> int:
        with self._generation_lock:
            self._generation += 1
            return self._generation

    def _is_superseded(self, generation: int) -> bool:
        with self._generation_lock:
            return generation != self._generation

    @staticmethod
    def _finish(result: ImportResult, started: float) -> None:
        result.completed_at = now_utc()
        result.duration_seconds = round(time.monotonic() - started, 3)
