"""アプリケーションオーケストレーター"""

import os
from typing import Any, Optional

from ...infrastructure.config.settings import Settings
from ...shared.exceptions.errors import ConfigurationError
from ...shared.http.client import HTTPClient
from ...shared.http.rate_limiter import RateLimiter
from ...shared.logging.config import get_logger
from ..geo.domain.models import Coordinate
from ..geo.services.proximity import filter_spots, near
from ..importing.classifiers.text_classifier import Classification, TextClassifier
from ..importing.domain.models import ImportResult
from ..importing.providers.overpass_client import OverpassClient
from ..importing.services.import_reconciler import ImportReconciler
from ..importing.services.import_service import ImportService
from ..scoring.domain.models import ScoreBreakdown
from ..scoring.services.score_engine import AreaScoreService
from ..spots.domain.enums import AccessibilityFilter
from ..spots.domain.models import AccessibilitySpot, NearbySpot
from ..spots.store.persistence import (
    JsonFileSpotPersistence,
    NullSpotPersistence,
    SpotPersistence,
)
from ..spots.store.spot_store import SpotStore
from ..storage.clients.firestore_client import FirestoreClient
from ..storage.repositories.spot_repository import SpotRepository

logger = get_logger(__name__)


class AppOrchestrator:
    """
    アプリケーションオーケストレーター

    各Featureを統合し、依存性注入を行う
    """

    def __init__(
        self,
        settings: Settings,
        store: Optional[SpotStore] = None,
        overpass_client: Optional[OverpassClient] = None,
        spot_repository: Optional[SpotRepository] = None,
    ) -> None:
        """
        Args:
            settings: アプリケーション設定
            store: スポットストア（Noneの場合は設定から作成し、保存済みデータを読み込む）
            overpass_client: Overpassクライアント（Noneの場合は設定から作成）
            spot_repository: リモートリポジトリ（Noneの場合は設定から作成、無効時はNone）
        """
        self.settings = settings

        if store is None:
            store = SpotStore(persistence=self._create_persistence())
            store.load()
        self.store = store

        self.overpass_client = overpass_client or self._create_overpass_client()

        self.import_service = ImportService(
            overpass_client=self.overpass_client,
            store=self.store,
            reconciler=ImportReconciler(threshold_meters=settings.dedup_threshold_meters),
            default_radius_meters=settings.import_radius_meters,
        )

        self.score_service = AreaScoreService(
            store=self.store,
            default_radius_meters=settings.score_radius_meters,
        )

        self.text_classifier = TextClassifier()

        self.spot_repository = spot_repository or self._create_spot_repository()
        self._watch: Any = None

        logger.info("AppOrchestrator initialized")

    # --- スポット操作 ---

    def submit_spot(self, spot: AccessibilitySpot) -> AccessibilitySpot:
        """
        ユーザー投稿のスポットを追加し、リモート同期が有効ならアップロード

        Raises:
            StorageError: アップロードに失敗した場合（ローカルには追加済み）
        """
        self.store.add(spot)

        if self.spot_repository:
            self.spot_repository.upload(spot)

        return spot

    def update_spot(self, spot: AccessibilitySpot) -> bool:
        """
        スポットを更新

        Returns:
            bool: 更新した場合True、該当なしの場合False

        Raises:
            StorageError: アップロードに失敗した場合（ローカルは更新済み）
        """
        updated = self.store.update(spot)

        if updated and self.spot_repository:
            stored = self.store.get(spot.id)
            if stored is not None:
                self.spot_repository.update(stored)

        return updated

    def remove_spot(self, spot_id: str) -> bool:
        """
        スポットを削除

        Returns:
            bool: 削除した場合True、該当なしの場合False

        Raises:
            StorageError: リモート削除に失敗した場合（ローカルは削除済み）
        """
        removed = self.store.remove(spot_id)

        if removed and self.spot_repository:
            self.spot_repository.delete(spot_id)

        return removed

    def vote(self, spot_id: str, up: bool = True) -> bool:
        """
        スポットに投票（リモート同期が無効な場合は何もしない）

        Returns:
            bool: 投票を送信した場合True
        """
        if self.spot_repository is None:
            logger.info("Remote sync disabled, vote ignored")
            return False

        if up:
            self.spot_repository.upvote(spot_id)
        else:
            self.spot_repository.downvote(spot_id)
        return True

    def suggest_type(self, text: str) -> Classification:
        """投稿フォームの自由記述から種別を推定（音声入力の書き起こしを含む）"""
        return self.text_classifier.classify(text)

    # --- 読み取り ---

    def spots_near(
        self,
        center: Coordinate,
        radius_meters: float,
        spot_filter: Optional[AccessibilityFilter] = None,
    ) -> list[NearbySpot]:
        """フィルター適用後のスポットを近い順に返す"""
        return near(center, radius_meters, filter_spots(self.store.all(), spot_filter))

    def area_score(
        self, center: Coordinate, radius_meters: Optional[float] = None
    ) -> ScoreBreakdown:
        """エリアスコアの内訳を計算"""
        return self.score_service.breakdown(center, radius_meters)

    # --- 外部データ・同期 ---

    def import_around(
        self, center: Coordinate, radius_meters: Optional[float] = None
    ) -> ImportResult:
        """外部ジオデータを取り込む"""
        return self.import_service.import_around(center, radius_meters)

    def sync_from_remote(self) -> int:
        """
        リモートの全スポットでローカルの一覧を置き換える

        取得に失敗した場合はローカルの一覧を変更しない。

        Returns:
            int: 取得したスポット数（リモート同期が無効な場合は0）

        Raises:
            StorageError: 取得に失敗した場合
        """
        if self.spot_repository is None:
            logger.info("Remote sync disabled, skipping sync")
            return 0

        spots = self.spot_repository.fetch_all()
        self.store.replace_all(spots)
        return len(spots)

    def start_listening(self) -> bool:
        """
        リモートの変更をローカルの一覧に反映し続ける

        Returns:
            bool: 監視を開始した場合True
        """
        if self.spot_repository is None or self._watch is not None:
            return False

        self._watch = self.spot_repository.listen(self.store.replace_all)
        return True

    def stop_listening(self) -> None:
        """リモートの変更監視を停止"""
        if self._watch is not None:
            self._watch.unsubscribe()
            self._watch = None
            logger.info("Stopped listening for remote changes")

    def close(self) -> None:
        """リソースをクリーンアップ"""
        self.stop_listening()
        self.import_service.cancel_pending()
        self.overpass_client.close()
        logger.info("AppOrchestrator closed")

    # --- 生成 ---

    def _create_persistence(self) -> SpotPersistence:
        if not self.settings.local_persistence_enabled:
            logger.info("Local persistence is disabled")
            return NullSpotPersistence()

        return JsonFileSpotPersistence(self.settings.local_storage_dir)

    def _create_overpass_client(self) -> OverpassClient:
        http_client = HTTPClient(
            timeout=self.settings.overpass_timeout,
            max_retries=self.settings.overpass_retry,
            user_agent=self.settings.overpass_user_agent,
        )

        return OverpassClient(
            http_client=http_client,
            endpoint=self.settings.overpass_endpoint,
            rate_limiter=RateLimiter(
                requests_per_second=self.settings.overpass_requests_per_second
            ),
        )

    def _create_spot_repository(self) -> Optional[SpotRepository]:
        """
        リモートリポジトリを作成

        Returns:
            Optional[SpotRepository]: リモートリポジトリ（無効の場合はNone）
        """
        if not self.settings.remote_sync_enabled:
            logger.info("Remote sync is disabled")
            return None

        if not self.settings.gcp_project_id:
            raise ConfigurationError("gcp_project_id is required when remote sync is enabled")

        # Firestoreエミュレータの設定を環境変数に反映
        if self.settings.firestore_emulator_host:
            os.environ["FIRESTORE_EMULATOR_HOST"] = self.settings.firestore_emulator_host

        firestore_client = FirestoreClient(
            project_id=self.settings.gcp_project_id,
            database_id=self.settings.firestore_database_id,
        )

        return SpotRepository(
            firestore_client,
            collection_name=self.settings.firestore_spots_collection,
        )
