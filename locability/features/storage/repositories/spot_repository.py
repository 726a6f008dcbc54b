"""スポットのリモートリポジトリ（Firestore同期）"""
from typing import Any, Callable

from ....shared.exceptions.errors import ParsingError
from ....shared.logging.config import get_logger
from ...spots.domain.models import AccessibilitySpot
from ..clients.firestore_client import FirestoreClient

logger = get_logger(__name__)

VOTE_FIELDS = ("upvotes", "downvotes")


class SpotRepository:
    """スポットデータのリポジトリ"""

    COLLECTION_NAME = "accessibility_spots"

    def __init__(
        self, firestore_client: FirestoreClient, collection_name: str = COLLECTION_NAME
    ) -> None:
        """
        SpotRepositoryを初期化

        Args:
            firestore_client: Firestoreクライアント
            collection_name: コレクション名
        """
        self.client = firestore_client
        self.collection_name = collection_name
        logger.info(f"SpotRepository initialized: {collection_name}")

    def upload(self, spot: AccessibilitySpot) -> None:
        """
        スポットをアップロード（ドキュメントIDはスポットID）

        Args:
            spot: スポット

        Raises:
            StorageError: 保存に失敗した場合
        """
        self.client.set_document(self.collection_name, spot.id, spot.to_firestore_dict())
        logger.info(f"Spot uploaded: {spot.id} - {spot.title}")

    def update(self, spot: AccessibilitySpot) -> None:
        """
        編集内容を反映（投票数は upvote/downvote でのみ変更するため書き込まない）

        Raises:
            StorageError: 保存に失敗した場合
        """
        data = spot.to_firestore_dict()
        for field_name in VOTE_FIELDS:
            data.pop(field_name)

        self.client.set_document(self.collection_name, spot.id, data, merge=True)
        logger.info(f"Spot updated remotely: {spot.id} - {spot.title}")

    def fetch_all(self) -> list[AccessibilitySpot]:
        """
        全スポットを取得（不正なドキュメントはスキップ）

        Returns:
            list[AccessibilitySpot]: スポットのリスト

        Raises:
            StorageError: 取得に失敗した場合
        """
        documents = self.client.stream_documents(self.collection_name)
        spots = self._parse_documents(documents)

        logger.info(f"Downloaded {len(spots)} spots from {self.collection_name}")
        return spots

    def listen(self, callback: Callable[[list[AccessibilitySpot]], None]) -> Any:
        """
        スポットの変更を監視

        Args:
            callback: 変更のたびに全スポットで呼ばれる

        Returns:
            Watch: 監視ハンドル（unsubscribe() で停止）
        """

        def on_documents(documents: list[tuple[str, dict[str, Any]]]) -> None:
            spots = self._parse_documents(documents)
            logger.info(f"Real-time update: {len(spots)} spots")
            callback(spots)

        return self.client.watch_collection(self.collection_name, on_documents)

    def upvote(self, spot_id: str) -> None:
        """スポットに賛成票を入れる"""
        self.client.increment_field(self.collection_name, spot_id, "upvotes")
        logger.info(f"Upvoted spot: {spot_id}")

    def downvote(self, spot_id: str) -> None:
        """スポットに反対票を入れる"""
        self.client.increment_field(self.collection_name, spot_id, "downvotes")
        logger.info(f"Downvoted spot: {spot_id}")

    def delete(self, spot_id: str) -> None:
        """
        スポットを削除

        Args:
            spot_id: スポットID
        """
        self.client.delete_document(self.collection_name, spot_id)
        logger.info(f"Spot deleted: {spot_id}")

    def _parse_documents(
        self, documents: list[tuple[str, dict[str, Any]]]
    ) -> list[AccessibilitySpot]:
        spots = []
        for document_id, data in documents:
            try:
                spots.append(AccessibilitySpot.from_firestore_dict(data or {}))
            except ParsingError as e:
                logger.warning(f"Skipping invalid spot data {document_id}: {e}")
        return spots
