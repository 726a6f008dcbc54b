"""Firestoreクライアント"""
import os
from typing import Any, Callable, Optional

from google.cloud import firestore

from ....shared.exceptions.errors import StorageError
from ....shared.logging.config import get_logger

logger = get_logger(__name__)


class FirestoreClient:
    """Firestore操作クライアント"""

    def __init__(
        self,
        project_id: Optional[str],
        database_id: str = "(default)",
        client: Optional[firestore.Client] = None,
    ) -> None:
        """
        Firestoreクライアントを初期化

        Args:
            project_id: GCPプロジェクトID
            database_id: データベースID（デフォルトは"(default)"）
            client: 既存のfirestore.Client（テスト用、Noneの場合は新規作成）
        """
        self.project_id = project_id
        self.database_id = database_id

        if client is not None:
            self.client = client
            return

        emulator_host = os.environ.get("FIRESTORE_EMULATOR_HOST")

        try:
            self.client = firestore.Client(project=project_id, database=database_id)

            if emulator_host:
                logger.info(
                    f"Firestore client initialized (EMULATOR MODE): "
                    f"host={emulator_host}, project={project_id}, database={database_id}"
                )
            else:
                logger.info(
                    f"Firestore client initialized: project={project_id}, database={database_id}"
                )
        except Exception as e:
            raise StorageError(f"Failed to initialize Firestore client: {e}") from e

    def get_collection(self, collection_path: str) -> firestore.CollectionReference:
        """
        コレクション参照を取得

        Args:
            collection_path: コレクションパス

        Returns:
            CollectionReference: コレクション参照
        """
        return self.client.collection(collection_path)

    def set_document(
        self,
        collection_path: str,
        document_id: str,
        data: dict[str, Any],
        merge: bool = False,
    ) -> None:
        """
        ドキュメントを作成または上書き

        Args:
            collection_path: コレクションパス
            document_id: ドキュメントID
            data: ドキュメントデータ
            merge: Trueの場合、data に含まれないフィールドは既存の値を残す
        """
        try:
            self.get_collection(collection_path).document(document_id).set(data, merge=merge)
            logger.debug(f"Document {document_id} written to {collection_path}")

        except Exception as e:
            raise StorageError(
                f"Failed to write document {document_id} to {collection_path}: {e}"
            ) from e

    def stream_documents(self, collection_path: str) -> list[tuple[str, dict[str, Any]]]:
        """
        コレクションの全ドキュメントを取得

        Args:
            collection_path: コレクションパス

        Returns:
            list[tuple[str, dict[str, Any]]]: (ドキュメントID, データ) のリスト
        """
        try:
            docs = self.get_collection(collection_path).stream()
            return [(doc.id, doc.to_dict()) for doc in docs if doc.exists]

        except Exception as e:
            raise StorageError(f"Failed to stream documents from {collection_path}: {e}") from e

    def increment_field(
        self, collection_path: str, document_id: str, field_name: str, amount: int = 1
    ) -> None:
        """
        数値フィールドをアトミックに加算

        Args:
            collection_path: コレクションパス
            document_id: ドキュメントID
            field_name: フィールド名
            amount: 加算量
        """
        try:
            doc_ref = self.get_collection(collection_path).document(document_id)
            doc_ref.update({field_name: firestore.Increment(amount)})
            logger.debug(f"Document {document_id} {field_name} += {amount}")

        except Exception as e:
            raise StorageError(
                f"Failed to increment {field_name} of {document_id} in {collection_path}: {e}"
            ) from e

    def delete_document(self, collection_path: str, document_id: str) -> None:
        """
        ドキュメントを削除

        Args:
            collection_path: コレクションパス
            document_id: ドキュメントID
        """
        try:
            self.get_collection(collection_path).document(document_id).delete()
            logger.info(f"Document {document_id} deleted from {collection_path}")

        except Exception as e:
            raise StorageError(
                f"Failed to delete document {document_id} from {collection_path}: {e}"
            ) from e

    def watch_collection(
        self,
        collection_path: str,
        callback: Callable[[list[tuple[str, dict[str, Any]]]], None],
    ) -> Any:
        """
        コレクションの変更を監視

        Args:
            collection_path: コレクションパス
            callback: スナップショットごとに (ドキュメントID, データ) のリストで呼ばれる

        Returns:
            Watch: 監視ハンドル（unsubscribe() で停止）
        """

        def on_snapshot(snapshot: list[Any], changes: Any, read_time: Any) -> None:
            try:
                callback([(doc.id, doc.to_dict()) for doc in snapshot if doc.exists])
            except Exception as e:
                # リスナースレッドで例外を送出すると監視が止まる
                logger.error(f"Firestore listener callback failed: {e}", exc_info=True)

        try:
            watch = self.get_collection(collection_path).on_snapshot(on_snapshot)
            logger.info(f"Watching collection {collection_path}")
            return watch

        except Exception as e:
            raise StorageError(f"Failed to watch {collection_path}: {e}") from e
