"""スポット一覧のローカル永続化"""

import json
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Optional

from ....shared.exceptions.errors import ParsingError, StorageError
from ....shared.logging.config import get_logger
from ..domain.models import AccessibilitySpot

logger = get_logger(__name__)

# スポット一覧を保存するキー（ファイル名）
STORAGE_KEY = "accessibility_spots"


def serialize_spots(spots: list[AccessibilitySpot]) -> str:
    """スポット一覧をJSON文字列に変換"""
    return json.dumps([spot.to_dict() for spot in spots], ensure_ascii=False)


def deserialize_spots(blob: str) -> list[AccessibilitySpot]:
    """
    JSON文字列からスポット一覧を復元

    不正なレコードはスキップし、残りのレコードは復元する。

    Raises:
        StorageError: JSONとして解釈できない場合
    """
    try:
        records: Any = json.loads(blob)
    except json.JSONDecodeError as e:
        raise StorageError(f"Corrupted spot storage: {e}") from e

    if not isinstance(records, list):
        raise StorageError("Corrupted spot storage: expected a list of records")

    spots = []
    for record in records:
        try:
            if not isinstance(record, dict):
                raise ParsingError(f"Expected an object, got {type(record).__name__}")
            spots.append(AccessibilitySpot.from_dict(record))
        except ParsingError as e:
            logger.warning(f"Skipping malformed stored spot: {e}")

    return spots


class SpotPersistence(ABC):
    """スポット一覧の永続化ポート"""

    @abstractmethod
    def save(self, spots: list[AccessibilitySpot]) -> None:
        """
        スポット一覧全体を保存（上書き）

        Raises:
            StorageError: 保存に失敗した場合
        """
        pass

    @abstractmethod
    def load(self) -> list[AccessibilitySpot]:
        """
        保存済みのスポット一覧を読み込む

        Returns:
            list[AccessibilitySpot]: スポット一覧（未保存の場合は空リスト）

        Raises:
            StorageError: 読み込みに失敗した場合
        """
        pass


class NullSpotPersistence(SpotPersistence):
    """何も保存しない永続化（ローカル永続化無効時）"""

    def save(self, spots: list[AccessibilitySpot]) -> None:
        pass

    def load(self) -> list[AccessibilitySpot]:
        return []


class InMemorySpotPersistence(SpotPersistence):
    """シリアライズ済みの一覧をメモリ上に保持する永続化"""

    def __init__(self) -> None:
        self.blob: Optional[str] = None
        self.save_count = 0

    def save(self, spots: list[AccessibilitySpot]) -> None:
        self.blob = serialize_spots(spots)
        self.save_count += 1

    def load(self) -> list[AccessibilitySpot]:
        if self.blob is None:
            return []
        return deserialize_spots(self.blob)


class JsonFileSpotPersistence(SpotPersistence):
    """スポット一覧を1つのJSONファイルとして保存する永続化"""

    def __init__(self, storage_dir: str, key: str = STORAGE_KEY) -> None:
        """
        Args:
            storage_dir: 保存先ディレクトリ
            key: 保存キー（ファイル名の拡張子なし部分）
        """
        self.path = Path(storage_dir) / f"{key}.json"
        logger.info(f"JsonFileSpotPersistence initialized: {self.path}")

    def save(self, spots: list[AccessibilitySpot]) -> None:
        try:
            blob = serialize_spots(spots)
            self.path.parent.mkdir(parents=True, exist_ok=True)

            # 書き込み途中のファイルを読まれないよう一時ファイルから置き換える
            fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(blob)
                os.replace(tmp_path, self.path)
            except OSError:
                Path(tmp_path).unlink(missing_ok=True)
                raise

            logger.debug(f"Saved {len(spots)} spots to {self.path}")

        except (OSError, TypeError, ValueError) as e:
            raise StorageError(f"Failed to save spots to {self.path}: {e}") from e

    def load(self) -> list[AccessibilitySpot]:
        if not self.path.exists():
            logger.info(f"No stored spots found at {self.path}")
            return []

        try:
            blob = self.path.read_text(encoding="utf-8")
        except OSError as e:
            raise StorageError(f"Failed to read spots from {self.path}: {e}") from e

        spots = deserialize_spots(blob)
        logger.info(f"Loaded {len(spots)} spots from {self.path}")
        return spots
