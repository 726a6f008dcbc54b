"""アプリケーション設定（Pydantic Settings）"""
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """アプリケーション設定"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Project
    project_name: str = Field(
        default="locability",
        description="プロジェクト名",
    )
    environment: str = Field(
        default="development",
        description="環境 (development, staging, production)",
    )

    # GCP
    gcp_project_id: Optional[str] = Field(
        default=None,
        description="GCPプロジェクトID（リモート同期・Cloud Logging有効時に必要）",
    )

    # Firestore（リモート同期）
    remote_sync_enabled: bool = Field(
        default=False,
        description="Firestoreとのリモート同期を有効にするか",
    )
    firestore_database_id: str = Field(
        default="(default)",
        description="FirestoreデータベースID",
    )
    firestore_emulator_host: Optional[str] = Field(
        default=None,
        description="Firestoreエミュレータのホスト（例: localhost:8080）。設定された場合はエミュレータに接続",
    )
    firestore_spots_collection: str = Field(
        default="accessibility_spots",
        description="スポットコレクション名",
    )

    # ローカル永続化
    local_storage_dir: str = Field(
        default=".locability",
        description="スポット一覧を保存するディレクトリ",
    )
    local_persistence_enabled: bool = Field(
        default=True,
        description="ローカル永続化を有効にするか",
    )

    # Overpass（外部ジオデータ）
    overpass_endpoint: str = Field(
        default="https://overpass-api.de/api/interpreter",
        description="Overpass APIのエンドポイント",
    )
    overpass_timeout: int = Field(
        default=30,
        description="Overpassリクエストのタイムアウト（秒）",
    )
    overpass_retry: int = Field(
        default=2,
        description="Overpassリクエストのリトライ回数",
    )
    overpass_user_agent: str = Field(
        default="LocAbility/1.0 (+accessibility mapping)",
        description="OverpassリクエストのUser-Agent",
    )
    overpass_requests_per_second: float = Field(
        default=1.0,
        description="Overpassへの秒あたり最大リクエスト数",
    )

    # 取り込み・スコア計算
    import_radius_meters: float = Field(
        default=1000.0,
        description="外部ジオデータ取り込みの半径（メートル）",
    )
    dedup_threshold_meters: float = Field(
        default=10.0,
        description="取り込み時に重複とみなす距離（メートル）",
    )
    score_radius_meters: float = Field(
        default=500.0,
        description="エリアスコア計算の半径（メートル）",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="ログレベル (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    gcp_logging_enabled: bool = Field(
        default=False,
        description="Cloud Loggingを有効にするか",
    )

    # HTTPサーバー
    port: int = Field(
        default=8080,
        description="HTTPサーバーのポート番号",
    )

    @property
    def is_production(self) -> bool:
        """本番環境かどうか"""
        return self.environment.lower() == "production"
