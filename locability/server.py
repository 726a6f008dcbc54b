"""HTTPサーバー（FastAPI）"""
from typing import Any, Optional

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from .features.app.orchestrator import AppOrchestrator
from .features.geo.domain.models import Coordinate
from .features.importing.domain.models import ImportStatus
from .features.spots.domain.enums import AccessibilityFilter, SpotStatus, SpotType
from .features.spots.domain.models import AccessibilitySpot
from .infrastructure.config.settings import Settings
from .shared.exceptions.errors import StorageError
from .shared.logging.config import get_logger, setup_logging

logger = get_logger(__name__)


class SpotPayload(BaseModel):
    """スポットの投稿・更新リクエスト"""

    title: str = ""
    description: str = ""
    type: SpotType
    status: SpotStatus = SpotStatus.WORKING
    latitude: float = Field(..., ge=-90.0, le=90.0)
    longitude: float = Field(..., ge=-180.0, le=180.0)
    photo_url: Optional[str] = None

    def to_spot(self, spot_id: Optional[str] = None) -> AccessibilitySpot:
        extra: dict[str, Any] = {"id": spot_id} if spot_id is not None else {}
        return AccessibilitySpot(
            title=self.title,
            description=self.description,
            type=self.type,
            status=self.status,
            coordinate=Coordinate(self.latitude, self.longitude),
            photo_url=self.photo_url,
            **extra,
        )


class ClassifyRequest(BaseModel):
    """種別推定リクエスト"""

    text: str = Field(..., max_length=2000)


def spot_to_dict(spot: AccessibilitySpot) -> dict[str, Any]:
    data = spot.to_dict()
    data["photo_url"] = spot.photo_url
    return data


def create_app(
    settings: Optional[Settings] = None,
    orchestrator: Optional[AppOrchestrator] = None,
) -> FastAPI:
    """
    FastAPIアプリケーションを作成

    Args:
        settings: アプリケーション設定（Noneの場合は環境変数から読み込み）
        orchestrator: オーケストレーター（Noneの場合は設定から作成）

    Returns:
        FastAPI: アプリケーション
    """
    settings = settings or Settings()
    orchestrator = orchestrator or AppOrchestrator(settings)

    app = FastAPI(
        title="LocAbility",
        description="アクセシビリティ設備の登録・近傍検索・エリアスコア計算サービス",
        version="1.0.0",
        docs_url=None if settings.is_production else "/docs",
        redoc_url=None if settings.is_production else "/redoc",
    )
    app.state.settings = settings
    app.state.orchestrator = orchestrator

    @app.on_event("startup")
    async def startup_event() -> None:
        """起動時の処理"""
        logger.info("Application starting up")
        logger.info(f"Environment: {settings.environment}")
        orchestrator.start_listening()

    @app.on_event("shutdown")
    async def shutdown_event() -> None:
        """シャットダウン時の処理"""
        logger.info("Application shutting down")
        orchestrator.close()

    @app.get("/")
    async def root() -> dict[str, Any]:
        """ルートエンドポイント"""
        return {
            "service": settings.project_name,
            "version": "1.0.0",
            "status": "running",
            "environment": settings.environment,
        }

    @app.get("/health")
    async def health() -> dict[str, str]:
        """ヘルスチェックエンドポイント"""
        return {"status": "healthy"}

    @app.get("/spots")
    def list_spots(
        spot_filter: AccessibilityFilter = Query(AccessibilityFilter.ALL, alias="filter"),
    ) -> dict[str, Any]:
        """スポット一覧"""
        spots = [
            spot_to_dict(spot)
            for spot in orchestrator.store.all()
            if spot.matches_filter(spot_filter)
        ]
        return {"count": len(spots), "spots": spots}

    @app.post("/spots", status_code=201)
    def create_spot(payload: SpotPayload) -> dict[str, Any]:
        """スポットを投稿"""
        spot = payload.to_spot()
        try:
            orchestrator.submit_spot(spot)
        except StorageError as e:
            logger.error(f"Remote upload failed for {spot.id}: {e}")
            raise HTTPException(status_code=502, detail=f"Saved locally, remote sync failed: {e}")
        return spot_to_dict(spot)

    @app.post("/spots/classify")
    def classify_spot(request: ClassifyRequest) -> dict[str, Any]:
        """自由記述から種別を推定（確信度が低い場合は type=None）"""
        result = orchestrator.suggest_type(request.text)
        return {
            "type": result.spot_type.value if result.spot_type else None,
            "confidence": round(result.confidence, 3),
        }

    @app.get("/spots/near")
    def spots_near(
        lat: float = Query(..., ge=-90.0, le=90.0),
        lon: float = Query(..., ge=-180.0, le=180.0),
        radius: float = Query(500.0, gt=0),
        spot_filter: AccessibilityFilter = Query(AccessibilityFilter.ALL, alias="filter"),
    ) -> dict[str, Any]:
        """中心から半径内のスポットを近い順に返す"""
        nearby = orchestrator.spots_near(Coordinate(lat, lon), radius, spot_filter)
        return {"count": len(nearby), "spots": [item.to_dict() for item in nearby]}

    @app.get("/spots/{spot_id}")
    def get_spot(spot_id: str) -> dict[str, Any]:
        """スポットを取得"""
        spot = orchestrator.store.get(spot_id)
        if spot is None:
            raise HTTPException(status_code=404, detail=f"Spot not found: {spot_id}")
        return spot_to_dict(spot)

    @app.put("/spots/{spot_id}")
    def update_spot(spot_id: str, payload: SpotPayload) -> dict[str, Any]:
        """スポットを更新"""
        try:
            updated = orchestrator.update_spot(payload.to_spot(spot_id))
        except StorageError as e:
            raise HTTPException(status_code=502, detail=f"Updated locally, remote sync failed: {e}")
        if not updated:
            raise HTTPException(status_code=404, detail=f"Spot not found: {spot_id}")
        return spot_to_dict(orchestrator.store.get(spot_id))

    @app.delete("/spots/{spot_id}", status_code=204)
    def delete_spot(spot_id: str) -> None:
        """スポットを削除"""
        try:
            removed = orchestrator.remove_spot(spot_id)
        except StorageError as e:
            raise HTTPException(status_code=502, detail=f"Removed locally, remote sync failed: {e}")
        if not removed:
            raise HTTPException(status_code=404, detail=f"Spot not found: {spot_id}")

    @app.post("/spots/{spot_id}/upvote")
    def upvote(spot_id: str) -> dict[str, Any]:
        """賛成票"""
        return _vote(spot_id, up=True)

    @app.post("/spots/{spot_id}/downvote")
    def downvote(spot_id: str) -> dict[str, Any]:
        """反対票"""
        return _vote(spot_id, up=False)

    def _vote(spot_id: str, up: bool) -> dict[str, Any]:
        if spot_id not in orchestrator.store:
            raise HTTPException(status_code=404, detail=f"Spot not found: {spot_id}")
        try:
            sent = orchestrator.vote(spot_id, up=up)
        except StorageError as e:
            raise HTTPException(status_code=502, detail=str(e))
        return {"spot_id": spot_id, "vote": "up" if up else "down", "sent": sent}

    @app.get("/score")
    def area_score(
        lat: float = Query(..., ge=-90.0, le=90.0),
        lon: float = Query(..., ge=-180.0, le=180.0),
        radius: Optional[float] = Query(None, gt=0),
    ) -> dict[str, Any]:
        """エリアのアクセシビリティスコア"""
        breakdown = orchestrator.area_score(Coordinate(lat, lon), radius)
        return breakdown.to_dict()

    @app.post("/import")
    def import_geodata(
        lat: float = Query(..., ge=-90.0, le=90.0),
        lon: float = Query(..., ge=-180.0, le=180.0),
        radius: Optional[float] = Query(None, gt=0),
    ) -> JSONResponse:
        """外部ジオデータを取り込む"""
        result = orchestrator.import_around(Coordinate(lat, lon), radius)
        status_code = 502 if result.status == ImportStatus.FAILED else 200
        return JSONResponse(status_code=status_code, content=result.to_dict())

    @app.post("/sync")
    def sync() -> dict[str, Any]:
        """リモートの全スポットを取得してローカルを置き換える"""
        try:
            count = orchestrator.sync_from_remote()
        except StorageError as e:
            raise HTTPException(status_code=502, detail=str(e))
        return {"synced": count}

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """グローバル例外ハンドラー"""
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"message": "Internal server error", "detail": str(exc)},
        )

    return app


if __name__ == "__main__":
    import uvicorn

    _settings = Settings()
    setup_logging(
        level=_settings.log_level,
        enable_cloud_logging=_settings.gcp_logging_enabled,
        project_id=_settings.gcp_project_id,
    )

    uvicorn.run(
        create_app(_settings),
        host="0.0.0.0",
        port=_settings.port,
        log_level=_settings.log_level.lower(),
    )
