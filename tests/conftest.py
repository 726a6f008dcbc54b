"""テスト共通のフィクスチャ"""

from typing import Callable, Optional

import pytest

from locability.features.geo.domain.models import Coordinate
from locability.features.spots.domain.enums import SpotStatus, SpotType
from locability.features.spots.domain.models import AccessibilitySpot
from locability.features.spots.store.persistence import InMemorySpotPersistence
from locability.features.spots.store.spot_store import SpotStore
from spot_helpers import SYNTAGMA

SpotFactory = Callable[..., AccessibilitySpot]


@pytest.fixture
def make_spot() -> SpotFactory:
    """スポットを生成するファクトリ"""

    def factory(
        spot_type: SpotType = SpotType.RAMP,
        status: SpotStatus = SpotStatus.WORKING,
        coordinate: Optional[Coordinate] = None,
        title: str = "Test Spot",
        **kwargs: object,
    ) -> AccessibilitySpot:
        return AccessibilitySpot(
            title=title,
            description=kwargs.pop("description", ""),  # type: ignore[arg-type]
            type=spot_type,
            status=status,
            coordinate=coordinate or SYNTAGMA,
            **kwargs,  # type: ignore[arg-type]
        )

    return factory


@pytest.fixture
def persistence() -> InMemorySpotPersistence:
    return InMemorySpotPersistence()


@pytest.fixture
def store(persistence: InMemorySpotPersistence) -> SpotStore:
    return SpotStore(persistence=persistence)
