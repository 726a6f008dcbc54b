"""取り込みサービスのテスト"""

from unittest.mock import Mock

import pytest

from locability.features.importing.domain.models import ImportStatus, RawElement
from locability.features.importing.providers.overpass_client import OverpassClient
from locability.features.importing.services.import_reconciler import ImportReconciler
from locability.features.importing.services.import_service import ImportService
from locability.shared.exceptions.errors import GeodataImportError

from spot_helpers import SYNTAGMA, offset


def raw(north_meters: float, tags=None, element_id: str = "node/1") -> RawElement:
    coordinate = offset(SYNTAGMA, north_meters=north_meters)
    return RawElement(
        element_id=element_id,
        latitude=coordinate.latitude,
        longitude=coordinate.longitude,
        tags=tags if tags is not None else {"highway": "elevator"},
    )


@pytest.fixture
def overpass_client() -> Mock:
    return Mock(spec=OverpassClient)


@pytest.fixture
def service(overpass_client, store) -> ImportService:
    return ImportService(overpass_client, store, default_radius_meters=1000)


def test_import_adds_new_spots(service, overpass_client, store) -> None:
    """取得した要素をスポットとして追加する"""
    overpass_client.fetch_elements.return_value = [
        raw(0, {"highway": "elevator"}),
        raw(100, {"ramp": "yes"}),
        raw(200, {"amenity": "toilets", "wheelchair": "yes"}),
    ]

    result = service.import_around(SYNTAGMA)

    overpass_client.fetch_elements.assert_called_once_with(SYNTAGMA, 1000)
    assert result.status == ImportStatus.SUCCESS
    assert result.fetched == 3
    assert result.added == 3
    assert len(store) == 3
    assert result.completed_at is not None


def test_import_skips_duplicates_and_malformed(service, overpass_client, store, make_spot) -> None:
    """既存スポットに近い要素と不正な要素は追加しない"""
    store.add(make_spot(coordinate=SYNTAGMA))
    overpass_client.fetch_elements.return_value = [
        raw(4),
        raw(300),
        RawElement(element_id="node/9", latitude=None, longitude=None, tags={"ramp": "yes"}),
    ]

    result = service.import_around(SYNTAGMA, radius_meters=500)

    overpass_client.fetch_elements.assert_called_once_with(SYNTAGMA, 500)
    assert result.added == 1
    assert result.duplicates_skipped == 1
    assert result.malformed_skipped == 1
    assert len(store) == 2


def test_fetch_failure_leaves_store_unchanged(service, overpass_client, store, persistence, make_spot) -> None:
    """取得に失敗した場合はストアを変更しない"""
    store.add(make_spot())
    saves = persistence.save_count
    overpass_client.fetch_elements.side_effect = GeodataImportError("Overpass request failed")

    result = service.import_around(SYNTAGMA)

    assert result.status == ImportStatus.FAILED
    assert result.errors == ["Overpass request failed"]
    assert len(store) == 1
    assert persistence.save_count == saves


def test_fetch_failure_can_be_raised(service, overpass_client) -> None:
    """raise_on_error=True の場合は例外を送出する"""
    overpass_client.fetch_elements.side_effect = GeodataImportError("boom")

    with pytest.raises(GeodataImportError):
        service.import_around(SYNTAGMA, raise_on_error=True)


def test_newer_import_supersedes_pending_one(overpass_client, store) -> None:
    """取得中に新しい取り込みが始まると、古い取り込みは反映されない"""
    service = ImportService(overpass_client, store)
    calls = []
    inner_results = []

    def fetch(center, radius):
        calls.append(center)
        if len(calls) == 1:
            # 最初の取得中に2回目の取り込みを開始する
            inner_results.append(service.import_around(offset(SYNTAGMA, north_meters=5000)))
            return [raw(0, element_id="node/stale")]
        return [raw(5000, element_id="node/fresh")]

    overpass_client.fetch_elements.side_effect = fetch

    outer = service.import_around(SYNTAGMA)

    assert inner_results[0].status == ImportStatus.SUCCESS
    assert outer.status == ImportStatus.CANCELLED
    assert outer.added == 0
    assert len(store) == 1
    assert store.all()[0].latitude == pytest.approx(offset(SYNTAGMA, north_meters=5000).latitude)


def test_cancel_pending_discards_in_flight_import(overpass_client, store) -> None:
    """cancel_pending() で実行中の取り込みを取り消す"""
    service = ImportService(overpass_client, store)

    def fetch(center, radius):
        service.cancel_pending()
        return [raw(0)]

    overpass_client.fetch_elements.side_effect = fetch

    result = service.import_around(SYNTAGMA)

    assert result.status == ImportStatus.CANCELLED
    assert len(store) == 0


def test_custom_reconciler_threshold(overpass_client, store, make_spot) -> None:
    """重複判定の閾値を差し替えられる"""
    store.add(make_spot(coordinate=SYNTAGMA))
    overpass_client.fetch_elements.return_value = [raw(30)]
    service = ImportService(overpass_client, store, reconciler=ImportReconciler(50))

    result = service.import_around(SYNTAGMA)

    assert result.added == 0
    assert result.duplicates_skipped == 1
