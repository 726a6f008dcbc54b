"""取り込み時の重複排除のテスト"""

from locability.features.importing.services.import_reconciler import ImportReconciler
from locability.features.spots.domain.enums import SpotType

from spot_helpers import SYNTAGMA, offset


def test_candidate_within_threshold_is_skipped(store, make_spot) -> None:
    """既存スポットから5mの候補はスキップされ、離れた候補は追加される"""
    existing = make_spot(title="existing", coordinate=SYNTAGMA)
    store.add(existing)

    near_duplicate = make_spot(title="near", coordinate=offset(SYNTAGMA, north_meters=5))
    distinct = make_spot(title="distinct", coordinate=offset(SYNTAGMA, north_meters=50))

    reconciler = ImportReconciler()
    added = reconciler.reconcile([near_duplicate, distinct], store)

    assert added == [distinct]
    assert reconciler.last_duplicates_skipped == 1
    assert [spot.title for spot in store.all()] == ["existing", "distinct"]


def test_duplicate_check_ignores_title_and_type(store, make_spot) -> None:
    """照合は座標のみで、種別やタイトルが違っても重複とみなす"""
    store.add(make_spot(spot_type=SpotType.ELEVATOR, title="Lift", coordinate=SYNTAGMA))

    candidate = make_spot(
        spot_type=SpotType.ACCESSIBLE_TOILET,
        title="WC",
        coordinate=offset(SYNTAGMA, east_meters=3),
    )

    assert ImportReconciler().reconcile([candidate], store) == []
    assert len(store) == 1


def test_threshold_is_strict(store, make_spot) -> None:
    """閾値ちょうどの距離は重複ではない"""
    store.add(make_spot(coordinate=SYNTAGMA))
    candidate = make_spot(coordinate=offset(SYNTAGMA, north_meters=10.01))

    assert ImportReconciler(threshold_meters=10.0).reconcile([candidate], store) == [candidate]


def test_candidates_in_same_batch_are_reconciled_against_each_other(store, make_spot) -> None:
    """同じ取り込みで先に追加した候補も照合対象になる"""
    first = make_spot(title="first", coordinate=SYNTAGMA)
    second = make_spot(title="second", coordinate=offset(SYNTAGMA, east_meters=4))
    third = make_spot(title="third", coordinate=offset(SYNTAGMA, east_meters=40))

    added = ImportReconciler().reconcile([first, second, third], store)

    assert [spot.title for spot in added] == ["first", "third"]


def test_reimporting_same_batch_is_idempotent(store, make_spot) -> None:
    """同じ候補を再度取り込んでも増えない"""
    batch = [
        make_spot(coordinate=offset(SYNTAGMA, north_meters=i * 100)) for i in range(5)
    ]
    reconciler = ImportReconciler()

    assert len(reconciler.reconcile(batch, store)) == 5

    again = [make_spot(coordinate=spot.coordinate) for spot in batch]
    assert reconciler.reconcile(again, store) == []
    assert reconciler.last_duplicates_skipped == 5
    assert len(store) == 5


def test_empty_input_leaves_store_unchanged(store, persistence, make_spot) -> None:
    """候補が空ならストアは変化しない"""
    store.add(make_spot())
    saves = persistence.save_count

    assert ImportReconciler().reconcile([], store) == []
    assert len(store) == 1
    assert persistence.save_count == saves


def test_configurable_threshold(store, make_spot) -> None:
    """閾値を変更できる"""
    store.add(make_spot(coordinate=SYNTAGMA))
    candidate = make_spot(coordinate=offset(SYNTAGMA, north_meters=30))

    assert ImportReconciler(threshold_meters=50).reconcile([candidate], store) == []
    assert ImportReconciler(threshold_meters=20).reconcile([candidate], store) == [candidate]
