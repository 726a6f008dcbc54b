"""スポットストアのテスト"""

import threading

from locability.features.spots.domain.enums import SpotStatus, SpotType
from locability.features.spots.store.persistence import InMemorySpotPersistence, SpotPersistence
from locability.features.spots.store.spot_store import SpotStore
from locability.shared.exceptions.errors import StorageError

from spot_helpers import SYNTAGMA, offset


class FailingPersistence(SpotPersistence):
    """保存・読み込みが常に失敗する永続化"""

    def __init__(self) -> None:
        self.attempts = 0

    def save(self, spots) -> None:
        self.attempts += 1
        raise StorageError("disk full")

    def load(self):
        raise StorageError("unreadable")


def test_add_appends_and_persists(store, persistence, make_spot) -> None:
    """追加は末尾に入り、永続化される"""
    first = make_spot(title="first")
    second = make_spot(title="second")

    store.add(first)
    store.add(second)

    assert store.all() == [first, second]
    assert len(store) == 2
    assert persistence.save_count == 2
    assert [spot.id for spot in persistence.load()] == [first.id, second.id]


def test_add_does_not_deduplicate(store, make_spot) -> None:
    """ストア自体は重複チェックをしない"""
    store.add(make_spot(coordinate=SYNTAGMA))
    store.add(make_spot(coordinate=SYNTAGMA))

    assert len(store) == 2


def test_remove_deletes_matching_spot(store, persistence, make_spot) -> None:
    """IDが一致するスポットを削除"""
    keep = make_spot(title="keep")
    drop = make_spot(title="drop")
    store.add(keep)
    store.add(drop)

    assert store.remove(drop.id) is True
    assert store.all() == [keep]
    assert drop.id not in store
    assert [spot.id for spot in persistence.load()] == [keep.id]


def test_remove_unknown_id_is_noop(store, persistence, make_spot) -> None:
    """存在しないIDの削除は何もしない"""
    store.add(make_spot())
    saves = persistence.save_count

    assert store.remove("UNKNOWN") is False
    assert len(store) == 1
    assert persistence.save_count == saves


def test_update_replaces_fields_but_keeps_identity(store, make_spot) -> None:
    """更新は内容を置き換え、id と作成日時は維持する"""
    original = make_spot(title="Ramp", status=SpotStatus.WORKING)
    store.add(original)

    edited = make_spot(
        id=original.id,
        title="Ramp (broken)",
        status=SpotStatus.NOT_WORKING,
        spot_type=SpotType.RAMP,
        coordinate=offset(SYNTAGMA, north_meters=3),
    )

    assert store.update(edited) is True

    stored = store.get(original.id)
    assert stored is not None
    assert stored.title == "Ramp (broken)"
    assert stored.status == SpotStatus.NOT_WORKING
    assert stored.created_at == original.created_at
    assert len(store) == 1


def test_update_unknown_id_is_noop(store, persistence, make_spot) -> None:
    """存在しないIDの更新は何もしない"""
    existing = make_spot(title="existing")
    store.add(existing)
    saves = persistence.save_count

    assert store.update(make_spot(title="ghost")) is False
    assert store.all() == [existing]
    assert store.get(existing.id).title == "existing"
    assert persistence.save_count == saves


def test_all_returns_snapshot(store, make_spot) -> None:
    """all() の戻り値を変更してもストアには影響しない"""
    store.add(make_spot())
    snapshot = store.all()
    snapshot.clear()

    assert len(store) == 1


def test_persistence_failure_does_not_fail_mutation(make_spot) -> None:
    """永続化の失敗は変更操作を失敗させない"""
    failing = FailingPersistence()
    store = SpotStore(persistence=failing)
    spot = make_spot()

    store.add(spot)
    assert store.update(make_spot(id=spot.id, title="renamed")) is True
    assert store.get(spot.id).title == "renamed"
    assert store.remove(spot.id) is True

    assert failing.attempts == 3
    assert len(store) == 0


def test_load_restores_persisted_spots(make_spot) -> None:
    """保存済みの一覧を別のストアで読み込める"""
    persistence = InMemorySpotPersistence()
    writer = SpotStore(persistence=persistence)
    spots = [make_spot(title=f"spot {i}") for i in range(3)]
    for spot in spots:
        writer.add(spot)

    reader = SpotStore(persistence=persistence)

    assert reader.load() == 3
    assert [spot.id for spot in reader.all()] == [spot.id for spot in spots]


def test_load_failure_keeps_current_spots(make_spot) -> None:
    """読み込みに失敗しても現在の一覧を維持する"""
    spot = make_spot()
    store = SpotStore(persistence=FailingPersistence(), spots=[spot])

    assert store.load() == 0
    assert store.all() == [spot]


def test_replace_all(store, persistence, make_spot) -> None:
    """一覧全体の置き換え"""
    store.add(make_spot(title="old"))
    new_spots = [make_spot(title="new 1"), make_spot(title="new 2")]

    store.replace_all(new_spots)

    assert [spot.title for spot in store.all()] == ["new 1", "new 2"]
    assert len(persistence.load()) == 2


def test_concurrent_adds_are_not_lost(store, make_spot) -> None:
    """並行した追加でもスポットは失われない"""
    spots = [make_spot(title=f"spot {i}") for i in range(200)]

    def worker(chunk) -> None:
        for spot in chunk:
            store.add(spot)

    threads = [threading.Thread(target=worker, args=(spots[i::4],)) for i in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(store) == 200
    assert {spot.id for spot in store.all()} == {spot.id for spot in spots}
