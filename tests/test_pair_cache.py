import pytest

from craftcache import create_app
from craftcache.errors import InvalidIdentifier, StorageError
from craftcache.models import db, Pair, PairResolution
from craftcache.services import element_store, pair_cache


def setup_app(tmp_path):
    app = create_app({"SQLALCHEMY_DATABASE_URI": f"sqlite:///{tmp_path / 'craft.db'}"})
    with app.app_context():
        db.drop_all(); db.create_all()
        element_store.seed()
        element_store.insert_if_absent("Steam", "💨")
    return app


def test_lookup_either_order(tmp_path):
    app = setup_app(tmp_path)
    with app.app_context():
        rec, first = pair_cache.insert_if_absent("Water", "Fire", "Steam")
        assert first is True
        assert (rec.left, rec.right) == ("Fire", "Water")
        assert pair_cache.lookup("Water", "Fire").result == "Steam"
        assert pair_cache.lookup("Fire", "Water").result == "Steam"
        assert Pair.query.count() == 1


def test_unseen_and_no_result_are_distinct(tmp_path):
    app = setup_app(tmp_path)
    with app.app_context():
        assert pair_cache.lookup("Earth", "Wind") is None
        rec, first = pair_cache.insert_if_absent("Earth", "Wind", None)
        assert first is True
        assert rec.resolution is PairResolution.WITHOUT_RESULT
        found = pair_cache.lookup("Wind", "Earth")
        assert found is not None
        assert found.result is None
        assert found.resolution is PairResolution.WITHOUT_RESULT


def test_existing_result_never_overwritten(tmp_path):
    app = setup_app(tmp_path)
    with app.app_context():
        pair_cache.insert_if_absent("Water", "Fire", "Steam")
        rec, first = pair_cache.insert_if_absent("Fire", "Water", "Water")
        assert first is False
        assert rec.result == "Steam"
        rec, first = pair_cache.insert_if_absent("Fire", "Water", None)
        assert first is False
        assert rec.result == "Steam"


def test_result_without_element_leaves_no_row(tmp_path):
    app = setup_app(tmp_path)
    with app.app_context():
        with pytest.raises(StorageError):
            pair_cache.insert_if_absent("Water", "Earth", "Mud")
        assert pair_cache.lookup("Water", "Earth") is None
        assert pair_cache.count() == 0


def test_invalid_names_rejected(tmp_path):
    app = setup_app(tmp_path)
    with app.app_context():
        with pytest.raises(InvalidIdentifier):
            pair_cache.lookup("", "Water")
        with pytest.raises(InvalidIdentifier):
            pair_cache.insert_if_absent("Water", "Fire", "")
        assert pair_cache.count() == 0


def test_race_loser_reads_winner(tmp_path, monkeypatch):
    app = setup_app(tmp_path)
    with app.app_context():
        pair_cache.insert_if_absent("Water", "Fire", "Steam")
        db.session.expunge_all()

        real_find = pair_cache._find
        calls = []

        def late_find(left, right):
            calls.append((left, right))
            if len(calls) == 1:
                return None
            return real_find(left, right)

        monkeypatch.setattr(pair_cache, "_find", late_find)
        rec, first = pair_cache.insert_if_absent("Fire", "Water", None)
        assert first is False
        assert rec.result == "Steam"
        assert calls == [("Fire", "Water"), ("Fire", "Water")]
        assert pair_cache.count() == 1


def test_stats_and_listing(tmp_path):
    app = setup_app(tmp_path)
    with app.app_context():
        pair_cache.insert_if_absent("Water", "Fire", "Steam")
        pair_cache.insert_if_absent("Steam", "Steam", "Steam")
        pair_cache.insert_if_absent("Earth", "Wind", None)
        assert pair_cache.stats() == {"pairs": 3, "with_result": 2, "without_result": 1}
        assert pair_cache.dangling_results() == []
        assert [(p.left, p.right) for p in pair_cache.list_pairs("Steam")] == [
            ("Fire", "Water"),
            ("Steam", "Steam"),
        ]
        assert pair_cache.lookup("Steam", "Steam").to_dict()["icon"] == "💨"
