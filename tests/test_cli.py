import json

import craft_cli
from craftcache import create_app
from craftcache.models import db
from craftcache.services import element_store, pair_cache


def setup_app(tmp_path):
    app = create_app({"SQLALCHEMY_DATABASE_URI": f"sqlite:///{tmp_path / 'craft.db'}"})
    with app.app_context():
        db.drop_all(); db.create_all()
    return app


def run(app, capsys, *argv):
    code = craft_cli.main(list(argv), app=app)
    return code, capsys.readouterr().out


def test_seed_and_stats(tmp_path, capsys):
    app = setup_app(tmp_path)
    code, out = run(app, capsys, "seed")
    assert code == 0
    assert json.loads(out) == {"ok": True, "created": 4}

    with app.app_context():
        pair_cache.insert_if_absent("Earth", "Wind", None)
    code, out = run(app, capsys, "stats")
    assert json.loads(out) == {
        "elements": 4,
        "pairs": 1,
        "with_result": 0,
        "without_result": 1,
        "dangling_results": 0,
    }


def test_elements_and_pairs_tables(tmp_path, capsys):
    app = setup_app(tmp_path)
    with app.app_context():
        element_store.seed()
        element_store.insert_if_absent("Steam", "💨")
        pair_cache.insert_if_absent("Water", "Fire", "Steam")
    code, out = run(app, capsys, "elements", "--like", "Ste")
    assert code == 0
    assert "Steam" in out and "Water" not in out
    code, out = run(app, capsys, "pairs", "--element", "Steam")
    lines = out.strip().splitlines()
    assert lines[0].split(" | ")[0].strip() == "left"
    assert "Fire" in lines[2] and "Water" in lines[2] and "Steam" in lines[2]
    code, out = run(app, capsys, "pairs", "--element", "Mud")
    assert out.strip() == "(no rows)"


def test_import_and_export_save(tmp_path, capsys):
    app = setup_app(tmp_path)
    save = tmp_path / "save.json"
    save.write_text(json.dumps({"elements": [
        {"text": "Water", "emoji": "💧", "discovered": False},
        {"text": "Lava", "emoji": "🌋", "discovered": False},
    ]}), encoding="utf-8")
    code, out = run(app, capsys, "import-save", str(save))
    assert code == 0
    assert json.loads(out) == {"ok": True, "inserted": 2, "existing": 0}

    target = tmp_path / "page.json"
    code, out = run(app, capsys, "export-save", "--out", str(target))
    assert json.loads(out)["count"] == 2
    assert [e["text"] for e in json.loads(target.read_text(encoding="utf-8"))["elements"]] == [
        "Lava",
        "Water",
    ]


def test_errors_are_reported_as_json(tmp_path, capsys):
    app = setup_app(tmp_path)
    with app.app_context():
        element_store.seed()
    save = tmp_path / "save.json"
    save.write_text(json.dumps({"elements": [{"text": "Water", "emoji": "🌊"}]}), encoding="utf-8")
    code, out = run(app, capsys, "import-save", str(save))
    assert code == 1
    payload = json.loads(out)
    assert payload["ok"] is False
    assert payload["error"] == "E_ELEMENT_MISMATCH"
