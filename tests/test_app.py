import pytest

pytest.importorskip("flask")

import app as app_module
from config import CFG
from tests.data import DUPLICATE_TEXT, HANDCRAFTED_TEXT, HANDCRAFTED_TILES


@pytest.fixture
def client(tmp_path, monkeypatch):
    monkeypatch.setattr(CFG, "SOLUTIONS_OUT", str(tmp_path / "solutions.txt"), raising=False)
    monkeypatch.setattr(CFG, "ENGINE", "backtrack", raising=False)
    monkeypatch.setattr(CFG, "WORKERS", 1, raising=False)
    monkeypatch.setattr(CFG, "MAX_DISPLAY_SOLUTIONS", 3, raising=False)
    app_module.app.config["TESTING"] = True
    return app_module.app.test_client()


def test_index_serves_form(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert b'name="tiles"' in resp.data


def test_solve_from_form_reports_solutions(client, tmp_path):
    resp = client.post("/solve", data={"tiles": HANDCRAFTED_TEXT})
    assert resp.status_code == 200
    assert app_module.LAST_RESULT["ok"] is True
    count = app_module.LAST_RESULT["solution_count"]
    assert count > 0
    assert f"Solutions found: {count}".encode() in resp.data
    assert len(app_module.LAST_RESULT["shown"]) == min(3, count)

    written = (tmp_path / "solutions.txt").read_text(encoding="utf-8")
    assert written.count("\n\n") == count

    progress = client.get("/progress").get_json()
    assert progress["done"] is True
    assert progress["solutions"] == count
    assert progress["result_url"] == "/result/latest"


def test_solve_from_json_rows(client):
    rows = [list(t.corners) for t in HANDCRAFTED_TILES]
    resp = client.post("/solve", json={"tiles": rows})
    assert resp.status_code == 200
    assert app_module.LAST_RESULT["solution_count"] > 0


def test_solve_rejects_short_input(client):
    resp = client.post("/solve", data={"tiles": "1 2 3 4\n"})
    assert resp.status_code == 200
    assert app_module.LAST_RESULT["ok"] is False
    assert app_module.LAST_RESULT["reason"] == "Bad tiles: expected 12 tiles, got 1"
    assert client.get("/progress").get_json()["status"] == "Error"


def test_latest_result_and_download(client):
    client.post("/solve", data={"tiles": HANDCRAFTED_TEXT})
    assert client.get("/result/latest").status_code == 200
    resp = client.get("/download/solutions")
    assert resp.status_code == 200
    assert resp.data.strip()


def test_solve_writes_all_solutions_but_shows_only_the_limit(client, tmp_path, monkeypatch):
    monkeypatch.setattr(CFG, "MAX_DISPLAY_SOLUTIONS", 1, raising=False)
    client.post("/solve", data={"tiles": DUPLICATE_TEXT})
    assert app_module.LAST_RESULT["solution_count"] == 2
    assert len(app_module.LAST_RESULT["shown"]) == 1

    written = (tmp_path / "solutions.txt").read_text(encoding="utf-8")
    blocks = [b for b in written.split("\n\n") if b]
    assert len(blocks) == 2
    assert blocks[0] == app_module.LAST_RESULT["shown"][0]["text"]
