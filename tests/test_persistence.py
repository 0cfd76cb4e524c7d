import json

from snake_engine.persistence import JsonHighScoreStore, MemoryHighScoreStore


def test_json_store_round_trip_creates_parent_dirs(tmp_path):
    path = tmp_path / "nested" / "high_score.json"
    store = JsonHighScoreStore(path)
    assert store.load_high_score() is None

    store.save_high_score(420)
    assert json.loads(path.read_text()) == {"high_score": 420}
    assert JsonHighScoreStore(path).load_high_score() == 420


def test_json_store_ignores_corrupt_file(tmp_path, caplog):
    path = tmp_path / "high_score.json"
    path.write_text("{not json")
    assert JsonHighScoreStore(path).load_high_score() is None
    assert "unreadable" in caplog.text

    path.write_text(json.dumps({"score": 3}))
    assert JsonHighScoreStore(path).load_high_score() is None


def test_memory_store_records_saves():
    store = MemoryHighScoreStore(5)
    assert store.load_high_score() == 5
    store.save_high_score(9)
    assert store.load_high_score() == 9
    assert store.saves == [9]
