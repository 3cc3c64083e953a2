import json

from typing_bomb.leaderboard import (LeaderboardEntry, LeaderboardStore, clean_name,
                                     make_entry, rank)


def _e(name, score):
    return LeaderboardEntry(name, score, "2024-01-01 00:00:00")


def test_rank_sorts_and_caps():
    board = []
    for i, score in enumerate([5, 40, 12, 7, 99, 3, 18, 60, 22, 1, 75, 30]):
        board = rank(board, _e(f"p{i}", score))
        assert len(board) <= 10
        assert [e.score for e in board] == sorted((e.score for e in board), reverse=True)
    assert board[0].score == 99
    assert 1 not in [e.score for e in board]


def test_ties_keep_insertion_order():
    board = rank([_e("first", 10)], _e("second", 10))
    board = rank(board, _e("third", 10))
    assert [e.name for e in board] == ["first", "second", "third"]


def test_clean_name():
    assert clean_name(None) == "Anonymous"
    assert clean_name("   ") == "Anonymous"
    assert clean_name("  Mei ") == "Mei"
    assert clean_name("x" * 40) == "x" * 15


def test_make_entry_stamps_time():
    e = make_entry("", 3, now=0)
    assert e.name == "Anonymous"
    assert e.score == 3
    assert len(e.timestamp) == 19


def test_missing_file_is_empty(tmp_path):
    assert LeaderboardStore(tmp_path / "nope.json").load("en") == []


def test_submit_persists_per_mode(store):
    store.submit("en", _e("a", 5))
    store.submit("zh", _e("b", 9))
    reopened = LeaderboardStore(store.path)
    assert reopened.load("en") == [_e("a", 5)]
    assert reopened.load("zh") == [_e("b", 9)]


def test_corrupt_json_is_empty(tmp_path, caplog):
    p = tmp_path / "scores.json"
    p.write_text("{not json", encoding="utf-8")
    assert LeaderboardStore(p).load("en") == []
    assert "could not read" in caplog.text


def test_wrong_shape_is_empty(tmp_path):
    p = tmp_path / "scores.json"
    p.write_text(json.dumps([1, 2, 3]), encoding="utf-8")
    assert LeaderboardStore(p).load("en") == []
    p.write_text(json.dumps({"leaderboard_en": [{"name": "x"}]}), encoding="utf-8")
    assert LeaderboardStore(p).load("en") == []


def test_corrupt_board_recovers_on_next_submit(tmp_path):
    p = tmp_path / "scores.json"
    p.write_text(json.dumps({"leaderboard_en": "garbage"}), encoding="utf-8")
    store = LeaderboardStore(p)
    assert store.submit("en", _e("a", 1)) == [_e("a", 1)]


def test_unwritable_store_does_not_raise(tmp_path, caplog):
    store = LeaderboardStore(tmp_path)  # a directory, cannot be written as a file
    board = store.submit("en", _e("a", 1))
    assert board == [_e("a", 1)]
    assert "could not write" in caplog.text
