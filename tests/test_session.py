import pytest

from typing_bomb import catalog
from typing_bomb.config import FLOOR_CHECK_MS, POPUP_MS, START_LIVES
from typing_bomb.errors import ConfigError, SessionError
from typing_bomb.field import Bomb
from typing_bomb.session import ENDED, PLAYING, SELECT_MODE, GameSession

_ids = iter(range(10_000, 1_000_000))


def drop(session, char, x=100.0, y=0.0):
    b = Bomb(next(_ids), char, x, y)
    session.field.add(b)
    return b


def end_game(session):
    session.lives = 1
    drop(session, "Q", y=480)
    session.update(FLOOR_CHECK_MS)
    assert session.phase == ENDED


def test_start_resets_state(session):
    session.start(catalog.EN)
    assert session.phase == PLAYING
    assert (session.score, session.lives, session.cleared, session.tier_index) == (0, 10, 0, 0)
    assert len(session.field) == 0
    assert sorted(session.running_timers) == ["fall", "floor", "spawn"]


def test_unknown_mode_never_starts(session):
    with pytest.raises(ConfigError):
        session.start("fr")
    assert session.phase == SELECT_MODE
    assert session.running_timers == []
    assert session.press("A") is None


def test_cannot_start_twice(session):
    session.start(catalog.EN)
    with pytest.raises(SessionError):
        session.start(catalog.ZH)


def test_latin_hit_scores(session, cues):
    session.start(catalog.EN)
    bomb = drop(session, "A", x=80, y=120)
    drop(session, "B", x=300)
    assert session.press("A") is bomb
    assert session.score == 1
    assert session.cleared == 1
    assert len(session.field) == 1
    assert cues == ["hit"]
    assert [(p.x, p.y, p.text) for p in session.popups] == [(80, 120, "+1")]


def test_oldest_bomb_cleared_first(session):
    session.start(catalog.EN)
    old = drop(session, "A", x=50, y=200)
    drop(session, "A", x=300, y=10)
    assert session.press("a") is old


def test_zhuyin_hit_needs_key(session):
    session.start(catalog.ZH)
    bomb = drop(session, "ㄅ")
    assert session.press("ㄅ") is None
    assert session.score == 0
    assert session.press("1") is bomb
    assert session.score == 1


def test_wrong_key_costs_nothing(session, cues):
    session.start(catalog.EN)
    drop(session, "A")
    assert session.press("Z") is None
    assert (session.score, session.lives) == (0, START_LIVES)
    assert cues == []


def test_bombs_fall_and_spawn(session):
    session.start(catalog.EN)
    session.update(2200)
    assert len(session.field) == 1
    bomb = next(iter(session.field))
    session.update(220)
    assert bomb.y == 10


def test_floor_breach_costs_a_life_each(session, cues):
    session.start(catalog.EN)
    drop(session, "A", x=50, y=480)
    drop(session, "B", x=200, y=490)
    drop(session, "C", x=350, y=100)
    session.update(FLOOR_CHECK_MS)
    assert session.lives == START_LIVES - 2
    assert len(session.field) == 1
    # one miss signal per check, not per bomb
    assert cues == ["miss"]


def test_last_life_clamps_and_ends(session, cues):
    session.start(catalog.EN)
    session.lives = 1
    drop(session, "A", x=50, y=480)
    drop(session, "B", x=200, y=480)
    session.update(FLOOR_CHECK_MS)
    assert session.lives == 0
    assert session.phase == ENDED
    assert len(session.field) == 0
    assert cues == ["miss", "gameover"]


def test_lives_only_go_down_and_game_ends_once(store, rng):
    cues = []
    s = GameSession(store=store, cues=cues.append, rng=rng)
    s.start(catalog.EN)
    seen = [s.lives]
    for _ in range(4000):
        s.update(50)
        seen.append(s.lives)
        if s.phase == ENDED:
            break
    assert s.phase == ENDED
    assert all(a >= b for a, b in zip(seen, seen[1:]))
    assert seen[-1] == 0 and seen[-2] > 0
    s.update(60_000)
    assert cues.count("gameover") == 1
    s.close()


def test_level_up_once_per_fifty(session):
    session.start(catalog.EN)
    for n in range(1, 101):
        drop(session, "K")
        session.press("K")
        if n < 50:
            assert session.tier_index == 0
        elif n < 100:
            assert session.tier_index == 1
    assert session.tier_index == 2
    assert session.message == "LEVEL UP: Normal"


def test_level_up_speeds_up_timers(session):
    session.start(catalog.EN)
    for _ in range(50):
        drop(session, "K")
        session.press("K")
    assert session._timers["fall"].interval == 180
    assert session._timers["spawn"].interval == 1800
    assert sorted(session.running_timers) == ["fall", "floor", "spawn"]


def test_timers_torn_down_on_game_over(session):
    session.start(catalog.EN)
    end_game(session)
    assert session.running_timers == []
    assert session.key_listener is None
    assert len(session.clock) == 0
    session.update(60_000)
    assert len(session.field) == 0
    drop(session, "A")
    assert session.press("A") is None
    assert session.score == 0


def test_restart_does_not_leak_timers(session):
    for _ in range(3):
        session.start(catalog.ZH)
        end_game(session)
        session.submit_score("x")
        session.restart()
        assert session.phase == SELECT_MODE
    session.start(catalog.EN)
    assert len(session.clock) == 3


def test_popup_expires_on_its_own(session):
    session.start(catalog.EN)
    drop(session, "A")
    session.press("A")
    session.update(POPUP_MS - 1)
    assert len(session.popups) == 1
    session.update(1)
    assert session.popups == []


def test_popup_outlives_the_game(session):
    session.start(catalog.EN)
    drop(session, "A")
    session.press("A")
    end_game(session)
    assert len(session.popups) == 1
    session.update(POPUP_MS)
    assert session.popups == []
    assert len(session.clock) == 0


def test_submit_score(session, store):
    session.start(catalog.ZH)
    for _ in range(3):
        drop(session, "ㄇ")
        session.press("A")
    end_game(session)
    board = session.submit_score("  Mei  ")
    assert [(e.name, e.score) for e in board] == [("Mei", 3)]
    assert store.load(catalog.ZH) == board
    assert store.load(catalog.EN) == []
    with pytest.raises(SessionError):
        session.submit_score("again")


def test_blank_name_is_anonymous(session):
    session.start(catalog.EN)
    end_game(session)
    assert session.submit_score("")[0].name == "Anonymous"


def test_wrong_phase_operations(session):
    with pytest.raises(SessionError):
        session.submit_score("x")
    with pytest.raises(SessionError):
        session.restart()
    session.start(catalog.EN)
    with pytest.raises(SessionError):
        session.submit_score("x")
    end_game(session)
    with pytest.raises(SessionError):
        session.start(catalog.EN)


def test_active_keys(session):
    assert session.active_keys() == set()
    session.start(catalog.ZH)
    drop(session, "ㄅ")
    drop(session, "ㄆ", x=300)
    assert session.active_keys() == {"1", "Q"}


def test_failing_audio_never_breaks_play(store, rng, caplog):
    def broken(cue):
        raise RuntimeError("no speakers")

    s = GameSession(store=store, cues=broken, rng=rng)
    s.start(catalog.EN)
    drop(s, "A")
    assert s.press("A") is not None
    assert s.score == 1
    assert "cue hit failed" in caplog.text
    s.close()


def test_close_releases_everything(session):
    session.start(catalog.EN)
    drop(session, "A")
    session.press("A")
    session.close()
    assert len(session.clock) == 0
    assert session.popups == []


def test_close_mid_game_returns_to_mode_select(session):
    session.start(catalog.EN)
    drop(session, "A")
    session.close()
    assert session.phase == SELECT_MODE
    assert session.running_timers == []
    assert session.key_listener is None
    assert len(session.field) == 0
    session.start(catalog.EN)
    assert session.phase == PLAYING
    assert sorted(session.running_timers) == ["fall", "floor", "spawn"]


def test_close_after_game_over_keeps_result(session):
    session.start(catalog.EN)
    end_game(session)
    session.close()
    assert session.phase == ENDED
    assert session.submit_score("late")[0].name == "late"


def test_popup_records_its_expiry(session):
    session.start(catalog.EN)
    session.update(250)
    drop(session, "A")
    session.press("A")
    (popup,) = session.popups
    assert popup.expires_at_ms == 250 + POPUP_MS
    session.update(POPUP_MS)
    assert session.popups == []
