import pygame

from typing_bomb.audio import GAMEOVER, HIT, AudioCues


class FakeSound:
    def __init__(self, fail=False):
        self.fail = fail
        self.plays = 0

    def stop(self):
        pass

    def play(self):
        if self.fail:
            raise pygame.error("device gone")
        self.plays += 1


def test_plays_loaded_cue():
    s = FakeSound()
    AudioCues({HIT: s}).play(HIT)
    assert s.plays == 1


def test_missing_cue_is_silent():
    AudioCues({}).play(GAMEOVER)


def test_playback_errors_are_logged(caplog):
    cues = AudioCues({HIT: FakeSound(fail=True)})
    cues(HIT)
    assert "error playing hit" in caplog.text
