"""Synthesised sound cues for the Pygame frontend."""

from __future__ import annotations

from array import array

from gridzen.backend.engine.sound import Sound
from gridzen.frontend.gui.pygame.app import SOUND_FILES, TONES, _tone_buffer


def test_every_cue_has_a_file_name_and_a_tone() -> None:
    assert set(SOUND_FILES) == set(Sound)
    assert set(TONES) == set(Sound)


def test_tone_buffer_is_signed_16_bit_pcm() -> None:
    data = _tone_buffer([(100.0, 0.5)], rate=1000, channels=1)
    samples = array("h", data)
    assert len(samples) == 500
    assert samples[0] == 0
    assert max(abs(s) for s in samples) <= 12000
    assert any(s != 0 for s in samples)


def test_tone_buffer_duplicates_samples_per_channel() -> None:
    samples = array("h", _tone_buffer([(100.0, 0.5)], rate=1000, channels=2))
    assert len(samples) == 1000
    assert samples[0::2] == samples[1::2]
