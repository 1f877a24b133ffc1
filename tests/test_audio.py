import pytest

from perhapsengine.audio import AudioClip, AudioSystem


class FakePlayer:
    def __init__(self):
        self.queued = []
        self.volume = None
        self.pitch = None
        self.position = None
        self.playing = False
        self.deleted = False

    def queue(self, source):
        self.queued.append(source)

    def play(self):
        self.playing = True

    def delete(self):
        self.deleted = True
        self.playing = False


class FakeListener:
    position = None
    forward_orientation = None
    up_orientation = None


@pytest.fixture
def audio():
    system = AudioSystem(player_factory=FakePlayer, listener=FakeListener())
    system.initialize(32)
    return system


def test_register_audio_assigns_increasing_ids(audio):
    assert audio.available_id == 1
    first = audio.register_audio("swamp")
    second = audio.register_audio("lis")
    assert (first, second) == (1, 2)
    assert audio.available_id == 3
    assert audio.get_sound(2) == "lis"


def test_get_sound_unknown_is_none(audio):
    assert audio.get_sound(99) is None


def test_play_one_shot_sets_player(audio):
    sound_id = audio.register_audio("swamp")
    voice = audio.play_one_shot(AudioClip(sound_id, "swamp.wav"), 0.5, 1.25)
    assert voice.player.queued == ["swamp"]
    assert voice.player.volume == 0.5
    assert voice.player.pitch == 1.25
    assert voice.player.playing is True
    assert voice.position is None
    assert audio.playing == (voice,)


def test_play_one_shot_3d_positions_sound(audio):
    sound_id = audio.register_audio("click")
    voice = audio.play_one_shot_3d(AudioClip(sound_id), 1.0, 1.0, (1, 2, 3), (0, 0, 4))
    assert voice.player.position == (1.0, 2.0, 3.0)
    assert voice.velocity == (0.0, 0.0, 4.0)


def test_unregistered_clip_raises(audio):
    with pytest.raises(KeyError):
        audio.play_one_shot(AudioClip(7, "missing.wav"), 1.0, 1.0)


def test_play_before_initialize_raises():
    system = AudioSystem(player_factory=FakePlayer, listener=FakeListener())
    sound_id = system.register_audio("s")
    with pytest.raises(RuntimeError):
        system.play_one_shot(AudioClip(sound_id), 1.0, 1.0)


def test_initialize_rejects_zero_channels():
    system = AudioSystem(player_factory=FakePlayer, listener=FakeListener())
    with pytest.raises(ValueError):
        system.initialize(0)


def test_channel_limit_steals_oldest():
    system = AudioSystem(player_factory=FakePlayer, listener=FakeListener())
    system.initialize(2)
    clip = AudioClip(system.register_audio("s"))
    first = system.play_one_shot(clip, 1.0, 1.0)
    second = system.play_one_shot(clip, 1.0, 1.0)
    third = system.play_one_shot(clip, 1.0, 1.0)
    assert first.player.deleted is True
    assert system.playing == (second, third)


def test_update_releases_finished_voices(audio):
    clip = AudioClip(audio.register_audio("s"))
    done = audio.play_one_shot(clip, 1.0, 1.0)
    running = audio.play_one_shot(clip, 1.0, 1.0)
    done.player.playing = False
    audio.update()
    assert audio.playing == (running,)
    assert done.player.deleted is True


def test_set_listener_forwards_attributes():
    listener = FakeListener()
    system = AudioSystem(player_factory=FakePlayer, listener=listener)
    system.initialize(4)
    system.set_listener((1, 0, 0), (0, 0, 0), (0, 0, 1), (0, 1, 0))
    assert listener.position == (1.0, 0.0, 0.0)
    assert listener.forward_orientation == (0.0, 0.0, 1.0)
    assert listener.up_orientation == (0.0, 1.0, 0.0)
    assert system.listener_state.velocity == (0.0, 0.0, 0.0)


def test_clean_up_stops_everything(audio):
    clip = AudioClip(audio.register_audio("s"))
    voice = audio.play_one_shot(clip, 1.0, 1.0)
    audio.clean_up()
    assert voice.player.deleted is True
    assert audio.playing == ()
    assert audio.initialized is False


def test_audio_clip_defaults():
    clip = AudioClip()
    assert (clip.id, clip.filepath) == (0, "")