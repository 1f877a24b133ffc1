"""Sound registration and playback, in 2D and 3D."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class AudioClip:
    """A registered sound id and the file it came from."""

    id: int = 0
    filepath: str = ""


@dataclass
class Voice:
    """One sound being played."""

    clip: AudioClip
    player: Any
    position: Optional[tuple[float, ...]] = None
    velocity: Optional[tuple[float, ...]] = None


@dataclass(frozen=True)
class ListenerState:
    position: tuple[float, ...]
    velocity: tuple[float, ...]
    forward: tuple[float, ...]
    up: tuple[float, ...]


def _pyglet_player() -> Any:
    import pyglet.media

    return pyglet.media.Player()


def _pyglet_listener() -> Any:
    import pyglet.media

    driver = pyglet.media.get_audio_driver()
    return driver.get_listener() if driver is not None else None


def _vec(values: Sequence[float]) -> tuple[float, ...]:
    return tuple(float(v) for v in values)


class AudioSystem:
    """Keeps registered sounds and plays them on a limited number of channels."""

    def __init__(
        self,
        player_factory: Optional[Callable[[], Any]] = None,
        listener: Any = None,
    ) -> None:
        self._player_factory = player_factory or _pyglet_player
        self._listener = listener
        self._sounds: dict[int, Any] = {}
        self._id_pool = 0
        self._voices: list[Voice] = []
        self._max_channels = 0
        self.listener_state: Optional[ListenerState] = None

    @property
    def initialized(self) -> bool:
        return self._max_channels > 0

    @property
    def max_channels(self) -> int:
        return self._max_channels

    @property
    def available_id(self) -> int:
        """The id the next registered sound will get."""
        return self._id_pool + 1

    @property
    def playing(self) -> tuple[Voice, ...]:
        return tuple(self._voices)

    def initialize(self, max_channel_count: int) -> None:
        """Start the audio system with at most ``max_channel_count`` simultaneous sounds."""
        if max_channel_count < 1:
            raise ValueError("max_channel_count must be at least 1")
        self._max_channels = max_channel_count
        if self._listener is None:
            self._listener = _pyglet_listener()

    def register_audio(self, sound: Any) -> int:
        """Register a loaded sound and return its new id."""
        self._id_pool += 1
        self._sounds[self._id_pool] = sound
        return self._id_pool

    def get_sound(self, sound_id: int) -> Optional[Any]:
        return self._sounds.get(sound_id)

    def _start(
        self,
        clip: AudioClip,
        volume: float,
        pitch: float,
        position: Optional[Sequence[float]] = None,
        velocity: Optional[Sequence[float]] = None,
    ) -> Voice:
        if not self.initialized:
            raise RuntimeError("audio system is not initialized")
        sound = self.get_sound(clip.id)
        if sound is None:
            raise KeyError(f"no sound registered with id {clip.id}")
        while len(self._voices) >= self._max_channels:
            self._voices.pop(0).player.delete()
        player = self._player_factory()
        player.queue(sound)
        player.volume = volume
        player.pitch = pitch
        voice = Voice(clip, player)
        if position is not None:
            voice.position = _vec(position)
            voice.velocity = _vec(velocity) if velocity is not None else (0.0, 0.0, 0.0)
            player.position = voice.position
        player.play()
        self._voices.append(voice)
        return voice

    def play_one_shot_3d(
        self,
        clip: AudioClip,
        volume: float,
        pitch: float,
        position: Sequence[float],
        velocity: Sequence[float],
    ) -> Voice:
        """Play ``clip`` once at a point in space."""
        return self._start(clip, volume, pitch, position, velocity)

    def play_one_shot(self, clip: AudioClip, volume: float, pitch: float) -> Voice:
        """Play ``clip`` once without positioning."""
        return self._start(clip, volume, pitch)

    def set_listener(
        self,
        position: Sequence[float],
        velocity: Sequence[float],
        forward: Sequence[float],
        up: Sequence[float],
    ) -> None:
        """Place the listener and orient it."""
        state = ListenerState(_vec(position), _vec(velocity), _vec(forward), _vec(up))
        self.listener_state = state
        if self._listener is not None:
            self._listener.position = state.position
            self._listener.forward_orientation = state.forward
            self._listener.up_orientation = state.up

    def update(self) -> None:
        """Release sounds that have finished playing."""
        still_playing = []
        for voice in self._voices:
            if voice.player.playing:
                still_playing.append(voice)
            else:
                voice.player.delete()
        self._voices = still_playing

    def clean_up(self) -> None:
        """Stop every sound and shut the system down."""
        for voice in self._voices:
            voice.player.delete()
        self._voices.clear()
        self._max_channels = 0