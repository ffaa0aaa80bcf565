"""Blocking stereo audio capture via sounddevice.

Delivers each block as interleaved big-endian signed 16-bit frames, the
format the level helpers expect.
"""

import sounddevice as sd

SAMPLE_RATE = 44100
BLOCK_FRAMES = 512  # 2048 bytes, ~12 ms at 44.1 kHz
CHANNELS = 2


def find_input_device(name: str) -> int | None:
    """Return the index of the first stereo input device matching ``name``."""
    for i, dev in enumerate(sd.query_devices()):
        if name.lower() in dev["name"].lower() and dev["max_input_channels"] >= CHANNELS:
            return i
    return None


class AudioCapture:
    """Reads fixed-size stereo blocks from an input device."""

    def __init__(self, device: str | int | None = None,
                 sample_rate=SAMPLE_RATE, block_frames=BLOCK_FRAMES):
        """
        Args:
            device:       Device index, a substring of its name, or None for
                          the system default input.
            sample_rate:  Sample rate in Hz.
            block_frames: Stereo frames returned by each read().
        """
        if isinstance(device, str):
            index = find_input_device(device)
            if index is None:
                raise RuntimeError(f"No stereo input device matching {device!r}. "
                                   "Run with --list-devices to see what is available.")
            device = index
        self._device = device
        self._sample_rate = sample_rate
        self._block_frames = block_frames
        self._stream = None

    @property
    def sample_rate(self):
        return self._sample_rate

    @property
    def block_frames(self):
        return self._block_frames

    def start(self):
        """Open and start the input stream."""
        self._stream = sd.InputStream(
            device=self._device,
            channels=CHANNELS,
            samplerate=self._sample_rate,
            blocksize=self._block_frames,
            dtype="int16",
        )
        self._stream.start()

    def stop(self):
        """Stop and close the input stream."""
        if self._stream is not None:
            self._stream.stop()
            self._stream.close()
            self._stream = None

    def read(self) -> bytes:
        """Block until one full block is available and return it."""
        data, overflowed = self._stream.read(self._block_frames)
        if overflowed:
            print("[audio] input overflow")
        return data.astype(">i2").tobytes()


def describe_devices() -> str:
    """Human-readable device table, as printed by ``python -m sounddevice``."""
    return str(sd.query_devices())
