"""Audio level helpers: peak extraction and amplitude -> drive force.

The meter scale is logarithmic.  Each large ruler division is one factor of
10**0.3 (about 6 dB, or double the amplitude), and the full needle swing
covers LEVEL_STEPS of them, i.e. 48 dB.  Anything quieter than -48 dBFS
produces no drive at all.
"""

import math

import numpy as np

SIX_DBA = 10 ** 0.3
LEVEL_STEPS = 8

FULL_SCALE = 32768.0
BYTES_PER_FRAME = 4  # 16-bit stereo


def force_from_amplitude(amplitude: float) -> float:
    """Map a linear amplitude in (0, 1] onto a 0..1 drive force."""
    if amplitude <= 0.0:
        return 0.0
    force = math.log(amplitude) / math.log(SIX_DBA) + LEVEL_STEPS
    if force < 0.0:
        force = 0.0
    return force / LEVEL_STEPS


def peak_amplitude(buffer: bytes, channel: int) -> float:
    """Return the peak absolute sample of one channel, normalised to 0..1.

    Args:
        buffer:  Interleaved big-endian signed 16-bit stereo frames
                 (L-hi, L-lo, R-hi, R-lo).  A trailing partial frame is
                 ignored.
        channel: 0 for left, 1 for right.
    """
    usable = len(buffer) - len(buffer) % BYTES_PER_FRAME
    if usable == 0:
        return 0.0
    samples = np.frombuffer(buffer, dtype=">i2", count=usable // 2)
    # Widen before abs() so that -32768 does not wrap.
    channel_samples = samples[channel::2].astype(np.int32)
    return int(np.abs(channel_samples).max()) / FULL_SCALE
