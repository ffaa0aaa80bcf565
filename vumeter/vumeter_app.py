"""Needle VU meter — desktop entry point.

Captures stereo audio from the default (or a named) input device and shows
it on two analogue-style meters whose needles are simulated as damped
masses on springs.

Usage:
    python vumeter/vumeter_app.py [--width 800] [--hz 85] [--device NAME]
    python vumeter/vumeter_app.py --list-devices

Installed, the same entry point is the ``vumeter`` command.
"""

import argparse
import signal
import threading

import pygame

from audio_capture import (AudioCapture, BLOCK_FRAMES, SAMPLE_RATE,
                           describe_devices)
from level_meter import LevelMeter, WARMUP_SECONDS, sample_audio
from meter_canvas import PygameCanvas, parse_colour

VERSION = "VU Meter 20190318"

DEFAULT_WIDTH = 800
DEFAULT_HZ = 85
DEFAULT_BACKGROUND = "#ffcc66"
DEFAULT_FOREGROUND = "black"
DEFAULT_PEAK = "178,0,0"  # dark red


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Stereo needle VU meter")
    parser.add_argument("--width", type=int, default=DEFAULT_WIDTH,
                        help="Window width in pixels (default: 800)")
    parser.add_argument("--hz", type=int, default=DEFAULT_HZ,
                        help="Meter update rate in Hz (default: 85)")
    parser.add_argument("--background", type=parse_colour, default=DEFAULT_BACKGROUND,
                        help="Face colour, name, #rrggbb or r,g,b")
    parser.add_argument("--foreground", type=parse_colour, default=DEFAULT_FOREGROUND,
                        help="Needle and scale colour")
    parser.add_argument("--peak", type=parse_colour, default=DEFAULT_PEAK,
                        help="Colour of the peak segment of the scale")
    parser.add_argument("--device",
                        help="Input device index or part of its name")
    parser.add_argument("--sample-rate", type=int, default=SAMPLE_RATE,
                        help="Capture sample rate in Hz (default: 44100)")
    parser.add_argument("--block-frames", type=int, default=BLOCK_FRAMES,
                        help="Stereo frames per audio read (default: 512)")
    parser.add_argument("--warmup", type=float, default=WARMUP_SECONDS,
                        help="Start-up full-scale needle sweep in seconds")
    parser.add_argument("--list-devices", action="store_true",
                        help="List audio devices and exit")
    args = parser.parse_args(argv)
    if args.width < 16:
        parser.error("--width must be at least 16")
    if args.hz <= 0:
        parser.error("--hz must be positive")
    if args.device is not None and args.device.isdigit():
        args.device = int(args.device)
    return args


def main(argv=None):
    args = parse_args(argv)
    if args.list_devices:
        print(describe_devices())
        return

    meter = LevelMeter(args.width, args.background, args.foreground,
                       args.peak, args.hz)

    def shutdown(sig, frame):
        meter.stop()

    signal.signal(signal.SIGINT, shutdown)
    signal.signal(signal.SIGTERM, shutdown)

    print("[vumeter] Starting audio capture...")
    audio = AudioCapture(device=args.device, sample_rate=args.sample_rate,
                         block_frames=args.block_frames)
    audio.start()
    sampler = None
    try:
        canvas = PygameCanvas.open_window(meter.size, VERSION, on_close=meter.stop)
        sampler = threading.Thread(target=sample_audio,
                                   args=(meter, audio.read, args.warmup),
                                   name="AudioSampler", daemon=True)
        sampler.start()
        print(f"[vumeter] Running at {args.hz} Hz — close the window to quit")
        meter.run(canvas)
    finally:
        print("[vumeter] Shutting down...")
        meter.stop()
        if sampler is not None:
            sampler.join(timeout=2.0)
            if sampler.is_alive():
                print("[vumeter] WARNING: sampler thread still blocked on audio")
        audio.stop()
        pygame.quit()


if __name__ == "__main__":
    main()
