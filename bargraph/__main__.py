"""Bar graph preview: play recorded FFT frames through the analyser.

Loads a 2-D array of raw FFT frames (one frame per row) and prints the
resulting bar spectrum to the terminal at a fixed frame rate.

Usage:
    python -m bargraph frames.npy [--bands 80] [--fps 30] [--banded]
    python -m bargraph capture.bin --raw --frame-size 1024
"""

import argparse
import logging
import signal
import sys
import time

import numpy as np

from bargraph.analyser import SpectrumAnalyser
from bargraph.config import (
    BAND_COUNT,
    END_FREQUENCY,
    FFT_SIZE,
    SAMPLE_RATE,
    START_FREQUENCY,
    AnalyserConfig,
    ConfigurationError,
)
from bargraph.renderer import render_console

TARGET_FPS = 30
CONSOLE_WIDTH = 53


def load_frames(path: str, raw: bool = False, frame_size: int | None = None) -> np.ndarray:
    """Load FFT frames as a (frames, samples) array.

    `.npy` files are loaded with numpy; with `raw` the file is read as
    signed bytes and cut into rows of `frame_size`.
    """
    if raw:
        if not frame_size or frame_size <= 0:
            raise ValueError("--frame-size is required with --raw")
        data = np.fromfile(path, dtype=np.int8)
        usable = (len(data) // frame_size) * frame_size
        return data[:usable].reshape(-1, frame_size)

    frames = np.load(path)
    if frames.ndim == 1:
        frames = frames[np.newaxis, :]
    if frames.ndim != 2:
        raise ValueError(f"Expected a 2-D array of frames, got shape {frames.shape}")
    return frames


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="bargraph",
                                     description="Bar graph spectrum preview")
    parser.add_argument("input", help="Frames file (.npy, or raw int8 with --raw)")
    parser.add_argument("--raw", action="store_true",
                        help="Read input as raw signed bytes")
    parser.add_argument("--frame-size", type=int,
                        help="Samples per frame for --raw input")
    parser.add_argument("--bands", type=int, default=BAND_COUNT,
                        help=f"Number of frequency bands (default: {BAND_COUNT})")
    parser.add_argument("--start", type=float, default=START_FREQUENCY,
                        help=f"Lowest band edge in Hz (default: {START_FREQUENCY:g})")
    parser.add_argument("--end", type=float, default=END_FREQUENCY,
                        help=f"Highest band edge in Hz (default: {END_FREQUENCY:g})")
    parser.add_argument("--fft-size", type=int, default=FFT_SIZE,
                        help=f"FFT size, power of two (default: {FFT_SIZE})")
    parser.add_argument("--sample-rate", type=float, default=SAMPLE_RATE,
                        help=f"Sample rate in Hz (default: {SAMPLE_RATE:g})")
    parser.add_argument("--banded", action="store_true",
                        help="Show the per-band peaks instead of the smoothed bins")
    parser.add_argument("--fps", type=float, default=TARGET_FPS,
                        help=f"Playback rate, 0 = as fast as possible (default: {TARGET_FPS})")
    parser.add_argument("--max-frames", type=int,
                        help="Stop after this many frames")
    parser.add_argument("--width", type=int, default=CONSOLE_WIDTH,
                        help=f"Console columns (default: {CONSOLE_WIDTH})")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Enable debug logging")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="%(levelname)s %(name)s: %(message)s")

    try:
        config = AnalyserConfig(
            band_count=args.bands,
            start_frequency=args.start,
            end_frequency=args.end,
            fft_size=args.fft_size,
            sample_rate=args.sample_rate,
        )
        analyser = SpectrumAnalyser(config)
    except ConfigurationError as e:
        print(f"[bargraph] Invalid configuration: {e}", file=sys.stderr)
        return 2

    try:
        frames = load_frames(args.input, args.raw, args.frame_size)
    except (OSError, ValueError) as e:
        print(f"[bargraph] Cannot load frames: {e}", file=sys.stderr)
        return 1

    if args.max_frames is not None:
        frames = frames[:args.max_frames]
    print(f"[bargraph] {len(frames)} frames, {frames.shape[1]} samples each, "
          f"{analyser.band_count} bands")

    running = True

    def shutdown(sig, frame):
        nonlocal running
        running = False

    previous = {sig: signal.signal(sig, shutdown)
                for sig in (signal.SIGINT, signal.SIGTERM)}

    interval = 1.0 / args.fps if args.fps > 0 else 0.0
    try:
        for frame in frames:
            if not running:
                break
            t0 = time.monotonic()

            buffer = analyser.analyse(frame)
            values = analyser.banded_spectrum if args.banded else [ch.left for ch in buffer]
            print(f"\r|{render_console(values, args.width)}|", end="", flush=True)

            # Sleep remainder of frame
            elapsed = time.monotonic() - t0
            if elapsed < interval:
                time.sleep(interval - elapsed)
    finally:
        print()
        for sig, handler in previous.items():
            signal.signal(sig, handler)
    return 0


if __name__ == "__main__":
    sys.exit(main())
