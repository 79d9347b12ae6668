"""Command line entry point: scan a signal file for alien transmissions."""

from __future__ import annotations

import os
import sys
from collections.abc import Sequence

from .scan import analyze_signal, format_report
from .signals import (
    MappedSignal,
    Signal,
    SignalError,
    load_binary_signal,
    load_text_signal,
    map_binary_signal,
)

__all__ = ["USAGE", "load_signal", "main"]

USAGE = (
    "usage: band_scan text|bin|mmap signal_file Fs filter_order num_bands "
    "[num_threads num_processors]"
)

_KIND_NAMES = {"T": "Text", "B": "Binary", "M": "Mapped Binary"}


def _kind_code(kind: str) -> str:
    return kind[:1].upper()


def load_signal(kind: str, path: str | os.PathLike[str]) -> Signal:
    """Load a signal; ``kind`` is judged by its first letter: text, bin or mmap."""
    code = _kind_code(kind)
    if code == "T":
        return load_text_signal(path)
    if code == "B":
        return load_binary_signal(path)
    if code == "M":
        return map_binary_signal(path)
    raise ValueError(f"unknown signal type {kind!r}")


def _error(message: str) -> int:
    print(f"error: {message}", file=sys.stderr)
    return 1


def main(argv: Sequence[str] | None = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    if len(args) not in (5, 7):
        print(USAGE)
        return 1

    kind, path = args[0], args[1]
    try:
        fs = float(args[2])
        filter_order = int(args[3])
        num_bands = int(args[4])
        num_threads = int(args[5]) if len(args) == 7 else None
        num_processors = int(args[6]) if len(args) == 7 else None
    except ValueError:
        print(USAGE)
        return 1

    if fs <= 0.0:
        return _error(f"sample rate must be positive, got {fs}")
    if filter_order <= 0 or filter_order % 2:
        return _error(f"filter order must be a positive even number, got {filter_order}")
    if num_bands <= 0:
        return _error(f"number of bands must be positive, got {num_bands}")
    if num_threads is not None and num_threads <= 0:
        return _error(f"number of threads must be positive, got {num_threads}")
    if num_processors is not None and num_processors <= 0:
        return _error(f"number of processors must be positive, got {num_processors}")

    code = _kind_code(kind)
    print(f"type:     {_KIND_NAMES.get(code, 'UNKNOWN TYPE')}")
    print(f"file:     {path}")
    print(f"Fs:       {fs:f} Hz")
    print(f"order:    {filter_order}")
    print(f"bands:    {num_bands}")
    print("Load or map file")

    if code not in _KIND_NAMES:
        print("Unknown signal type")
        return 1

    try:
        signal = load_signal(kind, path)
    except SignalError:
        print("Unable to load or map file")
        return 1
    print(f"Read {signal.num_samples} samples")

    signal.fs = fs
    try:
        result = analyze_signal(
            signal, filter_order, num_bands, num_threads, num_processors
        )
    except ValueError as exc:
        return _error(str(exc))
    finally:
        if isinstance(signal, MappedSignal) and signal.mapped:
            signal.close()

    print(format_report(result), end="")
    return 0


if __name__ == "__main__":
    sys.exit(main())