"""Sampled signals, loaded from text or raw binary files, or memory-mapped."""

from __future__ import annotations

import mmap
import os
from array import array
from collections.abc import MutableSequence
from dataclasses import dataclass

__all__ = [
    "SignalError",
    "Signal",
    "MappedSignal",
    "load_text_signal",
    "save_text_signal",
    "load_binary_signal",
    "save_binary_signal",
    "map_binary_signal",
]

_SAMPLE_SIZE = array("d").itemsize


class SignalError(Exception):
    """A signal could not be loaded, saved or mapped."""


@dataclass
class Signal:
    """Samples and their sample rate."""

    data: MutableSequence[float]
    fs: float = 0.0

    @property
    def num_samples(self) -> int:
        return len(self.data)


class MappedSignal(Signal):
    """A binary signal file mapped into memory; writes to ``data`` reach the file."""

    def __init__(self, path: str | os.PathLike[str]) -> None:
        num = _num_binary_samples(path)
        try:
            with open(path, "r+b") as f:
                self._mmap: mmap.mmap | None = mmap.mmap(
                    f.fileno(), num * _SAMPLE_SIZE
                )
        except (OSError, ValueError) as exc:
            raise SignalError(f"cannot map {path}: {exc}") from exc
        self._view = memoryview(self._mmap).cast("d")
        super().__init__(data=self._view, fs=0.0)

    @property
    def mapped(self) -> bool:
        return self._mmap is not None

    def close(self) -> None:
        """Flush and unmap the file."""
        if self._mmap is None:
            raise SignalError("not mapped")
        self._view.release()
        self._mmap.flush()
        self._mmap.close()
        self._mmap = None
        self.data = []

    def __enter__(self) -> MappedSignal:
        return self

    def __exit__(self, *exc_info) -> None:
        if self._mmap is not None:
            self.close()


def _parse_samples(text: str):
    for token in text.split():
        try:
            yield float(token)
        except ValueError:
            return


def load_text_signal(path: str | os.PathLike[str]) -> Signal:
    """Read whitespace-separated samples, stopping at the first non-number."""
    try:
        with open(path, encoding="utf-8") as f:
            text = f.read()
    except OSError as exc:
        raise SignalError(f"cannot open {path}: {exc}") from exc
    return Signal(list(_parse_samples(text)))


def save_text_signal(path: str | os.PathLike[str], signal: Signal) -> None:
    """Write one sample per line with six decimal places."""
    try:
        with open(path, "w", encoding="utf-8") as f:
            f.writelines(f"{x:f}\n" for x in signal.data)
    except OSError as exc:
        raise SignalError(f"cannot write {path}: {exc}") from exc


def _num_binary_samples(path: str | os.PathLike[str]) -> int:
    try:
        size = os.stat(path).st_size
    except OSError as exc:
        raise SignalError(f"cannot stat {path}: {exc}") from exc
    num = size // _SAMPLE_SIZE
    if num <= 0:
        raise SignalError(f"{path} holds no samples")
    return num


def load_binary_signal(path: str | os.PathLike[str]) -> Signal:
    """Read native-endian doubles; trailing partial samples are ignored."""
    num = _num_binary_samples(path)
    try:
        with open(path, "rb") as f:
            raw = f.read(num * _SAMPLE_SIZE)
    except OSError as exc:
        raise SignalError(f"cannot read {path}: {exc}") from exc
    if len(raw) < num * _SAMPLE_SIZE:
        raise SignalError(f"short read from {path}")
    samples = array("d")
    samples.frombytes(raw)
    return Signal(samples)


def save_binary_signal(path: str | os.PathLike[str], signal: Signal) -> None:
    """Write the samples as native-endian doubles."""
    try:
        with open(path, "wb") as f:
            f.write(array("d", signal.data).tobytes())
    except OSError as exc:
        raise SignalError(f"cannot write {path}: {exc}") from exc


def map_binary_signal(path: str | os.PathLike[str]) -> MappedSignal:
    """Map a binary signal file read/write into memory."""
    return MappedSignal(path)