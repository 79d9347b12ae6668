"""Scan a signal band by band for unusually strong power in the alien range."""

from __future__ import annotations

import math
import os
import threading
from collections.abc import MutableSequence, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field

from .filters import convolve_and_compute_power, generate_band_pass, hamming_window
from .signals import Signal
from .timing import (
    Resources,
    cycles_to_seconds,
    get_cycle_count,
    get_resources,
    get_resources_diff,
    get_seconds,
    timing_overhead,
)

__all__ = [
    "MAXWIDTH",
    "THRESHOLD",
    "ALIENS_LOW",
    "ALIENS_HIGH",
    "BandResult",
    "ScanResult",
    "avg_power",
    "avg_of",
    "remove_dc",
    "band_edges",
    "band_powers",
    "parallel_band_powers",
    "classify_bands",
    "analyze_signal",
    "format_report",
]

MAXWIDTH = 40
THRESHOLD = 2.0
ALIENS_LOW = 50000.0
ALIENS_HIGH = 150000.0

_EDGE_MARGIN = 0.0001  # keeps band edges strictly inside (0, fs/2)


@dataclass(frozen=True)
class BandResult:
    """Power found in one frequency band and whether it stands out."""

    band: int
    low: float
    high: float
    power: float
    wow: bool = False


@dataclass
class ScanResult:
    """Everything an analysis of one signal produced."""

    dc: float
    signal_power: float
    bands: list[BandResult]
    resources: Resources = field(default_factory=Resources)
    cycles: int = 0
    overhead_cycles: int = 0
    wall_seconds: float = 0.0

    @property
    def aliens(self) -> bool:
        return any(b.wow for b in self.bands)

    @property
    def alien_range(self) -> tuple[float, float] | None:
        """Low edge of the first and high edge of the last outstanding band."""
        wows = [b for b in self.bands if b.wow]
        if not wows:
            return None
        return wows[0].low, wows[-1].high


def avg_of(data: Sequence[float]) -> float:
    """Mean of the samples."""
    if not len(data):
        raise ValueError("cannot average an empty signal")
    return sum(data) / len(data)


def avg_power(data: Sequence[float]) -> float:
    """Mean of the squared samples."""
    if not len(data):
        raise ValueError("cannot compute the power of an empty signal")
    return sum(x * x for x in data) / len(data)


def remove_dc(data: MutableSequence[float]) -> float:
    """Subtract the mean from the samples in place and return it."""
    dc = avg_of(data)
    for i, x in enumerate(data):
        data[i] = x - dc
    return dc


def band_edges(band: int, bandwidth: float) -> tuple[float, float]:
    """Low and high critical frequencies of band number ``band``."""
    return band * bandwidth + _EDGE_MARGIN, (band + 1) * bandwidth - _EDGE_MARGIN


def _bandwidth(signal: Signal, num_bands: int) -> float:
    if num_bands <= 0:
        raise ValueError(f"number of bands must be positive, got {num_bands}")
    return signal.fs / 2 / num_bands


def _band_power(signal: Signal, band: int, bandwidth: float, filter_order: int) -> float:
    low, high = band_edges(band, bandwidth)
    coeffs = hamming_window(generate_band_pass(signal.fs, low, high, filter_order))
    return convolve_and_compute_power(signal.data, coeffs)


def band_powers(signal: Signal, filter_order: int, num_bands: int) -> list[float]:
    """Power of the signal in each of ``num_bands`` equal bands up to fs/2."""
    bandwidth = _bandwidth(signal, num_bands)
    return [
        _band_power(signal, band, bandwidth, filter_order) for band in range(num_bands)
    ]


def _blocks(num_bands: int, num_threads: int) -> list[range]:
    if num_bands < num_threads:
        return [range(band, band + 1) for band in range(num_bands)]
    size = num_bands // num_threads
    blocks = [range(i * size, (i + 1) * size) for i in range(num_threads)]
    # The last worker also takes the leftover bands.
    blocks[-1] = range(blocks[-1].start, num_bands)
    return blocks


def _pin_current_thread(worker: int, num_processors: int, cpus: list[int]) -> None:
    if not cpus:
        return
    cpu = cpus[(worker % num_processors) % len(cpus)]
    os.sched_setaffinity(0, {cpu})


def parallel_band_powers(
    signal: Signal,
    filter_order: int,
    num_bands: int,
    num_threads: int,
    num_processors: int,
) -> list[float]:
    """Like :func:`band_powers`, with the bands shared among worker threads.

    Worker ``i`` is pinned to processor ``i % num_processors`` where the
    platform allows it.
    """
    bandwidth = _bandwidth(signal, num_bands)
    if num_threads <= 0:
        raise ValueError(f"number of threads must be positive, got {num_threads}")
    if num_processors <= 0:
        raise ValueError(
            f"number of processors must be positive, got {num_processors}"
        )

    cpus = (
        sorted(os.sched_getaffinity(0)) if hasattr(os, "sched_setaffinity") else []
    )
    powers = [0.0] * num_bands
    lock = threading.Lock()

    def work(worker: int, bands: range) -> None:
        _pin_current_thread(worker, num_processors, cpus)
        results = [
            (band, _band_power(signal, band, bandwidth, filter_order)) for band in bands
        ]
        with lock:
            for band, power in results:
                powers[band] = power

    blocks = _blocks(num_bands, num_threads)
    with ThreadPoolExecutor(max_workers=len(blocks)) as pool:
        futures = [pool.submit(work, i, bands) for i, bands in enumerate(blocks)]
        for future in futures:
            future.result()
    return powers


def classify_bands(powers: Sequence[float], bandwidth: float) -> list[BandResult]:
    """Mark bands in the alien range whose power exceeds THRESHOLD times the mean."""
    if not powers:
        raise ValueError("no band powers to classify")
    mean = avg_of(powers)
    results = []
    for band, power in enumerate(powers):
        low, high = band_edges(band, bandwidth)
        in_range = ALIENS_LOW <= low <= ALIENS_HIGH or ALIENS_LOW <= high <= ALIENS_HIGH
        results.append(
            BandResult(band, low, high, power, in_range and power > THRESHOLD * mean)
        )
    return results


def analyze_signal(
    signal: Signal,
    filter_order: int,
    num_bands: int,
    num_threads: int | None = None,
    num_processors: int | None = None,
) -> ScanResult:
    """Remove the DC component, measure every band's power, and classify them.

    Without ``num_threads`` the bands are measured in the calling thread.
    """
    bandwidth = _bandwidth(signal, num_bands)
    dc = remove_dc(signal.data)
    signal_power = avg_power(signal.data)

    rstart = get_resources()
    start = get_seconds()
    tstart = get_cycle_count()

    if num_threads is None:
        powers = band_powers(signal, filter_order, num_bands)
    else:
        processors = num_processors if num_processors is not None else os.cpu_count() or 1
        powers = parallel_band_powers(
            signal, filter_order, num_bands, num_threads, processors
        )

    tend = get_cycle_count()
    end = get_seconds()
    rdiff = get_resources_diff(rstart, get_resources())

    return ScanResult(
        dc=dc,
        signal_power=signal_power,
        bands=classify_bands(powers, bandwidth),
        resources=rdiff,
        cycles=tend - tstart,
        overhead_cycles=timing_overhead(),
        wall_seconds=end - start,
    )


def _stars(power: float, max_power: float) -> str:
    if max_power <= 0:
        return ""
    width = MAXWIDTH * (power / max_power)
    return "*" * max(0, math.ceil(width))


def format_report(result: ScanResult) -> str:
    """Render the analysis as the human-readable report, ending with a verdict."""
    lines = [
        f"Removing DC component of {result.dc:f}",
        f"signal average power:     {result.signal_power:f}",
    ]
    max_power = max((b.power for b in result.bands), default=0.0)
    for b in result.bands:
        lines.append(
            f"{b.band:5d} {b.low:20f} to {b.high:20f} Hz: {b.power:20f} "
            f"{_stars(b.power, max_power)}{'(WOW)' if b.wow else '(meh)'}"
        )
    r = result.resources
    lines += [
        "Resource usages:",
        f"User time        {r.usertime:f} seconds",
        f"System time      {r.systime:f} seconds",
        f"Page faults      {r.pagefaults}",
        f"Page swaps       {r.pageswaps}",
        f"Blocks of I/O    {r.ioblocks}",
        f"Signals caught   {r.sigs}",
        f"Context switches {r.contextswitches}",
        f"Analysis took {result.cycles} cycles "
        f"({cycles_to_seconds(result.cycles):f} seconds) by cycle count, "
        f"timing overhead={result.overhead_cycles} cycles",
        "Note that cycle count only makes sense if the thread stayed on one core",
        f"Analysis took {result.wall_seconds:f} seconds by basic timing",
    ]
    span = result.alien_range
    if span is None:
        lines.append("no aliens")
    else:
        low, high = span
        lines.append(
            f"POSSIBLE ALIENS {low:f}-{high:f} HZ (CENTER {(low + high) / 2.0:f} HZ)"
        )
    return "\n".join(lines) + "\n"