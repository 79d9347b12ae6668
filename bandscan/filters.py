"""FIR filter design by windowed sincs, convolution, and Butterworth IIR filters.

FIR filters have ``order + 1`` coefficients and ``order`` must be a positive
even number.  ``fs`` is the sample rate.  ``fc``, ``fcl`` and ``fch`` are
critical frequencies, which must lie strictly between 0 and ``fs / 2``.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

__all__ = [
    "generate_low_pass",
    "generate_high_pass",
    "generate_band_pass",
    "generate_band_stop",
    "hamming_window",
    "convolve",
    "convolve_and_compute_power",
    "butter",
    "apply_filter",
    "filtfilt",
]


def _check_order(order: int) -> None:
    if order <= 0 or order % 2:
        raise ValueError(f"filter order must be a positive even number, got {order}")


def _check_frequencies(fs: float, *critical: float) -> None:
    if fs <= 0:
        raise ValueError(f"sample rate must be positive, got {fs}")
    for fc in critical:
        if not 0 < fc < fs / 2:
            raise ValueError(
                f"critical frequency {fc} must lie strictly between 0 and {fs / 2}"
            )


def _sinc_term(ft: float, k: int) -> float:
    return math.sin(2 * math.pi * ft * k) / (math.pi * k)


def generate_low_pass(fs: float, fc: float, order: int) -> list[float]:
    """Return the coefficients of a low-pass FIR filter."""
    _check_order(order)
    _check_frequencies(fs, fc)
    ft = fc / fs
    half = order // 2
    return [
        2 * ft if n == half else _sinc_term(ft, n - half) for n in range(order + 1)
    ]


def generate_high_pass(fs: float, fc: float, order: int) -> list[float]:
    """Return the coefficients of a high-pass FIR filter."""
    _check_order(order)
    _check_frequencies(fs, fc)
    ft = fc / fs
    half = order // 2
    return [
        1 - 2 * ft if n == half else -_sinc_term(ft, n - half)
        for n in range(order + 1)
    ]


def generate_band_pass(fs: float, fcl: float, fch: float, order: int) -> list[float]:
    """Return the coefficients of a band-pass FIR filter for ``fcl``..``fch``."""
    _check_order(order)
    _check_frequencies(fs, fcl, fch)
    ftl = fcl / fs
    fth = fch / fs
    half = order // 2
    return [
        2 * (fth - ftl)
        if n == half
        else _sinc_term(fth, n - half) - _sinc_term(ftl, n - half)
        for n in range(order + 1)
    ]


def generate_band_stop(fs: float, fcl: float, fch: float, order: int) -> list[float]:
    """Return the coefficients of a band-stop (notch) FIR filter."""
    _check_order(order)
    _check_frequencies(fs, fcl, fch)
    ftl = fcl / fs
    fth = fch / fs
    half = order // 2
    return [
        1 - 2 * (fth - ftl)
        if n == half
        else _sinc_term(ftl, n - half) - _sinc_term(fth, n - half)
        for n in range(order + 1)
    ]


def hamming_window(coeffs: Sequence[float]) -> list[float]:
    """Return the coefficients smoothed by a Hamming window."""
    order = len(coeffs) - 1
    _check_order(order)
    return [
        c * (0.54 - 0.46 * math.cos(2 * math.pi * n / order))
        for n, c in enumerate(coeffs)
    ]


def _causal_outputs(samples: Sequence[float], coeffs: Sequence[float]):
    order = len(coeffs) - 1
    for i in range(len(samples)):
        acc = 0.0
        # Inputs before the start of the signal are taken as zero.
        for j in range(min(i, order), -1, -1):
            acc += samples[i - j] * coeffs[j]
        yield acc


def convolve(samples: Sequence[float], coeffs: Sequence[float]) -> list[float]:
    """Causally convolve ``samples`` with ``coeffs``; the output has the input's length."""
    return list(_causal_outputs(samples, coeffs))


def convolve_and_compute_power(
    samples: Sequence[float], coeffs: Sequence[float]
) -> float:
    """Return the average power of ``samples`` convolved with ``coeffs``."""
    if not samples:
        raise ValueError("cannot compute the power of an empty signal")
    return sum(y * y for y in _causal_outputs(samples, coeffs)) / len(samples)


def _binomial_mult(p: Sequence[complex]) -> list[complex]:
    """Coefficients of (x + p[0]) * ... * (x + p[n-1]), leading 1 omitted."""
    a = [0j] * len(p)
    for i, pi in enumerate(p):
        for j in range(i, 0, -1):
            a[j] += pi * a[j - 1]
        a[0] += pi
    return a


def _ccof_bwlp(n: int) -> list[float]:
    ccof = [0.0] * (n + 1)
    ccof[0] = 1.0
    ccof[1] = float(n)
    for i in range(2, n // 2 + 1):
        ccof[i] = (n - i + 1) * ccof[i - 1] / i
        ccof[n - i] = ccof[i]
    ccof[n - 1] = float(n)
    ccof[n] = 1.0
    return ccof


def _dcof_bwlp(n: int, fcf: float) -> list[float]:
    theta = math.pi * fcf
    st = math.sin(theta)
    ct = math.cos(theta)
    poles = []
    for k in range(n):
        parg = math.pi * (2 * k + 1) / (2 * n)
        a = 1.0 + st * math.sin(parg)
        poles.append(complex(-ct / a, -st * math.cos(parg) / a))
    return [1.0] + [c.real for c in _binomial_mult(poles)]


def _sf_bwlp(n: int, fcf: float) -> float:
    omega = math.pi * fcf
    fomega = math.sin(omega)
    parg0 = math.pi / (2 * n)
    sf = 1.0
    for k in range(n // 2):
        sf *= 1.0 + fomega * math.sin((2 * k + 1) * parg0)
    fomega = math.sin(omega / 2.0)
    if n % 2:
        sf *= fomega + math.cos(omega / 2.0)
    return fomega**n / sf


def butter(n: int, fcf: float) -> tuple[list[float], list[float]]:
    """Design an ``n``-th order Butterworth low-pass filter.

    ``fcf`` is the cutoff as a fraction of the Nyquist frequency.  Returns the
    numerator ``b`` and denominator ``a`` coefficients, ``n + 1`` of each.
    """
    if n < 1:
        raise ValueError(f"filter order must be at least 1, got {n}")
    sf = _sf_bwlp(n, fcf)
    b = [c * sf for c in _ccof_bwlp(n)]
    a = _dcof_bwlp(n, fcf)
    return b, a


def apply_filter(
    b: Sequence[float], a: Sequence[float], x: Sequence[float]
) -> list[float]:
    """Run ``x`` through the IIR filter ``b``/``a`` (``a[0]`` taken as 1)."""
    if len(a) != len(b):
        raise ValueError("numerator and denominator must have the same length")
    order = len(b) - 1
    y: list[float] = []
    for i in range(len(x)):
        m = min(i, order)
        acc = 0.0
        for j in range(m + 1):
            acc += b[j] * x[i - j]
        for j in range(m):
            acc -= a[j + 1] * y[i - j - 1]
        y.append(acc)
    return y


def filtfilt(
    b: Sequence[float], a: Sequence[float], x: Sequence[float]
) -> list[float]:
    """Zero-phase filtering: filter forwards, then backwards."""
    forward = apply_filter(b, a, x)
    backward = apply_filter(b, a, forward[::-1])
    return backward[::-1]