# bandscan

`bandscan` splits a sampled signal into equal-width frequency bands up to half
the sample rate. It passes the signal through a Hamming-windowed FIR band-pass
filter for each band and reports how much power falls in each band. A band is
flagged when both of these hold:

* one of its edges lies in the 50 kHz – 150 kHz window;
* its power is more than twice the average band power.

The package also includes the filter toolkit that the scan uses:

* low-pass, high-pass, band-pass and band-stop FIR design;
* convolution;
* Butterworth design and zero-phase filtering.

Beyond that it provides loaders and savers for text and raw binary signal
files, timing and resource-usage helpers, and two small threading
demonstrations.

It needs a POSIX system. Resource usage comes from the `resource` module.
Threads pin themselves to processors only where `os.sched_setaffinity` exists.

## Installing

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Scanning a signal

```
band-scan text|bin|mmap SIGNAL_FILE FS FILTER_ORDER NUM_BANDS [NUM_THREADS NUM_PROCESSORS]
```

The first argument gives the file type. Only its first letter counts, in any
case:

* `text` reads whitespace-separated numbers and stops at the first token that
  is not a number.
* `bin` reads raw native-endian doubles. Trailing bytes that do not make up a
  whole sample are ignored.
* `mmap` maps a raw double file read/write instead of reading it. The scan
  removes the signal's DC component in place, so with `mmap` that change is
  written back to the file.

The other arguments:

* `FS` is the sample rate in Hz and must be positive.
* `FILTER_ORDER` must be a positive even number.
* `NUM_BANDS` must be positive.
* With `NUM_THREADS` and `NUM_PROCESSORS`, worker threads share out the bands.
  Worker `i` is pinned to processor `i % NUM_PROCESSORS`.

The command first echoes its settings. It then prints a report with these
parts:

* the DC component removed and the signal's average power;
* every band with its edges, its power, a bar of up to 40 `*` scaled to the
  strongest band, and a `(WOW)` or `(meh)` mark;
* resource usage and timing;
* a last line of either `POSSIBLE ALIENS low-high HZ (CENTER c HZ)` or
  `no aliens`.

On a usage error, a bad value, or a file that cannot be loaded, it returns
exit status 1.

## Using the library

```python
from bandscan.filters import generate_band_pass, hamming_window, convolve_and_compute_power
from bandscan.signals import load_text_signal
from bandscan.scan import analyze_signal, format_report

signal = load_text_signal("samples.txt")
signal.fs = 400_000.0

result = analyze_signal(signal, 32, 16, 4, 2)   # order 32, 16 bands, 4 threads, 2 processors
print(format_report(result), end="")
print(result.aliens, result.alien_range)

coeffs = hamming_window(generate_band_pass(400_000.0, 1000.0, 2000.0, 32))
power = convolve_and_compute_power(signal.data, coeffs)
```

### `bandscan.filters`

* `generate_low_pass`, `generate_high_pass`, `generate_band_pass` and
  `generate_band_stop` return `order + 1` coefficients. They raise
  `ValueError` in these cases:
  * the order is not positive and even;
  * a critical frequency is not strictly between 0 and `fs / 2`.
* `hamming_window` returns the coefficients multiplied by a Hamming window.
* `convolve` returns the causal convolution of the samples with the
  coefficients, with the same length as the input.
* `convolve_and_compute_power` returns the average power of that output.
* `butter(n, fcf)` returns the `(b, a)` coefficients of an `n`-th order
  Butterworth low-pass filter. The cutoff `fcf` is a fraction of the Nyquist
  frequency.
* `apply_filter(b, a, x)` runs `x` through the filter.
* `filtfilt(b, a, x)` filters `x` forwards and then backwards.

### `bandscan.signals`

`Signal` holds `data` and `fs`. Its `num_samples` property gives the number
of samples. The module provides these functions:

* `load_text_signal` and `save_text_signal`. The saver writes one sample per
  line with six decimal places.
* `load_binary_signal` and `save_binary_signal`.
* `map_binary_signal`, which returns a `MappedSignal`. Writes to its `data`
  reach the file. Close it with `close()` or use it in a `with` block.

Failures raise `SignalError`.

### `bandscan.scan`

* `analyze_signal(signal, filter_order, num_bands, num_threads=None, num_processors=None)`
  removes the DC component from `signal.data` in place and measures every
  band. It returns a `ScanResult` with these fields:
  * `dc` and `signal_power`;
  * one `BandResult` per band, with `band`, `low`, `high`, `power` and `wow`;
  * resource usage and timings.
* Without `num_threads`, the bands are measured in the calling thread.
* The same steps are available separately: `band_powers`,
  `parallel_band_powers`, `classify_bands`, `band_edges`, `remove_dc`,
  `avg_of` and `avg_power`.
* `format_report(result)` renders the report that `band-scan` prints.

### `bandscan.timing`

* `get_seconds` and `get_seconds_diff` read wall-clock time.
* `get_cycle_count`, `get_cycle_count_diff`, `cycles_to_seconds` and
  `timing_overhead` express the high-resolution clock as cycles at a fixed
  reference rate, `CPU_KHZ`. These are not read from a hardware cycle counter.
* `get_resources(scope)` returns a `Resources` record for the process. With
  `ResourceScope.THIS_THREAD` it returns the record for the calling thread,
  where the platform supports that, and raises `OSError` otherwise.
* `get_resources_diff` subtracts two readings; `Resources` objects also
  support `-`.

## Threading demos

```
parallel-sum NUM_THREADS NUM_PROCESSORS VECTOR_LENGTH
```

This sums the vector `0, 1, …, n-1` once in sequence and once split between
threads. The last thread also takes the leftover elements. It prints both sums
with the cycles each took. The same work is available as `sequential_sum`,
`parallel_sum` and `block_range` in `bandscan.parallel_sum`.

```
thread-demo NUM_THREADS NUM_PROCESSORS
```

This starts threads that pin themselves to a processor where the platform
allows it. Each thread sleeps for a random whole number of seconds from 1 to
10, and the demo reports as threads start, finish and are joined.
`bandscan.thread_demo.run_threads` takes an optional `sleep_for` function and
an output stream.