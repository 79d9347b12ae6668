"""Sum a vector sequentially and with worker threads, and compare the timings."""

from __future__ import annotations

import os
import sys
import threading
from collections.abc import Sequence

from .timing import get_cycle_count

__all__ = ["USAGE", "block_range", "sequential_sum", "parallel_sum", "main"]

USAGE = "usage: parallel-sum-ex number-of-threads number-of-procs length-of-vector"


def block_range(worker_id: int, num_workers: int, length: int) -> range:
    """Indices summed by ``worker_id``; the last worker also takes the leftovers."""
    if num_workers <= 0:
        raise ValueError(f"number of workers must be positive, got {num_workers}")
    if not 0 <= worker_id < num_workers:
        raise ValueError(f"worker id {worker_id} out of range")
    size = length // num_workers
    start = worker_id * size
    end = length if worker_id == num_workers - 1 else start + size
    return range(start, end)


def sequential_sum(vector: Sequence[float]) -> float:
    """Sum the vector in order in the calling thread."""
    total = 0.0
    for x in vector:
        total += x
    return total


def _allowed_cpus() -> list[int]:
    if hasattr(os, "sched_setaffinity"):
        return sorted(os.sched_getaffinity(0))
    return []


def _pin(worker_id: int, num_processors: int, cpus: list[int]) -> None:
    if cpus:
        os.sched_setaffinity(0, {cpus[(worker_id % num_processors) % len(cpus)]})


def parallel_sum(
    vector: Sequence[float], num_threads: int, num_processors: int
) -> float:
    """Sum the vector in blocks, one per thread, each pinned to a processor."""
    if num_threads <= 0:
        raise ValueError(f"number of threads must be positive, got {num_threads}")
    if num_processors <= 0:
        raise ValueError(
            f"number of processors must be positive, got {num_processors}"
        )
    cpus = _allowed_cpus()
    partial = [0.0] * num_threads
    errors: list[BaseException] = []

    def work(worker_id: int) -> None:
        try:
            _pin(worker_id, num_processors, cpus)
            total = 0.0
            for i in block_range(worker_id, num_threads, len(vector)):
                total += vector[i]
            partial[worker_id] = total
        except BaseException as exc:  # reported by the joining thread
            errors.append(exc)

    threads = [threading.Thread(target=work, args=(i,)) for i in range(num_threads)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    if errors:
        raise errors[0]
    return sum(partial)


def main(argv: Sequence[str] | None = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    if len(args) != 3:
        print(USAGE, file=sys.stderr)
        return 1
    try:
        num_threads, num_processors, length = (int(a) for a in args)
    except ValueError:
        print(USAGE, file=sys.stderr)
        return 1
    if num_threads <= 0 or num_processors <= 0 or length < 0:
        print(USAGE, file=sys.stderr)
        return 1

    vector = [float(i) for i in range(length)]

    start = get_cycle_count()
    seq = sequential_sum(vector)
    seq_cycles = get_cycle_count() - start

    start = get_cycle_count()
    par = parallel_sum(vector, num_threads, num_processors)
    par_cycles = get_cycle_count() - start

    print(f"Sequential sum:   {seq:f} ({seq_cycles} cycles)")
    print(f"Parallel sum:     {par:f} ({par_cycles} cycles)")
    return 0


if __name__ == "__main__":
    sys.exit(main())