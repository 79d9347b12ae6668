"""Start threads that pin themselves to processors, sleep, and get joined."""

from __future__ import annotations

import os
import random
import sys
import threading
import time
from collections.abc import Callable, Sequence
from typing import TextIO

__all__ = ["USAGE", "run_threads", "main"]

USAGE = "usage: pthread-ex number-of-threads number-of-procs"


def _random_sleep(worker_id: int) -> float:
    return random.randint(1, 10)


def run_threads(
    num_threads: int,
    num_processors: int,
    sleep_for: Callable[[int], float] | None = None,
    out: TextIO | None = None,
) -> int:
    """Run the demo and return how many threads were started.

    ``sleep_for`` gives each thread's sleep in seconds from its number; by
    default a random whole number from 1 to 10.
    """
    if num_threads < 1:
        raise ValueError(f"number of threads must be at least 1, got {num_threads}")
    if num_processors < 1:
        raise ValueError(
            f"number of processors must be at least 1, got {num_processors}"
        )
    sleep_for = sleep_for or _random_sleep
    stream = out if out is not None else sys.stdout
    lock = threading.Lock()
    errors: list[BaseException] = []
    cpus = sorted(os.sched_getaffinity(0)) if hasattr(os, "sched_setaffinity") else []

    def say(text: str) -> None:
        with lock:
            stream.write(text + "\n")

    def work(worker_id: int) -> None:
        try:
            target = worker_id % num_processors
            say(f"Hello from thread {worker_id} (tid {threading.get_ident()})")
            say(f"Thread {worker_id} is putting itself onto processor {target}")
            if cpus:
                os.sched_setaffinity(0, {cpus[target % len(cpus)]})
            seconds = sleep_for(worker_id)
            say(f"Thread {worker_id} now sleeping for {seconds} seconds")
            time.sleep(seconds)
            say(f"Thread {worker_id} done sleeping and now exiting")
        except BaseException as exc:  # reported by the joining thread
            errors.append(exc)

    say(
        f"Starting {num_threads} software threads on {num_processors} "
        "processors (hardware threads)"
    )
    threads: list[threading.Thread | None] = []
    for i in range(num_threads):
        thread = threading.Thread(target=work, args=(i,))
        try:
            thread.start()
        except RuntimeError as exc:
            say(f"Failed to start thread {i}: {exc}")
            threads.append(None)
        else:
            say(f"Started thread {i}, tid {thread.ident}")
            threads.append(thread)

    started = sum(t is not None for t in threads)
    say(f"Finished starting threads ({started} started)")
    say("Now joining")
    for i, thread in enumerate(threads):
        if thread is None:
            say(f"Skipping {i} (wasn't started successfully)")
            continue
        say(f"Joining with {i}, tid {thread.ident}")
        thread.join()
        say(f"Done joining with {i}")
    say("Done!")

    if errors:
        raise errors[0]
    return started


def main(argv: Sequence[str] | None = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    try:
        if len(args) != 2:
            raise ValueError
        num_threads, num_processors = int(args[0]), int(args[1])
        if num_threads < 1 or num_processors < 1:
            raise ValueError
    except ValueError:
        print(USAGE, file=sys.stderr)
        return 1
    run_threads(num_threads, num_processors)
    return 0


if __name__ == "__main__":
    sys.exit(main())