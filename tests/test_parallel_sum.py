import re

import pytest

from bandscan.parallel_sum import block_range, main, parallel_sum, sequential_sum


@pytest.mark.parametrize("workers,length", [(1, 10), (3, 10), (4, 4), (5, 3), (7, 100)])
def test_blocks_cover_vector_in_order(workers, length):
    indices = [i for w in range(workers) for i in block_range(w, workers, length)]
    assert indices == list(range(length))


def test_last_block_takes_leftovers():
    assert block_range(3, 4, 10) == range(6, 10)
    assert block_range(0, 4, 10) == range(0, 2)


def test_block_range_rejects_bad_worker():
    with pytest.raises(ValueError):
        block_range(4, 4, 10)


def test_sequential_sum():
    vector = [float(i) for i in range(1000)]
    assert sequential_sum(vector) == float(sum(range(1000)))


@pytest.mark.parametrize("threads,procs", [(1, 1), (3, 2), (8, 1), (20, 4)])
def test_parallel_matches_sequential(threads, procs):
    vector = [float(i) for i in range(1000)]
    assert parallel_sum(vector, threads, procs) == sequential_sum(vector)


def test_parallel_sum_rejects_zero_threads():
    with pytest.raises(ValueError):
        parallel_sum([1.0], 0, 1)


def test_main_reports_equal_sums(capsys):
    assert main(["3", "2", "100"]) == 0
    out = capsys.readouterr().out
    seq = re.search(r"Sequential sum:\s+(\S+)", out).group(1)
    par = re.search(r"Parallel sum:\s+(\S+)", out).group(1)
    assert seq == par == f"{float(sum(range(100))):f}"


def test_main_usage(capsys):
    assert main(["1", "2"]) != 0
    assert "usage: parallel-sum-ex" in capsys.readouterr().err