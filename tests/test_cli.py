import math

import pytest

from bandscan.cli import load_signal, main
from bandscan.signals import (
    MappedSignal,
    Signal,
    load_binary_signal,
    save_binary_signal,
)

FS = 400000.0
N = 512


def _write_text_signal(path, freq, offset=3.0):
    with open(path, "w", encoding="utf-8") as f:
        for n in range(N):
            f.write(f"{math.sin(2 * math.pi * freq * n / FS) + offset:f}\n")
    return path


def _band_lines(output):
    return [line for line in output.splitlines() if " Hz: " in line]


def test_alien_band_detected(tmp_path, capsys):
    path = _write_text_signal(tmp_path / "sig.txt", 112500.0)
    assert main(["text", str(path), str(FS), "32", "8"]) == 0
    out = capsys.readouterr().out
    assert "POSSIBLE ALIENS" in out
    assert "type:     Text" in out
    assert len(_band_lines(out)) == 8


def test_low_frequency_is_not_alien(tmp_path, capsys):
    path = _write_text_signal(tmp_path / "sig.txt", 12500.0)
    assert main(["t", str(path), str(FS), "32", "8"]) == 0
    out = capsys.readouterr().out
    assert out.rstrip().endswith("no aliens")


def test_parallel_run_matches_serial(tmp_path, capsys):
    path = _write_text_signal(tmp_path / "sig.txt", 112500.0)
    assert main(["text", str(path), str(FS), "32", "8"]) == 0
    serial = _band_lines(capsys.readouterr().out)
    assert main(["text", str(path), str(FS), "32", "8", "3", "1"]) == 0
    parallel = _band_lines(capsys.readouterr().out)
    assert serial == parallel


def test_wrong_argument_count_prints_usage(capsys):
    assert main(["text", "file"]) != 0
    assert "usage:" in capsys.readouterr().out


def test_unknown_type(tmp_path, capsys):
    path = _write_text_signal(tmp_path / "sig.txt", 12500.0)
    assert main(["xyz", str(path), str(FS), "32", "8"]) != 0
    out = capsys.readouterr().out
    assert "UNKNOWN TYPE" in out
    assert "Unknown signal type" in out


def test_odd_order_rejected(tmp_path, capsys):
    path = _write_text_signal(tmp_path / "sig.txt", 12500.0)
    assert main(["text", str(path), str(FS), "31", "8"]) != 0
    assert "order" in capsys.readouterr().err


@pytest.mark.parametrize("args", [["0", "32", "8"], ["400000", "32", "0"]])
def test_invalid_numbers_rejected(tmp_path, capsys, args):
    path = _write_text_signal(tmp_path / "sig.txt", 12500.0)
    assert main(["text", str(path), *args]) != 0
    assert "error:" in capsys.readouterr().err


def test_missing_file(tmp_path, capsys):
    assert main(["bin", str(tmp_path / "missing.bin"), str(FS), "32", "8"]) != 0
    assert "Unable to load or map file" in capsys.readouterr().out


def test_load_signal_binary_round_trip(tmp_path):
    path = tmp_path / "sig.bin"
    save_binary_signal(path, Signal([1.5, -2.25, 3.0]))
    loaded = load_signal("bin", path)
    assert list(loaded.data) == [1.5, -2.25, 3.0]


def test_load_signal_mapped(tmp_path):
    path = tmp_path / "sig.bin"
    save_binary_signal(path, Signal([4.0, 5.0]))
    mapped = load_signal("MMAP", path)
    try:
        assert isinstance(mapped, MappedSignal)
        assert list(mapped.data) == [4.0, 5.0]
    finally:
        mapped.close()


def test_load_signal_unknown_kind(tmp_path):
    with pytest.raises(ValueError):
        load_signal("zip", tmp_path / "x")


def test_mapped_run_removes_dc_in_file(tmp_path, capsys):
    path = tmp_path / "sig.bin"
    samples = [math.sin(2 * math.pi * 12500.0 * n / FS) + 7.0 for n in range(128)]
    save_binary_signal(path, Signal(samples))
    assert main(["mmap", str(path), str(FS), "16", "4"]) == 0
    assert "Mapped Binary" in capsys.readouterr().out
    after = load_binary_signal(path)
    assert abs(sum(after.data) / len(after.data)) < 1e-9