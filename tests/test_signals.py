import pytest

from bandscan.signals import (
    MappedSignal,
    Signal,
    SignalError,
    load_binary_signal,
    load_text_signal,
    map_binary_signal,
    save_binary_signal,
    save_text_signal,
)

SAMPLES = [1.5, -2.25, 0.0, 1024.125, -0.5]


def test_num_samples_tracks_data():
    sig = Signal([1.0, 2.0, 3.0], fs=8.0)
    assert sig.num_samples == 3
    assert sig.fs == 8.0


def test_text_round_trip(tmp_path):
    path = tmp_path / "sig.txt"
    save_text_signal(path, Signal(SAMPLES))
    loaded = load_text_signal(path)
    assert list(loaded.data) == SAMPLES
    assert loaded.fs == 0.0


def test_text_format_six_decimals(tmp_path):
    path = tmp_path / "sig.txt"
    save_text_signal(path, Signal([1.5]))
    assert path.read_text() == "1.500000\n"


def test_text_stops_at_first_non_number(tmp_path):
    path = tmp_path / "sig.txt"
    path.write_text("1 2\n3 abc 4\n")
    assert list(load_text_signal(path).data) == [1.0, 2.0, 3.0]


def test_text_missing_file(tmp_path):
    with pytest.raises(SignalError):
        load_text_signal(tmp_path / "missing.txt")


def test_binary_round_trip(tmp_path):
    path = tmp_path / "sig.bin"
    save_binary_signal(path, Signal(SAMPLES))
    assert path.stat().st_size == 8 * len(SAMPLES)
    assert list(load_binary_signal(path).data) == SAMPLES


def test_binary_ignores_trailing_partial_sample(tmp_path):
    path = tmp_path / "sig.bin"
    save_binary_signal(path, Signal(SAMPLES))
    with open(path, "ab") as f:
        f.write(b"\x01\x02\x03")
    assert list(load_binary_signal(path).data) == SAMPLES


def test_binary_empty_file_rejected(tmp_path):
    path = tmp_path / "empty.bin"
    path.write_bytes(b"")
    with pytest.raises(SignalError):
        load_binary_signal(path)


def test_binary_missing_file(tmp_path):
    with pytest.raises(SignalError):
        load_binary_signal(tmp_path / "missing.bin")


def test_map_reads_and_writes_through(tmp_path):
    path = tmp_path / "sig.bin"
    save_binary_signal(path, Signal(SAMPLES))
    sig = map_binary_signal(path)
    assert isinstance(sig, MappedSignal)
    assert sig.num_samples == len(SAMPLES)
    assert list(sig.data) == SAMPLES
    sig.data[0] = 42.0
    sig.close()
    assert not sig.mapped
    assert list(load_binary_signal(path).data) == [42.0] + SAMPLES[1:]


def test_map_close_twice_raises(tmp_path):
    path = tmp_path / "sig.bin"
    save_binary_signal(path, Signal(SAMPLES))
    sig = map_binary_signal(path)
    sig.close()
    with pytest.raises(SignalError):
        sig.close()


def test_map_context_manager_unmaps(tmp_path):
    path = tmp_path / "sig.bin"
    save_binary_signal(path, Signal(SAMPLES))
    with map_binary_signal(path) as sig:
        assert sig.mapped
        total = sum(sig.data)
    assert total == sum(SAMPLES)
    assert not sig.mapped
    assert sig.num_samples == 0


def test_map_empty_file_rejected(tmp_path):
    path = tmp_path / "empty.bin"
    path.write_bytes(b"")
    with pytest.raises(SignalError):
        map_binary_signal(path)