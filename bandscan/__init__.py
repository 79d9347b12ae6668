"""Band-power scanning of sampled signals with windowed FIR filters, signal file I/O, timing helpers and threading demos."""

__version__ = "0.1.0"