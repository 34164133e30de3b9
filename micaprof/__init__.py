"""Microarchitecture-independent workload characterisation from event streams."""

__version__ = "0.1.0"

__all__ = [
    "utils",
    "memstackdist",
    "memfootprint",
    "reg",
    "stride",
    "ppm",
    "itypes_spec",
    "itypes",
]