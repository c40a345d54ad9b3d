"""cuefix: repair hour-based CUE sheet timestamps, split and tag the tracks."""

__version__ = "0.1.0"
