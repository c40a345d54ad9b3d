"""CUE sheet normalization, track extraction and external tools."""
