"""Utility modules for cuefix."""
