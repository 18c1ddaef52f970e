"""Slab cutting-layout optimizer for stone benchtop fabrication."""

__version__ = "0.1.0"
