"""Sorting of particle catalogues into Cartesian or angular meshes for pair counting."""

__version__ = "0.1.0"