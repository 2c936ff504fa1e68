"""Release-candidate validation, build and bundling for PyIceberg."""

__version__ = "0.1.0"
