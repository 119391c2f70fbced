"""Small-claims case graph and readiness scoring backend."""

__version__ = "0.1.0"
