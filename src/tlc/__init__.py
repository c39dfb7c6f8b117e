"""TLC — push gate for static and multi-model code review."""

__version__ = "0.1.0-dev"
