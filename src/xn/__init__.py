"""xn - run a shell command N times and report every run."""

__version__ = "0.1.0"

__all__ = ["__version__"]
