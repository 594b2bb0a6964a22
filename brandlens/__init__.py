"""brandlens: brand visibility research across AI assistants."""

__version__ = "0.1.0"
