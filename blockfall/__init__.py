"""blockfall: a falling-block puzzle game with a headless simulation engine."""

__version__ = "0.1.0"
