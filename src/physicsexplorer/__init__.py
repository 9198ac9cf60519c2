"""Physics Explorer: interactive formulas and looping animations for fourteen physics topics."""

__version__ = "0.1.0"
