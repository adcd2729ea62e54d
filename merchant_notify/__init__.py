"""merchant-notify - notifications Discord pour le suivi des stocks."""

__version__ = "1.0.0"
