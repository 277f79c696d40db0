"""NeighborFit API: user registration, login, and session tokens."""

__version__ = "0.1.0"
