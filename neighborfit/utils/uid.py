"""Identifier generation for users and neighborhoods.

Row IDs are random UUID v4 strings. Keep uuid4 imports in this module;
the stores call generate_uuid() instead.
"""

from uuid import uuid4


def generate_uuid() -> str:
    """Return a new random UUID v4 in its canonical string form."""
    return str(uuid4())
