"""Primary key helpers shared by the catalog models."""

from uuid import uuid4


def generate_id() -> str:
    """Generate unique record ID."""
    return str(uuid4())
