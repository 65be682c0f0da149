"""Primary key generation (CUID2)."""

from cuid2 import Cuid

ID_LENGTH = 24

_generator = Cuid(length=ID_LENGTH)


def generate_cuid() -> str:
    """New CUID2 primary key. Ids are random, so order by created_at, not id."""
    return _generator.generate()
