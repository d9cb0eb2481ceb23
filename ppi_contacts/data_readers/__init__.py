"""
Data readers for atomic-coordinate structures.

Supported backends:
- pdb: PDB fixed-column format (files or uploaded text)

Remote structures are downloaded by accession code with fetch_structure()
and parsed with the same PDB reader.
"""

from .base import (
    Atom,
    BaseReader,
    ReaderError,
    EmptyStructureError,
    SourceUnavailableError,
)

__all__ = [
    'Atom', 'BaseReader', 'ReaderError', 'EmptyStructureError', 'SourceUnavailableError',
    'get_reader', 'list_backends', 'register_reader',
    'parse_pdb', 'parse_pdb_with_stats',
    'normalize_accession', 'fetch_structure_text', 'fetch_structure',
]

# Registry of available readers (populated on import)
_READERS = {}


def register_reader(backend_name: str):
    """Decorator to register a reader class for a backend."""
    def decorator(cls):
        _READERS[backend_name] = cls
        return cls
    return decorator


def get_reader(backend: str = 'pdb') -> BaseReader:
    """
    Get a reader instance for the specified backend.

    Args:
        backend: Backend name, e.g. 'pdb'

    Returns:
        Initialized reader instance

    Raises:
        ReaderError: If backend is not supported
    """
    backend = backend.lower()
    if backend not in _READERS:
        available = ', '.join(sorted(_READERS.keys()))
        raise ReaderError(f"Unknown backend '{backend}'. Available: {available}")

    return _READERS[backend](backend)


def list_backends() -> list:
    """List all available backends."""
    return sorted(_READERS.keys())


from .pdb import parse_pdb, parse_pdb_with_stats  # noqa: E402  (registers 'pdb')
from .rcsb import normalize_accession, fetch_structure_text, fetch_structure  # noqa: E402
