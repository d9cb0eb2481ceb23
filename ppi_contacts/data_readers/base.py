"""
Base classes for atomic-coordinate structure readers.

This module provides the common Atom record and the reader interface shared
by every input source (local PDB files, uploaded text, remote downloads).
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple


@dataclass(frozen=True)
class Atom:
    """
    One parsed ATOM/HETATM record.

    Attributes:
        serial: Atom serial number (unique within one parsed structure)
        name: Atom name (e.g., 'CA', 'OD1')
        alt_loc: Alternate location indicator ('' if none)
        res_name: Residue name, 3-letter code
        chain_id: Chain identifier
        res_seq: Residue sequence number
        i_code: Insertion code ('' if none)
        x, y, z: Orthogonal coordinates in Angstroms
        occupancy: Occupancy (0.0 when missing)
        temp_factor: Temperature factor (0.0 when missing)
        element: Element symbol
        charge: Formal charge string as written in the file
        structure: Label of the structure this atom belongs to
        record_type: 'ATOM' or 'HETATM'
    """
    serial: int
    name: str
    alt_loc: str
    res_name: str
    chain_id: str
    res_seq: int
    i_code: str
    x: float
    y: float
    z: float
    occupancy: float = 0.0
    temp_factor: float = 0.0
    element: str = ""
    charge: str = ""
    structure: str = ""
    record_type: str = "ATOM"

    @property
    def key(self) -> Tuple[str, int]:
        """Structure-qualified atom identifier (structure label, serial)."""
        return (self.structure, self.serial)

    @property
    def coordinates(self) -> Tuple[float, float, float]:
        return (self.x, self.y, self.z)

    @property
    def residue_label(self) -> str:
        """Residue label as shown in reports, e.g. 'ALA 123' or 'ALA 123A'."""
        return f"{self.res_name} {self.res_seq}{self.i_code}"

    @property
    def atom_label(self) -> str:
        """Atom label as shown in reports, e.g. 'CA (C)'."""
        return f"{self.name} ({self.element})"


class BaseReader(ABC):
    """
    Abstract base class for structure readers.

    Each input source should implement a subclass that knows how to turn
    its input into an ordered list of Atom records.

    Usage:
        reader = get_reader('pdb')
        atoms = reader.read_structure(path)
    """

    def __init__(self, backend_name: str):
        """
        Initialize the reader.

        Args:
            backend_name: Name of the backend (e.g., 'pdb')
        """
        self.backend_name = backend_name

    @abstractmethod
    def read_text(self, text: str, label: str = "") -> List[Atom]:
        """
        Parse raw coordinate text into atoms.

        Args:
            text: Raw file content
            label: Structure label stamped on every atom

        Returns:
            Atoms in file order (may be empty)
        """
        pass

    def read_structure(self, path: Path, label: Optional[str] = None) -> List[Atom]:
        """
        Read a structure file from disk.

        Args:
            path: Path to the structure file
            label: Structure label (defaults to the file stem)

        Returns:
            Atoms in file order

        Raises:
            ReaderError: If the file cannot be read
        """
        path = Path(path)
        if label is None:
            label = path.stem
        try:
            with open(path, 'r', errors='replace') as f:
                text = f.read()
        except OSError as e:
            raise ReaderError(f"Cannot read {path}: {e}") from e
        return self.read_text(text, label)


class ReaderError(Exception):
    """Exception raised for errors during structure reading."""
    pass


class EmptyStructureError(ReaderError):
    """Raised when an input yields zero atom records."""
    pass


class SourceUnavailableError(ReaderError):
    """Raised when a remote structure could not be downloaded."""
    pass
