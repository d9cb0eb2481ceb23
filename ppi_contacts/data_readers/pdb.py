"""
PDB fixed-column structure reader.

Reads ATOM/HETATM records from PDB-format text. Fields are located by
column offset, not by delimiter:

    serial 7-11, name 13-16, altLoc 17, resName 18-20, chainID 22,
    resSeq 23-26, iCode 27, x 31-38, y 39-46, z 47-54,
    occupancy 55-60, tempFactor 61-66, element 77-78, charge 79-80

Malformed records (unparseable serial, resSeq or coordinates) are skipped
rather than aborting the parse. Only the first MODEL of a multi-model file
is read; the remaining MODEL records are counted so callers can report them.
"""

import math
from typing import List, Optional, Tuple

from .base import Atom, BaseReader
from . import register_reader


RECORD_TYPES = ('ATOM', 'HETATM')


def _parse_optional_float(field: str) -> float:
    """Parse occupancy/B-factor, falling back to 0.0."""
    try:
        value = float(field)
    except ValueError:
        return 0.0
    return value if math.isfinite(value) else 0.0


def _infer_element(atom_name: str) -> str:
    """Guess the element from the atom name when columns 77-78 are blank."""
    for char in atom_name:
        if char.isalpha():
            return char.upper()
    return ""


def parse_atom_line(line: str, structure: str = "") -> Optional[Atom]:
    """
    Parse a single ATOM/HETATM line.

    Args:
        line: One line of PDB text
        structure: Structure label stamped on the atom

    Returns:
        Atom, or None if the line is not an atom record or is malformed
    """
    record = line[0:6].strip()
    if record not in RECORD_TYPES:
        return None

    try:
        serial = int(line[6:11])
        res_seq = int(line[22:26])
        x = float(line[30:38])
        y = float(line[38:46])
        z = float(line[46:54])
    except ValueError:
        return None

    if not (math.isfinite(x) and math.isfinite(y) and math.isfinite(z)):
        return None

    name = line[12:16].strip()
    element = line[76:78].strip() or _infer_element(name)

    return Atom(
        serial=serial,
        name=name,
        alt_loc=line[16:17].strip(),
        res_name=line[17:20].strip(),
        chain_id=line[21:22].strip(),
        res_seq=res_seq,
        i_code=line[26:27].strip(),
        x=x,
        y=y,
        z=z,
        occupancy=_parse_optional_float(line[54:60]),
        temp_factor=_parse_optional_float(line[60:66]),
        element=element,
        charge=line[78:80].strip(),
        structure=structure,
        record_type=record,
    )


def parse_pdb_with_stats(text: str, structure: str = "") -> Tuple[List[Atom], int, int]:
    """
    Parse PDB text and count the atom records that had to be skipped.

    Args:
        text: Raw PDB content
        structure: Structure label stamped on every atom

    Returns:
        Tuple of (atoms in file order, number of malformed atom records,
        number of models after the first that were skipped)
    """
    atoms = []
    n_malformed = 0
    n_models_skipped = 0
    first_model_done = False

    for line in text.splitlines():
        if first_model_done:
            if line.startswith('MODEL'):
                n_models_skipped += 1
            continue
        if line.startswith('ENDMDL'):
            # Multi-model files: first model only
            first_model_done = True
            continue
        if line[0:6].strip() not in RECORD_TYPES:
            continue

        atom = parse_atom_line(line, structure)
        if atom is None:
            n_malformed += 1
            continue
        atoms.append(atom)

    return atoms, n_malformed, n_models_skipped


def parse_pdb(text: str, structure: str = "") -> List[Atom]:
    """
    Parse PDB text into atoms.

    Never raises for bad content: an input without ATOM/HETATM records
    simply yields an empty list, and rejecting it is up to the caller.

    Args:
        text: Raw PDB content
        structure: Structure label stamped on every atom

    Returns:
        Atoms in file order
    """
    atoms, _, _ = parse_pdb_with_stats(text, structure)
    return atoms


@register_reader('pdb')
class PDBReader(BaseReader):
    """Reader for PDB-format coordinate files and uploaded PDB text."""

    def __init__(self, backend_name: str = 'pdb'):
        super().__init__(backend_name)

    def read_text(self, text: str, label: str = "") -> List[Atom]:
        return parse_pdb(text, label)
