"""
PDB fixed-column writer.

Writes atoms back out as ATOM/HETATM records that the PDB reader parses to
the same coordinates (3 decimals), residue and chain identity.

Values that do not fit their columns (serial > 99999, resSeq > 9999,
coordinates beyond -999.999..9999.999, names longer than 4 characters, ...)
raise ValueError; writing them would shift the later columns and the record
could not be read back.
"""

from typing import Sequence

from ..data_readers import Atom


def _format_atom_name(name: str, element: str) -> str:
    # Names of 1-letter elements start in column 14 unless they fill all 4 columns
    if len(name) < 4 and len(element) <= 1:
        return f" {name:<3}"
    return f"{name:<4}"


def _fit(text: str, width: int, field: str, atom: Atom) -> str:
    if len(text) > width:
        raise ValueError(
            f"Atom {atom.structure}:{atom.serial}: {field} '{text.strip()}' "
            f"does not fit the {width}-column PDB field"
        )
    return text


def format_atom_line(atom: Atom) -> str:
    """
    Format one atom as an 80-column PDB record.

    Raises:
        ValueError: If a value does not fit its fixed column
    """
    return (
        f"{_fit(atom.record_type, 6, 'record type', atom):<6}"
        f"{_fit(f'{atom.serial:>5}', 5, 'serial', atom)} "
        f"{_fit(_format_atom_name(atom.name, atom.element), 4, 'atom name', atom)}"
        f"{_fit(atom.alt_loc, 1, 'alt loc', atom):1}"
        f"{_fit(atom.res_name, 3, 'residue name', atom):>3} "
        f"{_fit(atom.chain_id, 1, 'chain id', atom):1}"
        f"{_fit(f'{atom.res_seq:>4}', 4, 'residue number', atom)}"
        f"{_fit(atom.i_code, 1, 'insertion code', atom):1}   "
        f"{_fit(f'{atom.x:8.3f}', 8, 'x coordinate', atom)}"
        f"{_fit(f'{atom.y:8.3f}', 8, 'y coordinate', atom)}"
        f"{_fit(f'{atom.z:8.3f}', 8, 'z coordinate', atom)}"
        f"{_fit(f'{atom.occupancy:6.2f}', 6, 'occupancy', atom)}"
        f"{_fit(f'{atom.temp_factor:6.2f}', 6, 'temperature factor', atom)}"
        f"          "
        f"{_fit(atom.element, 2, 'element', atom):>2}"
        f"{_fit(atom.charge, 2, 'charge', atom):2}"
    )


def format_pdb(atoms: Sequence[Atom]) -> str:
    """Render atoms as PDB text terminated by an END record."""
    lines = [format_atom_line(a) for a in atoms]
    lines.append("END")
    return '\n'.join(lines) + '\n'


def write_pdb(atoms: Sequence[Atom], output_file: str) -> None:
    """
    Write atoms to a PDB file.

    Args:
        atoms: Atoms in the order they should appear
        output_file: Path to output PDB file
    """
    text = format_pdb(atoms)
    with open(output_file, 'w') as f:
        f.write(text)
