"""
CSV output writers for interaction analysis results.

All reports follow the same delimited-text contract:
- comma separated, header row first, one record per line ('\\n')
- any field containing a space, comma, double quote or newline is
  double-quoted (embedded quotes doubled); this is stricter than
  csv.QUOTE_MINIMAL, which leaves space-only fields bare, so rows are
  assembled by hand rather than with csv.writer
- distances are written with exactly 3 decimals

Writers always use the complete interaction list of a result; display
truncation (AnalysisResult.preview) never reaches these functions.
"""

import csv
from typing import Dict, Iterable, List, Sequence, TYPE_CHECKING

from ..data_readers import Atom

if TYPE_CHECKING:
    from ..core.analysis import AnalysisResult, Interaction


# Field definitions for output CSV files
INTERACTION_FIELDS = [
    'Protein_A_Chain', 'Residue_A', 'Atom_A',
    'Protein_B_Chain', 'Residue_B', 'Atom_B',
    'Interaction_Type', 'Distance_Angstrom',
    'Structure_A', 'Structure_B', 'Intramolecular',
]

ATOM_FIELDS = [
    'Chain', 'Residue', 'Residue_Seq', 'Atom_Name', 'Atom_Serial',
    'X', 'Y', 'Z', 'Element', 'Occupancy', 'B_Factor', 'Structure',
]

CHAIN_FIELDS = [
    'Structure', 'Chain', 'Residue_Count', 'Atom_Count', 'Interacting_Residues',
    'Intra_Interactions', 'Inter_Interactions',
]

CHAIN_PAIR_FIELDS = [
    'Chain_A', 'Chain_B', 'Intra_Count', 'Inter_Count', 'Total',
]

DENSITY_FIELDS = [
    'Chain', 'Residue_Seq', 'Residue', 'Intra_Count', 'Inter_Count', 'Total', 'Interaction_Types',
]


def _quote(value) -> str:
    """Render one field, double-quoting it if it holds a space, comma, quote or newline."""
    text = str(value)
    if any(c in text for c in ' ,"\n'):
        return '"' + text.replace('"', '""') + '"'
    return text


def _format_rows(fields: Sequence[str], rows: Iterable[Sequence]) -> str:
    lines = [','.join(_quote(f) for f in fields)]
    for row in rows:
        lines.append(','.join(_quote(v) for v in row))
    return '\n'.join(lines) + '\n'


def _write_text(text: str, output_file: str) -> None:
    with open(output_file, 'w', newline='') as f:
        f.write(text)


# =============================================================================
# Interactions
# =============================================================================

def _interaction_row(interaction: 'Interaction') -> List:
    a, b = interaction.atom_a, interaction.atom_b
    return [
        a.chain_id, a.residue_label, a.atom_label,
        b.chain_id, b.residue_label, b.atom_label,
        interaction.category.value, f"{interaction.distance:.3f}",
        a.structure, b.structure, 'true' if interaction.is_intramolecular else 'false',
    ]


def format_interactions_csv(interactions: Sequence['Interaction']) -> str:
    """
    Render interactions as CSV text.

    Args:
        interactions: Interactions, written in the given order

    Returns:
        CSV text (header only when there are no interactions)
    """
    return _format_rows(INTERACTION_FIELDS, (_interaction_row(i) for i in interactions))


def write_interactions_csv(interactions: Sequence['Interaction'], output_file: str) -> None:
    """
    Write interactions to CSV, one row per interaction.

    Args:
        interactions: Interactions (normally AnalysisResult.interactions)
        output_file: Path to output CSV file
    """
    _write_text(format_interactions_csv(interactions), output_file)


def write_inter_molecular_csv(result: 'AnalysisResult', output_file: str) -> None:
    """Write only the interactions between different chains/structures."""
    write_interactions_csv(result.inter_molecular(), output_file)


def write_intra_molecular_csv(result: 'AnalysisResult', output_file: str) -> None:
    """Write only the interactions within a single chain."""
    write_interactions_csv(result.intra_molecular(), output_file)


# =============================================================================
# Atoms (flat coordinate dump)
# =============================================================================

def format_atoms_csv(atoms: Sequence[Atom]) -> str:
    """Render atoms as CSV text; coordinates with 3 decimals."""
    rows = (
        [
            a.chain_id, a.res_name, a.res_seq, a.name, a.serial,
            f"{a.x:.3f}", f"{a.y:.3f}", f"{a.z:.3f}",
            a.element, f"{a.occupancy:.2f}", f"{a.temp_factor:.2f}", a.structure,
        ]
        for a in atoms
    )
    return _format_rows(ATOM_FIELDS, rows)


def write_atoms_csv(atoms: Sequence[Atom], output_file: str) -> None:
    """
    Write the atomic coordinates to CSV, one row per atom in input order.

    Args:
        atoms: Parsed atoms
        output_file: Path to output CSV file
    """
    _write_text(format_atoms_csv(atoms), output_file)


def read_atoms_csv(input_file: str) -> List[Atom]:
    """
    Read an atom dump written by write_atoms_csv().

    Columns missing from the dump (alt loc, insertion code, charge) come
    back empty.

    Args:
        input_file: Path to the CSV file

    Returns:
        Atoms in file order
    """
    atoms = []
    with open(input_file, 'r', newline='') as f:
        reader = csv.DictReader(f)
        for row in reader:
            atoms.append(Atom(
                serial=int(row['Atom_Serial']),
                name=row['Atom_Name'],
                alt_loc='',
                res_name=row['Residue'],
                chain_id=row['Chain'],
                res_seq=int(row['Residue_Seq']),
                i_code='',
                x=float(row['X']),
                y=float(row['Y']),
                z=float(row['Z']),
                occupancy=float(row['Occupancy'] or 0.0),
                temp_factor=float(row['B_Factor'] or 0.0),
                element=row['Element'],
                structure=row.get('Structure') or '',
            ))
    return atoms


# =============================================================================
# Aggregates
# =============================================================================

def write_chain_metrics_csv(result: 'AnalysisResult', output_file: str) -> None:
    """Write one row per chain with residue/atom counts and interaction tallies."""
    rows = (
        [
            m.structure, m.chain_id, m.residue_count, m.atom_count,
            m.interacting_residues, m.intra_interactions, m.inter_interactions,
        ]
        for m in result.chains
    )
    _write_text(_format_rows(CHAIN_FIELDS, rows), output_file)


def write_chain_pairs_csv(result: 'AnalysisResult', output_file: str) -> None:
    """Write one row per chain pair, highest total first."""
    rows = (
        [p.chain_a.label, p.chain_b.label, p.intra_count, p.inter_count, p.total]
        for p in result.chain_pairs
    )
    _write_text(_format_rows(CHAIN_PAIR_FIELDS, rows), output_file)


def _density_rows(residue_density: Dict) -> Iterable[List]:
    for key in sorted(residue_density):
        for entry in residue_density[key]:
            yield [
                key.label, entry.res_seq, entry.res_name,
                entry.intra_count, entry.inter_count, entry.total,
                ';'.join(c.value for c in entry.categories),
            ]


def write_density_csv(result: 'AnalysisResult', output_file: str) -> None:
    """Write per-residue interaction density, densest residues first within each chain."""
    _write_text(_format_rows(DENSITY_FIELDS, _density_rows(result.residue_density)), output_file)
