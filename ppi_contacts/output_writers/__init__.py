"""
Output writers for interaction analysis results.

This module provides writers for different output formats.

Output types:
- Interactions: One row per interaction (all, inter-molecular only, intra-molecular only)
- Atoms: One row per atom (flat coordinate dump, CSV or PDB)
- Aggregates: One row per chain, chain pair, or interacting residue
- JSON: The complete result as one structured document
"""

from .csv_writer import (
    format_interactions_csv,
    write_interactions_csv,
    write_inter_molecular_csv,
    write_intra_molecular_csv,
    format_atoms_csv,
    write_atoms_csv,
    read_atoms_csv,
    write_chain_metrics_csv,
    write_chain_pairs_csv,
    write_density_csv,
    INTERACTION_FIELDS,
    ATOM_FIELDS,
    CHAIN_FIELDS,
    CHAIN_PAIR_FIELDS,
    DENSITY_FIELDS,
)

from .pdb_writer import (
    format_atom_line,
    format_pdb,
    write_pdb,
)

from .json_writer import (
    result_to_json,
    write_result_json,
)

__all__ = [
    # CSV
    'format_interactions_csv',
    'write_interactions_csv',
    'write_inter_molecular_csv',
    'write_intra_molecular_csv',
    'format_atoms_csv',
    'write_atoms_csv',
    'read_atoms_csv',
    'write_chain_metrics_csv',
    'write_chain_pairs_csv',
    'write_density_csv',
    'INTERACTION_FIELDS',
    'ATOM_FIELDS',
    'CHAIN_FIELDS',
    'CHAIN_PAIR_FIELDS',
    'DENSITY_FIELDS',
    # PDB
    'format_atom_line',
    'format_pdb',
    'write_pdb',
    # JSON
    'result_to_json',
    'write_result_json',
]
