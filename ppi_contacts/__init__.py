"""
ppi_contacts - Atom-level interaction analysis of protein structures.

This package detects every atom pair within a distance cutoff in one or more
PDB-format structures, classifies each contact (hydrogen bond, salt bridge,
hydrophobic, van der Waals) and aggregates the contacts into chain,
chain-pair and per-residue statistics.

Main modules:
- data_readers: PDB parser and RCSB download
- extractors: Spatial grid and contact detection
- core: Classification, aggregation and the analysis entry point
- graphics: Summary charts
- output_writers: CSV, JSON and PDB output

Command-line interface:
    python -m ppi_contacts <structure.pdb> [options]
    ppi-contacts <structure.pdb> [options]  # If installed via pip
"""

__version__ = "1.0.0"

# Expose main classes and functions at package level
from .data_readers import (
    Atom,
    get_reader,
    list_backends,
    parse_pdb,
    fetch_structure,
    ReaderError,
    EmptyStructureError,
    SourceUnavailableError,
)
from .extractors import find_contacts, AnalysisCancelled
from .core import (
    InteractionType,
    Interaction,
    AnalysisResult,
    analyze_structures,
    analyze_atoms,
)
from .config import AnalysisConfig, get_config, set_config

__all__ = [
    # Version info
    "__version__",
    # Data readers
    "Atom",
    "get_reader",
    "list_backends",
    "parse_pdb",
    "fetch_structure",
    "ReaderError",
    "EmptyStructureError",
    "SourceUnavailableError",
    # Extractors
    "find_contacts",
    "AnalysisCancelled",
    # Core analysis
    "InteractionType",
    "Interaction",
    "AnalysisResult",
    "analyze_structures",
    "analyze_atoms",
    # Configuration
    "AnalysisConfig",
    "get_config",
    "set_config",
]
