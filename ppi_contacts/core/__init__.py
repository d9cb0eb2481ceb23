"""
Core analysis module for ppi_contacts.

This module provides the interaction classification, aggregation and the
analysis entry point:

- classification: InteractionType and the distance/element/residue heuristics
- aggregation: chain metrics, interface residues, density, chain-pair summaries
- analysis: Interaction, AnalysisResult and analyze_structures()
- residue_selection: "A:100-105,B:203" selections over interactions
"""

from .classification import (
    InteractionType,
    classify_interaction,
    is_intramolecular,
)

from .aggregation import (
    ChainKey,
    ChainMetrics,
    ChainMetricsAccumulator,
    InterfaceResidue,
    ChainPairSummary,
    Aggregates,
    Aggregator,
    aggregate,
    chain_pair_key,
)

from .analysis import (
    Interaction,
    AnalysisSummary,
    AnalysisResult,
    analyze_structures,
    analyze_atoms,
    validate_structure_labels,
)

from .residue_selection import (
    parse_residue_selection,
    is_residue_selected,
    is_interaction_selected,
    filter_interactions_by_selection,
    calculate_selection_metrics,
    display_selection_summary,
)

__all__ = [
    # Classification
    'InteractionType',
    'classify_interaction',
    'is_intramolecular',
    # Aggregation
    'ChainKey',
    'ChainMetrics',
    'ChainMetricsAccumulator',
    'InterfaceResidue',
    'ChainPairSummary',
    'Aggregates',
    'Aggregator',
    'aggregate',
    'chain_pair_key',
    # Analysis
    'Interaction',
    'AnalysisSummary',
    'AnalysisResult',
    'analyze_structures',
    'analyze_atoms',
    'validate_structure_labels',
    # Residue selection
    'parse_residue_selection',
    'is_residue_selected',
    'is_interaction_selected',
    'filter_interactions_by_selection',
    'calculate_selection_metrics',
    'display_selection_summary',
]
