"""
Residue selection utilities for focused interface analysis.

Allows users to analyze specific residues (e.g., active sites, binding pockets, mutation sites)
using standard structural biology syntax: chain:residue format.

Syntax examples:
    "A:100-105"           Chain A, residues 100-105 (inclusive range)
    "A:100,102,104"       Chain A, specific residues
    "A:100-105,B:203"     Multiple chains and mixed formats
    "A:57,102,195"        Enzyme catalytic triad

Interaction selection uses OR logic:
    An interaction is SELECTED if EITHER endpoint residue is in the selection set.
    This enables finding ALL interactions involving a binding pocket residue.

Selections match chain ids in every structure of a multi-structure run.
"""

from collections import Counter
from typing import Dict, Set, List, Sequence, TYPE_CHECKING

from .classification import InteractionType

if TYPE_CHECKING:
    from .analysis import Interaction


def parse_residue_selection(selection_str: str) -> Dict[str, Set[int]]:
    """
    Parse residue selection string using standard structural biology syntax.

    Supports chain:residue format with ranges and individual residues:
    - "A:100-105" (chain A, residues 100-105)
    - "A:100,102,104" (chain A, specific residues)
    - "A:100-105,B:203,C:50-60" (multiple chains and ranges)

    Args:
        selection_str: Selection string in standard format

    Returns:
        Dictionary mapping chain_id -> set of residue numbers
        Empty dict if selection_str is None or empty

    Raises:
        ValueError: If a residue number or range cannot be parsed
    """
    selections: Dict[str, Set[int]] = {}

    if not selection_str or not selection_str.strip():
        return selections

    # Split by comma, handling chain:residue groups
    parts = selection_str.split(',')
    current_chain = None

    for part in parts:
        part = part.strip()
        if not part:
            continue

        try:
            if ':' in part:
                # New chain:residue specification
                chain, residues_str = part.split(':', 1)
                current_chain = chain.strip()

                if current_chain not in selections:
                    selections[current_chain] = set()

                _parse_residue_spec(residues_str.strip(), selections[current_chain])
            elif current_chain is not None:
                # Continuation of previous chain (e.g., "A:100,102,104")
                _parse_residue_spec(part, selections[current_chain])
            else:
                print(f"Warning: Residue '{part}' has no chain, skipping")
        except ValueError as e:
            raise ValueError(
                f"Error parsing residue selection '{selection_str}': {e}. "
                "Expected format: 'A:100-105,B:203,C:50-60'"
            ) from e

    return selections


def _parse_residue_spec(spec: str, residue_set: Set[int]) -> None:
    """
    Parse a single residue specification and add to the set.

    Handles:
    - Single residue: "100" or "-3"
    - Range: "100-105" or "-5-3"

    Args:
        spec: Residue specification string
        residue_set: Set to add residues to
    """
    spec = spec.strip()
    if not spec:
        return

    # Search for the range dash after the first character so negative
    # residue numbers still parse
    dash = spec.find('-', 1)
    if dash > 0:
        start = int(spec[:dash].strip())
        end = int(spec[dash + 1:].strip())
        if end < start:
            raise ValueError(f"empty range '{spec}'")
        residue_set.update(range(start, end + 1))
    else:
        residue_set.add(int(spec))


def is_residue_selected(
    chain: str,
    resnum: int,
    residue_selection: Dict[str, Set[int]]
) -> bool:
    """
    Check if a single residue is in the selection.

    Args:
        chain: Chain ID
        resnum: Residue number
        residue_selection: Dict from parse_residue_selection()

    Returns:
        True if residue is selected, False otherwise
    """
    if not residue_selection:
        return False
    return chain in residue_selection and resnum in residue_selection[chain]


def is_interaction_selected(
    interaction: 'Interaction',
    residue_selection: Dict[str, Set[int]]
) -> bool:
    """
    Check if an interaction involves any selected residue (OR logic).

    Args:
        interaction: Interaction from an AnalysisResult
        residue_selection: Dict from parse_residue_selection()

    Returns:
        True if either endpoint residue is selected, False otherwise
    """
    a, b = interaction.atom_a, interaction.atom_b
    return (is_residue_selected(a.chain_id, a.res_seq, residue_selection)
            or is_residue_selected(b.chain_id, b.res_seq, residue_selection))


def filter_interactions_by_selection(
    interactions: Sequence['Interaction'],
    residue_selection: Dict[str, Set[int]]
) -> List['Interaction']:
    """
    Filter interactions to only those involving selected residues.

    Args:
        interactions: Interactions (order is preserved)
        residue_selection: Dict from parse_residue_selection()

    Returns:
        Filtered list of interactions; all of them if the selection is empty
    """
    if not residue_selection:
        return list(interactions)

    return [i for i in interactions if is_interaction_selected(i, residue_selection)]


def calculate_selection_metrics(
    interactions: Sequence['Interaction'],
    residue_selection: Dict[str, Set[int]],
) -> Dict:
    """
    Summarize the interactions that touch the selected residues.

    Args:
        interactions: All interactions of a run
        residue_selection: Dict from parse_residue_selection()

    Returns:
        Dict with:
        - n_interactions_selection: Total selected interactions
        - n_intra_selection / n_inter_selection: Split by the intra-molecular flag
        - min_distance_selection / mean_distance_selection: Distance statistics (None if empty)
        - one '<category>_selection' count per interaction category
    """
    selected = filter_interactions_by_selection(interactions, residue_selection)

    categories = Counter(i.category for i in selected)
    metrics = {
        'n_interactions_selection': len(selected),
        'n_intra_selection': sum(1 for i in selected if i.is_intramolecular),
        'n_inter_selection': sum(1 for i in selected if not i.is_intramolecular),
        'min_distance_selection': min((i.distance for i in selected), default=None),
        'mean_distance_selection': (
            sum(i.distance for i in selected) / len(selected) if selected else None
        ),
    }
    for category in InteractionType:
        metrics[f'{category.value}_selection'] = categories.get(category, 0)

    return metrics


def display_selection_summary(residue_selection: Dict[str, Set[int]]) -> None:
    """
    Display a summary of the residue selection to the user.

    Args:
        residue_selection: Dict from parse_residue_selection()
    """
    if not residue_selection:
        return

    total_residues = sum(len(residues) for residues in residue_selection.values())
    print("Residue selection enabled:")
    print(f"  Chains: {list(residue_selection.keys())}")
    print(f"  Total selected residues: {total_residues}")

    for chain, residues in sorted(residue_selection.items()):
        residue_list = sorted(residues)
        if len(residue_list) <= 10:
            print(f"  Chain {chain}: {residue_list}")
        else:
            # Truncate for display
            print(f"  Chain {chain}: {residue_list[:5]}...{residue_list[-2:]} ({len(residue_list)} total)")
