"""
Interaction classification heuristics.

Each contact gets exactly one category from its distance and the element /
residue names of its two atoms, evaluated with a fixed precedence:

1. distance < 3.5 A and both elements in {N, O}      -> Hydrogen Bond
2. distance < 3.5 A and both residues charged         -> Salt Bridge
3. distance < 3.5 A                                   -> Van der Waals
4. both residues hydrophobic                          -> Hydrophobic
5. otherwise                                          -> Van der Waals

Pi-Stacking is a reserved category: ring geometry is not evaluated, so it is
never assigned. Other is only returned for distances that are not finite
non-negative numbers.
"""

import math
from enum import Enum
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from ..config import AnalysisConfig
    from ..data_readers import Atom


class InteractionType(str, Enum):
    """Interaction categories (values are the report labels)."""
    HYDROGEN_BOND = "Hydrogen Bond"
    SALT_BRIDGE = "Salt Bridge"
    HYDROPHOBIC = "Hydrophobic"
    VAN_DER_WAALS = "Van der Waals"
    PI_STACKING = "Pi-Stacking"
    OTHER = "Other"

    def __str__(self) -> str:
        return self.value


def classify_interaction(
    element_a: str,
    element_b: str,
    residue_a: str,
    residue_b: str,
    distance: float,
    config: Optional['AnalysisConfig'] = None,
) -> InteractionType:
    """
    Assign one interaction category to an atom pair.

    Args:
        element_a, element_b: Element symbols of the two atoms
        residue_a, residue_b: Residue names (3-letter codes) of the two atoms
        distance: Atom-atom distance (Angstroms)
        config: AnalysisConfig with thresholds and residue sets (global default if None)

    Returns:
        InteractionType
    """
    if config is None:
        from ..config import get_config
        config = get_config()

    if distance is None or not math.isfinite(distance) or distance < 0:
        return InteractionType.OTHER

    element_a = (element_a or '').strip().upper()
    element_b = (element_b or '').strip().upper()
    residue_a = (residue_a or '').strip().upper()
    residue_b = (residue_b or '').strip().upper()

    if distance < config.close_contact_cutoff:
        if element_a in config.hbond_elements and element_b in config.hbond_elements:
            return InteractionType.HYDROGEN_BOND
        if residue_a in config.charged_residues and residue_b in config.charged_residues:
            return InteractionType.SALT_BRIDGE
        return InteractionType.VAN_DER_WAALS

    if residue_a in config.hydrophobic_residues and residue_b in config.hydrophobic_residues:
        return InteractionType.HYDROPHOBIC
    return InteractionType.VAN_DER_WAALS


def is_intramolecular(atom_a: 'Atom', atom_b: 'Atom') -> bool:
    """
    True when both atoms belong to the same structure AND the same chain.

    Two different chains of one structure count as inter-molecular.
    """
    return atom_a.structure == atom_b.structure and atom_a.chain_id == atom_b.chain_id
