"""
Structure interaction analysis.

analyze_structures() runs the whole pipeline on one or more named atom
collections:

    atoms -> spatial grid -> contact pairs -> classification -> aggregation

and returns an immutable AnalysisResult. The function is synchronous and
performs no I/O; parsing, downloading and report writing happen before and
after it.
"""

from collections import Counter
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, TYPE_CHECKING

from ..data_readers import Atom, EmptyStructureError, ReaderError
from ..extractors.contacts import find_contacts
from .aggregation import (
    Aggregator,
    ChainKey,
    ChainMetrics,
    ChainPairSummary,
    InterfaceResidue,
)
from .classification import InteractionType, classify_interaction, is_intramolecular

if TYPE_CHECKING:
    from ..config import AnalysisConfig


@dataclass(frozen=True)
class Interaction:
    """
    One classified atom-atom contact.

    atom_a is always the endpoint with the smaller (structure, serial) key.
    """
    atom_a: Atom
    atom_b: Atom
    distance: float
    category: InteractionType
    is_intramolecular: bool

    @property
    def pair_key(self) -> Tuple[Tuple[str, int], Tuple[str, int]]:
        return (self.atom_a.key, self.atom_b.key)

    @property
    def chain_a(self) -> ChainKey:
        return ChainKey.of(self.atom_a)

    @property
    def chain_b(self) -> ChainKey:
        return ChainKey.of(self.atom_b)

    @property
    def interaction_id(self) -> str:
        a, b = self.atom_a, self.atom_b
        return f"{a.structure}:{a.serial}-{b.structure}:{b.serial}"

    def to_dict(self) -> Dict[str, Any]:
        a, b = self.atom_a, self.atom_b
        return {
            'id': self.interaction_id,
            'structure_a': a.structure,
            'chain_a': a.chain_id,
            'residue_a': a.residue_label,
            'atom_a': a.atom_label,
            'serial_a': a.serial,
            'structure_b': b.structure,
            'chain_b': b.chain_id,
            'residue_b': b.residue_label,
            'atom_b': b.atom_label,
            'serial_b': b.serial,
            'distance': self.distance,
            'type': self.category.value,
            'is_intramolecular': self.is_intramolecular,
        }


@dataclass(frozen=True)
class AnalysisSummary:
    """Run-level counters."""
    structures: Tuple[str, ...]
    chains: Tuple[str, ...]
    total_atoms: int
    total_interactions: int
    intra_interactions: int
    inter_interactions: int
    category_counts: Mapping[str, int] = field(default_factory=dict)
    pdb_id: Optional[str] = None
    filename: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, 'category_counts', MappingProxyType(dict(self.category_counts)))


@dataclass(frozen=True)
class AnalysisResult:
    """
    Complete, untruncated result of one analysis run.

    Read-only throughout: sequences are tuples and mappings are
    MappingProxyType views.

    Attributes:
        summary: Run-level counters
        chains: ChainMetrics ordered by (structure, chain)
        interactions: All interactions, ordered by ascending canonical pair key
        interface_residues: ChainKey -> {res_seq: InterfaceResidue}, residues ascending
        residue_density: ChainKey -> InterfaceResidue tuple, densest first
                         (ties by ascending res_seq)
        chain_pairs: ChainPairSummary list, highest total first (ties by key)
    """
    summary: AnalysisSummary
    chains: Tuple[ChainMetrics, ...]
    interactions: Tuple[Interaction, ...]
    interface_residues: Mapping[ChainKey, Mapping[int, InterfaceResidue]]
    residue_density: Mapping[ChainKey, Tuple[InterfaceResidue, ...]]
    chain_pairs: Tuple[ChainPairSummary, ...]

    def inter_molecular(self) -> List[Interaction]:
        """Interactions between different chains or structures."""
        return [i for i in self.interactions if not i.is_intramolecular]

    def intra_molecular(self) -> List[Interaction]:
        """Interactions within one chain of one structure."""
        return [i for i in self.interactions if i.is_intramolecular]

    def get_chain(self, structure: str, chain_id: str) -> Optional[ChainMetrics]:
        key = ChainKey(structure, chain_id)
        for metrics in self.chains:
            if metrics.key == key:
                return metrics
        return None

    def preview(self, limit: Optional[int] = None) -> Dict[str, Any]:
        """
        Display-sized view: the first `limit` interactions plus the true count.

        Report exports must use `interactions`, never this view.
        """
        if limit is None:
            from ..config import get_config
            limit = get_config().display_limit
        data = self.to_dict()
        data['interactions'] = data['interactions'][:limit]
        data['interactions_truncated'] = len(self.interactions) > limit
        return data

    def to_dict(self) -> Dict[str, Any]:
        """Plain, JSON-serializable representation."""
        summary = self.summary
        return {
            'summary': {
                'pdb_id': summary.pdb_id,
                'filename': summary.filename,
                'structures': list(summary.structures),
                'chains': list(summary.chains),
                'total_atoms': summary.total_atoms,
                'total_interactions': summary.total_interactions,
                'intra_interactions': summary.intra_interactions,
                'inter_interactions': summary.inter_interactions,
                'category_counts': dict(summary.category_counts),
            },
            'chains': [
                {
                    'structure': m.structure,
                    'chain_id': m.chain_id,
                    'residue_count': m.residue_count,
                    'atom_count': m.atom_count,
                    'interacting_residues': m.interacting_residues,
                    'intra_interactions': m.intra_interactions,
                    'inter_interactions': m.inter_interactions,
                }
                for m in self.chains
            ],
            'interactions': [i.to_dict() for i in self.interactions],
            'interface_residues': {
                key.label: {
                    str(res_seq): _residue_to_dict(entry)
                    for res_seq, entry in entries.items()
                }
                for key, entries in self.interface_residues.items()
            },
            'interaction_density': {
                key.label: [_residue_to_dict(entry) for entry in entries]
                for key, entries in self.residue_density.items()
            },
            'chain_pairs': [
                {
                    'chain_a': pair.chain_a.label,
                    'chain_b': pair.chain_b.label,
                    'intra_count': pair.intra_count,
                    'inter_count': pair.inter_count,
                    'total': pair.total,
                    'category_counts': dict(pair.category_counts),
                }
                for pair in self.chain_pairs
            ],
        }


def _residue_to_dict(entry: InterfaceResidue) -> Dict[str, Any]:
    return {
        'res_seq': entry.res_seq,
        'res_name': entry.res_name,
        'categories': [c.value for c in entry.categories],
        'intra_count': entry.intra_count,
        'inter_count': entry.inter_count,
        'total': entry.total,
    }


def validate_structure_labels(labels: Iterable[str]) -> None:
    """
    Reject duplicate structure labels in one multi-structure request.

    Raises:
        ReaderError: If a label occurs more than once
    """
    counts = Counter(labels)
    duplicates = sorted(label for label, n in counts.items() if n > 1)
    if duplicates:
        raise ReaderError(f"Duplicate structure label(s): {', '.join(duplicates)}")


def _label_atoms(label: str, atoms: Sequence[Atom]) -> List[Atom]:
    return [a if a.structure == label else replace(a, structure=label) for a in atoms]


def analyze_structures(
    structures: Mapping[str, Sequence[Atom]],
    config: Optional['AnalysisConfig'] = None,
    should_cancel: Optional[Callable[[], bool]] = None,
    pdb_id: Optional[str] = None,
    filename: Optional[str] = None,
) -> AnalysisResult:
    """
    Detect, classify and aggregate interactions across named structures.

    Args:
        structures: Mapping of structure label -> atoms (labels must be unique)
        config: AnalysisConfig (global default if None)
        should_cancel: Optional callable polled during contact detection;
                       returning True aborts the run with AnalysisCancelled
        pdb_id: Accession code recorded in the summary
        filename: Uploaded file name recorded in the summary

    Returns:
        AnalysisResult

    Raises:
        EmptyStructureError: If the structures contain no atoms at all
        AnalysisCancelled: If should_cancel() returned True
    """
    if config is None:
        from ..config import get_config
        config = get_config()

    labels = sorted(structures)
    atoms: List[Atom] = []
    for label in labels:
        atoms.extend(_label_atoms(label, structures[label]))

    if not atoms:
        raise EmptyStructureError("Invalid PDB content: No atoms found")

    contacts = find_contacts(atoms, cutoff=config.cutoff, should_cancel=should_cancel)

    interactions = []
    for i, j, distance in contacts:
        a, b = atoms[i], atoms[j]
        interactions.append(Interaction(
            atom_a=a,
            atom_b=b,
            distance=distance,
            category=classify_interaction(a.element, b.element, a.res_name, b.res_name, distance, config),
            is_intramolecular=is_intramolecular(a, b),
        ))

    tables = Aggregator(atoms).add_all(interactions).finalize()

    n_intra = sum(1 for i in interactions if i.is_intramolecular)
    category_counts = Counter(i.category.value for i in interactions)
    summary = AnalysisSummary(
        structures=tuple(labels),
        chains=tuple(m.key.label for m in tables.chains),
        total_atoms=len(atoms),
        total_interactions=len(interactions),
        intra_interactions=n_intra,
        inter_interactions=len(interactions) - n_intra,
        category_counts={c.value: category_counts.get(c.value, 0) for c in InteractionType},
        pdb_id=pdb_id,
        filename=filename,
    )

    return AnalysisResult(
        summary=summary,
        chains=tables.chains,
        interactions=tuple(interactions),
        interface_residues=tables.interface_residues,
        residue_density=tables.residue_density,
        chain_pairs=tables.chain_pairs,
    )


def analyze_atoms(
    atoms: Sequence[Atom],
    label: str = "structure",
    **kwargs,
) -> AnalysisResult:
    """Analyze a single structure; see analyze_structures() for arguments."""
    return analyze_structures({label: atoms}, **kwargs)
