"""
Aggregation of classified interactions into chain, residue and chain-pair
statistics.

Counting works in two phases. While interactions are streamed in, every
chain is tracked by a ChainMetricsAccumulator, which has no read access to
its counts. Only Aggregator.finalize() turns the accumulators into frozen
ChainMetrics records. Partial aggregators built over disjoint sets of
interactions (e.g. by separate workers) can be combined with merge(); the
combination only uses set unions and integer sums, so the merge order never
changes the numbers.

Count conventions:
- Each interaction is counted once per endpoint side in ChainMetrics and in
  the per-residue tallies, so an interaction inside chain A adds 2 to A's
  intra count and 1 to each endpoint residue.
- Chain-pair summaries count each interaction once.
"""

from collections import Counter
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Iterable, Mapping, NamedTuple, Sequence, Set, Tuple, TYPE_CHECKING

from .classification import InteractionType

if TYPE_CHECKING:
    from ..data_readers import Atom
    from .analysis import Interaction


class ChainKey(NamedTuple):
    """Composite chain identifier (structure label, chain id)."""
    structure: str
    chain: str

    @property
    def label(self) -> str:
        """'structure:chain' label used in reports."""
        return f"{self.structure}:{self.chain}"

    @classmethod
    def of(cls, atom: 'Atom') -> 'ChainKey':
        return cls(atom.structure, atom.chain_id)


@dataclass(frozen=True)
class ChainMetrics:
    """Finalized per-chain statistics."""
    structure: str
    chain_id: str
    residue_count: int
    atom_count: int
    interacting_residues: int
    intra_interactions: int
    inter_interactions: int

    @property
    def key(self) -> ChainKey:
        return ChainKey(self.structure, self.chain_id)

    @property
    def total_interactions(self) -> int:
        return self.intra_interactions + self.inter_interactions


class ChainMetricsAccumulator:
    """
    Per-chain counters while interactions are still being collected.

    Deliberately exposes no counts; call finalize() once all interactions
    have been recorded.
    """

    __slots__ = ('key', '_residue_count', '_atom_count', '_touched', '_intra', '_inter')

    def __init__(self, key: ChainKey, residue_count: int, atom_count: int):
        self.key = key
        self._residue_count = residue_count
        self._atom_count = atom_count
        self._touched: Set[int] = set()
        self._intra = 0
        self._inter = 0

    def record(self, res_seq: int, intramolecular: bool) -> None:
        """Record one interaction endpoint on this chain."""
        self._touched.add(res_seq)
        if intramolecular:
            self._intra += 1
        else:
            self._inter += 1

    def merge(self, other: 'ChainMetricsAccumulator') -> None:
        """Fold another partial accumulator for the same chain into this one."""
        if other.key != self.key:
            raise ValueError(f"Cannot merge chain {other.key.label} into {self.key.label}")
        self._touched |= other._touched
        self._intra += other._intra
        self._inter += other._inter

    def finalize(self) -> ChainMetrics:
        return ChainMetrics(
            structure=self.key.structure,
            chain_id=self.key.chain,
            residue_count=self._residue_count,
            atom_count=self._atom_count,
            interacting_residues=len(self._touched),
            intra_interactions=self._intra,
            inter_interactions=self._inter,
        )


@dataclass(frozen=True)
class InterfaceResidue:
    """Interaction tallies of one residue (also used for density ranking)."""
    chain: ChainKey
    res_seq: int
    res_name: str
    categories: Tuple[InteractionType, ...]
    intra_count: int
    inter_count: int

    @property
    def total(self) -> int:
        return self.intra_count + self.inter_count


@dataclass(frozen=True)
class ChainPairSummary:
    """Interaction counts between two chains (chain_a <= chain_b)."""
    chain_a: ChainKey
    chain_b: ChainKey
    intra_count: int
    inter_count: int
    category_counts: Mapping[str, int] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, 'category_counts', MappingProxyType(dict(self.category_counts)))

    @property
    def key(self) -> Tuple[ChainKey, ChainKey]:
        return (self.chain_a, self.chain_b)

    @property
    def total(self) -> int:
        return self.intra_count + self.inter_count


@dataclass(frozen=True)
class Aggregates:
    """Finalized aggregation tables."""
    chains: Tuple[ChainMetrics, ...]
    interface_residues: Mapping[ChainKey, Mapping[int, InterfaceResidue]]
    residue_density: Mapping[ChainKey, Tuple[InterfaceResidue, ...]]
    chain_pairs: Tuple[ChainPairSummary, ...]


class _ResidueTally:
    __slots__ = ('res_name', 'categories', 'intra', 'inter')

    def __init__(self, res_name: str):
        self.res_name = res_name
        self.categories: Set[InteractionType] = set()
        self.intra = 0
        self.inter = 0


class _PairTally:
    __slots__ = ('intra', 'inter', 'categories')

    def __init__(self):
        self.intra = 0
        self.inter = 0
        self.categories: Counter = Counter()


def chain_pair_key(chain_a: ChainKey, chain_b: ChainKey) -> Tuple[ChainKey, ChainKey]:
    """Order-independent key of a chain pair."""
    return (chain_a, chain_b) if chain_a <= chain_b else (chain_b, chain_a)


def _ordered_categories(categories: Iterable[InteractionType]) -> Tuple[InteractionType, ...]:
    present = set(categories)
    return tuple(c for c in InteractionType if c in present)


class Aggregator:
    """
    Accumulates interactions and produces the aggregation tables.

    Usage:
        aggregator = Aggregator(atoms)
        for interaction in interactions:
            aggregator.add(interaction)
        tables = aggregator.finalize()
    """

    def __init__(self, atoms: Sequence['Atom']):
        residues: Dict[ChainKey, Set[int]] = {}
        atom_counts: Counter = Counter()
        for atom in atoms:
            key = ChainKey.of(atom)
            residues.setdefault(key, set()).add(atom.res_seq)
            atom_counts[key] += 1

        self._chains: Dict[ChainKey, ChainMetricsAccumulator] = {
            key: ChainMetricsAccumulator(key, len(residues[key]), atom_counts[key])
            for key in residues
        }
        self._residues: Dict[Tuple[ChainKey, int], _ResidueTally] = {}
        self._pairs: Dict[Tuple[ChainKey, ChainKey], _PairTally] = {}
        self._finalized = False

    def _chain(self, key: ChainKey) -> ChainMetricsAccumulator:
        # Chains only seen through interactions (atoms outside the atom set)
        if key not in self._chains:
            self._chains[key] = ChainMetricsAccumulator(key, 0, 0)
        return self._chains[key]

    def _record_endpoint(self, atom: 'Atom', category: InteractionType, intramolecular: bool) -> None:
        key = ChainKey.of(atom)
        self._chain(key).record(atom.res_seq, intramolecular)

        residue_key = (key, atom.res_seq)
        tally = self._residues.get(residue_key)
        if tally is None:
            tally = self._residues[residue_key] = _ResidueTally(atom.res_name)
        else:
            tally.res_name = min(tally.res_name, atom.res_name)
        tally.categories.add(category)
        if intramolecular:
            tally.intra += 1
        else:
            tally.inter += 1

    def add(self, interaction: 'Interaction') -> None:
        """Record one classified interaction."""
        if self._finalized:
            raise RuntimeError("Aggregator already finalized")

        intramolecular = interaction.is_intramolecular
        category = interaction.category
        self._record_endpoint(interaction.atom_a, category, intramolecular)
        self._record_endpoint(interaction.atom_b, category, intramolecular)

        pair_key = chain_pair_key(ChainKey.of(interaction.atom_a), ChainKey.of(interaction.atom_b))
        pair = self._pairs.get(pair_key)
        if pair is None:
            pair = self._pairs[pair_key] = _PairTally()
        if intramolecular:
            pair.intra += 1
        else:
            pair.inter += 1
        pair.categories[category.value] += 1

    def add_all(self, interactions: Iterable['Interaction']) -> 'Aggregator':
        for interaction in interactions:
            self.add(interaction)
        return self

    def merge(self, other: 'Aggregator') -> 'Aggregator':
        """
        Fold a partial aggregator built over a disjoint set of interactions.

        Both aggregators must have been created from the same atom set.
        """
        if self._finalized or other._finalized:
            raise RuntimeError("Cannot merge a finalized aggregator")

        for key, accumulator in other._chains.items():
            self._chain(key).merge(accumulator)

        for residue_key, theirs in other._residues.items():
            mine = self._residues.get(residue_key)
            if mine is None:
                mine = self._residues[residue_key] = _ResidueTally(theirs.res_name)
            mine.res_name = min(mine.res_name, theirs.res_name)
            mine.categories |= theirs.categories
            mine.intra += theirs.intra
            mine.inter += theirs.inter

        for pair_key, theirs in other._pairs.items():
            mine = self._pairs.get(pair_key)
            if mine is None:
                mine = self._pairs[pair_key] = _PairTally()
            mine.intra += theirs.intra
            mine.inter += theirs.inter
            mine.categories.update(theirs.categories)

        return self

    def finalize(self) -> Aggregates:
        """Freeze all counters; the aggregator cannot be used afterwards."""
        if self._finalized:
            raise RuntimeError("Aggregator already finalized")
        self._finalized = True

        chains = tuple(self._chains[key].finalize() for key in sorted(self._chains))

        interface_residues: Dict[ChainKey, Dict[int, InterfaceResidue]] = {}
        for (key, res_seq) in sorted(self._residues):
            tally = self._residues[(key, res_seq)]
            interface_residues.setdefault(key, {})[res_seq] = InterfaceResidue(
                chain=key,
                res_seq=res_seq,
                res_name=tally.res_name,
                categories=_ordered_categories(tally.categories),
                intra_count=tally.intra,
                inter_count=tally.inter,
            )

        residue_density = {
            key: tuple(sorted(entries.values(), key=lambda e: (-e.total, e.res_seq)))
            for key, entries in interface_residues.items()
        }

        chain_pairs = [
            ChainPairSummary(
                chain_a=pair_key[0],
                chain_b=pair_key[1],
                intra_count=tally.intra,
                inter_count=tally.inter,
                category_counts=dict(sorted(tally.categories.items())),
            )
            for pair_key, tally in self._pairs.items()
        ]
        chain_pairs.sort(key=lambda p: (-p.total, p.chain_a, p.chain_b))

        return Aggregates(
            chains=chains,
            interface_residues=MappingProxyType({
                key: MappingProxyType(entries) for key, entries in interface_residues.items()
            }),
            residue_density=MappingProxyType(residue_density),
            chain_pairs=tuple(chain_pairs),
        )


def aggregate(atoms: Sequence['Atom'], interactions: Iterable['Interaction']) -> Aggregates:
    """
    Aggregate classified interactions over an atom set.

    Args:
        atoms: All atoms of the run (defines chains, residue and atom counts)
        interactions: Classified interactions between those atoms

    Returns:
        Aggregates with chain metrics, interface residues, density and chain pairs
    """
    return Aggregator(atoms).add_all(interactions).finalize()
