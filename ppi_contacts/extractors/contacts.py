"""
Atom-atom contact detection.

Finds all atom pairs within a distance cutoff using a uniform spatial grid
(27-cell neighborhood scan) instead of an all-pairs comparison.

Each unordered pair is reported exactly once. A pair is emitted only from the
endpoint with the smaller canonical order key (structure label, serial,
input position), which makes the dedup independent of scanning order and
lets callers split the home cells across workers without a shared
"already seen" set.

find_contacts_brute_force() is the O(n^2) reference with the same output
contract, used to cross-check the grid detector.
"""

from typing import Callable, Iterable, List, Optional, Sequence, Tuple

import numpy as np

from ..data_readers import Atom
from .spatial_index import Cell, SpatialGrid


Contact = Tuple[int, int, float]


class AnalysisCancelled(Exception):
    """Raised when a caller-supplied cancellation check asks to stop."""
    pass


def contact_key(atom: Atom) -> Tuple[str, int]:
    """Canonical identifier of an atom for pair keys."""
    return atom.key


def _order_ranks(atoms: Sequence[Atom]) -> np.ndarray:
    """
    Rank of every atom under the canonical order (structure, serial, position).

    Comparing ranks is equivalent to comparing the keys and is cheap inside
    numpy masks.
    """
    order = sorted(range(len(atoms)), key=lambda i: (contact_key(atoms[i]), i))
    ranks = np.empty(len(atoms), dtype=np.int64)
    ranks[order] = np.arange(len(atoms), dtype=np.int64)
    return ranks


def _coordinates(atoms: Sequence[Atom]) -> np.ndarray:
    if not atoms:
        return np.empty((0, 3), dtype=float)
    return np.array([(a.x, a.y, a.z) for a in atoms], dtype=float)


def _canonical_pair(i: int, j: int, ranks: np.ndarray) -> Tuple[int, int]:
    return (i, j) if ranks[i] < ranks[j] else (j, i)


def _sort_contacts(contacts: List[Contact], ranks: np.ndarray) -> List[Contact]:
    """Sort by ascending canonical pair key."""
    return sorted(contacts, key=lambda c: (ranks[c[0]], ranks[c[1]]))


def find_contacts(
    atoms: Sequence[Atom],
    cutoff: float = 5.0,
    should_cancel: Optional[Callable[[], bool]] = None,
    cells: Optional[Iterable[Cell]] = None,
) -> List[Contact]:
    """
    Find all atom pairs within `cutoff` using a spatial grid.

    Args:
        atoms: Atoms to compare (not modified)
        cutoff: Maximum center-to-center distance (Angstroms), also the grid cell edge
        should_cancel: Optional callable polled between grid cells; returning
                       True aborts the scan
        cells: Optional subset of home cells to scan (for partitioned runs);
               default scans every occupied cell

    Returns:
        List of (index_a, index_b, distance) tuples, where index_a is the
        endpoint with the smaller canonical key, sorted by canonical pair key

    Raises:
        AnalysisCancelled: If should_cancel() returned True
    """
    n_atoms = len(atoms)
    if n_atoms < 2:
        return []

    coords = _coordinates(atoms)
    ranks = _order_ranks(atoms)
    grid = SpatialGrid(coords, cell_size=cutoff)
    cutoff_sq = cutoff * cutoff

    home_cells = grid.cells() if cells is None else sorted(set(map(tuple, cells)))

    contacts: List[Contact] = []
    for cell in home_cells:
        if should_cancel is not None and should_cancel():
            raise AnalysisCancelled("Contact detection cancelled")

        home = grid.bucket(cell)
        if home.size == 0:
            continue
        neighbors = grid.neighborhood(cell)

        # Squared distances between home atoms and every neighborhood atom
        diff = coords[home][:, np.newaxis, :] - coords[neighbors][np.newaxis, :, :]
        dist_sq = (diff ** 2).sum(axis=2)

        # Own each pair from its smaller-key endpoint; also drops self pairs
        owned = ranks[home][:, np.newaxis] < ranks[neighbors][np.newaxis, :]
        mask = owned & (dist_sq <= cutoff_sq)

        for hi, ni in np.argwhere(mask):
            i = int(home[hi])
            j = int(neighbors[ni])
            contacts.append((i, j, float(np.sqrt(dist_sq[hi, ni]))))

    return _sort_contacts(contacts, ranks)


def compute_distance_matrix(atoms: Sequence[Atom]) -> np.ndarray:
    """
    Compute the full atom-atom distance matrix.

    Args:
        atoms: Atoms to compare

    Returns:
        NxN distance matrix in Angstroms
    """
    coords = _coordinates(atoms)
    return np.sqrt(
        ((coords[:, np.newaxis, :] - coords[np.newaxis, :, :]) ** 2).sum(axis=2)
    )


def find_contacts_brute_force(
    atoms: Sequence[Atom],
    cutoff: float = 5.0,
) -> List[Contact]:
    """
    Reference all-pairs contact search.

    Same output contract as find_contacts(); quadratic in time and memory,
    so only suitable for small inputs and for cross-checking.
    """
    n_atoms = len(atoms)
    if n_atoms < 2:
        return []

    coords = _coordinates(atoms)
    ranks = _order_ranks(atoms)
    dist_sq = ((coords[:, np.newaxis, :] - coords[np.newaxis, :, :]) ** 2).sum(axis=2)
    cutoff_sq = cutoff * cutoff

    contacts: List[Contact] = []
    for i, j in np.argwhere(np.triu(dist_sq <= cutoff_sq, k=1)):
        a, b = _canonical_pair(int(i), int(j), ranks)
        contacts.append((a, b, float(np.sqrt(dist_sq[i, j]))))

    return _sort_contacts(contacts, ranks)
