"""
Uniform cubic grid for neighbor queries.

Atoms are bucketed into cubic cells whose edge equals the contact cutoff.
Any two atoms within the cutoff then lie in the same cell or in one of the
26 face/edge/corner-adjacent cells, so a neighbor query only has to scan
the 3x3x3 block around an atom's cell.
"""

from itertools import product
from typing import Dict, List, Tuple

import numpy as np


Cell = Tuple[int, int, int]

# Offsets of the 27 cells in a 3x3x3 block
NEIGHBOR_OFFSETS: List[Cell] = list(product((-1, 0, 1), repeat=3))


class SpatialGrid:
    """
    Mapping from integer cell coordinates to the atom indices inside them.

    Args:
        coordinates: Nx3 array of atom coordinates (Angstroms)
        cell_size: Cell edge length (Angstroms), normally the contact cutoff
    """

    def __init__(self, coordinates: np.ndarray, cell_size: float = 5.0):
        if not cell_size > 0:
            raise ValueError(f"Invalid cell size: {cell_size}. Must be > 0.")

        coordinates = np.asarray(coordinates, dtype=float).reshape(-1, 3)
        self.cell_size = float(cell_size)
        self.cell_coordinates = np.floor(coordinates / self.cell_size).astype(np.int64)

        buckets: Dict[Cell, List[int]] = {}
        for index, cell in enumerate(map(tuple, self.cell_coordinates.tolist())):
            buckets.setdefault(cell, []).append(index)

        self._buckets: Dict[Cell, np.ndarray] = {
            cell: np.array(indices, dtype=np.int64) for cell, indices in buckets.items()
        }

    def __len__(self) -> int:
        """Number of occupied cells."""
        return len(self._buckets)

    def __contains__(self, cell: Cell) -> bool:
        return cell in self._buckets

    def cells(self) -> List[Cell]:
        """Occupied cells in ascending order."""
        return sorted(self._buckets)

    def cell_of(self, index: int) -> Cell:
        """Cell containing the atom at `index`."""
        return tuple(int(c) for c in self.cell_coordinates[index])

    def bucket(self, cell: Cell) -> np.ndarray:
        """Atom indices in one cell (empty array for unoccupied cells)."""
        return self._buckets.get(tuple(cell), np.empty(0, dtype=np.int64))

    def neighborhood(self, cell: Cell) -> np.ndarray:
        """Atom indices in the 3x3x3 block of cells centred on `cell`."""
        cx, cy, cz = cell
        parts = []
        for dx, dy, dz in NEIGHBOR_OFFSETS:
            indices = self._buckets.get((cx + dx, cy + dy, cz + dz))
            if indices is not None:
                parts.append(indices)
        if not parts:
            return np.empty(0, dtype=np.int64)
        return np.concatenate(parts)
