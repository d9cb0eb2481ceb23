"""
Extractors module for ppi_contacts.

This module provides the geometric building blocks of the analysis:

- spatial_index: uniform cubic grid for neighbor queries
- contacts: grid-based contact detection and the brute-force reference

All extractors work with Atom records from data_readers.
"""

from .spatial_index import (
    SpatialGrid,
    NEIGHBOR_OFFSETS,
)

from .contacts import (
    AnalysisCancelled,
    contact_key,
    compute_distance_matrix,
    find_contacts,
    find_contacts_brute_force,
)

__all__ = [
    # Spatial index
    'SpatialGrid',
    'NEIGHBOR_OFFSETS',
    # Contacts
    'AnalysisCancelled',
    'contact_key',
    'compute_distance_matrix',
    'find_contacts',
    'find_contacts_brute_force',
]
