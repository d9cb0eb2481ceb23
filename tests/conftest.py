"""Shared helpers for the ppi_contacts test suite.

Atoms are built either directly (make_atom) or as fixed-column PDB text
(pdb_line / pdb_text) so parser tests do not depend on the PDB writer.
"""

from __future__ import annotations

import pytest

from ppi_contacts.config import AnalysisConfig, set_config
from ppi_contacts.data_readers import Atom


def make_atom(
    serial: int,
    x: float = 0.0,
    y: float = 0.0,
    z: float = 0.0,
    *,
    name: str = "CA",
    element: str = "C",
    res_name: str = "ALA",
    res_seq: int = 1,
    chain_id: str = "A",
    structure: str = "s1",
) -> Atom:
    return Atom(
        serial=serial,
        name=name,
        alt_loc="",
        res_name=res_name,
        chain_id=chain_id,
        res_seq=res_seq,
        i_code="",
        x=x,
        y=y,
        z=z,
        occupancy=1.0,
        temp_factor=0.0,
        element=element,
        structure=structure,
    )


def pdb_line(
    serial: int,
    x: float,
    y: float,
    z: float,
    *,
    record: str = "ATOM",
    name: str = "CA",
    res_name: str = "ALA",
    chain_id: str = "A",
    res_seq: int = 1,
    element: str = "C",
    occupancy: str = "  1.00",
    temp_factor: str = " 20.00",
) -> str:
    """One ATOM/HETATM record laid out in PDB columns."""
    atom_name = f" {name:<3}" if len(name) < 4 else name
    return (
        f"{record:<6}{serial:>5} {atom_name} {res_name:>3} {chain_id}{res_seq:>4}    "
        f"{x:8.3f}{y:8.3f}{z:8.3f}{occupancy}{temp_factor}          {element:>2}"
    )


def pdb_text(*lines: str) -> str:
    return "\n".join(lines + ("END",)) + "\n"


@pytest.fixture(autouse=True)
def default_config():
    """Every test starts from the default configuration."""
    set_config(AnalysisConfig())
    yield
    set_config(AnalysisConfig())
