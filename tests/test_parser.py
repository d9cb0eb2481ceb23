"""Tests for the PDB fixed-column reader (data_readers/pdb.py)."""

from __future__ import annotations

import pytest

from conftest import pdb_line, pdb_text
from ppi_contacts.data_readers import (
    ReaderError,
    get_reader,
    list_backends,
    parse_pdb,
    parse_pdb_with_stats,
)
from ppi_contacts.data_readers.pdb import parse_atom_line


class TestParseAtomLine:
    def test_fields_are_read_by_column(self):
        line = pdb_line(12, 1.5, -2.25, 30.125, name="OD1", res_name="ASP",
                        chain_id="B", res_seq=42, element="O")
        atom = parse_atom_line(line, "1ABC")

        assert atom.serial == 12
        assert atom.name == "OD1"
        assert atom.res_name == "ASP"
        assert atom.chain_id == "B"
        assert atom.res_seq == 42
        assert atom.coordinates == (1.5, -2.25, 30.125)
        assert atom.occupancy == 1.0
        assert atom.temp_factor == 20.0
        assert atom.element == "O"
        assert atom.structure == "1ABC"
        assert atom.record_type == "ATOM"

    def test_hetatm_records_are_atoms(self):
        atom = parse_atom_line(pdb_line(1, 0, 0, 0, record="HETATM", name="ZN",
                                        res_name="ZN", element="ZN"))
        assert atom is not None
        assert atom.record_type == "HETATM"

    def test_non_atom_records_are_ignored(self):
        assert parse_atom_line("REMARK   2 RESOLUTION. 1.80 ANGSTROMS.") is None
        assert parse_atom_line("TER     100      ALA A  12") is None

    def test_unparseable_coordinates_return_none(self):
        line = pdb_line(1, 0, 0, 0)
        broken = line[:30] + "    abcd" + line[38:]
        assert parse_atom_line(broken) is None

    def test_missing_optional_fields_default_to_zero(self):
        atom = parse_atom_line(pdb_line(1, 0, 0, 0, occupancy="      ", temp_factor="  n/a "))
        assert atom.occupancy == 0.0
        assert atom.temp_factor == 0.0

    def test_element_inferred_when_column_blank(self):
        line = pdb_line(1, 0, 0, 0, name="NZ", element="  ")
        assert parse_atom_line(line).element == "N"

    def test_insertion_code_is_part_of_residue_label(self):
        line = pdb_line(1, 0, 0, 0, res_seq=52)
        line = line[:26] + "A" + line[27:]
        atom = parse_atom_line(line)
        assert atom.i_code == "A"
        assert atom.residue_label == "ALA 52A"


class TestParsePdb:
    def test_atoms_in_file_order(self):
        text = pdb_text(
            "HEADER    TEST",
            pdb_line(1, 0, 0, 0),
            pdb_line(2, 1, 0, 0, name="CB"),
            "TER",
            pdb_line(3, 2, 0, 0, chain_id="B"),
        )
        atoms = parse_pdb(text, "s1")
        assert [a.serial for a in atoms] == [1, 2, 3]
        assert {a.structure for a in atoms} == {"s1"}

    def test_no_atom_records_yields_empty_list(self):
        text = pdb_text("HEADER    NOTHING HERE", "REMARK   1")
        assert parse_pdb(text) == []

    def test_empty_text(self):
        assert parse_pdb("") == []

    def test_malformed_records_are_skipped_and_counted(self):
        bad = pdb_line(2, 0, 0, 0)
        bad = bad[:6] + "  xx " + bad[11:]
        text = pdb_text(pdb_line(1, 0, 0, 0), bad, pdb_line(3, 1, 1, 1))

        atoms, n_malformed, n_models_skipped = parse_pdb_with_stats(text)
        assert [a.serial for a in atoms] == [1, 3]
        assert n_malformed == 1
        assert n_models_skipped == 0

    def test_only_first_model_is_read(self):
        text = pdb_text(
            "MODEL        1",
            pdb_line(1, 0, 0, 0),
            "ENDMDL",
            "MODEL        2",
            pdb_line(1, 9, 9, 9),
            "ENDMDL",
        )
        atoms = parse_pdb(text)
        assert len(atoms) == 1
        assert atoms[0].coordinates == (0.0, 0.0, 0.0)

    def test_skipped_models_are_counted(self):
        text = pdb_text(
            "MODEL        1",
            pdb_line(1, 0, 0, 0),
            "ENDMDL",
            "MODEL        2",
            pdb_line(1, 9, 9, 9),
            "ENDMDL",
            "MODEL        3",
            pdb_line(1, 7, 7, 7),
            "ENDMDL",
        )
        atoms, n_malformed, n_models_skipped = parse_pdb_with_stats(text)
        assert len(atoms) == 1
        assert n_malformed == 0
        assert n_models_skipped == 2

    def test_single_model_file_skips_nothing(self):
        text = pdb_text("MODEL        1", pdb_line(1, 0, 0, 0), "ENDMDL")
        _, _, n_models_skipped = parse_pdb_with_stats(text)
        assert n_models_skipped == 0

    def test_windows_line_endings(self):
        text = "\r\n".join([pdb_line(1, 0, 0, 0), pdb_line(2, 1, 0, 0)])
        assert len(parse_pdb(text)) == 2


class TestReaderRegistry:
    def test_pdb_backend_is_registered(self):
        assert "pdb" in list_backends()

    def test_unknown_backend(self):
        with pytest.raises(ReaderError, match="Unknown backend"):
            get_reader("mmcif")

    def test_read_structure_labels_atoms_with_file_stem(self, tmp_path):
        path = tmp_path / "complex.pdb"
        path.write_text(pdb_text(pdb_line(1, 0, 0, 0)))

        atoms = get_reader("pdb").read_structure(path)
        assert atoms[0].structure == "complex"

    def test_read_structure_missing_file(self, tmp_path):
        with pytest.raises(ReaderError):
            get_reader().read_structure(tmp_path / "missing.pdb")
