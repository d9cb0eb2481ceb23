"""Tests for CSV, PDB and JSON report writers (output_writers/)."""

from __future__ import annotations

import csv
import json

import pytest

from conftest import make_atom, pdb_line, pdb_text
from ppi_contacts import analyze_atoms, analyze_structures, parse_pdb
from ppi_contacts.output_writers import (
    ATOM_FIELDS,
    INTERACTION_FIELDS,
    format_atoms_csv,
    format_interactions_csv,
    format_pdb,
    read_atoms_csv,
    result_to_json,
    write_atoms_csv,
    write_chain_metrics_csv,
    write_chain_pairs_csv,
    write_density_csv,
    write_inter_molecular_csv,
    write_interactions_csv,
    write_intra_molecular_csv,
    write_pdb,
    write_result_json,
)


@pytest.fixture
def result():
    atoms = [
        make_atom(1, 0, 0, 0, name="OD1", element="O", res_name="ASP", res_seq=10, chain_id="A"),
        make_atom(2, 2.8, 0, 0, name="NZ", element="N", res_name="LYS", res_seq=20, chain_id="B"),
        make_atom(3, 0, 4.12345, 0, name="CB", element="C", res_name="ASP", res_seq=11, chain_id="A"),
    ]
    return analyze_atoms(atoms, label="cplx")


def read_rows(path):
    with open(path, newline="") as f:
        return list(csv.reader(f))


class TestInteractionsCsv:
    def test_header_and_quoting(self, result):
        text = format_interactions_csv(result.interactions)
        lines = text.split("\n")

        assert lines[0] == ",".join(INTERACTION_FIELDS)
        assert lines[-1] == ""
        assert len(lines) == len(result.interactions) + 2
        assert lines[1] == (
            'A,"ASP 10","OD1 (O)",B,"LYS 20","NZ (N)","Hydrogen Bond",2.800,cplx,cplx,false'
        )

    def test_distances_have_three_decimals(self, result):
        rows = list(csv.DictReader(format_interactions_csv(result.interactions).splitlines()))
        for row in rows:
            whole, decimals = row["Distance_Angstrom"].split(".")
            assert len(decimals) == 3
        assert "4.123" in {row["Distance_Angstrom"] for row in rows}

    def test_empty_list_writes_header_only(self):
        assert format_interactions_csv([]) == ",".join(INTERACTION_FIELDS) + "\n"

    def test_subsets_are_disjoint_and_complete(self, result, tmp_path):
        write_interactions_csv(result.interactions, tmp_path / "all.csv")
        write_inter_molecular_csv(result, tmp_path / "inter.csv")
        write_intra_molecular_csv(result, tmp_path / "intra.csv")

        all_rows = read_rows(tmp_path / "all.csv")[1:]
        inter = read_rows(tmp_path / "inter.csv")[1:]
        intra = read_rows(tmp_path / "intra.csv")[1:]

        assert len(all_rows) == len(inter) + len(intra) == 3
        assert {r[-1] for r in inter} == {"false"}
        assert {r[-1] for r in intra} == {"true"}

    def test_exports_are_never_truncated(self, tmp_path):
        atoms = [make_atom(i, 0.01 * i, 0, 0) for i in range(1, 61)]
        result = analyze_atoms(atoms)
        assert len(result.preview(limit=5)["interactions"]) == 5

        write_interactions_csv(result.interactions, tmp_path / "all.csv")
        assert len(read_rows(tmp_path / "all.csv")) == 1 + 60 * 59 // 2


class TestAtomsCsv:
    def test_format(self):
        text = format_atoms_csv([make_atom(5, 1.23456, -2, 3.5, res_seq=7)])
        header, row = text.splitlines()
        assert header == ",".join(ATOM_FIELDS)
        assert row == "A,ALA,7,CA,5,1.235,-2.000,3.500,C,1.00,0.00,s1"

    def test_commas_and_quotes_are_quoted(self):
        text = format_atoms_csv([make_atom(1, structure='run,"7"')])
        row = text.splitlines()[1]
        assert row.endswith(',"run,""7"""')
        parsed = next(csv.DictReader(text.splitlines()))
        assert parsed["Structure"] == 'run,"7"'

    def test_coordinate_dump_round_trip(self, tmp_path):
        text = pdb_text(
            pdb_line(1, 11.104, 6.134, -6.504, name="N", element="N"),
            pdb_line(2, 11.639, 6.071, -5.147),
            pdb_line(3, -0.001, 100.5, 9.87, name="OG", res_name="SER", chain_id="B", res_seq=-3,
                     element="O"),
        )
        atoms = parse_pdb(text, "orig")
        path = tmp_path / "atoms.csv"
        write_atoms_csv(atoms, path)
        reread = read_atoms_csv(path)

        assert len(reread) == len(atoms)
        for before, after in zip(atoms, reread):
            assert after.coordinates == pytest.approx(before.coordinates, abs=5e-4)
            assert (after.serial, after.name, after.res_name, after.chain_id, after.res_seq) == (
                before.serial, before.name, before.res_name, before.chain_id, before.res_seq
            )
            assert after.structure == "orig"


class TestPdbWriter:
    def test_line_layout(self):
        atom = make_atom(12, 1.5, -2.25, 30.125, name="OD1", element="O", res_name="ASP", res_seq=42)
        line = format_pdb([atom]).splitlines()[0]
        assert len(line) == 80
        assert line[0:6] == "ATOM  "
        assert line[12:16] == " OD1"
        assert line[76:78] == " O"

    def test_round_trip_through_parser(self, tmp_path):
        atoms = [
            make_atom(1, 1.0, 2.0, 3.0, name="N", element="N"),
            make_atom(2, -10.5, 0.25, 99.999, name="HD21", element="H", res_name="ASN", res_seq=1000),
            make_atom(3, 0, 0, 0, name="FE", element="FE", res_name="HEM", chain_id="Z"),
        ]
        path = tmp_path / "dump.pdb"
        write_pdb(atoms, path)
        reread = parse_pdb(path.read_text(), "s1")

        assert [(a.serial, a.name, a.res_name, a.res_seq, a.chain_id, a.element) for a in reread] == [
            (a.serial, a.name, a.res_name, a.res_seq, a.chain_id, a.element) for a in atoms
        ]
        for before, after in zip(atoms, reread):
            assert after.coordinates == pytest.approx(before.coordinates, abs=5e-4)
        assert path.read_text().rstrip().endswith("END")

    def test_widest_values_still_read_back(self):
        atoms = [
            make_atom(99999, -999.999, 9999.999, 0, res_seq=9999),
            make_atom(1, 0, 0, 0, res_seq=-999),
        ]
        reread = parse_pdb(format_pdb(atoms))
        assert [(a.serial, a.res_seq) for a in reread] == [(99999, 9999), (1, -999)]
        assert reread[0].coordinates == pytest.approx((-999.999, 9999.999, 0.0))

    @pytest.mark.parametrize(
        "overrides, field",
        [
            ({"res_seq": 12345}, "residue number"),
            ({"serial": 100000}, "serial"),
            ({"x": 12345.0}, "x coordinate"),
            ({"z": -1000.0}, "z coordinate"),
            ({"chain_id": "AB"}, "chain id"),
            ({"name": "CA123"}, "atom name"),
        ],
    )
    def test_values_that_do_not_fit_are_rejected(self, overrides, field, tmp_path):
        atom = make_atom(**{"serial": 1, **overrides})
        with pytest.raises(ValueError, match=field):
            format_pdb([atom])

        path = tmp_path / "dump.pdb"
        with pytest.raises(ValueError):
            write_pdb([make_atom(2), atom], path)
        assert not path.exists()


class TestAggregateCsv:
    def test_chain_metrics(self, result, tmp_path):
        write_chain_metrics_csv(result, tmp_path / "chains.csv")
        rows = read_rows(tmp_path / "chains.csv")
        assert rows[0][:2] == ["Structure", "Chain"]
        assert [r[1] for r in rows[1:]] == ["A", "B"]

    def test_chain_pairs(self, result, tmp_path):
        write_chain_pairs_csv(result, tmp_path / "pairs.csv")
        rows = read_rows(tmp_path / "pairs.csv")
        assert rows[1] == ["cplx:A", "cplx:B", "0", "2", "2"]
        assert rows[2] == ["cplx:A", "cplx:A", "1", "0", "1"]

    def test_density(self, result, tmp_path):
        write_density_csv(result, tmp_path / "density.csv")
        with open(tmp_path / "density.csv", newline="") as f:
            rows = list(csv.DictReader(f))
        chain_a = [r for r in rows if r["Chain"] == "cplx:A"]
        assert [r["Residue_Seq"] for r in chain_a] == ["10", "11"]
        assert chain_a[0]["Interaction_Types"] == "Hydrogen Bond;Van der Waals"


class TestJson:
    def test_json_holds_full_result(self, result, tmp_path):
        path = tmp_path / "result.json"
        write_result_json(result, path)
        data = json.loads(path.read_text())

        assert data == json.loads(result_to_json(result))
        assert data["summary"]["total_interactions"] == len(data["interactions"]) == 3

    def test_multi_structure_labels(self, tmp_path):
        result = analyze_structures({"a": [make_atom(1)], "b": [make_atom(1, 1, 0, 0)]})
        data = json.loads(result_to_json(result))
        assert data["interactions"][0]["id"] == "a:1-b:1"
