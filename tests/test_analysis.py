"""End-to-end tests of analyze_structures() on small hand-built systems."""

from __future__ import annotations

import json

import numpy as np
import pytest

from conftest import make_atom, pdb_line, pdb_text
from ppi_contacts import (
    AnalysisCancelled,
    AnalysisConfig,
    EmptyStructureError,
    InteractionType,
    ReaderError,
    analyze_atoms,
    analyze_structures,
    parse_pdb,
)
from ppi_contacts.core import ChainKey, validate_structure_labels


class TestScenarios:
    def test_close_nitrogen_pair_across_chains(self):
        atoms = [
            make_atom(1, 0, 0, 0, name="OD1", element="N", res_name="ASP", chain_id="A"),
            make_atom(2, 3, 0, 0, name="NZ", element="N", res_name="LYS", chain_id="B"),
        ]
        result = analyze_atoms(atoms)

        assert len(result.interactions) == 1
        found = result.interactions[0]
        assert found.distance == pytest.approx(3.0)
        assert f"{found.distance:.3f}" == "3.000"
        assert found.category is InteractionType.HYDROGEN_BOND
        assert found.is_intramolecular is False

    def test_atoms_six_angstrom_apart(self):
        atoms = [make_atom(1, 0, 0, 0), make_atom(2, 6, 0, 0)]
        result = analyze_atoms(atoms)
        assert result.interactions == ()
        assert result.summary.total_interactions == 0
        assert result.summary.total_atoms == 2

    def test_text_without_atom_records_is_rejected(self):
        atoms = parse_pdb(pdb_text("HEADER    EMPTY", "REMARK   1 NOTHING"))
        assert atoms == []
        with pytest.raises(EmptyStructureError, match="No atoms found"):
            analyze_atoms(atoms)

    def test_alanine_ca_pair_on_one_chain(self):
        atoms = [
            make_atom(1, 0, 0, 0, res_seq=1),
            make_atom(2, 4, 0, 0, res_seq=2),
        ]
        result = analyze_atoms(atoms)

        assert len(result.interactions) == 1
        assert result.interactions[0].category is InteractionType.HYDROPHOBIC
        assert result.interactions[0].is_intramolecular is True


class TestMultiStructure:
    def test_structures_keep_independent_serials(self):
        s1 = parse_pdb(pdb_text(pdb_line(1, 0, 0, 0), pdb_line(2, 1.5, 0, 0, name="CB")))
        s2 = parse_pdb(pdb_text(pdb_line(1, 0, 0, 2.0)))

        result = analyze_structures({"rec": s1, "lig": s2})
        ids = [i.interaction_id for i in result.interactions]

        assert result.summary.structures == ("lig", "rec")
        assert len(ids) == len(set(ids)) == 3
        assert ids == ["lig:1-rec:1", "lig:1-rec:2", "rec:1-rec:2"]

    def test_same_chain_id_in_two_structures_is_inter_molecular(self):
        a = [make_atom(1, 0, 0, 0, structure="x")]
        b = [make_atom(1, 2, 0, 0, structure="y")]
        result = analyze_structures({"x": a, "y": b})

        assert result.interactions[0].is_intramolecular is False
        assert result.summary.chains == ("x:A", "y:A")
        assert [p.key for p in result.chain_pairs][0][0].label == "x:A"

    def test_atoms_are_relabelled_not_mutated(self):
        original = [make_atom(1, structure="old")]
        result = analyze_structures({"new": original, "other": [make_atom(1, 1, 0, 0)]})
        assert original[0].structure == "old"
        assert {i.atom_a.structure for i in result.interactions} | {
            i.atom_b.structure for i in result.interactions
        } == {"new", "other"}

    def test_duplicate_labels_are_rejected(self):
        with pytest.raises(ReaderError, match="Duplicate"):
            validate_structure_labels(["1ABC", "model", "1ABC"])
        validate_structure_labels(["a", "b"])


class TestDeterminism:
    @pytest.mark.parametrize("seed", [0, 1, 2])
    def test_result_does_not_depend_on_atom_order(self, seed):
        rng = np.random.default_rng(seed)
        coords = rng.uniform(0, 12, size=(120, 3))
        atoms = [
            make_atom(
                i + 1, *map(float, xyz),
                chain_id="AB"[i % 2],
                res_seq=i // 6,
                res_name=["ALA", "LYS", "ASP", "SER"][i % 4],
                element=["C", "N", "O"][i % 3],
            )
            for i, xyz in enumerate(coords)
        ]
        shuffled = [atoms[i] for i in rng.permutation(len(atoms))]

        expected = analyze_atoms(atoms, label="cloud")
        assert expected.summary.total_interactions > 0
        assert analyze_atoms(shuffled, label="cloud").to_dict() == expected.to_dict()

    def test_structure_mapping_order_does_not_matter(self):
        a = [make_atom(1, 0, 0, 0), make_atom(2, 1, 0, 0, chain_id="B")]
        b = [make_atom(1, 0, 2, 0), make_atom(2, 0, 3, 0, res_name="LEU")]
        forward = analyze_structures({"a": a, "b": b})
        backward = analyze_structures({"b": list(reversed(b)), "a": list(reversed(a))})
        assert forward.to_dict() == backward.to_dict()


class TestResult:
    @pytest.fixture
    def result(self):
        atoms = [
            make_atom(1, 0, 0, 0, chain_id="A"),
            make_atom(2, 1, 0, 0, chain_id="A", res_seq=2),
            make_atom(3, 2, 0, 0, chain_id="B", res_seq=5),
        ]
        return analyze_atoms(atoms, label="toy", pdb_id="TOY1")

    def test_summary(self, result):
        summary = result.summary
        assert summary.total_interactions == 3
        assert summary.intra_interactions == 1
        assert summary.inter_interactions == 2
        assert summary.pdb_id == "TOY1"
        assert sum(summary.category_counts.values()) == 3
        assert set(summary.category_counts) == {c.value for c in InteractionType}

    def test_inter_and_intra_split(self, result):
        assert len(result.inter_molecular()) == 2
        assert len(result.intra_molecular()) == 1
        assert all(not i.is_intramolecular for i in result.inter_molecular())

    def test_get_chain(self, result):
        assert result.get_chain("toy", "B").atom_count == 1
        assert result.get_chain("toy", "Q") is None

    def test_interactions_are_sorted_by_pair_key(self, result):
        keys = [i.pair_key for i in result.interactions]
        assert keys == sorted(keys)

    def test_to_dict_is_json_serializable(self, result):
        data = json.loads(json.dumps(result.to_dict()))
        assert set(data) == {
            "summary", "chains", "interactions", "interface_residues",
            "interaction_density", "chain_pairs",
        }
        assert len(data["interactions"]) == 3
        assert data["interactions"][0]["type"] in {c.value for c in InteractionType}
        assert "toy:A" in data["interface_residues"]

    def test_preview_truncates_display_only(self, result):
        preview = result.preview(limit=2)
        assert len(preview["interactions"]) == 2
        assert preview["interactions_truncated"] is True
        assert preview["summary"]["total_interactions"] == 3
        assert len(result.interactions) == 3

        assert result.preview(limit=10)["interactions_truncated"] is False

    def test_preview_uses_configured_limit(self, result):
        from ppi_contacts import set_config
        set_config(AnalysisConfig(display_limit=1))
        assert len(result.preview()["interactions"]) == 1

    def test_result_is_immutable(self, result):
        with pytest.raises(AttributeError):
            result.interactions = ()

        key = ChainKey("toy", "A")
        with pytest.raises(AttributeError):
            result.residue_density[key].clear()
        with pytest.raises(TypeError):
            result.residue_density[key] = ()
        with pytest.raises(TypeError):
            result.interface_residues[key][1] = None
        with pytest.raises(TypeError):
            result.interface_residues[ChainKey("toy", "Z")] = {}
        with pytest.raises(TypeError):
            result.summary.category_counts["Hydrogen Bond"] = -1
        with pytest.raises(TypeError):
            result.chain_pairs[0].category_counts["Van der Waals"] = 0

        assert result.summary.total_interactions == sum(result.summary.category_counts.values())
        assert sum(e.total for e in result.residue_density[key]) == 4


class TestOptions:
    def test_configured_cutoff(self):
        atoms = [make_atom(1, 0, 0, 0), make_atom(2, 6, 0, 0)]
        result = analyze_atoms(atoms, config=AnalysisConfig(cutoff=7.0))
        assert len(result.interactions) == 1

    def test_cancelled_run_returns_nothing(self):
        atoms = [make_atom(1, 0, 0, 0), make_atom(2, 1, 0, 0)]
        with pytest.raises(AnalysisCancelled):
            analyze_atoms(atoms, should_cancel=lambda: True)

    def test_biologically_odd_input_does_not_raise(self):
        atoms = [
            make_atom(1, 0, 0, 0, res_name="HOH", element="O"),
            make_atom(2, 0, 0, 0, res_name="XYZ", element=""),
            make_atom(3, 0.5, 0, 0, res_name="", element="Q", chain_id=""),
        ]
        result = analyze_atoms(atoms)
        assert result.summary.total_interactions == 3
        assert all(i.category is InteractionType.VAN_DER_WAALS for i in result.interactions)
