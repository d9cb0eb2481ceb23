#!/usr/bin/env python3
"""
ppi_contacts CLI - Atom-level interaction analysis of protein structures

This script reads PDB-format structures (local files or RCSB entries by
PDB ID), detects all atom pairs within the contact cutoff, classifies them
(hydrogen bond, salt bridge, hydrophobic, van der Waals) and writes
per-interaction, per-chain, per-chain-pair and per-residue CSV reports.

Usage:
    python -m ppi_contacts <structure.pdb> [...] [options]
    ppi-contacts <structure.pdb> [...] [options]  # If installed via pip

Example:
    ppi-contacts complex.pdb --output_dir ./results
    ppi-contacts --pdb-id 1brs --pdb-id 1ay7 --cores 2
    ppi-contacts receptor.pdb ligand.pdb --combine --json --png
"""

import sys
import os
import time
import argparse
from pathlib import Path
from typing import Dict, List, Optional

from .config import AnalysisConfig, get_config, set_config, load_config_from_csv
from .data_readers import ReaderError, normalize_accession
from .core import (
    analyze_structures,
    validate_structure_labels,
    parse_residue_selection,
    calculate_selection_metrics,
    display_selection_summary,
)
from .core.parallel_processing import load_input, process_inputs_parallel, write_reports


# =============================================================================
# Input discovery
# =============================================================================

def build_inputs(paths: List[str], pdb_ids: List[str]) -> List[Dict[str, str]]:
    """
    Turn command line inputs into input specs.

    Args:
        paths: Local structure files (label = file stem)
        pdb_ids: PDB accession codes (label = upper-case code)

    Returns:
        List of {'label', 'path'} / {'label', 'pdb_id'} dicts

    Raises:
        ReaderError: If a file is missing, a code is invalid, or labels collide
    """
    inputs = []
    for path in paths:
        if not os.path.isfile(path):
            raise ReaderError(f"{path} is not a file")
        inputs.append({'label': Path(path).stem, 'path': path})

    for code in pdb_ids:
        pdb_id = normalize_accession(code)
        inputs.append({'label': pdb_id, 'pdb_id': pdb_id})

    validate_structure_labels(spec['label'] for spec in inputs)
    return inputs


# =============================================================================
# Processing
# =============================================================================

def print_preview(result, limit: int) -> None:
    """Print the first `limit` interactions (display only)."""
    preview = result.preview(limit)
    shown = preview['interactions']
    if not shown:
        return
    print(f"\nFirst {len(shown)} of {result.summary.total_interactions} interactions:")
    for row in shown:
        print(f"  {row['chain_a']} {row['residue_a']} {row['atom_a']}  <->  "
              f"{row['chain_b']} {row['residue_b']} {row['atom_b']}  "
              f"{row['type']}  {row['distance']:.3f}")


def process_combined(
    inputs: List[Dict[str, str]],
    output_dir: str,
    write_json: bool = False,
    png: bool = False,
    residue_selection: Optional[Dict] = None,
    limit: int = 0,
    label: str = "combined",
) -> bool:
    """
    Analyze all inputs together as one multi-structure run.

    Returns:
        True on success, False if an input was rejected
    """
    structures = {}
    for spec in inputs:
        try:
            atoms, n_malformed, n_models_skipped = load_input(spec)
        except ReaderError as e:
            print(f"Error: {e}")
            return False
        if not atoms:
            print(f"Error: {spec['label']}: Invalid PDB content: No atoms found")
            return False
        if n_malformed:
            print(f"  {spec['label']}: skipped {n_malformed} malformed atom record(s)")
        if n_models_skipped:
            print(f"  {spec['label']}: read first model only, skipped {n_models_skipped} model(s)")
        structures[spec['label']] = atoms

    result = analyze_structures(structures)

    all_atoms = [atom for name in sorted(structures) for atom in structures[name]]
    files = write_reports(result, all_atoms, label, output_dir, write_json=write_json, png=png)

    summary = result.summary
    print(f"\nStructures: {', '.join(summary.structures)}")
    print(f"Chains: {', '.join(summary.chains)}")
    print(f"Atoms: {summary.total_atoms}")
    print(f"Interactions: {summary.total_interactions} "
          f"({summary.inter_interactions} inter, {summary.intra_interactions} intra)")
    for pair in result.chain_pairs[:10]:
        print(f"  {pair.chain_a.label} - {pair.chain_b.label}: {pair.total}")

    if residue_selection:
        metrics = calculate_selection_metrics(result.interactions, residue_selection)
        print(f"Selected interactions: {metrics['n_interactions_selection']}")

    print_preview(result, limit)
    print(f"\nWrote {len(files)} files to {output_dir}")
    return True


def process_batch(
    inputs: List[Dict[str, str]],
    output_dir: str,
    cores: Optional[int] = None,
    write_json: bool = False,
    png: bool = False,
    residue_selection: Optional[Dict] = None,
) -> bool:
    """
    Analyze each input independently, in parallel.

    Returns:
        True if every input succeeded
    """
    config_dict = {
        'analysis_config': get_config(),
        'output_dir': output_dir,
        'json': write_json,
        'png': png,
        'residue_selection': residue_selection,
    }

    results = process_inputs_parallel(inputs, config_dict, cores=cores)

    n_failed = 0
    for res in results:
        if res['error']:
            n_failed += 1
            continue
        if res['n_malformed']:
            print(f"  {res['label']}: skipped {res['n_malformed']} malformed atom record(s)")
        if res['n_models_skipped']:
            print(f"  {res['label']}: read first model only, "
                  f"skipped {res['n_models_skipped']} model(s)")
        if res['selection_metrics']:
            print(f"  {res['label']}: {res['selection_metrics']['n_interactions_selection']} "
                  f"selected interactions")

    print(f"\nTotal inputs processed: {len(results) - n_failed}/{len(results)}")
    print(f"Total interactions: {sum(r['n_interactions'] for r in results)}")
    return n_failed == 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point"""
    parser = argparse.ArgumentParser(
        description='Atom-level interaction analysis of protein structures',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  ppi-contacts complex.pdb
  ppi-contacts complex.pdb --output_dir ./results --json
  ppi-contacts --pdb-id 1brs --pdb-id 1ay7 --cores 2
  ppi-contacts receptor.pdb ligand.pdb --combine --png
  ppi-contacts complex.pdb --select-residues "A:30-45,B:102"
        """
    )

    parser.add_argument('inputs', nargs='*',
                        help='PDB-format structure files')
    parser.add_argument('--pdb-id', action='append', default=[], dest='pdb_ids',
                        help='Fetch a structure from RCSB by 4-character PDB ID (repeatable)')
    parser.add_argument('--combine', action='store_true',
                        help='Analyze all inputs together as one multi-structure run')
    parser.add_argument('--output_dir', type=str, default='.',
                        help='Output directory for reports (default: current directory)')
    parser.add_argument('--cutoff', type=float, default=None,
                        help='Contact distance cutoff in Angstroms (default: 5.0)')
    parser.add_argument('--config', type=str, default=None,
                        help='Path to analysis configuration CSV file')
    parser.add_argument('--cores', type=int, default=None,
                        help='Number of CPU cores for input-level parallelization (default: all - 1)')
    parser.add_argument('--json', action='store_true',
                        help='Also write the complete result as JSON')
    parser.add_argument('--png', action='store_true',
                        help='Also write a summary figure (requires matplotlib)')
    parser.add_argument('--select-residues', type=str, default=None,
                        dest='select_residues',
                        help='Report interactions of specific residues (e.g., "A:100-105,B:203")')
    parser.add_argument('--limit', type=int, default=0,
                        help='With --combine, print the first N interactions '
                             '(display only, exports are complete)')

    args = parser.parse_args(argv)

    if not args.inputs and not args.pdb_ids:
        parser.print_usage()
        print("Error: No PDB content provided (give structure files or --pdb-id)")
        return 1

    try:
        config = load_config_from_csv(args.config) if args.config else AnalysisConfig()
        if args.cutoff is not None:
            config.cutoff = args.cutoff
            config.validate()
        set_config(config)

        residue_selection = None
        if args.select_residues:
            residue_selection = parse_residue_selection(args.select_residues)

        inputs = build_inputs(args.inputs, args.pdb_ids)
    except (ValueError, OSError, ReaderError) as e:
        print(f"Error: {e}")
        return 1

    print("PPI Contact Analyzer")
    print("====================")
    print(f"Inputs: {', '.join(spec['label'] for spec in inputs)}")
    print(f"Contact cutoff: {config.cutoff}")
    print(f"Output directory: {args.output_dir}")
    print(f"Mode: {'combined' if args.combine else 'per input'}")
    if args.config:
        print(f"Config file: {args.config}")
    if residue_selection:
        display_selection_summary(residue_selection)
    if args.limit and not args.combine:
        print("Note: --limit only applies with --combine; ignoring it")

    start_time = time.time()
    if args.combine:
        ok = process_combined(
            inputs, args.output_dir,
            write_json=args.json, png=args.png,
            residue_selection=residue_selection, limit=args.limit,
        )
    else:
        ok = process_batch(
            inputs, args.output_dir, cores=args.cores,
            write_json=args.json, png=args.png,
            residue_selection=residue_selection,
        )
    print(f"Time elapsed: {time.time() - start_time:.2f} seconds")

    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
