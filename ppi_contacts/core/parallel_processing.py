"""
Input-level parallel processing for ppi_contacts.

Each input (a local structure file or a remote PDB ID) is parsed, analyzed
and written out by one worker; workers share nothing and report errors in
their result dict instead of raising.
"""

import os
from typing import Any, Dict, List, Optional, Sequence, Tuple
from multiprocessing import Pool, cpu_count

from ..data_readers import ReaderError


def write_reports(
    result,
    atoms,
    label: str,
    output_dir: str,
    write_json: bool = False,
    png: bool = False,
) -> List[str]:
    """
    Write the standard report set for one analysis.

    Files written (prefix = label):
        _interactions.csv, _inter.csv, _intra.csv, _atoms.csv,
        _chains.csv, _chain_pairs.csv, _density.csv
        and optionally .json and _summary.png

    Args:
        result: AnalysisResult
        atoms: Atoms the result was computed from (for the coordinate dump)
        label: File name prefix
        output_dir: Output directory (created if missing)
        write_json: Also write the complete result as JSON
        png: Also write the summary figure (requires matplotlib)

    Returns:
        List of written file paths
    """
    from ..output_writers import (
        write_interactions_csv, write_inter_molecular_csv, write_intra_molecular_csv,
        write_atoms_csv, write_chain_metrics_csv, write_chain_pairs_csv,
        write_density_csv, write_result_json,
    )

    os.makedirs(output_dir, exist_ok=True)

    def path(suffix: str) -> str:
        return os.path.join(output_dir, f"{label}{suffix}")

    written = [
        path("_interactions.csv"), path("_inter.csv"), path("_intra.csv"),
        path("_atoms.csv"), path("_chains.csv"), path("_chain_pairs.csv"),
        path("_density.csv"),
    ]
    write_interactions_csv(result.interactions, written[0])
    write_inter_molecular_csv(result, written[1])
    write_intra_molecular_csv(result, written[2])
    write_atoms_csv(atoms, written[3])
    write_chain_metrics_csv(result, written[4])
    write_chain_pairs_csv(result, written[5])
    write_density_csv(result, written[6])

    if write_json:
        write_result_json(result, path(".json"))
        written.append(path(".json"))

    if png:
        from ..graphics import save_summary_figure
        save_summary_figure(result, path("_summary.png"))
        written.append(path("_summary.png"))

    return written


def load_input(input_spec: Dict[str, Any]):
    """
    Load the atoms of one input.

    Args:
        input_spec: Dict with 'label' and either 'path' (local file) or 'pdb_id'

    Returns:
        Tuple of (atoms, n_malformed, n_models_skipped)
    """
    from ..data_readers import parse_pdb_with_stats, fetch_structure_text

    label = input_spec['label']
    if input_spec.get('pdb_id'):
        text = fetch_structure_text(input_spec['pdb_id'])
    else:
        try:
            with open(input_spec['path'], 'r', errors='replace') as f:
                text = f.read()
        except OSError as e:
            raise ReaderError(f"Cannot read {input_spec['path']}: {e}") from e

    return parse_pdb_with_stats(text, label)


def process_single_input(args: Tuple) -> Dict[str, Any]:
    """
    Process a single input - module-level function for multiprocessing.

    MUST be module-level (not a method) for pickle serialization.

    Args:
        args: Tuple of (input_spec, config_dict)
              input_spec: {'label', 'path'} or {'label', 'pdb_id'}
              config_dict: {'analysis_config', 'output_dir', 'json', 'png', 'residue_selection'}

    Returns:
        Dict with 'label', 'n_atoms', 'n_malformed', 'n_models_skipped', 'n_interactions',
        'n_inter', 'n_intra', 'files', 'selection_metrics', 'error'
    """
    input_spec, config_dict = args
    label = input_spec['label']

    result = {
        'label': label,
        'n_atoms': 0,
        'n_malformed': 0,
        'n_models_skipped': 0,
        'n_interactions': 0,
        'n_inter': 0,
        'n_intra': 0,
        'files': [],
        'selection_metrics': None,
        'error': None,
    }

    try:
        # Import modules inside function for multiprocessing safety
        from ..config import set_config
        from .analysis import analyze_structures
        from .residue_selection import calculate_selection_metrics

        analysis_config = config_dict.get('analysis_config')
        if analysis_config is not None:
            set_config(analysis_config)

        atoms, n_malformed, n_models_skipped = load_input(input_spec)
        result['n_atoms'] = len(atoms)
        result['n_malformed'] = n_malformed
        result['n_models_skipped'] = n_models_skipped

        analysis = analyze_structures(
            {label: atoms},
            config=analysis_config,
            pdb_id=input_spec.get('pdb_id'),
            filename=os.path.basename(input_spec['path']) if input_spec.get('path') else None,
        )

        result['n_interactions'] = analysis.summary.total_interactions
        result['n_inter'] = analysis.summary.inter_interactions
        result['n_intra'] = analysis.summary.intra_interactions

        residue_selection = config_dict.get('residue_selection')
        if residue_selection:
            result['selection_metrics'] = calculate_selection_metrics(
                analysis.interactions, residue_selection
            )

        result['files'] = write_reports(
            analysis, atoms, label, config_dict['output_dir'],
            write_json=config_dict.get('json', False),
            png=config_dict.get('png', False),
        )

    except ReaderError as e:
        result['error'] = str(e)
    except Exception as e:
        import traceback
        result['error'] = f"{e}\n{traceback.format_exc()}"

    return result


def process_inputs_parallel(
    inputs: Sequence[Dict[str, Any]],
    config_dict: Dict[str, Any],
    cores: Optional[int] = None,
) -> List[Dict[str, Any]]:
    """
    Process multiple inputs in parallel.

    Args:
        inputs: List of input specs (see process_single_input)
        config_dict: Dict with all processing parameters
        cores: Number of CPU cores to use (default: cpu_count - 1)

    Returns:
        One result dict per input, in input order
    """
    if not inputs:
        return []

    if cores is None:
        cores = max(1, cpu_count() - 1)
    cores = max(1, min(cores, len(inputs)))

    job_args = [(input_spec, config_dict) for input_spec in inputs]

    if cores > 1:
        print(f"\nProcessing {len(inputs)} inputs in parallel ({cores} cores)...")

        # Use imap for progress tracking
        from tqdm import tqdm
        with Pool(processes=cores) as pool:
            results = list(tqdm(
                pool.imap(process_single_input, job_args),
                total=len(job_args),
                desc="Structures"
            ))

        for res in results:
            if res['error']:
                print(f"  {res['label']}: Error - {res['error']}")
    else:
        # Sequential fallback
        results = []
        for args in job_args:
            print(f"\nProcessing: {args[0]['label']}")

            res = process_single_input(args)

            if res['error']:
                print(f"  Error: {res['error']}")
            else:
                print(f"  {res['n_atoms']} atoms, {res['n_interactions']} interactions")
            results.append(res)

    return results
