"""
JSON output for complete analysis results.

The JSON document is the structured record handed to session storage; it
always holds the untruncated interaction list.
"""

import json
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..core.analysis import AnalysisResult


def result_to_json(result: 'AnalysisResult', indent: int = 2) -> str:
    """Serialize an AnalysisResult to a JSON string."""
    return json.dumps(result.to_dict(), indent=indent)


def write_result_json(result: 'AnalysisResult', output_file: str, indent: int = 2) -> None:
    """
    Write an AnalysisResult to a JSON file.

    Args:
        result: AnalysisResult from analyze_structures()
        output_file: Path to output JSON file
        indent: Indentation passed to json.dump
    """
    with open(output_file, 'w') as f:
        json.dump(result.to_dict(), f, indent=indent)
