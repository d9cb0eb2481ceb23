"""
Remote download of PDB entries by accession code.

Entries are fetched as flat PDB files from the RCSB download service:
    https://files.rcsb.org/download/{CODE}.pdb

A failed download (network error or non-success HTTP status) raises
SourceUnavailableError, which callers must keep distinct from an entry that
downloads fine but contains no atoms.
"""

from typing import List, Optional

import requests

from .base import Atom, ReaderError, SourceUnavailableError
from .pdb import parse_pdb


def normalize_accession(code: str) -> str:
    """
    Validate and normalize a 4-character PDB accession code.

    Args:
        code: Accession code in any case, e.g. '1abc'

    Returns:
        Upper-case code, e.g. '1ABC'

    Raises:
        ReaderError: If the code is not 4 alphanumeric characters
    """
    normalized = (code or '').strip().upper()
    if len(normalized) != 4 or not normalized.isalnum():
        raise ReaderError(f"Invalid PDB ID '{code}': expected 4 alphanumeric characters")
    return normalized


def fetch_structure_text(
    code: str,
    base_url: Optional[str] = None,
    timeout: Optional[float] = None,
) -> str:
    """
    Download the PDB-format text of an entry.

    Args:
        code: 4-character accession code (case-insensitive)
        base_url: URL template with a {pdb_id} placeholder (config default if None)
        timeout: Request timeout in seconds (config default if None)

    Returns:
        Raw PDB text

    Raises:
        ReaderError: If the code is invalid
        SourceUnavailableError: If the download fails
    """
    from ..config import get_config

    config = get_config()
    if base_url is None:
        base_url = config.rcsb_url
    if timeout is None:
        timeout = config.fetch_timeout

    pdb_id = normalize_accession(code)
    url = base_url.format(pdb_id=pdb_id)

    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as e:
        raise SourceUnavailableError(f"Could not fetch PDB ID {pdb_id} from RCSB: {e}") from e

    return response.text


def fetch_structure(
    code: str,
    base_url: Optional[str] = None,
    timeout: Optional[float] = None,
) -> List[Atom]:
    """
    Download and parse an entry; atoms are labelled with the upper-case code.

    The returned list may be empty; rejecting empty structures is the
    caller's decision.
    """
    pdb_id = normalize_accession(code)
    text = fetch_structure_text(pdb_id, base_url=base_url, timeout=timeout)
    return parse_pdb(text, pdb_id)
