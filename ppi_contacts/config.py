"""
Analysis configuration module.

Provides configurable settings for contact detection, interaction
classification, remote download and report output. Settings can be
loaded from CSV or set programmatically.
"""

from dataclasses import dataclass, field
from typing import FrozenSet
import csv


@dataclass
class AnalysisConfig:
    """Main analysis configuration."""
    # Contact detection
    # Maximum atom-atom distance (Angstroms); also the spatial grid cell edge
    cutoff: float = 5.0

    # Classification
    # Pairs closer than this are hydrogen bonds / salt bridges / close contacts
    close_contact_cutoff: float = 3.5
    hbond_elements: FrozenSet[str] = field(default_factory=lambda: frozenset({"N", "O"}))
    charged_residues: FrozenSet[str] = field(default_factory=lambda: frozenset({
        "ARG", "LYS", "ASP", "GLU", "HIS",
    }))
    hydrophobic_residues: FrozenSet[str] = field(default_factory=lambda: frozenset({
        "ALA", "VAL", "LEU", "ILE", "MET", "PHE", "TRP", "PRO",
    }))

    # Presentation: number of interactions shown in previews (exports are never truncated)
    display_limit: int = 1000

    # Remote download
    rcsb_url: str = "https://files.rcsb.org/download/{pdb_id}.pdb"
    fetch_timeout: float = 30.0

    # Output settings
    dpi: int = 150
    density_top_n: int = 15

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        """Check that numeric settings are usable."""
        if self.cutoff <= 0:
            raise ValueError(f"Invalid cutoff: {self.cutoff}. Must be > 0.")
        if self.close_contact_cutoff < 0 or self.close_contact_cutoff > self.cutoff:
            raise ValueError(
                f"Invalid close_contact_cutoff: {self.close_contact_cutoff}. "
                f"Must be between 0 and cutoff ({self.cutoff})."
            )
        if self.display_limit < 0:
            raise ValueError(f"Invalid display_limit: {self.display_limit}")
        if self.fetch_timeout <= 0:
            raise ValueError(f"Invalid fetch_timeout: {self.fetch_timeout}")


# Global default configuration
_default_config = AnalysisConfig()


def get_config() -> AnalysisConfig:
    """Get the current analysis configuration."""
    return _default_config


def set_config(config: AnalysisConfig) -> None:
    """Set the global analysis configuration."""
    global _default_config
    _default_config = config


def _parse_residue_set(value: str) -> FrozenSet[str]:
    return frozenset(v.strip().upper() for v in value.split(',') if v.strip())


def load_config_from_csv(csv_path: str) -> AnalysisConfig:
    """
    Load analysis configuration from a CSV file.

    CSV format:
        setting,value
        cutoff,5.0
        close_contact_cutoff,3.5
        hydrophobic_residues,"ALA,VAL,LEU,ILE,MET,PHE,TRP,PRO"
        ...

    Rows whose setting starts with '#' are comments.

    Args:
        csv_path: Path to configuration CSV file

    Returns:
        AnalysisConfig instance

    Raises:
        ValueError: If a setting is unknown or has an invalid value
    """
    config = AnalysisConfig()

    with open(csv_path, 'r', newline='') as f:
        reader = csv.DictReader(f)
        for row in reader:
            setting = (row.get('setting') or '').strip()
            value = (row.get('value') or '').strip()

            if not setting or setting.startswith('#') or not value:
                continue

            # Contact detection
            if setting == 'cutoff':
                config.cutoff = float(value)

            # Classification
            elif setting == 'close_contact_cutoff':
                config.close_contact_cutoff = float(value)
            elif setting == 'hbond_elements':
                config.hbond_elements = _parse_residue_set(value)
            elif setting == 'charged_residues':
                config.charged_residues = _parse_residue_set(value)
            elif setting == 'hydrophobic_residues':
                config.hydrophobic_residues = _parse_residue_set(value)

            # Presentation
            elif setting == 'display_limit':
                config.display_limit = int(value)

            # Remote download
            elif setting == 'rcsb_url':
                config.rcsb_url = value
            elif setting == 'fetch_timeout':
                config.fetch_timeout = float(value)

            # Output settings
            elif setting == 'dpi':
                config.dpi = int(value)
            elif setting == 'density_top_n':
                config.density_top_n = int(value)

            else:
                raise ValueError(f"Unknown setting '{setting}' in {csv_path}")

    config.validate()
    return config


def save_config_to_csv(config: AnalysisConfig, csv_path: str) -> None:
    """
    Save analysis configuration to a CSV file.

    Args:
        config: AnalysisConfig instance
        csv_path: Path to save configuration CSV
    """
    settings = [
        ('# Contact Detection', ''),
        ('# Maximum atom-atom distance in Angstroms (also the grid cell size)', ''),
        ('cutoff', str(config.cutoff)),

        ('# Interaction Classification', ''),
        ('# Below this distance: Hydrogen Bond (N/O pairs), Salt Bridge (charged pairs) or Van der Waals', ''),
        ('close_contact_cutoff', str(config.close_contact_cutoff)),
        ('hbond_elements', ','.join(sorted(config.hbond_elements))),
        ('charged_residues', ','.join(sorted(config.charged_residues))),
        ('hydrophobic_residues', ','.join(sorted(config.hydrophobic_residues))),

        ('# Presentation (exports are never truncated)', ''),
        ('display_limit', str(config.display_limit)),

        ('# Remote Download', ''),
        ('rcsb_url', config.rcsb_url),
        ('fetch_timeout', str(config.fetch_timeout)),

        ('# Output Settings', ''),
        ('dpi', str(config.dpi)),
        ('density_top_n', str(config.density_top_n)),
    ]

    with open(csv_path, 'w', newline='') as f:
        writer = csv.writer(f)
        writer.writerow(['setting', 'value'])
        for setting, value in settings:
            writer.writerow([setting, value])


def create_default_config_csv(csv_path: str) -> None:
    """Create a default configuration CSV file."""
    save_config_to_csv(AnalysisConfig(), csv_path)
