"""
Graphics module for ppi_contacts.

This module provides static summary charts:

- plots: interaction category distribution and per-residue density

matplotlib is optional; plotting functions raise ImportError when it is
missing. All components work with AnalysisResult from core.analysis.
"""

from .plots import (
    HAS_MATPLOTLIB,
    CATEGORY_COLORS,
    plot_category_distribution,
    plot_residue_density,
    save_summary_figure,
)

__all__ = [
    'HAS_MATPLOTLIB',
    'CATEGORY_COLORS',
    'plot_category_distribution',
    'plot_residue_density',
    'save_summary_figure',
]
