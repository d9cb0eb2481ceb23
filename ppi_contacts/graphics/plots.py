"""
Summary plotting module.

Provides bar charts of the interaction category distribution and of the
per-residue interaction density (intra- vs inter-molecular, stacked).
Works with AnalysisResult from core.analysis.
"""

from typing import Optional, Tuple, TYPE_CHECKING

try:
    import matplotlib.pyplot as plt
    from matplotlib.figure import Figure
    HAS_MATPLOTLIB = True
except ImportError:
    HAS_MATPLOTLIB = False

from ..core.aggregation import ChainKey
from ..core.classification import InteractionType

if TYPE_CHECKING:
    from ..core.analysis import AnalysisResult


# Bar colors per interaction category
CATEGORY_COLORS = {
    InteractionType.HYDROGEN_BOND.value: '#3b82f6',
    InteractionType.SALT_BRIDGE.value: '#ef4444',
    InteractionType.HYDROPHOBIC.value: '#f59e0b',
    InteractionType.VAN_DER_WAALS.value: '#10b981',
    InteractionType.PI_STACKING.value: '#8b5cf6',
    InteractionType.OTHER.value: '#9ca3af',
}

INTRA_COLOR = '#f97316'
INTER_COLOR = '#3b82f6'


def _check_matplotlib():
    """Check if matplotlib is available."""
    if not HAS_MATPLOTLIB:
        raise ImportError(
            "matplotlib is required for plotting. "
            "Install it with: pip install matplotlib"
        )


def plot_category_distribution(
    result: 'AnalysisResult',
    ax: Optional["plt.Axes"] = None,
    title: str = "Interaction types",
) -> Tuple["Figure", "plt.Axes"]:
    """
    Plot the number of interactions per category.

    Args:
        result: AnalysisResult
        ax: Matplotlib axes to plot on (creates new if None)
        title: Plot title

    Returns:
        Tuple of (figure, axes)
    """
    _check_matplotlib()

    if ax is None:
        fig, ax = plt.subplots(figsize=(8, 5))
    else:
        fig = ax.figure

    counts = result.summary.category_counts
    labels = [c.value for c in InteractionType]
    values = [counts.get(label, 0) for label in labels]

    ax.bar(labels, values, color=[CATEGORY_COLORS[label] for label in labels])
    ax.set_title(title, fontsize=12)
    ax.set_ylabel("Interaction count")
    ax.tick_params(axis='x', labelrotation=30)

    return fig, ax


def plot_residue_density(
    result: 'AnalysisResult',
    chain: Optional[ChainKey] = None,
    top_n: Optional[int] = None,
    ax: Optional["plt.Axes"] = None,
) -> Tuple["Figure", "plt.Axes"]:
    """
    Plot the densest residues of one chain as stacked intra/inter bars.

    Args:
        result: AnalysisResult
        chain: Chain to plot (default: first chain with interactions)
        top_n: Number of residues to show (uses config default if None)
        ax: Matplotlib axes to plot on (creates new if None)

    Returns:
        Tuple of (figure, axes)
    """
    _check_matplotlib()
    from ..config import get_config

    if top_n is None:
        top_n = get_config().density_top_n

    if ax is None:
        fig, ax = plt.subplots(figsize=(10, 5))
    else:
        fig = ax.figure

    density = result.residue_density
    if chain is None and density:
        chain = sorted(density)[0]

    entries = density.get(chain, [])[:top_n] if chain is not None else []
    if not entries:
        ax.text(0.5, 0.5, "No interaction density data", ha='center', va='center',
                transform=ax.transAxes)
        ax.set_axis_off()
        return fig, ax

    labels = [str(e.res_seq) for e in entries]
    intra = [e.intra_count for e in entries]
    inter = [e.inter_count for e in entries]

    ax.bar(labels, intra, color=INTRA_COLOR, label="Intra-molecular")
    ax.bar(labels, inter, bottom=intra, color=INTER_COLOR, label="Inter-molecular")
    ax.set_title(f"Interaction density: {chain.label}", fontsize=12)
    ax.set_xlabel("Residue sequence")
    ax.set_ylabel("Interaction count")
    ax.legend()

    return fig, ax


def save_summary_figure(
    result: 'AnalysisResult',
    output_file: str,
    dpi: Optional[int] = None,
) -> None:
    """
    Save category distribution and residue density side by side.

    Args:
        result: AnalysisResult
        output_file: Path to output image
        dpi: Resolution (uses config default if None)
    """
    _check_matplotlib()
    from ..config import get_config

    if dpi is None:
        dpi = get_config().dpi

    fig, (ax_types, ax_density) = plt.subplots(1, 2, figsize=(16, 5))
    plot_category_distribution(result, ax=ax_types)
    plot_residue_density(result, ax=ax_density)
    fig.tight_layout()
    fig.savefig(output_file, dpi=dpi)
    plt.close(fig)
