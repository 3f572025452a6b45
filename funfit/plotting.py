"""
Fit plots using Matplotlib.
"""

import numpy as np
from matplotlib.figure import Figure
from matplotlib.backends.backend_agg import FigureCanvasAgg as FigureCanvas


def create_fit_figure(x, y, sy, result, logy=None, title=None):
    """
    Create a figure with the data, the fitted model and the normalised residuals.

    Parameters
    ----------
    x, y, sy : array_like
        Domain, observed values and their uncertainties
    result : FitResult
        Fit result holding the fitted model
    logy : bool or None, optional
        Logarithmic intensity and q axes. Defaults to True for scattering
        models ('sas_*') with positive data.
    title : str, optional
        Figure title, defaults to the model name

    Returns
    -------
    matplotlib.figure.Figure
    """
    x = np.asarray(x)
    y = np.asarray(y)
    sy = np.asarray(sy)
    y_fit = result.fitted_model

    if logy is None:
        logy = bool(result.model_name and result.model_name.startswith('sas_')
                    and np.all(y > 0) and np.all(x > 0))

    fig = Figure(figsize=(8, 7), dpi=100)
    FigureCanvas(fig)
    ax1 = fig.add_subplot(2, 1, 1)
    ax2 = fig.add_subplot(2, 1, 2, sharex=ax1)

    ax1.errorbar(x, y, yerr=sy, fmt='o', markersize=4, label='Data', alpha=0.6, color='#34495e')
    ax1.plot(x, y_fit, '-', linewidth=2.5, label='Fit', color='#c0392b')
    if logy:
        ax1.set_xscale('log')
        ax1.set_yscale('log')
    ax1.set_ylabel('Intensity')
    ax1.set_title(title or result.model_name or 'Fit', fontweight='bold')
    ax1.legend(loc='best', fontsize=9)
    ax1.grid(True, alpha=0.3)

    residuals = (y - y_fit) / sy
    ax2.plot(x, residuals, 'o', markersize=3, color='#2c3e50')
    ax2.axhline(0, color='#7f8c8d', linewidth=1)
    ax2.set_xlabel('X')
    ax2.set_ylabel('(y - fit) / sy')
    ax2.grid(True, alpha=0.3)
    ax2.text(0.01, 0.95,
             f"χ²red = {result.redchi2:.3g}   R² = {result.r_squared:.4f}",
             transform=ax2.transAxes, va='top', fontsize=9)

    fig.tight_layout()
    return fig


def plot_fit(x, y, sy, result, filepath, logy=None, title=None):
    """
    Save the fit plot to ``filepath`` (format from the file extension).
    """
    fig = create_fit_figure(x, y, sy, result, logy=logy, title=title)
    fig.savefig(filepath)
    return filepath
