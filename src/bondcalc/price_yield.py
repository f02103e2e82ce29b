# src/bondcalc/price_yield.py
import logging
from dataclasses import replace
from typing import Optional, Sequence

import numpy as np
import pandas as pd
import matplotlib.pyplot as plt

from .analytics import BondAnalytics
from .bonds import Bond

logger = logging.getLogger(__name__)


def default_yields(bond: Bond, width_bp: float = 300.0, n_points: int = 41) -> np.ndarray:
    width = width_bp / 10_000.0
    return np.linspace(bond.yield_to_maturity - width, bond.yield_to_maturity + width, n_points)


def price_yield_profile(
    bond: Bond,
    yields: Sequence[float],
    analytics: Optional[BondAnalytics] = None,
) -> pd.DataFrame:
    """
    Reprice a bond across a range of yields.

    Parameters
    ----------
    bond : Bond
        Bond definition; its own yield is the expansion point of the approximation.
    yields : Sequence[float]
        Annual yields (decimals) to reprice at.
    analytics : BondAnalytics, optional
        Calculator to use. Default = 32 digits, ROUND_HALF_UP.

    Returns
    -------
    pd.DataFrame
        Columns ytm, price, duration, convexity and approx_price, the
        duration/convexity estimate P0 * (1 - D_mod * dy + 0.5 * C * dy^2).
    """
    fi = analytics or BondAnalytics()
    base = fi.analyze(bond)

    rows = []
    for y in yields:
        y = float(y)
        shifted = replace(bond, yield_to_maturity=y)
        dy = y - bond.yield_to_maturity
        approx = base.clean_price * (1 - base.modified_duration * dy + 0.5 * base.convexity * dy * dy)
        rows.append({
            "ytm": y,
            "price": fi.calculate_price(shifted),
            "duration": fi.calculate_duration(shifted),
            "convexity": fi.calculate_convexity(shifted),
            "approx_price": approx,
        })
    logger.debug("profile: %d yields around %.6f", len(rows), bond.yield_to_maturity)
    return pd.DataFrame(rows, columns=["ytm", "price", "duration", "convexity", "approx_price"])


def plot_price_yield(
    bond: Bond,
    yields: Optional[Sequence[float]] = None,
    analytics: Optional[BondAnalytics] = None,
    out_path: str = "price_yield.png",
    show: bool = False,
) -> pd.DataFrame:
    """
    Plot the exact price/yield curve against its duration-convexity approximation.

    Parameters
    ----------
    bond : Bond
        Bond definition.
    yields : Sequence[float], optional
        Yields to plot. Default = +/-300bp around the bond yield, 41 points.
    analytics : BondAnalytics, optional
        Calculator to use.
    out_path : str, optional
        Output path for saving the plot (default: 'price_yield.png').
    show : bool, optional
        If True, displays the plot interactively.

    Returns
    -------
    pd.DataFrame
        The profile from price_yield_profile.
    """
    if yields is None:
        yields = default_yields(bond)
    df = price_yield_profile(bond, yields, analytics=analytics)

    fig = plt.figure(figsize=(7, 5))
    plt.plot(df["ytm"] * 100, df["price"], color="blue", lw=2, label="Exact price")
    plt.plot(df["ytm"] * 100, df["approx_price"], color="orange", lw=1.5, ls="--", label="Duration + convexity")
    plt.axvline(bond.yield_to_maturity * 100, color="grey", lw=1, alpha=0.6)
    plt.xlabel("Yield to maturity (%)")
    plt.ylabel("Clean price")
    plt.title("Price / Yield")
    plt.legend()
    plt.grid(True, linestyle="--", alpha=0.6)

    if out_path:
        plt.savefig(out_path, bbox_inches="tight")
        logger.info("Saved plot: %s", out_path)

    if show:
        plt.show()
    plt.close(fig)

    return df
