# src/bondcalc/main_cli.py
import argparse
import logging
import os
from typing import List, Optional

import numpy as np
import pandas as pd

# package-relative imports (works when installed as bondcalc)
from .analytics import BondAnalytics
from .bonds import Bond, validate_bond
from .config import DecimalSettings
from .price_yield import default_yields, plot_price_yield

logger = logging.getLogger(__name__)

# 5-year 4% semiannual treasury at a 4.5% yield
DEMO_BOND = Bond(
    face_value=1000.0,
    coupon_rate=0.04,
    years_to_maturity=5.0,
    yield_to_maturity=0.045,
    periods_per_year=2,
)


# ---------- helpers ----------
def _require_file(path: str) -> None:
    if not os.path.isfile(path):
        raise SystemExit(f"Error: file not found: {path}")


def _print_kv(title: str, mapping: dict) -> None:
    print(f"\n{title}:")
    for k, v in mapping.items():
        if isinstance(v, (float, np.floating)):
            print(f"{k} {float(v):.6f}")
        else:
            print(f"{k} {v}")


def _optional(r: pd.Series, col: str) -> Optional[float]:
    return None if col not in r or pd.isna(r[col]) else float(r[col])


# ---------- commands ----------
def cmd_bond(fi: BondAnalytics, file: str, out: str) -> None:
    _require_file(file)
    df = pd.read_csv(file)

    required_cols = {"face_value", "coupon_rate", "years_to_maturity", "yield_to_maturity"}
    if not required_cols.issubset(df.columns):
        missing = required_cols - set(df.columns)
        raise SystemExit(f"Error: missing required columns: {sorted(missing)}")

    print("Loaded bonds:")
    print(df)

    rows = []
    for idx, r in df.iterrows():
        name = r["name"] if "name" in r and not pd.isna(r["name"]) else f"bond_{idx}"
        freq = _optional(r, "periods_per_year")

        try:
            b = validate_bond(Bond(
                face_value=float(r["face_value"]),
                coupon_rate=float(r["coupon_rate"]),
                years_to_maturity=float(r["years_to_maturity"]),
                yield_to_maturity=float(r["yield_to_maturity"]),
                periods_per_year=2 if freq is None else int(freq),
                current_price=_optional(r, "current_price"),
            ))
        except ValueError as e:
            raise SystemExit(f"Row {idx} ({name}): {e}")

        if b.total_periods() == 0:
            logger.warning("%s: matures within one coupon period; priced at face value", name)

        try:
            report = fi.analyze(b)
        except ArithmeticError as e:
            raise SystemExit(f"Row {idx} ({name}): arithmetic error: {e!r}")

        rows.append({"name": name, "ytm": b.yield_to_maturity, **report.to_dict()})

    out_df = pd.DataFrame(rows)
    print("\nBond analytics:")
    print(out_df.round(6))

    # write results
    out_path = out or "bond_analytics_output.csv"
    out_df.to_csv(out_path, index=False)
    print(f"\nSaved: {out_path}")


def cmd_demo(fi: BondAnalytics) -> None:
    _print_kv("Treasury bond (1000 face, 4% semiannual, 5y, 4.5% YTM)", fi.analyze(DEMO_BOND).to_dict())


def cmd_profile(
    fi: BondAnalytics,
    face_value: float,
    coupon_rate: float,
    years: float,
    ytm: float,
    freq: int,
    width_bp: float,
    points: int,
    out: str,
) -> None:
    try:
        b = validate_bond(Bond(
            face_value=face_value,
            coupon_rate=coupon_rate,
            years_to_maturity=years,
            yield_to_maturity=ytm,
            periods_per_year=freq,
        ))
    except ValueError as e:
        raise SystemExit(f"Error: {e}")
    if points < 2:
        raise SystemExit("Error: --points must be at least 2")

    yields = default_yields(b, width_bp=width_bp, n_points=points)
    if (yields / freq <= -1.0).any():
        raise SystemExit("Error: --width-bp pushes the yield range to or below -100% per period")

    out_df = plot_price_yield(b, yields, analytics=fi, out_path=out or "price_yield.png")
    print(out_df.head())

    print(f"\nSaved plot: {out or 'price_yield.png'}")


# ---------- cli ----------
def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Bond price, duration & convexity calculator")
    p.add_argument("--precision", type=int, default=32, help="Significant digits for decimal arithmetic (default: 32)")
    p.add_argument("--rounding", default="ROUND_HALF_UP", help="Decimal rounding mode (default: ROUND_HALF_UP)")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = p.add_subparsers(dest="cmd", required=True)

    # bond
    b = sub.add_parser("bond", help="Analyze bonds from CSV")
    b.add_argument("--file", required=True, help="CSV with columns: name,face_value,coupon_rate,years_to_maturity,yield_to_maturity,periods_per_year,current_price")
    b.add_argument("--out", default="bond_analytics_output.csv", help="Output CSV filename (default: bond_analytics_output.csv)")

    # demo
    sub.add_parser("demo", help="Analytics for a 5y 4%% semiannual bond at a 4.5%% yield")

    # profile
    pr = sub.add_parser("profile", help="Plot price against yield for one bond")
    pr.add_argument("--face-value", type=float, default=1000.0, help="Face value (default: 1000)")
    pr.add_argument("--coupon-rate", type=float, required=True, help="Annual coupon rate as decimal, e.g. 0.04")
    pr.add_argument("--years", type=float, required=True, help="Years to maturity")
    pr.add_argument("--ytm", type=float, required=True, help="Yield to maturity as decimal, e.g. 0.045")
    pr.add_argument("--freq", type=int, default=2, help="Coupon payments per year (default: 2)")
    pr.add_argument("--width-bp", type=float, default=300.0, help="Yield range either side of --ytm in bp (default: 300)")
    pr.add_argument("--points", type=int, default=41, help="Number of yields to reprice at (default: 41)")
    pr.add_argument("--out", default="price_yield.png", help="Output PNG filename (default: price_yield.png)")

    return p


def main(argv: Optional[List[str]] = None) -> None:
    p = build_parser()
    args = p.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        settings = DecimalSettings.from_name(args.precision, args.rounding)
    except ValueError as e:
        raise SystemExit(f"Error: {e}")
    fi = BondAnalytics(settings)

    if args.cmd == "bond":
        cmd_bond(fi, args.file, args.out)
    elif args.cmd == "demo":
        cmd_demo(fi)
    elif args.cmd == "profile":
        cmd_profile(fi, args.face_value, args.coupon_rate, args.years, args.ytm,
                    args.freq, args.width_bp, args.points, args.out)
    else:
        p.print_help()
        raise SystemExit(2)


if __name__ == "__main__":
    main()
