from __future__ import annotations
import math
from dataclasses import dataclass
from typing import Optional

@dataclass(frozen=True)
class Bond:
    face_value: float                    # Face value (par)
    coupon_rate: float                   # Annual coupon rate as decimal (e.g., 0.04)
    years_to_maturity: float             # Years to maturity
    yield_to_maturity: float             # Annual yield as decimal, compounded periods_per_year times
    periods_per_year: int = 2            # Coupon payments per year (2=semiannual, 1=annual, 4=quarterly)
    current_price: Optional[float] = None  # Quoted price if known; not used by the analytics

    def coupon_payment(self) -> float:
        return self.face_value * self.coupon_rate / self.periods_per_year

    def total_periods(self) -> int:
        # Truncated: a fractional final period is dropped, not pro-rated
        return math.floor(self.years_to_maturity * self.periods_per_year)


def validate_bond(bond: Bond) -> Bond:
    """Reject bond definitions the analytics would turn into nonsense or faults."""
    if bond.periods_per_year <= 0:
        raise ValueError("periods_per_year must be positive")
    if not bond.face_value > 0:
        raise ValueError("face_value must be positive")
    if not bond.years_to_maturity > 0:
        raise ValueError("years_to_maturity must be positive")
    if not bond.coupon_rate >= 0:
        raise ValueError("coupon_rate must be non-negative")
    if not bond.yield_to_maturity / bond.periods_per_year > -1.0:
        raise ValueError("1 + yield_to_maturity/periods_per_year must be positive")
    return bond
