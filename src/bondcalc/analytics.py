"""Price, duration and convexity of fixed-coupon bonds in fixed-precision decimal arithmetic."""

from __future__ import annotations
import logging
from dataclasses import asdict, dataclass
from decimal import Decimal, localcontext
from typing import List, Optional, Union

from .bonds import Bond
from .config import DEFAULT_SETTINGS, DecimalSettings

logger = logging.getLogger(__name__)

Number = Union[int, float, str, Decimal]


def _dec(value: Number) -> Decimal:
    # str() keeps floats at their shortest repr instead of the exact binary expansion
    return value if isinstance(value, Decimal) else Decimal(str(value))


@dataclass(frozen=True)
class BondReport:
    clean_price: float
    duration: float              # Macaulay, years
    modified_duration: float
    convexity: float

    def to_dict(self) -> dict:
        return asdict(self)


class BondAnalytics:
    """
    Closed-form analytics for a plain fixed-coupon bond.

    Every public calculation derives the coupon, yield and period count from the
    bond on its own and runs inside ``decimal.localcontext`` with the context
    bound at construction, so instances with different precision never share
    state. Arithmetic faults (zero discount base, zero price) propagate as the
    ``decimal`` module raises them.

    Parameters
    ----------
    settings : DecimalSettings, optional
        Precision and rounding. Default = 32 digits, ROUND_HALF_UP.
    """

    def __init__(self, settings: Optional[DecimalSettings] = None):
        self.settings = settings or DEFAULT_SETTINGS
        self._context = self.settings.to_context()

    def discount_factor(self, t: int, ytm: Number, periods_per_year: int) -> Decimal:
        """Discount factor for period t: 1 / (1 + ytm/periods_per_year)^t."""
        with localcontext(self._context):
            return Decimal(1) / (1 + _dec(ytm) / periods_per_year) ** t

    def _price(self, bond: Bond) -> Decimal:
        fv = _dec(bond.face_value)
        ytm = _dec(bond.yield_to_maturity)
        m = bond.periods_per_year
        n = bond.total_periods()
        with localcontext(self._context):
            c = fv * _dec(bond.coupon_rate) / m
            price = Decimal(0)
            for t in range(1, n + 1):
                price += c * self.discount_factor(t, ytm, m)
            # Face value is discounted once, from the last period
            price += fv * self.discount_factor(n, ytm, m)
        return price

    def _cash_flows(self, bond: Bond) -> List[Decimal]:
        # Final coupon and redemption are one flow here, unlike in _price
        fv = _dec(bond.face_value)
        n = bond.total_periods()
        with localcontext(self._context):
            c = fv * _dec(bond.coupon_rate) / bond.periods_per_year
            return [c + fv if t == n else c for t in range(1, n + 1)]

    def _weights(self, bond: Bond) -> List[Decimal]:
        price = self._price(bond)
        ytm = _dec(bond.yield_to_maturity)
        m = bond.periods_per_year
        with localcontext(self._context):
            return [
                cf * self.discount_factor(t, ytm, m) / price
                for t, cf in enumerate(self._cash_flows(bond), start=1)
            ]

    def calculate_price(self, bond: Bond) -> float:
        price = float(self._price(bond))
        logger.debug("price: %d periods -> %.6f", bond.total_periods(), price)
        return price

    def present_value_weights(self, bond: Bond) -> List[float]:
        """Present value of each period's cash flow as a share of the price."""
        return [float(w) for w in self._weights(bond)]

    def calculate_duration(self, bond: Bond) -> float:
        """Macaulay duration in years."""
        with localcontext(self._context):
            weighted = Decimal(0)
            for t, w in enumerate(self._weights(bond), start=1):
                weighted += t * w
            duration = float(weighted / bond.periods_per_year)
        logger.debug("duration: %d periods -> %.6f years", bond.total_periods(), duration)
        return duration

    def calculate_modified_duration(self, bond: Bond) -> float:
        mac_dur = _dec(self.calculate_duration(bond))
        with localcontext(self._context):
            return float(mac_dur / (1 + _dec(bond.yield_to_maturity) / bond.periods_per_year))

    def calculate_convexity(self, bond: Bond) -> float:
        """Convexity in years squared, comparable across coupon frequencies."""
        price = self._price(bond)
        ytm = _dec(bond.yield_to_maturity)
        m = bond.periods_per_year
        with localcontext(self._context):
            total = Decimal(0)
            for t, cf in enumerate(self._cash_flows(bond), start=1):
                total += t * (t + 1) * cf * self.discount_factor(t, ytm, m)
            convexity = float(total / (price * (1 + ytm / m) ** 2 * m ** 2))
        logger.debug("convexity: %d periods -> %.6f", bond.total_periods(), convexity)
        return convexity

    def analyze(self, bond: Bond) -> BondReport:
        return BondReport(
            clean_price=self.calculate_price(bond),
            duration=self.calculate_duration(bond),
            modified_duration=self.calculate_modified_duration(bond),
            convexity=self.calculate_convexity(bond),
        )
