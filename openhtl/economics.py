"""
Techno-economic evaluation of an HTL plant.

Costs are adjusted for the severity of the operating window (high-pressure
vessels and high-temperature metallurgy raise CAPEX, heating and pumping
raise OPEX). Revenue comes from bio-oil sales plus a hydrochar credit. The
cash flow is a flat annuity: every operating year has the same cash flow, with
no ramp-up, escalation or terminal value.
"""
import logging
import operator
from dataclasses import dataclass, replace
from typing import List

import numpy as np
import numpy_financial as npf

from .exceptions import InvalidInput
from .reactor import ABSOLUTE_ZERO_C

logger = logging.getLogger(__name__)

NEVER_PAYS_BACK = 999.0

# Additive CAPEX surcharges; every crossed threshold adds its increment
CAPEX_PRESSURE_SURCHARGES = (
    (operator.gt, 20.0, 0.15),
    (operator.gt, 25.0, 0.25),
)
CAPEX_TEMPERATURE_SURCHARGES = (
    (operator.gt, 350.0, 0.10),
    (operator.gt, 400.0, 0.30),
    (operator.gt, 500.0, 0.80),
)

REFERENCE_TEMPERATURE_C = 300.0
REFERENCE_PRESSURE_MPA = 15.0

BIO_OIL_DENSITY = 0.95  # kg/L
CHAR_BASE_YIELD = 40.0  # %, hydrochar at zero bio-oil
CHAR_PER_OIL = 1.5
CHAR_PRICE_PER_KG = 2000.0

PRICE_VARIATIONS = (-0.2, -0.1, 0.0, 0.1, 0.2)

# Plant defaults for a 10 t/day unit (IDR)
DEFAULT_CAPEX = 45_000_000_000.0
DEFAULT_OPEX = 8_500_000_000.0
DEFAULT_BIO_OIL_PRICE = 12_000.0  # per litre
DEFAULT_YEARS = 10
DEFAULT_TAX_RATE = 0.22
DEFAULT_DISCOUNT_RATE = 0.10


@dataclass(frozen=True)
class EconomicInput:
    capex_base: float
    opex_base: float               # per year
    capacity_ton_per_year: float   # dry feed
    bio_oil_price: float           # per litre
    years: int
    tax_rate: float
    discount_rate: float
    bio_oil_yield: float           # % of feed
    temperature_c: float
    pressure_mpa: float

    def validate(self):
        for name in ("capex_base", "capacity_ton_per_year", "years"):
            value = getattr(self, name)
            if value <= 0:
                raise InvalidInput(name, f"must be > 0, got {value}")
        if self.temperature_c <= ABSOLUTE_ZERO_C:
            raise InvalidInput("temperature_c", f"must be above {ABSOLUTE_ZERO_C} °C, got {self.temperature_c}")
        return self


@dataclass(frozen=True)
class EconomicResult:
    npv: float
    roi: float                 # %
    payback_period: float      # years, NEVER_PAYS_BACK if the plant never recovers
    annual_revenue: float
    annual_profit: float       # net profit after tax
    cash_flows: List[float]
    cumulative_cash_flows: List[float]
    adjusted_capex: float = 0.0
    adjusted_opex: float = 0.0
    annual_cash_flow: float = 0.0
    irr: float = float("nan")

    @property
    def is_degenerate(self) -> bool:
        return self.annual_cash_flow <= 0


@dataclass(frozen=True)
class SensitivityPoint:
    parameter: str
    change_pct: float
    value: float
    npv: float


def capex_multiplier(T_c, P_mpa):
    multiplier = 1.0
    for ladder, x in ((CAPEX_PRESSURE_SURCHARGES, P_mpa), (CAPEX_TEMPERATURE_SURCHARGES, T_c)):
        for compare, threshold, increment in ladder:
            if compare(x, threshold):
                multiplier += increment
    return multiplier


def opex_energy_factor(T_c, P_mpa):
    return (1.0 + (T_c - REFERENCE_TEMPERATURE_C) / 1000.0
            + (P_mpa - REFERENCE_PRESSURE_MPA) / 200.0)


def annual_revenue(capacity_ton_per_year, bio_oil_yield, bio_oil_price):
    """Bio-oil sales plus hydrochar credit, per year."""
    oil_mass_ton = capacity_ton_per_year * (bio_oil_yield / 100.0)
    oil_volume_l = oil_mass_ton * 1000.0 / BIO_OIL_DENSITY
    oil_revenue = oil_volume_l * bio_oil_price

    char_yield = max(0.0, CHAR_BASE_YIELD - bio_oil_yield * CHAR_PER_OIL)
    char_revenue = capacity_ton_per_year * (char_yield / 100.0) * 1000.0 * CHAR_PRICE_PER_KG
    return oil_revenue + char_revenue


def npv_of_annuity(initial_outlay, annual_cash_flow, years, discount_rate):
    npv = -initial_outlay
    for i in range(1, years + 1):
        npv += annual_cash_flow / (1.0 + discount_rate) ** i
    return npv


def _irr(cash_flows):
    irr = npf.irr(cash_flows)
    return float(irr) if np.isfinite(irr) else float("nan")


def evaluate_economics(inp: EconomicInput) -> EconomicResult:
    inp.validate()

    adjusted_capex = inp.capex_base * capex_multiplier(inp.temperature_c, inp.pressure_mpa)
    adjusted_opex = inp.opex_base * opex_energy_factor(inp.temperature_c, inp.pressure_mpa)
    revenue = annual_revenue(inp.capacity_ton_per_year, inp.bio_oil_yield, inp.bio_oil_price)

    gross_profit = revenue - adjusted_opex
    depreciation = adjusted_capex / inp.years
    taxable_income = gross_profit - depreciation
    tax = max(0.0, taxable_income) * inp.tax_rate
    net_profit = gross_profit - tax
    # Depreciation is a non-cash charge
    annual_cash_flow = net_profit + depreciation

    cash_flows = [-adjusted_capex] + [annual_cash_flow] * inp.years
    cumulative = [float(c) for c in np.cumsum(cash_flows)]

    npv = npv_of_annuity(adjusted_capex, annual_cash_flow, inp.years, inp.discount_rate)
    roi = (annual_cash_flow * inp.years - adjusted_capex) / adjusted_capex * 100.0
    if annual_cash_flow > 0:
        payback = adjusted_capex / annual_cash_flow
    else:
        logger.debug("annual cash flow %.4g <= 0, plant never pays back", annual_cash_flow)
        payback = NEVER_PAYS_BACK

    return EconomicResult(
        npv=npv,
        roi=roi,
        payback_period=payback,
        annual_revenue=revenue,
        annual_profit=net_profit,
        cash_flows=cash_flows,
        cumulative_cash_flows=cumulative,
        adjusted_capex=adjusted_capex,
        adjusted_opex=adjusted_opex,
        annual_cash_flow=annual_cash_flow,
        irr=_irr(cash_flows),
    )


def sensitivity_analysis(base: EconomicInput, parameter="bio_oil_price", variations=PRICE_VARIATIONS):
    """NPV with one input scaled by each relative variation, all else fixed."""
    if not hasattr(base, parameter):
        raise InvalidInput("parameter", f"EconomicInput has no field {parameter!r}")
    base_value = getattr(base, parameter)
    points = []
    for v in variations:
        value = base_value * (1.0 + v)
        if parameter == "years":
            value = int(round(value))
        result = evaluate_economics(replace(base, **{parameter: value}))
        points.append(SensitivityPoint(parameter=parameter, change_pct=v * 100.0, value=value, npv=result.npv))
    return points


def breakeven_price(base: EconomicInput, target_npv=0.0, tol=1e-6, max_iter=200):
    """
    Bio-oil price (per litre) at which NPV reaches target_npv, by bisection.
    tol is relative to the base CAPEX. Returns None if no price up to 100x the
    base price reaches the target.
    """
    def npv_at(price):
        return evaluate_economics(replace(base, bio_oil_price=price)).npv

    low, high = 0.0, max(base.bio_oil_price, 1.0)
    if npv_at(low) >= target_npv:
        return low
    while npv_at(high) < target_npv:
        high *= 2.0
        if high > 100.0 * max(base.bio_oil_price, 1.0):
            return None
    mid = high
    for _ in range(max_iter):
        mid = 0.5 * (low + high)
        npv = npv_at(mid)
        if abs(npv - target_npv) < tol * base.capex_base:
            return mid
        if npv < target_npv:
            low = mid
        else:
            high = mid
    return mid


def economic_input_for(measures, conditions, **overrides):
    """EconomicInput for a simulated run, using the default plant economics."""
    values = dict(
        capex_base=DEFAULT_CAPEX,
        opex_base=DEFAULT_OPEX,
        capacity_ton_per_year=conditions.capacity_ton_per_year,
        bio_oil_price=DEFAULT_BIO_OIL_PRICE,
        years=DEFAULT_YEARS,
        tax_rate=DEFAULT_TAX_RATE,
        discount_rate=DEFAULT_DISCOUNT_RATE,
        bio_oil_yield=measures.bio_oil_yield,
        temperature_c=conditions.temperature_c,
        pressure_mpa=conditions.pressure_mpa,
    )
    values.update(overrides)
    return EconomicInput(**values)
