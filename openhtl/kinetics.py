"""
Rate model for the lumped HTL scheme

    biomass -> bio-oil   (k1)
    biomass -> gas       (k2)
    biomass -> char      (k3)

A single global Arrhenius constant sets the overall decomposition speed. It is
split into k1:k2:k3 using a component-contribution yield correlation, so the
terminal product distribution follows the feedstock composition and the
operating window rather than three independent activation energies.

The empirical corrections are kept as ordered ladders of
(comparison, threshold, effect) rungs so each rule can be read and tested on
its own.
"""
import logging
import math
import operator
from dataclasses import dataclass

from .exceptions import DomainError

logger = logging.getLogger(__name__)

R = 8.314  # J/(mol K)

# Sub-critical water needs enough pressure to stay liquid; above ~22 MPa the
# denser solvent improves lipid solvation. First matching rung wins.
PRESSURE_FACTORS = (
    (operator.lt, 10.0, 0.6),
    (operator.lt, 15.0, 0.9),
    (operator.gt, 22.0, 1.05),
)

# Bio-oil yield vs. temperature; optimum window is 300-330 °C. First matching
# rung wins. The first rung is the gasification regime.
TEMPERATURE_FACTORS = (
    (operator.gt, 600.0, lambda T: 0.1),
    (operator.gt, 330.0, lambda T: 1.0 - (T - 330.0) * 0.005),
    (operator.lt, 300.0, lambda T: 1.0 - (300.0 - T) * 0.008),
)
GASIFICATION_RUNGS = 1

# Gas ratio multiplier relative to the composition baseline. Rungs are ordered
# hottest first so the highest crossed threshold wins.
GAS_MULTIPLIERS = (
    (operator.gt, 500.0, 4.0),
    (operator.gt, 350.0, 1.5),
)

# Fraction of each biochemical class that ends up in the bio-oil
LIPID_TO_OIL = 0.95
PROTEIN_TO_OIL = 0.35
CARBOHYDRATE_TO_OIL = 0.10

# Fraction of each class that ends up in the gas
CARBOHYDRATE_TO_GAS = 0.5
PROTEIN_TO_GAS = 0.2

CHAR_RATIO_FLOOR = 0.05


def _first_match(ladder, x, default):
    for compare, threshold, effect in ladder:
        if compare(x, threshold):
            return effect
    return default


def arrhenius_rate(A, Ea_kJ, T_K):
    """
    k = A * exp(-Ea / (R T))

    A: pre-exponential factor (1/min)
    Ea_kJ: activation energy (kJ/mol)
    T_K: absolute temperature (K)
    """
    if T_K <= 0:
        raise DomainError(f"Absolute temperature must be positive, got {T_K} K")
    return A * math.exp(-(Ea_kJ * 1000.0) / (R * T_K))


def pressure_factor(P_mpa):
    return _first_match(PRESSURE_FACTORS, P_mpa, 1.0)


def temperature_factor(T_c, gasification=True, floor=0.05):
    """
    Bio-oil yield multiplier for the reaction temperature (°C).

    gasification: apply the >600 °C gasification rung
    floor: lower clamp of the returned factor
    """
    ladder = TEMPERATURE_FACTORS if gasification else TEMPERATURE_FACTORS[GASIFICATION_RUNGS:]
    effect = _first_match(ladder, T_c, None)
    factor = effect(T_c) if effect is not None else 1.0
    return max(floor, factor)


def gas_multiplier(T_c):
    return _first_match(GAS_MULTIPLIERS, T_c, 1.0)


def bio_oil_yield_correlation(feedstock, T_c, P_mpa=None, gasification=True, floor=0.05):
    """
    Predicted bio-oil yield (% of dry matter) at steady state.

    Shared by the kinetic path and the temperature sweep. The kinetic path
    passes a pressure and keeps the gasification rung; the sweep omits the
    pressure correction, drops the gasification rung and uses a 0.1 floor.
    """
    pf = pressure_factor(P_mpa) if P_mpa is not None else 1.0
    lipid_yield = feedstock.lipid * LIPID_TO_OIL * pf
    protein_yield = feedstock.protein * PROTEIN_TO_OIL * pf
    carb_yield = feedstock.carbohydrate * CARBOHYDRATE_TO_OIL
    theoretical = lipid_yield + protein_yield + carb_yield
    return theoretical * temperature_factor(T_c, gasification=gasification, floor=floor)


def rate_split(feedstock, T_c, P_mpa):
    """
    Terminal product split (oil, gas, char) as fractions of converted biomass.

    When oil and gas overshoot 1, the excess is taken evenly from both and
    char is set to its floor. The three ratios are then not renormalized and
    may not sum to exactly 1.
    """
    oil = bio_oil_yield_correlation(feedstock, T_c, P_mpa) / 100.0

    gas = (feedstock.carbohydrate * CARBOHYDRATE_TO_GAS + feedstock.protein * PROTEIN_TO_GAS) / 100.0
    gas *= gas_multiplier(T_c)

    char = 1.0 - oil - gas
    if char < 0:
        excess = -char
        oil -= excess / 2
        gas -= excess / 2
        char = CHAR_RATIO_FLOOR
    return oil, gas, char


@dataclass(frozen=True)
class RateConstants:
    k1: float  # biomass -> bio-oil (1/min)
    k2: float  # biomass -> gas
    k3: float  # biomass -> char

    @property
    def total(self) -> float:
        return self.k1 + self.k2 + self.k3


@dataclass(frozen=True)
class RateSplit:
    oil_ratio: float
    gas_ratio: float
    char_ratio: float
    k_global: float

    @property
    def constants(self) -> RateConstants:
        return RateConstants(
            k1=self.k_global * self.oil_ratio,
            k2=self.k_global * self.gas_ratio,
            k3=self.k_global * self.char_ratio,
        )


def compute_rate_split(feedstock, conditions, params):
    """Derive k_global and the k1:k2:k3 split for one run."""
    oil, gas, char = rate_split(feedstock, conditions.temperature_c, conditions.pressure_mpa)
    # Denser water raises the collision frequency, so pressure scales A too
    k_global = arrhenius_rate(params.A * pressure_factor(conditions.pressure_mpa), params.Ea,
                              conditions.temperature_k)
    logger.debug("k_global=%.4e 1/min, split oil=%.4f gas=%.4f char=%.4f", k_global, oil, gas, char)
    return RateSplit(oil_ratio=oil, gas_ratio=gas, char_ratio=char, k_global=k_global)
