"""
Temperature sweep of the steady-state bio-oil yield for two reference
feedstocks. No integration and no pressure correction: this only feeds the
comparison chart, so it uses the bare yield correlation.
"""
from dataclasses import dataclass

from .kinetics import bio_oil_yield_correlation
from .materials import FeedstockComposition

TEMPERATURE_GRID = (250.0, 300.0, 325.0, 350.0, 375.0, 400.0)
SWEEP_FACTOR_FLOOR = 0.1

LIPID_RICH = FeedstockComposition(
    name="Chicken manure", moisture=75.0, lipid=1.97, protein=18.64, carbohydrate=19.62, ash=59.77,
)
# Only lipid, protein and carbohydrate enter the sweep; ash is the residual to
# 100 % dry basis and is unused
CARBOHYDRATE_RICH = FeedstockComposition(
    name="Cow manure", moisture=80.0, lipid=0.24, protein=12.5, carbohydrate=40.0,
    ash=100.0 - 0.24 - 12.5 - 40.0,
)


@dataclass(frozen=True)
class OptimizationRow:
    temperature_c: float
    yield_preset1: float  # lipid-rich, % dry matter
    yield_preset2: float  # carbohydrate-rich


def sweep_yield(feedstock, T_c):
    return bio_oil_yield_correlation(feedstock, T_c, P_mpa=None, gasification=False,
                                     floor=SWEEP_FACTOR_FLOOR)


def optimization_grid(temperatures=TEMPERATURE_GRID, preset1=LIPID_RICH, preset2=CARBOHYDRATE_RICH):
    return [
        OptimizationRow(temperature_c=T, yield_preset1=sweep_yield(preset1, T),
                        yield_preset2=sweep_yield(preset2, T))
        for T in temperatures
    ]


def optimal_temperature(rows, preset=1):
    """Grid temperature with the highest yield for preset 1 or 2 (first on ties)."""
    if preset not in (1, 2):
        raise ValueError(f"preset must be 1 or 2, got {preset}")
    attr = f"yield_preset{preset}"
    best = max(rows, key=lambda row: getattr(row, attr))
    return best.temperature_c
