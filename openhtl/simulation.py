from dataclasses import dataclass
from typing import List

from .integrator import DEFAULT_DT_MIN, KineticState, integrate
from .kinetics import RateSplit, compute_rate_split
from .optimization import OptimizationRow, optimization_grid
from .reactor import KineticParams
from .yields import YieldMeasures, post_process


@dataclass(frozen=True)
class SimulationResult:
    time_series: List[KineticState]
    measures: YieldMeasures
    optimization_grid: List[OptimizationRow]
    rate_split: RateSplit

    @property
    def final_state(self) -> KineticState:
        return self.time_series[-1]


def simulate(feedstock, conditions, kinetic_params=None, dt=DEFAULT_DT_MIN):
    """
    Run the kinetic model for one feedstock at one operating point.

    Inputs are validated before anything is computed. The temperature sweep in
    the result does not depend on the inputs.
    """
    conditions.validate()
    if kinetic_params is None:
        kinetic_params = KineticParams()

    split = compute_rate_split(feedstock, conditions, kinetic_params)
    states = integrate(split.constants, conditions.retention_time_min, dt=dt)
    measures = post_process(states[-1], feedstock, conditions.temperature_c)

    return SimulationResult(
        time_series=states,
        measures=measures,
        optimization_grid=optimization_grid(),
        rate_split=split,
    )


class HTLSimulator:
    def __init__(self, feedstock, conditions, kinetic_params=None):
        self.feedstock = feedstock
        self.conditions = conditions
        self.kinetic_params = kinetic_params or KineticParams()

    def run(self, reporting_timestep_min=5.0, verbose=True):
        result = simulate(self.feedstock, self.conditions, self.kinetic_params)

        if verbose:
            c = self.conditions
            print("\n[ HTL Simulation Started ]")
            print(f"Feedstock: {self.feedstock.name}")
            print(f"Retention time: {c.retention_time_min} minutes @ {c.temperature_c}°C, {c.pressure_mpa} MPa")
            print(f"k_global: {result.rate_split.k_global:.4e} 1/min, integration timestep: {DEFAULT_DT_MIN} min")
            print(f"{'Time (min)':>12} | {'Biomass':>8} | {'Bio-oil':>8} | {'Gas':>8} | {'Char':>8}")
            print("-" * 56)

            next_report = 0.0
            for state in result.time_series:
                if state.time >= next_report or state is result.final_state:
                    print(f"{state.time:12.2f} | {state.biomass:8.4f} | {state.bio_oil:8.4f} | "
                          f"{state.gas:8.4f} | {state.char:8.4f}")
                    next_report += reporting_timestep_min

            m = result.measures
            print("\n[ Simulation Complete ]")
            print(f"Bio-oil: {m.bio_oil_yield:.2f} %  Gas: {m.gas_yield:.2f} %  "
                  f"Char: {m.char_yield:.2f} %  Aqueous: {m.aqueous_yield:.2f} %")
            print(f"Bio-oil HHV: {m.hhv:.2f} MJ/kg, energy recovery: {m.err:.2f} %\n")

        return result
