import math

import numpy as np
import pytest
from openhtl.exceptions import InvalidInput
from openhtl.integrator import (
    MAX_STEP_STIFFNESS, derivatives, integrate, integrate_reference, rk4_step, substeps_for,
)
from openhtl.kinetics import RateConstants, compute_rate_split
from openhtl.materials import load_feedstock
from openhtl.reactor import KineticParams, OperatingConditions

SCENARIO = RateConstants(k1=4.2e-4, k2=5.5e-4, k3=3.09e-3)


def constants_for(feedstock_key, T, P):
    conditions = OperatingConditions(temperature_c=T, pressure_mpa=P, retention_time_min=45)
    return compute_rate_split(load_feedstock(feedstock_key), conditions, KineticParams()).constants


def test_derivatives_sum_to_zero():
    d = derivatives(np.array([0.7, 0.1, 0.1, 0.1]), SCENARIO)
    assert abs(d.sum()) < 1e-15
    assert d[0] == pytest.approx(-SCENARIO.total * 0.7)


def test_rk4_step_exponential_decay():
    # dy/dt = -y over one step of 0.1
    y = rk4_step(np.array([1.0]), 0.1, lambda y: -y)
    assert y[0] == pytest.approx(math.exp(-0.1), abs=1e-6)


def test_output_length_and_times():
    states = integrate(SCENARIO, 45)
    assert len(states) == 91
    assert [s.time for s in states[:3]] == [0.0, 0.5, 1.0]
    assert states[0].biomass == 1.0
    assert states[0].bio_oil == states[0].gas == states[0].char == 0.0

    # a retention time that is not a multiple of dt rounds up
    states = integrate(SCENARIO, 45.2)
    assert len(states) == 92
    assert states[-1].time == 45.5


@pytest.mark.parametrize("feedstock, T, P", [
    ("chicken", 320, 18), ("cow", 250, 8), ("cow", 380, 26), ("chicken", 700, 18), ("chicken", 2000, 30),
])
def test_mass_conservation(feedstock, T, P):
    for state in integrate(constants_for(feedstock, T, P), 45):
        assert abs(state.total - 1.0) < 1e-6
        assert state.biomass >= 0.0


def test_halving_dt_converges():
    k = constants_for("chicken", 320, 18)
    coarse = integrate(k, 45, dt=0.5)[-1]
    fine = integrate(k, 45, dt=0.25)[-1]
    for attr in ("bio_oil", "gas", "char"):
        assert getattr(coarse, attr) == pytest.approx(getattr(fine, attr), rel=0.01)


def test_matches_analytical_solution():
    states = integrate(SCENARIO, 45)
    t = states[-1].time
    conversion = 1.0 - math.exp(-SCENARIO.total * t)
    assert states[-1].biomass == pytest.approx(math.exp(-SCENARIO.total * t), rel=1e-9)
    assert states[-1].bio_oil == pytest.approx(SCENARIO.k1 / SCENARIO.total * conversion, rel=1e-9)


def test_matches_reference_solver():
    k = constants_for("cow", 360, 24)
    rk4 = integrate(k, 60)
    ref = integrate_reference(k, 60)
    assert len(rk4) == len(ref)
    for a, b in zip(rk4, ref):
        assert a.time == pytest.approx(b.time)
        assert a.biomass == pytest.approx(b.biomass, abs=1e-6)
        assert a.gas == pytest.approx(b.gas, abs=1e-6)


def test_stiff_step_is_subdivided():
    assert substeps_for(SCENARIO, 0.5) == 1
    k = constants_for("chicken", 700, 18)
    assert substeps_for(k, 0.5) > 1
    final = integrate(k, 45)[-1]
    assert final.biomass < 1e-9
    assert final.gas > final.bio_oil > 0


def test_plain_rk4_while_stable():
    # k*dt ~ 1.8 at 550 °C: inside the RK4 stability range, so no sub-steps
    k = constants_for("chicken", 550, 18)
    assert 1.0 < k.total * 0.5 < MAX_STEP_STIFFNESS
    assert substeps_for(k, 0.5) == 1

    y = np.array([1.0, 0.0, 0.0, 0.0])
    for state in integrate(k, 2)[1:]:
        y = rk4_step(y, 0.5, lambda v: derivatives(v, k))
        assert state.biomass == pytest.approx(y[0], abs=1e-12)
        assert state.bio_oil == pytest.approx(y[1], abs=1e-12)
        assert state.gas == pytest.approx(y[2], abs=1e-12)
        assert state.char == pytest.approx(y[3], abs=1e-12)


def test_invalid_span():
    with pytest.raises(InvalidInput):
        integrate(SCENARIO, 0)
    with pytest.raises(InvalidInput):
        integrate(SCENARIO, 10, dt=0)
