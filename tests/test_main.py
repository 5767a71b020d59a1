import pytest
from openhtl import (
    InvalidInput, KineticParams, OperatingConditions, evaluate_economics, load_feedstock, simulate,
)
from openhtl.economics import EconomicInput
from openhtl.kinetics import rate_split
from openhtl.materials import FeedstockComposition
from openhtl.simulation import HTLSimulator


def scenario_a():
    feedstock = load_feedstock("chicken")
    conditions = OperatingConditions(temperature_c=320, pressure_mpa=18, retention_time_min=45)
    return simulate(feedstock, conditions, KineticParams(A=1.5e8, Ea=120))


def test_scenario_a_yields():
    m = scenario_a().measures
    assert m.bio_oil_yield == pytest.approx(1.7, rel=0.05)
    assert m.gas_yield == pytest.approx(2.3, rel=0.05)
    assert m.char_yield == pytest.approx(12.7, rel=0.05)
    assert m.aqueous_yield == pytest.approx(83.4, rel=0.05)
    assert abs(m.total - 100.0) < 1e-6


def test_scenario_a_rate_split():
    split = scenario_a().rate_split
    assert split.oil_ratio == pytest.approx(0.1036, rel=1e-3)
    assert split.k_global == pytest.approx(4.0e-3, rel=0.05)
    # only ~16.6 % of the biomass converts in 45 minutes
    assert 1.0 - scenario_a().final_state.biomass == pytest.approx(0.166, rel=0.02)


def test_scenario_b_economics():
    bio_oil_yield = scenario_a().measures.bio_oil_yield
    econ = evaluate_economics(EconomicInput(
        capex_base=45e9, opex_base=8.5e9, capacity_ton_per_year=15000, bio_oil_price=13500,
        years=10, tax_rate=0.22, discount_rate=0.10, bio_oil_yield=bio_oil_yield,
        temperature_c=320, pressure_mpa=18,
    ))
    assert econ.adjusted_capex == 45e9
    assert econ.annual_cash_flow == pytest.approx(1.02e10, rel=0.1)
    assert econ.npv > 0
    assert econ.npv == pytest.approx(1.8e10, rel=0.1)
    assert econ.roi == pytest.approx(128, rel=0.1)
    assert econ.payback_period == pytest.approx(4.4, rel=0.1)


def test_simulation_outputs():
    result = scenario_a()
    assert len(result.time_series) == 91
    assert result.time_series[0].biomass == 1.0
    assert result.final_state.time == 45.0
    assert len(result.optimization_grid) == 6


RICH = FeedstockComposition(name="rich", moisture=0, lipid=100, protein=50, carbohydrate=50, ash=0)


@pytest.mark.parametrize("feedstock", [load_feedstock("chicken"), load_feedstock("cow"), RICH],
                         ids=["chicken", "cow", "rich"])
@pytest.mark.parametrize("T", [250, 320, 450, 550, 700])
@pytest.mark.parametrize("P", [8, 18, 26])
@pytest.mark.parametrize("retention", [2, 45])
def test_yields_sum_to_100(feedstock, T, P, retention):
    conditions = OperatingConditions(temperature_c=T, pressure_mpa=P, retention_time_min=retention)
    m = simulate(feedstock, conditions).measures
    assert abs(m.total - 100.0) < 1e-6


def test_rich_feedstock_takes_char_floor_path():
    oil, gas, char = rate_split(RICH, 320, 18)
    assert char == 0.05
    m = simulate(RICH, OperatingConditions(temperature_c=320, pressure_mpa=18, retention_time_min=45)).measures
    assert abs(m.total - 100.0) < 1e-6


def test_extreme_temperature_gasification():
    feedstock = load_feedstock("chicken")
    conditions = OperatingConditions(temperature_c=700, pressure_mpa=18, retention_time_min=45)
    result = simulate(feedstock, conditions)
    m = result.measures
    assert m.gas_yield > 10 * m.bio_oil_yield
    assert abs(m.total - 100.0) < 1e-6
    for state in result.time_series:
        assert abs(state.total - 1.0) < 1e-6


def test_invalid_feedstock():
    with pytest.raises(InvalidInput):
        load_feedstock("pig")


def test_invalid_conditions_rejected_before_run():
    feedstock = load_feedstock("cow")
    with pytest.raises(InvalidInput) as exc:
        simulate(feedstock, OperatingConditions(temperature_c=320, pressure_mpa=18, retention_time_min=0))
    assert exc.value.field == "retention_time_min"

    with pytest.raises(InvalidInput) as exc:
        simulate(feedstock, OperatingConditions(temperature_c=-273.15, pressure_mpa=18, retention_time_min=30))
    assert exc.value.field == "temperature_c"

    with pytest.raises(InvalidInput) as exc:
        simulate(feedstock, OperatingConditions(temperature_c=320, pressure_mpa=18, retention_time_min=30,
                                                capacity_ton_per_year=0))
    assert exc.value.field == "capacity_ton_per_year"


def test_simulator_verbose_report(capsys):
    sim = HTLSimulator(load_feedstock("chicken"),
                       OperatingConditions(temperature_c=320, pressure_mpa=18, retention_time_min=45))
    result = sim.run(reporting_timestep_min=15)
    out = capsys.readouterr().out
    assert "Simulation Complete" in out
    assert "45.00" in out
    assert result.measures.bio_oil_yield > 0


def test_simulator_quiet(capsys):
    sim = HTLSimulator(load_feedstock("cow"),
                       OperatingConditions(temperature_c=300, pressure_mpa=12, retention_time_min=30))
    sim.run(verbose=False)
    assert capsys.readouterr().out == ""
