from openhtl import KineticParams, OperatingConditions, load_feedstock
from openhtl.economics import economic_input_for, evaluate_economics
from openhtl.simulation import HTLSimulator


def main():
    feedstock = load_feedstock("chicken")

    conditions = OperatingConditions(
        temperature_c=320,  # °C
        pressure_mpa=18,  # MPa
        retention_time_min=45,  # minutes
        capacity_ton_per_year=3000,  # 10 t/day, 300 days
    )

    sim = HTLSimulator(feedstock, conditions, KineticParams(A=1.5e8, Ea=120))
    results = sim.run(reporting_timestep_min=5)

    econ = evaluate_economics(economic_input_for(results.measures, conditions))

    print("Final Results:")
    print(f"Bio-oil yield:  {results.measures.bio_oil_yield:.2f} %")
    print(f"Gas yield:      {results.measures.gas_yield:.2f} %")
    print(f"Char yield:     {results.measures.char_yield:.2f} %")
    print(f"NPV:            {econ.npv:,.0f} IDR")
    print(f"Payback period: {econ.payback_period:.1f} years")

if __name__ == "__main__":
    main()
