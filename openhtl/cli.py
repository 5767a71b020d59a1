"""
Command-line front end.

Usage:
    openhtl --feedstock chicken --temperature 320 --pressure 18 --retention 45
    python -m openhtl --feedstock cow --temperature 350 --csv-dir results/
"""
import argparse
import os
import sys

from .economics import (
    DEFAULT_BIO_OIL_PRICE, breakeven_price, economic_input_for, evaluate_economics,
    sensitivity_analysis,
)
from .exceptions import InvalidInput
from .export import export_economic_report, export_simulation_data
from .materials import available_feedstocks, load_feedstock
from .optimization import optimal_temperature
from .reactor import KineticParams, OperatingConditions
from .simulation import HTLSimulator


def build_parser():
    parser = argparse.ArgumentParser(
        prog="openhtl",
        description="Hydrothermal liquefaction kinetic and techno-economic simulator",
    )
    parser.add_argument("--feedstock", default="chicken", choices=available_feedstocks(),
                        help="feedstock preset (default: chicken)")
    parser.add_argument("--temperature", type=float, default=320.0, help="reactor temperature, °C")
    parser.add_argument("--pressure", type=float, default=18.0, help="reactor pressure, MPa")
    parser.add_argument("--retention", type=float, default=45.0, help="retention time, min")
    parser.add_argument("--capacity", type=float, default=3000.0, help="plant capacity, t dry feed/yr")
    parser.add_argument("--price", type=float, default=DEFAULT_BIO_OIL_PRICE, help="bio-oil price per litre")
    parser.add_argument("--A", type=float, default=KineticParams.A, help="pre-exponential factor, 1/min")
    parser.add_argument("--Ea", type=float, default=KineticParams.Ea, help="activation energy, kJ/mol")
    parser.add_argument("--csv-dir", help="write time series and economic metrics CSV files here")
    parser.add_argument("--quiet", action="store_true", help="skip the integration progress table")
    return parser


def print_economics(econ, inp):
    print("--- Economics ---")
    print(f"Adjusted CAPEX:   {econ.adjusted_capex:,.0f}")
    print(f"Adjusted OPEX:    {econ.adjusted_opex:,.0f} / yr")
    print(f"Annual revenue:   {econ.annual_revenue:,.0f}")
    print(f"Annual cash flow: {econ.annual_cash_flow:,.0f}")
    print(f"NPV ({inp.years} yr):     {econ.npv:,.0f}")
    print(f"ROI:              {econ.roi:.1f} %")
    if econ.is_degenerate:
        print("Payback period:   never")
    else:
        print(f"Payback period:   {econ.payback_period:.2f} years")

    print("\nBio-oil price sensitivity:")
    for point in sensitivity_analysis(inp):
        print(f"  {point.change_pct:+6.0f} %  NPV {point.npv:,.0f}")

    breakeven = breakeven_price(inp)
    if breakeven is None:
        print("Breakeven price:  not reachable")
    else:
        print(f"Breakeven price:  {breakeven:,.0f} / L")


def run(args):
    feedstock = load_feedstock(args.feedstock)
    conditions = OperatingConditions(
        temperature_c=args.temperature,
        pressure_mpa=args.pressure,
        retention_time_min=args.retention,
        capacity_ton_per_year=args.capacity,
    )
    sim = HTLSimulator(feedstock, conditions, KineticParams(A=args.A, Ea=args.Ea))
    result = sim.run(verbose=not args.quiet)

    m = result.measures
    print("--- Yields (% dry feed) ---")
    for name, value in m.as_dict().items():
        print(f"  {name.capitalize():<8} {value:6.2f}")
    print(f"Optimal sweep temperature: {optimal_temperature(result.optimization_grid, 1):.0f} °C (lipid-rich), "
          f"{optimal_temperature(result.optimization_grid, 2):.0f} °C (carbohydrate-rich)\n")

    inp = economic_input_for(m, conditions, bio_oil_price=args.price)
    econ = evaluate_economics(inp)
    print_economics(econ, inp)

    if args.csv_dir:
        os.makedirs(args.csv_dir, exist_ok=True)
        export_simulation_data(result.time_series, os.path.join(args.csv_dir, "htl_simulation.csv"))
        export_economic_report(econ, os.path.join(args.csv_dir, "htl_economics.csv"), inp.years,
                               cash_flow_path=os.path.join(args.csv_dir, "htl_cash_flows.csv"))
        print(f"\nCSV files written to {args.csv_dir}")


def main(argv=None):
    args = build_parser().parse_args(argv)
    try:
        run(args)
    except InvalidInput as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
