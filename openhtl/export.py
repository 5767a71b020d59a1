"""
CSV export of simulation and economic results.

The column names and number formatting are a stable interchange format for
downstream spreadsheets; concentrations are written with 4 decimals and time
with 2.
"""
import pandas as pd

TIME_SERIES_COLUMNS = ["Time_Min", "Biomass_Conc", "BioOil_Conc", "Gas_Conc", "Char_Conc"]
CURRENCY = "IDR"


def time_series_frame(states):
    rows = [
        {
            "Time_Min": f"{s.time:.2f}",
            "Biomass_Conc": f"{s.biomass:.4f}",
            "BioOil_Conc": f"{s.bio_oil:.4f}",
            "Gas_Conc": f"{s.gas:.4f}",
            "Char_Conc": f"{s.char:.4f}",
        }
        for s in states
    ]
    return pd.DataFrame(rows, columns=TIME_SERIES_COLUMNS)


def economic_metrics_frame(result, years, currency=CURRENCY):
    rows = [
        {"Metric": f"NPV ({years} Years)", "Value": result.npv, "Unit": currency},
        {"Metric": "ROI", "Value": result.roi, "Unit": "%"},
        {"Metric": "Payback Period", "Value": result.payback_period, "Unit": "Years"},
        {"Metric": "Annual Revenue", "Value": result.annual_revenue, "Unit": currency},
    ]
    return pd.DataFrame(rows, columns=["Metric", "Value", "Unit"])


def cash_flow_frame(result):
    return pd.DataFrame({
        "Year": range(len(result.cash_flows)),
        "CashFlow": result.cash_flows,
        "Cumulative": result.cumulative_cash_flows,
    })


def export_simulation_data(states, path):
    time_series_frame(states).to_csv(path, index=False)
    return path


def export_economic_report(result, path, years, cash_flow_path=None):
    economic_metrics_frame(result, years).to_csv(path, index=False)
    if cash_flow_path is not None:
        cash_flow_frame(result).to_csv(cash_flow_path, index=False)
    return path
