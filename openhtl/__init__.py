"""
OpenHTL: hydrothermal liquefaction kinetics and techno-economics.

    from openhtl import load_feedstock, OperatingConditions, simulate, evaluate_economics
"""
from .economics import EconomicInput, EconomicResult, evaluate_economics
from .exceptions import DomainError, InvalidInput
from .materials import FeedstockComposition, load_feedstock
from .reactor import KineticParams, OperatingConditions
from .simulation import HTLSimulator, SimulationResult, simulate

__version__ = "0.1.0"
