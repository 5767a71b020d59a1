from dataclasses import dataclass

from .exceptions import InvalidInput

ABSOLUTE_ZERO_C = -273.15


@dataclass(frozen=True)
class OperatingConditions:
    temperature_c: float
    pressure_mpa: float
    retention_time_min: float
    capacity_ton_per_year: float = 3000.0  # 10 t/day over 300 operating days

    @property
    def temperature_k(self) -> float:
        return self.temperature_c + 273.15

    def validate(self):
        if self.temperature_c <= ABSOLUTE_ZERO_C:
            raise InvalidInput("temperature_c", f"must be above {ABSOLUTE_ZERO_C} °C, got {self.temperature_c}")
        if self.retention_time_min <= 0:
            raise InvalidInput("retention_time_min", f"must be > 0, got {self.retention_time_min}")
        if self.capacity_ton_per_year <= 0:
            raise InvalidInput("capacity_ton_per_year", f"must be > 0, got {self.capacity_ton_per_year}")
        return self


@dataclass(frozen=True)
class KineticParams:
    """Global Arrhenius parameters for biomass decomposition.

    A: pre-exponential factor (1/min)
    Ea: activation energy (kJ/mol)
    """
    A: float = 1.5e8
    Ea: float = 120.0
