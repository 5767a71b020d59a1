"""
Product yields and energy metrics from the terminal kinetic state.

The aqueous phase is not part of the kinetic state. It is the complement of
the converted fraction, so unreacted biomass at the end of a short run is
reported as aqueous product. If that complement drops below 10 % it is forced
to 15 % (HTL always produces an aqueous phase) and all four yields are scaled
back to 100 %.
"""
from dataclasses import dataclass

AQUEOUS_MIN = 10.0
AQUEOUS_OVERRIDE = 15.0

# Feed heating value used as the energy-recovery reference (MJ/kg)
FEED_HHV = 16.0

# Above this lipid content the oil is hydrocarbon-like (HHV ~38-42 MJ/kg),
# below it the oil is oxygenated (HHV ~30-34 MJ/kg)
LIPID_RICH_THRESHOLD = 1.0


@dataclass(frozen=True)
class YieldMeasures:
    bio_oil_yield: float  # % of dry feed
    gas_yield: float
    char_yield: float
    aqueous_yield: float
    hhv: float            # MJ/kg bio-oil
    err: float            # energy recovery ratio, %

    @property
    def total(self) -> float:
        return self.bio_oil_yield + self.gas_yield + self.char_yield + self.aqueous_yield

    def as_dict(self):
        return {
            "bio_oil": self.bio_oil_yield,
            "gas": self.gas_yield,
            "char": self.char_yield,
            "aqueous": self.aqueous_yield,
        }


def normalize_yields(bio_oil, gas, char, aqueous):
    """Scale the four yields to sum to 100. A zero total is returned as is."""
    total = bio_oil + gas + char + aqueous
    if total == 0:
        return bio_oil, gas, char, aqueous
    scale = 100.0 / total
    return bio_oil * scale, gas * scale, char * scale, aqueous * scale


def bio_oil_hhv(feedstock, T_c):
    if feedstock.lipid > LIPID_RICH_THRESHOLD:
        return 36.0 + feedstock.lipid * 0.2 + (T_c - 300.0) * 0.02
    return 28.0 + feedstock.protein * 0.1 + (T_c - 300.0) * 0.015


def energy_recovery(bio_oil_yield, hhv):
    return (bio_oil_yield / 100.0) * hhv / FEED_HHV * 100.0


def post_process(final_state, feedstock, T_c):
    bio_oil = final_state.bio_oil * 100.0
    gas = final_state.gas * 100.0
    char = final_state.char * 100.0
    aqueous = 100.0 - (final_state.bio_oil + final_state.gas + final_state.char) * 100.0

    if aqueous < AQUEOUS_MIN:
        aqueous = AQUEOUS_OVERRIDE

    bio_oil, gas, char, aqueous = normalize_yields(bio_oil, gas, char, aqueous)

    hhv = bio_oil_hhv(feedstock, T_c)
    return YieldMeasures(
        bio_oil_yield=bio_oil,
        gas_yield=gas,
        char_yield=char,
        aqueous_yield=aqueous,
        hhv=hhv,
        err=energy_recovery(bio_oil, hhv),
    )
