import json
import os
from dataclasses import dataclass

from .exceptions import InvalidInput


@dataclass(frozen=True)
class FeedstockComposition:
    """Feedstock proximate composition, in percent of dry matter.

    The components are not required to sum to 100; published manure data
    usually leaves an unaccounted residual.
    """
    name: str
    moisture: float
    lipid: float
    protein: float
    carbohydrate: float
    ash: float

    @staticmethod
    def from_json(json_data):
        return FeedstockComposition(**json_data)


def load_feedstock_data():
    data_path = os.path.join(os.path.dirname(__file__), "data", "feedstocks.json")
    with open(data_path, "r") as f:
        return json.load(f)


def load_feedstock(key):
    """Return the preset composition stored under `key` (e.g. "chicken")."""
    presets = load_feedstock_data()
    if key not in presets:
        raise InvalidInput("feedstock", f"unknown preset {key!r}, expected one of {sorted(presets)}")
    return FeedstockComposition.from_json(presets[key])


def available_feedstocks():
    return sorted(load_feedstock_data())
