import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

from mixthermo.common.constants import DEFAULT_CONSTANTS, PhysicalConstants
from mixthermo.common.exceptions import ConfigurationError, MissingPropertyData

# explicit imports register the correlation kinds
from . import delegated  # noqa: F401  delegated
from . import mu0_poly  # noqa: F401  mu0
from . import nasa7  # noqa: F401  nasa7

from ..utils.units import energy_factor
from .records import BinaryInteraction
from .registry import REGISTRY
from .species_thermo import SpeciesThermo

logger = logging.getLogger(__name__)

MODELS = {}  # name -> factory(params, **context)


def model(name: str):
    def deco(fn):
        MODELS[name] = fn
        return fn
    return deco


def _require(entry: Mapping[str, Any], key: str, what: str):
    if key not in entry:
        raise MissingPropertyData(f"Missing '{key}' in {what}")
    return entry[key]


def build_species_thermo(
    species: Sequence[Mapping[str, Any]],
    constants: PhysicalConstants = DEFAULT_CONSTANTS,
    states: Optional[Mapping[str, Any]] = None,
) -> SpeciesThermo:
    """One correlation per species entry ``{"name", "thermo": {"model", ...}}``."""
    states = states or {}
    sp_thermo = SpeciesThermo(len(species), constants=constants)
    for k, sp in enumerate(species):
        name = _require(sp, "name", f"species entry {k}")
        thermo = _require(sp, "thermo", f"species '{name}'")
        kind = _require(thermo, "model", f"thermo of species '{name}'")
        if kind not in REGISTRY:
            raise ConfigurationError(f"Unknown thermo model '{kind}' for species '{name}'")
        record = REGISTRY[kind].record_from_params(k, thermo, p_ref=constants.one_atm, name=name)
        sp_thermo.install_record(record, state=states.get(name))
    return sp_thermo


def interactions_from_params(
    entries: Sequence[Mapping[str, Any]],
    species_names: Sequence[str],
    charges: Optional[Sequence[float]] = None,
) -> List[BinaryInteraction]:
    """Binary neutral-species parameters; pairs naming unknown species are skipped."""
    names = list(species_names)
    out: List[BinaryInteraction] = []
    for entry in entries:
        name_a = _require(entry, "species_a", "binary interaction")
        name_b = _require(entry, "species_b", "binary interaction")
        if name_a not in names or name_b not in names:
            logger.warning("Skipping binary interaction %s::%s: species not in phase", name_a, name_b)
            continue
        iA, iB = names.index(name_a), names.index(name_b)
        for idx, which in ((iA, "speciesA"), (iB, "speciesB")):
            if charges is not None and charges[idx] != 0:
                raise ConfigurationError(f"Binary interaction {name_a}::{name_b}: {which} charge problem")
        factor = energy_factor(entry.get("energy_units", "J/kmol"), what=f"excess energy ({name_a}::{name_b})")
        params = {}
        for key, attr, scale in (
            ("excess_enthalpy", "h_excess", factor),
            ("excess_entropy", "s_excess", factor),
            ("excess_volume_enthalpy", "vh_excess", 1.0),
            ("excess_volume_entropy", "vs_excess", 1.0),
        ):
            values = entry.get(key, (0.0, 0.0))
            if not isinstance(values, (list, tuple)):
                raise ConfigurationError(f"{key} for {name_a}::{name_b}: expected a [b, c] pair, got {values!r}")
            if len(values) != 2:
                raise ConfigurationError(
                    f"{key} for {name_a}::{name_b}: wrong number of params found ({len(values)}, expected 2)"
                )
            params[attr] = (float(values[0]) * scale, float(values[1]) * scale)
        out.append(BinaryInteraction(species_a=iA, species_b=iB, label=f"{name_a}::{name_b}", **params))
    return out


def build_model(name: str, params: Dict[str, Any], **context):
    if name not in MODELS:
        raise ConfigurationError(f"Model '{name}' not registered")
    return MODELS[name](params, **context)


def load_model_from_json(json_path, **context):
    p = Path(json_path)
    data = json.loads(p.read_text(encoding="utf-8"))
    # accepts both {model, params} and {model, species, ...}
    params = data.get("params", data)
    if "model" not in data:
        raise MissingPropertyData(f"Missing 'model' in {p}")
    return build_model(data["model"], params, **context)
