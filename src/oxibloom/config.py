import os
from dataclasses import dataclass, fields
from typing import Mapping, Optional

from oxibloom.entropy.buffer import BUFFER_LENGTH

ENV_PREFIX = "OXIBLOOM_"


@dataclass
class OxibloomConfig:
    item_count: int = 1_000_000
    fp_rate: float = 0.01
    sample_count: int = 100_000
    tolerance: float = 0.005
    batch_size: int = 10_000
    buffer_length: int = BUFFER_LENGTH


def load_config(environ: Optional[Mapping[str, str]] = None) -> OxibloomConfig:
    """Build a config from defaults overridden by ``OXIBLOOM_*`` variables.

    ``OXIBLOOM_FP_RATE=0.001`` overrides ``fp_rate`` and so on. Values that do
    not parse as the field's type raise ``ValueError``.
    """
    environ = os.environ if environ is None else environ
    config = OxibloomConfig()
    for f in fields(config):
        raw = environ.get(ENV_PREFIX + f.name.upper())
        if raw is None or raw == "":
            continue
        cast = float if f.type in (float, "float") else int
        try:
            value = cast(raw)
        except ValueError:
            raise ValueError(
                f"{ENV_PREFIX}{f.name.upper()}={raw!r} is not a valid {cast.__name__}"
            ) from None
        setattr(config, f.name, value)
    return config


CONFIG = load_config()
