"""
Conversion options.

Defaults can be overridden through the environment; command-line flags
override both.
"""

import os
from dataclasses import dataclass


PROCESS_PAUSES_ENV = "SLF2GPX_PROCESS_PAUSES"
FILTER_NON_GPS_ENV = "SLF2GPX_FILTER_NON_GPS"

_FALSE_VALUES = ("0", "false", "False")


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value not in _FALSE_VALUES


@dataclass(frozen=True)
class ConversionOptions:
    """Switches fixed for the whole run."""

    process_pauses: bool = True
    filter_out_non_gps: bool = True

    @classmethod
    def from_env(cls) -> "ConversionOptions":
        return cls(
            process_pauses=_env_flag(PROCESS_PAUSES_ENV, True),
            filter_out_non_gps=_env_flag(FILTER_NON_GPS_ENV, True),
        )
