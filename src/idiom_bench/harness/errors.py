from __future__ import annotations


class HarnessError(Exception):
    """Base class for faults the harness itself defines."""


class ConfigurationFault(HarnessError, ValueError):
    """Invalid run parameters, raised before any timing or thread work starts."""


class ExpectedAbsenceFault(HarnessError, RuntimeError):
    """A variant dereferenced an absent shared value through an unsafe path.

    The stability engine counts these and keeps going. Anything else a variant
    raises is treated as a broken run.
    """

    def __init__(self, what: str = "value") -> None:
        super().__init__(f"{what} is absent")
        self.what = what
