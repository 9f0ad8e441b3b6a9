"""Tunable flock parameters.

A ``FlockConfig`` is a frozen snapshot owned by whoever drives the simulation
(a UI, a script, a batch runner). The flock reads it once per frame and never
changes it. ``PARAMETER_RANGES`` publishes the ranges a user interface should
offer for each parameter.
"""

from __future__ import annotations

import dataclasses
import numbers
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, NamedTuple

from flockers.errors import ConfigurationError

__all__ = ["PARAMETER_RANGES", "FlockConfig", "ParameterRange"]


class ParameterRange(NamedTuple):
    """Slider style range for a single parameter."""

    min_value: float
    max_value: float
    step: float

    def clamp(self, value: float) -> float:
        """Clamp value into [min_value, max_value]."""
        return min(max(value, self.min_value), self.max_value)


PARAMETER_RANGES: dict[str, ParameterRange] = {
    "separation_strength": ParameterRange(0.0, 5.0, 0.1),
    "alignment_strength": ParameterRange(0.0, 2.0, 0.1),
    "cohesion_strength": ParameterRange(0.0, 2.0, 0.1),
    "max_speed": ParameterRange(0.5, 8.0, 0.1),
    "population_size": ParameterRange(10, 200, 1),
}


@dataclass(frozen=True)
class FlockConfig:
    """Per-frame snapshot of the flock parameters.

    Attributes:
        separation_strength: weight of the separation force (>= 0)
        alignment_strength: weight of the alignment force (>= 0)
        cohesion_strength: weight of the cohesion force (>= 0)
        max_speed: global speed cap applied to every boid (> 0)
        population_size: number of boids in the flock (> 0)

    Raises:
        ConfigurationError: if a value is outside its contract
    """

    separation_strength: float = 1.5
    alignment_strength: float = 1.0
    cohesion_strength: float = 1.0
    max_speed: float = 4.0
    population_size: int = 100

    def __post_init__(self):  # noqa: D105
        for name in ("separation_strength", "alignment_strength", "cohesion_strength"):
            value = getattr(self, name)
            if not isinstance(value, numbers.Real) or not value >= 0:
                raise ConfigurationError(name, f"must be a non-negative number, got {value!r}")

        if not isinstance(self.max_speed, numbers.Real) or not self.max_speed > 0:
            raise ConfigurationError(
                "max_speed", f"must be a positive number, got {self.max_speed!r}"
            )

        # bool is an Integral, but a population of True makes no sense
        if (
            isinstance(self.population_size, bool)
            or not isinstance(self.population_size, numbers.Integral)
            or self.population_size <= 0
        ):
            raise ConfigurationError(
                "population_size",
                f"must be a positive integer, got {self.population_size!r}",
            )

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any], clamp: bool = False) -> FlockConfig:
        """Build a config from a mapping, e.g. the current values of UI controls.

        Unknown keys are ignored and missing keys fall back to the defaults.
        A whole-valued float population such as 50.0 is accepted as 50; any
        other non-integer population is rejected, never truncated.

        Args:
            values: parameter name to value
            clamp: clamp every value into its ``PARAMETER_RANGES`` entry first

        Raises:
            ConfigurationError: if a value is not a valid number for its field
        """
        field_names = {f.name for f in dataclasses.fields(cls)}
        kwargs = {k: v for k, v in values.items() if k in field_names}
        if clamp:
            for name, value in kwargs.items():
                if isinstance(value, bool) or not isinstance(value, numbers.Real):
                    raise ConfigurationError(name, f"must be a number, got {value!r}")
            kwargs = {k: PARAMETER_RANGES[k].clamp(v) for k, v in kwargs.items()}
        population = kwargs.get("population_size")
        if (
            isinstance(population, numbers.Real)
            and not isinstance(population, bool)
            and float(population).is_integer()
        ):
            kwargs["population_size"] = int(population)
        return cls(**kwargs)

    def with_updates(self, **changes: Any) -> FlockConfig:
        """Return a copy with some fields replaced."""
        return dataclasses.replace(self, **changes)

    def clamped(self) -> FlockConfig:
        """Return a copy with every field clamped into its UI range."""
        return FlockConfig.from_mapping(self.to_dict(), clamp=True)

    def to_dict(self) -> dict[str, Any]:
        """Return a dict representation of the config."""
        return dataclasses.asdict(self)
