"""
Solver configuration.

SolveOptions bounds a solve run. The defaults can be overridden through
environment variables (main.py loads a .env file first):

    TILEWAVE_MAX_ITERATIONS   loop iterations before giving up
    TILEWAVE_MAX_BACKTRACKS   contradictions undone before giving up
    TILEWAVE_SEED             seed for the weighted draw (unset = random)
"""

from __future__ import annotations

import os

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_MAX_ITERATIONS = 1000
DEFAULT_MAX_BACKTRACKS = 50

ENV_MAX_ITERATIONS = "TILEWAVE_MAX_ITERATIONS"
ENV_MAX_BACKTRACKS = "TILEWAVE_MAX_BACKTRACKS"
ENV_SEED = "TILEWAVE_SEED"


class SolveOptions(BaseModel):
    """Budgets and seeding for one solve run."""

    model_config = ConfigDict(frozen=True)

    max_iterations: int = Field(default=DEFAULT_MAX_ITERATIONS, ge=1)
    max_backtracks: int = Field(default=DEFAULT_MAX_BACKTRACKS, ge=0)
    rng_seed: int | None = None

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> SolveOptions:
        """Build options from TILEWAVE_* variables, falling back to defaults."""
        env = os.environ if environ is None else environ
        values: dict[str, int] = {}
        if env.get(ENV_MAX_ITERATIONS):
            values["max_iterations"] = int(env[ENV_MAX_ITERATIONS])
        if env.get(ENV_MAX_BACKTRACKS):
            values["max_backtracks"] = int(env[ENV_MAX_BACKTRACKS])
        if env.get(ENV_SEED):
            values["rng_seed"] = int(env[ENV_SEED])
        return cls(**values)

    def with_overrides(self, **overrides: int | None) -> SolveOptions:
        """Return new options with every non-None override applied."""
        values = self.model_dump()
        values.update({k: v for k, v in overrides.items() if v is not None})
        return SolveOptions(**values)
