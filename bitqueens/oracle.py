"""Satisfiability oracle backed by Z3.

The rest of the package talks to Z3 only through :class:`Z3Session`, which
owns one context and one incremental solver. Assertions are monotonic: the
session offers no way to retract a constraint.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from enum import Enum

import z3

from .errors import BackendUnavailable, InvalidConfiguration, SessionClosed

logger = logging.getLogger(__name__)

_backend_lock = threading.Lock()
_backend_version: str | None = None


def ensure_backend() -> str:
    """Initialise the Z3 backend once per process and return its version."""
    global _backend_version
    with _backend_lock:
        if _backend_version is None:
            try:
                _backend_version = z3.get_version_string()
            except (z3.Z3Exception, OSError) as exc:
                raise BackendUnavailable(f"Z3 backend failed to load: {exc}") from exc
            logger.info("Z3 backend %s initialised", _backend_version)
    return _backend_version


class CheckResult(str, Enum):
    SAT = "sat"
    UNSAT = "unsat"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class OracleConfig:
    """Solver parameters for a session.

    Only the seed and an optional timeout are applied. Z3 has no solver-wide
    ``randomize`` switch, so runs are made reproducible through the fixed seed
    alone.
    """

    random_seed: int = 42
    timeout_ms: int | None = None

    def __post_init__(self) -> None:
        if self.random_seed < 0:
            raise InvalidConfiguration("random_seed must be >= 0.")
        if self.timeout_ms is not None and self.timeout_ms < 1:
            raise InvalidConfiguration("timeout_ms must be >= 1.")

    def solver_params(self) -> dict[str, int]:
        params = {"random_seed": self.random_seed}
        if self.timeout_ms is not None:
            params["timeout"] = self.timeout_ms
        return params


class Z3Session:
    def __init__(self, config: OracleConfig | None = None) -> None:
        self.config = config or OracleConfig()
        self._context: z3.Context | None = z3.Context()
        self._solver: z3.Solver | None = z3.Solver(ctx=self._context)
        for key, value in self.config.solver_params().items():
            self._solver.set(key, value)
        self._model: z3.ModelRef | None = None
        logger.debug("Opened oracle session with %s", self.config)

    @property
    def closed(self) -> bool:
        return self._solver is None

    def _require_solver(self) -> z3.Solver:
        if self._solver is None:
            raise SessionClosed("Oracle session has been closed.")
        return self._solver

    def bitvec(self, name: str, width: int) -> z3.BitVecRef:
        self._require_solver()
        return z3.BitVec(name, width, ctx=self._context)

    def constant(self, value: int, width: int) -> z3.BitVecNumRef:
        self._require_solver()
        return z3.BitVecVal(value, width, ctx=self._context)

    def add(self, constraint: z3.BoolRef) -> None:
        self._require_solver().add(constraint)
        self._model = None

    def check(self) -> CheckResult:
        solver = self._require_solver()
        result = CheckResult(str(solver.check()))
        self._model = solver.model() if result is CheckResult.SAT else None
        logger.debug("Oracle check: %s", result.value)
        return result

    def evaluate(self, expression: z3.ExprRef) -> int:
        """Concrete value of ``expression`` in the model of the last SAT check.

        Any assertion added after that check discards the model.
        """
        self._require_solver()
        if self._model is None:
            raise RuntimeError("No model available; evaluate() needs a preceding SAT check.")
        return self._model.eval(expression, model_completion=True).as_long()

    def reason_unknown(self) -> str:
        return self._require_solver().reason_unknown()

    def close(self) -> None:
        if self._solver is None:
            return
        solver, self._solver = self._solver, None
        self._model = None
        self._context = None
        try:
            solver.reset()
        except z3.Z3Exception:
            logger.exception("Failed to release oracle session")
        else:
            logger.debug("Released oracle session")

    def __enter__(self) -> Z3Session:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
