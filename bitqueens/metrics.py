from dataclasses import asdict, dataclass


@dataclass
class SearchStats:
    oracle_checks: int = 0
    models_extracted: int = 0
    blocking_clauses: int = 0
    solutions_found: int = 0
    elapsed_ms: float = 0.0

    def to_dict(self) -> dict[str, int | float]:
        return asdict(self)
