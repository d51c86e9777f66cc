from dataclasses import asdict, dataclass


@dataclass
class UpsertMetrics:
    """Outcome of one batch through the upsert gateway."""
    received: int = 0
    vetoed: int = 0
    rejected: int = 0
    invalid: int = 0
    duplicates: int = 0
    images_attempted: int = 0
    images_recovered: int = 0
    upserted: int = 0
    duration_ms: float = 0.0

    def as_dict(self):
        return asdict(self)
