"""Runtime configuration for vparecon."""

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional

from vparecon.domain.errors import ConfigurationError

INSERT_ONLY = "insert_only"
UPSERT_ON_KEY = "upsert_on_key"

# Unique keys the registrants table actually enforces
ALLOWED_CONFLICT_KEYS = {("phone", "vpa"), ("id",)}


@dataclass(frozen=True)
class ConflictPolicy:
    """How an import resolves rows that collide with existing registrants."""

    mode: str = UPSERT_ON_KEY
    conflict_key: tuple[str, ...] = ("phone", "vpa")

    def __post_init__(self):
        if self.mode not in (INSERT_ONLY, UPSERT_ON_KEY):
            raise ConfigurationError(
                f"Unknown conflict policy '{self.mode}' (expected '{INSERT_ONLY}' or '{UPSERT_ON_KEY}')"
            )
        if self.mode == UPSERT_ON_KEY and tuple(self.conflict_key) not in ALLOWED_CONFLICT_KEYS:
            allowed = " or ".join(",".join(k) for k in sorted(ALLOWED_CONFLICT_KEYS))
            raise ConfigurationError(
                f"Unsupported conflict key '{','.join(self.conflict_key)}' (expected {allowed})"
            )

    @classmethod
    def insert_only(cls) -> "ConflictPolicy":
        return cls(mode=INSERT_ONLY, conflict_key=())

    @classmethod
    def upsert_on_key(cls, *columns: str) -> "ConflictPolicy":
        return cls(mode=UPSERT_ON_KEY, conflict_key=tuple(columns))

    @classmethod
    def parse(cls, mode: str, conflict_key: Optional[str] = None) -> "ConflictPolicy":
        """Build a policy from CLI/environment strings.

        Args:
            mode: 'insert_only', 'upsert' or 'upsert_on_key'
            conflict_key: Comma separated column list, e.g. 'phone,vpa'
        """
        mode = mode.strip().lower()
        if mode == "upsert":
            mode = UPSERT_ON_KEY
        if mode == INSERT_ONLY:
            return cls.insert_only()
        columns = tuple(c.strip().lower() for c in (conflict_key or "phone,vpa").split(",") if c.strip())
        return cls(mode=mode, conflict_key=columns)

    @property
    def is_upsert(self) -> bool:
        return self.mode == UPSERT_ON_KEY


@dataclass(frozen=True)
class ReconConfig:
    """Batch sizes, ceilings and policies shared by the domain services."""

    max_import_batch_size: int = 1000
    max_import_records: int = 3000
    max_delete_batch_size: int = 1000
    matching_chunk_size: int = 500
    store_page_size: int = 1000
    conflict_policy: ConflictPolicy = field(default_factory=ConflictPolicy)
    privileged_store: bool = True

    def __post_init__(self):
        for name in (
            "max_import_batch_size",
            "max_import_records",
            "max_delete_batch_size",
            "matching_chunk_size",
            "store_page_size",
        ):
            value = getattr(self, name)
            if not isinstance(value, int) or value < 1:
                raise ConfigurationError(f"{name} must be a positive integer, got {value!r}")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ReconConfig":
        """Build configuration from VPARECON_* environment variables."""
        env = os.environ if environ is None else environ
        defaults = cls()

        def _int(name: str, default: int) -> int:
            raw = env.get(f"VPARECON_{name.upper()}")
            if raw is None or raw.strip() == "":
                return default
            try:
                return int(raw)
            except ValueError:
                raise ConfigurationError(f"VPARECON_{name.upper()} must be an integer, got '{raw}'")

        policy = defaults.conflict_policy
        if env.get("VPARECON_CONFLICT_POLICY"):
            policy = ConflictPolicy.parse(
                env["VPARECON_CONFLICT_POLICY"], env.get("VPARECON_CONFLICT_KEY")
            )

        privileged = env.get("VPARECON_PRIVILEGED_STORE", "true").strip().lower()
        return cls(
            max_import_batch_size=_int("max_import_batch_size", defaults.max_import_batch_size),
            max_import_records=_int("max_import_records", defaults.max_import_records),
            max_delete_batch_size=_int("max_delete_batch_size", defaults.max_delete_batch_size),
            matching_chunk_size=_int("matching_chunk_size", defaults.matching_chunk_size),
            store_page_size=_int("store_page_size", defaults.store_page_size),
            conflict_policy=policy,
            privileged_store=privileged in ("1", "true", "yes", "on"),
        )
