"""Core export logic including configuration, projection and orchestration."""

__all__ = [
    "config",
    "migration_logging",
    "migrator",
    "payload",
    "projector",
    "slug",
]
