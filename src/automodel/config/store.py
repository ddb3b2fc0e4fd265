"""Process-wide configuration snapshot store.

The store holds exactly one validated EngineConfig at a time. Readers take
the current snapshot with a single attribute read and never see a partially
updated configuration: reload validates the new document completely before
swapping the reference, and a failed reload leaves the previous snapshot in
place.

Usage:
    store = get_config_store()
    config = store.snapshot

    result = store.reload()
    if result.is_err:
        log.warning("reload failed", error=str(result.error))
"""

from __future__ import annotations

from pathlib import Path
from threading import RLock

from automodel.config.loader import find_config_file, load_config, load_config_or_default
from automodel.config.models import EngineConfig, get_default_config
from automodel.core.errors import ConfigError
from automodel.core.types import Result
from automodel.observability.logging import apply_verbosity, get_logger

log = get_logger(__name__)


class ConfigStore:
    """Holds the active configuration snapshot.

    Attributes:
        source: Path of the document the active snapshot came from, or None
            for built-in defaults and directly published snapshots.
    """

    def __init__(self, config: EngineConfig | None = None, *, source: Path | None = None) -> None:
        self._lock = RLock()
        self._snapshot = config if config is not None else get_default_config()
        self.source = source

    @classmethod
    def from_path(cls, config_path: Path | None = None) -> ConfigStore:
        """Create a store from a document, or the defaults if none is found.

        Raises:
            ConfigError: If the located document is malformed or invalid.
        """
        path = config_path if config_path is not None else find_config_file()
        if path is None:
            return cls()
        return cls(load_config(path), source=path)

    @property
    def snapshot(self) -> EngineConfig:
        """The active configuration. Read once per operation."""
        return self._snapshot

    def publish(self, config: EngineConfig, *, source: Path | None = None) -> EngineConfig:
        """Replace the active snapshot with an already validated config.

        Returns:
            The snapshot that was replaced.
        """
        with self._lock:
            previous = self._snapshot
            self._snapshot = config
            self.source = source
        apply_verbosity(config.log_level)
        log.info(
            "config.snapshot.replaced",
            source=str(source) if source else None,
            strategies=sorted(config.strategies),
        )
        return previous

    def reload(self, config_path: Path | None = None) -> Result[EngineConfig, ConfigError]:
        """Load a document and publish it if it validates.

        Args:
            config_path: Document to load. Defaults to the current source, or
                to discovery when the store has none.

        Returns:
            Result with the new snapshot, or the ConfigError that kept the
            previous snapshot active.
        """
        path = config_path if config_path is not None else self.source
        try:
            config = load_config(path) if path is not None else load_config_or_default()
        except ConfigError as e:
            log.warning(
                "config.snapshot.reload_failed",
                source=str(path) if path else None,
                error=e.message,
            )
            return Result.err(e)

        self.publish(config, source=path)
        return Result.ok(config)


_global_store: ConfigStore | None = None
_store_lock = RLock()


def get_config_store(config_path: Path | None = None) -> ConfigStore:
    """Get or create the process-wide configuration store.

    The first call loads configuration (from config_path, or by discovery).
    Later calls return the same store and ignore config_path; use reload()
    to switch documents.

    A malformed or invalid document never becomes the snapshot: the store
    starts on the built-in defaults with the bad document as its source, so
    reload() picks it up once it is corrected.
    """
    global _global_store

    with _store_lock:
        if _global_store is None:
            try:
                _global_store = ConfigStore.from_path(config_path)
            except ConfigError as e:
                source = Path(e.config_file) if e.config_file else config_path
                log.warning(
                    "config.snapshot.load_failed",
                    source=str(source) if source else None,
                    error=e.message,
                )
                _global_store = ConfigStore(source=source)
        return _global_store


def reset_config_store() -> None:
    """Drop the process-wide store. Primarily for tests."""
    global _global_store

    with _store_lock:
        _global_store = None
