"""
Storage for the project's sprinkler configuration.

Stores are injected into the services that need sprinkler defaults; there is
no module-level config state.
"""
import logging
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Protocol

from pydantic import ValidationError

from irrigation_planner.domain.models import SprinklerConfig

logger = logging.getLogger(__name__)


class SprinklerConfigStore(Protocol):
    """Load/save interface for the sprinkler configuration."""

    def load(self) -> Optional[SprinklerConfig]:
        ...

    def save(self, config: SprinklerConfig) -> SprinklerConfig:
        ...

    def clear(self) -> None:
        ...


def _stamp(config: SprinklerConfig, previous: Optional[SprinklerConfig]) -> SprinklerConfig:
    now = datetime.now(timezone.utc).isoformat()
    created_at = previous.created_at if previous and previous.created_at else now
    return config.model_copy(update={"created_at": created_at, "updated_at": now})


class InMemorySprinklerConfigStore:
    """Sprinkler config kept in process memory."""

    def __init__(self, initial: Optional[SprinklerConfig] = None):
        self._config = initial
        self._lock = threading.Lock()

    def load(self) -> Optional[SprinklerConfig]:
        return self._config

    def save(self, config: SprinklerConfig) -> SprinklerConfig:
        with self._lock:
            self._config = _stamp(config, self._config)
            return self._config

    def clear(self) -> None:
        with self._lock:
            self._config = None


class JsonFileSprinklerConfigStore:
    """Sprinkler config persisted as a JSON document."""

    def __init__(self, path: str):
        self.path = Path(path)
        self._lock = threading.Lock()

    def load(self) -> Optional[SprinklerConfig]:
        """
        Read the stored config.

        Returns:
            The config, or None when the file is missing or unreadable
        """
        if not self.path.exists():
            return None

        try:
            return SprinklerConfig.model_validate_json(self.path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, ValidationError) as e:
            logger.warning(f"Could not read sprinkler config from {self.path}: {e}")
            return None

    def save(self, config: SprinklerConfig) -> SprinklerConfig:
        """
        Write the config, keeping the original creation time.

        Raises:
            OSError: If the file cannot be written
        """
        with self._lock:
            stamped = _stamp(config, self.load())
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(stamped.model_dump_json(by_alias=True, indent=2), encoding="utf-8")
            logger.info(f"Saved sprinkler config to {self.path}")
            return stamped

    def clear(self) -> None:
        with self._lock:
            self.path.unlink(missing_ok=True)
