"""Path policies: which endpoints verify requests and for which extension."""

import logging
from typing import Iterable, Literal, Union

from pydantic import BaseModel, ConfigDict

logger = logging.getLogger(__name__)


class VerifiedPath(BaseModel):
    """Endpoint that verifies the signature and expects one applicationId."""

    model_config = ConfigDict(frozen=True)

    path: str
    application_id: str
    requires_verification: Literal[True] = True

    def check(self, application_id: str | None) -> bool:
        """Exact, case-sensitive match. An empty expected id matches nothing."""
        if not self.application_id or application_id is None:
            return False
        return application_id == self.application_id


class DebugPath(BaseModel):
    """Endpoint that skips verification. Use for debugging only."""

    model_config = ConfigDict(frozen=True)

    path: str
    requires_verification: Literal[False] = False

    def check(self, application_id: str | None) -> bool:
        return True


PathEntry = Union[VerifiedPath, DebugPath]


class PathPolicy:
    """Ordered, immutable set of registered endpoint paths."""

    def __init__(self, entries: Iterable[PathEntry]) -> None:
        kept: list[PathEntry] = []
        for entry in entries:
            if not entry.path:
                logger.warning("Ignoring path policy entry with an empty path")
                continue
            if any(existing.path == entry.path for existing in kept):
                logger.warning(f"Duplicate path policy entry for {entry.path}, keeping the first")
                continue
            kept.append(entry)
        self._entries = tuple(kept)

    @property
    def entries(self) -> tuple[PathEntry, ...]:
        return self._entries

    @property
    def paths(self) -> list[str]:
        return [entry.path for entry in self._entries]

    def lookup(self, path: str) -> PathEntry | None:
        """Entry whose path equals `path` exactly, or None."""
        for entry in self._entries:
            if entry.path == path:
                return entry
        return None

    def authorize(self, path: str, application_id: str | None) -> bool:
        """
        Decide whether a decoded request may be served on `path`.

        Unregistered paths are never authorized. Debug paths always are.
        Verified paths require the decoded applicationId to match exactly.
        """
        entry = self.lookup(path)
        if entry is None:
            return False
        return entry.check(application_id)

    @classmethod
    def from_settings(cls, settings) -> "PathPolicy":
        """Build the policy from application settings."""
        entries: list[PathEntry] = []

        if settings.application_id:
            entries.append(VerifiedPath(path=settings.api_path, application_id=settings.application_id))

        for path, application_id in settings.verification_paths.items():
            entries.append(VerifiedPath(path=path, application_id=application_id))

        if settings.debug_path:
            entries.append(DebugPath(path=settings.debug_path))

        for path in settings.debug_paths:
            entries.append(DebugPath(path=path))

        return cls(entries)
