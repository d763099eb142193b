"""
Install metadata -- the .concinnitas-meta.json record.

Records which version was installed, when, and which skills. It is the only
durable state besides the skill directories themselves: rewritten wholesale
on every install and deleted on uninstall. No locking; last writer wins.
"""

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import structlog

logger = structlog.get_logger()


@dataclass
class InstallMetadata:
    """Serializable install record."""

    version: str
    installed_at: str  # ISO-8601, UTC
    skills: list[str] = field(default_factory=list)

    @classmethod
    def now(cls, version: str, skills: list[str]) -> "InstallMetadata":
        """Create a record stamped with the current time."""
        stamp = datetime.now(timezone.utc).isoformat(timespec="milliseconds")
        return cls(version=version, installed_at=stamp.replace("+00:00", "Z"), skills=list(skills))

    @property
    def installed_date(self) -> str:
        """Date part of the timestamp (YYYY-MM-DD)."""
        return self.installed_at.split("T")[0]

    def to_dict(self) -> dict[str, Any]:
        """Convert to the on-disk JSON shape."""
        return {
            "version": self.version,
            "installedAt": self.installed_at,
            "skills": list(self.skills),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "InstallMetadata":
        """Create an instance from the on-disk JSON shape.

        Raises:
            KeyError: If version or installedAt is absent.
            TypeError: If a field has the wrong type.
        """
        version = data["version"]
        installed_at = data["installedAt"]
        skills = data.get("skills", [])
        if not isinstance(version, str) or not isinstance(installed_at, str):
            raise TypeError("version and installedAt must be strings")
        if not isinstance(skills, list):
            raise TypeError("skills must be a list")
        return cls(version=version, installed_at=installed_at, skills=[str(s) for s in skills])


class MetadataStore:
    """Reads and writes the install metadata file."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.exists()

    def load(self) -> InstallMetadata | None:
        """Load the record.

        Returns:
            InstallMetadata, or None if the file is absent, not UTF-8 or
            cannot be parsed.
        """
        if not self.path.exists():
            return None

        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            return InstallMetadata.from_dict(data)
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.warning("metadata.load_error", path=str(self.path), error=str(e))
            return None

    def save(self, meta: InstallMetadata) -> None:
        """Overwrite the file with the given record."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(
            json.dumps(meta.to_dict(), indent=2, ensure_ascii=False) + "\n",
            encoding="utf-8",
        )
        logger.debug("metadata.saved", path=str(self.path), version=meta.version)

    def delete(self) -> bool:
        """Remove the file.

        Returns:
            True if the file existed and was removed.
        """
        if not self.path.exists():
            return False
        self.path.unlink()
        logger.debug("metadata.deleted", path=str(self.path))
        return True
