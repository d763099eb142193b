"""
Post-install verification of skill directories.

A skill is considered structurally valid when its SKILL.md opens with a
frontmatter block: the first 10 lines start with '---' and contain 'name:'.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path

import structlog

from ..catalog import SKILL_FILE_NAME
from ..paths import get_host_config_dir

logger = structlog.get_logger()

# Number of leading lines inspected for the frontmatter markers
HEADER_LINES = 10


@dataclass
class VerifyResult:
    """Partition of the checked skill names."""

    valid: list[str] = field(default_factory=list)
    invalid: list[str] = field(default_factory=list)
    missing: list[str] = field(default_factory=list)

    @property
    def installed(self) -> list[str]:
        """Names present on disk, valid or not."""
        return self.valid + self.invalid


def _has_frontmatter(content: str) -> bool:
    header = "\n".join(content.split("\n")[:HEADER_LINES])
    return header.startswith("---") and "name:" in header


def verify_installation(target_dir: Path, skill_names: Sequence[str]) -> VerifyResult:
    """Classify each skill as valid, invalid or missing.

    Never raises: a SKILL.md that cannot be read counts as invalid. Bytes
    that are not valid UTF-8 are replaced, not treated as read errors.

    Args:
        target_dir: Directory the skills were installed into.
        skill_names: Names to check, in display order.

    Returns:
        VerifyResult with every name in exactly one list.
    """
    result = VerifyResult()

    for name in skill_names:
        skill_md = Path(target_dir) / name / SKILL_FILE_NAME

        if not skill_md.exists():
            result.missing.append(name)
            continue

        try:
            content = skill_md.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            logger.warning("skills.verify.read_error", name=name, error=str(e))
            result.invalid.append(name)
            continue

        if _has_frontmatter(content):
            result.valid.append(name)
        else:
            result.invalid.append(name)

    logger.debug(
        "skills.verify.complete",
        valid=len(result.valid),
        invalid=len(result.invalid),
        missing=len(result.missing),
    )
    return result


def check_host_config_exists(env: Mapping[str, str] | None = None) -> bool:
    """Whether the OpenCode config directory exists."""
    return get_host_config_dir(env).exists()
