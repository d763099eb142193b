"""
Skills Installer -- Transactional copy and removal of skill directories.

Install strategy:
1. Create a staging dir next to the target: <target parent>/.concinnitas-staging-<hex>/
2. Copy each skill into staging
3. Verify every staged skill has its SKILL.md
4. Move each skill from staging into the target (replacing the existing one)
5. Remove the staging dir

On any error the staging dir is removed and the original exception is
re-raised. Target entries are only touched once step 4 starts, so a failure
while copying or verifying never changes what OpenCode sees.
"""

import shutil
import uuid
from collections.abc import Sequence
from pathlib import Path

import structlog

from ..catalog import SKILL_FILE_NAME

logger = structlog.get_logger()

STAGING_PREFIX = ".concinnitas-staging-"


class SkillsError(Exception):
    """Base error for skill install operations."""

    pass


class SkillNotFoundError(SkillsError):
    """A requested skill does not exist in the source directory."""

    def __init__(self, name: str, path: Path):
        self.name = name
        self.path = path
        super().__init__(f"Bundled skill not found: {path}")


class MalformedSkillError(SkillsError):
    """A staged skill is missing its SKILL.md."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"{SKILL_FILE_NAME} missing in staged skill: {name}")


def _staging_dir_for(target_dir: Path) -> Path:
    return target_dir.parent / f"{STAGING_PREFIX}{uuid.uuid4().hex[:8]}"


def _remove_path(path: Path) -> None:
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    else:
        path.unlink()


def _cleanup_staging(staging_dir: Path) -> None:
    """Remove the staging dir without letting a failure here mask the caller's error."""
    try:
        if staging_dir.exists():
            shutil.rmtree(staging_dir)
    except OSError as e:
        logger.debug("skills.staging.cleanup_failed", path=str(staging_dir), error=str(e))


def atomic_copy_skills(
    source_dir: Path,
    target_dir: Path,
    skill_names: Sequence[str],
) -> None:
    """Copy skill directories from source to target through a staging dir.

    Args:
        source_dir: Directory holding the bundled skills.
        target_dir: Directory OpenCode loads skills from.
        skill_names: Names to install, in order.

    Raises:
        SkillNotFoundError: If a name does not exist under source_dir.
        MalformedSkillError: If a copied skill has no SKILL.md, including a
            source entry that is a file rather than a directory.
    """
    source_dir = Path(source_dir)
    target_dir = Path(target_dir)
    staging_dir = _staging_dir_for(target_dir)
    log = logger.bind(staging=str(staging_dir))

    try:
        staging_dir.mkdir(parents=True)

        for name in skill_names:
            src = source_dir / name
            if not src.exists():
                raise SkillNotFoundError(name, src)
            if src.is_dir():
                shutil.copytree(src, staging_dir / name)
            else:
                # a plain file is staged as-is and then fails the SKILL.md check
                shutil.copy2(src, staging_dir / name)
        log.debug("skills.copy.staged", count=len(skill_names))

        for name in skill_names:
            if not (staging_dir / name / SKILL_FILE_NAME).exists():
                raise MalformedSkillError(name)

        target_dir.mkdir(parents=True, exist_ok=True)

        for name in skill_names:
            staged = staging_dir / name
            target = target_dir / name
            if target.exists() or target.is_symlink():
                _remove_path(target)
            # rename on the same volume, copy + delete across volumes
            shutil.move(str(staged), str(target))
            log.debug("skills.copy.moved", name=name, target=str(target))

        _cleanup_staging(staging_dir)
        log.info("skills.copy.complete", target=str(target_dir), skills=list(skill_names))
    except BaseException as e:
        log.warning("skills.copy.failed", error=str(e))
        _cleanup_staging(staging_dir)
        raise


def remove_skills(target_dir: Path, skill_names: Sequence[str]) -> list[str]:
    """Remove the named skill directories from target_dir.

    Only the exact names given are touched. Names that do not exist are
    skipped silently.

    Returns:
        The names actually removed, in input order.
    """
    target_dir = Path(target_dir)
    removed: list[str] = []

    for name in skill_names:
        target = target_dir / name
        if target.exists() or target.is_symlink():
            _remove_path(target)
            removed.append(name)
            logger.info("skills.removed", name=name)

    return removed
