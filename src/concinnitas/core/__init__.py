"""
Core skill operations: transactional install, removal and verification.
"""

from .installer import (
    MalformedSkillError,
    SkillNotFoundError,
    SkillsError,
    atomic_copy_skills,
    remove_skills,
)
from .verify import VerifyResult, check_host_config_exists, verify_installation

__all__ = [
    "MalformedSkillError",
    "SkillNotFoundError",
    "SkillsError",
    "VerifyResult",
    "atomic_copy_skills",
    "check_host_config_exists",
    "remove_skills",
    "verify_installation",
]
