"""
Path resolution for the OpenCode configuration tree.

Every function takes the environment as an explicit mapping (defaulting to
os.environ) and only computes paths: nothing here creates or inspects files.

Layout:
    $XDG_CONFIG_HOME (or ~/.config)
    └── opencode/
        ├── .concinnitas-meta.json
        └── skills/
            ├── design-track/SKILL.md
            └── ...
"""

import os
from collections.abc import Mapping
from pathlib import Path

CONFIG_HOME_ENV = "XDG_CONFIG_HOME"
HOST_APP_DIR = "opencode"
SKILLS_DIR = "skills"
META_FILE_NAME = ".concinnitas-meta.json"


def get_config_home(env: Mapping[str, str] | None = None) -> Path:
    """Return the config root: $XDG_CONFIG_HOME when set and non-empty, else ~/.config."""
    env = os.environ if env is None else env
    override = env.get(CONFIG_HOME_ENV)
    if override:
        return Path(os.path.abspath(os.path.expanduser(override)))
    return Path(os.path.abspath(Path.home() / ".config"))


def get_host_config_dir(env: Mapping[str, str] | None = None) -> Path:
    """OpenCode config directory (parent of skills/)."""
    return get_config_home(env) / HOST_APP_DIR


def get_skills_target_dir(env: Mapping[str, str] | None = None) -> Path:
    """Directory OpenCode loads skills from."""
    return get_host_config_dir(env) / SKILLS_DIR


def get_bundled_skills_dir() -> Path:
    """Skills shipped inside the installed concinnitas package."""
    return Path(__file__).resolve().parent / SKILLS_DIR


def get_meta_file_path(env: Mapping[str, str] | None = None) -> Path:
    """Path of the install metadata file.

    Lives in the OpenCode config dir rather than inside skills/, so OpenCode
    never tries to load it as a skill.
    """
    return get_host_config_dir(env) / META_FILE_NAME
