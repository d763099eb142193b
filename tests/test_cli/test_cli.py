"""
Tests for the concinnitas CLI.

Covers:
- Global flags: --help/-h, --version/-v, no command, unknown command, --config
- install / list / uninstall lifecycle against an isolated XDG_CONFIG_HOME
- install failure reporting
- update with a mocked registry
"""

import json
import logging
from pathlib import Path
from unittest.mock import patch

import pytest
import structlog
from click.testing import CliRunner

from concinnitas import __version__
from concinnitas.catalog import SKILL_NAMES
from concinnitas.cli import EXIT_CONFIG_ERROR, EXIT_FAILED, main
from concinnitas.registry import RegistryError


# ── Fixtures ──────────────────────────────────────────────────────────────


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    logging.root.handlers.clear()
    structlog.reset_defaults()


@pytest.fixture
def config_home(tmp_path: Path) -> Path:
    return tmp_path / "config"


@pytest.fixture
def runner(config_home: Path) -> CliRunner:
    return CliRunner(env={"XDG_CONFIG_HOME": str(config_home), "CONCINNITAS_REGISTRY_URL": None})


@pytest.fixture
def skills_dir(config_home: Path) -> Path:
    return config_home / "opencode" / "skills"


@pytest.fixture
def meta_path(config_home: Path) -> Path:
    return config_home / "opencode" / ".concinnitas-meta.json"


def invoke(runner: CliRunner, *args: str):
    return runner.invoke(main, list(args), catch_exceptions=False)


# ── Tests: global flags ───────────────────────────────────────────────────


class TestGlobalFlags:
    def test_version_long(self, runner: CliRunner):
        result = invoke(runner, "--version")
        assert result.exit_code == 0
        assert result.output.strip() == __version__

    def test_version_short(self, runner: CliRunner):
        result = invoke(runner, "-v")
        assert result.exit_code == 0
        assert result.output.strip() == __version__

    @pytest.mark.parametrize("flag", ["--help", "-h"])
    def test_help(self, runner: CliRunner, flag: str):
        result = invoke(runner, flag)
        assert result.exit_code == 0
        for command in ["install", "uninstall", "update", "list"]:
            assert command in result.output

    def test_no_command_prints_help(self, runner: CliRunner):
        result = invoke(runner)
        assert result.exit_code == 0
        assert "Usage:" in result.output

    def test_unknown_command_fails(self, runner: CliRunner):
        result = runner.invoke(main, ["frobnicate"])
        assert result.exit_code != 0
        assert "frobnicate" in result.output

    def test_invalid_config_file(self, runner: CliRunner, tmp_path: Path):
        config = tmp_path / "bad.yaml"
        config.write_text("registry:\n  retries: 3\n", encoding="utf-8")

        result = runner.invoke(main, ["--config", str(config), "list"])

        assert result.exit_code == EXIT_CONFIG_ERROR
        assert "Invalid configuration" in result.output


# ── Tests: install ────────────────────────────────────────────────────────


class TestInstall:
    def test_installs_every_bundled_skill(self, runner: CliRunner, skills_dir: Path):
        result = invoke(runner, "install")

        assert result.exit_code == 0
        for name in SKILL_NAMES:
            assert (skills_dir / name / "SKILL.md").is_file()
        assert f"{len(SKILL_NAMES)} skills installed. Restart OpenCode" in result.output
        assert "/design:discover" in result.output

    def test_warns_when_opencode_dir_missing(self, runner: CliRunner):
        result = invoke(runner, "install")
        assert "OpenCode config directory not found" in result.output

    def test_no_warning_when_opencode_dir_exists(self, runner: CliRunner, config_home: Path):
        (config_home / "opencode").mkdir(parents=True)

        result = invoke(runner, "install")

        assert "OpenCode config directory not found" not in result.output

    def test_writes_metadata(self, runner: CliRunner, meta_path: Path):
        invoke(runner, "install")

        data = json.loads(meta_path.read_text(encoding="utf-8"))
        assert data["version"] == __version__
        assert data["skills"] == list(SKILL_NAMES)
        assert "T" in data["installedAt"]

    def test_metadata_not_inside_skills_dir(self, runner: CliRunner, skills_dir: Path):
        invoke(runner, "install")

        assert sorted(p.name for p in skills_dir.iterdir()) == sorted(SKILL_NAMES)

    def test_reinstall_restores_modified_skill(self, runner: CliRunner, skills_dir: Path):
        invoke(runner, "install")
        skill_md = skills_dir / "design-flows" / "SKILL.md"
        original = skill_md.read_bytes()
        skill_md.write_text("modified", encoding="utf-8")

        result = invoke(runner, "install")

        assert result.exit_code == 0
        assert skill_md.read_bytes() == original

    def test_missing_bundled_skill_fails(
        self, runner: CliRunner, tmp_path: Path, skills_dir: Path, meta_path: Path
    ):
        empty = tmp_path / "empty-bundle"
        empty.mkdir()

        with patch("concinnitas.cli.get_bundled_skills_dir", return_value=empty):
            result = runner.invoke(main, ["install"])

        assert result.exit_code == EXIT_FAILED
        assert "[X] Bundled skill not found" in result.output
        assert not meta_path.exists()
        assert list(skills_dir.iterdir()) == []
        assert not any(p.name.startswith(".concinnitas-staging-") for p in skills_dir.parent.iterdir())


# ── Tests: list ───────────────────────────────────────────────────────────


class TestList:
    def test_nothing_installed(self, runner: CliRunner):
        result = invoke(runner, "list")

        assert result.exit_code == 0
        assert f"0/{len(SKILL_NAMES)} skills installed." in result.output
        assert result.output.count("[X] missing") == len(SKILL_NAMES)

    def test_after_install(self, runner: CliRunner):
        invoke(runner, "install")

        result = invoke(runner, "list")

        assert f"{len(SKILL_NAMES)}/{len(SKILL_NAMES)} skills installed." in result.output
        assert f"(v{__version__}, installed " in result.output
        assert result.output.count("[OK] installed") == len(SKILL_NAMES)

    def test_invalid_skill_shown_as_warning(self, runner: CliRunner, skills_dir: Path):
        invoke(runner, "install")
        (skills_dir / "design-system" / "SKILL.md").write_text("no frontmatter", encoding="utf-8")

        result = invoke(runner, "list")

        assert result.exit_code == 0
        assert "[!] installed (invalid SKILL.md)" in result.output
        assert f"{len(SKILL_NAMES)}/{len(SKILL_NAMES)} skills installed." in result.output

    def test_corrupt_metadata_is_ignored(self, runner: CliRunner, meta_path: Path):
        invoke(runner, "install")
        meta_path.write_text("{broken", encoding="utf-8")

        result = invoke(runner, "list")

        assert result.exit_code == 0
        assert "Concinnitas Skills\n" in result.output

    def test_non_utf8_metadata_is_ignored(self, runner: CliRunner, meta_path: Path):
        invoke(runner, "install")
        meta_path.write_bytes(b"\xff\xfe garbage")

        result = invoke(runner, "list")

        assert result.exit_code == 0
        assert "Concinnitas Skills\n" in result.output
        assert f"{len(SKILL_NAMES)}/{len(SKILL_NAMES)} skills installed." in result.output


# ── Tests: uninstall ──────────────────────────────────────────────────────


class TestUninstall:
    def test_removes_skills_and_metadata(self, runner: CliRunner, skills_dir: Path, meta_path: Path):
        invoke(runner, "install")

        result = invoke(runner, "uninstall")

        assert result.exit_code == 0
        assert f"{len(SKILL_NAMES)} skills removed." in result.output
        assert "Removed .concinnitas-meta.json" in result.output
        assert not meta_path.exists()
        for name in SKILL_NAMES:
            assert not (skills_dir / name).exists()

    def test_keeps_other_skills(self, runner: CliRunner, skills_dir: Path):
        invoke(runner, "install")
        (skills_dir / "my-own-skill").mkdir()
        (skills_dir / "my-own-skill" / "SKILL.md").write_text("---\nname: mine\n---\n")

        invoke(runner, "uninstall")

        assert (skills_dir / "my-own-skill" / "SKILL.md").exists()

    def test_nothing_to_remove(self, runner: CliRunner):
        result = invoke(runner, "uninstall")

        assert result.exit_code == 0
        assert "Nothing to remove." in result.output


# ── Tests: update ─────────────────────────────────────────────────────────


class TestUpdate:
    def test_not_installed(self, runner: CliRunner):
        with patch("concinnitas.cli.fetch_latest_version") as mock_fetch:
            result = invoke(runner, "update")

        assert result.exit_code == 0
        assert "Run `install` first" in result.output
        mock_fetch.assert_not_called()

    def test_up_to_date(self, runner: CliRunner):
        invoke(runner, "install")

        with patch("concinnitas.cli.fetch_latest_version", return_value=__version__):
            result = invoke(runner, "update")

        assert result.exit_code == 0
        assert f"Already up to date (v{__version__})." in result.output

    def test_update_available(self, runner: CliRunner):
        invoke(runner, "install")

        with patch("concinnitas.cli.fetch_latest_version", return_value="9.9.9"):
            result = invoke(runner, "update")

        assert result.exit_code == 0
        assert f"Update available: v{__version__} -> v9.9.9" in result.output

    def test_registry_failure_is_a_warning(self, runner: CliRunner):
        invoke(runner, "install")

        with patch(
            "concinnitas.cli.fetch_latest_version",
            side_effect=RegistryError("Registry returned 503"),
        ):
            result = invoke(runner, "update")

        assert result.exit_code == 0
        assert "[!] Could not check for updates" in result.output

    def test_corrupt_metadata_falls_back_to_package_version(
        self, runner: CliRunner, meta_path: Path
    ):
        meta_path.parent.mkdir(parents=True)
        meta_path.write_text("not json", encoding="utf-8")

        with patch("concinnitas.cli.fetch_latest_version", return_value=__version__):
            result = invoke(runner, "update")

        assert f"Already up to date (v{__version__})." in result.output

    def test_non_utf8_metadata_falls_back_to_package_version(
        self, runner: CliRunner, meta_path: Path
    ):
        meta_path.parent.mkdir(parents=True)
        meta_path.write_bytes(b"\xff\xfe garbage")

        with patch("concinnitas.cli.fetch_latest_version", return_value=__version__):
            result = invoke(runner, "update")

        assert result.exit_code == 0
        assert f"Already up to date (v{__version__})." in result.output

    def test_uses_installed_version_from_metadata(self, runner: CliRunner, meta_path: Path):
        meta_path.parent.mkdir(parents=True)
        meta_path.write_text(
            json.dumps({"version": "0.9.0", "installedAt": "2026-01-01T00:00:00Z", "skills": []}),
            encoding="utf-8",
        )

        with patch("concinnitas.cli.fetch_latest_version", return_value="1.0.0"):
            result = invoke(runner, "update")

        assert "Update available: v0.9.0 -> v1.0.0" in result.output

    def test_registry_settings_from_env(self, runner: CliRunner):
        invoke(runner, "install")

        with patch("concinnitas.cli.fetch_latest_version", return_value=__version__) as mock_fetch:
            runner.invoke(
                main,
                ["update"],
                env={"CONCINNITAS_REGISTRY_URL": "https://mirror.example.test/latest"},
                catch_exceptions=False,
            )

        mock_fetch.assert_called_once_with("https://mirror.example.test/latest", timeout=10.0)
