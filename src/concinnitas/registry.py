"""
Package registry client for the update check.

A single GET against the registry with a bounded timeout. No retries: any
failure is reported to the caller as RegistryError and the update command
treats it as "could not check".
"""

from typing import Any

import httpx
import structlog

logger = structlog.get_logger()

DEFAULT_REGISTRY_URL = "https://pypi.org/pypi/concinnitas/json"
DEFAULT_TIMEOUT = 10.0


class RegistryError(Exception):
    """The latest version could not be determined."""

    pass


def _extract_version(payload: Any) -> str | None:
    """Read `version`, falling back to `info.version` (PyPI JSON API)."""
    if not isinstance(payload, dict):
        return None
    version = payload.get("version")
    if not version and isinstance(payload.get("info"), dict):
        version = payload["info"].get("version")
    return version if isinstance(version, str) and version else None


def fetch_latest_version(
    url: str = DEFAULT_REGISTRY_URL,
    timeout: float = DEFAULT_TIMEOUT,
    client: httpx.Client | None = None,
) -> str:
    """Fetch the latest published version.

    Args:
        url: Registry endpoint returning JSON with a version field.
        timeout: Seconds before the request is abandoned.
        client: Optional httpx client (tests inject a MockTransport).

    Returns:
        The version string.

    Raises:
        RegistryError: On transport errors, timeouts, non-200 status,
            invalid JSON or a missing version field.
    """
    log = logger.bind(url=url)
    own_client = client is None
    http = client or httpx.Client(timeout=timeout, follow_redirects=True)

    try:
        response = http.get(url, headers={"Accept": "application/json"}, timeout=timeout)
    except httpx.HTTPError as e:
        log.warning("registry.request_failed", error=str(e))
        raise RegistryError(f"Registry request failed: {e}") from e
    finally:
        if own_client:
            http.close()

    if response.status_code != 200:
        log.warning("registry.bad_status", status=response.status_code)
        raise RegistryError(f"Registry returned {response.status_code}")

    try:
        payload = response.json()
    except ValueError as e:
        log.warning("registry.invalid_json", error=str(e))
        raise RegistryError("Failed to parse registry response") from e

    version = _extract_version(payload)
    if version is None:
        raise RegistryError("No version field in registry response")

    log.debug("registry.latest_version", version=version)
    return version
