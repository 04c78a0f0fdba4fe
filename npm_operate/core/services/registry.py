"""
Registry query — the latest published version of a package.

One read-only request per name against an npm-compatible registry.
Asks for the abbreviated ("corgi") document, which carries
``dist-tags`` without the full version history.
"""

from __future__ import annotations

import json
import logging
import urllib.error
import urllib.parse
import urllib.request

from npm_operate import __version__
from npm_operate.core.config.loader import DEFAULT_REGISTRY_URL
from npm_operate.core.errors import RegistryLookupError

logger = logging.getLogger(__name__)

_ACCEPT = "application/vnd.npm.install-v1+json; q=1.0, application/json; q=0.8"


def package_url(name: str, registry_url: str = DEFAULT_REGISTRY_URL) -> str:
    """Registry URL of a package document (``@scope/pkg`` → ``@scope%2Fpkg``)."""
    return f"{registry_url.rstrip('/')}/{urllib.parse.quote(name, safe='@')}"


def latest_version(
    name: str,
    *,
    registry_url: str = DEFAULT_REGISTRY_URL,
    timeout: float = 10.0,
) -> str:
    """Fetch the latest published version of ``name``.

    Raises:
        RegistryLookupError: If the package is unknown, the registry is
            unreachable or answers garbage, or no version is published.
    """
    url = package_url(name, registry_url)
    req = urllib.request.Request(
        url,
        headers={"Accept": _ACCEPT, "User-Agent": f"npm-operate/{__version__}"},
    )
    logger.debug("GET %s", url)

    try:
        with urllib.request.urlopen(req, timeout=timeout) as resp:
            body = resp.read()
    except urllib.error.HTTPError as e:
        if e.code == 404:
            raise RegistryLookupError(name, "package not found") from e
        raise RegistryLookupError(name, f"registry returned HTTP {e.code}") from e
    except (urllib.error.URLError, OSError) as e:
        raise RegistryLookupError(name, f"registry unreachable: {e}") from e

    try:
        data = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise RegistryLookupError(name, "registry returned invalid JSON") from e

    if not isinstance(data, dict):
        raise RegistryLookupError(name, "unexpected registry response")

    dist_tags = data.get("dist-tags")
    version = dist_tags.get("latest") if isinstance(dist_tags, dict) else None
    if not version:
        version = data.get("version")
    if not isinstance(version, str) or not version:
        raise RegistryLookupError(name, "no published version")

    logger.info("Latest %s is %s", name, version)
    return version
