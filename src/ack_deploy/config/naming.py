"""Name normalization for Kubernetes resources, images and registries."""

from __future__ import annotations

import re

from ack_deploy.infra.constants import DEFAULT_CONSTANTS

_INVALID_LABEL_CHARS = re.compile(r"[^a-z0-9-]")
_INVALID_IMAGE_CHARS = re.compile(r"[^a-z0-9._-]")
_HYPHEN_RUNS = re.compile(r"-+")
_PROTOCOL_PREFIX = re.compile(r"^https?://", re.IGNORECASE)

DOCKER_HUB_ALIASES = ("docker.io", "hub.docker.com", "docker.com", "dockerhub")


def sanitize_kubernetes_name(name: str) -> str:
    """Convert an arbitrary app name into a DNS-label-safe resource name.

    Lowercases, maps ``_`` and any other character outside ``[a-z0-9-]`` to
    ``-``, collapses hyphen runs and trims hyphens from both ends. Names that
    start with a digit get an ``app-`` prefix and names that end up empty
    fall back to ``laravel-app``.

    Examples:
        >>> sanitize_kubernetes_name("Test_App")
        'test-app'
        >>> sanitize_kubernetes_name("123abc")
        'app-123abc'
    """
    sanitized = _INVALID_LABEL_CHARS.sub("-", name.lower().replace("_", "-"))
    sanitized = _HYPHEN_RUNS.sub("-", sanitized).strip("-")

    if sanitized[:1].isdigit():
        sanitized = f"app-{sanitized}"

    return sanitized or DEFAULT_CONSTANTS.FALLBACK_APP_NAME


def extract_repository_name(app_name: str) -> str:
    """Strip an ``owner/`` prefix from a registry-style name.

    ``"algethamy/test_ack"`` becomes ``"test_ack"``; names without a slash
    are returned unchanged.
    """
    return app_name.split("/")[-1]


def kubernetes_app_name(raw_name: str) -> str:
    """Resource-name form of a raw APP_NAME value."""
    return sanitize_kubernetes_name(extract_repository_name(raw_name))


def image_repository(raw_name: str) -> str:
    """Image repository path for a raw APP_NAME value.

    Keeps an ``owner/`` prefix, lowercases each segment and replaces
    characters Docker rejects with ``-``.
    """
    segments = []
    for segment in raw_name.strip().lower().split("/"):
        cleaned = _INVALID_IMAGE_CHARS.sub("-", segment).strip("-")
        if cleaned:
            segments.append(cleaned)
    return "/".join(segments) or DEFAULT_CONSTANTS.FALLBACK_APP_NAME


def normalize_registry(registry: str) -> str:
    """Normalize user-entered registry URLs.

    Docker Hub spellings collapse to ``docker.io`` and any ``http(s)://``
    prefix is removed.
    """
    registry = _PROTOCOL_PREFIX.sub("", registry.strip()).rstrip("/")
    if registry.lower() in DOCKER_HUB_ALIASES:
        return "docker.io"
    return registry
