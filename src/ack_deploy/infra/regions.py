"""ACK region catalogue and recommended resource profiles."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class AckRegion:
    """An Alibaba Cloud region that offers ACK."""

    id: str
    name: str
    registry: str
    endpoint: str


@dataclass(frozen=True)
class ResourceProfile:
    """Container resource requests/limits and autoscaling bounds."""

    cpu_request: str = "50m"
    memory_request: str = "64Mi"
    cpu_limit: str = "200m"
    memory_limit: str = "256Mi"
    min_replicas: int = 1
    max_replicas: int = 5
    cpu_threshold: int = 70


ACK_REGIONS: dict[str, AckRegion] = {
    region.id: region
    for region in (
        AckRegion(
            "me-central-1",
            "Saudi Arabia (Riyadh)",
            "registry.me-central-1.aliyuncs.com",
            "ack.me-central-1.aliyuncs.com",
        ),
        AckRegion(
            "me-east-1",
            "UAE (Dubai)",
            "registry.me-east-1.aliyuncs.com",
            "ack.me-east-1.aliyuncs.com",
        ),
        AckRegion(
            "ap-southeast-1",
            "Singapore",
            "registry.ap-southeast-1.aliyuncs.com",
            "ack.ap-southeast-1.aliyuncs.com",
        ),
        AckRegion(
            "us-west-1",
            "US West (Silicon Valley)",
            "registry.us-west-1.aliyuncs.com",
            "ack.us-west-1.aliyuncs.com",
        ),
        AckRegion(
            "eu-west-1",
            "UK (London)",
            "registry.eu-west-1.aliyuncs.com",
            "ack.eu-west-1.aliyuncs.com",
        ),
    )
}

RESOURCE_PROFILES: dict[str, ResourceProfile] = {
    "small": ResourceProfile(),
    "medium": ResourceProfile(
        cpu_request="100m",
        memory_request="128Mi",
        cpu_limit="500m",
        memory_limit="512Mi",
        max_replicas=10,
    ),
    "large": ResourceProfile(
        cpu_request="250m",
        memory_request="256Mi",
        cpu_limit="1000m",
        memory_limit="1Gi",
        max_replicas=20,
    ),
}


def get_region(region_id: str) -> AckRegion | None:
    """Look up a region by id, returning None for unknown regions."""
    return ACK_REGIONS.get(region_id)


def registry_for_region(region_id: str, fallback: str) -> str:
    """Return the container registry host of a region, or ``fallback``."""
    region = get_region(region_id)
    return region.registry if region else fallback


def get_resource_profile(size: str) -> ResourceProfile:
    """Return the recommended profile for an app size (small when unknown)."""
    return RESOURCE_PROFILES.get(size, RESOURCE_PROFILES["small"])
