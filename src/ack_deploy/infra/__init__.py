"""Static deployment knowledge: constants, paths and the ACK region catalogue."""

from .constants import DEFAULT_CONSTANTS, DeploymentConstants, DeploymentPaths
from .regions import (
    ACK_REGIONS,
    RESOURCE_PROFILES,
    AckRegion,
    ResourceProfile,
    get_region,
    get_resource_profile,
    registry_for_region,
)

__all__ = [
    "DEFAULT_CONSTANTS",
    "DeploymentConstants",
    "DeploymentPaths",
    "ACK_REGIONS",
    "RESOURCE_PROFILES",
    "AckRegion",
    "ResourceProfile",
    "get_region",
    "get_resource_profile",
    "registry_for_region",
]
