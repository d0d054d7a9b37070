"""Deployment workflows: image building, kubeconfig provisioning, scaffolding
and the deploy orchestrator."""

from .image_builder import DeploymentError, ImageBuilder
from .kubeconfig import (
    KubeconfigLocation,
    KubeconfigProvisioner,
    KubeconfigResolver,
    KubeconfigScope,
    extract_kubeconfig,
)
from .orchestrator import DeploymentOrchestrator
from .recreation import (
    DeploymentRecreator,
    PodStatusClass,
    RecreationDecision,
    classify_pod_status,
)
from .scaffolder import SCAFFOLD_FILES, ProjectScaffolder, generate_app_key

__all__ = [
    "DeploymentError",
    "DeploymentOrchestrator",
    "DeploymentRecreator",
    "ImageBuilder",
    "KubeconfigLocation",
    "KubeconfigProvisioner",
    "KubeconfigResolver",
    "KubeconfigScope",
    "PodStatusClass",
    "ProjectScaffolder",
    "RecreationDecision",
    "SCAFFOLD_FILES",
    "classify_pod_status",
    "extract_kubeconfig",
    "generate_app_key",
]
