"""Jinja2 rendering of the scaffolding templates.

Templates use ``{{ APP_NAME }}``-style placeholders. Placeholders without a
value are left in the output verbatim instead of raising or rendering
empty, so hand-edited templates can carry their own tokens.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from jinja2 import DebugUndefined, Environment, FileSystemLoader

from ack_deploy.config import DeployConfig
from ack_deploy.infra.constants import DEFAULT_CONSTANTS

TEMPLATE_DIR = Path(__file__).parent / "files"


class TemplateError(ValueError):
    """Raised when a rendered manifest is not valid YAML."""


def get_template_env(template_dir: Path = TEMPLATE_DIR) -> Environment:
    """Get Jinja2 environment for template rendering."""
    return Environment(
        loader=FileSystemLoader(template_dir),
        undefined=DebugUndefined,
        keep_trailing_newline=True,
        autoescape=False,
    )


def template_context(config: DeployConfig, **extra: Any) -> dict[str, Any]:
    """Placeholder values for a configuration.

    ``CLUSTER_ID`` is only present when a cluster id is configured so the
    token survives rendering otherwise.
    """
    resources = config.resources
    context: dict[str, Any] = {
        "APP_NAME": config.app_name,
        "REGISTRY": config.registry,
        "NAMESPACE": config.namespace,
        "DOMAIN": config.domain or DEFAULT_CONSTANTS.DEFAULT_DOMAIN,
        "TAG": config.tag,
        "IMAGE": config.image,
        "IMAGE_REPOSITORY": config.image_repository,
        "REGION": config.region,
        "CPU_REQUEST": resources.cpu_request,
        "MEMORY_REQUEST": resources.memory_request,
        "CPU_LIMIT": resources.cpu_limit,
        "MEMORY_LIMIT": resources.memory_limit,
        "MIN_REPLICAS": resources.min_replicas,
        "MAX_REPLICAS": resources.max_replicas,
        "CPU_THRESHOLD": resources.cpu_threshold,
    }
    if config.cluster_id:
        context["CLUSTER_ID"] = config.cluster_id
    context.update(extra)
    return context


class TemplateRenderer:
    """Renders embedded templates against a ``DeployConfig``."""

    def __init__(self, template_dir: Path = TEMPLATE_DIR) -> None:
        self.template_dir = template_dir
        self.env = get_template_env(template_dir)

    def render(self, template: str, config: DeployConfig, **extra: Any) -> str:
        """Substitute placeholders in a template string."""
        return self.env.from_string(template).render(
            **template_context(config, **extra)
        )

    def render_template(self, name: str, config: DeployConfig, **extra: Any) -> str:
        """Render a named template from the template directory."""
        return self.env.get_template(name).render(**template_context(config, **extra))


def validate_manifest(content: str, name: str) -> None:
    """Check that rendered content parses as one or more YAML documents.

    Raises:
        TemplateError: If the content is not valid YAML
    """
    try:
        list(yaml.safe_load_all(content))
    except yaml.YAMLError as e:
        raise TemplateError(f"{name} is not valid YAML: {e}") from e
