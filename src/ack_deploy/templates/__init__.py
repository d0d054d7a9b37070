"""Embedded scaffolding templates and their renderer."""

from .renderer import (
    TEMPLATE_DIR,
    TemplateError,
    TemplateRenderer,
    template_context,
    validate_manifest,
)

__all__ = [
    "TEMPLATE_DIR",
    "TemplateError",
    "TemplateRenderer",
    "template_context",
    "validate_manifest",
]
