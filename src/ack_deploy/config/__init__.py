"""Configuration: the .env.ack store, value providers and name handling."""

from .naming import (
    extract_repository_name,
    image_repository,
    kubernetes_app_name,
    normalize_registry,
    sanitize_kubernetes_name,
)
from .providers import (
    ConfigProvider,
    DefaultProvider,
    EnvProvider,
    FileProvider,
    FlagProvider,
    ProviderChain,
)
from .resolver import ConfigResolver, DeployConfig
from .store import EnvAckStore

__all__ = [
    "ConfigProvider",
    "ConfigResolver",
    "DefaultProvider",
    "DeployConfig",
    "EnvAckStore",
    "EnvProvider",
    "FileProvider",
    "FlagProvider",
    "ProviderChain",
    "extract_repository_name",
    "image_repository",
    "kubernetes_app_name",
    "normalize_registry",
    "sanitize_kubernetes_name",
]
