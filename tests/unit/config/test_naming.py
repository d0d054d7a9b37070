"""Tests for name sanitization and registry normalization."""

import pytest

from ack_deploy.config.naming import (
    extract_repository_name,
    image_repository,
    kubernetes_app_name,
    normalize_registry,
    sanitize_kubernetes_name,
)


class TestSanitizeKubernetesName:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("Test_App", "test-app"),
            ("123abc", "app-123abc"),
            ("", "laravel-app"),
            ("---", "laravel-app"),
            ("My  Cool__App!", "my-cool-app"),
            ("-leading-and-trailing-", "leading-and-trailing"),
            ("already-valid", "already-valid"),
            ("Ünïcode App", "n-code-app"),
        ],
    )
    def test_sanitizes(self, raw: str, expected: str) -> None:
        assert sanitize_kubernetes_name(raw) == expected

    @pytest.mark.parametrize(
        "raw", ["Test_App", "123abc", "", "a--b", "__x__", "9", "shop.example.com"]
    )
    def test_is_idempotent(self, raw: str) -> None:
        once = sanitize_kubernetes_name(raw)
        assert sanitize_kubernetes_name(once) == once

    def test_result_is_dns_label_safe(self) -> None:
        name = sanitize_kubernetes_name("Weird/Name With*Stuff")
        assert all(c.isalnum() or c == "-" for c in name)
        assert name == name.lower()
        assert not name.startswith("-") and not name.endswith("-")


class TestRepositoryNames:
    def test_extract_repository_name_strips_owner(self) -> None:
        assert extract_repository_name("algethamy/test_ack") == "test_ack"

    def test_extract_repository_name_without_owner(self) -> None:
        assert extract_repository_name("shop") == "shop"

    def test_kubernetes_app_name_uses_last_segment(self) -> None:
        assert kubernetes_app_name("algethamy/test_ack") == "test-ack"

    def test_image_repository_keeps_owner_prefix(self) -> None:
        assert image_repository("Algethamy/Test_Ack") == "algethamy/test_ack"

    def test_image_repository_replaces_invalid_characters(self) -> None:
        assert image_repository("My App") == "my-app"

    def test_image_repository_falls_back_when_empty(self) -> None:
        assert image_repository("  ") == "laravel-app"


class TestNormalizeRegistry:
    @pytest.mark.parametrize(
        "raw", ["docker.io", "hub.docker.com", "Docker.com", "DOCKERHUB", " dockerhub "]
    )
    def test_docker_hub_aliases(self, raw: str) -> None:
        assert normalize_registry(raw) == "docker.io"

    def test_strips_protocol_and_trailing_slash(self) -> None:
        assert (
            normalize_registry("https://registry.me-central-1.aliyuncs.com/")
            == "registry.me-central-1.aliyuncs.com"
        )

    def test_other_registries_unchanged(self) -> None:
        assert normalize_registry("ghcr.io/acme") == "ghcr.io/acme"
