"""Tests for the Kubernetes secret lister and writer."""

from __future__ import annotations

import base64
from unittest.mock import Mock, patch

import pytest
from kubernetes import client

from oauth_encryption_operator.constants import FIELD_MANAGER
from oauth_encryption_operator.models import Secret
from oauth_encryption_operator.utils.cache import secret_cache
from oauth_encryption_operator.utils.secrets import KubernetesSecretLister, KubernetesSecretWriter


def _v1_secret(name: str = "test-secret", value: bytes = b"\xff", resource_version: str = "1") -> client.V1Secret:
    return client.V1Secret(
        metadata=client.V1ObjectMeta(name=name, namespace="default", resource_version=resource_version),
        data={"encryption-config": base64.b64encode(value).decode("utf-8")},
    )


class TestKubernetesSecretLister:
    """Test cases for KubernetesSecretLister."""

    def test_get_success(self):
        """Test successfully reading a secret."""
        mock_api = Mock()
        mock_api.read_namespaced_secret.return_value = _v1_secret()

        result = KubernetesSecretLister(mock_api).get("default", "test-secret")

        assert result.name == "test-secret"
        assert result.data == {"encryption-config": b"\xff"}
        mock_api.read_namespaced_secret.assert_called_once_with(name="test-secret", namespace="default")

    def test_get_not_found(self):
        """Test that a missing secret is returned as None."""
        mock_api = Mock()
        mock_api.read_namespaced_secret.side_effect = client.exceptions.ApiException(status=404)

        assert KubernetesSecretLister(mock_api).get("default", "test-secret") is None

    def test_get_not_found_is_not_cached(self):
        """Test that absence is looked up again on the next call."""
        mock_api = Mock()
        mock_api.read_namespaced_secret.side_effect = [
            client.exceptions.ApiException(status=404),
            _v1_secret(),
        ]
        lister = KubernetesSecretLister(mock_api)

        assert lister.get("default", "test-secret") is None
        assert lister.get("default", "test-secret") is not None
        assert mock_api.read_namespaced_secret.call_count == 2

    def test_get_api_error(self):
        """Test that other API errors are raised unchanged."""
        mock_api = Mock()
        error = client.exceptions.ApiException(status=500)
        mock_api.read_namespaced_secret.side_effect = error

        with pytest.raises(client.exceptions.ApiException) as exc_info:
            KubernetesSecretLister(mock_api).get("default", "test-secret")

        assert exc_info.value is error

    def test_get_uses_cache(self):
        """Test that a found secret is served from cache on the next call."""
        mock_api = Mock()
        mock_api.read_namespaced_secret.return_value = _v1_secret()
        lister = KubernetesSecretLister(mock_api)

        first = lister.get("default", "test-secret")
        second = lister.get("default", "test-secret")

        assert first is second
        mock_api.read_namespaced_secret.assert_called_once()

    @patch("oauth_encryption_operator.utils.secrets.metrics")
    def test_get_records_metrics(self, mock_metrics):
        mock_api = Mock()
        mock_api.read_namespaced_secret.return_value = _v1_secret()

        KubernetesSecretLister(mock_api).get("default", "test-secret")

        mock_metrics.api_call_total.labels.assert_called_with(
            api_type="k8s", operation="get_secret", result="success"
        )
        mock_metrics.api_call_duration_seconds.labels.assert_called_with(
            api_type="k8s", operation="get_secret"
        )


class TestKubernetesSecretWriter:
    """Test cases for KubernetesSecretWriter."""

    def test_create(self):
        """Test creating a secret."""
        mock_api = Mock()
        mock_api.create_namespaced_secret.return_value = _v1_secret(resource_version="10")
        secret = Secret(name="test-secret", namespace="default", data={"encryption-config": b"\xff"}, resource_version="3")

        stored = KubernetesSecretWriter(mock_api).create(secret)

        call_args = mock_api.create_namespaced_secret.call_args
        assert call_args[1]["namespace"] == "default"
        assert call_args[1]["field_manager"] == FIELD_MANAGER
        body = call_args[1]["body"]
        assert body.metadata.name == "test-secret"
        assert body.metadata.resource_version is None
        assert body.data == {"encryption-config": base64.b64encode(b"\xff").decode("utf-8")}
        assert stored.resource_version == "10"

    def test_update_replaces_with_resource_version(self):
        """Test that an update is a replace carrying the observed resourceVersion."""
        mock_api = Mock()
        mock_api.replace_namespaced_secret.return_value = _v1_secret(value=b"\xaa", resource_version="11")
        secret = Secret(name="test-secret", namespace="default", data={"encryption-config": b"\xaa"}, resource_version="10")

        stored = KubernetesSecretWriter(mock_api).update(secret)

        call_args = mock_api.replace_namespaced_secret.call_args
        assert call_args[1]["name"] == "test-secret"
        assert call_args[1]["namespace"] == "default"
        assert call_args[1]["field_manager"] == FIELD_MANAGER
        assert call_args[1]["body"].metadata.resource_version == "10"
        mock_api.patch_namespaced_secret.assert_not_called()
        assert stored.data == {"encryption-config": b"\xaa"}

    def test_write_refreshes_cache(self):
        """Test that the stored object replaces the cache entry."""
        mock_api = Mock()
        mock_api.replace_namespaced_secret.return_value = _v1_secret(value=b"\xaa", resource_version="11")
        secret_cache.put(Secret(name="test-secret", namespace="default", resource_version="10"))

        KubernetesSecretWriter(mock_api).update(
            Secret(name="test-secret", namespace="default", data={"encryption-config": b"\xaa"}, resource_version="10")
        )

        cached = secret_cache.get("default", "test-secret")
        assert cached.resource_version == "11"

    def test_write_error_invalidates_cache(self):
        """Test that a failed write drops the cache entry and re-raises."""
        mock_api = Mock()
        error = client.exceptions.ApiException(status=409)
        mock_api.replace_namespaced_secret.side_effect = error
        secret_cache.put(Secret(name="test-secret", namespace="default", resource_version="10"))

        with pytest.raises(client.exceptions.ApiException) as exc_info:
            KubernetesSecretWriter(mock_api).update(Secret(name="test-secret", namespace="default"))

        assert exc_info.value is error
        assert secret_cache.get("default", "test-secret") is None


    @patch("oauth_encryption_operator.utils.secrets.metrics")
    def test_create_records_success(self, mock_metrics):
        mock_api = Mock()
        mock_api.create_namespaced_secret.return_value = _v1_secret()

        KubernetesSecretWriter(mock_api).create(Secret(name="test-secret", namespace="default"))

        mock_metrics.secret_operations_total.labels.assert_called_with(operation="create", result="success")
        mock_metrics.api_call_total.labels.assert_called_with(
            api_type="k8s", operation="create_secret", result="success"
        )

    @patch("oauth_encryption_operator.utils.secrets.metrics")
    def test_failed_update_records_error(self, mock_metrics):
        """Test that a rejected write is counted as a failed mirror write."""
        mock_api = Mock()
        mock_api.replace_namespaced_secret.side_effect = client.exceptions.ApiException(status=409)

        with pytest.raises(client.exceptions.ApiException):
            KubernetesSecretWriter(mock_api).update(Secret(name="test-secret", namespace="default"))

        mock_metrics.secret_operations_total.labels.assert_called_with(operation="update", result="error")
        mock_metrics.api_call_total.labels.assert_called_with(
            api_type="k8s", operation="update_secret", result="error"
        )
