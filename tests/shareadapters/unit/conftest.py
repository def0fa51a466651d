"""Pytest configuration and fixtures for share adapter unit tests."""

from unittest.mock import Mock

import pytest

from manila_csi.models import AccessRight, ExportLocation, Share


@pytest.fixture
def mock_adapter_config():
    """Create a mock oslo.config-like configuration object for the adapters."""
    config = Mock()

    config.cephfs_access_key_wait_initial_delay = 5.0
    config.cephfs_access_key_wait_factor = 1.2
    config.cephfs_access_key_wait_steps = 10

    config.share_access_lock = False
    config.share_access_lock_external = False
    config.lock_path = None

    return config


@pytest.fixture
def mock_share():
    return Share(id="s1", name="myshare", share_proto="CEPHFS", status="available")


@pytest.fixture
def mock_manila_client():
    """Create a mock Manila API client."""
    client = Mock()
    client.get_access_rights.return_value = []
    client.grant_access.return_value = AccessRight(
        id="rule-1",
        share_id="s1",
        access_type="cephx",
        access_to="myshare",
        access_level="rw",
        state="queued_to_apply",
    )
    return client


@pytest.fixture
def cephx_rule():
    """Factory for cephx rw access rules."""

    def _make(access_to="myshare", access_key="", rule_id="rule-1", **kwargs):
        fields = {
            "id": rule_id,
            "share_id": "s1",
            "access_type": "cephx",
            "access_to": access_to,
            "access_level": "rw",
            "access_key": access_key,
            "state": "active" if access_key else "queued_to_apply",
        }
        fields.update(kwargs)
        return AccessRight(**fields)

    return _make


@pytest.fixture
def cephfs_locations():
    return [
        ExportLocation(
            path="10.0.0.1:6789,10.0.0.2:6789:/volumes/_nogroup/abc",
            preferred=True,
            id="loc-1",
        )
    ]
