"""
Unit tests for configuration options.
"""

import pytest
from oslo_config import cfg

from manila_csi import configuration


@pytest.mark.unit
def test_defaults():
    conf = cfg.ConfigOpts()
    configuration.register_opts(conf)
    conf(args=[], default_config_files=[])

    group = conf.manila_csi
    assert group.manila_api_timeout == 30
    assert group.manila_api_retry_count == 3
    assert group.manila_api_microversion == "2.45"
    assert group.cephfs_access_key_wait_initial_delay == 5.0
    assert group.cephfs_access_key_wait_factor == 1.2
    assert group.cephfs_access_key_wait_steps == 10
    assert group.share_access_lock is False


@pytest.mark.unit
def test_reads_config_file(temp_dir):
    config_path = temp_dir / "manila-csi.conf"
    config_path.write_text(
        "\n".join(
            [
                "[manila_csi]",
                "manila_endpoint = http://controller:8786/v2/project",
                "cephfs_access_key_wait_steps = 3",
                "share_access_lock = true",
                "",
            ]
        ),
        encoding="utf-8",
    )
    conf = cfg.ConfigOpts()
    configuration.register_opts(conf)
    conf(args=[], default_config_files=[str(config_path)])

    assert conf.manila_csi.manila_endpoint == "http://controller:8786/v2/project"
    assert conf.manila_csi.cephfs_access_key_wait_steps == 3
    assert conf.manila_csi.share_access_lock is True


@pytest.mark.unit
def test_list_opts():
    opts = configuration.list_opts()
    assert opts[0][0] == "manila_csi"
    names = {opt.name for opt in opts[0][1]}
    assert "manila_auth_token" in names
    assert "cephfs_access_key_wait_factor" in names


@pytest.mark.unit
def test_auth_token_is_secret():
    token_opt = [opt for opt in configuration.get_manila_csi_opts() if opt.name == "manila_auth_token"][0]
    assert token_opt.secret is True
