"""
Configuration loader for the manila-csi CLI.

Options are read with oslo.config from:
- the file given with --config-file, or
- `MANILA_CSI_CONFIG_PATH`, or `/etc/manila-csi/manila-csi.conf`

A missing default file is not an error; option defaults are used.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from oslo_config import cfg
from oslo_log import log as logging

from manila_csi import configuration
from manila_csi.client import ManilaShareClient

DEFAULT_CONFIG_PATH = Path("/etc/manila-csi/manila-csi.conf")
PROJECT = "manila-csi"


def _config_path() -> Path:
    env = os.environ.get("MANILA_CSI_CONFIG_PATH")
    if env:
        return Path(env)
    return DEFAULT_CONFIG_PATH


def load_config(config_file: Optional[Path] = None) -> cfg.ConfigOpts:
    """
    Load configuration and set up logging.

    Args:
        config_file: Explicit config file; must exist when given

    Returns:
        Parsed ConfigOpts with the manila_csi group registered

    Raises:
        ValueError: If an explicit config file does not exist
    """
    if config_file is not None and not config_file.exists():
        raise ValueError(f"Config file {config_file} does not exist")

    path = config_file if config_file is not None else _config_path()
    files = [str(path)] if path.exists() else []

    conf = cfg.ConfigOpts()
    logging.register_options(conf)
    # stdout carries command output
    conf.set_default("use_stderr", True)
    configuration.register_opts(conf)
    conf(args=[], project=PROJECT, default_config_files=files)
    logging.setup(conf, PROJECT)
    return conf


def build_client(conf: cfg.ConfigOpts) -> ManilaShareClient:
    """
    Create a Manila API client from the manila_csi options.

    Raises:
        ValueError: If manila_endpoint is not configured
    """
    group = getattr(conf, configuration.CONF_GROUP)
    if not group.manila_endpoint:
        raise ValueError(f"manila_endpoint must be set in [{configuration.CONF_GROUP}]")

    return ManilaShareClient(
        api_endpoint=group.manila_endpoint,
        auth_token=group.manila_auth_token,
        timeout=group.manila_api_timeout,
        retry_count=group.manila_api_retry_count,
        verify_ssl=group.manila_verify_ssl,
        ca_bundle=group.manila_ca_bundle,
        microversion=group.manila_api_microversion,
    )
