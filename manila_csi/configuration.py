"""Configuration options for the Manila CSI share adapters."""

from oslo_config import cfg

# Configuration group name
CONF_GROUP = "manila_csi"


def _get_manila_csi_opts():
    """Get Manila CSI share adapter configuration options.

    Returns:
        List of oslo_config options
    """
    return [
        # Manila API
        cfg.StrOpt(
            "manila_endpoint",
            default=None,
            help=(
                "Manila shared file systems API endpoint, including the version "
                "and project path (e.g., http://controller:8786/v2/<project_id>)"
            ),
        ),
        cfg.IntOpt(
            "manila_api_timeout",
            default=30,
            min=1,
            max=300,
            help="API request timeout in seconds",
        ),
        cfg.IntOpt(
            "manila_api_retry_count",
            default=3,
            min=0,
            max=10,
            help="Number of retries for idempotent (GET) API requests on transient failures",
        ),
        cfg.BoolOpt(
            "manila_verify_ssl",
            default=True,
            help="Verify SSL certificates for API requests",
        ),
        cfg.StrOpt(
            "manila_ca_bundle",
            default=None,
            help="Path to CA bundle file for SSL verification (optional)",
        ),
        cfg.StrOpt(
            "manila_auth_token",
            default=None,
            secret=True,
            help="Pre-issued Keystone token sent as X-Auth-Token",
        ),
        cfg.StrOpt(
            "manila_api_microversion",
            default="2.45",
            help=(
                "Manila API microversion. 2.45 or later is required for the "
                "share-access-rules listing endpoint."
            ),
        ),
        # CephFS access key wait policy
        cfg.FloatOpt(
            "cephfs_access_key_wait_initial_delay",
            default=5.0,
            min=0.0,
            help=(
                "Seconds to wait before re-checking a cephx access rule that "
                "has no access key yet"
            ),
        ),
        cfg.FloatOpt(
            "cephfs_access_key_wait_factor",
            default=1.2,
            min=1.0,
            help="Multiplier applied to the delay after every check",
        ),
        cfg.IntOpt(
            "cephfs_access_key_wait_steps",
            default=10,
            min=1,
            help="Maximum number of checks for the access key before giving up",
        ),
        # Access reconciliation locking
        cfg.BoolOpt(
            "share_access_lock",
            default=False,
            help=(
                "Serialize access reconciliation per (share, access_to) pair. "
                "Without it, concurrent callers may both create the same rule "
                "and the backend decides how duplicates are handled."
            ),
        ),
        cfg.BoolOpt(
            "share_access_lock_external",
            default=False,
            help=(
                "Use an inter-process file lock instead of an in-process lock "
                "(requires lock_path)"
            ),
        ),
        cfg.StrOpt(
            "lock_path",
            default=None,
            help="Directory for external lock files",
        ),
    ]


def register_opts(conf, group=None):
    """Register Manila CSI configuration options.

    Args:
        conf: oslo_config.cfg.ConfigOpts instance
        group: Configuration group name (default: CONF_GROUP)
    """
    if group is None:
        group = CONF_GROUP
    conf.register_opts(_get_manila_csi_opts(), group=group)


def list_opts():
    """Return a list of options for oslo-config-generator.

    Returns:
        List of (group_name, options) tuples
    """
    return [
        (CONF_GROUP, _get_manila_csi_opts()),
    ]


def get_manila_csi_opts():
    """Get Manila CSI configuration options (public API)."""
    return _get_manila_csi_opts()
