"""Share adapters for the Manila CSI driver.

Each adapter implements one share protocol:
- CephfsShareAdapter: CEPHFS shares accessed with cephx identities
"""

from ..exceptions import UnsupportedShareProtocol
from .base import GrantAccessArgs, SecretArgs, ShareAdapter, VolumeContextArgs
from .cephfs import CephfsShareAdapter

_ADAPTERS = {
    CephfsShareAdapter.share_proto: CephfsShareAdapter,
}


def get_share_adapter(share_proto: str, configuration=None) -> ShareAdapter:
    """Return the share adapter for a share protocol.

    Args:
        share_proto: Share protocol as reported by Manila (case-insensitive)
        configuration: Adapter configuration, or None for defaults

    Raises:
        UnsupportedShareProtocol: No adapter handles the protocol
    """
    adapter_cls = _ADAPTERS.get((share_proto or "").upper())
    if adapter_cls is None:
        raise UnsupportedShareProtocol(share_proto=share_proto)
    return adapter_cls(configuration=configuration)


__all__ = [
    "CephfsShareAdapter",
    "GrantAccessArgs",
    "SecretArgs",
    "ShareAdapter",
    "VolumeContextArgs",
    "get_share_adapter",
]
