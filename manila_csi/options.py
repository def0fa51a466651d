"""Share options supplied by the caller (storage class parameters)."""

from dataclasses import dataclass
from typing import Dict, Optional

from .exceptions import InvalidShareOptions

CEPHFS_MOUNTERS = ("fuse", "kernel")

# Parameter key -> ShareOptions attribute
_OPTION_KEYS = {
    "cephfs-clientID": "cephfs_client_id",
    "cephfs-mounter": "cephfs_mounter",
    "cephfs-kernelMountOptions": "cephfs_kernel_mount_options",
    "cephfs-fuseMountOptions": "cephfs_fuse_mount_options",
}


@dataclass(frozen=True)
class ShareOptions:
    """Options controlling how access is granted and how the share is mounted.

    Attributes:
        cephfs_client_id: cephx user to grant access to; defaults to the share name
        cephfs_mounter: "fuse" or "kernel"
        cephfs_kernel_mount_options: Mount options passed to the kernel client
        cephfs_fuse_mount_options: Mount options passed to ceph-fuse
    """

    cephfs_client_id: str = ""
    cephfs_mounter: str = "fuse"
    cephfs_kernel_mount_options: str = ""
    cephfs_fuse_mount_options: str = ""

    def __post_init__(self):
        validate_mounter(self.cephfs_mounter)

    @classmethod
    def from_dict(cls, params: Optional[Dict[str, str]]) -> "ShareOptions":
        """Build options from storage class style parameters.

        Raises:
            InvalidShareOptions: Unknown key or invalid value
        """
        kwargs = {}
        for key, value in (params or {}).items():
            attr = _OPTION_KEYS.get(key)
            if attr is None:
                raise InvalidShareOptions(details=f"unknown option '{key}'")
            kwargs[attr] = str(value).strip()
        return cls(**kwargs)


def validate_mounter(mounter: str) -> None:
    """
    Validate a CephFS mounter name.

    Raises:
        InvalidShareOptions: If mounter is not supported
    """
    if mounter not in CEPHFS_MOUNTERS:
        raise InvalidShareOptions(
            details=f"cephfs-mounter must be one of {', '.join(CEPHFS_MOUNTERS)}, got '{mounter}'"
        )


def parse_option_pairs(pairs) -> Dict[str, str]:
    """Parse ``key=value`` strings into a dict.

    Raises:
        InvalidShareOptions: If a pair has no '=' or an empty key
    """
    params = {}
    for pair in pairs or []:
        key, sep, value = pair.partition("=")
        key = key.strip()
        if not sep or not key:
            raise InvalidShareOptions(details=f"expected key=value, got '{pair}'")
        params[key] = value
    return params
