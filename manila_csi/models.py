"""Manila resources as seen by the share adapters."""

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class Share:
    """Manila share.

    Attributes:
        id: Share ID
        name: Share name (default principal for cephx access rules)
        share_proto: Share protocol (e.g., "CEPHFS")
        status: Share status (e.g., "available")
    """

    id: str
    name: str = ""
    share_proto: str = ""
    status: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Share":
        return cls(
            id=data["id"],
            name=data.get("name") or "",
            share_proto=data.get("share_proto") or "",
            status=data.get("status") or "",
        )


@dataclass
class AccessRight:
    """Manila share access rule.

    ``access_key`` is assigned by the backend, possibly some time after the
    rule has been created. Empty means the rule is not usable yet.

    Attributes:
        id: Access rule ID
        share_id: Share the rule belongs to
        access_type: Authentication scheme (e.g., "cephx", "ip")
        access_to: Principal the rule grants access to
        access_level: "rw" or "ro"
        access_key: Backend-assigned key, empty until provisioned
        state: Rule state reported by Manila (e.g., "queued_to_apply", "active")
    """

    id: str = ""
    share_id: str = ""
    access_type: str = ""
    access_to: str = ""
    access_level: str = ""
    access_key: str = ""
    state: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any], share_id: Optional[str] = None) -> "AccessRight":
        return cls(
            id=data.get("id") or "",
            share_id=data.get("share_id") or share_id or "",
            access_type=data.get("access_type") or "",
            access_to=data.get("access_to") or "",
            access_level=data.get("access_level") or "",
            access_key=data.get("access_key") or "",
            state=data.get("state") or "",
        )

    def to_dict(self, mask_key: bool = False) -> Dict[str, str]:
        access_key = self.access_key
        if mask_key and access_key:
            access_key = "***"
        return {
            "id": self.id,
            "share_id": self.share_id,
            "access_type": self.access_type,
            "access_to": self.access_to,
            "access_level": self.access_level,
            "access_key": access_key,
            "state": self.state,
        }


@dataclass
class ExportLocation:
    """Share export location.

    Attributes:
        path: Export path (for CephFS: "<mon1>,<mon2>:<root path>")
        preferred: Whether Manila marks this location as preferred
        is_admin_only: Whether the location is reserved for administrators
        id: Export location ID
    """

    path: str
    preferred: bool = False
    is_admin_only: bool = False
    id: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ExportLocation":
        return cls(
            path=data.get("path") or "",
            preferred=bool(data.get("preferred", False)),
            is_admin_only=bool(data.get("is_admin_only", False)),
            id=data.get("id") or "",
        )
