"""Base class for share adapters."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..context import CancellableContext
from ..models import AccessRight, ExportLocation, Share
from ..options import ShareOptions


@dataclass(frozen=True)
class GrantAccessArgs:
    """Input of ShareAdapter.get_or_grant_access().

    Attributes:
        share: Share to grant access to
        options: Caller-supplied share options
        manila_client: Manila API client (ManilaShareClient or compatible)
    """

    share: Share
    manila_client: Any
    options: ShareOptions = field(default_factory=ShareOptions)


@dataclass(frozen=True)
class VolumeContextArgs:
    """Input of ShareAdapter.build_volume_context()."""

    locations: List[ExportLocation]
    options: ShareOptions = field(default_factory=ShareOptions)


@dataclass(frozen=True)
class SecretArgs:
    """Input of the ShareAdapter secret builders."""

    access_right: AccessRight


class ShareAdapter(ABC):
    """Abstract base class for share adapters.

    A share adapter implements one share protocol: it decides which access
    rule a node needs, makes sure that rule exists and is usable, and turns
    the share and rule into the volume context and secrets consumed by the
    node plugin.
    """

    #: Share protocol handled by the adapter, as reported by Manila
    share_proto = ""

    def __init__(self, configuration=None):
        """Initialize share adapter.

        Args:
            configuration: Object exposing the manila_csi options as
                attributes (e.g., ConfigOpts group), or None for defaults
        """
        self.configuration = configuration

    @abstractmethod
    def get_or_grant_access(
        self, context: CancellableContext, args: GrantAccessArgs
    ) -> AccessRight:
        """Make sure the access rule exists and is usable.

        Returns:
            The access rule, ready for use

        Raises:
            ShareAdapterException: Access could not be ensured
        """
        pass

    @abstractmethod
    def build_volume_context(self, args: VolumeContextArgs) -> Dict[str, str]:
        """Build the volume context passed to the node plugin.

        Raises:
            ExportLocationNotFound: No usable export location
        """
        pass

    @abstractmethod
    def build_node_stage_secret(self, args: SecretArgs) -> Optional[Dict[str, str]]:
        """Build the secret used when staging the volume on a node."""
        pass

    @abstractmethod
    def build_node_publish_secret(self, args: SecretArgs) -> Optional[Dict[str, str]]:
        """Build the secret used when publishing the volume on a node."""
        pass
