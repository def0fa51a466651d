"""CephFS share adapter.

Nodes mount CephFS shares with a cephx identity. Manila creates the cephx
user when the access rule is granted and fills in the rule's access key
asynchronously, so granting access has to wait until the key shows up.
"""

import contextlib
from typing import Dict, List, Optional

from oslo_concurrency import lockutils
from oslo_log import log as logging

from ..backoff import Backoff, exponential_backoff
from ..context import CancellableContext
from ..exceptions import (
    AccessKeyTimeout,
    AccessRightsListFailure,
    AccessRightVanished,
    ManilaResourceNotFound,
    ManilaShareException,
    WaitTimeout,
)
from ..exportlocations import (
    any_export_location,
    find_export_location,
    split_export_location_path,
)
from ..models import AccessRight
from .base import GrantAccessArgs, SecretArgs, ShareAdapter, VolumeContextArgs

LOG = logging.getLogger(__name__)

ACCESS_TYPE = "cephx"
ACCESS_LEVEL = "rw"

# Defaults of the cephfs_access_key_wait_* options
DEFAULT_ACCESS_KEY_BACKOFF = Backoff(duration=5.0, factor=1.2, steps=10)

# Seconds between context checks while waiting for the access lock
LOCK_POLL_INTERVAL = 0.1


class CephfsShareAdapter(ShareAdapter):
    """Share adapter for the CEPHFS protocol (cephx rw access)."""

    share_proto = "CEPHFS"

    def _conf(self, name, default):
        if self.configuration is None:
            return default
        return getattr(self.configuration, name)

    @property
    def access_key_backoff(self) -> Backoff:
        """Backoff policy for waiting on the access key."""
        return Backoff(
            duration=self._conf(
                "cephfs_access_key_wait_initial_delay", DEFAULT_ACCESS_KEY_BACKOFF.duration
            ),
            factor=self._conf("cephfs_access_key_wait_factor", DEFAULT_ACCESS_KEY_BACKOFF.factor),
            steps=self._conf("cephfs_access_key_wait_steps", DEFAULT_ACCESS_KEY_BACKOFF.steps),
        )

    @contextlib.contextmanager
    def _access_lock(self, context: CancellableContext, share_id: str, access_to: str):
        """Lock serializing reconciliation of one (share, access_to) pair, if enabled.

        Waiting for the lock gives up as soon as ``context`` is done.
        """
        if not self._conf("share_access_lock", False):
            yield
            return

        name = f"manila-csi-access-{share_id}-{access_to}"
        locks = [lockutils.internal_lock(name)]
        if self._conf("share_access_lock_external", False):
            locks.append(
                lockutils.external_lock(name, lock_path=self._conf("lock_path", None))
            )

        held = []
        try:
            for lock in locks:
                _acquire(context, lock, name)
                held.append(lock)
            context.check()
            yield
        finally:
            for lock in reversed(held):
                lock.release()

    @staticmethod
    def resolve_access_to(args: GrantAccessArgs) -> str:
        """cephx user to grant access to: the configured client ID or the share name."""
        return args.options.cephfs_client_id or args.share.name

    def get_or_grant_access(
        self, context: CancellableContext, args: GrantAccessArgs
    ) -> AccessRight:
        """Make sure a cephx rw access rule exists and has an access key.

        An existing matching rule is reused; otherwise one is granted. If the
        rule has no key yet, access rules are re-listed with exponential
        backoff until Manila assigns one.

        Args:
            context: Execution context bounding the whole operation
            args: Share, options and Manila client

        Returns:
            The access rule with a non-empty access_key

        Raises:
            AccessRightsListFailure: Initial listing failed
            ManilaShareException: Granting access failed (raised unchanged)
            AccessRightVanished: The rule disappeared while waiting for the key
            AccessKeyTimeout: The key did not appear in time
            ContextCancelled: Context cancelled or deadline exceeded
        """
        share_id = args.share.id
        access_to = self.resolve_access_to(args)
        context.check()

        with self._access_lock(context, share_id, access_to):
            access_right = self._find_or_grant(context, args, access_to)

            if access_right.access_key:
                return access_right

            return self._wait_for_access_key(context, args, access_to)

    def _find_or_grant(
        self, context: CancellableContext, args: GrantAccessArgs, access_to: str
    ) -> AccessRight:
        share_id = args.share.id

        try:
            rights = args.manila_client.get_access_rights(context, share_id)
        except ManilaResourceNotFound:
            LOG.warning("No access rights found for share %s, granting a new one", share_id)
            rights = []
        except ManilaShareException as e:
            raise AccessRightsListFailure(details=str(e)) from e

        matches = [
            r
            for r in rights
            if r.access_to == access_to
            and r.access_type == ACCESS_TYPE
            and r.access_level == ACCESS_LEVEL
        ]
        if matches:
            if len(matches) > 1:
                LOG.debug(
                    "Found %d cephx access rights for %s on share %s, using %s",
                    len(matches),
                    access_to,
                    share_id,
                    matches[0].id,
                )
            LOG.debug("cephx access right for share %s already exists", args.share.name)
            return matches[0]

        return args.manila_client.grant_access(
            context,
            share_id,
            access_type=ACCESS_TYPE,
            access_level=ACCESS_LEVEL,
            access_to=access_to,
        )

    def _wait_for_access_key(
        self, context: CancellableContext, args: GrantAccessArgs, access_to: str
    ) -> AccessRight:
        share_id = args.share.id
        backoff = self.access_key_backoff
        ready: List[AccessRight] = []

        def access_key_assigned() -> bool:
            rights = args.manila_client.get_access_rights(context, share_id)
            access_right = _find_by_access_to(rights, access_to)
            if access_right is None:
                raise AccessRightVanished(share_id=share_id, access_to=access_to)
            if not access_right.access_key:
                return False
            ready.append(access_right)
            return True

        LOG.info("Waiting for an access key for %s on share %s", access_to, share_id)

        try:
            attempts = exponential_backoff(context, backoff, access_key_assigned)
        except WaitTimeout as e:
            LOG.warning(
                "No access key for %s on share %s after %d attempts (%.1fs)",
                access_to,
                share_id,
                backoff.steps,
                backoff.total_delay(backoff.steps),
            )
            raise AccessKeyTimeout(
                share_id=share_id, access_to=access_to, attempts=backoff.steps
            ) from e

        LOG.info(
            "Access key for %s on share %s assigned after %d attempt(s)",
            access_to,
            share_id,
            attempts,
        )
        return ready[-1]

    def build_volume_context(self, args: VolumeContextArgs) -> Dict[str, str]:
        idx = find_export_location(args.locations, any_export_location)
        monitors, root_path = split_export_location_path(args.locations[idx].path)

        volume_context = {
            "monitors": monitors,
            "rootPath": root_path,
            "mounter": args.options.cephfs_mounter,
            "provisionVolume": "false",
        }

        if args.options.cephfs_kernel_mount_options:
            volume_context["kernelMountOptions"] = args.options.cephfs_kernel_mount_options

        if args.options.cephfs_fuse_mount_options:
            volume_context["fuseMountOptions"] = args.options.cephfs_fuse_mount_options

        return volume_context

    def build_node_stage_secret(self, args: SecretArgs) -> Optional[Dict[str, str]]:
        return {
            "userID": args.access_right.access_to,
            "userKey": args.access_right.access_key,
        }

    def build_node_publish_secret(self, args: SecretArgs) -> Optional[Dict[str, str]]:
        # Staging already authenticated the mount
        return {}


def _acquire(context: CancellableContext, lock, name: str) -> None:
    if lock.acquire(blocking=False):
        return
    LOG.debug("Waiting for lock %s", name)
    while not lock.acquire(timeout=LOCK_POLL_INTERVAL):
        context.check()


def _find_by_access_to(rights: List[AccessRight], access_to: str) -> Optional[AccessRight]:
    for r in rights:
        if r.access_to == access_to:
            return r
    return None
