"""REST API client for the Manila shared file systems service."""

from typing import Any, Dict, List, Optional

import requests
from oslo_log import log as logging
from requests.adapters import HTTPAdapter
from urllib3.util.retry import RequestHistory, Retry

from .context import CancellableContext
from .exceptions import (
    ManilaAPIConnectionError,
    ManilaAPIError,
    ManilaAPITimeout,
    ManilaConflict,
    ManilaResourceNotFound,
)
from .models import AccessRight, ExportLocation, Share

LOG = logging.getLogger(__name__)

MICROVERSION_HEADER = "X-OpenStack-Manila-API-Version"
RETRY_STATUS_CODES = [429, 500, 502, 503, 504]


class ManilaShareClient:
    """REST API client for Manila share and access rule operations.

    Only the calls the share adapters need are implemented: reading a share
    and its export locations, listing access rules and granting access.
    """

    def __init__(
        self,
        api_endpoint: str,
        auth_token: Optional[str] = None,
        timeout: int = 30,
        retry_count: int = 3,
        verify_ssl: bool = True,
        ca_bundle: Optional[str] = None,
        microversion: str = "2.45",
    ):
        """Initialize Manila API client.

        Args:
            api_endpoint: Manila API URL including version and project
                (e.g., http://controller:8786/v2/<project_id>)
            auth_token: Keystone token sent as X-Auth-Token
            timeout: HTTP request timeout in seconds
            retry_count: Number of retries for failed GET requests
            verify_ssl: Whether to verify SSL certificates
            ca_bundle: Path to CA bundle file for SSL verification
            microversion: Manila API microversion

        Raises:
            ValueError: If api_endpoint is empty
        """
        if not api_endpoint:
            raise ValueError("api_endpoint is required")

        self.base_url = api_endpoint.rstrip("/")
        self.timeout = timeout
        self.retry_count = retry_count
        self.microversion = microversion

        if ca_bundle:
            self.verify_ssl = ca_bundle
        else:
            self.verify_ssl = verify_ssl

        self.session = requests.Session()
        self.session.headers.update(
            {
                "Accept": "application/json",
                MICROVERSION_HEADER: microversion,
            }
        )
        if auth_token:
            self.session.headers.update({"X-Auth-Token": auth_token})

        # Only GET is retried; granting access twice could create a duplicate rule
        self.retry_strategy = Retry(
            total=retry_count,
            backoff_factor=1,
            status_forcelist=RETRY_STATUS_CODES,
            allowed_methods=["GET"],
            raise_on_status=False,
        )
        # Retries run in _make_request so that they honor the context
        adapter = HTTPAdapter(max_retries=0)
        self.session.mount("http://", adapter)
        self.session.mount("https://", adapter)

    def _make_request(
        self,
        context: CancellableContext,
        method: str,
        path: str,
        json_data: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Make HTTP request to the Manila API.

        Every attempt's timeout is clamped to the time left on ``context``
        and the context is checked again once the attempt ends. GET requests
        failing with a timeout, a connection error or a status from
        RETRY_STATUS_CODES are retried; the backoff sleep between attempts
        wakes up as soon as the context is cancelled.

        Args:
            context: Execution context
            method: HTTP method (GET, POST)
            path: API path relative to the endpoint (e.g., /shares/<id>)
            json_data: Request body as JSON
            params: Query parameters

        Returns:
            Response data dictionary (empty dict for 202/204 without body)

        Raises:
            ContextCancelled: Context cancelled or deadline exceeded
            ManilaAPIConnectionError: Connection failed
            ManilaAPITimeout: Request timed out
            ManilaResourceNotFound: 404
            ManilaConflict: 409
            ManilaAPIError: Any other API error
        """
        if path.startswith("/"):
            url = self.base_url + path
        else:
            url = f"{self.base_url}/{path}"

        retries = self.retry_strategy
        while True:
            timeout = context.request_timeout(self.timeout)
            LOG.debug("Making %s request to %s with params=%s", method, path, params)

            try:
                response = self.session.request(
                    method=method,
                    url=url,
                    json=json_data,
                    params=params,
                    timeout=timeout,
                    verify=self.verify_ssl,
                )
            except (requests.exceptions.Timeout, requests.exceptions.ConnectionError) as e:
                context.check()
                retries = self._next_retry(retries, method, url, error=e)
                if retries is not None:
                    self._sleep_before_retry(context, retries, method, path, e)
                    continue
                if isinstance(e, requests.exceptions.Timeout):
                    LOG.error("Request timeout after %ss: %s", timeout, path)
                    raise ManilaAPITimeout(timeout=timeout)
                LOG.error("Connection error: %s, %s", path, e)
                raise ManilaAPIConnectionError(details=str(e))
            except requests.exceptions.RequestException as e:
                context.check()
                LOG.error("Request exception: %s, %s", path, e)
                raise ManilaAPIError(details=str(e))

            context.check()
            LOG.debug("Response status: %s", response.status_code)

            if not retries.is_retry(method, response.status_code):
                break
            next_retries = self._next_retry(retries, method, url, status=response.status_code)
            if next_retries is None:
                break
            retries = next_retries
            response.close()
            self._sleep_before_retry(
                context, retries, method, path, f"HTTP {response.status_code}"
            )

        if response.status_code >= 400:
            error_msg = self._error_message(response)

            if response.status_code == 404:
                LOG.warning("Resource not found: %s, error: %s", path, error_msg)
                raise ManilaResourceNotFound(resource=path)
            if response.status_code == 409:
                LOG.warning("Conflict error: %s, error: %s", path, error_msg)
                raise ManilaConflict(resource=path, details=error_msg)

            LOG.error("API error: HTTP %s, %s", response.status_code, error_msg)
            raise ManilaAPIError(details=f"HTTP {response.status_code}: {error_msg}")

        if response.status_code == 204 or not response.content:
            return {}

        return response.json()

    @staticmethod
    def _next_retry(
        retries: Retry,
        method: str,
        url: str,
        error: Optional[Exception] = None,
        status: Optional[int] = None,
    ) -> Optional[Retry]:
        """Consume one retry, or return None if ``method`` may not be retried again."""
        if method.upper() not in retries.allowed_methods:
            return None
        retries = retries.new(
            total=retries.total - 1,
            history=retries.history + (RequestHistory(method, url, error, status, None),),
        )
        if retries.is_exhausted():
            return None
        return retries

    @staticmethod
    def _sleep_before_retry(
        context: CancellableContext, retries: Retry, method: str, path: str, reason
    ) -> None:
        delay = retries.get_backoff_time()
        LOG.warning(
            "Retrying %s %s in %.1fs (%d retries left): %s",
            method,
            path,
            delay,
            retries.total,
            reason,
        )
        context.sleep(delay)

    @staticmethod
    def _error_message(response) -> str:
        """Extract an error message from a Manila error response.

        Manila wraps errors as {"<errorName>": {"code": ..., "message": ...}}.
        """
        try:
            error_data = response.json()
        except ValueError:
            return response.text

        if isinstance(error_data, dict):
            for value in error_data.values():
                if isinstance(value, dict) and value.get("message"):
                    return str(value["message"])
        return response.text

    # Share operations

    def get_share(self, context: CancellableContext, share_id: str) -> Share:
        """Get share details.

        Raises:
            ManilaResourceNotFound: Share not found
            ManilaAPIError: API error
        """
        response = self._make_request(context, "GET", f"/shares/{share_id}")
        return Share.from_dict(response.get("share", {"id": share_id}))

    def get_export_locations(
        self, context: CancellableContext, share_id: str
    ) -> List[ExportLocation]:
        """List export locations of a share.

        Raises:
            ManilaResourceNotFound: Share not found
            ManilaAPIError: API error
        """
        response = self._make_request(context, "GET", f"/shares/{share_id}/export_locations")
        return [ExportLocation.from_dict(loc) for loc in response.get("export_locations", [])]

    # Access rule operations

    def get_access_rights(
        self, context: CancellableContext, share_id: str
    ) -> List[AccessRight]:
        """List access rules of a share.

        Args:
            context: Execution context
            share_id: Share ID

        Returns:
            List of access rules (possibly empty)

        Raises:
            ManilaResourceNotFound: Manila reports the share or its rules as missing
            ManilaAPIError: API error
        """
        response = self._make_request(
            context, "GET", "/share-access-rules", params={"share_id": share_id}
        )
        return [
            AccessRight.from_dict(rule, share_id=share_id)
            for rule in response.get("access_list", [])
        ]

    def grant_access(
        self,
        context: CancellableContext,
        share_id: str,
        access_type: str,
        access_level: str,
        access_to: str,
    ) -> AccessRight:
        """Create an access rule on a share.

        Args:
            context: Execution context
            share_id: Share ID
            access_type: Access type (e.g., "cephx")
            access_level: "rw" or "ro"
            access_to: Principal to grant access to

        Returns:
            The created access rule; its access_key may still be empty

        Raises:
            ManilaConflict: Manila rejected the rule (e.g., it already exists)
            ManilaAPIError: API error
        """
        data = {
            "allow_access": {
                "access_type": access_type,
                "access_level": access_level,
                "access_to": access_to,
            }
        }
        response = self._make_request(context, "POST", f"/shares/{share_id}/action", json_data=data)
        LOG.info(
            "Granted %s %s access to %s on share %s",
            access_type,
            access_level,
            access_to,
            share_id,
        )
        return AccessRight.from_dict(response.get("access", {}), share_id=share_id)
