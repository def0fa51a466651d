"""Manila CSI share adapter exceptions."""


class ShareAdapterException(Exception):
    """Base exception for share adapter errors."""

    message = "An unknown exception occurred."

    def __init__(self, message=None, **kwargs):
        """Initialize exception with optional custom message."""
        self.kwargs = kwargs
        if message:
            self.message = message
        super(ShareAdapterException, self).__init__(self.message % kwargs)


# Manila API client errors


class ManilaShareException(ShareAdapterException):
    """Base class for errors raised by the Manila API client."""

    message = "Manila API error: %(details)s"


class ManilaAPIError(ManilaShareException):
    """API communication errors."""

    message = "API error occurred: %(details)s"


class ManilaResourceNotFound(ManilaShareException):
    """Manila returned 404 for the requested resource.

    Callers that list access rules treat this as an empty result rather
    than a failure.
    """

    message = "Resource %(resource)s not found"


class ManilaConflict(ManilaShareException):
    """Manila returned 409 for the request."""

    message = "Conflict on %(resource)s: %(details)s"


class ManilaAPIConnectionError(ManilaShareException):
    """API connection error."""

    message = "Failed to connect to Manila API: %(details)s"


class ManilaAPITimeout(ManilaShareException):
    """API timeout error."""

    message = "Manila API request timed out after %(timeout)s seconds"


# Execution context


class ContextCancelled(ShareAdapterException):
    """The execution context was cancelled."""

    message = "Operation cancelled"


class ContextDeadlineExceeded(ContextCancelled):
    """The execution context deadline passed."""

    message = "Operation deadline of %(timeout)s seconds exceeded"


# Backoff


class WaitTimeout(ShareAdapterException):
    """A polled condition was not met within the attempt budget."""

    message = "Timed out waiting for the condition after %(attempts)d attempts"


# Access rights


class AccessRightsListFailure(ShareAdapterException):
    """Listing access rights failed for a reason other than not-found."""

    message = "failed to list access rights: %(details)s"


class AccessRightVanished(ShareAdapterException):
    """An access right we just listed or created is gone."""

    message = (
        "cannot find the access right we've just created "
        "(share %(share_id)s, access_to %(access_to)s)"
    )


class AccessKeyTimeout(WaitTimeout):
    """The backend never assigned an access key to the access right."""

    message = (
        "Timed out waiting for an access key for %(access_to)s on share "
        "%(share_id)s after %(attempts)d attempts"
    )


# Export locations and options


class ExportLocationNotFound(ShareAdapterException):
    """No export location qualifies for mounting."""

    message = "failed to choose an export location: %(details)s"


class ExportLocationParseError(ShareAdapterException):
    """Export location path has an unexpected format."""

    message = "failed to parse address and location from export location '%(path)s'"


class InvalidShareOptions(ShareAdapterException):
    """Share options are malformed."""

    message = "Invalid share options: %(details)s"


class UnsupportedShareProtocol(ShareAdapterException):
    """No share adapter exists for the protocol."""

    message = "Share protocol %(share_proto)s is not supported"
