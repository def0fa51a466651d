"""Export location selection and parsing."""

from typing import Callable, List, Tuple

from .exceptions import ExportLocationNotFound, ExportLocationParseError
from .models import ExportLocation

ExportLocationPredicate = Callable[[int, ExportLocation], bool]


def any_export_location(index: int, location: ExportLocation) -> bool:
    """Predicate accepting every export location."""
    return True


def find_export_location(
    locations: List[ExportLocation], predicate: ExportLocationPredicate
) -> int:
    """Choose an export location usable for mounting.

    Admin-only locations and locations rejected by ``predicate`` are skipped.
    The first preferred location wins; otherwise the first acceptable one.

    Args:
        locations: Export locations of the share
        predicate: Called with (index, location), True if acceptable

    Returns:
        Index of the chosen location in ``locations``

    Raises:
        ExportLocationNotFound: No location qualifies
    """
    if not locations:
        raise ExportLocationNotFound(details="export locations list is empty")

    first_match = None
    for i, location in enumerate(locations):
        if location.is_admin_only:
            continue
        if not predicate(i, location):
            continue
        if location.preferred:
            return i
        if first_match is None:
            first_match = i

    if first_match is None:
        raise ExportLocationNotFound(details="no usable export location found")

    return first_match


def split_export_location_path(path: str) -> Tuple[str, str]:
    """Split an export location path at its last ':'.

    Examples:
        "10.0.0.1:6789,10.0.0.2:6789:/volumes/_nogroup/abc"
            -> ("10.0.0.1:6789,10.0.0.2:6789", "/volumes/_nogroup/abc")

    Raises:
        ExportLocationParseError: No address part in the path
    """
    delim = path.rfind(":")
    if delim <= 0:
        raise ExportLocationParseError(path=path)
    return path[:delim], path[delim + 1:]
