"""
Upstream Client

Fetches the raw timetable document from the Les Mills timetable API.
"""

import logging
from typing import Any, Dict, List, Sequence, Tuple

import requests

from ..errors import UpstreamError

logger = logging.getLogger(__name__)

RawRecord = Dict[str, Any]

SESSIONS_FIELD = "Classes"
CLASS_TYPES_FIELD = "ClassType"


class UpstreamClient:
    """Client for the timetable provider."""

    def __init__(self, url: str, club_codes: Sequence[str], timeout: float = 30.0):
        """
        Initialize the client.

        Args:
            url: Timetable endpoint
            club_codes: Clubs to request the timetable for
            timeout: Network timeout in seconds
        """
        self.url = url
        self.club_codes = tuple(club_codes)
        self.timeout = timeout

    def fetch(self) -> Tuple[List[RawRecord], List[RawRecord]]:
        """
        Fetch the timetable.

        Returns:
            Raw session records and raw class type records

        Raises:
            UpstreamError: on transport failure, non-OK status or a payload
                without the expected top-level arrays
        """
        logger.info("Fetching classes for clubs %s", ",".join(self.club_codes))
        try:
            with requests.post(
                self.url,
                data={"Club": ",".join(self.club_codes)},
                timeout=self.timeout,
            ) as response:
                if response.status_code != requests.codes.ok:
                    raise UpstreamError(
                        f"Returned a non-OK response code ({response.status_code}) from {self.url}"
                    )
                document = response.json()
        except requests.RequestException as e:
            raise UpstreamError(f"Failed to retrieve classes from {self.url}: {e}") from e
        except ValueError as e:
            raise UpstreamError(f"Failed to decode timetable response: {e}") from e

        if not isinstance(document, dict):
            raise UpstreamError("Timetable response is not a JSON object")

        sessions = _extract_array(document, SESSIONS_FIELD)
        class_types = _extract_array(document, CLASS_TYPES_FIELD)
        logger.info("Fetched %d classes and %d class types", len(sessions), len(class_types))
        return sessions, class_types


def _extract_array(document: Dict[str, Any], name: str) -> List[RawRecord]:
    if name not in document:
        raise UpstreamError(f"Timetable response has no {name!r} field")
    value = document[name]
    if not isinstance(value, list):
        raise UpstreamError(f"Timetable field {name!r} is not an array")
    return value
