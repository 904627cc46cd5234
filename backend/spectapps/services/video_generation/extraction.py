"""
Locate the output video URL in a prediction's loosely-typed output.

Output schemas differ per model and are not documented, so extraction is a
best-effort walk over a fixed list of candidate keys rather than a schema.
"""

import logging
from typing import Any, Dict, Optional, Sequence

from spectapps.core.exceptions import NoURLFoundError, InvalidOutputFormatError

logger = logging.getLogger(__name__)

CANDIDATE_KEYS = (
    "url",
    "video_url",
    "output_url",
    "file_url",
    "result",
    "output",
    "video",
    "mp4",
)


def _find_in_mapping(mapping: Dict[str, Any], keys: Sequence[str] = CANDIDATE_KEYS) -> Optional[str]:
    for key in keys:
        value = mapping.get(key)
        if isinstance(value, str):
            return value
    return None


def extract_video_url(output: Any) -> str:
    """Return the media URL held by ``output``.

    Lists yield their first string element, strings are returned unchanged,
    and dicts are searched by candidate key at the top level and then one
    level down inside nested dicts.
    """
    logger.debug(f"Extracting video URL from output: {output!r}")

    if isinstance(output, str):
        return output

    if isinstance(output, (list, tuple)):
        for item in output:
            if isinstance(item, str):
                return item
        raise NoURLFoundError("No video URL found")

    if isinstance(output, dict):
        url = _find_in_mapping(output)
        if url is not None:
            return url

        for value in output.values():
            if isinstance(value, dict):
                url = _find_in_mapping(value)
                if url is not None:
                    return url

        raise NoURLFoundError("No video URL found in output")

    raise InvalidOutputFormatError("Invalid output format")
