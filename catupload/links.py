"""Upload links: extract and validate the identifier, build the target URL."""
import re
from urllib.parse import urlparse

from .models import DEFAULT_BASE_URL

IDENTIFIER_PATTERN = re.compile(
    r"[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}"
)


class InvalidLinkError(ValueError):
    """Raised when an upload link does not carry a well-formed identifier."""


def is_valid_identifier(identifier: str) -> bool:
    return bool(IDENTIFIER_PATTERN.fullmatch(identifier or ""))


def extract_identifier(link: str) -> str:
    """
    Return the identifier carried by a link.

    Accepts a bare identifier or any URL whose last non-empty path segment is
    the identifier (``https://host/<identifier>``). Query and fragment are
    ignored.
    """
    value = (link or "").strip()
    if not value:
        raise InvalidLinkError("upload link is empty")

    path = urlparse(value).path if "://" in value else value.split("?", 1)[0].split("#", 1)[0]
    segments = [segment for segment in path.split("/") if segment]
    if not segments:
        raise InvalidLinkError(f"upload link has no identifier: {link}")
    return segments[-1]


def build_upload_target(identifier: str, base_url: str = DEFAULT_BASE_URL) -> str:
    """Validate ``identifier`` and return ``<base_url>/<identifier>``."""
    if not is_valid_identifier(identifier):
        raise InvalidLinkError(
            "The upload link is invalid or malformed. Check the link and try again."
        )
    return f"{base_url.rstrip('/')}/{identifier}"


def resolve_upload_target(link: str, base_url: str = DEFAULT_BASE_URL) -> str:
    """extract_identifier + build_upload_target."""
    return build_upload_target(extract_identifier(link), base_url)
