"""URL validation utilities.

Two levels of checking live here:

- ``validate_url`` is a pure syntax check (http/https scheme plus a host)
  used when articles are constructed.
- ``LinkValidator`` probes a link over the network. It is advisory only: a
  failed probe is logged by the caller but never removes an article, and any
  error or ambiguous answer counts as a live link.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Dict, Iterable, Optional
from urllib.parse import urlparse

import httpx

logger = logging.getLogger(__name__)


# =============================================================================
# Data Classes
# =============================================================================

@dataclass
class ValidationResult:
    """Result of validating a single URL."""
    is_valid: bool
    url: str
    error: Optional[str] = None


# =============================================================================
# Constants
# =============================================================================

# HEAD answers that warrant a second, ranged GET before deciding
RETRY_WITH_GET_STATUSES = frozenset({403, 405})

# GET answers that definitely mean the page is gone
DEAD_LINK_STATUSES = frozenset({404, 410})

RANGE_HEADER = "bytes=0-1023"


# =============================================================================
# URL Validation Functions
# =============================================================================

def validate_url(url: Optional[str]) -> ValidationResult:
    """
    Validate a single URL.

    Args:
        url: The URL string to validate.

    Returns:
        ValidationResult with is_valid flag and error message if invalid.
    """
    # Handle None input
    if url is None:
        return ValidationResult(
            is_valid=False,
            url="",
            error="URL cannot be None"
        )

    # Handle empty string
    if not url or not url.strip():
        return ValidationResult(
            is_valid=False,
            url=url or "",
            error="URL cannot be empty"
        )

    url = url.strip()

    # Parse the URL
    try:
        parsed = urlparse(url)
    except ValueError as e:
        return ValidationResult(
            is_valid=False,
            url=url,
            error=f"Failed to parse URL: {e}"
        )

    if parsed.scheme.lower() not in ('http', 'https'):
        return ValidationResult(
            is_valid=False,
            url=url,
            error=f"Invalid URL scheme: {parsed.scheme or '(none)'}. Use http:// or https://"
        )

    # Check for valid netloc (domain)
    if not parsed.netloc:
        return ValidationResult(
            is_valid=False,
            url=url,
            error="URL must have a valid domain"
        )

    return ValidationResult(is_valid=True, url=url)


# =============================================================================
# Link Liveness Probe
# =============================================================================

class LinkValidator:
    """
    Best-effort liveness probe for article links.

    Sends a HEAD request first. Servers that reject HEAD (403/405) get a
    second GET limited to the first kilobyte. Timeouts, network errors and
    answers that do not clearly say "gone" all return True.
    """

    def __init__(self, timeout: float = 3.0):
        self.timeout = timeout
        self._client: Optional[httpx.AsyncClient] = None

    async def get_client(self) -> httpx.AsyncClient:
        """Get or create an HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                follow_redirects=True,
                headers={
                    "User-Agent": (
                        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
                        "AppleWebKit/537.36 (KHTML, like Gecko) "
                        "Chrome/120.0.0.0 Safari/537.36"
                    ),
                },
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    async def check(self, url: str) -> bool:
        """
        Check whether a link looks alive.

        Args:
            url: The link to probe.

        Returns:
            False only when the server clearly reports the page missing,
            True otherwise.
        """
        if not validate_url(url).is_valid:
            return False

        try:
            client = await self.get_client()
            head = await client.head(url, timeout=self.timeout)

            if head.is_success or head.is_redirect:
                return True

            if head.status_code in RETRY_WITH_GET_STATUSES:
                get = await client.get(
                    url,
                    headers={"Range": RANGE_HEADER},
                    timeout=self.timeout,
                )
                if get.is_success or get.is_redirect:
                    return True
                if get.status_code in DEAD_LINK_STATUSES:
                    return False
                logger.debug(f"Ambiguous GET status {get.status_code} for {url}, accepting link")
                return True

            return False

        except Exception as e:
            logger.debug(f"Link validation failed for {url}, accepting link: {e}")
            return True

    async def check_many(self, urls: Iterable[str]) -> Dict[str, bool]:
        """Probe several links concurrently."""
        urls = list(dict.fromkeys(urls))
        results = await asyncio.gather(*(self.check(url) for url in urls))
        return dict(zip(urls, results))


# =============================================================================
# Exports
# =============================================================================

__all__ = [
    'ValidationResult',
    'LinkValidator',
    'validate_url',
]
