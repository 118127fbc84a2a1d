"""
Exception hierarchy for the Proof Fixture Toolkit.

Exception Categories:
- RetryableException: Transient failures that may succeed on retry (network)
- NonRetryableException: Permanent failures that won't benefit from retry
- ConfigurationException: Startup/config errors that prevent operation

Loaders never retry or recover; these categories only tell the calling test
harness what kind of failure it is looking at:
- ProviderFetchError -> RetryableException (provider API failures)
- InvalidHeightError -> NonRetryableException (proof below minimum height)
- MalformedCacheError -> NonRetryableException (unreadable cache file)

Filesystem failures are surfaced as the builtin OSError family.
"""

from typing import Optional


class RetryableException(Exception):
    """
    A provider call that may work if the harness tries again later.

    Typical causes: the Esplora host answering HTTP 429 under load, a read
    timeout on a slow ``/block/{hash}`` lookup, a dropped keep-alive
    connection in the shared httpx pool.
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NonRetryableException(Exception):
    """
    A fixture problem that stays until someone changes the inputs.

    Typical causes: a proof-info cache file truncated mid-write, a proof
    transaction mined below the requested initial height, a txid that never
    confirmed. Deleting the cache file or picking another height is the fix.
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationException(NonRetryableException):
    """Raised for an empty PF_PROVIDER_URL or a step/block count below 1."""

    pass


class InvalidHeightError(NonRetryableException):
    """
    Raised when a proof's block height is below the requested minimum.

    An unconfirmed transaction (no block height at all) also fails here.
    """

    def __init__(self, block_height: Optional[int], initial_height: int):
        if block_height is None:
            message = (
                "transaction is not confirmed, "
                f"expected block height >= {initial_height}"
            )
        else:
            message = (
                "block height lower than initial height: "
                f"{block_height} < {initial_height}"
            )
        super().__init__(message)
        self.block_height = block_height
        self.initial_height = initial_height


class ProviderFetchError(RetryableException):
    """
    Exception for provider API failures.

    Inherits from RetryableException because provider failures
    are often transient (rate limits, timeouts).
    """

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class MalformedCacheError(NonRetryableException):
    """Raised when a cache file is not valid JSON or misses core fields."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"malformed cache file {path}: {reason}")
        self.path = path
        self.reason = reason
