"""HTTP transport for remote providers."""

import requests

from bibmerge.errors import ProviderUnavailableError

__all__ = ["fetch_text", "DEFAULT_HEADERS"]

DEFAULT_HEADERS = {
    "Accept": "application/json",
    "User-Agent": "bibmerge (bibliography consolidation)",
}


def fetch_text(url: str, timeout: float) -> str:
    """GET a URL and return the decoded body.

    Parameters
    ----------
    url : str
        URL to fetch.
    timeout : float
        Connect and read timeout in seconds.

    Returns
    -------
    str
        Response text.

    Raises
    ------
    ProviderUnavailableError
        On timeout, connection failure (including unknown host) or an HTTP
        error status.
    """
    try:
        response = requests.get(url, headers=DEFAULT_HEADERS, timeout=(timeout, timeout))
        response.raise_for_status()
    except requests.exceptions.Timeout as e:
        raise ProviderUnavailableError(f"Network error: {e}") from e
    except requests.exceptions.ConnectionError as e:
        raise ProviderUnavailableError(f"Connection error: {e}") from e
    except requests.exceptions.RequestException as e:
        raise ProviderUnavailableError(f"HTTP error: {e}") from e
    return response.text
