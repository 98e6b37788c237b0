"""Fetching compiled MIB documents.

A compiled module is one JSON document named ``<MODULE>.json``, kept in a
local directory or served over http(s). Both kinds of location can appear
on the same search path.
"""

import json
from pathlib import Path
from typing import Any
from urllib.parse import urlparse

import requests

from .logging_config import get_logger

logger = get_logger(__name__)

Document = tuple[str, Any]


class DocumentError(Exception):
    """A module document exists but could not be read or decoded."""

    pass


def is_url(location: str) -> bool:
    parsed = urlparse(location)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def read_document(file_path: str | Path) -> Document:
    """Decode a JSON document from disk.

    Returns:
        ``(path, data)``.

    Raises:
        FileNotFoundError: If there is no such file.
        DocumentError: If the file is unreadable or not JSON.
    """
    path = Path(file_path)
    if not path.is_file():
        raise FileNotFoundError(f"File not found: {path}")

    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        logger.error(f"Cannot read {path}: {e}")
        raise DocumentError(f"Cannot read {path}: {e}") from e

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        logger.error(f"Invalid JSON in file {path}: {e}")
        raise DocumentError(f"Invalid JSON in file {path}: {e}") from e

    logger.debug(f"Read {path}")
    return str(path), data


def fetch_document(url: str, timeout: int = 30) -> Document | None:
    """Download and decode a JSON document.

    A 404 answer means the server does not hold the module, so it yields
    None instead of an error.

    Raises:
        DocumentError: On a malformed URL, a transport failure, any other
            HTTP error status, or a body that is not JSON.
    """
    if not is_url(url):
        raise DocumentError(f"Invalid URL: {url}")

    try:
        response = requests.get(url, timeout=timeout)
    except requests.exceptions.Timeout as e:
        raise DocumentError(f"Timed out after {timeout}s: {url}") from e
    except requests.exceptions.ConnectionError as e:
        raise DocumentError(f"Connection error for URL: {url}") from e
    except requests.exceptions.RequestException as e:
        raise DocumentError(f"Request to {url} failed: {e}") from e

    if response.status_code == 404:
        logger.debug(f"No document at {url}")
        return None

    try:
        response.raise_for_status()
    except requests.exceptions.HTTPError as e:
        raise DocumentError(f"HTTP error {response.status_code} for URL: {url}") from e

    try:
        data = response.json()
    except ValueError as e:
        raise DocumentError(f"Invalid JSON response from URL {url}: {e}") from e

    logger.debug(f"Fetched {url}")
    return url, data


def find_module_document(
    module_name: str, locations: list[str], timeout: int = 30
) -> Document | None:
    """Return the first ``<module_name>.json`` found along ``locations``, or None.

    Raises:
        DocumentError: If a matching document cannot be read.
    """
    filename = f"{module_name}.json"
    for location in locations:
        if is_url(location):
            found = fetch_document(f"{location.rstrip('/')}/{filename}", timeout)
        else:
            try:
                found = read_document(Path(location) / filename)
            except FileNotFoundError:
                found = None
        if found is not None:
            return found
    return None
