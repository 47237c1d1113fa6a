"""Shared async helpers for reading repository documents.

Encapsulates retry, status and error handling so the resolver does not
duplicate try/except blocks. ``http(s)`` URLs go through an
``aiohttp.ClientSession``; ``file`` URLs are read from disk off the event loop.
"""
from __future__ import annotations

import asyncio
import logging
import os
import re
import urllib.parse
import urllib.request
from typing import List, Optional

import aiohttp

from ..constants import Constants
from ..errors import FetchError
from .logging_utils import Timer, extra_context, is_debug_enabled, safe_url

logger = logging.getLogger(__name__)

_HREF_RE = re.compile(r"""<a\s[^>]*href=["']([^"'?#]+)["']""", re.IGNORECASE)


def _file_path(url: str) -> str:
    return urllib.request.url2pathname(urllib.parse.urlsplit(url).path)


def _read_file(path: str) -> Optional[str]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            return f.read()
    except FileNotFoundError:
        return None
    except IsADirectoryError:
        return None


async def fetch_text(
    session: aiohttp.ClientSession,
    url: str,
    *,
    context: str,
    retries: int = Constants.HTTP_RETRY_MAX,
) -> Optional[str]:
    """Fetch a document.

    Returns:
        The body, or None when the document does not exist (HTTP 404/410
        or a missing file).

    Raises:
        FetchError: on other statuses or once retries are exhausted.
    """
    safe_target = safe_url(url)
    scheme = urllib.parse.urlsplit(url).scheme.lower()
    if scheme == "file":
        try:
            return await asyncio.to_thread(_read_file, _file_path(url))
        except UnicodeDecodeError as exc:
            raise FetchError(safe_target, f"undecodable body: {exc}") from exc
        except OSError as exc:
            raise FetchError(safe_target, str(exc)) from exc
    if scheme not in ("http", "https"):
        raise FetchError(safe_target, f"unsupported URL scheme {scheme!r}")

    last_error = "no attempt made"
    for attempt in range(max(retries, 1)):
        if attempt:
            await asyncio.sleep(Constants.HTTP_RETRY_BASE_DELAY_SEC * (2 ** (attempt - 1)))
        with Timer() as t:
            if is_debug_enabled(logger):
                logger.debug("HTTP request", extra=extra_context(
                    event="http_request", component="http_client", action="GET",
                    target=safe_target, attempt=attempt + 1, resolver=context,
                ))
            try:
                async with session.get(url) as response:
                    status = response.status
                    if status in (404, 410):
                        if is_debug_enabled(logger):
                            logger.debug("HTTP not found", extra=extra_context(
                                event="http_response", component="http_client", action="GET",
                                outcome="not_found", status_code=status, target=safe_target,
                                duration_ms=t.duration_ms(),
                            ))
                        return None
                    if status >= 500:
                        last_error = f"HTTP {status}"
                        continue
                    if status != 200:
                        raise FetchError(safe_target, f"HTTP {status}")
                    try:
                        body = await response.text()
                    except UnicodeDecodeError as exc:
                        raise FetchError(safe_target, f"undecodable body: {exc}") from exc
            except asyncio.TimeoutError:
                last_error = "timeout"
                if is_debug_enabled(logger):
                    logger.debug("HTTP timeout", extra=extra_context(
                        event="http_exception", component="http_client", action="GET",
                        outcome="timeout", attempt=attempt + 1, target=safe_target,
                    ))
                continue
            except aiohttp.ClientError as exc:
                last_error = str(exc) or type(exc).__name__
                if is_debug_enabled(logger):
                    logger.debug("HTTP request exception", extra=extra_context(
                        event="http_exception", component="http_client", action="GET",
                        outcome="request_exception", attempt=attempt + 1, target=safe_target,
                    ))
                continue
            if is_debug_enabled(logger):
                logger.debug("HTTP response ok", extra=extra_context(
                    event="http_response", component="http_client", action="GET",
                    outcome="success", status_code=status, target=safe_target,
                    duration_ms=t.duration_ms(),
                ))
            return body

    raise FetchError(safe_target, f"request failed after {max(retries, 1)} attempts: {last_error}")


def parse_directory_listing(html: str) -> List[str]:
    """Extract child directory names from an HTML index page."""
    names: List[str] = []
    for href in _HREF_RE.findall(html):
        if not href.endswith("/") or href.startswith(("/", "../", "./")) or "://" in href:
            continue
        name = urllib.parse.unquote(href.rstrip("/"))
        if name and "/" not in name and name not in names:
            names.append(name)
    return names


def _list_dir(path: str) -> Optional[List[str]]:
    try:
        return sorted(
            entry for entry in os.listdir(path) if os.path.isdir(os.path.join(path, entry))
        )
    except (FileNotFoundError, NotADirectoryError):
        return None


async def list_directory(
    session: aiohttp.ClientSession,
    url: str,
    *,
    context: str,
    retries: int = Constants.HTTP_RETRY_MAX,
) -> Optional[List[str]]:
    """List sub-directories under ``url``; None when the directory is missing."""
    if not url.endswith("/"):
        url = f"{url}/"
    if urllib.parse.urlsplit(url).scheme.lower() == "file":
        try:
            return await asyncio.to_thread(_list_dir, _file_path(url))
        except OSError as exc:
            raise FetchError(safe_url(url), str(exc)) from exc
    html = await fetch_text(session, url, context=context, retries=retries)
    if html is None:
        return None
    return parse_directory_listing(html)
