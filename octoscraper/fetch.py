from __future__ import annotations

import http.client
import logging
import time
from dataclasses import dataclass, field, replace
from typing import Mapping, Optional

import requests
from requests.exceptions import ChunkedEncodingError


logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/93.0.45"
)

DEFAULT_HEADERS = {
    "Accept": "application/json, text/plain, */*",
    "User-Agent": DEFAULT_USER_AGENT,
    # no compression: the raw bytes are searched as-is
    "Accept-Encoding": "identity",
}


class FetchTimeout(requests.Timeout):
    """The whole request took longer than ``FetchConfig.total_timeout``."""


@dataclass(frozen=True)
class FetchConfig:
    headers: Mapping[str, str] = field(default_factory=lambda: dict(DEFAULT_HEADERS))
    connect_timeout: float = 10.0
    read_timeout: float = 5.0
    total_timeout: float = 300.0
    verify_tls: bool = False
    chunk_size: int = 64 * 1024

    def with_user_agent(self, user_agent: Optional[str]) -> "FetchConfig":
        if not user_agent:
            return self
        headers = dict(self.headers)
        headers["User-Agent"] = user_agent
        return replace(self, headers=headers)


def create_session(config: Optional[FetchConfig] = None) -> requests.Session:
    config = config or FetchConfig()
    session = requests.Session()
    session.headers.update(config.headers)
    session.verify = config.verify_tls
    return session


def fetch_page(
    url: str,
    config: Optional[FetchConfig] = None,
    session: Optional[requests.Session] = None,
) -> bytes:
    """
    Fetch the raw bytes of a page.

    A body cut short by the server is not an error: the bytes received so far
    are returned. Any other transport error propagates unchanged.
    Raises requests.HTTPError for non-2xx responses and FetchTimeout when the
    whole call exceeds ``config.total_timeout``.
    """
    config = config or FetchConfig()
    own_session = session is None
    sess = session or create_session(config)
    deadline = time.monotonic() + config.total_timeout
    try:
        with sess.get(
            url,
            headers=dict(config.headers),
            timeout=(config.connect_timeout, config.read_timeout),
            verify=config.verify_tls,
            stream=True,
        ) as response:
            response.raise_for_status()
            chunks = []
            try:
                for chunk in response.iter_content(chunk_size=config.chunk_size):
                    chunks.append(chunk)
                    if time.monotonic() > deadline:
                        raise FetchTimeout(
                            f"{url}: no complete response within {config.total_timeout}s"
                        )
            except ChunkedEncodingError as exc:
                if not _is_truncated_body(exc):
                    raise
                logger.warning(
                    "Truncated response body from %s after %d bytes: %s",
                    url,
                    sum(len(c) for c in chunks),
                    exc,
                )
            body = b"".join(chunks)
    finally:
        if own_session:
            sess.close()
    logger.debug("Fetched %s (%d bytes)", url, len(body))
    return body


def _is_truncated_body(exc: BaseException) -> bool:
    # requests wraps urllib3's ProtocolError, which carries the IncompleteRead
    seen = set()
    pending = [exc]
    while pending:
        err = pending.pop()
        if id(err) in seen:
            continue
        seen.add(id(err))
        if isinstance(err, http.client.IncompleteRead):
            return True
        pending.extend(a for a in err.args if isinstance(a, BaseException))
        for linked in (err.__cause__, err.__context__):
            if linked is not None:
                pending.append(linked)
    return False
