"""
Cache-Control helpers.

Check-in state is polled by clients; a cached "not checked in" would let the
client offer a check-in that the server must then reject.
"""
import time

from fastapi import Response

NO_STORE_HEADERS = {
    "Cache-Control": "no-store, no-cache, must-revalidate, private, max-age=0",
    "Pragma": "no-cache",
    "Expires": "0",
}

HISTORY_CACHE_CONTROL = "private, max-age=60"


def apply_no_store(response: Response, with_etag: bool = False) -> None:
    for name, value in NO_STORE_HEADERS.items():
        response.headers[name] = value
    if with_etag:
        response.headers["ETag"] = f'"{time.time_ns()}"'


def apply_private_cache(response: Response, cache_control: str = HISTORY_CACHE_CONTROL) -> None:
    response.headers["Cache-Control"] = cache_control
