"""ASGI response sending — translates a Response into ASGI messages."""

from dirserve._internal.asgi import Send
from dirserve.http.response import Response


def _body_allowed(status: int, method: str) -> bool:
    """Whether a response to *method* with *status* carries a body."""
    # RFC: 1xx, 204, and 304 responses and HEAD replies have no body.
    if method == "HEAD":
        return False
    return not (100 <= status < 200 or status in {204, 304})


async def send_response(response: Response, send: Send, *, method: str = "GET") -> None:
    """Translate a Response into ASGI send() calls."""
    raw_headers: list[tuple[bytes, bytes]] = [
        (b"content-type", response.content_type.encode("latin-1")),
    ]
    for name, value in response.headers:
        if name.lower() == "content-length":
            continue
        raw_headers.append((name.lower().encode("latin-1"), value.encode("latin-1")))

    # Encode everything before the first send() so a failure leaves nothing half-sent
    body = response.body_bytes
    raw_headers.append((b"content-length", str(len(body)).encode("latin-1")))

    await send(
        {
            "type": "http.response.start",
            "status": response.status,
            "headers": raw_headers,
        }
    )
    await send(
        {
            "type": "http.response.body",
            "body": body if _body_allowed(response.status, method) else b"",
        }
    )
