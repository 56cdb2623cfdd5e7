import json
import os
import threading
import time
import typing

import httpx
import pytest
from uvicorn.config import Config
from uvicorn.server import Server

import httphat

ENVIRONMENT_VARIABLES = {
    "HAT_URL",
    "HTTP_PROXY",
    "HTTPS_PROXY",
    "ALL_PROXY",
    "NO_PROXY",
}


@pytest.fixture(scope="function", autouse=True)
def clean_environ():
    """Keeps os.environ clean for every test without having to mock os.environ"""
    original_environ = os.environ.copy()
    os.environ.clear()
    os.environ.update(
        {
            k: v
            for k, v in original_environ.items()
            if k not in ENVIRONMENT_VARIABLES and k.upper() not in ENVIRONMENT_VARIABLES
        }
    )
    yield
    os.environ.clear()
    os.environ.update(original_environ)


# ---------------------------------------------------------------------------
# Offline helpers
# ---------------------------------------------------------------------------


class CountingStream(httpx.SyncByteStream):
    """Response body that counts how often it is closed."""

    def __init__(self, content: bytes) -> None:
        self.content = content
        self.close_count = 0

    def __iter__(self) -> typing.Iterator[bytes]:
        yield self.content

    def close(self) -> None:
        self.close_count += 1


def echo(request: httpx.Request) -> httpx.Response:
    body = request.read()
    return httpx.Response(
        200,
        json={
            "method": request.method,
            "url": str(request.url),
            "path": request.url.path,
            "query": request.url.query.decode("ascii"),
            "body": body.decode("utf-8"),
            "headers": dict(request.headers),
        },
    )


def make_t(
    handler: typing.Callable[[httpx.Request], httpx.Response] = echo,
    url: str = "http://example.test",
) -> httphat.T:
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return httphat.T(url, client=client)


@pytest.fixture
def t() -> typing.Iterator[httphat.T]:
    t = make_t()
    yield t
    t.client.close()


# ---------------------------------------------------------------------------
# Live server
# ---------------------------------------------------------------------------

Message = typing.Dict[str, typing.Any]
Receive = typing.Callable[[], typing.Awaitable[Message]]
Send = typing.Callable[
    [typing.Dict[str, typing.Any]], typing.Coroutine[None, None, None]
]
Scope = typing.Dict[str, typing.Any]


async def app(scope: Scope, receive: Receive, send: Send) -> None:
    assert scope["type"] == "http"
    if scope["path"].startswith("/status"):
        await status_code(scope, receive, send)
    elif scope["path"].startswith("/echo"):
        await echo_request(scope, receive, send)
    else:
        await hello_world(scope, receive, send)


async def hello_world(scope: Scope, receive: Receive, send: Send) -> None:
    await send(
        {
            "type": "http.response.start",
            "status": 200,
            "headers": [[b"content-type", b"text/plain"]],
        }
    )
    await send({"type": "http.response.body", "body": b"Hello, world!"})


async def status_code(scope: Scope, receive: Receive, send: Send) -> None:
    status_code = int(scope["path"].replace("/status/", ""))
    await send(
        {
            "type": "http.response.start",
            "status": status_code,
            "headers": [[b"content-type", b"text/plain"]],
        }
    )
    await send({"type": "http.response.body", "body": b"Hello, world!"})


async def echo_request(scope: Scope, receive: Receive, send: Send) -> None:
    body = b""
    more_body = True

    while more_body:
        message = await receive()
        body += message.get("body", b"")
        more_body = message.get("more_body", False)

    payload = {
        "method": scope["method"],
        "path": scope["path"],
        "query": scope["query_string"].decode("ascii"),
        "body": body.decode("utf-8"),
    }
    await send(
        {
            "type": "http.response.start",
            "status": 200,
            "headers": [[b"content-type", b"application/json"]],
        }
    )
    await send({"type": "http.response.body", "body": json.dumps(payload).encode()})


class TestServer(Server):
    @property
    def url(self) -> httpx.URL:
        port = self.servers[0].sockets[0].getsockname()[1]
        return httpx.URL(f"http://{self.config.host}:{port}/")

    def install_signal_handlers(self) -> None:
        # Disable the default installation of handlers for signals such as SIGTERM,
        # because it can only be done in the main thread.
        pass


def serve_in_thread(server: TestServer) -> typing.Iterator[TestServer]:
    thread = threading.Thread(target=server.run)
    thread.start()
    try:
        while not server.started:
            time.sleep(1e-3)
        yield server
    finally:
        server.should_exit = True
        thread.join()


@pytest.fixture(scope="session")
def server() -> typing.Iterator[TestServer]:
    config = Config(app=app, lifespan="off", loop="asyncio", host="127.0.0.1", port=0)
    server = TestServer(config=config)
    yield from serve_in_thread(server)
