"""
Tests for HttpGatewayTransport over httpx.MockTransport.

A small in-memory gateway app stores POSTed bytes and serves them back, which
exercises upload/download round trips, the 404 and 413 mappings, and the
local size check.
"""

import httpx
import pytest

from bitcoin_da_client.config import EndpointConfig
from bitcoin_da_client.errors import NotFound, ProtocolError, RequestTimeout, TooLarge, TransportError
from bitcoin_da_client.gateway.http import HttpGatewayTransport
from bitcoin_da_client.types import VersionHash

pytestmark = pytest.mark.anyio

VH = VersionHash.parse("01" + "11" * 31)


class GatewayApp:
    def __init__(self, *, echo_json: bool = False) -> None:
        self.store = {}
        self.requests = []
        self.echo_json = echo_json

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = request.url.path.rsplit("/", 1)[-1]
        if request.method == "POST":
            self.store[key] = request.content
            if self.echo_json:
                return httpx.Response(200, json={"versionhash": key, "size": len(request.content)})
            return httpx.Response(201)
        if key not in self.store:
            return httpx.Response(404, json={"error": "not found"})
        return httpx.Response(200, content=self.store[key], headers={"Content-Type": "application/octet-stream"})


def _gateway(handler, **cfg) -> HttpGatewayTransport:
    config = EndpointConfig(gateway_url="http://gateway.test/vh/", **cfg)
    return HttpGatewayTransport(config, client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))


@pytest.mark.parametrize("data", [b"", b"hello", bytes(range(256)) * 40])
async def test_upload_then_download_is_identical(data):
    app = GatewayApp()
    gw = _gateway(app)
    ref = await gw.upload(data, version_hash=VH)
    assert ref.reference == str(VH)
    assert await gw.download(ref.reference) == data


async def test_urls_and_content_type():
    app = GatewayApp(echo_json=True)
    gw = _gateway(app)
    ref = await gw.upload(b"abc", version_hash=VH)
    assert ref.size == 3
    post = app.requests[0]
    assert str(post.url) == f"http://gateway.test/vh/blob/{VH}"
    assert post.headers["Content-Type"] == "application/octet-stream"

    await gw.download(str(VH))
    assert str(app.requests[1].url) == f"http://gateway.test/vh/blob/{VH}"


async def test_unknown_key_is_not_found():
    gw = _gateway(GatewayApp())
    with pytest.raises(NotFound) as ei:
        await gw.download(str(VH))
    assert ei.value.source == "gateway"


async def test_oversize_refused_before_request():
    app = GatewayApp()
    gw = _gateway(app, max_blob_size=4)
    with pytest.raises(TooLarge) as ei:
        await gw.upload(b"12345", version_hash=VH)
    assert (ei.value.size, ei.value.limit) == (5, 4)
    assert app.requests == []
    # exactly at the limit is fine
    await gw.upload(b"1234", version_hash=VH)


async def test_413_is_too_large():
    gw = _gateway(lambda r: httpx.Response(413, text="Payload Too Large"))
    with pytest.raises(TooLarge):
        await gw.upload(b"x", version_hash=VH)


async def test_server_error_is_transport():
    gw = _gateway(lambda r: httpx.Response(503, text="unavailable"))
    with pytest.raises(TransportError) as ei:
        await gw.download(str(VH))
    assert ei.value.http_status == 503


async def test_network_error_is_transport_and_timeout_is_timeout():
    def refused(request):
        raise httpx.ConnectError("refused", request=request)

    def slow(request):
        raise httpx.ConnectTimeout("timed out", request=request)

    with pytest.raises(TransportError):
        await _gateway(refused).upload(b"x", version_hash=VH)
    with pytest.raises(RequestTimeout):
        await _gateway(slow).download(str(VH))


JSON_BLOBS = [b'{"data": "00"}', b'{"data": "0x68656c6c6f"}', b"[1,2]", b'{"a":1}']


@pytest.mark.parametrize("blob", JSON_BLOBS)
async def test_json_shaped_blob_is_returned_as_stored(blob):
    store = {}

    def app(request: httpx.Request) -> httpx.Response:
        key = request.url.path.rsplit("/", 1)[-1]
        if request.method == "POST":
            store[key] = request.content
            return httpx.Response(201)
        return httpx.Response(200, content=store[key], headers={"Content-Type": "application/json"})

    gw = _gateway(app)
    ref = await gw.upload(blob, version_hash=VH)
    assert await gw.download(ref.reference) == blob


async def test_unkeyed_upload_needs_reference():
    with pytest.raises(ProtocolError):
        await _gateway(lambda r: httpx.Response(200)).upload(b"x")

    gw = _gateway(lambda r: httpx.Response(200, json={"reference": "abc"}))
    ref = await gw.upload(b"x")
    assert ref.reference == "abc"
