import threading
import time
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any, Callable, Generator
from unittest.mock import Mock, patch

import pytest
import requests

from ota_sync.errors import PartnerRejected, TransportError
from ota_sync.network.client import OtaHttpClient, response_body, should_retry


@pytest.mark.unit
def test_should_retry_on_rate_limit_and_server_errors(make_response: Callable[..., Mock]) -> None:
    """429 and 5xx responses are retried, 4xx and missing responses are not."""
    assert should_retry(make_response(429)) is True
    assert should_retry(make_response(503)) is True
    assert should_retry(make_response(401)) is False
    assert should_retry(None) is False


@pytest.mark.unit
def test_request_returns_2xx_response(http_client: OtaHttpClient, mock_session: Mock) -> None:
    """A 2xx response is returned and the remaining deadline is passed as timeout."""
    res = http_client.post(
        "https://agoda.example.test/ari",
        partner="agoda",
        timeout=30,
        headers={"Authorization": "Bearer k"},
        json={"HotelId": "H1"},
    )

    assert res.status_code == 200
    args, kwargs = mock_session.request.call_args
    assert args == ("POST", "https://agoda.example.test/ari")
    assert kwargs["json"] == {"HotelId": "H1"}
    assert 0 < kwargs["timeout"] <= 30
    assert kwargs["stream"] is True


@pytest.mark.unit
def test_request_raises_partner_rejected_on_4xx(
    http_client: OtaHttpClient, mock_session: Mock, make_response: Callable[..., Mock]
) -> None:
    """A 401 is not retried and carries the status code in its message."""
    mock_session.request.return_value = make_response(401, text="bad credentials")

    with pytest.raises(PartnerRejected) as exc_info:
        http_client.post("https://x.test", partner="agoda", timeout=30)

    assert str(exc_info.value) == "Request failed with status code 401"
    assert exc_info.value.body == "bad credentials"
    assert mock_session.request.call_count == 1


@pytest.mark.unit
def test_request_retries_server_errors_then_succeeds(
    http_client: OtaHttpClient, mock_session: Mock, make_response: Callable[..., Mock]
) -> None:
    """A 503 followed by a 200 results in the 200 being returned."""
    mock_session.request.side_effect = [make_response(503), make_response(200)]

    res = http_client.post("https://x.test", partner="airbnb", timeout=30)

    assert res.status_code == 200
    assert mock_session.request.call_count == 2


@pytest.mark.unit
def test_request_gives_up_after_max_retries(
    mock_session: Mock, make_response: Callable[..., Mock]
) -> None:
    """After max_retries the last 5xx is raised as PartnerRejected."""
    mock_session.request.return_value = make_response(500)
    client = OtaHttpClient(session=mock_session, max_retries=2, retry_delay=0)

    with pytest.raises(PartnerRejected):
        client.post("https://x.test", partner="airbnb", timeout=30)

    assert mock_session.request.call_count == 3


@pytest.mark.unit
def test_request_does_not_retry_when_delay_exceeds_deadline(
    mock_session: Mock, make_response: Callable[..., Mock]
) -> None:
    """A retry that would end after the deadline is not attempted."""
    mock_session.request.return_value = make_response(503)
    client = OtaHttpClient(session=mock_session, max_retries=2, retry_delay=60)

    with patch("ota_sync.network.client.time.sleep") as mock_sleep:
        with pytest.raises(PartnerRejected):
            client.post("https://x.test", partner="agoda", timeout=1)

    mock_sleep.assert_not_called()
    assert mock_session.request.call_count == 1


@pytest.mark.unit
def test_request_timeout_becomes_transport_error(
    http_client: OtaHttpClient, mock_session: Mock
) -> None:
    """A requests timeout is never retried and reports the configured deadline."""
    mock_session.request.side_effect = requests.Timeout("read timed out")

    with pytest.raises(TransportError, match="timeout of 30s exceeded"):
        http_client.post("https://x.test", partner="booking_com", timeout=30)

    assert mock_session.request.call_count == 1


@pytest.mark.unit
def test_request_connection_error_becomes_transport_error(
    http_client: OtaHttpClient, mock_session: Mock
) -> None:
    """Refused connections and DNS failures surface as TransportError."""
    mock_session.request.side_effect = requests.ConnectionError("connection refused")

    with pytest.raises(TransportError, match="connection refused"):
        http_client.get("https://x.test/test", partner="airbnb", timeout=15)


@pytest.mark.unit
def test_response_body_decodes_json_and_falls_back_to_text(
    make_response: Callable[..., Mock],
) -> None:
    assert response_body(make_response(200, {"ok": True})) == {"ok": True}
    assert (
        response_body(make_response(200, content_type="application/xml", text="<ok/>")) == "<ok/>"
    )


@pytest.mark.unit
def test_close_closes_session(http_client: OtaHttpClient, mock_session: Mock) -> None:
    http_client.close()
    mock_session.close.assert_called_once()


@pytest.mark.unit
def test_request_deadline_covers_a_stalled_partner(
    mock_session: Mock, make_response: Callable[..., Mock]
) -> None:
    """A partner that never answers is cut off at the deadline, not at the socket timeout."""
    release = threading.Event()

    def stall(method: str, url: str, **kwargs: Any) -> Mock:
        release.wait(5)
        return make_response(200)

    mock_session.request.side_effect = stall
    client = OtaHttpClient(session=mock_session, max_retries=0)

    started = time.monotonic()
    try:
        with pytest.raises(TransportError, match="timeout of 0.3s exceeded"):
            client.post("https://x.test", partner="agoda", timeout=0.3)
    finally:
        release.set()

    assert time.monotonic() - started < 2


TRICKLED_BODY = b'{"status": "accepted"}'


class TricklingHandler(BaseHTTPRequestHandler):
    """Sends its headers at once, then the body one byte every 0.5s."""

    def do_POST(self) -> None:
        self.rfile.read(int(self.headers.get("Content-Length", 0)))
        self.send_response(200)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(TRICKLED_BODY)))
        self.end_headers()
        try:
            for i in range(len(TRICKLED_BODY)):
                self.wfile.write(TRICKLED_BODY[i : i + 1])
                self.wfile.flush()
                time.sleep(0.5)
        except (BrokenPipeError, ConnectionResetError):
            return

    def log_message(self, format: str, *args: Any) -> None:
        pass


@pytest.fixture
def trickling_server() -> Generator[str, None, None]:
    server = ThreadingHTTPServer(("127.0.0.1", 0), TricklingHandler)
    server.daemon_threads = True
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield f"http://127.0.0.1:{server.server_address[1]}/ari"
    server.shutdown()
    server.server_close()


@pytest.mark.unit
def test_request_deadline_covers_a_trickled_body(trickling_server: str) -> None:
    """Bytes arriving slowly but steadily do not extend the deadline."""
    client = OtaHttpClient(max_retries=0)
    client.session.trust_env = False  # ignore proxy settings for the local server

    started = time.monotonic()
    try:
        with pytest.raises(TransportError, match="timeout of 1s exceeded"):
            client.post(trickling_server, partner="agoda", timeout=1.0, json={"HotelId": "H1"})
    finally:
        client.close()

    assert time.monotonic() - started < 2.5
