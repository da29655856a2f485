"""
HTTP client for partner endpoints, with bounded retries inside a hard
per-call deadline and Prometheus instrumentation.

One OtaHttpClient is created per process and shared by every adapter and
every concurrent sync leg; tests substitute the underlying session.
"""

import threading
import time
from concurrent.futures import Future
from concurrent.futures import TimeoutError as FutureTimeout
from typing import Any, Optional

import requests
import structlog

from ota_sync.config import MAX_RETRIES
from ota_sync.errors import PartnerRejected, TransportError
from ota_sync.metrics import api_latency, api_requests

logger = structlog.get_logger(__name__)

RETRY_DELAY = 1.0
MAX_ERROR_BODY = 500
# Single-byte reads return as soon as any data arrives
BODY_CHUNK_SIZE = 1


def should_retry(res: Optional[requests.Response]) -> bool:
    """
    Determine whether a partner response is worth retrying.

    Timeouts are not retried: the deadline they hit is the caller's hard limit.

    Args:
        res (Optional[requests.Response]): Response object if available.

    Returns:
        bool: True for 429 and 5xx responses, False otherwise.
    """
    if res is None:
        return False
    if res.status_code == 429:
        return True
    return 500 <= res.status_code < 600


def response_body(res: requests.Response) -> Any:
    """Return the decoded JSON body when the partner sent JSON, the raw text otherwise."""
    content_type = res.headers.get("Content-Type", "") if res.headers else ""
    if "json" in content_type:
        try:
            return res.json()
        except ValueError:
            return res.text
    return res.text


class OtaHttpClient:
    """
    Thin wrapper around a requests Session used for all partner calls.

    Attributes:
        session: Underlying requests.Session (thread-safe for independent requests)
        max_retries: Retries allowed for 429/5xx responses
        retry_delay: Base delay between retries, multiplied by the attempt number

    Example:
        >>> client = OtaHttpClient()
        >>> res = client.post(
        ...     "https://partner.example/ari",
        ...     partner="agoda",
        ...     timeout=30,
        ...     json={"HotelId": "H1"},
        ... )
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        max_retries: int = MAX_RETRIES,
        retry_delay: float = RETRY_DELAY,
    ):
        self.session = session or requests.Session()
        self.max_retries = max_retries
        self.retry_delay = retry_delay

    def request(
        self,
        method: str,
        url: str,
        *,
        partner: str,
        timeout: float,
        headers: Optional[dict[str, str]] = None,
        data: Any = None,
        json: Any = None,
    ) -> requests.Response:
        """
        Send one request to a partner, retrying 429/5xx while time remains.

        Args:
            method: HTTP method
            url: Partner endpoint
            partner: Partner kind value, used for metrics and logs
            timeout: Hard deadline in seconds for the whole call, retries and
                body download included
            headers: Request headers
            data: Raw body (XML payloads)
            json: JSON-serializable body

        Returns:
            requests.Response: A 2xx response

        Raises:
            TransportError: On timeout, refused connection, DNS failure
            PartnerRejected: On a non-2xx response that is not retried
        """
        deadline = time.monotonic() + timeout
        retries = 0

        while True:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                raise TransportError(f"timeout of {timeout:g}s exceeded")

            start_time = time.time()
            try:
                logger.debug("partner_request", partner=partner, method=method, url=url)
                res = self._send_within(
                    deadline,
                    method,
                    url,
                    headers=headers,
                    data=data,
                    json=json,
                    timeout=remaining,
                )
            except FutureTimeout as e:
                api_requests.labels(partner=partner, status_code="error").inc()
                logger.warning("partner_request_deadline_exceeded", partner=partner, url=url)
                raise TransportError(f"timeout of {timeout:g}s exceeded") from e
            except requests.Timeout as e:
                api_requests.labels(partner=partner, status_code="error").inc()
                raise TransportError(f"timeout of {timeout:g}s exceeded") from e
            except requests.RequestException as e:
                api_requests.labels(partner=partner, status_code="error").inc()
                raise TransportError(str(e)) from e
            finally:
                api_latency.labels(partner=partner).observe(time.time() - start_time)

            api_requests.labels(partner=partner, status_code=str(res.status_code)).inc()

            if 200 <= res.status_code < 300:
                return res

            if should_retry(res) and retries < self.max_retries:
                retries += 1
                delay = self.retry_delay * retries
                if time.monotonic() + delay < deadline:
                    logger.warning(
                        "partner_request_retry",
                        partner=partner,
                        status_code=res.status_code,
                        attempt=retries,
                        delay=delay,
                    )
                    time.sleep(delay)
                    continue

            raise PartnerRejected(res.status_code, (res.text or "")[:MAX_ERROR_BODY])

    def _send_within(
        self, deadline: float, method: str, url: str, **kwargs: Any
    ) -> requests.Response:
        """
        Run one attempt on a daemon thread and wait for it until the deadline.

        requests bounds each socket operation, not the whole exchange, so a
        partner trickling its body could otherwise hold the caller indefinitely.
        On expiry the attempt is abandoned and stops at its next read.

        Raises:
            concurrent.futures.TimeoutError: If the deadline passes first
        """
        result: Future[requests.Response] = Future()
        abandoned = threading.Event()

        def attempt() -> None:
            try:
                result.set_result(self._download(method, url, abandoned, **kwargs))
            except Exception as e:
                result.set_exception(e)

        threading.Thread(target=attempt, name="ota-http", daemon=True).start()
        try:
            return result.result(timeout=max(deadline - time.monotonic(), 0))
        except FutureTimeout:
            abandoned.set()
            raise

    def _download(
        self, method: str, url: str, abandoned: threading.Event, **kwargs: Any
    ) -> requests.Response:
        """Send the request and read the whole body, giving up once abandoned."""
        res = self.session.request(method, url, stream=True, **kwargs)
        chunks: list[bytes] = []
        try:
            for chunk in res.iter_content(chunk_size=BODY_CHUNK_SIZE):
                if abandoned.is_set():
                    raise TransportError(f"request to {url} abandoned after deadline")
                chunks.append(chunk)
        finally:
            res.close()

        # Body is fully buffered; .text and .json() read from it
        res._content = b"".join(chunks)
        return res

    def post(self, url: str, **kwargs: Any) -> requests.Response:
        return self.request("POST", url, **kwargs)

    def get(self, url: str, **kwargs: Any) -> requests.Response:
        return self.request("GET", url, **kwargs)

    def close(self) -> None:
        self.session.close()
