"""Per-client admission control in front of the recipe API.

One fixed-window bucket per client identity: 10 requests per minute by
default, refilled to full capacity when the window rolls over. Buckets are
shared by every ``/api`` route and live as long as the process (no
eviction). Counting happens in the ``limits`` in-memory storage, which
guards each key with its own lock, so unrelated clients never contend.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

from recipes_buddy.api.errors import error_response

logger = logging.getLogger(__name__)


def client_identity(request: Request) -> str:
    """Resolve the rate-limit key for *request*.

    Order: first ``X-Forwarded-For`` entry, then ``X-Real-IP``, then the
    connection address.
    """
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        first = forwarded_for.split(",")[0].strip()
        if first:
            return first
    real_ip = request.headers.get("X-Real-IP")
    if real_ip and real_ip.strip():
        return real_ip.strip()
    return get_remote_address(request)


class AdmissionController:
    """Process-wide limiter state plus its FastAPI wiring.

    Created once per application and never torn down mid-process.

    Usage:
        admission = AdmissionController(rate="10/minute", retry_after=60)
        admission.install(app)
    """

    def __init__(
        self,
        rate: str = "10/minute",
        retry_after: int = 60,
        enabled: bool = True,
        storage_uri: str = "memory://",
    ):
        """Initialize the controller.

        Args:
            rate: ``limits`` rate string applied per client identity
            retry_after: Seconds advertised in the ``Retry-After`` header
            enabled: False disables admission control entirely
            storage_uri: ``limits`` storage backend
        """
        self.rate = rate
        self.retry_after = retry_after
        self.limiter = Limiter(
            key_func=client_identity,
            application_limits=[rate],
            strategy="fixed-window",
            storage_uri=storage_uri,
            enabled=enabled,
            headers_enabled=False,
        )

    def install(self, app: FastAPI) -> None:
        """Gate every route of *app* through the limiter."""
        app.state.limiter = self.limiter
        app.add_exception_handler(RateLimitExceeded, self.reject)
        app.add_middleware(SlowAPIMiddleware)

    def exempt(self, endpoint):
        """Decorator excluding *endpoint* from admission control."""
        return self.limiter.exempt(endpoint)

    def reject(self, request: Request, exc: RateLimitExceeded) -> JSONResponse:
        """Build the 429 answer for a client that ran out of tokens."""
        logger.warning(f"Rate limit exceeded for client: {client_identity(request)}")
        return error_response(
            request,
            429,
            "Too Many Requests",
            f"Rate limit exceeded. Please try again in {self.retry_after} seconds.",
            headers={"Retry-After": str(self.retry_after)},
        )

    def reset(self) -> None:
        """Refill every bucket immediately."""
        self.limiter.reset()
