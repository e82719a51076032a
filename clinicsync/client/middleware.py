"""Cross-cutting middlewares for ``ApiGatewayClient``."""

import logging
import time

from .errors import ApiResult
from .gateway import ApiCall, Handler


class LoadingTracker:
    """Counts outstanding calls for a coarse loading indicator."""

    def __init__(self):
        self.outstanding = 0

    @property
    def is_loading(self) -> bool:
        return self.outstanding > 0

    async def __call__(self, call: ApiCall, call_next: Handler) -> ApiResult:
        self.outstanding += 1
        try:
            return await call_next(call)
        finally:
            self.outstanding -= 1


class RequestLogger:
    """Logs each call's outcome and timing."""

    def __init__(self, name: str = __name__):
        self.logger = logging.getLogger(name)

    async def __call__(self, call: ApiCall, call_next: Handler) -> ApiResult:
        start_time = time.time()
        result = await call_next(call)
        elapsed = time.time() - start_time
        outcome = "ok" if result.ok else result.error.kind
        self.logger.info(
            f"{call.method} {call.path} - "
            f"Outcome: {outcome} - "
            f"Time: {elapsed:.4f}s"
        )
        return result
