"""Sequencing of mutations with the refreshes that depend on them."""

from typing import Awaitable, Callable
import logging

from .errors import ApiResult

logger = logging.getLogger(__name__)

Operation = Callable[[], Awaitable[ApiResult]]


class MutationCoordinator:
    """Runs a mutation, then its dependent refreshes one after another.

    Refreshes run only when the mutation comes back ok, so a rejected
    mutation leaves every cached snapshot as it was.
    """

    async def run(self, mutation: Operation, *refreshes: Operation) -> ApiResult:
        result = await mutation()
        if not result.ok:
            logger.info(f"Mutation failed ({result.error.kind}); skipping {len(refreshes)} refresh(es)")
            return result

        for refresh in refreshes:
            await refresh()

        return result
