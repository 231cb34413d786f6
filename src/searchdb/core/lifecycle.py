"""Index lifecycle sequencing.

Some index settings can only be changed while the index is closed, so a
settings update is three backend calls: close, put settings, open.  The steps
run strictly in order and the first failure stops the sequence; a failure
after the close step leaves the index closed.

No locking is done here.  Callers must not run two sequences against the same
index at once.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import Any

from searchdb.adapters.base.exceptions import LifecycleError

logger = logging.getLogger(__name__)

Step = tuple[str, Callable[[], Awaitable[Any]]]


class IndexLifecycleSequencer:
    """Runs named async steps against one index, stopping at the first failure."""

    async def run(self, index: str, steps: Sequence[Step]) -> list[Any]:
        """Run ``steps`` in order.

        Args:
            index: Physical index name, for error reporting.
            steps: ``(name, coroutine factory)`` pairs.

        Returns:
            The result of every step, in order.

        Raises:
            LifecycleError: Chained to the failing step's exception.
        """
        results: list[Any] = []
        for name, step in steps:
            try:
                results.append(await step())
            except Exception as e:
                logger.error("Index %s: step '%s' failed, skipping remaining steps", index, name)
                raise LifecycleError(index, name, str(e)) from e
            logger.debug("Index %s: step '%s' done", index, name)
        return results

    async def update_settings(self, indices: Any, index: str, settings: dict[str, Any]) -> Any:
        """Close ``index``, apply ``settings`` and reopen it.

        Args:
            indices: The network client's indices namespace (``client.indices``).
            index: Physical index name.
            settings: Settings body.

        Returns:
            The backend's acknowledgment of the settings update.
        """
        results = await self.run(
            index,
            [
                ("close", lambda: indices.close(index=index)),
                ("put_settings", lambda: indices.put_settings(index=index, body=settings)),
                ("open", lambda: indices.open(index=index)),
            ],
        )
        logger.info("Updated settings of index %s", index)
        return results[1]
