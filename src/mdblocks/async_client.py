"""Asynchronous Markdown decomposition.

:class:`AsyncBlockDecomposer` runs the same walk as
:class:`MarkdownToBlocksConverter` on an executor so the event loop is
never blocked.  Only plain data crosses the boundary: the source string
goes in, and the wire structure of :mod:`mdblocks.serializer` comes back
and is decoded on the caller's side.  The result is identical to the
synchronous path for the same input and configuration.

Usage::

    import asyncio
    from mdblocks import AsyncBlockDecomposer, MdBlocksConfig

    async def main():
        async with AsyncBlockDecomposer(MdBlocksConfig(max_workers=2)) as decomposer:
            blocks = await decomposer.decompose("# Hello\\n\\nWorld")
            print([b.block_tag for b in blocks])

    asyncio.run(main())

A decomposition is atomic: it either returns the full block list or
raises :class:`MdBlocksWorkerError`.  Cancelling the awaiting task does
not interrupt a walk that is already running on the executor.
"""

from __future__ import annotations

import asyncio
import time
from concurrent.futures import Executor, ThreadPoolExecutor
from typing import Any

from mdblocks.config import MdBlocksConfig
from mdblocks.converter.md_to_blocks import MarkdownToBlocksConverter
from mdblocks.errors import MdBlocksWorkerError
from mdblocks.models import Block
from mdblocks.observability import get_logger, resolve_metrics
from mdblocks.serializer import decode_blocks, encode_blocks

log = get_logger("mdblocks.async")


def decompose_to_wire(source: str, config: MdBlocksConfig) -> list[dict[str, Any]]:
    """Worker entry point: decompose *source* and return the wire list.

    Module level so it can be pickled for a process pool.
    """
    return encode_blocks(MarkdownToBlocksConverter(config).convert(source))


class AsyncBlockDecomposer:
    """Decompose Markdown on an executor.

    Parameters
    ----------
    config:
        Decomposition configuration.  Defaults to ``MdBlocksConfig()``.
        Its metrics hook stays on the caller's side.
    executor:
        Executor to run the walk on.  When omitted, a
        :class:`~concurrent.futures.ThreadPoolExecutor` of
        ``config.max_workers`` threads is created and owned by this
        decomposer, or the event loop's default executor is used when
        ``max_workers`` is ``None``.  A caller-supplied executor is never
        shut down by :meth:`close`.
    """

    def __init__(
        self,
        config: MdBlocksConfig | None = None,
        executor: Executor | None = None,
    ) -> None:
        self._config = config or MdBlocksConfig()
        self._metrics = resolve_metrics(self._config.metrics)
        self._worker_config = self._config.worker_copy()
        self._owns_executor = executor is None and self._config.max_workers is not None
        if self._owns_executor:
            executor = ThreadPoolExecutor(
                max_workers=self._config.max_workers,
                thread_name_prefix="mdblocks",
            )
        self._executor = executor
        self._closed = False

    async def decompose(self, source: str) -> list[Block]:
        """Decompose *source* without blocking the event loop.

        Raises
        ------
        MdBlocksWorkerError
            If the walk, the executor dispatch or decoding its result
            fails.  No partial result is returned.
        """
        if self._closed:
            raise MdBlocksWorkerError(
                "decomposer is closed",
                context={"source_length": len(source)},
            )

        loop = asyncio.get_running_loop()
        start = time.monotonic()
        try:
            wire = await loop.run_in_executor(
                self._executor, decompose_to_wire, source, self._worker_config,
            )
            blocks = decode_blocks(wire)
        except Exception as exc:
            self._metrics.increment("mdblocks.worker_failures_total")
            log.warning(
                "async decomposition failed",
                extra={"extra_fields": {
                    "op": "decompose",
                    "source_length": len(source),
                    "error": type(exc).__name__,
                }},
                exc_info=True,
            )
            raise MdBlocksWorkerError(
                f"Decomposition on worker failed: {exc}",
                context={
                    "source_length": len(source),
                    "executor": type(self._executor).__name__ if self._executor else "default",
                },
                cause=exc,
            ) from exc

        self._metrics.timing(
            "mdblocks.async_duration_ms", (time.monotonic() - start) * 1000,
        )
        return blocks

    async def close(self) -> None:
        """Shut down an executor created by this decomposer."""
        if self._closed:
            return
        self._closed = True
        if self._owns_executor and self._executor is not None:
            self._executor.shutdown(wait=True)

    async def __aenter__(self) -> AsyncBlockDecomposer:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()


async def markdown_to_blocks_async(
    source: str,
    config: MdBlocksConfig | None = None,
    *,
    executor: Executor | None = None,
) -> list[Block]:
    """Decompose *source* on an executor with a one-off decomposer."""
    async with AsyncBlockDecomposer(config, executor=executor) as decomposer:
        return await decomposer.decompose(source)
