"""Shared test fixtures for the mdblocks test suite."""

from __future__ import annotations

from typing import Any

import pytest

from mdblocks.config import MdBlocksConfig
from mdblocks.converter.md_to_blocks import MarkdownToBlocksConverter


class RecordingMetricsHook:
    """A metrics backend that records all calls for assertion."""

    def __init__(self) -> None:
        self.increments: list[dict[str, Any]] = []
        self.timings: list[dict[str, Any]] = []
        self.gauges: list[dict[str, Any]] = []

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        self.increments.append({"name": name, "value": value, "tags": tags})

    def timing(
        self,
        name: str,
        ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        self.timings.append({"name": name, "ms": ms, "tags": tags})

    def gauge(
        self,
        name: str,
        value: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        self.gauges.append({"name": name, "value": value, "tags": tags})

    def names(self) -> set[str]:
        return (
            {c["name"] for c in self.increments}
            | {c["name"] for c in self.timings}
            | {c["name"] for c in self.gauges}
        )


@pytest.fixture
def config() -> MdBlocksConfig:
    """Default decomposition configuration."""
    return MdBlocksConfig()


@pytest.fixture
def converter(config: MdBlocksConfig) -> MarkdownToBlocksConverter:
    """Markdown-to-blocks converter using the default test config."""
    return MarkdownToBlocksConverter(config)


@pytest.fixture
def metrics() -> RecordingMetricsHook:
    return RecordingMetricsHook()


@pytest.fixture
def mixed_markdown() -> str:
    """A document touching every leaf kind."""
    return (
        "# Title\n"
        "\n"
        "Intro with *em*, **strong**, ~~del~~, `code`, [link](https://x.io \"T\") "
        "and ![alt](img.png) plus $e^x$ and a note[^n].\n"
        "\n"
        "> quoted **text**\n"
        "\n"
        "1. first\n"
        "2. second\n"
        "   - nested a\n"
        "   - nested b\n"
        "3. third\n"
        "\n"
        "| A | B |\n"
        "|:-:|--:|\n"
        "| 1 | 2 |\n"
        "\n"
        "```python\n"
        + "".join(f"x{i} = {i}\n" for i in range(10))
        + "```\n"
        "\n"
        "$$\n"
        "\\int_0^1 f(x)\\,dx\n"
        "$$\n"
        "\n"
        "---\n"
        "\n"
        "[^n]: The note\n"
        "    goes on\n"
    )
