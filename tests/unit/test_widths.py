"""Tests for CodeWidthRegistry."""

import threading

from mdblocks import MdBlocksConfig, markdown_to_blocks
from mdblocks.widths import WIDTH_TOLERANCE, CodeWidthRegistry


class TestUpdateWidth:
    def test_first_measurement_stored(self):
        registry = CodeWidthRegistry()
        assert registry.update_width("g", 100) is True
        assert registry.get_group_width("g") == 100

    def test_unknown_group(self):
        assert CodeWidthRegistry().get_group_width("missing") is None

    def test_wider_replaces(self):
        registry = CodeWidthRegistry()
        registry.update_width("g", 100)
        assert registry.update_width("g", 150) is True
        assert registry.get_group_width("g") == 150

    def test_narrower_ignored(self):
        registry = CodeWidthRegistry()
        registry.update_width("g", 100)
        assert registry.update_width("g", 50) is False
        assert registry.get_group_width("g") == 100

    def test_within_tolerance_ignored(self):
        registry = CodeWidthRegistry()
        registry.update_width("g", 100)
        assert registry.update_width("g", 100 + WIDTH_TOLERANCE) is False
        assert registry.update_width("g", 100.6) is True

    def test_groups_independent(self):
        registry = CodeWidthRegistry()
        registry.update_width("a", 10)
        registry.update_width("b", 20)
        assert registry.get_group_width("a") == 10
        assert sorted(registry.group_ids) == ["a", "b"]

    def test_force_update_narrows(self):
        registry = CodeWidthRegistry()
        registry.update_width("g", 100)
        registry.force_update_width("g", 40)
        assert registry.get_group_width("g") == 40


class TestListeners:
    def test_notified_on_change(self):
        registry = CodeWidthRegistry()
        calls = []
        registry.add_group_listener("g", lambda: calls.append(registry.get_group_width("g")))
        registry.update_width("g", 10)
        registry.update_width("g", 5)
        registry.update_width("g", 20)
        assert calls == [10, 20]

    def test_other_group_not_notified(self):
        registry = CodeWidthRegistry()
        calls = []
        registry.add_group_listener("a", lambda: calls.append("a"))
        registry.update_width("b", 10)
        assert calls == []

    def test_force_update_same_width_silent(self):
        registry = CodeWidthRegistry()
        calls = []
        registry.update_width("g", 10)
        registry.add_group_listener("g", lambda: calls.append(1))
        registry.force_update_width("g", 10)
        assert calls == []

    def test_remove_listener(self):
        registry = CodeWidthRegistry()
        calls = []
        listener = lambda: calls.append(1)  # noqa: E731
        registry.add_group_listener("g", listener)
        registry.remove_group_listener("g", listener)
        registry.remove_group_listener("g", listener)
        registry.update_width("g", 10)
        assert calls == []

    def test_reset_keeps_listeners(self):
        registry = CodeWidthRegistry()
        calls = []
        registry.add_group_listener("g", lambda: calls.append(registry.get_group_width("g")))
        registry.update_width("g", 10)
        registry.reset_group_width("g")
        registry.update_width("g", 3)
        assert calls == [10, None, 3]

    def test_clear_notifies_then_drops_listeners(self):
        registry = CodeWidthRegistry()
        calls = []
        registry.add_group_listener("g", lambda: calls.append(1))
        registry.update_width("g", 10)
        registry.clear_group("g")
        registry.update_width("g", 20)
        assert calls == [1, 1]
        assert registry.get_group_width("g") == 20

    def test_listener_may_query_registry(self):
        registry = CodeWidthRegistry()
        seen = []
        registry.add_group_listener("g", lambda: seen.append(registry.group_ids))
        registry.update_width("g", 1)
        assert seen == [["g"]]


class TestSeedFromBlocks:
    def test_seed_from_code_groups(self):
        md = "```\nab\nabcd\n```\n\ntext\n\n```\nxyz\n```\n"
        blocks = markdown_to_blocks(md, MdBlocksConfig(code_chunk_lines=1))
        registry = CodeWidthRegistry()
        assert registry.seed_from_blocks(blocks) == 2
        group_ids = [b.meta["codeBlockGroupId"] for b in blocks if b.is_code_block]
        assert registry.get_group_width(group_ids[0]) == 4
        assert registry.get_group_width(group_ids[-1]) == 3

    def test_custom_measure(self):
        blocks = markdown_to_blocks("```\nabc\n```\n")
        registry = CodeWidthRegistry()
        registry.seed_from_blocks(blocks, measure=lambda line: len(line) * 7.5)
        assert registry.get_group_width("codeGroup0") == 22.5

    def test_seed_twice_changes_nothing(self):
        blocks = markdown_to_blocks("```\nabc\n```\n")
        registry = CodeWidthRegistry()
        registry.seed_from_blocks(blocks)
        assert registry.seed_from_blocks(blocks) == 0

    def test_non_code_ignored(self):
        registry = CodeWidthRegistry()
        assert registry.seed_from_blocks(markdown_to_blocks("# A\n\ntext\n")) == 0
        assert registry.group_ids == []


def test_concurrent_updates_keep_maximum():
    registry = CodeWidthRegistry()

    def worker(offset):
        for width in range(offset, 1000, 4):
            registry.update_width("g", float(width))

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    assert registry.get_group_width("g") >= 998
