"""Tests for the block wire format."""

import json

import pytest

from mdblocks import markdown_to_blocks
from mdblocks.errors import ErrorCode, MdBlocksDecodeError
from mdblocks.models import Block, BlockPathEntry, CodeToken, InlineNode
from mdblocks.serializer import (
    decode_block,
    decode_blocks,
    dumps,
    encode_block,
    encode_blocks,
    loads,
)


class TestEncode:
    def test_minimal_block(self):
        block = Block(id="b0", path=(BlockPathEntry("hr"),), block_tag="hr")
        assert encode_block(block) == {"id": "b0", "blockTag": "hr", "path": [{"tag": "hr"}]}

    def test_code_block_keys(self):
        block = Block(
            id="b1",
            path=(BlockPathEntry("pre"),),
            block_tag="code",
            raw_code="x",
            code_language="python",
            is_code_block=True,
            meta={"globalIndex": 1},
            code_tokens=(CodeToken("x", "n"), CodeToken(" ")),
        )
        assert encode_block(block) == {
            "id": "b1",
            "blockTag": "code",
            "path": [{"tag": "pre"}],
            "rawCode": "x",
            "codeLanguage": "python",
            "isCodeBlock": True,
            "meta": {"globalIndex": 1},
            "codeTok": [{"t": "x", "c": "n"}, {"t": " "}],
        }

    def test_empty_token_list_kept(self):
        block = Block(id="b0", path=(), block_tag="code", is_code_block=True, code_tokens=())
        assert encode_block(block)["codeTok"] == []

    def test_inline_shape(self):
        block = Block(
            id="b0",
            path=(BlockPathEntry("p"),),
            block_tag="p",
            inlines=(InlineNode("link", data={"href": "u"}, children=(InlineNode("text", text="t"),)),),
        )
        assert encode_block(block)["inlines"] == [
            {"type": "link", "data": {"href": "u"}, "children": [{"type": "text", "text": "t"}]},
        ]

    def test_footnote_keys(self):
        block = Block(
            id="b0", path=(), block_tag="footnote_def",
            footnote_id="n", is_footnote_definition=True,
        )
        encoded = encode_block(block)
        assert encoded["footnoteId"] == "n"
        assert encoded["footDef"] is True

    def test_encoded_is_json_safe(self, mixed_markdown):
        payload = encode_blocks(markdown_to_blocks(mixed_markdown))
        assert json.loads(json.dumps(payload)) == payload

    def test_path_attributes(self):
        block = Block(id="b0", path=(BlockPathEntry("ol", {"start": 3}),), block_tag="li")
        assert encode_block(block)["path"] == [{"tag": "ol", "attributes": {"start": 3}}]


class TestDecode:
    def test_round_trip_document(self, mixed_markdown):
        blocks = markdown_to_blocks(mixed_markdown)
        assert decode_blocks(encode_blocks(blocks)) == blocks

    def test_round_trip_text(self, mixed_markdown):
        blocks = markdown_to_blocks(mixed_markdown)
        assert loads(dumps(blocks)) == blocks

    def test_dumps_keeps_unicode(self):
        text = dumps(markdown_to_blocks("héllo ✓"))
        assert "héllo ✓" in text

    def test_defaults_restored(self):
        block = decode_block({"id": "b0", "blockTag": "p", "path": []})
        assert block == Block(id="b0", path=(), block_tag="p")

    @pytest.mark.parametrize("field", ["id", "blockTag", "path"])
    def test_missing_required_field(self, field):
        payload = {"id": "b0", "blockTag": "p", "path": []}
        del payload[field]
        with pytest.raises(MdBlocksDecodeError) as exc_info:
            decode_block(payload)
        assert exc_info.value.code == ErrorCode.DECODE_ERROR
        assert exc_info.value.context["field"] == field

    def test_wrong_type(self):
        with pytest.raises(MdBlocksDecodeError) as exc_info:
            decode_block({"id": "b0", "blockTag": "p", "path": [], "math": 3})
        assert exc_info.value.context["field"] == "math"

    @pytest.mark.parametrize("field", ["isCodeBlock", "footDef"])
    def test_flag_must_be_bool(self, field):
        with pytest.raises(MdBlocksDecodeError) as exc_info:
            decode_block({"id": "b0", "blockTag": "p", "path": [], field: "false"})
        assert exc_info.value.context["field"] == field

    def test_explicit_false_flags(self):
        block = decode_block({
            "id": "b0", "blockTag": "p", "path": [], "isCodeBlock": False, "footDef": False,
        })
        assert block.is_code_block is False
        assert block.is_footnote_definition is False

    def test_index_in_context(self):
        payload = [
            {"id": "b0", "blockTag": "p", "path": []},
            {"id": "b1", "path": []},
        ]
        with pytest.raises(MdBlocksDecodeError) as exc_info:
            decode_blocks(payload)
        assert exc_info.value.context == {"field": "blockTag", "index": 1}

    def test_bad_path_entry(self):
        with pytest.raises(MdBlocksDecodeError) as exc_info:
            decode_block({"id": "b0", "blockTag": "p", "path": ["p"]})
        assert exc_info.value.context["field"] == "path"

    def test_bad_inline(self):
        with pytest.raises(MdBlocksDecodeError):
            decode_block({"id": "b0", "blockTag": "p", "path": [], "inlines": [{"text": "x"}]})

    def test_bad_table_cells(self):
        with pytest.raises(MdBlocksDecodeError) as exc_info:
            decode_block({"id": "b0", "blockTag": "table_row", "path": [], "tableCells": ["x"]})
        assert exc_info.value.context["field"] == "tableCells"

    def test_bad_code_token(self):
        with pytest.raises(MdBlocksDecodeError):
            decode_block({"id": "b0", "blockTag": "code", "path": [], "codeTok": [{"c": "k"}]})

    def test_non_list_payload(self):
        with pytest.raises(MdBlocksDecodeError) as exc_info:
            decode_blocks({"id": "b0"})
        assert exc_info.value.context["field"] == "blocks"

    def test_non_mapping_block(self):
        with pytest.raises(MdBlocksDecodeError):
            decode_blocks(["nope"])

    def test_invalid_json(self):
        with pytest.raises(MdBlocksDecodeError) as exc_info:
            loads("{not json")
        assert exc_info.value.context["field"] == "json"
        assert isinstance(exc_info.value.__cause__, ValueError)
