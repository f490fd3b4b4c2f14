"""Tests for the error hierarchy and MdBlocksConfig."""

import pickle

import pytest

from mdblocks.config import DEFAULT_CODE_CHUNK_LINES, MdBlocksConfig
from mdblocks.errors import (
    ErrorCode,
    MdBlocksDecodeError,
    MdBlocksError,
    MdBlocksWorkerError,
)


class TestErrors:
    @pytest.mark.parametrize("cls, code", [
        (MdBlocksDecodeError, ErrorCode.DECODE_ERROR),
        (MdBlocksWorkerError, ErrorCode.WORKER_ERROR),
    ])
    def test_subclass_codes(self, cls, code):
        err = cls("failed", context={"field": "id"})
        assert isinstance(err, MdBlocksError)
        assert err.code == code
        assert err.message == "failed"
        assert err.context == {"field": "id"}
        assert str(err) == "failed"

    def test_context_defaults_to_empty(self):
        assert MdBlocksDecodeError("x").context == {}

    def test_cause_chained(self):
        cause = KeyError("id")
        err = MdBlocksDecodeError("missing", cause=cause)
        assert err.cause is cause
        assert err.__cause__ is cause

    def test_repr(self):
        err = MdBlocksWorkerError("boom", context={"source_length": 3})
        text = repr(err)
        assert text.startswith("MdBlocksWorkerError(")
        assert "WORKER_ERROR" in text
        assert "source_length" in text

    def test_repr_without_context(self):
        assert "context" not in repr(MdBlocksDecodeError("x"))

    def test_error_code_is_str(self):
        assert ErrorCode.DECODE_ERROR == "DECODE_ERROR"


class TestConfig:
    def test_defaults(self):
        config = MdBlocksConfig()
        assert config.code_chunk_lines == DEFAULT_CODE_CHUNK_LINES == 8
        assert config.highlight_code is True
        assert config.enable_tables and config.enable_math and config.enable_footnotes
        assert config.inline_math_extension is True
        assert config.max_workers is None
        assert config.metrics is None

    @pytest.mark.parametrize("kwargs", [
        {"code_chunk_lines": 0},
        {"code_chunk_lines": -1},
        {"max_workers": 0},
    ])
    def test_invalid_values(self, kwargs):
        with pytest.raises(ValueError):
            MdBlocksConfig(**kwargs)

    def test_worker_copy_drops_metrics(self, metrics):
        config = MdBlocksConfig(code_chunk_lines=3, metrics=metrics)
        copy = config.worker_copy()
        assert copy.metrics is None
        assert copy.code_chunk_lines == 3
        assert config.metrics is metrics

    def test_worker_copy_picklable(self, metrics):
        copy = MdBlocksConfig(metrics=metrics).worker_copy()
        assert pickle.loads(pickle.dumps(copy)) == copy
