"""Tests for the engine tracer and input fingerprinting."""

import logging
from decimal import Decimal

import pytest

from mirath_engines.tracer import compute_input_fingerprint, traced_engine
from mirath_kernel.domain import Estate, HeirCounts


class _ListHandler(logging.Handler):
    def __init__(self):
        super().__init__(level=logging.DEBUG)
        self.records: list[logging.LogRecord] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)


@pytest.fixture
def trace_records():
    logger = logging.getLogger("mirath.engines.tracer")
    handler = _ListHandler()
    previous = logger.level
    logger.setLevel(logging.DEBUG)
    logger.addHandler(handler)
    yield handler.records
    logger.removeHandler(handler)
    logger.setLevel(previous)


class TestFingerprint:
    def test_deterministic(self):
        kwargs = {"madhab": "shafii", "estate": Estate(total=100)}
        a = compute_input_fingerprint(("madhab", "estate"), kwargs)
        b = compute_input_fingerprint(("madhab", "estate"), dict(kwargs))
        assert a == b
        assert len(a) == 16

    def test_mapping_order_irrelevant(self):
        a = compute_input_fingerprint(("heirs",), {"heirs": {"son": 1, "wife": 1}})
        b = compute_input_fingerprint(("heirs",), {"heirs": {"wife": 1, "son": 1}})
        assert a == b

    def test_sensitive_to_values(self):
        a = compute_input_fingerprint(("estate",), {"estate": Estate(total=Decimal("100"))})
        b = compute_input_fingerprint(("estate",), {"estate": Estate(total=Decimal("101"))})
        assert a != b

    def test_heir_counts_fingerprint(self):
        a = compute_input_fingerprint(("heirs",), {"heirs": HeirCounts.of(son=1)})
        b = compute_input_fingerprint(("heirs",), {"heirs": {"son": 1}})
        assert a == b

    def test_colliding_keys_of_mixed_types(self):
        a = compute_input_fingerprint(("heirs",), {"heirs": {1: 1, "1": "x"}})
        b = compute_input_fingerprint(("heirs",), {"heirs": {"1": "x", 1: 1}})
        assert a == b

    def test_missing_field_is_null(self):
        a = compute_input_fingerprint(("madhab",), {})
        b = compute_input_fingerprint(("madhab",), {"madhab": None})
        assert a == b


class TestTracedEngine:
    def test_emits_trace(self, trace_records):
        @traced_engine("sample", "2.1", fingerprint_fields=("x",))
        def run(*, x):
            return x * 2

        assert run(x=3) == 6
        assert len(trace_records) == 1
        record = trace_records[0]
        assert record.getMessage() == "MIRATH_ENGINE_TRACE"
        assert record.engine_name == "sample"
        assert record.engine_version == "2.1"
        assert len(record.input_fingerprint) == 16
        assert record.duration_ms >= 0

    def test_distribution_engine_is_traced(self, engine, trace_records):
        engine.calculate(madhab="shafii", estate=Estate(total=100), heirs={"son": 1})
        assert [r.engine_name for r in trace_records] == ["distribution"]
        assert trace_records[0].function == "DistributionEngine.calculate"
