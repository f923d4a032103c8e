import logging

import numpy as np

from fortune_voronoi import build_diagram
from fortune_voronoi.logging_utils import _safe_repr, debug_log_call


def test_safe_repr_summarises_arrays():
    rendered = _safe_repr(np.zeros((100, 2)))
    assert rendered.startswith("ndarray(shape=(100, 2)")
    assert "min=0" in rendered and "max=0" in rendered


def test_safe_repr_uses_diagram_summary():
    diagram = build_diagram([(0.0, 0.0), (1.0, 0.0)])
    rendered = _safe_repr(diagram)
    assert rendered.startswith("VoronoiDiagram({")
    assert "'sites': 2" in rendered


def test_safe_repr_truncates_long_sequences():
    rendered = _safe_repr(list(range(20)))
    assert rendered.endswith("... (20 items)]")


def test_debug_log_call_traces_entry_and_exit(caplog):
    logger = logging.getLogger("fortune_voronoi.tests")

    @debug_log_call(logger)
    def add(a, b):
        return a + b

    with caplog.at_level(logging.DEBUG, logger="fortune_voronoi.tests"):
        assert add(2, b=3) == 5

    messages = [record.getMessage() for record in caplog.records]
    assert any(message.startswith("Entering") and "args=[2]" in message for message in messages)
    assert any(message.endswith("-> 5") for message in messages)
