from __future__ import annotations

import sys
from pathlib import Path

import pytest


def pytest_configure() -> None:
    """
    Ensure `src/` is on sys.path so tests can import `flow_canvas`
    without requiring an editable install.
    """
    repo_root = Path(__file__).resolve().parents[1]
    src_root = repo_root / "src"
    sys.path.insert(0, str(src_root))


@pytest.fixture
def make_node():
    """Factory for nodes with simple port lists."""
    from flow_canvas.core.graph import Node, Point2D, PortDefinition, Size2D

    def _make(
        node_id: str,
        x: float = 0.0,
        y: float = 0.0,
        width: float = 200.0,
        height: float = 100.0,
        inputs: tuple[str, ...] = (),
        outputs: tuple[str, ...] = (),
    ) -> Node:
        return Node(
            id=node_id,
            type_id="test",
            position=Point2D(x, y),
            size=Size2D(width, height),
            inputs=[PortDefinition(id=p, name=p.title()) for p in inputs],
            outputs=[PortDefinition(id=p, name=p.title()) for p in outputs],
        )

    return _make
