"""Base renderer protocol."""

from __future__ import annotations

from typing import Protocol

from sankey_markup.layout.geometry import SankeyGeometry


class Renderer(Protocol):
    """Protocol that all renderers must implement."""

    def render(self, geometry: SankeyGeometry) -> str:
        """Render laid-out Sankey geometry to an output string."""
        ...
