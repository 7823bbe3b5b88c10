from sankey_markup.renderers.base import Renderer
from sankey_markup.renderers.svg import SvgRenderer

__all__ = ["Renderer", "SvgRenderer"]
