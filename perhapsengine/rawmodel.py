"""Handles to vertex data uploaded to the GPU, and a renderer that draws them."""

from __future__ import annotations

from dataclasses import dataclass

from .globjects import get_backend


@dataclass(frozen=True)
class RawModel:
    """A vertex array, an optional index buffer and the number of elements to draw."""

    vao: int = 0
    ebo: int = 0
    draw_count: int = 0

    def has_indices(self) -> bool:
        return self.ebo > 0

    def bind(self) -> None:
        """Bind the vertex array and, if present, the index buffer."""
        gl = get_backend()
        gl.bind_vertex_array(self.vao)
        if self.has_indices():
            gl.bind_element_buffer(self.ebo)


class ThreeDRenderer:
    """Draws raw models as triangles."""

    def draw(self, model: RawModel) -> None:
        model.bind()
        gl = get_backend()
        if model.has_indices():
            gl.draw_elements(model.draw_count)
        else:
            gl.draw_arrays(model.draw_count)