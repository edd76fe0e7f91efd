from __future__ import annotations
from dataclasses import dataclass


@dataclass(frozen=True)
class ProcessOptions:
    """
    Value-object for one sprite conversion.
    Output is always square: target_size x target_size.
    """
    remove_background: bool
    target_size: int


@dataclass(frozen=True)
class ReferenceColor:
    """Colour of pixel (0, 0), the chroma-key baseline for one matting pass."""
    r: int
    g: int
    b: int
    a: int

    def rgb(self):
        return self.r, self.g, self.b
