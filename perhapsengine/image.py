"""Loading images into raw 8-bit pixel data."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from PIL import Image as PILImage

_CHANNELS = {"L": 1, "LA": 2, "RGB": 3, "RGBA": 4}


@dataclass(frozen=True)
class Pixel:
    """Colour values of one pixel."""

    r: float
    g: float
    b: float
    a: float


def _native_mode(img: PILImage.Image) -> PILImage.Image:
    mode = img.mode
    if mode in _CHANNELS:
        return img
    if mode == "P":
        return img.convert("RGBA" if "transparency" in img.info else "RGB")
    if mode in ("1", "I", "I;16", "I;16B", "I;16L", "F"):
        return img.convert("L")
    return img.convert("RGBA" if "A" in mode else "RGB")


class Image:
    """Raw pixel data of an image file, rows from top to bottom."""

    def __init__(
        self,
        filepath: Optional[Union[str, os.PathLike]] = None,
        flip_vertically: bool = False,
    ) -> None:
        self.width = 0
        self.height = 0
        self.channels = 0
        self.data = b""
        self.flipped_vertically = False
        if filepath is not None:
            self._load(Path(filepath), flip_vertically)

    def _load(self, path: Path, flip_vertically: bool) -> None:
        if not path.is_file():
            raise FileNotFoundError(f"could not load image from {path}")
        with PILImage.open(path) as opened:
            img = _native_mode(opened)
            if flip_vertically:
                img = img.transpose(PILImage.Transpose.FLIP_TOP_BOTTOM)
            self.data = img.tobytes()
            self.width, self.height = img.size
            self.channels = _CHANNELS[img.mode]
        self.flipped_vertically = flip_vertically

    def get_pixel(self, x: int, y: int) -> Pixel:
        """Return the pixel at column ``x``, row ``y``; alpha is 255 without an alpha channel."""
        if self.channels not in (3, 4):
            raise ValueError(f"unsupported channel count: {self.channels}")
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x}, {y}) outside {self.width}x{self.height} image")
        offset = self.channels * (y * self.width + x)
        r, g, b = self.data[offset:offset + 3]
        a = self.data[offset + 3] if self.channels == 4 else 255
        return Pixel(float(r), float(g), float(b), float(a))