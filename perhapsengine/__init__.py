"""Building blocks for a small OpenGL 3D engine: maths, timing, input, audio and rendering resources."""

__version__ = "0.1.0"