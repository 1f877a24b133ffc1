[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "perhapsengine"
version = "0.1.0"
description = "Building blocks for a small OpenGL 3D engine: transforms, timing, input, audio, shaders, materials, textures, framebuffers and glTF mesh import."
requires-python = ">=3.10"
keywords = ["game engine", "opengl", "3d", "rendering", "gltf", "shaders"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment",
    "Topic :: Multimedia :: Graphics :: 3D Rendering",
]
dependencies = [
    "numpy",
    "pyglet",
    "pillow",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["perhapsengine"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
