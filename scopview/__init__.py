"""Model and image loading, mesh buffers, camera, scene logic and text editing for a 3D viewer."""

__version__ = "0.1.0"