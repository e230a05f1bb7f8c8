"""Path tracer building blocks: OBJ/MTL loading, triangles, spheres, a camera and PFM output."""

__version__ = "0.1.0"