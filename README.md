# pathscene

Building blocks for a path tracer: a reader for Wavefront `.obj`
geometry and `.mtl` material libraries, triangle and sphere primitives
that can be intersected with rays, a perspective camera, and a writer
for PFM images.

## Installation

```
pip install .
```

The only runtime dependency is numpy.

## Loading OBJ files

```python
from pathscene.objloader import load_obj

result = load_obj("models/bunny.obj", mtl_basedir="models/", triangulate=True)
for shape in result.shapes:
    print(shape.name, len(shape.mesh.num_face_vertices), "faces")
print(result.warnings)
```

`load_obj` returns an `ObjResult` holding:

- `attrib`: an `Attrib` with flat lists `vertices`, `normals`,
  `texcoords` and `colors` (vertex colours default to 1 when a `v` line
  gives only x, y, z);
- `shapes`: `Shape` objects, each with a `name` and an `ObjMesh` of
  `indices` (zero-based `Index` entries, -1 for an unused normal or
  texcoord), `num_face_vertices`, per-face `material_ids` and `tags`;
- `materials`: the `Material` objects read through `mtllib`;
- `warnings`: accumulated warning text.

The `mtllib` file name is appended directly to `mtl_basedir`, so give the
directory with a trailing separator. A missing material library is a
warning, not an error. `ObjLoadError` is raised when the file cannot be
opened or a face has a zero index. With `triangulate=True` polygons are
split into triangles by ear clipping.

`load_obj_stream(stream, material_reader, triangulate)` does the same for
an open text or binary stream. A material reader is any callable taking
`(mat_id, materials, material_map)` that appends to both and returns
warning text; `pathscene.mtl.MaterialFileReader` and
`pathscene.mtl.MaterialStreamReader` are provided.

### Streaming with callbacks

```python
from pathscene.objcallback import ObjCallbacks, load_obj_with_callback

points = []
with open("model.obj") as fh:
    warnings = load_obj_with_callback(
        fh, ObjCallbacks(vertex=lambda x, y, z, w: points.append((x, y, z)))
    )
```

`ObjCallbacks` has optional handlers `vertex`, `normal`, `texcoord`,
`index`, `usemtl`, `mtllib`, `group` and `object`. Face indices are
reported exactly as written in the file (0 when absent).

## Material libraries

`pathscene.mtl.load_mtl(stream)` returns `(materials, material_map,
warnings)`. Colours (`Ka`, `Kd`, `Ks`, `Kt`/`Tf`, `Ke`), scalars (`Ni`,
`Ns`, `illum`, `d`, `Tr`, and the PBR keys `Pr`, `Pm`, `Ps`, `Pc`, `Pcr`,
`aniso`, `anisor`) and texture maps with their options (`TextureOption`,
`TextureType`) are read; unrecognised keys are kept in
`Material.unknown_parameter`. `parse_texture_name_and_option(line,
is_bump)` parses a single texture line.

## Primitives

```python
from pathscene.triangle import Triangle
from pathscene.sphere import Sphere

tri = Triangle([0, 0, 0], [1, 0, 0], [0, 1, 0])
t = tri.intersect([0.2, 0.2, 1.0], [0.0, 0.0, -1.0])  # distance, or None
normal = tri.normal_at([0.2, 0.2, 0.0])

ball = Sphere(center=[0, 0, -5], radius=1.0)
t = ball.intersect([0, 0, 0], [0, 0, -1])
```

Both have `centroid()` and `bbox()` (minimum and maximum corners).
`Triangle.normal_at` interpolates the vertex normals and falls back to
the face normal for vertex normals that are zero. `Sphere.intersect`
expects a unit direction and always returns the nearer root.

## Cameras

`pathscene.camera.BasicCamera(position, direction, up, height_angle,
aspect_ratio)` gives `view_matrix()` and `scale_matrix()` as 4x4 numpy
arrays; `height_angle` is in degrees. `Camera` is the abstract base.

## Writing images

```python
from pathscene.common import write_pfm

write_pfm("out.pfm", width, height, pixels, 1.0)
```

`pixels` holds one RGB triple per pixel, row-major from the top row; PFM
stores rows bottom to top and the file is written accordingly. The scale
is written negative on little-endian machines, as the format requires.

## What this package does not do

There is no scene file reader, no scene graph, no mesh or scene object
that gathers triangles for intersection, and no acceleration structure:
callers load OBJ data and build and intersect primitives themselves.
There is no renderer and no command-line tool.

## Running the tests

```
pip install .[test]
pytest
```