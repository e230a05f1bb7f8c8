import io
import os

import pytest

from pathscene.mtl import MaterialFileReader, MaterialStreamReader
from pathscene.objloader import ObjLoadError, load_obj, load_obj_stream

TRIANGLE = "v 0 0 0\nv 1 0 0\nv 0 1 0\nf 1 2 3\n"


def load(text, reader=None, triangulate=True):
    return load_obj_stream(io.StringIO(text), reader, triangulate)


def vertex_ids(shape):
    return [i.vertex_index for i in shape.mesh.indices]


def test_single_triangle():
    result = load(TRIANGLE)
    assert result.attrib.vertices == [0.0, 0.0, 0.0, 1.0, 0.0, 0.0, 0.0, 1.0, 0.0]
    assert len(result.shapes) == 1
    shape = result.shapes[0]
    assert vertex_ids(shape) == [0, 1, 2]
    assert shape.mesh.num_face_vertices == [3]
    assert shape.mesh.material_ids == [-1]
    assert all(i.normal_index == -1 and i.texcoord_index == -1 for i in shape.mesh.indices)


def test_vertex_colours_default_and_explicit():
    result = load("v 0 0 0\nv 1 2 3 0.5 0.25 0.125\n")
    assert result.attrib.colors == [1.0, 1.0, 1.0, 0.5, 0.25, 0.125]
    assert result.attrib.vertices[3:] == [1.0, 2.0, 3.0]


def test_crlf_matches_lf():
    assert load(TRIANGLE.replace("\n", "\r\n")) == load(TRIANGLE)


def test_full_corner_indices():
    text = (
        "v 0 0 0\nv 1 0 0\nv 0 1 0\n"
        "vt 0 0\nvt 1 0\nvt 0 1\n"
        "vn 0 0 1\nvn 0 0 1\nvn 0 0 1\n"
        "f 1/3/2 2/1/3 3/2/1\n"
    )
    result = load(text)
    indices = result.shapes[0].mesh.indices
    assert [i.texcoord_index for i in indices] == [2, 0, 1]
    assert [i.normal_index for i in indices] == [1, 2, 0]
    assert result.attrib.texcoords == [0.0, 0.0, 1.0, 0.0, 0.0, 1.0]


def test_vertex_normal_without_texcoord():
    text = TRIANGLE.replace("f 1 2 3", "vn 0 0 1\nf 1//1 2//1 3//1")
    indices = load(text).shapes[0].mesh.indices
    assert [i.texcoord_index for i in indices] == [-1, -1, -1]
    assert [i.normal_index for i in indices] == [0, 0, 0]


def test_negative_indices_are_relative():
    result = load("v 0 0 0\nv 1 0 0\nv 0 1 0\nf -3 -2 -1\n")
    assert vertex_ids(result.shapes[0]) == vertex_ids(load(TRIANGLE).shapes[0])


def test_zero_index_is_an_error():
    with pytest.raises(ObjLoadError):
        load("v 0 0 0\nv 1 0 0\nv 0 1 0\nf 0 1 2\n")


QUAD = "v 0 0 0\nv 1 0 0\nv 1 1 0\nv 0 1 0\nf 1 2 3 4\n"


def test_quad_is_triangulated():
    mesh = load(QUAD).shapes[0].mesh
    assert mesh.num_face_vertices == [3, 3]
    assert len(mesh.indices) == 6
    assert set(i.vertex_index for i in mesh.indices) == {0, 1, 2, 3}


def test_quad_kept_without_triangulation():
    mesh = load(QUAD, triangulate=False).shapes[0].mesh
    assert mesh.num_face_vertices == [4]
    assert [i.vertex_index for i in mesh.indices] == [0, 1, 2, 3]


def _area(points):
    pairs = zip(points, points[1:] + points[:1])
    return 0.5 * sum(ax * by - ay * bx for (ax, ay), (bx, by) in pairs)


def test_concave_polygon_triangles_cover_polygon():
    points = [(0.0, 0.0), (2.0, 1.0), (4.0, 0.0), (2.0, 3.0)]
    text = "".join(f"v {x} {y} 0\n" for x, y in points) + "f 1 2 3 4\n"
    mesh = load(text).shapes[0].mesh
    assert mesh.num_face_vertices == [3, 3]
    ids = [i.vertex_index for i in mesh.indices]
    triangles = [[points[k] for k in ids[j:j + 3]] for j in (0, 3)]
    polygon_area = _area(points)
    for tri in triangles:
        assert _area(tri) * polygon_area > 0
    assert sum(_area(t) for t in triangles) == pytest.approx(polygon_area)


def test_groups_make_separate_shapes():
    text = "v 0 0 0\nv 1 0 0\nv 0 1 0\nv 1 1 0\ng first\nf 1 2 3\ng second\nf 2 4 3\n"
    shapes = load(text).shapes
    assert [s.name for s in shapes] == ["first", "second"]
    assert vertex_ids(shapes[1]) == [1, 3, 2]


def test_objects_make_separate_shapes():
    text = "v 0 0 0\nv 1 0 0\nv 0 1 0\no alpha\nf 1 2 3\no beta\nf 3 2 1\n"
    shapes = load(text).shapes
    assert [s.name for s in shapes] == ["alpha", "beta"]


def test_usemtl_with_stream_reader():
    mtl = io.StringIO("newmtl red\nKd 1 0 0\n")
    text = "mtllib any.mtl\nusemtl red\n" + TRIANGLE
    result = load(text, MaterialStreamReader(mtl))
    assert [m.name for m in result.materials] == ["red"]
    assert result.materials[0].diffuse == (1.0, 0.0, 0.0)
    assert result.shapes[0].mesh.material_ids == [0]


def test_unknown_material_keeps_default_id():
    result = load("usemtl nothing\n" + TRIANGLE)
    assert result.shapes[0].mesh.material_ids == [-1]


def test_mtllib_ignored_without_reader():
    result = load("mtllib lib.mtl\n" + TRIANGLE)
    assert result.materials == []
    assert result.warnings == ""


def test_missing_material_file_warns(tmp_path):
    reader = MaterialFileReader(str(tmp_path) + os.sep)
    result = load("mtllib nope.mtl\n" + TRIANGLE, reader)
    assert "not found" in result.warnings
    assert "Failed to load material file(s)" in result.warnings
    assert len(result.shapes) == 1


def test_empty_mtllib_warns():
    result = load("mtllib \n" + TRIANGLE, MaterialStreamReader(io.StringIO("")))
    assert "empty filename" in result.warnings


def test_tags_are_parsed():
    result = load(TRIANGLE + "t crease 2/1/0 1 2 3.5\n" + "f 1 2 3\n")
    tags = result.shapes[0].mesh.tags
    assert len(tags) == 1
    assert tags[0].name == "crease"
    assert tags[0].int_values == [1, 2]
    assert tags[0].float_values == [3.5]
    assert tags[0].string_values == []


def test_load_obj_from_file_with_materials(tmp_path):
    (tmp_path / "lib.mtl").write_text("newmtl glow\nKe 2 2 2\n")
    (tmp_path / "model.obj").write_text("mtllib lib.mtl\nusemtl glow\n" + TRIANGLE)
    result = load_obj(tmp_path / "model.obj", str(tmp_path) + os.sep)
    assert result.materials[0].emission == (2.0, 2.0, 2.0)
    assert result.shapes[0].mesh.material_ids == [0]


def test_load_obj_missing_file(tmp_path):
    with pytest.raises(ObjLoadError, match="Cannot open file"):
        load_obj(tmp_path / "absent.obj")