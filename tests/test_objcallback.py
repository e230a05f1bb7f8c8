import io

from pathscene.mtl import MaterialFileReader, MaterialStreamReader
from pathscene.objcallback import ObjCallbacks, load_obj_with_callback
from pathscene.objloader import Index


def _recorder():
    events = []
    callbacks = ObjCallbacks(
        vertex=lambda *a: events.append(("v", a)),
        normal=lambda *a: events.append(("vn", a)),
        texcoord=lambda *a: events.append(("vt", a)),
        index=lambda corners: events.append(("f", corners)),
        usemtl=lambda name, mid: events.append(("usemtl", name, mid)),
        mtllib=lambda mats: events.append(("mtllib", [m.name for m in mats])),
        group=lambda names: events.append(("g", names)),
        object=lambda name: events.append(("o", name)),
    )
    return events, callbacks


def test_vertex_defaults_w_to_one():
    events, cb = _recorder()
    load_obj_with_callback(io.StringIO("v 1 2 3\n"), cb)
    assert events == [("v", (1.0, 2.0, 3.0, 1.0))]


def test_vertex_with_w():
    events, cb = _recorder()
    load_obj_with_callback(io.StringIO("v 1 2 3 4\n"), cb)
    assert events == [("v", (1.0, 2.0, 3.0, 4.0))]


def test_normal_and_texcoord():
    events, cb = _recorder()
    load_obj_with_callback(io.StringIO("vn 0 1 0\nvt 0.5 0.25\n"), cb)
    assert events == [("vn", (0.0, 1.0, 0.0)), ("vt", (0.5, 0.25, 0.0))]


def test_face_indices_are_raw():
    events, cb = _recorder()
    load_obj_with_callback(io.StringIO("f 1/2/3 4//5 6 -1\n"), cb)
    assert events == [
        (
            "f",
            [
                Index(vertex_index=1, normal_index=3, texcoord_index=2),
                Index(vertex_index=4, normal_index=5, texcoord_index=0),
                Index(vertex_index=6, normal_index=0, texcoord_index=0),
                Index(vertex_index=-1, normal_index=0, texcoord_index=0),
            ],
        )
    ]


def test_group_and_object_names():
    events, cb = _recorder()
    load_obj_with_callback(io.StringIO("g a b\ng \no thing\n"), cb)
    assert events == [("g", ["a", "b"]), ("g", []), ("o", "thing")]


def test_comments_and_blank_lines_skipped():
    events, cb = _recorder()
    warnings = load_obj_with_callback(io.StringIO("# comment\n\n   \nv 0 0 0\n"), cb)
    assert warnings == ""
    assert len(events) == 1


def test_mtllib_and_usemtl():
    events, cb = _recorder()
    reader = MaterialStreamReader(io.StringIO("newmtl red\nKd 1 0 0\n"))
    text = "mtllib lib.mtl\nusemtl red\nusemtl missing\n"
    load_obj_with_callback(io.StringIO(text), cb, reader)
    assert events == [
        ("mtllib", ["red"]),
        ("usemtl", "red", 0),
        ("usemtl", "missing", -1),
    ]


def test_mtllib_without_reader_is_ignored():
    events, cb = _recorder()
    warnings = load_obj_with_callback(io.StringIO("mtllib lib.mtl\n"), cb)
    assert events == []
    assert warnings == ""


def test_missing_material_file_warns(tmp_path):
    events, cb = _recorder()
    reader = MaterialFileReader(str(tmp_path) + "/")
    warnings = load_obj_with_callback(io.StringIO("mtllib nope.mtl\n"), cb, reader)
    assert "Failed to load material file(s)" in warnings
    assert "not found" in warnings
    assert events == []


def test_empty_mtllib_warns():
    _, cb = _recorder()
    reader = MaterialStreamReader(io.StringIO(""))
    warnings = load_obj_with_callback(io.StringIO("mtllib \n"), cb, reader)
    assert "empty filename for mtllib" in warnings


def test_missing_handlers_are_fine():
    warnings = load_obj_with_callback(
        io.StringIO("v 1 2 3\nf 1 1 1\ng x\no y\n"), ObjCallbacks()
    )
    assert warnings == ""