"""Loader for Wavefront OBJ geometry."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import IO, Callable, Optional, Sequence, Union

from .mtl import Material, MaterialFileReader
from .objtokens import Tokens, VertexIndex, atoi, parse_vertex_triple, read_lines

MaterialReader = Callable[[str, list, dict], str]

_TRIANGULATE_EPSILON = 0.0001
_MAX_ROUNDS = 10
_FACE_ERROR = "Failed parse `f' line(e.g. zero value for face index).\n"
_EMPTY_MTLLIB = "WARN: Looks like empty filename for mtllib. Use default material. \n"
_NO_MATERIALS = "WARN: Failed to load material file(s). Use default material.\n"


class ObjLoadError(Exception):
    """Raised when an OBJ file cannot be opened or parsed."""


@dataclass
class Index:
    """Zero-based indices of one face corner; -1 marks an unused index."""

    vertex_index: int = -1
    normal_index: int = -1
    texcoord_index: int = -1


@dataclass
class Tag:
    """A subdivision tag (``t`` line)."""

    name: str = ""
    int_values: list[int] = field(default_factory=list)
    float_values: list[float] = field(default_factory=list)
    string_values: list[str] = field(default_factory=list)


@dataclass
class ObjMesh:
    """Face data of one shape."""

    indices: list[Index] = field(default_factory=list)
    num_face_vertices: list[int] = field(default_factory=list)
    material_ids: list[int] = field(default_factory=list)
    tags: list[Tag] = field(default_factory=list)


@dataclass
class Shape:
    """A named group of faces."""

    name: str = ""
    mesh: ObjMesh = field(default_factory=ObjMesh)


@dataclass
class Attrib:
    """Flat vertex attribute arrays shared by all shapes."""

    vertices: list[float] = field(default_factory=list)
    normals: list[float] = field(default_factory=list)
    texcoords: list[float] = field(default_factory=list)
    colors: list[float] = field(default_factory=list)


@dataclass
class ObjResult:
    """Everything read from an OBJ file."""

    attrib: Attrib = field(default_factory=Attrib)
    shapes: list[Shape] = field(default_factory=list)
    materials: list[Material] = field(default_factory=list)
    warnings: str = ""


def _index(corner: VertexIndex) -> Index:
    return Index(
        vertex_index=corner.v_idx,
        normal_index=corner.vn_idx,
        texcoord_index=corner.vt_idx,
    )


def _pnpoly(xs: Sequence[float], ys: Sequence[float], tx: float, ty: float) -> bool:
    inside = False
    for (xi, yi), (xj, yj) in zip(zip(xs, ys), zip(xs[-1:] + xs[:-1], ys[-1:] + ys[:-1])):
        if (yi > ty) != (yj > ty) and tx < (xj - xi) * (ty - yi) / (yj - yi) + xi:
            inside = not inside
    return inside


def _position(v: Sequence[float], vi: int) -> Sequence[float]:
    if not 0 <= vi < len(v) // 3:
        raise ObjLoadError(f"face refers to missing vertex index {vi}")
    return v[3 * vi:3 * vi + 3]


def _emit(mesh: ObjMesh, corners: Sequence[VertexIndex], material_id: int) -> None:
    mesh.indices.extend(_index(c) for c in corners)
    mesh.num_face_vertices.append(3)
    mesh.material_ids.append(material_id)


def _choose_axes(face: list[VertexIndex], v: Sequence[float]) -> tuple[int, int]:
    n = len(face)
    for k in range(n):
        x0, y0, z0 = _position(v, face[k].v_idx)
        x1, y1, z1 = _position(v, face[(k + 1) % n].v_idx)
        x2, y2, z2 = _position(v, face[(k + 2) % n].v_idx)
        e0x, e0y, e0z = x1 - x0, y1 - y0, z1 - z0
        e1x, e1y, e1z = x2 - x1, y2 - y1, z2 - z1
        cx = abs(e0y * e1z - e0z * e1y)
        cy = abs(e0z * e1x - e0x * e1z)
        cz = abs(e0x * e1y - e0y * e1x)
        if cx > _TRIANGULATE_EPSILON or cy > _TRIANGULATE_EPSILON or cz > _TRIANGULATE_EPSILON:
            if cx > cy and cx > cz:
                return 1, 2
            if cz > cx and cz > cy:
                return 0, 1
            return 0, 2
    return 1, 2


def _triangulate(
    face: list[VertexIndex], v: Sequence[float], mesh: ObjMesh, material_id: int
) -> None:
    axes = _choose_axes(face, v)

    def plane(corner: VertexIndex) -> tuple[float, float]:
        p = _position(v, corner.v_idx)
        return p[axes[0]], p[axes[1]]

    area = 0.0
    for a, b in zip(face, face[1:] + face[:1]):
        ax, ay = plane(a)
        bx, by = plane(b)
        area += (ax * by - ay * bx) * 0.5

    remaining = list(face)
    guess = 0
    rounds = _MAX_ROUNDS
    while len(remaining) > 3 and rounds > 0:
        n = len(remaining)
        if guess >= n:
            rounds -= 1
            guess -= n
        ind = [remaining[(guess + k) % n] for k in range(3)]
        (x0, y0), (x1, y1), (x2, y2) = (plane(c) for c in ind)
        cross = (x1 - x0) * (y2 - y1) - (y1 - y0) * (x2 - x1)
        if cross * area < 0.0:
            guess += 1
            continue
        xs, ys = [x0, x1, x2], [y0, y1, y2]
        if any(
            _pnpoly(xs, ys, *plane(remaining[(guess + other) % n]))
            for other in range(3, n)
        ):
            guess += 1
            continue
        _emit(mesh, ind, material_id)
        del remaining[(guess + 1) % n]

    if len(remaining) == 3:
        _emit(mesh, remaining, material_id)


def _export_face_group(
    shape: Shape,
    face_group: list[list[VertexIndex]],
    tags: list[Tag],
    material_id: int,
    name: str,
    triangulate: bool,
    v: Sequence[float],
) -> bool:
    if not face_group:
        return False
    for face in face_group:
        if triangulate:
            _triangulate(face, v, shape.mesh, material_id)
        else:
            shape.mesh.indices.extend(_index(c) for c in face)
            shape.mesh.num_face_vertices.append(len(face) & 0xFF)
            shape.mesh.material_ids.append(material_id)
    shape.name = name
    shape.mesh.tags = list(tags)
    return True


def _split_names(text: str) -> list[str]:
    parts = text.split(" ")
    if parts and parts[-1] == "":
        parts.pop()
    return parts


def _parse_tag_sizes(tok: Tokens) -> tuple[int, int, int]:
    tok.skip_space()
    ints = atoi(tok.rest)
    tok.skip_until("/ \t\r")
    if tok.peek() != "/":
        return ints, 0, 0
    tok.advance()
    tok.skip_space()
    reals = atoi(tok.rest)
    tok.skip_until("/ \t\r")
    if tok.peek() != "/":
        return ints, reals, 0
    tok.advance()
    return ints, reals, tok.int()


def _parse_tag(tok: Tokens) -> Tag:
    tag = Tag(name=tok.string())
    ints, reals, strings = _parse_tag_sizes(tok)
    tag.int_values = [tok.int() for _ in range(max(ints, 0))]
    tag.float_values = [tok.real() for _ in range(max(reals, 0))]
    tag.string_values = [tok.string() for _ in range(max(strings, 0))]
    return tag


def load_obj_stream(
    stream: IO,
    material_reader: Optional[MaterialReader] = None,
    triangulate: bool = True,
) -> ObjResult:
    """Read OBJ text from a stream.

    ``material_reader`` is called for each ``mtllib`` file name until one
    succeeds; it returns warning text and raises OSError or ValueError on
    failure. Raises ObjLoadError when a face line is invalid.
    """
    v: list[float] = []
    vn: list[float] = []
    vt: list[float] = []
    vc: list[float] = []
    tags: list[Tag] = []
    face_group: list[list[VertexIndex]] = []
    name = ""
    material_map: dict[str, int] = {}
    materials: list[Material] = []
    material = -1
    shape = Shape()
    shapes: list[Shape] = []
    warnings: list[str] = []

    for line in read_lines(stream):
        if not line:
            continue
        tok = Tokens(line)
        tok.skip_space()
        if tok.peek() in ("", "#"):
            continue

        if tok.match_keyword("v"):
            tok.advance(2)
            v.extend((tok.real(), tok.real(), tok.real()))
            vc.extend((tok.real(1.0), tok.real(1.0), tok.real(1.0)))
        elif tok.match_keyword("vn"):
            tok.advance(3)
            vn.extend((tok.real(), tok.real(), tok.real()))
        elif tok.match_keyword("vt"):
            tok.advance(3)
            vt.extend((tok.real(), tok.real()))
        elif tok.match_keyword("f"):
            tok.advance(2)
            tok.skip_space()
            corners: list[VertexIndex] = []
            while not tok.at_end():
                try:
                    corner = parse_vertex_triple(
                        tok, len(v) // 3, len(vn) // 3, len(vt) // 2
                    )
                except ValueError as exc:
                    raise ObjLoadError(_FACE_ERROR) from exc
                corners.append(corner)
                tok.skip(" \t\r")
            face_group.append(corners)
        elif tok.match_keyword("usemtl"):
            tok.advance(7)
            new_id = material_map.get(tok.rest, -1)
            if new_id != material:
                _export_face_group(
                    shape, face_group, tags, material, name, triangulate, v
                )
                face_group = []
                material = new_id
        elif tok.match_keyword("mtllib"):
            if material_reader is None:
                continue
            tok.advance(7)
            filenames = _split_names(tok.rest)
            if not filenames:
                warnings.append(_EMPTY_MTLLIB)
                continue
            found = False
            for filename in filenames:
                try:
                    warning = material_reader(filename, materials, material_map)
                except (OSError, ValueError) as exc:
                    warnings.append(str(exc))
                    continue
                if warning:
                    warnings.append(warning)
                found = True
                break
            if not found:
                warnings.append(_NO_MATERIALS)
        elif tok.match_keyword("g"):
            _export_face_group(shape, face_group, tags, material, name, triangulate, v)
            if shape.mesh.indices:
                shapes.append(shape)
            shape = Shape()
            face_group = []
            names: list[str] = []
            while not tok.at_end():
                names.append(tok.string())
                tok.skip(" \t\r")
            name = names[1] if len(names) > 1 else ""
        elif tok.match_keyword("o"):
            if _export_face_group(
                shape, face_group, tags, material, name, triangulate, v
            ):
                shapes.append(shape)
            face_group = []
            shape = Shape()
            tok.advance(2)
            name = tok.rest
        elif tok.match_keyword("t"):
            tok.advance(2)
            tags.append(_parse_tag(tok))

    exported = _export_face_group(shape, face_group, tags, material, name, triangulate, v)
    if exported or shape.mesh.indices:
        shapes.append(shape)

    return ObjResult(
        attrib=Attrib(vertices=v, normals=vn, texcoords=vt, colors=vc),
        shapes=shapes,
        materials=materials,
        warnings="".join(warnings),
    )


def load_obj(
    filename: Union[str, os.PathLike],
    mtl_basedir: Optional[Union[str, os.PathLike]] = None,
    triangulate: bool = True,
) -> ObjResult:
    """Read an OBJ file; material libraries are looked up under ``mtl_basedir``."""
    path = os.fspath(filename)
    try:
        fh = open(path, "rb")
    except OSError as exc:
        raise ObjLoadError(f"Cannot open file [{path}]\n") from exc
    reader = MaterialFileReader(mtl_basedir if mtl_basedir is not None else "")
    with fh:
        return load_obj_stream(fh, reader, triangulate)