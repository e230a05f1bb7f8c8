"""Streaming OBJ reader that reports each element through callbacks."""

from __future__ import annotations

from dataclasses import dataclass
from typing import IO, Callable, Optional

from .mtl import Material
from .objloader import Index, MaterialReader
from .objtokens import Tokens, parse_raw_triple, read_lines

_EMPTY_MTLLIB = "WARN: Looks like empty filename for mtllib. Use default material. \n"
_NO_MATERIALS = "WARN: Failed to load material file(s). Use default material.\n"


@dataclass
class ObjCallbacks:
    """Handlers for OBJ elements; any of them may be left out.

    ``vertex`` gets x, y, z, w (w defaults to 1); ``normal`` gets x, y, z;
    ``texcoord`` gets u, v, w (missing values are 0); ``index`` gets the
    face corners with indices exactly as written (0 when absent);
    ``usemtl`` gets the material name and its id (-1 if unknown);
    ``mtllib`` gets all materials loaded so far; ``group`` gets the group
    names; ``object`` gets the object name.
    """

    vertex: Optional[Callable[[float, float, float, float], None]] = None
    normal: Optional[Callable[[float, float, float], None]] = None
    texcoord: Optional[Callable[[float, float, float], None]] = None
    index: Optional[Callable[[list[Index]], None]] = None
    usemtl: Optional[Callable[[str, int], None]] = None
    mtllib: Optional[Callable[[list[Material]], None]] = None
    group: Optional[Callable[[list[str]], None]] = None
    object: Optional[Callable[[str], None]] = None


def _split_names(text: str) -> list[str]:
    parts = text.split(" ")
    if parts and parts[-1] == "":
        parts.pop()
    return parts


def _face(tok: Tokens) -> list[Index]:
    corners: list[Index] = []
    while not tok.at_end():
        vi = parse_raw_triple(tok)
        corners.append(
            Index(
                vertex_index=vi.v_idx,
                normal_index=vi.vn_idx,
                texcoord_index=vi.vt_idx,
            )
        )
        tok.skip(" \t\r")
    return corners


def load_obj_with_callback(
    stream: IO,
    callbacks: ObjCallbacks,
    material_reader: Optional[MaterialReader] = None,
) -> str:
    """Read OBJ text from ``stream``, calling the handlers in file order.

    Returns the accumulated warning text.
    """
    material_map: dict[str, int] = {}
    materials: list[Material] = []
    material_id = -1
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
            x, y, z, w = tok.real(), tok.real(), tok.real(), tok.real(1.0)
            if callbacks.vertex:
                callbacks.vertex(x, y, z, w)
        elif tok.match_keyword("vn"):
            tok.advance(3)
            x, y, z = tok.real(), tok.real(), tok.real()
            if callbacks.normal:
                callbacks.normal(x, y, z)
        elif tok.match_keyword("vt"):
            tok.advance(3)
            x, y, z = tok.real(), tok.real(), tok.real()
            if callbacks.texcoord:
                callbacks.texcoord(x, y, z)
        elif tok.match_keyword("f"):
            tok.advance(2)
            tok.skip_space()
            corners = _face(tok)
            if callbacks.index and corners:
                callbacks.index(corners)
        elif tok.match_keyword("usemtl"):
            tok.advance(7)
            name = tok.rest
            material_id = material_map.get(name, -1)
            if callbacks.usemtl:
                callbacks.usemtl(name, material_id)
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
            elif callbacks.mtllib:
                callbacks.mtllib(list(materials))
        elif tok.match_keyword("g"):
            names: list[str] = []
            while not tok.at_end():
                names.append(tok.string())
                tok.skip(" \t\r")
            if callbacks.group:
                callbacks.group(names[1:])
        elif tok.match_keyword("o"):
            tok.advance(2)
            if callbacks.object:
                callbacks.object(tok.rest)

    return "".join(warnings)