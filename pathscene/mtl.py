"""Reader for Wavefront MTL material libraries."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import IO, Optional, Union

from .objtokens import Tokens, read_lines

_DELIMS = " \t\r"
_KEYWORD = re.compile(r"([^ \t]+)[ \t]")

Vec3 = tuple[float, float, float]


class TextureType(Enum):
    """Projection used by a reflection texture."""

    NONE = 0
    SPHERE = 1
    CUBE_TOP = 2
    CUBE_BOTTOM = 3
    CUBE_FRONT = 4
    CUBE_BACK = 5
    CUBE_LEFT = 6
    CUBE_RIGHT = 7


_TEXTURE_TYPE_NAMES = (
    ("cube_top", TextureType.CUBE_TOP),
    ("cube_bottom", TextureType.CUBE_BOTTOM),
    ("cube_left", TextureType.CUBE_LEFT),
    ("cube_right", TextureType.CUBE_RIGHT),
    ("cube_front", TextureType.CUBE_FRONT),
    ("cube_back", TextureType.CUBE_BACK),
    ("sphere", TextureType.SPHERE),
)


@dataclass
class TextureOption:
    """Options given in front of a texture file name."""

    type: TextureType = TextureType.NONE
    sharpness: float = 1.0
    brightness: float = 0.0
    contrast: float = 1.0
    origin_offset: Vec3 = (0.0, 0.0, 0.0)
    scale: Vec3 = (1.0, 1.0, 1.0)
    turbulence: Vec3 = (0.0, 0.0, 0.0)
    clamp: bool = False
    imfchan: str = "m"
    blendu: bool = True
    blendv: bool = True
    bump_multiplier: float = 1.0


@dataclass
class Material:
    """One material from an MTL library."""

    name: str = ""
    ambient: Vec3 = (0.0, 0.0, 0.0)
    diffuse: Vec3 = (0.0, 0.0, 0.0)
    specular: Vec3 = (0.0, 0.0, 0.0)
    transmittance: Vec3 = (0.0, 0.0, 0.0)
    emission: Vec3 = (0.0, 0.0, 0.0)
    shininess: float = 1.0
    ior: float = 1.0
    dissolve: float = 1.0
    illum: int = 0
    ambient_texname: str = ""
    diffuse_texname: str = ""
    specular_texname: str = ""
    specular_highlight_texname: str = ""
    bump_texname: str = ""
    displacement_texname: str = ""
    alpha_texname: str = ""
    reflection_texname: str = ""
    ambient_texopt: TextureOption = field(default_factory=TextureOption)
    diffuse_texopt: TextureOption = field(default_factory=TextureOption)
    specular_texopt: TextureOption = field(default_factory=TextureOption)
    specular_highlight_texopt: TextureOption = field(default_factory=TextureOption)
    bump_texopt: TextureOption = field(default_factory=TextureOption)
    displacement_texopt: TextureOption = field(default_factory=TextureOption)
    alpha_texopt: TextureOption = field(default_factory=TextureOption)
    reflection_texopt: TextureOption = field(default_factory=TextureOption)
    roughness: float = 0.0
    metallic: float = 0.0
    sheen: float = 0.0
    clearcoat_thickness: float = 0.0
    clearcoat_roughness: float = 0.0
    anisotropy: float = 0.0
    anisotropy_rotation: float = 0.0
    roughness_texname: str = ""
    metallic_texname: str = ""
    sheen_texname: str = ""
    emissive_texname: str = ""
    normal_texname: str = ""
    roughness_texopt: TextureOption = field(default_factory=TextureOption)
    metallic_texopt: TextureOption = field(default_factory=TextureOption)
    sheen_texopt: TextureOption = field(default_factory=TextureOption)
    emissive_texopt: TextureOption = field(default_factory=TextureOption)
    normal_texopt: TextureOption = field(default_factory=TextureOption)
    unknown_parameter: dict[str, str] = field(default_factory=dict)


_COLOURS = {
    "Ka": "ambient",
    "Kd": "diffuse",
    "Ks": "specular",
    "Kt": "transmittance",
    "Tf": "transmittance",
    "Ke": "emission",
}

_SCALARS = {
    "Ni": "ior",
    "Ns": "shininess",
    "Pr": "roughness",
    "Pm": "metallic",
    "Ps": "sheen",
    "Pc": "clearcoat_thickness",
    "Pcr": "clearcoat_roughness",
    "aniso": "anisotropy",
    "anisor": "anisotropy_rotation",
}

# keyword -> (attribute prefix, is_bump)
_TEXTURES = {
    "map_Ka": ("ambient", False),
    "map_Kd": ("diffuse", False),
    "map_Ks": ("specular", False),
    "map_Ns": ("specular_highlight", False),
    "map_bump": ("bump", True),
    "map_Bump": ("bump", True),
    "bump": ("bump", True),
    "map_d": ("alpha", False),
    "disp": ("displacement", False),
    "refl": ("reflection", False),
    "map_Pr": ("roughness", False),
    "map_Pm": ("metallic", False),
    "map_Ps": ("sheen", False),
    "map_Ke": ("emissive", False),
    "norm": ("normal", False),
}


def _on_off(tok: Tokens, default: bool) -> bool:
    tok.skip_space()
    rest = tok.rest
    value = default
    if rest.startswith("on"):
        value = True
    elif rest.startswith("off"):
        value = False
    tok.skip_until(_DELIMS)
    return value


def _texture_type(tok: Tokens) -> TextureType:
    tok.skip_space()
    rest = tok.rest
    value = TextureType.NONE
    for name, kind in _TEXTURE_TYPE_NAMES:
        if rest.startswith(name):
            value = kind
            break
    tok.skip_until(_DELIMS)
    return value


def _real3(tok: Tokens, default: float) -> Vec3:
    return (tok.real(default), tok.real(default), tok.real(default))


def parse_texture_name_and_option(
    line: str, is_bump: bool
) -> tuple[Optional[str], TextureOption]:
    """Parse texture options and the file name that follows them.

    The file name runs to the end of the line, so it may hold spaces.
    Returns None for the name when the line holds only options.
    """
    opt = TextureOption(imfchan="l" if is_bump else "m")
    tok = Tokens(line)
    name: Optional[str] = None
    while not tok.at_end():
        tok.skip_space()
        if tok.match_keyword("-blendu"):
            tok.advance(8)
            opt.blendu = _on_off(tok, True)
        elif tok.match_keyword("-blendv"):
            tok.advance(8)
            opt.blendv = _on_off(tok, True)
        elif tok.match_keyword("-clamp"):
            tok.advance(7)
            opt.clamp = _on_off(tok, True)
        elif tok.match_keyword("-boost"):
            tok.advance(7)
            opt.sharpness = tok.real(1.0)
        elif tok.match_keyword("-bm"):
            tok.advance(4)
            opt.bump_multiplier = tok.real(1.0)
        elif tok.match_keyword("-o"):
            tok.advance(3)
            opt.origin_offset = _real3(tok, 0.0)
        elif tok.match_keyword("-s"):
            tok.advance(3)
            opt.scale = _real3(tok, 1.0)
        elif tok.match_keyword("-t"):
            tok.advance(3)
            opt.turbulence = _real3(tok, 0.0)
        elif tok.match_keyword("-type"):
            tok.advance(5)
            opt.type = _texture_type(tok)
        elif tok.match_keyword("-imfchan"):
            tok.advance(9)
            tok.skip_space()
            start = tok.pos
            tok.skip_until(_DELIMS)
            if tok.pos - start == 1:
                opt.imfchan = tok.text[start]
        elif tok.match_keyword("-mm"):
            tok.advance(4)
            opt.brightness = tok.real(0.0)
            opt.contrast = tok.real(1.0)
        else:
            name = tok.rest
            tok.pos = len(tok.text)
    return name, opt


def _clean(raw: str) -> str:
    line = raw.rstrip(" \t")
    if line.endswith("\n"):
        line = line[:-1]
    if line.endswith("\r"):
        line = line[:-1]
    return line


def _both_warning(name: str) -> str:
    return (
        f'WARN: Both `d` and `Tr` parameters defined for "{name}". '
        "Use the value of `d` for dissolve.\n"
    )


def load_mtl(stream: IO) -> tuple[list[Material], dict[str, int], str]:
    """Read an MTL library.

    Returns the materials in file order, a map from name to index (the
    first material of a name wins) and the accumulated warning text.
    The material being defined at the end of the input is always kept,
    even when it has no name.
    """
    materials: list[Material] = []
    material_map: dict[str, int] = {}
    warnings: list[str] = []

    material = Material()
    has_d = False
    has_tr = False

    for raw in read_lines(stream):
        line = _clean(raw)
        if not line:
            continue
        tok = Tokens(line)
        tok.skip_space()
        if tok.peek() in ("", "#"):
            continue

        match = _KEYWORD.match(line, tok.pos)
        if match is None:
            continue
        keyword = match.group(1)
        tok.pos = match.end()

        if keyword == "newmtl":
            if material.name:
                material_map.setdefault(material.name, len(materials))
                materials.append(material)
            material = Material()
            has_d = False
            has_tr = False
            material.name = tok.rest
        elif keyword in _COLOURS:
            setattr(material, _COLOURS[keyword], _real3(tok, 0.0))
        elif keyword in _SCALARS:
            setattr(material, _SCALARS[keyword], tok.real())
        elif keyword == "illum":
            material.illum = tok.int()
        elif keyword == "d":
            material.dissolve = tok.real()
            if has_tr:
                warnings.append(_both_warning(material.name))
            has_d = True
        elif keyword == "Tr":
            if has_d:
                warnings.append(_both_warning(material.name))
            else:
                material.dissolve = 1.0 - tok.real()
            has_tr = True
        elif keyword in _TEXTURES:
            prefix, is_bump = _TEXTURES[keyword]
            if keyword == "map_d":
                material.alpha_texname = tok.rest
            name, opt = parse_texture_name_and_option(tok.rest, is_bump)
            if name is not None:
                setattr(material, f"{prefix}_texname", name)
            setattr(material, f"{prefix}_texopt", opt)
        else:
            rest = line[match.start():]
            split = rest.find(" ")
            if split < 0:
                split = rest.find("\t")
            if split >= 0:
                material.unknown_parameter.setdefault(rest[:split], rest[split + 1:])

    material_map.setdefault(material.name, len(materials))
    materials.append(material)
    return materials, material_map, "".join(warnings)


def _merge(
    loaded: tuple[list[Material], dict[str, int], str],
    materials: list[Material],
    material_map: dict[str, int],
) -> str:
    new_materials, new_map, warning = loaded
    offset = len(materials)
    for name, index in new_map.items():
        material_map.setdefault(name, offset + index)
    materials.extend(new_materials)
    return warning


class MaterialFileReader:
    """Loads material libraries from files under a base directory."""

    def __init__(self, mtl_basedir: Union[str, os.PathLike] = "") -> None:
        self.mtl_basedir = os.fspath(mtl_basedir)

    def __call__(
        self, mat_id: str, materials: list[Material], material_map: dict[str, int]
    ) -> str:
        """Append the library's materials; returns warnings.

        Raises FileNotFoundError when the file cannot be opened.
        """
        filepath = self.mtl_basedir + mat_id if self.mtl_basedir else mat_id
        try:
            with open(filepath, "rb") as fh:
                loaded = load_mtl(fh)
        except OSError as exc:
            raise FileNotFoundError(
                f"WARN: Material file [ {filepath} ] not found.\n"
            ) from exc
        return _merge(loaded, materials, material_map)


class MaterialStreamReader:
    """Loads a material library from an already open stream."""

    def __init__(self, stream: Optional[IO]) -> None:
        self.stream = stream

    def __call__(
        self, mat_id: str, materials: list[Material], material_map: dict[str, int]
    ) -> str:
        """Append the stream's materials, ignoring ``mat_id``; returns warnings.

        Raises ValueError when the stream is missing or closed.
        """
        if self.stream is None or getattr(self.stream, "closed", False):
            raise ValueError("WARN: Material stream in error state.\n")
        return _merge(load_mtl(self.stream), materials, material_map)