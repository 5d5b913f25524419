"""Extraction, merging and rendering of ``@font-face`` rules.

Architecture
: `extract_font_faces` tokenizes stylesheets with tinycss2, walks every
  ``@font-face`` rule (including the ones nested in ``@media``/``@supports``)
  and decodes the recognised declarations into :class:`FontFace` descriptors.
: `merge_font_faces` collapses descriptors that only differ by their sources
  and orders each source list by format priority.
: `add_local_fallbacks` prepends ``local()`` names derived from the family,
  weight and style naming conventions used by font foundries.
: `generate_font_face` turns a descriptor back into CSS text.

Unknown tokens and properties are skipped silently so that unrelated CSS
never breaks extraction.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
import dataclasses
import logging
from typing import Any

import tinycss2

from fontshelf.fonts.model import FontFace, FontSource, LocalSource, RemoteSource


_log = logging.getLogger(__name__)

EXTRACTABLE_PROPERTIES: dict[str, str] = {
    "src": "src",
    "font-display": "display",
    "font-weight": "weight",
    "font-style": "style",
    "font-stretch": "stretch",
    "font-feature-settings": "feature_settings",
    "font-variation-settings": "variation_settings",
    "font-variations-settings": "variation_settings",
    "unicode-range": "unicode_range",
}

# Kept as serialised CSS rather than decoded.
_TEXT_FIELDS = frozenset({"stretch", "feature_settings", "variation_settings"})
_GROUPING_RULES = frozenset({"media", "supports", "layer", "document", "container"})

WEIGHT_NAMES: dict[int, str] = {
    100: "Thin",
    200: "ExtraLight",
    300: "Light",
    400: "Regular",
    500: "Medium",
    600: "SemiBold",
    700: "Bold",
    800: "ExtraBold",
    900: "Black",
}

STYLE_NAMES: dict[str, str] = {
    "italic": "Italic",
    "oblique": "Oblique",
    "normal": "",
}

FORMAT_EXTENSIONS: dict[str, str] = {
    "woff2": "woff2",
    "woff": "woff",
    "otf": "opentype",
    "ttf": "truetype",
    "eot": "embedded-opentype",
    "svg": "svg",
}
FORMAT_PRIORITY: tuple[str, ...] = tuple(FORMAT_EXTENSIONS.values())

# https://developer.mozilla.org/en-US/docs/Web/CSS/font-family
GENERIC_FAMILIES = frozenset(
    {
        "serif",
        "sans-serif",
        "monospace",
        "cursive",
        "fantasy",
        "system-ui",
        "ui-serif",
        "ui-sans-serif",
        "ui-monospace",
        "ui-rounded",
        "emoji",
        "math",
        "fangsong",
    }
)
GLOBAL_VALUES = frozenset({"inherit", "initial", "revert", "revert-layer", "unset"})


def _significant(tokens: Iterable[Any]) -> list[Any]:
    return [token for token in tokens if token.type not in {"whitespace", "comment"}]


def serialize_value(tokens: Iterable[Any]) -> str:
    """Serialise value tokens back to CSS, without comments or outer whitespace."""
    return tinycss2.serialize(token for token in tokens if token.type != "comment").strip()


def split_value(tokens: Iterable[Any]) -> list[str]:
    """Serialise each top-level, comma-separated item of a value."""
    items: list[list[Any]] = [[]]
    for token in tokens:
        if token.type == "literal" and token.value == ",":
            items.append([])
        else:
            items[-1].append(token)
    pieces = (serialize_value(item) for item in items)
    return [piece for piece in pieces if piece]


def _function_argument(token: Any) -> str | None:
    arguments = _significant(token.arguments)
    if not arguments:
        return None
    first = arguments[0]
    if first.type == "string":
        return first.value
    if first.type == "ident":
        return " ".join(arg.value for arg in arguments if arg.type == "ident")
    return None


def _number(token: Any) -> int | float:
    return token.int_value if token.is_integer else token.value


def decode_value(tokens: Sequence[Any]) -> Any:
    """Decode a declaration value into sources, strings and numbers.

    Tokens that carry no such value (including parse errors) are skipped. A
    single decoded value is returned unwrapped.
    """
    values: list[Any] = []
    buffer = ""
    for token in tokens:
        kind = token.type
        if kind == "function":
            name = token.lower_name
            argument = _function_argument(token)
            if argument is None:
                continue
            if name == "local":
                values.append(LocalSource(name=argument))
            elif name == "url":
                values.append(RemoteSource(url=argument))
            elif name in {"format", "tech"}:
                if values and isinstance(values[-1], RemoteSource):
                    values[-1] = dataclasses.replace(values[-1], **{name: argument})
        elif kind == "url":
            values.append(RemoteSource(url=token.value))
        elif kind == "ident":
            buffer = f"{buffer} {token.value}" if buffer else token.value
        elif kind == "string":
            values.append(token.value)
        elif kind == "literal":
            if token.value == "," and buffer:
                values.append(buffer)
                buffer = ""
        elif kind == "unicode-range":
            values.append(token.serialize())
        elif kind == "number":
            values.append(_number(token))

    if buffer:
        values.append(buffer)

    if len(values) == 1:
        return values[0]
    return values


def extract_font_families(tokens: Sequence[Any]) -> list[str]:
    """Return the family names listed by a ``font-family`` value.

    Unquoted multi-word names are joined back together; generic families and
    CSS-wide keywords are skipped.
    """
    families: list[str] = []
    buffer = ""
    for token in tokens:
        kind = token.type
        if kind == "ident":
            if token.lower_value in GENERIC_FAMILIES or token.lower_value in GLOBAL_VALUES:
                continue
            buffer = f"{buffer} {token.value}" if buffer else token.value
        elif kind == "literal" and token.value == ",":
            if buffer:
                families.append(buffer.replace("\\", ""))
                buffer = ""
        elif kind == "dimension" and buffer:
            buffer = f"{buffer} {token.representation}{token.unit}".strip()
        elif kind == "string":
            families.append(token.value)

    if buffer:
        families.append(buffer)
    return families


def _iter_font_face_rules(nodes: Iterable[Any]) -> Iterator[Any]:
    for node in nodes:
        if node.type != "at-rule":
            continue
        if node.lower_at_keyword == "font-face":
            yield node
        elif node.content is not None and node.lower_at_keyword in _GROUPING_RULES:
            nested = tinycss2.parse_rule_list(
                node.content, skip_comments=True, skip_whitespace=True
            )
            yield from _iter_font_face_rules(nested)


def _as_scalar(value: Any) -> Any:
    if isinstance(value, list):
        if not value:
            return None
        return " ".join(str(item) for item in value)
    return value


def _coerce_sources(value: Any) -> list[FontSource]:
    items = value if isinstance(value, list) else [value]
    sources: list[FontSource] = []
    for item in items:
        if isinstance(item, (LocalSource, RemoteSource)):
            sources.append(item)
        elif isinstance(item, str) and item:
            sources.append(RemoteSource(url=item))
    return sources


def _coerce_weight(value: Any) -> Any:
    if isinstance(value, list):
        numbers = [item for item in value if isinstance(item, (int, float))]
        if len(numbers) == 2 and len(value) == 2:
            return (numbers[0], numbers[1])
        return _as_scalar(value)
    return value


def _face_from_declarations(declarations: Sequence[Any]) -> FontFace:
    face = FontFace()
    for declaration in declarations:
        field = EXTRACTABLE_PROPERTIES.get(declaration.lower_name)
        if field is None:
            continue
        if field in _TEXT_FIELDS:
            setattr(face, field, serialize_value(declaration.value) or None)
            continue
        if field == "unicode_range":
            face.unicode_range = split_value(declaration.value) or None
            continue
        value = decode_value(declaration.value)
        if field == "src":
            face.src = _coerce_sources(value)
        elif field == "weight":
            face.weight = _coerce_weight(value)
        else:
            scalar = _as_scalar(value)
            setattr(face, field, None if scalar is None else str(scalar))
    return face


def _matches_family(declarations: Sequence[Any], family: str) -> bool:
    wanted = family.casefold()
    for declaration in declarations:
        if declaration.lower_name != "font-family":
            continue
        names = extract_font_families(declaration.value)
        if any(name.casefold() == wanted for name in names):
            return True
    return False


def extract_font_faces(css: str, family: str | None = None) -> list[FontFace]:
    """Parse ``css`` and return the merged ``@font-face`` descriptors it declares.

    When ``family`` is given, rules whose ``font-family`` does not list it
    (case-insensitively) are skipped. Rules without any usable source are
    dropped.
    """
    rules = tinycss2.parse_stylesheet(css, skip_comments=True, skip_whitespace=True)

    faces: list[FontFace] = []
    for rule in _iter_font_face_rules(rules):
        if rule.content is None:
            continue
        declarations = [
            node
            for node in tinycss2.parse_declaration_list(
                rule.content, skip_comments=True, skip_whitespace=True
            )
            if node.type == "declaration"
        ]
        if family is not None and not _matches_family(declarations, family):
            continue
        face = _face_from_declarations(declarations)
        if not face.src:
            _log.debug("Skipping @font-face rule without sources at line %s", rule.source_line)
            continue
        faces.append(face)

    return merge_font_faces(faces)


def source_priority(source: FontSource) -> int:
    """Return the sort index of a source: local first, then by format preference."""
    if isinstance(source, LocalSource):
        return -2
    font_format = (source.format or "woff2").lower()
    try:
        return FORMAT_PRIORITY.index(font_format)
    except ValueError:
        return len(FORMAT_PRIORITY)


def _append_unique(target: list[FontSource], sources: Iterable[FontSource]) -> None:
    for entry in sources:
        if entry not in target:
            target.append(entry)


def merge_font_faces(faces: Iterable[FontFace]) -> list[FontFace]:
    """Merge descriptors whose non-``src`` fields match and sort their sources."""
    merged: list[FontFace] = []
    index: dict[tuple[str | None, ...], FontFace] = {}
    for face in faces:
        key = face.identity()
        existing = index.get(key)
        if existing is None:
            existing = dataclasses.replace(face, src=[])
            index[key] = existing
            merged.append(existing)
        _append_unique(existing.src, face.src)

    for face in merged:
        face.src.sort(key=source_priority)
    return merged


def _weight_name(weight: Any) -> str | None:
    try:
        return WEIGHT_NAMES.get(int(weight))
    except (TypeError, ValueError):
        return None


def _local_name(*parts: str) -> str:
    return " ".join(part for part in parts if part).strip()


def add_local_fallbacks(family: str, faces: list[FontFace]) -> list[FontFace]:
    """Prepend ``local()`` sources named after the family, weight and style.

    Descriptors that already start with a local source are left untouched.
    Variable fonts get a single ``"{family} Variable"`` entry; static weights
    get ``"{family} {WeightName}"`` and, for 400, the bare family name first.
    """
    for face in faces:
        if not face.src or isinstance(face.src[0], LocalSource):
            continue
        style = STYLE_NAMES.get(face.style, "") if face.style else ""

        if face.is_variable:
            face.src.insert(0, LocalSource(name=_local_name(family, "Variable", style)))
            continue

        weights = face.weight if isinstance(face.weight, list) else [face.weight]
        for weight in weights:
            name = _weight_name(weight)
            if name is None:
                continue
            face.src.insert(0, LocalSource(name=_local_name(family, name, style)))
            if name == "Regular":
                face.src.insert(0, LocalSource(name=_local_name(family, style)))
    return faces


def _quote(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"')


def render_source(source: FontSource) -> str:
    """Render one source as it appears inside a ``src`` declaration."""
    if isinstance(source, LocalSource):
        return f'local("{_quote(source.name)}")'
    rendered = f'url("{_quote(source.url)}")'
    if source.format:
        rendered += f" format({source.format})"
    if source.tech:
        rendered += f" tech({source.tech})"
    return rendered


def render_sources(sources: Iterable[FontSource]) -> str:
    return ", ".join(render_source(source) for source in sources)


def _render_weight(weight: Any) -> str:
    if isinstance(weight, (tuple, list)):
        return " ".join(str(item) for item in weight)
    return str(weight)


def generate_font_face(family: str, face: FontFace) -> str:
    """Serialise a descriptor into an ``@font-face`` block."""
    family_name = family.replace("\\", "\\\\").replace("'", "\\'")
    lines = [
        "@font-face {",
        f"  font-family: '{family_name}';",
        f"  src: {render_sources(face.src)};",
        f"  font-display: {face.display or 'swap'};",
    ]
    if face.unicode_range:
        lines.append(f"  unicode-range: {', '.join(face.unicode_range)};")
    if face.weight:
        lines.append(f"  font-weight: {_render_weight(face.weight)};")
    if face.style:
        lines.append(f"  font-style: {face.style};")
    if face.stretch:
        lines.append(f"  font-stretch: {face.stretch};")
    if face.feature_settings:
        lines.append(f"  font-feature-settings: {face.feature_settings};")
    if face.variation_settings:
        lines.append(f"  font-variation-settings: {face.variation_settings};")
    lines.append("}")
    return "\n".join(lines)


def generate_font_faces(family: str, faces: Iterable[FontFace]) -> str:
    """Serialise several descriptors, one block per line group."""
    return "".join(f"{generate_font_face(family, face)}\n" for face in faces)


__all__ = [
    "EXTRACTABLE_PROPERTIES",
    "FORMAT_EXTENSIONS",
    "FORMAT_PRIORITY",
    "GENERIC_FAMILIES",
    "GLOBAL_VALUES",
    "STYLE_NAMES",
    "WEIGHT_NAMES",
    "add_local_fallbacks",
    "decode_value",
    "extract_font_faces",
    "extract_font_families",
    "generate_font_face",
    "generate_font_faces",
    "merge_font_faces",
    "render_source",
    "render_sources",
    "serialize_value",
    "source_priority",
    "split_value",
]
