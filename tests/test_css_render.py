from __future__ import annotations

import dataclasses

import pytest

from fontshelf.fonts.css import extract_font_faces, generate_font_face, generate_font_faces
from fontshelf.fonts.model import FontFace, LocalSource, RemoteSource


def test_renders_fields_in_fixed_order() -> None:
    face = FontFace(
        src=[LocalSource("Test Bold"), RemoteSource(url="a.woff2", format="woff2")],
        weight=700,
    )

    assert generate_font_face("Test", face) == (
        "@font-face {\n"
        "  font-family: 'Test';\n"
        '  src: local("Test Bold"), url("a.woff2") format(woff2);\n'
        "  font-display: swap;\n"
        "  font-weight: 700;\n"
        "}"
    )


def test_renders_every_optional_descriptor() -> None:
    face = FontFace(
        src=[RemoteSource(url="/_fonts/x.woff2", format="woff2", tech="variations")],
        display="block",
        weight=(100, 900),
        style="italic",
        stretch="75% 125%",
        unicode_range=["U+0-FF", "U+131"],
        feature_settings='"liga" 1',
        variation_settings='"wght" 400',
    )

    assert generate_font_face("Inter", face).splitlines() == [
        "@font-face {",
        "  font-family: 'Inter';",
        '  src: url("/_fonts/x.woff2") format(woff2) tech(variations);',
        "  font-display: block;",
        "  unicode-range: U+0-FF, U+131;",
        "  font-weight: 100 900;",
        "  font-style: italic;",
        "  font-stretch: 75% 125%;",
        '  font-feature-settings: "liga" 1;',
        '  font-variation-settings: "wght" 400;',
        "}",
    ]


def test_generate_font_faces_separates_blocks() -> None:
    faces = [
        FontFace(src=[RemoteSource(url="a.woff2")], weight=400),
        FontFace(src=[RemoteSource(url="b.woff2")], weight=700),
    ]

    css = generate_font_faces("T", faces)

    assert css.count("@font-face {") == 2
    assert css.endswith("}\n")
    assert generate_font_faces("T", []) == ""


@pytest.mark.parametrize(
    "face",
    [
        FontFace(
            src=[LocalSource("Test Bold"), RemoteSource(url="a.woff2", format="woff2")],
            weight=700,
        ),
        FontFace(
            src=[
                LocalSource("Inter Variable Italic"),
                RemoteSource(url="https://cdn.example/i.woff2", format="woff2"),
                RemoteSource(url="https://cdn.example/i.ttf", format="truetype"),
            ],
            display="fallback",
            weight=(100, 900),
            style="italic",
            unicode_range=["U+100-17F", "U+1E00-1EFF"],
        ),
        FontFace(
            src=[RemoteSource(url="c.woff2", format="woff2", tech="color-COLRv1")],
            display="swap",
            style="normal",
            stretch="condensed",
            feature_settings='"smcp" 1',
            variation_settings='"wdth" 80',
        ),
    ],
)
def test_render_then_extract_round_trips(face: FontFace) -> None:
    [extracted] = extract_font_faces(generate_font_face("Family Name", face), "Family Name")

    expected = face if face.display else dataclasses.replace(face, display="swap")
    assert extracted == expected


def test_family_quotes_are_escaped() -> None:
    face = FontFace(src=[RemoteSource(url="a.woff2")])

    css = generate_font_face("O'Brien Sans", face)

    assert "font-family: 'O\\'Brien Sans';" in css
    assert len(extract_font_faces(css, "O'Brien Sans")) == 1
