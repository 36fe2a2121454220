import logging
import math

import pytest

from scopview.objfile import (
    ObjectFile,
    Polygon,
    ShadingGroup,
    Vertex,
    load_object,
    parse_object,
)


def test_parses_attributes_and_faces():
    obj = parse_object(["v 1 2 3", "v 2 4 6 2", "vt 0.5", "vn 0 0 1", "f 1/1/1 2//1 1"])
    assert isinstance(obj, ObjectFile)
    assert obj.vertices == [(1.0, 2.0, 3.0), (1.0, 2.0, 3.0)]
    assert obj.textures == [(0.5, 0.0, 0.0)]
    assert obj.normals == [(0.0, 0.0, 1.0)]
    polygon = obj.groups[0].polygons[0]
    assert list(polygon) == [Vertex(1, 1, 1), Vertex(2, 0, 1), Vertex(1, 0, 0)]
    assert len(polygon) == 3
    assert polygon.material is None
    assert obj.vertex_count == 3


def test_bounds_include_origin():
    obj = parse_object(["v 1 2 3"])
    assert obj.maximum == [1.0, 2.0, 3.0]
    assert obj.minimum == [0.0, 0.0, 0.0]
    obj = parse_object(["v -1 -2 -3"])
    assert obj.minimum == [-1.0, -2.0, -3.0]
    assert obj.maximum == [0.0, 0.0, 0.0]


def test_zero_weight_gives_non_finite_values():
    (x, y, z), = parse_object(["v 1 0 -1 0"]).vertices
    assert x == math.inf
    assert math.isnan(y)
    assert z == -math.inf


def test_smoothing_groups():
    obj = parse_object(["f 1 2 3", "s 1", "f 1 2 3", "f 2 3 4", "s off", "f 1 2 3"])
    assert [group.smooth for group in obj.groups] == [False, True, False]
    assert [len(group.polygons) for group in obj.groups] == [1, 2, 1]


def test_ignores_unknown_statements_and_blank_lines():
    obj = parse_object(["", "# comment", "o name", "vp 1 2", "g group", "v 1 1 1"])
    assert obj.vertices == [(1.0, 1.0, 1.0)]
    assert obj.groups == [ShadingGroup(False)]


@pytest.mark.parametrize(
    "line, message",
    [
        ("v 1 2", "invalid number of coordinates"),
        ("vt", "invalid number of coordinates"),
        ("vn 1 2", "invalid number of coordinates"),
        ("f 1 2", "a polygon must have at least 3 vertices"),
        ("f 0 1 2", "indices must be strictly greater than 0"),
        ("f /1 2 3", "vertex index cannot be omitted"),
        ("usemtl", "missing material name"),
        ("usemtl a b", "only one material name must be specified"),
        ("mtllib", "missing material library name"),
    ],
)
def test_syntax_errors_report_line(line, message):
    with pytest.raises(ValueError, match=f"Bad syntax at line 2: {message}"):
        parse_object(["v 1 1 1", line])


def test_non_numeric_coordinate():
    with pytest.raises(ValueError, match="Bad syntax at line 1"):
        parse_object(["v a b c"])


def test_unknown_material_is_none(caplog):
    with caplog.at_level(logging.WARNING):
        obj = parse_object(["usemtl ghost", "f 1 2 3"])
    assert obj.groups[0].polygons[0].material is None
    assert 'unknown material name "ghost"' in caplog.text


def test_load_object_with_materials(tmp_path):
    (tmp_path / "lib.mtl").write_text("newmtl red\nKd 1 0 0\n")
    (tmp_path / "model.obj").write_text(
        "mtllib lib.mtl\nv 0 0 0\nusemtl red\nf 1 1 1\nusemtl blue\nf 1 1 1\n"
    )
    obj = load_object((tmp_path / "model.obj").as_posix())
    first, second = obj.groups[0].polygons
    assert first.material is obj.materials["red"]
    assert first.material.diffuse_color == (1.0, 0.0, 0.0)
    assert second.material is None


def test_load_object_wraps_syntax_errors(tmp_path):
    path = tmp_path / "bad.obj"
    path.write_text("v 1 1 1\nv 1\n")
    with pytest.raises(ValueError, match="Bad syntax at line 2"):
        load_object(path.as_posix())


def test_load_object_bad_extension(tmp_path):
    with pytest.raises(ValueError, match="must be .obj"):
        load_object((tmp_path / "model.stl").as_posix())


def test_load_object_missing_file(tmp_path):
    with pytest.raises(OSError, match="Failed to open"):
        load_object((tmp_path / "absent.obj").as_posix())


def test_polygon_indexing():
    polygon = Polygon(None, [Vertex(1), Vertex(2, 3, 4)])
    assert polygon[1].normal == 4
    assert [vertex.position for vertex in polygon] == [1, 2]