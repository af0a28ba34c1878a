"""Tests for building shape collections from shapes file text."""

import logging

import pytest
from reassembly_shapes.config import EditorConfig
from reassembly_shapes.literal import ParseError, ParseErrorKind, parse
from reassembly_shapes.shapes.builder import ShapeModelBuilder, parse_and_build
from reassembly_shapes.shapes.errors import InvariantViolation, SchemaError, SchemaErrorKind, WarningKind
from reassembly_shapes.shapes.serializer import render
from reassembly_shapes.shapes.shape import Port, PortType, Vertex


CANONICAL = """\
{
  {101,  --Shape_Name
    {
      { verts={ {5,5},{5,-5},{-5,-5},{-5,5} },
        ports={ {0,0.5}, {1,0.5,THRUSTER_IN}, {2,0.5,THRUSTER_OUT}, {3,0.5} } }
    }
  }
}
"""


def shapes_file(*entries):
    return "{\n" + ",\n".join(entries) + "\n}\n"


def shape_entry(shape_id, verts="{0,0},{10,0},{0,10}", ports="{0,0.5}", extra=""):
    return (
        f"  {{{shape_id},  --Shape {shape_id}\n"
        f"    {{ {{ verts={{ {verts} }}, ports={{ {ports} }} }} }}{extra}\n"
        f"  }}"
    )


def build_error(text):
    with pytest.raises(SchemaError) as info:
        parse_and_build(text)
    return info.value


class TestCanonicalExample:
    """Tests for the reference shapes file."""

    def test_shape(self):
        collection, warnings = parse_and_build(CANONICAL)
        assert warnings == []
        assert len(collection) == 1
        shape = collection.shapes[0]
        assert shape.shape_id == 101
        assert shape.name == "Shape_Name"
        assert shape.num_scales == 1
        assert shape.launcher_radial is None

    def test_vertices(self):
        collection, _ = parse_and_build(CANONICAL)
        variant = collection.shapes[0].get_scale(0)
        assert [v.as_tuple() for v in variant.vertices] == [(5, 5), (5, -5), (-5, -5), (-5, 5)]

    def test_ports(self):
        collection, _ = parse_and_build(CANONICAL)
        variant = collection.shapes[0].get_scale(0)
        assert [port.port_type for port in variant.ports] == [
            PortType.DEFAULT, PortType.THRUSTER_IN, PortType.THRUSTER_OUT, PortType.DEFAULT,
        ]
        assert [port.edge for port in variant.ports] == [0, 1, 2, 3]
        assert all(port.position == 0.5 for port in variant.ports)


class TestBuilder:
    """Tests for ShapeModelBuilder."""

    def test_empty_file(self):
        collection, warnings = parse_and_build("{}")
        assert len(collection) == 0
        assert warnings == []

    def test_file_order_is_kept(self):
        text = shapes_file(shape_entry(30), shape_entry(2), shape_entry(17))
        collection, _ = parse_and_build(text)
        assert collection.ids == [30, 2, 17]

    def test_several_scale_variants(self):
        text = """{
          {5,
            {
              {verts={{0,0},{1,0},{0,1}}},
              {verts={{0,0},{2,0},{0,2}}, ports={{2,1}}}
            }
          }
        }"""
        collection, _ = parse_and_build(text)
        shape = collection.shapes[0]
        assert shape.num_scales == 2
        assert shape.get_scale(0).ports == ()
        assert shape.get_scale(1).ports == (Port(2, 1.0),)
        assert shape.get_scale(1).vertices[1] == Vertex(2, 0)

    def test_placeholder_name(self):
        collection, _ = parse_and_build("{{42, {{verts={{0,0},{1,0},{0,1}}}}}}")
        assert collection.shapes[0].name == "Shape_42"

    def test_placeholder_name_template(self):
        config = EditorConfig(default_name_template="Unnamed {id}")
        collection, _ = parse_and_build("{{42, {{verts={{0,0},{1,0},{0,1}}}}}}", config)
        assert collection.shapes[0].name == "Unnamed 42"

    def test_name_from_leading_comment(self):
        text = "{\n  -- Wing Tip\n  {7, {{verts={{0,0},{1,0},{0,1}}}}}\n}"
        collection, _ = parse_and_build(text)
        assert collection.shapes[0].name == "Wing Tip"

    def test_id_comment_wins_over_leading_comment(self):
        text = "{\n  -- ignored\n  {7,  -- Hull\n    {{verts={{0,0},{1,0},{0,1}}}}}\n}"
        collection, _ = parse_and_build(text)
        assert collection.shapes[0].name == "Hull"

    def test_integral_float_id(self):
        collection, _ = parse_and_build("{{7.0, {{verts={{0,0},{1,0},{0,1}}}}}}")
        assert collection.ids == [7]

    def test_bracketed_keys(self):
        text = '{{1, {{["verts"]={{0,0},{1,0},{0,1}}, ["ports"]={{0,0}}}}}}'
        collection, _ = parse_and_build(text)
        assert len(collection.shapes[0].get_scale(0).ports) == 1

    def test_case_insensitive_port_types(self):
        text = shapes_file(shape_entry(1, ports="{0,0.5,weapon_in}"))
        collection, warnings = parse_and_build(text)
        assert collection.shapes[0].get_scale(0).ports[0].port_type == PortType.WEAPON_IN
        assert warnings == []

    def test_build_from_value(self):
        collection, _ = ShapeModelBuilder().build(parse(CANONICAL))
        assert collection.ids == [101]

    def test_parse_errors_pass_through(self):
        with pytest.raises(ParseError) as info:
            parse_and_build("{{101, {")
        assert info.value.kind == ParseErrorKind.UNBALANCED_BRACE

    def test_max_depth_from_config(self):
        with pytest.raises(ParseError) as info:
            parse_and_build(CANONICAL, EditorConfig(max_parse_depth=4))
        assert info.value.kind == ParseErrorKind.TOO_DEEP


class TestLauncherRadial:
    """Tests for the launcher_radial shape flag."""

    def test_keyed_true(self):
        text = shapes_file(shape_entry(1, extra=",\n    launcher_radial=true"))
        collection, warnings = parse_and_build(text)
        assert collection.shapes[0].launcher_radial is True
        assert warnings == []

    def test_keyed_false(self):
        text = shapes_file(shape_entry(1, extra=", launcher_radial=false"))
        collection, _ = parse_and_build(text)
        assert collection.shapes[0].launcher_radial is False

    def test_numeric(self):
        text = shapes_file(shape_entry(1, extra=", launcher_radial=1"))
        collection, _ = parse_and_build(text)
        assert collection.shapes[0].launcher_radial is True

    def test_bare_flag(self):
        text = shapes_file(shape_entry(1, extra=", launcher_radial"))
        collection, warnings = parse_and_build(text)
        assert collection.shapes[0].launcher_radial is True
        assert warnings == []

    def test_invalid_value(self):
        error = build_error(shapes_file(shape_entry(1, extra=', launcher_radial="yes"')))
        assert error.kind == SchemaErrorKind.INVALID_STRUCTURE
        assert error.field == "launcher_radial"


class TestWarnings:
    """Tests for non-fatal build warnings."""

    def test_unknown_port_type(self):
        text = shapes_file(shape_entry(9, ports="{0,0.5}, {1,0.25,FOO_BAR}"))
        collection, warnings = parse_and_build(text)
        port = collection.shapes[0].get_scale(0).ports[1]
        assert port.port_type == PortType.UNKNOWN
        assert port.type_name == "FOO_BAR"
        assert len(warnings) == 1
        warning = warnings[0]
        assert warning.kind == WarningKind.UNKNOWN_PORT_TYPE
        assert warning.shape_id == 9
        assert warning.field == "scales[0].ports[1]"
        assert warning.text == "FOO_BAR"

    def test_warnings_are_logged(self, caplog):
        caplog.set_level(logging.WARNING, logger="reassembly_shapes")
        parse_and_build(shapes_file(shape_entry(9, ports="{1,0.25,FOO_BAR}")))
        assert "FOO_BAR" in caplog.text

    def test_ignored_fields(self):
        text = shapes_file(shape_entry(3, extra=", durability=2, 99"))
        collection, warnings = parse_and_build(text)
        assert len(collection) == 1
        assert [w.kind for w in warnings] == [WarningKind.IGNORED_FIELD] * 2
        assert all(w.shape_id == 3 for w in warnings)

    def test_ignored_variant_field(self):
        text = "{{1, {{verts={{0,0},{1,0},{0,1}}, color=3}}}}"
        _, warnings = parse_and_build(text)
        assert len(warnings) == 1
        assert warnings[0].field == "scales[0]"


class TestSchemaErrors:
    """Tests for invariant and structure violations."""

    def test_two_vertices(self):
        error = build_error(shapes_file(shape_entry(12, verts="{0,0},{1,0}", ports="")))
        assert error.kind == SchemaErrorKind.TOO_FEW_VERTICES
        assert error.shape_id == 12
        assert error.field == "scales[0].verts"
        assert "shape 12" in str(error)

    def test_port_edge_out_of_range(self):
        error = build_error(shapes_file(shape_entry(12, ports="{0,0.5},{3,0.5}")))
        assert error.kind == SchemaErrorKind.PORT_EDGE_OUT_OF_RANGE
        assert error.shape_id == 12
        assert error.field == "scales[0].ports[1].edge"

    def test_port_position_out_of_range(self):
        error = build_error(shapes_file(shape_entry(12, ports="{0,1.5}")))
        assert error.kind == SchemaErrorKind.PORT_POSITION_OUT_OF_RANGE
        assert error.shape_id == 12
        assert error.field == "scales[0].ports[0].position"

    def test_fractional_port_edge(self):
        error = build_error(shapes_file(shape_entry(12, ports="{0.5,0.5}")))
        assert error.kind == SchemaErrorKind.INVALID_PORT

    def test_duplicate_id(self):
        text = shapes_file(shape_entry(4), shape_entry(5), shape_entry(4))
        error = build_error(text)
        assert error.kind == SchemaErrorKind.DUPLICATE_ID
        assert error.shape_id == 4
        assert error.positions == (0, 2)
        assert error.lines == (2, 8)

    def test_invalid_ids(self):
        for shape_id in ("-1", "1.5", '"one"', "ROOT"):
            error = build_error(shapes_file(shape_entry(shape_id)))
            assert error.kind == SchemaErrorKind.INVALID_ID, shape_id
            assert error.shape_id is None
            assert error.positions == (0,)

    def test_missing_id(self):
        assert build_error("{{}}").kind == SchemaErrorKind.INVALID_ID

    def test_missing_verts(self):
        error = build_error("{{1, {{ports={}}}}}")
        assert error.kind == SchemaErrorKind.MISSING_VERTS
        assert error.shape_id == 1
        assert error.field == "scales[0].verts"

    def test_no_scale_variants(self):
        assert build_error("{{1}}").kind == SchemaErrorKind.NO_SCALE_VARIANTS
        assert build_error("{{1, {}}}").kind == SchemaErrorKind.NO_SCALE_VARIANTS

    def test_malformed_vertex(self):
        for verts in ("{0,0},{1},{0,1}", "{0,0},{1,0,2},{0,1}", '{0,0},{1,"0"},{0,1}', "{0,0},5,{0,1}"):
            error = build_error(shapes_file(shape_entry(1, verts=verts, ports="")))
            assert error.kind == SchemaErrorKind.INVALID_VERTEX, verts
            assert error.field == "scales[0].verts[1]"

    def test_malformed_port(self):
        for ports in ("{0}", "{0,0.5,ROOT,1}", '{0,0.5,"ROOT"}', "{0,ROOT}"):
            error = build_error(shapes_file(shape_entry(1, ports=ports)))
            assert error.kind == SchemaErrorKind.INVALID_PORT, ports
            assert error.field == "scales[0].ports[0]"

    def test_wrong_structure(self):
        assert build_error("{5}").kind == SchemaErrorKind.INVALID_STRUCTURE
        assert build_error("{{1, 2}}").kind == SchemaErrorKind.INVALID_STRUCTURE
        assert build_error("{{1, {3}}}").kind == SchemaErrorKind.INVALID_STRUCTURE
        assert build_error("{{1, {{verts=3}}}}").kind == SchemaErrorKind.INVALID_STRUCTURE

    def test_first_violation_in_file_order(self):
        text = shapes_file(
            shape_entry(1),
            shape_entry(2, ports="{7,0.5}"),
            shape_entry(3, verts="{0,0},{1,0}", ports=""),
        )
        error = build_error(text)
        assert error.shape_id == 2
        assert error.positions == (1,)


# Written by older editor exports: no comma after the id or before launcher_radial
OLDER_EXPORT = (
    "{\n"
    "    {1  --Shape_1\n"
    "        {\n"
    "            {\n"
    "                verts={\n"
    "                    {0, 0},\n"
    "                    {10, 0},\n"
    "                    {0, 10},\n"
    "                },\n"
    "                ports={\n"
    "                    {0, 0.5},\n"
    "                    {1, 0.5, THRUSTER_IN},\n"
    "                }\n"
    "            }\n"
    "        }\n"
    "    },\n"
    "}\n"
)

OLDER_LAUNCHER_EXPORT = (
    "{\n"
    "  {7  --Launcher\n"
    "    {\n"
    "      {\n"
    "        verts={\n"
    "          {0, 0},\n"
    "          {10, 0},\n"
    "          {0, 10},\n"
    "        },\n"
    "        ports={\n"
    "          {0, 0.5},\n"
    "        }\n"
    "      }\n"
    "    }\n"
    "    launcher_radial=true\n"
    "  }\n"
    "}\n"
)


class TestOlderExports:
    """Tests for files written by older versions of the editor."""

    def test_missing_comma_after_id(self):
        collection, warnings = parse_and_build(OLDER_EXPORT)
        assert warnings == []
        shape = collection.find(1)
        assert shape.name == "Shape_1"
        variant = shape.get_scale(0)
        assert variant.vertices == (Vertex(0, 0), Vertex(10, 0), Vertex(0, 10))
        assert variant.ports == (Port(0, 0.5), Port(1, 0.5, PortType.THRUSTER_IN))

    def test_missing_comma_before_launcher_radial(self):
        collection, warnings = parse_and_build(OLDER_LAUNCHER_EXPORT)
        assert warnings == []
        shape = collection.find(7)
        assert shape.name == "Launcher"
        assert shape.launcher_radial is True

    def test_reexport_is_canonical(self):
        collection, _ = parse_and_build(OLDER_EXPORT)
        text = render(collection)
        assert text.startswith("{\n  {1,  --Shape_1\n")
        assert parse_and_build(text)[0] == collection


class TestNameRoundTrip:
    """Tests for shape names surviving render and rebuild."""

    def test_unusual_single_line_names(self):
        collection, _ = parse_and_build(CANONICAL)
        for name in ("Wing Mk\tII", "Ω Frame", "A--B {x=1}", "say \"hi\""):
            renamed = collection.replace(0, collection.shapes[0].renamed(name))
            rebuilt, _ = parse_and_build(render(renamed))
            assert rebuilt == renamed, name
            assert rebuilt.find(101).name == name

    def test_line_breaking_names_are_rejected(self):
        shape = parse_and_build(CANONICAL)[0].shapes[0]
        for name in ("A\u2028B", "A\x85B", "A\x0cB", "A\x0bB", "A\x1cB", "A\rB"):
            with pytest.raises(InvariantViolation) as info:
                shape.renamed(name)
            assert info.value.kind == SchemaErrorKind.INVALID_NAME, repr(name)

    def test_name_from_comment_stops_at_line_break(self):
        text = CANONICAL.replace("--Shape_Name", "--Shape\u2028Name")
        collection, _ = parse_and_build(text)
        assert collection.find(101).name == "Shape"
