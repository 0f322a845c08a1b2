import numpy as np
import pytest

from config import TriangulatorConfig
from core.errors import DegeneratePolygon, InvalidInput, TriangulationStuck
from core.polygon import total_area
from core.triangulator import Triangulator, triangulate

from conftest import SQUARE, L_SHAPE, COMB, regular_polygon, star_polygon


class TestTriangulate:

    @pytest.mark.parametrize("vertices, area", [
        (SQUARE, 16.0),
        (L_SHAPE, 12.0),
        (COMB, 12.0),
        (star_polygon(), None),
        (regular_polygon(20), None),
    ])
    def test_count_area_and_winding(self, vertices, area):
        triangles = triangulate(vertices)

        expected_area = abs(0.5 * sum(
            x0 * y1 - x1 * y0
            for (x0, y0), (x1, y1) in zip(vertices, vertices[1:] + vertices[:1])
        ))
        if area is not None:
            assert expected_area == pytest.approx(area)

        assert len(triangles) == len(vertices) - 2
        assert total_area(triangles) == pytest.approx(expected_area)
        assert all(t.orientation == 1 for t in triangles)

    def test_triangle_passes_through(self):
        tri = [(0, 0), (1, 0), (0, 1)]
        triangles = triangulate(tri)
        assert len(triangles) == 1
        np.testing.assert_array_equal(triangles[0].vertices, tri)
        assert triangles[0].keys == (0, 1, 2)

    def test_square(self):
        first, second = triangulate(SQUARE)
        assert first.keys == (3, 0, 1)
        assert second.keys == (1, 2, 3)
        np.testing.assert_array_equal(first.vertices, [(0, 4), (0, 0), (4, 0)])
        np.testing.assert_array_equal(second.vertices, [(4, 0), (4, 4), (0, 4)])

    def test_l_shape_emission_order(self):
        triangles = triangulate(L_SHAPE)
        assert [t.keys for t in triangles] == [
            (0, 1, 2),
            (0, 2, 3),
            (5, 0, 3),
            (3, 4, 5),
        ]

    def test_vertex_on_diagonal_blocks_ear(self):
        # (2,2) lies on the segment (4,0)-(0,4); clipping (0,0) first would
        # produce a triangle that leaves the polygon
        triangles = triangulate(L_SHAPE)
        assert triangles[0].keys != (5, 0, 1)
        assert total_area(triangles) == pytest.approx(12.0)

    def test_clockwise_input(self):
        cw = L_SHAPE[::-1]
        triangles = triangulate(cw)
        assert len(triangles) == 4
        assert all(t.orientation == -1 for t in triangles)
        assert total_area(triangles) == pytest.approx(12.0)

    def test_accepts_numpy_input_without_modifying_it(self):
        source = np.array(L_SHAPE, dtype=np.float64)
        before = source.copy()
        triangulate(source)
        np.testing.assert_array_equal(source, before)

    @pytest.mark.parametrize("vertices, area", [
        (SQUARE, 16.0),
        (L_SHAPE, 12.0),
        ([(0, 0), (1, 0), (1, 1), (0, 1)], 1.0),
    ])
    def test_far_from_origin(self, vertices, area):
        offset = 1e8
        shifted = [(x + offset, y + offset) for x, y in vertices]

        triangles = triangulate(shifted)

        assert len(triangles) == len(vertices) - 2
        assert total_area(triangles) == pytest.approx(area)
        assert all(t.orientation == 1 for t in triangles)
        assert [t.keys for t in triangles] == [t.keys for t in triangulate(vertices)]

    def test_collinear_vertex_is_kept(self):
        verts = [(0, 0), (2, 0), (4, 0), (4, 4), (0, 4)]
        triangles = triangulate(verts)
        assert len(triangles) == 3
        assert total_area(triangles) == pytest.approx(16.0)
        used = {k for t in triangles for k in t.keys}
        assert used == {0, 1, 2, 3, 4}


class TestInvalidInput:

    def test_too_few_vertices(self):
        with pytest.raises(InvalidInput):
            triangulate([(0, 0), (1, 0)])

    def test_empty(self):
        with pytest.raises(InvalidInput):
            triangulate([])

    def test_bad_shape(self):
        with pytest.raises(InvalidInput):
            triangulate([(0, 0, 0), (1, 0, 0), (0, 1, 0)])

    def test_non_finite(self):
        with pytest.raises(InvalidInput) as excinfo:
            triangulate([(0, 0), (1, float('nan')), (0, 1)])
        assert excinfo.value.indices == (1,)

    def test_duplicate_adjacent(self):
        with pytest.raises(InvalidInput) as excinfo:
            triangulate([(0, 0), (4, 0), (4, 0), (4, 4)])
        assert excinfo.value.indices == (1, 2)

    def test_duplicate_across_closing_edge(self):
        with pytest.raises(InvalidInput) as excinfo:
            triangulate([(0, 0), (4, 0), (4, 4), (0, 0)])
        assert excinfo.value.indices == (3, 0)

    def test_self_intersecting(self):
        with pytest.raises(InvalidInput) as excinfo:
            triangulate([(0, 0), (4, 4), (4, 0), (0, 2)])
        assert excinfo.value.indices == (0, 1, 2, 3)

    def test_invalid_input_is_value_error(self):
        with pytest.raises(ValueError):
            triangulate([(0, 0), (1, 0)])


class TestDegenerate:

    def test_collinear_points(self):
        with pytest.raises(DegeneratePolygon):
            triangulate([(0, 0), (1, 1), (2, 2)])

    def test_zero_area_bow_tie(self):
        with pytest.raises(DegeneratePolygon):
            triangulate([(0, 0), (4, 4), (4, 0), (0, 4)])

    def test_tolerance_is_configurable(self):
        sliver = [(0, 0), (1000, 0), (1000, 1e-7)]
        with pytest.raises(DegeneratePolygon):
            triangulate(sliver, TriangulatorConfig(area_tolerance=1e-9))
        assert len(triangulate(sliver, TriangulatorConfig(area_tolerance=0.0))) == 1


class TestStuck:

    def test_wrong_orientation_finds_no_ear(self):
        verts = np.array(SQUARE, dtype=np.float64)
        with pytest.raises(TriangulationStuck) as excinfo:
            Triangulator().clip_ears(verts, orientation=-1)
        assert excinfo.value.indices == (0, 1, 2, 3)

    def test_final_triangle_must_turn_with_polygon(self):
        verts = np.array([(0, 0), (1, 0), (0, 1)], dtype=np.float64)
        with pytest.raises(TriangulationStuck):
            Triangulator().clip_ears(verts, orientation=-1)
