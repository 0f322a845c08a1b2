import numpy as np
import pytest

from config import MergerConfig
from core.merger import ConvexMerger, merge_triangles
from core.polygon import Polygon, Triangle, total_area
from core.triangulator import triangulate

from conftest import SQUARE, L_SHAPE, COMB, regular_polygon, star_polygon


class TestMerge:

    def test_accepts_convex_result(self):
        current = Polygon([(0, 0), (4, 0), (4, 4)], keys=[0, 1, 2])
        tri = Triangle([(0, 0), (4, 4), (0, 4)], keys=[0, 2, 3])
        merged = ConvexMerger().merge(current, tri)
        assert merged is not None
        assert merged.n_vertices == 4

    def test_rejects_concave_result(self):
        current = Polygon([(0, 0), (4, 0), (4, 2), (2, 2)], keys=[0, 1, 2, 3])
        tri = Triangle([(0, 4), (0, 0), (2, 2)], keys=[5, 0, 3])
        assert ConvexMerger().merge(current, tri) is None

    def test_rejects_over_cap(self):
        current = Polygon([(0, 0), (4, 0), (4, 4)], keys=[0, 1, 2])
        tri = Triangle([(0, 0), (4, 4), (0, 4)], keys=[0, 2, 3])
        assert ConvexMerger(MergerConfig(max_vertices=3)).merge(current, tri) is None

    def test_rejects_unrelated_triangle(self):
        current = Polygon([(0, 0), (4, 0), (4, 4)])
        assert ConvexMerger().merge(current, Triangle([(9, 9), (10, 9), (9, 10)])) is None


class TestMergeAll:

    def test_empty(self):
        assert ConvexMerger().merge_all([]) == []

    def test_single_triangle_unchanged(self):
        tri = triangulate([(0, 0), (1, 0), (0, 1)])
        pieces = merge_triangles(tri)
        assert len(pieces) == 1
        assert pieces[0] == tri[0]

    def test_square_becomes_one_quad(self):
        pieces = merge_triangles(triangulate(SQUARE))
        assert len(pieces) == 1
        assert pieces[0].n_vertices == 4
        assert pieces[0].same_vertex_set(Polygon(SQUARE))
        np.testing.assert_array_equal(
            pieces[0].vertices, [(0, 4), (0, 0), (4, 0), (4, 4)]
        )

    def test_square_from_coordinate_keyed_triangles(self):
        triangles = [
            Triangle([(0, 4), (0, 0), (4, 0)]),
            Triangle([(4, 0), (4, 4), (0, 4)]),
        ]
        pieces = merge_triangles(triangles)
        assert len(pieces) == 1
        assert pieces[0].same_vertex_set(Polygon(SQUARE))

    def test_l_shape_two_quads(self):
        pieces = merge_triangles(triangulate(L_SHAPE))
        assert len(pieces) == 2
        assert total_area(pieces) == pytest.approx(12.0)
        np.testing.assert_array_equal(
            pieces[0].vertices, [(0, 0), (4, 0), (4, 2), (2, 2)]
        )
        np.testing.assert_array_equal(
            pieces[1].vertices, [(0, 4), (0, 0), (2, 2), (2, 4)]
        )

    @pytest.mark.parametrize("vertices", [SQUARE, L_SHAPE, COMB, star_polygon()])
    def test_pieces_are_convex_and_cover_area(self, vertices):
        triangles = triangulate(vertices)
        pieces = merge_triangles(triangles)
        assert 1 <= len(pieces) <= len(triangles)
        assert all(p.is_convex() for p in pieces)
        assert all(3 <= p.n_vertices <= 8 for p in pieces)
        assert total_area(pieces) == pytest.approx(total_area(triangles))

    def test_regular_20_gon_respects_cap(self):
        pieces = merge_triangles(triangulate(regular_polygon(20)))
        assert [p.n_vertices for p in pieces] == [8, 8, 8]

    def test_smaller_cap(self):
        pieces = merge_triangles(triangulate(regular_polygon(20)), max_vertices=4)
        assert len(pieces) == 9
        assert all(p.n_vertices == 4 for p in pieces)

    def test_clockwise_pieces_stay_clockwise(self):
        pieces = merge_triangles(triangulate(L_SHAPE[::-1]))
        assert all(p.orientation == -1 for p in pieces)
        assert all(p.is_convex() for p in pieces)

    def test_idempotent_on_merged_output(self):
        pieces = merge_triangles(triangulate(L_SHAPE))
        again = merge_triangles(pieces)
        assert again == pieces

    def test_input_triangles_untouched(self):
        triangles = triangulate(L_SHAPE)
        snapshot = [t.vertices.copy() for t in triangles]
        merge_triangles(triangles)
        for tri, before in zip(triangles, snapshot):
            np.testing.assert_array_equal(tri.vertices, before)
            assert tri.n_vertices == 3
