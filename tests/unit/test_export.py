"""Unit tests for the export module."""

from meshroute.export import (
    node_to_dict,
    node_usage,
    result_to_dict,
    solutions_to_id_paths,
    solutions_to_index_paths,
    solutions_to_point_paths,
)
from meshroute.models import ObjectiveSolution, SolutionStatus


def solutions_for(graph):
    path = [graph.get_node(n) for n in "BCD"]
    return [
        ObjectiveSolution("objective0", path, SolutionStatus.SOLVED),
        ObjectiveSolution("objective1", [], SolutionStatus.NO_PATH),
        ObjectiveSolution("objective2", [graph.get_node("C")], SolutionStatus.SOLVED),
    ]


class TestPathConversion:
    """Tests for path conversion helpers."""

    def test_index_paths(self, line_graph):
        assert solutions_to_index_paths(line_graph, solutions_for(line_graph)) == [
            [1, 2, 3],
            [],
            [2],
        ]

    def test_id_paths(self, line_graph):
        assert solutions_to_id_paths(solutions_for(line_graph)) == [
            ["B", "C", "D"],
            [],
            ["C"],
        ]

    def test_point_paths(self, line_graph):
        assert solutions_to_point_paths(solutions_for(line_graph))[0] == [
            (10, 0),
            (20, 0),
            (30, 0),
        ]

    def test_node_usage(self, line_graph):
        usage = node_usage(solutions_for(line_graph))
        assert usage["C"] == ["objective0", "objective2"]
        assert usage["B"] == ["objective0"]
        assert "A" not in usage


class TestResultToDict:
    """Tests for the plain-dict snapshot."""

    def test_node_to_dict(self, line_graph):
        data = node_to_dict(line_graph.get_node("A"))
        assert data["id"] == "A"
        assert data["capacity"] == 5
        assert data["containsObstacle"] is False

    def test_snapshot(self, line_graph):
        solutions = solutions_for(line_graph)
        data = result_to_dict(line_graph, solutions, attempted=[solutions[0].path])
        assert len(data["nodes"]) == 5
        assert data["edges"][0] == {"id": "edge0", "from": "A", "to": "B"}
        assert data["solutions"][1] == {
            "objectiveId": "objective1",
            "status": "no_path",
            "path": [],
        }
        assert data["attemptedPaths"] == [["B", "C", "D"]]
