"""
Tests for dot, GraphML and HTML export
"""

import networkx as nx
import pytest

from lattice_app.errors import OutputWriteError
from lattice_app.export import (
    BEST_PATH_COLOR,
    EDGE_COLOR,
    SILENCE_COLOR,
    edge_style,
    export_graphml,
    export_pyvis,
    lattice_to_dot,
    lattice_to_nx,
    write_dot,
)
from lattice_app.schemas import LatticeEdge
from lattice_app.search import best_path

from conftest import make_lattice

U1_DOT = (
    "digraph g {\n"
    "\trankdir=\"LR\"\n"
    "    0 -> 1 [label = \"hello\"]\n"
    "    1 -> 2 [label = \"-silence-\"]\n"
    "}"
)


class TestDot:
    def test_exact_layout(self, u1):
        assert lattice_to_dot(u1) == U1_DOT

    def test_row_major_edges(self, branchy):
        lines = lattice_to_dot(branchy).splitlines()
        assert lines[0] == "digraph g {"
        assert lines[1] == '\trankdir="LR"'
        assert lines[-1] == "}"
        edges = [tuple(int(x) for x in ln.split("[")[0].split("->")) for ln in lines[2:-1]]
        assert edges == sorted(edges)
        assert len(edges) == branchy.num_edges

    def test_empty_lattice(self):
        lat = make_lattice([], 1)
        assert lattice_to_dot(lat) == 'digraph g {\n\trankdir="LR"\n}'

    def test_write_dot(self, tmp_path, u1):
        out = write_dot(u1, tmp_path / "U1.dot")
        with open(out, encoding="utf-8") as f:
            assert f.read() == U1_DOT

    def test_write_dot_failure(self, tmp_path, u1):
        with pytest.raises(OutputWriteError):
            write_dot(u1, tmp_path / "no" / "such" / "U1.dot")


class TestGraphML:
    def test_nx_copy_is_mutable_and_ordered(self, branchy):
        H = lattice_to_nx(branchy)
        H.add_edge(5, 0)
        assert H.nodes[0]["is_start"] is True
        assert H.nodes[5]["is_end"] is True
        assert [H.nodes[n]["topo_order"] for n in range(6)] == [0, 1, 2, 3, 4, 5]
        assert not branchy.has_edge(5, 0)

    def test_cyclic_lattice_has_no_order(self):
        lat = make_lattice([(0, 1, "a", 1, 1), (1, 0, "b", 1, 1)], 2)
        H = lattice_to_nx(lat)
        assert "topo_order" not in H.nodes[0]

    def test_round_trip_through_file(self, tmp_path, u1):
        out = export_graphml(u1, tmp_path / "U1.graphml")
        G = nx.read_graphml(out)
        assert G.number_of_nodes() == 3
        assert G.edges["0", "1"]["label"] == "hello"
        assert int(G.edges["0", "1"]["am_score"]) == 10
        assert float(G.nodes["1"]["time"]) == pytest.approx(0.5)


class TestPyvis:
    def test_html_written(self, tmp_path, branchy):
        pytest.importorskip("pyvis")
        path, _cost = best_path(branchy, 1.0)
        out = export_pyvis(branchy, tmp_path / "utt42.html", best_path=path)
        with open(out, encoding="utf-8") as f:
            html = f.read()
        assert "new_york" in html

    def test_edge_style_follows_silence_token(self):
        sil = LatticeEdge(label="<sil>", am_score=1, lm_score=0)
        word = LatticeEdge(label="-silence-", am_score=1, lm_score=0)
        assert edge_style(sil, on_path=False, silence="<sil>") == {
            "color": SILENCE_COLOR, "width": 1, "dashes": True,
        }
        # default token is not special once another one is configured
        assert edge_style(word, on_path=False, silence="<sil>")["color"] == EDGE_COLOR
        assert edge_style(sil, on_path=True, silence="<sil>")["color"] == BEST_PATH_COLOR
