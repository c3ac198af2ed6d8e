"""Tests for the command-line interface."""

import os
from pathlib import Path

import pytest

from main import EXIT_FAILURE, EXIT_SUCCESS, main, parse_args

ACYCLIC_DOT = "digraph { A -> B; B -> C }\n"
CYCLIC_DOT = "digraph { A -> B; B -> A }\n"


@pytest.fixture(autouse=True)
def isolated_cwd(monkeypatch, tmp_path: Path):
    """Run each test in an empty directory with no DEPSORT_ variables."""
    monkeypatch.chdir(tmp_path)
    for key in list(os.environ.keys()):
        if key.startswith("DEPSORT_"):
            monkeypatch.delenv(key, raising=False)


def write_graph(tmp_path: Path, text: str, name: str = "deps.dot") -> str:
    """Write DOT text to a file and return its path."""
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return str(path)


class TestParseArgs:
    """Test command-line argument parsing."""

    def test_check_command(self):
        """Test parsing the check command."""
        args = parse_args(["check", "deps.dot"])

        assert args.command == "check"
        assert args.input_path == "deps.dot"
        assert args.log_level is None

    def test_debug_flag_sets_level(self):
        """Test that --debug selects DEBUG logging."""
        args = parse_args(["--debug", "sort", "deps.dot"])

        assert args.log_level == "DEBUG"

    def test_command_required(self):
        """Test that a subcommand is required."""
        with pytest.raises(SystemExit):
            parse_args([])


class TestCheckCommand:
    """Test the check command."""

    def test_no_cycle(self, tmp_path: Path, capsys):
        """Test reporting an acyclic graph."""
        exit_code = main(["check", write_graph(tmp_path, ACYCLIC_DOT)])

        captured = capsys.readouterr()
        assert exit_code == EXIT_SUCCESS
        assert captured.out == "The graph has no circular dependencies\n"

    def test_cycle_reported(self, tmp_path: Path, capsys):
        """Test reporting a cycle, which does not fail by default."""
        exit_code = main(["check", write_graph(tmp_path, CYCLIC_DOT)])

        captured = capsys.readouterr()
        assert exit_code == EXIT_SUCCESS
        assert captured.out == ""
        assert "Circular dependency detected between A and B" in captured.err

    def test_self_loop_reported(self, tmp_path: Path, capsys):
        """Test reporting a self-loop."""
        main(["check", write_graph(tmp_path, "digraph { A -> A }")])

        assert "Circular dependency detected between A and A" in capsys.readouterr().err

    def test_cycle_fails_when_configured(self, tmp_path: Path, capsys):
        """Test that check fails on a cycle when configured to."""
        config_path = tmp_path / "strict.yaml"
        config_path.write_text("output:\n  check_fails_on_cycle: true\n")

        exit_code = main(
            ["--config", str(config_path), "check", write_graph(tmp_path, CYCLIC_DOT)],
        )

        assert exit_code == EXIT_FAILURE
        assert "Circular dependency detected" in capsys.readouterr().err

    def test_cycle_path_shown(self, tmp_path: Path, capsys, monkeypatch):
        """Test that the full cycle is printed when enabled."""
        monkeypatch.setenv("DEPSORT_SHOW_CYCLE_PATH", "true")

        main(["check", write_graph(tmp_path, "digraph { A -> B; B -> C; C -> A }")])

        assert "Cycle: A -> B -> C -> A" in capsys.readouterr().err


class TestSortCommand:
    """Test the sort command."""

    def test_sort_acyclic(self, tmp_path: Path, capsys):
        """Test printing labels one per line, dependencies first."""
        exit_code = main(["sort", write_graph(tmp_path, ACYCLIC_DOT)])

        captured = capsys.readouterr()
        assert exit_code == EXIT_SUCCESS
        assert captured.out == "C\nB\nA\n"

    def test_sort_diamond(self, tmp_path: Path, capsys):
        """Test sorting a diamond."""
        dot = "digraph { A -> B; A -> C; B -> D; C -> D }"

        main(["sort", write_graph(tmp_path, dot)])

        assert capsys.readouterr().out == "D\nB\nC\nA\n"

    def test_sort_empty_graph(self, tmp_path: Path, capsys):
        """Test that an empty graph prints nothing and succeeds."""
        exit_code = main(["sort", write_graph(tmp_path, "digraph {}")])

        assert exit_code == EXIT_SUCCESS
        assert capsys.readouterr().out == ""

    def test_sort_refuses_cycle(self, tmp_path: Path, capsys):
        """Test that a cyclic graph is not sorted."""
        exit_code = main(["sort", write_graph(tmp_path, CYCLIC_DOT)])

        captured = capsys.readouterr()
        assert exit_code == EXIT_FAILURE
        assert captured.out == ""
        assert "ERROR: Circular dependency detected between A and B" in captured.err
        assert "Cannot sort a graph with cycles" in captured.err

    def test_sort_cycle_path_shown(self, tmp_path: Path, capsys):
        """Test that the cycle path is printed from a config file."""
        (tmp_path / "depsort.yaml").write_text("output:\n  show_cycle_path: true\n")

        main(["sort", write_graph(tmp_path, CYCLIC_DOT)])

        assert "Cycle: A -> B -> A" in capsys.readouterr().err

    def test_sort_is_deterministic(self, tmp_path: Path, capsys):
        """Test that two runs on the same file give identical output."""
        path = write_graph(tmp_path, "digraph { web -> api; api -> db; worker -> db }")

        main(["sort", path])
        first = capsys.readouterr().out
        main(["sort", path])
        second = capsys.readouterr().out

        assert first == second
        assert first == "db\napi\nworker\nweb\n"


class TestInputErrors:
    """Test failures reading and decoding input."""

    def test_missing_graph_file(self, tmp_path: Path, capsys):
        """Test that a missing input file fails."""
        exit_code = main(["sort", str(tmp_path / "missing.dot")])

        assert exit_code == EXIT_FAILURE
        assert "ERROR: Graph file not found" in capsys.readouterr().err

    def test_undirected_graph(self, tmp_path: Path, capsys):
        """Test that undirected graphs are rejected."""
        exit_code = main(["check", write_graph(tmp_path, "graph { a -- b }")])

        assert exit_code == EXIT_FAILURE
        assert "ERROR: Only directed graphs are supported" in capsys.readouterr().err

    def test_subgraph(self, tmp_path: Path, capsys):
        """Test that subgraphs are rejected."""
        dot = "digraph { subgraph cluster_x { a -> b } }"

        exit_code = main(["sort", write_graph(tmp_path, dot)])

        assert exit_code == EXIT_FAILURE
        assert "Subgraphs are not supported" in capsys.readouterr().err

    def test_missing_config_file(self, tmp_path: Path, capsys):
        """Test that an explicit missing configuration file fails."""
        exit_code = main(
            ["--config", str(tmp_path / "none.yaml"), "check", write_graph(tmp_path, ACYCLIC_DOT)],
        )

        assert exit_code == EXIT_FAILURE
        assert "Configuration file not found" in capsys.readouterr().err

    def test_non_utf8_graph_file(self, tmp_path: Path, capsys):
        """Test that a graph file with undecodable bytes fails cleanly."""
        path = tmp_path / "deps.dot"
        path.write_bytes(b"digraph { \xff -> b }")

        exit_code = main(["sort", str(path)])

        assert exit_code == EXIT_FAILURE
        assert "ERROR: Graph file is not valid UTF-8 text" in capsys.readouterr().err

    def test_directory_as_graph_file(self, tmp_path: Path, capsys):
        """Test that a directory given as the graph file fails cleanly."""
        exit_code = main(["check", str(tmp_path)])

        assert exit_code == EXIT_FAILURE
        assert "ERROR: Cannot read graph file" in capsys.readouterr().err

    @pytest.mark.parametrize(
        "dot",
        [
            "digraph { a -> {b c} }",
            "digraph { {a b} -> c }",
        ],
    )
    def test_subgraph_endpoint(self, tmp_path: Path, capsys, dot):
        """Test that a subgraph endpoint is reported with a short description."""
        exit_code = main(["sort", write_graph(tmp_path, dot)])

        err = capsys.readouterr().err
        assert exit_code == EXIT_FAILURE
        assert "ERROR: Edge #0 has a non-label endpoint: subgraph {" in err
        assert "object at" not in err
