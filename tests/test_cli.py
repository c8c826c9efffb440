"""tests for CLI argument parsing and commands."""

from pathlib import Path

import pytest

from texsync import main


def test_cli_requires_command() -> None:
    """CLI requires a subcommand."""
    with pytest.raises(SystemExit) as exc_info:
        main([])
    assert exc_info.value.code == 2  # argparse exits with 2 for missing args


def test_cli_requires_source_argument() -> None:
    """subcommands require a source."""
    with pytest.raises(SystemExit) as exc_info:
        main(["to-html"])
    assert exc_info.value.code == 2


def test_cli_missing_source_is_fatal() -> None:
    """missing input file returns fatal exit code."""
    assert main(["to-html", "nonexistent.tex"]) == 2
    assert main(["to-latex", "nonexistent.html"]) == 2


def test_to_html_writes_output_file(tmp_path: Path) -> None:
    """to-html converts LaTeX and writes the fragment."""
    source = tmp_path / "doc.tex"
    source.write_text("\\section{Demo}\nInline $x$", encoding="utf-8")
    output = tmp_path / "out" / "doc.html"

    assert main(["to-html", str(source), "--no-math", "-o", str(output)]) == 0

    html = output.read_text(encoding="utf-8")
    assert "<h1>Demo</h1>" in html
    assert 'class="math-placeholder"' in html


def test_to_html_uses_mathml_by_default(tmp_path: Path) -> None:
    """math previews are MathML unless --no-math is given."""
    source = tmp_path / "doc.tex"
    source.write_text("$x$", encoding="utf-8")
    output = tmp_path / "doc.html"

    assert main(["to-html", str(source), "-o", str(output)]) == 0

    assert "<math" in output.read_text(encoding="utf-8")


def test_to_latex_writes_output_file(tmp_path: Path) -> None:
    """to-latex converts HTML back to LaTeX."""
    source = tmp_path / "doc.html"
    source.write_text("<h1>Demo</h1>", encoding="utf-8")
    output = tmp_path / "doc.tex"

    assert main(["to-latex", str(source), "-o", str(output)]) == 0

    assert output.read_text(encoding="utf-8") == "\\section{Demo}\n"


def test_to_html_prints_to_stdout(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """without -o the result goes to stdout."""
    source = tmp_path / "doc.tex"
    source.write_text("\\textbf{hi}", encoding="utf-8")

    assert main(["to-html", str(source)]) == 0

    assert "<b>hi</b>" in capsys.readouterr().out


def test_tree_command(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """tree prints the parsed document tree."""
    source = tmp_path / "doc.tex"
    source.write_text("\\section{Demo}", encoding="utf-8")

    assert main(["tree", str(source), "--no-math"]) == 0

    out = capsys.readouterr().out
    assert "heading 1" in out
    assert "'Demo'" in out


def test_output_file_is_reported(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """writing to a file reports the path on stderr."""
    source = tmp_path / "doc.html"
    source.write_text("<b>x</b>", encoding="utf-8")
    output = tmp_path / "doc.tex"

    assert main(["to-latex", str(source), "-o", str(output)]) == 0

    assert "Wrote" in capsys.readouterr().err


def test_quiet_suppresses_info(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """--quiet hides informational messages but still writes the result."""
    source = tmp_path / "doc.html"
    source.write_text("<b>x</b>", encoding="utf-8")
    output = tmp_path / "doc.tex"

    assert main(["-q", "to-latex", str(source), "-o", str(output)]) == 0

    assert "Wrote" not in capsys.readouterr().err
    assert output.read_text(encoding="utf-8") == "\\textbf{x}\n"


def test_quiet_still_reports_errors(capsys: pytest.CaptureFixture[str]) -> None:
    """--quiet keeps fatal errors visible."""
    assert main(["--quiet", "to-html", "nonexistent.tex"]) == 2
    assert "ERROR" in capsys.readouterr().err
