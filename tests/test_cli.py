from pathlib import Path

import pytest
from docx import Document as DocxReader

from MockupText import cli


def test_cli_renders_html(tmp_path: Path):
    source = tmp_path / "reply.md"
    source.write_text("# Answer\n\nUse `pip` and $x^2$.\n", encoding="utf-8")
    cli.main([str(source), "--preset", "ai", "--variant", "compact"])
    html = (tmp_path / "reply.html").read_text(encoding="utf-8")
    assert 'class="document variant-compact"' in html
    assert '<code>pip</code>' in html
    assert 'data-latex="x^2"' in html


def test_cli_renders_docx_to_directory(tmp_path: Path):
    source = tmp_path / "notes.md"
    source.write_text("- one\n- two\n", encoding="utf-8")
    out_dir = tmp_path / "out"
    out_dir.mkdir()
    config = tmp_path / "render.yaml"
    config.write_text("markers: chat\n", encoding="utf-8")
    cli.main([str(source), "-f", "docx", "-o", str(out_dir), "--config", str(config)])
    reader = DocxReader(out_dir / "notes.docx")
    assert [p.text for p in reader.paragraphs] == ["• one", "• two"]


def test_cli_missing_input(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        cli.main([str(tmp_path / "missing.md")])
