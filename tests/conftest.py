from pathlib import Path

import pytest


@pytest.fixture
def template_source(tmp_path: Path) -> Path:
    source = tmp_path / "template"
    (source / ".cursor" / "rules").mkdir(parents=True)
    (source / ".cursor" / "skills").mkdir(parents=True)
    (source / ".cursor" / "rules" / "general.mdc").write_text("---\nalwaysApply: true\n---\n# Rules\n", encoding="utf-8")
    (source / ".cursor" / "skills" / "api.md").write_text("# API skill\n", encoding="utf-8")
    (source / ".cursorignore").write_text("node_modules/\n", encoding="utf-8")
    (source / "README.md").write_text("# Template\n", encoding="utf-8")
    (source / "AGENTS.md").write_text("# Agents\n", encoding="utf-8")
    (source / "deploy.sh").write_text("#!/usr/bin/env bash\n", encoding="utf-8")
    (source / ".gitattributes").write_text("* text=auto\n", encoding="utf-8")
    (source / "docs").mkdir()
    (source / "docs" / "notes.md").write_text("# Notes\n", encoding="utf-8")
    return source


@pytest.fixture
def fake_git(monkeypatch):
    calls = []

    def fake_init(path: Path) -> None:
        calls.append(path)
        (path / ".git").mkdir()

    monkeypatch.setattr("cursor_deploy.deploy.init_repository", fake_init)
    return calls
