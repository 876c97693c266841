from __future__ import annotations

import ast
from pathlib import Path


ROOT = Path(__file__).resolve().parents[1]


def _python_files(root: Path):
    for path in root.rglob("*.py"):
        yield path


def _imported_modules(path: Path):
    tree = ast.parse(path.read_text(encoding="utf-8", errors="ignore"))
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            for alias in node.names:
                yield alias.name
        elif isinstance(node, ast.ImportFrom):
            yield node.module or ""


def test_core_layer_does_not_import_infra_layer():
    violations: list[tuple[str, str]] = []
    for path in _python_files(ROOT / "schednet_core"):
        for name in _imported_modules(path):
            if name == "schednet_infra" or name.startswith("schednet_infra."):
                violations.append((str(path.relative_to(ROOT)), name))

    assert not violations, f"Core layer imports infra layer: {violations}"


def test_scheduling_passes_do_not_touch_persistence():
    violations: list[tuple[str, str]] = []
    for path in _python_files(ROOT / "schednet_core" / "services" / "scheduling"):
        for name in _imported_modules(path):
            if name.startswith("sqlalchemy"):
                violations.append((str(path.relative_to(ROOT)), name))

    assert not violations, f"Scheduling passes import SQLAlchemy: {violations}"


def test_mode_dispatch_has_a_single_write_back_point():
    hits = []
    for path in _python_files(ROOT / "schednet_core" / "services" / "scheduling"):
        text = path.read_text(encoding="utf-8", errors="ignore")
        if "SchedulingMode.AUTO" in text:
            hits.append(path.name)

    assert hits == ["auto_scheduler.py"]
