"""
Import-boundary enforcement.

1. Dependency direction -- kernel <- config <- engines <- services; no
                           package imports a layer above it.
2. Engine purity        -- mirath_engines/** may not read the wall clock,
                           the environment or mint random ids; only the
                           tracer may time a call.
3. Config centralisation -- only mirath_config/ itself imports the loader
                           and validator sub-modules.

All scanning is done via AST -- these tests are read-only.
"""

import ast
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _python_files(package: str) -> list[Path]:
    """Return all .py files under *package*, sorted for deterministic order."""
    return sorted((ROOT / package).rglob("*.py"))


def _parse(filepath: Path) -> ast.AST:
    return ast.parse(filepath.read_text(encoding="utf-8"), filename=str(filepath))


def _extract_imports(filepath: Path) -> list[tuple[int, str]]:
    """Return (line_number, module_string) for every import in *filepath*."""
    results: list[tuple[int, str]] = []
    for node in ast.walk(_parse(filepath)):
        if isinstance(node, ast.Import):
            for alias in node.names:
                results.append((node.lineno, alias.name))
        elif isinstance(node, ast.ImportFrom) and node.module:
            results.append((node.lineno, node.module))
    return results


def _extract_attribute_calls(filepath: Path) -> list[tuple[int, str]]:
    """Return (line_number, 'receiver.attr') for two-level attribute references."""
    results: list[tuple[int, str]] = []
    for node in ast.walk(_parse(filepath)):
        if isinstance(node, ast.Attribute) and isinstance(node.value, ast.Name):
            results.append((node.lineno, f"{node.value.id}.{node.attr}"))
    return results


def _matches_any(module: str, prefixes: tuple[str, ...]) -> bool:
    return any(module == p or module.startswith(f"{p}.") for p in prefixes)


def _violations(package: str, forbidden: tuple[str, ...]) -> list[str]:
    found = []
    for filepath in _python_files(package):
        for lineno, module in _extract_imports(filepath):
            if _matches_any(module, forbidden):
                found.append(f"  {filepath.relative_to(ROOT)}:{lineno} imports '{module}'")
    return found


# ---------------------------------------------------------------------------
# 1. Dependency direction
# ---------------------------------------------------------------------------


class TestDependencyDirection:
    def test_kernel_imports_no_higher_layer(self):
        violations = _violations("mirath_kernel", ("mirath_config", "mirath_engines", "mirath_services"))
        assert not violations, "mirath_kernel must stay at the bottom:\n" + "\n".join(violations)

    def test_config_imports_only_kernel(self):
        violations = _violations("mirath_config", ("mirath_engines", "mirath_services"))
        assert not violations, "mirath_config may only import mirath_kernel:\n" + "\n".join(violations)

    def test_engines_do_not_import_services(self):
        violations = _violations("mirath_engines", ("mirath_services",))
        assert not violations, "mirath_engines must not import mirath_services:\n" + "\n".join(violations)


# ---------------------------------------------------------------------------
# 2. Engine purity
# ---------------------------------------------------------------------------


class TestEnginePurity:
    FORBIDDEN_IMPORTS = ("random", "uuid", "os", "sqlite3", "requests")
    FORBIDDEN_ATTRIBUTES = frozenset(
        {
            "datetime.now",
            "datetime.utcnow",
            "date.today",
            "time.time",
            "time.perf_counter",
            "os.environ",
            "os.getenv",
        }
    )
    TIMING_ALLOWED = {"tracer.py"}

    def test_no_impure_imports(self):
        violations = _violations("mirath_engines", self.FORBIDDEN_IMPORTS)
        assert not violations, "engines must not reach for I/O or randomness:\n" + "\n".join(violations)

    def test_no_clock_or_environment_reads(self):
        violations = []
        for filepath in _python_files("mirath_engines"):
            for lineno, attr in _extract_attribute_calls(filepath):
                if attr in self.FORBIDDEN_ATTRIBUTES:
                    violations.append(f"  {filepath.relative_to(ROOT)}:{lineno} uses {attr}")
                elif attr == "time.monotonic" and filepath.name not in self.TIMING_ALLOWED:
                    violations.append(f"  {filepath.relative_to(ROOT)}:{lineno} times itself")
        assert not violations, "engines must be pure:\n" + "\n".join(violations)


# ---------------------------------------------------------------------------
# 3. Config centralisation
# ---------------------------------------------------------------------------


class TestConfigCentralisation:
    INTERNAL = ("mirath_config.loader", "mirath_config.validator")

    def test_internal_config_modules_stay_private(self):
        violations = []
        for package in ("mirath_kernel", "mirath_engines", "mirath_services", "scripts"):
            violations.extend(_violations(package, self.INTERNAL))
        assert not violations, "use mirath_config.get_rule_book instead:\n" + "\n".join(violations)
