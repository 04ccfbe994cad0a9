"""
Import-boundary enforcement for the layered packages.

1. Kernel isolation     -- sales_kernel/** imports nothing above it.
2. Engine purity        -- sales_engines/** may not import modules or config.
3. Engine no-impure     -- sales_engines/** may not read the wall clock or
                           the environment.
4. Module independence  -- sales_modules/** does not import sales_config;
                           settings reach the service through its ports.
5. Config centralisation -- only sales_config/__init__.py imports the loader.

All scanning is done via AST; these tests are read-only.
"""

import ast
import glob
from pathlib import Path

_ROOT = Path(__file__).resolve().parents[2]


def _python_files(package: str) -> list[str]:
    """Return all .py files under *package*, sorted for deterministic order."""
    return sorted(glob.glob(f"{_ROOT / package}/**/*.py", recursive=True))


def _relative(filepath: str) -> str:
    return Path(filepath).relative_to(_ROOT).as_posix()


def _extract_imports(filepath: str) -> list[tuple[int, str]]:
    """Return (line_number, module_string) for every import in *filepath*."""
    tree = ast.parse(Path(filepath).read_text(), filename=filepath)

    results: list[tuple[int, str]] = []
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            for alias in node.names:
                results.append((node.lineno, alias.name))
        elif isinstance(node, ast.ImportFrom):
            if node.module:
                results.append((node.lineno, node.module))
    return results


def _matches_any(module: str, prefixes: tuple[str, ...]) -> bool:
    """True if *module* equals or is a child of any prefix."""
    for prefix in prefixes:
        if module == prefix or module.startswith(f"{prefix}."):
            return True
    return False


def _extract_attribute_calls(filepath: str) -> list[tuple[int, str]]:
    """Return (line_number, 'receiver.attr') for two-level attribute references."""
    tree = ast.parse(Path(filepath).read_text(), filename=filepath)

    results: list[tuple[int, str]] = []
    for node in ast.walk(tree):
        if isinstance(node, ast.Attribute) and isinstance(node.value, ast.Name):
            results.append((node.lineno, f"{node.value.id}.{node.attr}"))
    return results


def _violations(package: str, forbidden: tuple[str, ...]) -> list[str]:
    violations: list[str] = []
    for filepath in _python_files(package):
        for lineno, module in _extract_imports(filepath):
            if _matches_any(module, forbidden):
                violations.append(f"  {_relative(filepath)}:{lineno} imports '{module}'")
    return violations


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------


class TestPackagesPresent:
    """Guard against the scans silently passing on an empty glob."""

    def test_every_layer_has_sources(self):
        for package in ("sales_kernel", "sales_engines", "sales_modules", "sales_config"):
            assert _python_files(package), f"no sources found for {package}"


class TestKernelIsolation:

    FORBIDDEN_PREFIXES = ("sales_engines", "sales_modules", "sales_config", "yaml")

    def test_kernel_has_no_upward_imports(self):
        violations = _violations("sales_kernel", self.FORBIDDEN_PREFIXES)
        assert not violations, (
            "Kernel isolation violation: sales_kernel/** must not import "
            "higher layers:\n" + "\n".join(violations)
        )


class TestEnginePurity:
    """sales_engines/** works on plain values and protocols only."""

    FORBIDDEN_PREFIXES = ("sales_modules", "sales_config", "yaml")

    def test_engine_files_have_no_forbidden_imports(self):
        violations = _violations("sales_engines", self.FORBIDDEN_PREFIXES)
        assert not violations, (
            "Engine purity violation: sales_engines/** must not import "
            "modules or config:\n" + "\n".join(violations)
        )


class TestEngineNoImpureFunctions:
    """time.monotonic is allowed; it only feeds trace durations."""

    FORBIDDEN_CALLS = frozenset({
        "datetime.now",
        "datetime.utcnow",
        "date.today",
        "time.time",
        "os.environ",
        "os.getenv",
    })

    def test_no_wall_clock_or_environment(self):
        violations: list[str] = []
        for filepath in _python_files("sales_engines"):
            for lineno, call in _extract_attribute_calls(filepath):
                if call in self.FORBIDDEN_CALLS:
                    violations.append(f"  {_relative(filepath)}:{lineno} uses {call}")

        assert not violations, "\n".join(violations)


class TestModuleIndependence:

    def test_modules_do_not_import_config(self):
        violations = _violations("sales_modules", ("sales_config", "yaml"))
        assert not violations, (
            "sales_modules/** must receive settings through its ports:\n"
            + "\n".join(violations)
        )


class TestConfigCentralisation:

    def test_only_entrypoint_imports_loader(self):
        entrypoint = "sales_config/__init__.py"
        violations = [
            v
            for v in _violations("sales_config", ("sales_config.loader",))
            if not v.strip().startswith(entrypoint)
        ]
        for package in ("sales_kernel", "sales_engines", "sales_modules"):
            violations.extend(_violations(package, ("sales_config.loader",)))

        assert not violations, "\n".join(violations)
