"""Static project analysis: tech stack, services and SOP progress estimate."""

from __future__ import annotations

import json
import logging
import os
import tomllib
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from .errors import NotAFileError
from .sandbox import ValidatedPath
from .tools.walk import is_ignored_dir, walk

__all__ = [
    "SOP_PHASES",
    "PackageJsonInfo",
    "CargoTomlInfo",
    "SopProgress",
    "ProjectAnalysis",
    "analyze_project",
]

logger = logging.getLogger(__name__)

SOP_PHASES: tuple[str, ...] = (
    "Idea Intake",
    "Quick Validation",
    "MVP Scope Lock",
    "Revenue Model Lock",
    "Design Brief",
    "Project Setup",
    "Infrastructure",
    "Development",
    "Testing & QA",
    "Pre-Ship Checklist",
    "Launch Day",
    "Post-Launch Monitoring",
    "Marketing Activation",
)

# (marker files, label)
_TECH_MARKERS: tuple[tuple[tuple[str, ...], str], ...] = (
    (("package.json",), "Node.js"),
    (("Cargo.toml",), "Rust"),
    (("requirements.txt", "pyproject.toml"), "Python"),
    (("go.mod",), "Go"),
)

_FRAMEWORK_MARKERS: tuple[tuple[tuple[str, ...], str], ...] = (
    (("next.config.js", "next.config.ts", "next.config.mjs"), "Next.js"),
    (("src-tauri",), "Tauri"),
    (("tailwind.config.js", "tailwind.config.ts", "postcss.config.mjs"), "Tailwind CSS"),
    (("drizzle.config.ts",), "Drizzle ORM"),
    (("prisma",), "Prisma"),
)

# (substring of package.json, service)
_PACKAGE_SERVICES: tuple[tuple[tuple[str, ...], str], ...] = (
    (("@clerk",), "Clerk (Auth)"),
    (("stripe",), "Stripe (Payments)"),
    (("@sentry",), "Sentry (Error Tracking)"),
    (("@upstash",), "Upstash"),
    (("@neondatabase", "neon"), "Neon (PostgreSQL)"),
    (("@vercel",), "Vercel"),
)

_ENV_FILES = (".env", ".env.example", ".env.local")
_TEST_DIRS = ("tests", "__tests__", "test")
_TEST_SUFFIXES = (".test.ts", ".test.tsx", ".spec.ts", "_test.rs")
_CI_MARKERS = (".github/workflows", "vercel.json", ".gitlab-ci.yml")


@dataclass
class PackageJsonInfo:
    name: str | None
    dependencies: list[str] = field(default_factory=list)
    dev_dependencies: list[str] = field(default_factory=list)
    scripts: list[str] = field(default_factory=list)


@dataclass
class CargoTomlInfo:
    name: str | None
    dependencies: list[str] = field(default_factory=list)


@dataclass
class SopProgress:
    estimated_phase: int = 0
    phase_name: str = "Unknown"
    evidence: list[str] = field(default_factory=list)


@dataclass
class ProjectAnalysis:
    """Everything analyze_project() learns about a project directory."""

    project_path: str
    tech_stack: list[str] = field(default_factory=list)
    frameworks: list[str] = field(default_factory=list)
    has_git: bool = False
    has_tests: bool = False
    has_ci: bool = False
    has_env_example: bool = False
    file_count: int = 0
    directory_structure: list[str] = field(default_factory=list)
    detected_services: list[str] = field(default_factory=list)
    package_json: PackageJsonInfo | None = None
    cargo_toml: CargoTomlInfo | None = None
    recommendations: list[str] = field(default_factory=list)
    sop_progress: SopProgress = field(default_factory=SopProgress)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _read_text(path: Path) -> str | None:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return None


def _detect(root: Path, markers: tuple[tuple[tuple[str, ...], str], ...]) -> list[str]:
    return [
        label
        for names, label in markers
        if any((root / name).exists() for name in names)
    ]


def detect_services(root: Path) -> list[str]:
    """Services referenced from package.json and the .env files."""
    services: list[str] = []

    package = _read_text(root / "package.json")
    if package is not None:
        for needles, service in _PACKAGE_SERVICES:
            if any(needle in package for needle in needles):
                services.append(service)

    for env_name in _ENV_FILES:
        content = _read_text(root / env_name)
        if content is None:
            continue
        if "CLERK" in content and "Clerk (Auth)" not in services:
            services.append("Clerk (Auth)")
        if "STRIPE" in content and "Stripe (Payments)" not in services:
            services.append("Stripe (Payments)")
        if "DATABASE_URL" in content and not any(
            "PostgreSQL" in s for s in services
        ):
            services.append("PostgreSQL")
        if "ANTHROPIC" in content and "Anthropic (AI)" not in services:
            services.append("Anthropic (AI)")
        if "OPENAI" in content and "OpenAI" not in services:
            services.append("OpenAI")

    return services


def _has_tests(root: Path) -> bool:
    if any((root / name).exists() for name in _TEST_DIRS):
        return True
    return any(
        entry.is_file and entry.name.endswith(_TEST_SUFFIXES)
        for entry in walk(root, 3)
    )


def _count_files(root: Path) -> int:
    count = 0
    for _dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = [d for d in dirnames if not is_ignored_dir(d)]
        count += len(filenames)
    return count


def _directory_structure(root: Path) -> list[str]:
    try:
        entries = sorted(root.iterdir(), key=lambda p: p.name)
    except OSError:
        return []
    structure = []
    for entry in entries:
        if entry.name.startswith(".git") or entry.name == "node_modules":
            continue
        structure.append(f"{entry.name}/" if entry.is_dir() else entry.name)
    return structure


def _parse_package_json(root: Path) -> PackageJsonInfo | None:
    content = _read_text(root / "package.json")
    if content is None:
        return None
    try:
        data = json.loads(content)
    except ValueError:
        logger.debug("Unparseable package.json in %s", root)
        return None
    if not isinstance(data, dict):
        return None

    def keys(section: str) -> list[str]:
        value = data.get(section)
        return list(value) if isinstance(value, dict) else []

    name = data.get("name")
    return PackageJsonInfo(
        name=name if isinstance(name, str) else None,
        dependencies=keys("dependencies"),
        dev_dependencies=keys("devDependencies"),
        scripts=keys("scripts"),
    )


def _parse_cargo_toml(root: Path) -> CargoTomlInfo | None:
    content = _read_text(root / "Cargo.toml")
    if content is None:
        return None
    try:
        data = tomllib.loads(content)
    except tomllib.TOMLDecodeError:
        logger.debug("Unparseable Cargo.toml in %s", root)
        return CargoTomlInfo(name=None)

    package = data.get("package")
    name = package.get("name") if isinstance(package, dict) else None
    dependencies = data.get("dependencies")
    return CargoTomlInfo(
        name=name if isinstance(name, str) else None,
        dependencies=list(dependencies) if isinstance(dependencies, dict) else [],
    )


def estimate_sop_phase(analysis: ProjectAnalysis) -> SopProgress:
    """Place the project in the SOP pipeline from what is on disk.

    Each later signal overrides the earlier phase; evidence accumulates.
    """
    phase = 0
    evidence: list[str] = []

    if analysis.tech_stack:
        phase = 5
        evidence.append("Project scaffolded with tech stack")
    if analysis.detected_services:
        phase = 6
        evidence.append(
            f"Services configured: {', '.join(analysis.detected_services)}"
        )
    if analysis.file_count > 20:
        phase = 7
        evidence.append(f"{analysis.file_count} files in project")
    if analysis.has_tests:
        phase = 8
        evidence.append("Test files detected")
    if analysis.has_ci and analysis.has_env_example:
        phase = 9
        evidence.append("CI/CD and env documentation present")

    return SopProgress(
        estimated_phase=phase, phase_name=SOP_PHASES[phase], evidence=evidence
    )


def generate_recommendations(analysis: ProjectAnalysis) -> list[str]:
    recs: list[str] = []
    services = analysis.detected_services

    if not analysis.has_env_example:
        recs.append(
            "Add .env.example file to document required environment variables"
        )
    if not analysis.has_tests:
        recs.append("Add tests to ensure code quality before shipping")
    if not analysis.has_ci:
        recs.append(
            "Set up CI/CD pipeline (GitHub Actions, Vercel) for automated deployments"
        )
    if not any("Auth" in s for s in services):
        recs.append("Consider adding authentication (Clerk recommended)")
    if not any("Payments" in s for s in services):
        recs.append("Set up payment processing (Stripe) for monetization")
    if not any("Error" in s for s in services):
        recs.append("Add error tracking (Sentry) for production monitoring")
    return recs


def analyze_project(path: ValidatedPath) -> ProjectAnalysis:
    """Analyze a project directory.

    Raises:
        NotAFileError: path is not a directory
    """
    if not path.is_dir():
        raise NotAFileError(f"Path is not a directory: {path}")

    root = path.path
    logger.info("Analyzing project %s", root)
    tech_stack = _detect(root, _TECH_MARKERS)
    frameworks = _detect(root, _FRAMEWORK_MARKERS)

    analysis = ProjectAnalysis(
        project_path=str(path),
        tech_stack=tech_stack,
        frameworks=frameworks,
        has_git=(root / ".git").exists(),
        has_tests=_has_tests(root),
        has_ci=any((root / marker).exists() for marker in _CI_MARKERS),
        has_env_example=(root / ".env.example").exists(),
        file_count=_count_files(root),
        directory_structure=_directory_structure(root),
        detected_services=detect_services(root),
        package_json=_parse_package_json(root),
        cargo_toml=_parse_cargo_toml(root),
    )
    analysis.sop_progress = estimate_sop_phase(analysis)
    analysis.recommendations = generate_recommendations(analysis)
    return analysis
