"""Package workspace discovery.

Publish output is matched against the packages the workspace declares. A
repository is either a single root package or a monorepo whose members are
listed by the package manager's workspace config.
"""

from __future__ import annotations

import json
from pathlib import Path

import yaml

from relpr.core.result import Err, Ok, Result
from relpr.core.structured import StrDict, as_obj_list, as_str_dict, get_str, get_table
from relpr.services.release.errors import ReleaseError
from relpr.services.release.model import Package, PackageWorkspace, WorkspaceTool

MANIFEST = "package.json"
_UNVERSIONED = "0.0.0"


def _read_json(path: Path) -> Result[StrDict, ReleaseError]:
    try:
        obj: object = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        return Err(ReleaseError(kind="io_error", message=f"failed to read {path.name}: {e}", hint=str(path)))
    except json.JSONDecodeError as e:
        return Err(ReleaseError(kind="config_error", message=f"invalid JSON: {e}", hint=str(path)))

    data = as_str_dict(obj)
    if data is None:
        return Err(ReleaseError(kind="config_error", message="manifest root must be an object", hint=str(path)))
    return Ok(data)


def _read_package(pkg_dir: Path, *, default_name: str | None = None) -> Result[Package, ReleaseError]:
    manifest = _read_json(pkg_dir / MANIFEST)
    if isinstance(manifest, Err):
        return manifest

    name = get_str(manifest.value, "name") or default_name
    if name is None:
        return Err(
            ReleaseError(
                kind="config_error",
                message="package.json has no name",
                hint=str(pkg_dir / MANIFEST),
            )
        )
    return Ok(
        Package(
            name=name,
            version=get_str(manifest.value, "version") or _UNVERSIONED,
            dir=pkg_dir,
        )
    )


def _string_list(obj: object) -> list[str]:
    items = as_obj_list(obj) or []
    return [item for item in items if isinstance(item, str)]


def _pnpm_globs(root: Path) -> Result[list[str] | None, ReleaseError]:
    path = root / "pnpm-workspace.yaml"
    if not path.is_file():
        return Ok(None)
    try:
        data: object = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as e:
        return Err(ReleaseError(kind="io_error", message=f"failed to read {path.name}: {e}"))
    except yaml.YAMLError as e:
        return Err(ReleaseError(kind="config_error", message=f"invalid pnpm-workspace.yaml: {e}"))

    table = as_str_dict(data) or {}
    return Ok(_string_list(table.get("packages")))


def _detect_tool(root: Path, manifest: StrDict) -> Result[tuple[WorkspaceTool, list[str]], ReleaseError]:
    pnpm = _pnpm_globs(root)
    if isinstance(pnpm, Err):
        return pnpm
    if pnpm.value is not None:
        return Ok(("pnpm", pnpm.value))

    workspaces = manifest.get("workspaces")
    if workspaces is not None:
        # Yarn also allows {"packages": [...], "nohoist": [...]}.
        nested = as_str_dict(workspaces)
        globs = _string_list(nested.get("packages") if nested is not None else workspaces)
        tool: WorkspaceTool = "yarn" if (root / "yarn.lock").exists() else "npm"
        return Ok((tool, globs))

    bolt = get_table(manifest, "bolt")
    if bolt is not None and "workspaces" in bolt:
        return Ok(("bolt", _string_list(bolt.get("workspaces"))))

    lerna_path = root / "lerna.json"
    if lerna_path.is_file():
        lerna = _read_json(lerna_path)
        if isinstance(lerna, Err):
            return lerna
        return Ok(("lerna", _string_list(lerna.value.get("packages")) or ["packages/*"]))

    return Ok(("root", []))


def _expand_globs(root: Path, globs: list[str]) -> list[Path]:
    excluded: set[Path] = set()
    for pattern in globs:
        if pattern.startswith("!"):
            excluded.update(p.resolve() for p in root.glob(pattern[1:]))

    found: dict[Path, None] = {}
    for pattern in globs:
        if pattern.startswith("!"):
            continue
        for candidate in sorted(root.glob(pattern.rstrip("/"))):
            resolved = candidate.resolve()
            if resolved in excluded or "node_modules" in candidate.parts:
                continue
            if (candidate / MANIFEST).is_file():
                found.setdefault(candidate, None)
    return list(found)


def discover_packages(root: Path) -> Result[PackageWorkspace, ReleaseError]:
    """Read the workspace rooted at ``root`` (which holds package.json).

    Returns:
        Ok(PackageWorkspace); a plain repository yields tool "root" with the
        root package as its only package
    """
    manifest = _read_json(root / MANIFEST)
    if isinstance(manifest, Err):
        return manifest

    # Monorepo roots are often unnamed.
    root_pkg = _read_package(root, default_name=root.name)
    if isinstance(root_pkg, Err):
        return root_pkg

    detected = _detect_tool(root, manifest.value)
    if isinstance(detected, Err):
        return detected
    tool, globs = detected.value

    if tool == "root":
        return Ok(PackageWorkspace(tool="root", root=root_pkg.value, packages=(root_pkg.value,)))

    packages: list[Package] = []
    for pkg_dir in _expand_globs(root, globs):
        pkg = _read_package(pkg_dir)
        if isinstance(pkg, Err):
            return pkg
        packages.append(pkg.value)

    return Ok(PackageWorkspace(tool=tool, root=root_pkg.value, packages=tuple(packages)))
