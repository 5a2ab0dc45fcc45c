"""
Plugin dependency checks.

Manifests declare version requirements in npm style ("^1.2.0", "~1.4.1",
">=1.0.0 <2.0.0", "1.2.3" or "*"). They are translated to PEP 440
specifier sets and matched with packaging.
"""

import re
from typing import Dict, List, TYPE_CHECKING

from packaging.specifiers import InvalidSpecifier, SpecifierSet
from packaging.version import InvalidVersion, Version

if TYPE_CHECKING:
    from .manifest import PluginManifest

_PLAIN_VERSION = re.compile(r"^\d+\.\d+\.\d+$")


def _caret(version: Version) -> str:
    major, minor, patch = version.release[:3]
    if major > 0:
        upper = f"{major + 1}.0.0"
    elif minor > 0:
        upper = f"0.{minor + 1}.0"
    else:
        upper = f"0.0.{patch + 1}"
    return f">={version},<{upper}"


def _tilde(version: Version) -> str:
    major, minor, _ = version.release[:3]
    return f">={version},<{major}.{minor + 1}.0"


def version_specifier(requirement: str) -> SpecifierSet:
    """
    SpecifierSet for an npm-style version range.

    Raises:
        ValueError: the range cannot be parsed
    """
    requirement = (requirement or "").strip()
    if requirement in ("", "*", "x", "latest"):
        return SpecifierSet("")

    try:
        if requirement[0] in "^~":
            version = Version(requirement[1:])
            if len(version.release) != 3:
                raise ValueError(f"Invalid version range: {requirement}")
            translated = _caret(version) if requirement[0] == "^" else _tilde(version)
            return SpecifierSet(translated)
        if _PLAIN_VERSION.match(requirement):
            return SpecifierSet(f"=={requirement}")
        return SpecifierSet(",".join(requirement.split()))
    except (InvalidSpecifier, InvalidVersion) as exc:
        raise ValueError(f"Invalid version range: {requirement}") from exc


def satisfies(version: str, requirement: str) -> bool:
    try:
        return Version(version) in version_specifier(requirement)
    except (InvalidVersion, ValueError):
        return False


def unmet_dependencies(manifest: "PluginManifest", installed: Dict[str, str]) -> List[str]:
    """
    Problems installing a plugin for a tenant whose installed plugins are
    `installed` (slug -> version). An empty list means every requirement
    holds.

    Required dependencies must be installed at a matching version,
    optional and peer dependencies only need a matching version when
    present.
    """
    problems = []
    for dependency in manifest.dependencies:
        version = installed.get(dependency.name)
        if version is None:
            if not dependency.optional:
                problems.append(f"{dependency.name} {dependency.version} is not installed")
        elif not satisfies(version, dependency.version):
            problems.append(
                f"{dependency.name} {version} does not satisfy {dependency.version}"
            )
    for peer in manifest.peer_dependencies:
        version = installed.get(peer.name)
        if version is not None and not satisfies(version, peer.version):
            problems.append(f"{peer.name} {version} does not satisfy {peer.version}")
    return problems


def required_by(slug: str, installed: List["PluginManifest"]) -> List[str]:
    """Slugs of installed plugins with a required dependency on `slug`"""
    return [
        manifest.slug
        for manifest in installed
        if any(d.name == slug and not d.optional for d in manifest.dependencies)
    ]
