"""
bzldeps Manifest Schema v1

This module defines Pydantic models for the per-package Python configuration
and for the resolution manifest consumed by the CLI.

Design Principles:
- Pure validation: Receives dicts, validates structure, returns typed objects
- No file I/O: File reading lives in ``bzldeps_schema.loader``
- Strict: Unknown keys are rejected so typos in directives surface early

Usage:
    from bzldeps_schema import Manifest

    manifest = Manifest.model_validate({"rules": [...]})
    config = manifest.config_for("app/sub")
"""

import posixpath
import re
from typing import Dict, List, Optional, Union

from bzldeps_common import SUPPORTED_MANIFEST_VERSIONS, PythonDefaults, ValidationError
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from typing_extensions import Self

_LABEL_RE = re.compile(r"^(@[A-Za-z0-9_.~+-]*)?//[^:]*(:[^:\s]+)?$|^:?[^:/\s@][^:\s]*$")
_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)*$")


def _normalize_package(value: str) -> str:
    value = value.strip().strip("/")
    if not value:
        return ""
    normalized = posixpath.normpath(value)
    if normalized == ".":
        return ""
    if normalized == ".." or normalized.startswith("../"):
        raise ValidationError(f"package path must stay inside the repository: '{value}'")
    return normalized


# =============================================================================
# PYTHON CONFIGURATION
# =============================================================================


class PythonConfig(BaseModel):
    """
    Python resolution settings of one package (inherited by sub-packages).

    Attributes:
        project_root: Package path under which first-party code lives; used to
            break ties between several rules providing the same import
        pip_repository: Repository holding third-party distribution targets
        modules_mapping: Importable module name -> distribution name
        modules_mapping_file: Optional ``gazelle_python.yaml`` style file merged
            into ``modules_mapping`` by the loader
        validate_import_statements: Report imports nothing provides
    """

    project_root: str = ""
    pip_repository: str = PythonDefaults.PIP_REPOSITORY
    modules_mapping: Dict[str, str] = {}
    modules_mapping_file: Optional[str] = None
    validate_import_statements: bool = True

    model_config = ConfigDict(extra="forbid")

    @field_validator("project_root")
    @classmethod
    def validate_project_root(cls, v: str) -> str:
        """Normalize project root to a clean, relative package path"""
        return _normalize_package(v)

    @field_validator("pip_repository")
    @classmethod
    def validate_pip_repository(cls, v: str) -> str:
        """Validate the pip repository is a bare repository name"""
        v = v.strip().lstrip("@")
        if not v:
            raise ValidationError("pip_repository cannot be empty")
        if not re.match(r"^[A-Za-z0-9_.~+-]+$", v):
            raise ValidationError(f"Invalid pip_repository name: '{v}'")
        return v

    @field_validator("modules_mapping")
    @classmethod
    def validate_modules_mapping(cls, v: Dict[str, str]) -> Dict[str, str]:
        """Validate module names are dotted identifiers and distributions are non-empty"""
        for module, distribution in v.items():
            if not _IDENTIFIER_RE.match(module):
                raise ValidationError(f"Invalid module name in modules_mapping: '{module}'")
            if not distribution or not distribution.strip():
                raise ValidationError(f"Module '{module}' maps to an empty distribution name")
        return v


# =============================================================================
# DIRECTIVES AND RULES
# =============================================================================


class ResolveDirective(BaseModel):
    """
    Manual mapping from an import to a label, scoped to a package.

    Written as ``import`` in YAML; ``import_`` in Python.
    """

    package: str = ""
    import_: str = Field(alias="import")
    label: str
    lang: str = PythonDefaults.LANGUAGE_NAME

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    @field_validator("package")
    @classmethod
    def validate_package(cls, v: str) -> str:
        return _normalize_package(v)

    @field_validator("import_")
    @classmethod
    def validate_import(cls, v: str) -> str:
        if not _IDENTIFIER_RE.match(v):
            raise ValidationError(f"Invalid import name in resolve directive: '{v}'")
        return v

    @field_validator("label")
    @classmethod
    def validate_label(cls, v: str) -> str:
        v = v.strip()
        if not _LABEL_RE.match(v):
            raise ValidationError(f"Invalid label in resolve directive: '{v}'")
        return v


class ModuleRecord(BaseModel):
    """One recorded import statement."""

    name: str
    filepath: str
    line_number: int = 0

    model_config = ConfigDict(extra="forbid")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not _IDENTIFIER_RE.match(v):
            raise ValidationError(f"Invalid module name: '{v}'")
        return v

    @field_validator("line_number")
    @classmethod
    def validate_line_number(cls, v: int) -> int:
        if v < 0:
            raise ValidationError(f"line_number must be >= 0, got {v}")
        return v


class RuleSpec(BaseModel):
    """
    A build rule as described in the manifest.

    ``srcs`` is either a list of files or the source text of an expression
    such as ``glob(["**/*.py"], exclude=["*_test.py"])``. ``deps`` lists
    labels that are always included in the resolved ``deps`` attribute.
    """

    package: str = ""
    name: str
    kind: str = "py_library"
    srcs: Optional[Union[List[str], str]] = None
    imports: List[str] = []
    library_uuid: Optional[str] = None
    deps: List[str] = []
    modules: List[ModuleRecord] = []

    model_config = ConfigDict(extra="forbid")

    @field_validator("package")
    @classmethod
    def validate_package(cls, v: str) -> str:
        return _normalize_package(v)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v or ":" in v or v.strip() != v:
            raise ValidationError(f"Invalid rule name: '{v}'")
        return v

    @field_validator("deps")
    @classmethod
    def validate_deps(cls, v: List[str]) -> List[str]:
        for dep in v:
            if not _LABEL_RE.match(dep.strip()):
                raise ValidationError(f"Invalid label in deps: '{dep}'")
        return [dep.strip() for dep in v]

    @property
    def address(self) -> str:
        return f"//{self.package}:{self.name}"


# =============================================================================
# MANIFEST
# =============================================================================


class Manifest(BaseModel):
    """
    Root of a resolution manifest.

    Attributes:
        version: Manifest format version
        repo_root: Repository root, relative to the manifest file
        configs: Per-package PythonConfig; ``""`` is the root default
        resolve: Override directives
        rules: Rules to index and resolve
    """

    version: str = "1"
    repo_root: Optional[str] = None
    configs: Dict[str, PythonConfig] = {}
    resolve: List[ResolveDirective] = []
    rules: List[RuleSpec] = []

    model_config = ConfigDict(extra="forbid")

    @field_validator("version")
    @classmethod
    def validate_version(cls, v: str) -> str:
        if v not in SUPPORTED_MANIFEST_VERSIONS:
            raise ValidationError(
                f"Unsupported manifest version: '{v}'. "
                f"Supported versions: {', '.join(SUPPORTED_MANIFEST_VERSIONS)}"
            )
        return v

    @field_validator("configs")
    @classmethod
    def validate_configs(cls, v: Dict[str, PythonConfig]) -> Dict[str, PythonConfig]:
        return {_normalize_package(pkg): config for pkg, config in v.items()}

    @model_validator(mode="after")
    def validate_unique_rules(self) -> Self:
        """Validate no two rules share the same address"""
        seen = set()
        for rule in self.rules:
            if rule.address in seen:
                raise ValidationError(f"Duplicate rule: '{rule.address}'")
            seen.add(rule.address)
        return self

    def config_for(self, pkg: str) -> PythonConfig:
        """Return the configuration of ``pkg`` or its nearest configured ancestor."""
        current = _normalize_package(pkg)
        while True:
            if current in self.configs:
                return self.configs[current]
            if not current:
                return PythonConfig()
            current = posixpath.dirname(current)
