"""
Manifest Loading

Reads YAML manifests and ``gazelle_python.yaml`` style module mapping files
and hands the parsed dicts to the schema for validation.
"""

from pathlib import Path
from typing import Dict, Optional, Tuple, Union

import yaml
from bzldeps_common import ValidationError
from pydantic import ValidationError as PydanticValidationError

from .manifest_v1 import Manifest, PythonConfig


def _read_yaml(path: Path) -> dict:
    if not path.is_file():
        raise ValidationError(f"File not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ValidationError(f"YAML parsing error in {path}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError(f"Invalid format in {path}: expected a mapping at the top level")
    return data


def load_modules_mapping(path: Union[str, Path]) -> Tuple[Dict[str, str], Optional[str]]:
    """
    Load a module -> distribution mapping file.

    The rules_python layout is expected::

        manifest:
          modules_mapping:
            yaml: PyYAML
          pip_repository:
            name: pip

    Returns:
        Tuple of (modules_mapping, pip repository name or None)

    Raises:
        ValidationError: If the file is missing or malformed
    """
    path = Path(path)
    data = _read_yaml(path)
    manifest = data.get("manifest") or {}
    if not isinstance(manifest, dict):
        raise ValidationError(f"Invalid format in {path}: 'manifest' must be a mapping")

    mapping = manifest.get("modules_mapping") or {}
    if not isinstance(mapping, dict):
        raise ValidationError(f"Invalid format in {path}: 'modules_mapping' must be a mapping")

    pip_repository = None
    pip_section = manifest.get("pip_repository")
    if isinstance(pip_section, dict):
        pip_repository = pip_section.get("name")

    return {str(k): str(v) for k, v in mapping.items()}, pip_repository


def _merge_mapping_file(config: PythonConfig, base_dir: Path) -> PythonConfig:
    mapping, pip_repository = load_modules_mapping(base_dir / config.modules_mapping_file)
    update: dict = {"modules_mapping": {**mapping, **config.modules_mapping}}
    if pip_repository and "pip_repository" not in config.model_fields_set:
        update["pip_repository"] = pip_repository
    return PythonConfig.model_validate({**config.model_dump(exclude_unset=True), **update})


def load_manifest(path: Union[str, Path]) -> Manifest:
    """
    Load and validate a resolution manifest.

    ``modules_mapping_file`` entries are resolved relative to the manifest
    and merged into their config; explicit ``modules_mapping`` entries win.

    Raises:
        ValidationError: If the file is missing, not YAML, or fails validation
    """
    path = Path(path)
    data = _read_yaml(path)
    try:
        manifest = Manifest.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError(f"Invalid manifest {path}: {e}") from e

    base_dir = path.parent
    for pkg, config in list(manifest.configs.items()):
        if config.modules_mapping_file:
            manifest.configs[pkg] = _merge_mapping_file(config, base_dir)
    return manifest
