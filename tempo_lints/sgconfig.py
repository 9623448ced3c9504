"""ast-grep project configuration (``sgconfig.yml``) rendering."""

from __future__ import annotations

import shutil
import tempfile
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from pathlib import Path

import yaml

from .config import ConfigurationError

CONFIG_FILENAME = "sgconfig.yml"
TEMP_PREFIX = "tempo-lints-"


def generate_config_content(rule_dirs: Iterable[str | Path]) -> str:
    """Render a ``ruleDirs`` config. An empty list renders as ``ruleDirs:\\n\\n``.

    Entries are written as plain YAML scalars, so a directory that would not
    read back verbatim (e.g. one containing ``": "`` or ``" #"``) raises
    ConfigurationError instead of producing a config the engine misreads.
    """
    dirs = [str(d) for d in rule_dirs]
    content = "ruleDirs:\n" + "\n".join(f"  - {d}" for d in dirs) + "\n"
    try:
        unchanged = read_config_content(content) == dirs
    except ConfigurationError:
        unchanged = False
    if not unchanged:
        raise ConfigurationError(f"rule directory cannot be written to {CONFIG_FILENAME} unquoted: {dirs}")
    return content


def read_config_content(content: str) -> list[str]:
    """Read the ``ruleDirs`` list back out of a rendered config."""
    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"invalid sgconfig YAML: {e}") from e
    if not isinstance(data, dict) or "ruleDirs" not in data:
        raise ConfigurationError("sgconfig: expected mapping with ruleDirs")
    dirs = data["ruleDirs"]
    if dirs is None:
        return []
    if not isinstance(dirs, list):
        raise ConfigurationError("sgconfig.ruleDirs: expected list")
    return [str(d) for d in dirs]


@contextmanager
def temp_config(rule_dirs: Iterable[str | Path]) -> Iterator[Path]:
    """Write a throwaway config and yield its path; the directory is removed on exit."""
    tmp_dir = Path(tempfile.mkdtemp(prefix=TEMP_PREFIX))
    config_path = tmp_dir / CONFIG_FILENAME
    try:
        config_path.write_text(generate_config_content(rule_dirs), encoding="utf-8")
        yield config_path
    finally:
        shutil.rmtree(tmp_dir, ignore_errors=True)
