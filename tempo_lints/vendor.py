"""Copy rule trees into a consumer project for offline or pinned use."""

from __future__ import annotations

import shutil
from pathlib import Path

from . import console
from .languages import VENDOR_DIR, languages_for, rule_dirs_relative
from .sgconfig import CONFIG_FILENAME, generate_config_content


def vendor_rules(language: str, dest: Path, rules_root: Path) -> Path:
    """Copy shared and language rules under ``dest/.ast-grep`` and write ``dest/sgconfig.yml``.

    Returns the path of the written config.
    """
    vendor_root = dest / VENDOR_DIR
    vendor_root.mkdir(parents=True, exist_ok=True)
    console.info(f"Vendoring Tempo lints to {vendor_root}...")

    langs = languages_for(language)
    sources = [Path("shared") / lang for lang in langs] + [Path(lang) for lang in langs]
    for relative in sources:
        src = rules_root / relative
        if not src.is_dir():
            console.warn(f"no rules found at {src}; skipping")
            continue
        shutil.copytree(src, vendor_root / "rules" / relative, dirs_exist_ok=True)
        console.info(f"Copied rules/{relative.as_posix()}/")

    config_path = dest / CONFIG_FILENAME
    config_path.write_text(generate_config_content(rule_dirs_relative(language)), encoding="utf-8")
    console.info(f"Created {CONFIG_FILENAME}")
    console.info("")
    console.info(f"Done! Run: ast-grep scan --config {CONFIG_FILENAME}")
    return config_path
