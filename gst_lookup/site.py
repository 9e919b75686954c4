# -*- coding: utf-8 -*-
# Copyright (c) 2024, Digital Consulting Service LLC (Mongolia)
# License: GNU General Public License v3

"""
Static site build configuration

Loads the layout declared in hooks.py and performs the passthrough copy
of static assets into the output directory.
"""

from __future__ import annotations

import shutil
from dataclasses import dataclass, field
from pathlib import Path

from gst_lookup import hooks
from gst_lookup.utils.logging import get_logger

logger = get_logger("gst_lookup.site")


@dataclass(frozen=True)
class SiteBuildConfig:
    """Directories, template formats and passthrough paths of the site."""

    input_dir: str = "src"
    output_dir: str = "_site"
    includes_dir: str = "_includes"
    layouts_dir: str = "_layouts"
    template_formats: tuple[str, ...] = ("html", "njk", "md")
    html_template_engine: str = "njk"
    passthrough_copy: tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def from_hooks(cls) -> "SiteBuildConfig":
        dirs = hooks.site_dirs
        return cls(
            input_dir=dirs["input"],
            output_dir=dirs["output"],
            includes_dir=dirs["includes"],
            layouts_dir=dirs["layouts"],
            template_formats=tuple(hooks.site_template_formats),
            html_template_engine=hooks.site_html_template_engine,
            passthrough_copy=tuple(hooks.site_passthrough_copy),
        )

    def to_dict(self) -> dict:
        """Same shape the template engine expects from its config"""
        return {
            "dir": {
                "input": self.input_dir,
                "output": self.output_dir,
                "includes": self.includes_dir,
                "layouts": self.layouts_dir,
            },
            "templateFormats": list(self.template_formats),
            "htmlTemplateEngine": self.html_template_engine,
        }

    def _destination(self, root: Path, source: str) -> Path:
        # src/images -> _site/images
        relative = Path(source)
        try:
            relative = relative.relative_to(self.input_dir)
        except ValueError:
            pass
        return root / self.output_dir / relative

    def copy_passthrough(self, project_root: str | Path) -> list[Path]:
        """
        Copy every passthrough path into the output directory.

        Returns:
            list: Destination paths that were written
        """
        root = Path(project_root)
        copied: list[Path] = []

        for source in self.passthrough_copy:
            src = root / source
            if not src.exists():
                logger.warning("Passthrough source missing", path=str(src))
                continue

            dest = self._destination(root, source)
            dest.parent.mkdir(parents=True, exist_ok=True)
            if src.is_dir():
                shutil.copytree(src, dest, dirs_exist_ok=True)
            else:
                shutil.copy2(src, dest)

            copied.append(dest)
            logger.debug("Passthrough copied", source=str(src), destination=str(dest))

        return copied
