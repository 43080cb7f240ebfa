# docs/conf.py  ── single source of truth
import os, sys
from importlib.metadata import version as pkg_version

# ── make the package importable from a source checkout ------------------------
sys.path.insert(0, os.path.abspath("../src"))

# ── project metadata ------------------------------------------------------------
project   = "ytvideos-node"
author    = "ytvideos-node contributors"
copyright = "2025, ytvideos-node contributors"

release = pkg_version("ytvideos-node")         # e.g. 0.1.0
version = ".".join(release.split(".")[:2])     # 0.1

# ── Sphinx behaviour ------------------------------------------------------------
extensions = [
    "sphinx.ext.autodoc",
    "sphinx.ext.napoleon",     # Google-style docstrings
    "sphinx.ext.viewcode",
    "sphinx.ext.autosummary",
    "myst_parser",             # README.md as the root document
]

templates_path   = ["_templates"]
exclude_patterns = ["_build", "Thumbs.db", ".DS_Store"]

# ── HTML output ----------------------------------------------------------
html_theme       = "sphinx_rtd_theme"
html_theme_options = {
    "collapse_navigation": False,
    "navigation_depth": 2,
}

autosummary_generate = True
autodoc_default_options = {
    "members": True,
    "show-inheritance": True,
}

root_doc = "README"
myst_heading_anchors = 2
