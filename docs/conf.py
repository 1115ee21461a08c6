"""Sphinx configuration for critrace documentation.
"""

import sys
from pathlib import Path

# Add the src directory to the Python path
project_root = Path(__file__).parent.parent
src_path = project_root / "src"
sys.path.insert(0, str(src_path))

# Project information
project = "critrace"
copyright = "2025, critrace developers"
author = "critrace developers"
release = "0.1.0"
version = "0.1.0"

# General configuration
extensions = [
    "sphinx.ext.autodoc",
    "sphinx.ext.autosummary",
    "sphinx.ext.doctest",
    "sphinx.ext.intersphinx",
    "sphinx.ext.napoleon",
    "sphinx.ext.viewcode",
    "sphinx.ext.mathjax",
    "sphinx.ext.todo",
    "myst_parser",
]

templates_path = ["_templates"]

exclude_patterns = ["_build", "Thumbs.db", ".DS_Store"]

pygments_style = "sphinx"

html_theme = "sphinx_rtd_theme"

html_theme_options = {
    "navigation_depth": 4,
    "collapse_navigation": False,
    "sticky_navigation": True,
    "titles_only": False,
}

html_static_path = ["_static"]

htmlhelp_basename = "critracedoc"

# -- Options for autodoc extension -----------------------------------------
autodoc_default_options = {
    "members": True,
    "member-order": "bysource",
    "special-members": "__init__",
    "undoc-members": True,
    "exclude-members": "__weakref__",
    "show-inheritance": True,
    "imported-members": False,
}

# jax and numba are heavy to import on documentation builders
autodoc_mock_imports = ["jax", "jaxlib", "numba"]

autodoc_typehints = "description"

# -- Options for autosummary extension -------------------------------------
autosummary_generate = True
autosummary_imported_members = True

# -- Options for napoleon extension ----------------------------------------
napoleon_google_docstring = False
napoleon_numpy_docstring = True
napoleon_include_private_with_doc = False
napoleon_include_special_with_doc = True
napoleon_use_param = True
napoleon_use_rtype = True
napoleon_attr_annotations = True

# -- Options for intersphinx extension -------------------------------------
intersphinx_mapping = {
    "python": ("https://docs.python.org/3/", None),
    "numpy": ("https://numpy.org/doc/stable/", None),
    "scipy": ("https://docs.scipy.org/doc/scipy/", None),
    "matplotlib": ("https://matplotlib.org/stable/", None),
    "pandas": ("https://pandas.pydata.org/docs/", None),
    "jax": ("https://jax.readthedocs.io/en/latest/", None),
}

# -- Options for todo extension --------------------------------------------
todo_include_todos = True

# -- Options for doctest extension ----------------------------------------
doctest_global_setup = """
import numpy as np
from critrace import *
"""

# -- Options for MyST parser ----------------------------------------------
myst_enable_extensions = [
    "colon_fence",
    "deflist",
    "dollarmath",
]

# -- Options for HTML output ----------------------------------------------
html_title = "critrace Documentation"
html_short_title = "critrace"
