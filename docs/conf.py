# Configuration file for the Sphinx documentation builder.
#
# VanTwin: liquid-surface tank views and timed heater control for a van panel.
# Build with: sphinx-build -b html docs docs/_build/html

import os
import sys

# Allow Sphinx to import the vantwin package
sys.path.insert(0, os.path.abspath(".."))

from vantwin import __version__  # noqa: E402

# -- Project information -----------------------------------------------------
project = "VanTwin"
copyright = "2025, VanTwin"
author = "VanTwin"
release = __version__
version = ".".join(__version__.split(".")[:2])

# -- General configuration ---------------------------------------------------
extensions = [
    "sphinx.ext.autodoc",
    "sphinx.ext.napoleon",
    "sphinx.ext.viewcode",
    "sphinx.ext.intersphinx",
]

root_doc = "index"
exclude_patterns = ["_build", "Thumbs.db", ".DS_Store"]

# -- Options for HTML output -------------------------------------------------
html_theme = "alabaster"
html_title = f"VanTwin {release}"

# -- Extension configuration -------------------------------------------------
autodoc_default_options = {
    "members": True,
    "member-order": "bysource",
    "show-inheritance": True,
}
# Dataclass and simulator docs live on the class; __init__ carries the Args.
autoclass_content = "both"
autodoc_typehints = "description"
# Plotting helpers import matplotlib lazily; the plot extra is not needed to build.
autodoc_mock_imports = ["matplotlib"]

intersphinx_mapping = {
    "python": ("https://docs.python.org/3", None),
    "numpy": ("https://numpy.org/doc/stable/", None),
}

napoleon_google_docstring = True
napoleon_numpy_docstring = False
