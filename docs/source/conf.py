import os
import sys

sys.path.insert(0, os.path.abspath("../../src"))

import nsqtransport  # noqa: E402

project = "nsqtransport"
author = "nsqtransport contributors"
release = nsqtransport.__version__
version = ".".join(release.split(".")[:2])

extensions = [
    "sphinx.ext.autodoc",
    "sphinx.ext.napoleon",
    "sphinx.ext.intersphinx",
    "myst_parser",
]

source_suffix = {".md": "markdown"}
root_doc = "index"
exclude_patterns = []

# index.md embeds reST autodoc directives
myst_enable_extensions = ["colon_fence"]

# Connection, Timeout and the errors document socket, select and errno
# behaviour, so link those straight to the standard library docs.
intersphinx_mapping = {
    "python": ("https://docs.python.org/3", None),
}

autodoc_default_options = {
    "members": True,
    "show-inheritance": True,
}
autodoc_member_order = "bysource"
autodoc_typehints = "description"
napoleon_google_docstring = True
napoleon_numpy_docstring = False

html_theme = "furo"
html_title = f"nsqtransport {release}"
html_theme_options = {
    "navigation_with_keys": True,
    "top_of_page_buttons": [],
}
