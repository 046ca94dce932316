# Configuration file for the Sphinx documentation builder.

import os
import sys
from datetime import date

sys.path.insert(0, os.path.abspath('../..'))

import tidytext  # noqa: E402

# -- Project information

project = 'tidytext'
copyright = f'{date.today().year}, David Brown'
author = tidytext.__author__
release = tidytext.__version__

# -- General configuration ---------------------------------------------------

# Docstrings mix Google-style sections with :param: fields
extensions = [
    'sphinx.ext.autodoc',
    'sphinx.ext.napoleon',
    'sphinx_rtd_theme'
]

napoleon_google_docstring = True
napoleon_numpy_docstring = False

templates_path = ['_templates']
exclude_patterns = []

add_function_parentheses = False
add_module_names = True

# type hints
autodoc_typehints = 'description'
autodoc_typehints_format = 'short'
autodoc_member_order = 'bysource'

pygments_style = 'sphinx'

# -- Options for HTML output

html_theme = 'sphinx_rtd_theme'
