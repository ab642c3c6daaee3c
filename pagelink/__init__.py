"""Pagelink static site generator.

Pagelink builds a single "link in bio" landing page. It reads
``config.yml``, renders the selected theme's Jinja2 template into
``index.html`` and publishes the theme's stylesheets, scripts and icons
into ``assets/``, minifying the stylesheets and scripts on the way.

The main entry point is the CLI module; ``build.build_site`` runs the
same pipeline programmatically against any project directory.
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
