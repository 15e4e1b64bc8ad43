"""Server-side rendering of public pages (Jinja2)."""
