# app.py
"""
WSGI entrypoint for the light schedule widget service.

The app factory and routes live in light_widget.web; this module only wires the
production collaborators (JSON data file, timer wake-ups, background fetch worker).
"""

from __future__ import annotations

import os

from light_widget.web import create_production_app

# WSGI entrypoint for gunicorn (Docker CMD uses: app:app)
app = create_production_app()

if __name__ == "__main__":
    # Dev server (not for production).
    app.run(host="0.0.0.0", port=int(os.getenv("PORT", "8000")), debug=True)
