# light_widget/web.py
"""
Flask app factory for the light schedule widget service.

Routes:
  HTML:
    - GET  /widget/<instance_id>
    - POST /widget/<instance_id>/refresh      (refresh button tap target)

  JSON:
    - GET    /api/widget/<instance_id>
    - POST   /api/widget/<instance_id>/refresh
    - POST   /api/instances                   {"instance_id": "...", "group": "GPV1.1"}
    - DELETE /api/instances/<instance_id>
    - GET    /api/groups
    - GET    /api/scheduler

Query parameters (HTML):
  - theme=dark|light|transparent

Notes:
  - Widget state lives in the store shared with the fetch pipeline; the loading
    flag is per group, so every instance of a group shows the same spinner.
  - The midnight scheduler is armed at startup and whenever an instance is added.
"""

from __future__ import annotations

from concurrent.futures import Executor, ThreadPoolExecutor
from datetime import datetime
from typing import Any, Callable, Dict, Optional

from flask import Flask, abort, jsonify, redirect, render_template, request

from .config import AppConfig
from .feed_client import FeedClient
from .handlers.widget_handler import WidgetHandler, snapshot_to_dict
from .log import get_logger
from .models import GROUP_INDEX, GROUPS, HalfState
from .schedule_codec import HALF_STATE_COLORS
from .services import FeedRefresher, MidnightScheduler, RefreshController
from .store import JsonFileStore, MemoryStore
from .surface import UnknownInstance, WidgetSurface
from .waker import TimerWaker

L = get_logger(__name__)


def create_app(
    cfg: Optional[AppConfig] = None,
    store: Optional[MemoryStore] = None,
    waker: Any = None,
    clock: Optional[Callable[[], datetime]] = None,
    executor: Optional[Executor] = None,
) -> Flask:
    """
    App factory.

    Builds the store, surface, handler and services once per process. Every
    collaborator can be overridden (tests pass a MemoryStore, a fake waker, a fixed
    clock and no executor so fetches run inline).
    """
    cfg = cfg or AppConfig()
    store = store if store is not None else JsonFileStore(cfg.store_path)
    waker = waker if waker is not None else TimerWaker(allow_exact=cfg.exact_wake)
    surface = WidgetSurface()

    handler = WidgetHandler(store=store, surface=surface, tz_name=cfg.tz, clock=clock)

    client = FeedClient(cfg.feed_url, timeout=cfg.feed_timeout_seconds) if cfg.feed_url else None
    fetcher = FeedRefresher(
        handler=handler,
        client=client,
        executor=executor,
    )
    controller = RefreshController(handler=handler, fetcher=fetcher)
    scheduler = MidnightScheduler(
        handler=handler,
        waker=waker,
        hour=cfg.midnight_hour,
        minute=cfg.midnight_minute,
    )

    for instance_id, group in cfg.instances.items():
        if group not in GROUP_INDEX:
            L.warning(f"Ignoring widget instance {instance_id}: unknown group {group!r}")
            continue
        surface.add_instance(instance_id, group)
    scheduler.activate()

    app = Flask(__name__)
    app.extensions["light_widget"] = {
        "handler": handler,
        "surface": surface,
        "controller": controller,
        "scheduler": scheduler,
        "fetcher": fetcher,
    }

    # -------------------------
    # Shared helpers
    # -------------------------

    def parse_theme() -> str:
        """
        Parse theme query param with a safe default.
        Supports: dark, light, transparent
        """
        theme = (request.args.get("theme") or "dark").strip().lower()
        if theme not in ("dark", "light", "transparent"):
            theme = "dark"
        return theme

    def group_or_404(instance_id: str) -> str:
        """Return the instance's group or abort with 404."""
        try:
            return surface.group_of(instance_id)
        except UnknownInstance:
            abort(404, description=f"unknown widget instance {instance_id}")

    def current_snapshot(instance_id: str):
        """
        Run a render pass and return the latest committed snapshot.

        If the pass fails, the previously committed snapshot is served.
        """
        handler.render(instance_id)
        snap = surface.snapshot(instance_id)
        if snap is None:
            abort(503, description="widget data is unavailable")
        return snap

    @app.errorhandler(400)
    @app.errorhandler(404)
    @app.errorhandler(503)
    def json_error(err):
        """Return JSON errors for API routes, plain text elsewhere."""
        if request.path.startswith("/api/"):
            return jsonify({"error": err.description}), err.code
        return err.description, err.code

    # -------------------------
    # HTML routes
    # -------------------------

    @app.get("/widget/<instance_id>")
    def widget(instance_id: str):
        """Render the widget for one on-screen instance."""
        group_or_404(instance_id)
        snap = current_snapshot(instance_id)
        colors = {state.value: color for state, color in HALF_STATE_COLORS.items()}
        return render_template(
            "widget.html",
            theme=parse_theme(),
            instance_id=instance_id,
            snapshot=snap,
            colors=colors,
            fallback_color=HALF_STATE_COLORS[HalfState.UNKNOWN],
        )

    @app.post("/widget/<instance_id>/refresh")
    def widget_refresh(instance_id: str):
        """Refresh button tap: show the spinner and start a fetch."""
        group = group_or_404(instance_id)
        controller.request_refresh(group, instance_id)
        return redirect(f"/widget/{instance_id}", code=303)

    # -------------------------
    # JSON routes
    # -------------------------

    @app.get("/api/widget/<instance_id>")
    def api_widget(instance_id: str):
        """Current snapshot of one instance."""
        group_or_404(instance_id)
        out: Dict[str, Any] = {"instanceId": instance_id}
        out.update(snapshot_to_dict(current_snapshot(instance_id)))
        return jsonify(out)

    @app.post("/api/widget/<instance_id>/refresh")
    def api_widget_refresh(instance_id: str):
        """Refresh tap for API clients; returns the snapshot committed right after the tap."""
        group = group_or_404(instance_id)
        controller.request_refresh(group, instance_id)
        out: Dict[str, Any] = {"instanceId": instance_id}
        out.update(snapshot_to_dict(current_snapshot(instance_id)))
        return jsonify(out), 202

    @app.post("/api/instances")
    def api_add_instance():
        """Register an on-screen instance and activate it."""
        body = request.get_json(silent=True)
        if not isinstance(body, dict):
            abort(400, description="expected a JSON object")
        instance_id = str(body.get("instance_id") or "").strip()
        group = str(body.get("group") or "").strip()
        if not instance_id:
            abort(400, description="instance_id is required")
        if group not in GROUP_INDEX:
            abort(400, description=f"unknown group {group!r}")

        surface.add_instance(instance_id, group)
        scheduler.activate([instance_id])

        out: Dict[str, Any] = {"instanceId": instance_id}
        out.update(snapshot_to_dict(current_snapshot(instance_id)))
        return jsonify(out), 201

    @app.delete("/api/instances/<instance_id>")
    def api_remove_instance(instance_id: str):
        """Unregister an instance."""
        group_or_404(instance_id)
        surface.remove_instance(instance_id)
        return "", 204

    @app.get("/api/groups")
    def api_groups():
        """Known groups with their storage index."""
        return jsonify({"groups": [{"group": g, "index": GROUP_INDEX[g]} for g in GROUPS]})

    @app.get("/api/scheduler")
    def api_scheduler():
        """Midnight scheduler state."""
        return jsonify(
            {
                "state": scheduler.state.value,
                "nextFire": scheduler.next_fire.isoformat() if scheduler.next_fire else None,
                "instances": surface.instances(),
            }
        )

    # -------------------------
    # Health
    # -------------------------

    @app.get("/health")
    def health():
        """Simple health endpoint for Docker/monitoring checks."""
        return {"ok": True}

    return app


def create_production_app() -> Flask:
    """App wired with a background fetch worker."""
    return create_app(executor=ThreadPoolExecutor(max_workers=1, thread_name_prefix="feed"))

