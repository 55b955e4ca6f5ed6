"""Flask status endpoints for the forwarder."""

from flask import Flask, jsonify, request

from tplink_gelf.error_tracker import ErrorTracker
from tplink_gelf.metrics import Metrics

_DEFAULT_FAILURE_LIMIT = 10


def create_dashboard_app(metrics: Metrics, error_tracker: ErrorTracker) -> Flask:
    app = Flask(__name__)

    @app.route("/stats")
    def stats():
        snap = metrics.snapshot()
        snap["recent_failures"] = error_tracker.get_recent(_DEFAULT_FAILURE_LIMIT)
        snap["total_failures"] = error_tracker.total
        return jsonify(snap)

    @app.route("/failures")
    def failures():
        limit = request.args.get("limit", default=_DEFAULT_FAILURE_LIMIT, type=int)
        return jsonify(failures=error_tracker.get_recent(limit))

    @app.route("/health")
    def health():
        return jsonify(status="ok")

    return app


def run_dashboard(app: Flask, port: int):
    """Serve the status app; meant to run in a daemon thread."""
    app.run(host="0.0.0.0", port=port, use_reloader=False)
