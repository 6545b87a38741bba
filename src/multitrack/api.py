import logging
from datetime import datetime

from flask import Flask, jsonify, request

from .cache import ResultCache
from .carriers import supported_carriers
from .config import Settings, configure_logging, load_settings
from .fetcher import PageFetcher
from .oplog import OperationLog
from .tracker import Tracker, TrackingInputError

logger = logging.getLogger(__name__)

# Track requests are two short strings
MAX_BODY_BYTES = 1024 * 1024


def build_tracker(settings):
    fetcher = PageFetcher(
        nav_timeout_ms=settings.nav_timeout_ms,
        settle_timeout_ms=settings.settle_timeout_ms,
        headless=settings.headless,
    )
    oplog = OperationLog(settings.log_dir) if settings.log_dir else None
    return Tracker(fetcher, cache=ResultCache(), scrape_enabled=settings.scrape_enabled, oplog=oplog)


def create_app(tracker=None, settings=None):
    settings = settings or Settings.from_env()
    tracker = tracker or build_tracker(settings)

    app = Flask(__name__)
    app.config["MAX_CONTENT_LENGTH"] = MAX_BODY_BYTES

    # ============================================================================
    # HEALTH & METADATA
    # ============================================================================

    @app.route('/health', methods=['GET'])
    @app.route('/api/health', methods=['GET'])
    def health_check():
        return jsonify({"ok": True, "status": "healthy", "timestamp": datetime.now().isoformat()})

    @app.route('/api/carriers', methods=['GET'])
    def list_carriers():
        carriers = [
            {"id": p.id, "name": p.name, "aliases": list(p.aliases)}
            for p in supported_carriers()
        ]
        return jsonify({"ok": True, "carriers": carriers})

    # ============================================================================
    # TRACKING
    # ============================================================================

    def respond(carrier, code):
        try:
            outcome = tracker.track(carrier, code)
        except TrackingInputError as e:
            return jsonify({"ok": False, "error": str(e)}), 400
        except Exception:
            logger.exception("Tracking failed for %r:%r", carrier, code)
            return jsonify({"ok": False, "error": "Internal error"}), 500

        if not outcome.supported:
            return jsonify({"ok": False, "error": outcome.error, "carrier": outcome.carrier}), 400

        response = {"ok": True, "carrier": outcome.carrier, "code": outcome.code}
        response.update(outcome.result.to_dict())
        response["cached"] = outcome.cached
        return jsonify(response)

    @app.route('/api/track', methods=['POST'])
    def track_post():
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            data = {}
        return respond(_as_text(data.get('carrier')), _as_text(data.get('code')))

    @app.route('/api/track', methods=['GET'])
    def track_get():
        return respond(request.args.get('carrier'), request.args.get('code'))

    @app.route('/track/<carrier>', methods=['GET'])
    def track_legacy(carrier):
        return respond(carrier, request.args.get('number'))

    return app


def _as_text(value):
    # Codes sometimes arrive as JSON numbers
    if value is None:
        return None
    return str(value)


def main():
    settings = load_settings()
    configure_logging(settings.log_level)
    logger.info("Scraping %s", "enabled" if settings.scrape_enabled else "disabled (link-only)")
    app = create_app(settings=settings)
    app.run(host=settings.host, port=settings.port, debug=settings.debug)


if __name__ == '__main__':
    main()
