"""
Analytics collector application.

Builds the Flask app that receives events from the site's analytics client.
"""

import logging
from pathlib import Path
from typing import Optional

from flask import Flask, jsonify
from werkzeug.middleware.proxy_fix import ProxyFix

from config_manager import ConfigManager
from collector_app.event_collection.factory import create_event_collection_module

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).parent.parent


def create_app(config_manager: Optional[ConfigManager] = None, data_dir: Optional[Path] = None) -> Flask:
    """Create the collector Flask application.

    Args:
        config_manager: Configuration source (a fresh ConfigManager if omitted)
        data_dir: Override for the events directory

    Returns:
        Configured Flask application
    """
    config_manager = config_manager or ConfigManager()
    paths_config = config_manager.get_paths_config()

    app = Flask(__name__)
    app.wsgi_app = ProxyFix(
            app.wsgi_app,
            x_for   = 1,     # trust 1 hop for X-Forwarded-For
            x_proto = 1,     # trust 1 hop for X-Forwarded-Proto
            x_host  = 1)     # trust 1 hop for X-Forwarded-Host

    if data_dir is None:
        data_dir = PROJECT_ROOT / paths_config.data_dir

    event_collection_module = create_event_collection_module(data_dir=Path(data_dir))
    app.extensions["event_store"] = event_collection_module["service"]
    app.register_blueprint(event_collection_module["blueprint"])

    @app.route("/healthz")
    def healthz():
        return jsonify({"status": "ok"})

    logger.info(f"Analytics collector storing events in {data_dir}")
    return app
