"""Journal HTTP server - static pages, config and backup file endpoints."""

import json
import logging
from pathlib import Path

from flask import Flask, Response, jsonify, request, send_from_directory

from .config import Config, load_config

logger = logging.getLogger(__name__)


def create_app(config: Config | None = None) -> Flask:
    """Create the Flask app serving the journal and its backup API."""
    if config is None:
        config = load_config()

    app = Flask(__name__, static_folder=None)
    backup_file = Path(config.backup_file).expanduser()
    document_root = Path(config.document_root).expanduser().resolve()

    @app.after_request
    def add_cors_headers(response: Response) -> Response:
        response.headers["Access-Control-Allow-Origin"] = "*"
        response.headers["Access-Control-Allow-Methods"] = "GET, POST, OPTIONS"
        response.headers["Access-Control-Allow-Headers"] = "Content-Type"
        return response

    @app.before_request
    def answer_preflight():
        if request.method == "OPTIONS":
            return Response(status=200)
        return None

    @app.route("/api/config", methods=["GET"])
    def get_config():
        """Cloud backup credentials from the server's environment."""
        return jsonify({"apiKey": config.jsonbin_api_key, "binId": config.jsonbin_bin_id})

    @app.route("/api/backup", methods=["POST"])
    def save_backup():
        """Replace the backup file with the posted bundle."""
        try:
            data = json.loads(request.get_data(as_text=True))
            backup_file.parent.mkdir(parents=True, exist_ok=True)
            backup_file.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
        except (json.JSONDecodeError, OSError) as e:
            logger.error(f"Backup save error: {e}")
            return jsonify({"success": False, "message": str(e)}), 500

        logger.info(f"Backup saved to {backup_file}")
        return jsonify({"success": True, "message": "Backup saved!"})

    @app.route("/api/backup", methods=["GET"])
    def load_backup():
        """Return the stored backup file as-is."""
        if not backup_file.exists():
            return jsonify({"success": False, "message": "No backup found"}), 404
        try:
            data = backup_file.read_text(encoding="utf-8")
        except OSError as e:
            logger.error(f"Backup load error: {e}")
            return jsonify({"success": False, "message": str(e)}), 500

        logger.info(f"Backup loaded from {backup_file}")
        return Response(data, status=200, mimetype="application/json")

    @app.route("/", defaults={"path": "index.html"}, methods=["GET"])
    @app.route("/<path:path>", methods=["GET"])
    def static_file(path: str):
        """Serve files from the document root; unknown paths are 404."""
        return send_from_directory(document_root, path)

    return app


def run_server(config: Config | None = None) -> None:
    config = config or load_config()
    app = create_app(config)
    logger.info(f"Journal server on http://{config.host}:{config.port} (backup file: {config.backup_file})")
    app.run(host=config.host, port=config.port)
