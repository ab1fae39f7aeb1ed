"""
Flask app exposing notation recovery over HTTP.

Endpoints:
- POST /api/recover        JSON {"text": ..., "expectedMoves": ...}
- POST /api/recover-image  multipart form with a "file" field
- GET  /api/health         liveness and configured services
"""

import asyncio
import logging

from flask import Flask, jsonify, request
from flask_cors import CORS

from openchessnotation import __version__
from openchessnotation.ingest.reader import ScoresheetReader
from openchessnotation.pipeline import NotationRecoveryPipeline


logger = logging.getLogger(__name__)


def _parse_expected_moves(value: object) -> int | None:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ValueError("expectedMoves must be an integer")
    return int(value)


def create_app(
    pipeline: NotationRecoveryPipeline | None = None,
    reader: ScoresheetReader | None = None,
) -> Flask:
    """
    Create the Flask application.

    Args:
        pipeline: Pipeline used for text requests
        reader: Scoresheet reader used for image uploads (built from the
            environment on first use when not given)
    """
    app = Flask(__name__)
    CORS(app)

    pipeline = pipeline or (reader.pipeline if reader is not None else NotationRecoveryPipeline())
    state: dict[str, ScoresheetReader | None] = {"reader": reader}

    def get_reader() -> ScoresheetReader:
        if state["reader"] is None:
            state["reader"] = ScoresheetReader.from_config(pipeline=pipeline)
        return state["reader"]

    @app.route("/api/health")
    def health():
        return jsonify({"ok": True, "version": __version__})

    @app.route("/api/recover", methods=["POST"])
    def recover():
        data = request.get_json(silent=True) or {}
        text = data.get("text")
        if not isinstance(text, str) or not text.strip():
            return jsonify({"error": "Missing text"}), 400

        try:
            expected = _parse_expected_moves(data.get("expectedMoves"))
        except (TypeError, ValueError):
            return jsonify({"error": "expectedMoves must be an integer"}), 400

        result = pipeline.recover(text, expected_total=expected)
        return jsonify(result.to_dict())

    @app.route("/api/recover-image", methods=["POST"])
    def recover_image():
        if "file" not in request.files:
            return jsonify({"error": "No file provided"}), 400

        image_bytes = request.files["file"].read()
        if not image_bytes:
            return jsonify({"error": "Empty file"}), 400

        try:
            expected = _parse_expected_moves(request.form.get("expectedMoves"))
        except (TypeError, ValueError):
            return jsonify({"error": "expectedMoves must be an integer"}), 400

        try:
            result = asyncio.run(get_reader().read_image(image_bytes, expected_total=expected))
        except Exception as e:
            logger.exception("Image recovery failed")
            return jsonify({"error": f"Image recovery failed: {e}"}), 500

        return jsonify(result.to_dict())

    return app


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    create_app().run(host="0.0.0.0", port=5050, debug=True)
