"""HTTP entrypoint that runs review platform lookups on request."""

from __future__ import annotations

import logging
import os
import time
from pathlib import Path
from typing import Any, Dict

from flask import Flask, jsonify, request, send_from_directory

from reviewscout.core.config import ConfigError, get_settings, load_platforms, require_credentials
from reviewscout.core.errors import ResolutionFailed
from reviewscout.core.pipeline import build_pipeline
from reviewscout.etl.export import write_records_csv
from reviewscout.models import EntitySearchRequest

# ---------- Logging ----------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s - %(message)s",
)
logger = logging.getLogger(__name__)

# ---------- App ----------
app = Flask(__name__)

# ---------- Routes ----------


@app.get("/")
def root() -> Any:
    """Simple root to avoid 404 on GET /"""
    return "ok", 200


@app.get("/healthz")
def healthcheck() -> Any:
    """Lightweight health endpoint; reads settings only."""
    settings = get_settings()
    return (
        jsonify(
            {
                "status": "ok",
                "worker_port_config": getattr(settings, "worker_port", None),
                "credentials_configured": bool(settings.google_api_key and settings.google_cx),
            }
        ),
        200,
    )


@app.post("/process")
def process_lookup() -> Any:
    """
    Resolve an entity and collect its review platform pages.
    Required JSON fields: name (or hotel_name), city
    Optional: country, address, platforms_file
    """
    payload: Dict[str, Any] = request.get_json(silent=True) or {}

    name = str(payload.get("name") or payload.get("hotel_name") or "").strip()
    city = str(payload.get("city") or "").strip()
    missing = [field for field, value in (("name", name), ("city", city)) if not value]
    if missing:
        return jsonify({"error": f"missing fields: {', '.join(missing)}"}), 400

    settings = get_settings()
    try:
        require_credentials(settings)
    except ConfigError as exc:
        logger.error("Configuration error: %s", exc)
        return jsonify({"error": "lookup service is not configured"}), 500

    lookup = EntitySearchRequest(
        name=name,
        city=city,
        country=str(payload.get("country") or ""),
        address=payload.get("address") or None,
        platforms_file=str(payload.get("platforms_file") or settings.default_platforms_file),
    )
    try:
        platforms = load_platforms(lookup.platforms_file, settings.platforms_dir)
    except ConfigError as exc:
        return jsonify({"error": str(exc)}), 400

    logger.info("Received lookup request: %s", lookup)
    started = time.monotonic()
    try:
        entity, records = build_pipeline(settings).run(lookup, platforms)
    except ResolutionFailed as exc:
        return jsonify({"error": str(exc)}), 404

    try:
        filename = write_records_csv(records, entity.name, settings.results_dir).name
    except OSError as exc:
        logger.error("Failed to save results for %s: %s", entity.name, exc)
        filename = None

    elapsed = round(time.monotonic() - started, 3)
    logger.info("Lookup for %r finished in %ss with %d records", entity.name, elapsed, len(records))

    return (
        jsonify(
            {
                "data": {
                    "refined_name": entity.name,
                    "refined_address": entity.formatted_address,
                    "place_id": entity.place_id,
                    "detail_available": entity.detail_available,
                    "results": [record.to_dict() for record in records],
                    "file": filename,
                    "elapsed_seconds": elapsed,
                }
            }
        ),
        200,
    )


@app.get("/download")
def download_results() -> Any:
    """Send a previously exported CSV as an attachment."""
    file_name = (request.args.get("file") or "").strip()
    if not file_name:
        return jsonify({"error": "missing file parameter"}), 400
    if Path(file_name).name != file_name:
        return jsonify({"error": "invalid file parameter"}), 400

    results_dir = Path(get_settings().results_dir).resolve()
    return send_from_directory(results_dir, file_name, as_attachment=True)


def main() -> None:
    """Bind on PORT when the platform injects one, otherwise WORKER_PORT."""
    env_port = os.getenv("PORT")
    logger.info("[BOOT] ENV PORT=%s", env_port)

    port = int(env_port or get_settings().worker_port)
    logger.info("[BOOT] Binding on 0.0.0.0:%d", port)

    app.run(host="0.0.0.0", port=port)


if __name__ == "__main__":
    main()
