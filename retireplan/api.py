"""
HTTP surface for the retirement calculator.

Routes
------
POST /api/financial/retirement-calculator/advanced
    Validate the JSON profile and return the full calculation.
    200 {success, calculations, timestamp}
    400 {error, details}  invalid payload or inconsistent ages
    500 {error, details}  unexpected computation failure
GET  /api/financial/retirement-calculator/advanced
    Static documentation: endpoints, required and optional fields.

Authentication and persistence are handled by the host application;
these views assume an authorized caller.
"""

from __future__ import annotations

from typing import Optional

import structlog
from flask import Blueprint, Flask, current_app, jsonify, request

from .config import AppSettings, FinancialProfile, SimulationConfig
from .engine import calculate_retirement
from .exceptions import ComputationError, SchemaValidationError, ValidationError
from .logging_setup import configure_logging
from .serialization import build_response

__all__ = ["retirement_bp", "create_app"]

logger = structlog.get_logger(__name__)

ENDPOINT_PATH = "/api/financial/retirement-calculator/advanced"

retirement_bp = Blueprint("retirement", __name__, url_prefix="/api/financial/retirement-calculator")


def _simulation_config() -> SimulationConfig:
    return current_app.config.get("RETIREPLAN_SIMULATION") or SimulationConfig()


@retirement_bp.route("/advanced", methods=["POST"])
def calculate():
    payload = request.get_json(silent=True)
    try:
        if payload is None:
            raise SchemaValidationError(
                "Invalid request data",
                details=[{
                    "field": "__root__",
                    "message": "Request body must be a JSON object",
                    "type": "json_invalid",
                }],
            )
        analysis = calculate_retirement(payload, _simulation_config())
        body = build_response(analysis)
    except ValidationError as e:
        logger.info("calculation.rejected", error=e.message, details=e.details)
        return jsonify(e.to_dict()), 400
    except ComputationError as e:
        return jsonify(e.to_dict()), 500
    except Exception as e:
        logger.exception("calculation.response_failed", error=str(e))
        return jsonify({
            "error": "Failed to calculate retirement projections",
            "details": str(e),
        }), 500
    return jsonify(body), 200


@retirement_bp.route("/advanced", methods=["GET"])
def documentation():
    fields = FinancialProfile.wire_fields()
    return jsonify({
        "message": "Advanced Retirement Calculator API",
        "endpoints": {
            "calculate": {
                "method": "POST",
                "path": ENDPOINT_PATH,
                "description": "Calculate advanced retirement projections with risk metrics",
            },
        },
        "requiredFields": fields["required"],
        "optionalFields": fields["optional"],
    })


def create_app(settings: Optional[AppSettings] = None) -> Flask:
    """
    Application factory.

    Parameters
    ----------
    settings : AppSettings, optional
        Defaults to settings read from the environment / ``.env``.
    """
    settings = settings or AppSettings()
    configure_logging(settings.log_level)

    app = Flask(__name__)
    app.config["DEBUG"] = settings.debug
    app.config["RETIREPLAN_SIMULATION"] = settings.simulation_config()
    app.register_blueprint(retirement_bp)
    return app
