"""HTTP routes for the Flask API."""

import logging
from http import HTTPStatus
from typing import Any

from flask import Blueprint, current_app, jsonify, request
from pydantic import BaseModel, ValidationError

from forecast_backend.core.errors import ForecastInputError, ScenarioError
from forecast_backend.core.forecast import project
from forecast_backend.core.insights import outlook
from forecast_backend.core.ping import get_ping_message
from forecast_backend.core.scenarios import CompareRequest, compare_scenarios
from forecast_backend.schemas.forecast import DEFAULT_ASSUMPTIONS, assumptions_from_payload
from forecast_backend.schemas.ping import PingResponse

logger = logging.getLogger(__name__)

api_bp = Blueprint("api", __name__)


def _dump(model: BaseModel) -> Any:
    return model.model_dump(mode="json", by_alias=True)


@api_bp.errorhandler(ValidationError)
def _handle_validation_error(exc: ValidationError):
    """Convert Pydantic validation errors into JSON responses."""
    logger.warning("rejected payload: %d validation error(s)", exc.error_count())
    detail = exc.errors(include_url=False, include_context=False)
    return jsonify({"detail": detail}), HTTPStatus.UNPROCESSABLE_ENTITY


@api_bp.errorhandler(ForecastInputError)
@api_bp.errorhandler(ScenarioError)
def _handle_bad_request(exc: ValueError):
    logger.warning("bad forecast request: %s", exc)
    return jsonify({"error": str(exc)}), HTTPStatus.BAD_REQUEST


@api_bp.get("/ping")
def ping() -> Any:
    """Health-check endpoint."""
    response = PingResponse(message=get_ping_message())
    return jsonify(response.model_dump())


@api_bp.get("/forecast/defaults")
def forecast_defaults() -> Any:
    """Default assumptions used to pre-populate the planner form."""
    return jsonify(_dump(DEFAULT_ASSUMPTIONS))


@api_bp.post("/forecast")
def forecast() -> Any:
    """Project savings from current age to life expectancy."""
    assumptions = assumptions_from_payload(request.get_json(force=True, silent=False))
    logger.info(
        "forecast ages %s/%s/%s",
        assumptions.current_age,
        assumptions.retirement_age,
        assumptions.life_expectancy,
    )
    return jsonify(_dump(project(assumptions)))


@api_bp.post("/forecast/outlook")
def forecast_outlook() -> Any:
    """Forecast plus retirement income breakdown and recommendations."""
    assumptions = assumptions_from_payload(request.get_json(force=True, silent=False))
    result = project(assumptions)
    return jsonify({"forecast": _dump(result), "outlook": _dump(outlook(assumptions, result))})


@api_bp.post("/forecast/compare")
def forecast_compare() -> Any:
    """Run several named scenarios side by side."""
    payload = CompareRequest.model_validate(request.get_json(force=True, silent=False))
    logger.info("comparing %d scenarios", len(payload.scenarios))
    comparison = compare_scenarios(
        payload.scenarios,
        max_scenarios=current_app.config["MAX_SCENARIOS"],
    )
    return jsonify(_dump(comparison))
