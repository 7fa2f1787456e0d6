# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Request validation middleware using Pydantic models.
Provides automatic request body validation and error formatting.
"""

from functools import wraps
from flask import request, jsonify, current_app
from typing import Type, Callable, Dict, Any, List, Optional
from pydantic import BaseModel, ValidationError
from opentelemetry import trace
import logging

from ..services.hal import HalFormatter

tracer = trace.get_tracer(__name__)
logger = logging.getLogger(__name__)


class ValidationMiddleware:
    """
    Middleware for request validation using Pydantic models.

    Without an explicit formatter the application's ``hal_formatter`` is used,
    so decorators can be applied when blueprints are imported.
    """

    def __init__(self, hal_formatter: Optional[HalFormatter] = None):
        self._hal_formatter = hal_formatter

    @property
    def hal_formatter(self) -> HalFormatter:
        return self._hal_formatter or current_app.hal_formatter

    def format_validation_errors(self, validation_error: ValidationError) -> List[Dict[str, Any]]:
        """
        Format Pydantic validation errors for API response.

        Args:
            validation_error: Pydantic ValidationError

        Returns:
            List of formatted error dictionaries
        """
        errors = []

        for error in validation_error.errors():
            field_path = ".".join(str(loc) for loc in error["loc"])
            errors.append({
                "field": field_path,
                "message": error["msg"],
                "type": error["type"],
                "input": error.get("input")
            })

        return errors

    def _error(self, detail: str, errors: List[Dict[str, Any]]):
        error_response = self.hal_formatter.format_validation_error(detail, request.path, errors)
        return jsonify(error_response), 400

    def validate_json_body(self, model_class: Type[BaseModel]) -> Callable:
        """
        Decorator to validate JSON request body against Pydantic model.

        The validated model is passed to the route ahead of its other arguments.
        """
        def decorator(f: Callable) -> Callable:
            @wraps(f)
            def decorated_function(*args, **kwargs):
                with tracer.start_as_current_span("validation.validate_json_body") as span:
                    span.set_attributes({
                        "validation.model": model_class.__name__,
                        "http.method": request.method,
                        "http.path": request.path
                    })

                    if not request.is_json:
                        span.set_attribute("validation.result", "invalid_content_type")
                        return self._error(
                            "Request must have Content-Type: application/json",
                            [{
                                "field": "content-type",
                                "message": "Expected application/json",
                                "type": "content_type_error",
                                "input": request.content_type
                            }]
                        )

                    json_data = request.get_json(silent=True)
                    if not isinstance(json_data, dict):
                        span.set_attribute("validation.result", "invalid_json")
                        return self._error(
                            "Invalid JSON in request body",
                            [{
                                "field": "body",
                                "message": "Expected a JSON object",
                                "type": "json_error",
                                "input": None
                            }]
                        )

                    try:
                        validated_data = model_class(**json_data)
                    except ValidationError as e:
                        span.set_attribute("validation.result", "validation_error")
                        validation_errors = self.format_validation_errors(e)

                        logger.warning(
                            "Request validation failed",
                            extra={
                                "model": model_class.__name__,
                                "path": request.path,
                                "method": request.method,
                                "errors": validation_errors
                            }
                        )
                        return self._error(
                            f"Request validation failed for {model_class.__name__}",
                            validation_errors
                        )

                    span.set_attribute("validation.result", "success")

                return f(validated_data, *args, **kwargs)

            return decorated_function
        return decorator

    def validate_query_params(self, model_class: Type[BaseModel]) -> Callable:
        """Decorator to validate query parameters against Pydantic model."""
        def decorator(f: Callable) -> Callable:
            @wraps(f)
            def decorated_function(*args, **kwargs):
                with tracer.start_as_current_span("validation.validate_query_params") as span:
                    span.set_attribute("validation.model", model_class.__name__)

                    try:
                        validated_params = model_class(**request.args.to_dict())
                    except ValidationError as e:
                        span.set_attribute("validation.result", "validation_error")
                        return self._error(
                            f"Query parameter validation failed for {model_class.__name__}",
                            self.format_validation_errors(e)
                        )

                    span.set_attribute("validation.result", "success")

                return f(validated_params, *args, **kwargs)

            return decorated_function
        return decorator


_default_middleware = ValidationMiddleware()


def validate_json(model_class: Type[BaseModel], validation_middleware: Optional[ValidationMiddleware] = None) -> Callable:
    """Convenience decorator for JSON body validation."""
    return (validation_middleware or _default_middleware).validate_json_body(model_class)


def validate_query(model_class: Type[BaseModel], validation_middleware: Optional[ValidationMiddleware] = None) -> Callable:
    """Convenience decorator for query parameter validation."""
    return (validation_middleware or _default_middleware).validate_query_params(model_class)
