"""
Error taxonomy for the load planner.

Input errors are user-correctable and map to 400 responses. Collaborator
errors wrap failures of the LLM, routing, and geocoding services.
"""

from pydantic import ValidationError


class InputError(ValueError):
    """Request could not be analyzed as given (too short, unsupported type, bad shape)."""

    status_code = 400


class CollaboratorError(RuntimeError):
    """An external collaborator (LLM, routing service, geocoder) failed."""

    status_code = 502


class RouteNotFoundError(CollaboratorError):
    """The routing service returned no usable route."""

    status_code = 404


class GeocodeError(CollaboratorError):
    """A single reverse geocode call failed."""


class AnalysisTimeoutError(TimeoutError):
    """The caller's deadline expired before the analysis finished."""

    status_code = 504


def first_validation_error(e: ValidationError) -> str:
    """'quantity: Input should be less than or equal to 1000' from a pydantic ValidationError."""
    error = e.errors()[0]
    location = ".".join(str(part) for part in error["loc"])
    return f"{location}: {error['msg']}" if location else error["msg"]
