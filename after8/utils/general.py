# after8/utils/general.py
"""
General-purpose utility functions.

Service result handling and the helpers services use to build their
success/error payloads.
"""

from flask import jsonify


def _handle_service_result(result, default_error_status=500):
    """
    Parses the result from a service function.
    If it's a tuple (payload, status_code), it uses the custom status code.
    Otherwise, it assumes success (status 200) or uses the default error status.

    Adds 'error_code' field to error responses for structured frontend handling.
    """
    if isinstance(result, tuple) and len(result) == 2:
        payload, status_code = result
        if not payload.get("success", True):
            payload["error_code"] = payload.get("error_code", status_code)
        return jsonify(payload), status_code

    if result.get("success"):
        return jsonify(result), 200
    else:
        result["error_code"] = result.get("error_code", default_error_status)
        return jsonify(result), default_error_status


def success(message, data=None, status_code=200):
    """Success payload; a non-200 status is returned as a (payload, status) tuple."""
    payload = {"success": True, "message": message}
    if data is not None:
        payload["data"] = data
    if status_code != 200:
        return payload, status_code
    return payload


def error(message, status_code):
    return {"success": False, "error": message}, status_code


def validation_error(exc):
    """
    Turns a pydantic ValidationError into a 400 error tuple carrying the
    first failing field and its message.
    """
    errors = exc.errors()
    if not errors:
        return error("Invalid request.", 400)
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    message = first.get("msg", "Invalid value")
    if location:
        message = f"{location}: {message}"
    return error(message, 400)
