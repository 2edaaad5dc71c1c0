def error_response(message, status_code, **extra):
    """Build the error envelope returned by every service."""
    body = {"success": False, "error": message}
    body.update(extra)
    return body, status_code
