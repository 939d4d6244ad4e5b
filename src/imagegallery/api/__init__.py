"""Image Gallery — FastAPI REST API layer.

This package contains the FastAPI application and the Pydantic
request/response models.

Modules
-------
main
    FastAPI application with all route handlers, the error-payload exception
    handlers, and the ``main()`` CLI entry point.
models
    Pydantic models for API request and response validation.
"""
