"""HTTP API layer built on Starlette and FastAPI.

Key components:
- **middleware**: The security headers and fault handler middlewares
- **schemas**: Pydantic models for the fault response body
- **utils**: High-performance JSON serialization with orjson
- **main**: Demo application wiring both middlewares together

Both middlewares are plain Starlette middlewares and can be used with any
Starlette-based application, not only the demo app in ``main``.
"""
