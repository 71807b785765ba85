"""webguard - security headers and fault recovery middleware for ASGI apps.

webguard provides two independent Starlette middlewares that decorate an
existing request-handling pipeline:

- **Security headers**: Injects X-Frame-Options, Content-Security-Policy,
  Strict-Transport-Security and X-Content-Type-Options from configuration
- **Fault handler**: Recovers from unhandled exceptions in downstream
  handlers, logs them and returns an HTML, JSON or plain-text fallback

Architecture Overview:
- **API Layer**: The middlewares, their factories and a demo FastAPI app
- **Core Layer**: Configuration, fault classification, logging and tracing
"""
