"""
GCD Labs — Gateway Middleware Package
=======================================

Middleware Chain:
    Request → [Request ID] → [Logging] → [CORS] → Route Handler

    1. Request ID: Generate or accept the correlation ID
    2. Logging: Access log line tagged with that ID
    3. CORS: FastAPI's CORSMiddleware (handles preflight)
"""
