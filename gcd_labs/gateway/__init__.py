"""
GCD Labs — HTTP Gateway
=========================

What:  FastAPI service that turns GET /gcd/{a}/{b} into a gRPC Compute call.
Entry: gcd_labs.gateway.main:app (uvicorn) or the `gcd-gateway` script.
"""
