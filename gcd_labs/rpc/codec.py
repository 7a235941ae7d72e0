"""
GCD Labs — gRPC Wire Codec
============================

What:  Method naming and (de)serializers for the GCD service.
How:   Messages travel as compact UTF-8 JSON produced by the pydantic models.
       grpc only needs bytes ⇄ object callables, which these functions are;
       both the server's generic handler and the client's multi-callable are
       built from them, so the two sides cannot drift apart.

Wire shape:
    /gcd.GCDService/Compute
        request:  {"a": <uint64>, "b": <uint64>}
        response: {"result": <uint64>}
"""

from gcd_labs.schemas.gcd import GCDRequest, GCDResponse

SERVICE_NAME = "gcd.GCDService"
COMPUTE_METHOD = "Compute"
COMPUTE_PATH = f"/{SERVICE_NAME}/{COMPUTE_METHOD}"

# Metadata key carrying the gateway's request ID (gRPC keys must be lowercase)
REQUEST_ID_KEY = "x-request-id"


def encode_request(request: GCDRequest) -> bytes:
    return request.model_dump_json().encode("utf-8")


def decode_request(data: bytes) -> GCDRequest:
    """Raises pydantic.ValidationError on malformed or out-of-range input."""
    return GCDRequest.model_validate_json(data)


def encode_response(response: GCDResponse) -> bytes:
    return response.model_dump_json().encode("utf-8")


def decode_response(data: bytes) -> GCDResponse:
    return GCDResponse.model_validate_json(data)
