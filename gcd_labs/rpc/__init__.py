"""
GCD Labs — RPC Package
========================

What:  The gRPC boundary between the gateway and the compute service.

Module Inventory:
    - codec.py:   service/method names and JSON (de)serializers
    - server.py:  GCDServicer, build_server(), serve(), `gcd-compute` entry point
    - client.py:  GCDClient used by the gateway, with gRPC → exception mapping
"""
