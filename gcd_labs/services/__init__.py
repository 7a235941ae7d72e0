"""
GCD Labs — Services Layer
===========================

What:  Business logic with no transport concerns.

Service Inventory:
    - gcd.compute:      Pure Euclidean GCD over uint64 operands
    - gcd.parse_uint64: Boundary parser for raw decimal operands

The gRPC servicer and the HTTP routes stay thin and delegate here, so the
logic can be tested without a server of either kind.
"""
