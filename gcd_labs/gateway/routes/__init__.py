"""
GCD Labs — Gateway Routes Package
===================================

Route Inventory:
    - gcd.py:     GET /gcd/{a}/{b}   (compute through the RPC service)
    - health.py:  GET /health        (gateway + compute service health)

Routes stay thin: parse input, call the client, shape the response.
"""
