"""
transit-http: typed HTTP request description, execution and recovery.

- transit_core.request: request descriptors, outcomes and decoding strategies
- transit_core.runtime: execution entry point, recovery controller, transports
- transit_core.errors: ServiceError, the stock error type
"""

__version__ = "0.1.0"
