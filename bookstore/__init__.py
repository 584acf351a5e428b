"""
Contract-verification harness for the FakeRestAPI bookstore service.

This package provides:
- Layered configuration (property files, environment, explicit overrides)
- HTTP clients for the Books and Authors resources
- Response checks that raise named contract violations
- Test data factories for valid, invalid and boundary payloads
- An HTML reporting sink and the suite/test lifecycle that feeds it
"""

__version__ = "1.0.0"
