"""
Service layer abstraction.

Services own the business rules: they validate untrusted input,
issue operations against a record store handed to them at
construction, and classify every failure before it reaches the API.
"""
