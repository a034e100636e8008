"""
Application package initializer.

The project is organised into small layers: ``core`` (configuration,
logging, storage bootstrap and the error taxonomy), ``repositories``
(the character record store), ``services`` (ranking, search and
delete rules), ``schemas`` (Pydantic payloads) and ``api`` (versioned
FastAPI routers).
"""
