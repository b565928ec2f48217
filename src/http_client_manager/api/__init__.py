"""
HTTP Client Manager API

FastAPI service exposing the registered service apis, their operations and
the saved requests.

Architecture:
- server.py: FastAPI application setup and error mapping
- models.py: Pydantic request/response models
- health.py: Health check endpoint
- services.py: Service api, operation listing and execution endpoints
- requests.py: Saved request endpoints
"""
