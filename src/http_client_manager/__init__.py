"""
HTTP Client Manager

Declarative HTTP service APIs: providers contribute service definitions,
each one bound to a description file listing the remote operations, and
every operation can be called by name through a per-service client.

Architecture:
- loaders.py: description file parsing (JSON, YAML, TOML)
- discovery.py: provider lookup and definition file discovery
- registry.py: service API registry with allow-listed overrides
- events.py: handler stack event dispatched before a client is built
- client.py: per-service HTTP client
- factory.py: client factory and cache
- dispatcher.py: parameter validation, request serialization and execution
- coercion.py: operator text input to typed parameter values
- saved_requests.py: persisted, replayable operation calls
- api/: FastAPI application exposing the above
"""

__version__ = "0.3.0"
