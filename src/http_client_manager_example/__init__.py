"""
Example service api provider.

Declares the ``jsonplaceholder`` service api, backed by the public
JSONPlaceholder fake REST API, and a few demo routes that use it.
"""

SERVICE_API = "jsonplaceholder"
CREATE_POST_REQUEST = "create_post"
