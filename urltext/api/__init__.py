"""Transport adapters: FastAPI app and AWS Lambda proxy handler.

Serve locally with::

    uvicorn urltext.api:create_app --factory
"""

from urltext.api.app import create_app

__all__ = ["create_app"]
