"""
Base controller class.
Controllers sit between the endpoints and the services: they build the
services a request needs and return Pydantic schemas.
"""

from abc import ABC


class BaseController(ABC):
    """Base controller class for all controllers."""
    pass
