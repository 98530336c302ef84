"""Request construction for the networking layer."""

from .config import RouterConfig
from .errors import MalformedURLError, RouterError, SerializationError
from .request import FilePart, HTTPMethod, ImagePart, MimeType, RequestDescriptor
from .router import BaseRouter
from .types import Err, Ok, Result

__all__ = [
    "BaseRouter",
    "Err",
    "FilePart",
    "HTTPMethod",
    "ImagePart",
    "MalformedURLError",
    "MimeType",
    "Ok",
    "RequestDescriptor",
    "Result",
    "RouterConfig",
    "RouterError",
    "SerializationError",
]
