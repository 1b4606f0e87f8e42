"""
Client for the jsonstore.io key-value JSON storage API.
"""

from jsonstore import errors
from jsonstore.dict_transport import DictTransport
from jsonstore.store import API_URL, JsonStore
from jsonstore.transport import AiohttpTransport, Request, Response

__version__ = '1.0.0'

__all__ = [
    'API_URL',
    'AiohttpTransport',
    'DictTransport',
    'JsonStore',
    'Request',
    'Response',
    'errors',
]
