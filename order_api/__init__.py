from .base import OrderApi
from .fake import InMemoryOrderApi
from .http_client import HttpOrderApi

__all__ = ['OrderApi', 'HttpOrderApi', 'InMemoryOrderApi']
