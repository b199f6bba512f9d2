"""
Storage abstraction layer.
Provides a clean interface for data persistence that can be swapped out.
"""
from .interface import StorageInterface
from .json_storage import JsonFileStorage

__all__ = ['StorageInterface', 'JsonFileStorage']
