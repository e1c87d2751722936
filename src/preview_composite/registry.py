"""
Registry pattern utility for creating type registries.

This module provides the ``new_registry`` function which creates a registry
dictionary and a decorator for registering handlers. It is used to look up
raster source loaders by URL scheme.

Usage example::

    from preview_composite.registry import new_registry

    LOADERS, register = new_registry(attribute='scheme')

    @register('data')
    async def load_data_url(source, options, client):
        ...

    loader = LOADERS['data']
"""

from typing import Any, Callable, Tuple, TypeVar, Union

T = TypeVar("T")


def new_registry(attribute: Union[str, None] = None) -> Tuple[dict, Callable]:
    """
    Returns an empty dict and a @register decorator.

    :param attribute: Optional attribute name to set on registered objects.
                     The key will be stored as this attribute on the object.
    :return: Tuple of (registry_dict, register_decorator)
    """
    registry: dict = {}

    def register(*keys: Any) -> Callable[[Callable[..., T]], Callable[..., T]]:
        def decorator(func: Callable[..., T]) -> Callable[..., T]:
            for key in keys:
                registry[key] = func
            if attribute:
                setattr(func, attribute, keys[0])
            return func

        return decorator

    return registry, register
