# publicview/engine/views.py

"""Override views: values that supply their own public representation."""

import logging
from typing import Any, Callable, Dict, Optional, Protocol, runtime_checkable

logger = logging.getLogger(__name__)

ViewFunc = Callable[[Any], Any]


@runtime_checkable
class PublicView(Protocol):
    """Capability for types that control their own public shape.

    ``public_view`` takes no arguments and returns the value to encode in
    place of ``self``. The result is encoded as returned; the redactor does not
    walk into it, so it must already be free of secrets.
    """

    def public_view(self) -> Any: ...


_VIEW_REGISTRY: Dict[type, ViewFunc] = {}


def _call_method(value: PublicView) -> Any:
    return value.public_view()


def register_view(cls: type, func: Optional[ViewFunc] = None) -> Any:
    """Registers a public view function for a class that cannot be edited.

    Usable directly or as a decorator::

        @register_view(ThirdPartyUser)
        def _user_view(user):
            return {"id": user.id}

    Args:
        cls: Class whose instances (and subclass instances) use ``func``
        func: Callable taking the instance and returning its public view

    Returns:
        ``func`` when given, otherwise a decorator
    """
    if func is None:

        def decorator(f: ViewFunc) -> ViewFunc:
            _VIEW_REGISTRY[cls] = f
            return f

        return decorator

    _VIEW_REGISTRY[cls] = func
    return func


def unregister_view(cls: type) -> None:
    """Removes a registered view; unknown classes are ignored."""
    _VIEW_REGISTRY.pop(cls, None)


def find_view(value: Any) -> Optional[ViewFunc]:
    """Resolves the override view for a concrete value.

    A ``public_view`` method on the value wins over the registry; the registry
    is searched along the value's MRO. Class objects never have a view.

    Args:
        value: Concrete value to inspect

    Returns:
        Callable producing the public view, or None
    """
    if value is None or isinstance(value, type):
        return None

    # The protocol check alone also matches a data field named public_view
    if isinstance(value, PublicView) and callable(getattr(type(value), "public_view", None)):
        return _call_method

    if _VIEW_REGISTRY:
        for klass in type(value).__mro__:
            func = _VIEW_REGISTRY.get(klass)
            if func is not None:
                return func

    return None
