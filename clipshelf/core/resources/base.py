"""Contracts between the clipboard core and the host environment"""

from typing import Any, Optional, Protocol, runtime_checkable


@runtime_checkable
class ResourceRef(Protocol):
    """Opaque handle to an external resource, compared with ``==``"""

    @property
    def name(self) -> str:
        """Display name, used as the sort key"""
        ...

    @property
    def alive(self) -> bool:
        """False once the host resource has been destroyed"""
        ...


@runtime_checkable
class ReferenceResolver(Protocol):
    """Maps resource handles to stable string identifiers and back"""

    def identifier_of(self, ref: Any) -> str:
        """
        Get the stable identifier of a resource

        Returns:
            Identifier, or an empty string if the resource can't be addressed
        """
        ...

    def resolve(self, identifier: str) -> Optional[Any]:
        """
        Resolve an identifier back to a live resource

        Returns:
            Resource handle or None if it no longer exists
        """
        ...


def is_valid_ref(ref: Any) -> bool:
    """Check that a handle is not None and still points at a live resource"""
    if ref is None:
        return False
    return bool(getattr(ref, 'alive', True))
