"""Delimited string format shared by every persisted clipboard value"""

from typing import Any, Iterable, List
from loguru import logger

from ..resources.base import ReferenceResolver, is_valid_ref

DELIMITER = ';'


def join_tokens(tokens: Iterable[str]) -> str:
    """Join non-empty tokens with the delimiter"""
    return DELIMITER.join(token for token in tokens if token)


def split_tokens(value: str) -> List[str]:
    """Split a persisted value, dropping empty tokens"""
    if not value:
        return []
    return [token for token in value.split(DELIMITER) if token]


def encode_names(names: Iterable[str]) -> str:
    """Serialize the category name list"""
    return join_tokens(name for name in names if name is not None)


def decode_names(value: str) -> List[str]:
    """Deserialize a category name list, keeping the first of any duplicates"""
    names: List[str] = []
    for name in split_tokens(value):
        if name not in names:
            names.append(name)
    return names


def encode_references(refs: Iterable[Any], resolver: ReferenceResolver) -> str:
    """
    Serialize resources to their identifiers

    Args:
        refs: Resources to serialize, in order
        resolver: Resolver providing the identifiers

    Returns:
        Delimited identifier string; unaddressable resources are skipped
    """
    identifiers = []
    for ref in refs:
        if not is_valid_ref(ref):
            continue

        try:
            identifier = resolver.identifier_of(ref)
        except Exception as e:
            logger.warning(f"Failed to address {ref!r}: {e}")
            continue

        if not identifier:
            logger.debug(f"Skipping unaddressable resource: {ref!r}")
            continue

        identifiers.append(identifier)

    return join_tokens(identifiers)


def decode_references(value: str, resolver: ReferenceResolver) -> List[Any]:
    """
    Deserialize an identifier string back to live resources

    Args:
        value: Delimited identifier string
        resolver: Resolver mapping identifiers to resources

    Returns:
        Resources in persisted order; unresolved and duplicate tokens dropped
    """
    refs: List[Any] = []
    for identifier in split_tokens(value):
        try:
            ref = resolver.resolve(identifier)
        except Exception as e:
            logger.warning(f"Failed to resolve {identifier}: {e}")
            continue

        if not is_valid_ref(ref) or ref in refs:
            logger.debug(f"Dropped identifier: {identifier}")
            continue

        refs.append(ref)

    return refs
