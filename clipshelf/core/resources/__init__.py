"""Resource handles and identifier resolution"""

from .base import ResourceRef, ReferenceResolver, is_valid_ref
from .file_resolver import FileResource, FileResolver

__all__ = ['ResourceRef', 'ReferenceResolver', 'is_valid_ref', 'FileResource', 'FileResolver']
