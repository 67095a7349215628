"""
Shared test fixtures for the ClipShelf test suite.

Resources are plain in-memory objects; the resolver and store are fakes.
"""

import pytest

from clipshelf.core.storage import InMemoryPreferenceStore


class FakeResource:
    """Named resource that can be destroyed"""

    def __init__(self, name, identifier=None):
        self.name = name
        self.identifier = identifier if identifier is not None else f"id-{name}"
        self.alive = True

    def destroy(self):
        self.alive = False

    def __repr__(self):
        return f"FakeResource({self.name!r})"


class FakeResolver:
    """Resolves identifiers against a registry of FakeResource objects"""

    def __init__(self, *resources):
        self.resources = {}
        for resource in resources:
            self.register(resource)

    def register(self, resource):
        if resource.identifier:
            self.resources[resource.identifier] = resource
        return resource

    def forget(self, resource):
        self.resources.pop(resource.identifier, None)

    def identifier_of(self, ref):
        if ref.identifier not in self.resources:
            return ""
        return ref.identifier

    def resolve(self, identifier):
        resource = self.resources.get(identifier)
        if resource is None or not resource.alive:
            return None
        return resource


class CountingStore(InMemoryPreferenceStore):
    """In-memory store recording every write"""

    def __init__(self, initial=None):
        super().__init__(initial)
        self.writes = []
        self.deletes = []

    def set(self, key, value):
        self.writes.append((key, value))
        return super().set(key, value)

    def delete(self, key):
        self.deletes.append(key)
        super().delete(key)

    def writes_to(self, key):
        return [value for k, value in self.writes if k == key]


class RecordingHost:
    """Selection host remembering what it was told"""

    def __init__(self):
        self.active = []
        self.selections = []

    def set_active(self, ref):
        self.active.append(ref)

    def set_selection(self, refs):
        self.selections.append(tuple(refs))


def make_resources(*names):
    return [FakeResource(name) for name in names]


@pytest.fixture
def store():
    return CountingStore()


@pytest.fixture
def resources():
    return make_resources("r1", "r2", "r3", "r4")


@pytest.fixture
def resolver(resources):
    return FakeResolver(*resources)


@pytest.fixture
def host():
    return RecordingHost()
