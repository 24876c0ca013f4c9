"""
treespec test doubles.

This package provides doubles that stand in for collaborators, the type
registry used to validate them and the per-execution session handed to
test bodies by the `Doubles` evaluator layer.
"""

from treespec.doubles.double import Call, Double, Proxy, Registration, invoke
from treespec.doubles.references import (
    ClassReference,
    InstanceReference,
    NameReference,
    Reference,
    TypeDescriptor,
    TypeRegistry,
    default_registry,
    register_type,
)
from treespec.doubles.session import DoubleSession

__all__ = [
    "Call",
    "Double",
    "Proxy",
    "Registration",
    "invoke",
    "Reference",
    "NameReference",
    "InstanceReference",
    "ClassReference",
    "TypeDescriptor",
    "TypeRegistry",
    "default_registry",
    "register_type",
    "DoubleSession",
]
