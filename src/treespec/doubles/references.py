"""
Type references backing test doubles.

A reference validates that a method being configured on a double actually
exists on the doubled type. Types are resolved through an explicit
`TypeRegistry` rather than ambient lookups: classes are registered by name
(usually with the `register_type` decorator), dotted paths are imported on
demand and bare builtin names resolve against `builtins`.
"""

import builtins
import importlib
import inspect
import logging
from functools import cached_property

from attrs import frozen

from treespec.exceptions import UnimplementedMethodError, UnresolvedTypeError

logger = logging.getLogger(__name__)

CALL = "__call__"


def _defines_call(klass: type) -> bool:
    return any(CALL in vars(base) for base in klass.__mro__ if base is not object)


@frozen
class TypeDescriptor:
    """Public callable surface of a type, split by instance and class level."""

    name: str
    instance_methods: frozenset[str]
    class_methods: frozenset[str]

    @classmethod
    def from_type(cls, klass: type, name: str | None = None) -> "TypeDescriptor":
        """
        Reflect over a class to collect its public callable members.

        Instances respond to plain methods, properties, classmethods and
        staticmethods. The class itself responds to classmethods,
        staticmethods, nested classes and construction (`__call__`).

        Params:
            klass: The class to describe
            name: Display name, defaults to the class name

        Returns:
            TypeDescriptor for the class
        """
        instance_methods: set[str] = set()
        class_methods: set[str] = {CALL}
        for attr in dir(klass):
            if attr.startswith("_"):
                continue
            raw = inspect.getattr_static(klass, attr)
            if isinstance(raw, (classmethod, staticmethod)):
                class_methods.add(attr)
                instance_methods.add(attr)
            elif inspect.isclass(raw):
                class_methods.add(attr)
            elif callable(raw) or isinstance(raw, (property, cached_property)):
                instance_methods.add(attr)
        if _defines_call(klass):
            instance_methods.add(CALL)
        return cls(
            name=name or klass.__name__,
            instance_methods=frozenset(instance_methods),
            class_methods=frozenset(class_methods),
        )


class Reference:
    """Backing object of a double. The base reference allows every method."""

    def __init__(self, name: str):
        self.name = name

    def validate_call(self, method_name: str) -> None:
        pass

    def __str__(self) -> str:
        return self.name


class NameReference(Reference):
    """Placeholder for a type that could not be resolved. Nothing is validated."""

    pass


class InstanceReference(Reference):
    """Restricts a double to the public instance methods of a resolved type."""

    def __init__(self, descriptor: TypeDescriptor):
        super().__init__(descriptor.name)
        self.descriptor = descriptor

    def validate_call(self, method_name: str) -> None:
        if method_name not in self.descriptor.instance_methods:
            raise UnimplementedMethodError(self.name, method_name, "#")


class ClassReference(Reference):
    """Restricts a double to the class-level callables of a resolved type."""

    def __init__(self, descriptor: TypeDescriptor):
        super().__init__(descriptor.name)
        self.descriptor = descriptor

    def validate_call(self, method_name: str) -> None:
        if method_name not in self.descriptor.class_methods:
            raise UnimplementedMethodError(self.name, method_name, ".")


class TypeRegistry:
    """Registry mapping type names to their descriptors.

    Responsibilities:
      - Hold explicitly registered classes under a name of choice.
      - Resolve dotted import paths and builtin names on demand.
      - Build references for instance and class doubles, honouring strict mode.
    """

    def __init__(self, types: list[type] | None = None):
        self._types: dict[str, TypeDescriptor] = {}
        for klass in types or []:
            self.register(klass)

    def register(self, klass: type, name: str | None = None) -> TypeDescriptor:
        """
        Register a class so doubles of `name` validate against it.

        Params:
            klass: The class to register
            name: Lookup name, defaults to the class name

        Returns:
            The descriptor stored in the registry
        """
        descriptor = TypeDescriptor.from_type(klass, name)
        self._types[descriptor.name] = descriptor
        return descriptor

    def list_types(self) -> list[str]:
        """List all registered type names."""
        return list(self._types.keys())

    def resolve(self, name: str) -> TypeDescriptor | None:
        """
        Resolve a type name to its descriptor.

        Resolution order: registered names, dotted import paths
        (`package.module.Class` or `package.module.Outer.Inner`), builtins.

        Params:
            name: Type name as written in the test

        Returns:
            TypeDescriptor if the name resolves to a class, None otherwise
        """
        if name in self._types:
            return self._types[name]
        klass = self._import(name) if "." in name else getattr(builtins, name, None)
        if inspect.isclass(klass):
            return TypeDescriptor.from_type(klass, name)
        return None

    def _import(self, dotted: str) -> object | None:
        parts = dotted.split(".")
        for split in range(len(parts) - 1, 0, -1):
            module_name = ".".join(parts[:split])
            try:
                target: object = importlib.import_module(module_name)
            except ImportError:
                continue
            for attr in parts[split:]:
                target = getattr(target, attr, None)
                if target is None:
                    return None
            return target
        return None

    def reference(
        self, target: str | type, kind: type[Reference], strict: bool = False
    ) -> Reference:
        """
        Build a reference for a double of `target`.

        Params:
            target: Type name or the class itself
            kind: `InstanceReference` or `ClassReference`
            strict: Raise instead of falling back to a permissive reference

        Returns:
            A validating reference when the type resolves, a `NameReference` otherwise

        Raises:
            UnresolvedTypeError: In strict mode, when the type cannot be resolved
        """
        if isinstance(target, type):
            descriptor: TypeDescriptor | None = TypeDescriptor.from_type(target)
            name = target.__name__
        else:
            descriptor = self.resolve(target)
            name = target
        if descriptor is not None:
            return kind(descriptor)
        if strict:
            raise UnresolvedTypeError(name)
        logger.debug("Type %s is not resolvable, double will accept any method", name)
        return NameReference(name)


default_registry = TypeRegistry()


def register_type(klass: type | None = None, *, name: str | None = None):
    """
    Register a class in the default registry. Usable as a plain or parametrized decorator.

    Params:
        klass: The class to register
        name: Lookup name, defaults to the class name

    Returns:
        The class unchanged, or a decorator when called with only `name`
    """
    if klass is None:
        return lambda inner: register_type(inner, name=name)
    default_registry.register(klass, name)
    return klass
