# slide_restore/domain/common/di_container.py

"""
Simple dependency injection container for the application.

Services are registered against their interface type, either as a ready
instance or as a factory. Factories can be marked as singletons so the
session-wide services (logger, config, background tasks) are built once.
"""
from typing import Dict, Any, Type, TypeVar, Callable, Set


T = TypeVar('T')
TBase = TypeVar('TBase')


class DIContainer:
    """
    Simple dependency injection container.

    Manages service registrations and handles dependency resolution.
    """

    def __init__(self):
        self._instance_registrations: Dict[type, Any] = {}
        self._factory_registrations: Dict[type, Callable[[], Any]] = {}
        self._singleton_types: Set[type] = set()
        self._resolving: Set[type] = set()  # circular dependency guard

    def register_instance(self, base_type: Type[TBase], instance: TBase) -> None:
        """
        Register an instance to be returned whenever base_type is requested.

        Args:
            base_type: The type to register (typically an interface)
            instance: The instance to return
        """
        self._instance_registrations[base_type] = instance

    def register_factory(self, base_type: Type[TBase], factory: Callable[[], TBase],
                         singleton: bool = False) -> None:
        """
        Register a factory function that will be called to create instances.

        Args:
            base_type: The type to register (typically an interface)
            factory: A function that creates and returns an instance
            singleton: Cache the first created instance and reuse it
        """
        self._factory_registrations[base_type] = factory
        if singleton:
            self._singleton_types.add(base_type)
        else:
            self._singleton_types.discard(base_type)

    def is_registered(self, base_type: type) -> bool:
        """Check whether base_type can be resolved."""
        return base_type in self._instance_registrations or base_type in self._factory_registrations

    def resolve(self, base_type: Type[T]) -> T:
        """
        Resolve a type to its registered instance or create a new instance.

        Raises:
            ValueError: If the type is not registered or there's a circular dependency
        """
        if base_type in self._resolving:
            raise ValueError(f"Circular dependency detected while resolving {base_type.__name__}")

        if base_type in self._instance_registrations:
            return self._instance_registrations[base_type]

        if base_type in self._factory_registrations:
            self._resolving.add(base_type)
            try:
                instance = self._factory_registrations[base_type]()
            finally:
                self._resolving.remove(base_type)

            if base_type in self._singleton_types:
                self._instance_registrations[base_type] = instance
            return instance

        raise ValueError(f"No registration found for {base_type.__name__}")
