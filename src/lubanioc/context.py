from __future__ import annotations

import logging
from collections.abc import Iterable
from types import TracebackType
from typing import Any, TypeVar, overload

from diwire import Container, Lifetime

from lubanioc.configuration import BeanDefinition, collect_bean_definitions
from lubanioc.exceptions import (
    BeanDefinitionError,
    BeanNotOfRequiredTypeError,
    ContextStateError,
    NoSuchBeanError,
    NoUniqueBeanError,
)
from lubanioc.settings import AppSettings

T = TypeVar("T")

logger = logging.getLogger(__name__)


class ApplicationContext:
    """Resolve beans declared on configuration classes by name or by type.

    The context owns a diwire ``Container``: every bean is registered under
    ``Annotated[provides, Component(name)]`` and the ``AppSettings``
    instance is registered under its own type. Construction,
    caching and cleanup of beans are left to the container.

    Passing configuration classes to the constructor registers them and
    refreshes the context immediately. Without them, call ``register`` and
    then ``refresh``.

    Examples:
        .. code-block:: python

            with ApplicationContext(AppConfig) as context:
                dao = context.get_bean("dao")
                dao.query()

    """

    def __init__(
        self,
        *config_classes: type[Any],
        settings: AppSettings | None = None,
    ) -> None:
        self._config_classes: list[type[Any]] = []
        self._settings = settings
        self._definitions: dict[str, BeanDefinition] = {}
        self._container = Container()
        self._refreshed = False
        self._closed = False

        if config_classes:
            self.register(*config_classes)
            self.refresh()

    @property
    def settings(self) -> AppSettings:
        if self._settings is None:
            self._settings = AppSettings()
        return self._settings

    @property
    def active(self) -> bool:
        return self._refreshed and not self._closed

    def register(self, *config_classes: type[Any]) -> None:
        """Add configuration classes to be processed by the next ``refresh``.

        Raises:
            ContextStateError: If the context was already refreshed.

        """
        if self._refreshed:
            msg = "Cannot register configuration classes after refresh()."
            raise ContextStateError(msg)
        self._config_classes.extend(config_classes)

    def refresh(self) -> None:
        """Instantiate configuration classes and register their beans.

        Raises:
            ContextStateError: If the context was already refreshed.
            BeanDefinitionError: If two beans share a name.

        """
        if self._refreshed:
            msg = "ApplicationContext does not support multiple refresh() calls."
            raise ContextStateError(msg)

        definitions: dict[str, BeanDefinition] = {}
        for config_class in self._config_classes:
            for definition in collect_bean_definitions(config_class()):
                if definition.name in definitions:
                    msg = (
                        f"Bean '{definition.name}' declared by {config_class.__qualname__} "
                        "is already defined."
                    )
                    raise BeanDefinitionError(msg)
                definitions[definition.name] = definition

        self._container.add_instance(self.settings, provides=AppSettings)
        for definition in definitions.values():
            self._container.add_factory(
                definition.factory,
                provides=definition.provides,
                component=definition.name,
                lifetime=definition.lifetime,
            )
            logger.debug("Registered bean %r providing %r", definition.name, definition.provides)
        self._add_type_aliases(definitions.values())

        self._container.compile()
        self._definitions = definitions
        self._refreshed = True
        logger.info(
            "Refreshed application context with %d bean(s): %s",
            len(self._definitions),
            ", ".join(self._definitions),
        )

    def _add_type_aliases(self, definitions: Iterable[BeanDefinition]) -> None:
        """Expose the unique (or primary) bean of each declared type under the bare type.

        Bean parameters annotated with the plain type then receive the managed
        bean instead of a fresh autoregistered instance. Ambiguous types get no
        alias.
        """
        by_provides: dict[Any, list[BeanDefinition]] = {}
        for definition in definitions:
            by_provides.setdefault(definition.provides, []).append(definition)

        for provides, candidates in by_provides.items():
            if provides is AppSettings:
                continue
            primaries = [definition for definition in candidates if definition.primary]
            if len(candidates) == 1:
                target = candidates[0]
            elif len(primaries) == 1:
                target = primaries[0]
            else:
                continue

            self._container.add_factory(
                _alias_factory(target),
                provides=provides,
                lifetime=Lifetime.TRANSIENT,
            )
            logger.debug("Aliased %r to bean %r", provides, target.name)

    @overload
    def get_bean(self, name_or_type: type[T]) -> T: ...

    @overload
    def get_bean(self, name_or_type: str, required_type: type[T]) -> T: ...

    @overload
    def get_bean(self, name_or_type: str, required_type: None = None) -> Any: ...

    def get_bean(self, name_or_type: Any, required_type: type[Any] | None = None) -> Any:
        """Return the bean registered under a name, or the unique bean of a type.

        Args:
            name_or_type: Bean name, or a class the bean's declared type must
                be a subclass of.
            required_type: Optional type the bean found by name must be an
                instance of.

        Returns:
            The bean instance built (or cached) by the container.

        Raises:
            ContextStateError: If the context is not refreshed or is closed.
            NoSuchBeanError: If no bean matches.
            NoUniqueBeanError: If a type lookup matches several beans and
                none of them is primary.
            BeanNotOfRequiredTypeError: If the named bean is not an instance
                of ``required_type``.
            TypeError: If ``name_or_type`` is neither a string nor a class.

        """
        self._ensure_active()

        if isinstance(name_or_type, str):
            definition = self._definition_by_name(name_or_type)
            instance = self._container.resolve(definition.key)
            if required_type is not None and not (
                _declares_type(definition.provides, required_type)
                or _is_instance(instance, required_type)
            ):
                msg = (
                    f"Bean '{definition.name}' is expected to be of type "
                    f"{required_type.__qualname__} but was {type(instance).__qualname__}."
                )
                raise BeanNotOfRequiredTypeError(msg)
            return instance

        if isinstance(name_or_type, type):
            definition = self._definition_by_type(name_or_type)
            return self._container.resolve(definition.key)

        msg = f"Bean lookup key must be a name or a class, got {name_or_type!r}."
        raise TypeError(msg)

    def contains_bean(self, name: str) -> bool:
        return name in self._definitions

    def bean_names(self) -> list[str]:
        return list(self._definitions)

    def get_type(self, name: str) -> Any:
        """Return the declared type of the bean ``name``."""
        return self._definition_by_name(name).provides

    def _definition_by_name(self, name: str) -> BeanDefinition:
        try:
            return self._definitions[name]
        except KeyError:
            msg = f"No bean named '{name}' is defined."
            raise NoSuchBeanError(msg) from None

    def _definition_by_type(self, required_type: type[Any]) -> BeanDefinition:
        candidates = [
            definition
            for definition in self._definitions.values()
            if _declares_type(definition.provides, required_type)
        ]
        if not candidates:
            msg = f"No bean of type {required_type.__qualname__} is defined."
            raise NoSuchBeanError(msg)
        if len(candidates) == 1:
            return candidates[0]

        primaries = [definition for definition in candidates if definition.primary]
        if len(primaries) == 1:
            return primaries[0]

        names = ", ".join(definition.name for definition in candidates)
        msg = (
            f"Expected a single bean of type {required_type.__qualname__} "
            f"but found {len(candidates)}: {names}."
        )
        raise NoUniqueBeanError(msg)

    def _ensure_active(self) -> None:
        if not self._refreshed:
            msg = "ApplicationContext has not been refreshed yet."
            raise ContextStateError(msg)
        if self._closed:
            msg = "ApplicationContext has already been closed."
            raise ContextStateError(msg)

    def close(self) -> None:
        """Close the container and run pending cleanup callbacks.

        Calling ``close`` more than once, or on a context that was never
        refreshed, does nothing.
        """
        if self._closed or not self._refreshed:
            self._closed = True
            return
        self._closed = True
        self._container.close()
        logger.debug("Closed application context")

    def __enter__(self) -> ApplicationContext:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.close()


def _declares_type(provides: Any, required_type: type[Any]) -> bool:
    """Return whether a declared bean type satisfies ``required_type``.

    Non-runtime-checkable protocols reject ``issubclass``; for those only
    nominal subclassing counts.
    """
    if provides is required_type:
        return True
    if not isinstance(provides, type):
        return False
    try:
        return issubclass(provides, required_type)
    except TypeError:
        return required_type in provides.__mro__


def _is_instance(instance: object, required_type: type[Any]) -> bool:
    try:
        return isinstance(instance, required_type)
    except TypeError:
        return required_type in type(instance).__mro__


def _alias_factory(definition: BeanDefinition) -> Any:
    def resolve_bean(bean: Any) -> Any:
        return bean

    # diwire infers the dependency key from the parameter annotation.
    resolve_bean.__annotations__ = {"bean": definition.key, "return": definition.provides}
    resolve_bean.__name__ = f"resolve_{definition.name}"
    resolve_bean.__qualname__ = resolve_bean.__name__
    return resolve_bean
