"""Declare beans on plain configuration classes.

A configuration class is any class whose methods are decorated with ``@bean``.
The decorator only attaches metadata; ``ApplicationContext`` instantiates the
class and registers each bound method as a diwire factory.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Annotated, Any, Literal, TypeVar, get_type_hints, overload

from diwire import Component, Lifetime

from lubanioc.exceptions import BeanDefinitionError

F = TypeVar("F", bound=Callable[..., Any])

_BEAN_SPEC_ATTRIBUTE = "__luban_bean__"


@dataclass(frozen=True, slots=True, kw_only=True)
class _BeanSpec:
    name: str
    provides: Any
    lifetime: Lifetime
    primary: bool


@dataclass(frozen=True, slots=True, kw_only=True)
class BeanDefinition:
    """Describe one bean produced by a configuration instance."""

    name: str
    provides: Any
    factory: Callable[..., Any]
    lifetime: Lifetime = Lifetime.SCOPED
    primary: bool = False

    @property
    def key(self) -> Any:
        """Container key the bean is registered under."""
        return bean_key(self.provides, self.name)


def bean_key(provides: Any, name: str) -> Any:
    """Return the container key for the bean ``name`` of type ``provides``.

    Use it to annotate parameters of other ``@bean`` methods that depend on a
    named bean.

    Examples:
        .. code-block:: python

            DaoBean = bean_key(Dao, "dao")


            class AppConfig:
                @bean
                def dao(self) -> Dao: ...

                @bean
                def service(self, dao: DaoBean) -> Service:
                    return Service(dao)

    """
    return Annotated[provides, Component(name)]


@overload
def bean(name: F) -> F: ...


@overload
def bean(
    name: str | None = None,
    *,
    provides: Any | Literal["infer"] = "infer",
    lifetime: Lifetime = Lifetime.SCOPED,
    primary: bool = False,
) -> Callable[[F], F]: ...


def bean(
    name: str | F | None = None,
    *,
    provides: Any | Literal["infer"] = "infer",
    lifetime: Lifetime = Lifetime.SCOPED,
    primary: bool = False,
) -> F | Callable[[F], F]:
    """Mark a configuration method as a bean factory.

    Works bare (``@bean``) and called (``@bean("dao")``). The method keeps its
    behavior; only metadata is attached.

    Args:
        name: Bean name. Defaults to the method name.
        provides: Declared bean type. ``"infer"`` uses the return annotation,
            evaluated when the context is refreshed.
        lifetime: diwire lifetime. ``Lifetime.SCOPED`` caches the bean for the
            context lifetime, ``Lifetime.TRANSIENT`` builds it per lookup.
        primary: Prefer this bean when a type lookup matches several beans.

    Returns:
        The method itself in bare form, or a decorator in called form.

    Raises:
        BeanDefinitionError: If ``provides`` is ``"infer"`` and the method has
            no return annotation.

    """
    if callable(name):
        return _mark(name, name=None, provides=provides, lifetime=lifetime, primary=primary)

    def decorator(func: F) -> F:
        return _mark(func, name=name, provides=provides, lifetime=lifetime, primary=primary)

    return decorator


def _mark(
    func: F,
    *,
    name: str | None,
    provides: Any,
    lifetime: Lifetime,
    primary: bool,
) -> F:
    if provides == "infer" and "return" not in getattr(func, "__annotations__", {}):
        msg = (
            f"@bean method '{func.__qualname__}' needs a return annotation "
            "or an explicit 'provides'."
        )
        raise BeanDefinitionError(msg)

    spec = _BeanSpec(
        name=name or func.__name__,
        provides=provides,
        lifetime=lifetime,
        primary=primary,
    )
    setattr(func, _BEAN_SPEC_ATTRIBUTE, spec)
    return func


def collect_bean_definitions(config: object) -> list[BeanDefinition]:
    """Return the bean definitions declared on a configuration instance.

    Definitions follow attribute definition order, base classes first. A
    method overridden in a subclass keeps its base position but uses the
    subclass implementation.
    """
    members: dict[str, Any] = {}
    for klass in reversed(type(config).__mro__):
        members.update(vars(klass))

    definitions: list[BeanDefinition] = []
    for attribute, member in members.items():
        spec: _BeanSpec | None = getattr(member, _BEAN_SPEC_ATTRIBUTE, None)
        if spec is None:
            continue

        provides = spec.provides
        if provides == "infer":
            provides = get_type_hints(member)["return"]

        definitions.append(
            BeanDefinition(
                name=spec.name,
                provides=provides,
                factory=getattr(config, attribute),
                lifetime=spec.lifetime,
                primary=spec.primary,
            ),
        )
    return definitions
