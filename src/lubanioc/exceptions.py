from __future__ import annotations


class LubanError(Exception):
    """Represent a base class for all lubanioc failures.

    Catch this type to handle any context error path without matching each
    concrete exception class individually. Errors raised by the underlying
    diwire container are not wrapped and propagate as ``DIWireError``.
    """


class BeanDefinitionError(LubanError):
    """Signal an invalid ``@bean`` declaration or conflicting bean names.

    Raised by ``bean`` when the decorated method has no return annotation and
    no explicit ``provides``, and by ``ApplicationContext.refresh`` when two
    configuration classes declare the same bean name.

    Typical fixes include annotating the method return type or passing a
    distinct ``name=...``.
    """


class NoSuchBeanError(LubanError):
    """Signal that no bean matches the requested name or type.

    Raised by ``ApplicationContext.get_bean`` and
    ``ApplicationContext.get_type``.
    """


class NoUniqueBeanError(NoSuchBeanError):
    """Signal that a type lookup matched several beans and none is primary.

    Typical fixes include looking the bean up by name or marking exactly one
    candidate with ``@bean(primary=True)``.
    """


class BeanNotOfRequiredTypeError(LubanError):
    """Signal that a bean found by name is not an instance of ``required_type``."""


class ContextStateError(LubanError):
    """Signal an operation that is invalid in the current context state.

    Raised when registering configuration after ``refresh``, refreshing twice,
    or looking beans up before ``refresh`` or after ``close``.
    """
