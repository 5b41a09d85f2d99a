from lubanioc.configuration import BeanDefinition, bean, bean_key, collect_bean_definitions
from lubanioc.context import ApplicationContext
from lubanioc.exceptions import (
    BeanDefinitionError,
    BeanNotOfRequiredTypeError,
    ContextStateError,
    LubanError,
    NoSuchBeanError,
    NoUniqueBeanError,
)
from lubanioc.settings import AppSettings

__all__ = [
    "AppSettings",
    "ApplicationContext",
    "BeanDefinition",
    "BeanDefinitionError",
    "BeanNotOfRequiredTypeError",
    "ContextStateError",
    "LubanError",
    "NoSuchBeanError",
    "NoUniqueBeanError",
    "bean",
    "bean_key",
    "collect_bean_definitions",
]
