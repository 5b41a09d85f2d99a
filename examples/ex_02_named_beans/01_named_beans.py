"""Several beans of one type: look them up by name, or mark one as primary.

Bean methods can depend on another named bean through ``bean_key``; diwire
injects it when the dependent bean is built.
"""

from __future__ import annotations

from dataclasses import dataclass

from lubanioc import ApplicationContext, NoUniqueBeanError, bean, bean_key


@dataclass(slots=True)
class Cache:
    backend: str


@dataclass(slots=True)
class Repository:
    cache: Cache


FallbackCache = bean_key(Cache, "fallback_cache")


class CacheConfig:
    @bean(primary=True)
    def primary_cache(self) -> Cache:
        return Cache(backend="redis")

    @bean
    def fallback_cache(self) -> Cache:
        return Cache(backend="memory")

    @bean
    def repository(self, cache: FallbackCache) -> Repository:
        return Repository(cache=cache)


class AmbiguousConfig:
    @bean
    def left(self) -> Cache:
        return Cache(backend="left")

    @bean
    def right(self) -> Cache:
        return Cache(backend="right")


def main() -> None:
    with ApplicationContext(CacheConfig) as context:
        print(f"primary={context.get_bean(Cache).backend}")  # => primary=redis
        print(f"fallback={context.get_bean('fallback_cache').backend}")  # => fallback=memory

        repository = context.get_bean(Repository)
        print(f"repository_cache={repository.cache.backend}")  # => repository_cache=memory

    with ApplicationContext(AmbiguousConfig) as context:
        try:
            context.get_bean(Cache)
        except NoUniqueBeanError as error:
            error_name = type(error).__name__

    print(f"ambiguous={error_name}")  # => ambiguous=NoUniqueBeanError


if __name__ == "__main__":
    main()
