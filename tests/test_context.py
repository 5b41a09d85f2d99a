from __future__ import annotations

from typing import Protocol

import pytest

from diwire import Lifetime
from diwire.exceptions import DIWireError
from lubanioc.app import AppConfig
from lubanioc.configuration import bean, bean_key
from lubanioc.context import ApplicationContext
from lubanioc.dao import Dao, IndexDao
from lubanioc.exceptions import (
    BeanDefinitionError,
    BeanNotOfRequiredTypeError,
    ContextStateError,
    NoSuchBeanError,
    NoUniqueBeanError,
)
from lubanioc.settings import AppSettings


class _Repo:
    pass


class _RepoImpl(_Repo):
    pass


class _Service:
    def __init__(self, repo: _Repo) -> None:
        self.repo = repo


class _UnregisteredPort(Protocol):
    def fetch(self) -> str: ...


_PrimaryRepo = bean_key(_Repo, "primary_repo")


class _RepoConfig:
    @bean
    def primary_repo(self) -> _Repo:
        return _Repo()

    @bean
    def fallback_repo(self) -> _Repo:
        return _Repo()

    @bean
    def service(self, repo: _PrimaryRepo) -> _Service:
        return _Service(repo)


class _PrimaryRepoConfig:
    @bean(primary=True)
    def primary_repo(self) -> _Repo:
        return _RepoImpl()

    @bean
    def fallback_repo(self) -> _Repo:
        return _Repo()


class _SubclassConfig:
    @bean
    def repo_impl(self) -> _RepoImpl:
        return _RepoImpl()


class _TransientConfig:
    @bean(lifetime=Lifetime.TRANSIENT)
    def repo(self) -> _Repo:
        return _Repo()


class _DuplicateDaoConfig:
    @bean
    def dao(self) -> Dao:
        return IndexDao(datasource="duplicate")


class _MissingDependencyConfig:
    @bean
    def service(self, unregistered: _UnregisteredPort) -> _Service:
        return _Service(_Repo())


class _Port(Protocol):
    def send(self, payload: str) -> str: ...


class _PortAdapter:
    def send(self, payload: str) -> str:
        return f"sent:{payload}"


class _PortConfig:
    @bean
    def port(self) -> _Port:
        return _PortAdapter()


class _TypedDependencyConfig:
    @bean
    def repo(self) -> _Repo:
        return _Repo()

    @bean
    def service(self, repo: _Repo) -> _Service:
        return _Service(repo)


class _PrimaryServiceConfig(_PrimaryRepoConfig):
    @bean
    def service(self, repo: _Repo) -> _Service:
        return _Service(repo)


def test_get_bean_by_name_returns_dao(context: ApplicationContext) -> None:
    dao = context.get_bean("dao")

    assert isinstance(dao, IndexDao)
    assert dao.datasource == "test-db"


def test_get_bean_by_type_returns_same_singleton(context: ApplicationContext) -> None:
    by_name = context.get_bean("dao")
    by_type = context.get_bean(Dao)

    assert by_type is by_name
    assert context.get_bean("dao") is by_name


def test_get_bean_by_name_checks_required_type(context: ApplicationContext) -> None:
    assert isinstance(context.get_bean("dao", Dao), IndexDao)

    with pytest.raises(BeanNotOfRequiredTypeError, match="'dao'"):
        context.get_bean("dao", _Repo)


def test_unknown_name_raises_no_such_bean(context: ApplicationContext) -> None:
    with pytest.raises(NoSuchBeanError, match="'missing'"):
        context.get_bean("missing")


def test_unknown_type_raises_no_such_bean(context: ApplicationContext) -> None:
    with pytest.raises(NoSuchBeanError, match="_Repo"):
        context.get_bean(_Repo)


def test_invalid_lookup_key_raises_type_error(context: ApplicationContext) -> None:
    with pytest.raises(TypeError, match="name or a class"):
        context.get_bean(42)  # type: ignore[call-overload]


def test_bean_introspection(context: ApplicationContext) -> None:
    assert context.bean_names() == ["dao"]
    assert context.contains_bean("dao")
    assert not context.contains_bean("missing")
    assert context.get_type("dao") is Dao

    with pytest.raises(NoSuchBeanError):
        context.get_type("missing")


def test_settings_are_read_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LUBAN_DATASOURCE", "postgres")

    with ApplicationContext(AppConfig) as context:
        assert context.settings.datasource == "postgres"
        assert context.get_bean("dao").datasource == "postgres"


def test_named_bean_dependency_is_injected() -> None:
    with ApplicationContext(_RepoConfig) as context:
        service = context.get_bean("service", _Service)

        assert service.repo is context.get_bean("primary_repo")
        assert service.repo is not context.get_bean("fallback_repo")


def test_type_lookup_with_several_candidates_raises() -> None:
    with ApplicationContext(_RepoConfig) as context:
        with pytest.raises(NoUniqueBeanError, match="primary_repo, fallback_repo"):
            context.get_bean(_Repo)


def test_no_unique_bean_is_a_no_such_bean_error() -> None:
    assert issubclass(NoUniqueBeanError, NoSuchBeanError)


def test_type_lookup_prefers_primary_bean() -> None:
    with ApplicationContext(_PrimaryRepoConfig) as context:
        repo = context.get_bean(_Repo)

        assert isinstance(repo, _RepoImpl)
        assert repo is context.get_bean("primary_repo")


def test_type_lookup_matches_subclasses() -> None:
    with ApplicationContext(_SubclassConfig) as context:
        assert isinstance(context.get_bean(_Repo), _RepoImpl)


def test_transient_bean_is_built_per_lookup() -> None:
    with ApplicationContext(_TransientConfig) as context:
        assert context.get_bean("repo") is not context.get_bean("repo")


def test_duplicate_bean_names_are_rejected() -> None:
    with pytest.raises(BeanDefinitionError, match="'dao'"):
        ApplicationContext(AppConfig, _DuplicateDaoConfig)


def test_deferred_register_and_refresh(settings: AppSettings) -> None:
    context = ApplicationContext(settings=settings)
    context.register(AppConfig)

    assert not context.active
    with pytest.raises(ContextStateError, match="not been refreshed"):
        context.get_bean("dao")

    context.refresh()

    assert context.active
    assert isinstance(context.get_bean("dao"), IndexDao)
    context.close()


def test_register_after_refresh_raises(context: ApplicationContext) -> None:
    with pytest.raises(ContextStateError, match="after refresh"):
        context.register(_RepoConfig)


def test_refresh_twice_raises(context: ApplicationContext) -> None:
    with pytest.raises(ContextStateError, match="multiple refresh"):
        context.refresh()


def test_get_bean_after_close_raises(settings: AppSettings) -> None:
    context = ApplicationContext(AppConfig, settings=settings)
    context.close()
    context.close()

    assert not context.active
    with pytest.raises(ContextStateError, match="closed"):
        context.get_bean("dao")


def test_close_without_refresh_is_noop() -> None:
    context = ApplicationContext()
    context.close()

    assert not context.active


def test_container_errors_propagate_unchanged() -> None:
    with pytest.raises(DIWireError):  # noqa: PT012
        with ApplicationContext(_MissingDependencyConfig) as context:
            context.get_bean("service")


def test_plain_protocol_bean_is_found_by_type_and_name() -> None:
    with ApplicationContext(_PortConfig) as context:
        by_type = context.get_bean(_Port)
        by_name = context.get_bean("port", _Port)

        assert by_type is by_name
        assert by_type.send("ping") == "sent:ping"


def test_plain_protocol_required_type_mismatch_raises() -> None:
    with ApplicationContext(_PortConfig) as context:
        with pytest.raises(BeanNotOfRequiredTypeError, match="'port'"):
            context.get_bean("port", _Repo)

    with ApplicationContext(_TypedDependencyConfig) as context:
        with pytest.raises(BeanNotOfRequiredTypeError, match="'repo'"):
            context.get_bean("repo", _Port)

        with pytest.raises(NoSuchBeanError, match="_Port"):
            context.get_bean(_Port)


def test_plain_typed_dependency_receives_declared_bean() -> None:
    with ApplicationContext(_TypedDependencyConfig) as context:
        service = context.get_bean("service", _Service)

        assert service.repo is context.get_bean("repo")
        assert context.get_bean(_Service) is service


def test_plain_typed_dependency_receives_primary_bean() -> None:
    with ApplicationContext(_PrimaryServiceConfig) as context:
        service = context.get_bean("service", _Service)

        assert service.repo is context.get_bean("primary_repo")


def test_failed_refresh_leaves_no_partial_beans(settings: AppSettings) -> None:
    context = ApplicationContext(settings=settings)
    context.register(AppConfig, _DuplicateDaoConfig)

    with pytest.raises(BeanDefinitionError, match="'dao' declared by _DuplicateDaoConfig"):
        context.refresh()

    assert not context.active
    assert context.bean_names() == []

    with pytest.raises(BeanDefinitionError, match="'dao' declared by _DuplicateDaoConfig"):
        context.refresh()
