"""
Unit Tests for DependencyContainer
"""

from unittest.mock import Mock

import pytest

from fileshare.application.dependency_container import (
    DependencyContainer,
    DependencyNotFoundError,
)
from fileshare.domain.file_storage import StorageIndex


class TestResolve:

    def test_instance_is_shared(self):
        container = DependencyContainer()
        index = Mock(spec=StorageIndex)

        container.register_instance(StorageIndex, index)

        assert container.resolve(StorageIndex) is index
        assert container.resolve(StorageIndex) is index

    def test_factory_runs_once_on_first_resolve(self):
        container = DependencyContainer()
        factory = Mock(return_value=Mock(spec=StorageIndex))

        container.register_factory(StorageIndex, factory)
        factory.assert_not_called()

        first = container.resolve(StorageIndex)
        second = container.resolve(StorageIndex)

        assert first is second
        factory.assert_called_once_with()

    def test_failing_factory_is_retried(self):
        container = DependencyContainer()
        index = Mock(spec=StorageIndex)
        factory = Mock(side_effect=[OSError("read-only filesystem"), index])
        container.register_factory(StorageIndex, factory)

        with pytest.raises(OSError):
            container.resolve(StorageIndex)

        assert container.resolve(StorageIndex) is index

    def test_factory_may_resolve_other_services(self):
        container = DependencyContainer()
        container.register_instance(str, "/srv/share")
        container.register_factory(list, lambda: [container.resolve(str)])

        assert container.resolve(list) == ["/srv/share"]

    def test_unregistered_raises(self):
        with pytest.raises(DependencyNotFoundError):
            DependencyContainer().resolve(StorageIndex)

    def test_is_registered(self):
        container = DependencyContainer()
        assert container.is_registered(StorageIndex) is False

        container.register_factory(StorageIndex, Mock)

        assert container.is_registered(StorageIndex) is True


class TestOverride:

    def test_override_is_scoped(self):
        container = DependencyContainer()
        real = Mock(spec=StorageIndex)
        fake = Mock(spec=StorageIndex)
        container.register_instance(StorageIndex, real)

        with container.overridden(StorageIndex, fake):
            assert container.resolve(StorageIndex) is fake

        assert container.resolve(StorageIndex) is real


class TestShutdown:

    def test_closes_services_newest_first_once(self):
        container = DependencyContainer()
        closed = []
        first = Mock(close=Mock(side_effect=lambda: closed.append("first")))
        second = Mock(close=Mock(side_effect=lambda: closed.append("second")))
        container.register_instance(StorageIndex, first)
        container.register_factory(list, lambda: second)
        container.resolve(list)

        container.shutdown()
        container.shutdown()

        assert closed == ["second", "first"]

    def test_unbuilt_factories_are_not_created(self):
        container = DependencyContainer()
        factory = Mock()
        container.register_factory(StorageIndex, factory)

        container.shutdown()

        factory.assert_not_called()

    def test_close_failure_does_not_stop_shutdown(self, caplog):
        container = DependencyContainer()
        survivor = Mock()
        container.register_instance(StorageIndex, survivor)
        container.register_instance(list, Mock(close=Mock(side_effect=OSError("busy"))))

        with caplog.at_level("WARNING"):
            container.shutdown()

        survivor.close.assert_called_once_with()
        assert "busy" in caplog.text

    def test_services_without_close_are_skipped(self):
        container = DependencyContainer()
        container.register_instance(str, "plain value")

        container.shutdown()
