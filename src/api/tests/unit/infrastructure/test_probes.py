"""Unit tests for infrastructure probes."""

from unittest.mock import MagicMock

from infrastructure.observability import (
    DefaultConnectionProbe,
    DefaultStartupProbe,
    ObservationContext,
)


class TestDefaultConnectionProbe:
    """Tests for DefaultConnectionProbe."""

    def test_engine_created(self):
        logger = MagicMock()

        DefaultConnectionProbe(logger=logger).engine_created(
            host="db", database="users", pool_size=5
        )

        logger.info.assert_called_once()
        assert logger.info.call_args.kwargs["pool_size"] == 5

    def test_context_is_attached(self):
        logger = MagicMock()
        probe = DefaultConnectionProbe(logger=logger).with_context(
            ObservationContext(request_id="req-1")
        )

        probe.engine_disposed()

        assert logger.info.call_args.kwargs == {"request_id": "req-1"}


class TestDefaultStartupProbe:
    """Tests for DefaultStartupProbe."""

    def test_destructive_operations_warning(self):
        logger = MagicMock()

        DefaultStartupProbe(logger=logger).destructive_operations_enabled(
            environment="Development"
        )

        logger.warning.assert_called_once()
        assert logger.warning.call_args.kwargs["environment"] == "Development"

    def test_service_started(self):
        logger = MagicMock()

        DefaultStartupProbe(logger=logger).service_started(
            version="0.1.0", environment="Production"
        )

        logger.info.assert_called_once()


class TestObservationContext:
    """Tests for ObservationContext."""

    def test_as_dict_omits_unset_values(self):
        context = ObservationContext(environment="Development", extra={"k": "v"})

        assert context.as_dict() == {"environment": "Development", "k": "v"}
