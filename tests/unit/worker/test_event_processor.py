"""Unit tests for DomainEventProcessorWorker

Tests cover:
- Worker initialization with configuration
- run_once processes each unprocessed event in its own session
- Failed events are counted and do not stop the batch
- Disabled processing is a no-op
- Shutdown disposes the engine
"""

import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from libs.result import Error, Return
from src.app.use_cases.discounts import (
    IssuanceOutcome,
    IssuedCodeDTO,
    ProcessDomainEventResponseDTO,
    RuleOutcomeDTO,
)
from src.worker.event_processor import DomainEventProcessorWorker


def configure(mock_app_config, enabled=True):
    mock_app_config.DB_URI = "sqlite+aiosqlite:///./test.db"
    mock_app_config.EVENT_PROCESSING_ENABLED = enabled
    mock_app_config.EVENT_PROCESSING_BATCH_SIZE = 25
    mock_app_config.EVENT_PROCESSING_INTERVAL_SECONDS = 30
    mock_app_config.DISCOUNT_NOTIFICATION_WEBHOOK = None


def mock_session_factory(mock_sessionmaker):
    session = MagicMock()
    session.__aenter__ = AsyncMock(return_value=session)
    session.__aexit__ = AsyncMock()
    factory = MagicMock(return_value=session)
    mock_sessionmaker.return_value = factory
    return factory


def processed(event_id, issued=0, codes_per_rule=1):
    outcomes = [
        RuleOutcomeDTO(
            rule_id=f"rule_{index}",
            outcome=IssuanceOutcome.ISSUED,
            code_id=f"code_{index}_0",
            codes=[
                IssuedCodeDTO(template_id=f"tpl_{number}", code_id=f"code_{index}_{number}", code=f"AUTOCODE{number}")
                for number in range(codes_per_rule)
            ],
        )
        for index in range(issued)
    ]
    return Return.ok(ProcessDomainEventResponseDTO(event_id=event_id, outcomes=outcomes))


class TestDomainEventProcessorWorkerInit:

    @patch("src.worker.event_processor.ApplicationConfig")
    @patch("src.worker.event_processor.create_async_engine")
    def test_initializes_with_default_config(self, mock_create_engine, mock_app_config):
        """
        Given: No custom configuration provided
        When: Worker is initialized
        Then: Uses DB URI and batch size from ApplicationConfig
        """
        # Arrange
        configure(mock_app_config)
        mock_create_engine.return_value = MagicMock()

        # Act
        worker = DomainEventProcessorWorker()

        # Assert
        assert worker.db_uri == "sqlite+aiosqlite:///./test.db"
        assert worker.batch_size == 25
        mock_create_engine.assert_called_once()

    @patch("src.worker.event_processor.ApplicationConfig")
    @patch("src.worker.event_processor.create_async_engine")
    def test_initializes_with_overrides(self, mock_create_engine, mock_app_config):
        configure(mock_app_config)
        notifier = MagicMock()

        worker = DomainEventProcessorWorker(
            db_uri="postgresql+asyncpg://custom@localhost/db", batch_size=5, notification_service=notifier
        )

        assert worker.db_uri == "postgresql+asyncpg://custom@localhost/db"
        assert worker.batch_size == 5
        assert worker.notification_service is notifier


@pytest.mark.asyncio
class TestDomainEventProcessorWorkerRunOnce:

    @patch("src.worker.event_processor.ApplicationConfig")
    @patch("src.worker.event_processor.build_process_domain_event")
    @patch("src.worker.event_processor.SqlAlchemyDomainEventRepository")
    @patch("src.worker.event_processor.create_async_engine")
    @patch("src.worker.event_processor.sessionmaker")
    async def test_processes_every_unprocessed_event(
        self,
        mock_sessionmaker,
        mock_create_engine,
        mock_event_repo_class,
        mock_build_process,
        mock_app_config,
    ):
        """
        Given: Three unprocessed events, one of which fails
        When: run_once is called
        Then: Each event gets its own session and use case; failures and every issued code are counted
        """
        # Arrange
        configure(mock_app_config)
        factory = mock_session_factory(mock_sessionmaker)

        mock_event_repo = MagicMock()
        mock_event_repo.list_unprocessed = AsyncMock(
            return_value=[MagicMock(id="evt_1"), MagicMock(id="evt_2"), MagicMock(id="evt_3")]
        )
        mock_event_repo_class.return_value = mock_event_repo

        mock_use_case = MagicMock()
        mock_use_case.execute = AsyncMock(
            side_effect=[
                processed("evt_1", issued=2),
                Return.err(Error(code="PROCESS_DOMAIN_EVENT_FAILED", message="boom")),
                processed("evt_3", issued=1, codes_per_rule=2),
            ]
        )
        mock_build_process.return_value = mock_use_case

        # Act
        worker = DomainEventProcessorWorker(notification_service=MagicMock())
        result = await worker.run_once()

        # Assert
        assert result.total_events == 3
        assert result.processed == 2
        assert result.failed == 1
        assert result.codes_issued == 4
        mock_event_repo.list_unprocessed.assert_called_once_with(limit=25)
        assert mock_build_process.call_count == 3
        assert factory.call_count == 4
        processed_ids = [call.args[0].event_id for call in mock_use_case.execute.call_args_list]
        assert processed_ids == ["evt_1", "evt_2", "evt_3"]

    @patch("src.worker.event_processor.ApplicationConfig")
    @patch("src.worker.event_processor.build_process_domain_event")
    @patch("src.worker.event_processor.SqlAlchemyDomainEventRepository")
    @patch("src.worker.event_processor.create_async_engine")
    @patch("src.worker.event_processor.sessionmaker")
    async def test_unexpected_exception_is_counted(
        self,
        mock_sessionmaker,
        mock_create_engine,
        mock_event_repo_class,
        mock_build_process,
        mock_app_config,
    ):
        configure(mock_app_config)
        mock_session_factory(mock_sessionmaker)
        mock_event_repo = MagicMock()
        mock_event_repo.list_unprocessed = AsyncMock(return_value=[MagicMock(id="evt_1")])
        mock_event_repo_class.return_value = mock_event_repo
        mock_build_process.side_effect = RuntimeError("engine gone")

        worker = DomainEventProcessorWorker(notification_service=MagicMock())
        result = await worker.run_once()

        assert result.failed == 1
        assert result.processed == 0

    @patch("src.worker.event_processor.ApplicationConfig")
    @patch("src.worker.event_processor.SqlAlchemyDomainEventRepository")
    @patch("src.worker.event_processor.create_async_engine")
    @patch("src.worker.event_processor.sessionmaker")
    async def test_disabled_processing_skips(
        self, mock_sessionmaker, mock_create_engine, mock_event_repo_class, mock_app_config
    ):
        configure(mock_app_config, enabled=False)
        mock_session_factory(mock_sessionmaker)

        worker = DomainEventProcessorWorker(notification_service=MagicMock())
        result = await worker.run_once()

        assert result.total_events == 0
        mock_event_repo_class.assert_not_called()


@pytest.mark.asyncio
class TestDomainEventProcessorWorkerShutdown:

    @patch("src.worker.event_processor.ApplicationConfig")
    @patch("src.worker.event_processor.create_async_engine")
    async def test_shutdown_disposes_engine(self, mock_create_engine, mock_app_config):
        configure(mock_app_config)
        mock_engine = MagicMock()
        mock_engine.dispose = AsyncMock()
        mock_create_engine.return_value = mock_engine

        worker = DomainEventProcessorWorker(notification_service=MagicMock())
        await worker.shutdown()

        mock_engine.dispose.assert_called_once()
