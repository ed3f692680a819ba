"""Unit tests for RecordDomainEvent use case"""

import pytest
from unittest.mock import AsyncMock, MagicMock

from src.app.services.subject_directory import SubjectProfile
from src.app.use_cases.discounts import RecordDomainEvent, RecordDomainEventCommandDTO
from src.domain.domain_event import DomainEventKind


@pytest.fixture
def mock_event_repo():
    repo = MagicMock()
    repo.create = AsyncMock(side_effect=lambda event: event)
    return repo


@pytest.fixture
def mock_subject_directory():
    directory = MagicMock()
    directory.get_profile = AsyncMock(
        return_value=SubjectProfile(subject_id="student_1", family_id="family_1", birth_date=None)
    )
    return directory


@pytest.fixture
def use_case(mock_uow, mock_event_repo, mock_subject_directory):
    return RecordDomainEvent(
        uow=mock_uow,
        event_repo=mock_event_repo,
        subject_directory=mock_subject_directory,
    )


@pytest.mark.asyncio
class TestRecordDomainEvent:

    async def test_records_unprocessed_event(self, use_case, mock_uow, mock_event_repo):
        command = RecordDomainEventCommandDTO(
            kind=DomainEventKind.RANK_PROMOTION,
            subject_id="student_1",
            payload={"new_belt_rank": "green"},
        )

        result = await use_case.execute(command)

        assert result.is_ok()
        assert result.value.kind == "belt_promotion"
        assert result.value.payload == {"new_belt_rank": "green"}
        assert result.value.processed_at is None
        mock_event_repo.create.assert_called_once()
        mock_uow.commit.assert_called_once()

    async def test_unknown_subject(self, use_case, mock_uow, mock_event_repo, mock_subject_directory):
        mock_subject_directory.get_profile = AsyncMock(return_value=None)

        result = await use_case.execute(
            RecordDomainEventCommandDTO(kind=DomainEventKind.BIRTHDAY, subject_id="ghost")
        )

        assert result.error.code == "SUBJECT_NOT_FOUND"
        mock_event_repo.create.assert_not_called()
        mock_uow.commit.assert_not_called()

    async def test_storage_failure_rolls_back(self, use_case, mock_uow, mock_event_repo):
        mock_event_repo.create = AsyncMock(side_effect=RuntimeError("insert failed"))

        result = await use_case.execute(
            RecordDomainEventCommandDTO(kind=DomainEventKind.ENROLLMENT, subject_id="student_1")
        )

        assert result.error.code == "RECORD_DOMAIN_EVENT_FAILED"
        mock_uow.rollback.assert_called_once()
