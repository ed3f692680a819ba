"""Integration tests for Eligibility API endpoints"""

import pytest
from datetime import date
from httpx import AsyncClient

from src.domain.registration_eligibility import EventStatus
from src.domain.school_records import EventRegistration, RegistrationStatus, ScheduledEvent


class TestEligibilityAPIIntegration:
    """Integration test suite for the /eligibility endpoints"""

    @pytest.mark.asyncio
    async def test_payment_eligibility_paid_monthly(self, client: AsyncClient, seed):
        # Arrange
        await seed.student()
        await seed.payment(payment_date=date(2024, 1, 1))

        # Act
        response = await client.get(
            "/eligibility/payments/student_1", params={"as_of": "2024-01-20"}
        )

        # Assert
        assert response.status_code == 200
        data = response.json()
        assert data["eligible"] is True
        assert data["reason"] == "PaidMonthly"
        assert data["last_payment_date"] == "2024-01-01"

    @pytest.mark.asyncio
    async def test_payment_eligibility_without_payments_is_trial(self, client: AsyncClient, seed):
        await seed.student()

        response = await client.get("/eligibility/payments/student_1")

        assert response.status_code == 200
        assert response.json()["eligible"] is True
        assert response.json()["reason"] == "Trial"

    @pytest.mark.asyncio
    async def test_registration_full_event(self, client: AsyncClient, seed, db_session):
        """
        Given: An open event whose single seat is confirmed by another student
        When: student_1 asks whether they can register
        Then: Not eligible, primary reason event_full
        """
        # Arrange
        await seed.student()
        await seed.student("student_2")
        db_session.add(
            ScheduledEvent(
                id="event_1",
                title="Spring tournament",
                status=EventStatus.REGISTRATION_OPEN,
                max_participants=1,
            )
        )
        db_session.add(
            EventRegistration(
                event_id="event_1", student_id="student_2", registration_status=RegistrationStatus.CONFIRMED
            )
        )
        await db_session.commit()

        # Act
        response = await client.get(
            "/eligibility/events/event_1/subjects/student_1", params={"as_of": "2024-04-01"}
        )

        # Assert
        assert response.status_code == 200
        data = response.json()
        assert data["eligible"] is False
        assert data["primary_reason"] == "event_full"
        assert data["violations"] == ["event_full"]

    @pytest.mark.asyncio
    async def test_registration_unknown_event_returns_404(self, client: AsyncClient, seed):
        await seed.student()

        response = await client.get("/eligibility/events/missing/subjects/student_1")

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "EVENT_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_registration_unknown_subject_returns_404(self, client: AsyncClient, db_session):
        db_session.add(
            ScheduledEvent(id="event_1", title="Seminar", status=EventStatus.PUBLISHED)
        )
        await db_session.commit()

        response = await client.get("/eligibility/events/event_1/subjects/ghost")

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "SUBJECT_NOT_FOUND"
