"""EvaluateRegistrationEligibility Use Case

Collects every reason a subject cannot register for a scheduled event and
picks the one to show first.
"""

from datetime import date
from typing import Callable
from libs.result import Result, Return
from src.app.services.event_catalog import EventCatalog
from src.app.services.subject_directory import SubjectDirectory
from src.app.use_cases.errors import failure
from src.domain.eligibility_clock import today
from src.domain.registration_eligibility import ConstraintEvaluator, SubjectDescriptor
from .dtos import RegistrationEligibilityQueryDTO, RegistrationEligibilityResponseDTO


class EvaluateRegistrationEligibility:
    """
    Use Case: Evaluate event registration eligibility

    Business Rules:
    1. Missing event or subject short-circuits (nothing else is checkable)
    2. Every other constraint is evaluated; none hides another
    3. The primary reason follows a fixed priority order
    4. Ineligibility is a normal result, not an error

    Flow:
    1. Load event and subject
    2. Load rank, existing registration and confirmed count
    3. Evaluate constraints
    """

    def __init__(
        self,
        event_catalog: EventCatalog,
        subject_directory: SubjectDirectory,
        evaluator: ConstraintEvaluator,
        clock: Callable[[], date] = today,
    ):
        self.event_catalog = event_catalog
        self.subject_directory = subject_directory
        self.evaluator = evaluator
        self.clock = clock

    async def execute(
        self, query: RegistrationEligibilityQueryDTO
    ) -> Result[RegistrationEligibilityResponseDTO]:
        try:
            evaluated_on = query.as_of or self.clock()

            # Step 1: Load event and subject
            event = await self.event_catalog.get_event(query.event_id)
            profile = await self.subject_directory.get_profile(query.subject_id)

            subject = None
            already_registered = False
            confirmed = 0

            # Step 2: Load the facts the constraints need
            if event is not None and profile is not None:
                subject = SubjectDescriptor(
                    subject_id=profile.subject_id,
                    birth_date=profile.birth_date,
                    current_rank=await self.subject_directory.get_current_rank(query.subject_id),
                )
                already_registered = await self.event_catalog.has_registration(
                    query.event_id, query.subject_id
                )
                if event.max_participants is not None:
                    confirmed = await self.event_catalog.count_confirmed_registrations(query.event_id)

            # Step 3: Evaluate
            eligibility = self.evaluator.evaluate(
                event=event,
                subject=subject,
                already_registered=already_registered,
                confirmed_registrations=confirmed,
                today=evaluated_on,
            )

            return Return.ok(
                RegistrationEligibilityResponseDTO(
                    event_id=query.event_id,
                    subject_id=query.subject_id,
                    eligible=eligibility.eligible,
                    primary_reason=eligibility.primary_reason.value if eligibility.primary_reason else None,
                    violations=[violation.value for violation in eligibility.ordered_violations()],
                )
            )

        except Exception as e:
            return Return.err(
                failure(
                    "EVALUATE_REGISTRATION_ELIGIBILITY_FAILED",
                    "Failed to evaluate registration eligibility",
                    e,
                )
            )
