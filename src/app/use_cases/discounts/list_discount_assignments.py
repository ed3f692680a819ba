"""List Discount Assignments Use Case"""

from libs.result import Result, Return
from src.app.repositories.discount_assignment_repository import DiscountAssignmentRepository
from src.app.use_cases.errors import failure
from .dtos import DiscountAssignmentDTO, DiscountAssignmentListDTO, ListDiscountAssignmentsQueryDTO


class ListDiscountAssignments:
    """Read-only listing of issued assignments, newest first"""

    def __init__(self, assignment_repo: DiscountAssignmentRepository):
        self.assignment_repo = assignment_repo

    async def execute(self, query: ListDiscountAssignmentsQueryDTO) -> Result[DiscountAssignmentListDTO]:
        try:
            assignments = await self.assignment_repo.list_assignments(
                subject_id=query.subject_id,
                limit=query.limit,
                offset=query.offset,
            )
        except Exception as e:
            return Return.err(failure("LIST_DISCOUNT_ASSIGNMENTS_FAILED", "Failed to list assignments", e))

        return Return.ok(
            DiscountAssignmentListDTO(
                assignments=[
                    DiscountAssignmentDTO(
                        assignment_id=assignment.id,
                        rule_id=assignment.rule_id,
                        event_id=assignment.event_id,
                        subject_id=assignment.subject_id,
                        template_id=assignment.template_id,
                        code_id=assignment.code_id,
                        assigned_at=assignment.assigned_at,
                        expires_at=assignment.expires_at,
                    )
                    for assignment in assignments
                ],
                limit=query.limit,
                offset=query.offset,
            )
        )
