"""
Self Assessment controller.
"""

from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.controllers.base_controller import BaseController
from tracker.core.clock import Clock
from tracker.core.events import EventBus
from tracker.services.self_assessment_service import SelfAssessmentService
from tracker.schemas.target import (
    AllocationRequest,
    AllocationResponse,
    AnnualTargetResponse,
    AnnualTargetSave,
    AnnualTargetSaveResponse,
    DistributionRuleCreate,
    DistributionRuleResponse,
    SelfAssessmentProgressResponse,
)


class SelfAssessmentController(BaseController):
    """Controller for annual Self Assessment targets."""

    def __init__(self, session: AsyncSession, clock: Clock, event_bus: Optional[EventBus] = None):
        self.self_assessment_service = SelfAssessmentService(session, clock, event_bus)

    async def get_rules(self) -> List[DistributionRuleResponse]:
        return await self.self_assessment_service.get_rules()

    async def replace_rules(self, rules: List[DistributionRuleCreate]) -> List[DistributionRuleResponse]:
        return await self.self_assessment_service.replace_rules(rules)

    async def get_annual_target(self, staff_id: int, financial_year_start: int) -> Optional[AnnualTargetResponse]:
        """Get the stored annual target."""
        return await self.self_assessment_service.get_annual_target(staff_id, financial_year_start)

    async def save_annual_target(self, staff_id: int, target_data: AnnualTargetSave) -> AnnualTargetSaveResponse:
        """Save the annual target and recalculate the monthly allocation."""
        return await self.self_assessment_service.save_annual_target(staff_id, target_data)

    async def preview_allocation(self, staff_id: int, request: AllocationRequest) -> AllocationResponse:
        """Calculate an allocation without saving it."""
        return await self.self_assessment_service.calculate_allocation(
            staff_id,
            request.financial_year_start,
            annual_target=request.annual_target,
            overrides=request.overrides,
        )

    async def get_progress(self, financial_year_start: int) -> SelfAssessmentProgressResponse:
        return await self.self_assessment_service.get_progress(financial_year_start)
