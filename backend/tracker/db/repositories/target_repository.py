"""
Target repositories: monthly targets, annual Self Assessment targets and
distribution rules.
"""

from typing import Iterable, Optional, List, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete, and_, or_

from tracker.db.repositories.base_repository import BaseRepository
from tracker.models.target import MonthlyTarget, AnnualTarget, DistributionRule


class MonthlyTargetRepository(BaseRepository[MonthlyTarget]):
    """Repository for monthly target operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(MonthlyTarget, session)

    async def list_for_month(
        self,
        month: int,
        year: int,
        staff_id: Optional[int] = None,
        service_id: Optional[int] = None,
    ) -> List[MonthlyTarget]:
        """List target rows for a calendar month."""
        query = select(MonthlyTarget).where(
            and_(MonthlyTarget.month == month, MonthlyTarget.year == year)
        )
        if staff_id is not None:
            query = query.where(MonthlyTarget.staff_id == staff_id)
        if service_id is not None:
            query = query.where(MonthlyTarget.service_id == service_id)
        result = await self.session.execute(query.order_by(MonthlyTarget.staff_id, MonthlyTarget.service_id))
        return list(result.scalars().all())

    async def list_for_months(
        self,
        month_years: Iterable[Tuple[int, int]],
        staff_id: Optional[int] = None,
        service_id: Optional[int] = None,
    ) -> List[MonthlyTarget]:
        """List target rows for several (month, year) pairs."""
        pairs = list(month_years)
        if not pairs:
            return []
        query = select(MonthlyTarget).where(
            or_(*[and_(MonthlyTarget.month == month, MonthlyTarget.year == year) for month, year in pairs])
        )
        if staff_id is not None:
            query = query.where(MonthlyTarget.staff_id == staff_id)
        if service_id is not None:
            query = query.where(MonthlyTarget.service_id == service_id)
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def delete_for_month(
        self,
        staff_id: int,
        month: int,
        year: int,
        service_id: Optional[int] = None,
    ) -> int:
        """Delete a staff member's target rows for a month. Returns rows removed."""
        statement = delete(MonthlyTarget).where(
            and_(
                MonthlyTarget.staff_id == staff_id,
                MonthlyTarget.month == month,
                MonthlyTarget.year == year,
            )
        )
        if service_id is not None:
            statement = statement.where(MonthlyTarget.service_id == service_id)
        result = await self.session.execute(statement)
        await self.session.flush()
        return result.rowcount

    async def upsert(self, staff_id: int, service_id: int, month: int, year: int, target_value: int) -> MonthlyTarget:
        """Insert or update the row for (staff, service, month, year)."""
        result = await self.session.execute(
            select(MonthlyTarget).where(
                and_(
                    MonthlyTarget.staff_id == staff_id,
                    MonthlyTarget.service_id == service_id,
                    MonthlyTarget.month == month,
                    MonthlyTarget.year == year,
                )
            )
        )
        existing = result.scalar_one_or_none()
        if existing is None:
            return await self.create(
                staff_id=staff_id,
                service_id=service_id,
                month=month,
                year=year,
                target_value=target_value,
            )
        existing.target_value = target_value
        await self.session.flush()
        return existing


class AnnualTargetRepository(BaseRepository[AnnualTarget]):
    """Repository for annual Self Assessment targets."""

    def __init__(self, session: AsyncSession):
        super().__init__(AnnualTarget, session)

    async def get_for_staff(self, staff_id: int, year: int) -> Optional[AnnualTarget]:
        """Get the annual target for a staff member and financial year start."""
        result = await self.session.execute(
            select(AnnualTarget).where(
                and_(AnnualTarget.staff_id == staff_id, AnnualTarget.year == year)
            )
        )
        return result.scalar_one_or_none()

    async def list_for_year(self, year: int) -> List[AnnualTarget]:
        result = await self.session.execute(
            select(AnnualTarget).where(AnnualTarget.year == year).order_by(AnnualTarget.staff_id)
        )
        return list(result.scalars().all())

    async def upsert(self, staff_id: int, year: int, annual_target: int) -> AnnualTarget:
        """Insert or update the annual target for (staff, year)."""
        existing = await self.get_for_staff(staff_id, year)
        if existing is None:
            return await self.create(staff_id=staff_id, year=year, annual_target=annual_target)
        existing.annual_target = annual_target
        await self.session.flush()
        await self.session.refresh(existing)
        return existing


class DistributionRuleRepository(BaseRepository[DistributionRule]):
    """Repository for Self Assessment distribution rules."""

    def __init__(self, session: AsyncSession):
        super().__init__(DistributionRule, session)

    async def list_rules(self) -> List[DistributionRule]:
        """List rules in ID order."""
        result = await self.session.execute(select(DistributionRule).order_by(DistributionRule.id))
        return list(result.scalars().all())

    async def replace_all(self, rules: Iterable[dict]) -> List[DistributionRule]:
        """Replace the whole rule set."""
        await self.session.execute(delete(DistributionRule))
        await self.session.flush()
        created = [await self.create(**rule) for rule in rules]
        return created
