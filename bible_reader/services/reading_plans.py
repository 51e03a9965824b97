# services/reading_plans.py
import logging

from postgrest.exceptions import APIError

from .annotations import backend_call, require_user, utcnow
from ..schemas.annotation_schemas import ReadingPlanRead, ReadingProgressRead

logger = logging.getLogger(__name__)

PLANS_TABLE = 'reading_plans'
PROGRESS_TABLE = 'reading_progress'
PLAN_COLUMNS = 'id, name, description, duration_days, is_public'
PROGRESS_COLUMNS = 'user_id, plan_id, day_completed'

# Postgres invalid_text_representation, raised for a malformed uuid
INVALID_TEXT_REPRESENTATION = '22P02'


class ReadingPlanStore:
    """Public reading plans and the signed-in user's progress through them."""

    def __init__(self, client, auth=None):
        self.client = client
        self.auth = auth

    @backend_call('list reading plans')
    def list_public_plans(self):
        response = self.client.table(PLANS_TABLE).select(PLAN_COLUMNS)\
            .eq('is_public', True)\
            .order('name')\
            .execute()
        return [ReadingPlanRead.model_validate(row) for row in response.data]

    @backend_call('read reading plan')
    def get_plan(self, plan_id):
        try:
            response = self.client.table(PLANS_TABLE).select(PLAN_COLUMNS)\
                .eq('id', plan_id)\
                .limit(1)\
                .execute()
        except APIError as e:
            # A plan id that is not a UUID cannot name a plan
            if e.code == INVALID_TEXT_REPRESENTATION:
                return None
            raise
        if not response.data:
            return None
        return ReadingPlanRead.model_validate(response.data[0])

    @backend_call('read reading progress')
    def get_progress(self, plan_id):
        user_id = require_user(self.auth)
        response = self.client.table(PROGRESS_TABLE).select(PROGRESS_COLUMNS)\
            .eq('user_id', user_id)\
            .eq('plan_id', plan_id)\
            .limit(1)\
            .execute()
        if not response.data:
            return None
        return ReadingProgressRead.model_validate(response.data[0])

    @backend_call('list reading progress')
    def list_progress(self):
        user_id = require_user(self.auth)
        response = self.client.table(PROGRESS_TABLE).select(PROGRESS_COLUMNS)\
            .eq('user_id', user_id)\
            .execute()
        return [ReadingProgressRead.model_validate(row) for row in response.data]

    def start_plan(self, plan_id):
        """Start a plan at day 0; restarting an active plan keeps its progress."""
        require_user(self.auth)
        existing = self.get_progress(plan_id)
        if existing is not None:
            return existing
        return self._write_progress(plan_id, 0)

    def complete_day(self, plan_id, day):
        """Record ``day`` as completed. Progress never moves backwards."""
        require_user(self.auth)
        plan = self.get_plan(plan_id)
        if plan is None:
            return None
        day = max(0, min(day, plan.duration_days))

        current = self.get_progress(plan_id)
        if current is not None and current.day_completed >= day:
            return current
        return self._write_progress(plan_id, day)

    @backend_call('save reading progress')
    def _write_progress(self, plan_id, day):
        user_id = require_user(self.auth)
        response = self.client.table(PROGRESS_TABLE)\
            .upsert(
                {'user_id': user_id, 'plan_id': plan_id, 'day_completed': day, 'updated_at': utcnow()},
                on_conflict='user_id,plan_id',
            )\
            .execute()
        logger.info(f"User {user_id} progress on plan {plan_id}: day {day}")
        if response.data:
            return ReadingProgressRead.model_validate(response.data[0])
        return ReadingProgressRead(user_id=user_id, plan_id=plan_id, day_completed=day)
