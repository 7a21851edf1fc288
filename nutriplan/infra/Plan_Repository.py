import logging
from pathlib import Path
from typing import List, Optional

from nutriplan.domain.NutritionalPlan import NutritionalPlan, PlanStatus
from nutriplan.infra import paths
from nutriplan.infra.json_store import STORE_LOCK, atomic_write, load_json
from nutriplan.utilities.constants import COPY_SUFFIX

logger = logging.getLogger(__name__)


class PlanRepository:
    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path else paths.PLANS_FILE

    def _load(self) -> List[NutritionalPlan]:
        plans = []
        for raw in load_json(self.path, []):
            if not isinstance(raw, dict):
                logger.warning("Skipping non-object plan record: %r", raw)
                continue
            try:
                plans.append(NutritionalPlan.from_dict(raw))
            except (ValueError, TypeError) as e:
                logger.warning("Skipping malformed plan %s: %s", raw.get("id"), e)
        return plans

    def _save(self, plans: List[NutritionalPlan]):
        atomic_write(self.path, [p.to_dict() for p in plans])

    def list(self, customer_id: Optional[str] = None) -> List[NutritionalPlan]:
        with STORE_LOCK:
            plans = self._load()
        if customer_id:
            plans = [p for p in plans if p.customer_id == customer_id]
        return sorted(plans, key=lambda p: p.created_at, reverse=True)

    def get(self, plan_id: str) -> Optional[NutritionalPlan]:
        with STORE_LOCK:
            return next((p for p in self._load() if p.id == plan_id), None)

    def save(self, plan: NutritionalPlan) -> NutritionalPlan:
        """Insert or replace a plan by id."""
        with STORE_LOCK:
            plans = self._load()
            for entry in plan.meal_entries:
                entry.nutritional_plan_id = plan.id
            idx = next((i for i, p in enumerate(plans) if p.id == plan.id), None)
            if idx is None:
                plans.append(plan)
            else:
                plan.touch()
                plans[idx] = plan
            self._save(plans)
        return plan

    def delete(self, plan_id: str) -> bool:
        with STORE_LOCK:
            plans = self._load()
            kept = [p for p in plans if p.id != plan_id]
            if len(kept) == len(plans):
                return False
            self._save(kept)
        return True

    def delete_for_customer(self, customer_id: str) -> int:
        with STORE_LOCK:
            plans = self._load()
            kept = [p for p in plans if p.customer_id != customer_id]
            removed = len(plans) - len(kept)
            if removed:
                self._save(kept)
        if removed:
            logger.info("Deleted %d plans of customer %s", removed, customer_id)
        return removed

    def copy(self, plan_id: str, name: Optional[str] = None, customer_id: Optional[str] = None) -> Optional[NutritionalPlan]:
        """Duplicate a plan with all its meal entries. Returns None when the source does not exist.

        The copy is named `<name> (Copia)` unless a name is given, and starts ACTIVO.
        """
        with STORE_LOCK:
            source = self.get(plan_id)
            if source is None:
                return None
            data = source.to_dict()
            for key in ("id", "meal_entries", "created_at", "updated_at"):
                data.pop(key)
            data["name"] = name or f"{source.name}{COPY_SUFFIX}"
            data["customer_id"] = customer_id or source.customer_id
            data["status"] = PlanStatus.ACTIVO
            clone = NutritionalPlan.from_dict(data)
            clone.replace_entries([e.copy_for(clone.id) for e in source.meal_entries])
            self.save(clone)
        logger.info("Plan %s copied to %s", plan_id, clone.id)
        return clone
