import logging
from pathlib import Path
from typing import List, Optional

from nutriplan.domain.Customer import Customer
from nutriplan.infra import paths
from nutriplan.infra.json_store import STORE_LOCK, atomic_write, load_json
from nutriplan.utilities.constants import CUSTOMER_SEARCH_MIN_LENGTH

logger = logging.getLogger(__name__)


class DuplicateIdCardError(ValueError):
    def __init__(self, id_card: str, message: str = "Ya existe un cliente con esta cédula"):
        super().__init__(message)
        self.id_card = id_card


class CustomerRepository:
    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path else paths.CUSTOMERS_FILE

    def _load(self) -> List[Customer]:
        customers = []
        for raw in load_json(self.path, []):
            try:
                customers.append(Customer.from_dict(raw))
            except (ValueError, TypeError) as e:
                logger.warning("Skipping malformed customer record %s: %s", raw.get("id") if isinstance(raw, dict) else raw, e)
        return customers

    def _save(self, customers: List[Customer]):
        atomic_write(self.path, [c.to_dict() for c in customers])

    def list(self, search: Optional[str] = None) -> List[Customer]:
        """All customers, newest first. Searches of 2+ characters filter by cédula or name."""
        with STORE_LOCK:
            customers = self._load()
        term = (search or "").strip().lower()
        if len(term) >= CUSTOMER_SEARCH_MIN_LENGTH:
            customers = [c for c in customers
                         if term in (c.id_card or "").lower()
                         or term in (c.first_name or "").lower()
                         or term in (c.last_name or "").lower()]
        return sorted(customers, key=lambda c: c.created_at, reverse=True)

    def get(self, customer_id: str) -> Optional[Customer]:
        with STORE_LOCK:
            return next((c for c in self._load() if c.id == customer_id), None)

    def create(self, customer: Customer) -> Customer:
        with STORE_LOCK:
            customers = self._load()
            if any(c.id_card == customer.id_card for c in customers):
                raise DuplicateIdCardError(customer.id_card)
            customer.refresh_imc()
            customers.append(customer)
            self._save(customers)
        logger.info("Customer %s created", customer.id)
        return customer

    def update(self, customer: Customer) -> Customer:
        """Replace the stored record; raises KeyError when the customer does not exist."""
        with STORE_LOCK:
            customers = self._load()
            idx = next((i for i, c in enumerate(customers) if c.id == customer.id), None)
            if idx is None:
                raise KeyError(customer.id)
            if any(c.id_card == customer.id_card and c.id != customer.id for c in customers):
                raise DuplicateIdCardError(customer.id_card, "Ya existe otro cliente con esta cédula")
            customer.refresh_imc()
            customer.touch()
            customers[idx] = customer
            self._save(customers)
        return customer

    def delete(self, customer_id: str) -> bool:
        with STORE_LOCK:
            customers = self._load()
            kept = [c for c in customers if c.id != customer_id]
            if len(kept) == len(customers):
                return False
            self._save(kept)
        logger.info("Customer %s deleted", customer_id)
        return True
