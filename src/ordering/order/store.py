"""Transaction Store: persistence of Order records.

A thin adapter over the Order repository: no business rules live here. Calls
made inside a unit of work share its session with the Inventory Ledger.
"""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from ordering.errors import OrderNotFound
from ordering.order.order import Order

_PAGE_SIZE = 100


def _newest_first(orders):
    return sorted(orders, key=lambda order: order.created_at, reverse=True)


class TransactionStore:
    @property
    def _repo(self):
        return current_domain.repository_for(Order)

    def add(self, order: Order) -> Order:
        self._repo.add(order)
        return order

    def get(self, order_id) -> Order:
        try:
            return self._repo.get(str(order_id))
        except ObjectNotFoundError as exc:
            raise OrderNotFound(f"Order {order_id} not found", order_id=str(order_id)) from exc

    def _collect(self, **criteria) -> list[Order]:
        """Page through every order matching ``criteria``, newest first."""
        query = self._repo._dao.query.filter(**criteria).order_by("-created_at")
        orders, offset = [], 0
        while True:
            page = query.offset(offset).limit(_PAGE_SIZE).all()
            orders.extend(page.items)
            offset += _PAGE_SIZE
            if not page.items or offset >= page.total:
                return orders

    def for_buyer(self, user_id) -> list[Order]:
        return _newest_first(self._collect(buyer_id=str(user_id)))

    def for_seller(self, user_id) -> list[Order]:
        return _newest_first(self._collect(seller_id=str(user_id)))

    def for_party(self, user_id) -> list[Order]:
        """Orders where ``user_id`` is either buyer or seller."""
        orders = {str(order.id): order for order in self._collect(buyer_id=str(user_id))}
        for order in self._collect(seller_id=str(user_id)):
            orders.setdefault(str(order.id), order)
        return _newest_first(orders.values())
