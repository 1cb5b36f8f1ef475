"""
Cart store

Cart state is an immutable snapshot. Every mutation is a pure reducer that
returns a new ``CartState`` with totals recomputed from the full set of
lines; ``CartStore`` holds the current snapshot and swaps it as a whole.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, FrozenSet, List, Mapping, Optional, Tuple

from src.domain.entities.cart_line import CartLine
from src.domain.repositories.product_repository import ProductPrice
from src.domain.value_objects.money import DEFAULT_CURRENCY, Money

logger = logging.getLogger(__name__)

CartListener = Callable[["CartState", "CartState"], None]


@dataclass(frozen=True)
class CartState:
    """Snapshot of the cart with totals consistent with its lines"""

    lines: Tuple[CartLine, ...]
    total_items: int
    total_price: Money

    @classmethod
    def empty(cls, currency: str = DEFAULT_CURRENCY) -> "CartState":
        """Create an empty cart"""
        return cls(lines=(), total_items=0, total_price=Money.zero(currency))

    @classmethod
    def from_lines(cls, lines, currency: str = DEFAULT_CURRENCY) -> "CartState":
        """Build a state from lines, recomputing both totals"""
        lines = tuple(lines)
        total_price = sum((line.line_total for line in lines), Money.zero(currency))
        return cls(
            lines=lines,
            total_items=sum(line.quantity for line in lines),
            total_price=total_price,
        )

    @property
    def subtotal(self) -> Money:
        """Item subtotal before delivery and discount"""
        return self.total_price

    @property
    def currency(self) -> str:
        return self.total_price.currency

    @property
    def is_empty(self) -> bool:
        return not self.lines

    @property
    def vendor_ids(self) -> FrozenSet[str]:
        """Distinct vendors represented in the cart"""
        return frozenset(line.vendor_id for line in self.lines)

    def get_line(self, product_id: str) -> Optional[CartLine]:
        """Line for a product, None when not in the cart"""
        for line in self.lines:
            if line.product_id == product_id:
                return line
        return None

    def lines_for_vendor(self, vendor_id: str) -> List[CartLine]:
        """Lines sold by one vendor"""
        return [line for line in self.lines if line.vendor_id == vendor_id]

    def vendor_subtotals(self) -> Dict[str, Money]:
        """Item subtotal per vendor"""
        subtotals: Dict[str, Money] = {}
        for line in self.lines:
            current = subtotals.get(line.vendor_id, Money.zero(self.currency))
            subtotals[line.vendor_id] = current + line.line_total
        return subtotals

    def to_dict(self) -> dict:
        """Serializable snapshot; totals are recomputed on load"""
        return {
            "currency": self.currency,
            "lines": [line.to_dict() for line in self.lines],
        }

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "CartState":
        """Restore a snapshot produced by ``to_dict``"""
        if not data or not data.get("lines"):
            return cls.empty((data or {}).get("currency") or DEFAULT_CURRENCY)
        currency = data.get("currency") or DEFAULT_CURRENCY
        return cls.from_lines(
            (CartLine.from_dict({"currency": currency, **line}) for line in data["lines"]),
            currency,
        )


def add_to_cart(state: CartState, item: CartLine) -> CartState:
    """Insert a product at quantity 1; no-op when it is already in the cart"""
    if state.get_line(item.product_id) is not None:
        return state
    return CartState.from_lines(state.lines + (item.with_quantity(1),), state.currency)


def update_quantity(state: CartState, product_id: str, delta: int) -> CartState:
    """Add ``delta`` to a line's quantity; the line is removed when it drops to zero"""
    line = state.get_line(product_id)
    if line is None:
        return state

    next_quantity = line.quantity + delta
    if next_quantity <= 0:
        lines = tuple(other for other in state.lines if other.product_id != product_id)
    else:
        lines = tuple(
            other.with_quantity(next_quantity) if other.product_id == product_id else other
            for other in state.lines
        )
    return CartState.from_lines(lines, state.currency)


def remove_from_cart(state: CartState, product_id: str) -> CartState:
    """Remove a product line"""
    if state.get_line(product_id) is None:
        return state
    return CartState.from_lines(
        (line for line in state.lines if line.product_id != product_id), state.currency
    )


def clear_cart(state: CartState) -> CartState:
    """Remove every line"""
    if state.is_empty:
        return state
    return CartState.empty(state.currency)


def reprice(state: CartState, prices: Mapping[str, ProductPrice]) -> CartState:
    """
    Refresh line prices from a catalog lookup

    Products missing from ``prices`` keep their current price.
    """
    changed = False
    lines = []
    for line in state.lines:
        price = prices.get(line.product_id)
        if price is None or (
            price.unit_price == line.unit_price and price.discount_price == line.discount_price
        ):
            lines.append(line)
            continue
        lines.append(line.with_prices(price.unit_price, price.discount_price))
        changed = True

    if not changed:
        return state
    return CartState.from_lines(lines, state.currency)


class CartStore:
    """Holds the current cart snapshot and notifies subscribers on change"""

    def __init__(self, initial: Optional[CartState] = None, currency: str = DEFAULT_CURRENCY):
        self._state = initial or CartState.empty(currency)
        self._listeners: List[CartListener] = []
        self._logger = logging.getLogger(self.__class__.__name__)

    @property
    def state(self) -> CartState:
        return self._state

    def subscribe(self, listener: CartListener) -> Callable[[], None]:
        """Register ``listener(previous, current)``; returns an unsubscribe callable"""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def dispatch(self, reducer: Callable[..., CartState], *args) -> CartState:
        """Apply a reducer and swap in the resulting snapshot"""
        previous = self._state
        current = reducer(previous, *args)
        if current is previous:
            return current

        self._state = current
        self._logger.debug(
            "Cart updated via %s: items=%d total=%s",
            reducer.__name__,
            current.total_items,
            current.total_price,
        )
        for listener in list(self._listeners):
            listener(previous, current)
        return current

    def add_to_cart(self, item: CartLine) -> CartState:
        return self.dispatch(add_to_cart, item)

    def update_quantity(self, product_id: str, delta: int) -> CartState:
        return self.dispatch(update_quantity, product_id, delta)

    def remove_from_cart(self, product_id: str) -> CartState:
        return self.dispatch(remove_from_cart, product_id)

    def clear_cart(self) -> CartState:
        return self.dispatch(clear_cart)

    def reprice(self, prices: Mapping[str, ProductPrice]) -> CartState:
        return self.dispatch(reprice, prices)
