"""
Order transactions: create, grouped create, cancel, cancel-all and modify.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, List, Mapping, Tuple

from lighter_signer.constants import (
    DEFAULT_ORDER_EXPIRY_MS,
    DEFAULT_TX_EXPIRY_MS,
    EXPIRY_DEFAULT,
    MAX_CLIENT_ORDER_INDEX,
    MAX_GROUPED_ORDERS,
    MAX_MARKET_INDEX,
    MAX_ORDER_BASE_AMOUNT,
    MAX_ORDER_EXPIRY,
    MAX_ORDER_INDEX,
    MAX_ORDER_PRICE,
    MAX_ORDER_TRIGGER_PRICE,
    MAX_TIMESTAMP,
    MIN_GROUPED_ORDERS,
    MIN_MARKET_INDEX,
    MIN_ORDER_BASE_AMOUNT,
    MIN_ORDER_EXPIRY,
    MIN_ORDER_INDEX,
    MIN_ORDER_PRICE,
    MIN_ORDER_TRIGGER_PRICE,
    NIL_CLIENT_ORDER_INDEX,
    NIL_ORDER_BASE_AMOUNT,
    NIL_ORDER_EXPIRY,
    NIL_TRIGGER_PRICE,
    STOP_LOSS_TYPES,
    TAKE_PROFIT_TYPES,
    TRIGGER_ORDER_TYPES,
    CancelAllTimeInForce,
    GroupingType,
    OrderType,
    TimeInForce,
    TxType,
)
from lighter_signer.crypto.field import FieldElement, from_int, from_uint
from lighter_signer.errors import ValidationError
from lighter_signer.types.base import TxInfo, WireFields, normalize_flag
from lighter_signer.utils.validation import (
    fail,
    require_flag,
    require_one_of,
    require_optional_range,
    require_range,
)


_ORDER_KEY_ALIASES = {
    "marketIndex": "market_index",
    "clientOrderIndex": "client_order_index",
    "baseAmount": "base_amount",
    "isAsk": "is_ask",
    "type": "order_type",
    "timeInForce": "time_in_force",
    "reduceOnly": "reduce_only",
    "triggerPrice": "trigger_price",
    "orderExpiry": "order_expiry",
}


def _resolve_order_expiry(order_expiry: int, now_ms: int, horizon_ms: int) -> int:
    if order_expiry == EXPIRY_DEFAULT:
        return now_ms + horizon_ms
    return order_expiry


@dataclass(frozen=True, kw_only=True)
class OrderLeg:
    """
    Order parameters shared by a single order and each leg of a grouped order.

    ``order_expiry`` is in Unix milliseconds; EXPIRY_DEFAULT resolves to
    28 days from signing time and NIL_ORDER_EXPIRY means no expiry.
    """

    market_index: int
    client_order_index: int = NIL_CLIENT_ORDER_INDEX
    base_amount: int
    price: int
    is_ask: int
    order_type: int = OrderType.LIMIT
    time_in_force: int = TimeInForce.GOOD_TILL_TIME
    reduce_only: int = 0
    trigger_price: int = NIL_TRIGGER_PRICE
    order_expiry: int = EXPIRY_DEFAULT

    def __post_init__(self) -> None:
        normalize_flag(self, "is_ask", "reduce_only")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "OrderLeg":
        """
        Build a leg from host input.

        Keys are either the field names or the camelCase names hosts send
        (``marketIndex``, ``type``, ``orderExpiry`` ...).

        Raises:
            ValidationError: If a key is unknown or a required key is missing
        """
        if not isinstance(data, Mapping):
            fail("order must be an object", "ORDER_INVALID", "orders")
        names = {f.name for f in dataclasses.fields(cls)}
        params: Dict[str, Any] = {}
        for key, value in data.items():
            name = _ORDER_KEY_ALIASES.get(key, key)
            if name not in names:
                fail(f"unknown order field: {key}", "ORDER_FIELD_UNKNOWN", "orders", key)
            params[name] = value
        missing = sorted(
            f.name
            for f in dataclasses.fields(cls)
            if f.name not in params
            and f.default is dataclasses.MISSING
            and f.default_factory is dataclasses.MISSING
        )
        if missing:
            fail(f"order is missing {', '.join(missing)}", "ORDER_FIELD_MISSING", "orders", missing)
        return cls(**params)

    def validate_order(self, *, allow_nil_base_amount: bool = False) -> None:
        require_range(self.market_index, MIN_MARKET_INDEX, MAX_MARKET_INDEX, "market_index")
        require_range(self.client_order_index, NIL_CLIENT_ORDER_INDEX, MAX_CLIENT_ORDER_INDEX, "client_order_index")
        if allow_nil_base_amount:
            require_optional_range(
                self.base_amount,
                NIL_ORDER_BASE_AMOUNT,
                MIN_ORDER_BASE_AMOUNT,
                MAX_ORDER_BASE_AMOUNT,
                "base_amount",
            )
        else:
            require_range(self.base_amount, MIN_ORDER_BASE_AMOUNT, MAX_ORDER_BASE_AMOUNT, "base_amount")
        require_range(self.price, MIN_ORDER_PRICE, MAX_ORDER_PRICE, "price")
        require_flag(self.is_ask, "is_ask")
        require_one_of(self.order_type, set(OrderType), "order_type")
        require_one_of(self.time_in_force, set(TimeInForce), "time_in_force")
        require_flag(self.reduce_only, "reduce_only")
        require_optional_range(
            self.trigger_price,
            NIL_TRIGGER_PRICE,
            MIN_ORDER_TRIGGER_PRICE,
            MAX_ORDER_TRIGGER_PRICE,
            "trigger_price",
        )
        require_optional_range(
            self.order_expiry,
            NIL_ORDER_EXPIRY,
            MIN_ORDER_EXPIRY,
            MAX_ORDER_EXPIRY,
            "order_expiry",
        )

    def order_elements(self) -> List[FieldElement]:
        return [
            from_uint(self.market_index, 8),
            from_int(self.client_order_index, 64),
            from_int(self.base_amount, 64),
            from_uint(self.price, 32),
            from_uint(self.is_ask, 8),
            from_uint(self.order_type, 8),
            from_uint(self.time_in_force, 8),
            from_uint(self.reduce_only, 8),
            from_uint(self.trigger_price, 32),
            from_int(self.order_expiry, 64),
        ]

    def order_wire(self) -> WireFields:
        return [
            ("MarketIndex", self.market_index),
            ("ClientOrderIndex", self.client_order_index),
            ("BaseAmount", self.base_amount),
            ("Price", self.price),
            ("IsAsk", self.is_ask),
            ("Type", self.order_type),
            ("TimeInForce", self.time_in_force),
            ("ReduceOnly", self.reduce_only),
            ("TriggerPrice", self.trigger_price),
            ("OrderExpiry", self.order_expiry),
        ]

    def with_order_defaults(self, now_ms: int, horizon_ms: int = DEFAULT_ORDER_EXPIRY_MS) -> "OrderLeg":
        return dataclasses.replace(
            self,
            order_expiry=_resolve_order_expiry(self.order_expiry, now_ms, horizon_ms),
        )


@dataclass(frozen=True, kw_only=True)
class CreateOrder(TxInfo):
    """Place a single order."""

    TX_TYPE: ClassVar[TxType] = TxType.CREATE_ORDER

    market_index: int
    client_order_index: int = NIL_CLIENT_ORDER_INDEX
    base_amount: int
    price: int
    is_ask: int
    order_type: int = OrderType.LIMIT
    time_in_force: int = TimeInForce.GOOD_TILL_TIME
    reduce_only: int = 0
    trigger_price: int = NIL_TRIGGER_PRICE
    order_expiry: int = EXPIRY_DEFAULT

    def __post_init__(self) -> None:
        normalize_flag(self, "is_ask", "reduce_only")

    @property
    def order(self) -> OrderLeg:
        return OrderLeg(
            market_index=self.market_index,
            client_order_index=self.client_order_index,
            base_amount=self.base_amount,
            price=self.price,
            is_ask=self.is_ask,
            order_type=self.order_type,
            time_in_force=self.time_in_force,
            reduce_only=self.reduce_only,
            trigger_price=self.trigger_price,
            order_expiry=self.order_expiry,
        )

    def _validate_fields(self) -> None:
        self.order.validate_order()

    def _field_elements(self) -> List[FieldElement]:
        return self.order.order_elements()

    def _wire_fields(self) -> WireFields:
        return self.order.order_wire()

    def with_defaults(
        self,
        now_ms: int,
        *,
        tx_expiry_ms: int = DEFAULT_TX_EXPIRY_MS,
        order_expiry_ms: int = DEFAULT_ORDER_EXPIRY_MS,
    ) -> "CreateOrder":
        resolved = super().with_defaults(now_ms, tx_expiry_ms=tx_expiry_ms)
        return dataclasses.replace(
            resolved,
            order_expiry=_resolve_order_expiry(self.order_expiry, now_ms, order_expiry_ms),
        )


def _is_stop_loss(leg: OrderLeg) -> bool:
    return leg.order_type in STOP_LOSS_TYPES


def _is_take_profit(leg: OrderLeg) -> bool:
    return leg.order_type in TAKE_PROFIT_TYPES


def _check_child(primary: OrderLeg, child: OrderLeg, position: int) -> None:
    """A triggered child: SL/TP type, reduce-only, nil size, opposite side, same market."""
    if child.order_type not in TRIGGER_ORDER_TYPES:
        fail("child order must be a stop-loss or take-profit order", "GROUPED_ORDER_TYPE_INVALID", f"orders[{position}].order_type", child.order_type)
    if child.reduce_only != 1:
        fail("child order must be reduce-only", "GROUPED_ORDER_NOT_REDUCE_ONLY", f"orders[{position}].reduce_only", child.reduce_only)
    if child.base_amount != NIL_ORDER_BASE_AMOUNT:
        fail("child order base amount must be nil", "GROUPED_ORDER_BASE_AMOUNT_NOT_NIL", f"orders[{position}].base_amount", child.base_amount)
    if child.is_ask == primary.is_ask:
        fail("child order must be on the opposite side of the primary order", "GROUPED_ORDER_DIRECTION_INVALID", f"orders[{position}].is_ask", child.is_ask)
    if child.market_index != primary.market_index:
        fail("grouped orders must share a market", "GROUPED_ORDER_MARKET_MISMATCH", f"orders[{position}].market_index", child.market_index)


@dataclass(frozen=True, kw_only=True)
class CreateGroupedOrders(TxInfo):
    """
    Place 2 or 3 linked orders atomically.

    Grouping rules:
        OTO:   primary + one stop-loss/take-profit child
        OCO:   one stop-loss and one take-profit leg, either fills cancels the other
        OTOCO: primary + one take-profit child + one stop-loss child
    """

    TX_TYPE: ClassVar[TxType] = TxType.CREATE_GROUPED_ORDERS

    grouping_type: int
    orders: Tuple[OrderLeg, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "orders", tuple(self.orders))

    def _validate_fields(self) -> None:
        require_one_of(self.grouping_type, set(GroupingType), "grouping_type")

        count = len(self.orders)
        expected = 3 if self.grouping_type == GroupingType.ONE_TRIGGERS_A_ONE_CANCELS_THE_OTHER else 2
        if count < MIN_GROUPED_ORDERS or count > MAX_GROUPED_ORDERS or count != expected:
            fail(
                f"grouping type {self.grouping_type} requires {expected} orders, got {count}",
                "GROUPED_ORDERS_COUNT_INVALID",
                "orders",
                count,
            )

        has_primary = self.grouping_type != GroupingType.ONE_CANCELS_THE_OTHER
        for position, leg in enumerate(self.orders):
            try:
                leg.validate_order(allow_nil_base_amount=has_primary and position > 0)
            except ValidationError as exc:
                exc.details["order"] = position
                raise
            if leg.client_order_index != NIL_CLIENT_ORDER_INDEX:
                fail(
                    "grouped orders cannot set a client order index",
                    "GROUPED_ORDER_CLIENT_ORDER_INDEX_NOT_NIL",
                    f"orders[{position}].client_order_index",
                    leg.client_order_index,
                )

        if has_primary:
            self._validate_triggered_children()
        else:
            self._validate_one_cancels_the_other()

    def _validate_triggered_children(self) -> None:
        primary, children = self.orders[0], self.orders[1:]
        for position, child in enumerate(children, start=1):
            _check_child(primary, child, position)
        if len(children) == 2:
            if not (any(_is_take_profit(c) for c in children) and any(_is_stop_loss(c) for c in children)):
                fail(
                    "children must be one take-profit and one stop-loss order",
                    "GROUPED_ORDER_TYPE_INVALID",
                    "orders",
                )

    def _validate_one_cancels_the_other(self) -> None:
        first, second = self.orders
        for position, leg in enumerate(self.orders):
            if leg.order_type not in TRIGGER_ORDER_TYPES:
                fail("orders must be stop-loss or take-profit orders", "GROUPED_ORDER_TYPE_INVALID", f"orders[{position}].order_type", leg.order_type)
            if leg.reduce_only != 1:
                fail("orders must be reduce-only", "GROUPED_ORDER_NOT_REDUCE_ONLY", f"orders[{position}].reduce_only", leg.reduce_only)
        if not ((_is_stop_loss(first) and _is_take_profit(second)) or (_is_take_profit(first) and _is_stop_loss(second))):
            fail("orders must be one stop-loss and one take-profit order", "GROUPED_ORDER_TYPE_INVALID", "orders")
        if first.is_ask != second.is_ask:
            fail("orders must be on the same side", "GROUPED_ORDER_DIRECTION_INVALID", "orders[1].is_ask", second.is_ask)
        if first.market_index != second.market_index:
            fail("grouped orders must share a market", "GROUPED_ORDER_MARKET_MISMATCH", "orders[1].market_index", second.market_index)
        if first.base_amount != second.base_amount:
            fail("orders must have the same base amount", "GROUPED_ORDER_BASE_AMOUNT_MISMATCH", "orders[1].base_amount", second.base_amount)

    def _field_elements(self) -> List[FieldElement]:
        elements = [from_uint(self.grouping_type, 8)]
        for leg in self.orders:
            elements.extend(leg.order_elements())
        return elements

    def _wire_fields(self) -> WireFields:
        orders: List[Dict[str, Any]] = [dict(leg.order_wire()) for leg in self.orders]
        return [("GroupingType", self.grouping_type), ("Orders", orders)]

    def with_defaults(
        self,
        now_ms: int,
        *,
        tx_expiry_ms: int = DEFAULT_TX_EXPIRY_MS,
        order_expiry_ms: int = DEFAULT_ORDER_EXPIRY_MS,
    ) -> "CreateGroupedOrders":
        resolved = super().with_defaults(now_ms, tx_expiry_ms=tx_expiry_ms)
        return dataclasses.replace(
            resolved,
            orders=tuple(leg.with_order_defaults(now_ms, order_expiry_ms) for leg in self.orders),
        )


@dataclass(frozen=True, kw_only=True)
class CancelOrder(TxInfo):
    TX_TYPE: ClassVar[TxType] = TxType.CANCEL_ORDER

    market_index: int
    order_index: int

    def _validate_fields(self) -> None:
        require_range(self.market_index, MIN_MARKET_INDEX, MAX_MARKET_INDEX, "market_index")
        require_range(self.order_index, MIN_ORDER_INDEX, MAX_ORDER_INDEX, "order_index")

    def _field_elements(self) -> List[FieldElement]:
        return [from_uint(self.market_index, 8), from_int(self.order_index, 64)]

    def _wire_fields(self) -> WireFields:
        return [("MarketIndex", self.market_index), ("Index", self.order_index)]


@dataclass(frozen=True, kw_only=True)
class CancelAllOrders(TxInfo):
    """
    Cancel every open order of the account.

    With SCHEDULED, ``time`` is the Unix millisecond timestamp at which the
    cancellation fires. For IMMEDIATE and ABORT it must be 0.
    """

    TX_TYPE: ClassVar[TxType] = TxType.CANCEL_ALL_ORDERS

    time_in_force: int
    time: int = 0

    def _validate_fields(self) -> None:
        require_one_of(self.time_in_force, set(CancelAllTimeInForce), "time_in_force")
        if self.time_in_force == CancelAllTimeInForce.SCHEDULED:
            require_range(self.time, 1, MAX_TIMESTAMP, "time")
        elif self.time != 0:
            fail("time must be 0 unless the cancellation is scheduled", "TIME_NOT_ZERO", "time", self.time)

    def _field_elements(self) -> List[FieldElement]:
        return [from_uint(self.time_in_force, 8), from_int(self.time, 64)]

    def _wire_fields(self) -> WireFields:
        return [("TimeInForce", self.time_in_force), ("Time", self.time)]


@dataclass(frozen=True, kw_only=True)
class ModifyOrder(TxInfo):
    TX_TYPE: ClassVar[TxType] = TxType.MODIFY_ORDER

    market_index: int
    order_index: int
    base_amount: int
    price: int
    trigger_price: int = NIL_TRIGGER_PRICE

    def _validate_fields(self) -> None:
        require_range(self.market_index, MIN_MARKET_INDEX, MAX_MARKET_INDEX, "market_index")
        require_range(self.order_index, MIN_ORDER_INDEX, MAX_ORDER_INDEX, "order_index")
        require_range(self.base_amount, MIN_ORDER_BASE_AMOUNT, MAX_ORDER_BASE_AMOUNT, "base_amount")
        require_range(self.price, MIN_ORDER_PRICE, MAX_ORDER_PRICE, "price")
        require_optional_range(
            self.trigger_price,
            NIL_TRIGGER_PRICE,
            MIN_ORDER_TRIGGER_PRICE,
            MAX_ORDER_TRIGGER_PRICE,
            "trigger_price",
        )

    def _field_elements(self) -> List[FieldElement]:
        return [
            from_uint(self.market_index, 8),
            from_int(self.order_index, 64),
            from_int(self.base_amount, 64),
            from_uint(self.price, 32),
            from_uint(self.trigger_price, 32),
        ]

    def _wire_fields(self) -> WireFields:
        return [
            ("MarketIndex", self.market_index),
            ("Index", self.order_index),
            ("BaseAmount", self.base_amount),
            ("Price", self.price),
            ("TriggerPrice", self.trigger_price),
        ]


__all__ = [
    "OrderLeg",
    "CreateOrder",
    "CreateGroupedOrders",
    "CancelOrder",
    "CancelAllOrders",
    "ModifyOrder",
]
