"""
Shipping Models

Value objects passed into and out of the engine.

    REFERENCE ROWS
        Zone, Method, RateRule  - typed views of single context rows

    REQUEST
        CartLineItem, SelectedOptions, ShippingCalcRequest

    RESULT
        ShipmentLeg, SplitDetails, ShippingCalcResult, EstimatedDates

All amounts are integer minor units of one settlement currency.
"""

from dataclasses import asdict, dataclass, field
from datetime import date

from .data.reference.defaults import OPTION_CAPABILITY, OPTION_CODES, SHIPMENT_PREFERENCES, SINGLE


# =============================================================================
# ERROR CODES
# =============================================================================

NO_ZONE = "NO_ZONE"
NO_METHOD = "NO_METHOD"
NO_RATE_RULE = "NO_RATE_RULE"

ERROR_CODES = (NO_ZONE, NO_METHOD, NO_RATE_RULE)


# =============================================================================
# REFERENCE ROWS
# =============================================================================

@dataclass(frozen=True)
class Zone:
    """A shipping region made of one or more countries."""

    id: str
    name_fr: str | None
    name_en: str | None
    customs_notice: bool
    active: bool
    sort_order: int

    @classmethod
    def from_row(cls, row: dict) -> "Zone":
        return cls(
            id=row["id"],
            name_fr=row["name_fr"],
            name_en=row["name_en"],
            customs_notice=bool(row["customs_notice"]),
            active=bool(row["active"]),
            sort_order=row["sort_order"],
        )


@dataclass(frozen=True)
class Method:
    """A carrier method with its capability flags and delivery window."""

    id: str
    code: str
    name_fr: str | None
    name_en: str | None
    supports_insurance: bool
    supports_signature: bool
    supports_gift_wrap: bool
    eta_min_days: int | None
    eta_max_days: int | None
    active: bool
    sort_order: int

    @classmethod
    def from_row(cls, row: dict) -> "Method":
        return cls(
            id=row["id"],
            code=row["code"],
            name_fr=row["name_fr"],
            name_en=row["name_en"],
            supports_insurance=bool(row["supports_insurance"]),
            supports_signature=bool(row["supports_signature"]),
            supports_gift_wrap=bool(row["supports_gift_wrap"]),
            eta_min_days=row["eta_min_days"],
            eta_max_days=row["eta_max_days"],
            active=bool(row["active"]),
            sort_order=row["sort_order"],
        )

    def supports(self, option_code: str) -> bool:
        """True if this method can carry the given add-on option."""
        return bool(getattr(self, OPTION_CAPABILITY[option_code]))

    @property
    def eta_window(self) -> tuple[int, int]:
        """(min, max) delivery days, unset bounds reported as 0."""
        return self.eta_min_days or 0, self.eta_max_days or 0


@dataclass(frozen=True)
class RateRule:
    """A priced condition over zone, method, subtotal range and weight range."""

    id: str
    zone_id: str
    method_id: str
    min_subtotal: int
    max_subtotal: int | None
    min_weight_points: int
    max_weight_points: int | None
    price: int
    active: bool
    priority: int

    @classmethod
    def from_row(cls, row: dict) -> "RateRule":
        return cls(**{name: row[name] for name in cls.__dataclass_fields__})


# =============================================================================
# REQUEST
# =============================================================================

@dataclass(frozen=True)
class CartLineItem:
    """One cart line as priced at checkout."""

    product_id: str
    quantity: int
    unit_price: int
    made_to_order: bool = False
    lead_time_days: int | None = None
    size_class_code: str | None = None

    def __post_init__(self):
        if self.quantity <= 0:
            raise ValueError(f"{self.product_id}: quantity must be positive, got {self.quantity}")
        if self.unit_price < 0:
            raise ValueError(f"{self.product_id}: unit_price must not be negative, got {self.unit_price}")

    @property
    def line_total(self) -> int:
        return self.unit_price * self.quantity

    @property
    def waits_for_production(self) -> bool:
        """Made to order with a positive lead time."""
        return self.made_to_order and bool(self.lead_time_days) and self.lead_time_days > 0


@dataclass(frozen=True)
class SelectedOptions:
    """Add-ons the customer ticked at checkout."""

    insurance: bool = False
    signature: bool = False
    gift_wrap: bool = False

    def selected(self) -> list[str]:
        """Selected option codes, in pricing order."""
        return [code for code in OPTION_CODES if getattr(self, code)]


@dataclass(frozen=True)
class ShippingCalcRequest:
    """Everything the engine needs to know about one checkout."""

    items: tuple[CartLineItem, ...]
    country_code: str
    method_id: str
    options: SelectedOptions = field(default_factory=SelectedOptions)
    shipment_preference: str = SINGLE

    def __post_init__(self):
        # Accept any iterable of items, store as tuple
        object.__setattr__(self, "items", tuple(self.items))
        if self.shipment_preference not in SHIPMENT_PREFERENCES:
            raise ValueError(
                f"shipment_preference must be one of {SHIPMENT_PREFERENCES}, "
                f"got {self.shipment_preference!r}"
            )


# =============================================================================
# RESULT
# =============================================================================

@dataclass(frozen=True)
class ShipmentLeg:
    """Price and timing of one leg of a split shipment."""

    shipping_price: int
    eta_min_days: int
    eta_max_days: int
    lead_time_days: int = 0
    is_free_shipping: bool = False
    subtotal: int = 0
    weight_points: int = 0
    item_count: int = 0
    error: str | None = None


@dataclass(frozen=True)
class SplitDetails:
    ready_shipment: ShipmentLeg
    made_to_order_shipment: ShipmentLeg


@dataclass(frozen=True)
class ShippingCalcResult:
    """
    Outcome of one shipping calculation.

    error is one of ERROR_CODES or None. On error, shipping_price is 0 and
    whatever was resolved before the failure (zone, method, customs notice)
    is still filled in.
    """

    shipping_price: int
    zone: Zone | None
    method: Method | None
    is_free_shipping: bool
    options_price: int
    customs_notice: bool
    eta_min_days: int
    eta_max_days: int
    lead_time_days: int
    split_details: SplitDetails | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict:
        """Plain dict, ready for a JSON response."""
        return asdict(self)


@dataclass(frozen=True)
class EstimatedDates:
    """Production start and delivery dates derived from a result."""

    ship_start_date: date | None = None
    delivery_date: date | None = None
