"""PayPal order model, product catalog and download-link selection."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Mapping, Sequence, Tuple, Union

from keydrop.errors import OrderFetchError

COMPLETED = "COMPLETED"

# Keys in the pool are tagged with this token (case-sensitive); order items
# are matched against it case-insensitively.
CATEGORY_MARKER = "Masterclass"

MASTERCLASS_INSTRUCTIONS = "No download required. Use the key below to access your Masterclass."

PRODUCT_DOWNLOAD_LINKS: Dict[str, str] = {
    "shotgun_pack": "https://drive.google.com/file/d/1nOgDQ-iEs1c72LbkSUSJlL1oQKVsl-JR/view?usp=sharing",
    "smg_pack": "https://drive.google.com/file/d/1SW1wPdZs9roOPNLr9TK4_EtkxFnN6fi0/view?usp=sharing",
    "ar_pack": "https://drive.google.com/file/d/1KPgM3cPxHTALnXOpU0Oj2jTPQw-aSDI5/view?usp=sharing",
    "bullet_drop_pack": "https://drive.google.com/file/d/1mWrNFCwl-iKNREQ3ttK6CQEoxmp6sMHY/view?usp=sharing",
    "fortnite_optimizer_pack": "https://drive.google.com/file/d/17Hi9xyhWXMdfrDzyyj15jV9azJsexov_/view?usp=sharing",
    "build_place_pack": "https://drive.google.com/file/d/1JtFPiApQIbFi9oTc-tOpMvhCG9GzbQNT/view?usp=sharing",
}


class ProductCategory(Enum):
    MASTERCLASS = "masterclass"
    STANDARD = "standard"

    @property
    def label(self) -> str:
        return "Masterclass" if self is ProductCategory.MASTERCLASS else "other products"


@dataclass(frozen=True)
class LineItem:
    sku: str
    name: str

    @property
    def is_masterclass(self) -> bool:
        marker = CATEGORY_MARKER.lower()
        return marker in self.sku.lower() or marker in self.name.lower()


def classify(items: Sequence[LineItem]) -> ProductCategory:
    if any(item.is_masterclass for item in items):
        return ProductCategory.MASTERCLASS
    return ProductCategory.STANDARD


@dataclass(frozen=True)
class Order:
    order_id: str
    status: str
    payer_name: str
    payer_email: str
    amount: str
    currency: str
    items: Tuple[LineItem, ...]
    category: ProductCategory

    @property
    def skus(self) -> List[str]:
        return [item.sku.lower() for item in self.items]

    @classmethod
    def from_paypal(cls, payload: Mapping[str, Any]) -> "Order":
        """
        Build an Order from a PayPal v2 checkout order payload.

        Only the first purchase unit is read. Raises OrderFetchError when the
        payer or purchase unit the flow depends on is missing.
        """
        try:
            payer = payload["payer"]
            name = payer["name"]
            unit = payload["purchase_units"][0]
            amount = unit["amount"]
            items = tuple(
                LineItem(sku=str(i.get("sku") or ""), name=str(i.get("name") or ""))
                for i in unit.get("items") or []
            )
            return cls(
                order_id=str(payload.get("id", "")),
                status=str(payload.get("status", "")),
                payer_name=f"{name['given_name']} {name['surname']}",
                payer_email=payer["email_address"],
                amount=str(amount["value"]),
                currency=amount["currency_code"],
                items=items,
                category=classify(items),
            )
        except (KeyError, IndexError, TypeError) as e:
            raise OrderFetchError(f"Malformed order payload: missing {e}") from e


def download_links(
    order: Order, catalog: Mapping[str, str] = PRODUCT_DOWNLOAD_LINKS
) -> Union[List[str], str]:
    """
    Catalog URLs for the purchased SKUs in item order, skipping unknown SKUs.
    Masterclass orders get the fixed instruction text instead.
    """
    if order.category is ProductCategory.MASTERCLASS:
        return MASTERCLASS_INSTRUCTIONS
    return [catalog[sku] for sku in order.skus if sku in catalog]


def email_download_text(links: Union[List[str], str]) -> str:
    """Render the download-links value as the email template expects it."""
    if isinstance(links, str):
        return links
    return "\n".join(links)
