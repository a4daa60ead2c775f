import re
from typing import Any, Optional, Tuple, Union

from ..schemas.sizing import Product
from .size_systems import Category, Gender, normalize_gender


# Ordered (keywords, category) rules; first match wins. Specific garments come
# before the broad "top"/"bottom" buckets, and "t-shirt" before "shirt".
# Plain strings match as substrings; patterns are used where a substring would
# misfire ("tee" inside "sateen" or "steel").
CATEGORY_RULES: Tuple[Tuple[Tuple[Union[str, re.Pattern], ...], Category], ...] = (
    (("overshirt",), Category.SHIRT),
    (("t-shirt", "tshirt", re.compile(r"\btees?\b")), Category.TSHIRT),
    (("shirt",), Category.SHIRT),
    (("knit", "sweater", "jumper", "cardigan"), Category.KNIT),
    (("trouser", "trousers", "pants", "pant", "slack", "slacks"), Category.TROUSER),
    (("skirt",), Category.SKIRT),
    (("coat", "overcoat"), Category.COAT),
    (("jacket", "blouson", "outerwear"), Category.JACKET),
    (("dress",), Category.DRESS),
    (("blouse",), Category.BLOUSE),
    (("top", "tops"), Category.TOP),
    (("bottom", "bottoms"), Category.BOTTOM),
)

# Female tokens are checked first; whole-word matching keeps "women" from hitting "men".
GENDER_RULES: Tuple[Tuple[re.Pattern, Gender], ...] = (
    (re.compile(r"\b(women|woman|womenswear|womens|ladies|female)\b"), Gender.FEMALE),
    (re.compile(r"\b(men|man|menswear|mens|male|gentlemen)\b"), Gender.MALE),
)

HANDLE_PREFIXES: Tuple[Tuple[Tuple[str, ...], Gender], ...] = (
    (("woman-", "women-"), Gender.FEMALE),
    (("man-", "men-"), Gender.MALE),
)


def product_text(product: Optional[Product], include_handle: bool = True) -> str:
    if product is None:
        return ""
    parts = [product.title, product.handle if include_handle else None, product.type, product.vendor]
    parts.extend(product.tags)
    parts.extend(product.options)
    return " ".join(p for p in parts if p).lower()


def _gender_from_tokens(text: str) -> Optional[Gender]:
    for pattern, gender in GENDER_RULES:
        if pattern.search(text):
            return gender
    return None


def _keyword_hit(keyword: Union[str, re.Pattern], text: str) -> bool:
    if isinstance(keyword, str):
        return keyword in text
    return keyword.search(text) is not None


def infer_category_from_text(text: Optional[str]) -> Category:
    t = (text or "").lower()
    if not t:
        return Category.UNKNOWN
    for keywords, category in CATEGORY_RULES:
        if any(_keyword_hit(k, t) for k in keywords):
            return category
    return Category.UNKNOWN


def infer_category_from_product(product: Any) -> Category:
    return infer_category_from_text(product_text(Product.coerce(product)))


def infer_gender_from_product(product: Any) -> Gender:
    """Descriptive fields first, then the store's woman-/man- handle convention, then handle words."""
    product = Product.coerce(product)
    if product is None:
        return Gender.UNKNOWN
    found = _gender_from_tokens(product_text(product, include_handle=False))
    if found is not None:
        return found
    handle = (product.handle or "").lower()
    for prefixes, gender in HANDLE_PREFIXES:
        if handle.startswith(prefixes):
            return gender
    found = _gender_from_tokens(handle.replace("-", " ").replace("_", " "))
    return found if found is not None else Gender.UNKNOWN


def normalize_category(value: Any) -> Category:
    """Accept a Category, its value, or a collection handle/title such as "men-trousers"."""
    if isinstance(value, Category):
        return value
    if value is None:
        return Category.UNKNOWN
    key = str(value).strip().lower()
    try:
        return Category(key)
    except ValueError:
        return infer_category_from_text(key)


__all__ = [
    "CATEGORY_RULES",
    "GENDER_RULES",
    "infer_category_from_product",
    "infer_category_from_text",
    "infer_gender_from_product",
    "normalize_category",
    "normalize_gender",
    "product_text",
]
