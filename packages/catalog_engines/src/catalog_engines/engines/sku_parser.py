"""
SKU Variant Parser

Supplier SKUs encode the parent product plus variant attributes as
dash-separated tokens, e.g.:

    1005005691868544-3-4t-110-champagne   (parent - ? - age - size - color)
    1005008414127809-dh0715a-rosa-8y      (parent - style - color - age)

Each token after the parent prefix is classified with an ordered list of
regex/keyword heuristics. The first class that matches wins; there is no
conflict resolution beyond that order.
"""

import re
from dataclasses import dataclass
from operator import attrgetter
from typing import Any, Callable, Iterable

from catalog_engines.contracts.types import OptionType

SKU_SEPARATOR = "-"

_AGE_PATTERNS = (
    re.compile(r"^\d+(-\d+)?[ty]\Z", re.IGNORECASE | re.ASCII),
    re.compile(r"^\d{1,2}y\Z", re.IGNORECASE | re.ASCII),
)
_SIZE_PATTERN = re.compile(r"^\d{2,3}\Z", re.ASCII)
_STYLE_CODE_PATTERNS = (
    re.compile(r"^[a-z]+\d+[a-z]*\Z", re.IGNORECASE | re.ASCII),
    re.compile(r"^\d+[a-z]+\Z", re.IGNORECASE | re.ASCII),
)
_NUMERIC_PATTERN = re.compile(r"^\d+\Z", re.ASCII)

# Size tokens are heights in cm
MIN_SIZE_CM = 80
MAX_SIZE_CM = 180

# Matched as substrings of the lower-cased token
COLOR_KEYWORDS = (
    "champagne", "light-blue", "peach-pink", "rosa", "white", "beige",
    "pink", "blue", "red", "green", "black", "yellow", "purple", "orange",
    "grey", "gray", "brown", "navy", "cream", "ivory", "mint", "coral",
    "lavender", "turquoise", "gold", "silver", "rose", "blanco", "negro",
    "azul", "rojo", "verde", "amarillo", "morado", "naranja", "gris",
)

COLOR_HEX = {
    "champagne": "#F7E7CE",
    "light-blue": "#ADD8E6",
    "peach-pink": "#FFDAB9",
    "rosa": "#FFC0CB",
    "pink": "#FFC0CB",
    "white": "#FFFFFF",
    "blanco": "#FFFFFF",
    "beige": "#F5F5DC",
    "blue": "#0000FF",
    "azul": "#0000FF",
    "red": "#FF0000",
    "rojo": "#FF0000",
    "green": "#008000",
    "verde": "#008000",
    "black": "#000000",
    "negro": "#000000",
    "yellow": "#FFFF00",
    "amarillo": "#FFFF00",
    "purple": "#800080",
    "morado": "#800080",
    "orange": "#FFA500",
    "naranja": "#FFA500",
    "grey": "#808080",
    "gray": "#808080",
    "gris": "#808080",
    "brown": "#A52A2A",
    "navy": "#000080",
    "cream": "#FFFDD0",
    "ivory": "#FFFFF0",
    "mint": "#98FF98",
    "coral": "#FF7F50",
    "lavender": "#E6E6FA",
    "turquoise": "#40E0D0",
    "gold": "#FFD700",
    "silver": "#C0C0C0",
    "rose": "#FF007F",
}

_NAME_VARIANT_SUFFIX = re.compile(r"\s*[-–]\s*(color|talla|size|edad|age)\s*[:\s]*\w+", re.IGNORECASE)
_NAME_VARIANT_PAREN = re.compile(r"\s*\(\s*(color|talla|size|edad|age)\s*[:\s]*\w+\s*\)", re.IGNORECASE)
_WHITESPACE = re.compile(r"\s+")


@dataclass
class ParsedVariant:
    """Variant attributes extracted from a SKU. Unmatched classes stay None."""

    color: str | None = None
    age: str | None = None
    size: str | None = None
    style_code: str | None = None

    def is_empty(self) -> bool:
        return not (self.color or self.age or self.size or self.style_code)

    def attribute_combination(self) -> dict[str, str | None]:
        return {"color": self.color, "size": self.size, "age": self.age}


def is_age_token(token: str) -> bool:
    return any(pattern.match(token) for pattern in _AGE_PATTERNS)


def is_size_token(token: str) -> bool:
    return bool(_SIZE_PATTERN.match(token)) and MIN_SIZE_CM <= int(token) <= MAX_SIZE_CM


def is_color_token(token: str) -> bool:
    lowered = token.lower()
    return any(keyword in lowered for keyword in COLOR_KEYWORDS)


def is_style_code_token(token: str) -> bool:
    return any(pattern.match(token) for pattern in _STYLE_CODE_PATTERNS)


def parse_sku_variants(sku: str) -> ParsedVariant:
    """
    Parse variant attributes out of a composite SKU.

    The first token is the parent SKU and is skipped. Every other token is
    tested as age, size, color keyword and style code, in that order. A
    token that matches nothing becomes the color if it is non-numeric and
    longer than one character, unless a color was already found.
    """
    result = ParsedVariant()

    parts = sku.split(SKU_SEPARATOR)
    if len(parts) < 2:
        return result

    for part in parts[1:]:
        if is_age_token(part):
            result.age = part.upper()
            continue

        if is_size_token(part):
            result.size = part
            continue

        if is_color_token(part):
            result.color = part
            continue

        if is_style_code_token(part):
            result.style_code = part
            continue

        if not _NUMERIC_PATTERN.match(part) and len(part) > 1:
            result.color = result.color or part

    return result


def parent_sku_of(sku: str) -> str:
    """Parent SKU is everything before the first separator."""
    return sku.split(SKU_SEPARATOR)[0]


def group_by_parent_sku(
    rows: Iterable[Any],
    sku_getter: Callable[[Any], str] = attrgetter("sku_interno"),
) -> dict[str, list[Any]]:
    """Group rows by parent SKU, keeping first-seen order of groups and rows."""
    groups: dict[str, list[Any]] = {}
    for row in rows:
        groups.setdefault(parent_sku_of(sku_getter(row)), []).append(row)
    return groups


def get_color_hex(color_name: str) -> str | None:
    return COLOR_HEX.get(color_name.lower())


def clean_product_name(nombre: str) -> str:
    """Strip variant fragments like "- Color Rosa" or "(Talla 110)" from a name."""
    cleaned = _NAME_VARIANT_SUFFIX.sub("", nombre)
    cleaned = _NAME_VARIANT_PAREN.sub("", cleaned)
    return _WHITESPACE.sub(" ", cleaned).strip()


def build_variant_name(parsed: ParsedVariant, fallback: str) -> str:
    """Human readable variant name, e.g. "rosa / 110cm / 8Y"."""
    parts = []
    if parsed.color:
        parts.append(parsed.color)
    if parsed.size:
        parts.append(f"{parsed.size}cm")
    if parsed.age:
        parts.append(parsed.age)
    return " / ".join(parts) or fallback


def primary_option(parsed: ParsedVariant) -> tuple[str, str]:
    """
    Pick the variant's primary (option_type, option_value).

    Color wins over size, size over age. With nothing parsed the type is
    "age" and the value "default".
    """
    if parsed.color:
        option_type = OptionType.COLOR
    elif parsed.size:
        option_type = OptionType.SIZE
    else:
        option_type = OptionType.AGE

    option_value = parsed.color or parsed.size or parsed.age or "default"
    return option_type.value, option_value


def collect_attribute_values(parsed_variants: Iterable[ParsedVariant]) -> dict[str, list[str]]:
    """Distinct colors, sizes and ages across a group, in first-seen order."""
    colors: dict[str, None] = {}
    sizes: dict[str, None] = {}
    ages: dict[str, None] = {}

    for parsed in parsed_variants:
        if parsed.color:
            colors[parsed.color] = None
        if parsed.size:
            sizes[parsed.size] = None
        if parsed.age:
            ages[parsed.age] = None

    return {
        "colors_found": list(colors),
        "sizes_found": list(sizes),
        "ages_found": list(ages),
    }
