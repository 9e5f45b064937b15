"""
App Name Resolver
=================

Derives a readable display name from an application identifier without
any network call, e.g. "com.google.maps" -> "Google Maps".

RULES:
- No "." in the identifier: capitalize every word of the whole string.
- Otherwise the last segment is the product, the rest is the publisher.
- Known publishers prefix their brand ("Google Maps"); a few publishers
  map to a fixed name; everything else is just the capitalized product.
"""

import re

_WORD_SPLIT = re.compile(r"[^a-zA-Z0-9]+")

# Publisher exactly equal to the key -> "<Brand> <Product>"
PUBLISHER_PREFIXES = {
    "com.google": "Google",
    "com.facebook": "Facebook",
    "com.amazon": "Amazon",
    "com.spotify": "Spotify",
    "com.netflix": "Netflix",
}

# Publisher containing the keyword -> "<Brand> <Product>" (checked in order)
PUBLISHER_KEYWORDS = (
    ("instagram", "Instagram"),
    ("whatsapp", "WhatsApp"),
    ("twitter", "Twitter"),
    ("x.com", "Twitter"),
    ("tiktok", "TikTok"),
    ("snapchat", "Snapchat"),
)

# Publisher exactly equal to the key -> fixed display name
PUBLISHER_NAMES = {
    "com.duolingo": "Duolingo",
}


def capitalize_words(text: str) -> str:
    """Split on non-alphanumeric runs and title-case each word."""
    words = [w for w in _WORD_SPLIT.split(text) if w]
    return " ".join(w[0].upper() + w[1:].lower() for w in words)


def resolve_app_name(app_id: str) -> str:
    """
    Resolve a display name for an application identifier.

    Pure and total: any string is accepted.
    """
    if "." not in app_id:
        return capitalize_words(app_id)

    publisher, _, product = app_id.rpartition(".")
    if not product:
        return capitalize_words(app_id)

    if publisher in PUBLISHER_PREFIXES:
        return f"{PUBLISHER_PREFIXES[publisher]} {capitalize_words(product)}"

    for keyword, brand in PUBLISHER_KEYWORDS:
        if keyword in publisher:
            return f"{brand} {capitalize_words(product)}"

    if publisher in PUBLISHER_NAMES:
        return PUBLISHER_NAMES[publisher]

    return capitalize_words(product)
