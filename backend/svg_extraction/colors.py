"""
Portable color grammar and sanitization.

A color token is portable when it can be understood without the page's
stylesheet: hex colors, rgb()/hsl() functional notation, a handful of
keywords, url() paint references and the CSS named colors. Everything else
(custom properties, calc(), currentColor left unresolved, garbage) is
replaced with a fallback color before content leaves the extractor.
"""

import xml.etree.ElementTree as ET
from typing import List, Optional, Tuple

FALLBACK_COLOR = "#000000"

CONTEXT_COLOR_KEYWORD = "currentcolor"

# Attributes (and style properties) that carry a color value
COLOR_ATTRIBUTES = (
    "fill",
    "stroke",
    "color",
    "stop-color",
    "flood-color",
    "lighting-color",
)

HEX_DIGITS = frozenset("0123456789abcdef")
HEX_LENGTHS = range(3, 9)

SENTINEL_KEYWORDS = frozenset({"none", "transparent", "inherit"})

# Functional notations: name -> (min args, max args)
COLOR_FUNCTIONS = {
    "rgb": (3, 4),
    "rgba": (3, 4),
    "hsl": (3, 4),
    "hsla": (3, 4),
}

NUMBER_UNITS = ("", "%", "deg", "rad", "grad", "turn")

NAMED_COLORS = frozenset({
    "aliceblue", "antiquewhite", "aqua", "aquamarine", "azure", "beige",
    "bisque", "black", "blanchedalmond", "blue", "blueviolet", "brown",
    "burlywood", "cadetblue", "chartreuse", "chocolate", "coral",
    "cornflowerblue", "cornsilk", "crimson", "cyan", "darkblue", "darkcyan",
    "darkgoldenrod", "darkgray", "darkgreen", "darkgrey", "darkkhaki",
    "darkmagenta", "darkolivegreen", "darkorange", "darkorchid", "darkred",
    "darksalmon", "darkseagreen", "darkslateblue", "darkslategray",
    "darkslategrey", "darkturquoise", "darkviolet", "deeppink", "deepskyblue",
    "dimgray", "dimgrey", "dodgerblue", "firebrick", "floralwhite",
    "forestgreen", "fuchsia", "gainsboro", "ghostwhite", "gold", "goldenrod",
    "gray", "green", "greenyellow", "grey", "honeydew", "hotpink", "indianred",
    "indigo", "ivory", "khaki", "lavender", "lavenderblush", "lawngreen",
    "lemonchiffon", "lightblue", "lightcoral", "lightcyan",
    "lightgoldenrodyellow", "lightgray", "lightgreen", "lightgrey",
    "lightpink", "lightsalmon", "lightseagreen", "lightskyblue",
    "lightslategray", "lightslategrey", "lightsteelblue", "lightyellow",
    "lime", "limegreen", "linen", "magenta", "maroon", "mediumaquamarine",
    "mediumblue", "mediumorchid", "mediumpurple", "mediumseagreen",
    "mediumslateblue", "mediumspringgreen", "mediumturquoise",
    "mediumvioletred", "midnightblue", "mintcream", "mistyrose", "moccasin",
    "navajowhite", "navy", "oldlace", "olive", "olivedrab", "orange",
    "orangered", "orchid", "palegoldenrod", "palegreen", "paleturquoise",
    "palevioletred", "papayawhip", "peachpuff", "peru", "pink", "plum",
    "powderblue", "purple", "rebeccapurple", "red", "rosybrown", "royalblue",
    "saddlebrown", "salmon", "sandybrown", "seagreen", "seashell", "sienna",
    "silver", "skyblue", "slateblue", "slategray", "slategrey", "snow",
    "springgreen", "steelblue", "tan", "teal", "thistle", "tomato",
    "turquoise", "violet", "wheat", "white", "whitesmoke", "yellow",
    "yellowgreen",
})


def _is_number(token: str) -> bool:
    if not token:
        return False
    try:
        float(token)
    except ValueError:
        return False
    # float() accepts "nan", "inf" and underscores; CSS does not
    return all(ch in "0123456789.+-eE" for ch in token)


def _is_numeric_argument(token: str) -> bool:
    lowered = token.lower()
    for unit in sorted(NUMBER_UNITS, key=len, reverse=True):
        if unit and lowered.endswith(unit):
            return _is_number(lowered[: -len(unit)])
    return _is_number(lowered)


def _split_function(value: str) -> Optional[Tuple[str, str]]:
    """Split ``name(args)`` into its name and argument text."""
    open_index = value.find("(")
    if open_index <= 0 or not value.endswith(")"):
        return None
    name = value[:open_index].strip()
    inner = value[open_index + 1:-1]
    if "(" in inner or ")" in inner:
        return None
    return name, inner


def _function_arguments(inner: str) -> List[str]:
    """Tokenize functional-notation arguments separated by commas, spaces or a slash."""
    tokens = []
    current = []
    for ch in inner:
        if ch in ", \t\n\r/":
            if current:
                tokens.append("".join(current))
                current = []
        else:
            current.append(ch)
    if current:
        tokens.append("".join(current))
    return tokens


def _is_hex_color(value: str) -> bool:
    digits = value[1:]
    return (
        value.startswith("#")
        and len(digits) in HEX_LENGTHS
        and all(ch in HEX_DIGITS for ch in digits)
    )


def _is_functional_color(value: str) -> bool:
    split = _split_function(value)
    if split is None:
        return False
    name, inner = split
    if name not in COLOR_FUNCTIONS:
        return False
    args = _function_arguments(inner)
    min_args, max_args = COLOR_FUNCTIONS[name]
    if not min_args <= len(args) <= max_args:
        return False
    return all(_is_numeric_argument(arg) for arg in args)


def _is_url_reference(value: str) -> bool:
    if not value.startswith("url("):
        return False
    close_index = value.find(")")
    if close_index < 0:
        return False
    target = value[4:close_index].strip().strip("'\"").strip()
    if not target:
        return False
    # Paint servers may carry a fallback color after the reference
    fallback = value[close_index + 1:].strip()
    return not fallback or is_portable_color(fallback)


COLOR_FORMS = (
    _is_hex_color,
    _is_functional_color,
    lambda value: value in SENTINEL_KEYWORDS,
    _is_url_reference,
    lambda value: value in NAMED_COLORS,
)


def is_portable_color(value: Optional[str]) -> bool:
    """True when the token matches one of the accepted color forms."""
    if value is None:
        return False
    token = value.strip().lower()
    if not token:
        return False
    return any(form(token) for form in COLOR_FORMS)


def is_context_color(value: Optional[str]) -> bool:
    return value is not None and value.strip().lower() == CONTEXT_COLOR_KEYWORD


def sanitize_color(value: str, fallback: str = FALLBACK_COLOR) -> str:
    """Return the value unchanged when portable, otherwise the fallback."""
    return value if is_portable_color(value) else fallback


def function_to_hex(value: Optional[str]) -> Optional[str]:
    """
    Convert a computed ``rgb()``/``rgba()`` value to hex.

    Browsers report computed colors in rgb() form. Fully transparent colors
    become ``transparent``; partially transparent ones keep their alpha as
    an eight digit hex value.

    Args:
        value: Computed color string

    Returns:
        Hex color string, ``transparent``, or None if the value is not an
        rgb() color
    """
    if not value:
        return None
    split = _split_function(value.strip().lower())
    if split is None or split[0] not in ("rgb", "rgba"):
        return None
    args = _function_arguments(split[1])
    if len(args) not in (3, 4):
        return None

    channels = []
    for arg in args[:3]:
        try:
            if arg.endswith("%"):
                channel = float(arg[:-1]) * 255 / 100
            else:
                channel = float(arg)
        except ValueError:
            return None
        channels.append(max(0, min(255, int(round(channel)))))

    alpha = 1.0
    if len(args) == 4:
        try:
            alpha = float(args[3][:-1]) / 100 if args[3].endswith("%") else float(args[3])
        except ValueError:
            return None
        alpha = max(0.0, min(1.0, alpha))

    if alpha == 0:
        return "transparent"
    hex_value = "#" + "".join(f"{channel:02x}" for channel in channels)
    if alpha < 1:
        hex_value += f"{int(round(alpha * 255)):02x}"
    return hex_value


def replace_context_color(text: str, replacement: str) -> str:
    """Replace every case-insensitive ``currentColor`` occurrence in ``text``."""
    if not text:
        return text
    lowered = text.lower()
    pieces = []
    start = 0
    index = lowered.find(CONTEXT_COLOR_KEYWORD)
    while index >= 0:
        pieces.append(text[start:index])
        pieces.append(replacement)
        start = index + len(CONTEXT_COLOR_KEYWORD)
        index = lowered.find(CONTEXT_COLOR_KEYWORD, start)
    pieces.append(text[start:])
    return "".join(pieces)


def split_top_level(text: str, separator: str) -> List[str]:
    """
    Split ``text`` on ``separator`` outside parentheses and quoted strings.

    ``url(data:image/png;base64,...)`` and ``content: "a;b"`` stay whole.
    """
    chunks = []
    depth = 0
    quote = None
    start = 0
    for index, ch in enumerate(text):
        if quote:
            if ch == quote:
                quote = None
        elif ch in "\"'":
            quote = ch
        elif ch == "(":
            depth += 1
        elif ch == ")":
            depth = max(depth - 1, 0)
        elif ch == separator and depth == 0:
            chunks.append(text[start:index])
            start = index + 1
    chunks.append(text[start:])
    return chunks


def parse_style_declarations(style: str) -> List[Tuple[str, str]]:
    """Split an inline style block into ``(property, value)`` pairs."""
    declarations = []
    for chunk in split_top_level(style, ";"):
        if ":" not in chunk:
            continue
        prop, value = chunk.split(":", 1)
        prop = prop.strip()
        if prop:
            declarations.append((prop, value.strip()))
    return declarations


def sanitize_style(style: str, fallback: str = FALLBACK_COLOR) -> str:
    """Sanitize color-bearing declarations inside an inline style block."""
    declarations = []
    changed = False
    for prop, value in parse_style_declarations(style):
        if prop.lower() in COLOR_ATTRIBUTES:
            important = ""
            if value.lower().endswith("!important"):
                important = " !important"
                value = value[: -len("!important")].strip()
            sanitized = sanitize_color(value, fallback)
            changed = changed or sanitized != value
            value = sanitized + important
        declarations.append(f"{prop}: {value}")
    if not changed:
        return style
    return "; ".join(declarations)


def _local_name(name: str) -> str:
    return name.rsplit("}", 1)[-1]


def sanitize_tree(root: ET.Element, fallback: str = FALLBACK_COLOR) -> ET.Element:
    """Sanitize color attributes and inline styles across an ElementTree subtree in place."""
    for node in root.iter():
        for name, value in list(node.attrib.items()):
            local = _local_name(name)
            if local in COLOR_ATTRIBUTES:
                node.set(name, sanitize_color(value, fallback))
            elif local == "style":
                node.set(name, sanitize_style(value, fallback))
    return root


def substitute_context_color(root: ET.Element, color: str) -> ET.Element:
    """Replace ``currentColor`` in every attribute and text node of the subtree."""
    for node in root.iter():
        for name, value in list(node.attrib.items()):
            node.set(name, replace_context_color(value, color))
        if node.text:
            node.text = replace_context_color(node.text, color)
        if node.tail:
            node.tail = replace_context_color(node.tail, color)
    return root
