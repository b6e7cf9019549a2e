"""Just-in-time CSS: scan rendered HTML for classes and emit only those utilities."""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from html.parser import HTMLParser

from .design_system import DesignSystem, site_design_system
from .styles import PREFLIGHT, PROSE

VALID_CLASS = re.compile(r"^[A-Za-z0-9_:\-/\[\]\.%!]+$")

PSEUDO_VARIANTS = {
    "hover": ":hover",
    "focus": ":focus",
    "active": ":active",
}

# Highlighter output colours, keyed by the selectors they style.
DEFAULT_APPLIES: dict[str, str] = {
    "body": "font-sans",
    ".token.comment,.token.prolog,.token.doctype,.token.cdata,.token.punctuation,.token.selector,.token.tag": "text-gray-300",
    ".token.boolean,.token.number,.token.constant,.token.attr-name,.token.deleted": "text-blue-300",
    ".token.string,.token.char,.token.attr-value,.token.builtin,.token.inserted": "text-green-300",
    ".token.operator,.token.entity,.token.url,.token.symbol,.token.title\\.class,.language-css .token.string,.style .token.string": "text-cyan-300",
    ".token.atrule,.token.keyword": "text-indigo-300",
    ".token.property,.token.function,.token.title\\.function": "text-orange-300",
    ".token.regex,.token.important": "text-red-300",
}


@dataclass(frozen=True)
class Rule:
    """Declarations for one utility, optionally on a child selector."""

    selector_suffix: str
    declarations: tuple[str, ...]


@dataclass
class CssFrameworkSettings:
    design_system: DesignSystem = field(default_factory=site_design_system)
    applies: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_APPLIES))
    # Colour token for the bottom border of prose links
    prose_link_border: str = "blue-500/75"
    preflight: bool = True


def scan_classes(html: str) -> set[str]:
    """Collect every class name used in an HTML document."""
    parser = _ClassScanner()
    parser.feed(html)
    parser.close()
    return parser.classes


def escape_class(name: str) -> str:
    """Escape a class name for use in a CSS selector."""
    return re.sub(r"([:/\.\[\]%!#(),])", r"\\\1", name)


class CssFramework:
    """Generates a stylesheet containing only the utilities a site uses."""

    def __init__(self, settings: CssFrameworkSettings | None = None):
        self.settings = settings or CssFrameworkSettings()
        self.ds = self.settings.design_system

    def process(self, classes: Iterable[str]) -> str:
        """Build the stylesheet for a set of class names."""
        used = sorted({c for c in classes if c and VALID_CLASS.match(c)})

        blocks: list[str] = [self._root_vars()]
        if self.settings.preflight:
            blocks.append(PREFLIGHT.strip())

        for selector, utilities in self.settings.applies.items():
            decls: list[str] = []
            for utility in utilities.split():
                for rule in self.utility_rules(utility):
                    if not rule.selector_suffix:
                        decls.extend(rule.declarations)
            if decls:
                blocks.append(_format_block(selector, decls))

        if "prose" in used:
            link_border = self.ds.color(self.settings.prose_link_border) or "currentColor"
            blocks.append(PROSE.replace("{link_border}", link_border).strip())

        base_rules: list[str] = []
        by_screen: dict[str, list[str]] = {screen: [] for screen in self.ds.screens}

        for cls in used:
            if cls == "container":
                base_rules.extend(self._container_base())
                for screen, css in self._container_screens().items():
                    by_screen[screen].append(css)
                continue

            screen, pseudo, base = self._split_variants(cls)
            if base is None:
                continue
            rules = self.utility_rules(base)
            if not rules:
                continue

            selector = "." + escape_class(cls) + pseudo
            css = "\n".join(
                _format_block(selector + r.selector_suffix, r.declarations) for r in rules
            )
            if screen is None:
                base_rules.append(css)
            else:
                by_screen[screen].append(css)

        blocks.extend(base_rules)
        for screen, min_width in self.ds.screens.items():
            rules = by_screen[screen]
            if not rules:
                continue
            inner = "\n".join("  " + line for css in rules for line in css.split("\n"))
            blocks.append(f"@media (min-width: {min_width}) {{\n{inner}\n}}")

        return "\n\n".join(blocks) + "\n"

    def _split_variants(self, cls: str) -> tuple[str | None, str, str | None]:
        """Split ``md:hover:p-4`` into (screen, pseudo selector, base utility)."""
        *variants, base = cls.split(":")
        screen: str | None = None
        pseudo = ""
        for v in variants:
            if v in self.ds.screens and screen is None:
                screen = v
            elif v in PSEUDO_VARIANTS:
                pseudo += PSEUDO_VARIANTS[v]
            else:
                return None, "", None
        return screen, pseudo, base

    def _root_vars(self) -> str:
        decls = [f"--font-{name}: {value}" for name, value in self.ds.font_families.items()]
        return _format_block(":root", decls)

    def _container_base(self) -> list[str]:
        padding = self.ds.container_padding.get("DEFAULT", "0px")
        return [_format_block(".container", (
            "width: 100%",
            "margin-left: auto",
            "margin-right: auto",
            f"padding-left: {padding}",
            f"padding-right: {padding}",
        ))]

    def _container_screens(self) -> dict[str, str]:
        out: dict[str, str] = {}
        for screen in self.ds.screens:
            decls: list[str] = []
            if screen in self.ds.container_screens:
                decls.append(f"max-width: {self.ds.container_screens[screen]}")
            if screen in self.ds.container_padding:
                pad = self.ds.container_padding[screen]
                decls.extend([f"padding-left: {pad}", f"padding-right: {pad}"])
            if decls:
                out[screen] = _format_block(".container", decls)
        return out

    def utility_rules(self, base: str) -> list[Rule]:
        """Rules for a single utility class without variants. Unknown → []."""
        ds = self.ds
        important = base.startswith("!")
        if important:
            base = base[1:]
        rules = self._utility_rules(base, ds)
        if important:
            rules = [
                Rule(r.selector_suffix, tuple(f"{d} !important" for d in r.declarations))
                for r in rules
            ]
        return rules

    def _utility_rules(self, base: str, ds: DesignSystem) -> list[Rule]:
        simple = _STATIC_UTILITIES.get(base)
        if simple is not None:
            return [Rule("", simple)]

        if base.startswith("font-"):
            token = base[5:]
            if token in ds.font_weights:
                return [Rule("", (f"font-weight: {ds.font_weights[token]}",))]
            if token in ds.font_families:
                return [Rule("", (f"font-family: var(--font-{token})",))]
            return []

        if base.startswith("text-"):
            token = base[5:]
            if token in ds.font_sizes:
                size, line_height = ds.font_sizes[token]
                return [Rule("", (f"font-size: {size}", f"line-height: {line_height}"))]
            color = ds.color(token)
            return [Rule("", (f"color: {color}",))] if color else []

        if base.startswith("bg-"):
            color = ds.color(base[3:])
            return [Rule("", (f"background-color: {color}",))] if color else []

        if base == "border" or base.startswith("border-"):
            return self._border_rules(base, ds)

        if base == "rounded" or base.startswith("rounded-"):
            token = base[8:] or "DEFAULT"
            value = ds.border_radius.get(token)
            return [Rule("", (f"border-radius: {value}",))] if value else []

        if base == "shadow" or base.startswith("shadow-"):
            token = base[7:] or "DEFAULT"
            value = ds.shadows.get(token)
            return [Rule("", (f"box-shadow: {value}",))] if value else []

        m = _SPACING_UTILITY.match(base)
        if m:
            return self._spacing_rules(m.group("neg") == "-", m.group("prefix"), m.group("token"), ds)

        if base.startswith("space-x-") or base.startswith("space-y-"):
            value = ds.spacing.get(base[8:])
            if value is None:
                return []
            prop = "margin-left" if base.startswith("space-x-") else "margin-top"
            return [Rule(" > :not([hidden]) ~ :not([hidden])", (f"{prop}: {value}",))]

        if base.startswith("gap-"):
            token = base[4:]
            prop = "gap"
            if token.startswith(("x-", "y-")):
                prop = "column-gap" if token[0] == "x" else "row-gap"
                token = token[2:]
            value = ds.spacing.get(token)
            return [Rule("", (f"{prop}: {value}",))] if value else []

        if base.startswith(("w-", "h-")):
            prop = "width" if base[0] == "w" else "height"
            value = _size_value(base[2:], ds, prop)
            return [Rule("", (f"{prop}: {value}",))] if value else []

        if base.startswith("max-w-"):
            value = ds.max_widths.get(base[6:])
            return [Rule("", (f"max-width: {value}",))] if value else []

        if base.startswith("leading-"):
            value = _LEADING.get(base[8:])
            return [Rule("", (f"line-height: {value}",))] if value else []

        if base.startswith("tracking-"):
            value = _TRACKING.get(base[9:])
            return [Rule("", (f"letter-spacing: {value}",))] if value else []

        if base.startswith("grid-cols-"):
            token = base[10:]
            if token.isdigit() and 0 < int(token) <= 12:
                return [Rule("", (f"grid-template-columns: repeat({token}, minmax(0, 1fr))",))]
            return []

        if base.startswith("col-span-"):
            token = base[9:]
            if token == "full":
                return [Rule("", ("grid-column: 1 / -1",))]
            if token.isdigit() and 0 < int(token) <= 12:
                return [Rule("", (f"grid-column: span {token} / span {token}",))]
            return []

        if base.startswith("opacity-"):
            token = base[8:]
            if token.isdigit() and 0 <= int(token) <= 100:
                return [Rule("", (f"opacity: {int(token) / 100:g}",))]
            return []

        return []

    def _border_rules(self, base: str, ds: DesignSystem) -> list[Rule]:
        widths = {"": "1px", "0": "0px", "2": "2px", "4": "4px", "8": "8px"}
        sides = {"t": "top", "r": "right", "b": "bottom", "l": "left"}

        token = base[7:] if base.startswith("border-") else ""
        if token in widths:
            return [Rule("", (f"border-width: {widths[token]}",))]

        side, _, rest = token.partition("-")
        if side in sides and rest in widths:
            return [Rule("", (f"border-{sides[side]}-width: {widths[rest]}",))]
        if side in sides and not rest:
            return [Rule("", (f"border-{sides[side]}-width: 1px",))]

        styles = {"solid", "dashed", "dotted", "double", "none"}
        if token in styles:
            return [Rule("", (f"border-style: {token}",))]

        color = ds.color(token)
        return [Rule("", (f"border-color: {color}",))] if color else []

    def _spacing_rules(self, negative: bool, prefix: str, token: str, ds: DesignSystem) -> list[Rule]:
        props = _SPACING_PROPS[prefix]
        if token == "auto":
            if negative or prefix.startswith("p"):
                return []
            value = "auto"
        else:
            value = ds.spacing.get(token)
            if value is None:
                return []
            if negative:
                if prefix.startswith("p"):
                    return []
                value = f"-{value}"
        return [Rule("", tuple(f"{prop}: {value}" for prop in props))]


_SPACING_PROPS: dict[str, tuple[str, ...]] = {
    "p": ("padding",),
    "px": ("padding-left", "padding-right"),
    "py": ("padding-top", "padding-bottom"),
    "pt": ("padding-top",),
    "pr": ("padding-right",),
    "pb": ("padding-bottom",),
    "pl": ("padding-left",),
    "m": ("margin",),
    "mx": ("margin-left", "margin-right"),
    "my": ("margin-top", "margin-bottom"),
    "mt": ("margin-top",),
    "mr": ("margin-right",),
    "mb": ("margin-bottom",),
    "ml": ("margin-left",),
}

_SPACING_UTILITY = re.compile(r"^(?P<neg>-?)(?P<prefix>p[xytrbl]?|m[xytrbl]?)-(?P<token>[\w.]+)$")

_STATIC_UTILITIES: dict[str, tuple[str, ...]] = {
    "block": ("display: block",),
    "inline-block": ("display: inline-block",),
    "inline": ("display: inline",),
    "flex": ("display: flex",),
    "inline-flex": ("display: inline-flex",),
    "grid": ("display: grid",),
    "hidden": ("display: none",),
    "flex-row": ("flex-direction: row",),
    "flex-col": ("flex-direction: column",),
    "flex-wrap": ("flex-wrap: wrap",),
    "flex-1": ("flex: 1 1 0%",),
    "flex-none": ("flex: none",),
    "grow": ("flex-grow: 1",),
    "shrink-0": ("flex-shrink: 0",),
    "items-start": ("align-items: flex-start",),
    "items-center": ("align-items: center",),
    "items-end": ("align-items: flex-end",),
    "items-baseline": ("align-items: baseline",),
    "justify-start": ("justify-content: flex-start",),
    "justify-center": ("justify-content: center",),
    "justify-end": ("justify-content: flex-end",),
    "justify-between": ("justify-content: space-between",),
    "text-left": ("text-align: left",),
    "text-center": ("text-align: center",),
    "text-right": ("text-align: right",),
    "italic": ("font-style: italic",),
    "not-italic": ("font-style: normal",),
    "uppercase": ("text-transform: uppercase",),
    "lowercase": ("text-transform: lowercase",),
    "capitalize": ("text-transform: capitalize",),
    "underline": ("text-decoration-line: underline",),
    "no-underline": ("text-decoration-line: none",),
    "truncate": ("overflow: hidden", "text-overflow: ellipsis", "white-space: nowrap"),
    "whitespace-nowrap": ("white-space: nowrap",),
    "break-words": ("overflow-wrap: break-word",),
    "overflow-hidden": ("overflow: hidden",),
    "overflow-x-auto": ("overflow-x: auto",),
    "relative": ("position: relative",),
    "absolute": ("position: absolute",),
    "sticky": ("position: sticky",),
    "top-0": ("top: 0px",),
    "inset-0": ("inset: 0px",),
    "list-none": ("list-style-type: none",),
    "list-disc": ("list-style-type: disc",),
    "list-decimal": ("list-style-type: decimal",),
    "antialiased": ("-webkit-font-smoothing: antialiased", "-moz-osx-font-smoothing: grayscale"),
    "transition": (
        "transition-property: color, background-color, border-color, text-decoration-color, fill, stroke",
        "transition-timing-function: cubic-bezier(0.4, 0, 0.2, 1)",
        "transition-duration: 150ms",
    ),
    "sr-only": (
        "position: absolute",
        "width: 1px",
        "height: 1px",
        "padding: 0",
        "margin: -1px",
        "overflow: hidden",
        "clip: rect(0, 0, 0, 0)",
        "white-space: nowrap",
        "border-width: 0",
    ),
}

_LEADING = {
    "none": "1", "tight": "1.25", "snug": "1.375", "normal": "1.5", "relaxed": "1.625", "loose": "2",
}

_TRACKING = {
    "tighter": "-0.05em", "tight": "-0.025em", "normal": "0em", "wide": "0.025em",
    "wider": "0.05em", "widest": "0.1em",
}


def _size_value(token: str, ds: DesignSystem, prop: str) -> str | None:
    fixed = {"full": "100%", "auto": "auto", "min": "min-content", "max": "max-content"}
    if token in fixed:
        return fixed[token]
    if token == "screen":
        return "100vw" if prop == "width" else "100vh"
    if "/" in token:
        num, _, den = token.partition("/")
        if num.isdigit() and den.isdigit() and int(den) > 0:
            return f"{int(num) / int(den) * 100:g}%"
        return None
    return ds.spacing.get(token)


def _format_block(selector: str, declarations: Iterable[str]) -> str:
    body = " ".join(f"{d};" for d in declarations)
    return f"{selector} {{ {body} }}"


class _ClassScanner(HTMLParser):
    """Collect class attribute tokens from every element."""

    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.classes: set[str] = set()

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        for name, value in attrs:
            if name.lower() == "class" and value:
                self.classes.update(value.split())

    def handle_startendtag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        self.handle_starttag(tag, attrs)
