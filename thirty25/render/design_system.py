"""Design tokens used by the JIT CSS generator."""

from __future__ import annotations

from pydantic import BaseModel, Field

Palette = dict[str, dict[str, str]]

DEFAULT_COLORS: Palette = {
    "black": {"DEFAULT": "#000000"},
    "white": {"DEFAULT": "#ffffff"},
    "transparent": {"DEFAULT": "transparent"},
    "current": {"DEFAULT": "currentColor"},
    "slate": {
        "50": "#f8fafc", "100": "#f1f5f9", "200": "#e2e8f0", "300": "#cbd5e1", "400": "#94a3b8",
        "500": "#64748b", "600": "#475569", "700": "#334155", "800": "#1e293b", "900": "#0f172a",
    },
    "gray": {
        "50": "#f9fafb", "100": "#f3f4f6", "200": "#e5e7eb", "300": "#d1d5db", "400": "#9ca3af",
        "500": "#6b7280", "600": "#4b5563", "700": "#374151", "800": "#1f2937", "900": "#111827",
    },
    "red": {
        "50": "#fef2f2", "100": "#fee2e2", "200": "#fecaca", "300": "#fca5a5", "400": "#f87171",
        "500": "#ef4444", "600": "#dc2626", "700": "#b91c1c", "800": "#991b1b", "900": "#7f1d1d",
    },
    "orange": {
        "50": "#fff7ed", "100": "#ffedd5", "200": "#fed7aa", "300": "#fdba74", "400": "#fb923c",
        "500": "#f97316", "600": "#ea580c", "700": "#c2410c", "800": "#9a3412", "900": "#7c2d12",
    },
    "yellow": {
        "50": "#fffbeb", "100": "#fef3c7", "200": "#fde68a", "300": "#fcd34d", "400": "#fbbf24",
        "500": "#f59e0b", "600": "#d97706", "700": "#b45309", "800": "#92400e", "900": "#78350f",
    },
    "green": {
        "50": "#f0fdf4", "100": "#dcfce7", "200": "#bbf7d0", "300": "#86efac", "400": "#4ade80",
        "500": "#22c55e", "600": "#16a34a", "700": "#15803d", "800": "#166534", "900": "#14532d",
    },
    "cyan": {
        "50": "#ecfeff", "100": "#cffafe", "200": "#a5f3fc", "300": "#67e8f9", "400": "#22d3ee",
        "500": "#06b6d4", "600": "#0891b2", "700": "#0e7490", "800": "#155e75", "900": "#164e63",
    },
    "sky": {
        "50": "#f0f9ff", "100": "#e0f2fe", "200": "#bae6fd", "300": "#7dd3fc", "400": "#38bdf8",
        "500": "#0ea5e9", "600": "#0284c7", "700": "#0369a1", "800": "#075985", "900": "#0c4a6e",
    },
    "blue": {
        "50": "#eff6ff", "100": "#dbeafe", "200": "#bfdbfe", "300": "#93c5fd", "400": "#60a5fa",
        "500": "#3b82f6", "600": "#2563eb", "700": "#1d4ed8", "800": "#1e40af", "900": "#1e3a8a",
    },
    "indigo": {
        "50": "#eef2ff", "100": "#e0e7ff", "200": "#c7d2fe", "300": "#a5b4fc", "400": "#818cf8",
        "500": "#6366f1", "600": "#4f46e5", "700": "#4338ca", "800": "#3730a3", "900": "#312e81",
    },
}

SPACING: dict[str, str] = {
    "0": "0px", "px": "1px", "0.5": "0.125rem", "1": "0.25rem", "1.5": "0.375rem",
    "2": "0.5rem", "2.5": "0.625rem", "3": "0.75rem", "3.5": "0.875rem", "4": "1rem",
    "5": "1.25rem", "6": "1.5rem", "7": "1.75rem", "8": "2rem", "9": "2.25rem",
    "10": "2.5rem", "11": "2.75rem", "12": "3rem", "14": "3.5rem", "16": "4rem",
    "20": "5rem", "24": "6rem", "28": "7rem", "32": "8rem", "40": "10rem",
    "48": "12rem", "56": "14rem", "64": "16rem",
}

FONT_SIZES: dict[str, tuple[str, str]] = {
    "xs": ("0.75rem", "1rem"),
    "sm": ("0.875rem", "1.25rem"),
    "base": ("1rem", "1.5rem"),
    "lg": ("1.125rem", "1.75rem"),
    "xl": ("1.25rem", "1.75rem"),
    "2xl": ("1.5rem", "2rem"),
    "3xl": ("1.875rem", "2.25rem"),
    "4xl": ("2.25rem", "2.5rem"),
    "5xl": ("3rem", "1"),
    "6xl": ("3.75rem", "1"),
}

FONT_WEIGHTS: dict[str, str] = {
    "thin": "100", "extralight": "200", "light": "300", "normal": "400", "medium": "500",
    "semibold": "600", "bold": "700", "extrabold": "800", "black": "900",
}

FONT_FAMILIES: dict[str, str] = {
    "sans": 'Poppins, ui-sans-serif, system-ui, -apple-system, "Segoe UI", Roboto, "Helvetica Neue", Arial, sans-serif',
    "serif": 'Merriweather, ui-serif, Georgia, Cambria, "Times New Roman", Times, serif',
    "mono": '"Cascadia Code", ui-monospace, SFMono-Regular, Menlo, Monaco, Consolas, "Liberation Mono", monospace',
}

SCREENS: dict[str, str] = {
    "sm": "640px",
    "md": "768px",
    "lg": "1024px",
    "xl": "1280px",
    "2xl": "1536px",
}

# Horizontal container padding per breakpoint ("DEFAULT" applies below sm).
CONTAINER_PADDING: dict[str, str] = {
    "DEFAULT": "2rem",
    "sm": "2rem",
    "lg": "4rem",
    "xl": "5rem",
    "2xl": "6rem",
}

# Container max widths; breakpoints not listed keep the full width.
CONTAINER_SCREENS: dict[str, str] = {
    "lg": "1024px",
    "xl": "1280px",
}

BORDER_RADIUS: dict[str, str] = {
    "none": "0px", "sm": "0.125rem", "DEFAULT": "0.25rem", "md": "0.375rem",
    "lg": "0.5rem", "xl": "0.75rem", "2xl": "1rem", "full": "9999px",
}

SHADOWS: dict[str, str] = {
    "sm": "0 1px 2px 0 rgb(0 0 0 / 0.05)",
    "DEFAULT": "0 1px 3px 0 rgb(0 0 0 / 0.1), 0 1px 2px -1px rgb(0 0 0 / 0.1)",
    "md": "0 4px 6px -1px rgb(0 0 0 / 0.1), 0 2px 4px -2px rgb(0 0 0 / 0.1)",
    "lg": "0 10px 15px -3px rgb(0 0 0 / 0.1), 0 4px 6px -4px rgb(0 0 0 / 0.1)",
    "none": "0 0 #0000",
}

MAX_WIDTHS: dict[str, str] = {
    "xs": "20rem", "sm": "24rem", "md": "28rem", "lg": "32rem", "xl": "36rem",
    "2xl": "42rem", "3xl": "48rem", "4xl": "56rem", "5xl": "64rem", "6xl": "72rem",
    "7xl": "80rem", "full": "100%", "prose": "65ch", "none": "none",
}


class DesignSystem(BaseModel):
    """Colours, scales and breakpoints the utilities are generated from."""

    colors: Palette = Field(default_factory=lambda: {k: dict(v) for k, v in DEFAULT_COLORS.items()})
    spacing: dict[str, str] = Field(default_factory=lambda: dict(SPACING))
    font_sizes: dict[str, tuple[str, str]] = Field(default_factory=lambda: dict(FONT_SIZES))
    font_weights: dict[str, str] = Field(default_factory=lambda: dict(FONT_WEIGHTS))
    font_families: dict[str, str] = Field(default_factory=lambda: dict(FONT_FAMILIES))
    screens: dict[str, str] = Field(default_factory=lambda: dict(SCREENS))
    container_padding: dict[str, str] = Field(default_factory=lambda: dict(CONTAINER_PADDING))
    container_screens: dict[str, str] = Field(default_factory=lambda: dict(CONTAINER_SCREENS))
    border_radius: dict[str, str] = Field(default_factory=lambda: dict(BORDER_RADIUS))
    shadows: dict[str, str] = Field(default_factory=lambda: dict(SHADOWS))
    max_widths: dict[str, str] = Field(default_factory=lambda: dict(MAX_WIDTHS))

    def with_aliases(self, aliases: dict[str, str]) -> DesignSystem:
        """Copy with extra colour names pointing at existing palettes."""
        colors = {k: dict(v) for k, v in self.colors.items()}
        for alias, target in aliases.items():
            if target not in colors:
                raise ValueError(f"Unknown palette {target!r} for alias {alias!r}")
            colors[alias] = dict(colors[target])
        return self.model_copy(update={"colors": colors})

    def color(self, token: str) -> str | None:
        """Resolve ``blue-500``, ``white`` or ``blue-500/75`` to a CSS colour."""
        name, _, alpha = token.partition("/")
        if name in self.colors:
            value = self.colors[name].get("DEFAULT")
        else:
            palette, _, shade = name.rpartition("-")
            value = self.colors.get(palette, {}).get(shade) if palette else None
        if value is None:
            return None
        if alpha:
            try:
                return with_alpha(value, float(alpha) / 100)
            except ValueError:
                return None
        return value


def with_alpha(hex_value: str, alpha: float) -> str:
    """Apply an opacity to a ``#rrggbb`` colour."""
    if not hex_value.startswith("#"):
        return hex_value
    digits = hex_value.lstrip("#")
    if len(digits) == 3:
        digits = "".join(ch * 2 for ch in digits)
    r = int(digits[0:2], 16)
    g = int(digits[2:4], 16)
    b = int(digits[4:6], 16)
    return f"rgb({r} {g} {b} / {alpha:g})"


def site_design_system() -> DesignSystem:
    """The blog's design system: ``primary`` is sky and ``base`` is gray."""
    return DesignSystem().with_aliases({"primary": "sky", "base": "gray"})
