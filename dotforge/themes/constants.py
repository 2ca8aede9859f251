"""Theme engine constants."""

from __future__ import annotations

DEFAULT_THEME_ID = "default"
DEFAULT_THEME_NAME = "Default"
DEFAULT_AUTHOR = "Dotforge User"

VARIANTS: tuple[str, ...] = ("day", "night")
SCHEDULE_MODES: tuple[str, ...] = ("monthly", "manual", "fixed")

PALETTE_KEYS: tuple[str, ...] = (
    "base",
    "mantle",
    "crust",
    "surface0",
    "surface1",
    "surface2",
    "text",
    "subtext0",
    "subtext1",
    "accent",
    "secondary",
    "red",
    "green",
    "yellow",
    "blue",
    "pink",
    "teal",
)

# Semantic token -> palette slot.
DEFAULT_SEMANTIC_TOKENS: dict[str, str] = {
    # Window manager
    "activeBorder": "accent",
    "inactiveBorder": "surface1",
    "shadow": "crust",
    # Status bar
    "barBackground": "base",
    "barForeground": "text",
    "workspaceActive": "accent",
    "workspaceEmpty": "surface0",
    "workspaceVisible": "surface1",
    "workspaceUrgent": "red",
    # Terminal
    "cursorColor": "accent",
    "selectionBg": "surface2",
    "selectionFg": "text",
    # Core semantic
    "primary": "accent",
    "secondary": "secondary",
    "success": "green",
    "warning": "yellow",
    "error": "red",
    "info": "blue",
    # Backgrounds
    "bgPrimary": "base",
    "bgSecondary": "mantle",
    "bgTertiary": "crust",
    "bgElevated": "surface0",
    "bgHover": "surface1",
    "bgActive": "surface2",
    # Text
    "textPrimary": "text",
    "textSecondary": "subtext0",
    "textMuted": "subtext1",
    "textDisabled": "surface2",
    "textOnAccent": "base",
    # Borders
    "border": "surface1",
    "borderSubtle": "surface0",
    "divider": "surface0",
    # Interactive
    "buttonPrimary": "accent",
    "buttonSecondary": "surface1",
    "buttonHover": "surface2",
    "inputBg": "surface0",
    "inputBorder": "surface1",
    "inputFocus": "accent",
    # Toasts
    "toastBg": "surface0",
    "toastBorder": "surface1",
    "toastSuccess": "green",
    "toastWarning": "yellow",
    "toastError": "red",
    "toastInfo": "blue",
    # Cards
    "cardBg": "surface0",
    "cardBorder": "surface1",
    "cardHeaderBg": "surface1",
    # Navigation
    "navBg": "mantle",
    "navItemHover": "surface0",
    "navItemActive": "surface1",
    "navAccent": "accent",
    # Auth screens
    "authBg": "base",
    "authCardBg": "surface0",
    "authAccent": "accent",
}

MONTH_NAMES: tuple[str, ...] = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)
