from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

COLOR_NAMES: Mapping[str, str] = MappingProxyType(
    {
        "#ffffff": "white",
        "#000000": "black",
        "transparent": "transparent",
        "#f9fafb": "gray-50",
        "#f3f4f6": "gray-100",
        "#e5e7eb": "gray-200",
        "#d1d5db": "gray-300",
        "#9ca3af": "gray-400",
        "#6b7280": "gray-500",
        "#4b5563": "gray-600",
        "#374151": "gray-700",
        "#1f2937": "gray-800",
        "#111827": "gray-900",
        "#030712": "gray-950",
        "#f8fafc": "slate-50",
        "#f1f5f9": "slate-100",
        "#e2e8f0": "slate-200",
        "#cbd5e1": "slate-300",
        "#94a3b8": "slate-400",
        "#64748b": "slate-500",
        "#475569": "slate-600",
        "#334155": "slate-700",
        "#1e293b": "slate-800",
        "#0f172a": "slate-900",
        "#18181b": "zinc-900",
        "#fef2f2": "red-50",
        "#fee2e2": "red-100",
        "#fecaca": "red-200",
        "#fca5a5": "red-300",
        "#f87171": "red-400",
        "#ef4444": "red-500",
        "#dc2626": "red-600",
        "#b91c1c": "red-700",
        "#991b1b": "red-800",
        "#7f1d1d": "red-900",
        "#fff7ed": "orange-50",
        "#ffedd5": "orange-100",
        "#fed7aa": "orange-200",
        "#fdba74": "orange-300",
        "#fb923c": "orange-400",
        "#f97316": "orange-500",
        "#ea580c": "orange-600",
        "#c2410c": "orange-700",
        "#fffbeb": "amber-50",
        "#fef3c7": "amber-100",
        "#fde68a": "amber-200",
        "#fcd34d": "amber-300",
        "#fbbf24": "amber-400",
        "#f59e0b": "amber-500",
        "#d97706": "amber-600",
        "#b45309": "amber-700",
        "#fefce8": "yellow-50",
        "#fef9c3": "yellow-100",
        "#fef08a": "yellow-200",
        "#fde047": "yellow-300",
        "#facc15": "yellow-400",
        "#eab308": "yellow-500",
        "#f0fdf4": "green-50",
        "#dcfce7": "green-100",
        "#bbf7d0": "green-200",
        "#86efac": "green-300",
        "#4ade80": "green-400",
        "#22c55e": "green-500",
        "#16a34a": "green-600",
        "#15803d": "green-700",
        "#166534": "green-800",
        "#14532d": "green-900",
        "#ecfdf5": "emerald-50",
        "#d1fae5": "emerald-100",
        "#a7f3d0": "emerald-200",
        "#6ee7b7": "emerald-300",
        "#34d399": "emerald-400",
        "#10b981": "emerald-500",
        "#059669": "emerald-600",
        "#047857": "emerald-700",
        "#f0fdfa": "teal-50",
        "#ccfbf1": "teal-100",
        "#99f6e4": "teal-200",
        "#5eead4": "teal-300",
        "#2dd4bf": "teal-400",
        "#14b8a6": "teal-500",
        "#0d9488": "teal-600",
        "#0f766e": "teal-700",
        "#ecfeff": "cyan-50",
        "#cffafe": "cyan-100",
        "#a5f3fc": "cyan-200",
        "#67e8f9": "cyan-300",
        "#22d3ee": "cyan-400",
        "#06b6d4": "cyan-500",
        "#0891b2": "cyan-600",
        "#0e7490": "cyan-700",
        "#eff6ff": "blue-50",
        "#dbeafe": "blue-100",
        "#bfdbfe": "blue-200",
        "#93c5fd": "blue-300",
        "#60a5fa": "blue-400",
        "#3b82f6": "blue-500",
        "#2563eb": "blue-600",
        "#1d4ed8": "blue-700",
        "#1e40af": "blue-800",
        "#1e3a8a": "blue-900",
        "#eef2ff": "indigo-50",
        "#e0e7ff": "indigo-100",
        "#c7d2fe": "indigo-200",
        "#a5b4fc": "indigo-300",
        "#818cf8": "indigo-400",
        "#6366f1": "indigo-500",
        "#4f46e5": "indigo-600",
        "#4338ca": "indigo-700",
        "#3730a3": "indigo-800",
        "#312e81": "indigo-900",
        "#f5f3ff": "violet-50",
        "#ede9fe": "violet-100",
        "#ddd6fe": "violet-200",
        "#c4b5fd": "violet-300",
        "#a78bfa": "violet-400",
        "#8b5cf6": "violet-500",
        "#7c3aed": "violet-600",
        "#6d28d9": "violet-700",
        "#5b21b6": "violet-800",
        "#4c1d95": "violet-900",
        "#faf5ff": "purple-50",
        "#f3e8ff": "purple-100",
        "#e9d5ff": "purple-200",
        "#d8b4fe": "purple-300",
        "#c084fc": "purple-400",
        "#a855f7": "purple-500",
        "#9333ea": "purple-600",
        "#7e22ce": "purple-700",
        "#6b21a8": "purple-800",
        "#581c87": "purple-900",
        "#fdf2f8": "pink-50",
        "#fce7f3": "pink-100",
        "#fbcfe8": "pink-200",
        "#f9a8d4": "pink-300",
        "#f472b6": "pink-400",
        "#ec4899": "pink-500",
        "#db2777": "pink-600",
        "#be185d": "pink-700",
        "#9d174d": "pink-800",
        "#831843": "pink-900",
        "#fff1f2": "rose-50",
        "#ffe4e6": "rose-100",
        "#fecdd3": "rose-200",
        "#fda4af": "rose-300",
        "#fb7185": "rose-400",
        "#f43f5e": "rose-500",
        "#e11d48": "rose-600",
        "#be123c": "rose-700",
        "#9f1239": "rose-800",
        "#881337": "rose-900",
    }
)

SPACING_SCALE: Mapping[float, str] = MappingProxyType(
    {
        0: "0",
        1: "px",
        2: "0.5",
        4: "1",
        6: "1.5",
        8: "2",
        10: "2.5",
        12: "3",
        14: "3.5",
        16: "4",
        20: "5",
        24: "6",
        28: "7",
        32: "8",
        36: "9",
        40: "10",
        44: "11",
        48: "12",
        56: "14",
        64: "16",
        80: "20",
        96: "24",
        112: "28",
        128: "32",
        144: "36",
        160: "40",
        176: "44",
        192: "48",
        208: "52",
        224: "56",
        240: "60",
        256: "64",
        288: "72",
        320: "80",
        384: "96",
    }
)

DISPLAY_CLASSES: Mapping[str, str] = MappingProxyType(
    {
        "flex": "flex",
        "grid": "grid",
        "block": "block",
        "inline": "inline",
        "inline-block": "inline-block",
        "inline-flex": "inline-flex",
        "none": "hidden",
    }
)
FLEX_DIRECTION_CLASSES: Mapping[str, str] = MappingProxyType(
    {
        "row": "flex-row",
        "column": "flex-col",
        "row-reverse": "flex-row-reverse",
        "column-reverse": "flex-col-reverse",
    }
)
JUSTIFY_CONTENT_CLASSES: Mapping[str, str] = MappingProxyType(
    {
        "flex-start": "justify-start",
        "center": "justify-center",
        "flex-end": "justify-end",
        "space-between": "justify-between",
        "space-around": "justify-around",
        "space-evenly": "justify-evenly",
    }
)
ALIGN_ITEMS_CLASSES: Mapping[str, str] = MappingProxyType(
    {
        "flex-start": "items-start",
        "center": "items-center",
        "flex-end": "items-end",
        "stretch": "items-stretch",
        "baseline": "items-baseline",
    }
)
ALIGN_SELF_CLASSES: Mapping[str, str] = MappingProxyType(
    {
        "auto": "self-auto",
        "flex-start": "self-start",
        "center": "self-center",
        "flex-end": "self-end",
        "stretch": "self-stretch",
    }
)
FLEX_WRAP_CLASSES: Mapping[str, str] = MappingProxyType(
    {"wrap": "flex-wrap", "nowrap": "flex-nowrap", "wrap-reverse": "flex-wrap-reverse"}
)
POSITION_CLASSES: Mapping[str, str] = MappingProxyType(
    {
        "static": "static",
        "relative": "relative",
        "absolute": "absolute",
        "fixed": "fixed",
        "sticky": "sticky",
    }
)
OVERFLOW_CLASSES: Mapping[str, str] = MappingProxyType(
    {
        "visible": "overflow-visible",
        "hidden": "overflow-hidden",
        "auto": "overflow-auto",
        "scroll": "overflow-scroll",
    }
)
Z_INDEX_CLASSES: Mapping[float, str] = MappingProxyType(
    {0: "z-0", 10: "z-10", 20: "z-20", 30: "z-30", 40: "z-40", 50: "z-50"}
)

BORDER_RADIUS_CLASSES: Mapping[float, str] = MappingProxyType(
    {
        0: "rounded-none",
        2: "rounded-sm",
        4: "rounded",
        6: "rounded-md",
        8: "rounded-lg",
        12: "rounded-xl",
        16: "rounded-2xl",
        24: "rounded-3xl",
        9999: "rounded-full",
    }
)
BORDER_WIDTH_CLASSES: Mapping[float, str] = MappingProxyType(
    {0: "border-0", 1: "border", 2: "border-2", 4: "border-4", 8: "border-8"}
)
BORDER_STYLE_CLASSES: Mapping[str, str] = MappingProxyType(
    {
        "solid": "border-solid",
        "dashed": "border-dashed",
        "dotted": "border-dotted",
        "double": "border-double",
        "none": "border-none",
    }
)

FONT_SIZE_CLASSES: Mapping[float, str] = MappingProxyType(
    {
        12: "text-xs",
        14: "text-sm",
        16: "text-base",
        18: "text-lg",
        20: "text-xl",
        24: "text-2xl",
        30: "text-3xl",
        36: "text-4xl",
        48: "text-5xl",
        60: "text-6xl",
        72: "text-7xl",
        96: "text-8xl",
        128: "text-9xl",
    }
)
FONT_WEIGHT_CLASSES: Mapping[float, str] = MappingProxyType(
    {
        100: "font-thin",
        200: "font-extralight",
        300: "font-light",
        400: "font-normal",
        500: "font-medium",
        600: "font-semibold",
        700: "font-bold",
        800: "font-extrabold",
        900: "font-black",
    }
)
FONT_WEIGHT_KEYWORDS: Mapping[str, int] = MappingProxyType({"normal": 400, "bold": 700})
LINE_HEIGHT_CLASSES: Mapping[float, str] = MappingProxyType(
    {
        1: "leading-none",
        1.25: "leading-tight",
        1.375: "leading-snug",
        1.5: "leading-normal",
        1.625: "leading-relaxed",
        2: "leading-loose",
    }
)
TEXT_ALIGN_CLASSES: Mapping[str, str] = MappingProxyType(
    {
        "left": "text-left",
        "center": "text-center",
        "right": "text-right",
        "justify": "text-justify",
    }
)
TEXT_DECORATION_CLASSES: Mapping[str, str] = MappingProxyType(
    {"underline": "underline", "line-through": "line-through", "none": "no-underline"}
)
TEXT_TRANSFORM_CLASSES: Mapping[str, str] = MappingProxyType(
    {
        "uppercase": "uppercase",
        "lowercase": "lowercase",
        "capitalize": "capitalize",
        "none": "normal-case",
    }
)
FONT_STYLE_CLASSES: Mapping[str, str] = MappingProxyType(
    {"italic": "italic", "normal": "not-italic"}
)
WHITE_SPACE_CLASSES: Mapping[str, str] = MappingProxyType(
    {
        "normal": "whitespace-normal",
        "nowrap": "whitespace-nowrap",
        "pre": "whitespace-pre",
        "pre-wrap": "whitespace-pre-wrap",
    }
)

OPACITY_CLASSES: Mapping[float, str] = MappingProxyType(
    {
        0: "opacity-0",
        0.05: "opacity-5",
        0.1: "opacity-10",
        0.2: "opacity-20",
        0.25: "opacity-25",
        0.3: "opacity-30",
        0.4: "opacity-40",
        0.5: "opacity-50",
        0.6: "opacity-60",
        0.7: "opacity-70",
        0.75: "opacity-75",
        0.8: "opacity-80",
        0.9: "opacity-90",
        0.95: "opacity-95",
        1: "opacity-100",
    }
)
SHADOW_CLASSES: Mapping[str, str] = MappingProxyType(
    {
        "none": "shadow-none",
        "0 1px 2px 0 rgb(0 0 0 / 0.05)": "shadow-sm",
        "0 1px 3px 0 rgb(0 0 0 / 0.1)": "shadow",
        "0 4px 6px -1px rgb(0 0 0 / 0.1)": "shadow-md",
        "0 10px 15px -3px rgb(0 0 0 / 0.1)": "shadow-lg",
        "0 20px 25px -5px rgb(0 0 0 / 0.1)": "shadow-xl",
        "0 25px 50px -12px rgb(0 0 0 / 0.25)": "shadow-2xl",
    }
)
CURSOR_CLASSES: Mapping[str, str] = MappingProxyType(
    {
        "auto": "cursor-auto",
        "default": "cursor-default",
        "pointer": "cursor-pointer",
        "text": "cursor-text",
        "move": "cursor-move",
        "grab": "cursor-grab",
        "not-allowed": "cursor-not-allowed",
    }
)
OBJECT_FIT_CLASSES: Mapping[str, str] = MappingProxyType(
    {
        "contain": "object-contain",
        "cover": "object-cover",
        "fill": "object-fill",
        "none": "object-none",
        "scale-down": "object-scale-down",
    }
)
BLUR_CLASSES: Mapping[float, str] = MappingProxyType(
    {
        0: "blur-none",
        4: "blur-sm",
        8: "blur",
        12: "blur-md",
        16: "blur-lg",
        24: "blur-xl",
        40: "blur-2xl",
        64: "blur-3xl",
    }
)
GRAYSCALE_CLASSES: Mapping[float, str] = MappingProxyType({0: "grayscale-0", 100: "grayscale"})
INVERT_CLASSES: Mapping[float, str] = MappingProxyType({0: "invert-0", 100: "invert"})
SEPIA_CLASSES: Mapping[float, str] = MappingProxyType({0: "sepia-0", 100: "sepia"})
BRIGHTNESS_CLASSES: Mapping[float, str] = MappingProxyType(
    {
        0: "brightness-0",
        50: "brightness-50",
        75: "brightness-75",
        90: "brightness-90",
        95: "brightness-95",
        100: "brightness-100",
        105: "brightness-105",
        110: "brightness-110",
        125: "brightness-125",
        150: "brightness-150",
        200: "brightness-200",
    }
)
CONTRAST_CLASSES: Mapping[float, str] = MappingProxyType(
    {
        0: "contrast-0",
        50: "contrast-50",
        75: "contrast-75",
        100: "contrast-100",
        125: "contrast-125",
        150: "contrast-150",
        200: "contrast-200",
    }
)
SATURATION_CLASSES: Mapping[float, str] = MappingProxyType(
    {
        0: "saturate-0",
        50: "saturate-50",
        100: "saturate-100",
        150: "saturate-150",
        200: "saturate-200",
    }
)
HUE_ROTATE_CLASSES: Mapping[float, str] = MappingProxyType(
    {
        0: "hue-rotate-0",
        15: "hue-rotate-15",
        30: "hue-rotate-30",
        60: "hue-rotate-60",
        90: "hue-rotate-90",
        180: "hue-rotate-180",
    }
)

# Keys with no dedicated table that still compile to an arbitrary property token.
ARBITRARY_PROPERTY_KEYS: frozenset[str] = frozenset(
    {
        "mixBlendMode",
        "backdropFilter",
        "textShadow",
        "transform",
        "transformOrigin",
        "aspectRatio",
        "objectPosition",
        "backgroundImage",
        "backgroundSize",
        "backgroundPosition",
        "backgroundRepeat",
        "fontFamily",
        "gridTemplateRows",
    }
)

DEFAULT_TYPE_CLASSES: Mapping[str, tuple[str, ...]] = MappingProxyType(
    {
        "frame": ("p-4", "bg-gray-100", "rounded-lg"),
        "stack": ("flex", "flex-col", "gap-3", "p-4"),
        "grid": ("grid", "grid-cols-2", "gap-4"),
        "section": ("flex", "flex-col", "items-center", "p-16"),
        "container": ("flex", "flex-col", "p-6"),
        "row": ("flex", "flex-row", "items-center", "gap-4"),
        "card": ("flex", "flex-col", "p-4", "bg-white", "rounded-xl"),
        "page": ("flex", "flex-col", "bg-white"),
        "text": ("text-base", "text-gray-800"),
        "button": ("py-3", "px-6", "bg-indigo-500", "text-white", "font-medium", "rounded-lg"),
        "image": ("object-cover", "rounded-lg"),
        "input": ("py-3", "px-4", "border", "border-gray-300", "rounded-lg", "text-sm"),
        "link": ("text-indigo-500", "cursor-pointer"),
        "icon": ("inline-block", "w-6", "h-6"),
        "video": ("rounded-lg", "bg-zinc-900"),
        "model3d": ("rounded-xl", "bg-zinc-900"),
    }
)
FALLBACK_TYPE_CLASSES: tuple[str, ...] = ("block",)

GRID_COLUMN_LIMIT = 12
