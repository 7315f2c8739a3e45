"""Application name normalization.

Window owners are reported differently by every platform and desktop
environment: process names, executable paths, WM_CLASS strings or nothing
but a window title. This module reduces them to a small vocabulary of
canonical labels ("Terminal", "VS Code", "Files", ...).

Normalization is an ordered list of strategies. Each strategy takes a
:class:`RawSample` and returns a :class:`NormalizationResult` or ``None``;
the first result wins, and the final fallback strategy always answers.
"""

from __future__ import annotations

import re
from pathlib import PureWindowsPath
from typing import Callable, Dict, List, Optional, Pattern, Sequence, Tuple

from ..providers.wmclass import NullWmClassResolver, WmClassResolver
from .events import NormalizationReason, NormalizationResult, RawSample

Strategy = Callable[[RawSample], Optional[NormalizationResult]]
Rule = Tuple[Pattern[str], str]

OWNER_NAME_MAP: Dict[str, str] = {
    "gnome-terminal-server": "Terminal",
    "gnome-terminal": "Terminal",
    "tilix": "Terminal",
    "konsole": "Terminal",
    "xfce4-terminal": "Terminal",
    "alacritty": "Terminal",
    "kitty": "Terminal",
    "xterm": "Terminal",
    "code": "VS Code",
    "visual studio code": "VS Code",
    "brave-browser": "Brave",
    "brave": "Brave",
    "google-chrome": "Chrome",
    "chromium": "Chromium",
    "firefox": "Firefox",
    "gnome-control-center": "Settings",
    "org.gnome.gnome-control-center": "Settings",
    "nautilus": "Files",
    "nemo": "Files",
    "org.gnome.Nautilus": "Files",
}

# Owner names are compared lower-cased
_OWNER_LOOKUP: Dict[str, str] = {name.lower(): app for name, app in OWNER_NAME_MAP.items()}

_WORD_SEPARATORS = re.compile(r"[-_.\s]+")

PATH_RULES: Sequence[Rule] = (
    (re.compile(r"control-center"), "Settings"),
    (re.compile(r"gnome-terminal|tilix|konsole|alacritty|kitty|xterm"), "Terminal"),
    (re.compile(r"code"), "VS Code"),
    (re.compile(r"brave"), "Brave"),
    (re.compile(r"chrome"), "Chrome"),
    (re.compile(r"firefox"), "Firefox"),
    (re.compile(r"nautilus|nemo"), "Files"),
)

WMCLASS_RULES: Sequence[Rule] = (
    (re.compile(r"control-center"), "Settings"),
    (re.compile(r"terminal|tilix|konsole|alacritty|kitty|xterm"), "Terminal"),
    (re.compile(r"code"), "VS Code"),
    (re.compile(r"brave"), "Brave"),
    (re.compile(r"chrome"), "Chrome"),
    (re.compile(r"firefox"), "Firefox"),
    (re.compile(r"nautilus|nemo"), "Files"),
)

# "Browser" is deliberately generic: a title alone cannot tell Chrome from Brave
TITLE_RULES: Sequence[Rule] = (
    (re.compile(r"settings|control center|gnome control"), "Settings"),
    (re.compile(r"terminal|bash|zsh|fish"), "Terminal"),
    (re.compile(r"file|nautilus|files"), "Files"),
    (re.compile(r"vscode|visual studio code"), "VS Code"),
    (re.compile(r"firefox|mozilla"), "Firefox"),
    (re.compile(r"chrome|brave"), "Browser"),
)


def title_case(value: Optional[str]) -> Optional[str]:
    """Split on ``-``, ``_``, ``.`` and whitespace runs and capitalize each word.

    >>> title_case("gnome-control-center")
    'Gnome Control Center'
    """
    if not value:
        return value
    words = _WORD_SEPARATORS.split(str(value))
    return " ".join(word[:1].upper() + word[1:] for word in words if word)


def match_rules(rules: Sequence[Rule], text: str) -> Optional[str]:
    """Return the label of the first rule whose pattern occurs in ``text``."""
    for pattern, app in rules:
        if pattern.search(text):
            return app
    return None


def owner_name_strategy(sample: RawSample) -> Optional[NormalizationResult]:
    if not sample.owner_name:
        return None

    key = str(sample.owner_name).strip().lower()
    if key in _OWNER_LOOKUP:
        return NormalizationResult(_OWNER_LOOKUP[key], NormalizationReason.OWNER_MAP)
    label = title_case(key) if len(key) > 1 else None
    if label:
        return NormalizationResult(label, NormalizationReason.OWNER_TITLECASE)
    return None


def owner_path_strategy(sample: RawSample) -> Optional[NormalizationResult]:
    if not sample.owner_path:
        return None

    # PureWindowsPath splits on both "/" and "\"
    basename = PureWindowsPath(str(sample.owner_path)).name.lower()
    if not basename:
        return None

    app = match_rules(PATH_RULES, basename)
    if app:
        return NormalizationResult(app, NormalizationReason.OWNER_PATH)

    label = title_case(basename)
    if label:
        return NormalizationResult(label, NormalizationReason.OWNER_PATH_FALLBACK)
    return None


class WmClassStrategy:
    """Ask the window manager for the window class of ``sample.window_id``."""

    def __init__(self, resolver: WmClassResolver):
        self.resolver = resolver

    def __call__(self, sample: RawSample) -> Optional[NormalizationResult]:
        if not sample.window_id:
            return None

        wm_class = self.resolver.resolve(sample.window_id)
        if not wm_class:
            return None

        key = wm_class.lower()
        app = match_rules(WMCLASS_RULES, key) or title_case(key)
        if not app:
            return None
        return NormalizationResult(app, NormalizationReason.XPROP_WMCLASS)


def title_strategy(sample: RawSample) -> Optional[NormalizationResult]:
    if not sample.title:
        return None

    app = match_rules(TITLE_RULES, sample.title.lower())
    if app:
        return NormalizationResult(app, NormalizationReason.TITLE_CONTAINS)
    return None


def fallback_strategy(sample: RawSample) -> NormalizationResult:
    # Separator-only titles or owners ("-", "...") title-case to nothing
    for source in (sample.title, sample.owner_name):
        label = title_case(source)
        if label:
            return NormalizationResult(label, NormalizationReason.FALLBACK)
    return NormalizationResult("Unknown", NormalizationReason.FALLBACK)


class AppNormalizer:
    """Maps raw focus samples to canonical application labels."""

    def __init__(self, resolver: Optional[WmClassResolver] = None):
        """Initialize the normalizer.

        Args:
            resolver: WM-class resolver used when owner data is missing.
                Defaults to a resolver that never answers.
        """
        self.resolver = resolver or NullWmClassResolver()
        self.strategies: List[Strategy] = [
            owner_name_strategy,
            owner_path_strategy,
            WmClassStrategy(self.resolver),
            title_strategy,
            fallback_strategy,
        ]

    def normalize_sample(self, sample: RawSample) -> NormalizationResult:
        """Run the strategies in order and return the first answer."""
        for strategy in self.strategies:
            result = strategy(sample)
            if result is not None:
                return result
        return fallback_strategy(sample)

    def normalize(
        self,
        owner_name: Optional[str],
        owner_path: Optional[str],
        title: Optional[str],
        window_id: Optional[int],
    ) -> NormalizationResult:
        return self.normalize_sample(RawSample(owner_name=owner_name, owner_path=owner_path, title=title, window_id=window_id))


def normalize(
    owner_name: Optional[str] = None,
    owner_path: Optional[str] = None,
    title: Optional[str] = None,
    window_id: Optional[int] = None,
    resolver: Optional[WmClassResolver] = None,
) -> NormalizationResult:
    """Normalize one set of window owner data.

    Args:
        owner_name: Owner process name
        owner_path: Owner executable path
        title: Window title
        window_id: Platform window identifier, used for WM-class lookup
        resolver: WM-class resolver (no lookup when omitted)

    Returns:
        The canonical app label and the heuristic that produced it
    """
    return AppNormalizer(resolver).normalize(owner_name, owner_path, title, window_id)
