"""Named display renderers for table columns.

Table definitions are JSON, so a column references its renderer by name
('badge', 'date', ...) plus a dict of options. build_renderer() resolves the
name to a ``row -> display value`` function. Renderers that produce markup
return markupsafe.Markup so the HTML layout does not escape them twice;
everything else returns plain text.

Renderers only affect display. Search, sort and CSV export always read the
raw attribute value.
"""

from datetime import date, datetime
from typing import Any, Callable, Optional

from markupsafe import Markup

from .values import field_accessor, stringify

Accessor = Callable[[Any], Any]
Renderer = Callable[[Any], Any]
RendererFactory = Callable[[Accessor, dict[str, Any]], Renderer]

_RENDERERS: dict[str, RendererFactory] = {}


def register_renderer(name: str) -> Callable[[RendererFactory], RendererFactory]:
    """Decorator registering a renderer factory under ``name``."""

    def decorator(factory: RendererFactory) -> RendererFactory:
        _RENDERERS[name] = factory
        return factory

    return decorator


def list_renderers() -> list[str]:
    return sorted(_RENDERERS)


def build_renderer(name: str, accessor: Accessor, options: Optional[dict[str, Any]] = None) -> Renderer:
    """Resolve a renderer name into a display function for one column.

    Raises:
        ValueError: If no renderer is registered under ``name``
    """
    factory = _RENDERERS.get(name)
    if factory is None:
        raise ValueError(f"Unknown renderer '{name}'. Available: {list_renderers()}")
    return factory(accessor, dict(options or {}))


def badge(text: str, variant: str = "default", extra_class: str = "") -> Markup:
    classes = f"badge badge-{variant}"
    if extra_class:
        classes = f"{classes} {extra_class}"
    return Markup('<span class="{}">{}</span>').format(classes, text)


def _parse_date(value: Any) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        return None


def _parse_datetime(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        return value
    text = str(value)
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


# ── Built-in renderers ───────────────────────────────────


@register_renderer("text")
def text_renderer(accessor: Accessor, options: dict[str, Any]) -> Renderer:
    """Value as text, with an ``empty`` placeholder for blank values."""
    empty = options.get("empty", "")

    def render(row: Any) -> str:
        text = stringify(accessor(row))
        return text if text else empty

    return render


@register_renderer("date")
def date_renderer(accessor: Accessor, options: dict[str, Any]) -> Renderer:
    """ISO dates as '8 Jan, 2026'."""
    empty = options.get("empty", "")

    def render(row: Any) -> str:
        value = accessor(row)
        if value in (None, ""):
            return empty
        parsed = _parse_date(value)
        if parsed is None:
            return stringify(value)
        return f"{parsed.day} {parsed.strftime('%b')}, {parsed.year}"

    return render


@register_renderer("datetime")
def datetime_renderer(accessor: Accessor, options: dict[str, Any]) -> Renderer:
    """ISO timestamps as '1/8/2026, 10:15:00 AM'."""
    empty = options.get("empty", "")

    def render(row: Any) -> str:
        value = accessor(row)
        if value in (None, ""):
            return empty
        parsed = _parse_datetime(value)
        if parsed is None:
            return stringify(value)
        clock = parsed.strftime("%I:%M:%S %p").lstrip("0")
        return f"{parsed.month}/{parsed.day}/{parsed.year}, {clock}"

    return render


@register_renderer("currency")
def currency_renderer(accessor: Accessor, options: dict[str, Any]) -> Renderer:
    """Amounts with a currency symbol and thousands separators ('₹2,500')."""
    symbol = options.get("symbol", "₹")

    def render(row: Any) -> str:
        value = accessor(row)
        try:
            amount = float(value)
        except (TypeError, ValueError):
            return stringify(value)
        formatted = f"{amount:,.2f}".rstrip("0").rstrip(".")
        return f"{symbol}{formatted}"

    return render


@register_renderer("badge")
def badge_renderer(accessor: Accessor, options: dict[str, Any]) -> Renderer:
    """Value inside a badge; ``variants`` maps values to badge variants."""
    variants = options.get("variants", {})
    default_variant = options.get("default_variant", "default")
    extra_class = options.get("class", "")

    def render(row: Any) -> Markup:
        text = stringify(accessor(row))
        return badge(text, variants.get(text, default_variant), extra_class)

    return render


@register_renderer("badge_list")
def badge_list_renderer(accessor: Accessor, options: dict[str, Any]) -> Renderer:
    """One badge per list item; ``abbreviate`` truncates items (e.g. days to 'Mon')."""
    variant = options.get("variant", "outline")
    abbreviate = options.get("abbreviate")
    empty = options.get("empty", "-")

    def render(row: Any) -> Markup:
        items = accessor(row) or []
        if not items:
            return Markup('<span class="muted">{}</span>').format(empty)
        badges = []
        for item in items:
            text = stringify(item)
            if abbreviate:
                text = text[:abbreviate]
            badges.append(badge(text, variant))
        return Markup('<span class="badge-list">{}</span>').format(Markup("").join(badges))

    return render


@register_renderer("score")
def score_renderer(accessor: Accessor, options: dict[str, Any]) -> Renderer:
    """'score/max', reading the maximum from ``max_key``."""
    max_of = field_accessor(options.get("max_key", "max_score"))

    def render(row: Any) -> str:
        return f"{stringify(accessor(row))}/{stringify(max_of(row))}"

    return render


@register_renderer("time_range")
def time_range_renderer(accessor: Accessor, options: dict[str, Any]) -> Renderer:
    """'start - end' from two attributes, or a placeholder when either is missing.

    Used by computed columns whose own key is not a record attribute.
    """
    start_of = field_accessor(options.get("start_key", "start_time"))
    end_of = field_accessor(options.get("end_key", "end_time"))
    empty = options.get("empty", "-")

    def render(row: Any) -> str:
        start, end = start_of(row), end_of(row)
        if not start or not end:
            return empty
        return f"{start} - {end}"

    return render
