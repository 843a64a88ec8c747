"""TrendScope — Daily Report Email Template.

One rendered message per report run; every recipient gets the same body.
"""

from datetime import datetime, timezone
from html import escape
from typing import Optional, Sequence

from trendscope.models.report_models import EmailTemplate
from trendscope.models.trend_models import AISuggestion, Trend

TOP_ITEMS = 3

_IMPACT_COLORS = {
    "high": ("#dcfce7", "#166534"),
    "medium": ("#fef3c7", "#92400e"),
    "low": ("#e0f2fe", "#0369a1"),
}

# ── HTML Templates ──

_BASE_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head><meta charset="utf-8"><meta name="viewport" content="width=device-width, initial-scale=1.0"><title>TrendScope Daily Report</title></head>
<body style="margin:0; padding:0; font-family:-apple-system,BlinkMacSystemFont,'Segoe UI',Roboto,sans-serif; line-height:1.6; color:#333; background:#f8fafc;">
<div style="max-width:600px; margin:0 auto; background:white;">
  <div style="background:linear-gradient(135deg,#2563eb 0%,#3b82f6 100%); color:white; padding:40px 30px; text-align:center;">
    <h1 style="margin:0; font-size:28px; font-weight:700;">TrendScope Daily Report</h1>
    <p style="margin:10px 0 0; font-size:16px; opacity:0.9;">Your AI-powered cultural intelligence briefing for {date}</p>
  </div>
  <div style="padding:30px;">
    <div style="background:#f1f5f9; padding:20px; border-radius:8px; margin-bottom:30px;">
      <p style="margin:0; font-size:16px;">{summary}</p>
    </div>
    <div style="margin-bottom:40px;">
      <h2 style="font-size:20px; font-weight:600; margin-bottom:20px;">🔥 Top Cultural Trends</h2>
      {trends}
    </div>
    <div style="margin-bottom:40px;">
      <h2 style="font-size:20px; font-weight:600; margin-bottom:20px;">💡 AI-Generated Brand Opportunities</h2>
      {suggestions}
    </div>
  </div>
  <div style="background:#f1f5f9; padding:20px 30px; text-align:center; border-top:1px solid #e2e8f0;">
    <p style="margin:5px 0; font-size:14px; color:#64748b;">Powered by TrendScope AI</p>
  </div>
</div>
</body>
</html>
"""

_TREND_ITEM = """
      <div style="background:#f8fafc; border:1px solid #e2e8f0; border-radius:8px; padding:20px; margin-bottom:15px;">
        <h3 style="font-size:16px; font-weight:600; color:#1e293b; margin:0;">{rank}. {title}</h3>
        <div style="font-size:14px; color:#64748b;">Score: {score}/100</div>
        <p style="font-size:14px; color:#475569; margin-bottom:15px;">{description}</p>
        <div>{sources}</div>
      </div>"""

_SOURCE_TAG = (
    '<span style="background:#dbeafe; color:#1d4ed8; padding:4px 8px; border-radius:4px; '
    'font-size:12px; font-weight:500; margin-right:8px;">{platform}: {mentions}</span>'
)

_SUGGESTION_ITEM = """
      <div style="background:#f8fafc; border:1px solid #e2e8f0; border-radius:8px; padding:20px; margin-bottom:15px;">
        <h3 style="font-size:16px; font-weight:600; color:#1e293b; margin:0;">{title}</h3>
        <span style="background:{badge_bg}; color:{badge_fg}; padding:4px 8px; border-radius:4px; font-size:12px; font-weight:500; text-transform:uppercase;">{impact} Impact</span>
        <p style="font-size:14px; color:#475569; margin-bottom:10px;">{description}</p>
        <div style="font-size:12px; color:#64748b;">Type: {type} • Effort: {effort}</div>
      </div>"""


def _value(field) -> str:
    return getattr(field, "value", field)


def format_report_date(now: Optional[datetime] = None) -> str:
    """Long-form date label, e.g. ``Monday, June 2, 2025``."""
    now = now or datetime.now(timezone.utc)
    return f"{now:%A}, {now:%B} {now.day}, {now.year}"


def _render_trend(rank: int, trend: Trend) -> str:
    tags = "".join(
        _SOURCE_TAG.format(
            platform=escape(str(s.get("platform", ""))), mentions=s.get("mentions", 0)
        )
        for s in trend.sources or []
    )
    return _TREND_ITEM.format(
        rank=rank,
        title=escape(trend.title),
        score=trend.trend_score,
        description=escape(trend.description),
        sources=tags,
    )


def _render_suggestion(suggestion: AISuggestion) -> str:
    impact = _value(suggestion.impact)
    badge_bg, badge_fg = _IMPACT_COLORS.get(impact, _IMPACT_COLORS["medium"])
    return _SUGGESTION_ITEM.format(
        title=escape(suggestion.title),
        badge_bg=badge_bg,
        badge_fg=badge_fg,
        impact=impact,
        description=escape(suggestion.description),
        type=_value(suggestion.type),
        effort=_value(suggestion.effort),
    )


def _render_text(
    trends: Sequence[Trend], suggestions: Sequence[AISuggestion], summary: str, date: str
) -> str:
    lines = [f"TrendScope Daily Report - {date}", "", summary, "", "TOP CULTURAL TRENDS:"]
    for rank, trend in enumerate(trends, start=1):
        lines += ["", f"{rank}. {trend.title} (Score: {trend.trend_score}/100)", trend.description]
    lines += ["", "AI-GENERATED BRAND OPPORTUNITIES:"]
    for s in suggestions:
        lines += [
            "",
            f"• {s.title} ({_value(s.impact)} impact, {_value(s.effort)} effort)",
            f"  {s.description}",
        ]
    lines += ["", "--", "Powered by TrendScope AI"]
    return "\n".join(lines)


def render_trend_report(
    trends: Sequence[Trend],
    suggestions: Sequence[AISuggestion],
    summary: str,
    date: Optional[str] = None,
) -> EmailTemplate:
    """Render the daily digest with the top trends and suggestions."""
    date = date or format_report_date()
    top_trends = list(trends[:TOP_ITEMS])
    top_suggestions = list(suggestions[:TOP_ITEMS])

    html = _BASE_TEMPLATE.format(
        date=escape(date),
        summary=escape(summary).replace("\n", "<br>"),
        trends="".join(_render_trend(i, t) for i, t in enumerate(top_trends, start=1)),
        suggestions="".join(_render_suggestion(s) for s in top_suggestions),
    )
    return EmailTemplate(
        subject=f"🔥 Daily Cultural Trends Report - {date}",
        html=html,
        text=_render_text(top_trends, top_suggestions, summary, date),
    )

