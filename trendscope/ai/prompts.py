"""TrendScope — Prompt Templates."""

TREND_SYSTEM_PROMPT = (
    "You are a cultural trend analyst specializing in fashion and lifestyle "
    "brands. Respond with valid JSON only."
)

TREND_PROMPT = """Analyze the following cultural trend data for fashion/lifestyle brands and extract meaningful trends.

Data: {data}

Please identify and analyze trends focusing on:
- Fashion and lifestyle relevance
- Cultural significance
- Brand opportunity potential
- Trend momentum and growth

For each trend, provide:
- title: Clear, engaging trend name
- description: 2-3 sentences explaining the trend and its cultural significance
- category: One of "fashion", "lifestyle", "tech", "beauty", "sustainability"
- confidence: 0-100 (how confident you are this is a real trend)
- trendScore: 0-100 (trend strength/momentum)
- changePercentage: -100 to +500 (growth rate)
- impact: "high", "medium", or "low" (potential brand impact)

Return a JSON object of the form {{"trends": [...]}}. Only include trends with confidence > {threshold}.
"""

SUGGESTION_SYSTEM_PROMPT = (
    "You are a brand strategist specializing in fashion and lifestyle. Generate "
    "creative, actionable brand opportunities. Respond with valid JSON only."
)

SUGGESTION_PROMPT = """Based on these cultural trends, generate 2-3 creative brand response suggestions for each trend.
Focus on fashion/lifestyle brand opportunities.

Trends: {data}

For each suggestion, provide:
- title: Catchy, actionable suggestion name
- description: 2-3 sentences explaining the opportunity and execution
- impact: "high", "medium", "low" (business impact potential)
- effort: "high", "medium", "low" (implementation difficulty)
- type: "strategic" (long-term initiatives), "content" (marketing/content), "partnership" (collaborations), "quick-win" (fast implementation)

Prioritize suggestions that are:
- Actionable and specific
- Relevant to fashion/lifestyle brands
- Feasible to implement
- Differentiated from competitors

Return a JSON object of the form {{"suggestions": [...]}}.
"""

SUMMARY_SYSTEM_PROMPT = (
    "You are a cultural intelligence expert writing for fashion and lifestyle "
    "brand executives."
)

SUMMARY_PROMPT = """Create an engaging email summary for a daily cultural trends report.

Top Trends: {trends}
Top Suggestions: {suggestions}

Write a brief, engaging summary (2-3 paragraphs) that:
- Highlights the most important cultural shifts
- Explains why these trends matter for fashion/lifestyle brands
- Teases the brand opportunities included in the report
- Maintains an expert but accessible tone

Do not include HTML formatting - this will be converted to HTML later.
"""

FALLBACK_SUMMARY = "Today's cultural trends analysis is complete."
