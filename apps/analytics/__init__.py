"""Analytics app package.

Collects booking funnel events per host (profile view, checkout view,
payment start, payment success) and turns them into the host dashboard
funnel and behaviour insights.
"""
