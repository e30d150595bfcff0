"""
Derivation engines.

Pure computations over stored records:
- Sentiment: keyword heuristic classifying suggestion text
- Aggregation: effective users, points, leaderboard, achievements
- Analytics: filtered distributions, time series, funnel, participation
"""
