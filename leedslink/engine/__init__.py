"""
Matching and aggregation engine for LeedsLink.

Stateless components that recompute derived views from listing/rating snapshots:
- Listing Match Scorer
- Top-Matches Resolver and User Match Aggregator
- Rating Aggregator
- Discovery, notification decisions and match reports
"""
