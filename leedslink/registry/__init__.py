"""
Rating Registry Module.

Single source of truth for submitted ratings.
Enforces one rating per rater/target pair and handles persistence.
"""
