"""
Utility modules for LeedsLink.

Cross-cutting concerns:
- Storage: File I/O for users and listings
- Timestamps: UTC datetime helpers
- Mock data: Seed records for demos and tests
"""
