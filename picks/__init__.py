"""
Picks hardware sizer
====================

Web backend that turns a video channel mix into aggregate resource demand
(resource-mark, memory, CPU) and recommends a catalog hardware model.

- estimation/: demand aggregation and capacity matching
- catalog/: read-only catalog access (SQL and in-memory)
- configurations/: saved per-user sizing configurations
- api/: FastAPI application
"""

__version__ = "1.0.0"
