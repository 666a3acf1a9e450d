"""
Recommendation engine: converts a commitment summary and workload breakdown
into prioritized corrective actions.

Modules
-------
rules : RecommendationRule table + generate_recommendations(): pure
        functions, no I/O.
"""
