"""
Forecasting engine: pure functions from a projection request to a Projection.

Modules
-------
history      : synthesize_history(): back-filled, seeded consumption history.
growth       : project_growth() + workload_contribution(): compound growth
               with linearly ramped planned workloads.
risk         : build_summary() + classify_risk(): totals and risk level.
allocation   : allocate_workload(): run-rate breakdown by category.
velocity     : analyze_velocity() + classify_trajectory(): required pace.
orchestrator : generate_projection(): composes the steps above.
"""
