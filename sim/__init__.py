"""
sim: Simulation core
=====================

Modules
-------
engine
    :class:`SimulationEngine` run state machine and per-frame tick.
route
    :class:`Route` immutable points / distance / zone centre.
geo
    Haversine distance and planar interpolation helpers.
policy
    :class:`SimPolicy` tunable constants and speed / ETA helpers.
scheduler
    Frame-scheduling capability and its queue / thread implementations.
sim_bridge
    :class:`SimBridge` controller and snapshot cache for the UI.
"""
