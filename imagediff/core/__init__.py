"""imagediff.core: Foundation layer.

Contains the type definitions, image statistics, chunk partitioning, the
per-chunk diff engine, the parallel scheduler and the composite builder.
Render modes depend on core, not the reverse: the scheduler resolves the
mode through imagediff.registry and hands it to the engine. Only stdlib,
numpy, and PIL are allowed here.
"""
