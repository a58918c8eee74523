from farmwatch.workers.liveness_sweeper import LivenessSweeper

__all__ = ["LivenessSweeper"]
