"""span/event/metric helpers; all of them are no-ops without an active trace."""

from .api import event, get_sink, metric, set_sink, span, with_stage

__all__ = ["span", "event", "metric", "set_sink", "get_sink", "with_stage"]
