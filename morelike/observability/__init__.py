"""Trace context, spans/events and sinks for similarity-query builds."""
