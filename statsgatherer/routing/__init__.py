"""Statsgatherer record routing — dispatches status records to all sinks.

Sinks are pluggable targets: a REST endpoint, a Redis pub/sub channel, a
structured log, or any custom sink implementing the ``BaseSink`` protocol.
The ``SinkDispatcher`` fans out each record to every sink; one sink's
failure never prevents delivery to the rest.
"""
