# Output Module
# Delivers enriched records to the downstream pipeline.


from .sinks import OutputSink, StdoutSink, FileSink, QueueSink, createSink, toJson

__all__ = [
    'OutputSink',
    'StdoutSink',
    'FileSink',
    'QueueSink',
    'createSink',
    'toJson',
]
