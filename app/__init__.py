"""Policy comparison service and its Prometheus metrics.

The engine stays free of metrics; runs are counted here.
"""
