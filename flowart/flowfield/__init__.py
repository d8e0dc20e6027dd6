from flowart.flowfield.flowfield import (
    Canvas,
    FlowField,
    Flowline,
    TraceConfig,
    trace_flowline,
)
