from flowart.render.render import (
    MatplotlibRenderer,
    Renderer,
    SvgRenderer,
    draw_closest_intersection,
    draw_intersection,
    draw_origin,
    draw_point,
    draw_segment,
)
