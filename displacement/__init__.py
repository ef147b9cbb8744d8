from .sampler import sample, sample_many, uv_to_texel
from .maps import (
    MAP_SIZE,
    generate_displacement_map,
    image_map,
    load_displacement_map_async,
    map_from_gray,
    radial_gradient_map,
    text_map,
    uniform_map,
)
