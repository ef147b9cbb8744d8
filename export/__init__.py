from .stl import (
    STL_RECORD_DTYPE,
    estimate_file_size,
    export_stl,
    format_file_size,
    mime_type,
    prepare_export_mesh,
    serialize,
    to_ascii_stl,
    to_binary_stl,
    triangle_count,
)
