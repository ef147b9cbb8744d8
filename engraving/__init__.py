from .engine import DEFAULT_STRENGTH, apply_engraving, apply_engraving_request, get_face_vertex_indices
